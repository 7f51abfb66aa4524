"""Document loaders: raw uploaded bytes to extracted text.

Each loader handles one family of file types and raises ExtractionError when
the bytes cannot be parsed. An empty extraction is not an error here; the
ingestor decides what an unreadable document means.
"""

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import PurePath

from pypdf import PdfReader

from src.errors import ExtractionError
from src.ingestion.cleaner import clean_html_text, normalize_whitespace
from src.models.document import SourceDocument

logger = logging.getLogger(__name__)


class DocumentLoader(ABC):
    """Interface for extracting text from a raw document file."""

    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def load(self, raw: bytes, name: str) -> SourceDocument:
        """Extract text from raw file bytes.

        Args:
            raw: The uploaded file content.
            name: Display name, stored as the document source.

        Raises:
            ExtractionError: If the bytes cannot be parsed.
        """
        ...


class PdfLoader(DocumentLoader):
    """Extracts per-page text with pypdf, keeping page boundaries."""

    suffixes = (".pdf",)

    def load(self, raw: bytes, name: str) -> SourceDocument:
        try:
            reader = PdfReader(BytesIO(raw), strict=False)
            pages = []
            for i, page in enumerate(reader.pages):
                try:
                    pages.append(normalize_whitespace(page.extract_text() or "").strip())
                except Exception as e:
                    # One broken page should not lose the rest of the report
                    logger.warning("Skipping unreadable page %d of %s: %s", i + 1, name, e)
                    pages.append("")
        except Exception as e:
            raise ExtractionError(f"Could not process PDF: {name}") from e
        return SourceDocument.from_pages(name, pages)


class HtmlLoader(DocumentLoader):
    suffixes = (".html", ".htm")

    def load(self, raw: bytes, name: str) -> SourceDocument:
        try:
            html = raw.decode("utf-8", errors="replace")
            text = clean_html_text(html)
        except Exception as e:
            raise ExtractionError(f"Could not process HTML: {name}") from e
        return SourceDocument(source=name, text=text)


class PlainTextLoader(DocumentLoader):
    suffixes = (".txt", ".md", ".csv")

    def load(self, raw: bytes, name: str) -> SourceDocument:
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionError(f"{name} is not valid UTF-8 text") from e
        return SourceDocument(source=name, text=normalize_whitespace(text).strip())


class LoaderRegistry(DocumentLoader):
    """Dispatches to a loader by file suffix."""

    def __init__(self, loaders: list[DocumentLoader] | None = None):
        if loaders is None:
            loaders = [PdfLoader(), HtmlLoader(), PlainTextLoader()]
        self._by_suffix = {
            suffix: loader for loader in loaders for suffix in loader.suffixes
        }

    @property
    def supported_suffixes(self) -> list[str]:
        return sorted(self._by_suffix)

    def load(self, raw: bytes, name: str) -> SourceDocument:
        suffix = PurePath(name).suffix.lower()
        loader = self._by_suffix.get(suffix)
        if loader is None:
            raise ExtractionError(
                f"Unsupported file type '{suffix or name}'. "
                f"Supported: {', '.join(self.supported_suffixes)}"
            )
        return loader.load(raw, name)
