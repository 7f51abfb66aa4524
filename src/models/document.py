"""Source Document data model."""

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True)
class SourceDocument:
    """A reference document (annual report, filing, textbook chapter) as extracted text.

    page_starts holds the character offset at which each page begins, in
    ascending order. It is empty for formats without pages.
    """

    source: str
    text: str
    page_starts: tuple[int, ...] = ()

    def __post_init__(self):
        if not self.source:
            raise ValueError("source must not be empty")
        if not isinstance(self.page_starts, tuple):
            object.__setattr__(self, "page_starts", tuple(self.page_starts))
        if list(self.page_starts) != sorted(self.page_starts):
            raise ValueError("page_starts must be ascending")

    @classmethod
    def from_pages(cls, source: str, pages: list[str], separator: str = "\n\n") -> "SourceDocument":
        """Join per-page texts, remembering where each page starts."""
        starts = []
        offset = 0
        for i, page in enumerate(pages):
            if i:
                offset += len(separator)
            starts.append(offset)
            offset += len(page)
        return cls(source=source, text=separator.join(pages), page_starts=tuple(starts))

    def page_number_at(self, offset: int) -> int:
        """1-based page containing offset, or 0 when pages are unknown."""
        if not self.page_starts:
            return 0
        return max(1, bisect_right(self.page_starts, offset))
