"""Scoped temporary audio files."""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


@contextmanager
def temporary_audio_file(data: bytes | None = None, suffix: str = ".mp3") -> Iterator[Path]:
    """Yield a temp file path, optionally pre-filled with data.

    The file is removed when the block exits, whether it completes or
    raises.
    """
    fd, name = tempfile.mkstemp(prefix="finvoice-", suffix=suffix)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as handle:
            if data:
                handle.write(data)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove temporary audio file %s: %s", path, e)


def suffix_for(filename: str, default: str = ".webm") -> str:
    """File suffix to keep when spooling audio, so backends can sniff the format."""
    suffix = Path(filename).suffix.lower()
    return suffix or default
