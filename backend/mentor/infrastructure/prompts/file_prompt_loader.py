"""File-backed system prompt loader with mtime-based caching."""

import logging
from pathlib import Path

from mentor.application.interfaces.prompt_loader import PromptLoader

logger = logging.getLogger(__name__)


class FilePromptLoader(PromptLoader):
    """Reads the system prompt from a file, re-reading only when it changes.

    When the file cannot be read the last good prompt is kept, or the
    fallback prompt is used if nothing was ever loaded.
    """

    def __init__(self, path: str | Path, fallback: str):
        self._path = Path(path)
        self._fallback = fallback
        self._cached: str | None = None
        self._cached_mtime: float | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str:
        try:
            mtime = self._path.stat().st_mtime
            if self._cached is None or mtime != self._cached_mtime:
                self._cached = self._path.read_text(encoding="utf-8")
                self._cached_mtime = mtime
                logger.info(
                    "Loaded system prompt (%s, %d chars)", self._path, len(self._cached)
                )
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read system prompt %s: %s", self._path, e)
            if self._cached is None:
                self._cached = self._fallback
                self._cached_mtime = None
        return self._cached

    def invalidate(self) -> None:
        self._cached = None
        self._cached_mtime = None
