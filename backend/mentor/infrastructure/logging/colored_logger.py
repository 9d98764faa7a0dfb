"""Colored pipeline logger — ANSI-colored console logging for knowledge-base maintenance.

Tags knowledge-base loading and re-indexing steps so startup and admin runs
are easy to follow in the terminal.

Color scheme:
    Green   — Knowledge-base load
    Yellow  — Shard read
    Magenta — Re-indexing
    Red     — Errors
    Gray    — Details / stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    MAGENTA = "\033[95m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


class PipelineStage:
    """Predefined pipeline stages as (label, color, icon)."""

    KB_LOAD = ("KB_LOAD", _Colors.GREEN, "📂")
    SHARD = ("SHARD", _Colors.YELLOW, "📄")
    REINDEX = ("REINDEX", _Colors.MAGENTA, "🧮")
    STARTUP = ("STARTUP", _Colors.WHITE, "⚙️")
    ERROR = ("ERROR", _Colors.RED, "❌")


class PipelineLogger:
    """Color-coded logger for knowledge-base pipeline steps.

    Usage:
        log = PipelineLogger("KnowledgeBaseLoader")
        log.step_start(PipelineStage.KB_LOAD, "Loading kb/")
        log.detail("3 shard(s) found")
        log.step_complete(PipelineStage.KB_LOAD, "120 chunks loaded")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    @staticmethod
    def _details(kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return ""
        details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return f" {_Colors.GRAY}({details}){_Colors.RESET}"

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.info(
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}{self._details(kwargs)}"
        )

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        self._logger.info(
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}{self._details(kwargs)}"
        )

    def step_warning(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log a recoverable problem; the pipeline keeps going."""
        label, color, icon = stage
        formatted = f"{color}{icon} [{label}]{_Colors.RESET} {_Colors.YELLOW}⚠ {message}{_Colors.RESET}"
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.warning(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        label, _, _ = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        self._logger.info(f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}{self._details(kwargs)}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_step(PipelineStage.REINDEX, "Re-indexing knowledge base"):
                report = await retriever.reindex(copy)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s")
