"""Abstract interface (port) for the base system prompt."""

from abc import ABC, abstractmethod


class PromptLoader(ABC):
    """Port for loading the base system prompt."""

    @abstractmethod
    def load(self) -> str:
        """Return the current system prompt text."""
        ...

    @abstractmethod
    def invalidate(self) -> None:
        """Drop any cached prompt so the next load re-reads its source."""
        ...
