"""Port for user-visible notices (toasts in a UI, lines on a terminal)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Notifier(ABC):

    @abstractmethod
    def success(self, message: str) -> None: ...

    @abstractmethod
    def info(self, message: str) -> None: ...

    @abstractmethod
    def warning(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...
