"""
Presentation collaborators.

The core hands every successful cycle's AcquisitionResult to a Presenter and
reports failures through ``on_error``. Presenters own the retry affordance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flexhours.runtime.pipeline import AcquisitionResult


@runtime_checkable
class Presenter(Protocol):
    def on_result(self, result: AcquisitionResult) -> None:
        """Show a computed result. Called at most once per successful cycle."""

    def on_error(self, message: str, retryable: bool) -> None:
        """Show a user-facing error."""

    def has_result(self) -> bool:
        """Return True while a presented result is on screen."""


@dataclass
class RecordingPresenter:
    """Presenter that keeps everything it was given. Used by tests and embedding."""

    results: list[AcquisitionResult] = field(default_factory=list)
    errors: list[tuple[str, bool]] = field(default_factory=list)

    def on_result(self, result: AcquisitionResult) -> None:
        self.results.append(result)

    def on_error(self, message: str, retryable: bool) -> None:
        self.errors.append((message, retryable))

    def has_result(self) -> bool:
        return bool(self.results)

    def clear(self) -> None:
        """Remove the presented result and errors (what a retry button does first)."""
        self.results.clear()
        self.errors.clear()


__all__ = ["Presenter", "RecordingPresenter"]
