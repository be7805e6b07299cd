"""
Host document adapters.

The host document is read-only to flexhours: it hands out point-in-time
snapshots and change notifications. InMemoryDocument backs tests and
embedding; JsonFileDocument watches a JSON snapshot file for the CLI.
"""

from __future__ import annotations

import itertools
import logging
import os
from pathlib import Path
from typing import Any, Callable, Protocol, runtime_checkable

from flexhours.domain.snapshot import EMPTY_SNAPSHOT, TimeSnapshot

from .scheduler import HostScheduler

ChangeCallback = Callable[[], None]

logger = logging.getLogger(__name__)


@runtime_checkable
class HostDocument(Protocol):
    """Document contract consumed from the host environment."""

    def snapshot_text(self, selector_hint: str | None = None) -> TimeSnapshot:
        """Return the current rendered text as an immutable snapshot."""

    def subscribe_to_changes(self, callback: ChangeCallback) -> Any:
        """Call ``callback`` after each change; return a subscription handle."""

    def unsubscribe(self, handle: Any) -> None:
        """Stop notifications for ``handle``. Unknown handles are ignored."""


class _Subscriptions:
    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._callbacks: dict[int, ChangeCallback] = {}

    def add(self, callback: ChangeCallback) -> int:
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def remove(self, handle: int) -> bool:
        return self._callbacks.pop(handle, None) is not None

    def __len__(self) -> int:
        return len(self._callbacks)

    def notify(self) -> None:
        # Copy: callbacks may unsubscribe while being notified.
        for handle, callback in list(self._callbacks.items()):
            if handle in self._callbacks:
                callback()


class InMemoryDocument:
    """HostDocument holding a snapshot in memory; ``render`` simulates page updates."""

    def __init__(self, snapshot: TimeSnapshot = EMPTY_SNAPSHOT) -> None:
        self._snapshot = snapshot
        self._subscriptions = _Subscriptions()
        self.snapshot_reads = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def snapshot_text(self, selector_hint: str | None = None) -> TimeSnapshot:
        self.snapshot_reads += 1
        return self._snapshot

    def subscribe_to_changes(self, callback: ChangeCallback) -> int:
        return self._subscriptions.add(callback)

    def unsubscribe(self, handle: int) -> None:
        self._subscriptions.remove(handle)

    def render(self, snapshot: TimeSnapshot, *, notify: bool = True) -> None:
        """Replace the page content and, unless told otherwise, notify subscribers."""
        self._snapshot = snapshot
        if notify:
            self._subscriptions.notify()

    def touch(self) -> None:
        """Notify subscribers without changing content (unrelated page mutation)."""
        self._subscriptions.notify()


class JsonFileDocument:
    """
    HostDocument backed by a JSON snapshot file.

    A missing or half-written file reads as an empty snapshot. While anyone
    is subscribed, the file's modification time is polled on the scheduler and
    a change is reported as a notification.
    """

    def __init__(self, path: Path | str, scheduler: HostScheduler, *, poll_interval_ms: int = 250) -> None:
        self.path = Path(path)
        self._scheduler = scheduler
        self._poll_interval_ms = poll_interval_ms
        self._subscriptions = _Subscriptions()
        self._poll_handle: Any = None
        self._last_mtime: float | None = None

    def _mtime(self) -> float | None:
        try:
            return os.stat(self.path).st_mtime
        except OSError:
            return None

    def snapshot_text(self, selector_hint: str | None = None) -> TimeSnapshot:
        try:
            return TimeSnapshot.from_json_file(self.path)
        except FileNotFoundError:
            logger.debug("Snapshot file %s not present yet", self.path)
            return EMPTY_SNAPSHOT
        except OSError as exc:
            # Permission denied, a directory in place of the file, and the like.
            logger.warning("Snapshot file %s could not be read (%s); treating as empty", self.path, exc)
            return EMPTY_SNAPSHOT
        except (ValueError, TypeError, AttributeError) as exc:
            # Half-written JSON, bad encoding or an unexpected document shape.
            logger.warning("Snapshot file %s unreadable (%s); treating as empty", self.path, exc)
            return EMPTY_SNAPSHOT

    def subscribe_to_changes(self, callback: ChangeCallback) -> int:
        handle = self._subscriptions.add(callback)
        if self._poll_handle is None:
            self._last_mtime = self._mtime()
            self._poll_handle = self._scheduler.schedule_repeating(self._poll_interval_ms, self._poll)
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscriptions.remove(handle)
        if not len(self._subscriptions) and self._poll_handle is not None:
            self._scheduler.cancel(self._poll_handle)
            self._poll_handle = None

    def _poll(self) -> None:
        mtime = self._mtime()
        if mtime == self._last_mtime:
            return
        self._last_mtime = mtime
        logger.debug("Snapshot file %s changed", self.path)
        self._subscriptions.notify()
