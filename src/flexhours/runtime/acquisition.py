"""Acquisition controller.

The host page renders asynchronously, so the first snapshot is often empty.
The `AcquisitionController` waits for the data with four scheduled sources
sharing one cancellation token:

- a single deferred attempt after ``initial_delay_ms``;
- change notifications from the host document, capped at
  ``max_notification_retries`` attempts;
- an interval timer, capped at ``max_interval_retries`` attempts;
- a hard timeout ``notification_timeout_ms`` after polling begins, which drops
  the subscription and makes one final attempt.

States::

    IDLE -> WAITING -> POLLING -> DONE | TIMED_OUT
                 \\          \\-> FAILED
                  \\-> DONE | FAILED

Key guarantees:

- Reaching DONE, FAILED or TIMED_OUT cancels every timer and the
  subscription; every callback checks the token before acting.
- An attempt that finds ``is_calculated`` set or a presented result is a
  no-op and ends the cycle.
- A validation error is surfaced immediately and ends the cycle without
  consuming the rest of the retry budget.
- A cycle that never finds data surfaces exactly one AcquisitionTimedOut.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from flexhours.infra.exceptions import (
    AcquisitionTimedOut,
    CalculationError,
    FlexHoursError,
    NoDataFound,
)
from flexhours.presentation import Presenter

from .config import DEFAULT_ACQUISITION_TIMING, AcquisitionTiming
from .host import HostDocument
from .pipeline import AcquisitionPipeline, AcquisitionResult, AttemptOutcome
from .scheduler import CancellationToken, HostScheduler

DEFAULT_SELECTOR_HINT = "body"

logger = logging.getLogger(__name__)


class AcquisitionState(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    POLLING = "polling"
    DONE = "done"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def terminal(self) -> bool:
        return self in (AcquisitionState.DONE, AcquisitionState.FAILED, AcquisitionState.TIMED_OUT)


@dataclass
class AcquisitionSession:
    """State of one acquisition cycle, owned by a single controller."""

    state: AcquisitionState = AcquisitionState.IDLE
    is_calculated: bool = False
    notification_attempts: int = 0
    interval_attempts: int = 0
    token: CancellationToken = field(default_factory=CancellationToken)
    result: AcquisitionResult | None = None
    error: FlexHoursError | None = None
    last_no_data: NoDataFound | None = None

    @property
    def terminal(self) -> bool:
        return self.state.terminal

    def reset(self) -> None:
        """Clear the calculated flag and all per-cycle state. Cancels any live timers."""
        self.token.cancel()
        self.state = AcquisitionState.IDLE
        self.is_calculated = False
        self.notification_attempts = 0
        self.interval_attempts = 0
        self.token = CancellationToken()
        self.result = None
        self.error = None
        self.last_no_data = None


class AcquisitionController:
    """Drive the acquisition pipeline until it succeeds or its budget runs out.

    Parameters
    ----------
    document:
        Host document providing snapshots and change notifications.
    scheduler:
        Host scheduler providing one-shot and repeating timers.
    pipeline:
        The acquisition pipeline run on each attempt.
    presenter:
        Receives the result or the surfaced error.
    timing:
        Retry budget. Defaults to :data:`DEFAULT_ACQUISITION_TIMING`.
    on_finished:
        Optional callback invoked with the session once a cycle ends.
    """

    def __init__(
        self,
        document: HostDocument,
        scheduler: HostScheduler,
        pipeline: AcquisitionPipeline,
        presenter: Presenter,
        *,
        timing: AcquisitionTiming = DEFAULT_ACQUISITION_TIMING,
        on_finished: Callable[[AcquisitionSession], None] | None = None,
        selector_hint: str = DEFAULT_SELECTOR_HINT,
    ) -> None:
        self.document = document
        self.scheduler = scheduler
        self.pipeline = pipeline
        self.presenter = presenter
        self.timing = timing
        self.session = AcquisitionSession()
        self._on_finished = on_finished
        self._selector_hint = selector_hint
        self._subscription: Any = None
        self._interval_handle: Any = None

    @property
    def state(self) -> AcquisitionState:
        return self.session.state

    # Lifecycle ---------------------------------------------------------------
    def start(self) -> None:
        """Schedule the deferred first attempt."""
        if self.session.state is not AcquisitionState.IDLE:
            logger.debug("start() ignored in state %s", self.session.state.value)
            return
        self.session.state = AcquisitionState.WAITING
        logger.debug("First attempt scheduled in %d ms", self.timing.initial_delay_ms)
        handle = self.scheduler.schedule_once(self.timing.initial_delay_ms, self._on_initial_delay)
        self.session.token.register(lambda: self.scheduler.cancel(handle))

    def stop(self) -> None:
        """Cancel all outstanding activity without surfacing anything."""
        self.session.token.cancel()

    def reset(self) -> None:
        """Forget any previous result so a new cycle may run."""
        self.session.reset()
        self._subscription = None
        self._interval_handle = None

    def retry(self) -> AttemptOutcome:
        """Reset and run the full pipeline once (the user-initiated retry)."""
        self.reset()
        self.session.state = AcquisitionState.WAITING
        outcome = self._attempt("retry")
        if outcome is AttemptOutcome.NO_DATA:
            self._fail(self.session.last_no_data or NoDataFound())
        return outcome

    # Scheduled callbacks -----------------------------------------------------
    def _on_initial_delay(self) -> None:
        if self.session.token.cancelled:
            return
        if self._attempt("initial") is AttemptOutcome.NO_DATA:
            logger.debug("First attempt found no data; polling")
            self._begin_polling()

    def _begin_polling(self) -> None:
        session = self.session
        session.state = AcquisitionState.POLLING
        token = session.token

        if self.timing.max_notification_retries > 0:
            self._subscription = self.document.subscribe_to_changes(self._on_change)
            token.register(self._unsubscribe)

        if self.timing.max_interval_retries > 0:
            self._interval_handle = self.scheduler.schedule_repeating(
                self.timing.retry_interval_ms, self._on_interval
            )
            token.register(self._cancel_interval)

        timeout_handle = self.scheduler.schedule_once(self.timing.notification_timeout_ms, self._on_timeout)
        token.register(lambda: self.scheduler.cancel(timeout_handle))

    def _on_change(self) -> None:
        if self.session.token.cancelled or self._subscription is None:
            return
        self.session.notification_attempts += 1
        if self._attempt("notification") is not AttemptOutcome.NO_DATA:
            return
        if self.session.notification_attempts >= self.timing.max_notification_retries:
            logger.debug("Notification retry cap (%d) reached", self.timing.max_notification_retries)
            self._unsubscribe()

    def _on_interval(self) -> None:
        if self.session.token.cancelled or self._interval_handle is None:
            return
        self.session.interval_attempts += 1
        if self._attempt("interval") is not AttemptOutcome.NO_DATA:
            return
        if self.session.interval_attempts >= self.timing.max_interval_retries:
            logger.debug("Interval retry cap (%d) reached", self.timing.max_interval_retries)
            self._cancel_interval()

    def _on_timeout(self) -> None:
        if self.session.token.cancelled:
            return
        self._unsubscribe()
        logger.debug("Acquisition timeout; final attempt")
        if self._attempt("timeout") is not AttemptOutcome.NO_DATA:
            return
        self._finish(
            AcquisitionState.TIMED_OUT,
            AcquisitionTimedOut(cause=self.session.last_no_data),
        )

    # Attempts ----------------------------------------------------------------
    def _attempt(self, source: str) -> AttemptOutcome:
        session = self.session
        if session.is_calculated or self.presenter.has_result():
            logger.debug("Attempt (%s) skipped: result already present", source)
            self._finish(AcquisitionState.DONE)
            return AttemptOutcome.SKIPPED

        try:
            snapshot = self.document.snapshot_text(self._selector_hint)
        except Exception:
            logger.exception("Attempt (%s): host document read failed", source)
            self._fail(CalculationError())
            return AttemptOutcome.FAILED

        report = self.pipeline.run(snapshot, self.presenter)

        if report.outcome is AttemptOutcome.SUCCESS:
            session.is_calculated = True
            session.result = report.result
            logger.debug("Attempt (%s) succeeded", source)
            self._finish(AcquisitionState.DONE)
        elif report.outcome is AttemptOutcome.FAILED:
            self._fail(report.error or CalculationError())
        else:
            if isinstance(report.error, NoDataFound):
                session.last_no_data = report.error
            logger.debug("Attempt (%s) found no data", source)
        return report.outcome

    def _fail(self, error: FlexHoursError) -> None:
        self._finish(AcquisitionState.FAILED, error)

    def _finish(self, state: AcquisitionState, error: FlexHoursError | None = None) -> None:
        session = self.session
        if session.terminal:
            return
        session.state = state
        session.token.cancel()
        if error is not None:
            session.error = error
            self._surface(error)
        logger.debug("Acquisition finished: %s", state.value)
        if self._on_finished is not None:
            self._on_finished(session)

    def _surface(self, error: FlexHoursError) -> None:
        logger.info("Surfacing error (retryable=%s): %s", error.retryable, error.message)
        try:
            self.presenter.on_error(error.message, error.retryable)
        except Exception:
            logger.exception("Presenter failed to display error")

    # Cleanups ----------------------------------------------------------------
    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self.document.unsubscribe(self._subscription)
            self._subscription = None

    def _cancel_interval(self) -> None:
        if self._interval_handle is not None:
            self.scheduler.cancel(self._interval_handle)
            self._interval_handle = None
