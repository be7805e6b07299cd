"""
Acquisition pipeline: one cycle from snapshot to presented result.

Stages, each run to completion without suspension:

  1. extract   worked-time texts from the snapshot
  2. parse     texts into minutes
  3. locate    the start time in the tracking marker's scope
  4. validate  the (today, week, start) triple
  5. project   today's end of work
  6. present   through the Presenter

Errors are translated at each stage boundary into an AttemptReport; nothing
raised inside a stage escapes :meth:`AcquisitionPipeline.run`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from flexhours.domain.extraction import extract_worked_time
from flexhours.domain.policy import DEFAULT_WORK_POLICY, WorkPolicy
from flexhours.domain.projection import NoProjection, Projection, project
from flexhours.domain.snapshot import Scope, TimeSnapshot, subtree
from flexhours.domain.start_time import locate_start_time
from flexhours.domain.timetext import ClockTime, format_worded_duration, parse_to_minutes
from flexhours.domain.validation import validate
from flexhours.infra.exceptions import (
    CalculationError,
    FlexHoursError,
    NoDataFound,
    PresentationFailure,
    ValidationFailed,
)
from flexhours.presentation import Presenter

from .clock import MasterClock, WallClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcquisitionResult:
    """Everything one successful cycle hands to the presenter."""

    today_minutes: int
    week_minutes: int
    start_time: ClockTime | None
    projection: Projection
    weekday: int
    warnings: tuple[str, ...] = ()

    @property
    def total_minutes(self) -> int:
        return self.today_minutes + self.week_minutes

    @property
    def total_label(self) -> str:
        return format_worded_duration(self.total_minutes)

    @property
    def projection_label(self) -> str | None:
        return self.projection.label()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_minutes": self.total_minutes,
            "total": self.total_label,
            "today_minutes": self.today_minutes,
            "today": format_worded_duration(self.today_minutes),
            "week_minutes": self.week_minutes,
            "week": format_worded_duration(self.week_minutes),
            "start_time": str(self.start_time) if self.start_time else None,
            "projection": type(self.projection).__name__,
            "expected_end": self.projection_label,
            "weekday": self.weekday,
            "warnings": list(self.warnings),
        }


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    NO_DATA = "no_data"    # page not rendered yet; keep polling
    FAILED = "failed"      # error to surface; ends the cycle
    SKIPPED = "skipped"    # result already present; nothing to do


@dataclass(frozen=True)
class AttemptReport:
    outcome: AttemptOutcome
    result: AcquisitionResult | None = None
    error: FlexHoursError | None = None


class AcquisitionPipeline:
    """Runs one acquisition cycle against a snapshot."""

    def __init__(
        self,
        policy: WorkPolicy = DEFAULT_WORK_POLICY,
        clock: WallClock | None = None,
        *,
        plausibility_factor: float = 2.0,
        scope: Scope = subtree,
    ) -> None:
        self.policy = policy
        self.clock = clock or MasterClock()
        self.plausibility_factor = plausibility_factor
        self.scope = scope

    def compute(self, snapshot: TimeSnapshot) -> AcquisitionResult:
        """Stages 1-5. Raises NoDataFound or ValidationFailed."""
        texts = extract_worked_time(snapshot)
        if texts.empty:
            raise NoDataFound()

        today_minutes = parse_to_minutes(texts.today)
        week_minutes = parse_to_minutes(texts.week)
        start_time = locate_start_time(snapshot, scope=self.scope)

        validation = validate(
            today_minutes,
            week_minutes,
            start_time,
            weekly_target_hours=self.policy.weekly_target_hours,
            plausibility_factor=self.plausibility_factor,
        )
        if not validation.valid:
            raise ValidationFailed(validation)
        for warning in validation.warnings:
            logger.warning("Implausible time data: %s", warning)

        weekday = self.clock.weekday()
        projection = (
            project(today_minutes, week_minutes, start_time, weekday, self.policy)
            if start_time is not None
            else NoProjection()
        )
        result = AcquisitionResult(
            today_minutes=today_minutes,
            week_minutes=week_minutes,
            start_time=start_time,
            projection=projection,
            weekday=weekday,
            warnings=validation.warnings,
        )
        logger.debug(
            "Calculation complete: today=%r week=%r total=%s start=%s expected_end=%s",
            texts.today,
            texts.week,
            result.total_label,
            start_time,
            result.projection_label,
        )
        return result

    def run(self, snapshot: TimeSnapshot, presenter: Presenter) -> AttemptReport:
        """All six stages with error translation."""
        try:
            result = self.compute(snapshot)
        except NoDataFound as exc:
            logger.debug("No time data in snapshot (%d fragments)", len(snapshot))
            return AttemptReport(AttemptOutcome.NO_DATA, error=exc)
        except ValidationFailed as exc:
            logger.info("Validation failed: %s", list(exc.result.errors))
            return AttemptReport(AttemptOutcome.FAILED, error=exc)
        except Exception:
            logger.exception("Unexpected error during calculation")
            return AttemptReport(AttemptOutcome.FAILED, error=CalculationError())

        try:
            presenter.on_result(result)
        except Exception:
            logger.exception("Presenter failed to display result")
            return AttemptReport(AttemptOutcome.FAILED, result=result, error=PresentationFailure())

        return AttemptReport(AttemptOutcome.SUCCESS, result=result)
