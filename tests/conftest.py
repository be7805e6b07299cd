"""
Global test configuration for flexhours.

Provides the stepped runtime wiring (document, scheduler, presenter,
pipeline) most runtime tests share.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the project src directory is importable without relying on external environment.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from flexhours.domain.policy import TUESDAY
from flexhours.domain.snapshot import TimeSnapshot
from flexhours.presentation import RecordingPresenter
from flexhours.runtime.clock import FixedClock
from flexhours.runtime.host import InMemoryDocument
from flexhours.runtime.pipeline import AcquisitionPipeline
from flexhours.runtime.scheduler import SteppedScheduler

from helpers import make_page


@pytest.fixture
def page() -> TimeSnapshot:
    return make_page()


@pytest.fixture
def document() -> InMemoryDocument:
    return InMemoryDocument()


@pytest.fixture
def scheduler() -> SteppedScheduler:
    return SteppedScheduler()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def pipeline() -> AcquisitionPipeline:
    return AcquisitionPipeline(clock=FixedClock.on_weekday(TUESDAY))
