"""
Main CLI application using Typer.

Offline access to the acquisition engine: parse duration texts, project an
end of work, locate the start time in a snapshot file, or run the whole
acquisition controller against a JSON snapshot file that another process
keeps rewriting.
"""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path

import typer

from flexhours.domain.projection import project
from flexhours.domain.snapshot import TimeSnapshot
from flexhours.domain.start_time import locate_start_time
from flexhours.domain.timetext import format_worded_duration, parse_clock, parse_to_minutes
from flexhours.infra.logging import configure_logging, get_logger
from flexhours.infra.settings import Settings, settings
from flexhours.presentation import RecordingPresenter
from flexhours.presentation.console import ConsolePresenter
from flexhours.runtime.acquisition import AcquisitionController, AcquisitionSession, AcquisitionState
from flexhours.runtime.clock import FixedClock, MasterClock, WallClock
from flexhours.runtime.host import JsonFileDocument
from flexhours.runtime.pipeline import AcquisitionPipeline
from flexhours.runtime.scheduler import AsyncioScheduler

app = typer.Typer(help="Weekly worked-time totals and end-of-day projection")

_WEEKDAY_NAMES = {
    "mon": 0, "tue": 1, "wed": 2, "thu": 3, "fri": 4, "sat": 5, "sun": 6,
    "월": 0, "화": 1, "수": 2, "목": 3, "금": 4, "토": 5, "일": 6,
}


def parse_weekday(value: str) -> int:
    """Accept ``0``-``6`` (Monday == 0), ``mon``..``sun`` or ``월``..``일``."""
    key = value.strip().lower()
    if key.isdigit() and 0 <= int(key) <= 6:
        return int(key)
    if key[:3] in _WEEKDAY_NAMES:
        return _WEEKDAY_NAMES[key[:3]]
    if key[:1] in _WEEKDAY_NAMES:
        return _WEEKDAY_NAMES[key[:1]]
    raise typer.BadParameter(f"Unknown weekday: {value!r}")


def _clock_for(weekday: str | None) -> WallClock:
    return FixedClock.on_weekday(parse_weekday(weekday)) if weekday else MasterClock()


def _echo_json(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    config: Settings = settings.model_copy(update={"debug": True}) if debug else settings
    configure_logging(config)


@app.command("parse")
def parse_cmd(
    text: str = typer.Argument(..., help='Duration text, e.g. "9시간 47분" or "23:20"'),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Convert a duration text to minutes."""
    minutes = parse_to_minutes(text)
    if json_output:
        _echo_json({"text": text, "minutes": minutes, "formatted": format_worded_duration(minutes)})
    else:
        typer.echo(f"{minutes} ({format_worded_duration(minutes)})")


@app.command("project")
def project_cmd(
    start: str = typer.Option(None, "--start", "-s", help="Start time HH:MM"),
    today: int = typer.Option(0, "--today", help="Minutes worked today", min=0),
    week: int = typer.Option(0, "--week", help="Minutes worked earlier this week", min=0),
    weekday: str = typer.Option(None, "--weekday", "-d", help="Weekday (default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Project today's end of work from known figures."""
    try:
        start_time = parse_clock(start) if start else None
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    day = _clock_for(weekday).weekday()
    projection = project(today, week, start_time, day, settings.policy())
    label = projection.label()
    if json_output:
        _echo_json({
            "weekday": day,
            "start_time": str(start_time) if start_time else None,
            "projection": type(projection).__name__,
            "expected_end": label,
        })
    else:
        typer.echo(label or "(예상 퇴근시간 없음)")


@app.command("locate")
def locate_cmd(
    snapshot_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Snapshot JSON file"),
):
    """Print the start time found in a snapshot file."""
    try:
        snapshot = TimeSnapshot.from_json_file(snapshot_file)
    except (ValueError, TypeError, AttributeError) as e:
        # Undecodable JSON and documents that are not a fragment list.
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    start = locate_start_time(snapshot)
    if start is None:
        typer.echo("출근시간을 찾을 수 없습니다.", err=True)
        raise typer.Exit(code=1)
    typer.echo(str(start))


async def _run_controller(
    snapshot_file: Path,
    clock: WallClock,
    presenter: RecordingPresenter | ConsolePresenter,
    initial_delay_ms: int | None,
) -> AcquisitionSession:
    loop = asyncio.get_running_loop()
    finished: asyncio.Future[AcquisitionSession] = loop.create_future()
    scheduler = AsyncioScheduler(loop)

    timing = settings.timing()
    if initial_delay_ms is not None:
        timing = replace(timing, initial_delay_ms=initial_delay_ms)

    def _finished(session: AcquisitionSession) -> None:
        if not finished.done():
            finished.set_result(session)

    controller = AcquisitionController(
        JsonFileDocument(snapshot_file, scheduler),
        scheduler,
        AcquisitionPipeline(settings.policy(), clock, plausibility_factor=settings.plausibility_factor),
        presenter,
        timing=timing,
        on_finished=_finished,
    )
    controller.start()
    try:
        return await finished
    finally:
        controller.stop()


@app.command("run")
def run_cmd(
    snapshot_file: Path = typer.Argument(..., dir_okay=False, help="Snapshot JSON file (may appear later)"),
    weekday: str = typer.Option(None, "--weekday", "-d", help="Weekday (default: today)"),
    initial_delay_ms: int = typer.Option(None, "--initial-delay-ms", min=0, help="Override the first-attempt delay"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Run the acquisition controller against a snapshot file."""
    presenter: RecordingPresenter | ConsolePresenter = RecordingPresenter() if json_output else ConsolePresenter()
    session = asyncio.run(_run_controller(snapshot_file, _clock_for(weekday), presenter, initial_delay_ms))
    get_logger(__name__).info(
        "acquisition_finished",
        state=session.state.value,
        snapshot_file=str(snapshot_file),
        notification_attempts=session.notification_attempts,
        interval_attempts=session.interval_attempts,
    )

    if json_output:
        if session.state is AcquisitionState.DONE and session.result is not None:
            _echo_json({"status": "ok", **session.result.to_dict()})
        else:
            error = session.error
            _echo_json({
                "status": "error",
                "state": session.state.value,
                "error": error.message if error else None,
                "retryable": error.retryable if error else None,
            })
    sys.exit(0 if session.state is AcquisitionState.DONE else 1)


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
