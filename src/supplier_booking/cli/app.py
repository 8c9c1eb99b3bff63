"""Typer CLI wiring supplier booking services."""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from zoneinfo import ZoneInfo

import typer

from supplier_booking.domain import (
    AvailabilityResult,
    HolidaySequence,
    Jurisdiction,
    PublicHoliday,
    normalize_jurisdiction,
)
from supplier_booking.logging_config import configure_logging
from supplier_booking.persistence import (
    DuplicateHolidayError,
    RepositoryError,
    seed_default_holidays,
)
from supplier_booking.scheduling import SchedulingError
from supplier_booking.utils import parse_local_datetime

from .deps import get_container

app = typer.Typer(help="Supplier booking availability command-line interface")

_KNOWN_CODES = tuple(code.value for code in Jurisdiction)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="SUPPLIER_BOOKING_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


def _parse_jurisdiction(value: str | None, default: str) -> str:
    code = normalize_jurisdiction(value) if value else default
    if code not in _KNOWN_CODES:
        choices = ", ".join(_KNOWN_CODES)
        raise typer.BadParameter(
            f"Unknown jurisdiction '{value}'. Expected one of: {choices}",
            param_hint="--jurisdiction",
        )
    return code


def _parse_jurisdictions(value: str | None) -> frozenset[str]:
    if value is None:
        return frozenset(_KNOWN_CODES)
    codes = {normalize_jurisdiction(part) for part in value.split(",") if part.strip()}
    unknown = sorted(codes - set(_KNOWN_CODES))
    if not codes or unknown:
        raise typer.BadParameter(
            f"Unknown jurisdictions: {', '.join(unknown) or value!r}",
            param_hint="--jurisdictions",
        )
    return frozenset(codes)


def _parse_date(value: str, param_hint: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        msg = f"Expected YYYY-MM-DD, got '{value}'"
        raise typer.BadParameter(msg, param_hint=param_hint) from exc


def _resolve_reference(at: str | None, zone: ZoneInfo) -> datetime:
    if at is None:
        return get_container().clock.now(zone)
    try:
        return parse_local_datetime(at, zone)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--at") from exc


def _format_instant(value: datetime, zone: ZoneInfo) -> str:
    return value.astimezone(zone).strftime("%Y-%m-%d %H:%M %Z (%z)")


def _format_holiday(holiday: PublicHoliday) -> str:
    return f"{holiday.date.isoformat()} {holiday.date:%A}\t{holiday.name}"


def _echo_result(
    reference: datetime,
    jurisdiction: str,
    result: AvailabilityResult,
    zone: ZoneInfo,
) -> None:
    next_date = result.next_available_date
    typer.echo(f"Reference time:\t{_format_instant(reference, zone)}")
    typer.echo(f"Jurisdiction:\t{jurisdiction}")
    typer.echo(f"Next available:\t{next_date.isoformat()} ({next_date:%A})")
    typer.echo(f"Past cutoff:\t{'yes' if result.was_after_cutoff else 'no'}")
    if result.cutoff_at is not None:
        typer.echo(f"Cutoff:\t{_format_instant(result.cutoff_at, zone)}")
    if result.affected_holidays:
        typer.echo("Affected holidays:")
        for holiday in sorted(result.affected_holidays, key=lambda item: item.key):
            typer.echo("  " + _format_holiday(holiday))


def _invalidate_caches() -> None:
    container = get_container()
    container.holiday_provider.invalidate()
    container.availability.invalidate()


@app.command("show-settings")
def show_settings() -> None:
    """Print the resolved application settings."""

    container = get_container()
    settings = container.settings
    typer.echo("Environment:\t" + settings.environment)
    typer.echo("Database URL:\t" + settings.database_url)
    typer.echo("Time zone:\t" + settings.timezone)
    typer.echo("Cutoff time:\t" + settings.cutoff_time.strftime("%H:%M"))
    typer.echo(f"Business days before holiday:\t{settings.business_days_before_holiday}")
    typer.echo(f"Lookahead days:\t{settings.holiday_lookahead_days}")
    typer.echo("Default jurisdiction:\t" + settings.default_jurisdiction)


@app.command("seed-holidays")
def seed_holidays() -> None:
    """Load the default holiday data set."""

    container = get_container()
    added = asyncio.run(seed_default_holidays(container.unit_of_work_factory))
    _invalidate_caches()
    typer.echo(f"Seeded {added} holidays")


@app.command("add-holiday")
def add_holiday(
    holiday_date: str = typer.Argument(..., metavar="DATE", help="Holiday date (YYYY-MM-DD)"),
    name: str = typer.Argument(..., help="Holiday name"),
    jurisdictions: str | None = typer.Option(
        None, help="Comma separated jurisdiction codes (default: all)"
    ),
    sequence: str | None = typer.Option(None, help="Add the holiday to this named sequence"),
) -> None:
    """Store a public holiday, optionally as part of a holiday sequence."""

    container = get_container()
    try:
        holiday = PublicHoliday(
            date=_parse_date(holiday_date, "DATE"),
            name=name,
            jurisdictions=_parse_jurisdictions(jurisdictions),
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    async def _persist() -> None:
        async with container.unit_of_work_factory() as uow:
            if sequence is None:
                await uow.holiday_repository.add(holiday)
            else:
                stored = {item.key for item in await uow.holiday_repository.list_all()}
                if holiday.key in stored:
                    msg = f"Holiday {holiday.name} on {holiday.date.isoformat()} already exists"
                    raise DuplicateHolidayError(msg)
                current = await uow.sequence_repository.get(sequence)
                members = current.holidays if current is not None else ()
                await uow.sequence_repository.upsert(
                    HolidaySequence(name=sequence, holidays=(*members, holiday))
                )
            await uow.commit()

    try:
        asyncio.run(_persist())
    except RepositoryError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    _invalidate_caches()
    suffix = f" in sequence {sequence}" if sequence else ""
    typer.echo(f"Added {holiday.name} on {holiday.date.isoformat()}{suffix}")


@app.command("list-holidays")
def list_holidays(
    jurisdiction: str | None = typer.Option(None, help="Only holidays observed here"),
    start: str | None = typer.Option(None, "--from", help="First date (YYYY-MM-DD)"),
    end: str | None = typer.Option(None, "--to", help="Last date (YYYY-MM-DD)"),
) -> None:
    """List stored public holidays."""

    container = get_container()
    first = _parse_date(start, "--from") if start else date.min
    last = _parse_date(end, "--to") if end else date.max
    if first > last:
        raise typer.BadParameter("--from must not be after --to")
    code = _parse_jurisdiction(jurisdiction, "") if jurisdiction else None

    async def _run() -> None:
        async with container.unit_of_work_factory() as uow:
            if code is None:
                holidays = [
                    h for h in await uow.holiday_repository.list_all() if first <= h.date <= last
                ]
            else:
                holidays = list(await uow.holiday_repository.list_between(code, first, last))
        if not holidays:
            typer.echo("No holidays found")
            return
        for holiday in holidays:
            codes = ",".join(sorted(holiday.jurisdictions))
            typer.echo(f"{_format_holiday(holiday)}\t{codes}")

    asyncio.run(_run())


@app.command("next-available")
def next_available(
    jurisdiction: str | None = typer.Option(None, help="Jurisdiction code, e.g. NSW"),
    at: str | None = typer.Option(
        None, help="Request time as 'YYYY-MM-DD HH:MM' local time or ISO 8601 (default: now)"
    ),
) -> None:
    """Show the next date a booking can be accepted."""

    container = get_container()
    code = _parse_jurisdiction(jurisdiction, container.settings.default_jurisdiction)
    zone = container.availability_calculator.options.zone
    reference = _resolve_reference(at, zone)

    try:
        result = asyncio.run(container.availability.compute_next_available(reference, code))
    except SchedulingError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    _echo_result(reference, code, result, zone)


@app.command("check-date")
def check_date(
    target: str = typer.Argument(..., metavar="DATE", help="Date to check (YYYY-MM-DD)"),
    jurisdiction: str | None = typer.Option(None, help="Jurisdiction code, e.g. NSW"),
    at: str | None = typer.Option(
        None, help="Request time as 'YYYY-MM-DD HH:MM' local time or ISO 8601 (default: now)"
    ),
) -> None:
    """Report whether a booking can be made for DATE."""

    container = get_container()
    day = _parse_date(target, "DATE")
    code = _parse_jurisdiction(jurisdiction, container.settings.default_jurisdiction)
    zone = container.availability_calculator.options.zone
    reference = _resolve_reference(at, zone)

    availability = container.availability

    async def _run() -> tuple[bool, AvailabilityResult]:
        available = await availability.is_available_on_date(day, reference, code)
        result = await availability.compute_next_available(reference, code)
        return available, result

    try:
        available, result = asyncio.run(_run())
    except SchedulingError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc
    next_date = result.next_available_date
    if available:
        typer.echo(f"{day.isoformat()} is available in {code}")
    else:
        typer.echo(
            f"{day.isoformat()} is not available in {code}; "
            f"next available date is {next_date.isoformat()} ({next_date:%A})"
        )
