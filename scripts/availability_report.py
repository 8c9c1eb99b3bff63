"""Show the next bookable date in every jurisdiction for one request time."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from supplier_booking.cli.deps import get_container
from supplier_booking.container import ServiceContainer
from supplier_booking.domain import AvailabilityResult, Jurisdiction
from supplier_booking.scheduling import SchedulingError
from supplier_booking.utils import parse_local_datetime

_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

console = Console()
app = typer.Typer(help="Compare next available booking dates across jurisdictions")


async def _collect(
    container: ServiceContainer,
    at: str | None,
    codes: list[str],
) -> tuple[str, list[AvailabilityResult]]:
    zone = container.availability_calculator.options.zone
    reference = parse_local_datetime(at, zone) if at else container.clock.now(zone)
    results = await asyncio.gather(
        *(container.availability.compute_next_available(reference, code) for code in codes)
    )
    return reference.strftime("%Y-%m-%d %H:%M %Z"), list(results)


@app.command()
def run(
    at: str | None = typer.Option(
        None, help="Request time as 'YYYY-MM-DD HH:MM' local time (default: now)"
    ),
    jurisdictions: str = typer.Option(
        ",".join(code.value for code in Jurisdiction),
        help="Comma separated jurisdiction codes",
    ),
) -> None:
    """Print the next available date per jurisdiction."""

    known = {code.value for code in Jurisdiction}
    codes = list(
        dict.fromkeys(part.strip().upper() for part in jurisdictions.split(",") if part.strip())
    )
    unknown = sorted(set(codes) - known)
    if unknown:
        console.print(f"[red]Unknown jurisdictions: {', '.join(unknown)}[/red]")
        raise typer.Exit(code=1)
    if not codes:
        console.print("[red]No jurisdictions given.[/red]")
        raise typer.Exit(code=1)

    try:
        reference, results = asyncio.run(_collect(get_container(), at, codes))
    except (ValueError, SchedulingError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"Next Available Dates for a Request at {reference}")
    table.add_column("Jurisdiction", style="cyan", no_wrap=True)
    table.add_column("Next Available", style="green")
    table.add_column("Past Cutoff", style="yellow")
    table.add_column("Affected Holidays", style="magenta")

    for code, result in zip(codes, results, strict=True):
        next_date = result.next_available_date
        table.add_row(
            code,
            f"{next_date.isoformat()} ({next_date:%a})",
            "yes" if result.was_after_cutoff else "no",
            ", ".join(holiday.name for holiday in result.affected_holidays) or "-",
        )

    console.print(table)


if __name__ == "__main__":  # pragma: no cover
    app()
