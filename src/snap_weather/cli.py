"""snap-weather CLI: track locations, fetch current weather, switch units."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .aggregator import DEFAULT_LOCATIONS, WeatherAggregator
from .board import BoardState, WeatherBoard
from .config import Settings, load_settings
from .exceptions import ConfigError, JournalError, PreferenceStoreError
from .journal import JournalWriter, NullJournal
from .log_setup import setup_logger
from .preferences import (
    JsonFilePreferenceStore,
    PreferenceStore,
    UnitPreference,
    load_tracked_locations,
    save_tracked_locations,
)
from .weather.models import Location, PrecipitationLikelihood, WeatherSnapshot
from .weather.openweather import OpenWeatherProvider
from .weather.units import UnitSystem

_LIKELIHOOD_STYLES = {
    PrecipitationLikelihood.VERY_LOW: "green",
    PrecipitationLikelihood.LOW: "green",
    PrecipitationLikelihood.MEDIUM: "yellow",
    PrecipitationLikelihood.HIGH: "red",
    PrecipitationLikelihood.VERY_HIGH: "bold red",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="snap-weather",
        description="Track current weather for a handful of locations.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="Show tracked locations.")
    commands.add_parser("fetch", help="Fetch current weather for every tracked location.")

    fetch_one = commands.add_parser("fetch-one", help="Fetch current weather for one location.")
    fetch_one.add_argument("name", help="City name, e.g. 'San Francisco'.")
    fetch_one.add_argument("region", help="Region/state code, e.g. CA.")

    add = commands.add_parser("add", help="Track a location once the provider knows it.")
    add.add_argument("name")
    add.add_argument("region")

    remove = commands.add_parser("remove", help="Stop tracking a location.")
    remove.add_argument("name")
    remove.add_argument("region")

    unit = commands.add_parser("unit", help="Show or change the temperature unit.")
    unit_action = unit.add_mutually_exclusive_group()
    unit_action.add_argument("--toggle", action="store_true", help="Flip between °F and °C.")
    unit_action.add_argument(
        "--set",
        dest="set_unit",
        choices=[u.provider_code for u in UnitSystem],
        default=None,
        help="Set the unit explicitly.",
    )
    return parser.parse_args(argv)


def build_board(
    settings: Settings,
    store: PreferenceStore,
    provider: Any,
    logger: logging.Logger,
) -> WeatherBoard:
    """Compose preference, aggregator and board around an open provider."""
    unit_preference = UnitPreference(store, logger=logger.getChild("preferences"))
    aggregator = WeatherAggregator(
        provider=provider,
        unit_preference=unit_preference,
        locations=_tracked_locations(store),
        country_code=settings.weather_country_code,
        logger=logger.getChild("aggregator"),
    )
    return WeatherBoard(aggregator, unit_preference, logger=logger.getChild("board"))


def _tracked_locations(store: PreferenceStore) -> list[Location]:
    stored = load_tracked_locations(store)
    return list(DEFAULT_LOCATIONS) if stored is None else stored


def _format_temp(value: float, symbol: str) -> str:
    return f"{value:.0f}{symbol}"


def _print_snapshots(console: Console, snapshots: list[WeatherSnapshot], title: str) -> None:
    table = Table(title=title)
    table.add_column("Location", overflow="fold")
    table.add_column("Now", justify="right")
    table.add_column("High / Low", justify="right")
    table.add_column("Conditions", overflow="fold")
    table.add_column("Humidity", justify="right")
    table.add_column("Precipitation")
    for item in snapshots:
        style = _LIKELIHOOD_STYLES[item.precipitation_likelihood]
        table.add_row(
            item.location_display_label,
            _format_temp(item.current_temp, item.unit_symbol),
            f"{_format_temp(item.high_temp, item.unit_symbol)} / "
            f"{_format_temp(item.low_temp, item.unit_symbol)}",
            item.condition_description,
            f"{item.humidity_pct}%",
            f"[{style}]{item.precipitation_likelihood.value}[/{style}]",
        )
    console.print(table)


def _print_locations(console: Console, locations: list[Location]) -> None:
    if not locations:
        console.print("No tracked locations. Add one with `snap-weather add NAME REGION`.")
        return
    table = Table(title="Tracked Locations")
    table.add_column("#", justify="right")
    table.add_column("Location", overflow="fold")
    for index, location in enumerate(locations, start=1):
        table.add_row(str(index), location.display_label)
    console.print(table)


async def _run_weather_command(
    args: argparse.Namespace,
    settings: Settings,
    store: PreferenceStore,
    console: Console,
    journal: JournalWriter | NullJournal,
    logger: logging.Logger,
) -> int:
    async with OpenWeatherProvider(settings, logger=logger.getChild("openweather")) as provider:
        board = build_board(settings, store, provider, logger)

        if args.command == "fetch":
            tracked = board.aggregator.list_tracked_locations()
            state = await board.load()
            journal.write_event(
                "weather_fetch_summary",
                payload={
                    "tracked": len(tracked),
                    "succeeded": len(board.snapshots),
                    "state": state,
                    "unit": board.current_unit,
                },
            )
            if state is BoardState.EMPTY:
                _print_locations(console, [])
                return 0
            if state is BoardState.ERROR:
                console.print(f"[red]{board.message}[/red] Try again later.")
                return 4
            _print_snapshots(console, board.snapshots, title="Current Weather")
            missing = len(tracked) - len(board.snapshots)
            if missing:
                console.print(f"{missing} location(s) could not be fetched.")
            return 0

        location = Location(name=args.name, region=args.region)
        if args.command == "fetch-one":
            outcome = await board.aggregator.fetch_one(location)
            journal.write_event(
                "weather_fetch_one",
                payload={"location": location.display_label, "ok": outcome.ok},
            )
            if outcome.snapshot is None:
                console.print(f"[red]Weather fetch failed:[/red] {outcome.error}")
                return 4
            _print_snapshots(console, [outcome.snapshot], title="Current Weather")
            return 0

        # add
        outcome = await board.add_location(location.name, location.region)
        journal.write_event(
            "location_add",
            payload={"location": location.display_label, "ok": outcome.ok},
        )
        if board.state is BoardState.ERROR:
            console.print(f"[red]{board.message}[/red]")
            return 4
        save_tracked_locations(store, board.aggregator.list_tracked_locations())
        console.print(f"Now tracking {location.display_label}.")
        _print_snapshots(console, board.snapshots, title="Current Weather")
        return 0


def build_offline_aggregator(
    settings: Settings, store: PreferenceStore, logger: logging.Logger
) -> WeatherAggregator:
    """Aggregator over the stored locations for commands that never fetch."""
    return WeatherAggregator(
        provider=None,
        unit_preference=UnitPreference(store, logger=logger.getChild("preferences")),
        locations=_tracked_locations(store),
        country_code=settings.weather_country_code,
        logger=logger.getChild("aggregator"),
    )


def _run_local_command(
    args: argparse.Namespace,
    settings: Settings,
    store: PreferenceStore,
    console: Console,
    journal: JournalWriter | NullJournal,
    logger: logging.Logger,
) -> int:
    if args.command == "list":
        aggregator = build_offline_aggregator(settings, store, logger)
        _print_locations(console, aggregator.list_tracked_locations())
        return 0

    if args.command == "remove":
        location = Location(name=args.name, region=args.region)
        aggregator = build_offline_aggregator(settings, store, logger)
        if location in aggregator.list_tracked_locations():
            aggregator.remove_location(location)
            save_tracked_locations(store, aggregator.list_tracked_locations())
            console.print(f"Stopped tracking {location.display_label}.")
        else:
            console.print(f"{location.display_label} was not tracked.")
        journal.write_event("location_remove", payload={"location": location.display_label})
        return 0

    unit_preference = UnitPreference(store)
    if args.toggle:
        unit = unit_preference.toggle()
        journal.write_event("unit_change", payload={"unit": unit})
    elif args.set_unit:
        unit = UnitSystem.parse(args.set_unit)
        unit_preference.set_current(unit)
        journal.write_event("unit_change", payload={"unit": unit})
    else:
        unit = unit_preference.get_current()
    console.print(f"Temperature unit: {unit.symbol} ({unit.provider_code})")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run one CLI command and return its exit code."""
    args = parse_args(argv)
    session_id = uuid.uuid4().hex[:12]
    logger = setup_logger(session_id=session_id)
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger.setLevel(settings.log_level)

    journal: JournalWriter | NullJournal = NullJournal()
    if settings.weather_journal_enabled:
        try:
            journal = JournalWriter(journal_dir=settings.journal_dir, session_id=session_id)
            journal.write_event(
                "command_start",
                payload={"command": args.command, "settings": settings.safe_summary()},
            )
        except JournalError as exc:
            logger.error("Failed to initialize journal: %s", exc)
            return 3

    store = JsonFilePreferenceStore(settings.preferences_file)
    exit_code = 0
    try:
        if args.command in {"fetch", "fetch-one", "add"}:
            exit_code = asyncio.run(
                _run_weather_command(args, settings, store, console, journal, logger)
            )
        else:
            exit_code = _run_local_command(args, settings, store, console, journal, logger)
    except ValidationError as exc:
        exit_code = 2
        logger.error("Invalid location: %s", exc)
    except PreferenceStoreError as exc:
        exit_code = 3
        logger.error("Preference store failure: %s", exc)
    except JournalError as exc:
        exit_code = 3
        logger.error("Journal failure: %s", exc)
    except Exception as exc:  # pragma: no cover - last-resort catch for CLI runtime
        exit_code = 99
        logger.exception("Unexpected CLI failure: %s", exc)
    finally:
        try:
            journal.write_event("command_shutdown", payload={"exit_code": exit_code})
        except JournalError:
            logger.error("Failed to write command_shutdown event.")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
