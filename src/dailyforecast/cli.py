# connects input (locations -> provider query) to the service and prints one table per city

from __future__ import annotations
import argparse
import logging
import os
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from .aggregator import ForecastAggregator
from .client import ForecastClient
from .errors import ForecastError
from .models import CityForecast
from .service import forecast_all

# be explicit in queries (city, state, country) to avoid provider geocoding ambiguity
DEFAULT_LOCATIONS = [
    "Marlboro,MA,US",
    "San Diego,CA,US",
    "Cheyenne,WY,US",
    "Anchorage,AK,US",
    "Austin,TX,US",
    "Orlando,FL,US",
    "Seattle,WA,US",
    "Cleveland,OH,US",
    "Portland,ME,US",
    "Honolulu,HI,US",
]

SEPARATOR = "-" * 29
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def render_forecast(forecast: CityForecast) -> str:
    # '*' after the date marks a chance of precipitation
    lines = [
        SEPARATOR,
        f"{forecast.location_label} ({forecast.city_id})",
        "",
        "Date \t\t Avg Temp (F)",
        SEPARATOR,
    ]
    for day in forecast.daily_summaries:
        mark = "*" if day.has_precipitation_chance else " "
        lines.append(f"{day.date:%m/%d/%Y}{mark} \t {day.average_temperature:,.2f}°")
    lines.append("")
    return "\n".join(lines)


def render_failure(location: str) -> str:
    return f"Something goes wrong when the application search the location: {location}"


def _parse_args(argv: Optional[List[str]], prog_name: Optional[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=prog_name, description="Five day forecast summary per location.")
    parser.add_argument("locations", nargs="*", help="City,Region,Country strings (default: built-in list)")
    parser.add_argument("--timezone", default="UTC", help="IANA zone used for 'today' and day grouping")
    parser.add_argument("--timeout", type=float, default=None, help="request timeout in seconds")
    parser.add_argument("--log-level", default=os.getenv("FORECAST_LOG_LEVEL", "WARNING"),
                        help=f"one of {', '.join(LOG_LEVELS)}")
    args = parser.parse_args(argv)

    # covers FORECAST_LOG_LEVEL as well as the flag
    args.log_level = args.log_level.upper()
    if args.log_level not in LOG_LEVELS:
        parser.error(f"unknown log level: {args.log_level}")

    try:
        args.tz = ZoneInfo(args.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        parser.error(f"unknown time zone: {args.timezone}")
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")
    return args


def main(argv: Optional[List[str]] = None, prog_name: Optional[str] = None) -> int:
    args = _parse_args(argv, prog_name)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    locations = args.locations or DEFAULT_LOCATIONS
    aggregator = ForecastAggregator(tz=args.tz)
    now = datetime.now(args.tz)

    try:
        client = ForecastClient(timeout=args.timeout)
    except ForecastError as exc:
        print(f"error: {exc}")
        return 2

    print(f"Current datetime: {now:%m/%d/%Y %I:%M %p}\n")
    with client:
        results = forecast_all(locations, client=client, aggregator=aggregator, now=now)

    for r in results:
        # match the original console layout
        print(render_forecast(r.forecast) if r.ok else render_failure(r.location))

    return 0 if all(r.ok for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
