# pure business rules: raw 3-hour entries -> ordered daily summaries
# no i/o and no clock reads, "now" and the time zone are always supplied by the caller

from __future__ import annotations
import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from itertools import groupby
from typing import Iterable, List, Tuple
from .models import CityForecast, DailySummary, RawForecastDocument, RawForecastEntry, mean

logger = logging.getLogger(__name__)

# at most this many future days are reported
MAX_DAYS = 5


def format_location_label(location: str) -> str:
    # "Austin,TX,US" -> "Austin, TX, US", display only
    return location.replace(",", ", ")


def local_date(entry: RawForecastEntry, tz: tzinfo) -> date:
    return datetime.fromtimestamp(entry.timestamp, tz=tz).date()


def first_eligible_date(now: datetime, tz: tzinfo) -> date:
    # naive "now" is read as wall-clock time in tz
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return now.astimezone(tz).date() + timedelta(days=1)


def group_by_date(entries: Iterable[RawForecastEntry], tz: tzinfo) -> List[Tuple[date, List[RawForecastEntry]]]:
    # entries must already be sorted by timestamp so each date forms one run
    return [(day, list(group)) for day, group in groupby(entries, key=lambda e: local_date(e, tz))]


def summarize_day(day: date, entries: List[RawForecastEntry]) -> DailySummary:
    return DailySummary(
        date=day,
        average_temperature=round(mean([e.average_temp for e in entries]), 2),
        has_precipitation_chance=mean([e.precipitation_probability for e in entries]) > 0,
    )


class ForecastAggregator:
    """Reduces a raw forecast document to at most ``MAX_DAYS`` daily summaries.

    Entry timestamps and ``now`` are both converted to calendar dates in ``tz``,
    so the "today" boundary and the day grouping always agree.
    """

    def __init__(self, tz: tzinfo = timezone.utc):
        self.tz = tz

    def summarize(self, doc: RawForecastDocument, location: str, now: datetime) -> CityForecast:
        # sorted() is stable, entries sharing a timestamp keep their received order
        ordered = sorted(doc.entries, key=lambda e: e.timestamp)

        start = first_eligible_date(now, self.tz)
        future = [e for e in ordered if local_date(e, self.tz) >= start]

        groups = group_by_date(future, self.tz)[:MAX_DAYS]
        summaries = tuple(summarize_day(day, entries) for day, entries in groups)
        logger.debug(
            "%s: %d entries, %d from %s on, %d days",
            location, len(ordered), len(future), start.isoformat(), len(summaries),
        )

        return CityForecast(
            location_label=format_location_label(location),
            city_id=doc.city.id,
            daily_summaries=summaries,
        )
