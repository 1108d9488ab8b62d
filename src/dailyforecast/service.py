# orchestration: one location at a time, fetch -> summarize
# a failing location is recorded and the batch moves on to the next one

from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterable, List, Optional
from .aggregator import ForecastAggregator
from .client import ForecastClient
from .errors import ForecastError
from .models import CityForecast, LocationResult

logger = logging.getLogger(__name__)


# single location path: fetch -> aggregate
def forecast_for_location(
    client: ForecastClient,
    aggregator: ForecastAggregator,
    location: str,
    now: datetime,
) -> CityForecast:
    doc = client.fetch(location)
    return aggregator.summarize(doc, location, now)


def forecast_all(
    locations: Iterable[str],
    client: Optional[ForecastClient] = None,
    aggregator: Optional[ForecastAggregator] = None,
    now: Optional[datetime] = None,
) -> List[LocationResult]:
    # sequential on purpose, results keep the input order
    aggregator = aggregator or ForecastAggregator()
    # one reference time for the whole batch so every city shares the same window
    now = now or datetime.now(aggregator.tz)

    owns_client = client is None
    client = client or ForecastClient()
    results: List[LocationResult] = []
    try:
        for location in locations:
            try:
                forecast = forecast_for_location(client, aggregator, location, now)
            except ForecastError as exc:
                logger.warning("skipping %r: %s", location, exc)
                results.append(LocationResult(location=location, error=exc))
                continue
            results.append(LocationResult(location=location, forecast=forecast))
    finally:
        if owns_client:
            client.close()

    return results
