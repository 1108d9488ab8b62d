# models and tiny stats helper to keep data shapes explicit and reusable across the app

from __future__ import annotations
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from .errors import DecodeError, ForecastError


def _finite(value: Any) -> float:
    # float() happily accepts nan and inf, neither is a usable measurement
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


@dataclass(frozen=True)
class RawForecastEntry:
    # one 3-hour measurement as delivered by the provider
    timestamp: int  # epoch seconds, utc
    temp_min: float
    temp_max: float
    precipitation_probability: float  # 0..1

    @property
    def average_temp(self) -> float:
        # rounded before it takes part in the daily mean, the daily mean is rounded again
        return round((self.temp_min + self.temp_max) / 2, 2)


@dataclass(frozen=True)
class CityMetadata:
    id: int
    name: str


@dataclass(frozen=True)
class RawForecastDocument:
    city: CityMetadata
    entries: Tuple[RawForecastEntry, ...]  # order as received, not sorted

    @classmethod
    def from_payload(cls, data: Any) -> "RawForecastDocument":
        # openweather shape: data["list"][i]["main"]["temp_min"], data["city"]["id"]
        # extra fields are ignored, missing or non-numeric required ones are rejected
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")

        items = data.get("list")
        if not isinstance(items, list):
            raise DecodeError("Unexpected API shape: missing list")

        try:
            city = data["city"]
            meta = CityMetadata(id=int(city["id"]), name=str(city.get("name", "")))
        except (KeyError, TypeError, ValueError, OverflowError, AttributeError) as exc:
            raise DecodeError(f"Unexpected API shape: bad city block ({exc!r})") from exc

        entries = []
        for i, item in enumerate(items):
            try:
                main = item["main"]
                timestamp = int(item["dt"])
                # must map to a calendar date later on
                datetime.fromtimestamp(timestamp, tz=timezone.utc)
                entries.append(RawForecastEntry(
                    timestamp=timestamp,
                    temp_min=_finite(main["temp_min"]),
                    temp_max=_finite(main["temp_max"]),
                    precipitation_probability=_finite(item["pop"]),
                ))
            except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
                raise DecodeError(f"Unexpected API shape in list[{i}]: {exc!r}") from exc

        return cls(city=meta, entries=tuple(entries))


@dataclass(frozen=True)
class DailySummary:
    date: date
    average_temperature: float
    has_precipitation_chance: bool


@dataclass(frozen=True)
class CityForecast:
    # output value object used by consumers and cli
    location_label: str
    city_id: int
    daily_summaries: Tuple[DailySummary, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locationLabel": self.location_label,
            "cityId": self.city_id,
            "dailySummaries": [
                {
                    "date": d.date.isoformat(),
                    "averageTemperature": d.average_temperature,
                    "hasPrecipitationChance": d.has_precipitation_chance,
                }
                for d in self.daily_summaries
            ],
        }


@dataclass(frozen=True)
class LocationResult:
    # per-location outcome, exactly one of forecast / error is set
    location: str
    forecast: Optional[CityForecast] = None
    error: Optional[ForecastError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def mean(values: List[float]) -> float:
    # simple average that returns NaN on empty input to avoid zero division
    return sum(values) / len(values) if values else float("nan")
