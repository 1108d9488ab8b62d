# orchestration tests with an in-memory client, one bad location must not stop the batch

from datetime import datetime, timezone
import pytest
from dailyforecast.aggregator import ForecastAggregator
from dailyforecast.errors import DecodeError, TransportError
from dailyforecast.models import CityMetadata, RawForecastDocument, RawForecastEntry
from dailyforecast.service import forecast_all, forecast_for_location

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)
TOMORROW_NOON = 1704844800 + 36 * 3600


class FakeClient:
    def __init__(self, failures=None):
        self.failures = failures or {}
        self.calls = []

    def fetch(self, location):
        self.calls.append(location)
        if location in self.failures:
            raise self.failures[location]
        entry = RawForecastEntry(TOMORROW_NOON, 60, 70, 0.0)
        return RawForecastDocument(city=CityMetadata(id=len(self.calls), name=location), entries=(entry,))

    def close(self):
        pass


LOCATIONS = ["Marlboro,MA,US", "San Diego,CA,US", "Cheyenne,WY,US", "Anchorage,AK,US", "Austin,TX,US"]


def test_forecast_for_location():
    forecast = forecast_for_location(FakeClient(), ForecastAggregator(), "Austin,TX,US", NOW)
    assert forecast.location_label == "Austin, TX, US"
    assert forecast.daily_summaries[0].average_temperature == 65.0


def test_failure_is_isolated():
    client = FakeClient(failures={"Cheyenne,WY,US": TransportError("timed out")})

    results = forecast_all(LOCATIONS, client=client, now=NOW)

    # every location was tried, in order
    assert client.calls == LOCATIONS
    assert [r.location for r in results] == LOCATIONS
    assert [r.ok for r in results] == [True, True, False, True, True]
    assert isinstance(results[2].error, TransportError)
    assert results[2].forecast is None
    assert all(r.forecast.daily_summaries for r in results if r.ok)


def test_every_location_failing():
    client = FakeClient(failures={loc: DecodeError("bad") for loc in LOCATIONS})
    results = forecast_all(LOCATIONS, client=client, now=NOW)
    assert not any(r.ok for r in results)


def test_unexpected_errors_propagate():
    client = FakeClient(failures={"Austin,TX,US": KeyError("boom")})
    with pytest.raises(KeyError):
        forecast_all(LOCATIONS, client=client, now=NOW)


def test_default_now_is_the_current_time():
    # the fake entry lies in 2024, so against the real clock it is already in the past
    client = FakeClient()
    results = forecast_all(["Boise,ID,US"], client=client)
    assert results[0].ok
    assert results[0].forecast.daily_summaries == ()


def test_undatable_timestamp_fails_only_its_location(example_payload):
    # year 33658 cannot become a date, the decoder rejects it and the batch carries on
    bad = dict(example_payload, list=[dict(example_payload["list"][0], dt=10**12)])

    class PayloadClient(FakeClient):
        def fetch(self, location):
            self.calls.append(location)
            payload = bad if location == "B" else example_payload
            return RawForecastDocument.from_payload(payload)

    results = forecast_all(["A", "B", "C"], client=PayloadClient(), now=NOW)

    assert [r.ok for r in results] == [True, False, True]
    assert isinstance(results[1].error, DecodeError)
