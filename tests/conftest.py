# shared fixtures, tests never hit the network

import json
from pathlib import Path
import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def example_payload():
    # mirrors the provider's 5 day / 3 hour payload, including fields we ignore
    return json.loads((DATA_DIR / "example_forecast.json").read_text())


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
    monkeypatch.delenv("FORECAST_TIMEOUT", raising=False)
    return "test-key"
