# OOP boundary for external i/o
# all http/keys/timeouts live here, so the rest of the code is pure and testable
# one request per fetch: no retries, no backoff, no caching

from __future__ import annotations
import logging
import os
from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from dotenv import load_dotenv
from .errors import DecodeError, ForecastError, ProviderError, TransportError
from .models import RawForecastDocument

load_dotenv()  # in production, environment variables is injected by docker, kubernetes, cloud provider

logger = logging.getLogger(__name__)


def _env_timeout(default: float) -> float:
    raw = os.getenv("FORECAST_TIMEOUT")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ForecastError(f"FORECAST_TIMEOUT must be a number (got {raw!r})") from exc


class ForecastClient:
    # this class encapsulates provider details like base URL, params, auth, units
    BASE_URL = "https://api.openweathermap.org/data/2.5/forecast"
    DEFAULT_TIMEOUT = 10.0
    DEFAULT_UNITS = "imperial"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        units: str = DEFAULT_UNITS,
        base_url: str = BASE_URL,
        user_agent: str = "daily-forecast/0.1",
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key or os.getenv("OPENWEATHER_API_KEY")
        if not self.api_key:
            # fail when key is missing to avoid confusing 401s downstream
            raise ForecastError("OPENWEATHER_API_KEY not set")

        self.timeout = timeout if timeout is not None else _env_timeout(self.DEFAULT_TIMEOUT)
        if self.timeout <= 0:
            raise ForecastError(f"'timeout' must be positive (got {self.timeout})")

        self.units = units
        self.base_url = base_url
        self.user_agent = user_agent

        self._owns_session = session is None
        self._session = session or self._build_session()

    def _build_session(self) -> requests.Session:
        # central place to configure http behavior like headers and adapters
        s = requests.Session()
        s.headers.update({
            "User-Agent": self.user_agent,
            "Accept-Encoding": "gzip, deflate",  # requests/urllib3 decode these transparently
        })
        # single attempt, connection errors surface immediately
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "ForecastClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def get_forecast_payload(self, location: str) -> Dict[str, Any]:
        # fetch forecast JSON for one location, location is passed through verbatim
        params = {
            "q": location,
            "appid": self.api_key,
            "units": self.units,
        }
        logger.debug("GET %s q=%r units=%s", self.base_url, location, self.units)

        try:
            # the with-block releases the connection on every exit path
            with self._session.get(self.base_url, params=params, timeout=self.timeout) as resp:
                status = resp.status_code
                text = resp.text or ""
        except requests.RequestException as exc:
            # wrap requests exceptions with context for easier debugging
            logger.warning("request for %r failed: %s", location, exc)
            raise TransportError(f"Request error for {location!r}: {exc}") from exc

        if not 200 <= status < 300:
            # include a short response snippet to speed up triage
            logger.warning("provider answered HTTP %s for %r", status, location)
            raise ProviderError(f"HTTP {status} for {location!r}. Body: {text[:300]}", status_code=status)

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError(f"Invalid JSON for {location!r}: {exc}", status_code=status) from exc

        # the provider reports some failures inside a 200 body as {"cod": "404", "message": ...}
        if isinstance(data, dict) and "cod" in data and str(data["cod"]) != "200":
            message = data.get("message", "")
            raise ProviderError(f"API error {data['cod']} for {location!r}: {message}", status_code=status)

        return data

    def fetch(self, location: str) -> RawForecastDocument:
        payload = self.get_forecast_payload(location)
        try:
            return RawForecastDocument.from_payload(payload)
        except DecodeError as exc:
            logger.warning("could not decode forecast for %r: %s", location, exc)
            raise
