# error taxonomy shared by the client, the decoder and the orchestrator
# everything derives from ForecastError so callers can catch a single type

from __future__ import annotations
from typing import Optional


class ForecastError(RuntimeError):
    pass


class TransportError(ForecastError):
    # connection refused, dns failure, timeout
    pass


class ProviderError(ForecastError):
    # non-success status or an api-level failure reported by the provider

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ForecastError):
    # payload parsed as json but does not match the expected forecast shape
    pass
