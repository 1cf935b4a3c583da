"""Exceptions raised by the geolocation core."""

import json
from typing import Any

QUOTA_HINT = (
    "You have run out of credits for this session. You can wait for the rate "
    "limit to reset or get higher limits by sponsoring us or hosting probes. "
    "Learn more at https://dash.globalping.io?view=add-credits"
)


class GeolocateError(Exception):
    """Base class for every fatal error of a geolocation run."""


class QuotaExceededError(GeolocateError):
    """The probe service rejected a request with HTTP 429."""

    def __init__(self, message: str = QUOTA_HINT):
        super().__init__(message)


class ServiceRequestError(GeolocateError):
    """The probe service answered a request with a non-success response.

    Attributes:
        status_code: HTTP status of the response, or None for transport errors
        payload: Raw diagnostic payload returned by the service
    """

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        self.status_code = status_code
        self.payload = payload
        if payload is not None:
            message = f"{message}: {_render_payload(payload)}"
        super().__init__(message)


class NoDataError(GeolocateError):
    """No probe returned a usable latency sample."""


class MeasurementTimeoutError(GeolocateError):
    """A measurement did not reach a terminal status before the deadline."""


def _render_payload(payload: Any) -> str:
    if isinstance(payload, (dict, list)):
        return json.dumps(payload)
    return str(payload)
