"""Probe service abstraction and the Globalping API client."""

import logging
from typing import Any, Protocol

import httpx

from geolocate import __version__
from geolocate.errors import QuotaExceededError, ServiceRequestError
from geolocate.models import MeasurementJob, MeasurementState

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.globalping.io/v1/"
DEFAULT_TIMEOUT = 60.0
USER_AGENT = f"geolocate/{__version__}"


class ProbeService(Protocol):
    """Protocol defining the interface of a distributed measurement service."""

    async def create_measurement(
        self, target: str, locations: list[dict[str, Any]]
    ) -> MeasurementJob:
        """Start a traceroute toward ``target`` from probes matching ``locations``."""
        ...

    async def get_measurement(self, measurement_id: str) -> MeasurementState:
        """Fetch the current state of a measurement."""
        ...


def magic_location(name: str, limit: int) -> dict[str, Any]:
    """Location filter for a free-form region such as a continent name."""
    return {"magic": name, "limit": limit}


def country_location(country: str, limit: int, state: str | None = None) -> dict[str, Any]:
    """Location filter for a country, optionally narrowed to a US state."""
    location: dict[str, Any] = {"country": country, "limit": limit}
    if state:
        location["state"] = state
    return location


class GlobalpingService:
    """Probe service backed by the Globalping REST API.

    One client instance is shared by every phase of a run; it holds the
    optional auth token and is never mutated after construction.
    """

    def __init__(
        self,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            token: Optional Globalping token; raises the request quota when set
            timeout: Per-request timeout in seconds
            base_url: API root, ending with a slash
            transport: Optional httpx transport (used by tests)
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

        logger.debug(
            "GlobalpingService initialized: base_url=%s, timeout=%.1fs, authenticated=%s",
            base_url,
            timeout,
            bool(token),
        )

    async def __aenter__(self) -> "GlobalpingService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_measurement(
        self, target: str, locations: list[dict[str, Any]]
    ) -> MeasurementJob:
        body = {"type": "traceroute", "target": target, "locations": locations}
        logger.debug("Creating measurement: target=%s, locations=%s", target, locations)

        response = await self._request("POST", "measurements", "Failed to create measurement", json=body)
        data = response.json()

        job = MeasurementJob(id=data["id"], probes_count=data.get("probesCount", 0), target=target)
        logger.debug("Measurement created: id=%s, probes=%d", job.id, job.probes_count)
        return job

    async def get_measurement(self, measurement_id: str) -> MeasurementState:
        response = await self._request(
            "GET", f"measurements/{measurement_id}", "Failed to get measurement"
        )
        state = MeasurementState.from_api(response.json())
        logger.debug(
            "Measurement fetched: id=%s, status=%s, results=%d",
            measurement_id,
            state.status,
            len(state.samples),
        )
        return state

    async def _request(self, method: str, url: str, failure: str, **kwargs) -> httpx.Response:
        """Send one request and map every non-success response to an error.

        Raises:
            QuotaExceededError: The service answered 429
            ServiceRequestError: Any other failure, with the service's payload
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ServiceRequestError(f"{failure}: {e}") from e

        if response.status_code == 429:
            logger.warning("Rate limited by probe service: %s %s", method, url)
            raise QuotaExceededError()

        if response.is_error:
            raise ServiceRequestError(failure, response.status_code, _payload(response))

        return response


def _payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
