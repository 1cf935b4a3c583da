"""Runtime settings read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from geolocate.orchestrator import DEFAULT_PROBE_LIMIT
from geolocate.poller import POLL_INTERVAL
from geolocate.service import DEFAULT_API_URL, DEFAULT_TIMEOUT

SERVICES = ("globalping", "fake")


@dataclass
class Settings:
    """Configuration of one geolocation run.

    Environment Variables:
        GLOBALPING_TOKEN: Optional API token for higher rate limits
        GEOLOCATE_PROBE_LIMIT: Probes per phase after the continent phase (default 50)
        GEOLOCATE_TIMEOUT: Per-request timeout in seconds (default 60)
        GEOLOCATE_POLL_INTERVAL: Seconds between status fetches (default 1)
        GEOLOCATE_POLL_DEADLINE: Maximum seconds to wait for one phase (default: no limit)
        GEOLOCATE_API_URL: Probe service API root
        GEOLOCATE_SERVICE: "globalping" (default) or "fake" for simulated probes
    """

    token: str | None = None
    probe_limit: int = DEFAULT_PROBE_LIMIT
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = POLL_INTERVAL
    poll_deadline: float | None = None
    api_url: str = DEFAULT_API_URL
    service: str = "globalping"

    def __post_init__(self):
        if self.probe_limit < 1:
            raise ValueError("probe_limit must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.poll_interval < 0:
            raise ValueError("poll_interval cannot be negative")
        if self.poll_deadline is not None and self.poll_deadline <= 0:
            raise ValueError("poll_deadline must be positive")
        if self.service not in SERVICES:
            raise ValueError(f"service must be one of {', '.join(SERVICES)}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ

        deadline = env.get("GEOLOCATE_POLL_DEADLINE")
        return cls(
            token=env.get("GLOBALPING_TOKEN") or None,
            probe_limit=_number(env, "GEOLOCATE_PROBE_LIMIT", int, DEFAULT_PROBE_LIMIT),
            timeout=_number(env, "GEOLOCATE_TIMEOUT", float, DEFAULT_TIMEOUT),
            poll_interval=_number(env, "GEOLOCATE_POLL_INTERVAL", float, POLL_INTERVAL),
            poll_deadline=_number(env, "GEOLOCATE_POLL_DEADLINE", float, None) if deadline else None,
            api_url=env.get("GEOLOCATE_API_URL") or DEFAULT_API_URL,
            service=(env.get("GEOLOCATE_SERVICE") or "globalping").lower(),
        )


def _number(env: Mapping[str, str], name: str, convert, default):
    raw = env.get(name)
    if not raw:
        return default
    try:
        return convert(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
