"""Data models for geolocation measurements."""

from dataclasses import dataclass, field
from typing import Any

IN_PROGRESS = "in-progress"
FINISHED = "finished"


@dataclass(frozen=True)
class MeasurementJob:
    """Handle for one measurement created on the probe service."""

    id: str
    probes_count: int
    target: str


@dataclass(frozen=True)
class ProbeSample:
    """One probe's raw traceroute result and its declared location.

    ``hops`` holds the raw RTT values reported for each hop, in hop order.
    Values may be zero or negative (no response); the latency extractor
    filters them.
    """

    continent: str
    country: str
    state: str | None
    city: str | None
    status: str
    hops: tuple[tuple[float, ...], ...] = ()
    asn: int = 0
    network: str = ""

    @property
    def finished(self) -> bool:
        return self.status == FINISHED

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "ProbeSample":
        """Build a sample from one entry of a measurement's ``results`` list."""
        probe = item.get("probe") or {}
        result = item.get("result") or {}

        hops = []
        for hop in result.get("hops") or []:
            timings = hop.get("timings") or []
            hops.append(
                tuple(
                    t["rtt"]
                    for t in timings
                    if isinstance(t, dict) and isinstance(t.get("rtt"), (int, float))
                )
            )

        return cls(
            continent=probe.get("continent") or "",
            country=probe.get("country") or "",
            state=probe.get("state"),
            city=probe.get("city"),
            status=result.get("status") or "",
            hops=tuple(hops),
            asn=probe.get("asn") or 0,
            network=probe.get("network") or "",
        )


@dataclass(frozen=True)
class MeasurementState:
    """Snapshot of a measurement as returned by a status fetch."""

    id: str
    status: str
    samples: tuple[ProbeSample, ...] = ()
    anycast: bool = False

    @property
    def in_progress(self) -> bool:
        return self.status == IN_PROGRESS

    @property
    def finished_count(self) -> int:
        return sum(1 for sample in self.samples if sample.finished)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "MeasurementState":
        results = payload.get("results") or []
        return cls(
            id=payload.get("id", ""),
            status=payload.get("status", ""),
            samples=tuple(ProbeSample.from_api(item) for item in results),
            anycast=bool(payload.get("isAnycast", False)),
        )


@dataclass(frozen=True)
class LocationCandidate:
    """A ranked location: the aggregate of every sample sharing one key."""

    continent: str = ""
    country: str = ""
    state: str | None = None
    city: str = ""
    min_rtt: float = 0.0
    avg_rtt: float = 0.0
    sample_count: int = 1
    is_anycast: bool = False

    def __post_init__(self):
        """Reject candidates that could not have come from real observations."""
        if self.sample_count < 1:
            raise ValueError("sample_count must be at least 1")
        if self.min_rtt > self.avg_rtt:
            raise ValueError(
                f"min_rtt ({self.min_rtt}) cannot exceed avg_rtt ({self.avg_rtt})"
            )

    @property
    def name(self) -> str:
        """Most specific location field set on this candidate."""
        return self.city or self.state or self.country or self.continent


@dataclass(frozen=True)
class ProgressUpdate:
    """Live progress of a phase after one status fetch."""

    phase: str
    finished: int
    expected: int
    leader: str | None = None
    leader_rtt: float | None = None

    @property
    def percent(self) -> float:
        if self.expected <= 0:
            return 0.0
        return min(100.0, self.finished / self.expected * 100.0)


@dataclass
class PhaseResult:
    """Ranked candidates produced by one narrowing phase."""

    phase: str
    number: int
    candidates: list[LocationCandidate] = field(default_factory=list)
    probes_count: int = 0
    highlights: list[LocationCandidate] = field(default_factory=list)
    anycast: bool = False

    @property
    def winner(self) -> LocationCandidate | None:
        return self.candidates[0] if self.candidates else None

    def top(self, count: int) -> list[LocationCandidate]:
        return self.candidates[:count]


@dataclass
class GeolocationResult:
    """Final outcome of a geolocation run."""

    target: str
    candidates: list[LocationCandidate] = field(default_factory=list)
    phases: list[PhaseResult] = field(default_factory=list)
    anycast: bool = False

    @property
    def best(self) -> LocationCandidate | None:
        return self.candidates[0] if self.candidates else None
