"""Interpretation of ranked geolocation candidates."""

from dataclasses import dataclass

from geolocate.errors import NoDataError
from geolocate.models import LocationCandidate

# Upper bounds (exclusive, in ms) of the minimum RTT for each confidence label.
CONFIDENCE_LEVELS = (
    (1.0, "Very High"),
    (5.0, "High"),
    (20.0, "Medium"),
)
LOW_CONFIDENCE = "Low"

# Extra latency toward a claimed country beyond which it is considered fake.
VIRTUAL_LOCATION_THRESHOLD_MS = 20.0
# Same-country matches faster than this are always accepted.
GENUINE_LOCATION_THRESHOLD_MS = 5.0
# Rough fibre distance covered per millisecond of round-trip time.
KM_PER_MS = 100


@dataclass(frozen=True)
class Analysis:
    """Best guess derived from a ranked candidate list."""

    country: str
    city: str
    state: str | None
    confidence: str
    min_rtt: float
    ranked: list[LocationCandidate]


@dataclass(frozen=True)
class VirtualLocationCheck:
    is_virtual: bool
    actual_country: str
    distance: str = "N/A"


def classify_confidence(min_rtt: float) -> str:
    """Map the winner's minimum RTT to a qualitative confidence label.

    Examples:
        >>> classify_confidence(0.01)
        'Very High'
        >>> classify_confidence(5.38)
        'Medium'
    """
    for bound, label in CONFIDENCE_LEVELS:
        if min_rtt < bound:
            return label
    return LOW_CONFIDENCE


def _ranked(candidates: list[LocationCandidate]) -> list[LocationCandidate]:
    return sorted(candidates, key=lambda c: c.min_rtt)


def analyze_results(candidates: list[LocationCandidate]) -> Analysis:
    """Summarize the best candidate of a final phase.

    Raises:
        NoDataError: ``candidates`` is empty
    """
    if not candidates:
        raise NoDataError("No measurement results to analyze")

    ranked = _ranked(candidates)
    best = ranked[0]
    return Analysis(
        country=best.country,
        city=best.city,
        state=best.state,
        confidence=classify_confidence(best.min_rtt),
        min_rtt=best.min_rtt,
        ranked=ranked,
    )


def best_per_country(candidates: list[LocationCandidate]) -> dict[str, LocationCandidate]:
    """Fastest candidate of every country present in ``candidates``."""
    best: dict[str, LocationCandidate] = {}
    for candidate in candidates:
        current = best.get(candidate.country)
        if current is None or candidate.min_rtt < current.min_rtt:
            best[candidate.country] = candidate
    return best


def check_virtual_location(
    candidates: list[LocationCandidate], claimed_country: str
) -> VirtualLocationCheck:
    """Decide whether an address really sits in the country it claims.

    Hosting and VPN providers often advertise addresses as located in a
    country where they have no hardware. When some other country answers
    more than VIRTUAL_LOCATION_THRESHOLD_MS faster than the claimed one, the
    claim is reported as virtual along with a rough distance estimate.
    """
    if not candidates:
        raise NoDataError("No measurement results to analyze")

    best = _ranked(candidates)[0]
    if best.country == claimed_country and best.min_rtt < GENUINE_LOCATION_THRESHOLD_MS:
        return VirtualLocationCheck(is_virtual=False, actual_country=claimed_country)

    claimed = best_per_country(candidates).get(claimed_country)
    if best.country != claimed_country and claimed is not None:
        difference = claimed.min_rtt - best.min_rtt
        if difference > VIRTUAL_LOCATION_THRESHOLD_MS:
            return VirtualLocationCheck(
                is_virtual=True,
                actual_country=best.country,
                distance=f"~{round(difference * KM_PER_MS)}km",
            )

    return VirtualLocationCheck(is_virtual=False, actual_country=best.country)
