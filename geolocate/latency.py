"""Latency extraction from traceroute probe results."""

from geolocate.models import ProbeSample

# Hops before this index are the probe's own network and are ignored by the
# validity check.
FIRST_REMOTE_HOP = 2


def _positive(timings) -> list[float]:
    return [rtt for rtt in timings if rtt is not None and rtt > 0]


def extract_latency(sample: ProbeSample) -> float | None:
    """Derive one representative RTT from a finished traceroute (pure function).

    A sample is only trusted when some hop from the third onward answered
    with a positive timing. When it is, the hops are scanned from the last
    one backward and the minimum positive timing of the first hop that
    answered is returned; that hop is the closest one to the target that
    the trace reached.

    Zero and negative timings mean the hop did not respond and are never
    treated as latency.

    Args:
        sample: Probe result to inspect

    Returns:
        Latency in milliseconds, or None if the sample has no usable value

    Examples:
        >>> extract_latency(ProbeSample("EU", "DE", None, "Berlin", "finished",
        ...                             ((0.4,), (1.1,), (9.2, 8.7))))
        8.7
    """
    if not sample.finished or not sample.hops:
        return None

    hops = sample.hops
    if not any(_positive(hop) for hop in hops[FIRST_REMOTE_HOP:]):
        return None

    for hop in reversed(hops):
        rtts = _positive(hop)
        if rtts:
            return min(rtts)

    return None
