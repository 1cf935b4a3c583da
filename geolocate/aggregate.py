"""Grouping of latency samples by location and ranking of the groups.

Groups are plain ``dict``s and therefore keep the order in which each key was
first observed. Every ranking below uses a stable sort, so two keys with
exactly the same metric value keep that first-observation order. Given the
same list of samples the outcome is always the same.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import NamedTuple

from geolocate.latency import extract_latency
from geolocate.models import ProbeSample

logger = logging.getLogger(__name__)

KeyFunc = Callable[[ProbeSample], str]


class RankMetric(Enum):
    """Statistic used to order location groups."""

    MIN = "min"
    AVERAGE = "avg"


class GroupStats(NamedTuple):
    key: str
    min_rtt: float
    avg_rtt: float
    count: int

    def value(self, metric: RankMetric) -> float:
        return self.avg_rtt if metric is RankMetric.AVERAGE else self.min_rtt


def aggregate_latencies(samples: Iterable[ProbeSample], key: KeyFunc) -> dict[str, list[float]]:
    """Group the usable latency of each sample under ``key(sample)``.

    Samples without a usable latency are dropped, so a key only appears once
    at least one of its samples produced a value.
    """
    groups: dict[str, list[float]] = {}
    dropped = 0

    for sample in samples:
        latency = extract_latency(sample)
        if latency is None:
            if sample.finished:
                dropped += 1
            continue
        groups.setdefault(key(sample), []).append(latency)

    if dropped:
        logger.debug("Dropped %d finished samples without usable latency", dropped)

    return groups


def summarize(rtts: list[float]) -> tuple[float, float]:
    """Return (minimum, mean) of a non-empty list of RTTs."""
    if not rtts:
        raise ValueError("cannot summarize an empty group")

    lowest = min(rtts)
    mean = sum(rtts) / len(rtts)
    # Float rounding can push the mean of identical values just below them.
    return lowest, max(mean, lowest)


def rank(groups: dict[str, list[float]], metric: RankMetric = RankMetric.MIN) -> list[GroupStats]:
    """Summarize every group and sort ascending by ``metric``."""
    stats = []
    for key, rtts in groups.items():
        if not rtts:
            continue
        lowest, mean = summarize(rtts)
        stats.append(GroupStats(key, lowest, mean, len(rtts)))

    return sorted(stats, key=lambda s: s.value(metric))


def leader(groups: dict[str, list[float]], metric: RankMetric) -> tuple[str, float] | None:
    """Return the currently best (key, value) pair, or None if nothing is ranked."""
    ranked = rank(groups, metric)
    if not ranked:
        return None

    best = ranked[0]
    return best.key, best.value(metric)
