"""Narrowing phases: what each one measures, groups by and ranks by."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from itertools import chain
from typing import Any

from geolocate.aggregate import GroupStats, KeyFunc, RankMetric, aggregate_latencies, rank
from geolocate.models import LocationCandidate, MeasurementJob, PhaseResult, ProbeSample
from geolocate.poller import POLL_INTERVAL, NullReporter, Reporter, poll
from geolocate.regions import CONTINENTS, continent
from geolocate.service import ProbeService, country_location, magic_location

logger = logging.getLogger(__name__)

CONTINENT_PROBES = 5
SUMMARY_SIZE = 3
US = "US"
UNKNOWN = "Unknown"


class Phase(Enum):
    CONTINENT = "continent"
    COUNTRY = "country"
    STATE = "state"
    CITY = "city"


# The winner of the previous phase; None before the first phase.
Scope = LocationCandidate | None
LocationBuilder = Callable[[Scope, int], list[dict[str, Any]]]
CandidateBuilder = Callable[[GroupStats, Scope], LocationCandidate]


@dataclass(frozen=True)
class PhaseDescriptor:
    """Everything that differs between two narrowing phases.

    Attributes:
        phase: Phase identifier
        title: Human-readable description shown while the phase runs
        key: Grouping key applied to each probe sample
        metric: Statistic the phase ranks its groups by
        summary_size: Number of leading candidates to report, None for all
        locations: Builds the probe location filter from the previous winner
        candidate: Builds a LocationCandidate from one group's statistics
    """

    phase: Phase
    title: str
    key: KeyFunc
    metric: RankMetric
    summary_size: int | None
    locations: LocationBuilder
    candidate: CandidateBuilder


def _continent_locations(scope: Scope, limit: int) -> list[dict[str, Any]]:
    # Cheap global spread: the caller's limit is kept for the later phases.
    return [magic_location(c.magic, CONTINENT_PROBES) for c in CONTINENTS]


def _country_locations(scope: Scope, limit: int) -> list[dict[str, Any]]:
    entry = continent(scope.continent)
    if entry is None:
        raise ValueError(f"Unknown continent code: {scope.continent!r}")
    return [magic_location(entry.magic, limit)]


def _state_locations(scope: Scope, limit: int) -> list[dict[str, Any]]:
    return [magic_location("united states", limit)]


def _city_locations(scope: Scope, limit: int) -> list[dict[str, Any]]:
    return [country_location(scope.country, limit, scope.state)]


def _stats(stats: GroupStats) -> dict[str, Any]:
    return {"min_rtt": stats.min_rtt, "avg_rtt": stats.avg_rtt, "sample_count": stats.count}


CONTINENT_PHASE = PhaseDescriptor(
    phase=Phase.CONTINENT,
    title="Detecting continent",
    key=lambda sample: sample.continent,
    metric=RankMetric.AVERAGE,
    summary_size=None,
    locations=_continent_locations,
    candidate=lambda stats, scope: LocationCandidate(continent=stats.key, **_stats(stats)),
)

COUNTRY_PHASE = PhaseDescriptor(
    phase=Phase.COUNTRY,
    title="Detecting country",
    key=lambda sample: sample.country,
    metric=RankMetric.MIN,
    summary_size=SUMMARY_SIZE,
    locations=_country_locations,
    candidate=lambda stats, scope: LocationCandidate(
        continent=scope.continent, country=stats.key, **_stats(stats)
    ),
)

STATE_PHASE = PhaseDescriptor(
    phase=Phase.STATE,
    title="Detecting US state",
    key=lambda sample: sample.state or UNKNOWN,
    metric=RankMetric.MIN,
    summary_size=SUMMARY_SIZE,
    locations=_state_locations,
    candidate=lambda stats, scope: LocationCandidate(
        continent=scope.continent, country=US, state=stats.key, **_stats(stats)
    ),
)

CITY_PHASE = PhaseDescriptor(
    phase=Phase.CITY,
    title="Detecting city",
    key=lambda sample: sample.city or UNKNOWN,
    metric=RankMetric.MIN,
    summary_size=None,
    locations=_city_locations,
    candidate=lambda stats, scope: LocationCandidate(
        continent=scope.continent,
        country=scope.country,
        state=scope.state,
        city=stats.key,
        **_stats(stats),
    ),
)

DESCRIPTORS = {d.phase: d for d in (CONTINENT_PHASE, COUNTRY_PHASE, STATE_PHASE, CITY_PHASE)}


def build_candidates(
    descriptor: PhaseDescriptor, samples: list[ProbeSample], scope: Scope
) -> list[LocationCandidate]:
    """Group, summarize and rank the samples of one phase."""
    groups = aggregate_latencies(samples, descriptor.key)
    return [descriptor.candidate(stats, scope) for stats in rank(groups, descriptor.metric)]


class PhaseRunner:
    """Runs one narrowing phase at a time against a probe service."""

    def __init__(
        self,
        service: ProbeService,
        reporter: Reporter | None = None,
        interval: float = POLL_INTERVAL,
        deadline: float | None = None,
        split_continents: bool = False,
    ):
        """Initialize the runner.

        Args:
            service: Probe service shared by every phase
            reporter: Progress receiver
            interval: Seconds between status fetches
            deadline: Maximum seconds to wait for one phase's measurements
            split_continents: Create one measurement per continent concurrently
                instead of a single measurement with six locations
        """
        self.service = service
        self.reporter = reporter or NullReporter()
        self.interval = interval
        self.deadline = deadline
        self.split_continents = split_continents

    async def run(
        self,
        descriptor: PhaseDescriptor,
        target: str,
        scope: Scope,
        limit: int,
        number: int,
    ) -> PhaseResult:
        """Measure ``target`` for one phase and return its ranked candidates.

        An empty candidate list is a valid result; deciding what it means is
        left to the caller.
        """
        name = descriptor.phase.value
        locations = descriptor.locations(scope, limit)
        logger.info("Phase %d (%s) starting: target=%s, locations=%s", number, name, target, locations)

        jobs = await self._create(descriptor, target, locations)
        probes_count = sum(job.probes_count for job in jobs)
        self.reporter.phase_started(descriptor.title, number, probes_count)

        states = await poll(
            self.service,
            jobs,
            name,
            descriptor.key,
            descriptor.metric,
            reporter=self.reporter,
            interval=self.interval,
            deadline=self.deadline,
        )

        samples = list(chain.from_iterable(state.samples for state in states))
        candidates = build_candidates(descriptor, samples, scope)
        size = descriptor.summary_size

        result = PhaseResult(
            phase=name,
            number=number,
            candidates=candidates,
            probes_count=probes_count,
            highlights=candidates if size is None else candidates[:size],
            anycast=any(state.anycast for state in states),
        )

        if result.winner is None:
            logger.warning("Phase %d (%s) produced no candidates", number, name)
        else:
            logger.info(
                "Phase %d (%s) winner: %s (%d candidates)",
                number,
                name,
                result.winner.name,
                len(candidates),
            )

        self.reporter.phase_finished(result)
        return result

    async def _create(
        self, descriptor: PhaseDescriptor, target: str, locations: list[dict[str, Any]]
    ) -> list[MeasurementJob]:
        if self.split_continents and descriptor.phase is Phase.CONTINENT:
            # Independent sub-requests; all of them must exist before polling.
            jobs = await asyncio.gather(
                *(self.service.create_measurement(target, [location]) for location in locations)
            )
            return list(jobs)

        return [await self.service.create_measurement(target, locations)]
