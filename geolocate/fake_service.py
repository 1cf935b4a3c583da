"""Simulated probe service for offline runs and tests."""

import dataclasses
import itertools
import logging
import random
from dataclasses import dataclass
from typing import Any

from geolocate.errors import QuotaExceededError, ServiceRequestError
from geolocate.models import (
    FINISHED,
    IN_PROGRESS,
    MeasurementJob,
    MeasurementState,
    ProbeSample,
)
from geolocate.regions import CONTINENTS

logger = logging.getLogger(__name__)

_MAGIC_CONTINENTS = {c.magic: c.code for c in CONTINENTS}


@dataclass(frozen=True)
class FakeProbe:
    """A simulated vantage point and its true RTT to the target."""

    continent: str
    country: str
    city: str
    rtt: float
    state: str | None = None

    def matches(self, location: dict[str, Any]) -> bool:
        magic = location.get("magic")
        if magic is not None:
            magic = magic.lower()
            if magic in _MAGIC_CONTINENTS:
                return self.continent == _MAGIC_CONTINENTS[magic]
            if magic == "united states":
                return self.country == "US"
            return magic in (self.country.lower(), self.city.lower())

        if location.get("country") and location["country"] != self.country:
            return False
        if location.get("state") and location["state"] != self.state:
            return False
        return True


# A world as seen by a target hosted in Miami, Florida.
DEFAULT_PROBES = (
    FakeProbe("NA", "US", "Miami", 0.8, "FL"),
    FakeProbe("NA", "US", "West Palm Beach", 5.4, "FL"),
    FakeProbe("NA", "US", "Tampa", 5.8, "FL"),
    FakeProbe("NA", "US", "Atlanta", 14.2, "GA"),
    FakeProbe("NA", "US", "Ashburn", 27.5, "VA"),
    FakeProbe("NA", "US", "New York", 31.0, "NY"),
    FakeProbe("NA", "US", "Dallas", 33.6, "TX"),
    FakeProbe("NA", "US", "Los Angeles", 61.9, "CA"),
    FakeProbe("NA", "CA", "Toronto", 42.9),
    FakeProbe("NA", "MX", "Mexico City", 48.3),
    FakeProbe("SA", "CO", "Bogota", 60.2),
    FakeProbe("SA", "BR", "Sao Paulo", 110.4),
    FakeProbe("SA", "AR", "Buenos Aires", 128.7),
    FakeProbe("EU", "GB", "London", 98.1),
    FakeProbe("EU", "DE", "Frankfurt", 105.3),
    FakeProbe("EU", "ES", "Madrid", 112.6),
    FakeProbe("AF", "ZA", "Johannesburg", 240.8),
    FakeProbe("AF", "NG", "Lagos", 190.5),
    FakeProbe("AS", "JP", "Tokyo", 160.3),
    FakeProbe("AS", "SG", "Singapore", 225.9),
    FakeProbe("OC", "AU", "Sydney", 195.7),
    FakeProbe("OC", "NZ", "Auckland", 180.2),
)


class FakeProbeService:
    """Probe service that answers from a fixed, simulated set of probes."""

    def __init__(
        self,
        probes: tuple[FakeProbe, ...] | list[FakeProbe] = DEFAULT_PROBES,
        seed: int | None = None,
        polls_to_finish: int = 2,
        jitter: float = 0.5,
        loss_probability: float = 0.0,
        anycast: bool = False,
        fail_with: int | None = None,
    ):
        """Initialize the simulated service.

        Args:
            probes: Available probes
            seed: Random seed for deterministic behavior
            polls_to_finish: Status fetches before a measurement finishes
            jitter: Maximum extra latency added to each hop timing, in ms
            loss_probability: Chance that a probe returns an unusable trace
            anycast: Flag every measurement as targeting an anycast address
            fail_with: HTTP status every request fails with (e.g. 429)
        """
        if polls_to_finish < 1:
            raise ValueError("polls_to_finish must be at least 1")
        if not 0.0 <= loss_probability <= 1.0:
            raise ValueError("loss_probability must be between 0 and 1")

        # Isolated random instance, independent from the global one
        self._random = random.Random(seed)
        self.probes = tuple(probes)
        self.polls_to_finish = polls_to_finish
        self.jitter = jitter
        self.loss_probability = loss_probability
        self.anycast = anycast
        self.fail_with = fail_with

        self._ids = itertools.count(1)
        self._measurements: dict[str, list[ProbeSample]] = {}
        self._polls: dict[str, int] = {}
        self.created: list[list[dict[str, Any]]] = []

    async def create_measurement(
        self, target: str, locations: list[dict[str, Any]]
    ) -> MeasurementJob:
        self._maybe_fail("Failed to create measurement")
        self.created.append(locations)

        selected: list[FakeProbe] = []
        for location in locations:
            matching = [p for p in self.probes if p.matches(location) and p not in selected]
            selected.extend(matching[: location.get("limit", len(matching))])

        measurement_id = f"fake-{next(self._ids)}"
        self._measurements[measurement_id] = [self._sample(p) for p in selected]
        self._polls[measurement_id] = 0

        logger.debug(
            "Fake measurement created: id=%s, target=%s, probes=%d",
            measurement_id,
            target,
            len(selected),
        )
        return MeasurementJob(id=measurement_id, probes_count=len(selected), target=target)

    async def get_measurement(self, measurement_id: str) -> MeasurementState:
        self._maybe_fail("Failed to get measurement")
        if measurement_id not in self._measurements:
            raise ServiceRequestError(
                "Failed to get measurement",
                404,
                {"error": {"message": "Couldn't find the requested measurement."}},
            )

        self._polls[measurement_id] += 1
        polls = self._polls[measurement_id]
        entries = self._measurements[measurement_id]

        # Probes report back one after another over the first polls.
        if polls >= self.polls_to_finish:
            done = len(entries)
        else:
            done = len(entries) * polls // self.polls_to_finish
        samples = [
            sample if i < done else _pending(sample) for i, sample in enumerate(entries)
        ]

        return MeasurementState(
            id=measurement_id,
            status=FINISHED if done == len(entries) else IN_PROGRESS,
            samples=tuple(samples),
            anycast=self.anycast,
        )

    def _sample(self, probe: FakeProbe) -> ProbeSample:
        if self._random.random() < self.loss_probability:
            # Only the probe's own network answered
            hops: tuple[tuple[float, ...], ...] = ((0.3,), (1.1,), (), ())
        else:
            timings = tuple(
                round(probe.rtt + self._random.uniform(0, self.jitter), 2) for _ in range(3)
            )
            hops = ((0.3,), (1.1,), (max(0.01, probe.rtt / 2),), timings)

        return ProbeSample(
            continent=probe.continent,
            country=probe.country,
            state=probe.state,
            city=probe.city,
            status=FINISHED,
            hops=hops,
        )

    def _maybe_fail(self, failure: str) -> None:
        if self.fail_with is None:
            return
        if self.fail_with == 429:
            raise QuotaExceededError()
        raise ServiceRequestError(failure, self.fail_with, {"error": {"type": "simulated"}})


def _pending(sample: ProbeSample) -> ProbeSample:
    return dataclasses.replace(sample, status=IN_PROGRESS, hops=())
