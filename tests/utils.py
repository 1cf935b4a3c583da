from typing import Any

from geolocate.models import (
    FINISHED,
    IN_PROGRESS,
    MeasurementJob,
    MeasurementState,
    ProbeSample,
)


def make_sample(
    rtt: float | None = None,
    continent: str = "EU",
    country: str = "DE",
    state: str | None = None,
    city: str | None = "Berlin",
    status: str = FINISHED,
    hops: tuple | None = None,
) -> ProbeSample:
    """Sample whose last hop answered with ``rtt`` (or with ``hops`` verbatim)."""
    if hops is None:
        hops = ((0.4,), (1.2,), (rtt,)) if rtt is not None else ()
    return ProbeSample(
        continent=continent,
        country=country,
        state=state,
        city=city,
        status=status,
        hops=hops,
    )


class ScriptedService:
    """Probe service replaying one prepared list of samples per measurement.

    Measurement N (in creation order) returns ``script[N]``. The first
    ``rounds - 1`` fetches report the measurement as in progress with no
    finished samples.
    """

    def __init__(self, script: list[list[ProbeSample]], rounds: int = 1, anycast: bool = False):
        self.script = list(script)
        self.rounds = rounds
        self.anycast = anycast
        self.created: list[tuple[str, list[dict[str, Any]]]] = []
        self.fetches: dict[str, int] = {}
        self._samples: dict[str, list[ProbeSample]] = {}

    async def create_measurement(self, target, locations):
        measurement_id = f"m{len(self.created) + 1}"
        self.created.append((target, locations))
        self._samples[measurement_id] = self.script.pop(0) if self.script else []
        self.fetches[measurement_id] = 0
        return MeasurementJob(
            id=measurement_id,
            probes_count=len(self._samples[measurement_id]),
            target=target,
        )

    async def get_measurement(self, measurement_id):
        self.fetches[measurement_id] += 1
        if self.fetches[measurement_id] < self.rounds:
            return MeasurementState(id=measurement_id, status=IN_PROGRESS)
        return MeasurementState(
            id=measurement_id,
            status=FINISHED,
            samples=tuple(self._samples[measurement_id]),
            anycast=self.anycast,
        )


class RecordingReporter:
    """Reporter keeping every event it receives."""

    def __init__(self):
        self.started = []
        self.updates = []
        self.finished = []

    def phase_started(self, title, number, probes_count):
        self.started.append((title, number, probes_count))

    def progress(self, update):
        self.updates.append(update)

    def phase_finished(self, result):
        self.finished.append(result)
