"""Polling of in-flight measurements until they reach a terminal status."""

import asyncio
import logging
from collections.abc import Sequence
from itertools import chain
from typing import Protocol

from geolocate.aggregate import KeyFunc, RankMetric, aggregate_latencies, leader
from geolocate.errors import MeasurementTimeoutError
from geolocate.models import MeasurementJob, MeasurementState, PhaseResult, ProgressUpdate
from geolocate.service import ProbeService

logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0


class Reporter(Protocol):
    """Receiver of the progress stream of a geolocation run."""

    def phase_started(self, title: str, number: int, probes_count: int) -> None:
        ...

    def progress(self, update: ProgressUpdate) -> None:
        ...

    def phase_finished(self, result: PhaseResult) -> None:
        ...


class NullReporter:
    """Reporter that discards everything."""

    def phase_started(self, title: str, number: int, probes_count: int) -> None:
        pass

    def progress(self, update: ProgressUpdate) -> None:
        pass

    def phase_finished(self, result: PhaseResult) -> None:
        pass


async def poll(
    service: ProbeService,
    jobs: Sequence[MeasurementJob],
    phase: str,
    key: KeyFunc,
    metric: RankMetric,
    reporter: Reporter | None = None,
    interval: float = POLL_INTERVAL,
    deadline: float | None = None,
) -> list[MeasurementState]:
    """Fetch ``jobs`` repeatedly until none of them is in progress.

    After every round of fetches the samples returned so far are ranked with
    ``key`` and ``metric`` and a ProgressUpdate naming the current leader is
    sent to ``reporter``. Several jobs are fetched concurrently and treated as
    one measurement; the loop only ends once every one of them has finished.

    Service errors are not retried and propagate to the caller.

    Args:
        service: Probe service the jobs were created on
        jobs: Measurements to follow
        phase: Phase name used in progress updates
        key: Grouping key for provisional ranking
        metric: Ranking statistic for the provisional leader
        reporter: Progress receiver (defaults to NullReporter)
        interval: Seconds to sleep between fetch rounds
        deadline: Maximum seconds to wait in total, or None to wait forever

    Returns:
        Final state of each job, in the order of ``jobs``

    Raises:
        MeasurementTimeoutError: ``deadline`` expired before every job finished
    """
    if not jobs:
        raise ValueError("at least one measurement is required")
    if interval < 0:
        raise ValueError("interval cannot be negative")

    loop = _poll_loop(service, jobs, phase, key, metric, reporter or NullReporter(), interval)
    if deadline is None:
        return await loop

    try:
        return await asyncio.wait_for(loop, timeout=deadline)
    except asyncio.TimeoutError as e:
        ids = ", ".join(job.id for job in jobs)
        raise MeasurementTimeoutError(
            f"Measurement {ids} did not finish within {deadline:g}s"
        ) from e


async def _poll_loop(
    service: ProbeService,
    jobs: Sequence[MeasurementJob],
    phase: str,
    key: KeyFunc,
    metric: RankMetric,
    reporter: Reporter,
    interval: float,
) -> list[MeasurementState]:
    expected = sum(job.probes_count for job in jobs)
    best: tuple[str, float] | None = None
    rounds = 0

    while True:
        states = list(
            await asyncio.gather(*(service.get_measurement(job.id) for job in jobs))
        )
        rounds += 1

        samples = list(chain.from_iterable(state.samples for state in states))
        current = leader(aggregate_latencies(samples, key), metric)
        if current is not None:
            best = current

        finished = sum(state.finished_count for state in states)
        reporter.progress(
            ProgressUpdate(
                phase=phase,
                finished=finished,
                expected=expected,
                leader=best[0] if best else None,
                leader_rtt=best[1] if best else None,
            )
        )

        if not any(state.in_progress for state in states):
            logger.debug(
                "Polling done: phase=%s, rounds=%d, finished=%d/%d, statuses=%s",
                phase,
                rounds,
                finished,
                expected,
                [state.status for state in states],
            )
            return states

        await asyncio.sleep(interval)
