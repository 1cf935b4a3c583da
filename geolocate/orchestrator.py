"""Phase sequencing for a complete geolocation run.

    Continent -> Country -> (winner is US ? State : skip) -> City -> Done

Each phase is scoped by the winner of the phase before it. An empty phase
result after the continent phase ends the run with that empty result.
"""

import dataclasses
import logging

from geolocate.errors import NoDataError
from geolocate.models import GeolocationResult, LocationCandidate
from geolocate.phases import DESCRIPTORS, US, Phase, PhaseRunner
from geolocate.poller import POLL_INTERVAL, Reporter
from geolocate.service import ProbeService

logger = logging.getLogger(__name__)

DEFAULT_PROBE_LIMIT = 50


def next_phase(phase: Phase, winner: LocationCandidate) -> Phase | None:
    """Transition table of the narrowing state machine.

    Returns:
        The phase to run after ``phase`` was won by ``winner``, or None when
        ``phase`` is terminal
    """
    if phase is Phase.CONTINENT:
        return Phase.COUNTRY
    if phase is Phase.COUNTRY:
        return Phase.STATE if winner.country == US else Phase.CITY
    if phase is Phase.STATE:
        return Phase.CITY
    return None


class Orchestrator:
    """Runs the narrowing phases in sequence for one target."""

    def __init__(
        self,
        service: ProbeService,
        reporter: Reporter | None = None,
        interval: float = POLL_INTERVAL,
        deadline: float | None = None,
        split_continents: bool = False,
    ):
        self.runner = PhaseRunner(
            service,
            reporter=reporter,
            interval=interval,
            deadline=deadline,
            split_continents=split_continents,
        )

    async def run(self, target: str, limit: int = DEFAULT_PROBE_LIMIT) -> GeolocationResult:
        """Geolocate ``target``.

        Args:
            target: IP address to locate
            limit: Probe count for every phase after the continent phase

        Returns:
            The ranked candidates of the last phase that ran

        Raises:
            NoDataError: No continent produced a usable measurement
            QuotaExceededError: The probe service rate limited a request
            ServiceRequestError: The probe service failed a request
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        outcome = GeolocationResult(target=target)
        phase: Phase | None = Phase.CONTINENT
        scope: LocationCandidate | None = None
        number = 0

        while phase is not None:
            number += 1
            result = await self.runner.run(DESCRIPTORS[phase], target, scope, limit, number)
            outcome.phases.append(result)
            outcome.candidates = result.candidates
            outcome.anycast = outcome.anycast or result.anycast

            if phase is Phase.CONTINENT and result.winner is None:
                raise NoDataError("No successful measurements from any continent")

            scope = result.winner
            if scope is None:
                logger.info("Stopping after phase %d (%s): no candidates", number, phase.value)
                break

            phase = next_phase(phase, scope)

        if outcome.anycast and outcome.candidates:
            best = dataclasses.replace(outcome.candidates[0], is_anycast=True)
            outcome.candidates = [best] + outcome.candidates[1:]

        return outcome


async def run_measurements(
    service: ProbeService,
    target: str,
    limit: int = DEFAULT_PROBE_LIMIT,
    reporter: Reporter | None = None,
    **options,
) -> GeolocationResult:
    """Convenience wrapper: build an Orchestrator and run it once."""
    return await Orchestrator(service, reporter=reporter, **options).run(target, limit)
