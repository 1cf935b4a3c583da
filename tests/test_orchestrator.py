"""Tests for the phase state machine and complete runs."""

import io

import pytest

from geolocate.errors import NoDataError, QuotaExceededError
from geolocate.fake_service import FakeProbeService
from geolocate.models import LocationCandidate
from geolocate.orchestrator import Orchestrator, next_phase, run_measurements
from geolocate.phases import Phase
from geolocate.report import print_results
from tests.utils import RecordingReporter, ScriptedService, make_sample

CONTINENT_AVERAGES = {"EU": 123.12, "OC": 172.49, "NA": 57.23, "SA": 93.96, "AS": 167.03, "AF": 257.46}


def continent_samples(averages=CONTINENT_AVERAGES):
    return [make_sample(rtt, continent=code) for code, rtt in averages.items()]


def country_samples():
    return [
        make_sample(0.01, continent="NA", country="US"),
        make_sample(0.02, continent="NA", country="US"),
        make_sample(42.96, continent="NA", country="CA"),
    ]


def florida_samples():
    return [
        make_sample(0.01, country="US", state="FL"),
        make_sample(14.2, country="US", state="GA"),
    ]


def florida_city_samples():
    return [
        make_sample(5.80, country="US", state="FL", city="Tampa"),
        make_sample(0.01, country="US", state="FL", city="Miami"),
        make_sample(5.38, country="US", state="FL", city="West Palm Beach"),
    ]


class TestNextPhase:
    """Test the transition table."""

    def test_continent_to_country(self):
        """Test the continent phase is always followed by the country phase."""
        assert next_phase(Phase.CONTINENT, LocationCandidate(continent="EU")) is Phase.COUNTRY

    def test_us_enters_state_phase(self):
        """Test a US country winner leads to the state phase."""
        assert next_phase(Phase.COUNTRY, LocationCandidate(country="US")) is Phase.STATE

    @pytest.mark.parametrize("code", ["CA", "DE", "MX", "UA", "AU"])
    def test_other_countries_skip_state_phase(self, code):
        """Test any other country goes straight to the city phase."""
        assert next_phase(Phase.COUNTRY, LocationCandidate(country=code)) is Phase.CITY

    def test_state_to_city(self):
        """Test the state phase is followed by the city phase."""
        assert next_phase(Phase.STATE, LocationCandidate(country="US", state="FL")) is Phase.CITY

    def test_city_is_terminal(self):
        """Test nothing follows the city phase."""
        assert next_phase(Phase.CITY, LocationCandidate(city="Miami")) is None


class TestOrchestrator:
    """Test complete runs against scripted probe results."""

    @pytest.mark.asyncio
    async def test_us_run(self):
        """Test continent, country, state and city phases for a US target."""
        service = ScriptedService(
            [continent_samples(), country_samples(), florida_samples(), florida_city_samples()]
        )
        reporter = RecordingReporter()

        result = await Orchestrator(service, reporter=reporter, interval=0).run("192.0.2.1", 50)

        assert [p.phase for p in result.phases] == ["continent", "country", "state", "city"]
        assert [p.number for p in result.phases] == [1, 2, 3, 4]
        assert result.phases[0].winner.continent == "NA"
        assert result.phases[1].winner.country == "US"
        assert result.phases[1].winner.min_rtt == 0.01
        assert [c.city for c in result.candidates] == ["Miami", "West Palm Beach", "Tampa"]
        assert result.best.state == "FL"
        assert not result.anycast
        assert [loc for _, loc in service.created[1:]] == [
            [{"magic": "north america", "limit": 50}],
            [{"magic": "united states", "limit": 50}],
            [{"country": "US", "limit": 50, "state": "FL"}],
        ]
        assert [t for t, _, _ in reporter.started] == [
            "Detecting continent", "Detecting country", "Detecting US state", "Detecting city",
        ]

    @pytest.mark.asyncio
    async def test_non_us_run_skips_state_phase(self):
        """Test a non-US country goes directly to a country-scoped city phase."""
        service = ScriptedService(
            [
                continent_samples({"EU": 8.0, "NA": 90.0}),
                [make_sample(1.5, country="DE"), make_sample(9.0, country="NL")],
                [make_sample(1.5, country="DE", city="Frankfurt"), make_sample(6.0, country="DE", city="Berlin")],
            ]
        )

        result = await Orchestrator(service, interval=0).run("192.0.2.1", 30)

        assert [p.phase for p in result.phases] == ["continent", "country", "city"]
        assert service.created[1][1] == [{"magic": "europe", "limit": 30}]
        assert service.created[2][1] == [{"country": "DE", "limit": 30}]
        assert result.best.city == "Frankfurt"
        assert result.best.state is None

    @pytest.mark.asyncio
    async def test_no_continent_data_is_fatal(self):
        """Test a continent phase without candidates raises NoDataError."""
        service = ScriptedService([[make_sample(hops=((0.4,), (1.2,)))]])

        with pytest.raises(NoDataError, match="No successful measurements from any continent"):
            await Orchestrator(service, interval=0).run("192.0.2.1")

        assert len(service.created) == 1

    @pytest.mark.asyncio
    async def test_empty_country_phase_ends_run(self):
        """Test an empty country phase returns its empty result."""
        service = ScriptedService([continent_samples(), []])

        result = await Orchestrator(service, interval=0).run("192.0.2.1")

        assert result.candidates == []
        assert len(result.phases) == 2
        assert len(service.created) == 2

    @pytest.mark.asyncio
    async def test_empty_state_phase_not_replaced_by_country(self):
        """Test an empty state phase is returned instead of the country result."""
        service = ScriptedService([continent_samples(), country_samples(), []])

        result = await Orchestrator(service, interval=0).run("192.0.2.1")

        assert result.candidates == []
        assert [p.phase for p in result.phases] == ["continent", "country", "state"]
        assert len(service.created) == 3

    @pytest.mark.asyncio
    async def test_service_anycast_flag(self):
        """Test the service's anycast indicator marks the winner but keeps data."""
        service = ScriptedService(
            [continent_samples(), country_samples(), florida_samples(), florida_city_samples()],
            anycast=True,
        )

        result = await Orchestrator(service, interval=0).run("192.0.2.1")

        assert result.anycast
        assert result.best.is_anycast
        assert result.best.city == "Miami"
        assert len(result.candidates) == 3

    @pytest.mark.asyncio
    async def test_invalid_limit(self):
        """Test a probe limit below one is rejected before any request."""
        service = ScriptedService([])

        with pytest.raises(ValueError):
            await Orchestrator(service, interval=0).run("192.0.2.1", 0)

        assert service.created == []


class TestAnycast:
    """Test that only the service's indicator marks a run as anycast."""

    @pytest.mark.asyncio
    async def test_fast_edge_hops_are_not_anycast(self):
        """Test a target silent past its provider edge is still located normally."""
        edge_hops = ((0.3,), (1.1,), (2.4,), (), (), ())
        service = ScriptedService(
            [
                [make_sample(continent=code, hops=edge_hops) for code in CONTINENT_AVERAGES],
                [make_sample(country="DE", hops=edge_hops)],
                [make_sample(country="DE", city="Frankfurt", hops=edge_hops)],
            ]
        )

        result = await Orchestrator(service, interval=0).run("192.0.2.1")
        out = io.StringIO()
        print_results(result, out)

        assert [p.anycast for p in result.phases] == [False, False, False]
        assert not result.anycast
        assert not result.best.is_anycast
        assert "anycast" not in out.getvalue()
        assert "SUMMARY" in out.getvalue()


class TestRunMeasurements:
    """Test complete runs against the simulated probe service."""

    @pytest.mark.asyncio
    async def test_fake_world_finds_miami(self):
        """Test the default simulated world locates its Miami target."""
        service = FakeProbeService(seed=1)

        result = await run_measurements(service, "192.0.2.10", 50, interval=0)

        assert [p.phase for p in result.phases] == ["continent", "country", "state", "city"]
        assert result.best.city == "Miami"
        assert result.best.state == "FL"
        assert result.best.country == "US"

    @pytest.mark.asyncio
    async def test_split_continents_with_fake_world(self):
        """Test split continent requests reach the same answer."""
        service = FakeProbeService(seed=2)

        result = await run_measurements(
            service, "192.0.2.10", 50, interval=0, split_continents=True
        )

        assert len(service.created[0]) == 1
        assert result.phases[0].winner.continent == "NA"
        assert result.best.city == "Miami"

    @pytest.mark.asyncio
    async def test_quota_error_aborts_run(self):
        """Test a rate-limited service aborts the whole run."""
        with pytest.raises(QuotaExceededError):
            await run_measurements(FakeProbeService(fail_with=429), "192.0.2.10", interval=0)
