"""Tests for phase descriptors and the phase runner."""

import pytest

from geolocate.aggregate import RankMetric
from geolocate.models import LocationCandidate
from geolocate.phases import (
    CITY_PHASE,
    CONTINENT_PHASE,
    COUNTRY_PHASE,
    STATE_PHASE,
    PhaseRunner,
    build_candidates,
)
from tests.utils import RecordingReporter, ScriptedService, make_sample

NA = LocationCandidate(continent="NA", min_rtt=50.0, avg_rtt=57.23)
US = LocationCandidate(continent="NA", country="US", min_rtt=0.01, avg_rtt=0.015)
FL = LocationCandidate(continent="NA", country="US", state="FL", min_rtt=0.01, avg_rtt=0.01)
DE = LocationCandidate(continent="EU", country="DE", min_rtt=1.5, avg_rtt=3.0)


class TestLocationFilters:
    """Test the probe location filter of every phase."""

    def test_continent_phase_samples_every_continent(self):
        """Test one magic entry per continent with five probes each."""
        locations = CONTINENT_PHASE.locations(None, 50)

        assert [loc["magic"] for loc in locations] == [
            "africa", "asia", "europe", "north america", "oceania", "south america",
        ]
        assert all(loc["limit"] == 5 for loc in locations)

    def test_country_phase_scoped_to_continent(self):
        """Test the country phase uses the winning continent and the caller limit."""
        assert COUNTRY_PHASE.locations(NA, 80) == [{"magic": "north america", "limit": 80}]

    def test_country_phase_unknown_continent(self):
        """Test an unknown continent code cannot be measured."""
        with pytest.raises(ValueError, match="Unknown continent"):
            COUNTRY_PHASE.locations(LocationCandidate(continent="AN"), 50)

    def test_state_phase_scoped_to_united_states(self):
        """Test the state phase measures from the whole United States."""
        assert STATE_PHASE.locations(US, 50) == [{"magic": "united states", "limit": 50}]

    def test_city_phase_us_state(self):
        """Test the US city phase is scoped to country and state."""
        assert CITY_PHASE.locations(FL, 50) == [{"country": "US", "limit": 50, "state": "FL"}]

    def test_city_phase_country(self):
        """Test other city phases are scoped to the country only."""
        assert CITY_PHASE.locations(DE, 50) == [{"country": "DE", "limit": 50}]


class TestBuildCandidates:
    """Test grouping and ranking per phase."""

    def test_continent_ranked_by_average(self):
        """Test continents are ordered by average latency."""
        samples = [
            make_sample(10.0, continent="EU"),
            make_sample(200.0, continent="EU"),
            make_sample(50.0, continent="NA"),
        ]

        candidates = build_candidates(CONTINENT_PHASE, samples, None)

        assert CONTINENT_PHASE.metric is RankMetric.AVERAGE
        assert [c.continent for c in candidates] == ["NA", "EU"]
        assert candidates[1].min_rtt == 10.0
        assert candidates[1].avg_rtt == 105.0

    def test_country_candidates(self):
        """Test country candidates keep the continent of the scope."""
        samples = [
            make_sample(0.01, country="US"),
            make_sample(0.02, country="US"),
            make_sample(42.96, country="CA"),
        ]

        candidates = build_candidates(COUNTRY_PHASE, samples, NA)

        best = candidates[0]
        assert (best.continent, best.country, best.sample_count) == ("NA", "US", 2)
        assert best.min_rtt == 0.01
        assert best.avg_rtt == pytest.approx(0.015)
        assert candidates[1].country == "CA"

    def test_state_unknown(self):
        """Test probes without a state are grouped as Unknown."""
        samples = [make_sample(3.0, country="US", state=None), make_sample(1.0, country="US", state="FL")]

        candidates = build_candidates(STATE_PHASE, samples, US)

        assert [c.state for c in candidates] == ["FL", "Unknown"]
        assert all(c.country == "US" for c in candidates)

    def test_city_candidates_carry_scope(self):
        """Test city candidates inherit country and state from the scope."""
        samples = [make_sample(5.38, city="West Palm Beach"), make_sample(0.01, city=None)]

        candidates = build_candidates(CITY_PHASE, samples, FL)

        assert [c.city for c in candidates] == ["Unknown", "West Palm Beach"]
        assert candidates[0].state == "FL"
        assert candidates[0].country == "US"

    def test_no_usable_samples(self):
        """Test unusable samples produce no candidates."""
        samples = [make_sample(hops=((0.4,), (1.2,)))]
        assert build_candidates(COUNTRY_PHASE, samples, NA) == []


class TestPhaseRunner:
    """Test one phase end to end against a scripted service."""

    @pytest.mark.asyncio
    async def test_country_phase_reports_top_three(self):
        """Test the country phase highlights the top three candidates."""
        samples = [
            make_sample(rtt, country=code)
            for code, rtt in [("CA", 42.96), ("US", 0.01), ("MX", 30.0), ("GT", 55.0), ("US", 0.02)]
        ]
        service = ScriptedService([samples], rounds=2)
        reporter = RecordingReporter()

        result = await PhaseRunner(service, reporter, interval=0).run(
            COUNTRY_PHASE, "192.0.2.1", NA, 50, 2
        )

        assert result.phase == "country"
        assert result.number == 2
        assert result.winner.country == "US"
        assert result.winner.min_rtt == 0.01
        assert [c.country for c in result.candidates] == ["US", "MX", "CA", "GT"]
        assert [c.country for c in result.highlights] == ["US", "MX", "CA"]
        assert reporter.started == [("Detecting country", 2, 5)]
        assert len(reporter.updates) == 2
        assert reporter.finished == [result]

    @pytest.mark.asyncio
    async def test_city_phase_highlights_everything(self):
        """Test the terminal phase reports its full list."""
        samples = [make_sample(float(i + 1), city=f"City {i}") for i in range(5)]
        service = ScriptedService([samples])

        result = await PhaseRunner(service, interval=0).run(CITY_PHASE, "192.0.2.1", DE, 50, 3)

        assert len(result.highlights) == 5

    @pytest.mark.asyncio
    async def test_empty_phase_is_not_an_error(self):
        """Test a phase without usable samples returns no candidates."""
        service = ScriptedService([[make_sample(hops=())]])

        result = await PhaseRunner(service, interval=0).run(STATE_PHASE, "192.0.2.1", US, 50, 3)

        assert result.candidates == []
        assert result.winner is None

    @pytest.mark.asyncio
    async def test_single_combined_continent_request(self):
        """Test the continent phase creates one measurement with six locations."""
        service = ScriptedService([[make_sample(80.0, continent="EU")]])

        await PhaseRunner(service, interval=0).run(CONTINENT_PHASE, "192.0.2.1", None, 50, 1)

        assert len(service.created) == 1
        assert len(service.created[0][1]) == 6

    @pytest.mark.asyncio
    async def test_split_continent_requests(self):
        """Test split mode creates one measurement per continent and joins them."""
        script = [[make_sample(float(100 + i), continent=code)] for i, code in enumerate(
            ["AF", "AS", "EU", "NA", "OC", "SA"]
        )]
        service = ScriptedService(script, rounds=2)

        result = await PhaseRunner(service, interval=0, split_continents=True).run(
            CONTINENT_PHASE, "192.0.2.1", None, 50, 1
        )

        assert len(service.created) == 6
        assert all(len(locations) == 1 for _, locations in service.created)
        assert [c.continent for c in result.candidates] == ["AF", "AS", "EU", "NA", "OC", "SA"]
        assert result.probes_count == 6

    @pytest.mark.asyncio
    async def test_split_mode_only_affects_continents(self):
        """Test later phases still create a single measurement in split mode."""
        service = ScriptedService([[make_sample(1.0, country="US")]])

        await PhaseRunner(service, interval=0, split_continents=True).run(
            COUNTRY_PHASE, "192.0.2.1", NA, 50, 2
        )

        assert len(service.created) == 1
