# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Tests for full observation phase population and phase narratives."""

from dataclasses import replace

import pytest

from scoutlens.engine.atmosphere import create_venue_atmosphere
from scoutlens.engine.observation import (
    GENERIC_MATCH_DESCRIPTIONS,
    VENUE_DESCRIPTIONS,
    generate_phase_description,
    get_phase_segment,
    populate_full_observation_phases,
    populate_session_phases,
)
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import create_session, is_populated, start_session
from scoutlens.models.session import SessionSetup
from scoutlens.utils.debug import SessionDebugger


@pytest.fixture
def pool(make_player):
    return tuple(make_player(f"p{i}") for i in range(1, 5))


def _session(pool, activity_type: str = "school_match", seed: str = "obs"):
    setup = SessionSetup(activity_type=activity_type, seed=seed, week=1, season=1, player_pool=pool)
    return create_session(setup, SeededRandom(seed))


class TestSegments:
    """Early, mid and late thirds."""

    def test_segments_for_nine_phases(self) -> None:
        segments = [get_phase_segment(i, 9) for i in range(9)]
        assert segments == ["early"] * 3 + ["mid"] * 3 + ["late"] * 3

    def test_single_phase_is_early(self) -> None:
        assert get_phase_segment(0, 1) == "early"

    def test_venue_bank_used_by_segment(self) -> None:
        line = generate_phase_description("street_football", 8, 9, 90, SeededRandom("desc"))
        assert line in VENUE_DESCRIPTIONS["street_football"]["late"]

    def test_generic_bank_by_minute(self) -> None:
        line = generate_phase_description("unknown_venue", 3, 9, 52, SeededRandom("generic"))
        assert line in GENERIC_MATCH_DESCRIPTIONS[45]


class TestPopulate:
    """Population of session skeletons."""

    def test_populates_every_phase(self, pool) -> None:
        session = _session(pool)
        populated = populate_full_observation_phases(session, SeededRandom("fill"))
        assert populated.state == "setup"
        assert populated.venue_atmosphere is not None
        assert populated.venue_atmosphere.venue_type == "school_match"
        for phase in populated.phases:
            assert 3 <= len(phase.moments) <= 6
            assert phase.description
        events = [p.atmosphere_event for p in populated.phases if p.atmosphere_event is not None]
        assert list(populated.venue_atmosphere.events) == events

    def test_deterministic(self, pool) -> None:
        first = populate_full_observation_phases(_session(pool), SeededRandom("same"))
        second = populate_full_observation_phases(_session(pool), SeededRandom("same"))
        assert first == second

    def test_existing_atmosphere_is_kept(self, pool) -> None:
        rng = SeededRandom("keep")
        atmosphere = create_venue_atmosphere("street_football", rng)
        session = _session(pool)
        populated = populate_full_observation_phases(replace(session, venue_atmosphere=atmosphere), rng)
        assert populated.venue_atmosphere.weather == atmosphere.weather
        assert populated.venue_atmosphere.venue_type == "street_football"

    def test_guards(self, pool) -> None:
        rng = SeededRandom("guards")
        active = start_session(_session(pool))
        assert populate_full_observation_phases(active, rng) is active
        analysis = _session(pool, "watch_video")
        assert populate_full_observation_phases(analysis, rng) is analysis
        empty = _session(())
        assert populate_full_observation_phases(empty, rng) is empty

    def test_populated_session_is_not_refilled(self, pool) -> None:
        for seed in ("refill", "0"):
            once = populate_full_observation_phases(_session(pool, "street_football", seed), SeededRandom(seed))
            twice = populate_full_observation_phases(once, SeededRandom(seed))
            assert twice is once
            events = [p.atmosphere_event for p in twice.phases if p.atmosphere_event is not None]
            assert list(twice.venue_atmosphere.events) == events

    def test_description_alone_marks_populated(self, pool) -> None:
        session = _session(pool)
        touched = replace(session, phases=(replace(session.phases[0], description="Kick-off."),) + session.phases[1:])
        assert is_populated(touched)
        assert not is_populated(session)
        assert populate_full_observation_phases(touched, SeededRandom("touched")) is touched

    def test_debugger_records_events(self, pool) -> None:
        debugger = SessionDebugger(output_dir=None)
        populated = populate_full_observation_phases(_session(pool, seed="debug"), SeededRandom("debug"), debugger)
        logged = [line for line in debugger.get_recent_events(limit=200) if "SESSION_EVENT" in line]
        assert len(logged) == len(populated.venue_atmosphere.events)


class TestPopulateByMode:
    """Routing of session skeletons to the populator for their mode."""

    @pytest.mark.parametrize(
        ("activity", "field"),
        [
            ("school_match", "moments"),
            ("follow_up_session", "dialogue_nodes"),
            ("watch_video", "data_points"),
            ("stats_briefing", "choices"),
        ],
    )
    def test_mode_content(self, pool, activity, field) -> None:
        populated = populate_session_phases(_session(pool, activity), SeededRandom(activity))
        assert all(getattr(phase, field) for phase in populated.phases)
        assert is_populated(populated)
        assert populate_session_phases(populated, SeededRandom(activity)) is populated

    def test_routes_to_the_same_result(self, pool) -> None:
        direct = populate_full_observation_phases(_session(pool), SeededRandom("route"))
        routed = populate_session_phases(_session(pool), SeededRandom("route"))
        assert routed == direct
