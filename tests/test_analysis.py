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
"""Tests for analysis data point population."""

import pytest

from scoutlens.engine.analysis import (
    DATA_POINT_TEMPLATES,
    PHASE_DESCRIPTIONS,
    generate_data_points,
    get_analysis_phase_description,
    populate_analysis_phases,
    sample_templates,
)
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import create_session, start_session
from scoutlens.models.session import SessionPlayer, SessionSetup
from scoutlens.utils.debug import SessionDebugger


@pytest.fixture
def pool(make_player):
    return tuple(make_player(f"p{i}") for i in range(1, 4))


@pytest.fixture
def players():
    return tuple(SessionPlayer(player_id=f"p{i}", name=f"Player p{i}", position="CM") for i in range(1, 4))


def _session(pool, activity_type: str = "watch_video", seed: str = "data"):
    setup = SessionSetup(activity_type=activity_type, seed=seed, week=2, season=1, player_pool=pool)
    return create_session(setup, SeededRandom(seed))


class TestSampling:
    """Template sampling without replacement."""

    def test_distinct_templates(self) -> None:
        bank = DATA_POINT_TEMPLATES["database_query"]
        chosen = sample_templates(bank, 8, SeededRandom("sample"))
        assert len(chosen) == 8
        assert len({t.label for t in chosen}) == 8

    def test_count_capped_at_bank_size(self) -> None:
        bank = DATA_POINT_TEMPLATES["algorithm_calibration"]
        assert len(sample_templates(bank, 50, SeededRandom("cap"))) == len(bank)
        assert sample_templates((), 3, SeededRandom("none")) == []


class TestDataPoints:
    """Per-phase data point generation."""

    def test_counts_grow_in_later_phases(self, players) -> None:
        rng = SeededRandom("counts")
        for _ in range(20):
            assert 3 <= len(generate_data_points(rng, "watch_video", 0, players)) <= 6
            assert 3 <= len(generate_data_points(rng, "watch_video", 3, players)) <= 8

    def test_low_roll_gives_minimum_highlighted_and_bound(self, fixed_rng, players) -> None:
        points = generate_data_points(fixed_rng(0.0), "deep_video_analysis", 0, players)
        assert len(points) == 3
        assert all(point.is_highlighted for point in points)
        assert all(point.player_id == "p1" for point in points)

    def test_anomalies_always_highlighted(self, players) -> None:
        rng = SeededRandom("anomaly")
        points = [p for _ in range(30) for p in generate_data_points(rng, "watch_video", 0, players)]
        anomalies = [p for p in points if p.category == "anomaly"]
        assert anomalies
        assert all(p.is_highlighted for p in anomalies)

    def test_aggregates_are_never_bound(self, players) -> None:
        rng = SeededRandom("aggregate")
        for _ in range(20):
            for point in generate_data_points(rng, "algorithm_calibration", 2, players):
                assert point.player_id is None
                assert point.related_attributes == ()

    def test_bound_points_name_session_players(self, players) -> None:
        rng = SeededRandom("bind")
        points = [p for _ in range(20) for p in generate_data_points(rng, "opposition_analysis", 1, players)]
        bound = {p.player_id for p in points if p.player_id is not None}
        assert bound and bound <= {"p1", "p2", "p3"}

    def test_no_players_means_no_binding(self) -> None:
        points = generate_data_points(SeededRandom("alone"), "watch_video", 0, ())
        assert all(point.player_id is None for point in points)

    def test_unknown_activity_uses_database_bank(self, players) -> None:
        labels = {t.label for t in DATA_POINT_TEMPLATES["database_query"]}
        points = generate_data_points(SeededRandom("fallback"), "crystal_ball", 0, players)
        assert {p.label for p in points} <= labels

    def test_ids_are_slugged(self, fixed_rng, players) -> None:
        points = generate_data_points(fixed_rng(0.0), "database_query", 2, players)
        assert points[0].point_id.startswith("dp-p2-0-")
        assert len({p.point_id for p in points}) == len(points)


class TestDescriptions:
    """Analysis phase narrative."""

    def test_bank_slot_by_phase(self) -> None:
        line = get_analysis_phase_description("watch_video", 1, SeededRandom("d"))
        assert line in PHASE_DESCRIPTIONS["watch_video"][1]

    def test_last_slot_reused(self) -> None:
        line = get_analysis_phase_description("algorithm_calibration", 9, SeededRandom("d"))
        assert line in PHASE_DESCRIPTIONS["algorithm_calibration"][-1]

    def test_generic_line(self) -> None:
        line = get_analysis_phase_description("crystal_ball", 0, SeededRandom("d"))
        assert line.startswith("Analysis phase 1.")


class TestPopulateAnalysis:
    """Data points on analysis sessions."""

    def test_every_phase_has_points(self, pool) -> None:
        populated = populate_analysis_phases(_session(pool), SeededRandom("fill"))
        assert populated.state == "setup"
        assert populated.venue_atmosphere is None
        for phase in populated.phases:
            assert phase.data_points
            assert phase.description
            assert phase.moments == ()

    def test_deterministic(self, pool) -> None:
        first = populate_analysis_phases(_session(pool), SeededRandom("same"))
        second = populate_analysis_phases(_session(pool), SeededRandom("same"))
        assert first == second

    def test_guards(self, pool) -> None:
        rng = SeededRandom("guards")
        match = _session(pool, "school_match")
        assert populate_analysis_phases(match, rng) is match
        active = start_session(_session(pool))
        assert populate_analysis_phases(active, rng) is active
        once = populate_analysis_phases(_session(pool), rng)
        assert populate_analysis_phases(once, rng) is once

    def test_debugger_records_each_phase(self, pool) -> None:
        debugger = SessionDebugger(output_dir=None)
        populated = populate_analysis_phases(_session(pool), SeededRandom("debug"), debugger)
        logged = [line for line in debugger.get_recent_events(limit=50) if "data points" in line]
        assert len(logged) == len(populated.phases)
