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
"""Tests for the live match phase orchestrator, commentary and result simulation."""

import pytest

from scoutlens.engine.commentary import FALLBACK_TEMPLATE, TARGET_SUFFIX, generate_commentary
from scoutlens.engine.events import EVENT_ELIGIBLE_POSITIONS
from scoutlens.engine.match_phases import _injury_chain, generate_match_phases, simulate_match_result
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.tactics import calculate_tactical_matchup
from scoutlens.models.match import MatchResult, TacticalStyle
from scoutlens.utils.debug import SessionDebugger

LINEUP = ("GK", "CB", "CB", "LB", "RB", "CDM", "CM", "CAM", "LW", "RW", "ST")


@pytest.fixture
def sides(make_player):
    home = [make_player(f"h{i}", position=pos, current_ability=120) for i, pos in enumerate(LINEUP)]
    away = [make_player(f"a{i}", position=pos, current_ability=90) for i, pos in enumerate(LINEUP)]
    return home, away


class TestGenerateMatchPhases:
    """Structure of generated phases."""

    def test_empty_rosters(self) -> None:
        assert generate_match_phases(SeededRandom("empty"), [], []) == []

    def test_phase_invariants(self, sides) -> None:
        home, away = sides
        positions = {p.player_id: p.position for p in home + away}
        phases = generate_match_phases(SeededRandom("match"), home, away)
        assert 12 <= len(phases) <= 18
        minutes = [phase.minute for phase in phases]
        assert minutes == sorted(minutes)
        assert all(1 <= m <= 89 for m in minutes)
        for phase in phases:
            assert phase.events
            assert 0 <= phase.momentum <= 100
            assert set(phase.involved_player_ids) <= set(positions)
            revealed = [a for event in phase.events for a in event.attributes_revealed]
            assert phase.observable_attributes == tuple(dict.fromkeys(revealed))
            if phase.set_piece_variant == "penalty":
                assert len(phase.events) == 1
            for event in phase.events:
                assert 1 <= event.quality <= 10
                if event.event_type not in ("injury", "substitution"):
                    assert positions[event.player_id] in EVENT_ELIGIBLE_POSITIONS[event.event_type]

    def test_deterministic(self, sides) -> None:
        home, away = sides
        first = generate_match_phases(SeededRandom("replay"), home, away, weather="rain")
        second = generate_match_phases(SeededRandom("replay"), home, away, weather="rain")
        assert first == second

    def test_scouted_player_flagged_in_commentary(self, sides) -> None:
        home, away = sides
        targets = {p.player_id for p in home}
        phases = generate_match_phases(SeededRandom("target"), home, away, scouted_player_ids=targets)
        for event in (e for phase in phases for e in phase.events):
            assert (TARGET_SUFFIX in event.description) == (event.player_id in targets)

    def test_matchup_and_debugger(self, sides) -> None:
        home, away = sides
        debugger = SessionDebugger(output_dir=None)
        matchup = calculate_tactical_matchup(TacticalStyle("high_press"), TacticalStyle("possession_based"))
        phases = generate_match_phases(SeededRandom("tactics"), home, away, matchup=matchup, debugger=debugger)
        assert phases
        assert any("phases" in line for line in debugger.get_recent_events())

    def test_injury_chain(self, make_player) -> None:
        injury, substitution = _injury_chain(make_player("x"), 89, True)
        assert (injury.event_type, injury.minute) == ("injury", 90)
        assert (substitution.event_type, substitution.minute) == ("substitution", 90)
        assert TARGET_SUFFIX in injury.description


class TestSimulateMatchResult:
    """Score simulation."""

    def test_scores_and_scorers(self, sides) -> None:
        home, away = sides
        rng = SeededRandom("scores")
        for _ in range(50):
            result = simulate_match_result(rng, home, away)
            assert 0 <= result.home_goals <= 6
            assert 0 <= result.away_goals <= 6
            home_scorers = [g for g in result.scorers if g.side == "home"]
            away_scorers = [g for g in result.scorers if g.side == "away"]
            assert len(home_scorers) == result.home_goals
            assert len(away_scorers) == result.away_goals
            for scorers in (home_scorers, away_scorers):
                minutes = [g.minute for g in scorers]
                assert minutes == sorted(minutes)
                assert len(set(minutes)) == len(minutes)

    def test_stronger_home_side_wins_more(self, sides) -> None:
        home, away = sides
        rng = SeededRandom("balance")
        results = [simulate_match_result(rng, home, away) for _ in range(300)]
        home_wins = sum(1 for r in results if r.winner == "home")
        away_wins = sum(1 for r in results if r.winner == "away")
        assert home_wins > away_wins

    def test_winner(self) -> None:
        assert MatchResult(2, 1).winner == "home"
        assert MatchResult(0, 3).winner == "away"
        assert MatchResult(1, 1).winner is None


class TestCommentary:
    """Template lookup."""

    def test_unknown_event_uses_fallback(self) -> None:
        assert generate_commentary("juggling", 12, "Ada") == FALLBACK_TEMPLATE.format(minute=12, player="Ada")

    def test_secondary_templates_skipped_without_secondary(self) -> None:
        for minute in range(10):
            assert "{secondary}" not in generate_commentary("pass", minute, "Ada")
            assert not generate_commentary("pass", minute, "Ada").endswith(" .")

    def test_target_suffix(self) -> None:
        line = generate_commentary("goal", 30, "Ada", is_scouting_target=True)
        assert f"Ada{TARGET_SUFFIX}" in line
        assert line.startswith("30'")
