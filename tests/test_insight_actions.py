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
"""Tests for the twelve Insight action handlers."""

from dataclasses import replace

import pytest

from scoutlens.engine.rng import SeededRandom
from scoutlens.insight.actions import (
    ACTION_HANDLERS,
    execute_insight_action,
    talent_tier,
)
from scoutlens.insight.catalog import INSIGHT_ACTIONS
from scoutlens.insight.results import (
    ActionContext,
    AttributeRevealPayload,
    DiscoveryPayload,
    HiddenNaturePayload,
)
from scoutlens.models.player import HIDDEN_ATTRIBUTES, POSITIONS, VISIBLE_ATTRIBUTES
from scoutlens.models.scout import Contact
from scoutlens.models.session import FocusTokenState, ObservationSession, PlayerMoment, SessionPhase, SessionPlayer
from scoutlens.utils.debug import SessionDebugger


def _moment(player_id: str, quality: int, attributes=(), index: int = 0) -> PlayerMoment:
    return PlayerMoment(
        moment_id=f"m_{player_id}_{index}",
        player_id=player_id,
        moment_type="technical_action",
        quality=quality,
        attributes_hinted=tuple(attributes),
        description="A moment.",
        vague_description="Something happened.",
        pressure_context=False,
        is_standout=False,
    )


def _session(players, moments) -> ObservationSession:
    return ObservationSession(
        session_id="sess_1",
        mode="full_observation",
        activity_type="school_match",
        specialization=None,
        state="reflection",
        phases=(SessionPhase(index=0, minute=0, moments=tuple(moments)),),
        focus_tokens=FocusTokenState(available=3, total=3),
        players=tuple(players),
        started_at_week=1,
        started_at_season=1,
    )


def _player(player_id: str, focused: bool = False) -> SessionPlayer:
    return SessionPlayer(player_id, f"Player {player_id}", "CM", focused_phases=(0,) if focused else ())


@pytest.fixture
def records(make_player):
    return {
        "p1": make_player("p1", potential_ability=120, passing=15, vision=17, pace=6, composure=14, leadership=3),
        "p2": make_player("p2", potential_ability=185, pace=19, strength=12),
        "p3": make_player("p3", potential_ability=90, vision=4),
    }


@pytest.fixture
def session():
    players = (_player("p1", focused=True), _player("p2"), _player("p3"))
    moments = (
        _moment("p1", 9, ("passing", "vision"), 0),
        _moment("p2", 8, ("pace",), 1),
        _moment("p2", 6, ("strength", "pace"), 2),
        _moment("p3", 5, ("vision",), 3),
    )
    return _session(players, moments)


@pytest.fixture
def context(scout, session, records):
    return ActionContext(scout=scout, session=session, players=records, target_player_id="p1")


class TestTalentTier:
    """Potential ability thresholds."""

    @pytest.mark.parametrize(
        "potential, tier",
        [(200, "generational"), (180, "generational"), (179, "world_class"), (150, "world_class"),
         (100, "quality_pro"), (99, "journeyman"), (1, "journeyman")],
    )
    def test_tiers(self, potential: int, tier: str) -> None:
        assert talent_tier(potential) == tier


class TestRegistry:
    """Every catalog action has a handler."""

    def test_handlers_cover_catalog(self) -> None:
        assert set(ACTION_HANDLERS) == {action.action_id for action in INSIGHT_ACTIONS}
        assert len(ACTION_HANDLERS) == 12

    def test_unknown_action_raises(self, context) -> None:
        with pytest.raises(ValueError):
            execute_insight_action("mind_reading", context, False, SeededRandom("x"))

    def test_execution_is_logged(self, context) -> None:
        debugger = SessionDebugger(output_dir=None)
        execute_insight_action("the_verdict", context, False, SeededRandom("log"), debugger)
        line = debugger.get_recent_events(1)[0]
        assert "INSIGHT_EVENT" in line
        assert "Action: the_verdict" in line
        assert "success" in line

    def test_same_seed_same_result(self, context) -> None:
        first = execute_insight_action("clarity_of_vision", context, False, SeededRandom("repeat"))
        second = execute_insight_action("clarity_of_vision", context, False, SeededRandom("repeat"))
        assert first == second


class TestNarrative:
    """Narrative voice follows the specialization."""

    def test_specialised_scout_gets_flavour_prefix(self, context) -> None:
        youth_context = replace(context, scout=replace(context.scout, specialization="youth"))
        result = execute_insight_action("generational_whisper", youth_context, False, SeededRandom("voice"))
        assert result.narrative.startswith("Something in your gut says:")

    def test_unspecialised_scout_has_no_prefix(self, context) -> None:
        result = execute_insight_action("the_verdict", context, False, SeededRandom("voice"))
        assert not result.narrative.startswith("Something in your gut says:")
        assert not result.narrative.startswith("The algorithm confirms:")


class TestClarityOfVision:
    """Perfect reads of hinted attributes."""

    def test_reveals_every_hinted_attribute(self, context) -> None:
        result = execute_insight_action("clarity_of_vision", context, False, SeededRandom("clarity"))
        assert result.success
        assert isinstance(result.payload, AttributeRevealPayload)
        values = {obs.attribute: obs.true_value for obs in result.payload.observations}
        assert values == {"passing": 15, "vision": 17, "pace": 6, "strength": 10}
        assert all(obs.player_id == "p1" for obs in result.payload.observations)
        assert result.payload.confidence == 1.0

    def test_fizzle_halves_reveals(self, context) -> None:
        result = execute_insight_action("clarity_of_vision", context, True, SeededRandom("clarity"))
        assert not result.success
        assert len(result.payload.observations) == 2
        assert "(fizzled: 2 of 4" in result.narrative
        assert result.payload.confidence == pytest.approx(0.7)
        assert "70% confidence" in result.narrative

    def test_empty_session_falls_back_to_all_attributes(self, context) -> None:
        quiet = replace(context, session=_session((_player("p1"),), ()))
        result = execute_insight_action("clarity_of_vision", quiet, False, SeededRandom("quiet"))
        assert len(result.payload.observations) == len(VISIBLE_ATTRIBUTES)

    def test_missing_target_is_soft_failure(self, context) -> None:
        result = execute_insight_action("clarity_of_vision", replace(context, target_player_id=None), False, SeededRandom("x"))
        assert not result.success
        assert result.payload is None
        assert " But " in result.narrative

    def test_unknown_target_is_soft_failure(self, context) -> None:
        result = execute_insight_action("clarity_of_vision", replace(context, target_player_id="ghost"), False, SeededRandom("x"))
        assert not result.success
        assert result.payload is None


class TestHiddenNature:
    """Hidden character reveals."""

    def test_reveals_all_four(self, context) -> None:
        result = execute_insight_action("hidden_nature", context, False, SeededRandom("hidden"))
        assert result.success
        assert isinstance(result.payload, HiddenNaturePayload)
        assert {obs.attribute for obs in result.payload.revealed} == set(HIDDEN_ATTRIBUTES)

    def test_fizzle_reveals_two(self, context) -> None:
        result = execute_insight_action("hidden_nature", context, True, SeededRandom("hidden"))
        assert not result.success
        assert len(result.payload.revealed) == 2
        assert {obs.attribute for obs in result.payload.revealed} <= set(HIDDEN_ATTRIBUTES)


class TestVerdict:
    """Report quality bonus."""

    def test_full_bonus(self, context) -> None:
        result = execute_insight_action("the_verdict", context, False, SeededRandom("verdict"))
        assert result.success
        assert result.payload.report_quality_bonus == 30

    def test_fizzled_bonus(self, context) -> None:
        result = execute_insight_action("the_verdict", context, True, SeededRandom("verdict"))
        assert not result.success
        assert result.payload.report_quality_bonus == 18


class TestSecondLook:
    """Retroactive reads of unfocused players."""

    def test_picks_best_unfocused_player(self, context) -> None:
        result = execute_insight_action("second_look", context, False, SeededRandom("second"))
        assert result.success
        assert result.payload.discovered_player_id == "p2"
        values = {obs.attribute: obs.true_value for obs in result.payload.observations}
        assert values == {"pace": 19, "strength": 12}
        assert result.payload.confidence == 1.0

    def test_fizzle_halves_reveals(self, context) -> None:
        result = execute_insight_action("second_look", context, True, SeededRandom("second"))
        assert not result.success
        assert len(result.payload.observations) == 1
        assert result.payload.discovered_player_id == "p2"
        assert result.payload.confidence == pytest.approx(0.6)
        assert "60% confidence" in result.narrative

    def test_everyone_focused(self, context) -> None:
        players = tuple(_player(pid, focused=True) for pid in ("p1", "p2", "p3"))
        session = replace(context.session, players=players)
        result = execute_insight_action("second_look", replace(context, session=session), False, SeededRandom("x"))
        assert not result.success
        assert result.payload is None

    def test_player_without_hints_yields_nothing(self, context) -> None:
        session = _session((_player("p1", focused=True), _player("p2")), (_moment("p2", 7),))
        result = execute_insight_action("second_look", replace(context, session=session), False, SeededRandom("x"))
        assert not result.success
        assert result.payload is None
        assert "no observable moments" in result.narrative


class TestDiamondInTheRough:
    """Highest-potential discovery."""

    def test_finds_best_prospect(self, context) -> None:
        result = execute_insight_action("diamond_in_the_rough", context, False, SeededRandom("diamond"))
        assert result.success
        assert isinstance(result.payload, DiscoveryPayload)
        assert result.payload.discovered_player_id == "p2"
        assert result.payload.tier == "generational"
        assert [(o.attribute, o.true_value) for o in result.payload.observations] == [("pace", 19)]

    def test_fizzle_names_player_only(self, context) -> None:
        result = execute_insight_action("diamond_in_the_rough", context, True, SeededRandom("diamond"))
        assert not result.success
        assert result.payload == DiscoveryPayload("p2")

    def test_no_records(self, context) -> None:
        result = execute_insight_action("diamond_in_the_rough", replace(context, players={}), False, SeededRandom("x"))
        assert not result.success
        assert result.payload is None

    def test_empty_venue(self, context) -> None:
        empty = replace(context, session=_session((), ()))
        result = execute_insight_action("diamond_in_the_rough", empty, False, SeededRandom("x"))
        assert not result.success
        assert result.payload is None


class TestGenerationalWhisper:
    """Gut feeling about the best player present."""

    def test_high_reliability(self, context) -> None:
        result = execute_insight_action("generational_whisper", context, False, SeededRandom("whisper"))
        assert result.success
        assert result.payload.discovered_player_id == "p2"
        assert result.payload.tier == "generational"
        assert 0.9 <= result.payload.reliability < 1.0

    def test_fizzled_reliability(self, context) -> None:
        result = execute_insight_action("generational_whisper", context, True, SeededRandom("whisper"))
        assert not result.success
        assert result.payload.reliability == pytest.approx(0.6)


class TestPerfectFit:
    """Position grading."""

    def test_grades_every_position(self, context, make_player) -> None:
        flat = replace(context, players={"p1": make_player("p1")})
        result = execute_insight_action("perfect_fit", flat, False, SeededRandom("fit"))
        assert result.success
        assert result.payload.player_id == "p1"
        assert result.payload.fits == {position: 50 for position in POSITIONS}

    def test_fizzle_grades_two(self, context) -> None:
        result = execute_insight_action("perfect_fit", context, True, SeededRandom("fit"))
        assert not result.success
        assert len(result.payload.fits) == 2
        assert set(result.payload.fits) <= set(POSITIONS)


class TestPressureTest:
    """Big-game reveals."""

    def test_full_reveal(self, context) -> None:
        result = execute_insight_action("pressure_test", context, False, SeededRandom("pressure"))
        values = {obs.attribute: obs.true_value for obs in result.payload.revealed}
        assert result.success
        assert values == {"big_game_temperament": 10, "composure": 14, "leadership": 3}

    def test_fizzle_reveals_temperament_only(self, context) -> None:
        result = execute_insight_action("pressure_test", context, True, SeededRandom("pressure"))
        assert not result.success
        assert [obs.attribute for obs in result.payload.revealed] == ["big_game_temperament"]


class TestNetworkPulse:
    """Intel from every contact."""

    @pytest.fixture
    def contacts(self):
        return (
            Contact("c1", "Ana", "Harbour FC", reliability=0.4),
            Contact("c2", "Ben", "Northside Academy", reliability=0.9, known_player_ids=("p3",)),
            Contact("c3", "Cai", "County FA", reliability=0.6),
        )

    def test_every_contact_in_reliability_order(self, context, contacts) -> None:
        result = execute_insight_action("network_pulse", replace(context, contacts=contacts), False, SeededRandom("net"))
        assert result.success
        assert [item.contact_id for item in result.payload.intel] == ["c2", "c3", "c1"]
        first = result.payload.intel[0]
        assert first.player_id == "p3"
        assert first.intel.startswith("Ben (Northside Academy) ")
        assert first.intel.endswith("[player: p3]")
        assert result.payload.intel[1].player_id is None

    def test_fizzle_keeps_most_reliable_half(self, context, contacts) -> None:
        result = execute_insight_action("network_pulse", replace(context, contacts=contacts), True, SeededRandom("net"))
        assert not result.success
        assert [item.contact_id for item in result.payload.intel] == ["c2"]

    def test_no_contacts(self, context) -> None:
        result = execute_insight_action("network_pulse", context, False, SeededRandom("net"))
        assert not result.success
        assert result.payload is None


class TestFlatBonuses:
    """Territory and query bonuses."""

    def test_territory_mastery(self, context) -> None:
        regional = replace(context, sub_region_id="north_coast")
        full = execute_insight_action("territory_mastery", regional, False, SeededRandom("t"))
        muted = execute_insight_action("territory_mastery", regional, True, SeededRandom("t"))
        assert full.payload.confidence_bonus == pytest.approx(0.10)
        assert full.payload.sub_region_id == "north_coast"
        assert "+10% confidence in north_coast" in full.narrative
        assert muted.payload.confidence_bonus == pytest.approx(0.06)

    def test_algorithmic_epiphany(self, context) -> None:
        full = execute_insight_action("algorithmic_epiphany", context, False, SeededRandom("e"))
        muted = execute_insight_action("algorithmic_epiphany", context, True, SeededRandom("e"))
        assert full.payload.query_accuracy_bonus == 1.0
        assert muted.payload.query_accuracy_bonus == pytest.approx(0.6)
        assert full.success and not muted.success


class TestMarketBlindSpot:
    """Undervalued league players."""

    @pytest.fixture
    def league(self, make_player):
        return (
            make_player("a", potential_ability=200, market_value=100.0),
            make_player("b", potential_ability=150, market_value=1000.0),
            make_player("c", potential_ability=100, market_value=5000.0),
            make_player("d", potential_ability=50, market_value=10000.0),
        )

    def test_ranks_undervalued_players(self, context, league) -> None:
        result = execute_insight_action("market_blind_spot", replace(context, league_players=league), False, SeededRandom("m"))
        assert result.success
        assert result.payload.undervalued_player_ids == ("a", "b")

    def test_fizzle_returns_one_or_two(self, context, league, fixed_rng) -> None:
        scoped = replace(context, league_players=league)
        low = execute_insight_action("market_blind_spot", scoped, True, fixed_rng(0.0))
        high = execute_insight_action("market_blind_spot", scoped, True, fixed_rng(0.999))
        assert low.payload.undervalued_player_ids == ("a",)
        assert high.payload.undervalued_player_ids == ("a", "b")
        assert not low.success

    def test_large_pool_caps_at_five(self, context, make_player) -> None:
        league = tuple(
            make_player(f"x{i}", potential_ability=200 - i, market_value=float(100 + i)) for i in range(120)
        ) + (make_player("star", potential_ability=60, market_value=1_000_000.0),)
        result = execute_insight_action("market_blind_spot", replace(context, league_players=league), False, SeededRandom("m"))
        assert result.payload.undervalued_player_ids == ("x0", "x1", "x2", "x3", "x4")

    def test_no_league_data(self, context) -> None:
        result = execute_insight_action("market_blind_spot", context, False, SeededRandom("m"))
        assert not result.success
        assert result.payload is None

    def test_nobody_undervalued(self, context, make_player) -> None:
        only = (make_player("solo", potential_ability=150, market_value=5000.0),)
        result = execute_insight_action("market_blind_spot", replace(context, league_players=only), False, SeededRandom("m"))
        assert not result.success
        assert "no undervalued" in result.narrative
        assert result.payload.undervalued_player_ids == ()

    def test_uniformly_priced_league(self, context, make_player) -> None:
        league = tuple(
            make_player(f"u{i}", potential_ability=60 + 7 * i, market_value=1000.0 * (60 + 7 * i)) for i in range(20)
        )
        result = execute_insight_action("market_blind_spot", replace(context, league_players=league), False, SeededRandom("m"))
        assert not result.success
        assert result.payload.undervalued_player_ids == ()
