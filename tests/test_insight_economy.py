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
"""Tests for Insight accumulation, validation and spending."""

from dataclasses import replace

import pytest

from scoutlens.engine.rng import SeededRandom
from scoutlens.insight.catalog import get_insight_action
from scoutlens.insight.economy import (
    INSIGHT_FATIGUE_COST,
    InsightState,
    InsightUseRecord,
    PerkModifiers,
    accumulate_insight,
    apply_insight_fatigue,
    calculate_accumulation,
    calculate_insight_capacity,
    can_use_insight,
    create_insight_state,
    format_insight_cost,
    get_affordable_actions,
    get_available_actions,
    perk_modifiers_for,
    record_insight_use,
    spend_insight,
    tick_cooldown,
)
from scoutlens.models.scout import ScoutProfile
from scoutlens.utils.debug import SessionDebugger


def _funded(points: int = 100, capacity: int = 100) -> InsightState:
    return InsightState(points=points, capacity=capacity)


class TestCapacity:
    """Capacity derives from intuition."""

    def test_capacity_formula(self) -> None:
        assert calculate_insight_capacity(10) == 60
        assert calculate_insight_capacity(1) == 42
        assert calculate_insight_capacity(20) == 80

    def test_create_state_defaults(self) -> None:
        state = create_insight_state()
        assert state.points == 0
        assert state.capacity == 40
        assert state.is_ready
        assert state.history == ()

    def test_create_state_from_intuition(self) -> None:
        assert create_insight_state(15).capacity == 70


class TestAccumulation:
    """Earning IP from scouting work."""

    def test_poor_quality_earns_nothing(self, scout) -> None:
        breakdown = calculate_accumulation("observation", "poor", scout)
        assert breakdown.quality_multiplier == 0.0
        assert breakdown.total_earned == 0

    def test_good_observation(self, scout) -> None:
        breakdown = calculate_accumulation("observation", "good", scout)
        assert breakdown.base_amount == 2
        assert breakdown.specialization_bonus == 1
        assert breakdown.intuition_bonus == 2
        assert breakdown.total_earned == 5

    def test_excellent_observation_is_floored(self, scout) -> None:
        assert calculate_accumulation("observation", "excellent", scout).total_earned == 5

    def test_report_bonus_needs_matching_specialization(self, scout) -> None:
        youth = replace(scout, specialization="youth")
        assert calculate_accumulation("report", "good", scout).specialization_bonus == 0
        assert calculate_accumulation("report", "good", youth).total_earned == 6

    def test_debunked_hypothesis_rewards_data_scouts(self, scout) -> None:
        data = replace(scout, specialization="data")
        youth = replace(scout, specialization="youth")
        assert calculate_accumulation("hypothesis_debunked", "good", data).specialization_bonus == 1
        assert calculate_accumulation("hypothesis_debunked", "good", youth).specialization_bonus == 0

    def test_perk_bonus_is_added(self, scout) -> None:
        perks = PerkModifiers(insight_bonus=1.5)
        assert calculate_accumulation("observation", "good", scout, perks).total_earned == 6

    def test_unknown_source(self, scout) -> None:
        with pytest.raises(ValueError, match="Known sources"):
            calculate_accumulation("gossip", "good", scout)

    def test_capped_earning_credits_lifetime(self) -> None:
        state = InsightState(points=59, capacity=60, lifetime_earned=4)
        after = accumulate_insight(state, 10)
        assert after.points == 60
        assert after.lifetime_earned == 14

    def test_capacity_override(self) -> None:
        state = InsightState(points=30, capacity=40)
        after = accumulate_insight(state, 20, capacity=70)
        assert after.capacity == 70
        assert after.points == 50


class TestValidation:
    """The first failing check is reported."""

    def test_cost_never_below_one(self) -> None:
        action = get_insight_action("the_verdict")
        assert format_insight_cost(action) == 20
        assert format_insight_cost(action, PerkModifiers(cost_reduction=2.5)) == 17
        assert format_insight_cost(action, PerkModifiers(cost_reduction=500)) == 1

    def test_unknown_action(self, scout) -> None:
        assert can_use_insight(_funded(), "mind_reading", scout, "full_observation") == "Unknown action: mind_reading"

    def test_cooldown_beats_other_failures(self, scout) -> None:
        state = InsightState(points=0, capacity=60, cooldown_weeks_remaining=2)
        message = can_use_insight(state, "network_pulse", scout, "analysis")
        assert message == "Insight is on cooldown for 2 more weeks."
        single = replace(state, cooldown_weeks_remaining=1)
        assert can_use_insight(single, "network_pulse", scout, "analysis") == "Insight is on cooldown for 1 more week."

    def test_mode_checked_before_specialization(self, scout) -> None:
        message = can_use_insight(_funded(0), "network_pulse", scout, "analysis")
        assert message == "Network Pulse is not available during analysis sessions."

    def test_specialization_checked_before_points(self, scout) -> None:
        message = can_use_insight(_funded(0), "network_pulse", scout, "investigation")
        assert message.endswith("requires the regional specialization.")

    def test_insufficient_points(self, scout) -> None:
        message = can_use_insight(_funded(10), "clarity_of_vision", scout, "full_observation")
        assert message == "Not enough Insight Points. Need 25, have 10."

    def test_valid_spend(self, scout) -> None:
        assert can_use_insight(_funded(25), "clarity_of_vision", scout, "full_observation") is None
        regional = replace(scout, specialization="regional")
        assert can_use_insight(_funded(), "network_pulse", regional, "investigation") is None


class TestSpend:
    """Paying for actions and the fizzle roll."""

    def test_spend_deducts_and_starts_cooldown(self, scout) -> None:
        state, fizzled = spend_insight(_funded(), "the_verdict", scout, week=7, rng=SeededRandom("spend"))
        assert not fizzled
        assert state.points == 80
        assert state.cooldown_weeks_remaining == 2
        assert state.last_used_week == 7
        assert state.lifetime_used == 1

    def test_deep_focus_shortens_cooldown(self, scout) -> None:
        focused = replace(scout, unlocked_perks=("deep_focus",))
        state, _ = spend_insight(_funded(), "the_verdict", focused, week=1, rng=SeededRandom("focus"))
        assert state.cooldown_weeks_remaining == 1

    def test_perk_reduction_applies_to_spend(self, scout) -> None:
        perks = PerkModifiers(cost_reduction=5)
        state, _ = spend_insight(_funded(), "the_verdict", scout, 1, SeededRandom("cheap"), perks)
        assert state.points == 85

    def test_never_fizzles_at_or_below_threshold(self, scout, fixed_rng) -> None:
        rested = replace(scout, fatigue=69)
        always_fizzle = fixed_rng(0.0)
        for _ in range(1000):
            _, fizzled = spend_insight(_funded(), "the_verdict", rested, 1, always_fizzle)
            assert not fizzled
        at_threshold = replace(scout, fatigue=70)
        assert not spend_insight(_funded(), "the_verdict", at_threshold, 1, always_fizzle)[1]

    def test_fizzles_over_threshold(self, scout, fixed_rng) -> None:
        tired = replace(scout, fatigue=71)
        state, fizzled = spend_insight(_funded(), "the_verdict", tired, 1, fixed_rng(0.0))
        assert fizzled
        assert state.points == 80
        assert state.cooldown_weeks_remaining == 2
        assert not spend_insight(_funded(), "the_verdict", tired, 1, fixed_rng(0.999))[1]

    def test_eureka_mastery_raises_threshold(self, scout, fixed_rng) -> None:
        master = replace(scout, fatigue=80, unlocked_perks=("eureka_mastery",))
        perks = perk_modifiers_for(master)
        assert perks.fizzle_threshold == 85
        assert not spend_insight(_funded(), "the_verdict", master, 1, fixed_rng(0.0), perks)[1]
        exhausted = replace(master, fatigue=86)
        assert spend_insight(_funded(), "the_verdict", exhausted, 1, fixed_rng(0.0), perks)[1]

    def test_neutral_perks_without_unlocks(self, scout) -> None:
        assert perk_modifiers_for(scout) == PerkModifiers()

    def test_unknown_action_raises(self, scout) -> None:
        with pytest.raises(ValueError):
            spend_insight(_funded(), "mind_reading", scout, 1, SeededRandom("x"))

    def test_spend_is_logged(self, scout) -> None:
        debugger = SessionDebugger(output_dir=None)
        spend_insight(_funded(), "the_verdict", scout, 1, SeededRandom("log"), debugger=debugger)
        recent = debugger.get_recent_events(1)
        assert "INSIGHT_EVENT" in recent[0]
        assert "spent 20 IP" in recent[0]


class TestLedgerUpkeep:
    """Fatigue, cooldown ticks and history."""

    def test_fatigue_cost_is_capped(self, scout) -> None:
        assert apply_insight_fatigue(scout).fatigue == INSIGHT_FATIGUE_COST
        worn = replace(scout, fatigue=96)
        assert apply_insight_fatigue(worn).fatigue == 100

    def test_tick_cooldown_floors_at_zero(self) -> None:
        state = InsightState(points=0, capacity=40, cooldown_weeks_remaining=1)
        state = tick_cooldown(state)
        assert state.cooldown_weeks_remaining == 0
        assert state.is_ready
        assert tick_cooldown(state).cooldown_weeks_remaining == 0

    def test_record_use_appends(self) -> None:
        first = InsightUseRecord("the_verdict", 3, 1, "valuable", "Clear as day.", "p1")
        second = InsightUseRecord("hidden_nature", 6, 1, "moderate", "Something stirred.")
        state = record_insight_use(record_insight_use(_funded(), first), second)
        assert state.history == (first, second)


class TestActionListing:
    """Mode, specialization and balance filters."""

    def test_available_actions_for_unspecialised_scout(self) -> None:
        ids = [a.action_id for a in get_available_actions("full_observation", None)]
        assert ids == ["clarity_of_vision", "hidden_nature", "the_verdict", "second_look"]

    def test_available_actions_include_specialization(self) -> None:
        ids = {a.action_id for a in get_available_actions("analysis", "data")}
        assert ids == {"hidden_nature", "the_verdict", "algorithmic_epiphany", "market_blind_spot"}

    def test_affordable_actions_respect_balance(self) -> None:
        ids = {a.action_id for a in get_affordable_actions(_funded(20), "full_observation", None)}
        assert ids == {"the_verdict", "second_look"}

    def test_affordable_actions_empty_on_cooldown(self) -> None:
        state = InsightState(points=100, capacity=100, cooldown_weeks_remaining=1)
        assert get_affordable_actions(state, "full_observation", None) == []


def test_scout_profile_rejects_bad_fatigue() -> None:
    with pytest.raises(ValueError):
        ScoutProfile(scout_id="s", name="X", fatigue=120)
