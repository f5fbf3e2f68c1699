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
"""Earning, validating and spending Insight Points.

The ledger is a frozen :class:`InsightState`. Earning is capped by the
scout's capacity while the lifetime counter always receives the full amount.
Spending is a two-step affair: :func:`can_use_insight` validates, then
:func:`spend_insight` deducts the cost, starts the cooldown and rolls for a
fizzle. Cost and cooldown apply whether or not the action fizzles.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, List, Literal, Optional, Tuple

from scoutlens.engine.config import ENGINE_CONFIG
from scoutlens.engine.rng import SeededRandom
from scoutlens.insight.catalog import INSIGHT_ACTIONS, InsightAction, find_insight_action, get_insight_action
from scoutlens.models.scout import ScoutProfile

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger

InsightOutcome = Literal["valuable", "moderate", "wasted"]

INSIGHT_FATIGUE_COST = ENGINE_CONFIG.insight.fatigue_cost
DEEP_FOCUS_PERK = "deep_focus"
EUREKA_MASTERY_PERK = "eureka_mastery"
EUREKA_MASTERY_THRESHOLD = 85

# Sources that earn the +1 specialization bonus; None means every scout.
SOURCE_SPECIALIZATION_MATCH: Dict[str, Optional[Tuple[str, ...]]] = {
    "observation": None,
    "report": ("youth", "first_team", "regional"),
    "hypothesis_confirmed": ("youth", "first_team", "regional"),
    "hypothesis_debunked": ("data",),
    "assignment": None,
}


@dataclass(frozen=True, slots=True)
class PerkModifiers:
    """Perk effects that adjust the economy.

    Parameters
    ----------
    cost_reduction : float, default=0.0
        IP subtracted from every action cost.
    insight_bonus : float, default=0.0
        Flat IP added to every accumulation.
    fizzle_threshold : int | None, optional
        Fatigue threshold replacing the default when set.
    """

    cost_reduction: float = 0.0
    insight_bonus: float = 0.0
    fizzle_threshold: Optional[int] = None


@dataclass(frozen=True, slots=True)
class InsightUseRecord:
    """History entry for one completed Insight action.

    Parameters
    ----------
    action_id : str
        Action that was used.
    week : int
        Game week of use.
    season : int
        Season of use.
    outcome : InsightOutcome
        Qualitative outcome bucket.
    narrative : str
        Recap text.
    target_player_id : str | None, optional
        Primary player the action was applied to.
    """

    action_id: str
    week: int
    season: int
    outcome: InsightOutcome
    narrative: str
    target_player_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class InsightState:
    """Per-scout Insight ledger.

    Parameters
    ----------
    points : int
        Current balance, never above ``capacity``.
    capacity : int
        Maximum balance.
    cooldown_weeks_remaining : int, default=0
        Weeks until another action may be used.
    lifetime_used : int, default=0
        Actions used in total.
    lifetime_earned : int, default=0
        IP earned in total, including overflow past capacity.
    last_used_week : int, default=0
        Week of the latest action, 0 when never used.
    history : Tuple[InsightUseRecord, ...], default=()
        Chronological use records.
    """

    points: int
    capacity: int
    cooldown_weeks_remaining: int = 0
    lifetime_used: int = 0
    lifetime_earned: int = 0
    last_used_week: int = 0
    history: Tuple[InsightUseRecord, ...] = ()

    @property
    def is_ready(self) -> bool:
        """Return ``True`` when no cooldown is running."""
        return self.cooldown_weeks_remaining == 0


@dataclass(frozen=True, slots=True)
class AccumulationBreakdown:
    """How a single batch of IP was earned.

    Parameters
    ----------
    source : str
        Activity that generated the IP.
    base_amount : int
        Flat IP before multipliers.
    quality_multiplier : float
        Multiplier for the activity's quality tier.
    specialization_bonus : int
        +1 when the source matches the scout's specialization.
    intuition_bonus : int
        ``floor(intuition / 5)``.
    perk_bonus : float
        Flat perk bonus.
    total_earned : int
        IP credited, never negative.
    """

    source: str
    base_amount: int
    quality_multiplier: float
    specialization_bonus: int
    intuition_bonus: int
    perk_bonus: float
    total_earned: int


def perk_modifiers_for(scout: ScoutProfile) -> PerkModifiers:
    """Derive the economy modifiers granted by the scout's unlocked perks.

    Parameters
    ----------
    scout : ScoutProfile
        Scout whose perks are read.

    Returns
    -------
    PerkModifiers
        Modifiers; neutral when no relevant perk is unlocked.
    """
    if scout.has_perk(EUREKA_MASTERY_PERK):
        return PerkModifiers(fizzle_threshold=EUREKA_MASTERY_THRESHOLD)
    return PerkModifiers()


def calculate_insight_capacity(intuition: int) -> int:
    """Return the Insight capacity for an intuition rating.

    Parameters
    ----------
    intuition : int
        Scout intuition.

    Returns
    -------
    int
        ``40 + 2 * intuition`` with the default configuration.
    """
    cfg = ENGINE_CONFIG.insight
    return cfg.capacity_base + intuition * cfg.capacity_per_intuition


def create_insight_state(intuition: Optional[int] = None) -> InsightState:
    """Return an empty ledger for a new scout.

    Parameters
    ----------
    intuition : int | None, optional
        When given, capacity is derived from it; otherwise the base capacity
        is used until the scout's stats are known.

    Returns
    -------
    InsightState
        Zeroed state.
    """
    if intuition is None:
        capacity = ENGINE_CONFIG.insight.capacity_base
    else:
        capacity = calculate_insight_capacity(intuition)
    return InsightState(points=0, capacity=capacity)


def calculate_accumulation(
    source: str,
    quality_tier: str,
    scout: ScoutProfile,
    perks: Optional[PerkModifiers] = None,
) -> AccumulationBreakdown:
    """Work out how much IP one scouting activity earns.

    Parameters
    ----------
    source : str
        Accumulation source such as ``"observation"`` or ``"report"``.
    quality_tier : str
        Quality tier of the work; unknown tiers use a multiplier of 1 and a
        zero-multiplier tier earns nothing at all.
    scout : ScoutProfile
        Scout earning the points.
    perks : PerkModifiers | None, optional
        Perk modifiers; ``insight_bonus`` is added.

    Returns
    -------
    AccumulationBreakdown
        Every component of the earned total.

    Raises
    ------
    ValueError
        If ``source`` is unknown.
    """
    cfg = ENGINE_CONFIG.insight
    if source not in cfg.base_amounts:
        known = ", ".join(cfg.base_amounts)
        raise ValueError(f"Unknown accumulation source '{source}'. Known sources: {known}")

    base_amount = cfg.base_amounts[source]
    multiplier = cfg.quality_multipliers.get(quality_tier, 1.0)
    matching = SOURCE_SPECIALIZATION_MATCH[source]
    specialization_bonus = 1 if matching is None or scout.specialization in matching else 0
    intuition_bonus = scout.intuition // cfg.intuition_divisor
    perk_bonus = perks.insight_bonus if perks else 0.0

    raw = base_amount * multiplier + specialization_bonus + intuition_bonus + perk_bonus
    # a zero multiplier forfeits the flat bonuses too
    if multiplier <= 0:
        raw = 0.0
    return AccumulationBreakdown(
        source=source,
        base_amount=base_amount,
        quality_multiplier=multiplier,
        specialization_bonus=specialization_bonus,
        intuition_bonus=intuition_bonus,
        perk_bonus=perk_bonus,
        total_earned=max(0, math.floor(raw)),
    )


def accumulate_insight(state: InsightState, amount: int, capacity: Optional[int] = None) -> InsightState:
    """Credit ``amount`` IP, capping the balance at capacity.

    Parameters
    ----------
    state : InsightState
        Current ledger.
    amount : int
        IP earned.
    capacity : int | None, optional
        New capacity, for example after an intuition change.

    Returns
    -------
    InsightState
        Updated ledger; ``lifetime_earned`` grows by the full amount.
    """
    cap = state.capacity if capacity is None else capacity
    return replace(
        state,
        points=min(state.points + amount, cap),
        capacity=cap,
        lifetime_earned=state.lifetime_earned + amount,
    )


def format_insight_cost(action: InsightAction, perks: Optional[PerkModifiers] = None) -> int:
    """Return the effective cost of ``action`` after perk reductions.

    Parameters
    ----------
    action : InsightAction
        Catalog entry.
    perks : PerkModifiers | None, optional
        Perk modifiers.

    Returns
    -------
    int
        Cost floored and never below 1.
    """
    reduction = perks.cost_reduction if perks else 0.0
    return max(1, math.floor(action.cost - reduction))


def can_use_insight(
    state: InsightState,
    action_id: str,
    scout: ScoutProfile,
    mode: str,
    perks: Optional[PerkModifiers] = None,
) -> Optional[str]:
    """Validate a prospective spend.

    Checks run in a fixed order and the first failure is reported: the
    action exists, no cooldown is running, the mode allows the action, the
    scout's specialization unlocks it, and the balance covers the cost.

    Parameters
    ----------
    state : InsightState
        Current ledger.
    action_id : str
        Action to validate.
    scout : ScoutProfile
        Scout attempting the spend.
    mode : str
        Current observation mode.
    perks : PerkModifiers | None, optional
        Perk modifiers applied to the cost.

    Returns
    -------
    str | None
        Reason the action cannot be used, or ``None`` when it can.
    """
    action = find_insight_action(action_id)
    if action is None:
        return f"Unknown action: {action_id}"

    weeks = state.cooldown_weeks_remaining
    if weeks > 0:
        return f"Insight is on cooldown for {weeks} more week{'' if weeks == 1 else 's'}."

    if mode not in action.available_during:
        return f"{action.name} is not available during {mode} sessions."

    if not action.unlocked_for(scout.specialization):
        return f"{action.name} requires the {action.specialization} specialization."

    cost = format_insight_cost(action, perks)
    if state.points < cost:
        return f"Not enough Insight Points. Need {cost}, have {state.points}."
    return None


def spend_insight(
    state: InsightState,
    action_id: str,
    scout: ScoutProfile,
    week: int,
    rng: SeededRandom,
    perks: Optional[PerkModifiers] = None,
    debugger: Optional[SessionDebugger] = None,
) -> Tuple[InsightState, bool]:
    """Pay for an action, start its cooldown and roll for a fizzle.

    Validation is not repeated here; call :func:`can_use_insight` first. The
    fizzle roll only consumes a random draw when the scout's fatigue is over
    the threshold.

    Parameters
    ----------
    state : InsightState
        Current ledger.
    action_id : str
        Action being used.
    scout : ScoutProfile
        Scout spending the points.
    week : int
        Current game week.
    rng : SeededRandom
        Random source for the fizzle roll.
    perks : PerkModifiers | None, optional
        Perk modifiers for cost and fizzle threshold.
    debugger : SessionDebugger | None, optional
        Receives the spend when provided.

    Returns
    -------
    Tuple[InsightState, bool]
        Updated ledger and whether the action fizzled.

    Raises
    ------
    ValueError
        If ``action_id`` is unknown.
    """
    action = get_insight_action(action_id)
    cfg = ENGINE_CONFIG.insight
    cost = format_insight_cost(action, perks)

    cooldown = action.cooldown
    if scout.has_perk(DEEP_FOCUS_PERK):
        cooldown = max(1, cooldown - 1)

    threshold = cfg.fizzle_threshold
    if perks is not None and perks.fizzle_threshold is not None:
        threshold = perks.fizzle_threshold
    fizzled = scout.fatigue > threshold and rng.chance(cfg.fizzle_chance)

    new_state = replace(
        state,
        points=state.points - cost,
        cooldown_weeks_remaining=cooldown,
        last_used_week=week,
        lifetime_used=state.lifetime_used + 1,
    )
    if debugger:
        outcome = "fizzled" if fizzled else "succeeded"
        debugger.log_insight_event(action_id, f"spent {cost} IP, cooldown {cooldown}w, {outcome}")
    return new_state, fizzled


def apply_insight_fatigue(scout: ScoutProfile) -> ScoutProfile:
    """Return a copy of ``scout`` carrying the fatigue of an Insight use.

    Parameters
    ----------
    scout : ScoutProfile
        Scout who used Insight.

    Returns
    -------
    ScoutProfile
        Scout with fatigue raised by :data:`INSIGHT_FATIGUE_COST`, capped at 100.
    """
    return replace(scout, fatigue=min(100, scout.fatigue + INSIGHT_FATIGUE_COST))


def tick_cooldown(state: InsightState) -> InsightState:
    """Advance the cooldown by one week, never below zero.

    Parameters
    ----------
    state : InsightState
        Current ledger.

    Returns
    -------
    InsightState
        Updated ledger.
    """
    return replace(state, cooldown_weeks_remaining=max(0, state.cooldown_weeks_remaining - 1))


def record_insight_use(state: InsightState, record: InsightUseRecord) -> InsightState:
    """Append ``record`` to the ledger history.

    Parameters
    ----------
    state : InsightState
        Current ledger.
    record : InsightUseRecord
        Completed use.

    Returns
    -------
    InsightState
        Ledger with the record appended.
    """
    return replace(state, history=state.history + (record,))


def get_available_actions(mode: str, specialization: Optional[str]) -> List[InsightAction]:
    """List actions the scout could use in ``mode``, ignoring cost and cooldown.

    Parameters
    ----------
    mode : str
        Current observation mode.
    specialization : str | None
        Scout specialization.

    Returns
    -------
    List[InsightAction]
        Actions in catalog order.
    """
    return [
        action
        for action in INSIGHT_ACTIONS
        if mode in action.available_during and action.unlocked_for(specialization)
    ]


def get_affordable_actions(
    state: InsightState,
    mode: str,
    specialization: Optional[str],
    perks: Optional[PerkModifiers] = None,
) -> List[InsightAction]:
    """List actions the scout can trigger right now.

    Parameters
    ----------
    state : InsightState
        Current ledger.
    mode : str
        Current observation mode.
    specialization : str | None
        Scout specialization.
    perks : PerkModifiers | None, optional
        Perk modifiers applied to the cost.

    Returns
    -------
    List[InsightAction]
        Affordable actions; empty while a cooldown is running.
    """
    if state.cooldown_weeks_remaining > 0:
        return []
    return [
        action
        for action in get_available_actions(mode, specialization)
        if state.points >= format_insight_cost(action, perks)
    ]
