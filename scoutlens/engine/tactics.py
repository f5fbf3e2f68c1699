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
"""Tactical layer biasing live match generation by each side's style."""

from __future__ import annotations

from typing import Collection, Dict, List, Literal, Mapping, Optional, Tuple

from scoutlens.engine.rng import clamp
from scoutlens.models.match import TacticalMatchup, TacticalStyle

STYLE_EVENT_DISTRIBUTIONS: Dict[str, Dict[str, float]] = {
    "high_press": {"tackle": 1.3, "interception": 1.2, "sprint": 1.15, "error": 1.1, "pass": 0.9, "positioning": 0.85},
    "possession_based": {
        "pass": 1.4,
        "through_ball": 1.2,
        "positioning": 1.15,
        "dribble": 1.1,
        "tackle": 0.8,
        "sprint": 0.85,
    },
    "counter_attacking": {
        "sprint": 1.3,
        "dribble": 1.2,
        "through_ball": 1.15,
        "tackle": 1.1,
        "pass": 0.7,
        "positioning": 0.8,
    },
    "direct_play": {"header": 1.2, "cross": 1.2, "aerial_duel": 1.3, "sprint": 1.1, "pass": 0.8, "through_ball": 0.8},
    "wing_play": {"cross": 1.35, "dribble": 1.2, "sprint": 1.15, "pass": 1.05, "header": 1.1, "tackle": 0.9},
    "balanced": {"pass": 1.05, "tackle": 1.05, "sprint": 1.0, "dribble": 1.0},
}
"""Multiplicative event frequency shifts per style; unlisted events stay at 1.0."""

MATCHUP_MATRIX: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "high_press": {"strong": ("possession_based", "balanced"), "weak": ("counter_attacking", "wing_play")},
    "possession_based": {"strong": ("direct_play", "wing_play"), "weak": ("high_press", "counter_attacking")},
    "counter_attacking": {"strong": ("high_press", "possession_based"), "weak": ("direct_play", "balanced")},
    "direct_play": {"strong": ("counter_attacking", "balanced"), "weak": ("possession_based", "wing_play")},
    "wing_play": {"strong": ("high_press", "direct_play"), "weak": ("possession_based", "balanced")},
    "balanced": {"strong": ("counter_attacking", "wing_play"), "weak": ("high_press", "direct_play")},
}

DEFAULT_PHASE_POOL: Tuple[str, ...] = (
    "build_up",
    "build_up",
    "build_up",
    "transition",
    "transition",
    "set_piece",
    "set_piece",
    "pressing_sequence",
    "pressing_sequence",
    "counter_attack",
    "counter_attack",
    "possession",
    "possession",
    "possession",
)

STYLE_PHASE_BIAS: Dict[str, Tuple[str, ...]] = {
    "high_press": ("pressing_sequence", "pressing_sequence", "transition"),
    "possession_based": ("possession", "possession", "build_up"),
    "counter_attacking": ("counter_attack", "counter_attack", "transition"),
    "direct_play": ("set_piece", "transition", "counter_attack"),
    "wing_play": ("build_up", "counter_attack", "transition"),
    "balanced": (),
}

MATCHUP_SWING = 0.15
MAX_MODIFIER = 0.3
QUALITY_SCALE = 5.0


def _directional_modifier(own: str, other: str) -> float:
    """Return the raw advantage ``own`` holds over ``other``.

    Parameters
    ----------
    own : str
        Identity of the side being evaluated.
    other : str
        Identity of the opposition.

    Returns
    -------
    float
        ``+0.15`` for a favourable matchup, ``-0.15`` for an unfavourable one.
    """
    entry = MATCHUP_MATRIX[own]
    modifier = 0.0
    if other in entry["strong"]:
        modifier += MATCHUP_SWING
    if other in entry["weak"]:
        modifier -= MATCHUP_SWING
    return modifier


def merge_event_shifts(first: Mapping[str, float], second: Mapping[str, float]) -> Dict[str, float]:
    """Average two event distributions key by key.

    Parameters
    ----------
    first : Mapping[str, float]
        One side's multipliers.
    second : Mapping[str, float]
        The other side's multipliers.

    Returns
    -------
    Dict[str, float]
        Mean multiplier per event; a key missing on one side counts as 1.0.
    """
    merged: Dict[str, float] = {}
    for key in list(first) + [k for k in second if k not in first]:
        merged[key] = (first.get(key, 1.0) + second.get(key, 1.0)) / 2
    return merged


def calculate_tactical_matchup(home: TacticalStyle, away: TacticalStyle) -> TacticalMatchup:
    """Resolve the rock-paper-scissors relationship between two styles.

    Parameters
    ----------
    home : TacticalStyle
        Home side's style.
    away : TacticalStyle
        Away side's style.

    Returns
    -------
    TacticalMatchup
        Quality modifiers for each side and the merged event shift.

    Raises
    ------
    ValueError
        If either identity is unknown.
    """
    for style in (home, away):
        if style.identity not in MATCHUP_MATRIX:
            known = ", ".join(sorted(MATCHUP_MATRIX))
            raise ValueError(f"Unknown tactical identity '{style.identity}'. Known identities: {known}")

    home_factor = 0.7 + (home.pressing_intensity / 20) * 0.6
    away_factor = 0.7 + (away.pressing_intensity / 20) * 0.6
    home_modifier = clamp(_directional_modifier(home.identity, away.identity) * home_factor, -MAX_MODIFIER, MAX_MODIFIER)
    away_modifier = clamp(_directional_modifier(away.identity, home.identity) * away_factor, -MAX_MODIFIER, MAX_MODIFIER)

    event_shift = merge_event_shifts(
        home.event_distribution or STYLE_EVENT_DISTRIBUTIONS[home.identity],
        away.event_distribution or STYLE_EVENT_DISTRIBUTIONS[away.identity],
    )
    return TacticalMatchup(
        home_style=home.identity,
        away_style=away.identity,
        home_modifier=home_modifier,
        away_modifier=away_modifier,
        event_shift=event_shift,
    )


def build_phase_pool(matchup: Optional[TacticalMatchup] = None) -> List[str]:
    """Return the phase type pool, extended by both sides' styles.

    Parameters
    ----------
    matchup : TacticalMatchup | None
        Matchup to bias the pool with; the neutral pool when omitted.

    Returns
    -------
    List[str]
        Phase types, one entry per unit of weight.
    """
    pool = list(DEFAULT_PHASE_POOL)
    if matchup is None:
        return pool
    pool.extend(STYLE_PHASE_BIAS.get(matchup.home_style, ()))
    pool.extend(STYLE_PHASE_BIAS.get(matchup.away_style, ()))
    return pool


def apply_tactical_modifiers(
    base_weights: Mapping[str, float],
    matchup: TacticalMatchup,
    side: Literal["home", "away"] = "home",
) -> Dict[str, float]:
    """Shift event weights towards what the given side's style produces.

    Parameters
    ----------
    base_weights : Mapping[str, float]
        Event weights of the phase before tactics.
    matchup : TacticalMatchup
        Resolved matchup.
    side : {"home", "away"}
        Perspective whose style dominates the blend.

    Returns
    -------
    Dict[str, float]
        New weight table; ``base_weights`` is not modified.
    """
    identity = matchup.home_style if side == "home" else matchup.away_style
    style = STYLE_EVENT_DISTRIBUTIONS.get(identity, {})
    adjusted: Dict[str, float] = {}
    for event_type, weight in base_weights.items():
        blended = style.get(event_type, 1.0) * 0.6 + matchup.event_shift.get(event_type, 1.0) * 0.4
        value = weight * max(0.1, blended)
        if value > 0:
            adjusted[event_type] = value
    return adjusted


def get_tactical_quality_modifier(matchup: TacticalMatchup, player_id: str, home_player_ids: Collection[str]) -> float:
    """Translate the acting side's advantage onto the 1-10 quality scale.

    Parameters
    ----------
    matchup : TacticalMatchup
        Resolved matchup.
    player_id : str
        Player performing the event.
    home_player_ids : Collection[str]
        Identifiers of every home player.

    Returns
    -------
    float
        Quality adjustment, roughly between -1.5 and +1.5.
    """
    modifier = matchup.home_modifier if player_id in home_player_ids else matchup.away_modifier
    return modifier * QUALITY_SCALE
