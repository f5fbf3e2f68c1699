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
"""Central configuration for generator and Insight tuning parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


def _check_probability(name: str, value: float) -> None:
    """Raise when ``value`` is not a probability.

    Parameters
    ----------
    name : str
        Field name reported in the error message.
    value : float
        Candidate probability.
    """
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")


def _check_range(name: str, bounds: Tuple[int, int]) -> None:
    """Raise when an inclusive integer range is inverted.

    Parameters
    ----------
    name : str
        Field name reported in the error message.
    bounds : Tuple[int, int]
        Inclusive ``(low, high)`` pair.
    """
    low, high = bounds
    if low > high:
        raise ValueError(f"{name} lower bound {low} exceeds upper bound {high}")


@dataclass(slots=True)
class RandomConfig:
    """Seeding parameters for the deterministic random source.

    Parameters
    ----------
    seed_hash_start : int, default=0x12345678
        Initial accumulator used when hashing string seeds.
    seed_hash_multiplier : int, default=0x9E3779B9
        Multiplier mixed into the accumulator for every seed character.
    warmup_draws : int, default=2
        Number of values discarded after seeding.
    """

    seed_hash_start: int = 0x12345678
    seed_hash_multiplier: int = 0x9E3779B9
    warmup_draws: int = 2


@dataclass(slots=True)
class AtmosphereConfig:
    """Probabilities and multipliers for venue atmosphere.

    Parameters
    ----------
    event_chance : float, default=0.25
        Flat probability that a phase receives an atmosphere event.
    chaos_noise_weight : float, default=0.5
        Contribution of the venue chaos level to the noise multiplier.
    noise_min : float, default=0.5
        Lower clamp for the cumulative noise multiplier.
    noise_max : float, default=2.0
        Upper clamp for the cumulative noise multiplier.
    amplified_multiplier : float, default=1.3
        Observation multiplier for attributes the venue brings out.
    dampened_multiplier : float, default=0.7
        Observation multiplier for attributes the venue hides.
    """

    event_chance: float = 0.25
    chaos_noise_weight: float = 0.5
    noise_min: float = 0.5
    noise_max: float = 2.0
    amplified_multiplier: float = 1.3
    dampened_multiplier: float = 0.7

    def __post_init__(self) -> None:
        """Reject impossible probabilities and noise bounds."""
        _check_probability("event_chance", self.event_chance)
        if self.noise_min > self.noise_max:
            raise ValueError("noise_min must not exceed noise_max")


@dataclass(slots=True)
class MomentConfig:
    """Tuning for free-form venue moment generation.

    Parameters
    ----------
    count_range : Tuple[int, int], default=(3, 6)
        Inclusive number of moments generated per phase.
    focused_chance : float, default=0.5
        Per-slot selection chance for a focused player.
    unfocused_chance : float, default=0.2
        Per-slot selection chance for an unfocused player.
    quality_mean : float, default=5.5
        Centre of the moment quality distribution.
    quality_sd : float, default=2.0
        Spread of the moment quality distribution.
    pressure_base : float, default=0.2
        Pressure-context probability at the start of the session.
    pressure_ramp : float, default=0.25
        Extra pressure probability accumulated by the end of the session.
    pressure_crowd_weight : float, default=0.15
        Contribution of crowd intensity to the pressure probability.
    pressure_cap : float, default=0.7
        Ceiling on the pressure probability.
    standout_threshold : int, default=8
        Quality at or above which a moment is a standout.
    high_band : int, default=7
        Lowest quality rendered with the high description band.
    medium_band : int, default=4
        Lowest quality rendered with the medium description band.
    max_hints : int, default=3
        Maximum number of attributes hinted by one moment.
    """

    count_range: Tuple[int, int] = (3, 6)
    focused_chance: float = 0.5
    unfocused_chance: float = 0.2
    quality_mean: float = 5.5
    quality_sd: float = 2.0
    pressure_base: float = 0.2
    pressure_ramp: float = 0.25
    pressure_crowd_weight: float = 0.15
    pressure_cap: float = 0.7
    standout_threshold: int = 8
    high_band: int = 7
    medium_band: int = 4
    max_hints: int = 3

    def __post_init__(self) -> None:
        """Validate ranges and chances."""
        _check_range("count_range", self.count_range)
        _check_probability("focused_chance", self.focused_chance)
        _check_probability("unfocused_chance", self.unfocused_chance)
        _check_probability("pressure_cap", self.pressure_cap)


@dataclass(slots=True)
class MatchConfig:
    """Tuning for the live match phase orchestrator and score simulation.

    Parameters
    ----------
    phase_count_range : Tuple[int, int], default=(12, 18)
        Inclusive number of phases generated per match.
    involved_range : Tuple[int, int], default=(3, 6)
        Inclusive number of players involved in a phase.
    event_count_range : Tuple[int, int], default=(2, 4)
        Inclusive number of events per non-penalty phase.
    goalkeeper_involvement_weight : float, default=1.0
        Selection weight of goalkeepers when choosing involved players.
    outfield_involvement_weight : float, default=10.0
        Selection weight of outfield players when choosing involved players.
    injury_chance : float, default=0.03
        Chance that a physical event produces an injury.
    momentum_window : int, default=8
        Number of recent event qualities averaged into momentum.
    quality_noise : float, default=0.8
        Base standard deviation of event quality before weather scaling.
    home_advantage : float, default=1.08
        Multiplier applied to the home side's average ability.
    expected_goals_mean : float, default=2.7
        Mean of the total expected goals distribution.
    expected_goals_sd : float, default=1.1
        Spread of the total expected goals distribution.
    max_goals : int, default=6
        Ceiling on goals scored by one side.
    default_side_ability : float, default=100.0
        Average ability assumed for a side with no players.
    """

    phase_count_range: Tuple[int, int] = (12, 18)
    involved_range: Tuple[int, int] = (3, 6)
    event_count_range: Tuple[int, int] = (2, 4)
    goalkeeper_involvement_weight: float = 1.0
    outfield_involvement_weight: float = 10.0
    injury_chance: float = 0.03
    momentum_window: int = 8
    quality_noise: float = 0.8
    home_advantage: float = 1.08
    expected_goals_mean: float = 2.7
    expected_goals_sd: float = 1.1
    max_goals: int = 6
    default_side_ability: float = 100.0

    def __post_init__(self) -> None:
        """Validate ranges and chances."""
        _check_range("phase_count_range", self.phase_count_range)
        _check_range("involved_range", self.involved_range)
        _check_range("event_count_range", self.event_count_range)
        _check_probability("injury_chance", self.injury_chance)


@dataclass(slots=True)
class InsightConfig:
    """Economy constants for earning and spending Insight Points.

    Parameters
    ----------
    capacity_base : int, default=40
        Capacity of a scout with zero intuition.
    capacity_per_intuition : int, default=2
        Capacity added per point of intuition.
    intuition_divisor : int, default=5
        Intuition points per bonus IP when accumulating.
    fizzle_threshold : int, default=70
        Fatigue above which a spend may fizzle.
    fizzle_chance : float, default=0.2
        Chance of a fizzle once the scout is over the threshold.
    fatigue_cost : int, default=8
        Fatigue added to the scout by using Insight.
    base_amounts : Dict[str, int]
        Base IP earned per accumulation source.
    quality_multipliers : Dict[str, float]
        Multiplier applied to the base amount per session quality tier.
    """

    capacity_base: int = 40
    capacity_per_intuition: int = 2
    intuition_divisor: int = 5
    fizzle_threshold: int = 70
    fizzle_chance: float = 0.2
    fatigue_cost: int = 8
    base_amounts: Dict[str, int] = field(
        default_factory=lambda: {
            "observation": 2,
            "report": 3,
            "hypothesis_confirmed": 5,
            "hypothesis_debunked": 2,
            "assignment": 3,
        }
    )
    quality_multipliers: Dict[str, float] = field(
        default_factory=lambda: {
            "poor": 0.0,
            "average": 0.8,
            "good": 1.0,
            "excellent": 1.4,
            "exceptional": 2.0,
        }
    )

    def __post_init__(self) -> None:
        """Validate the fizzle chance."""
        _check_probability("fizzle_chance", self.fizzle_chance)


@dataclass(slots=True)
class SessionRulesConfig:
    """Rewards and token budgets for interactive observation sessions.

    Parameters
    ----------
    ip_per_flagged_moment : int, default=5
        IP earned for flagging a moment.
    ip_per_resolved_hypothesis : int, default=10
        IP earned when a hypothesis is confirmed or debunked.
    ip_per_reflection_note : int, default=3
        IP earned for each reflection note.
    evidence_to_resolve : int, default=3
        Evidence entries in one direction that resolve a hypothesis.
    evidence_to_lean : int, default=2
        Evidence entries in one direction that make a hypothesis lean.
    tokens_per_half : Dict[str, int]
        Focus tokens available per half for each observation mode.
    default_phase_range : Tuple[int, int], default=(4, 8)
        Phase count range for activities without a dedicated range.
    quality_tiers : Tuple[Tuple[float, str], ...]
        Descending ``(min IP per phase, tier)`` thresholds.
    warmup_effectiveness : float, default=0.5
        Lens effectiveness during the first phase of a focus.
    full_effectiveness : float, default=1.0
        Lens effectiveness once warmed up.
    fatigue_onset : int, default=4
        Consecutive phases after which focus starts to fatigue.
    fatigue_decay : float, default=0.1
        Effectiveness lost per phase beyond the onset.
    fatigue_floor : float, default=0.7
        Lowest effectiveness a fatigued focus reaches.
    peripheral_window : int, default=2
        Phases after release during which a player is still seen
        peripherally.
    lens_accuracy_bonus : Dict[str, Dict[str, int]]
        Accuracy bonus per attribute domain granted by each lens.
    """

    ip_per_flagged_moment: int = 5
    ip_per_resolved_hypothesis: int = 10
    ip_per_reflection_note: int = 3
    evidence_to_resolve: int = 3
    evidence_to_lean: int = 2
    tokens_per_half: Dict[str, int] = field(
        default_factory=lambda: {
            "full_observation": 3,
            "investigation": 2,
            "analysis": 1,
            "quick_interaction": 0,
        }
    )
    default_phase_range: Tuple[int, int] = (4, 8)
    quality_tiers: Tuple[Tuple[float, str], ...] = (
        (12.0, "exceptional"),
        (8.0, "excellent"),
        (5.0, "good"),
        (2.0, "average"),
    )
    warmup_effectiveness: float = 0.5
    full_effectiveness: float = 1.0
    fatigue_onset: int = 4
    fatigue_decay: float = 0.1
    fatigue_floor: float = 0.7
    peripheral_window: int = 2
    lens_accuracy_bonus: Dict[str, Dict[str, int]] = field(
        default_factory=lambda: {
            "technical": {"technical": 3},
            "physical": {"physical": 3},
            "mental": {"mental": 3},
            "tactical": {"tactical": 3, "mental": 1},
            "general": {},
        }
    )


@dataclass(slots=True)
class ModeContentConfig:
    """Content generation for investigation and analysis sessions.

    Dialogue consequences scale with the risk of the option picked: safe
    options always help the relationship a little, moderate and bold ones
    may backfire.

    Parameters
    ----------
    safe_reveal_chance : float, default=0.35
        Chance a safe option hints at an attribute.
    safe_confidence : Tuple[float, float], default=(0.15, 0.35)
        Confidence range of a safe hint.
    safe_relationship : Tuple[int, int], default=(1, 2)
        Relationship change of a safe option.
    safe_insight : Tuple[int, int], default=(1, 3)
        Insight bonus of a safe option.
    moderate_backfire_chance : float, default=0.2
        Chance a moderate option backfires.
    moderate_reveal_chance : float, default=0.65
        Chance a successful moderate option reveals an attribute.
    moderate_confidence : Tuple[float, float], default=(0.35, 0.6)
        Confidence range of a moderate reveal.
    moderate_extra_line_chance : float, default=0.3
        Chance an extra insight line is appended to a moderate outcome.
    moderate_relationship : Tuple[int, int], default=(0, 1)
        Relationship change of a successful moderate option.
    moderate_insight : Tuple[int, int], default=(3, 6)
        Insight bonus of a successful moderate option.
    bold_backfire_chance : float, default=0.45
        Chance a bold option backfires.
    bold_backfire_relationship : Tuple[int, int], default=(-3, -2)
        Relationship change of a bold option that backfires.
    bold_confidence : Tuple[float, float], default=(0.6, 0.9)
        Confidence range of a bold reveal.
    bold_relationship : Tuple[int, int], default=(2, 4)
        Relationship change of a successful bold option.
    bold_insight : Tuple[int, int], default=(6, 12)
        Insight bonus of a successful bold option.
    data_point_count : Tuple[int, int], default=(3, 6)
        Data points per early analysis phase.
    late_data_point_max : int, default=8
        Upper data point count from ``late_phase_from`` onwards.
    late_phase_from : int, default=2
        First phase index treated as late.
    highlight_rate : float, default=0.25
        Highlight chance of a non-anomaly data point in early phases.
    late_highlight_rate : float, default=0.4
        Highlight chance of a non-anomaly data point in late phases.
    player_bind_chance : float, default=0.7
        Chance a player-level data point is bound to a session player.
    """

    safe_reveal_chance: float = 0.35
    safe_confidence: Tuple[float, float] = (0.15, 0.35)
    safe_relationship: Tuple[int, int] = (1, 2)
    safe_insight: Tuple[int, int] = (1, 3)
    moderate_backfire_chance: float = 0.2
    moderate_reveal_chance: float = 0.65
    moderate_confidence: Tuple[float, float] = (0.35, 0.6)
    moderate_extra_line_chance: float = 0.3
    moderate_relationship: Tuple[int, int] = (0, 1)
    moderate_insight: Tuple[int, int] = (3, 6)
    bold_backfire_chance: float = 0.45
    bold_backfire_relationship: Tuple[int, int] = (-3, -2)
    bold_confidence: Tuple[float, float] = (0.6, 0.9)
    bold_relationship: Tuple[int, int] = (2, 4)
    bold_insight: Tuple[int, int] = (6, 12)
    data_point_count: Tuple[int, int] = (3, 6)
    late_data_point_max: int = 8
    late_phase_from: int = 2
    highlight_rate: float = 0.25
    late_highlight_rate: float = 0.4
    player_bind_chance: float = 0.7

    def __post_init__(self) -> None:
        """Validate chances and ranges."""
        for name in (
            "safe_reveal_chance",
            "moderate_backfire_chance",
            "moderate_reveal_chance",
            "moderate_extra_line_chance",
            "bold_backfire_chance",
            "highlight_rate",
            "late_highlight_rate",
            "player_bind_chance",
        ):
            _check_probability(name, getattr(self, name))
        for name in (
            "safe_relationship",
            "safe_insight",
            "moderate_relationship",
            "moderate_insight",
            "bold_backfire_relationship",
            "bold_relationship",
            "bold_insight",
            "data_point_count",
        ):
            _check_range(name, getattr(self, name))


@dataclass(slots=True)
class EngineConfig:
    """Top-level container for all tuning structures.

    Parameters
    ----------
    random : RandomConfig, default=RandomConfig()
        Random source seeding.
    atmosphere : AtmosphereConfig, default=AtmosphereConfig()
        Venue atmosphere probabilities.
    moments : MomentConfig, default=MomentConfig()
        Free-form moment generation.
    match : MatchConfig, default=MatchConfig()
        Live match generation and score simulation.
    insight : InsightConfig, default=InsightConfig()
        Insight economy constants.
    session : SessionRulesConfig, default=SessionRulesConfig()
        Interactive session rewards and focus tokens.
    modes : ModeContentConfig, default=ModeContentConfig()
        Investigation and analysis content generation.
    """

    random: RandomConfig = field(default_factory=RandomConfig)
    atmosphere: AtmosphereConfig = field(default_factory=AtmosphereConfig)
    moments: MomentConfig = field(default_factory=MomentConfig)
    match: MatchConfig = field(default_factory=MatchConfig)
    insight: InsightConfig = field(default_factory=InsightConfig)
    session: SessionRulesConfig = field(default_factory=SessionRulesConfig)
    modes: ModeContentConfig = field(default_factory=ModeContentConfig)


ENGINE_CONFIG = EngineConfig()
"""Singleton-style access to the engine configuration."""
