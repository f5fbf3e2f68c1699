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
"""Live match models: phases, tactical styles and final results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple

from scoutlens.engine.events import MatchEvent

PhaseType = Literal["build_up", "transition", "set_piece", "pressing_sequence", "counter_attack", "possession"]
SetPieceVariant = Literal["corner", "free_kick", "penalty", "throw_in"]
TacticalIdentity = Literal["high_press", "possession_based", "counter_attacking", "direct_play", "wing_play", "balanced"]
MatchWeather = Literal["clear", "cloudy", "rain", "heavy_rain", "snow", "windy"]


@dataclass(frozen=True, slots=True)
class MatchPhase:
    """Slice of a live match between two start minutes.

    Parameters
    ----------
    minute : int
        Start minute of the phase.
    phase_type : PhaseType
        Tactical character of the passage of play.
    description : str
        Narrative for the phase.
    involved_player_ids : Tuple[str, ...]
        Players drawn into the phase.
    events : Tuple[MatchEvent, ...]
        Events in chronological order.
    observable_attributes : Tuple[str, ...]
        Unique attributes revealed by the events, in first-seen order.
    momentum : int
        Mean quality of the last few events scaled to 0-100.
    set_piece_variant : SetPieceVariant | None, optional
        Variant of a set-piece phase.
    """

    minute: int
    phase_type: PhaseType
    description: str
    involved_player_ids: Tuple[str, ...]
    events: Tuple[MatchEvent, ...]
    observable_attributes: Tuple[str, ...]
    momentum: int
    set_piece_variant: Optional[SetPieceVariant] = None


@dataclass(frozen=True, slots=True)
class TacticalStyle:
    """Playing style of one side.

    Parameters
    ----------
    identity : TacticalIdentity
        Style label.
    pressing_intensity : int, default=10
        Pressing intensity on the 1-20 scale; scales matchup advantages.
    event_distribution : Dict[str, float] | None, optional
        Custom event frequency multipliers replacing the style defaults.
    """

    identity: TacticalIdentity
    pressing_intensity: int = 10
    event_distribution: Optional[Dict[str, float]] = None

    def __post_init__(self) -> None:
        """Validate pressing intensity."""
        if not 1 <= self.pressing_intensity <= 20:
            raise ValueError("pressing_intensity must be between 1 and 20")


@dataclass(frozen=True, slots=True)
class TacticalMatchup:
    """Resolved interaction between the home and away styles.

    Parameters
    ----------
    home_style : TacticalIdentity
        Home identity.
    away_style : TacticalIdentity
        Away identity.
    home_modifier : float
        Quality advantage of the home side in ``[-0.3, 0.3]``.
    away_modifier : float
        Quality advantage of the away side in ``[-0.3, 0.3]``.
    event_shift : Dict[str, float]
        Merged event frequency multipliers of both styles.
    """

    home_style: TacticalIdentity
    away_style: TacticalIdentity
    home_modifier: float
    away_modifier: float
    event_shift: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class GoalRecord:
    """Goal credited to a player.

    Parameters
    ----------
    player_id : str
        Scorer.
    minute : int
        Minute the goal was scored.
    side : Literal["home", "away"]
        Side the scorer plays for.
    """

    player_id: str
    minute: int
    side: Literal["home", "away"]


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Final score produced by the result simulation.

    Parameters
    ----------
    home_goals : int
        Goals scored by the home side.
    away_goals : int
        Goals scored by the away side.
    scorers : Tuple[GoalRecord, ...]
        Home scorers by minute followed by away scorers by minute.
    """

    home_goals: int
    away_goals: int
    scorers: Tuple[GoalRecord, ...] = ()

    @property
    def winner(self) -> Optional[str]:
        """Return ``"home"``, ``"away"`` or ``None`` for a draw."""
        if self.home_goals > self.away_goals:
            return "home"
        if self.away_goals > self.home_goals:
            return "away"
        return None
