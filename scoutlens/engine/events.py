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
"""Event domain models and lookup tables for live match generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

ALL_POSITIONS: Tuple[str, ...] = ("GK", "CB", "LB", "RB", "CDM", "CM", "CAM", "LW", "RW", "ST")
OUTFIELD_POSITIONS: Tuple[str, ...] = ALL_POSITIONS[1:]

EVENT_REVEALED: Dict[str, Tuple[str, ...]] = {
    "goal": ("finishing", "composure"),
    "assist": ("passing", "vision"),
    "shot": ("shooting", "composure"),
    "pass": ("passing", "teamwork"),
    "dribble": ("dribbling", "balance"),
    "tackle": ("tackling", "anticipation"),
    "header": ("heading", "jumping"),
    "save": ("composure", "positioning"),
    "foul": ("composure", "pressing"),
    "cross": ("crossing", "vision"),
    "sprint": ("pace", "stamina"),
    "positioning": ("positioning", "anticipation"),
    "error": ("composure", "decision_making"),
    "leadership": ("leadership", "teamwork"),
    "aerial_duel": ("jumping", "heading", "strength"),
    "interception": ("anticipation", "marking", "positioning"),
    "through_ball": ("vision", "passing", "decision_making"),
    "hold_up": ("balance", "strength", "first_touch"),
    "injury": ("stamina", "strength"),
    "substitution": (),
    "card": ("composure",),
}
"""Attributes each event type lets the scout read."""

EVENT_ELIGIBLE_POSITIONS: Dict[str, Tuple[str, ...]] = {
    "goal": ("ST", "LW", "RW", "CAM", "CM", "CDM", "CB", "LB", "RB"),
    "assist": ("CAM", "CM", "LW", "RW", "ST", "LB", "RB", "CDM", "CB"),
    "shot": ("ST", "LW", "RW", "CAM", "CM", "CDM", "CB", "LB", "RB"),
    "pass": ALL_POSITIONS,
    "dribble": ("LW", "RW", "ST", "CAM", "CM", "LB", "RB"),
    "tackle": ("CB", "LB", "RB", "CDM", "CM"),
    "header": ("CB", "ST", "CDM", "CM", "CAM", "LB", "RB"),
    "save": ("GK",),
    "foul": OUTFIELD_POSITIONS,
    "cross": ("LB", "RB", "LW", "RW", "CM"),
    "sprint": OUTFIELD_POSITIONS,
    "positioning": ALL_POSITIONS,
    "error": ALL_POSITIONS,
    "leadership": ("GK", "CB", "CDM", "CM", "CAM", "ST"),
    "aerial_duel": ("CB", "ST", "CDM", "CM", "CAM", "LB", "RB", "LW", "RW"),
    "interception": ("CB", "LB", "RB", "CDM", "CM", "CAM"),
    "through_ball": ("CAM", "CM", "CDM", "LW", "RW", "ST"),
    "hold_up": ("ST", "LW", "RW", "CAM"),
    "injury": ALL_POSITIONS,
    "substitution": ALL_POSITIONS,
    "card": OUTFIELD_POSITIONS,
}
"""Positions that may be credited with each event type."""

INJURY_TRIGGER_EVENTS: Tuple[str, ...] = ("sprint", "tackle", "aerial_duel", "foul")


@dataclass(frozen=True, slots=True)
class MatchEvent:
    """Discrete action observed during a live match phase.

    Parameters
    ----------
    minute : int
        Match minute when the event occurred.
    event_type : str
        Category of event (for example ``"goal"`` or ``"tackle"``).
    player_id : str
        Player credited with the event.
    quality : int
        Execution quality on the 1-10 scale.
    attributes_revealed : Tuple[str, ...]
        Attributes the event lets the scout read.
    description : str
        Commentary line describing what happened.
    secondary_player_id : str | None, optional
        Another involved player, when there is one.
    """

    minute: int
    event_type: str
    player_id: str
    quality: int
    attributes_revealed: Tuple[str, ...]
    description: str
    secondary_player_id: Optional[str] = None

    @property
    def is_goal(self) -> bool:
        """Return ``True`` when the event is a goal."""
        return self.event_type == "goal"
