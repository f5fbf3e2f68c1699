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
"""Static catalog of the twelve Insight actions.

Action definitions never live in saved state; saves reference them by id
only, so costs and descriptions can be revised freely as long as the ids
stay stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

UNIVERSAL = "universal"
ALL_MODES: Tuple[str, ...] = ("full_observation", "investigation", "analysis", "quick_interaction")


@dataclass(frozen=True, slots=True)
class InsightAction:
    """Definition of one Insight action.

    Parameters
    ----------
    action_id : str
        Stable identifier used for lookup and serialisation.
    name : str
        Display name.
    description : str
        What the action does.
    cost : int
        IP deducted on use, fizzle or not.
    cooldown : int
        Weeks before another action may be used.
    specialization : str
        Specialization that unlocks the action, or ``"universal"``.
    available_during : Tuple[str, ...]
        Observation modes in which the action can be triggered.
    risk_description : str
        One-line warning about how the spend can be wasted.
    """

    action_id: str
    name: str
    description: str
    cost: int
    cooldown: int
    specialization: str
    available_during: Tuple[str, ...]
    risk_description: str

    @property
    def is_universal(self) -> bool:
        """Return ``True`` when any scout may use the action."""
        return self.specialization == UNIVERSAL

    def unlocked_for(self, specialization: Optional[str]) -> bool:
        """Return whether a scout with ``specialization`` may use the action.

        Parameters
        ----------
        specialization : str | None
            Scout specialization.

        Returns
        -------
        bool
            ``True`` for universal actions or a matching specialization.
        """
        return self.is_universal or self.specialization == specialization


INSIGHT_ACTIONS: Tuple[InsightAction, ...] = (
    InsightAction(
        "clarity_of_vision",
        "Clarity of Vision",
        "Perfect attribute reads for a focused player, bypassing perception noise.",
        25,
        2,
        UNIVERSAL,
        ("full_observation",),
        "The player might be mediocre; perfect reads on a journeyman waste IP.",
    ),
    InsightAction(
        "hidden_nature",
        "Hidden Nature",
        "Reveals the true values of the hidden character attributes.",
        25,
        2,
        UNIVERSAL,
        ALL_MODES,
        "The hidden traits might only confirm what you already suspected.",
    ),
    InsightAction(
        "the_verdict",
        "The Verdict",
        "Produces a masterwork report with a large quality bonus.",
        20,
        2,
        UNIVERSAL,
        ("full_observation", "analysis"),
        "The report will be excellent but the player might not warrant it.",
    ),
    InsightAction(
        "second_look",
        "Second Look",
        "Retroactively studies an unfocused player from the session in full detail.",
        20,
        2,
        UNIVERSAL,
        ("full_observation",),
        "The player might have had a quiet session with nothing to see.",
    ),
    InsightAction(
        "diamond_in_the_rough",
        "Diamond in the Rough",
        "Scans everyone at the venue and finds the highest-potential prospect.",
        30,
        2,
        "youth",
        ("full_observation",),
        "The best available might be a solid professional rather than a wonderkid.",
    ),
    InsightAction(
        "generational_whisper",
        "Generational Whisper",
        "A gut feeling about the highest-potential player present, with near-certain reliability.",
        25,
        2,
        "youth",
        ("full_observation",),
        "It might fire on a player you have already scouted.",
    ),
    InsightAction(
        "perfect_fit",
        "Perfect Fit",
        "Grades the player against every position in the system.",
        25,
        2,
        "first_team",
        ("full_observation",),
        "A perfect system fit can still hide character problems.",
    ),
    InsightAction(
        "pressure_test",
        "Pressure Test",
        "Simulates a high-pressure scenario to reveal true big-game temperament.",
        25,
        2,
        "first_team",
        ("full_observation",),
        "The player might already be known to handle pressure.",
    ),
    InsightAction(
        "network_pulse",
        "Network Pulse",
        "Every contact in the region shares intel at once, regardless of relationship.",
        25,
        2,
        "regional",
        ("investigation",),
        "Intel is only as good as the contacts it comes from.",
    ),
    InsightAction(
        "territory_mastery",
        "Territory Mastery",
        "Grants a permanent confidence boost in the current sub-region.",
        30,
        2,
        "regional",
        ("quick_interaction",),
        "The sub-region might not hold much talent.",
    ),
    InsightAction(
        "algorithmic_epiphany",
        "Algorithmic Epiphany",
        "The statistical model runs at perfect accuracy for one query cycle.",
        25,
        2,
        "data",
        ("analysis",),
        "A perfect query on a thin dataset still returns limited results.",
    ),
    InsightAction(
        "market_blind_spot",
        "Market Blind Spot",
        "Reveals players the market undervalues in the current league pool.",
        30,
        2,
        "data",
        ("analysis",),
        "Undervalued by the market is not the same as good enough for your club.",
    ),
)

_ACTIONS_BY_ID: Dict[str, InsightAction] = {action.action_id: action for action in INSIGHT_ACTIONS}


def find_insight_action(action_id: str) -> Optional[InsightAction]:
    """Return the action with ``action_id`` or ``None``.

    Parameters
    ----------
    action_id : str
        Action identifier.

    Returns
    -------
    InsightAction | None
        Matching catalog entry.
    """
    return _ACTIONS_BY_ID.get(action_id)


def get_insight_action(action_id: str) -> InsightAction:
    """Return the action with ``action_id``.

    Parameters
    ----------
    action_id : str
        Action identifier.

    Returns
    -------
    InsightAction
        Matching catalog entry.

    Raises
    ------
    ValueError
        If ``action_id`` is not in the catalog.
    """
    try:
        return _ACTIONS_BY_ID[action_id]
    except KeyError as exc:
        known = ", ".join(_ACTIONS_BY_ID)
        raise ValueError(f"Unknown insight action '{action_id}'. Known actions: {known}") from exc
