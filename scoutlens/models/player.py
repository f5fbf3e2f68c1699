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
"""Ground-truth player records and their attribute ratings."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Dict, Iterable, Optional, Tuple

from scoutlens.engine.rng import round_half_up

ATTRIBUTE_GROUPS: Dict[str, Tuple[str, ...]] = {
    "technical": (
        "first_touch",
        "passing",
        "dribbling",
        "crossing",
        "shooting",
        "heading",
        "tackling",
        "finishing",
    ),
    "physical": ("pace", "strength", "stamina", "agility", "jumping", "balance"),
    "mental": ("composure", "positioning", "work_rate", "decision_making", "leadership", "anticipation"),
    "tactical": ("off_the_ball", "pressing", "defensive_awareness", "vision", "marking", "teamwork"),
    "hidden": ("injury_proneness", "consistency", "big_game_temperament", "professionalism"),
}

ATTRIBUTE_DOMAINS: Dict[str, str] = {
    name: domain for domain, names in ATTRIBUTE_GROUPS.items() for name in names
}

VISIBLE_ATTRIBUTES: Tuple[str, ...] = tuple(
    name for domain in ("technical", "physical", "mental", "tactical") for name in ATTRIBUTE_GROUPS[domain]
)
HIDDEN_ATTRIBUTES: Tuple[str, ...] = ATTRIBUTE_GROUPS["hidden"]

POSITIONS: Tuple[str, ...] = ("GK", "CB", "LB", "RB", "CDM", "CM", "CAM", "LW", "RW", "ST")

POSITION_WEIGHTS: Dict[str, Dict[str, float]] = {
    "GK": {"composure": 0.25, "anticipation": 0.2, "decision_making": 0.2, "positioning": 0.2, "jumping": 0.15},
    "CB": {
        "tackling": 0.2,
        "heading": 0.2,
        "defensive_awareness": 0.2,
        "strength": 0.15,
        "marking": 0.15,
        "composure": 0.1,
    },
    "LB": {"pace": 0.2, "crossing": 0.2, "tackling": 0.15, "defensive_awareness": 0.15, "stamina": 0.15, "agility": 0.15},
    "RB": {"pace": 0.2, "crossing": 0.2, "tackling": 0.15, "defensive_awareness": 0.15, "stamina": 0.15, "agility": 0.15},
    "CDM": {
        "tackling": 0.2,
        "positioning": 0.2,
        "pressing": 0.15,
        "defensive_awareness": 0.2,
        "passing": 0.15,
        "work_rate": 0.1,
    },
    "CM": {"passing": 0.2, "vision": 0.2, "stamina": 0.15, "decision_making": 0.2, "work_rate": 0.1, "first_touch": 0.15},
    "CAM": {
        "vision": 0.25,
        "passing": 0.2,
        "dribbling": 0.15,
        "first_touch": 0.15,
        "decision_making": 0.15,
        "off_the_ball": 0.1,
    },
    "LW": {"pace": 0.25, "dribbling": 0.2, "crossing": 0.15, "finishing": 0.15, "agility": 0.15, "off_the_ball": 0.1},
    "RW": {"pace": 0.25, "dribbling": 0.2, "crossing": 0.15, "finishing": 0.15, "agility": 0.15, "off_the_ball": 0.1},
    "ST": {"finishing": 0.25, "shooting": 0.2, "heading": 0.15, "strength": 0.15, "pace": 0.1, "off_the_ball": 0.15},
}

NEUTRAL_FIT = 50


def _validate_ratings(owner: object) -> None:
    """Ensure every dataclass field of ``owner`` sits on the 1-20 scale.

    Parameters
    ----------
    owner : object
        Dataclass instance holding integer ratings.
    """
    for item in fields(owner):
        value = getattr(owner, item.name)
        if not 1 <= value <= 20:
            raise ValueError(f"{item.name} must be between 1 and 20")


@dataclass
class PlayerAttributes:
    """Observable attribute ratings on the 1-20 scale.

    Parameters
    ----------
    first_touch : int
        Control of the ball on receipt.
    passing : int
        Range and accuracy of passes.
    dribbling : int
        Close control while running with the ball.
    crossing : int
        Delivery from wide areas.
    shooting : int
        Shot power and technique from distance.
    heading : int
        Accuracy and power with the head.
    tackling : int
        Timing and cleanliness of challenges.
    finishing : int
        Conversion of chances in and around the box.
    pace : int
        Top speed over distance.
    strength : int
        Physical power in duels.
    stamina : int
        Ability to sustain effort across a match.
    agility : int
        Speed of changing direction.
    jumping : int
        Leap height in aerial contests.
    balance : int
        Staying upright under contact.
    composure : int
        Calmness on the ball under pressure.
    positioning : int
        Defensive placement without the ball.
    work_rate : int
        Willingness to run and cover.
    decision_making : int
        Quality of choices in possession.
    leadership : int
        Influence over team-mates.
    anticipation : int
        Reading of how play will develop.
    off_the_ball : int
        Attacking movement without the ball.
    pressing : int
        Execution of pressing triggers.
    defensive_awareness : int
        Recognition of defensive danger.
    vision : int
        Ability to spot passing options.
    marking : int
        Tracking of direct opponents.
    teamwork : int
        Adherence to collective plans.
    """

    first_touch: int
    passing: int
    dribbling: int
    crossing: int
    shooting: int
    heading: int
    tackling: int
    finishing: int
    pace: int
    strength: int
    stamina: int
    agility: int
    jumping: int
    balance: int
    composure: int
    positioning: int
    work_rate: int
    decision_making: int
    leadership: int
    anticipation: int
    off_the_ball: int
    pressing: int
    defensive_awareness: int
    vision: int
    marking: int
    teamwork: int

    def __post_init__(self) -> None:
        """Validate that all attributes fall within the 1-20 rating scale."""
        _validate_ratings(self)


@dataclass
class HiddenAttributes:
    """Character ratings that are never shown to the scout directly.

    Parameters
    ----------
    injury_proneness : int
        Likelihood of picking up injuries.
    consistency : int
        Reliability of performances from week to week.
    big_game_temperament : int
        Response to high-pressure occasions.
    professionalism : int
        Attitude to training and lifestyle.
    """

    injury_proneness: int = 10
    consistency: int = 10
    big_game_temperament: int = 10
    professionalism: int = 10

    def __post_init__(self) -> None:
        """Validate that all attributes fall within the 1-20 rating scale."""
        _validate_ratings(self)


@dataclass
class PlayerRecord:
    """Ground-truth player as owned by the world registry.

    Parameters
    ----------
    player_id : str
        Unique identifier for the player.
    name : str
        Display name.
    age : int
        Age in years.
    position : str
        Primary position code, for example ``"CM"``.
    attributes : PlayerAttributes
        Observable ratings.
    hidden : HiddenAttributes
        Character ratings revealed only by special actions.
    current_ability : int
        Present overall ability on the 1-200 scale.
    potential_ability : int
        Ceiling ability on the 1-200 scale.
    market_value : float, default=0.0
        Transfer valuation in the league currency.
    """

    player_id: str
    name: str
    age: int
    position: str
    attributes: PlayerAttributes
    hidden: HiddenAttributes
    current_ability: int
    potential_ability: int
    market_value: float = 0.0

    def __post_init__(self) -> None:
        """Validate the ability scale and market value."""
        for label, value in (("current_ability", self.current_ability), ("potential_ability", self.potential_ability)):
            if not 1 <= value <= 200:
                raise ValueError(f"{label} must be between 1 and 200")
        if self.market_value < 0:
            raise ValueError("market_value must not be negative")

    def get_attribute(self, name: str) -> int:
        """Look up a visible or hidden rating by name.

        Parameters
        ----------
        name : str
            Attribute name such as ``"first_touch"`` or ``"consistency"``.

        Returns
        -------
        int
            The true rating.

        Raises
        ------
        ValueError
            If ``name`` is not a known attribute.
        """
        try:
            domain = ATTRIBUTE_DOMAINS[name]
        except KeyError as exc:
            raise ValueError(f"Unknown attribute '{name}'") from exc
        source = self.hidden if domain == "hidden" else self.attributes
        return getattr(source, name)

    def visible_ratings(self) -> Dict[str, int]:
        """Return every observable rating keyed by attribute name.

        Returns
        -------
        Dict[str, int]
            Mapping in the canonical attribute order.
        """
        return asdict(self.attributes)

    def best_visible_attribute(self) -> Tuple[str, int]:
        """Return the strongest observable attribute.

        Ties resolve to the attribute listed first.

        Returns
        -------
        Tuple[str, int]
            ``(name, value)`` of the highest rating.
        """
        best_name = VISIBLE_ATTRIBUTES[0]
        best_value = getattr(self.attributes, best_name)
        for name in VISIBLE_ATTRIBUTES[1:]:
            value = getattr(self.attributes, name)
            if value > best_value:
                best_name, best_value = name, value
        return best_name, best_value

    def get_position_fit(self, position: str) -> int:
        """Score how well the player suits ``position`` on a 0-100 scale.

        The weighted attribute sum is normalised against the maximum possible
        weighted sum (20 times the total weight).

        Parameters
        ----------
        position : str
            Position code.

        Returns
        -------
        int
            Fit score; unknown positions score a neutral 50.
        """
        weights = POSITION_WEIGHTS.get(position)
        if not weights:
            return NEUTRAL_FIT
        weighted = sum(self.get_attribute(name) * weight for name, weight in weights.items())
        max_possible = 20 * sum(weights.values())
        return round_half_up(weighted / max_possible * 100)

    def get_position_fits(self, positions: Optional[Iterable[str]] = None) -> Dict[str, int]:
        """Compute fit scores for several positions.

        Parameters
        ----------
        positions : Optional[Iterable[str]]
            Position codes to grade; every known position when omitted.

        Returns
        -------
        Dict[str, int]
            Mapping from position code to fit score.
        """
        targets = POSITIONS if positions is None else positions
        return {position: self.get_position_fit(position) for position in targets}
