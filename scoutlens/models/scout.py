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
"""Scout profile and network contact models consumed by the Insight economy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

Specialization = Literal["youth", "first_team", "regional", "data"]

SPECIALIZATIONS: Tuple[str, ...] = ("youth", "first_team", "regional", "data")


@dataclass
class ScoutProfile:
    """Subset of the scout's career state read by the perception core.

    Parameters
    ----------
    scout_id : str
        Unique identifier for the scout.
    name : str
        Display name.
    specialization : Specialization | None, optional
        Primary discipline; ``None`` for an unspecialised scout.
    intuition : int, default=10
        Intuition rating on the 1-20 scale; drives Insight capacity.
    fatigue : int, default=0
        Current fatigue from 0 to 100; drives the fizzle risk.
    unlocked_perks : Tuple[str, ...], default=()
        Identifiers of perks the scout has unlocked.
    """

    scout_id: str
    name: str
    specialization: Optional[Specialization] = None
    intuition: int = 10
    fatigue: int = 0
    unlocked_perks: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate the specialization and rating ranges."""
        if self.specialization is not None and self.specialization not in SPECIALIZATIONS:
            known = ", ".join(SPECIALIZATIONS)
            raise ValueError(f"Unknown specialization '{self.specialization}'. Known specializations: {known}")
        if not 1 <= self.intuition <= 20:
            raise ValueError("intuition must be between 1 and 20")
        if not 0 <= self.fatigue <= 100:
            raise ValueError("fatigue must be between 0 and 100")

    def has_perk(self, perk_id: str) -> bool:
        """Return whether the scout has unlocked ``perk_id``.

        Parameters
        ----------
        perk_id : str
            Perk identifier.

        Returns
        -------
        bool
            ``True`` when the perk is unlocked.
        """
        return perk_id in self.unlocked_perks


@dataclass
class Contact:
    """Member of the scout's network who can relay intel.

    Parameters
    ----------
    contact_id : str
        Unique identifier for the contact.
    name : str
        Display name.
    organization : str
        Club, agency or federation the contact works for.
    reliability : float, default=0.5
        Trustworthiness of the contact's information in ``[0, 1]``.
    known_player_ids : Tuple[str, ...], default=()
        Players the contact has first-hand knowledge of.
    """

    contact_id: str
    name: str
    organization: str
    reliability: float = 0.5
    known_player_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate that reliability is a probability."""
        if not 0.0 <= self.reliability <= 1.0:
            raise ValueError("reliability must be between 0 and 1")
