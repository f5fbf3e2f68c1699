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
"""Utilities that synthesise players, scouts and contacts for quick simulations.

Every helper draws from a :class:`SeededRandom`, so the same seed always
produces the same roster.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from scoutlens.engine.rng import SeededRandom, clamp, round_half_up
from scoutlens.models.player import (
    HIDDEN_ATTRIBUTES,
    POSITION_WEIGHTS,
    POSITIONS,
    VISIBLE_ATTRIBUTES,
    HiddenAttributes,
    PlayerAttributes,
    PlayerRecord,
)
from scoutlens.models.scout import SPECIALIZATIONS, Contact, ScoutProfile

FIRST_NAMES: Tuple[str, ...] = (
    "Alex", "Bruno", "Callum", "Dario", "Elias", "Femi", "Gio", "Hugo",
    "Idris", "Jonas", "Kai", "Luca", "Mateo", "Nico", "Owen", "Rafa",
)
LAST_NAMES: Tuple[str, ...] = (
    "Adeyemi", "Bianchi", "Carvalho", "Dubois", "Evans", "Fischer", "Garcia",
    "Hughes", "Ivanov", "Jensen", "Kowalski", "Lopez", "Morgan", "Novak",
)
ORGANIZATIONS: Tuple[str, ...] = (
    "Riverside Academy",
    "County FA",
    "Northgate Athletic",
    "Harbour Sports Agency",
    "Valley Youth League",
    "Eastfield United",
)

BASE_RATING_RANGE = (5, 14)
KEY_RATING_RANGE = (10, 18)
AGE_RANGE = (15, 32)
PEAK_AGE = 24


def _random_name(rng: SeededRandom) -> str:
    """Return a synthetic full name.

    Parameters
    ----------
    rng : SeededRandom
        Random source.

    Returns
    -------
    str
        ``"First Last"``.
    """
    return f"{rng.pick(FIRST_NAMES)} {rng.pick(LAST_NAMES)}"


def generate_player_record(
    rng: SeededRandom,
    player_id: str,
    name: Optional[str] = None,
    position: Optional[str] = None,
) -> PlayerRecord:
    """Generate a player with position-weighted random attributes.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    player_id : str
        Identifier assigned to the created player.
    name : Optional[str]
        Display name; a synthetic name is drawn when omitted.
    position : Optional[str]
        Position code; random when ``None``.

    Returns
    -------
    PlayerRecord
        A new ground-truth player.
    """
    if name is None:
        name = _random_name(rng)
    if position is None:
        position = rng.pick(POSITIONS)

    # Attributes the position values most are drawn from a higher band
    key_attributes = POSITION_WEIGHTS.get(position, {})
    ratings = {}
    for attribute in VISIBLE_ATTRIBUTES:
        low, high = KEY_RATING_RANGE if attribute in key_attributes else BASE_RATING_RANGE
        ratings[attribute] = rng.next_int(low, high)
    hidden = {attribute: rng.next_int(3, 18) for attribute in HIDDEN_ATTRIBUTES}

    age = rng.next_int(*AGE_RANGE)
    mean_rating = sum(ratings.values()) / len(ratings)
    current_ability = int(clamp(round_half_up(mean_rating * 10 + rng.next_int(-10, 10)), 1, 200))
    headroom = max(0, PEAK_AGE - age) * rng.next_int(2, 8)
    potential_ability = int(clamp(current_ability + headroom, current_ability, 200))
    market_value = round(current_ability**2 * 25.0 * (1.5 if age < PEAK_AGE else 1.0), 2)

    return PlayerRecord(
        player_id=player_id,
        name=name,
        age=age,
        position=position,
        attributes=PlayerAttributes(**ratings),
        hidden=HiddenAttributes(**hidden),
        current_ability=current_ability,
        potential_ability=potential_ability,
        market_value=market_value,
    )


def generate_player_pool(
    rng: SeededRandom,
    count: int,
    id_prefix: str = "player",
    positions: Optional[Sequence[str]] = None,
) -> List[PlayerRecord]:
    """Generate ``count`` players with sequential identifiers.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    count : int
        Number of players to create.
    id_prefix : str
        Prefix for identifiers such as ``"player_1"``.
    positions : Optional[Sequence[str]]
        Positions to cycle through; random positions when omitted.

    Returns
    -------
    List[PlayerRecord]
        Generated players in identifier order.
    """
    if count < 0:
        raise ValueError("count must not be negative")
    pool = []
    for index in range(count):
        position = positions[index % len(positions)] if positions else None
        pool.append(generate_player_record(rng, f"{id_prefix}_{index + 1}", position=position))
    return pool


def generate_scout(
    rng: SeededRandom,
    scout_id: str = "scout_1",
    specialization: Optional[str] = None,
    unlocked_perks: Iterable[str] = (),
) -> ScoutProfile:
    """Generate a scout with random intuition and light fatigue.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    scout_id : str
        Identifier for the scout.
    specialization : Optional[str]
        Discipline; drawn from the known specializations when omitted.
    unlocked_perks : Iterable[str]
        Perks the scout starts with.

    Returns
    -------
    ScoutProfile
        A new scout.
    """
    if specialization is None:
        specialization = rng.pick(SPECIALIZATIONS)
    return ScoutProfile(
        scout_id=scout_id,
        name=_random_name(rng),
        specialization=specialization,
        intuition=rng.next_int(6, 16),
        fatigue=rng.next_int(0, 30),
        unlocked_perks=tuple(unlocked_perks),
    )


def generate_contacts(rng: SeededRandom, count: int, known_player_ids: Sequence[str] = ()) -> List[Contact]:
    """Generate network contacts who know a few of ``known_player_ids``.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    count : int
        Number of contacts.
    known_player_ids : Sequence[str]
        Players the contacts may know; each contact knows up to three.

    Returns
    -------
    List[Contact]
        Generated contacts.
    """
    contacts = []
    for index in range(count):
        known: Tuple[str, ...] = ()
        if known_player_ids:
            known = tuple(rng.shuffle(known_player_ids)[: rng.next_int(0, 3)])
        contacts.append(
            Contact(
                contact_id=f"contact_{index + 1}",
                name=_random_name(rng),
                organization=rng.pick(ORGANIZATIONS),
                reliability=round(rng.next_float(0.3, 0.95), 2),
                known_player_ids=known,
            )
        )
    return contacts
