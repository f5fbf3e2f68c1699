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
"""Shared fixtures and deterministic random sources for the test suite."""

from __future__ import annotations

from typing import Callable

import pytest

from scoutlens.engine.rng import SeededRandom
from scoutlens.models.player import HIDDEN_ATTRIBUTES, VISIBLE_ATTRIBUTES, HiddenAttributes, PlayerAttributes, PlayerRecord
from scoutlens.models.scout import ScoutProfile


class FixedRandom(SeededRandom):
    """Random source whose every uniform draw returns the same value."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(0)

    def next(self) -> float:
        return self.value


@pytest.fixture
def make_player() -> Callable[..., PlayerRecord]:
    """Factory building players with flat ratings unless overridden."""

    def factory(
        player_id: str = "p1",
        position: str = "CM",
        rating: int = 10,
        current_ability: int = 80,
        potential_ability: int = 120,
        market_value: float = 1000.0,
        **overrides: int,
    ) -> PlayerRecord:
        visible = {name: overrides.get(name, rating) for name in VISIBLE_ATTRIBUTES}
        hidden = {name: overrides.get(name, rating) for name in HIDDEN_ATTRIBUTES}
        return PlayerRecord(
            player_id=player_id,
            name=f"Player {player_id}",
            age=18,
            position=position,
            attributes=PlayerAttributes(**visible),
            hidden=HiddenAttributes(**hidden),
            current_ability=current_ability,
            potential_ability=potential_ability,
            market_value=market_value,
        )

    return factory


@pytest.fixture
def scout() -> ScoutProfile:
    """Unspecialised, rested scout with average intuition."""
    return ScoutProfile(scout_id="s1", name="Sam Reyes")


@pytest.fixture
def fixed_rng() -> Callable[[float], SeededRandom]:
    """Factory for random sources pinned to one uniform value."""
    return FixedRandom
