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
"""Tests for the free-form moment generator."""

import pytest

from scoutlens.engine.moments import (
    MOMENT_ATTRIBUTE_POOLS,
    MOMENT_TYPES,
    VENUE_MOMENT_WEIGHTS,
    format_moment_description,
    generate_moments,
    get_moment_attribute_hints,
    select_moment_type,
)
from scoutlens.engine.rng import SeededRandom
from scoutlens.models.player import ATTRIBUTE_GROUPS
from scoutlens.models.session import SessionPlayer

PLAYERS = (
    SessionPlayer(player_id="alpha-player", name="Ada", position="CM"),
    SessionPlayer(player_id="bravo-player", name="Ben", position="ST"),
    SessionPlayer(player_id="charlie-player", name="Cal", position="CB", is_focused=True),
)


class TestAttributeHints:
    """Moment type to attribute pool mapping."""

    def test_pools_match_attribute_groups(self) -> None:
        assert get_moment_attribute_hints("technical_action") == ATTRIBUTE_GROUPS["technical"]
        assert get_moment_attribute_hints("character_reveal") == ATTRIBUTE_GROUPS["hidden"]

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(ValueError, match="Known types"):
            get_moment_attribute_hints("set_piece")

    def test_every_venue_table_covers_every_type(self) -> None:
        for weights in VENUE_MOMENT_WEIGHTS.values():
            assert set(weights) == set(MOMENT_TYPES)

    def test_format_description(self) -> None:
        assert format_moment_description("{player_name} scored. {player_name}!", "Ada") == "Ada scored. Ada!"

    def test_select_type_unknown_venue_uses_defaults(self) -> None:
        rng = SeededRandom("types")
        assert {select_moment_type(rng, "nowhere") for _ in range(300)} == set(MOMENT_TYPES)


class TestGenerateMoments:
    """Counts, ranges and pool containment of generated moments."""

    def test_empty_roster_raises(self) -> None:
        with pytest.raises(ValueError):
            generate_moments(SeededRandom("x"), (), "school_match", 0, 8)

    def test_invariants_over_many_phases(self) -> None:
        rng = SeededRandom("moments")
        ids = {p.player_id for p in PLAYERS}
        for phase in range(30):
            moments = generate_moments(rng, PLAYERS, "street_football", phase % 10, 10)
            assert 3 <= len(moments) <= 6
            for moment in moments:
                assert moment.player_id in ids
                assert 1 <= moment.quality <= 10
                assert 1 <= len(moment.attributes_hinted) <= 3
                assert len(set(moment.attributes_hinted)) == len(moment.attributes_hinted)
                assert set(moment.attributes_hinted) <= set(MOMENT_ATTRIBUTE_POOLS[moment.moment_type])
                assert moment.is_standout == (moment.quality >= 8)

    def test_every_chance_failing_still_fills_slots(self, fixed_rng) -> None:
        moments = generate_moments(fixed_rng(0.999), PLAYERS, "school_match", 0, 8)
        assert len(moments) == 6
        assert all(m.player_id in {p.player_id for p in PLAYERS} for m in moments)
        assert not any(m.pressure_context for m in moments)

    def test_every_chance_passing(self, fixed_rng) -> None:
        moments = generate_moments(fixed_rng(0.0), PLAYERS, "school_match", 0, 8)
        assert len(moments) == 3
        assert all(m.pressure_context for m in moments)
        assert all(m.quality == 10 and m.is_standout for m in moments)

    def test_description_names_player(self) -> None:
        moments = generate_moments(SeededRandom("names"), PLAYERS, "school_match", 2, 8)
        names = {p.player_id: p.name for p in PLAYERS}
        for moment in moments:
            assert names[moment.player_id] in moment.description
            assert "{player_name}" not in moment.vague_description

    def test_moment_ids_unique_and_stable(self) -> None:
        first = generate_moments(SeededRandom("ids"), PLAYERS, "youth_festival", 4, 8)
        second = generate_moments(SeededRandom("ids"), PLAYERS, "youth_festival", 4, 8)
        assert first == second
        assert len({m.moment_id for m in first}) == len(first)
        assert all(m.moment_id.startswith("moment-p4-") for m in first)
