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
"""Tests for the deterministic random source."""

import pytest

from scoutlens.engine.rng import SeededRandom, clamp, hash_seed, round_half_up


class TestDeterminism:
    """Identical seeds replay identical streams."""

    def test_same_seed_same_sequence(self) -> None:
        a = SeededRandom("save-42")
        b = SeededRandom("save-42")
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_diverge(self) -> None:
        a = SeededRandom("alpha")
        b = SeededRandom("beta")
        assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]

    def test_from_state_continues_stream(self) -> None:
        rng = SeededRandom("resume")
        rng.next()
        restored = SeededRandom.from_state(rng.state)
        assert [rng.next() for _ in range(20)] == [restored.next() for _ in range(20)]

    def test_integer_seed_used_directly(self) -> None:
        assert hash_seed(123) == 123
        assert hash_seed(2**32 + 5) == 5

    def test_string_seed_hash_is_32_bit(self) -> None:
        assert 0 <= hash_seed("a fairly long seed string") < 2**32


class TestDraws:
    """Range and contract checks for each draw helper."""

    def test_next_in_unit_interval(self) -> None:
        rng = SeededRandom("unit")
        assert all(0.0 <= rng.next() < 1.0 for _ in range(1000))

    def test_next_int_inclusive_bounds(self) -> None:
        rng = SeededRandom("ints")
        values = {rng.next_int(3, 6) for _ in range(1000)}
        assert values == {3, 4, 5, 6}

    def test_next_int_rejects_inverted_range(self) -> None:
        with pytest.raises(ValueError):
            SeededRandom("x").next_int(5, 4)

    def test_next_float_bounds(self) -> None:
        rng = SeededRandom("floats")
        assert all(0.9 <= rng.next_float(0.9, 1.0) < 1.0 for _ in range(500))

    def test_chance_extremes(self) -> None:
        rng = SeededRandom("chance")
        assert not any(rng.chance(0.0) for _ in range(200))
        assert all(rng.chance(1.0) for _ in range(200))

    def test_chance_rejects_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            SeededRandom("x").chance(1.5)

    def test_gaussian_centres_on_mean(self) -> None:
        rng = SeededRandom("gauss")
        samples = [rng.gaussian(5.5, 2.0) for _ in range(4000)]
        assert abs(sum(samples) / len(samples) - 5.5) < 0.2

    def test_pick_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            SeededRandom("x").pick([])

    def test_pick_weighted_skips_zero_weights(self) -> None:
        rng = SeededRandom("weights")
        picks = {rng.pick_weighted([("a", 0.0), ("b", 1.0), ("c", 0.0)]) for _ in range(200)}
        assert picks == {"b"}

    @pytest.mark.parametrize("items", [[], [("a", 0.0)], [("a", -1.0), ("b", 2.0)]])
    def test_pick_weighted_invalid_inputs(self, items) -> None:
        with pytest.raises(ValueError):
            SeededRandom("x").pick_weighted(items)

    def test_shuffle_returns_permutation_copy(self) -> None:
        items = list(range(20))
        shuffled = SeededRandom("shuffle").shuffle(items)
        assert items == list(range(20))
        assert sorted(shuffled) == items


class TestNumericHelpers:
    """Rounding and clamping helpers."""

    def test_round_half_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(2.49) == 2

    def test_clamp(self) -> None:
        assert clamp(11, 1, 10) == 10
        assert clamp(-3, 1, 10) == 1
        assert clamp(4.2, 1, 10) == 4.2
