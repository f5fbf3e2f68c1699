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
"""Deterministic pseudorandom source threaded through every generator.

The generator is a Mulberry32 stream over 32-bit unsigned state. Identical
seeds and identical call sequences produce bit-identical outputs, which is
what lets sessions, matches and Insight spends be replayed from a save.
Callers must pass the same :class:`SeededRandom` instance explicitly; no
module in the package keeps ambient random state.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple, TypeVar

from scoutlens.engine.config import ENGINE_CONFIG

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_GOLDEN_STEP = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Multiply two integers modulo ``2**32``.

    Parameters
    ----------
    a : int
        First factor.
    b : int
        Second factor.

    Returns
    -------
    int
        Product truncated to 32 unsigned bits.
    """
    return (a * b) & _MASK


def hash_seed(seed: str | int) -> int:
    """Collapse a seed into the 32-bit starting state.

    Parameters
    ----------
    seed : str | int
        Save-game seed string, or an integer used directly.

    Returns
    -------
    int
        Unsigned 32-bit state value.
    """
    if isinstance(seed, int):
        return seed & _MASK

    cfg = ENGINE_CONFIG.random
    h = cfg.seed_hash_start
    for char in seed:
        h = _imul(h ^ ord(char), cfg.seed_hash_multiplier)
        h ^= h >> 16
    return h & _MASK


class SeededRandom:
    """Seeded random source exposing the draws the generators rely on.

    Parameters
    ----------
    seed : str | int
        Seed string (hashed) or raw integer state.
    """

    def __init__(self, seed: str | int) -> None:
        """Hash the seed and discard the warm-up draws.

        Parameters
        ----------
        seed : str | int
            Seed string (hashed) or raw integer state.
        """
        self._state = hash_seed(seed)
        for _ in range(ENGINE_CONFIG.random.warmup_draws):
            self.next()

    @property
    def state(self) -> int:
        """Return the internal 32-bit cursor for persistence."""
        return self._state

    @classmethod
    def from_state(cls, state: int) -> "SeededRandom":
        """Rebuild a source positioned exactly at a saved cursor.

        Parameters
        ----------
        state : int
            Value previously read from :attr:`state`.

        Returns
        -------
        SeededRandom
            Source that continues the saved stream.
        """
        rng = cls.__new__(cls)
        rng._state = state & _MASK
        return rng

    def next(self) -> float:
        """Advance the stream.

        Returns
        -------
        float
            Uniform value in ``[0, 1)``.
        """
        self._state = (self._state + _GOLDEN_STEP) & _MASK
        z = self._state
        z = _imul(z ^ (z >> 15), z | 1)
        z ^= (z + _imul(z ^ (z >> 7), z | 61)) & _MASK
        z = (z ^ (z >> 14)) & _MASK
        return z / _TWO_POW_32

    def next_float(self, min_value: float, max_value: float) -> float:
        """Draw a uniform float.

        Parameters
        ----------
        min_value : float
            Inclusive lower bound.
        max_value : float
            Exclusive upper bound.

        Returns
        -------
        float
            Value in ``[min_value, max_value)``.
        """
        return self.next() * (max_value - min_value) + min_value

    def next_int(self, min_value: int, max_value: int) -> int:
        """Draw a uniform integer from an inclusive range.

        Parameters
        ----------
        min_value : int
            Inclusive lower bound.
        max_value : int
            Inclusive upper bound.

        Returns
        -------
        int
            Value in ``[min_value, max_value]``.

        Raises
        ------
        ValueError
            If ``min_value`` exceeds ``max_value``.
        """
        if min_value > max_value:
            raise ValueError(f"next_int: min ({min_value}) must not exceed max ({max_value})")
        return math.floor(self.next() * (max_value - min_value + 1)) + min_value

    def gaussian(self, mean: float = 0.0, sd: float = 1.0) -> float:
        """Draw from a normal distribution with the Box-Muller transform.

        Two uniforms are consumed per call. Clamping is left to the caller.

        Parameters
        ----------
        mean : float
            Distribution centre.
        sd : float
            Standard deviation.

        Returns
        -------
        float
            Normally distributed sample.
        """
        u1 = max(self.next(), 1e-10)
        u2 = self.next()
        z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return mean + sd * z

    def chance(self, probability: float) -> bool:
        """Return ``True`` with the given probability.

        Parameters
        ----------
        probability : float
            Probability in ``[0, 1]``.

        Returns
        -------
        bool
            Outcome of a single Bernoulli trial.

        Raises
        ------
        ValueError
            If ``probability`` lies outside ``[0, 1]``.
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"chance: probability must be within [0, 1], got {probability}")
        return self.next() < probability

    def pick(self, items: Sequence[T]) -> T:
        """Choose one element uniformly.

        Parameters
        ----------
        items : Sequence[T]
            Non-empty candidates.

        Returns
        -------
        T
            Selected element.

        Raises
        ------
        ValueError
            If ``items`` is empty.
        """
        if not items:
            raise ValueError("pick: cannot pick from an empty sequence")
        return items[self.next_int(0, len(items) - 1)]

    def pick_weighted(self, items: Sequence[Tuple[T, float]]) -> T:
        """Choose one element with probability proportional to its weight.

        Parameters
        ----------
        items : Sequence[Tuple[T, float]]
            ``(item, weight)`` pairs with non-negative weights.

        Returns
        -------
        T
            Selected element.

        Raises
        ------
        ValueError
            If ``items`` is empty, a weight is negative, or all weights are zero.
        """
        if not items:
            raise ValueError("pick_weighted: cannot pick from an empty sequence")

        total = 0.0
        for _, weight in items:
            if weight < 0:
                raise ValueError(f"pick_weighted: negative weight {weight}")
            total += weight
        if total <= 0:
            raise ValueError("pick_weighted: total weight must be positive")

        threshold = self.next() * total
        for item, weight in items:
            threshold -= weight
            if threshold <= 0:
                return item
        return items[-1][0]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a Fisher-Yates shuffled copy.

        Parameters
        ----------
        items : Sequence[T]
            Elements to shuffle; left untouched.

        Returns
        -------
        List[T]
            New list holding the same elements in random order.
        """
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i)
            result[i], result[j] = result[j], result[i]
        return result


def clamp(value: float, low: float, high: float) -> float:
    """Constrain ``value`` to ``[low, high]``.

    Parameters
    ----------
    value : float
        Number to constrain.
    low : float
        Lower bound.
    high : float
        Upper bound.

    Returns
    -------
    float
        The clamped value.
    """
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded towards positive infinity.

    Parameters
    ----------
    value : float
        Number to round.

    Returns
    -------
    int
        Rounded integer; ``2.5`` becomes ``3`` and ``-2.5`` becomes ``-2``.
    """
    return math.floor(value + 0.5)
