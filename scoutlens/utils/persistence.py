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
"""Utilities for loading players and saving Insight ledgers as JSON.

The helpers translate plain dictionaries or JSON documents into the domain
objects the engine understands. Player payloads default missing ratings to
the middle of the scale so that incomplete datasets remain usable.
InsightState payloads are strict: required keys must be present.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Union

from scoutlens.insight.economy import InsightState, InsightUseRecord
from scoutlens.models.player import HIDDEN_ATTRIBUTES, VISIBLE_ATTRIBUTES, HiddenAttributes, PlayerAttributes, PlayerRecord

DEFAULT_RATING = 10
PathLike = Union[str, Path]


def player_from_dict(d: Dict[str, Any]) -> PlayerRecord:
    """Build a ``PlayerRecord`` from a plain dictionary payload.

    Parameters
    ----------
    d : Dict[str, Any]
        Serialized player. Supported keys include ``id``, ``name``, ``age``,
        ``position``, ``current_ability``, ``potential_ability``,
        ``market_value`` and the ``attributes`` / ``hidden`` rating maps.

    Returns
    -------
    PlayerRecord
        Player with defaults for any missing rating.
    """
    attrs = d.get("attributes", {}) or {}
    hidden = d.get("hidden", {}) or {}
    player_id = str(d.get("id", "0"))
    current = d.get("current_ability", 100)
    return PlayerRecord(
        player_id=player_id,
        name=d.get("name", f"player_{player_id}"),
        age=d.get("age", 20),
        position=d.get("position", "CM"),
        attributes=PlayerAttributes(**{name: attrs.get(name, DEFAULT_RATING) for name in VISIBLE_ATTRIBUTES}),
        hidden=HiddenAttributes(**{name: hidden.get(name, DEFAULT_RATING) for name in HIDDEN_ATTRIBUTES}),
        current_ability=current,
        potential_ability=d.get("potential_ability", current),
        market_value=float(d.get("market_value", 0.0)),
    )


def player_to_dict(player: PlayerRecord) -> Dict[str, Any]:
    """Serialize ``player`` in the shape :func:`player_from_dict` reads.

    Parameters
    ----------
    player : PlayerRecord
        Player to serialize.

    Returns
    -------
    Dict[str, Any]
        JSON-compatible payload.
    """
    return {
        "id": player.player_id,
        "name": player.name,
        "age": player.age,
        "position": player.position,
        "current_ability": player.current_ability,
        "potential_ability": player.potential_ability,
        "market_value": player.market_value,
        "attributes": asdict(player.attributes),
        "hidden": asdict(player.hidden),
    }


def load_players_from_json(path: PathLike) -> List[PlayerRecord]:
    """Load a player pool from a JSON document.

    The document is either a list of player payloads or an object with a
    ``players`` list.

    Parameters
    ----------
    path : PathLike
        Location of the JSON document.

    Returns
    -------
    List[PlayerRecord]
        Players in document order.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Players JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    entries = data.get("players", []) if isinstance(data, dict) else data
    return [player_from_dict(entry) for entry in entries]


def insight_state_to_dict(state: InsightState) -> Dict[str, Any]:
    """Serialize an Insight ledger.

    Parameters
    ----------
    state : InsightState
        Ledger to serialize.

    Returns
    -------
    Dict[str, Any]
        JSON-compatible payload including the use history.
    """
    return {
        "points": state.points,
        "capacity": state.capacity,
        "cooldown_weeks_remaining": state.cooldown_weeks_remaining,
        "lifetime_used": state.lifetime_used,
        "lifetime_earned": state.lifetime_earned,
        "last_used_week": state.last_used_week,
        "history": [asdict(record) for record in state.history],
    }


def insight_state_from_dict(d: Dict[str, Any]) -> InsightState:
    """Rebuild an Insight ledger from :func:`insight_state_to_dict` output.

    Parameters
    ----------
    d : Dict[str, Any]
        Serialized ledger. ``points`` and ``capacity`` are required, as are
        ``action_id``, ``week``, ``season``, ``outcome`` and ``narrative`` on
        every history entry.

    Returns
    -------
    InsightState
        Restored ledger.

    Raises
    ------
    KeyError
        Raised when a required key is missing.
    """
    history = tuple(
        InsightUseRecord(
            action_id=entry["action_id"],
            week=entry["week"],
            season=entry["season"],
            outcome=entry["outcome"],
            narrative=entry["narrative"],
            target_player_id=entry.get("target_player_id"),
        )
        for entry in d.get("history", [])
    )
    return InsightState(
        points=d["points"],
        capacity=d["capacity"],
        cooldown_weeks_remaining=d.get("cooldown_weeks_remaining", 0),
        lifetime_used=d.get("lifetime_used", 0),
        lifetime_earned=d.get("lifetime_earned", 0),
        last_used_week=d.get("last_used_week", 0),
        history=history,
    )


def save_insight_state(state: InsightState, path: PathLike) -> None:
    """Write an Insight ledger to ``path`` as JSON.

    Parameters
    ----------
    state : InsightState
        Ledger to save.
    path : PathLike
        Destination file; parent directories are created.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as fh:
        json.dump(insight_state_to_dict(state), fh, indent=2)


def load_insight_state(path: PathLike) -> InsightState:
    """Read an Insight ledger saved by :func:`save_insight_state`.

    Parameters
    ----------
    path : PathLike
        Source file.

    Returns
    -------
    InsightState
        Restored ledger.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Insight state JSON not found: {path}")
    with p.open("r", encoding="utf-8") as fh:
        return insight_state_from_dict(json.load(fh))
