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
"""Moment generation for free-form observation venues.

A phase at a non-match venue is a handful of short moments. Each moment
features one player, has a type drawn from the venue's weight table and a
quality on the 1-10 scale, and hints at up to three attributes taken from
the pool that belongs to its type. Two texts are produced: a detailed one
for players the scout is focusing on and a vague one for everybody else.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from scoutlens.engine.config import ENGINE_CONFIG
from scoutlens.engine.rng import SeededRandom, clamp, round_half_up
from scoutlens.models.player import ATTRIBUTE_GROUPS
from scoutlens.models.session import MomentType, PlayerMoment, SessionPlayer, VenueAtmosphere

MOMENT_TYPES: Tuple[MomentType, ...] = (
    "technical_action",
    "physical_test",
    "mental_response",
    "tactical_decision",
    "character_reveal",
)

MOMENT_ATTRIBUTE_POOLS: Dict[str, Tuple[str, ...]] = {
    "technical_action": ATTRIBUTE_GROUPS["technical"],
    "physical_test": ATTRIBUTE_GROUPS["physical"],
    "mental_response": ATTRIBUTE_GROUPS["mental"],
    "tactical_decision": ATTRIBUTE_GROUPS["tactical"],
    "character_reveal": ATTRIBUTE_GROUPS["hidden"],
}


def _weights(technical: float, physical: float, mental: float, tactical: float, character: float) -> Dict[str, float]:
    """Build a moment type weight table in canonical type order.

    Parameters
    ----------
    technical : float
        Weight of technical actions.
    physical : float
        Weight of physical tests.
    mental : float
        Weight of mental responses.
    tactical : float
        Weight of tactical decisions.
    character : float
        Weight of character reveals.

    Returns
    -------
    Dict[str, float]
        Mapping of moment type to weight.
    """
    return dict(zip(MOMENT_TYPES, (technical, physical, mental, tactical, character)))


DEFAULT_MOMENT_WEIGHTS = _weights(20, 20, 20, 20, 20)

VENUE_MOMENT_WEIGHTS: Dict[str, Dict[str, float]] = {
    "school_match": _weights(30, 15, 15, 30, 10),
    "street_football": _weights(35, 30, 15, 10, 10),
    "grassroots_tournament": _weights(20, 20, 20, 20, 20),
    "academy_trial_day": _weights(20, 15, 25, 30, 10),
    "youth_festival": _weights(15, 15, 30, 15, 25),
    "attend_match": _weights(20, 15, 20, 35, 10),
    "reserve_match": _weights(20, 20, 20, 30, 10),
    "trial_match": _weights(20, 20, 20, 25, 15),
    "training_visit": _weights(35, 15, 15, 30, 5),
    "scouting_mission": _weights(20, 20, 20, 25, 15),
}

# {player_name} is substituted at render time.
MOMENT_DESCRIPTIONS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "technical_action": {
        "high": (
            "{player_name} took the ball on the half-turn and threaded a pass through three defenders.",
            "{player_name} killed a dropping ball dead with one touch and was away before anyone closed.",
            "{player_name} slalomed past two challenges and finished low into the corner.",
            "{player_name} whipped in a cross that landed exactly on a team-mate's forehead.",
        ),
        "medium": (
            "{player_name} kept possession under a challenge and recycled it sensibly.",
            "{player_name} played a tidy one-two, though the return pass was slightly behind.",
            "{player_name} struck a decent effort that the keeper gathered comfortably.",
        ),
        "low": (
            "{player_name} let a simple pass run under their foot and out of play.",
            "{player_name} tried a flick that went straight to an opponent.",
            "{player_name} snatched at a shooting chance and sent it well wide.",
        ),
    },
    "physical_test": {
        "high": (
            "{player_name} burst clear from a standing start and left the full-back for dead.",
            "{player_name} rode a heavy shoulder charge and still came away with the ball.",
            "{player_name} was still sprinting box to box long after everyone else had slowed.",
        ),
        "medium": (
            "{player_name} held their own in a shoulder-to-shoulder duel.",
            "{player_name} won the race to a loose ball, just.",
            "{player_name} got up well for a header without quite winning it cleanly.",
        ),
        "low": (
            "{player_name} was knocked off the ball far too easily.",
            "{player_name} was left behind in a foot race they should have won.",
            "{player_name} looked heavy-legged and slow to recover their position.",
        ),
    },
    "mental_response": {
        "high": (
            "{player_name} stayed ice cold with two opponents closing and picked the right option.",
            "{player_name} read the danger three passes early and snuffed it out.",
            "{player_name} rallied the players around them after a setback and the team responded.",
        ),
        "medium": (
            "{player_name} made a reasonable decision under pressure, if a slightly safe one.",
            "{player_name} stayed switched on during a scrappy spell.",
            "{player_name} hesitated briefly before choosing the correct pass.",
        ),
        "low": (
            "{player_name} panicked under a press and gave the ball away cheaply.",
            "{player_name} switched off and lost track of the runner behind them.",
            "{player_name} dwelt on the ball far too long and was dispossessed.",
        ),
    },
    "tactical_decision": {
        "high": (
            "{player_name} drifted into the half-space at exactly the right moment to receive.",
            "{player_name} triggered the press perfectly and the team won it back high up the pitch.",
            "{player_name} dropped to cover a team-mate's position before the danger had developed.",
        ),
        "medium": (
            "{player_name} held their position well, though they rarely offered an extra option.",
            "{player_name} made a sensible run that pulled a defender slightly out of shape.",
            "{player_name} tracked their runner adequately without ever looking comfortable.",
        ),
        "low": (
            "{player_name} was caught out of position and a gap opened behind them.",
            "{player_name} pressed alone and the opponents simply played around them.",
            "{player_name} drifted infield and left the flank completely exposed.",
        ),
    },
    "character_reveal": {
        "high": (
            "{player_name} picked up a fallen opponent and calmed a flaring situation.",
            "{player_name} demanded the ball straight after a mistake and made amends.",
            "{player_name} was first to the warm-down and last to leave, talking tactics with the coach.",
        ),
        "medium": (
            "{player_name} had a short word with the referee but let it go quickly.",
            "{player_name} kept going after the game was settled, without much intensity.",
            "{player_name} shrugged off a rough tackle and carried on.",
        ),
        "low": (
            "{player_name} sulked after being substituted and ignored the coach.",
            "{player_name} went down too easily and stopped running when it mattered.",
            "{player_name} argued with a team-mate in full view of everyone.",
        ),
    },
}

VAGUE_DESCRIPTIONS: Dict[str, Tuple[str, ...]] = {
    "technical_action": (
        "A player produced a neat piece of skill.",
        "Somebody did something precise on the ball; hard to see exactly who.",
        "There was a tidy bit of technique from one of the outfield players.",
    ),
    "physical_test": (
        "Someone showed a real burst of pace.",
        "A player won a physical contest convincingly.",
        "One of them covered a lot of ground in that exchange.",
    ),
    "mental_response": (
        "A player stayed composed while others around them did not.",
        "Somebody made a decisive call in a difficult moment.",
        "One of the players reacted to the pressure; hard to read from here.",
    ),
    "tactical_decision": (
        "A player made an intelligent positional move.",
        "Someone's run opened up a passing lane.",
        "One of them seemed to understand the shape better than the rest.",
    ),
    "character_reveal": (
        "Something off the ball looked significant from a character point of view.",
        "A player's reaction to an incident said something about them.",
        "There was a brief exchange between players worth noting.",
    ),
}


def get_moment_attribute_hints(moment_type: str) -> Tuple[str, ...]:
    """Return the attributes a moment of ``moment_type`` may hint at.

    Parameters
    ----------
    moment_type : str
        One of :data:`MOMENT_TYPES`.

    Returns
    -------
    Tuple[str, ...]
        Attribute pool for the moment type.

    Raises
    ------
    ValueError
        If ``moment_type`` is unknown.
    """
    try:
        return MOMENT_ATTRIBUTE_POOLS[moment_type]
    except KeyError as exc:
        known = ", ".join(MOMENT_TYPES)
        raise ValueError(f"Unknown moment type '{moment_type}'. Known types: {known}") from exc


def format_moment_description(template: str, player_name: str) -> str:
    """Substitute ``player_name`` into a description template.

    Parameters
    ----------
    template : str
        Template containing ``{player_name}`` placeholders.
    player_name : str
        Name to insert.

    Returns
    -------
    str
        Rendered description.
    """
    return template.replace("{player_name}", player_name)


def select_moment_type(rng: SeededRandom, venue_type: str) -> str:
    """Draw a moment type using the venue's weight table.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    venue_type : str
        Venue category; unknown venues use equal weights.

    Returns
    -------
    str
        Selected moment type.
    """
    weights = VENUE_MOMENT_WEIGHTS.get(venue_type, DEFAULT_MOMENT_WEIGHTS)
    return rng.pick_weighted(list(weights.items()))


def _select_moment_player(rng: SeededRandom, players: Sequence[SessionPlayer]) -> SessionPlayer:
    """Pick the player featured in one moment slot.

    Every player rolls independently to join the candidate pool; when nobody
    makes it, any player is chosen so the slot is never empty.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    players : Sequence[SessionPlayer]
        Players present in the session.

    Returns
    -------
    SessionPlayer
        Featured player.
    """
    cfg = ENGINE_CONFIG.moments
    candidates = [
        player
        for player in players
        if rng.chance(cfg.focused_chance if player.is_focused else cfg.unfocused_chance)
    ]
    if not candidates:
        return rng.pick(players)
    return rng.pick(candidates)


def _quality_band(quality: int) -> str:
    """Map a moment quality onto its description band.

    Parameters
    ----------
    quality : int
        Quality on the 1-10 scale.

    Returns
    -------
    str
        ``"high"``, ``"medium"`` or ``"low"``.
    """
    cfg = ENGINE_CONFIG.moments
    if quality >= cfg.high_band:
        return "high"
    if quality >= cfg.medium_band:
        return "medium"
    return "low"


def generate_moments(
    rng: SeededRandom,
    players: Sequence[SessionPlayer],
    venue_type: str,
    phase_index: int,
    total_phases: int,
    atmosphere: Optional[VenueAtmosphere] = None,
) -> List[PlayerMoment]:
    """Generate every moment of one free-form observation phase.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    players : Sequence[SessionPlayer]
        Players present in the session; must not be empty.
    venue_type : str
        Venue category driving the moment type weights.
    phase_index : int
        Zero-based phase index.
    total_phases : int
        Phases in the session.
    atmosphere : VenueAtmosphere | None, optional
        Venue atmosphere; its crowd intensity raises the pressure chance.

    Returns
    -------
    List[PlayerMoment]
        Between three and six moments.

    Raises
    ------
    ValueError
        If ``players`` is empty.
    """
    if not players:
        raise ValueError("generate_moments requires at least one player")

    cfg = ENGINE_CONFIG.moments
    count = rng.next_int(*cfg.count_range)
    progress = phase_index / (total_phases - 1) if total_phases > 1 else 0.0
    crowd_boost = atmosphere.crowd_intensity * cfg.pressure_crowd_weight if atmosphere else 0.0
    pressure_probability = min(cfg.pressure_base + progress * cfg.pressure_ramp + crowd_boost, cfg.pressure_cap)

    moments = []
    for slot in range(count):
        player = _select_moment_player(rng, players)
        moment_type = select_moment_type(rng, venue_type)
        quality = round_half_up(clamp(rng.gaussian(cfg.quality_mean, cfg.quality_sd), 1, 10))

        pool = get_moment_attribute_hints(moment_type)
        hint_count = rng.next_int(1, min(cfg.max_hints, len(pool)))
        hinted = tuple(rng.shuffle(pool)[:hint_count])

        detailed = rng.pick(MOMENT_DESCRIPTIONS[moment_type][_quality_band(quality)])
        vague = rng.pick(VAGUE_DESCRIPTIONS[moment_type])
        pressure = rng.chance(pressure_probability)

        moments.append(
            PlayerMoment(
                moment_id=f"moment-p{phase_index}-{slot}-{player.player_id[:8]}",
                player_id=player.player_id,
                moment_type=moment_type,
                quality=quality,
                attributes_hinted=hinted,
                description=format_moment_description(detailed, player.name),
                vague_description=vague,
                pressure_context=pressure,
                is_standout=quality >= cfg.standout_threshold,
            )
        )
    return moments
