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
"""Live match phase orchestrator and final score simulation.

Random draws happen in a fixed order so a seed always replays the same
match: start-minute jitter for every phase first, then per phase the phase
type, the involved players, the set-piece variant, the event count, and per
event its type, credited player, quality and injury roll. The phase
description is drawn last.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from scoutlens.engine.commentary import generate_commentary
from scoutlens.engine.config import ENGINE_CONFIG
from scoutlens.engine.events import EVENT_ELIGIBLE_POSITIONS, EVENT_REVEALED, INJURY_TRIGGER_EVENTS, MatchEvent
from scoutlens.engine.rng import SeededRandom, clamp, round_half_up
from scoutlens.engine.tactics import apply_tactical_modifiers, build_phase_pool, get_tactical_quality_modifier
from scoutlens.models.match import GoalRecord, MatchPhase, MatchResult, TacticalMatchup
from scoutlens.models.player import PlayerRecord

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger

PHASE_EVENT_WEIGHTS: Dict[str, Dict[str, float]] = {
    "build_up": {"pass": 5, "positioning": 3, "dribble": 2, "cross": 2, "through_ball": 2, "leadership": 1, "hold_up": 1},
    "transition": {"sprint": 5, "pass": 4, "dribble": 3, "tackle": 3, "shot": 2, "error": 2, "interception": 2},
    "set_piece": {"header": 4, "aerial_duel": 4, "shot": 4, "cross": 3, "tackle": 2, "goal": 1},
    "pressing_sequence": {
        "tackle": 5,
        "interception": 4,
        "sprint": 4,
        "pass": 3,
        "error": 3,
        "positioning": 2,
        "leadership": 1,
    },
    "counter_attack": {"sprint": 5, "dribble": 4, "pass": 3, "shot": 3, "goal": 2, "through_ball": 2, "cross": 1},
    "possession": {"pass": 5, "positioning": 5, "through_ball": 3, "dribble": 2, "cross": 2, "hold_up": 1, "leadership": 1},
}

SET_PIECE_VARIANT_POOL: Tuple[str, ...] = (
    "corner",
    "corner",
    "corner",
    "free_kick",
    "free_kick",
    "free_kick",
    "penalty",
    "throw_in",
    "throw_in",
)

SET_PIECE_EVENT_WEIGHTS: Dict[str, Dict[str, float]] = {
    "corner": {"header": 7, "shot": 3, "cross": 2, "goal": 2, "tackle": 1},
    "free_kick": {"shot": 7, "cross": 3, "goal": 2, "header": 2, "save": 1},
    "penalty": {"goal": 7, "save": 3},
    "throw_in": {"header": 5, "tackle": 3, "positioning": 3, "cross": 2, "shot": 1},
}

WEATHER_NOISE: Dict[str, float] = {
    "clear": 0.8,
    "cloudy": 1.0,
    "rain": 1.2,
    "heavy_rain": 1.6,
    "snow": 1.8,
    "windy": 1.4,
}

PHASE_DESCRIPTIONS: Dict[str, Tuple[str, ...]] = {
    "build_up": (
        "Patient build-up from the back, centre-backs splitting wide to receive.",
        "The holding midfielder drops between the centre-backs to start the move.",
        "Short passes search for an opening as the attack takes shape.",
    ),
    "transition": (
        "Possession turns over in midfield and both sides scramble to reorganise.",
        "A loose ball flips the direction of play in an instant.",
        "Sudden change of possession leaves the midfield stretched.",
    ),
    "set_piece": (
        "Bodies pack the box as the set piece is prepared.",
        "The referee stops play and the dead-ball specialists step up.",
        "A stoppage gives both sides a chance to rehearse their routines.",
    ),
    "pressing_sequence": (
        "The front line presses high, cutting off the passing lanes.",
        "A coordinated press forces the ball back towards the goalkeeper.",
        "Wave after wave of pressure hunts the ball in the opposition half.",
    ),
    "counter_attack": (
        "The ball is won deep and the runners break at pace.",
        "A rapid counter leaves the defence outnumbered.",
        "Three passes and the ball is in the final third.",
    ),
    "possession": (
        "Long spell of possession as the ball circulates around the pitch.",
        "Calm recycling of the ball while the shape holds.",
        "Keep-ball in midfield, waiting for a gap to appear.",
    ),
}

SET_PIECE_DESCRIPTIONS: Dict[str, Tuple[str, ...]] = {
    "corner": (
        "Corner kick. Markers pick up their runners as the delivery is awaited.",
        "The corner is swung in towards the near post.",
        "Short corner option on, but the taker looks for the far post.",
    ),
    "free_kick": (
        "Free kick in a dangerous area; the wall lines up.",
        "Set-piece specialist stands over the free kick.",
        "A free kick out wide invites a crossing delivery.",
    ),
    "penalty": (
        "Penalty awarded. The taker places the ball on the spot.",
        "The goalkeeper bounces on the line as the penalty taker steps back.",
        "Silence around the ground as the penalty is about to be taken.",
    ),
    "throw_in": (
        "Long throw into the box, the big men charge forward.",
        "Quick throw-in catches the defence unsettled.",
        "Throw-in deep in the opposition half; bodies jostle for position.",
    ),
}

ATTACKING_POSITIONS = frozenset({"ST", "LW", "RW", "CAM"})


def _phase_start_minutes(rng: SeededRandom, phase_count: int) -> List[int]:
    """Spread jittered, sorted start minutes across ninety minutes.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    phase_count : int
        Number of phases.

    Returns
    -------
    List[int]
        Non-decreasing start minutes between 1 and 89.
    """
    step = 90 // phase_count
    starts = []
    for i in range(phase_count):
        base = i * step + 1
        jitter = rng.next_int(0, max(1, step - 2))
        starts.append(min(89, base + jitter))
    starts.sort()
    return starts


def _select_involved_players(rng: SeededRandom, players: Sequence[PlayerRecord]) -> List[str]:
    """Choose the players drawn into a phase without replacement.

    Goalkeepers carry a much lower weight because they are rarely the focus
    of open play.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    players : Sequence[PlayerRecord]
        Home players followed by away players.

    Returns
    -------
    List[str]
        Involved player ids in selection order.
    """
    cfg = ENGINE_CONFIG.match
    count = rng.next_int(*cfg.involved_range)
    selected: List[str] = []
    for _ in range(count):
        remaining = [
            (player, cfg.goalkeeper_involvement_weight if player.position == "GK" else cfg.outfield_involvement_weight)
            for player in players
            if player.player_id not in selected
        ]
        if not remaining:
            break
        selected.append(rng.pick_weighted(remaining).player_id)
    return selected


def _pick_eligible_player(
    rng: SeededRandom,
    event_type: str,
    involved: Sequence[PlayerRecord],
    all_players: Sequence[PlayerRecord],
) -> PlayerRecord:
    """Credit an event to a player whose position allows it.

    Involved players are preferred, then any eligible player in the match,
    then any involved player.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    event_type : str
        Event category.
    involved : Sequence[PlayerRecord]
        Players drawn into the phase.
    all_players : Sequence[PlayerRecord]
        Everyone on the pitch.

    Returns
    -------
    PlayerRecord
        The credited player.
    """
    eligible = EVENT_ELIGIBLE_POSITIONS.get(event_type, ())
    eligible_involved = [p for p in involved if p.position in eligible]
    if eligible_involved:
        return rng.pick(eligible_involved)
    eligible_anywhere = [p for p in all_players if p.position in eligible]
    if eligible_anywhere:
        return rng.pick(eligible_anywhere)
    return rng.pick(involved) if involved else rng.pick(all_players)


def _compute_event_quality(rng: SeededRandom, player: PlayerRecord, revealed: Sequence[str], weather: str) -> int:
    """Roll event quality around the player's revealed attributes.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    player : PlayerRecord
        Credited player.
    revealed : Sequence[str]
        Attributes the event reveals.
    weather : str
        Match weather; worse weather widens the noise.

    Returns
    -------
    int
        Quality on the 1-10 scale.
    """
    values = [player.get_attribute(name) for name in revealed] or [10]
    base = (sum(values) / len(values)) / 20 * 10
    noise = ENGINE_CONFIG.match.quality_noise * WEATHER_NOISE.get(weather, 1.0)
    return int(clamp(round_half_up(rng.gaussian(base, noise)), 1, 10))


def _collect_observable_attributes(events: Iterable[MatchEvent]) -> Tuple[str, ...]:
    """Return the unique revealed attributes in first-seen order.

    Parameters
    ----------
    events : Iterable[MatchEvent]
        Events of one phase.

    Returns
    -------
    Tuple[str, ...]
        De-duplicated attributes.
    """
    seen: Dict[str, None] = {}
    for event in events:
        for name in event.attributes_revealed:
            seen.setdefault(name, None)
    return tuple(seen)


def _momentum(recent_qualities: Sequence[int]) -> int:
    """Scale the mean of the most recent event qualities to 0-100.

    Parameters
    ----------
    recent_qualities : Sequence[int]
        Every event quality so far in the match.

    Returns
    -------
    int
        Momentum score.
    """
    window = list(recent_qualities[-ENGINE_CONFIG.match.momentum_window :])
    average = sum(window) / len(window) if window else 5.0
    return int(round_half_up(clamp(average / 10 * 100, 0, 100)))


def generate_match_phases(
    rng: SeededRandom,
    home_players: Sequence[PlayerRecord],
    away_players: Sequence[PlayerRecord],
    weather: str = "clear",
    matchup: Optional[TacticalMatchup] = None,
    scouted_player_ids: Iterable[str] = (),
    debugger: Optional["SessionDebugger"] = None,
) -> List[MatchPhase]:
    """Generate the phases a scout watches during a live match.

    Parameters
    ----------
    rng : SeededRandom
        Random source threaded through every draw.
    home_players : Sequence[PlayerRecord]
        Home side on the pitch.
    away_players : Sequence[PlayerRecord]
        Away side on the pitch.
    weather : str
        Match weather key from :data:`WEATHER_NOISE`.
    matchup : TacticalMatchup | None
        Tactical matchup biasing phase types, event weights and quality.
    scouted_player_ids : Iterable[str]
        Players the scout came to watch; flagged in commentary.
    debugger : SessionDebugger | None
        Optional trace logger.

    Returns
    -------
    List[MatchPhase]
        Twelve to eighteen phases ordered by start minute; empty when neither
        side has players.
    """
    all_players = list(home_players) + list(away_players)
    if not all_players:
        return []

    cfg = ENGINE_CONFIG.match
    by_id: Dict[str, PlayerRecord] = {p.player_id: p for p in all_players}
    home_ids = frozenset(p.player_id for p in home_players)
    scouted = frozenset(scouted_player_ids)

    phase_count = rng.next_int(*cfg.phase_count_range)
    starts = _phase_start_minutes(rng, phase_count)
    phase_pool = build_phase_pool(matchup)

    phases: List[MatchPhase] = []
    recent_qualities: List[int] = []

    for i, minute in enumerate(starts):
        end_minute = starts[i + 1] - 1 if i < phase_count - 1 else 90
        phase_type = rng.pick(phase_pool)
        involved_ids = _select_involved_players(rng, all_players)
        involved = [by_id[pid] for pid in involved_ids]

        variant: Optional[str] = None
        if phase_type == "set_piece":
            variant = rng.pick(SET_PIECE_VARIANT_POOL)

        weights: Mapping[str, float]
        if variant is not None:
            weights = SET_PIECE_EVENT_WEIGHTS[variant]
        elif matchup is not None:
            weights = apply_tactical_modifiers(PHASE_EVENT_WEIGHTS[phase_type], matchup, "home")
        else:
            weights = PHASE_EVENT_WEIGHTS[phase_type]
        weighted_types = [(event_type, weight) for event_type, weight in weights.items() if weight > 0]

        event_count = 1 if variant == "penalty" else rng.next_int(*cfg.event_count_range)
        phase_width = max(1, end_minute - minute)
        events: List[MatchEvent] = []

        for e in range(event_count):
            event_type = rng.pick_weighted(weighted_types)
            revealed = EVENT_REVEALED[event_type]
            primary = _pick_eligible_player(rng, event_type, involved, all_players)
            secondary = next((p for p in involved if p.player_id != primary.player_id), None)
            event_minute = minute + math.floor(phase_width / event_count * e)

            quality = _compute_event_quality(rng, primary, revealed, weather)
            if matchup is not None:
                bonus = get_tactical_quality_modifier(matchup, primary.player_id, home_ids)
                quality = int(clamp(round_half_up(quality + bonus), 1, 10))
            recent_qualities.append(quality)

            events.append(
                MatchEvent(
                    minute=event_minute,
                    event_type=event_type,
                    player_id=primary.player_id,
                    quality=quality,
                    attributes_revealed=revealed,
                    description=generate_commentary(
                        event_type,
                        event_minute,
                        primary.name,
                        secondary.name if secondary else None,
                        primary.player_id in scouted,
                    ),
                    secondary_player_id=secondary.player_id if secondary else None,
                )
            )

            if event_type in INJURY_TRIGGER_EVENTS and rng.chance(cfg.injury_chance):
                events.extend(_injury_chain(primary, event_minute, primary.player_id in scouted))
                if debugger:
                    debugger.log_match_event(event_minute, "injury", f"{primary.name} ({primary.player_id}) forced off")

        phase_description = (
            rng.pick(SET_PIECE_DESCRIPTIONS[variant]) if variant is not None else rng.pick(PHASE_DESCRIPTIONS[phase_type])
        )
        phases.append(
            MatchPhase(
                minute=minute,
                phase_type=phase_type,
                description=phase_description,
                involved_player_ids=tuple(involved_ids),
                events=tuple(events),
                observable_attributes=_collect_observable_attributes(events),
                momentum=_momentum(recent_qualities),
                set_piece_variant=variant,
            )
        )

    if debugger:
        debugger.log_match_event(90, "phases", f"Generated {len(phases)} phases in {weather} conditions")
    return phases


def _injury_chain(player: PlayerRecord, event_minute: int, is_target: bool) -> Tuple[MatchEvent, MatchEvent]:
    """Build the injury event and the substitution that follows it.

    Parameters
    ----------
    player : PlayerRecord
        Injured player.
    event_minute : int
        Minute of the triggering event.
    is_target : bool
        Whether the player is a scouting target.

    Returns
    -------
    Tuple[MatchEvent, MatchEvent]
        Injury one minute after the trigger, substitution a minute later.
    """
    injury_minute = min(90, event_minute + 1)
    sub_minute = min(90, injury_minute + 1)
    injury = MatchEvent(
        minute=injury_minute,
        event_type="injury",
        player_id=player.player_id,
        quality=1,
        attributes_revealed=EVENT_REVEALED["injury"],
        description=generate_commentary("injury", injury_minute, player.name, None, is_target),
    )
    substitution = MatchEvent(
        minute=sub_minute,
        event_type="substitution",
        player_id=player.player_id,
        quality=1,
        attributes_revealed=(),
        description=generate_commentary("substitution", sub_minute, player.name, None, is_target),
    )
    return injury, substitution


def _average_ability(players: Sequence[PlayerRecord]) -> float:
    """Return the mean current ability of a side.

    Parameters
    ----------
    players : Sequence[PlayerRecord]
        Side to average.

    Returns
    -------
    float
        Mean current ability, or the configured default for an empty side.
    """
    if not players:
        return ENGINE_CONFIG.match.default_side_ability
    return sum(p.current_ability for p in players) / len(players)


def _sample_goals(rng: SeededRandom, expected: float) -> int:
    """Draw a goal count around ``expected``.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    expected : float
        Expected goals for the side.

    Returns
    -------
    int
        Goals between zero and the configured maximum.
    """
    raw = rng.gaussian(expected, math.sqrt(expected + 0.5))
    return int(clamp(round_half_up(raw), 0, ENGINE_CONFIG.match.max_goals))


def _pick_scorers(
    rng: SeededRandom, players: Sequence[PlayerRecord], goals: int, side: str
) -> List[GoalRecord]:
    """Attribute goals to players, one unique minute per goal.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    players : Sequence[PlayerRecord]
        Side that scored.
    goals : int
        Number of goals to attribute.
    side : str
        ``"home"`` or ``"away"``.

    Returns
    -------
    List[GoalRecord]
        Scorers sorted by minute.
    """
    if not players or goals == 0:
        return []
    weighted = [
        (
            player.player_id,
            max(
                1.0,
                player.attributes.shooting * 0.4
                + player.attributes.finishing * 0.6
                + (3 if player.position in ATTACKING_POSITIONS else 0),
            ),
        )
        for player in players
    ]
    used_minutes: set = set()
    scorers = []
    for _ in range(goals):
        player_id = rng.pick_weighted(weighted)
        minute = rng.next_int(1, 90)
        while minute in used_minutes:
            minute = rng.next_int(1, 90)
        used_minutes.add(minute)
        scorers.append(GoalRecord(player_id=player_id, minute=minute, side=side))
    scorers.sort(key=lambda record: record.minute)
    return scorers


def simulate_match_result(
    rng: SeededRandom,
    home_players: Sequence[PlayerRecord],
    away_players: Sequence[PlayerRecord],
    debugger: Optional["SessionDebugger"] = None,
) -> MatchResult:
    """Simulate the final score from each side's average current ability.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    home_players : Sequence[PlayerRecord]
        Home side.
    away_players : Sequence[PlayerRecord]
        Away side.
    debugger : SessionDebugger | None
        Optional trace logger.

    Returns
    -------
    MatchResult
        Goals for each side and the scorers.
    """
    cfg = ENGINE_CONFIG.match
    effective_home = _average_ability(home_players) * cfg.home_advantage
    away_ability = _average_ability(away_players)
    home_share = effective_home / (effective_home + away_ability)
    total_expected = max(0.0, rng.gaussian(cfg.expected_goals_mean, cfg.expected_goals_sd))

    home_goals = _sample_goals(rng, total_expected * home_share)
    away_goals = _sample_goals(rng, total_expected * (1 - home_share))
    scorers = _pick_scorers(rng, home_players, home_goals, "home") + _pick_scorers(
        rng, away_players, away_goals, "away"
    )

    if debugger:
        debugger.log_match_event(90, "full_time", f"Final score {home_goals}-{away_goals}")
    return MatchResult(home_goals=home_goals, away_goals=away_goals, scorers=tuple(scorers))
