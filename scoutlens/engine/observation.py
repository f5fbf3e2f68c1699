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
"""Populate observation sessions with moments, narrative and events.

Each phase of a ``setup`` full-observation session is filled in order:
moments first, then a narrative line chosen by segment (or by match minute
for venues without their own bank), then an optional atmosphere event.
The session keeps a single venue atmosphere that collects every event.
Other modes are delegated to their own populators through
:func:`populate_session_phases`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from scoutlens.engine.analysis import populate_analysis_phases
from scoutlens.engine.atmosphere import append_atmosphere_event, create_venue_atmosphere, generate_atmosphere_event
from scoutlens.engine.investigation import populate_investigation_phases
from scoutlens.engine.moments import generate_moments
from scoutlens.engine.quick_interaction import populate_quick_interaction_phases
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import is_populated
from scoutlens.models.session import ObservationSession

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger

SEGMENTS: Tuple[str, ...] = ("early", "mid", "late")

VENUE_DESCRIPTIONS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "school_match": {
        "early": (
            "Kick-off on a short school pitch. Both sides are eager and the opening exchanges are frantic.",
            "The teachers are still shouting formations as the first few minutes settle into a pattern.",
            "An early scramble in midfield sets the tone: physical, direct and full of energy.",
        ),
        "mid": (
            "The game has found a rhythm. The better players are starting to demand the ball.",
            "Legs are tiring and the gaps are opening. Now you can see who reads the game.",
            "A spell of sustained pressure from one side tests everyone's discipline.",
        ),
        "late": (
            "The final minutes. Some players are chasing the game and some are hiding from it.",
            "Tired bodies and a close score. Character decides the last few exchanges.",
            "The coaches have stopped shouting. Whatever happens now is down to the players.",
        ),
    },
    "street_football": {
        "early": (
            "Teams are picked on the spot and the game starts without ceremony.",
            "Fast, chaotic opening exchanges on a hard surface with no touchlines to speak of.",
            "Everyone wants the ball. The first minutes are a flurry of tricks and lost possessions.",
        ),
        "mid": (
            "The game has settled into a pecking order. The best players are running things.",
            "A few flicks and nutmegs have started a running rivalry between two of the players.",
            "The pace has dropped a little but the quality on the ball has gone up.",
        ),
        "late": (
            "Next goal wins. Everything is on the line and the tackles are flying in.",
            "The light is fading and the game is getting scrappier by the minute.",
            "Tired legs, sharp tongues and one last push for bragging rights.",
        ),
    },
    "grassroots_tournament": {
        "early": (
            "First fixture of the day. Both sides are fresh, nervy and careful.",
            "Parents crowd the rope as the opening game gets under way on pitch three.",
            "Early tournament football: lots of effort, not much composure.",
        ),
        "mid": (
            "The group stage is taking its toll. Fitness is starting to separate the squads.",
            "A tight game with qualification at stake. Nobody wants to make the first mistake.",
            "Between fixtures the players who stay switched on stand out immediately.",
        ),
        "late": (
            "Knockout football in the late afternoon. Every challenge carries weight.",
            "The final fixture of a long day and only the most resilient are still sharp.",
            "A deciding game with a trophy on the line and tired legs everywhere.",
        ),
    },
    "academy_trial_day": {
        "early": (
            "Registration, bibs and a warm-up under the eyes of the academy staff.",
            "Opening drills focus on first touch and short passing under light pressure.",
            "The triallists are nervous. Simple tasks are being made to look difficult.",
        ),
        "mid": (
            "Small-sided games begin and the coaches start to separate the group.",
            "A positional exercise tests who understands the shape without being told.",
            "The coaches rotate the groups. Some players adapt quickly and some do not.",
        ),
        "late": (
            "A final full-sided game. Everyone knows decisions will be made soon.",
            "The staff are comparing notes on the touchline while the last exercise runs.",
            "The closing match is tense; the triallists know this is their last chance.",
        ),
    },
    "youth_festival": {
        "early": (
            "International youth football in front of a large crowd and plenty of scouts.",
            "The opening minutes of a festival fixture are cagey and tactically careful.",
            "National anthems, flags and nerves. The first few touches are heavy.",
        ),
        "mid": (
            "The occasion is settling. The players with real temperament are enjoying it.",
            "A physical midfield battle between two well-drilled youth sides.",
            "A tactical switch from the bench gives one team control of the game.",
        ),
        "late": (
            "The crowd is loud and the game is open. Tired players are making big decisions.",
            "A tense finish with a place in the next round at stake.",
            "The closing stages bring out the leaders on both sides.",
        ),
    },
    "attend_match": {
        "early": (
            "A professional fixture kicks off with both sides pressing high.",
            "The opening minutes are played at a tempo the youth game never reaches.",
            "Both teams test each other carefully and the shape of each side becomes clear.",
        ),
        "mid": (
            "The game has settled. The tactical battle in midfield is fascinating to watch.",
            "A period of sustained possession reveals who can keep the ball under pressure.",
            "Changes from the bench alter the balance and the game opens up.",
        ),
        "late": (
            "The closing stages. Legs are heavy and the game is stretched end to end.",
            "One side is chasing the result and taking risks that expose their defence.",
            "The crowd is on its feet for a tense finish.",
        ),
    },
    "reserve_match": {
        "early": (
            "A reserve fixture starts quietly in front of a scattering of staff and family.",
            "Fringe players and academy graduates begin with something to prove.",
            "The opening is loose and unstructured, typical of a second-string game.",
        ),
        "mid": (
            "The experienced heads are organising the younger players around them.",
            "The tempo drops. Those who keep their intensity are easy to spot.",
            "A couple of first-team coaches have arrived to watch the second half.",
        ),
        "late": (
            "The final stages of a reserve game. Effort levels vary widely across the pitch.",
            "A late push from one side reveals which players want it most.",
            "The result hardly matters, but some players are playing for their futures.",
        ),
    },
    "trial_match": {
        "early": (
            "A trial match with contracts on the line. The opening touches are cautious.",
            "Triallists and unfamiliar team-mates try to find a common language.",
            "The first minutes are nervy as everyone tries not to make an early mistake.",
        ),
        "mid": (
            "The best triallists have started to impose themselves on the game.",
            "A sloppy spell shows who can recover from a mistake and who cannot.",
            "The coaches swap the sides around to see players in new positions.",
        ),
        "late": (
            "The last minutes of the trial. Some players are visibly playing for a contract.",
            "Exhaustion and pressure combine. Composure is in short supply.",
            "A final chance to impress before the decisions are made.",
        ),
    },
    "scouting_mission": {
        "early": (
            "First fixture of the mission. Targets are still being identified.",
            "An unfamiliar league and an unfamiliar style. The early exchanges take some reading.",
            "The standard is uncertain at first; the opening minutes help calibrate.",
        ),
        "mid": (
            "The picture is sharpening. A couple of players keep catching the eye.",
            "The tempo of the local game is clear now and the standouts are obvious.",
            "A tactical shift mid-game shows which players can adapt.",
        ),
        "late": (
            "The closing phase of the mission fixture. The targets have either grown or faded.",
            "Tired legs and a tight score test the players the mission came to see.",
            "The last minutes before the long journey home.",
        ),
    },
    "training_visit": {
        "early": (
            "The session starts with activation drills. Technical habits show clearly.",
            "Rondos under the watch of the coaching staff. Nobody can hide a heavy touch here.",
            "A short warm-up and then straight into positional work.",
        ),
        "mid": (
            "Pattern play on a half pitch. Understanding of shape is on display.",
            "Finishing drills at pace expose every player's weaker foot.",
            "A pressing exercise tests communication and work rate.",
        ),
        "late": (
            "A closing small-sided game gets competitive quickly.",
            "Extra work after the session shows who is driven to improve.",
            "The warm-down reveals who talks with the coaches and who heads straight in.",
        ),
    },
}

GENERIC_MATCH_DESCRIPTIONS: Dict[int, Tuple[str, ...]] = {
    0: (
        "The match starts briskly with both teams pressing in the opening minutes.",
        "Early exchanges are cautious while the sides take each other's measure.",
    ),
    15: (
        "The game has found a pattern and the first real chances are appearing.",
        "A spell of possession for one side allows a longer look at their build-up.",
    ),
    30: (
        "Approaching half-time, fatigue starts to shape the decisions being made.",
        "The first half is getting stretched and the midfield battle intensifies.",
    ),
    45: (
        "Second half kick-off. The changes made at the break alter the shape.",
        "The restart brings a new tempo and a different set of questions.",
    ),
    60: (
        "The hour mark. Substitutions are changing the balance of the game.",
        "Tired legs open up space and the better decision makers take advantage.",
    ),
    75: (
        "The final quarter of an hour. Character and composure are being tested.",
        "A tense finish with the game stretched from box to box.",
    ),
}

MINUTE_BRACKETS: Tuple[int, ...] = (75, 60, 45, 30, 15, 0)


def get_phase_segment(phase_index: int, total_phases: int) -> str:
    """Return the narrative third a phase falls into.

    Parameters
    ----------
    phase_index : int
        Zero-based phase index.
    total_phases : int
        Phases in the session.

    Returns
    -------
    str
        ``"early"``, ``"mid"`` or ``"late"``. A single-phase session is
        always early.
    """
    if total_phases <= 1:
        return "early"
    third = total_phases / 3
    if phase_index < third:
        return "early"
    if phase_index >= total_phases - third:
        return "late"
    return "mid"


def _minute_bracket(minute: int) -> int:
    """Return the highest minute bracket not after ``minute``.

    Parameters
    ----------
    minute : int
        Match minute.

    Returns
    -------
    int
        Bracket start minute.
    """
    for bracket in MINUTE_BRACKETS:
        if minute >= bracket:
            return bracket
    return 0


def generate_phase_description(
    venue_type: str,
    phase_index: int,
    total_phases: int,
    minute: int,
    rng: SeededRandom,
) -> str:
    """Pick the narrative line for one phase.

    Parameters
    ----------
    venue_type : str
        Venue category.
    phase_index : int
        Zero-based phase index.
    total_phases : int
        Phases in the session.
    minute : int
        Minute assigned to the phase.
    rng : SeededRandom
        Random source.

    Returns
    -------
    str
        Phase description.
    """
    bank = VENUE_DESCRIPTIONS.get(venue_type)
    if bank is not None:
        return rng.pick(bank[get_phase_segment(phase_index, total_phases)])
    return rng.pick(GENERIC_MATCH_DESCRIPTIONS[_minute_bracket(minute)])


def populate_full_observation_phases(
    session: ObservationSession,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Fill the skeleton phases of a full observation session.

    Sessions that are not in ``setup``, not in full observation mode, have
    no players or were already populated are returned unchanged.

    Parameters
    ----------
    session : ObservationSession
        Session skeleton from :func:`scoutlens.engine.session.create_session`.
    rng : SeededRandom
        Random source.
    debugger : SessionDebugger | None, optional
        Receives one record per atmosphere event when provided.

    Returns
    -------
    ObservationSession
        Session with populated phases and its venue atmosphere, still in
        ``setup``.
    """
    if session.state != "setup" or session.mode != "full_observation" or not session.players:
        return session
    if is_populated(session):
        return session

    atmosphere = session.venue_atmosphere
    venue_type = atmosphere.venue_type if atmosphere else session.activity_type
    if atmosphere is None:
        atmosphere = create_venue_atmosphere(venue_type, rng)

    total = len(session.phases)
    phases = []
    for phase in session.phases:
        moments = generate_moments(rng, session.players, venue_type, phase.index, total, atmosphere)
        description = generate_phase_description(venue_type, phase.index, total, phase.minute, rng)
        event = generate_atmosphere_event(rng, atmosphere, phase.index, total)
        if event is not None:
            atmosphere = append_atmosphere_event(atmosphere, event)
            if debugger:
                debugger.log_session_event(session.session_id, f"phase {phase.index}: {event.event_id}")
        phases.append(replace(phase, moments=tuple(moments), description=description, atmosphere_event=event))

    return replace(session, phases=tuple(phases), venue_atmosphere=atmosphere)


def populate_session_phases(
    session: ObservationSession,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Populate a session skeleton with the content its mode calls for.

    Parameters
    ----------
    session : ObservationSession
        Session skeleton in ``setup``.
    rng : SeededRandom
        Random source.
    debugger : SessionDebugger | None, optional
        Passed on to the mode populator.

    Returns
    -------
    ObservationSession
        Populated session, or the input unchanged when nothing applies.
    """
    populators = {
        "full_observation": populate_full_observation_phases,
        "investigation": populate_investigation_phases,
        "analysis": populate_analysis_phases,
        "quick_interaction": populate_quick_interaction_phases,
    }
    populate = populators.get(session.mode)
    if populate is None:
        return session
    return populate(session, rng, debugger)
