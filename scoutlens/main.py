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
"""Entry point for a seeded demo of a scouting session, a live match and an Insight spend."""

from __future__ import annotations

import argparse
from typing import List, Optional

from scoutlens.engine.match_phases import generate_match_phases, simulate_match_result
from scoutlens.engine.observation import populate_session_phases
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import (
    ACTIVITY_MODE_MAP,
    add_reflection_note,
    advance_session_phase,
    allocate_focus,
    complete_session,
    create_session,
    flag_moment,
    get_session_result,
    start_session,
)
from scoutlens.engine.tactics import calculate_tactical_matchup
from scoutlens.insight.actions import execute_insight_action
from scoutlens.insight.economy import (
    InsightState,
    InsightUseRecord,
    accumulate_insight,
    apply_insight_fatigue,
    calculate_accumulation,
    create_insight_state,
    get_affordable_actions,
    perk_modifiers_for,
    record_insight_use,
    spend_insight,
)
from scoutlens.insight.results import ActionContext
from scoutlens.models.match import TacticalStyle
from scoutlens.models.player import PlayerRecord
from scoutlens.models.scout import ScoutProfile
from scoutlens.models.session import ObservationSession, SessionSetup
from scoutlens.utils.debug import SessionDebugger
from scoutlens.utils.generator import generate_contacts, generate_player_pool, generate_scout

SESSION_PLAYERS = 8
SIDE_SIZE = 11


def run_observation(
    seed: str,
    venue: str,
    scout: ScoutProfile,
    players: List[PlayerRecord],
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Play through an observation session, focusing on the target player.

    Parameters
    ----------
    seed : str
        Save seed used for identifiers.
    venue : str
        Activity type of the session.
    scout : ScoutProfile
        Scout attending.
    players : List[PlayerRecord]
        Players at the venue; the first is the target.
    rng : SeededRandom
        Random source.
    debugger : Optional[SessionDebugger]
        Optional trace logger.

    Returns
    -------
    ObservationSession
        The completed session.
    """
    setup = SessionSetup(
        activity_type=venue,
        seed=seed,
        week=1,
        season=1,
        player_pool=tuple(players),
        specialization=scout.specialization,
        target_player_id=players[0].player_id,
    )
    session = create_session(setup, rng, debugger)
    session = populate_session_phases(session, rng, debugger)
    session = start_session(session, debugger)

    target_id = players[0].player_id
    while session.state == "active":
        phase = session.phases[session.current_phase_index]
        session = allocate_focus(session, target_id, "general")
        standout = next((m for m in phase.moments if m.is_standout), None)
        if standout is not None:
            session = flag_moment(session, standout.moment_id, "promising")
        if not phase.moments:
            print(f"  {phase.index + 1}. {phase.description}")
        for moment in phase.moments:
            if moment.player_id == target_id:
                print(f"  {phase.minute:>2}' {moment.description}")
        session = advance_session_phase(session, debugger)

    session = add_reflection_note(session, f"Keep tracking {players[0].name}.")
    return complete_session(session, debugger)


def run_match(
    home: List[PlayerRecord],
    away: List[PlayerRecord],
    target_id: str,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> None:
    """Simulate and print a live match between two generated sides.

    Parameters
    ----------
    home : List[PlayerRecord]
        Home side.
    away : List[PlayerRecord]
        Away side.
    target_id : str
        Player the scout is watching.
    rng : SeededRandom
        Random source.
    debugger : Optional[SessionDebugger]
        Optional trace logger.
    """
    matchup = calculate_tactical_matchup(TacticalStyle("high_press"), TacticalStyle("possession_based"))
    phases = generate_match_phases(rng, home, away, matchup=matchup, scouted_player_ids=(target_id,), debugger=debugger)
    for phase in phases:
        for event in phase.events:
            if event.player_id == target_id or event.is_goal:
                print(f"  {event.description}")
    result = simulate_match_result(rng, home, away, debugger)
    print(f"Final Score: Home {result.home_goals} - {result.away_goals} Away")


def run_insight(
    state: InsightState,
    scout: ScoutProfile,
    context: ActionContext,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> InsightState:
    """Spend Insight on the first affordable action, if any.

    Parameters
    ----------
    state : InsightState
        Current ledger.
    scout : ScoutProfile
        Scout spending the points.
    context : ActionContext
        Data the action may read.
    rng : SeededRandom
        Random source.
    debugger : Optional[SessionDebugger]
        Optional trace logger.

    Returns
    -------
    InsightState
        Ledger after the spend.
    """
    perks = perk_modifiers_for(scout)
    affordable = get_affordable_actions(state, context.session.mode, scout.specialization, perks)
    if not affordable:
        print(f"No Insight action affordable with {state.points}/{state.capacity} IP.")
        return state

    action = affordable[0]
    state, fizzled = spend_insight(state, action.action_id, scout, 1, rng, perks, debugger)
    result = execute_insight_action(action.action_id, context, fizzled, rng, debugger)
    outcome = "valuable" if result.success else "wasted" if result.payload is None else "moderate"
    state = record_insight_use(
        state,
        InsightUseRecord(action.action_id, 1, 1, outcome, result.narrative, context.target_player_id),
    )
    tired = apply_insight_fatigue(scout)
    print(f"{action.name}: {result.narrative}")
    print(f"Fatigue {scout.fatigue} -> {tired.fatigue}, IP left {state.points}/{state.capacity}")
    return state


def main(argv: Optional[List[str]] = None) -> None:
    """Run the demo.

    Parameters
    ----------
    argv : Optional[List[str]]
        Command line arguments; ``sys.argv`` when omitted.
    """
    parser = argparse.ArgumentParser(description="Run a seeded scouting demo.")
    parser.add_argument("--seed", default="scoutlens", help="Seed string for every random draw.")
    parser.add_argument(
        "--venue",
        default="school_match",
        choices=sorted(ACTIVITY_MODE_MAP),
        help="Activity type of the observation session.",
    )
    parser.add_argument("--debug", action="store_true", help="Write a trace log under debug_logs/.")
    args = parser.parse_args(argv)

    debugger = SessionDebugger() if args.debug else None
    rng = SeededRandom(args.seed)

    scout = generate_scout(rng)
    pool = generate_player_pool(rng, SIDE_SIZE * 2, id_prefix="p")
    contacts = generate_contacts(rng, 4, [player.player_id for player in pool])
    print(f"Scout {scout.name} ({scout.specialization}), intuition {scout.intuition}, fatigue {scout.fatigue}")

    print(f"\nObservation at {args.venue}:")
    session = run_observation(args.seed, args.venue, scout, pool[:SESSION_PLAYERS], rng, debugger)
    summary = get_session_result(session)
    print(
        f"Session {summary.session_id}: {summary.phases_completed}/{summary.total_phases} phases, "
        f"{summary.insight_points_earned} IP, quality {summary.quality_tier}"
    )

    print("\nLive match:")
    run_match(pool[:SIDE_SIZE], pool[SIDE_SIZE:], pool[0].player_id, rng, debugger)

    state = create_insight_state(scout.intuition)
    earned = calculate_accumulation("observation", summary.quality_tier, scout, perk_modifiers_for(scout))
    state = accumulate_insight(state, earned.total_earned + summary.insight_points_earned)
    print(f"\nInsight: earned {earned.total_earned + summary.insight_points_earned} IP")
    context = ActionContext(
        scout=scout,
        session=session,
        players={player.player_id: player for player in pool},
        target_player_id=pool[0].player_id,
        contacts=tuple(contacts),
        league_players=tuple(pool),
    )
    run_insight(state, scout, context, rng, debugger)

    if debugger:
        debugger.close()


if __name__ == "__main__":
    main()
