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
"""Observation session lifecycle.

A session moves through ``setup -> active -> reflection -> complete``. All
functions here are pure: they take a session and return an updated copy,
or the same session unchanged when the call does not apply in its current
state. Content for the phases is produced separately by
:mod:`scoutlens.engine.observation`.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from scoutlens.engine.config import ENGINE_CONFIG
from scoutlens.engine.rng import SeededRandom, round_half_up
from scoutlens.models.session import (
    FlaggedMoment,
    FocusAllocation,
    FocusTokenState,
    Hypothesis,
    HypothesisEvidence,
    ObservationSession,
    SessionPhase,
    SessionPlayer,
    SessionResult,
    SessionSetup,
)

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger

ACTIVITY_MODE_MAP: Dict[str, str] = {
    "school_match": "full_observation",
    "grassroots_tournament": "full_observation",
    "street_football": "full_observation",
    "academy_trial_day": "full_observation",
    "youth_festival": "full_observation",
    "attend_match": "full_observation",
    "reserve_match": "full_observation",
    "training_visit": "full_observation",
    "trial_match": "full_observation",
    "scouting_mission": "full_observation",
    "follow_up_session": "investigation",
    "parent_coach_meeting": "investigation",
    "contract_negotiation": "investigation",
    "network_meeting": "investigation",
    "database_query": "analysis",
    "watch_video": "analysis",
    "deep_video_analysis": "analysis",
    "algorithm_calibration": "analysis",
    "market_inefficiency": "analysis",
    "opposition_analysis": "analysis",
    "stats_briefing": "quick_interaction",
    "data_conference": "quick_interaction",
    "assign_territory": "quick_interaction",
    "analytics_team_meeting": "quick_interaction",
}

VENUE_PHASE_RANGES: Dict[str, Tuple[int, int]] = {
    "school_match": (8, 12),
    "grassroots_tournament": (10, 14),
    "street_football": (6, 8),
    "academy_trial_day": (8, 10),
    "youth_festival": (10, 14),
    "follow_up_session": (4, 6),
    "parent_coach_meeting": (3, 5),
    "attend_match": (12, 18),
    "reserve_match": (8, 12),
    "training_visit": (6, 8),
    "trial_match": (8, 12),
    "scouting_mission": (10, 14),
    "contract_negotiation": (4, 8),
    "network_meeting": (3, 5),
    "database_query": (3, 5),
    "watch_video": (6, 8),
    "deep_video_analysis": (8, 10),
    "algorithm_calibration": (3, 4),
    "market_inefficiency": (4, 6),
    "opposition_analysis": (4, 6),
    "stats_briefing": (2, 3),
    "data_conference": (2, 3),
    "assign_territory": (2, 3),
    "analytics_team_meeting": (2, 3),
}

_ID_SEED = 0x9E3779B9
_ID_MULTIPLIER = 0x27220C00
_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def make_id(seed: str, suffix: str) -> str:
    """Derive a deterministic identifier from a seed and a suffix.

    Parameters
    ----------
    seed : str
        Session seed or parent identifier.
    suffix : str
        Discriminator unique within the parent.

    Returns
    -------
    str
        ``"<8 hex digits>-<up to 8 alphanumerics of suffix>"``.
    """
    h = _ID_SEED
    for char in f"{seed}:{suffix}":
        h = ((h ^ ord(char)) * _ID_MULTIPLIER) & 0xFFFFFFFF
        h ^= h >> 16
    return f"{h:08x}-{_NON_ALNUM.sub('', suffix)[:8]}"


def resolve_mode(activity_type: str) -> str:
    """Return the observation mode of ``activity_type``.

    Parameters
    ----------
    activity_type : str
        Activity identifier.

    Returns
    -------
    str
        Mapped mode, ``"full_observation"`` for unmapped activities.
    """
    return ACTIVITY_MODE_MAP.get(activity_type, "full_observation")


def _build_phases(phase_count: int, mode: str) -> Tuple[SessionPhase, ...]:
    """Create empty phase skeletons with minutes and the half-time flag.

    Parameters
    ----------
    phase_count : int
        Number of phases.
    mode : str
        Observation mode.

    Returns
    -------
    Tuple[SessionPhase, ...]
        Skeleton phases.
    """
    full = mode == "full_observation"
    half_index = phase_count // 2 if full and phase_count >= 3 else -1
    phases = []
    for index in range(phase_count):
        if full:
            minute = round_half_up(index / (phase_count - 1) * 90) if phase_count > 1 else 0
        else:
            minute = index + 1
        phases.append(SessionPhase(index=index, minute=minute, is_half_time=index == half_index))
    return tuple(phases)


def _build_players(setup: SessionSetup) -> Tuple[SessionPlayer, ...]:
    """Convert the player pool into session players, target first.

    Parameters
    ----------
    setup : SessionSetup
        Session inputs.

    Returns
    -------
    Tuple[SessionPlayer, ...]
        Session roster.
    """
    players: List[SessionPlayer] = [
        SessionPlayer(player_id=record.player_id, name=record.name, position=record.position)
        for record in setup.player_pool
    ]
    if setup.target_player_id:
        for index, player in enumerate(players):
            if player.player_id == setup.target_player_id:
                players.insert(0, players.pop(index))
                break
    return tuple(players)


def create_session(
    setup: SessionSetup,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Create a session skeleton in the ``setup`` state.

    Parameters
    ----------
    setup : SessionSetup
        Activity, seed and roster for the session.
    rng : SeededRandom
        Random source; only the phase count is drawn here.
    debugger : SessionDebugger | None, optional
        Receives a creation record when provided.

    Returns
    -------
    ObservationSession
        Session with empty phases ready to be populated.
    """
    mode = resolve_mode(setup.activity_type)
    low, high = VENUE_PHASE_RANGES.get(setup.activity_type, ENGINE_CONFIG.session.default_phase_range)
    phase_count = rng.next_int(low, high)
    tokens = ENGINE_CONFIG.session.tokens_per_half[mode]

    if setup.activity_instance_id:
        suffix = f"instance-{setup.activity_instance_id}"
    else:
        suffix = f"session-{setup.week}-{setup.season}"

    session = ObservationSession(
        session_id=make_id(setup.seed, suffix),
        mode=mode,
        activity_type=setup.activity_type,
        specialization=setup.specialization,
        state="setup",
        phases=_build_phases(phase_count, mode),
        focus_tokens=FocusTokenState(available=tokens, total=tokens),
        players=_build_players(setup),
        started_at_week=setup.week,
        started_at_season=setup.season,
        activity_instance_id=setup.activity_instance_id,
    )
    if debugger:
        debugger.log_session_event(
            session.session_id,
            f"created {mode} session for {setup.activity_type} with {phase_count} phases",
        )
    return session


def is_half_time_phase(session: ObservationSession, phase_index: int) -> bool:
    """Return whether ``phase_index`` is the half-time phase.

    Parameters
    ----------
    session : ObservationSession
        Session to inspect.
    phase_index : int
        Phase index.

    Returns
    -------
    bool
        ``True`` for the half-time phase of a full observation session.
    """
    if not 0 <= phase_index < len(session.phases):
        return False
    if session.phases[phase_index].is_half_time:
        return True
    if session.mode != "full_observation":
        return False
    return phase_index == len(session.phases) // 2


def is_populated(session: ObservationSession) -> bool:
    """Whether any phase or the venue atmosphere already carries content.

    Parameters
    ----------
    session : ObservationSession
        Session to inspect.

    Returns
    -------
    bool
        True once a populate call has filled the session.
    """
    if session.venue_atmosphere is not None and session.venue_atmosphere.events:
        return True
    return any(
        phase.description
        or phase.moments
        or phase.atmosphere_event
        or phase.dialogue_nodes
        or phase.data_points
        or phase.choices
        for phase in session.phases
    )


def start_session(session: ObservationSession, debugger: Optional[SessionDebugger] = None) -> ObservationSession:
    """Move a populated session from ``setup`` to ``active``.

    Parameters
    ----------
    session : ObservationSession
        Session in the ``setup`` state.
    debugger : SessionDebugger | None, optional
        Receives the transition when provided.

    Returns
    -------
    ObservationSession
        Active session, or the input unchanged.
    """
    if session.state != "setup" or not session.phases:
        return session
    if debugger:
        debugger.log_session_event(session.session_id, "setup -> active")
    return replace(session, state="active")


def advance_session_phase(
    session: ObservationSession,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Advance an active session by one phase.

    Active focus allocations age by one phase. Entering the half-time phase
    refreshes the token budget and leaving the final phase moves the
    session into ``reflection``.

    Parameters
    ----------
    session : ObservationSession
        Active session.
    debugger : SessionDebugger | None, optional
        Receives the transition when provided.

    Returns
    -------
    ObservationSession
        Updated session, or the input unchanged when not active.
    """
    if session.state != "active":
        return session

    next_index = session.current_phase_index + 1
    is_last = next_index >= len(session.phases)

    allocations = tuple(
        a if a.released else replace(a, phases_active=a.phases_active + 1) for a in session.focus_tokens.allocations
    )
    held = {f"{a.player_id}:{a.lens}" for a in allocations if not a.released}
    warmup = tuple((key, count + 1 if key in held else count) for key, count in session.focus_tokens.warmup_phases)
    tokens = replace(session.focus_tokens, allocations=allocations, warmup_phases=warmup)

    if not is_last and is_half_time_phase(session, next_index):
        tokens = replace(tokens, available=tokens.total)

    if is_last:
        if debugger:
            debugger.log_session_event(session.session_id, "active -> reflection")
        return replace(
            session,
            state="reflection",
            current_phase_index=len(session.phases) - 1,
            focus_tokens=tokens,
        )
    return replace(session, current_phase_index=next_index, focus_tokens=tokens)


def complete_session(session: ObservationSession, debugger: Optional[SessionDebugger] = None) -> ObservationSession:
    """Move a session from ``reflection`` to ``complete``.

    Parameters
    ----------
    session : ObservationSession
        Session in reflection.
    debugger : SessionDebugger | None, optional
        Receives the transition when provided.

    Returns
    -------
    ObservationSession
        Completed session, or the input unchanged.
    """
    if session.state != "reflection":
        return session
    if debugger:
        debugger.log_session_event(session.session_id, "reflection -> complete")
    return replace(session, state="complete")


def _release_allocations(allocations: Tuple[FocusAllocation, ...], player_id: str) -> Tuple[FocusAllocation, ...]:
    """Mark every held allocation of ``player_id`` as released.

    Parameters
    ----------
    allocations : Tuple[FocusAllocation, ...]
        Session allocations.
    player_id : str
        Player whose focus ends.

    Returns
    -------
    Tuple[FocusAllocation, ...]
        Allocations with the player's held focus released.
    """
    return tuple(
        replace(a, released=True) if a.player_id == player_id and not a.released else a for a in allocations
    )


def _held_allocation(tokens: FocusTokenState, player_id: str) -> Optional[FocusAllocation]:
    """Latest unreleased allocation of ``player_id``.

    Parameters
    ----------
    tokens : FocusTokenState
        Session token state.
    player_id : str
        Observed player.

    Returns
    -------
    FocusAllocation | None
        Held allocation, if any.
    """
    for allocation in reversed(tokens.allocations):
        if allocation.player_id == player_id and not allocation.released:
            return allocation
    return None


def allocate_focus(session: ObservationSession, player_id: str, lens: str) -> ObservationSession:
    """Spend a focus token on ``player_id`` with an attribute lens.

    Parameters
    ----------
    session : ObservationSession
        Active session.
    player_id : str
        Player to focus on.
    lens : str
        Attribute lens.

    Returns
    -------
    ObservationSession
        Updated session, unchanged when inactive, out of tokens or the
        player is unknown.
    """
    if session.state != "active" or session.focus_tokens.available <= 0:
        return session
    if session.find_player(player_id) is None:
        return session

    phase = session.current_phase_index
    key = f"{player_id}:{lens}"
    allocation = FocusAllocation(player_id=player_id, lens=lens, start_phase=phase)
    warmup = tuple(pair for pair in session.focus_tokens.warmup_phases if pair[0] != key) + ((key, 0),)
    tokens = replace(
        session.focus_tokens,
        available=session.focus_tokens.available - 1,
        allocations=_release_allocations(session.focus_tokens.allocations, player_id) + (allocation,),
        warmup_phases=warmup,
    )

    players = []
    for player in session.players:
        if player.player_id == player_id:
            phases = player.focused_phases if phase in player.focused_phases else player.focused_phases + (phase,)
            player = replace(player, is_focused=True, current_lens=lens, focused_phases=phases)
        players.append(player)
    return replace(session, focus_tokens=tokens, players=tuple(players))


def remove_focus(session: ObservationSession, player_id: str) -> ObservationSession:
    """Stop focusing on ``player_id``; the spent token is not refunded.

    Parameters
    ----------
    session : ObservationSession
        Session to update.
    player_id : str
        Player to release.

    Returns
    -------
    ObservationSession
        Updated session.
    """
    players = tuple(
        replace(player, is_focused=False, current_lens=None) if player.player_id == player_id else player
        for player in session.players
    )
    tokens = replace(
        session.focus_tokens,
        allocations=_release_allocations(session.focus_tokens.allocations, player_id),
    )
    return replace(session, players=players, focus_tokens=tokens)


def get_lens_effectiveness(session: ObservationSession, player_id: str, lens: str) -> float:
    """Effectiveness of the focus currently held on ``player_id``.

    A fresh focus warms up at half strength, runs at full strength until
    the fatigue onset and then decays towards the fatigue floor.

    Parameters
    ----------
    session : ObservationSession
        Session holding the focus allocations.
    player_id : str
        Observed player.
    lens : str
        Lens the caller is asking about.

    Returns
    -------
    float
        ``0.0`` when the player is not held with ``lens``, otherwise a
        multiplier in ``[fatigue_floor, full_effectiveness]``.
    """
    rules = ENGINE_CONFIG.session
    allocation = _held_allocation(session.focus_tokens, player_id)
    if allocation is None or allocation.lens != lens:
        return 0.0
    held = session.focus_tokens.warmup_count(f"{player_id}:{lens}")
    if held is None:
        return rules.warmup_effectiveness

    consecutive = held + 1
    if consecutive <= 1:
        return rules.warmup_effectiveness
    if consecutive <= rules.fatigue_onset:
        return rules.full_effectiveness
    fatigued = rules.full_effectiveness - (consecutive - rules.fatigue_onset) * rules.fatigue_decay
    return max(rules.fatigue_floor, fatigued)


def get_observation_quality(session: ObservationSession, player_id: str) -> str:
    """Classify how closely ``player_id`` is watched in the current phase.

    Parameters
    ----------
    session : ObservationSession
        Session holding the focus allocations.
    player_id : str
        Observed player.

    Returns
    -------
    str
        ``"focused"`` while a focus is held, ``"peripheral"`` within the
        peripheral window after release, otherwise ``"unfocused"``.
    """
    if _held_allocation(session.focus_tokens, player_id) is not None:
        return "focused"
    window = ENGINE_CONFIG.session.peripheral_window
    for allocation in session.focus_tokens.allocations:
        if allocation.player_id != player_id:
            continue
        since = session.current_phase_index - (allocation.start_phase + allocation.phases_active)
        if 0 <= since <= window:
            return "peripheral"
    return "unfocused"


def get_lens_accuracy_bonus(lens: str) -> Dict[str, int]:
    """Accuracy bonus per attribute domain for a lens.

    Parameters
    ----------
    lens : str
        Attribute lens.

    Returns
    -------
    Dict[str, int]
        Domain to bonus; empty for the general lens or an unknown one.
    """
    return dict(ENGINE_CONFIG.session.lens_accuracy_bonus.get(lens, {}))


def flag_moment(session: ObservationSession, moment_id: str, reaction: str) -> ObservationSession:
    """Flag a moment of the current phase, at most once per phase.

    Parameters
    ----------
    session : ObservationSession
        Active session.
    moment_id : str
        Moment in the current phase.
    reaction : str
        Scout's reaction to the moment.

    Returns
    -------
    ObservationSession
        Session with the flag and its Insight points, or unchanged.
    """
    if session.state != "active":
        return session
    phase_index = session.current_phase_index
    if any(flag.phase_index == phase_index for flag in session.flagged_moments):
        return session
    if not 0 <= phase_index < len(session.phases):
        return session

    phase = session.phases[phase_index]
    moment = next((m for m in phase.moments if m.moment_id == moment_id), None)
    if moment is None:
        return session

    flag = FlaggedMoment(
        flag_id=make_id(session.session_id, f"flag-{phase_index}-{moment_id}"),
        phase_index=phase_index,
        moment=moment,
        reaction=reaction,
        minute=phase.minute,
    )
    return replace(
        session,
        flagged_moments=session.flagged_moments + (flag,),
        insight_points_earned=session.insight_points_earned + ENGINE_CONFIG.session.ip_per_flagged_moment,
    )


def add_hypothesis(
    session: ObservationSession,
    player_id: str,
    text: str,
    domain: str,
    week: int,
) -> ObservationSession:
    """Open a new hypothesis during reflection.

    Parameters
    ----------
    session : ObservationSession
        Session in reflection.
    player_id : str
        Player the claim is about.
    text : str
        The claim.
    domain : str
        Attribute domain the claim concerns.
    week : int
        Current game week.

    Returns
    -------
    ObservationSession
        Session including the hypothesis, or unchanged.
    """
    if session.state != "reflection":
        return session
    hypothesis = Hypothesis(
        hypothesis_id=make_id(session.session_id, f"hyp-{player_id}-{week}-{len(session.hypotheses)}"),
        player_id=player_id,
        text=text,
        domain=domain,
        created_at_week=week,
    )
    return replace(session, hypotheses=session.hypotheses + (hypothesis,))


def _resolve_hypothesis_state(evidence: Tuple[HypothesisEvidence, ...]) -> str:
    """Derive a hypothesis state from its evidence counts.

    Parameters
    ----------
    evidence : Tuple[HypothesisEvidence, ...]
        All evidence gathered so far.

    Returns
    -------
    str
        New hypothesis state.
    """
    rules = ENGINE_CONFIG.session
    supporting = sum(1 for item in evidence if item.direction == "for")
    opposing = sum(1 for item in evidence if item.direction == "against")
    if supporting >= rules.evidence_to_resolve:
        return "confirmed"
    if opposing >= rules.evidence_to_resolve:
        return "debunked"
    if supporting >= rules.evidence_to_lean:
        return "supported"
    if opposing >= rules.evidence_to_lean:
        return "contradicted"
    return "open"


def update_hypothesis(
    session: ObservationSession,
    hypothesis_id: str,
    direction: str,
    description: str,
    week: int,
) -> ObservationSession:
    """Add evidence to a hypothesis and recompute its state.

    Parameters
    ----------
    session : ObservationSession
        Session holding the hypothesis.
    hypothesis_id : str
        Hypothesis to update.
    direction : str
        ``"for"`` or ``"against"``.
    description : str
        What was observed.
    week : int
        Current game week.

    Returns
    -------
    ObservationSession
        Updated session; resolving a hypothesis awards Insight points.
    """
    target = next((h for h in session.hypotheses if h.hypothesis_id == hypothesis_id), None)
    if target is None or target.is_resolved:
        return session

    evidence = target.evidence + (HypothesisEvidence(week=week, direction=direction, description=description),)
    updated = replace(target, state=_resolve_hypothesis_state(evidence), evidence=evidence)
    hypotheses = tuple(updated if h.hypothesis_id == hypothesis_id else h for h in session.hypotheses)

    earned = session.insight_points_earned
    if updated.is_resolved:
        earned += ENGINE_CONFIG.session.ip_per_resolved_hypothesis
    return replace(session, hypotheses=hypotheses, insight_points_earned=earned)


def add_reflection_note(session: ObservationSession, note: str) -> ObservationSession:
    """Append a non-blank reflection note.

    Parameters
    ----------
    session : ObservationSession
        Session in reflection.
    note : str
        Free-text note; surrounding whitespace is stripped.

    Returns
    -------
    ObservationSession
        Session including the note and its Insight points, or unchanged.
    """
    trimmed = note.strip()
    if session.state != "reflection" or not trimmed:
        return session
    return replace(
        session,
        reflection_notes=session.reflection_notes + (trimmed,),
        insight_points_earned=session.insight_points_earned + ENGINE_CONFIG.session.ip_per_reflection_note,
    )


def _quality_tier(ip_per_phase: float) -> str:
    """Map Insight points per completed phase onto a quality tier.

    Parameters
    ----------
    ip_per_phase : float
        Average points per completed phase.

    Returns
    -------
    str
        Tier name, ``"poor"`` below every threshold.
    """
    for threshold, tier in ENGINE_CONFIG.session.quality_tiers:
        if ip_per_phase >= threshold:
            return tier
    return "poor"


def get_session_result(session: ObservationSession) -> SessionResult:
    """Summarise a session for report writing and Insight accumulation.

    Parameters
    ----------
    session : ObservationSession
        Session in any state.

    Returns
    -------
    SessionResult
        Result snapshot.
    """
    focused = tuple(dict.fromkeys(a.player_id for a in session.focus_tokens.allocations))
    if session.state in ("reflection", "complete"):
        completed = len(session.phases)
    else:
        completed = session.current_phase_index + 1
    ip_per_phase = session.insight_points_earned / completed if completed > 0 else 0.0

    return SessionResult(
        session_id=session.session_id,
        mode=session.mode,
        activity_type=session.activity_type,
        flagged_moments=session.flagged_moments,
        hypotheses=session.hypotheses,
        insight_points_earned=session.insight_points_earned,
        reflection_notes=session.reflection_notes,
        quality_tier=_quality_tier(ip_per_phase),
        phases_completed=completed,
        total_phases=len(session.phases),
        focused_player_ids=focused,
        activity_instance_id=session.activity_instance_id,
    )
