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
"""Populate investigation sessions with dialogue nodes.

Investigation activities are conversations: one node per phase, each with a
safe, a moderate and a bold option. Consequences are rolled when the
session is populated so that the same seed always yields the same
conversation and the same outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from scoutlens.engine.config import ENGINE_CONFIG
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import is_populated
from scoutlens.models.session import (
    DialogueConsequence,
    DialogueNode,
    DialogueOption,
    DialogueReveal,
    ObservationSession,
)

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger


@dataclass(frozen=True, slots=True)
class NodeTemplate:
    """Unresolved dialogue beat.

    Parameters
    ----------
    speaker_key : str
        ``"scout"``, ``"player"`` or the role of the other party.
    text : str
        Beat text with ``{player}`` and ``{speaker}`` placeholders.
    options : Tuple[Tuple[str, str], ...]
        ``(text, risk_level)`` pairs offered to the scout.
    """

    speaker_key: str
    text: str
    options: Tuple[Tuple[str, str], ...]


ATTRIBUTE_POOLS: Dict[str, Tuple[str, ...]] = {
    "follow_up_session": (
        "first_touch",
        "dribbling",
        "passing",
        "composure",
        "decision_making",
        "work_rate",
        "consistency",
        "professionalism",
    ),
    "parent_coach_meeting": (
        "work_rate",
        "professionalism",
        "composure",
        "leadership",
        "consistency",
        "big_game_temperament",
        "injury_proneness",
    ),
    "contract_negotiation": ("professionalism", "leadership", "big_game_temperament", "consistency", "composure"),
    "network_meeting": ("professionalism", "consistency", "work_rate", "big_game_temperament"),
}

DEFAULT_SPEAKERS: Dict[str, str] = {
    "follow_up_session": "the coaching staff",
    "parent_coach_meeting": "the parent",
    "contract_negotiation": "the agent",
    "network_meeting": "the contact",
}

# One entry per phase slot; sessions longer than the bank reuse the last slot.
DIALOGUE_TEMPLATES: Dict[str, Tuple[Tuple[NodeTemplate, ...], ...]] = {
    "follow_up_session": (
        (
            NodeTemplate(
                "scout",
                "You have the training ground to yourself and {player}. How do you use the time?",
                (
                    ("Start with simple passing to let them settle", "safe"),
                    ("Go straight into position-specific work", "moderate"),
                    ("Drop them into a high-pressure scenario from the first minute", "bold"),
                ),
            ),
            NodeTemplate(
                "scout",
                "The morning session is winding down and you have an hour with {player}. Where do you start?",
                (
                    ("Technical drills you can measure", "safe"),
                    ("Tactical problems to see how they adapt", "moderate"),
                    ("Situations built to expose their character", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "player",
                "{player} gets through the drill, but there are small hesitations. What now?",
                (
                    ("Keep watching and let them find their feet", "safe"),
                    ("Ask them what feels awkward", "moderate"),
                    ("Raise the tempo and force a reaction", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "scout",
                "{player} misses an easy chance and their head drops for a moment. How do you respond?",
                (
                    ("Say nothing and note the reaction", "safe"),
                    ("Stop the drill and talk the decision through", "moderate"),
                    ("Run the same situation three times in a row", "bold"),
                ),
            ),
            NodeTemplate(
                "player",
                "{player} glances over between reps, looking for feedback. What do you give them?",
                (
                    ("Praise the effort", "safe"),
                    ("Point out one technical flaw", "moderate"),
                    ("Give nothing and see how they cope with the silence", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "scout",
                "You put {player} on the losing side of a lopsided small-sided game. What are you looking for?",
                (
                    ("Technique when the result no longer matters", "safe"),
                    ("Whether they organise the players around them", "moderate"),
                    ("How they react when you provoke a confrontation", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "scout",
                "The session is over and {player} is waiting to hear from you. How do you close?",
                (
                    ("Thank them and give nothing away", "safe"),
                    ("Ask how they think it went", "moderate"),
                    ("Mention the other players you are looking at in their position", "bold"),
                ),
            ),
        ),
    ),
    "parent_coach_meeting": (
        (
            NodeTemplate(
                "parent",
                "{speaker} is wary. Clubs have come calling about {player} before and nothing came of it. How do you open?",
                (
                    ("Ask how {player} is enjoying the season", "safe"),
                    ("Explain the club's development pathway plainly", "moderate"),
                    ("Ask whether other clubs have been in touch", "bold"),
                ),
            ),
            NodeTemplate(
                "coach",
                "{speaker} has done this many times and has little time to spare. What matters most?",
                (
                    ("{player}'s training habits", "safe"),
                    ("An honest view of strengths and ceiling", "moderate"),
                    ("Whether the player is being held back here", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "parent",
                "{speaker} mentions that {player} puts in extra hours on their own. There is more to this.",
                (
                    ("Ask how the family supports the routine", "safe"),
                    ("Ask how {player} handles setbacks", "moderate"),
                    ("Ask about injuries they have kept quiet", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "parent",
                "{speaker} wants to know what kind of club you represent, beyond the money.",
                (
                    ("Talk about the club's record with young players", "safe"),
                    ("Offer a tour of the facilities", "moderate"),
                    ("Put the financial package on the table", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "scout",
                "The meeting is ending. {speaker} seems open but will not commit. How do you leave it?",
                (
                    ("Leave your details and promise to follow up", "safe"),
                    ("Ask whether they would agree to a trial", "moderate"),
                    ("Set a deadline for an answer", "bold"),
                ),
            ),
        ),
    ),
    "contract_negotiation": (
        (
            NodeTemplate(
                "agent",
                "{speaker} opens by reminding you that {player} has other offers. How do you respond?",
                (
                    ("Stay calm and talk about fit rather than money", "safe"),
                    ("Acknowledge the interest and sell the club", "moderate"),
                    ("Ask to hear the other offers so you can beat them", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "agent",
                "{speaker} names a wage well above what you are authorised to offer.",
                (
                    ("Counter with your ceiling and stress development", "safe"),
                    ("Offer a performance-related top-up", "moderate"),
                    ("Reject it and argue {player}'s value down", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "agent",
                "{speaker} wants a short contract. The club wants four years.",
                (
                    ("Propose three years with an option", "safe"),
                    ("Accept two years with a sell-on clause", "moderate"),
                    ("Hold firm at four years", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "agent",
                "{speaker} claims a bigger club called this morning. Are they bluffing?",
                (
                    ("Wish {player} well and leave the door open", "safe"),
                    ("Ask which club and how far along they are", "moderate"),
                    ("Improve the offer on the spot", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "scout",
                "The draft is on the table and {player} is in the room. Do you push for a signature today?",
                (
                    ("Give them two days to review", "safe"),
                    ("Ask for a signature with a short review window", "moderate"),
                    ("Push for the signature now", "bold"),
                ),
            ),
        ),
    ),
    "network_meeting": (
        (
            NodeTemplate(
                "contact",
                "You sit down with {speaker}, a contact you have worked on for two years. How do you open?",
                (
                    ("Keep it friendly and let them lead", "safe"),
                    ("Mention a player you are tracking and watch their face", "moderate"),
                    ("Ask what transfer activity they know about", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "contact",
                "{speaker} hints at information on {player}, but nothing is free.",
                (
                    ("Share a harmless piece of your own intel first", "safe"),
                    ("Offer an introduction to someone useful", "moderate"),
                    ("Ask for the information now and promise to repay later", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "contact",
                "{speaker} is going to a regional tournament next month.",
                (
                    ("Ask to go along", "safe"),
                    ("Ask for a list of players worth watching", "moderate"),
                    ("Suggest the club sponsors the event for exclusive access", "bold"),
                ),
            ),
        ),
        (
            NodeTemplate(
                "contact",
                "{speaker} mentions a rival club approached them this week, and wants you to know it.",
                (
                    ("Take it at face value", "safe"),
                    ("Make clear you value the relationship more", "moderate"),
                    ("Ask who they talked to first", "bold"),
                ),
            ),
        ),
    ),
}

SAFE_NARRATIVES: Tuple[str, ...] = (
    "You keep things relaxed. You learn a little and the relationship is intact.",
    "Nothing is forced. The read is partial but the door stays open.",
    "A steady, professional exchange that lays groundwork for later.",
)

MODERATE_NARRATIVES: Tuple[str, ...] = (
    "The push pays off. You come away with something meaningful.",
    "Enough pressure to learn something real without causing friction.",
    "They respond well to the directness and you learn something useful.",
)

MODERATE_BACKFIRE_NARRATIVES: Tuple[str, ...] = (
    "You pushed slightly too hard and they close up.",
    "It does not land. They deflect and the moment passes.",
)

BOLD_NARRATIVES: Tuple[str, ...] = (
    "The gamble pays off completely and they respect the directness.",
    "They take the challenge head on. The return justifies the risk.",
    "Pushing hard works. You learn in minutes what would have taken weeks.",
)

BOLD_BACKFIRE_NARRATIVES: Tuple[str, ...] = (
    "You overplayed your hand and the atmosphere sours.",
    "Too much, too soon. The relationship takes a hit.",
    "They are offended by the approach and end the conversation early.",
)

INSIGHT_LINES: Tuple[str, ...] = (
    "A small detail catches your eye.",
    "They let slip more than they intended.",
)


def generate_dialogue_consequence(
    rng: SeededRandom,
    risk_level: str,
    activity_type: str,
    player_id: str,
) -> DialogueConsequence:
    """Roll the outcome of a dialogue option.

    Safe options always improve the relationship and sometimes hint at an
    attribute with low confidence. Moderate options usually reveal an
    attribute but can backfire. Bold options reveal with high confidence
    when they land and damage the relationship when they do not.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    risk_level : str
        ``"safe"``, ``"moderate"`` or ``"bold"``.
    activity_type : str
        Investigation activity; selects the attribute pool.
    player_id : str
        Player any reveal is about.

    Returns
    -------
    DialogueConsequence
        Rolled consequence.

    Raises
    ------
    ValueError
        If ``risk_level`` is not recognised.
    """
    cfg = ENGINE_CONFIG.modes
    pool = ATTRIBUTE_POOLS.get(activity_type, ATTRIBUTE_POOLS["follow_up_session"])

    if risk_level == "safe":
        narrative = rng.pick(SAFE_NARRATIVES)
        relationship = rng.next_int(*cfg.safe_relationship)
        reveal = None
        if rng.chance(cfg.safe_reveal_chance):
            reveal = DialogueReveal(player_id, rng.pick(pool), rng.next_float(*cfg.safe_confidence))
        return DialogueConsequence(narrative, relationship, rng.next_int(*cfg.safe_insight), reveal)

    if risk_level == "moderate":
        if rng.chance(cfg.moderate_backfire_chance):
            return DialogueConsequence(rng.pick(MODERATE_BACKFIRE_NARRATIVES), -1, 0)
        narrative = rng.pick(MODERATE_NARRATIVES)
        reveal = None
        if rng.chance(cfg.moderate_reveal_chance):
            reveal = DialogueReveal(player_id, rng.pick(pool), rng.next_float(*cfg.moderate_confidence))
        if rng.chance(cfg.moderate_extra_line_chance):
            narrative = f"{narrative} {rng.pick(INSIGHT_LINES)}"
        relationship = rng.next_int(*cfg.moderate_relationship)
        return DialogueConsequence(narrative, relationship, rng.next_int(*cfg.moderate_insight), reveal)

    if risk_level == "bold":
        if rng.chance(cfg.bold_backfire_chance):
            narrative = rng.pick(BOLD_BACKFIRE_NARRATIVES)
            return DialogueConsequence(narrative, rng.next_int(*cfg.bold_backfire_relationship), 0)
        narrative = rng.pick(BOLD_NARRATIVES)
        reveal = DialogueReveal(player_id, rng.pick(pool), rng.next_float(*cfg.bold_confidence))
        relationship = rng.next_int(*cfg.bold_relationship)
        return DialogueConsequence(narrative, relationship, rng.next_int(*cfg.bold_insight), reveal)

    raise ValueError(f"Unknown risk level: {risk_level}")


def _resolve_speaker(speaker_key: str, player_name: str, speaker_name: str) -> str:
    """Display name for a template speaker.

    Parameters
    ----------
    speaker_key : str
        Template speaker key.
    player_name : str
        Name of the subject player.
    speaker_name : str
        Name of the other party.

    Returns
    -------
    str
        ``"You"`` for the scout, otherwise the relevant name.
    """
    if speaker_key == "scout":
        return "You"
    if speaker_key == "player":
        return player_name
    return speaker_name


def build_dialogue_node(
    rng: SeededRandom,
    session: ObservationSession,
    phase_index: int,
    templates: Tuple[Tuple[NodeTemplate, ...], ...],
) -> DialogueNode:
    """Pick a template for ``phase_index`` and roll its option outcomes.

    The first session player is the subject; the second, when present,
    is the other party in the conversation.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    session : ObservationSession
        Session being populated; must have at least one player.
    phase_index : int
        Phase the node belongs to.
    templates : Tuple[Tuple[NodeTemplate, ...], ...]
        Phase slots of the activity.

    Returns
    -------
    DialogueNode
        Resolved node.
    """
    subject = session.players[0]
    if len(session.players) > 1:
        speaker_name = session.players[1].name
    else:
        speaker_name = DEFAULT_SPEAKERS.get(session.activity_type, "your contact")

    template = rng.pick(templates[min(phase_index, len(templates) - 1)])
    names = {"player": subject.name, "speaker": speaker_name}
    options = []
    for index, (text, risk_level) in enumerate(template.options):
        outcome = generate_dialogue_consequence(rng, risk_level, session.activity_type, subject.player_id)
        options.append(DialogueOption(f"phase{phase_index}-opt{index}", text.format(**names), risk_level, outcome))

    return DialogueNode(
        node_id=f"{session.session_id}-node{phase_index}",
        speaker=_resolve_speaker(template.speaker_key, subject.name, speaker_name),
        text=template.text.format(**names),
        options=tuple(options),
    )


def populate_investigation_phases(
    session: ObservationSession,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Fill every phase of an investigation session with one dialogue node.

    Sessions that are not in ``setup``, not in investigation mode, have no
    players, have no dialogue bank for their activity or were already
    populated are returned unchanged.

    Parameters
    ----------
    session : ObservationSession
        Session skeleton.
    rng : SeededRandom
        Random source.
    debugger : SessionDebugger | None, optional
        Receives one record per node when provided.

    Returns
    -------
    ObservationSession
        Session with dialogue on every phase, still in ``setup``.
    """
    if session.state != "setup" or session.mode != "investigation" or not session.players:
        return session
    templates = DIALOGUE_TEMPLATES.get(session.activity_type)
    if templates is None or is_populated(session):
        return session

    phases = []
    for phase in session.phases:
        node = build_dialogue_node(rng, session, phase.index, templates)
        if debugger:
            debugger.log_session_event(session.session_id, f"phase {phase.index}: {node.speaker} speaks")
        phases.append(replace(phase, description=node.text, dialogue_nodes=(node,)))
    return replace(session, phases=tuple(phases))
