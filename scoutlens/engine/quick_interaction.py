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
"""Populate quick interaction sessions with strategic choices.

Quick interactions are two or three short decisions. The opening prompt is
fixed per activity; the follow-up depends on the kind of outcome the
opening leans towards, and an optional closing prompt wraps the session
up. The whole tree is resolved at population time.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import is_populated
from scoutlens.models.session import ObservationSession, SessionPhase, StrategicChoice

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger


@dataclass(frozen=True, slots=True)
class ChoiceTemplate:
    """Strategic choice before it is given an identifier.

    Parameters
    ----------
    text : str
        Short label.
    description : str
        What the option entails.
    effect : str
        What happens when it is chosen.
    outcome_type : str
        ``territory``, ``priority``, ``network`` or ``technique``.
    """

    text: str
    description: str
    effect: str
    outcome_type: str


@dataclass(frozen=True, slots=True)
class PromptTemplate:
    """A prompt and the choices it offers.

    Parameters
    ----------
    prompt : str
        Question put to the scout.
    choices : Tuple[ChoiceTemplate, ...]
        Available choices.
    """

    prompt: str
    choices: Tuple[ChoiceTemplate, ...]


@dataclass(frozen=True, slots=True)
class QuickTemplate:
    """Decision tree of one quick interaction activity.

    Parameters
    ----------
    opening : PromptTemplate
        First phase.
    follow_ups : Tuple[Tuple[str, PromptTemplate], ...]
        Second phase keyed by the opening outcome type it follows.
    fallback : PromptTemplate
        Second phase when no follow-up matches, and any phase past the third.
    closings : Tuple[PromptTemplate, ...], default=()
        Candidate third phases.
    """

    opening: PromptTemplate
    follow_ups: Tuple[Tuple[str, PromptTemplate], ...]
    fallback: PromptTemplate
    closings: Tuple[PromptTemplate, ...] = ()

    def follow_up_for(self, outcome_type: str) -> PromptTemplate:
        """Second phase prompt after an opening that leans to ``outcome_type``.

        Parameters
        ----------
        outcome_type : str
            Outcome type of the opening choice.

        Returns
        -------
        PromptTemplate
            Matching follow-up, or the fallback.
        """
        for key, template in self.follow_ups:
            if key == outcome_type:
                return template
        return self.fallback


QUICK_PHASE_DESCRIPTIONS: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    "stats_briefing": (
        (
            "You settle into the weekly stats briefing. The screens are full.",
            "The data team opens the briefing. There is more here than one session can cover.",
        ),
        ("The first pass through the numbers raises a follow-up question.",),
        ("The briefing is closing.",),
    ),
    "data_conference": (
        (
            "The conference floor is busy with colleagues, rivals and vendors.",
            "The programme is full and you cannot do everything.",
        ),
        ("The morning has set the tone for the afternoon.",),
        ("The last session of the day.",),
    ),
    "assign_territory": (
        (
            "The coverage map is open for the coming weeks.",
            "You have scouting capacity to direct.",
        ),
        ("The first allocation is logged and a gap appears.",),
        ("The plan is ready for sign-off.",),
    ),
    "analytics_team_meeting": (
        (
            "The analytics team is assembled and waiting for direction.",
            "The weekly meeting opens with competing priorities.",
        ),
        ("The first agenda item has shaped the room.",),
        ("The meeting is wrapping up.",),
    ),
}

QUICK_INTERACTION_TEMPLATES: Dict[str, QuickTemplate] = {
    "stats_briefing": QuickTemplate(
        opening=PromptTemplate(
            "What is your priority for this week's briefing?",
            (
                ChoiceTemplate(
                    "Focus on current targets",
                    "Review recent numbers for the players already on the shortlist.",
                    "A sharper, actionable summary, at the cost of the wider picture.",
                    "priority",
                ),
                ChoiceTemplate(
                    "Scan for market trends",
                    "Look for patterns that point to undervalued profiles.",
                    "A broader view that seeds the next piece of work.",
                    "technique",
                ),
                ChoiceTemplate(
                    "Deep dive on one player",
                    "Spend the whole window on one player's history and benchmarks.",
                    "A thorough case on a single profile.",
                    "priority",
                ),
            ),
        ),
        follow_ups=(
            (
                "priority",
                PromptTemplate(
                    "One of the target's numbers is ambiguous. How do you handle it?",
                    (
                        ChoiceTemplate(
                            "Flag it for live follow-up",
                            "Schedule a scouting visit to check the number in person.",
                            "The question goes to the right place.",
                            "priority",
                        ),
                        ChoiceTemplate(
                            "Compare with positional peers",
                            "Pull figures for similar profiles to judge the number.",
                            "The number is either confirmed as signal or dismissed as noise.",
                            "technique",
                        ),
                    ),
                ),
            ),
            (
                "technique",
                PromptTemplate(
                    "You have spotted a pattern in the wider data. What next?",
                    (
                        ChoiceTemplate(
                            "Build a shortlist from it",
                            "Turn the pattern into candidate profiles.",
                            "Insight becomes pipeline.",
                            "priority",
                        ),
                        ChoiceTemplate(
                            "Test it with a trusted contact",
                            "Run the finding past someone whose judgement you respect.",
                            "An outside view sharpens the signal.",
                            "network",
                        ),
                    ),
                ),
            ),
        ),
        fallback=PromptTemplate(
            "A secondary question comes up. How do you respond?",
            (
                ChoiceTemplate(
                    "Schedule a follow-up",
                    "Log the question for next week.",
                    "The current focus is protected.",
                    "priority",
                ),
                ChoiceTemplate(
                    "Fold it into today's work",
                    "Widen the session to cover it.",
                    "More coverage, less depth.",
                    "technique",
                ),
            ),
        ),
        closings=(
            PromptTemplate(
                "How does this week's intelligence get shared?",
                (
                    ChoiceTemplate(
                        "Brief the first-team staff",
                        "Condense the findings for the coaches.",
                        "The work reaches the people who decide.",
                        "network",
                    ),
                    ChoiceTemplate(
                        "Act on it yourself",
                        "Use the findings to steer your next assignment.",
                        "Faster personal follow-up.",
                        "priority",
                    ),
                ),
            ),
        ),
    ),
    "data_conference": QuickTemplate(
        opening=PromptTemplate(
            "How do you approach the conference?",
            (
                ChoiceTemplate(
                    "Network with other data scouts",
                    "Work the floor and meet people.",
                    "New contacts, fewer new ideas.",
                    "network",
                ),
                ChoiceTemplate(
                    "Attend the analytics workshop",
                    "Spend the morning on method.",
                    "Your toolkit improves.",
                    "technique",
                ),
                ChoiceTemplate(
                    "Present your methodology",
                    "Put your approach up for peer review.",
                    "Honest critique, and your name gets known.",
                    "technique",
                ),
            ),
        ),
        follow_ups=(
            (
                "network",
                PromptTemplate(
                    "A well-connected data director wants to keep talking. How do you follow up?",
                    (
                        ChoiceTemplate(
                            "Arrange a formal meeting",
                            "Put a date in the diary.",
                            "The contact becomes a relationship.",
                            "network",
                        ),
                        ChoiceTemplate(
                            "Swap shortlists",
                            "Trade views on each other's targets.",
                            "Your shortlist is tested by fresh eyes.",
                            "priority",
                        ),
                    ),
                ),
            ),
            (
                "technique",
                PromptTemplate(
                    "The workshop questions part of your evaluation framework. How do you respond?",
                    (
                        ChoiceTemplate(
                            "Revise your weightings",
                            "Adjust the model on what you heard.",
                            "The framework moves forward.",
                            "technique",
                        ),
                        ChoiceTemplate(
                            "Take it back to the team",
                            "Write the question up for discussion.",
                            "The whole team learns from it.",
                            "network",
                        ),
                    ),
                ),
            ),
        ),
        fallback=PromptTemplate(
            "The afternoon offers two options. Which do you take?",
            (
                ChoiceTemplate(
                    "Recruitment technology showcase",
                    "See what the vendors are building.",
                    "You learn what tools are coming.",
                    "technique",
                ),
                ChoiceTemplate(
                    "Stay on the floor",
                    "Keep the conversations going.",
                    "More contacts for the book.",
                    "network",
                ),
            ),
        ),
        closings=(
            PromptTemplate(
                "The conference is closing. How do you use the time left?",
                (
                    ChoiceTemplate(
                        "Write up the takeaways",
                        "Summarise the day before it fades.",
                        "The lessons stick.",
                        "technique",
                    ),
                    ChoiceTemplate(
                        "Go to the networking dinner",
                        "One more evening of conversations.",
                        "Relationships deepen.",
                        "network",
                    ),
                ),
            ),
        ),
    ),
    "assign_territory": QuickTemplate(
        opening=PromptTemplate(
            "How should scouting coverage be spread this period?",
            (
                ChoiceTemplate(
                    "Established academies",
                    "Stay close to the proven producers.",
                    "Reliable coverage of known ground.",
                    "territory",
                ),
                ChoiceTemplate(
                    "Underexplored regions",
                    "Send scouts where few others go.",
                    "Higher risk, higher chance of a find.",
                    "territory",
                ),
                ChoiceTemplate(
                    "Double up on hot prospects",
                    "Put two scouts on the top names.",
                    "Firmer reads on fewer players.",
                    "priority",
                ),
            ),
        ),
        follow_ups=(
            (
                "territory",
                PromptTemplate(
                    "The plan leaves a gap. How do you fill it?",
                    (
                        ChoiceTemplate(
                            "Rotate a scout in",
                            "Move someone from a saturated region.",
                            "The gap closes without new cost.",
                            "territory",
                        ),
                        ChoiceTemplate(
                            "Hire a freelancer",
                            "Bring in short-term help.",
                            "Coverage holds and the network grows.",
                            "network",
                        ),
                    ),
                ),
            ),
            (
                "priority",
                PromptTemplate(
                    "The two reports on your priority target disagree. How do you settle it?",
                    (
                        ChoiceTemplate(
                            "Ask for a third opinion",
                            "Send another scout to break the tie.",
                            "A clearer verdict, later.",
                            "priority",
                        ),
                        ChoiceTemplate(
                            "Review both methods",
                            "Look at how each scout reached their view.",
                            "The process improves.",
                            "technique",
                        ),
                    ),
                ),
            ),
        ),
        fallback=PromptTemplate(
            "A late change to the plan is needed. What is the call?",
            (
                ChoiceTemplate(
                    "Absorb it",
                    "Work within existing capacity.",
                    "Everyone stretches a little.",
                    "territory",
                ),
                ChoiceTemplate(
                    "Escalate it",
                    "Flag the constraint to management.",
                    "The problem is visible to those who can fix it.",
                    "priority",
                ),
            ),
        ),
        closings=(
            PromptTemplate(
                "Final sign-off. One last detail to settle.",
                (
                    ChoiceTemplate(
                        "Set review dates",
                        "Agree when each area will be revisited.",
                        "The plan can adapt.",
                        "territory",
                    ),
                    ChoiceTemplate(
                        "Lock it in",
                        "Run the plan without mid-period reviews.",
                        "Scouts get a settled brief.",
                        "priority",
                    ),
                ),
            ),
        ),
    ),
    "analytics_team_meeting": QuickTemplate(
        opening=PromptTemplate(
            "Where should the analytics team focus this week?",
            (
                ChoiceTemplate(
                    "Transfer targets",
                    "Put the team on the current shortlist.",
                    "Work that feeds straight into recruitment.",
                    "priority",
                ),
                ChoiceTemplate(
                    "Prediction models",
                    "Spend the week improving the models.",
                    "Better tools for every future decision.",
                    "technique",
                ),
                ChoiceTemplate(
                    "Youth pipeline data",
                    "Look at the players coming through.",
                    "An early view of the next generation.",
                    "priority",
                ),
            ),
        ),
        follow_ups=(
            (
                "priority",
                PromptTemplate(
                    "The first output is in and a decision point has emerged.",
                    (
                        ChoiceTemplate(
                            "Challenge the assumptions",
                            "Push the team on what the model takes for granted.",
                            "The output becomes more robust.",
                            "technique",
                        ),
                        ChoiceTemplate(
                            "Send it to the coaches now",
                            "Circulate the output as it stands.",
                            "Decision makers see it early.",
                            "network",
                        ),
                    ),
                ),
            ),
            (
                "technique",
                PromptTemplate(
                    "The model work exposes a disagreement on method.",
                    (
                        ChoiceTemplate(
                            "Make a conservative revision",
                            "Change as little as possible.",
                            "Steady, safe progress.",
                            "technique",
                        ),
                        ChoiceTemplate(
                            "Run both models for a month",
                            "Let the results decide.",
                            "A clear answer, eventually.",
                            "priority",
                        ),
                    ),
                ),
            ),
        ),
        fallback=PromptTemplate(
            "Two workstreams compete for the same people.",
            (
                ChoiceTemplate(
                    "Drop the less urgent one",
                    "Pause the lower priority work.",
                    "Focus is restored.",
                    "priority",
                ),
                ChoiceTemplate(
                    "Bring in a contractor",
                    "Cover the gap with outside help.",
                    "Both streams continue.",
                    "network",
                ),
            ),
        ),
        closings=(
            PromptTemplate(
                "How does the team's work get used this week?",
                (
                    ChoiceTemplate(
                        "Present at the recruitment board",
                        "Prepare a formal presentation.",
                        "The work lands at the right moment.",
                        "priority",
                    ),
                    ChoiceTemplate(
                        "Circulate a written brief",
                        "Send a summary to those who need it.",
                        "People engage on their own time.",
                        "network",
                    ),
                    ChoiceTemplate(
                        "Keep it internal for now",
                        "Refine it further before sharing.",
                        "Better work, later.",
                        "technique",
                    ),
                ),
            ),
        ),
    ),
}


def _phase_description(activity_type: str, phase_index: int, rng: SeededRandom) -> str:
    """Scene-setting line for a quick interaction phase.

    Parameters
    ----------
    activity_type : str
        Quick interaction activity.
    phase_index : int
        Zero-based phase index.
    rng : SeededRandom
        Random source.

    Returns
    -------
    str
        Description; generic when the bank has no slot for the phase.
    """
    bank = QUICK_PHASE_DESCRIPTIONS.get(activity_type, ())
    if phase_index >= len(bank):
        return f"Step {phase_index + 1} of the session."
    return rng.pick(bank[phase_index])


def _fill_phase(
    phase: SessionPhase,
    template: PromptTemplate,
    session: ObservationSession,
    rng: SeededRandom,
) -> SessionPhase:
    """Attach choices and a description to a skeleton phase.

    Parameters
    ----------
    phase : SessionPhase
        Skeleton phase.
    template : PromptTemplate
        Prompt for the phase.
    session : ObservationSession
        Owning session; its id scopes the choice ids.
    rng : SeededRandom
        Random source.

    Returns
    -------
    SessionPhase
        Populated phase.
    """
    choices = tuple(
        StrategicChoice(
            choice_id=f"{session.session_id}-p{phase.index}-c{index}",
            text=choice.text,
            description=choice.description,
            effect=choice.effect,
            outcome_type=choice.outcome_type,
        )
        for index, choice in enumerate(template.choices)
    )
    description = f"{_phase_description(session.activity_type, phase.index, rng)} {template.prompt}"
    return replace(phase, description=description, choices=choices)


def populate_quick_interaction_phases(
    session: ObservationSession,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Fill the phases of a quick interaction session with choices.

    The follow-up prompt is chosen from the outcome type of a sampled
    opening choice. Sessions that are not in ``setup``, not in quick
    interaction mode, have no template for their activity or were already
    populated are returned unchanged.

    Parameters
    ----------
    session : ObservationSession
        Session skeleton.
    rng : SeededRandom
        Random source.
    debugger : SessionDebugger | None, optional
        Receives the follow-up branch when provided.

    Returns
    -------
    ObservationSession
        Session with choices on every phase, still in ``setup``.
    """
    if session.state != "setup" or session.mode != "quick_interaction":
        return session
    template = QUICK_INTERACTION_TEMPLATES.get(session.activity_type)
    if template is None or is_populated(session):
        return session

    leaning = rng.pick(template.opening.choices).outcome_type
    follow_up = template.follow_up_for(leaning)
    if debugger:
        debugger.log_session_event(session.session_id, f"follow-up branch: {leaning}")

    phases = []
    for phase in session.phases:
        if phase.index == 0:
            prompt = template.opening
        elif phase.index == 1:
            prompt = follow_up
        elif phase.index == 2 and template.closings:
            prompt = rng.pick(template.closings)
        else:
            prompt = template.fallback
        phases.append(_fill_phase(phase, prompt, session, rng))
    return replace(session, phases=tuple(phases))
