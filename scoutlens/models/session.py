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
"""Value types describing an observation session and everything inside it.

Every type here is a frozen dataclass. Generators and lifecycle functions
return modified copies (``dataclasses.replace``) instead of mutating their
input, so a session can be kept as a replayable value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from scoutlens.models.player import PlayerRecord

ObservationMode = Literal["full_observation", "investigation", "analysis", "quick_interaction"]
SessionState = Literal["setup", "active", "reflection", "complete"]
MomentType = Literal["technical_action", "physical_test", "mental_response", "tactical_decision", "character_reveal"]
AtmosphereEffect = Literal["amplify", "dampen", "reveal", "distraction"]
LensType = Literal["technical", "physical", "mental", "tactical", "general"]
FlagReaction = Literal["promising", "concerning", "interesting", "needs_more_data"]
HypothesisState = Literal["open", "supported", "contradicted", "confirmed", "debunked"]
EvidenceDirection = Literal["for", "against"]
RiskLevel = Literal["safe", "moderate", "bold"]
DataCategory = Literal["statistical", "comparison", "trend", "anomaly"]
ChoiceOutcome = Literal["territory", "priority", "network", "technique"]


@dataclass(frozen=True, slots=True)
class AtmosphereEvent:
    """Transient, phase-scoped change to the observation conditions.

    Parameters
    ----------
    event_id : str
        Identifier unique within the session.
    description : str
        Narrative shown to the scout.
    effect : AtmosphereEffect
        How the event changes what can be seen.
    affected_attributes : Tuple[str, ...] | None, optional
        Attributes the effect applies to; ``None`` for general distractions.
    noise_delta : float, default=0.0
        Contribution to the session noise multiplier.
    """

    event_id: str
    description: str
    effect: AtmosphereEffect
    affected_attributes: Optional[Tuple[str, ...]] = None
    noise_delta: float = 0.0


@dataclass(frozen=True, slots=True)
class VenueAtmosphere:
    """Static observation profile of a venue plus the events seen so far.

    Parameters
    ----------
    venue_type : str
        Venue category the profile was built for.
    chaos_level : float
        Ambient unpredictability in ``[0, 1]``.
    amplified_attributes : Tuple[str, ...]
        Attributes the venue makes easier to read.
    dampened_attributes : Tuple[str, ...]
        Attributes the venue obscures.
    weather : str | None
        Weather condition drawn for the session.
    crowd_intensity : float
        Crowd pressure in ``[0, 1]``.
    description : str
        Narrative summary of the conditions.
    events : Tuple[AtmosphereEvent, ...], default=()
        Atmosphere events accumulated during the session.
    """

    venue_type: str
    chaos_level: float
    amplified_attributes: Tuple[str, ...]
    dampened_attributes: Tuple[str, ...]
    weather: Optional[str]
    crowd_intensity: float
    description: str
    events: Tuple[AtmosphereEvent, ...] = ()


@dataclass(frozen=True, slots=True)
class PlayerMoment:
    """One partially obscured slice of a player's behaviour.

    Parameters
    ----------
    moment_id : str
        Identifier unique within the session.
    player_id : str
        Player the moment concerns.
    moment_type : MomentType
        Category of behaviour on show.
    quality : int
        Quality of the action on the 1-10 scale.
    attributes_hinted : Tuple[str, ...]
        One to three attributes drawn from the type's pool.
    description : str
        Detailed text shown when the player is focused.
    vague_description : str
        Text shown when the player is not focused.
    pressure_context : bool
        Whether the moment happened under pressure.
    is_standout : bool
        Whether the quality reached the standout threshold.
    """

    moment_id: str
    player_id: str
    moment_type: MomentType
    quality: int
    attributes_hinted: Tuple[str, ...]
    description: str
    vague_description: str
    pressure_context: bool
    is_standout: bool


@dataclass(frozen=True, slots=True)
class DialogueReveal:
    """Attribute read gained from a dialogue outcome.

    Parameters
    ----------
    player_id : str
        Player the read is about.
    attribute : str
        Attribute read.
    confidence : float
        Confidence of the read in ``[0, 1]``.
    """

    player_id: str
    attribute: str
    confidence: float


@dataclass(frozen=True, slots=True)
class DialogueConsequence:
    """What happens after the scout picks a dialogue option.

    Parameters
    ----------
    narrative : str
        Outcome text.
    relationship_delta : int
        Change to the relationship with the other party.
    insight_bonus : int
        Insight points awarded.
    reveal : DialogueReveal | None, optional
        Attribute read gained, if any.
    """

    narrative: str
    relationship_delta: int
    insight_bonus: int
    reveal: Optional[DialogueReveal] = None


@dataclass(frozen=True, slots=True)
class DialogueOption:
    """One choice available at a dialogue node.

    Parameters
    ----------
    option_id : str
        Identifier unique within the node.
    text : str
        Choice as shown to the scout.
    risk_level : RiskLevel
        How hard the option pushes.
    outcome : DialogueConsequence
        Consequence of picking the option.
    """

    option_id: str
    text: str
    risk_level: RiskLevel
    outcome: DialogueConsequence


@dataclass(frozen=True, slots=True)
class DialogueNode:
    """A conversational beat in an investigation phase.

    Parameters
    ----------
    node_id : str
        Identifier unique within the session.
    speaker : str
        Who speaks; ``"You"`` for the scout.
    text : str
        What is said or set up.
    options : Tuple[DialogueOption, ...]
        Choices available to the scout.
    """

    node_id: str
    speaker: str
    text: str
    options: Tuple[DialogueOption, ...]


@dataclass(frozen=True, slots=True)
class DataPoint:
    """A figure presented during an analysis phase.

    Parameters
    ----------
    point_id : str
        Identifier unique within the session.
    label : str
        Human-readable label.
    value : int | float | str
        Numeric or categorical value.
    category : DataCategory
        How the value should be read.
    is_highlighted : bool
        Whether the point is flagged as significant.
    player_id : str | None, optional
        Player the figure belongs to; ``None`` for aggregates.
    related_attributes : Tuple[str, ...], default=()
        Attributes the figure is indirect evidence about.
    """

    point_id: str
    label: str
    value: Union[int, float, str]
    category: DataCategory
    is_highlighted: bool
    player_id: Optional[str] = None
    related_attributes: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StrategicChoice:
    """A strategic option in a quick interaction phase.

    Parameters
    ----------
    choice_id : str
        Identifier unique within the session.
    text : str
        Short label.
    description : str
        What the option entails.
    effect : str
        What happens when it is chosen.
    outcome_type : ChoiceOutcome
        Kind of impact the choice produces.
    """

    choice_id: str
    text: str
    description: str
    effect: str
    outcome_type: ChoiceOutcome


@dataclass(frozen=True, slots=True)
class SessionPhase:
    """Ordered unit of an interactive observation session.

    Parameters
    ----------
    index : int
        Zero-based position in the session.
    minute : int
        Match minute, or step counter outside full observation.
    description : str, default=""
        Narrative for the phase; empty until populated.
    moments : Tuple[PlayerMoment, ...], default=()
        Moments revealed during the phase.
    atmosphere_event : AtmosphereEvent | None, optional
        Event that fired during the phase, if any.
    is_half_time : bool, default=False
        Whether focus tokens refresh when play reaches this phase.
    dialogue_nodes : Tuple[DialogueNode, ...], default=()
        Conversation beats of an investigation phase.
    data_points : Tuple[DataPoint, ...], default=()
        Figures of an analysis phase.
    choices : Tuple[StrategicChoice, ...], default=()
        Options of a quick interaction phase.
    """

    index: int
    minute: int
    description: str = ""
    moments: Tuple[PlayerMoment, ...] = ()
    atmosphere_event: Optional[AtmosphereEvent] = None
    is_half_time: bool = False
    dialogue_nodes: Tuple[DialogueNode, ...] = ()
    data_points: Tuple[DataPoint, ...] = ()
    choices: Tuple[StrategicChoice, ...] = ()


@dataclass(frozen=True, slots=True)
class SessionPlayer:
    """Session-scoped view of a player and the scout's attention on them.

    Parameters
    ----------
    player_id : str
        Identifier of the underlying player record.
    name : str
        Display name.
    position : str
        Position code.
    is_focused : bool, default=False
        Whether the scout currently focuses on the player.
    focused_phases : Tuple[int, ...], default=()
        Phase indices during which focus was allocated.
    current_lens : LensType | None, optional
        Lens of the active focus.
    """

    player_id: str
    name: str
    position: str
    is_focused: bool = False
    focused_phases: Tuple[int, ...] = ()
    current_lens: Optional[LensType] = None


@dataclass(frozen=True, slots=True)
class FocusAllocation:
    """Record of one focus token being spent.

    Parameters
    ----------
    player_id : str
        Focused player.
    lens : LensType
        Lens chosen for the focus.
    start_phase : int
        Phase index at which focus started.
    phases_active : int, default=0
        Number of phases the focus has been held for.
    released : bool, default=False
        True once focus moved away; released allocations stop ageing.
    """

    player_id: str
    lens: LensType
    start_phase: int
    phases_active: int = 0
    released: bool = False


@dataclass(frozen=True, slots=True)
class FocusTokenState:
    """Focus token budget for the current half.

    Parameters
    ----------
    available : int
        Tokens left to spend.
    total : int
        Tokens granted per half.
    allocations : Tuple[FocusAllocation, ...], default=()
        Every allocation made during the session.
    warmup_phases : Tuple[Tuple[str, int], ...], default=()
        ``("player_id:lens", phases)`` pairs counting how long each pairing
        has been held.
    """

    available: int
    total: int
    allocations: Tuple[FocusAllocation, ...] = ()
    warmup_phases: Tuple[Tuple[str, int], ...] = ()

    def warmup_count(self, key: str) -> Optional[int]:
        """Phases the ``"player_id:lens"`` pairing has been held for.

        Parameters
        ----------
        key : str
            Pairing key.

        Returns
        -------
        int | None
            Held phases, or ``None`` when the pairing was never focused.
        """
        for name, count in self.warmup_phases:
            if name == key:
                return count
        return None


@dataclass(frozen=True, slots=True)
class FlaggedMoment:
    """Moment the scout marked as significant.

    Parameters
    ----------
    flag_id : str
        Deterministic identifier of the flag.
    phase_index : int
        Phase during which the moment was flagged.
    moment : PlayerMoment
        The flagged moment.
    reaction : FlagReaction
        Scout's reading of the moment.
    minute : int
        Minute of the phase.
    """

    flag_id: str
    phase_index: int
    moment: PlayerMoment
    reaction: FlagReaction
    minute: int


@dataclass(frozen=True, slots=True)
class HypothesisEvidence:
    """Single piece of evidence for or against a hypothesis.

    Parameters
    ----------
    week : int
        Week the evidence was gathered.
    direction : EvidenceDirection
        Whether it supports or contradicts the hypothesis.
    description : str
        What was observed.
    strength : str, default="moderate"
        Weight label of the evidence.
    """

    week: int
    direction: EvidenceDirection
    description: str
    strength: str = "moderate"


@dataclass(frozen=True, slots=True)
class Hypothesis:
    """Claim about a player that accumulates evidence over time.

    Parameters
    ----------
    hypothesis_id : str
        Deterministic identifier.
    player_id : str
        Player the claim concerns.
    text : str
        The claim.
    domain : str
        Attribute domain the claim belongs to.
    created_at_week : int
        Week the hypothesis was formed.
    state : HypothesisState, default="open"
        Current standing of the claim.
    evidence : Tuple[HypothesisEvidence, ...], default=()
        Evidence gathered so far.
    """

    hypothesis_id: str
    player_id: str
    text: str
    domain: str
    created_at_week: int
    state: HypothesisState = "open"
    evidence: Tuple[HypothesisEvidence, ...] = ()

    @property
    def is_resolved(self) -> bool:
        """Return ``True`` once the hypothesis is confirmed or debunked."""
        return self.state in ("confirmed", "debunked")


@dataclass(frozen=True, slots=True)
class SessionSetup:
    """Inputs needed to create a session skeleton.

    Parameters
    ----------
    activity_type : str
        Activity or venue category, for example ``"school_match"``.
    seed : str
        Save-game seed used for identifiers.
    week : int
        In-game week the session starts.
    season : int
        In-game season the session starts.
    player_pool : Tuple[PlayerRecord, ...]
        Players present at the activity.
    specialization : str | None, optional
        Scout specialization at the time of the session.
    target_player_id : str | None, optional
        Player the scout came to see; listed first when present.
    activity_instance_id : str | None, optional
        Calendar instance the session belongs to.
    """

    activity_type: str
    seed: str
    week: int
    season: int
    player_pool: Tuple[PlayerRecord, ...]
    specialization: Optional[str] = None
    target_player_id: Optional[str] = None
    activity_instance_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ObservationSession:
    """Aggregate root for one scouted activity.

    Parameters
    ----------
    session_id : str
        Deterministic identifier.
    mode : ObservationMode
        Interaction mode derived from the activity type.
    activity_type : str
        Activity or venue category.
    specialization : str | None
        Scout specialization at creation.
    state : SessionState
        Lifecycle state.
    phases : Tuple[SessionPhase, ...]
        Ordered phases of the session.
    focus_tokens : FocusTokenState
        Focus token budget and history.
    players : Tuple[SessionPlayer, ...]
        Players present, target first.
    started_at_week : int
        Week the session started.
    started_at_season : int
        Season the session started.
    current_phase_index : int, default=0
        Phase the scout is currently watching.
    flagged_moments : Tuple[FlaggedMoment, ...], default=()
        Moments flagged so far.
    hypotheses : Tuple[Hypothesis, ...], default=()
        Hypotheses formed during reflection.
    insight_points_earned : int, default=0
        IP earned during the session.
    reflection_notes : Tuple[str, ...], default=()
        Notes written during reflection.
    venue_atmosphere : VenueAtmosphere | None, optional
        Atmosphere attached when the session is populated.
    activity_instance_id : str | None, optional
        Calendar instance the session belongs to.
    """

    session_id: str
    mode: ObservationMode
    activity_type: str
    specialization: Optional[str]
    state: SessionState
    phases: Tuple[SessionPhase, ...]
    focus_tokens: FocusTokenState
    players: Tuple[SessionPlayer, ...]
    started_at_week: int
    started_at_season: int
    current_phase_index: int = 0
    flagged_moments: Tuple[FlaggedMoment, ...] = ()
    hypotheses: Tuple[Hypothesis, ...] = ()
    insight_points_earned: int = 0
    reflection_notes: Tuple[str, ...] = ()
    venue_atmosphere: Optional[VenueAtmosphere] = None
    activity_instance_id: Optional[str] = None

    def all_moments(self) -> Tuple[PlayerMoment, ...]:
        """Return every moment across all phases in phase order.

        Returns
        -------
        Tuple[PlayerMoment, ...]
            Flattened moments.
        """
        return tuple(moment for phase in self.phases for moment in phase.moments)

    def find_player(self, player_id: str) -> Optional[SessionPlayer]:
        """Return the session player with ``player_id``.

        Parameters
        ----------
        player_id : str
            Identifier to look for.

        Returns
        -------
        SessionPlayer | None
            The matching player or ``None``.
        """
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None


@dataclass(frozen=True, slots=True)
class SessionResult:
    """Summary handed to downstream report and Insight systems.

    Parameters
    ----------
    session_id : str
        Session identifier.
    mode : ObservationMode
        Session mode.
    activity_type : str
        Activity category.
    flagged_moments : Tuple[FlaggedMoment, ...]
        Moments flagged by the scout.
    hypotheses : Tuple[Hypothesis, ...]
        Hypotheses formed or updated.
    insight_points_earned : int
        IP earned in the session.
    reflection_notes : Tuple[str, ...]
        Reflection notes.
    quality_tier : str
        Tier derived from IP earned per completed phase.
    phases_completed : int
        Phases the scout watched.
    total_phases : int
        Phases in the session.
    focused_player_ids : Tuple[str, ...]
        Unique players that received focus, in allocation order.
    activity_instance_id : str | None, optional
        Calendar instance the session belonged to.
    """

    session_id: str
    mode: ObservationMode
    activity_type: str
    flagged_moments: Tuple[FlaggedMoment, ...]
    hypotheses: Tuple[Hypothesis, ...]
    insight_points_earned: int
    reflection_notes: Tuple[str, ...]
    quality_tier: str
    phases_completed: int
    total_phases: int
    focused_player_ids: Tuple[str, ...]
    activity_instance_id: Optional[str] = None
