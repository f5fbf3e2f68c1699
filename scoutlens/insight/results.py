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
"""Execution context and result payloads of Insight actions.

Every action result carries at most one payload, and the payload class
names the kind of effect: attribute reveals, a report bonus, a discovery,
and so on. Soft failures (no target, no contacts, no league data) carry no
payload at all.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple, Union

from scoutlens.models.player import PlayerRecord
from scoutlens.models.scout import Contact, ScoutProfile
from scoutlens.models.session import ObservationSession

TalentTier = Literal["generational", "world_class", "quality_pro", "journeyman"]
IntelType = Literal["recommendation", "warning", "tip"]


@dataclass(frozen=True, slots=True)
class AttributeObservation:
    """Ground-truth value of one attribute.

    Parameters
    ----------
    player_id : str
        Player the value belongs to.
    attribute : str
        Attribute name.
    true_value : int
        Value on the 1-20 scale.
    """

    player_id: str
    attribute: str
    true_value: int


@dataclass(frozen=True, slots=True)
class AttributeRevealPayload:
    """Perfect reads of attributes seen during the session.

    Parameters
    ----------
    observations : Tuple[AttributeObservation, ...]
        Revealed values.
    discovered_player_id : str | None, optional
        Player the reads belong to when the action chose them itself.
    confidence : float, default=1.0
        Confidence the scout may place in the reads; below 1.0 after a
        fizzle.
    """

    observations: Tuple[AttributeObservation, ...]
    discovered_player_id: Optional[str] = None
    confidence: float = 1.0


@dataclass(frozen=True, slots=True)
class HiddenNaturePayload:
    """Revealed values of character attributes the moments cannot show.

    Parameters
    ----------
    revealed : Tuple[AttributeObservation, ...]
        Revealed values.
    """

    revealed: Tuple[AttributeObservation, ...]


@dataclass(frozen=True, slots=True)
class ReportBonusPayload:
    """Flat bonus for the next report's quality score.

    Parameters
    ----------
    report_quality_bonus : int
        Points added to report quality.
    """

    report_quality_bonus: int


@dataclass(frozen=True, slots=True)
class DiscoveryPayload:
    """Highest-potential player found at the venue.

    Parameters
    ----------
    discovered_player_id : str
        Player found.
    tier : TalentTier | None, optional
        Potential tier; withheld when the signal was vague.
    observations : Tuple[AttributeObservation, ...], default=()
        Confirmed standout attribute, when the signal was strong.
    """

    discovered_player_id: str
    tier: Optional[TalentTier] = None
    observations: Tuple[AttributeObservation, ...] = ()


@dataclass(frozen=True, slots=True)
class WhisperPayload:
    """Gut feeling about the highest-potential player present.

    Parameters
    ----------
    discovered_player_id : str
        Player the feeling is about.
    tier : TalentTier
        Potential tier.
    reliability : float
        How much the feeling can be trusted.
    """

    discovered_player_id: str
    tier: TalentTier
    reliability: float


@dataclass(frozen=True, slots=True)
class SystemFitPayload:
    """Positional fit grades for one player.

    Parameters
    ----------
    player_id : str
        Player graded.
    fits : Dict[str, int]
        Fit score from 0 to 100 per position.
    """

    player_id: str
    fits: Dict[str, int]


@dataclass(frozen=True, slots=True)
class ContactIntel:
    """One piece of intel relayed by a contact.

    Parameters
    ----------
    contact_id : str
        Contact who shared it.
    intel_type : IntelType
        Kind of intel.
    intel : str
        Rendered intel line.
    player_id : str | None, optional
        Player referenced, when the contact knows one.
    """

    contact_id: str
    intel_type: IntelType
    intel: str
    player_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class NetworkIntelPayload:
    """Intel from every responding contact.

    Parameters
    ----------
    intel : Tuple[ContactIntel, ...]
        Intel in contact reliability order.
    """

    intel: Tuple[ContactIntel, ...]


@dataclass(frozen=True, slots=True)
class ConfidencePayload:
    """Permanent confidence boost in a sub-region.

    Parameters
    ----------
    confidence_bonus : float
        Fractional boost.
    sub_region_id : str | None, optional
        Sub-region the boost applies to.
    """

    confidence_bonus: float
    sub_region_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class QueryAccuracyPayload:
    """Accuracy multiplier for the next statistical query.

    Parameters
    ----------
    query_accuracy_bonus : float
        Multiplier in ``(0, 1]``.
    """

    query_accuracy_bonus: float


@dataclass(frozen=True, slots=True)
class MarketPayload:
    """Players the market undervalues.

    Parameters
    ----------
    undervalued_player_ids : Tuple[str, ...]
        Players ordered by undervaluation, largest first.
    """

    undervalued_player_ids: Tuple[str, ...]


InsightPayload = Union[
    AttributeRevealPayload,
    HiddenNaturePayload,
    ReportBonusPayload,
    DiscoveryPayload,
    WhisperPayload,
    SystemFitPayload,
    NetworkIntelPayload,
    ConfidencePayload,
    QueryAccuracyPayload,
    MarketPayload,
]


@dataclass(frozen=True, slots=True)
class InsightActionResult:
    """Outcome of executing one Insight action.

    Parameters
    ----------
    action_id : str
        Action executed.
    success : bool
        ``False`` for a fizzle or a soft failure.
    narrative : str
        Text for the session log.
    payload : InsightPayload | None, optional
        Action-specific effect; ``None`` for soft failures.
    """

    action_id: str
    success: bool
    narrative: str
    payload: Optional[InsightPayload] = None


@dataclass(frozen=True, slots=True)
class ActionContext:
    """Everything an action handler may read.

    Parameters
    ----------
    scout : ScoutProfile
        Scout using the action.
    session : ObservationSession
        Current session.
    players : Dict[str, PlayerRecord]
        Ground-truth records keyed by player id.
    target_player_id : str | None, optional
        Player the action is aimed at.
    contacts : Tuple[Contact, ...], default=()
        Contacts available in the region.
    sub_region_id : str | None, optional
        Current sub-region.
    league_players : Tuple[PlayerRecord, ...], default=()
        League pool for market analysis.
    """

    scout: ScoutProfile
    session: ObservationSession
    players: Dict[str, PlayerRecord] = field(default_factory=dict)
    target_player_id: Optional[str] = None
    contacts: Tuple[Contact, ...] = ()
    sub_region_id: Optional[str] = None
    league_players: Tuple[PlayerRecord, ...] = ()

    def target_record(self) -> Optional[PlayerRecord]:
        """Return the ground-truth record of the target player.

        Returns
        -------
        PlayerRecord | None
            Record, or ``None`` without a known target.
        """
        if self.target_player_id is None:
            return None
        return self.players.get(self.target_player_id)
