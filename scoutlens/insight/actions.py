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
"""Handlers for the twelve Insight actions.

Each handler reads ground truth from the :class:`ActionContext` and returns
an :class:`InsightActionResult`. Handlers never raise for missing targets or
data; they report a soft failure instead. A fizzle reduces the yield of an
action but still produces a result. Every handler draws its narrative line
first, so the random sequence is stable across outcomes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from scoutlens.engine.rng import SeededRandom
from scoutlens.insight.catalog import get_insight_action
from scoutlens.insight.narratives import select_narrative
from scoutlens.insight.results import (
    ActionContext,
    AttributeObservation,
    AttributeRevealPayload,
    ConfidencePayload,
    ContactIntel,
    DiscoveryPayload,
    HiddenNaturePayload,
    InsightActionResult,
    MarketPayload,
    NetworkIntelPayload,
    QueryAccuracyPayload,
    ReportBonusPayload,
    SystemFitPayload,
    WhisperPayload,
)
from scoutlens.models.player import HIDDEN_ATTRIBUTES, POSITIONS, VISIBLE_ATTRIBUTES, PlayerRecord
from scoutlens.models.session import ObservationSession

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger

ActionHandler = Callable[[ActionContext, SeededRandom, bool], InsightActionResult]

VERDICT_BONUS = 30
VERDICT_FIZZLED_BONUS = 18
WHISPER_FIZZLED_RELIABILITY = 0.6
CLARITY_FIZZLED_CONFIDENCE = 0.7
SECOND_LOOK_FIZZLED_CONFIDENCE = 0.6
FIZZLED_HIDDEN_REVEALS = 2
FIZZLED_FIT_POSITIONS = 2
TERRITORY_BONUS = 0.10
TERRITORY_FIZZLED_BONUS = 0.06
EPIPHANY_BONUS = 1.0
EPIPHANY_FIZZLED_BONUS = 0.6
UNDERVALUED_EPSILON = 1e-9
PRESSURE_ATTRIBUTES: Tuple[str, ...] = ("big_game_temperament", "composure", "leadership")

TALENT_TIERS: Tuple[Tuple[int, str], ...] = (
    (180, "generational"),
    (150, "world_class"),
    (100, "quality_pro"),
)
TIER_PHRASES: Dict[str, str] = {
    "generational": "a once-in-a-generation talent",
    "world_class": "a future world-class player",
    "quality_pro": "a quality professional",
    "journeyman": "a solid journeyman",
}

INTEL_TYPES: Tuple[str, ...] = ("recommendation", "warning", "tip")
INTEL_TEMPLATES: Dict[str, Tuple[str, ...]] = {
    "recommendation": (
        "has a promising player worth tracking",
        "knows of someone in their network who is serious talent",
        "recommends the next fixture; there is someone worth seeing",
    ),
    "warning": (
        "flagged character concerns about a player you are tracking",
        "warned that a player's attitude in training is a known issue",
        "cautioned that an injury history is worse than reported",
    ),
    "tip": (
        "has heard of a young player coming through quickly",
        "mentioned a contract situation that may open a window soon",
        "expects a player's form to change significantly",
    ),
}


def talent_tier(potential_ability: int) -> str:
    """Classify a potential ability into a talent tier.

    Parameters
    ----------
    potential_ability : int
        Potential on the 1-200 scale.

    Returns
    -------
    str
        ``"generational"``, ``"world_class"``, ``"quality_pro"`` or
        ``"journeyman"``.
    """
    for threshold, tier in TALENT_TIERS:
        if potential_ability >= threshold:
            return tier
    return "journeyman"


def _session_hinted_attributes(session: ObservationSession) -> List[str]:
    """Return every attribute hinted in the session, in first-seen order.

    Parameters
    ----------
    session : ObservationSession
        Session to scan.

    Returns
    -------
    List[str]
        Unique attribute names.
    """
    return list(dict.fromkeys(attr for moment in session.all_moments() for attr in moment.attributes_hinted))


def _player_hinted_attributes(session: ObservationSession, player_id: str) -> List[str]:
    """Return attributes hinted in one player's moments, in first-seen order.

    Parameters
    ----------
    session : ObservationSession
        Session to scan.
    player_id : str
        Player whose moments are read.

    Returns
    -------
    List[str]
        Unique attribute names.
    """
    return list(
        dict.fromkeys(
            attr
            for moment in session.all_moments()
            if moment.player_id == player_id
            for attr in moment.attributes_hinted
        )
    )


def _unfocused_by_quality(session: ObservationSession) -> List[str]:
    """Rank never-focused players by their average moment quality.

    Parameters
    ----------
    session : ObservationSession
        Session to scan.

    Returns
    -------
    List[str]
        Player ids, best average first; ties keep first-seen order.
    """
    focused = {player.player_id for player in session.players if player.focused_phases}
    totals: Dict[str, List[int]] = {}
    for moment in session.all_moments():
        if moment.player_id in focused:
            continue
        totals.setdefault(moment.player_id, []).append(moment.quality)
    averages = [(player_id, sum(values) / len(values)) for player_id, values in totals.items()]
    averages.sort(key=lambda item: item[1], reverse=True)
    return [player_id for player_id, _ in averages]


def _best_potential_in_session(context: ActionContext) -> Optional[PlayerRecord]:
    """Return the session player with the highest potential ability.

    Parameters
    ----------
    context : ActionContext
        Action context.

    Returns
    -------
    PlayerRecord | None
        Best record, or ``None`` when no session player has a record.
    """
    best: Optional[PlayerRecord] = None
    for player in context.session.players:
        record = context.players.get(player.player_id)
        if record is not None and (best is None or record.potential_ability > best.potential_ability):
            best = record
    return best


def _reveal(record: PlayerRecord, attributes: List[str]) -> Tuple[AttributeObservation, ...]:
    """Read the true values of ``attributes`` from ``record``.

    Parameters
    ----------
    record : PlayerRecord
        Ground-truth player.
    attributes : List[str]
        Attribute names.

    Returns
    -------
    Tuple[AttributeObservation, ...]
        One observation per attribute.
    """
    return tuple(AttributeObservation(record.player_id, name, record.get_attribute(name)) for name in attributes)


def _half(count: int) -> int:
    """Return the fizzled yield for ``count`` items.

    Parameters
    ----------
    count : int
        Full yield.

    Returns
    -------
    int
        Half of ``count`` rounded down, never below 1.
    """
    return max(1, count // 2)


def clarity_of_vision(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Reveal true values for the attributes the session hinted at.

    Parameters
    ----------
    context : ActionContext
        Action context; needs a target player.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with an :class:`AttributeRevealPayload`.
    """
    action_id = "clarity_of_vision"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    if context.target_player_id is None:
        return InsightActionResult(action_id, False, f"{narrative} But there was no focused player to apply it to.")
    record = context.target_record()
    if record is None:
        return InsightActionResult(action_id, False, f"{narrative} But the player could not be located.")

    scope = _session_hinted_attributes(context.session) or list(VISIBLE_ATTRIBUTES)
    count = _half(len(scope)) if fizzled else len(scope)
    chosen = rng.shuffle(scope)[:count]

    confidence = CLARITY_FIZZLED_CONFIDENCE if fizzled else 1.0
    if fizzled:
        note = f" (fizzled: {count} of {len(scope)} attributes revealed at {confidence:.0%} confidence)"
    else:
        note = f" All {count} observed attributes read perfectly."
    payload = AttributeRevealPayload(_reveal(record, chosen), confidence=confidence)
    return InsightActionResult(action_id, not fizzled, narrative + note, payload)


def hidden_nature(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Reveal the target's hidden character attributes.

    Parameters
    ----------
    context : ActionContext
        Action context; needs a target player.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with a :class:`HiddenNaturePayload`.
    """
    action_id = "hidden_nature"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    if context.target_player_id is None:
        return InsightActionResult(action_id, False, f"{narrative} But there was no player to reveal.")
    record = context.target_record()
    if record is None:
        return InsightActionResult(action_id, False, f"{narrative} But the player data was unavailable.")

    total = len(HIDDEN_ATTRIBUTES)
    count = FIZZLED_HIDDEN_REVEALS if fizzled else total
    chosen = rng.shuffle(HIDDEN_ATTRIBUTES)[:count]
    if fizzled:
        note = f" (fizzled: {count} of {total} hidden attributes revealed)"
    else:
        note = " All four hidden attributes exposed."
    return InsightActionResult(action_id, not fizzled, narrative + note, HiddenNaturePayload(_reveal(record, chosen)))


def the_verdict(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Grant a report quality bonus.

    Parameters
    ----------
    context : ActionContext
        Action context.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with a :class:`ReportBonusPayload`.
    """
    action_id = "the_verdict"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    bonus = VERDICT_FIZZLED_BONUS if fizzled else VERDICT_BONUS
    if fizzled:
        note = f" (fizzled: +{bonus} report quality instead of +{VERDICT_BONUS})"
    else:
        note = f" (+{bonus} report quality applied)"
    return InsightActionResult(action_id, not fizzled, narrative + note, ReportBonusPayload(bonus))


def second_look(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Retroactively read the best unfocused player's hinted attributes.

    A player whose moments hinted at nothing yields no reveal at all.

    Parameters
    ----------
    context : ActionContext
        Action context.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with an :class:`AttributeRevealPayload` naming the player.
    """
    action_id = "second_look"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    ranked = _unfocused_by_quality(context.session)
    if not ranked:
        return InsightActionResult(action_id, False, f"{narrative} But every player was already in focus.")
    player_id = ranked[0]
    record = context.players.get(player_id)
    if record is None:
        return InsightActionResult(action_id, False, f"{narrative} But the player's data could not be retrieved.")

    scope = _player_hinted_attributes(context.session, player_id)
    if not scope:
        return InsightActionResult(action_id, False, f"{narrative} But there were no observable moments for them.")

    count = _half(len(scope)) if fizzled else len(scope)
    chosen = rng.shuffle(scope)[:count]
    confidence = SECOND_LOOK_FIZZLED_CONFIDENCE if fizzled else 1.0
    if fizzled:
        note = f" (fizzled: {count} attributes read for player {player_id} at {confidence:.0%} confidence)"
    else:
        note = f" {count} attributes retroactively read for player {player_id}."
    payload = AttributeRevealPayload(_reveal(record, chosen), discovered_player_id=player_id, confidence=confidence)
    return InsightActionResult(action_id, not fizzled, narrative + note, payload)


def diamond_in_the_rough(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Find the highest-potential player at the venue.

    Parameters
    ----------
    context : ActionContext
        Action context.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled; a fizzle names the player only.

    Returns
    -------
    InsightActionResult
        Result with a :class:`DiscoveryPayload`.
    """
    action_id = "diamond_in_the_rough"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    best = _best_potential_in_session(context)
    if best is None:
        return InsightActionResult(action_id, False, f"{narrative} But no player data was available.")

    if fizzled:
        note = f" A vague feeling about player {best.player_id}, but you cannot pin it down."
        return InsightActionResult(action_id, False, narrative + note, DiscoveryPayload(best.player_id))

    tier = talent_tier(best.potential_ability)
    attribute, value = best.best_visible_attribute()
    note = f" {TIER_PHRASES[tier].capitalize()} identified. Their {attribute} is exceptional ({value})."
    payload = DiscoveryPayload(
        best.player_id,
        tier=tier,
        observations=(AttributeObservation(best.player_id, attribute, value),),
    )
    return InsightActionResult(action_id, True, narrative + note, payload)


def generational_whisper(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Sense the potential tier of the highest-potential player present.

    Parameters
    ----------
    context : ActionContext
        Action context.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled; a fizzle lowers reliability.

    Returns
    -------
    InsightActionResult
        Result with a :class:`WhisperPayload`.
    """
    action_id = "generational_whisper"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    best = _best_potential_in_session(context)
    if best is None:
        return InsightActionResult(action_id, False, f"{narrative} But you could not isolate the signal.")

    tier = talent_tier(best.potential_ability)
    reliability = WHISPER_FIZZLED_RELIABILITY if fizzled else rng.next_float(0.9, 1.0)
    phrase = f"{TIER_PHRASES[tier]} (player {best.player_id})"
    if fizzled:
        note = f" (fizzled: reliability {reliability:.2f}) {phrase}"
    else:
        note = f" Reliability {reliability:.2f}: {phrase}."
    payload = WhisperPayload(best.player_id, tier, reliability)
    return InsightActionResult(action_id, not fizzled, narrative + note, payload)


def perfect_fit(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Grade the target at every position, or two when fizzled.

    Parameters
    ----------
    context : ActionContext
        Action context; needs a target player.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with a :class:`SystemFitPayload`.
    """
    action_id = "perfect_fit"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    if context.target_player_id is None:
        return InsightActionResult(action_id, False, f"{narrative} But no target player was specified.")
    record = context.target_record()
    if record is None:
        return InsightActionResult(action_id, False, f"{narrative} But player data was unavailable.")

    positions = rng.shuffle(POSITIONS)[:FIZZLED_FIT_POSITIONS] if fizzled else list(POSITIONS)
    if fizzled:
        note = f" (fizzled: only {len(positions)} positions analysed)"
    else:
        note = f" All {len(positions)} positions graded."
    payload = SystemFitPayload(record.player_id, record.get_position_fits(positions))
    return InsightActionResult(action_id, not fizzled, narrative + note, payload)


def pressure_test(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Reveal how the target handles big moments.

    Parameters
    ----------
    context : ActionContext
        Action context; needs a target player.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled; a fizzle reveals temperament only.

    Returns
    -------
    InsightActionResult
        Result with a :class:`HiddenNaturePayload`.
    """
    action_id = "pressure_test"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    if context.target_player_id is None:
        return InsightActionResult(action_id, False, f"{narrative} But no target player was specified.")
    record = context.target_record()
    if record is None:
        return InsightActionResult(action_id, False, f"{narrative} But player data was unavailable.")

    if fizzled:
        revealed = _reveal(record, list(PRESSURE_ATTRIBUTES[:1]))
        note = " (fizzled: only big-game temperament revealed)"
    else:
        revealed = _reveal(record, list(PRESSURE_ATTRIBUTES))
        note = " Big-game temperament, composure and leadership exposed."
    return InsightActionResult(action_id, not fizzled, narrative + note, HiddenNaturePayload(revealed))


def network_pulse(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Collect intel from every contact, or the most reliable half when fizzled.

    Parameters
    ----------
    context : ActionContext
        Action context; needs contacts.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with a :class:`NetworkIntelPayload`.
    """
    action_id = "network_pulse"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    if not context.contacts:
        return InsightActionResult(action_id, False, f"{narrative} But no contacts were available in this region.")

    ranked = sorted(context.contacts, key=lambda contact: contact.reliability, reverse=True)
    responding = ranked[: _half(len(ranked))] if fizzled else ranked

    intel = []
    for contact in responding:
        intel_type = rng.pick(INTEL_TYPES)
        template = rng.pick(INTEL_TEMPLATES[intel_type])
        player_id = rng.pick(contact.known_player_ids) if contact.known_player_ids else None
        line = f"{contact.name} ({contact.organization}) {template}"
        if player_id is not None:
            line = f"{line} [player: {player_id}]"
        intel.append(ContactIntel(contact.contact_id, intel_type, line, player_id))

    if fizzled:
        note = f" (fizzled: {len(intel)} of {len(ranked)} contacts responded)"
    else:
        note = f" {len(intel)} contacts responded."
    return InsightActionResult(action_id, not fizzled, narrative + note, NetworkIntelPayload(tuple(intel)))


def territory_mastery(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Grant a permanent confidence boost in the current sub-region.

    Parameters
    ----------
    context : ActionContext
        Action context.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with a :class:`ConfidencePayload`.
    """
    action_id = "territory_mastery"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    bonus = TERRITORY_FIZZLED_BONUS if fizzled else TERRITORY_BONUS
    label = context.sub_region_id or "current sub-region"
    percent = round(bonus * 100)
    if fizzled:
        note = f" (fizzled: +{percent}% confidence in {label})"
    else:
        note = f" Permanent +{percent}% confidence in {label}."
    return InsightActionResult(action_id, not fizzled, narrative + note, ConfidencePayload(bonus, context.sub_region_id))


def algorithmic_epiphany(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Boost the accuracy of the next statistical query.

    Parameters
    ----------
    context : ActionContext
        Action context.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled.

    Returns
    -------
    InsightActionResult
        Result with a :class:`QueryAccuracyPayload`.
    """
    action_id = "algorithmic_epiphany"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    bonus = EPIPHANY_FIZZLED_BONUS if fizzled else EPIPHANY_BONUS
    if fizzled:
        note = f" (fizzled: query accuracy bonus reduced to {bonus})"
    else:
        note = f" The next database query runs at perfect accuracy (bonus {bonus})."
    return InsightActionResult(action_id, not fizzled, narrative + note, QueryAccuracyPayload(bonus))


def market_blind_spot(context: ActionContext, rng: SeededRandom, fizzled: bool) -> InsightActionResult:
    """Find league players whose potential outstrips their market value.

    Both potential and value are normalised by the pool maxima; a player is
    undervalued when the normalised potential exceeds the normalised value.

    Parameters
    ----------
    context : ActionContext
        Action context; needs league players.
    rng : SeededRandom
        Random source.
    fizzled : bool
        Whether the spend fizzled; a fizzle returns one or two names.

    Returns
    -------
    InsightActionResult
        Result with a :class:`MarketPayload`.
    """
    action_id = "market_blind_spot"
    narrative = select_narrative(action_id, context.scout.specialization, rng)
    pool = context.league_players
    if not pool:
        return InsightActionResult(action_id, False, f"{narrative} But no league data was available to analyse.")

    max_potential = max(max(record.potential_ability for record in pool), 1)
    max_value = max(max(record.market_value for record in pool), 1)
    scored = []
    for record in pool:
        score = record.potential_ability / max_potential - record.market_value / max_value
        if score > UNDERVALUED_EPSILON:
            scored.append((record.player_id, score))
    scored.sort(key=lambda item: item[1], reverse=True)

    if fizzled:
        count = rng.next_int(1, 2)
    else:
        count = min(5, max(3, int(len(scored) * 0.05)))
    found = tuple(player_id for player_id, _ in scored[:count])
    if not found:
        return InsightActionResult(
            action_id, False, f"{narrative} But no undervalued players were found.", MarketPayload(())
        )

    plural = "" if len(found) == 1 else "s"
    if fizzled:
        note = f" (fizzled: {len(found)} undervalued player{plural} identified)"
    else:
        note = f" {len(found)} undervalued player{plural} identified."
    return InsightActionResult(action_id, not fizzled, narrative + note, MarketPayload(found))


ACTION_HANDLERS: Dict[str, ActionHandler] = {
    "clarity_of_vision": clarity_of_vision,
    "hidden_nature": hidden_nature,
    "the_verdict": the_verdict,
    "second_look": second_look,
    "diamond_in_the_rough": diamond_in_the_rough,
    "generational_whisper": generational_whisper,
    "perfect_fit": perfect_fit,
    "pressure_test": pressure_test,
    "network_pulse": network_pulse,
    "territory_mastery": territory_mastery,
    "algorithmic_epiphany": algorithmic_epiphany,
    "market_blind_spot": market_blind_spot,
}


def execute_insight_action(
    action_id: str,
    context: ActionContext,
    fizzled: bool,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> InsightActionResult:
    """Run the handler for ``action_id``.

    The fizzle outcome comes from :func:`scoutlens.insight.economy.spend_insight`.

    Parameters
    ----------
    action_id : str
        Catalog identifier.
    context : ActionContext
        Data available to the handler.
    fizzled : bool
        Whether the spend fizzled.
    rng : SeededRandom
        Random source.
    debugger : SessionDebugger | None, optional
        Receives the outcome when provided.

    Returns
    -------
    InsightActionResult
        Handler result.

    Raises
    ------
    ValueError
        If ``action_id`` is not in the catalog.
    """
    get_insight_action(action_id)
    result = ACTION_HANDLERS[action_id](context, rng, fizzled)
    if debugger:
        status = "success" if result.success else "no full effect"
        debugger.log_insight_event(action_id, f"{status}: {result.narrative}")
    return result
