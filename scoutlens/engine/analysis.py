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
"""Populate analysis sessions with data points and phase narrative.

Analysis activities put figures in front of the scout instead of live
play: database results, clip metrics, model calibration numbers. Each
phase samples a handful of distinct templates from the activity's bank.
Anomalies are always highlighted, other figures only sometimes, and the
chance grows in later phases.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple, Union

from scoutlens.engine.config import ENGINE_CONFIG
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import is_populated
from scoutlens.models.session import DataPoint, ObservationSession, SessionPlayer

if TYPE_CHECKING:
    from scoutlens.utils.debug import SessionDebugger

DataValue = Union[int, float, str]
ValueSpec = Callable[[SeededRandom], DataValue]


def _whole(low: int, high: int) -> ValueSpec:
    """Inclusive integer value.

    Parameters
    ----------
    low : int
        Lowest value.
    high : int
        Highest value.

    Returns
    -------
    ValueSpec
        Value generator.
    """
    return lambda rng: rng.next_int(low, high)


def _rate(low: float, high: float, places: int = 2) -> ValueSpec:
    """Rounded float value.

    Parameters
    ----------
    low : float
        Lowest value.
    high : float
        Highest value.
    places : int, default=2
        Decimal places kept.

    Returns
    -------
    ValueSpec
        Value generator.
    """
    return lambda rng: round(rng.next_float(low, high), places)


def _percent(low: int, high: int) -> ValueSpec:
    """Whole percentage rendered as text.

    Parameters
    ----------
    low : int
        Lowest percentage.
    high : int
        Highest percentage.

    Returns
    -------
    ValueSpec
        Value generator.
    """
    return lambda rng: f"{rng.next_int(low, high)}%"


def _one_of(*options: str) -> ValueSpec:
    """Categorical value.

    Parameters
    ----------
    *options : str
        Candidate values.

    Returns
    -------
    ValueSpec
        Value generator.
    """
    return lambda rng: rng.pick(options)


def _fixed(value: str) -> ValueSpec:
    """Constant value that consumes no randomness.

    Parameters
    ----------
    value : str
        The value.

    Returns
    -------
    ValueSpec
        Value generator.
    """
    return lambda rng: value


@dataclass(frozen=True, slots=True)
class PointTemplate:
    """Blueprint for one data point.

    Parameters
    ----------
    label : str
        Human-readable label.
    value : ValueSpec
        Generator of the value.
    category : str
        ``statistical``, ``comparison``, ``trend`` or ``anomaly``.
    related_attributes : Tuple[str, ...], default=()
        Attributes the figure speaks to; empty for aggregate figures.
    """

    label: str
    value: ValueSpec
    category: str
    related_attributes: Tuple[str, ...] = ()


DATA_POINT_TEMPLATES: Dict[str, Tuple[PointTemplate, ...]] = {
    "database_query": (
        PointTemplate("Search filters applied", _whole(3, 9), "statistical"),
        PointTemplate("Position group", _one_of("Attackers", "Midfielders", "Defenders", "Goalkeepers"), "statistical"),
        PointTemplate("Minimum minutes played", _whole(500, 1800), "statistical"),
        PointTemplate("Players returned", _whole(18, 94), "statistical"),
        PointTemplate("Goals per 90", _rate(0.1, 0.9), "statistical", ("finishing", "shooting")),
        PointTemplate("Key passes per 90", _rate(0.3, 2.8), "statistical", ("passing", "vision")),
        PointTemplate("Successful dribbles per 90", _rate(0.2, 4.2), "statistical", ("dribbling", "agility")),
        PointTemplate("Aerial duels won", _percent(30, 72), "statistical", ("heading", "jumping", "strength")),
        PointTemplate("Tackles per 90", _rate(0.5, 5.5), "statistical", ("tackling", "defensive_awareness")),
        PointTemplate("Interceptions per 90", _rate(0.3, 3.8), "statistical", ("anticipation", "defensive_awareness")),
        PointTemplate("High-intensity runs per 90", _whole(8, 34), "statistical", ("stamina", "work_rate")),
        PointTemplate("xG outperformance", _rate(-2.5, 4.5, 1), "anomaly", ("finishing", "composure")),
        PointTemplate("Career league level trajectory", _one_of("Rising", "Flat", "Falling"), "trend", ("consistency",)),
    ),
    "watch_video": (
        PointTemplate("Clip duration (min)", _whole(2, 12), "statistical"),
        PointTemplate("Touches in clip", _whole(4, 38), "statistical"),
        PointTemplate("Pass accuracy in final third", _percent(55, 88), "statistical", ("passing", "decision_making")),
        PointTemplate("Carries into the box per 90", _rate(0.2, 3.5), "statistical", ("dribbling", "off_the_ball")),
        PointTemplate("Average position (x)", _rate(0.25, 0.85), "statistical", ("positioning", "off_the_ball")),
        PointTemplate("Shots on target", _percent(28, 75), "statistical", ("shooting", "finishing")),
        PointTemplate("Duels won", _percent(38, 68), "statistical", ("strength", "balance", "tackling")),
        PointTemplate("Sprints away from the ball per 90", _whole(6, 28), "comparison", ("off_the_ball", "pace")),
        PointTemplate("Anomaly: unusually wide press trigger zone", _fixed("flagged"), "anomaly", ("pressing", "work_rate")),
        PointTemplate("Anomaly: late arrival in the box", _fixed("flagged"), "anomaly", ("off_the_ball", "anticipation")),
    ),
    "deep_video_analysis": (
        PointTemplate("Body orientation on reception (degrees)", _whole(5, 55), "statistical", ("first_touch", "positioning")),
        PointTemplate("Frames to release after receiving", _whole(2, 18), "statistical", ("first_touch", "decision_making")),
        PointTemplate("Shoulder checks before receiving", _percent(22, 88), "comparison", ("anticipation", "vision")),
        PointTemplate("Head scans per possession", _rate(0.5, 4.5, 1), "comparison", ("anticipation", "vision")),
        PointTemplate("Pressure success rate", _percent(18, 52), "statistical", ("pressing", "anticipation")),
        PointTemplate("Distance covered per 90 (km)", _rate(8.5, 12.5, 1), "statistical", ("stamina", "work_rate")),
        PointTemplate("High-speed running per 90 (m)", _whole(400, 1800), "statistical", ("pace", "stamina")),
        PointTemplate("Ball retention under pressure", _percent(52, 84), "comparison", ("composure", "balance", "strength")),
        PointTemplate("Anomaly: second-ball reactions consistently elite", _fixed("confirmed"), "anomaly", ("anticipation",)),
        PointTemplate("Anomaly: movement disrupts defensive shape", _fixed("confirmed"), "anomaly", ("off_the_ball", "vision")),
    ),
    "algorithm_calibration": (
        PointTemplate("Model accuracy, last 20 predictions", _percent(52, 84), "statistical"),
        PointTemplate("False positives", _whole(1, 6), "statistical"),
        PointTemplate("False negatives", _whole(0, 5), "statistical"),
        PointTemplate("League difficulty coefficient", _rate(0.6, 1.4), "comparison"),
        PointTemplate("Recency window (weeks)", _whole(4, 24), "comparison"),
        PointTemplate("Backtest sample size", _whole(40, 220), "trend"),
        PointTemplate("Revised accuracy estimate", _percent(60, 89), "trend"),
        PointTemplate("Attribute most over-predicted", _one_of("Pace", "Finishing", "Composure", "Vision"), "anomaly"),
    ),
    "market_inefficiency": (
        PointTemplate("Players in value bracket", _whole(8, 45), "statistical"),
        PointTemplate("Average market value (M)", _rate(0.2, 4.5, 1), "statistical"),
        PointTemplate("Contract years remaining", _whole(0, 3), "statistical", ("professionalism",)),
        PointTemplate("Goals per 90 against wage peers", _rate(0.8, 1.9), "comparison", ("finishing", "shooting")),
        PointTemplate("Wage to league median ratio", _rate(0.4, 1.6), "comparison"),
        PointTemplate("Market efficiency of league", _percent(35, 78), "trend"),
        PointTemplate("Cross-club interest signals", _whole(0, 5), "trend"),
        PointTemplate("Arbitrage margin (M)", _rate(0.3, 6.0, 1), "anomaly", ("consistency", "professionalism")),
        PointTemplate("Anomaly: few scouts cover this market", _fixed("confirmed"), "anomaly"),
    ),
    "opposition_analysis": (
        PointTemplate("Defensive formation", _one_of("4-4-2", "4-3-3", "3-5-2", "5-3-2"), "statistical", ("marking",)),
        PointTemplate("Defensive line height (m)", _whole(28, 52), "statistical", ("defensive_awareness", "positioning")),
        PointTemplate("High press trigger in own half", _percent(30, 75), "statistical", ("pressing",)),
        PointTemplate("Compactness width (m)", _whole(22, 48), "statistical", ("teamwork", "marking")),
        PointTemplate("Central overload tendency", _one_of("High", "Medium", "Low"), "comparison", ("teamwork",)),
        PointTemplate("Wide area exploitation", _percent(18, 58), "statistical", ("crossing", "off_the_ball")),
        PointTemplate("Corners conceded per game", _rate(2.0, 8.5, 1), "statistical", ("marking",)),
        PointTemplate("Set piece vulnerability", _one_of("High", "Medium", "Low"), "anomaly", ("marking", "jumping")),
        PointTemplate("Formation switches per game", _rate(0.0, 2.5, 1), "trend", ("teamwork", "decision_making")),
    ),
}

PHASE_DESCRIPTIONS: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    "database_query": (
        (
            "The database loads. You set age range, position group and minimum minutes.",
            "You tighten the query before the results come back.",
        ),
        (
            "The first results arrive and a few names stand out at once.",
            "A first pass through the list. The numbers tell part of the story.",
        ),
        (
            "You adjust the shortlist for league strength and playing time.",
            "Outliers look more interesting once the figures are put in context.",
        ),
        ("You compile the names worth following up with video.",),
    ),
    "watch_video": (
        ("The first clips load with the statistics overlaid.", "Recent highlights queue up. You watch for what the cameras miss."),
        ("Touch, release speed and weight of pass, clip after clip.",),
        ("Off-ball runs and positioning triggers take centre stage.",),
        ("The last clips confirm some impressions and undo others.",),
    ),
    "deep_video_analysis": (
        ("You slow the footage down to single frames.",),
        ("Scanning habits and body shape before receiving come into focus.",),
        ("Physical output is laid over the tactical picture.",),
        ("The frame-by-frame work is done and the profile is sharper.",),
    ),
    "algorithm_calibration": (
        ("The model's recent predictions are laid against what happened.",),
        ("You adjust the weightings and rerun the backtest.",),
        ("The recalibrated model settles. Its blind spots are clearer now.",),
    ),
    "market_inefficiency": (
        ("You pull valuations for the target bracket.",),
        ("Performance is set against wages and fees.",),
        ("The gaps between price and output start to show.",),
        ("A shortlist of undervalued profiles remains.",),
    ),
    "opposition_analysis": (
        ("You break down the opponent's shape without the ball.",),
        ("Pressing triggers and compactness come under the microscope.",),
        ("Set pieces are where the weaknesses are hiding.",),
        ("The report on the opposition is ready.",),
    ),
}


def get_analysis_phase_description(activity_type: str, phase_index: int, rng: SeededRandom) -> str:
    """Narrative line for an analysis phase.

    Sessions longer than the activity's bank reuse the last slot; activities
    without a bank get a generic line.

    Parameters
    ----------
    activity_type : str
        Analysis activity.
    phase_index : int
        Zero-based phase index.
    rng : SeededRandom
        Random source.

    Returns
    -------
    str
        Phase description.
    """
    bank = PHASE_DESCRIPTIONS.get(activity_type)
    if bank is None:
        return f"Analysis phase {phase_index + 1}. You work through the data looking for signal."
    return rng.pick(bank[min(phase_index, len(bank) - 1)])


def sample_templates(bank: Sequence[PointTemplate], count: int, rng: SeededRandom) -> List[PointTemplate]:
    """Draw up to ``count`` distinct templates with a partial Fisher-Yates.

    Parameters
    ----------
    bank : Sequence[PointTemplate]
        Templates to draw from.
    count : int
        Wanted number of templates.
    rng : SeededRandom
        Random source.

    Returns
    -------
    List[PointTemplate]
        Distinct templates in draw order.
    """
    indices = list(range(len(bank)))
    chosen = []
    for i in range(min(count, len(bank))):
        j = rng.next_int(i, len(indices) - 1)
        indices[i], indices[j] = indices[j], indices[i]
        chosen.append(bank[indices[i]])
    return chosen


def _point_id(phase_index: int, point_index: int, label: str) -> str:
    """Deterministic data point identifier.

    Parameters
    ----------
    phase_index : int
        Phase of the point.
    point_index : int
        Position of the point within the phase.
    label : str
        Point label.

    Returns
    -------
    str
        Identifier such as ``dp-p2-0-goals-per-90``.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", label.lower())[:16]
    return f"dp-p{phase_index}-{point_index}-{slug}"


def generate_data_points(
    rng: SeededRandom,
    activity_type: str,
    phase_index: int,
    players: Sequence[SessionPlayer],
) -> List[DataPoint]:
    """Generate the data points shown during one analysis phase.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    activity_type : str
        Analysis activity; unknown activities use the database bank.
    phase_index : int
        Zero-based phase index; later phases show more points and
        highlight more often.
    players : Sequence[SessionPlayer]
        Players a point may be attributed to.

    Returns
    -------
    List[DataPoint]
        Between three and eight points with distinct labels.
    """
    cfg = ENGINE_CONFIG.modes
    bank = DATA_POINT_TEMPLATES.get(activity_type, DATA_POINT_TEMPLATES["database_query"])
    late = phase_index >= cfg.late_phase_from
    low, high = cfg.data_point_count
    count = rng.next_int(low, cfg.late_data_point_max if late else high)

    points = []
    for index, template in enumerate(sample_templates(bank, count, rng)):
        if template.category == "anomaly":
            highlighted = True
        else:
            highlighted = rng.chance(cfg.late_highlight_rate if late else cfg.highlight_rate)

        player_id = None
        if players and template.related_attributes and rng.chance(cfg.player_bind_chance):
            player_id = rng.pick(players).player_id

        points.append(
            DataPoint(
                point_id=_point_id(phase_index, index, template.label),
                label=template.label,
                value=template.value(rng),
                category=template.category,
                is_highlighted=highlighted,
                player_id=player_id,
                related_attributes=template.related_attributes,
            )
        )
    return points


def populate_analysis_phases(
    session: ObservationSession,
    rng: SeededRandom,
    debugger: Optional[SessionDebugger] = None,
) -> ObservationSession:
    """Fill every phase of an analysis session with data points.

    Sessions that are not in ``setup``, not in analysis mode or already
    populated are returned unchanged. Analysis happens away from a venue,
    so no atmosphere is attached.

    Parameters
    ----------
    session : ObservationSession
        Session skeleton.
    rng : SeededRandom
        Random source.
    debugger : SessionDebugger | None, optional
        Receives one record per phase when provided.

    Returns
    -------
    ObservationSession
        Session with data points on every phase, still in ``setup``.
    """
    if session.state != "setup" or session.mode != "analysis" or is_populated(session):
        return session

    phases = []
    for phase in session.phases:
        points = generate_data_points(rng, session.activity_type, phase.index, session.players)
        description = get_analysis_phase_description(session.activity_type, phase.index, rng)
        if debugger:
            highlighted = sum(1 for point in points if point.is_highlighted)
            debugger.log_session_event(
                session.session_id,
                f"phase {phase.index}: {len(points)} data points, {highlighted} highlighted",
            )
        phases.append(replace(phase, description=description, data_points=tuple(points)))
    return replace(session, phases=tuple(phases))
