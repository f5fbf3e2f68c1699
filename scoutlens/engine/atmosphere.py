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
"""Venue atmosphere profiles and the transient events that disturb them.

An atmosphere is created once per session. Weather is drawn first and the
venue profile second; venue description variants and the scouting mission
focus set are the only other draws. Per phase, :func:`generate_atmosphere_event`
rolls a flat chance and then a weighted template pick whose weights depend on
the atmosphere, the phase position and the venue family.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from scoutlens.engine.config import ENGINE_CONFIG
from scoutlens.engine.rng import SeededRandom, clamp
from scoutlens.models.session import AtmosphereEvent, VenueAtmosphere

WEATHER_CONDITIONS: Tuple[str, ...] = ("clear", "overcast", "light_rain", "heavy_rain", "cold", "hot")
RAIN_WEATHER = frozenset({"light_rain", "heavy_rain"})

YOUTH_VENUES = frozenset(
    {"school_match", "grassroots_tournament", "street_football", "academy_trial_day", "youth_festival"}
)
MATCH_VENUES = frozenset({"attend_match", "reserve_match", "trial_match", "scouting_mission"})

NEUTRAL_DESCRIPTION = "Standard observation conditions with no notable atmospheric factors."


@dataclass(frozen=True, slots=True)
class VenueProfile:
    """Fixed observation character of a venue category.

    Parameters
    ----------
    chaos_level : float
        Ambient unpredictability in ``[0, 1]``.
    amplified : Tuple[str, ...]
        Attributes the venue brings out.
    dampened : Tuple[str, ...]
        Attributes the venue hides.
    crowd_intensity : float
        Crowd pressure in ``[0, 1]``.
    descriptions : Tuple[str, ...]
        Narrative variants; one is drawn per session.
    """

    chaos_level: float
    amplified: Tuple[str, ...]
    dampened: Tuple[str, ...]
    crowd_intensity: float
    descriptions: Tuple[str, ...]


VENUE_PROFILES: Dict[str, VenueProfile] = {
    "school_match": VenueProfile(
        0.2,
        ("positioning", "teamwork", "off_the_ball"),
        ("dribbling", "pace"),
        0.3,
        (
            "A structured school fixture. Coaches bark instructions and shape matters more than flair.",
            "Teachers on the touchline and a tidy pitch. The players stick closely to their positions.",
            "An organised school game where discipline is rewarded and risk is quietly discouraged.",
        ),
    ),
    "grassroots_tournament": VenueProfile(
        0.4,
        ("stamina", "work_rate", "composure"),
        (),
        0.5,
        (
            "A long tournament day on several pitches. Fitness and attitude get tested game after game.",
            "Back-to-back fixtures and a noisy crowd of parents. The schedule wears everybody down.",
            "Grassroots competition with plenty at stake for the teams and little rest in between.",
        ),
    ),
    "street_football": VenueProfile(
        0.7,
        ("dribbling", "first_touch", "agility", "balance"),
        ("positioning", "marking", "defensive_awareness"),
        0.2,
        (
            "Tight concrete court, no referee. Skill and improvisation decide everything here.",
            "A cage game under floodlights where structure means nothing and the ball never stops.",
            "Street football on an uneven surface. Close control is the only currency that counts.",
        ),
    ),
    "academy_trial_day": VenueProfile(
        0.1,
        ("off_the_ball", "pressing", "composure"),
        ("leadership",),
        0.4,
        (
            "Academy staff run controlled drills with clipboards out. Every movement is logged.",
            "A calm, methodical trial day. Players try hard not to make mistakes in front of the coaches.",
            "Structured trial sessions with little room for personality and a lot of room for detail.",
        ),
    ),
    "youth_festival": VenueProfile(
        0.3,
        ("composure", "anticipation", "big_game_temperament"),
        (),
        0.7,
        (
            "An international youth festival. Big crowds and visiting scouts raise every stake.",
            "Flags, families and a packed schedule. These young players have never felt pressure like it.",
            "A showcase tournament where reputations can be made in a single afternoon.",
        ),
    ),
    "reserve_match": VenueProfile(
        0.2,
        ("stamina", "work_rate"),
        (),
        0.2,
        (
            "A quiet reserve fixture in a near-empty ground. Effort is easy to see without the noise.",
            "Fringe players and youngsters compete for a first-team chance in front of a handful of staff.",
            "A reserve game with little atmosphere, where the players set their own intensity.",
        ),
    ),
    "training_visit": VenueProfile(
        0.1,
        ("first_touch", "passing", "off_the_ball", "pressing", "vision"),
        ("composure",),
        0.1,
        (
            "A closed training session. Technique and habits are on show without matchday adrenaline.",
            "Rondos and positional drills. The repetition exposes every player's technical base.",
            "An ordinary training day. Nobody is performing for an audience, which is exactly the point.",
        ),
    ),
    "trial_match": VenueProfile(
        0.3,
        ("composure", "big_game_temperament"),
        (),
        0.5,
        (
            "A trial match with contracts on the line. Nerves show in every heavy touch.",
            "Triallists playing for their futures while the decision makers watch from the stand.",
            "High stakes, unfamiliar team-mates and a short window to impress.",
        ),
    ),
}

ATTEND_MATCH_PROFILE = VenueProfile(0.3, (), (), 0.8, ())
ATTEND_MATCH_DESCRIPTIONS: Dict[str, str] = {
    "heavy_rain": "A professional fixture in driving rain. The conditions turn it into an unplanned stress test.",
    "light_rain": "A senior match under drizzle. A slick surface keeps every touch honest.",
}
ATTEND_MATCH_DEFAULT_DESCRIPTION = "A professional fixture with packed stands and the best observable conditions."

SCOUTING_MISSION_PROFILE = VenueProfile(0.4, (), (), 0.6, ())
SCOUTING_MISSION_FOCUS_SETS: Tuple[Tuple[str, ...], ...] = (
    ("anticipation", "vision", "off_the_ball"),
    ("stamina", "work_rate", "composure"),
    ("dribbling", "agility", "first_touch"),
    ("leadership", "big_game_temperament", "professionalism"),
)
SCOUTING_MISSION_DESCRIPTION = (
    "A wide-ranging mission across unfamiliar venues. Conditions vary and reward the attentive eye."
)


@dataclass(frozen=True, slots=True)
class EventTemplate:
    """Blueprint for an atmosphere event.

    Parameters
    ----------
    template_id : str
        Stable identifier; the event id appends the phase index.
    description : str
        Narrative shown to the scout.
    effect : str
        Effect kind.
    attributes : Tuple[str, ...]
        Attributes touched by the effect.
    noise_delta : float
        Contribution to the session noise multiplier.
    """

    template_id: str
    description: str
    effect: str
    attributes: Tuple[str, ...]
    noise_delta: float


EVENT_TEMPLATES: Tuple[EventTemplate, ...] = (
    EventTemplate("rain_starts", "Rain starts to fall and the surface quickens.", "amplify", ("balance", "agility"), 0.1),
    EventTemplate(
        "crowd_erupts",
        "The crowd erupts after a contested decision and the tension spikes.",
        "amplify",
        ("composure", "big_game_temperament"),
        0.15,
    ),
    EventTemplate(
        "lopsided_score",
        "The game turns one-sided. How the trailing players react says a lot about them.",
        "reveal",
        ("work_rate", "leadership", "composure"),
        0.05,
    ),
    EventTemplate(
        "parent_interference",
        "A parent bellows instructions from the sideline and nearby players lose their thread.",
        "dampen",
        ("composure", "decision_making"),
        0.1,
    ),
    EventTemplate(
        "waterlogged_pitch",
        "One flank becomes waterlogged; every run down that side is a physical test.",
        "amplify",
        ("strength", "stamina", "pace"),
        0.1,
    ),
    EventTemplate(
        "altercation",
        "Tempers flare between two players. The reactions around them are telling.",
        "reveal",
        ("big_game_temperament", "composure", "leadership"),
        0.2,
    ),
    EventTemplate(
        "late_talent",
        "A late arrival joins in and immediately draws attention.",
        "reveal",
        ("anticipation", "positioning", "work_rate"),
        0.05,
    ),
    EventTemplate(
        "formation_change",
        "The coach switches shape and demands an instant tactical adjustment.",
        "amplify",
        ("off_the_ball", "pressing", "defensive_awareness", "vision"),
        0.05,
    ),
    EventTemplate(
        "injury_stoppage",
        "A long stoppage for an injury breaks everyone's concentration.",
        "distraction",
        (),
        0.1,
    ),
    EventTemplate(
        "heavy_foul",
        "A heavy challenge sparks a long argument and tests every temperament.",
        "reveal",
        ("big_game_temperament", "composure"),
        0.15,
    ),
    EventTemplate(
        "brilliant_goal",
        "A moment of real brilliance lifts the game and players respond in different ways.",
        "reveal",
        ("work_rate", "anticipation", "big_game_temperament"),
        -0.05,
    ),
    EventTemplate(
        "wind_gusts",
        "Strong gusts sweep across the pitch, punishing long balls and loose touches.",
        "dampen",
        ("crossing", "passing", "first_touch"),
        0.1,
    ),
    EventTemplate(
        "referee_chaos",
        "A run of baffling refereeing decisions leaves the players frustrated.",
        "amplify",
        ("composure", "professionalism", "leadership"),
        0.15,
    ),
    EventTemplate(
        "crowded_touchline",
        "Scouts and coaches crowd the touchline and every action carries extra weight.",
        "amplify",
        ("big_game_temperament", "composure", "consistency"),
        0.1,
    ),
    EventTemplate(
        "fast_start",
        "A breakneck opening exposes physical limits early.",
        "amplify",
        ("stamina", "pace", "work_rate"),
        0.05,
    ),
)


def create_venue_atmosphere(venue_type: str, rng: SeededRandom) -> VenueAtmosphere:
    """Build the atmosphere profile for a session at ``venue_type``.

    Parameters
    ----------
    venue_type : str
        Venue category; unknown categories get a neutral profile.
    rng : SeededRandom
        Random source.

    Returns
    -------
    VenueAtmosphere
        Profile with no events yet.
    """
    weather = rng.pick(WEATHER_CONDITIONS)

    if venue_type == "attend_match":
        amplified: Tuple[str, ...] = ("balance", "agility") if weather in RAIN_WEATHER else ()
        profile = replace(ATTEND_MATCH_PROFILE, amplified=amplified)
        description = ATTEND_MATCH_DESCRIPTIONS.get(weather, ATTEND_MATCH_DEFAULT_DESCRIPTION)
    elif venue_type == "scouting_mission":
        profile = replace(SCOUTING_MISSION_PROFILE, amplified=rng.pick(SCOUTING_MISSION_FOCUS_SETS))
        description = SCOUTING_MISSION_DESCRIPTION
    elif venue_type in VENUE_PROFILES:
        profile = VENUE_PROFILES[venue_type]
        description = rng.pick(profile.descriptions)
    else:
        profile = VenueProfile(0.3, (), (), 0.5, ())
        description = NEUTRAL_DESCRIPTION

    return VenueAtmosphere(
        venue_type=venue_type,
        chaos_level=profile.chaos_level,
        amplified_attributes=profile.amplified,
        dampened_attributes=profile.dampened,
        weather=weather,
        crowd_intensity=profile.crowd_intensity,
        description=description,
    )


def _event_weight(template_id: str, atmosphere: VenueAtmosphere, phase_index: int, progress: float) -> float:
    """Return the eligibility weight of one template in the current context.

    Parameters
    ----------
    template_id : str
        Template identifier.
    atmosphere : VenueAtmosphere
        Session atmosphere.
    phase_index : int
        Zero-based phase index.
    progress : float
        Position of the phase within the session in ``[0, 1]``.

    Returns
    -------
    float
        Weight; zero excludes the template.
    """
    venue = atmosphere.venue_type
    weather = atmosphere.weather
    is_youth = venue in YOUTH_VENUES
    is_match = venue in MATCH_VENUES

    if template_id == "rain_starts":
        return 3.0 if weather in ("overcast", "light_rain") else 0.5
    if template_id == "crowd_erupts":
        return 3.0 if atmosphere.crowd_intensity >= 0.5 else 0.5
    if template_id == "lopsided_score":
        if not (is_match or is_youth):
            return 0.0
        return 2.5 if progress >= 0.4 else 0.5
    if template_id == "parent_interference":
        return 3.0 if is_youth else 0.0
    if template_id == "waterlogged_pitch":
        return 2.5 if weather in RAIN_WEATHER else 0.0
    if template_id == "altercation":
        return 2.0 if atmosphere.chaos_level >= 0.4 else 0.5
    if template_id == "late_talent":
        return 2.0 if venue in ("youth_festival", "academy_trial_day", "grassroots_tournament") else 0.3
    if template_id == "formation_change":
        return 2.5 if venue in ("training_visit", "academy_trial_day", "trial_match") else 0.5
    if template_id == "injury_stoppage":
        return 1.5 if atmosphere.chaos_level >= 0.5 else 1.0
    if template_id == "heavy_foul":
        return 2.0 if is_match or venue == "grassroots_tournament" else 0.5
    if template_id == "brilliant_goal":
        return 1.5 if is_match or is_youth else 0.0
    if template_id == "wind_gusts":
        return 2.0 if weather in ("cold", "overcast") else 0.5
    if template_id == "referee_chaos":
        if is_match:
            return 2.0
        return 1.0 if is_youth else 0.0
    if template_id == "crowded_touchline":
        crowded = atmosphere.crowd_intensity >= 0.6 or venue in ("academy_trial_day", "trial_match")
        return 2.0 if crowded else 0.5
    if template_id == "fast_start":
        return 2.5 if phase_index <= 1 else 0.0
    return 1.0


def generate_atmosphere_event(
    rng: SeededRandom,
    atmosphere: VenueAtmosphere,
    phase_index: int,
    total_phases: int,
) -> Optional[AtmosphereEvent]:
    """Possibly inject a transient event into a phase.

    Parameters
    ----------
    rng : SeededRandom
        Random source.
    atmosphere : VenueAtmosphere
        Session atmosphere.
    phase_index : int
        Zero-based phase index.
    total_phases : int
        Phases in the session.

    Returns
    -------
    AtmosphereEvent | None
        The event, or ``None`` when the flat chance roll fails.
    """
    if not rng.chance(ENGINE_CONFIG.atmosphere.event_chance):
        return None

    progress = phase_index / (total_phases - 1) if total_phases > 1 else 0.0
    candidates = []
    for template in EVENT_TEMPLATES:
        weight = _event_weight(template.template_id, atmosphere, phase_index, progress)
        if weight > 0:
            candidates.append((template, weight))
    if not candidates:
        return None

    chosen = rng.pick_weighted(candidates)
    return AtmosphereEvent(
        event_id=f"{chosen.template_id}_{phase_index}",
        description=chosen.description,
        effect=chosen.effect,
        affected_attributes=chosen.attributes or None,
        noise_delta=chosen.noise_delta,
    )


def append_atmosphere_event(atmosphere: VenueAtmosphere, event: AtmosphereEvent) -> VenueAtmosphere:
    """Return a copy of ``atmosphere`` with ``event`` appended.

    Parameters
    ----------
    atmosphere : VenueAtmosphere
        Current atmosphere.
    event : AtmosphereEvent
        Event to record.

    Returns
    -------
    VenueAtmosphere
        Atmosphere including the new event.
    """
    return replace(atmosphere, events=atmosphere.events + (event,))


def atmosphere_noise_multiplier(atmosphere: VenueAtmosphere) -> float:
    """Fold the chaos level and every recorded event into one noise factor.

    Parameters
    ----------
    atmosphere : VenueAtmosphere
        Atmosphere including the events seen so far.

    Returns
    -------
    float
        Multiplier clamped to the configured noise bounds.
    """
    cfg = ENGINE_CONFIG.atmosphere
    total = 1.0 + atmosphere.chaos_level * cfg.chaos_noise_weight
    total += sum(event.noise_delta for event in atmosphere.events)
    return clamp(total, cfg.noise_min, cfg.noise_max)


def is_amplified(atmosphere: VenueAtmosphere, attribute: str) -> bool:
    """Return whether the venue amplifies ``attribute``.

    Parameters
    ----------
    atmosphere : VenueAtmosphere
        Session atmosphere.
    attribute : str
        Attribute name.

    Returns
    -------
    bool
        ``True`` when the attribute is amplified.
    """
    return attribute in atmosphere.amplified_attributes


def is_dampened(atmosphere: VenueAtmosphere, attribute: str) -> bool:
    """Return whether the venue dampens ``attribute``.

    Parameters
    ----------
    atmosphere : VenueAtmosphere
        Session atmosphere.
    attribute : str
        Attribute name.

    Returns
    -------
    bool
        ``True`` when the attribute is dampened.
    """
    return attribute in atmosphere.dampened_attributes


def get_amplification_multiplier(atmosphere: VenueAtmosphere, attribute: str) -> float:
    """Return the observation multiplier the venue applies to ``attribute``.

    Parameters
    ----------
    atmosphere : VenueAtmosphere
        Session atmosphere.
    attribute : str
        Attribute name.

    Returns
    -------
    float
        1.3 for amplified, 0.7 for dampened, otherwise 1.0.
    """
    cfg = ENGINE_CONFIG.atmosphere
    if is_amplified(atmosphere, attribute):
        return cfg.amplified_multiplier
    if is_dampened(atmosphere, attribute):
        return cfg.dampened_multiplier
    return 1.0
