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
"""Narrative lines for Insight actions, voiced by specialization."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from scoutlens.engine.rng import SeededRandom

UNIVERSAL_VOICE = "universal"

SPECIALIZATION_FLAVOUR: Dict[str, str] = {
    "youth": "Something in your gut says:",
    "first_team": "The data crystallises:",
    "regional": "Years in this territory tell you:",
    "data": "The algorithm confirms:",
}

INSIGHT_NARRATIVES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "clarity_of_vision": {
        "universal": (
            "The noise falls away and every touch is suddenly clear.",
            "You stop second-guessing. What you see is exactly what is there.",
        ),
        "youth": (
            "the raw talent snaps into focus and the guessing stops.",
            "this kid is exactly what your eye told you.",
        ),
        "first_team": (
            "the true attribute values are unambiguous.",
            "the assessment hardens into certainty with no margin for misreading.",
        ),
        "regional": (
            "you have seen this type on this ground a hundred times, and you see this one clearly.",
            "local familiarity strips the veil away.",
        ),
        "data": (
            "perceptual noise collapses to zero. Pure signal.",
            "every attribute resolves to ground truth.",
        ),
    },
    "hidden_nature": {
        "universal": (
            "The mask slips and you glimpse the player's true character.",
            "Hidden for a reason, and now it is yours to know.",
        ),
        "youth": (
            "young players hide who they are, but tonight this one cannot.",
            "under the potential there is a character most would miss.",
        ),
        "first_team": (
            "the hidden architecture of this mentality is exposed.",
            "professionals learn to hide; your read strips that defence away.",
        ),
        "regional": (
            "people around here talk, and your suspicions are now facts.",
            "your network whispered it first and your instinct confirms it.",
        ),
        "data": (
            "hidden attributes leave footprints in the numbers.",
            "variance analysis flags the anomaly and the truth emerges.",
        ),
    },
    "the_verdict": {
        "universal": (
            "You know exactly what to write and every word lands with authority.",
            "The report writes itself; the evidence is too clear to misstate.",
        ),
        "youth": (
            "this potential deserves the full weight of your judgement.",
            "you have seen enough, and the report becomes a statement of belief.",
        ),
        "first_team": (
            "the verdict is unambiguous and decision-ready.",
            "clear prose, clear evidence, clear conclusion.",
        ),
        "regional": (
            "local knowledge gives every line real texture.",
            "you write with the authority of someone who knows this ground.",
        ),
        "data": (
            "statistical rigour meets readable prose.",
            "the numbers back every sentence of the report.",
        ),
    },
    "second_look": {
        "universal": (
            "You almost missed them entirely. A second look confirms it.",
            "There was something there. You circle back and you were right.",
        ),
        "youth": (
            "the quiet one on the far side deserved more of your attention.",
            "a flicker in your memory sends you back to a player you passed over.",
        ),
        "first_team": (
            "the overlooked player earns a professional second read.",
            "you replay the session in your head and they were there, and good.",
        ),
        "regional": (
            "always watch the one everybody ignores; it pays off again.",
            "the unfocused player has a name around here.",
        ),
        "data": (
            "a secondary signature stands out on review.",
            "the peripheral data warrants a second analytical pass.",
        ),
    },
    "diamond_in_the_rough": {
        "universal": (
            "Somewhere out there is someone special, and you will find them.",
            "The best player here is not the one everybody is watching.",
        ),
        "youth": (
            "one of these kids is genuinely different.",
            "every youth game hides a diamond if you know how to look.",
        ),
        "first_team": (
            "not the headline act, but the one quietly outperforming everyone.",
            "one player registers far above the rest of the squad.",
        ),
        "regional": (
            "local talent often goes unnoticed, but not today.",
            "they play for nobody important, but the ceiling is enormous.",
        ),
        "data": (
            "every metric flags the same outlier.",
            "the highest ceiling on the pitch has just revealed itself.",
        ),
    },
    "generational_whisper": {
        "universal": (
            "You have seen talent before. You have never seen this.",
            "A certainty beyond evidence settles over you.",
        ),
        "youth": (
            "this kid is going to be something that rarely happens.",
            "you will not tell anyone yet, but you know.",
        ),
        "first_team": (
            "no hesitation and no caveats: elite talent.",
            "assessment complete and confidence absolute.",
        ),
        "regional": (
            "this territory has never produced anything like it.",
            "the rumours in the network were true.",
        ),
        "data": (
            "no comparable exists anywhere in the dataset.",
            "this player resets the baseline.",
        ),
    },
    "perfect_fit": {
        "universal": (
            "You picture them in the club's shirt and every role maps cleanly.",
            "The system and the player look built for each other.",
        ),
        "youth": (
            "you can see the player they will become inside this system.",
            "the profile maps to the club's needs almost uncannily.",
        ),
        "first_team": (
            "positional analysis complete across the board.",
            "system compatibility confirmed.",
        ),
        "regional": (
            "you have placed players here before and this one fits better than any.",
            "the cultural fit matches the tactical one.",
        ),
        "data": (
            "the positional fit model runs clean.",
            "every metric maps to a club requirement.",
        ),
    },
    "pressure_test": {
        "universal": (
            "You imagine the biggest moment possible and watch the response.",
            "Pressure has broken better players. Now you know about this one.",
        ),
        "youth": (
            "big games expose young players and this one's truth is clear.",
            "the scenario plays out in your head and the character emerges.",
        ),
        "first_team": (
            "the big-game response is projected with accuracy.",
            "the pressure response grade is in.",
        ),
        "regional": (
            "you know how players from here carry pressure.",
            "local derbies taught you the signs and you read them now.",
        ),
        "data": (
            "high-leverage performance data isolates the variable.",
            "temperament is quantified and locked.",
        ),
    },
    "network_pulse": {
        "universal": (
            "You make the calls and everybody picks up.",
            "The network lights up and every contact has something to say.",
        ),
        "youth": (
            "youth football runs on whispers and tonight every whisper reaches you.",
            "coaches, parents and teachers all talk at once.",
        ),
        "first_team": (
            "the intel flows without the usual friction.",
            "your reputation earns moments like this.",
        ),
        "regional": (
            "this is why you built the network.",
            "the whole region speaks and you listen.",
        ),
        "data": (
            "every node in the contact graph returns a clean output.",
            "response rate is total and the signal is strong.",
        ),
    },
    "territory_mastery": {
        "universal": (
            "You know this ground as well as your own home.",
            "Every hour spent here converges in one moment.",
        ),
        "youth": (
            "the fields and the coaches are part of you now.",
            "mastery arrives, here and now.",
        ),
        "first_team": (
            "this sub-region is no longer foreign ground.",
            "every future visit here benefits from today.",
        ),
        "regional": (
            "this was always your territory and now the map agrees.",
            "the local knowledge is bone-deep.",
        ),
        "data": (
            "the regional model is calibrated to elite precision.",
            "the noise floor in this territory drops for good.",
        ),
    },
    "algorithmic_epiphany": {
        "universal": (
            "The model runs clean and the query returns the truth.",
            "A moment of mathematical clarity.",
        ),
        "youth": (
            "the model sees the potential the eye misses.",
            "data and instinct agree completely.",
        ),
        "first_team": (
            "the query surface is free of noise.",
            "the model runs at full capacity.",
        ),
        "regional": (
            "regional data and local knowledge speak as one.",
            "presence on the ground sharpens the numbers.",
        ),
        "data": (
            "query accuracy is total for this cycle.",
            "this is what the system was built for.",
        ),
    },
    "market_blind_spot": {
        "universal": (
            "The market does not see what you see, and that is the opportunity.",
            "You have found the gap between price and quality.",
        ),
        "youth": (
            "young players are mispriced and the market has missed these ones.",
            "potential that nobody has priced in yet.",
        ),
        "first_team": (
            "the club can act before prices correct.",
            "the valuation gap is real and measurable.",
        ),
        "regional": (
            "outsiders always misprice this region.",
            "under the radar and under the market.",
        ),
        "data": (
            "the inefficiency model fires across every metric.",
            "move first, before the market corrects.",
        ),
    },
}


def select_narrative(action_id: str, specialization: Optional[str], rng: SeededRandom) -> str:
    """Pick a narrative line for ``action_id`` in the scout's voice.

    Specialised scouts get a fixed flavour prefix followed by one of their
    voice's lines; unspecialised scouts get a universal line on its own.

    Parameters
    ----------
    action_id : str
        Insight action identifier.
    specialization : str | None
        Scout specialization.
    rng : SeededRandom
        Random source for the line choice.

    Returns
    -------
    str
        Narrative sentence.
    """
    voices = INSIGHT_NARRATIVES[action_id]
    if specialization is None or specialization not in voices:
        return rng.pick(voices[UNIVERSAL_VOICE])
    return f"{SPECIALIZATION_FLAVOUR[specialization]} {rng.pick(voices[specialization])}"
