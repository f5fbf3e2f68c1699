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
"""Commentary template lookup for live match events.

Template choice is keyed on the event minute rather than the random source,
so commentary never shifts the random stream of the phase generator.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

COMMENTARY_TEMPLATES: Dict[str, Tuple[str, ...]] = {
    "goal": (
        "{minute}' GOAL! {player} finishes it off.",
        "{minute}' {player} scores, and the bench is on its feet.",
        "{minute}' {player} tucks it away with the minimum of fuss.",
    ),
    "assist": (
        "{minute}' {player} lays it on a plate for {secondary}.",
        "{minute}' Lovely weight of pass from {player}.",
    ),
    "shot": (
        "{minute}' {player} lets fly from distance.",
        "{minute}' {player} works the goalkeeper with a low drive.",
        "{minute}' {player} snatches at the chance and it drifts wide.",
    ),
    "pass": (
        "{minute}' {player} keeps it moving with a tidy pass.",
        "{minute}' {player} switches play to the far side.",
        "{minute}' {player} finds {secondary} between the lines.",
    ),
    "dribble": (
        "{minute}' {player} drops a shoulder and glides past the defender.",
        "{minute}' {player} carries the ball through midfield.",
    ),
    "tackle": (
        "{minute}' Crunching challenge from {player}.",
        "{minute}' {player} times the tackle perfectly.",
        "{minute}' {player} steps in to win it back.",
    ),
    "header": (
        "{minute}' {player} rises to meet it.",
        "{minute}' {player} gets a head on the delivery.",
    ),
    "save": (
        "{minute}' Big save from {player}!",
        "{minute}' {player} gets down well to hold it.",
    ),
    "foul": (
        "{minute}' {player} goes through the back and the whistle goes.",
        "{minute}' Cynical from {player}, who stops the break.",
    ),
    "cross": (
        "{minute}' {player} whips one into the box.",
        "{minute}' {player} looks up and curls in a cross.",
    ),
    "sprint": (
        "{minute}' {player} burns down the flank.",
        "{minute}' {player} wins the foot race.",
    ),
    "positioning": (
        "{minute}' {player} is in exactly the right place.",
        "{minute}' Clever movement from {player} closes the gap.",
    ),
    "error": (
        "{minute}' {player} gives it away cheaply.",
        "{minute}' A moment to forget for {player}.",
    ),
    "leadership": (
        "{minute}' {player} organises the back line.",
        "{minute}' {player} has a word with {secondary}, and the shape tightens.",
    ),
    "aerial_duel": (
        "{minute}' {player} wins the battle in the air.",
        "{minute}' {player} outjumps {secondary}.",
    ),
    "interception": (
        "{minute}' {player} reads it and steps in front.",
        "{minute}' {player} cuts out the pass.",
    ),
    "through_ball": (
        "{minute}' {player} threads it through.",
        "{minute}' Defence-splitting ball from {player}.",
    ),
    "hold_up": (
        "{minute}' {player} holds it up and brings others into play.",
        "{minute}' {player} shields the ball with back to goal.",
    ),
    "injury": (
        "{minute}' {player} is down and needs treatment.",
        "{minute}' Concern for {player}, who is signalling to the bench.",
    ),
    "substitution": (
        "{minute}' {player} cannot continue and is replaced.",
        "{minute}' {player} limps off to a round of applause.",
    ),
    "card": (
        "{minute}' {player} goes into the book.",
        "{minute}' The referee reaches for a card for {player}.",
    ),
}

FALLBACK_TEMPLATE = "{minute}' {player} is involved."
TARGET_SUFFIX = " (scouting target)"


def generate_commentary(
    event_type: str,
    minute: int,
    player_name: str,
    secondary_name: Optional[str] = None,
    is_scouting_target: bool = False,
) -> str:
    """Render a commentary line for an event.

    Parameters
    ----------
    event_type : str
        Event category.
    minute : int
        Match minute; selects the template variant.
    player_name : str
        Name of the player credited with the event.
    secondary_name : str | None
        Name of another involved player.
    is_scouting_target : bool
        Whether the scout came to watch this player.

    Returns
    -------
    str
        Commentary text.
    """
    templates = COMMENTARY_TEMPLATES.get(event_type, (FALLBACK_TEMPLATE,))
    if secondary_name is None:
        usable = tuple(t for t in templates if "{secondary}" not in t) or (FALLBACK_TEMPLATE,)
    else:
        usable = templates
    template = usable[minute % len(usable)]
    player = player_name + TARGET_SUFFIX if is_scouting_target else player_name
    return template.format(minute=minute, player=player, secondary=secondary_name or "")
