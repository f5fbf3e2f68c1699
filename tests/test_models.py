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
"""Tests for the player, scout and session models."""

from dataclasses import replace

import pytest

from scoutlens.models.match import TacticalStyle
from scoutlens.models.player import (
    HIDDEN_ATTRIBUTES,
    NEUTRAL_FIT,
    POSITIONS,
    VISIBLE_ATTRIBUTES,
    HiddenAttributes,
    PlayerAttributes,
)
from scoutlens.models.scout import Contact, ScoutProfile
from scoutlens.models.session import (
    FocusTokenState,
    Hypothesis,
    ObservationSession,
    PlayerMoment,
    SessionPhase,
    SessionPlayer,
)


class TestPlayerAttributes:
    """Tests for the rating containers."""

    def test_attribute_lists(self) -> None:
        """Visible and hidden attributes never overlap."""
        assert len(VISIBLE_ATTRIBUTES) == 26
        assert len(HIDDEN_ATTRIBUTES) == 4
        assert not set(VISIBLE_ATTRIBUTES) & set(HIDDEN_ATTRIBUTES)
        assert len(POSITIONS) == 10

    def test_ratings_must_be_on_scale(self) -> None:
        """Ratings outside 1-20 are rejected."""
        ratings = {name: 10 for name in VISIBLE_ATTRIBUTES}
        PlayerAttributes(**ratings)
        with pytest.raises(ValueError, match="pace"):
            PlayerAttributes(**{**ratings, "pace": 21})
        with pytest.raises(ValueError):
            HiddenAttributes(consistency=0)

    def test_hidden_defaults(self) -> None:
        """Hidden ratings default to the middle of the scale."""
        hidden = HiddenAttributes()
        assert hidden.professionalism == 10


class TestPlayerRecord:
    """Tests for the ground-truth player."""

    def test_ability_validation(self, make_player) -> None:
        """Abilities live on the 1-200 scale and values are non-negative."""
        with pytest.raises(ValueError, match="potential_ability"):
            make_player(potential_ability=201)
        with pytest.raises(ValueError, match="current_ability"):
            make_player(current_ability=0)
        with pytest.raises(ValueError, match="market_value"):
            make_player(market_value=-1.0)

    def test_get_attribute(self, make_player) -> None:
        """Visible and hidden ratings share one lookup."""
        player = make_player(vision=17, consistency=4)
        assert player.get_attribute("vision") == 17
        assert player.get_attribute("consistency") == 4
        with pytest.raises(ValueError, match="Unknown attribute"):
            player.get_attribute("charisma")

    def test_visible_ratings(self, make_player) -> None:
        """Only observable ratings are listed."""
        ratings = make_player(pace=15).visible_ratings()
        assert list(ratings) == list(VISIBLE_ATTRIBUTES)
        assert ratings["pace"] == 15

    def test_best_visible_attribute(self, make_player) -> None:
        """Highest rating wins and ties go to the first listed attribute."""
        assert make_player().best_visible_attribute() == ("first_touch", 10)
        assert make_player(pace=16, vision=16).best_visible_attribute() == ("pace", 16)

    def test_position_fit(self, make_player) -> None:
        """Fit is the weighted sum against the maximum on a 0-100 scale."""
        assert make_player().get_position_fit("CM") == 50
        assert make_player(finishing=18).get_position_fit("ST") == 60
        assert make_player(rating=20).get_position_fit("GK") == 100
        assert make_player().get_position_fit("SW") == NEUTRAL_FIT

    def test_position_fits(self, make_player) -> None:
        """Every position is graded unless a subset is given."""
        player = make_player()
        assert set(player.get_position_fits()) == set(POSITIONS)
        assert player.get_position_fits(["GK", "ST"]) == {"GK": 50, "ST": 50}


class TestScout:
    """Tests for the scout profile and contacts."""

    def test_defaults(self, scout) -> None:
        """A new scout is rested and unspecialised."""
        assert scout.specialization is None
        assert scout.intuition == 10
        assert scout.fatigue == 0
        assert not scout.has_perk("deep_focus")

    def test_validation(self) -> None:
        """Specialization and ratings are checked on creation."""
        with pytest.raises(ValueError, match="Known specializations"):
            ScoutProfile(scout_id="s", name="X", specialization="goalkeeping")
        with pytest.raises(ValueError):
            ScoutProfile(scout_id="s", name="X", intuition=0)
        with pytest.raises(ValueError):
            ScoutProfile(scout_id="s", name="X", fatigue=-1)

    def test_has_perk(self, scout) -> None:
        """Unlocked perks are queryable."""
        veteran = replace(scout, unlocked_perks=("deep_focus", "eureka_mastery"))
        assert veteran.has_perk("eureka_mastery")

    def test_contact_reliability(self) -> None:
        """Contact reliability must be a probability."""
        assert Contact("c1", "Ana", "Harbour FC").reliability == 0.5
        with pytest.raises(ValueError):
            Contact("c2", "Ben", "Harbour FC", reliability=1.5)


class TestSessionModels:
    """Tests for session containers."""

    def test_all_moments_and_find_player(self) -> None:
        """Moments flatten in phase order and players are found by id."""
        moments = [
            PlayerMoment(f"m{i}", "p1", "physical_test", 5, ("pace",), "Sprint.", "Ran.", False, False)
            for i in range(3)
        ]
        session = ObservationSession(
            session_id="s",
            mode="full_observation",
            activity_type="school_match",
            specialization=None,
            state="setup",
            phases=(SessionPhase(0, 0, moments=tuple(moments[:2])), SessionPhase(1, 10, moments=(moments[2],))),
            focus_tokens=FocusTokenState(available=3, total=3),
            players=(SessionPlayer("p1", "Player p1", "ST"),),
            started_at_week=1,
            started_at_season=1,
        )
        assert [m.moment_id for m in session.all_moments()] == ["m0", "m1", "m2"]
        assert session.find_player("p1").position == "ST"
        assert session.find_player("p9") is None

    def test_hypothesis_resolution(self) -> None:
        """Only confirmed or debunked hypotheses are resolved."""
        hypothesis = Hypothesis("h1", "p1", "Struggles under pressure", "mental", created_at_week=3)
        assert not hypothesis.is_resolved
        assert replace(hypothesis, state="debunked").is_resolved
        assert not replace(hypothesis, state="supported").is_resolved

    def test_tactical_style_defaults(self) -> None:
        """Styles default to mid pressing without a custom distribution."""
        style = TacticalStyle("balanced")
        assert style.pressing_intensity == 10
        assert style.event_distribution is None
