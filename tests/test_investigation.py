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
"""Tests for investigation dialogue population."""

import pytest

from scoutlens.engine.investigation import (
    ATTRIBUTE_POOLS,
    BOLD_BACKFIRE_NARRATIVES,
    DIALOGUE_TEMPLATES,
    SAFE_NARRATIVES,
    generate_dialogue_consequence,
    populate_investigation_phases,
)
from scoutlens.engine.rng import SeededRandom
from scoutlens.engine.session import create_session, start_session
from scoutlens.models.session import SessionSetup
from scoutlens.utils.debug import SessionDebugger


@pytest.fixture
def pool(make_player):
    return tuple(make_player(f"p{i}") for i in range(1, 4))


def _session(pool, activity_type: str = "follow_up_session", seed: str = "talk"):
    setup = SessionSetup(activity_type=activity_type, seed=seed, week=3, season=1, player_pool=pool)
    return create_session(setup, SeededRandom(seed))


class TestDialogueConsequence:
    """Outcome rolls by risk level."""

    def test_safe_low_roll_hints_with_low_confidence(self, fixed_rng) -> None:
        outcome = generate_dialogue_consequence(fixed_rng(0.0), "safe", "follow_up_session", "p1")
        assert outcome.narrative == SAFE_NARRATIVES[0]
        assert outcome.relationship_delta == 1
        assert outcome.insight_bonus == 1
        assert outcome.reveal.player_id == "p1"
        assert outcome.reveal.attribute == ATTRIBUTE_POOLS["follow_up_session"][0]
        assert outcome.reveal.confidence == pytest.approx(0.15)

    def test_safe_high_roll_never_hurts(self, fixed_rng) -> None:
        outcome = generate_dialogue_consequence(fixed_rng(0.99), "safe", "follow_up_session", "p1")
        assert outcome.reveal is None
        assert outcome.relationship_delta == 2
        assert outcome.insight_bonus == 3

    def test_moderate_backfire(self, fixed_rng) -> None:
        outcome = generate_dialogue_consequence(fixed_rng(0.0), "moderate", "follow_up_session", "p1")
        assert outcome.relationship_delta == -1
        assert outcome.insight_bonus == 0
        assert outcome.reveal is None

    def test_moderate_success_reveals(self, fixed_rng) -> None:
        outcome = generate_dialogue_consequence(fixed_rng(0.5), "moderate", "parent_coach_meeting", "p2")
        assert outcome.reveal.attribute in ATTRIBUTE_POOLS["parent_coach_meeting"]
        assert 0.35 <= outcome.reveal.confidence <= 0.6
        assert 3 <= outcome.insight_bonus <= 6
        assert 0 <= outcome.relationship_delta <= 1

    def test_bold_backfire_damages_relationship(self, fixed_rng) -> None:
        outcome = generate_dialogue_consequence(fixed_rng(0.0), "bold", "network_meeting", "p1")
        assert outcome.narrative == BOLD_BACKFIRE_NARRATIVES[0]
        assert outcome.relationship_delta == -3
        assert outcome.insight_bonus == 0
        assert outcome.reveal is None

    def test_bold_success_reveals_with_high_confidence(self, fixed_rng) -> None:
        outcome = generate_dialogue_consequence(fixed_rng(0.5), "bold", "contract_negotiation", "p1")
        assert outcome.reveal.attribute in ATTRIBUTE_POOLS["contract_negotiation"]
        assert 0.6 <= outcome.reveal.confidence <= 0.9
        assert 2 <= outcome.relationship_delta <= 4
        assert 6 <= outcome.insight_bonus <= 12

    def test_unknown_activity_uses_follow_up_pool(self, fixed_rng) -> None:
        outcome = generate_dialogue_consequence(fixed_rng(0.5), "bold", "mystery", "p1")
        assert outcome.reveal.attribute in ATTRIBUTE_POOLS["follow_up_session"]

    def test_unknown_risk_level(self) -> None:
        with pytest.raises(ValueError, match="Unknown risk level"):
            generate_dialogue_consequence(SeededRandom("x"), "reckless", "follow_up_session", "p1")


class TestPopulateInvestigation:
    """Dialogue nodes on investigation sessions."""

    def test_one_node_per_phase(self, pool) -> None:
        populated = populate_investigation_phases(_session(pool), SeededRandom("fill"))
        assert populated.state == "setup"
        assert populated.venue_atmosphere is None
        node_ids = set()
        for phase in populated.phases:
            (node,) = phase.dialogue_nodes
            node_ids.add(node.node_id)
            assert phase.description == node.text
            assert "{" not in node.text
            assert [option.risk_level for option in node.options] == ["safe", "moderate", "bold"]
            for option in node.options:
                assert "{" not in option.text
                if option.outcome.reveal is not None:
                    assert option.outcome.reveal.player_id == "p1"
        assert len(node_ids) == len(populated.phases)

    def test_second_player_is_the_other_party(self, pool) -> None:
        populated = populate_investigation_phases(_session(pool, "parent_coach_meeting"), SeededRandom("names"))
        assert all("Player p2" in phase.description for phase in populated.phases)

    def test_default_speaker_without_second_player(self, pool) -> None:
        populated = populate_investigation_phases(_session(pool[:1], "parent_coach_meeting"), SeededRandom("solo"))
        assert all("the parent" in phase.description for phase in populated.phases)

    def test_long_session_reuses_last_slot(self, pool) -> None:
        session = _session(pool, "contract_negotiation", seed="long")
        populated = populate_investigation_phases(session, SeededRandom("long"))
        bank = DIALOGUE_TEMPLATES["contract_negotiation"]
        assert all(phase.dialogue_nodes for phase in populated.phases)
        if len(session.phases) > len(bank):
            last_texts = {t.text.format(player="Player p1", speaker="Player p2") for t in bank[-1]}
            assert populated.phases[-1].description in last_texts

    def test_deterministic(self, pool) -> None:
        first = populate_investigation_phases(_session(pool), SeededRandom("same"))
        second = populate_investigation_phases(_session(pool), SeededRandom("same"))
        assert first == second

    def test_guards(self, pool) -> None:
        rng = SeededRandom("guards")
        match = _session(pool, "school_match")
        assert populate_investigation_phases(match, rng) is match
        active = start_session(_session(pool))
        assert populate_investigation_phases(active, rng) is active
        empty = _session(())
        assert populate_investigation_phases(empty, rng) is empty
        once = populate_investigation_phases(_session(pool), rng)
        assert populate_investigation_phases(once, rng) is once

    def test_debugger_records_each_node(self, pool) -> None:
        debugger = SessionDebugger(output_dir=None)
        populated = populate_investigation_phases(_session(pool), SeededRandom("debug"), debugger)
        logged = [line for line in debugger.get_recent_events(limit=50) if "speaks" in line]
        assert len(logged) == len(populated.phases)
