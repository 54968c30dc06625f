"""
Tests for the ability economy: charge, escalating cost and activation.
"""

import pytest

from jeopardy_match.core import activation_cost
from jeopardy_match.errors import Forbidden, InsufficientCharge, InsufficientScore, InvalidAction

from conftest import CATEGORIES, fill_board


@pytest.fixture
def armed_session(session, gm_id, contestant_ids):
    """Bob holds Double Down, Carol holds Shield; play has started."""
    bob_id, carol_id = contestant_ids
    session.assign_ability(gm_id, bob_id, "Double Down")
    session.assign_ability(gm_id, carol_id, "Shield")
    session.set_categories(gm_id, list(CATEGORIES))
    session.start_question_phase(gm_id)
    fill_board(session, gm_id, contestant_ids)
    session.start_play(gm_id)
    return session


def test_activation_cost_escalates():
    assert activation_cost(0) == 200
    assert activation_cost(1) == 250
    assert activation_cost(2) == 300
    assert activation_cost(3, base_cost=100, step=10) == 130


def test_charge_grows_and_clamps(armed_session, gm_id, contestant_ids):
    carol_id = contestant_ids[1]
    cells = armed_session.board.remaining_cells()

    # Five correct answers at 25 charge each cap at 100
    for row, column in cells[:5]:
        armed_session.select_cell(gm_id, row, column)
        armed_session.reveal_answer(gm_id)
        armed_session.resolve(gm_id, [carol_id])

    assert armed_session.get_participant(carol_id).ability_charge == 100


def test_self_activation_needs_full_charge(armed_session, contestant_ids, gm_id):
    bob_id = contestant_ids[0]
    armed_session.adjust_score(gm_id, bob_id, "set", 500)

    with pytest.raises(InsufficientCharge):
        armed_session.activate_ability(bob_id, bob_id)

    bob = armed_session.get_participant(bob_id)
    assert bob.score == 500
    assert bob.ability_uses == 0


def test_self_activation_with_full_charge(armed_session, contestant_ids, gm_id):
    bob_id = contestant_ids[0]
    bob = armed_session.get_participant(bob_id)
    armed_session.adjust_score(gm_id, bob_id, "set", 500)
    bob.ability_charge = 100

    result = armed_session.activate_ability(bob_id, bob_id)

    assert result.cost == 200
    assert result.score_after == 300
    assert bob.ability_charge == 0
    assert bob.ability_uses == 1
    assert bob.active_ability_name == "Double Down"


def test_contestant_cannot_activate_others(armed_session, contestant_ids, gm_id):
    bob_id, carol_id = contestant_ids
    armed_session.adjust_score(gm_id, carol_id, "set", 500)
    armed_session.get_participant(bob_id).ability_charge = 100

    with pytest.raises(Forbidden):
        armed_session.activate_ability(bob_id, carol_id)


def test_game_master_bypasses_charge(armed_session, gm_id, contestant_ids):
    carol_id = contestant_ids[1]
    armed_session.adjust_score(gm_id, carol_id, "set", 250)

    result = armed_session.activate_ability(gm_id, carol_id)

    assert result.cost == 200
    assert armed_session.get_participant(carol_id).score == 50


def test_insufficient_score_leaves_state_unchanged(armed_session, gm_id, contestant_ids):
    """Third activation costs 300; with 250 points it is refused."""
    carol_id = contestant_ids[1]
    carol = armed_session.get_participant(carol_id)
    carol.ability_uses = 2
    carol.ability_charge = 100
    armed_session.adjust_score(gm_id, carol_id, "set", 250)

    with pytest.raises(InsufficientScore) as exc_info:
        armed_session.activate_ability(carol_id, carol_id)

    assert exc_info.value.cost == 300
    assert (carol.score, carol.ability_charge, carol.ability_uses) == (250, 100, 2)
    assert carol.active_ability_name is None


def test_score_checked_before_charge(armed_session, contestant_ids):
    bob_id = contestant_ids[0]
    with pytest.raises(InsufficientScore):
        armed_session.activate_ability(bob_id, bob_id)


def test_activation_needs_an_ability(armed_session, gm_id):
    armed_session.adjust_score(gm_id, gm_id, "set", 500)
    with pytest.raises(InvalidAction):
        armed_session.activate_ability(gm_id, gm_id)


def test_activation_only_in_play(session, gm_id, contestant_ids):
    session.assign_ability(gm_id, contestant_ids[0], "Shield")
    with pytest.raises(InvalidAction):
        session.activate_ability(gm_id, contestant_ids[0])


def test_costs_escalate_per_participant(armed_session, gm_id, contestant_ids):
    """Each activation raises the next cost for that participant only."""
    bob_id, carol_id = contestant_ids
    bob = armed_session.get_participant(bob_id)
    armed_session.adjust_score(gm_id, bob_id, "set", 450)
    armed_session.adjust_score(gm_id, carol_id, "set", 450)

    first = armed_session.activate_ability(gm_id, bob_id)
    second = armed_session.activate_ability(gm_id, bob_id)
    other = armed_session.activate_ability(gm_id, carol_id)

    assert (first.cost, second.cost, other.cost) == (200, 250, 200)
    # Costs are taken without a floor; 450 - 200 - 250 lands exactly on zero
    assert bob.score == 0
    assert bob.ability_uses == 2
    assert armed_session.play.abilities.cost_for(bob) == 300


def test_active_marker_cleared_on_resolution(armed_session, gm_id, contestant_ids):
    bob_id, carol_id = contestant_ids
    armed_session.adjust_score(gm_id, bob_id, "set", 500)
    armed_session.activate_ability(gm_id, bob_id)
    assert armed_session.get_participant(bob_id).active_ability_name == "Double Down"

    armed_session.select_cell(gm_id, 0, 0)
    armed_session.reveal_answer(gm_id)
    # Still active while the question is being played
    assert armed_session.get_participant(bob_id).active_ability_name == "Double Down"

    armed_session.resolve(gm_id, [carol_id])
    assert armed_session.get_participant(bob_id).active_ability_name is None


def test_active_marker_cleared_on_skip(armed_session, gm_id, contestant_ids):
    carol_id = contestant_ids[1]
    armed_session.adjust_score(gm_id, carol_id, "set", 500)
    armed_session.activate_ability(gm_id, carol_id)

    armed_session.select_cell(gm_id, 0, 0)
    armed_session.skip(gm_id)

    assert armed_session.get_participant(carol_id).active_ability_name is None


def test_can_activate(armed_session, gm_id, contestant_ids):
    economy = armed_session.play.abilities
    bob = armed_session.get_participant(contestant_ids[0])
    gm = armed_session.get_participant(gm_id)

    assert not economy.can_activate(gm, bob)
    bob.score = 200
    assert economy.can_activate(gm, bob)
    assert not economy.can_activate(bob, bob)
