"""
Tests for the roster manager.
"""

import random
import pytest

from jeopardy_match.config.game_config import Ability, GameConfig
from jeopardy_match.core import MatchPhase, Role, Roster
from jeopardy_match.errors import CapacityExceeded, Forbidden, InvalidAction, InvalidName, ValidationError


@pytest.fixture
def roster(game_config):
    roster = Roster(game_config)
    roster.add_participant("Alice", Role.GAME_MASTER)
    return roster


def test_game_master_joins_ready(roster):
    gm = roster.game_master
    assert gm.name == "Alice"
    assert gm.is_ready
    assert gm.is_game_master


def test_contestant_joins_not_ready(roster):
    bob = roster.add_participant("Bob")
    assert bob.role == Role.CONTESTANT
    assert not bob.is_ready
    assert bob.score == 0
    assert bob.ability_charge == 0
    assert bob.active_ability_name is None


def test_capacity_exceeded(roster, game_config):
    """Adding beyond max_participants fails."""
    for index in range(game_config.max_participants - 1):
        roster.add_participant(f"Player {index}")

    with pytest.raises(CapacityExceeded):
        roster.add_participant("One too many")
    assert len(roster) == game_config.max_participants


def test_second_game_master_forbidden(roster):
    with pytest.raises(Forbidden):
        roster.add_participant("Mallory", Role.GAME_MASTER)


def test_remove_participant_gm_only(roster):
    gm = roster.game_master
    bob = roster.add_participant("Bob")
    carol = roster.add_participant("Carol")

    with pytest.raises(Forbidden):
        roster.remove_participant(bob.participant_id, carol.participant_id)
    with pytest.raises(Forbidden):
        roster.remove_participant(gm.participant_id, gm.participant_id)

    roster.remove_participant(gm.participant_id, carol.participant_id)
    assert carol.participant_id not in roster
    assert len(roster) == 2


@pytest.mark.parametrize("bad_name", ["", "   ", "\t\n"])
def test_rename_invalid_keeps_old_name(roster, bad_name):
    bob = roster.add_participant("Bob")
    with pytest.raises(InvalidName):
        roster.rename_participant(bob.participant_id, bad_name)
    assert bob.name == "Bob"


def test_rename_strips_whitespace(roster):
    bob = roster.add_participant("Bob")
    roster.rename_participant(bob.participant_id, "  Robert  ")
    assert bob.name == "Robert"


def test_invalid_name_is_a_validation_error(roster):
    with pytest.raises(ValidationError):
        roster.add_participant(" ")


def test_all_ready(roster):
    bob = roster.add_participant("Bob")
    assert not roster.all_ready()
    roster.set_ready(bob.participant_id, True)
    assert roster.all_ready()


def test_all_ready_vacuous_for_empty_roster(game_config):
    assert Roster(game_config).all_ready()


def test_manual_ability_assignment(roster):
    gm = roster.game_master
    bob = roster.add_participant("Bob")

    roster.assign_ability(gm.participant_id, bob.participant_id, "Shield")
    assert bob.ability.name == "Shield"

    roster.assign_ability(gm.participant_id, bob.participant_id, None)
    assert bob.ability is None


def test_manual_ability_assignment_rules(roster, game_config):
    gm = roster.game_master
    bob = roster.add_participant("Bob")

    with pytest.raises(Forbidden):
        roster.assign_ability(bob.participant_id, bob.participant_id, "Shield")
    with pytest.raises(ValidationError):
        roster.assign_ability(gm.participant_id, bob.participant_id, "")
    with pytest.raises(ValidationError):
        roster.assign_ability(gm.participant_id, bob.participant_id, "Teleport")

    game_config.randomize_abilities = True
    with pytest.raises(InvalidAction):
        roster.assign_ability(gm.participant_id, bob.participant_id, "Shield")


def test_random_abilities_cycle_through_catalog(game_config):
    """With more participants than abilities, the shuffled catalog repeats."""
    roster = Roster(game_config)
    roster.add_participant("Alice", Role.GAME_MASTER)
    for name in ("Bob", "Carol", "Dave"):
        roster.add_participant(name)

    roster.assign_random_abilities(random.Random(3))

    names = [p.ability.name for p in roster]
    # Two usable abilities dealt round-robin over four participants
    assert names[0] == names[2]
    assert names[1] == names[3]
    assert set(names) == {"Double Down", "Shield"}


def test_random_abilities_with_empty_catalog():
    config = GameConfig(abilities=[Ability("")])
    roster = Roster(config)
    roster.add_participant("Alice", Role.GAME_MASTER)
    roster.assign_random_abilities(random.Random(1))
    assert roster.game_master.ability is None


def test_lobby_start_requires_ready_and_categories(session, gm_id):
    bob = session.join("Bob")
    with pytest.raises(InvalidAction):
        session.start_question_phase(gm_id)  # Bob not ready

    session.set_ready(bob.participant_id, True)
    with pytest.raises(InvalidAction):
        session.start_question_phase(gm_id)  # categories blank

    session.set_categories(gm_id, ["A", "B", "C"])
    session.start_question_phase(gm_id)
    assert session.phase == MatchPhase.QUESTION_WRITING


def test_lobby_start_needs_two_participants(session, gm_id):
    session.set_categories(gm_id, ["A", "B", "C"])
    with pytest.raises(InvalidAction):
        session.start_question_phase(gm_id)


def test_lobby_start_deals_random_abilities(session, gm_id, contestant_ids):
    session.update_settings(gm_id, randomize_abilities=True)
    session.set_categories(gm_id, ["A", "B", "C"])
    session.start_question_phase(gm_id)
    assert all(p.ability is not None for p in session.participants)


def test_lobby_start_clears_abilities_when_disabled(session, gm_id, contestant_ids):
    session.assign_ability(gm_id, contestant_ids[0], "Shield")
    session.update_settings(gm_id, use_abilities=False)
    session.set_categories(gm_id, ["A", "B", "C"])
    session.start_question_phase(gm_id)
    assert all(p.ability is None for p in session.participants)


def test_update_settings_resizes_categories(session, gm_id):
    session.set_categories(gm_id, ["A", "B", "C"])
    session.update_settings(gm_id, board_size=4)
    assert session.match_state.categories == ["A", "B", "C", ""]
    assert session.match_state.pipeline.point_values == [100, 200, 300, 400]


def test_update_settings_rejects_invalid_without_change(session, gm_id):
    with pytest.raises(ValidationError):
        session.update_settings(gm_id, board_size=9, use_abilities=False)
    assert session.config.board_size == 3
    assert session.config.use_abilities is True


def test_kick_only_in_lobby(play_session, gm_id, contestant_ids):
    with pytest.raises(InvalidAction):
        play_session.kick(gm_id, contestant_ids[0])


def test_set_category_rejects_duplicate_label(session, gm_id):
    session.set_categories(gm_id, ["History", "Science", "Movies"])

    with pytest.raises(ValidationError):
        session.set_category(gm_id, 1, " History ")

    assert session.match_state.categories == ["History", "Science", "Movies"]
    assert session.set_category(gm_id, 0, "History") == ["History", "Science", "Movies"]


def test_duplicate_categories_block_the_lobby(session, gm_id, contestant_ids):
    session.match_state.categories = ["History", "History", "Movies"]

    assert not session.match_state.categories_ready()
    with pytest.raises(InvalidAction):
        session.start_question_phase(gm_id)
    assert session.phase == MatchPhase.LOBBY


def test_update_settings_accepts_ability_names(session, gm_id):
    settings = session.update_settings(gm_id, abilities=["Shield", {"name": "Swap", "description": "Trade scores."}])

    assert settings["abilities"] == [
        {"name": "Shield", "description": ""},
        {"name": "Swap", "description": "Trade scores."},
    ]
    assert session.config.abilities[0] == Ability("Shield")


@pytest.mark.parametrize("abilities", ["Shield", [42], [["Shield"]]])
def test_update_settings_rejects_malformed_abilities(session, gm_id, abilities):
    with pytest.raises(ValidationError):
        session.update_settings(gm_id, abilities=abilities)
    assert [a.name for a in session.config.abilities] == ["Double Down", "Shield", ""]
