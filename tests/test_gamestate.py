import pytest

from peril.gamedata import ArmyMove, Player, RecognitionOfWar, Unit, UnitRank
from peril.gamestate import (
    GameError,
    GameState,
    MoveOutcome,
    WarOutcome,
    overlapping_location,
    units_to_power_level,
)
from peril.routing import PlayingState


def _player(name, *units):
    return Player(username=name, units={u.id: u for u in units})


def _state(name, *spawns):
    state = GameState(name)
    for location, rank in spawns:
        state.command_spawn(["spawn", location, rank])
    return state


def test_power_levels():
    assert units_to_power_level([Unit(1, UnitRank.ARTILLERY, "asia")]) == 10
    assert units_to_power_level([Unit(1, UnitRank.CAVALRY, "asia")]) == 5
    assert units_to_power_level([Unit(1, UnitRank.INFANTRY, "asia")]) == 1
    assert units_to_power_level([]) == 0


def test_overlapping_location():
    a = _player("a", Unit(1, UnitRank.INFANTRY, "asia"))
    b = _player("b", Unit(1, UnitRank.INFANTRY, "europe"))
    c = _player("c", Unit(1, UnitRank.CAVALRY, "asia"))
    assert overlapping_location(a, b) is None
    assert overlapping_location(a, c) == "asia"


def test_spawn_adds_unit():
    state = GameState("alice")
    unit = state.command_spawn(["spawn", "europe", "infantry"])
    assert state.get_unit(unit.id) == unit
    assert unit.rank is UnitRank.INFANTRY
    assert unit.location == "europe"


def test_spawn_ids_are_distinct():
    state = _state("alice", ("asia", "cavalry"), ("africa", "artillery"))
    assert len(state.player_snapshot().units) == 2


@pytest.mark.parametrize(
    "words, message",
    [
        (["spawn", "asia"], "usage: spawn <location> <rank>"),
        (["spawn", "mars", "infantry"], "error: mars is not a valid location"),
        (["spawn", "asia", "dragon"], "error: dragon is not a valid unit"),
    ],
)
def test_spawn_errors(words, message):
    with pytest.raises(GameError, match=message):
        GameState("alice").command_spawn(words)


def test_move_updates_units():
    state = _state("alice", ("asia", "infantry"))
    uid = next(iter(state.player_snapshot().units))
    move = state.command_move(["move", "europe", str(uid)])
    assert move.to_location == "europe"
    assert [u.location for u in move.units] == ["europe"]
    assert state.get_unit(uid).location == "europe"
    assert move.player.username == "alice"


def test_move_while_paused():
    state = _state("alice", ("asia", "infantry"))
    state.handle_pause(PlayingState(is_paused=True))
    with pytest.raises(GameError, match="the game is paused"):
        state.command_move(["move", "europe", "1"])


@pytest.mark.parametrize(
    "words, message",
    [
        (["move", "europe"], "usage: move"),
        (["move", "mars", "1"], "error: mars is not a valid location"),
        (["move", "europe", "abc"], "error: abc is not a valid unit ID"),
        (["move", "europe", "1_0"], "error: 1_0 is not a valid unit ID"),
        (["move", "europe", "42"], "error: unit with ID 42 not found"),
    ],
)
def test_move_errors(words, message):
    state = _state("alice", ("asia", "infantry"))
    with pytest.raises(GameError, match=message):
        state.command_move(words)


def test_pause_and_resume():
    state = GameState("alice")
    state.handle_pause(PlayingState(is_paused=True))
    assert state.is_paused is True
    state.handle_pause(PlayingState(is_paused=False))
    assert state.is_paused is False


def test_snapshot_is_a_copy():
    state = _state("alice", ("asia", "infantry"))
    snap = state.player_snapshot()
    snap.units.clear()
    assert len(state.player_snapshot().units) == 1


def test_handle_move_outcomes():
    state = _state("alice", ("asia", "infantry"))
    own = ArmyMove(state.player_snapshot(), [], "asia")
    assert state.handle_move(own) is MoveOutcome.SAME_PLAYER

    far = Unit(1, UnitRank.CAVALRY, "europe")
    assert state.handle_move(ArmyMove(_player("bob", far), [far], "europe")) is MoveOutcome.SAFE

    near = Unit(1, UnitRank.CAVALRY, "asia")
    assert state.handle_move(ArmyMove(_player("bob", near), [near], "asia")) is MoveOutcome.MAKE_WAR


def test_war_published_by_self_not_involved():
    state = _state("alice", ("asia", "infantry"))
    war = RecognitionOfWar(_player("bob"), state.player_snapshot())
    assert state.handle_war(war) == (WarOutcome.NOT_INVOLVED, "", "")


def test_war_of_others_not_involved():
    state = _state("carol", ("asia", "infantry"))
    war = RecognitionOfWar(_player("alice"), _player("bob"))
    assert state.handle_war(war) == (WarOutcome.NOT_INVOLVED, "", "")


def test_war_without_overlap():
    state = _state("alice", ("asia", "infantry"))
    defender = _player("bob", Unit(1, UnitRank.INFANTRY, "europe"))
    war = RecognitionOfWar(state.player_snapshot(), defender)
    assert state.handle_war(war) == (WarOutcome.NO_UNITS, "", "")


def test_attacker_wins():
    state = _state("alice", ("asia", "artillery"))
    defender = _player("bob", Unit(1, UnitRank.INFANTRY, "asia"))
    war = RecognitionOfWar(state.player_snapshot(), defender)
    assert state.handle_war(war) == (WarOutcome.YOU_WON, "alice", "bob")
    assert len(state.player_snapshot().units) == 1


def test_attacker_loses_units_in_location():
    state = _state("alice", ("asia", "infantry"), ("europe", "cavalry"))
    defender = _player("bob", Unit(1, UnitRank.ARTILLERY, "asia"))
    war = RecognitionOfWar(state.player_snapshot(), defender)
    assert state.handle_war(war) == (WarOutcome.OPPONENT_WON, "bob", "alice")
    remaining = state.player_snapshot().units.values()
    assert [u.location for u in remaining] == ["europe"]


def test_draw_kills_units():
    state = _state("alice", ("asia", "cavalry"))
    defender = _player("bob", Unit(1, UnitRank.CAVALRY, "asia"))
    war = RecognitionOfWar(state.player_snapshot(), defender)
    assert state.handle_war(war) == (WarOutcome.DRAW, "alice", "bob")
    assert state.player_snapshot().units == {}


def test_status_when_paused(capsys):
    state = _state("alice", ("asia", "infantry"))
    capsys.readouterr()
    state.handle_pause(PlayingState(is_paused=True))
    capsys.readouterr()
    state.command_status()
    assert capsys.readouterr().out == "The game is paused.\n"


def test_status_lists_units(capsys):
    state = _state("alice", ("asia", "infantry"))
    capsys.readouterr()
    state.command_status()
    out = capsys.readouterr().out
    assert "The game is not paused." in out
    assert "You are alice" in out
    assert "asia, infantry" in out