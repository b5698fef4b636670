"""The local player's game state and the commands and events that change it."""

from __future__ import annotations

import re
import threading
from dataclasses import replace
from enum import Enum
from typing import Iterable, Optional

from peril.gamedata import (
    LOCATIONS,
    ArmyMove,
    Player,
    RecognitionOfWar,
    Unit,
    UnitRank,
)
from peril.routing import PlayingState

_RULE = "------------------------"
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_POWER = {
    UnitRank.ARTILLERY: 10,
    UnitRank.CAVALRY: 5,
    UnitRank.INFANTRY: 1,
}


class GameError(Exception):
    """A command that cannot be carried out."""


class MoveOutcome(Enum):
    SAME_PLAYER = 0
    SAFE = 1
    MAKE_WAR = 2


class WarOutcome(Enum):
    NOT_INVOLVED = 0
    NO_UNITS = 1
    YOU_WON = 2
    OPPONENT_WON = 3
    DRAW = 4


def overlapping_location(first: Player, second: Player) -> Optional[str]:
    """The first location where both players have a unit, or None."""
    for mine in first.units.values():
        for theirs in second.units.values():
            if mine.location == theirs.location:
                return mine.location
    return None


def units_to_power_level(units: Iterable[Unit]) -> int:
    """Total fighting strength of a group of units."""
    return sum(_POWER.get(unit.rank, 0) for unit in units)


def _parse_unit_id(word: str) -> int:
    if _INTEGER.fullmatch(word) is None:
        raise GameError(f"error: {word} is not a valid unit ID")
    value = int(word)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise GameError(f"error: {word} is not a valid unit ID")
    return value


class GameState:
    """Thread-safe state of one player's game."""

    def __init__(self, username: str) -> None:
        self._player = Player(username=username, units={})
        self._paused = False
        self._lock = threading.Lock()

    @property
    def username(self) -> str:
        return self._player.username

    @property
    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    def _set_paused(self, paused: bool) -> None:
        with self._lock:
            self._paused = paused

    def _remove_units_in_location(self, location: str) -> None:
        with self._lock:
            self._player.units = {
                uid: unit
                for uid, unit in self._player.units.items()
                if unit.location != location
            }

    def update_unit(self, unit: Unit) -> None:
        with self._lock:
            self._player.units[unit.id] = unit

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        with self._lock:
            return self._player.units.get(unit_id)

    def player_snapshot(self) -> Player:
        """A copy of the player that later changes do not affect."""
        with self._lock:
            return Player(username=self._player.username, units=dict(self._player.units))

    def handle_pause(self, state: PlayingState) -> None:
        print()
        try:
            if state.is_paused:
                print("==== Pause Detected ====")
                self._set_paused(True)
            else:
                print("==== Resume Detected ====")
                self._set_paused(False)
        finally:
            print(_RULE)

    def handle_move(self, move: ArmyMove) -> MoveOutcome:
        try:
            player = self.player_snapshot()
            print()
            print("==== Move Detected ====")
            print(
                f"{move.player.username} is moving {len(move.units)} unit(s) "
                f"to {move.to_location}"
            )
            for unit in move.units:
                print(f"* {unit.rank}")

            if player.username == move.player.username:
                return MoveOutcome.SAME_PLAYER

            location = overlapping_location(player, move.player)
            if location is not None:
                print(
                    f"You have units in {location}! "
                    f"You are at war with {move.player.username}!"
                )
                return MoveOutcome.MAKE_WAR
            print(f"You are safe from {move.player.username}'s units.")
            return MoveOutcome.SAFE
        finally:
            print(_RULE)

    def command_move(self, words: list[str]) -> ArmyMove:
        """Move units: ``move <location> <unitID> <unitID> ...``."""
        if self.is_paused:
            raise GameError("the game is paused, you can not move units")
        if len(words) < 3:
            raise GameError("usage: move <location> <unitID> <unitID> <unitID> etc")
        new_location = words[1]
        if new_location not in LOCATIONS:
            raise GameError(f"error: {new_location} is not a valid location")
        unit_ids = [_parse_unit_id(word) for word in words[2:]]

        moved = []
        for unit_id in unit_ids:
            unit = self.get_unit(unit_id)
            if unit is None:
                raise GameError(f"error: unit with ID {unit_id} not found")
            unit = replace(unit, location=new_location)
            self.update_unit(unit)
            moved.append(unit)

        move = ArmyMove(
            player=self.player_snapshot(), units=moved, to_location=new_location
        )
        print(f"Moved {len(move.units)} units to {move.to_location}")
        return move

    def command_spawn(self, words: list[str]) -> Unit:
        """Spawn a unit: ``spawn <location> <rank>``."""
        if len(words) < 3:
            raise GameError("usage: spawn <location> <rank>")
        location = words[1]
        if location not in LOCATIONS:
            raise GameError(f"error: {location} is not a valid location")
        rank_name = words[2]
        try:
            rank = UnitRank(rank_name)
        except ValueError:
            raise GameError(f"error: {rank_name} is not a valid unit") from None

        with self._lock:
            unit = Unit(id=len(self._player.units) + 1, rank=rank, location=location)
            self._player.units[unit.id] = unit
        print(f"Spawned a(n) {rank_name} in {location} with id {unit.id}")
        return unit

    def handle_war(self, recognition: RecognitionOfWar) -> tuple[WarOutcome, str, str]:
        """Fight a declared war; returns the outcome, the winner and the loser."""
        attacker, defender = recognition.attacker, recognition.defender
        try:
            print()
            print("==== War Declared ====")
            print(f"{attacker.username} has declared war on {defender.username}!")

            player = self.player_snapshot()
            if player.username == defender.username:
                print(f"{player.username}, you published the war.")
                return WarOutcome.NOT_INVOLVED, "", ""
            if player.username != attacker.username:
                print(f"{player.username}, you are not involved in this war.")
                return WarOutcome.NOT_INVOLVED, "", ""

            location = overlapping_location(attacker, defender)
            if location is None:
                print("Error! No units are in the same location. No war will be fought.")
                return WarOutcome.NO_UNITS, "", ""

            attacker_units = [u for u in attacker.units.values() if u.location == location]
            defender_units = [u for u in defender.units.values() if u.location == location]

            print(f"{attacker.username}'s units:")
            for unit in attacker_units:
                print(f"  * {unit.rank}")
            print(f"{defender.username}'s units:")
            for unit in defender_units:
                print(f"  * {unit.rank}")

            attacker_power = units_to_power_level(attacker_units)
            defender_power = units_to_power_level(defender_units)
            print(f"Attacker has a power level of {attacker_power}")
            print(f"Defender has a power level of {defender_power}")

            if attacker_power > defender_power:
                print(f"{attacker.username} has won the war!")
                if player.username == defender.username:
                    self._lose(location)
                    return WarOutcome.OPPONENT_WON, attacker.username, defender.username
                return WarOutcome.YOU_WON, attacker.username, defender.username
            if defender_power > attacker_power:
                print(f"{defender.username} has won the war!")
                if player.username == attacker.username:
                    self._lose(location)
                    return WarOutcome.OPPONENT_WON, defender.username, attacker.username
                return WarOutcome.YOU_WON, defender.username, attacker.username

            print("The war ended in a draw!")
            print(f"Your units in {location} have been killed.")
            self._remove_units_in_location(location)
            return WarOutcome.DRAW, attacker.username, defender.username
        finally:
            print(_RULE)

    def _lose(self, location: str) -> None:
        print("You have lost the war!")
        self._remove_units_in_location(location)
        print(f"Your units in {location} have been killed.")

    def command_status(self) -> None:
        if self.is_paused:
            print("The game is paused.")
            return
        print("The game is not paused.")
        player = self.player_snapshot()
        print(f"You are {player.username}, and you have {len(player.units)} units.")
        for unit in sorted(player.units.values(), key=lambda u: u.id):
            print(f"* {unit.id}: {unit.location}, {unit.rank}")