"""Units, players and the messages that describe their movements."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class UnitRank(str, Enum):
    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"

    def __str__(self) -> str:
        return self.value


LOCATIONS = frozenset(
    {"americas", "europe", "africa", "asia", "australia", "antarctica"}
)


def all_ranks() -> frozenset[UnitRank]:
    """Every rank a unit may have."""
    return frozenset(UnitRank)


def all_locations() -> frozenset[str]:
    """Every location a unit may occupy."""
    return LOCATIONS


@dataclass(frozen=True)
class Unit:
    id: int
    rank: UnitRank
    location: str

    def to_dict(self) -> dict[str, Any]:
        return {"ID": self.id, "Rank": self.rank.value, "Location": self.location}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Unit:
        return cls(
            id=int(data.get("ID", 0)),
            rank=UnitRank(data.get("Rank", "")),
            location=str(data.get("Location", "")),
        )


@dataclass
class Player:
    username: str
    units: dict[int, Unit] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Username": self.username,
            "Units": {str(uid): unit.to_dict() for uid, unit in sorted(self.units.items())},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Player:
        raw_units = data.get("Units") or {}
        return cls(
            username=str(data.get("Username", "")),
            units={int(uid): Unit.from_dict(unit) for uid, unit in raw_units.items()},
        )


@dataclass
class ArmyMove:
    player: Player
    units: list[Unit]
    to_location: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "Player": self.player.to_dict(),
            "Units": [unit.to_dict() for unit in self.units],
            "ToLocation": self.to_location,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ArmyMove:
        return cls(
            player=Player.from_dict(data.get("Player") or {}),
            units=[Unit.from_dict(unit) for unit in data.get("Units") or []],
            to_location=str(data.get("ToLocation", "")),
        )


@dataclass
class RecognitionOfWar:
    attacker: Player
    defender: Player

    def to_dict(self) -> dict[str, Any]:
        return {"Attacker": self.attacker.to_dict(), "Defender": self.defender.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RecognitionOfWar:
        return cls(
            attacker=Player.from_dict(data.get("Attacker") or {}),
            defender=Player.from_dict(data.get("Defender") or {}),
        )