"""Exchange names, routing keys and the control messages sent over them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

ARMY_MOVES_PREFIX = "army_moves"
WAR_RECOGNITIONS_PREFIX = "war"
PAUSE_KEY = "pause"
GAME_LOG_SLUG = "game_logs"

EXCHANGE_PERIL_DIRECT = "peril_direct"
EXCHANGE_PERIL_TOPIC = "peril_topic"

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_TIMESTAMP = re.compile(
    r"(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>[Zz]|[+-]\d{2}:\d{2})"
)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as an RFC 3339 string; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.isoformat()
    if moment.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp, keeping at most microsecond precision."""
    match = _TIMESTAMP.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    base = datetime.strptime(match["base"], "%Y-%m-%dT%H:%M:%S")
    fraction = (match["frac"] or "")[:6].ljust(6, "0")
    zone = match["tz"]
    if zone in ("Z", "z"):
        tzinfo = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        tzinfo = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return base.replace(microsecond=int(fraction), tzinfo=tzinfo)


@dataclass(frozen=True)
class PlayingState:
    """Whether the server has paused the game."""

    is_paused: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"IsPaused": self.is_paused}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlayingState:
        value = data.get("IsPaused", False)
        if not isinstance(value, bool):
            raise ValueError(f"IsPaused must be a boolean, got {value!r}")
        return cls(is_paused=value)


@dataclass(frozen=True)
class GameLog:
    """A line of the shared game log."""

    current_time: datetime
    message: str
    username: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "CurrentTime": format_timestamp(self.current_time),
            "Message": self.message,
            "Username": self.username,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GameLog:
        raw_time = data.get("CurrentTime")
        current_time = ZERO_TIME if raw_time is None else parse_timestamp(str(raw_time))
        return cls(
            current_time=current_time,
            message=str(data.get("Message", "")),
            username=str(data.get("Username", "")),
        )