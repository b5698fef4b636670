"""Appending received game logs to the log file on disk."""

from __future__ import annotations

import logging
import os
import time
from typing import Union

from peril.routing import GameLog, format_timestamp

LOGS_FILE = "game.log"
WRITE_TO_DISK_DELAY = 1.0

_log = logging.getLogger(__name__)


def format_log_line(game_log: GameLog) -> str:
    """The line written for a game log, with the time to the second."""
    moment = format_timestamp(game_log.current_time.replace(microsecond=0))
    return f"{moment} {game_log.username}: {game_log.message}\n"


def write_log(
    game_log: GameLog,
    path: Union[str, os.PathLike] = LOGS_FILE,
    delay: float = WRITE_TO_DISK_DELAY,
) -> None:
    """Append a game log to the file after a simulated slow disk write."""
    _log.info("received game log...")
    time.sleep(delay)
    try:
        handle = open(path, "a", encoding="utf-8")
    except OSError as exc:
        raise OSError(f"could not open logs file: {exc}") from exc
    with handle:
        try:
            handle.write(format_log_line(game_log))
        except OSError as exc:
            raise OSError(f"could not write to logs file: {exc}") from exc