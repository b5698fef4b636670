"""Console prompts, help screens and flavour text for the game."""

from __future__ import annotations

import random
import sys
from typing import Optional, TextIO

from peril.gamestate import GameError

MALICIOUS_LOGS = (
    "Never interrupt your enemy when he is making a mistake.",
    "The hardest thing of all for a soldier is to retreat.",
    "A soldier will fight long and hard for a bit of colored ribbon.",
    "It is well that war is so terrible, otherwise we should grow too fond of it.",
    "The art of war is simple enough. Find out where your enemy is. "
    "Get at him as soon as you can. Strike him as hard as you can, "
    "and keep moving on.",
    "All warfare is based on deception.",
)

QUIT_MESSAGE = "I hate this game! (╯°□°)╯︵ ┻━┻"

_CLIENT_HELP = (
    "Possible commands:",
    "* move <location> <unitID> <unitID> <unitID>...",
    "    example:",
    "    move asia 1",
    "* spawn <location> <rank>",
    "    example:",
    "    spawn europe infantry",
    "* status",
    "* spam <n>",
    "    example:",
    "    spam 5",
    "* quit",
    "* help",
)

_SERVER_HELP = (
    "Possible commands:",
    "* pause",
    "* resume",
    "* quit",
    "* help",
)


def print_client_help() -> str:
    """Show the commands a player can type; returns the text shown."""
    text = "\n".join(_CLIENT_HELP)
    print(text)
    return text


def print_server_help() -> str:
    """Show the commands the server operator can type; returns the text shown."""
    text = "\n".join(_SERVER_HELP)
    print(text)
    return text


def get_input(stream: Optional[TextIO] = None) -> list[str]:
    """Prompt and read one line, split into words; empty at end of input."""
    source = sys.stdin if stream is None else stream
    print("> ", end="", flush=True)
    line = source.readline()
    return line.split()


def client_welcome(stream: Optional[TextIO] = None) -> str:
    """Greet the player and ask for a username."""
    print("Welcome to the Peril client!")
    print("Please enter your username:")
    words = get_input(stream)
    if not words:
        raise GameError("you must enter a username. goodbye")
    username = words[0]
    print(f"Welcome, {username}!")
    print_client_help()
    return username


def malicious_log() -> str:
    """A random line of war wisdom used to flood the game log."""
    return random.choice(MALICIOUS_LOGS)


def print_quit() -> str:
    """Say goodbye; returns the message shown."""
    print(QUIT_MESSAGE)
    return QUIT_MESSAGE