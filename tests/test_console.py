import io

import pytest

from peril.console import (
    MALICIOUS_LOGS,
    client_welcome,
    get_input,
    malicious_log,
    print_client_help,
    print_quit,
    print_server_help,
)
from peril.gamestate import GameError


def test_client_help_lists_commands(capsys):
    print_client_help()
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Possible commands:"
    assert "* move <location> <unitID> <unitID> <unitID>..." in lines
    assert "    spawn europe infantry" in lines
    assert lines[-1] == "* help"


def test_server_help_lists_commands(capsys):
    print_server_help()
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["Possible commands:", "* pause", "* resume", "* quit", "* help"]


def test_get_input_splits_words():
    assert get_input(io.StringIO("  move   asia 1 \n")) == ["move", "asia", "1"]


def test_get_input_prints_prompt(capsys):
    get_input(io.StringIO("status\n"))
    assert capsys.readouterr().out == "> "


def test_get_input_end_of_stream_is_empty():
    assert get_input(io.StringIO("")) == []


def test_get_input_reads_only_one_line():
    stream = io.StringIO("first line\nsecond line\n")
    assert get_input(stream) == ["first", "line"]
    assert get_input(stream) == ["second", "line"]


def test_client_welcome_returns_first_word(capsys):
    assert client_welcome(io.StringIO("alice extra\n")) == "alice"
    out = capsys.readouterr().out
    assert "Welcome, alice!" in out
    assert "Possible commands:" in out


def test_client_welcome_without_username_raises():
    with pytest.raises(GameError, match="you must enter a username"):
        client_welcome(io.StringIO("   \n"))


def test_malicious_log_is_one_of_known_lines():
    seen = {malicious_log() for _ in range(300)}
    assert seen <= set(MALICIOUS_LOGS)
    assert len(seen) > 1


def test_print_quit(capsys):
    print_quit()
    assert capsys.readouterr().out == "I hate this game! (╯°□°)╯︵ ┻━┻\n"