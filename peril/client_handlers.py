"""Handlers the client attaches to its subscriptions."""

from __future__ import annotations

from typing import Any, Callable

from pika.exceptions import AMQPError

from peril.gamedata import ArmyMove, RecognitionOfWar
from peril.gamestate import GameState, MoveOutcome
from peril.pubsub import Acktype, PubSubError, publish_json
from peril.routing import EXCHANGE_PERIL_TOPIC, WAR_RECOGNITIONS_PREFIX, PlayingState

PROMPT = "\n> "


def handler_pause(state: GameState) -> Callable[[PlayingState], Acktype]:
    """Apply pause and resume messages to the game state."""

    def handle(playing_state: PlayingState) -> Acktype:
        try:
            state.handle_pause(playing_state)
            return Acktype.ACK
        finally:
            print(PROMPT, end="", flush=True)

    return handle


def handler_move(state: GameState, channel: Any) -> Callable[[ArmyMove], Acktype]:
    """React to other players' moves, declaring war where armies meet."""

    def handle(move: ArmyMove) -> Acktype:
        try:
            outcome = state.handle_move(move)
            if outcome is MoveOutcome.SAME_PLAYER:
                return Acktype.NACK_DISCARD
            if outcome is MoveOutcome.SAFE:
                return Acktype.ACK
            if outcome is MoveOutcome.MAKE_WAR:
                recognition = RecognitionOfWar(
                    attacker=move.player, defender=state.player_snapshot()
                )
                try:
                    publish_json(
                        channel,
                        EXCHANGE_PERIL_TOPIC,
                        f"{WAR_RECOGNITIONS_PREFIX}.{state.username}",
                        recognition,
                    )
                except (PubSubError, AMQPError) as exc:
                    print(f"Error: {exc}")
                    return Acktype.NACK_REQUEUE
                return Acktype.ACK
            print("error: unknown move outcome")
            return Acktype.NACK_DISCARD
        finally:
            print(PROMPT, end="", flush=True)

    return handle