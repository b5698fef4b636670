# peril

Building blocks for Peril, a multiplayer turn-based war game. Its players
exchange moves, wars and pause signals through a RabbitMQ broker.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

- `peril.routing` holds the exchange names (`EXCHANGE_PERIL_DIRECT`,
  `EXCHANGE_PERIL_TOPIC`) and the routing keys (`ARMY_MOVES_PREFIX`,
  `WAR_RECOGNITIONS_PREFIX`, `PAUSE_KEY`, `GAME_LOG_SLUG`). It also defines the
  `PlayingState` and `GameLog` messages. Timestamps are written in RFC 3339 form
  with `format_timestamp` and read with `parse_timestamp`.
- `peril.gamedata` defines units, players, army moves and declarations of war:
  `UnitRank`, `Unit`, `Player`, `ArmyMove` and `RecognitionOfWar`. Each one
  converts to and from plain dictionaries with `to_dict` and `from_dict`.
  `all_ranks()` and `all_locations()` return the valid ranks and locations.
- `peril.gamestate` provides `GameState`, one player's thread-safe view of the
  game:
  - `command_spawn` creates units and `command_move` moves them.
  - `handle_pause` applies pause and resume signals.
  - `handle_move` reports a `MoveOutcome` for another player's move.
  - `handle_war` resolves a war by power level and returns a `WarOutcome`
    together with the winner and the loser. Artillery counts 10, cavalry 5 and
    infantry 1. Units at the contested location are removed from the player who
    loses, and from both players in a draw.
  - `command_status` prints the player's units.
- `peril.console` contains the prompts, help screens (`print_client_help`,
  `print_server_help`), `get_input`, `client_welcome`, `malicious_log` and
  `print_quit`.
- `peril.logs` provides `write_log`, which appends a `GameLog` to a file
  (`game.log` by default) after a short delay (1 second by default). The line
  has the form `<RFC 3339 time> <username>: <message>`.
- `peril.pubsub` covers the broker side:
  - `declare_and_bind` declares a queue and binds it to an exchange.
  - `publish_json` and `publish_gob` publish messages. `publish_gob` writes the
    package's own compact binary encoding (`encode_binary` / `decode_binary`).
  - `subscribe_json` and `subscribe_gob` attach a handler that answers each
    message with an `Acktype` (`ACK`, `NACK_DISCARD`, `NACK_REQUEUE`).
  - Failures raise `PubSubError`.
- `peril.client_handlers` provides `handler_pause` and `handler_move`, two
  ready-made subscription handlers. When the player's units share a location
  with the mover's, `handler_move` publishes a `RecognitionOfWar` on
  `peril_topic` under `war.<username>`.

## Example

```python
from peril.gamestate import GameState

state = GameState("alice")
state.command_spawn(["spawn", "europe", "infantry"])
state.command_spawn(["spawn", "europe", "artillery"])
move = state.command_move(["move", "asia", "1"])
state.command_status()
```

An invalid command raises `peril.gamestate.GameError`, with a message meant to
be shown to the player. `command_move` also refuses to run while the game is
paused.

## Talking to the broker

```python
import pika
from peril import pubsub, routing
from peril.gamestate import GameState
from peril.client_handlers import handler_pause

connection = pika.BlockingConnection(pika.ConnectionParameters("localhost"))
state = GameState("alice")
channel = pubsub.subscribe_json(
    connection,
    routing.EXCHANGE_PERIL_DIRECT,
    f"{routing.PAUSE_KEY}.alice",
    routing.PAUSE_KEY,
    pubsub.SimpleQueueType.TRANSIENT,
    handler_pause(state),
    routing.PlayingState.from_dict,
)
channel.start_consuming()
```

The last argument turns the decoded body into a message object. Without it, the
handler receives the plain decoded value.

Durable queues are declared durable. Transient queues are declared exclusive and
auto-deleting. Every queue gets the dead-letter exchange `peril_dlx`, so a
message that a handler discards ends up there. Each subscription has a prefetch
count of 10.

## What it does not do

The package has no runnable client or server program and installs no
commands. It also has no subscription handler for declarations of war or for
game logs. An application has to wire `GameState.handle_war`, `write_log` and
the console helpers to its own subscriptions and input loop.