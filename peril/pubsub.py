"""Publishing and subscribing to game messages over AMQP."""

from __future__ import annotations

import json
import logging
import struct
from enum import Enum
from typing import Any, Callable, Mapping, Optional, TypeVar

import pika
from pika.exceptions import AMQPError

T = TypeVar("T")

DEAD_LETTER_EXCHANGE = "peril_dlx"
PREFETCH_COUNT = 10

_log = logging.getLogger(__name__)

_LENGTH = struct.Struct(">I")
_FLOAT = struct.Struct(">d")


class PubSubError(Exception):
    """A queue could not be set up or a message could not be published."""


class Acktype(Enum):
    ACK = 0
    NACK_DISCARD = 1
    NACK_REQUEUE = 2


class SimpleQueueType(Enum):
    DURABLE = 0
    TRANSIENT = 1


def declare_and_bind(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
) -> tuple[Any, str]:
    """Open a channel, declare a queue and bind it; returns the channel and queue name."""
    try:
        channel = connection.channel()
    except AMQPError as exc:
        raise PubSubError(f"could not create channel: {exc}") from exc

    durable = queue_type is SimpleQueueType.DURABLE
    try:
        result = channel.queue_declare(
            queue=queue_name,
            durable=durable,
            exclusive=not durable,
            auto_delete=not durable,
            arguments={"x-dead-letter-exchange": DEAD_LETTER_EXCHANGE},
        )
    except AMQPError as exc:
        raise PubSubError(f"could not declare queue: {exc}") from exc
    name = result.method.queue

    try:
        channel.queue_bind(queue=name, exchange=exchange, routing_key=key)
    except AMQPError as exc:
        raise PubSubError(f"could not bind queue: {exc}") from exc
    return channel, name


def _plain(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"cannot encode value of type {type(value).__name__}")


def encode_json(value: Any) -> bytes:
    """Compact JSON for a plain value or an object with ``to_dict``."""
    try:
        text = json.dumps(value, default=_plain, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise PubSubError(str(exc)) from exc
    return text.encode("utf-8")


def _encode(value: Any, out: bytearray) -> None:
    if value is None:
        out += b"N"
    elif value is True:
        out += b"T"
    elif value is False:
        out += b"F"
    elif isinstance(value, int):
        size = (value.bit_length() + 8) // 8
        out += b"I" + _LENGTH.pack(size) + value.to_bytes(size, "big", signed=True)
    elif isinstance(value, float):
        out += b"D" + _FLOAT.pack(value)
    elif isinstance(value, str):
        data = value.encode("utf-8")
        out += b"S" + _LENGTH.pack(len(data)) + data
    elif isinstance(value, (bytes, bytearray)):
        out += b"B" + _LENGTH.pack(len(value)) + bytes(value)
    elif isinstance(value, (list, tuple)):
        out += b"L" + _LENGTH.pack(len(value))
        for item in value:
            _encode(item, out)
    elif isinstance(value, Mapping):
        out += b"M" + _LENGTH.pack(len(value))
        for item_key, item in value.items():
            _encode(item_key, out)
            _encode(item, out)
    else:
        _encode(_plain(value), out)


def encode_binary(value: Any) -> bytes:
    """A compact self-describing binary encoding of a value."""
    out = bytearray()
    _encode(value, out)
    return bytes(out)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def exhausted(self) -> bool:
        return self._pos == len(self._data)

    def take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise ValueError("truncated binary value")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def length(self) -> int:
        return _LENGTH.unpack(self.take(_LENGTH.size))[0]

    def value(self) -> Any:
        tag = self.take(1)
        if tag == b"N":
            return None
        if tag == b"T":
            return True
        if tag == b"F":
            return False
        if tag == b"I":
            return int.from_bytes(self.take(self.length()), "big", signed=True)
        if tag == b"D":
            return _FLOAT.unpack(self.take(_FLOAT.size))[0]
        if tag == b"S":
            return self.take(self.length()).decode("utf-8")
        if tag == b"B":
            return self.take(self.length())
        if tag == b"L":
            return [self.value() for _ in range(self.length())]
        if tag == b"M":
            result = {}
            for _ in range(self.length()):
                item_key = self.value()
                try:
                    result[item_key] = self.value()
                except TypeError as exc:
                    raise ValueError(f"invalid map key: {exc}") from exc
            return result
        raise ValueError(f"unknown type tag {tag!r}")


def decode_binary(body: bytes) -> Any:
    """Decode a value written by :func:`encode_binary`."""
    reader = _Reader(body)
    value = reader.value()
    if not reader.exhausted:
        raise ValueError("trailing data after binary value")
    return value


def publish_json(channel: Any, exchange: str, key: str, value: Any) -> None:
    body = encode_json(value)
    channel.basic_publish(
        exchange=exchange,
        routing_key=key,
        body=body,
        properties=pika.BasicProperties(content_type="application/json"),
    )


def publish_gob(channel: Any, exchange: str, key: str, value: Any) -> None:
    try:
        body = encode_binary(value)
    except TypeError as exc:
        raise PubSubError(f"error encoding value to gob: {exc}") from exc
    channel.basic_publish(
        exchange=exchange,
        routing_key=key,
        body=body,
        properties=pika.BasicProperties(content_type="application/gob"),
    )


def handle_delivery(
    channel: Any,
    method: Any,
    body: bytes,
    decode: Callable[[bytes], T],
    handler: Callable[[T], Acktype],
) -> Optional[Acktype]:
    """Decode one delivery, pass it to the handler and acknowledge as it asks."""
    try:
        value = decode(body)
    except (ValueError, TypeError, KeyError) as exc:
        _log.warning("error unmarshalling delivery: %s", exc)
        return None
    outcome = handler(value)
    if outcome is Acktype.ACK:
        channel.basic_ack(delivery_tag=method.delivery_tag)
        print("Ack")
    elif outcome is Acktype.NACK_DISCARD:
        channel.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
        print("NackDiscard")
    elif outcome is Acktype.NACK_REQUEUE:
        channel.basic_nack(delivery_tag=method.delivery_tag, requeue=True)
        print("NackRequeue")
    return outcome


def _body_decoder(
    parse: Callable[[bytes], Any], convert: Optional[Callable[[Any], Any]]
) -> Callable[[bytes], Any]:
    if convert is None:
        return parse

    def decode(body: bytes) -> Any:
        return convert(parse(body))

    return decode


def _subscribe(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], Acktype],
    decode: Callable[[bytes], Any],
) -> Any:
    try:
        channel, name = declare_and_bind(connection, exchange, queue_name, key, queue_type)
    except PubSubError as exc:
        raise PubSubError(f"error checking and binding queue: {exc}") from exc
    try:
        channel.basic_qos(prefetch_count=PREFETCH_COUNT)
    except AMQPError as exc:
        raise PubSubError(f"could not set QoS: {exc}") from exc

    def on_message(ch: Any, method: Any, _properties: Any, body: bytes) -> None:
        handle_delivery(ch, method, body, decode, handler)

    try:
        channel.basic_consume(queue=name, on_message_callback=on_message, auto_ack=False)
    except AMQPError as exc:
        raise PubSubError(f"error consuming and delivering: {exc}") from exc
    return channel


def subscribe_json(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], Acktype],
    decoder: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """Consume JSON messages into ``handler``; returns the consuming channel."""
    return _subscribe(
        connection, exchange, queue_name, key, queue_type, handler,
        _body_decoder(json.loads, decoder),
    )


def subscribe_gob(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], Acktype],
    decoder: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """Consume binary messages into ``handler``; returns the consuming channel."""
    return _subscribe(
        connection, exchange, queue_name, key, queue_type, handler,
        _body_decoder(decode_binary, decoder),
    )