from __future__ import annotations

"""Channel bindings and the bridge that publishes to them.

A *channel* is the logical name a node sends to or receives from (for example
``price-calculator-out-0``). Which exchange, routing key and queue a channel
maps to is decided by the ``[BINDING <channel>]`` sections of the node's
``config.ini``, never by the node code.
"""

import logging
import os
from configparser import ConfigParser
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional

from protocol.protocol import encode_price
from protocol.rabbit_protocol import RabbitMQ

from .publisher import Publisher
from .rabbit_publisher import RabbitPublisher

BINDING_PREFIX = "BINDING "


class UnknownChannelError(KeyError):
    """Raised when sending to or consuming from a channel with no binding."""


@dataclass(frozen=True)
class Binding:
    channel: str
    destination: str
    exchange_type: str = "direct"
    routing_key: str = ""
    queue: str = ""


def _env_prefix(channel: str) -> str:
    return channel.upper().replace("-", "_")


def load_bindings(config: ConfigParser) -> Dict[str, Binding]:
    """Build the channel bindings declared in *config*.

    Each value can be overridden with ``<CHANNEL>_<KEY>`` in the environment,
    e.g. ``PRICE_CALCULATOR_OUT_0_DESTINATION``.
    """
    bindings = {}
    for section in config.sections():
        if not section.startswith(BINDING_PREFIX):
            continue

        channel = section[len(BINDING_PREFIX):].strip()
        prefix = _env_prefix(channel)
        values = config[section]
        try:
            binding = Binding(
                channel=channel,
                destination=os.getenv(f"{prefix}_DESTINATION", values["DESTINATION"]),
                exchange_type=os.getenv(f"{prefix}_TYPE", values.get("TYPE", "direct")),
                routing_key=os.getenv(f"{prefix}_ROUTING_KEY", values.get("ROUTING_KEY", "")),
                queue=os.getenv(f"{prefix}_QUEUE", values.get("QUEUE", "")),
            )
        except KeyError as e:
            raise KeyError(f"Key was not found in binding {channel}. Error: {e}. Aborting server")

        bindings[channel] = binding
        logging.info(f"Channel {channel} bound to exchange {binding.destination} ({binding.exchange_type}), key '{binding.routing_key}'")

    return bindings


def get_binding(bindings: Dict[str, Binding], channel: str) -> Binding:
    try:
        return bindings[channel]
    except KeyError:
        raise UnknownChannelError(f"No binding configured for channel {channel}") from None


def rabbit_producer_factory(host: str) -> Callable[[Binding], Publisher]:
    def create(binding: Binding) -> Publisher:
        producer = RabbitMQ(binding.destination, binding.queue, binding.routing_key, binding.exchange_type, host=host)
        return RabbitPublisher(producer)

    return create


def rabbit_consumer_factory(host: str, requeue_on_error: bool = False) -> Callable[[Binding], RabbitMQ]:
    def create(binding: Binding) -> RabbitMQ:
        return RabbitMQ(
            binding.destination,
            binding.queue,
            binding.routing_key,
            binding.exchange_type,
            host=host,
            prefetch_count=1,
            requeue_on_error=requeue_on_error,
        )

    return create


class StreamBridge:
    """Sends payloads to channels by name.

    One producer is created per channel on first use and reused afterwards.
    Sends are fire-and-forget: nothing is awaited beyond the transport call
    and errors from it propagate to the caller.
    """

    def __init__(
        self,
        bindings: Dict[str, Binding],
        producer_factory: Callable[[Binding], Publisher],
        encoder: Callable[[object], bytes] = encode_price,
    ) -> None:
        self._bindings = bindings
        self._producer_factory = producer_factory
        self._encoder = encoder
        self._producers: Dict[str, Publisher] = {}
        self._lock = Lock()

    def _producer_for(self, channel: str) -> Publisher:
        with self._lock:
            producer = self._producers.get(channel)
            if producer is None:
                binding = get_binding(self._bindings, channel)
                producer = self._producer_factory(binding)
                self._producers[channel] = producer
                logging.info(f"Created producer for channel {channel}")
            return producer

    def send(self, channel: str, payload: object, *, routing_key: Optional[str] = None) -> None:
        producer = self._producer_for(channel)
        data = payload if isinstance(payload, (bytes, bytearray)) else self._encoder(payload)
        producer.publish(data, routing_key=routing_key)
        logging.debug(f"Sent {data!r} to channel {channel}")

    def close(self) -> None:
        with self._lock:
            producers, self._producers = self._producers, {}

        for channel, producer in producers.items():
            try:
                producer.close()
            except Exception as e:
                logging.error(f"Error closing producer for channel {channel}: {e}")
