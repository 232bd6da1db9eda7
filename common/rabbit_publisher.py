from __future__ import annotations

"""RabbitMQ-backed implementation of the *Publisher* abstraction."""

from typing import Optional

from protocol.rabbit_protocol import RabbitMQ

from .publisher import Publisher


class RabbitPublisher(Publisher):
    """Adapter that forwards ``publish`` calls to a RabbitMQ producer."""

    def __init__(self, producer: RabbitMQ) -> None:
        self._producer = producer

    def publish(self, data: bytes, *, routing_key: Optional[str] = None) -> None:
        # The producer defaults to the routing key of its binding; only
        # override it when the caller provides one.
        if routing_key is None:
            self._producer.publish(data)
        else:
            self._producer.publish(data, routing_key=routing_key)

    def close(self) -> None:
        self._producer.close()
