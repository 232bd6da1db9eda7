from __future__ import annotations

"""Abstraction for publishing bytes to a bound channel.

Nodes depend on this interface rather than the concrete RabbitMQ client so
the transport can be replaced (or faked in tests) without touching the
price logic.
"""

from abc import ABC, abstractmethod
from typing import Optional


class Publisher(ABC):
    """Minimal interface required by the stream bridge for sending data."""

    @abstractmethod
    def publish(self, data: bytes, *, routing_key: Optional[str] = None) -> None:
        """Send *data* to the downstream transport.

        `routing_key` is transport-specific and therefore optional;
        implementations that do not route by key can ignore it.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection."""
