"""Shared fixtures: an in-memory transport so no broker is needed."""

import random

import pytest

from common.publisher import Publisher
from common.stream_bridge import Binding, StreamBridge


class InMemoryPublisher(Publisher):
    """Records every published body instead of sending it."""

    def __init__(self, binding):
        self.binding = binding
        self.sent = []
        self.closed = False

    def publish(self, data, *, routing_key=None):
        self.sent.append((data, routing_key))

    def close(self):
        self.closed = True


class FailingPublisher(InMemoryPublisher):
    def publish(self, data, *, routing_key=None):
        raise ConnectionError("broker unreachable")


class InMemoryFactory:
    def __init__(self, publisher_class=InMemoryPublisher):
        self.publisher_class = publisher_class
        self.created = {}

    def __call__(self, binding):
        publisher = self.publisher_class(binding)
        self.created[binding.channel] = publisher
        return publisher

    def bodies(self, channel):
        return [data for data, _ in self.created[channel].sent]


@pytest.fixture
def bindings():
    return {
        "price-calculator-out-0": Binding("price-calculator-out-0", "PRICE.IN.EXCHANGE", "direct", "price.in", "PRICE.IN.QUEUE"),
        "priceCalculator-in-0": Binding("priceCalculator-in-0", "PRICE.IN.EXCHANGE", "direct", "price.in", "PRICE.IN.QUEUE"),
        "priceCalculator-out-0": Binding("priceCalculator-out-0", "PRICE.PERCENTAGE.EXCHANGE", "direct", "price.percentage", "PRICE.PERCENTAGE.IN.QUEUE"),
    }


@pytest.fixture
def producer_factory():
    return InMemoryFactory()


@pytest.fixture
def failing_producer_factory():
    return InMemoryFactory(FailingPublisher)


@pytest.fixture
def bridge(bindings, producer_factory):
    return StreamBridge(bindings, producer_factory)


@pytest.fixture
def seeded_rng():
    return random.Random(42)
