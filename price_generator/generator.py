import logging
import random
from threading import Event

from common.ticker import Ticker

PRICE_CALCULATOR_OUT = "price-calculator-out-0"
DEFAULT_INTERVAL_MS = 10000


class PriceGenerator:
    """Publishes a random price in [0, 1) on every tick of a fixed-rate timer."""

    def __init__(self, bridge, rng=None, channel=PRICE_CALCULATOR_OUT, interval_ms=DEFAULT_INTERVAL_MS):
        self.bridge = bridge
        self.rng = rng if rng is not None else random.Random()
        self.channel = channel
        self.interval_ms = interval_ms
        self.stop_event = Event()
        self.ticker = Ticker(interval_ms / 1000, self.generate_price, stop_event=self.stop_event)

    def generate_price(self):
        """Draws one price and sends it. Publish errors are left to the caller."""
        value = self.rng.random()

        logging.info(f"NEW PRICE ==> {value}")

        self.bridge.send(self.channel, value)
        return value

    def run(self):
        logging.info(f"Generating prices to {self.channel} every {self.interval_ms} ms")
        try:
            self.ticker.run()
        finally:
            self.bridge.close()

    def stop(self):
        if self.stop_event.is_set():
            logging.info("Price generator already stopped")
            return

        logging.info("Stopping price generator")
        self.ticker.stop()
