import logging
from threading import Event

from common.stream_bridge import get_binding
from protocol.protocol import decode_payload, parse_decimal

PERCENTAGE_FACTOR = 100
PRICE_CALCULATOR_IN = "priceCalculator-in-0"
PRICE_CALCULATOR_OUT = "priceCalculator-out-0"


def calculate_percentage(payload):
    """Turn a decimal price string into its percentage.

    Raises PayloadFormatError when *payload* is not a decimal number. The
    result is not clamped: a price above 1 gives a percentage above 100.
    """
    return parse_decimal(payload) * PERCENTAGE_FACTOR


class PriceCalculator:
    """Consumes prices from the input channel and sends their percentage to
    the output channel, one message out per message in."""

    def __init__(self, bridge, bindings, consumer_factory, input_channel=PRICE_CALCULATOR_IN, output_channel=PRICE_CALCULATOR_OUT):
        self.bridge = bridge
        self.bindings = bindings
        self.consumer_factory = consumer_factory
        self.input_channel = input_channel
        self.output_channel = output_channel
        self.queue_rcv = None
        self.stop_event = Event()

    def _settle_queues(self):
        binding = get_binding(self.bindings, self.input_channel)
        self.queue_rcv = self.consumer_factory(binding)
        logging.info(f"Ready receiving queue with Exchange: {binding.destination}, Name: {binding.queue}, Key: {binding.routing_key}")

    def run(self):
        """Consume until stop() is called."""
        self._settle_queues()
        try:
            self.queue_rcv.consume(callback_func=self.callback, stop_event=self.stop_event)
            logging.info("Price calculator done consuming")
        finally:
            self.bridge.close()

    def callback(self, ch, method, properties, body):
        """Callback function to process messages.

        Errors propagate so the broker wrapper rejects the message; nothing is
        sent for a payload that does not parse.
        """
        result = self.process(decode_payload(body))
        self.bridge.send(self.output_channel, result)

    def process(self, payload):
        result = calculate_percentage(payload)

        logging.info(f"\nRECEIVED PRICE ==> {payload}\nGENERATED PERCENTAGE ==> {result}")
        return result

    def stop(self):
        if self.stop_event.is_set():
            return
        logging.info("Stopping price calculator")
        self.stop_event.set()
