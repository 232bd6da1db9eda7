import logging
import signal
from multiprocessing import Process

from common.communicator import Communicator
from common.stream_bridge import StreamBridge, rabbit_consumer_factory, rabbit_producer_factory
from price_calculator.config_init import initialize_config
from price_calculator.calculator import PriceCalculator
from protocol.utils.logger import config_logger


def create_calculator(config, producer_factory=None, consumer_factory=None):
    if producer_factory is None:
        producer_factory = rabbit_producer_factory(config["rabbit_host"])
    if consumer_factory is None:
        consumer_factory = rabbit_consumer_factory(config["rabbit_host"], config["requeue_on_error"])

    bridge = StreamBridge(config["bindings"], producer_factory)
    return PriceCalculator(
        bridge,
        config["bindings"],
        consumer_factory,
        input_channel=config["input_channel"],
        output_channel=config["output_channel"],
    )


def main():
    config = initialize_config()
    config_logger(config["logging_level"])

    calculator = None
    comms = None
    comms_process = None
    try:
        if config["hc_port"]:
            comms = Communicator(config["hc_port"])
            comms_process = Process(target=comms.start, args=())
            comms_process.start()

        calculator = create_calculator(config)

        def _handle_shutdown(signum, _frame):
            logging.info(f"Received signal {signum}. Shutting down gracefully...")
            calculator.stop()

        signal.signal(signal.SIGTERM, _handle_shutdown)
        signal.signal(signal.SIGINT, _handle_shutdown)

        calculator.run()
    except KeyboardInterrupt:
        logging.info("Price calculator stopped by user")
    except Exception as e:
        logging.error(f"Price calculator error: {e}", exc_info=True)
    finally:
        if calculator:
            calculator.stop()
        if comms_process:
            comms_process.terminate()
            comms_process.join()
        if comms:
            comms.stop()
        logging.info("Price calculator stopped")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logging.info("Starting price calculator module")
    main()
