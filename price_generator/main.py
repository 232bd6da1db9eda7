import logging
import random
import signal
from multiprocessing import Process

from common.communicator import Communicator
from common.stream_bridge import StreamBridge, rabbit_producer_factory
from price_generator.config_init import initialize_config
from price_generator.generator import PriceGenerator
from protocol.utils.logger import config_logger


def create_generator(config, producer_factory=None):
    if producer_factory is None:
        producer_factory = rabbit_producer_factory(config["rabbit_host"])

    bridge = StreamBridge(config["bindings"], producer_factory)
    rng = random.Random(config["random_seed"])

    return PriceGenerator(
        bridge,
        rng,
        channel=config["output_channel"],
        interval_ms=config["price_interval_ms"],
    )


def main():
    config = initialize_config()
    config_logger(config["logging_level"])

    generator = None
    comms = None
    comms_process = None
    try:
        if config["hc_port"]:
            comms = Communicator(config["hc_port"])
            comms_process = Process(target=comms.start, args=())
            comms_process.start()

        generator = create_generator(config)

        def _handle_shutdown(signum, _frame):
            logging.info(f"Received signal {signum}. Shutting down gracefully...")
            generator.stop()

        signal.signal(signal.SIGTERM, _handle_shutdown)
        signal.signal(signal.SIGINT, _handle_shutdown)

        generator.run()
    except KeyboardInterrupt:
        logging.info("Price generator stopped by user")
    except Exception as e:
        logging.error(f"Price generator error: {e}", exc_info=True)
    finally:
        if generator:
            generator.stop()
        if comms_process:
            comms_process.terminate()
            comms_process.join()
        if comms:
            comms.stop()
        logging.info("Price generator stopped")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logging.info("Starting price generator module")
    main()
