from configparser import ConfigParser
import os
import logging

from common.stream_bridge import load_bindings

CONFIG_FILE = "config.ini"


def initialize_config(config_file=CONFIG_FILE):
    """ Parse env variables or config file to find program config params

    Function that search and parse program configuration parameters in the
    program environment variables first and then in a config file.
    If at least one of the config parameters is not found a KeyError exception
    is thrown. If a parameter could not be parsed, a ValueError is thrown.
    If parsing succeeded, the function returns a dict with config parameters
    """

    config = ConfigParser(interpolation=None)
    config.optionxform = str.upper
    # If config.ini does not exists original config object is not modified
    config.read(config_file)
    config_params = {}

    try:
        config_params["logging_level"] = os.getenv('LOGGING_LEVEL', config["DEFAULT"]["LOGGING_LEVEL"])
        config_params["hc_port"] = _optional_int(os.getenv('HC_PORT', config["DEFAULT"].get("HC_PORT", "")))

        config_params["rabbit_host"] = os.getenv('RABBIT_HOST', config["RABBITMQ"]["RABBIT_HOST"])

        config_params["price_interval_ms"] = int(os.getenv('PRICE_INTERVAL_MS', config["GENERATOR"]["PRICE_INTERVAL_MS"]))
        config_params["output_channel"] = os.getenv('OUTPUT_CHANNEL', config["GENERATOR"]["OUTPUT_CHANNEL"])
        config_params["random_seed"] = _optional_int(os.getenv('RANDOM_SEED', config["GENERATOR"].get("RANDOM_SEED", "")))

        config_params["bindings"] = load_bindings(config)

    except KeyError as e:
        raise KeyError("Key was not found. Error: {} .Aborting server".format(e))
    except ValueError as e:
        raise ValueError("Key could not be parsed. Error: {}. Aborting server".format(e))

    if config_params["price_interval_ms"] <= 0:
        raise ValueError("PRICE_INTERVAL_MS must be positive. Aborting server")

    logging.debug(f"Price generator config: {config_params}")
    return config_params


def _optional_int(value):
    return int(value) if value else None
