from configparser import ConfigParser
import os

from common.stream_bridge import load_bindings

CONFIG_FILE = "config.ini"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


def initialize_config(config_file=CONFIG_FILE):
    """ Parse env variables or config file to find program config params."""
    config = ConfigParser(interpolation=None)
    config.optionxform = str.upper
    config.read(config_file)

    config_params = {}

    try:
        config_params["logging_level"] = os.getenv('LOGGING_LEVEL', config["DEFAULT"]["LOGGING_LEVEL"])
        hc_port = os.getenv('HC_PORT', config["DEFAULT"].get("HC_PORT", ""))
        config_params["hc_port"] = int(hc_port) if hc_port else None

        config_params["rabbit_host"] = os.getenv('RABBIT_HOST', config["RABBITMQ"]["RABBIT_HOST"])

        config_params["input_channel"] = os.getenv('INPUT_CHANNEL', config["CALCULATOR"]["INPUT_CHANNEL"])
        config_params["output_channel"] = os.getenv('OUTPUT_CHANNEL', config["CALCULATOR"]["OUTPUT_CHANNEL"])
        config_params["requeue_on_error"] = _parse_bool(os.getenv('REQUEUE_ON_ERROR', config["CALCULATOR"].get("REQUEUE_ON_ERROR", "false")))

        config_params["bindings"] = load_bindings(config)

    except KeyError as e:
        raise KeyError(f"Key was not found. Error: {e}. Aborting server")
    except ValueError as e:
        raise ValueError(f"Key could not be parsed. Error: {e}. Aborting server")

    for channel in (config_params["input_channel"], config_params["output_channel"]):
        if channel not in config_params["bindings"]:
            raise KeyError(f"Channel {channel} has no [BINDING {channel}] section. Aborting server")

    return config_params


def _parse_bool(value):
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value}")
