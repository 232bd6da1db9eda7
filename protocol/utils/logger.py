import logging

LOG_FORMAT = '%(asctime)s %(levelname)-8s %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def config_logger(logging_level):
    """
    Python custom logging initialization

    Current timestamp is added to be able to identify in docker
    compose logs the date when the log has arrived
    """
    level = logging_level.upper() if isinstance(logging_level, str) else logging_level

    logging.basicConfig(
        format=LOG_FORMAT,
        level=level,
        datefmt=DATE_FORMAT,
        force=True,
    )
    logging.getLogger("pika").setLevel(logging.ERROR)
