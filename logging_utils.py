# logging_utils.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level='INFO'):
    """
    Configure the root logger for the command-line scripts.

    Parameters:
        level (str): Logging level name, e.g. 'INFO' or 'DEBUG'.
    """
    # Unknown names fall back to INFO
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)
