# PACKL v1.0
import logging
from pathlib import Path

import config

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file=None, level=logging.INFO):
    '''Send diagnostic logs to the PACKL log file.
    Console output stays with the rich helpers in cli.ui.
    Returns the log file path in use, or None if it could not be opened.
    '''
    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicate handlers if called more than once
    if getattr(root, '_packl_log_file', None):
        return root._packl_log_file

    log_file = Path(log_file or config.LOG_FILE)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding='utf-8')
    except OSError as e:
        logging.getLogger(__name__).warning("Could not open log file %s: %s", log_file, e)
        return None

    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.addHandler(handler)
    root._packl_log_file = log_file

    logging.getLogger(__name__).info("Logging to %s", log_file)
    return log_file
