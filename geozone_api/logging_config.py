# logging_config.py
# Shared logger setup

import logging

from geozone_api.config import LOG_LEVEL

ROOT_LOGGER = "geozone_api"


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger under the app namespace, configuring the root once."""
    root = logging.getLogger(ROOT_LOGGER)

    # Avoid duplicate handlers on re-import (tests, reloads)
    if not root.handlers:
        root.setLevel(LOG_LEVEL)
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        root.addHandler(sh)

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return root.getChild(name)
