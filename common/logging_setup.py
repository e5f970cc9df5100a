"""
common.logging_setup

Set up standard logging for the transform scripts. Logs go to stderr so
stdout stays free for transform output.
"""
import logging
import os
import sys
from typing import Optional, Union


def setup_logging(level: Optional[Union[int, str]] = None):
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # web3 is only used for hashing, keep it quiet
    logging.getLogger("web3").setLevel(logging.WARNING)
