"""
structlog setup shared by the library and the command line.

Importing this module installs a console configuration so library callers get
readable events without further setup; ``configure_logging`` switches level
and renderer for a run.
"""

import logging
import sys
from typing import List

import structlog

LOGGER_NAME = "typebinder"


def _processors(json_format: bool) -> List[structlog.types.Processor]:
    processors: List[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso" if json_format else "%Y-%m-%d %H:%M:%S"),
    ]
    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(debug: bool = False, json_format: bool = False) -> None:
    """
    Route typebinder events through the stdlib root logger on stderr at
    DEBUG or INFO, rendered for a console or as one JSON object per line.
    """
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
        logger_factory=structlog.stdlib.LoggerFactory(),
        # reconfiguring must reach loggers that already emitted events
        cache_logger_on_first_use=False,
        processors=_processors(json_format),
    )

    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    for handler in root.handlers:
        handler.setLevel(level)

    # the package logger defers to the root configuration
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=False,
    processors=_processors(json_format=False),
)

logger: structlog.BoundLogger = structlog.get_logger(LOGGER_NAME)
