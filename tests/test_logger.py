import logging

import structlog

from typebinder.logger import LOGGER_NAME, configure_logging


def test_configure_logging_json():
    try:
        configure_logging(debug=True, json_format=True)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger(LOGGER_NAME).propagate is True
    finally:
        configure_logging()

    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    assert logging.getLogger().level == logging.INFO
