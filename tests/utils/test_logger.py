import logging
import os
from unittest.mock import patch

from utils.logger import get_logger


def test_get_logger_configures_single_handler():
    logger = get_logger("nexusinv-test-handler")
    get_logger("nexusinv-test-handler")
    assert len(logger.handlers) == 1
    assert logger.handlers[0].formatter._fmt == "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def test_get_logger_level_from_argument():
    assert get_logger("nexusinv-test-level", level="DEBUG").level == logging.DEBUG


def test_get_logger_level_from_env():
    with patch.dict(os.environ, {"NEXUSINV_LOG_LEVEL": "warning"}):
        assert get_logger("nexusinv-test-env").level == logging.WARNING


def test_get_logger_defaults_to_info():
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("NEXUSINV_LOG_LEVEL", None)
        assert get_logger("nexusinv-test-default").level == logging.INFO
