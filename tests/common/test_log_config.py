"""Tests for storefront/common/log_config.py"""

import logging
import sys

import pytest

from storefront.common.log_config import PACKAGE_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_default_level_is_info(self):
        logger = setup_logging()
        assert logger.name == "storefront"
        assert logger.level == logging.INFO

    def test_verbose_sets_debug(self):
        assert setup_logging(verbose=True).level == logging.DEBUG

    def test_quiet_filters_console_only(self, tmp_path):
        log_file = tmp_path / "storefront.log"
        logger = setup_logging(quiet=True, log_file=str(log_file))
        console, file_handler = logger.handlers

        assert logger.level == logging.INFO
        assert console.level == logging.WARNING
        assert file_handler.level == logging.NOTSET

    def test_console_outputs_to_stderr(self):
        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert logger.handlers[0].stream is sys.stderr

    def test_log_file_records_package_messages(self, tmp_path):
        log_file = tmp_path / "logs" / "storefront.log"
        setup_logging(quiet=True, log_file=str(log_file))

        logging.getLogger("storefront.checkout.service").info("Order ORD-1 created")
        for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "INFO" in content
        assert "storefront.checkout.service: Order ORD-1 created" in content

    def test_repeated_setup_keeps_single_console_handler(self):
        setup_logging()
        logger = setup_logging(verbose=True)
        assert len(logger.handlers) == 1
