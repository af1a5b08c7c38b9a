"""Unit tests for logging setup."""

import logging

import pytest

from helpdesk.core.logging import QUIET_LOGGERS, setup_logging


class TestSetupLogging:
    @pytest.mark.unit
    def test_library_loggers_are_quieted(self, test_settings):
        setup_logging(test_settings)

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    @pytest.mark.unit
    def test_sql_echo_lets_statements_through(self, test_settings):
        setup_logging(test_settings.model_copy(update={"SQL_ECHO": True}))

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

        setup_logging(test_settings)
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
