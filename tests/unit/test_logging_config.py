"""
Unit tests for process-wide logging setup.
"""

import logging

from core.logging_config import configure_logging


class TestConfigureLogging:
    def test_repeated_calls_add_one_handler(self):
        root = logging.getLogger()
        previous_level = root.level
        try:
            configure_logging("INFO")
            handlers = list(root.handlers)

            configure_logging("DEBUG")

            assert root.handlers == handlers
            assert root.level == logging.DEBUG
            assert not hasattr(root, "_recovery_configured")
        finally:
            root.setLevel(previous_level)
