"""Tests for duplo's logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from duplo.logging_config import get_logger, set_verbosity, setup_logging


@pytest.fixture(autouse=True)
def restore_duplo_logger():
    logger = logging.getLogger("duplo")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


class TestSetupLogging:
    """Test handler and level configuration."""

    @pytest.mark.parametrize(
        "verbosity, level",
        [("quiet", logging.ERROR), ("normal", logging.WARNING), ("verbose", logging.DEBUG)],
    )
    def test_levels(self, verbosity, level):
        assert setup_logging(verbosity).level == level

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_log_file(self, tmp_path):
        log = tmp_path / "run.log"
        logger = setup_logging("verbose", log_file=str(log))
        get_logger("scanner").debug("pair scanned")
        for handler in logger.handlers:
            handler.flush()
        assert "duplo.scanner - DEBUG - pair scanned" in log.read_text(encoding="utf-8")

    def test_set_verbosity_keeps_handlers(self, tmp_path):
        logger = setup_logging("normal", log_file=str(tmp_path / "run.log"))
        set_verbosity("verbose")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2


class TestGetLogger:
    """Test logger namespacing."""

    def test_prefixes_bare_names(self):
        assert get_logger("loader").name == "duplo.loader"

    def test_keeps_package_names(self):
        assert get_logger("duplo.core").name == "duplo.core"
