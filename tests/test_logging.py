"""Tests for logging setup."""

import pytest
import structlog

from qamatch.logging import setup_logging


class TestSetupLogging:
    def test_filters_below_level(self, capsys):
        setup_logging("WARNING")
        log = structlog.get_logger("qamatch.test")

        log.info("hidden_event")
        log.warning("shown_event", records=3)

        err = capsys.readouterr().err
        assert "hidden_event" not in err
        assert "shown_event" in err
        assert "records" in err

    def test_json_output(self, capsys):
        setup_logging("debug", json=True)

        structlog.get_logger("qamatch.test").debug("json_event", generation=2)

        err = capsys.readouterr().err
        assert '"event": "json_event"' in err
        assert '"generation": 2' in err

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging("LOUD")
