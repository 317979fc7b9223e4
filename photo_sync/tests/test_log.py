import io
import logging
import os
from datetime import datetime

import pytest
from rich.console import Console
from rich.logging import RichHandler

from log import level_for_verbosity, parse_level, setup_logging, temp_log_file


@pytest.fixture
def clean_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestLevelForVerbosity:
    @pytest.mark.parametrize("verbosity, level", [
        (0, logging.INFO),
        (1, logging.DEBUG),
        (2, logging.DEBUG),
        (-1, logging.WARNING),
        (-2, logging.ERROR),
        (-3, logging.CRITICAL),
        (-10, logging.CRITICAL),
    ])
    def test_levels(self, verbosity, level):
        assert level_for_verbosity(verbosity) == level


class TestParseLevel:
    def test_names(self):
        assert parse_level("WARNING") == logging.WARNING
        assert parse_level(" debug ") == logging.DEBUG

    def test_unknown(self):
        assert parse_level("LOUD") is None
        assert parse_level("") is None
        assert parse_level(None) is None


class TestTempLogFile:
    def test_name(self):
        path = temp_log_file(datetime(2019, 3, 1, 10, 15, 30))
        assert os.path.basename(path) == "photo_sync_2019-03-01_10-15-30.log"


class TestSetupLogging:
    def test_console_and_file(self, tmp_path, clean_root):
        log_file = tmp_path / "run.log"
        stream = io.StringIO()

        handler = setup_logging(-1, str(log_file), Console(file=stream, width=200))
        logging.getLogger("photo_sync.test").info("only in the file")
        logging.getLogger("photo_sync.test").warning("everywhere")

        assert isinstance(handler, RichHandler)
        assert handler.level == logging.WARNING
        assert "everywhere" in stream.getvalue()
        assert "only in the file" not in stream.getvalue()
        text = log_file.read_text()
        assert "only in the file" in text
        assert "everywhere" in text

    def test_without_file(self, clean_root):
        before = len(clean_root.handlers)
        setup_logging(0, None, Console(file=io.StringIO()))
        assert len(clean_root.handlers) == before + 1
