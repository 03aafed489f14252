# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the structured JSON logger.

We verify:
  - output is valid JSON with the mandatory fields
  - extra context fields get merged into the JSON
  - set_log_level re-levels existing plugship loggers
  - every logger shares one log file handler, closed by close_log_file
"""

import json
import logging
from pathlib import Path

import pytest

from plugship.logging.logger import close_log_file, get_logger, set_log_level


@pytest.fixture(autouse=True)
def _reset_loggers() -> None:
    """
    Drop handlers created by these tests so each one starts clean, and
    detach any log files set_log_level added to the package's own loggers.
    """
    yield  # type: ignore[misc]
    close_log_file()
    for name in list(logging.Logger.manager.loggerDict):
        if not name.startswith("plugship"):
            continue
        logger = logging.getLogger(name)
        if name.startswith("plugship.test"):
            stale = list(logger.handlers)
        else:
            stale = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        for handler in stale:
            handler.close()
            logger.removeHandler(handler)


class TestJsonOutput:
    def test_mandatory_fields_are_present(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("plugship.test.fields", log_level="INFO")
        logger.info("Stage started")

        parsed = json.loads(capsys.readouterr().out.strip())
        assert parsed["level"] == "INFO"
        assert parsed["module"] == "plugship.test.fields"
        assert parsed["msg"] == "Stage started"
        assert "ts" in parsed

    def test_extra_fields_are_included(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("plugship.test.extra", log_level="DEBUG")
        logger.info("Stage failed", extra={"stage": "build", "exit_code": 2, "command": ["dotnet", "build"]})

        parsed = json.loads(capsys.readouterr().out.strip())
        assert parsed["stage"] == "build"
        assert parsed["exit_code"] == 2
        assert parsed["command"] == ["dotnet", "build"]

    def test_repeated_get_logger_does_not_stack_handlers(self) -> None:
        first = get_logger("plugship.test.stack")
        second = get_logger("plugship.test.stack")
        assert first is second
        assert len(second.handlers) == 1

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            get_logger("plugship.test.bad", log_level="LOUD")


class TestSetLogLevel:
    def test_relevels_existing_loggers(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("plugship.test.relevel", log_level="INFO")
        logger.debug("hidden")
        assert capsys.readouterr().out == ""

        set_log_level("DEBUG")
        logger.debug("shown")
        assert json.loads(capsys.readouterr().out.strip())["msg"] == "shown"
        set_log_level("INFO")

    def test_attaches_log_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        logger = get_logger("plugship.test.file", log_level="INFO")
        log_file = tmp_path / "logs" / "build.log"

        set_log_level("INFO", log_file)
        logger.warning("Artifact missing", extra={"path": "dist/x.zip"})
        set_log_level("INFO")

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["path"] == "dist/x.zip"

    def test_loggers_share_one_file_handler(self, tmp_path: Path) -> None:
        first = get_logger("plugship.test.share_a")
        second = get_logger("plugship.test.share_b")

        set_log_level("INFO", tmp_path / "build.log")
        set_log_level("DEBUG", tmp_path / "build.log")

        first_files = [h for h in first.handlers if isinstance(h, logging.FileHandler)]
        second_files = [h for h in second.handlers if isinstance(h, logging.FileHandler)]
        assert len(first_files) == 1
        assert first_files == second_files

    def test_close_log_file_detaches_and_closes(self, tmp_path: Path) -> None:
        logger = get_logger("plugship.test.close")
        set_log_level("INFO", tmp_path / "build.log")
        handler = next(h for h in logger.handlers if isinstance(h, logging.FileHandler))

        close_log_file()

        assert handler not in logger.handlers
        assert handler.stream is None
        close_log_file()

    def test_new_log_file_replaces_the_old_one(self, tmp_path: Path) -> None:
        logger = get_logger("plugship.test.switch")
        set_log_level("INFO", tmp_path / "first.log")
        set_log_level("INFO", tmp_path / "second.log")
        logger.info("after switch")

        files = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert [Path(h.baseFilename).name for h in files] == ["second.log"]
        assert "after switch" not in (tmp_path / "first.log").read_text(encoding="utf-8")
        assert "after switch" in (tmp_path / "second.log").read_text(encoding="utf-8")

    def test_unusable_log_path_raises_oserror(self, tmp_path: Path) -> None:
        get_logger("plugship.test.blocked")
        (tmp_path / "blocker").write_text("", encoding="utf-8")
        with pytest.raises(OSError):
            set_log_level("INFO", tmp_path / "blocker" / "build.log")
