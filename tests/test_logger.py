"""Tests for loguru setup and the stdlib logging bridge."""

import io
import logging

from modlist.exceptions import ModNotFoundError, NotFoundError, CatalogUnavailableError
from modlist.logger import setup_logger


def test_setup_logger_levels(monkeypatch) -> None:
    monkeypatch.setenv("MODLIST_DEBUG", "1")
    assert setup_logger(sink=io.StringIO(), enqueue=False, colorize=False) == "DEBUG"

    monkeypatch.setenv("MODLIST_DEBUG", "0")
    assert setup_logger(sink=io.StringIO(), enqueue=False, colorize=False) == "INFO"


def test_stdlib_records_reach_loguru() -> None:
    sink = io.StringIO()
    setup_logger(level="info", sink=sink, enqueue=False, colorize=False)

    logging.getLogger("aiohttp.access").warning("GET /mods 200")
    logging.getLogger("sqlalchemy.engine").info("SELECT 1")

    output = sink.getvalue()
    assert "WARNING  | GET /mods 200" in output
    # SQL echo stays quiet outside debug mode
    assert "SELECT 1" not in output


def test_log_file_sink(tmp_path) -> None:
    log_file = tmp_path / "modlist.log"
    setup_logger(level="INFO", sink=io.StringIO(), enqueue=False, log_file=str(log_file))
    logging.getLogger("aiohttp.server").error("boom")
    assert "boom" in log_file.read_text(encoding="utf-8")


def test_errors_carry_codes_and_default_messages() -> None:
    error = ModNotFoundError(context={"modID": "x"})
    assert isinstance(error, NotFoundError)
    assert error.message == "Mod not found"
    assert error.code == "E404"
    assert error.context == {"modID": "x"}
    assert str(error) == "[E404] Mod not found"

    assert str(CatalogUnavailableError("down")) == "[E202] down"
    assert CatalogUnavailableError().message == "Catalog unavailable"
