"""
Logging setup for the ``fork-engine`` CLI.

Engine modules only ever call ``logging.getLogger(__name__)``. Handlers are
owned by whoever embeds the engine; the CLI installs them through
``configure_logging(config.logging)``.

Output goes to stderr so that the JSON documents the CLI prints on stdout can
be piped. With ``json_format = true`` each record becomes one line::

    {"ts": "2026-10-18T15:00:00Z", "level": "INFO", "logger": "fork_engine.service", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fork_engine.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class JsonLineFormatter(logging.Formatter):
    """``ts``/``level``/``logger``/``msg``, plus ``exc`` when a traceback is attached."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def build_handlers(config: "LoggingConfig") -> list[logging.Handler]:
    """stderr handler, plus a file handler when ``config.log_file`` is set."""
    formatter: logging.Formatter = (
        JsonLineFormatter() if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: "LoggingConfig") -> None:
    """Replace the root logger's handlers according to ``config``."""
    logging.basicConfig(level=config.level, handlers=build_handlers(config), force=True)
    # Tree expansion runs on an event loop; its selector chatter is noise.
    logging.getLogger("asyncio").setLevel(logging.WARNING)
