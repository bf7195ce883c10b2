# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional


class _ConsoleNoiseFilter(logging.Filter):
    """Keep tasklist logs; only warnings and up from third parties (uvicorn access log aside)."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("tasklist") or name.startswith("uvicorn"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    level: Optional[str] = None,
    log_dir: Optional[str | Path] = None,
) -> None:
    """Console handler, plus a file handler when ``log_dir`` (or TASKLIST_LOG_DIR) is set.

    Call once at startup, before the app module is imported.
    """
    level_name = (level or os.getenv("TASKLIST_LOG_LEVEL", "INFO")).strip().upper()
    console_level = logging.getLevelName(level_name)
    if not isinstance(console_level, int):
        console_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    log_dir = log_dir or os.getenv("TASKLIST_LOG_DIR")
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path / "tasklist.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
