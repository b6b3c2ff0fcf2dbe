#!/usr/bin/env python3
"""Entry point to run the Easy Apply automation."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from autoapply.cli import main
from autoapply.config import CONFIG_PATH
from autoapply.log import get_logger

log = get_logger(__name__)


def _check_setup() -> None:
    """Mention the settings file when the operator has not created one."""
    if not CONFIG_PATH.exists():
        log.info("No %s found; using defaults and command-line options.", CONFIG_PATH.name)
        log.info("  Copy config/automation.example.yaml to config/automation.yaml to customise.")


if __name__ == "__main__":
    if "-c" not in sys.argv and "--config" not in sys.argv:
        _check_setup()
    sys.exit(main())
