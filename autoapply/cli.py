"""Command-line entry point: load settings, open the browser, run the automation."""
from __future__ import annotations

import argparse
import signal
import sys
from typing import Sequence

from autoapply.config import ConfigError, load_config
from autoapply.log import get_logger, set_verbose

log = get_logger(__name__)


def _bool_flag(parser: argparse.ArgumentParser, name: str, dest: str, help_text: str) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(f"--{name}", dest=dest, action="store_true", default=None, help=help_text)
    group.add_argument(f"--no-{name}", dest=dest, action="store_false", default=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autoapply",
        description="Apply to LinkedIn Easy Apply jobs from the search results page.",
    )
    parser.add_argument("-c", "--config", help="YAML settings file (default: config/automation.yaml)")
    parser.add_argument("-k", "--keywords", help="search keywords")
    parser.add_argument("-l", "--location", help="search location")
    parser.add_argument("--delay", dest="delay_ms", type=int, help="delay between actions, in ms")
    parser.add_argument("-n", "--max-applications", dest="max_applications", type=int,
                        help="stop after this many submitted applications")
    parser.add_argument("--max-wizard-steps", dest="max_wizard_steps", type=int,
                        help="give up on a wizard after this many steps")
    parser.add_argument("--blacklist-company", dest="blacklist_companies", action="append",
                        help="skip companies containing this text (repeatable)")
    parser.add_argument("--blacklist-title", dest="blacklist_titles", action="append",
                        help="skip titles containing this text (repeatable)")
    _bool_flag(parser, "easy-apply-only", "easy_apply_only", "only apply to Easy Apply postings")
    _bool_flag(parser, "auto-scroll", "auto_scroll", "scroll the results list to load more postings")
    _bool_flag(parser, "headless", "headless", "run the browser without a window")
    _bool_flag(parser, "verbose", "verbose", "log every step")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != "config"}
    try:
        config = load_config(args.config, **overrides)
    except ConfigError as exc:
        log.error("Invalid configuration: %s", exc)
        return 2
    set_verbose(config.verbose)

    from playwright.sync_api import Error as PlaywrightError

    from autoapply.browser import browser_session
    from autoapply.discovery import DiscoveryLoop

    try:
        with browser_session(config) as doc:
            automation = DiscoveryLoop(doc, config)

            def _on_sigint(signum, frame) -> None:
                # First Ctrl-C stops after the current pass; a second one interrupts.
                if not automation.running:
                    raise KeyboardInterrupt
                automation.stop()

            previous = signal.signal(signal.SIGINT, _on_sigint)
            try:
                summary = automation.start()
            finally:
                signal.signal(signal.SIGINT, previous)
    except PlaywrightError as exc:
        log.error("Browser failed: %s", str(exc)[:150].split("\n")[0])
        return 1

    if summary is None:
        return 0
    log.info("Run complete.")
    log.info("  Applied: %d/%d", summary.applied, summary.quota)
    log.info("  Considered: %d (filtered %d, not eligible %d, failed %d)",
             summary.considered, summary.filtered, summary.not_eligible, summary.failed)
    log.info("  Result pages: %d", summary.passes)
    return 1 if summary.errored else 0


if __name__ == "__main__":
    sys.exit(main())
