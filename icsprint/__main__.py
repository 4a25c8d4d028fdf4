"""Command-line entry for icsprint.

Parses arguments, merges them over the config file, runs the pipeline and
writes the document. Nothing is written unless the whole pipeline succeeds.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

from . import __version__
from .config_loader import Config, load_config
from .exceptions import ICSPrintError
from .logging_setup import configure_logging
from .pipeline import generate_document
from .timezone_utils import get_display_timezone

logger = logging.getLogger("icsprint")


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for icsprint CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="icsprint",
        description="Render a calendar subscription as a printable HTML document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  icsprint https://example.com/team.ics                   # All events to calendar.html
  icsprint URL -p "game|match" --all -o games.html        # Matching events, full detail
  icsprint URL -p cancelled --invert -t "Season" -o -     # Non-matching events to stdout
        """,
    )

    parser.add_argument("url", nargs="?", help="Calendar subscription URL (or `url` in config)")
    parser.add_argument("-o", "--output", help="Output file, '-' for stdout (default: calendar.html)")
    parser.add_argument("-p", "--pattern", help="Regular expression to filter events")
    parser.add_argument(
        "-v", "--invert", action="store_true", default=None, help="Keep events that do NOT match"
    )
    parser.add_argument(
        "-c", "--case-sensitive", action="store_true", default=None, help="Case-sensitive matching"
    )
    parser.add_argument(
        "-t", "--title", help="Document title (default: the feed's calendar name, else Calendar)"
    )
    parser.add_argument("--summary", action="store_true", default=None, help="Show summaries")
    parser.add_argument("--meta", action="store_true", default=None, help="Show location and time")
    parser.add_argument("--desc", action="store_true", default=None, help="Show descriptions")
    parser.add_argument("--uid", action="store_true", default=None, help="Show event UIDs")
    parser.add_argument("--all", action="store_true", help="Show summaries, meta, descriptions and UIDs")
    parser.add_argument("--timezone", metavar="TZ", help="IANA display time zone (default: local)")
    parser.add_argument(
        "--strict", action="store_true", default=None, help="Fail on the first undecodable event"
    )
    parser.add_argument("--config", metavar="PATH", help="YAML/JSON config file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def _merge_config(cfg: Config, args: argparse.Namespace) -> Config:
    """Apply command-line values over the loaded config."""
    toggles = {}
    for name in ("summary", "meta", "desc", "uid"):
        value = True if args.all else getattr(args, name)
        toggles[f"include_{name}"] = value

    return cfg.with_overrides(
        url=args.url,
        output=args.output,
        pattern=args.pattern,
        invert=args.invert,
        case_sensitive=args.case_sensitive,
        title=args.title,
        timezone=args.timezone,
        strict=args.strict,
        **toggles,
    )


def write_output(document: str, output: str) -> None:
    """Write the document to a file atomically, or to stdout for ``-``."""
    if output == "-":
        sys.stdout.write(document)
        sys.stdout.flush()
        return

    target = Path(output)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent or Path("."))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(document)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def run(argv: Optional[list[str]] = None) -> int:
    """Run the CLI and return the process exit status."""
    args = _create_parser().parse_args(argv)

    try:
        cfg = _merge_config(load_config(args.config), args)
    except (OSError, ValueError) as e:
        print(f"icsprint: config error: {e}", file=sys.stderr)
        return 2

    configure_logging(cfg.log_level, debug_mode=args.debug)

    if not cfg.url:
        print("icsprint: no calendar URL given (argument or `url` in config)", file=sys.stderr)
        return 2

    try:
        tz = get_display_timezone(cfg.timezone)
        outcome = asyncio.run(
            generate_document(
                cfg.to_source(),
                cfg.to_options(),
                settings=cfg,
                display_timezone=tz,
                strict=cfg.strict,
            )
        )
        write_output(outcome.document, cfg.output)
    except ICSPrintError as e:
        logger.debug("Run failed", exc_info=True)
        print(f"icsprint: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"icsprint: cannot write {cfg.output}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    destination = "stdout" if cfg.output == "-" else cfg.output
    print(
        f"Kept {outcome.events_kept} of {outcome.events_total} events → {destination}",
        file=sys.stderr,
    )
    return 0


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
