#!/usr/bin/env python3
"""journal-writer entry point: ``journal-writer CONFIG``."""

import argparse
import logging
import os
import sys

from journal_writer.config import Config, load_config
from journal_writer.cursor import CursorStore
from journal_writer.errors import JournalWriterError
from journal_writer.shutdown import ShutdownFlag, install_signal_handlers
from journal_writer.sink import RotatingFileSink
from journal_writer.source import LogSource, SystemdJournalSource
from journal_writer.tailer import TailingLoop

logger = logging.getLogger(__name__)


def setup_logging(level: str | None = None) -> None:
    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [journal-writer] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="journal-writer",
        description="Tail the systemd journal into rotating log files.",
    )
    parser.add_argument("config", nargs="?", help="Path to the YAML config file")
    parser.add_argument(
        "--log-level", default=None,
        help="Diagnostic log level (default: $LOG_LEVEL or INFO)",
    )
    return parser


def run(config: Config, shutdown: ShutdownFlag, source: LogSource | None = None) -> TailingLoop:
    """Open sink and source, then tail until *shutdown* is set."""
    sink = RotatingFileSink(config.log_writer_config)
    try:
        if source is None:
            source = SystemdJournalSource(config.source)
        with source:
            loop = TailingLoop(
                source,
                sink,
                CursorStore(config.cursor_file),
                shutdown,
                read_timeout=config.read_timeout,
                cursor_save_interval=config.cursor_save_interval,
            )
            loop.run()
    finally:
        sink.close()
    return loop


def main(argv: list[str] | None = None) -> int:
    parser = build_cli_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not args.config:
        parser.print_help()
        return 0

    try:
        shutdown = ShutdownFlag()
        install_signal_handlers(shutdown)
        config = load_config(args.config)
        logger.info("Using configuration: %s", config)
        logger.info(
            "Writing logs to %s, with cursor: %s",
            config.log_writer_config.target_dir, config.cursor_file,
        )
        run(config, shutdown)
    except JournalWriterError as e:
        logger.error("Error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
