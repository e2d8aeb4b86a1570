"""Tailing loop: journal -> formatter -> sink, with cursor commits.

States run ``SEEKING -> READING <-> DELIVERING -> STOPPED``. The blocking
read is the only suspension point; the shutdown flag is checked after each
delivery and after each read timeout, so at most one record is delivered
once the flag is set.
"""

import logging
from enum import Enum

from journal_writer.cursor import CursorStore
from journal_writer.errors import (
    FatalError,
    MissingFieldError,
    RecordError,
    StartupError,
    StorageError,
)
from journal_writer.formatter import format_record
from journal_writer.models import LogRecord
from journal_writer.shutdown import ShutdownFlag
from journal_writer.source import LogSource

logger = logging.getLogger(__name__)


class LoopState(Enum):
    SEEKING = "seeking"
    READING = "reading"
    DELIVERING = "delivering"
    STOPPED = "stopped"


class TailingLoop:
    def __init__(
        self,
        source: LogSource,
        sink,
        cursor_store: CursorStore,
        shutdown: ShutdownFlag,
        read_timeout: float | None = 1.0,
        cursor_save_interval: int = 1,
    ):
        self._source = source
        self._sink = sink
        self._cursor = cursor_store
        self._shutdown = shutdown
        self._read_timeout = read_timeout
        self._save_interval = cursor_save_interval
        self._pending_token: str | None = None
        self._unsaved = 0
        self.state = LoopState.SEEKING
        self.delivered = 0
        self.skipped = 0
        self.cursor_failures = 0

    def seek(self) -> None:
        """Position the source just before the first undelivered record."""
        self.state = LoopState.SEEKING
        try:
            self._cursor.prepare()
            token = self._cursor.load()
        except StorageError as e:
            raise StartupError(f"Recovering cursor: {e}") from e

        try:
            if token is None:
                logger.info("No cursor file at %s, starting from the journal tail", self._cursor.path)
                self._source.seek_tail()
            else:
                logger.info("Resuming after cursor from %s", self._cursor.path)
                self._source.seek_cursor(token)
            self._source.previous()
        except (OSError, ValueError) as e:
            raise StartupError(f"Seeking journal: {e}") from e

    def deliver(self, record: LogRecord) -> bool:
        """Format, write and commit one record. Returns False if it was skipped."""
        self.state = LoopState.DELIVERING
        try:
            line = format_record(record)
        except MissingFieldError as e:
            self.skipped += 1
            logger.error("Skipping record at %s: %s", record.position_token or "<no cursor>", e)
            return False

        self._sink.write_line(line)
        self.delivered += 1

        if record.position_token is None:
            logger.warning("Record has no cursor, position not saved")
            return True

        self._pending_token = record.position_token
        self._unsaved += 1
        if self._unsaved >= self._save_interval:
            self._commit()
        return True

    def _commit(self) -> None:
        if self._pending_token is None:
            return
        try:
            self._cursor.save(self._pending_token)
        except StorageError as e:
            self.cursor_failures += 1
            logger.error("Cursor not saved, will retry with the next record: %s", e)
            return
        self._pending_token = None
        self._unsaved = 0

    def _read(self) -> LogRecord | None:
        self.state = LoopState.READING
        try:
            return self._source.next_record(self._read_timeout)
        except OSError as e:
            raise FatalError(f"Iterating over journal entries: {e}") from e
        except RecordError as e:
            self.skipped += 1
            logger.error("Skipping entry at %s: %s", e.position_token or "<no cursor>", e)
            return None

    def run(self) -> None:
        """Seek, then deliver records until the shutdown flag is observed."""
        self.seek()
        while True:
            record = self._read()
            if record is not None:
                self.deliver(record)
            if self._shutdown.is_set():
                logger.info("Obeying exit flag")
                break
        self._commit()
        self.state = LoopState.STOPPED
        logger.info(
            "Stopped: %d delivered, %d skipped, %d cursor save failures",
            self.delivered, self.skipped, self.cursor_failures,
        )
