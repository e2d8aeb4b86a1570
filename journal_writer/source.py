"""Journal reading: the source interface and its systemd adapter."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from journal_writer.errors import FatalError, MalformedFieldError
from journal_writer.models import LogRecord

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

FILES_CHOICES = ("all", "system", "user")


@dataclass(frozen=True)
class SourceOptions:
    files: str = "all"
    only_volatile: bool = False
    only_local: bool = True

    @classmethod
    def from_dict(cls, d: dict) -> "SourceOptions":
        return cls(
            files=d.get("files", "all"),
            only_volatile=bool(d.get("only_volatile", False)),
            only_local=bool(d.get("only_local", True)),
        )


class LogSource:
    """Sequential journal reader with cursor seeking.

    Positioning follows journal semantics: after ``seek_cursor`` or
    ``seek_tail`` the reader sits between entries, and ``previous`` moves
    onto the entry at that location. The following ``next_record`` then
    yields the entry after it.
    """

    def seek_cursor(self, token: str) -> None:
        raise NotImplementedError

    def seek_tail(self) -> None:
        raise NotImplementedError

    def previous(self) -> None:
        raise NotImplementedError

    def next_record(self, timeout: float | None = None) -> LogRecord | None:
        """Block until the next record is available.

        Returns None if *timeout* seconds pass without a new record.
        """
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def _first(value):
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _text(value) -> str | None:
    value = _first(value)
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _reception_time(value) -> datetime:
    if isinstance(value, datetime):
        # naive values are local time, as systemd-python's default converter returns
        return value.astimezone(timezone.utc)
    return _EPOCH + timedelta(microseconds=int(value))


def entry_to_record(entry: dict) -> LogRecord:
    """Map a journal entry dict onto a LogRecord.

    Raises MalformedFieldError when the reception timestamp is missing or
    not a microsecond count.
    """
    token = _text(entry.get("__CURSOR"))
    raw_time = entry.get("__REALTIME_TIMESTAMP")
    try:
        timestamp = _reception_time(raw_time)
    except (TypeError, ValueError, OverflowError) as e:
        raise MalformedFieldError("__REALTIME_TIMESTAMP", raw_time, token) from e
    return LogRecord(
        timestamp=timestamp,
        message=_text(entry.get("MESSAGE")),
        severity=_first(entry.get("PRIORITY")),
        source_host=_text(entry.get("_HOSTNAME")),
        identifier=_text(entry.get("SYSLOG_IDENTIFIER")),
        position_token=token,
    )


class SystemdJournalSource(LogSource):
    """LogSource backed by ``systemd.journal.Reader``."""

    def __init__(self, options: SourceOptions):
        try:
            from systemd import journal
        except ImportError as e:
            raise FatalError("Opening journal: systemd-python is not installed") from e

        flags = 0
        if options.files == "system":
            flags |= journal.SYSTEM
        elif options.files == "user":
            flags |= journal.CURRENT_USER
        elif options.files != "all":
            raise FatalError(f"Opening journal: unknown files selection {options.files!r}")
        if options.only_volatile:
            flags |= journal.RUNTIME_ONLY
        if options.only_local:
            flags |= journal.LOCAL_ONLY

        # Keep raw microseconds and the raw PRIORITY text; both are
        # interpreted by entry_to_record and the formatter.
        converters = {"__REALTIME_TIMESTAMP": int, "PRIORITY": bytes.decode}
        try:
            self._reader = journal.Reader(flags=flags, converters=converters)
        except OSError as e:
            raise FatalError(f"Opening journal: {e}") from e
        logger.debug("Opened journal with flags=%#x (%s)", flags, options)

    def seek_cursor(self, token: str) -> None:
        self._reader.seek_cursor(token)

    def seek_tail(self) -> None:
        self._reader.seek_tail()

    def previous(self) -> None:
        self._reader.get_previous()

    def next_record(self, timeout: float | None = None) -> LogRecord | None:
        entry = self._reader.get_next()
        if not entry:
            self._reader.wait(timeout)
            entry = self._reader.get_next()
            if not entry:
                return None
        logger.debug("Found entry: %s", entry.get("__CURSOR"))
        return entry_to_record(entry)

    def close(self) -> None:
        self._reader.close()
