"""Render journal records as single text lines.

Line format::

    <utc-time> <local-time> [<Severity>] <host>: <identifier>: <message>

Both timestamps are ISO-8601 with a numeric offset, truncated to seconds.
"""

from datetime import datetime, timezone, tzinfo

from journal_writer.errors import MissingFieldError
from journal_writer.models import LogRecord, Severity

DEFAULT_HOST = "localhost"


# Every code point str.splitlines() breaks on.
_LINE_BREAKS = str.maketrans(dict.fromkeys("\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029", " "))


def _one_line(value: str) -> str:
    return value.replace("\r\n", " ").translate(_LINE_BREAKS)


def _iso_seconds(ts: datetime) -> str:
    return ts.replace(microsecond=0).isoformat(timespec="seconds")


def format_record(record: LogRecord, local_tz: tzinfo | None = None) -> str:
    """Format *record* as one output line (without trailing newline).

    Raises MissingFieldError if the record carries no message.
    """
    if record.message is None:
        raise MissingFieldError("message")

    ts = record.timestamp
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    utc_time = ts.astimezone(timezone.utc)
    local_time = utc_time.astimezone(local_tz)

    severity = Severity.parse(record.severity)
    host = record.source_host if record.source_host is not None else DEFAULT_HOST
    identifier = record.identifier if record.identifier is not None else ""

    return (
        f"{_iso_seconds(utc_time)} {_iso_seconds(local_time)} "
        f"[{severity.long_name}] {_one_line(host)}: {_one_line(identifier)}: "
        f"{_one_line(record.message)}"
    )
