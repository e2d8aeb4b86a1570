"""Record model for entries read from the journal."""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any


class Severity(IntEnum):
    """Syslog severity ordinals, most severe first."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7

    @property
    def long_name(self) -> str:
        return _LONG_NAMES[self]

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Parse a PRIORITY field value, defaulting to EMERGENCY.

        Accepts ints, and str or bytes made only of ASCII digits (no
        surrounding whitespace). Anything missing, out of range
        or unparseable maps to the most severe level so that a malformed
        priority never lowers a record's visibility.
        """
        if isinstance(value, bytes):
            value = value.decode("ascii", errors="replace")
        if isinstance(value, str):
            if not (value.isascii() and value.isdigit()):
                return cls.EMERGENCY
            value = int(value)
        if not isinstance(value, int) or isinstance(value, bool):
            return cls.EMERGENCY
        try:
            return cls(value)
        except ValueError:
            return cls.EMERGENCY


_LONG_NAMES = {
    Severity.EMERGENCY: "Emergency",
    Severity.ALERT: "Alert",
    Severity.CRITICAL: "Critical",
    Severity.ERROR: "Error",
    Severity.WARNING: "Warning",
    Severity.NOTICE: "Notice",
    Severity.INFORMATIONAL: "Informational",
    Severity.DEBUG: "Debug",
}


@dataclass(frozen=True)
class LogRecord:
    timestamp: datetime  # reception time, tz-aware UTC
    message: str | None = None
    severity: Any = None  # raw PRIORITY value, parsed at format time
    source_host: str | None = None
    identifier: str | None = None
    position_token: str | None = None
