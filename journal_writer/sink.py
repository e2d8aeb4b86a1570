"""Rotating file sink: one durable line per journal record."""

import logging
import os
from datetime import datetime, timezone

from journal_writer.config import SinkConfig
from journal_writer.errors import FatalError
from journal_writer.retention import gzip_rotated, prune, rotated_name

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RotatingFileSink:
    """Appends to ``target_dir/filename``, fsyncing every line.

    ``write_line`` returns only once the line is on disk, so the cursor saved
    after it never points past output that a power loss could drop.

    The active file is rotated once it reaches ``max_file_size_bytes`` or its
    period exceeds ``rotation_interval_seconds``. A period starts at the last
    rotation; when the daemon starts on an existing non-empty file it starts
    at that file's mtime, so restarts do not push time-based rotation back.
    """

    def __init__(self, config: SinkConfig, clock=None):
        self._config = config
        self._clock = clock or _utcnow
        self.path = os.path.join(config.target_dir, config.filename)
        try:
            os.makedirs(config.target_dir, exist_ok=True)
            self._period_start = self._resumed_period_start() or self._clock()
            self._file = open(self.path, "a", encoding="utf-8")
        except OSError as e:
            raise FatalError(f"Creating log writer at path {config.target_dir}: {e}") from e

    def _resumed_period_start(self) -> datetime | None:
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return None
        if st.st_size == 0:
            return None
        return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)

    def _rotation_due(self) -> bool:
        if os.fstat(self._file.fileno()).st_size >= self._config.max_file_size_bytes:
            return True
        age = self._clock() - self._period_start
        return age.total_seconds() >= self._config.rotation_interval_seconds

    def _rotate(self) -> str:
        now = self._clock()
        self._file.close()
        rotated = os.path.join(self._config.target_dir, rotated_name(self._config.filename, now))
        os.rename(self.path, rotated)
        self._file = open(self.path, "a", encoding="utf-8")
        self._period_start = now
        logger.info("Rotated %s -> %s", self.path, rotated)
        return rotated

    def _housekeep(self, rotated: str) -> None:
        # The rotated lines are already durable; failures here only cost disk space.
        try:
            if self._config.compression_enabled:
                logger.info("Compressed: %s", gzip_rotated(rotated))
            prune(self._config, self._clock())
        except OSError as e:
            logger.warning("Post-rotation housekeeping failed for %s: %s", rotated, e)

    def write_line(self, line: str) -> None:
        try:
            self._file.write(line + "\n")
            self._file.flush()
            os.fsync(self._file.fileno())
            if not self._rotation_due():
                return
            rotated = self._rotate()
        except OSError as e:
            raise FatalError(f"Writing to {self.path}: {e}") from e
        self._housekeep(rotated)

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
