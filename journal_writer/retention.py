"""Housekeeping for rotated sink files: gzip and pruning by age and count.

Rotated files are named ``<filename>.<YYYYmmdd_HHMMSS_ffffff>`` (UTC), with
``.gz`` appended once compressed. Anything else in the target directory is
left alone.
"""

import gzip
import logging
import os
import shutil
from datetime import datetime, timezone, timedelta

from journal_writer.config import SinkConfig

logger = logging.getLogger(__name__)

ROTATED_STAMP = "%Y%m%d_%H%M%S_%f"


def rotated_name(filename: str, when: datetime) -> str:
    return f"{filename}.{when.strftime(ROTATED_STAMP)}"


def rotation_time(name: str, filename: str) -> datetime | None:
    """Rotation time encoded in *name*, or None if it is not a rotated file."""
    prefix = filename + "."
    if not name.startswith(prefix):
        return None
    stamp = name[len(prefix):].removesuffix(".gz")
    try:
        return datetime.strptime(stamp, ROTATED_STAMP).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def list_rotated(config: SinkConfig) -> list[tuple[datetime, str]]:
    """(rotation time, name) for every rotated file, oldest first."""
    found = []
    with os.scandir(config.target_dir) as entries:
        for entry in entries:
            if not entry.is_file():
                continue
            when = rotation_time(entry.name, config.filename)
            if when is not None:
                found.append((when, entry.name))
    found.sort()
    return found


def gzip_rotated(path: str) -> str:
    """Compress *path* into ``<path>.gz`` and remove the original.

    The archive is written as ``<path>.gz.part`` and renamed when complete,
    so an interrupted run never leaves a truncated ``.gz``.
    """
    gz_path = path + ".gz"
    part = gz_path + ".part"
    try:
        with open(path, "rb") as src, gzip.open(part, "wb") as dst:
            shutil.copyfileobj(src, dst)
        os.replace(part, gz_path)
    except OSError:
        if os.path.exists(part):
            os.remove(part)
        raise
    os.remove(path)
    return gz_path


def prune(config: SinkConfig, now: datetime) -> list[str]:
    """Delete rotated files past ``max_age_days``, then the oldest beyond ``max_file_count``."""
    cutoff = now - timedelta(days=config.max_age_days)
    rotated = list_rotated(config)
    expired = [name for when, name in rotated if when < cutoff]
    recent = [name for when, name in rotated if when >= cutoff]
    surplus = recent[:max(0, len(recent) - config.max_file_count)]

    removed = expired + surplus
    for name in removed:
        os.remove(os.path.join(config.target_dir, name))
    if removed:
        logger.info("Purged %d rotated file(s): %s", len(removed), ", ".join(removed))
    return removed
