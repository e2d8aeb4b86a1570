"""Durable storage of the journal resume cursor.

The cursor file holds exactly the opaque token last returned by the journal,
with no framing. Writes go to a sibling ``<path>~`` staging file which is
fsynced and then renamed over the target, so a crash leaves either the old
token or the new one, never a partial write.
"""

import logging
import os

from journal_writer.errors import StorageError

logger = logging.getLogger(__name__)

STAGING_SUFFIX = "~"


def staging_path(path: str) -> str:
    return path + STAGING_SUFFIX


def ensure_parent_dir(path: str) -> None:
    """Create the cursor file's parent directory (and intermediates)."""
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        logger.debug("Creating cursor directory %s", parent)
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Creating cursor directory {parent}: {e}") from e


def load(path: str) -> str | None:
    """Return the stored token, or None when no cursor file exists."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(f"Reading cursor file {path}: {e}") from e
    return data.decode("utf-8", errors="replace")


def save(path: str, token: str) -> None:
    """Atomically replace the cursor file contents with *token*."""
    ensure_parent_dir(path)
    tmp = staging_path(path)
    try:
        with open(tmp, "wb") as f:
            f.write(token.encode("utf-8"))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError as e:
        if os.path.exists(tmp):
            try:
                os.unlink(tmp)
            except OSError:
                logger.warning("Could not remove staging file %s", tmp)
        raise StorageError(f"Writing cursor file {path}: {e}") from e


class CursorStore:
    """Cursor file bound to a configured path."""

    def __init__(self, path: str):
        self.path = path
        self.last_saved: str | None = None

    def load(self) -> str | None:
        token = load(self.path)
        if token is not None:
            logger.debug("Recovered cursor: %s", token)
        return token

    def save(self, token: str) -> None:
        save(self.path, token)
        self.last_saved = token

    def prepare(self) -> None:
        ensure_parent_dir(self.path)
