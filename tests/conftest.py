"""Shared pytest fixtures."""

import pytest

from journal_writer.config import SinkConfig
from journal_writer.cursor import CursorStore
from journal_writer.shutdown import ShutdownFlag
from journal_writer.sink import RotatingFileSink
from tests.fakes import ListSink


@pytest.fixture
def shutdown():
    return ShutdownFlag()


@pytest.fixture
def cursor_store(tmp_path):
    return CursorStore(str(tmp_path / "state" / "cursor"))


@pytest.fixture
def list_sink():
    return ListSink()


@pytest.fixture
def sink_config(tmp_path):
    return SinkConfig(
        target_dir=str(tmp_path / "out"),
        filename="journal.log",
        max_file_size_bytes=10 * 1024 * 1024,
        rotation_interval_seconds=3600,
        max_file_count=10,
        max_age_days=7,
        compression_enabled=False,
    )


@pytest.fixture
def file_sink(sink_config):
    sink = RotatingFileSink(sink_config)
    yield sink
    sink.close()
