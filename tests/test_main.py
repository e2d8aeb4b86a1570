"""Tests for the command-line entry point."""

import pytest

from journal_writer import main as main_mod
from journal_writer.config import Config, SinkConfig
from journal_writer.shutdown import ShutdownFlag
from journal_writer.tailer import LoopState
from tests.fakes import FakeSource, feed, make_record


@pytest.fixture
def config(tmp_path):
    return Config(
        cursor_file=str(tmp_path / "state" / "cursor"),
        log_writer_config=SinkConfig(target_dir=str(tmp_path / "out"), compression_enabled=False),
    )


def test_no_config_prints_usage(capsys):
    assert main_mod.main([]) == 0
    assert "usage:" in capsys.readouterr().out


def test_missing_config_file_exits_nonzero(tmp_path, monkeypatch):
    monkeypatch.setattr(main_mod, "install_signal_handlers", lambda flag: None)
    assert main_mod.main([str(tmp_path / "absent.yml")]) == 1


def test_fatal_error_exits_nonzero(tmp_path, monkeypatch):
    path = tmp_path / "config.yml"
    path.write_text(f"cursor_file: {tmp_path}/cursor\nlog_writer_config:\n  target_dir: {tmp_path}/out\n")
    monkeypatch.setattr(main_mod, "install_signal_handlers", lambda flag: None)

    class BrokenSource(FakeSource):
        def __init__(self, options):
            super().__init__()

        def seek_tail(self):
            raise OSError("no journal")

    monkeypatch.setattr(main_mod, "SystemdJournalSource", BrokenSource)
    assert main_mod.main([str(path)]) == 1


def test_run_tails_into_sink_and_closes_source(config):
    shutdown = ShutdownFlag()
    source = FakeSource([make_record("seed")])
    source.on_drained = feed(source, [[make_record("a", msg="boot ok"), make_record("b", msg="disk full", sev=3)]], shutdown)

    loop = main_mod.run(config, shutdown, source=source)

    assert loop.state is LoopState.STOPPED
    assert source.closed
    with open(f"{config.log_writer_config.target_dir}/journal.log") as f:
        lines = f.read().splitlines()
    assert len(lines) == 2
    assert "[Error] node1: app: disk full" in lines[1]
    with open(config.cursor_file) as f:
        assert f.read() == "b"
