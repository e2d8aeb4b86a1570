"""Tests for YAML configuration loading."""

import pytest

from journal_writer.config import Config, SinkConfig, load_config, load_yaml
from journal_writer.errors import ConfigError
from journal_writer.source import SourceOptions

EXAMPLE = """\
cursor_file: /var/lib/journal-writer/cursor
read_timeout: 2.5
cursor_save_interval: 3
source:
  files: system
  only_volatile: true
  only_local: false
log_writer_config:
  target_dir: /var/log/journal-writer
  filename: system.log
  max_file_size_bytes: 2048
  compression_enabled: false
"""


@pytest.fixture
def config_file(tmp_path):
    def _write(text):
        path = tmp_path / "config.yml"
        path.write_text(text)
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv("JOURNAL_WRITER_CURSOR_FILE", raising=False)
    monkeypatch.delenv("JOURNAL_WRITER_TARGET_DIR", raising=False)


class TestLoadConfig:
    def test_full_document(self, config_file):
        cfg = load_config(config_file(EXAMPLE))
        assert cfg.cursor_file == "/var/lib/journal-writer/cursor"
        assert cfg.read_timeout == 2.5
        assert cfg.cursor_save_interval == 3
        assert cfg.source == SourceOptions(files="system", only_volatile=True, only_local=False)
        assert cfg.log_writer_config.target_dir == "/var/log/journal-writer"
        assert cfg.log_writer_config.filename == "system.log"
        assert cfg.log_writer_config.max_file_size_bytes == 2048
        assert cfg.log_writer_config.compression_enabled is False

    def test_defaults(self, config_file):
        cfg = load_config(config_file("cursor_file: c\nlog_writer_config:\n  target_dir: out\n"))
        assert cfg.read_timeout == 1.0
        assert cfg.cursor_save_interval == 1
        assert cfg.source == SourceOptions()
        assert cfg.log_writer_config == SinkConfig(target_dir="out")

    def test_env_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv("JOURNAL_WRITER_CURSOR_FILE", "/tmp/cursor")
        monkeypatch.setenv("JOURNAL_WRITER_TARGET_DIR", "/tmp/out")
        cfg = load_config(config_file(EXAMPLE))
        assert cfg.cursor_file == "/tmp/cursor"
        assert cfg.log_writer_config.target_dir == "/tmp/out"

    @pytest.mark.parametrize("text", [
        "log_writer_config:\n  target_dir: out\n",
        "cursor_file: c\n",
        "cursor_file: c\nlog_writer_config:\n  filename: x.log\n",
        "cursor_file: c\nlog_writer_config: nope\n",
        "- just\n- a list\n",
    ])
    def test_missing_or_malformed_sections(self, config_file, text):
        with pytest.raises(ConfigError):
            load_config(config_file(text))

    @pytest.mark.parametrize("extra", [
        "read_timeout: 0\n",
        "cursor_save_interval: 0\n",
        "source:\n  files: everything\n",
        "read_timeout: soon\n",
    ])
    def test_invalid_values(self, config_file, extra):
        text = "cursor_file: c\nlog_writer_config:\n  target_dir: out\n" + extra
        with pytest.raises(ConfigError):
            load_config(config_file(text))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "absent.yml"))

    def test_invalid_yaml(self, config_file):
        with pytest.raises(ConfigError):
            load_yaml(config_file("cursor_file: [unclosed\n"))

    def test_empty_document(self, config_file):
        assert load_yaml(config_file("")) == {}


def test_config_is_frozen():
    cfg = Config.from_dict({"cursor_file": "c", "log_writer_config": {"target_dir": "out"}})
    with pytest.raises(AttributeError):
        cfg.cursor_file = "other"
