"""Tests for configuration loading."""

import io
import tempfile
from pathlib import Path

import pytest

from git_rss.config import load_config, parse_duration
from git_rss.exceptions import ConfigError
from git_rss.models.change import ChangeStatus

CONFIG_YAML = """\
repo: /srv/site
base-url: https://example/
strip-prefix: src/
ignore-files:
  - src/drafts/**
item-title-page-new: Seite /%p erstellt
item-title-page-removed: Seite /%p entfernt
item-title-page-modified: Seite /%p bearbeitet
channel-title: Example
channel-link: https://example/
channel-description: Changes on example
language: de
managing-editor: editor@example (Editor)
webmaster: webmaster@example (Webmaster)
generator: git-rss
ttl: 1h 30min
skip-hours: [0, 1, 2]
skip-days: [saturday, Sunday]
"""


@pytest.fixture
def config_file():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "feed.yaml"
        path.write_text(CONFIG_YAML)
        yield path


def test_load_config(config_file):
    config = load_config(str(config_file))

    assert config.repo == "/srv/site"
    assert config.base_url == "https://example/"
    assert config.strip_prefix == "src/"
    assert config.ignore_files == ["src/drafts/**"]
    assert config.ttl == 90
    assert config.skip_hours == [0, 1, 2]
    assert config.skip_days == ["Saturday", "Sunday"]
    assert config.extension_map == {".md": ".html"}
    assert config.author is None


def test_title_templates_by_status(config_file):
    config = load_config(str(config_file))

    assert config.title_template(ChangeStatus.ADDED) == "Seite /%p erstellt"
    assert config.title_template(ChangeStatus.REMOVED) == "Seite /%p entfernt"
    assert config.title_template(ChangeStatus.MODIFIED) == "Seite /%p bearbeitet"
    assert config.title_template(ChangeStatus.RENAMED) == "Seite /%p bearbeitet"


def test_channel_metadata(config_file):
    meta = load_config(str(config_file)).channel_metadata()

    assert meta.title == "Example"
    assert meta.language == "de"
    assert meta.managing_editor == "editor@example (Editor)"
    assert meta.copyright is None
    assert meta.ttl == 90


def test_load_config_from_stdin(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(CONFIG_YAML.replace("ttl: 1h 30min", "ttl: 60")))

    config = load_config("-")

    assert config.ttl == 60


@pytest.mark.parametrize(
    "old,new",
    [
        ("Seite /%p erstellt", "Seite erstellt"),
        ("Seite /%p erstellt", "Seite /%p und %p erstellt"),
        ("ttl: 1h 30min", "ttl: soon"),
        ("ttl: 1h 30min", "ttl: [1]"),
        ("base-url: https://example/", "base-url: example"),
        ("skip-hours: [0, 1, 2]", "skip-hours: [24]"),
        ("skip-days: [saturday, Sunday]", "skip-days: [Caturday]"),
        ("channel-title: Example\n", ""),
    ],
)
def test_invalid_config(config_file, old, new):
    """Test that bad values fail at load time, not during derivation."""
    config_file.write_text(CONFIG_YAML.replace(old, new))

    with pytest.raises(ConfigError):
        load_config(str(config_file))


def test_invalid_yaml(config_file):
    config_file.write_text("base-url: [unclosed\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(str(config_file))


def test_missing_config_file():
    with pytest.raises(ConfigError, match="Cannot read config file"):
        load_config("/nonexistent/feed.yaml")


@pytest.mark.parametrize(
    "text,seconds",
    [
        ("15min", 900),
        ("1h 30min", 5400),
        ("2 hours", 7200),
        ("1d", 86400),
        ("1w 1d", 691200),
        ("90s", 90),
    ],
)
def test_parse_duration(text, seconds):
    assert parse_duration(text) == seconds


@pytest.mark.parametrize("text", ["", "abc", "10 parsecs", "1h and 2m"])
def test_parse_duration_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_duration(text)
