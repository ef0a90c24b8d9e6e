"""Tests for the git-rss command."""

import xml.etree.ElementTree as ET

import pytest
from click.testing import CliRunner

from git_rss.cli.main import main
from git_rss.core import engine

from conftest import at

CONFIG_TEMPLATE = """\
repo: {repo}
base-url: https://example/
item-title-page-new: Seite /%p erstellt
item-title-page-removed: Seite /%p entfernt
item-title-page-modified: Seite /%p bearbeitet
channel-title: Example
channel-link: https://example/
channel-description: Changes on example
author: webmaster@example (Example)
ttl: 60
"""


@pytest.fixture
def config_path(history):
    path = history.path.parent / f"{history.path.name}-feed.yaml"
    path.write_text(CONFIG_TEMPLATE.format(repo=history.path))
    yield path
    path.unlink()


def test_generates_feed(history, config_path):
    history.commit("Add", at(1), files={"src/2020-02/Maxima.md": "# Maxima\n"})
    history.commit("Edit", at(2), files={"src/2020-02/Maxima.md": "# Maxima!\n"})

    runner = CliRunner()
    result = runner.invoke(
        main, ["-c", str(config_path), "-p", "src/", "src/2020-02/Maxima.md"]
    )

    assert result.exit_code == 0, result.output
    channel = ET.fromstring(result.stdout).find("channel")
    titles = [item.findtext("title") for item in channel.findall("item")]
    assert titles == [
        "Seite /2020-02/Maxima.html erstellt",
        "Seite /2020-02/Maxima.html bearbeitet",
    ]
    assert channel.findtext("ttl") == "60"


def test_config_from_stdin_and_output_file(history, config_path):
    history.commit("Add", at(1), files={"a.md": "a"})
    output = history.path.parent / f"{history.path.name}-feed.xml"

    runner = CliRunner()
    result = runner.invoke(
        main,
        ["-c", "-", "-y", "-o", str(output), "a.md"],
        input=config_path.read_text(),
    )

    try:
        assert result.exit_code == 0, result.output
        channel = ET.fromstring(output.read_text()).find("channel")
        assert channel.findtext("item/link") == "https://example/a.html"
    finally:
        output.unlink(missing_ok=True)


def test_missing_path_argument(config_path):
    runner = CliRunner()
    result = runner.invoke(main, ["-c", str(config_path)])

    assert result.exit_code != 0


def test_invalid_pattern_aborts(history, config_path):
    history.commit("Add", at(1), files={"a.md": "a"})

    runner = CliRunner()
    result = runner.invoke(main, ["-c", str(config_path), "[broken"])

    assert result.exit_code == 1
    assert "Invalid path pattern" in result.output


def test_repository_without_history_aborts(history, config_path):
    runner = CliRunner()
    result = runner.invoke(main, ["-c", str(config_path), "a.md"])

    assert result.exit_code == 1
    assert "has no history" in result.output


def test_patterns_compiled_once(history, config_path, monkeypatch):
    history.commit("Add", at(1), files={"a.md": "a"})
    built = []

    class CountingMatcher(engine.PathMatcher):
        def __init__(self, *args, **kwargs):
            built.append(args)
            super().__init__(*args, **kwargs)

    monkeypatch.setattr(engine, "PathMatcher", CountingMatcher)

    runner = CliRunner()
    result = runner.invoke(main, ["-c", str(config_path), "a.md"])

    assert result.exit_code == 0, result.output
    assert len(built) == 1
