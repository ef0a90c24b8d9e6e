"""Shared fixtures: real temporary git repositories with controlled dates."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable

import pytest
from git import Actor, Repo

from git_rss.config import FeedConfig

CET = timezone(timedelta(hours=1))


def at(day: int, hour: int = 12, tz=CET) -> datetime:
    """A February 2020 timestamp, the month all test histories live in."""
    return datetime(2020, 2, day, hour, 0, 0, tzinfo=tz)


class History:
    """Builds a git history commit by commit with explicit author dates."""

    author = Actor("Test User", "test@example.com")

    def __init__(self, path: Path):
        self.path = path
        self.repo = Repo.init(path)
        with self.repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

    def write(self, rel: str, content: str) -> None:
        target = self.path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    def commit(
        self,
        message: str,
        when: datetime,
        files: dict = None,
        remove: Iterable[str] = (),
        add: Iterable[str] = (),
        parents: Iterable[str] = None,
    ) -> str:
        """Write files, stage them and commit; returns the commit hash.

        With ``parents`` the commit gets exactly those parents (first parent
        first) instead of HEAD, which is how merge commits are built.
        """
        files = files or {}
        for rel, content in files.items():
            self.write(rel, content)
        staged = list(files) + list(add)
        if staged:
            self.repo.index.add(staged)
        removed = list(remove)
        if removed:
            self.repo.index.remove(removed, working_tree=True)

        date = f"{int(when.timestamp())} {when.strftime('%z')}"
        commit = self.repo.index.commit(
            message,
            author=self.author,
            committer=self.author,
            author_date=date,
            commit_date=date,
            parent_commits=[self.repo.commit(p) for p in parents] if parents else None,
        )
        return commit.hexsha


@pytest.fixture
def history():
    """Create an empty git repository wrapped in a History builder."""
    with tempfile.TemporaryDirectory() as temp_dir:
        h = History(Path(temp_dir))
        yield h
        h.repo.close()


def make_config(**overrides) -> FeedConfig:
    raw = {
        "base-url": "https://example/",
        "item-title-page-new": "Seite /%p erstellt",
        "item-title-page-removed": "Seite /%p entfernt",
        "item-title-page-modified": "Seite /%p bearbeitet",
        "channel-title": "Example",
        "channel-link": "https://example/",
        "channel-description": "Changes on example",
        "author": "webmaster@example (Example)",
    }
    raw.update(overrides)
    return FeedConfig.model_validate(raw)


@pytest.fixture
def config() -> FeedConfig:
    return make_config()
