"""Repository access and history traversal restricted to watched paths."""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

import git
from git import Repo

from git_rss.core.paths import PathMatcher
from git_rss.exceptions import RepositoryError
from git_rss.models.commit import Commit

logger = logging.getLogger(__name__)


@contextmanager
def open_repository(path: Optional[str] = None) -> Iterator[Repo]:
    """Open a git repository and close it when the block exits.

    Without a path the repository is discovered from ``GIT_DIR`` or the
    current working directory.
    """
    try:
        if path:
            logger.info("Opening git repository %s", path)
            repo = Repo(path)
        else:
            repo = Repo(search_parent_directories=True)
            logger.info("Successfully opened git repository %s", repo.git_dir)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise RepositoryError(f"Cannot open git repository {path or '.'}: {e}") from e

    try:
        yield repo
    finally:
        repo.close()


class CommitWalker:
    """Walks history from HEAD, yielding commits that touch watched paths.

    Walked commits are kept in an arena keyed by hash; only first-parent
    linkage is recorded.
    """

    def __init__(self, repo: Repo, matcher: PathMatcher):
        self.repo = repo
        self.matcher = matcher
        self.failed = 0
        self._arena: Dict[str, Commit] = {}

    def __len__(self) -> int:
        return len(self._arena)

    def get(self, hexsha: str) -> Commit:
        """Get a walked commit by hash."""
        return self._arena[hexsha]

    def head(self) -> git.Commit:
        """Get the commit HEAD points to."""
        try:
            return self.repo.head.commit
        except ValueError as e:
            # Unborn branch: the repository exists but has no commits
            raise RepositoryError(
                f"Repository {self.repo.working_dir or self.repo.git_dir} has no history"
            ) from e
        except (git.exc.BadName, git.exc.BadObject, git.exc.GitCommandError) as e:
            raise RepositoryError(f"Cannot resolve HEAD: {e}") from e

    def walk(self) -> Iterator[Commit]:
        """Yield watched commits, newest first, in git's rev-list order."""
        tip = self.head()
        pathspecs = self.matcher.pathspecs()

        try:
            for git_commit in self.repo.iter_commits(tip.hexsha, paths=pathspecs):
                touched = self._touched_paths(git_commit)
                if touched is None:
                    continue
                if not touched:
                    logger.debug("Commit %s touches no watched path", git_commit.hexsha)
                    continue
                yield self._record(git_commit, touched)
        except git.exc.GitCommandError as e:
            raise RepositoryError(f"Cannot read repository history: {e}") from e

    def _touched_paths(self, git_commit: git.Commit) -> Optional[Tuple[str, ...]]:
        if git_commit.parents:
            revs = [git_commit.parents[0].hexsha, git_commit.hexsha]
        else:
            revs = ["--root", git_commit.hexsha]

        try:
            output = self.repo.git.diff_tree(
                "-r", "-z", "--name-only", "--no-commit-id", *revs
            )
        except git.exc.GitCommandError as e:
            logger.warning("Skipping commit %s, cannot list its paths: %s", git_commit.hexsha, e)
            self.failed += 1
            return None

        paths = {p for p in output.split("\0") if p}
        return tuple(sorted(p for p in paths if self.matcher.is_watched(p)))

    def _record(self, git_commit: git.Commit, touched: Tuple[str, ...]) -> Commit:
        parent = git_commit.parents[0].hexsha if git_commit.parents else None
        if len(git_commit.parents) > 1:
            logger.debug("Diffing merge commit %s against its first parent", git_commit.hexsha)

        commit = Commit(
            hexsha=git_commit.hexsha,
            parent_hexsha=parent,
            timestamp=git_commit.authored_datetime,
            author_name=git_commit.author.name or "",
            author_email=git_commit.author.email or "",
            message=git_commit.message,
            touched_paths=touched,
        )
        self._arena[commit.hexsha] = commit
        return commit
