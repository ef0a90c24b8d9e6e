"""Classification of a commit's changes to watched paths."""

import logging
from typing import List, Optional

import git
from git import Repo

from git_rss.exceptions import ClassificationAnomaly
from git_rss.models.change import ChangeStatus, PathChange
from git_rss.models.commit import Commit

logger = logging.getLogger(__name__)


class ChangeClassifier:
    """Diffs a commit against its first parent.

    Renames are detected by git's similarity heuristic and only when both the
    old and the new path are touched watched paths. A Renamed change is
    published like a modification of the new path, since the page keeps
    existing under a new address. When only one side of a rename is watched,
    git never sees the pair and the change is an Added (new path watched) or
    a Removed (old path watched).
    """

    def __init__(self, repo: Repo):
        self.repo = repo

    def classify(self, commit: Commit) -> List[PathChange]:
        """Return the changes of the commit's touched paths."""
        if not commit.touched_paths:
            return []

        try:
            git_commit = self.repo.commit(commit.hexsha)
            if commit.is_root:
                return self._classify_root(commit, git_commit)

            parent = self.repo.commit(commit.parent_hexsha)
            diffs = parent.diff(
                git_commit,
                paths=[f":(literal){p}" for p in commit.touched_paths],
            )
        except (
            git.exc.GitCommandError,
            git.exc.BadName,
            git.exc.BadObject,
            ValueError,
        ) as e:
            raise ClassificationAnomaly(commit.hexsha, str(e)) from e

        changes = []
        for diff in diffs:
            logger.debug(
                "%s %s %s, %s", commit.hexsha, diff.change_type, diff.a_path, diff.b_path
            )
            change = self._to_change(commit, diff)
            if change is not None:
                changes.append(change)
        return changes

    def _classify_root(self, commit: Commit, git_commit: git.Commit) -> List[PathChange]:
        changes = []
        for path in commit.touched_paths:
            try:
                git_commit.tree[path]
            except KeyError:
                continue
            changes.append(
                PathChange(commit_id=commit.hexsha, status=ChangeStatus.ADDED, new_path=path)
            )
        return changes

    def _to_change(self, commit: Commit, diff: git.Diff) -> Optional[PathChange]:
        change_type = diff.change_type

        if change_type in ("A", "C"):
            return PathChange(
                commit_id=commit.hexsha, status=ChangeStatus.ADDED, new_path=diff.b_path
            )

        if change_type == "D":
            return PathChange(
                commit_id=commit.hexsha, status=ChangeStatus.REMOVED, old_path=diff.a_path
            )

        if change_type in ("M", "T"):
            if diff.a_blob is not None and diff.b_blob is not None:
                if diff.a_blob.hexsha == diff.b_blob.hexsha:
                    logger.debug(
                        "Ignoring metadata-only change of %s in %s", diff.b_path, commit.hexsha
                    )
                    return None
            return PathChange(
                commit_id=commit.hexsha,
                status=ChangeStatus.MODIFIED,
                old_path=diff.a_path,
                new_path=diff.b_path,
            )

        if change_type == "R":
            return PathChange(
                commit_id=commit.hexsha,
                status=ChangeStatus.RENAMED,
                old_path=diff.rename_from or diff.a_path,
                new_path=diff.rename_to or diff.b_path,
            )

        logger.warning(
            "Unhandled diff state %s for commit %s between %s and %s",
            change_type,
            commit.hexsha,
            diff.a_path,
            diff.b_path,
        )
        return None
