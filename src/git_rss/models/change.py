"""Change model for a single path touched by a commit."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator


class ChangeStatus(str, Enum):
    """How a commit changed a path relative to its first parent."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"


class PathChange(BaseModel):
    """Represents the change of one watched path in one commit."""

    commit_id: str
    status: ChangeStatus
    old_path: Optional[str] = None
    new_path: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_paths(self) -> "PathChange":
        if self.status == ChangeStatus.ADDED:
            ok = self.old_path is None and self.new_path is not None
        elif self.status == ChangeStatus.REMOVED:
            ok = self.old_path is not None and self.new_path is None
        else:
            ok = self.old_path is not None and self.new_path is not None
        if not ok:
            raise ValueError(
                f"{self.status.value} change has old_path={self.old_path!r}, "
                f"new_path={self.new_path!r}"
            )
        return self

    @property
    def presented_path(self) -> str:
        """The path a feed item is built from.

        Renamed pages continue to exist under their new address, so they are
        presented like a modification of the new path.
        """
        if self.status == ChangeStatus.REMOVED:
            return self.old_path
        return self.new_path
