"""Commit model for walked repository history."""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel


class Commit(BaseModel):
    """Represents a commit that touches at least one watched path."""

    hexsha: str
    parent_hexsha: Optional[str] = None  # First parent; None for the root commit
    timestamp: datetime
    author_name: str
    author_email: str
    message: str
    touched_paths: Tuple[str, ...] = ()

    model_config = {"frozen": True}

    @property
    def is_root(self) -> bool:
        """Check if the commit has no parent."""
        return self.parent_hexsha is None

    @property
    def short_id(self) -> str:
        return self.hexsha[:7]

    @property
    def author(self) -> str:
        """Author in the RSS ``email (name)`` form."""
        return f"{self.author_email} ({self.author_name})"
