"""Exception types raised by git-rss."""


class GitRssError(Exception):
    """Base class for all git-rss errors."""


class ConfigError(GitRssError):
    """The configuration file could not be read or failed validation."""


class RepositoryError(GitRssError):
    """The git repository is missing, unreadable or has no history."""


class PathPatternError(GitRssError):
    """A watch pattern or ignore rule is not a valid glob."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid path pattern {pattern!r}: {reason}")


class ClassificationAnomaly(GitRssError):
    """The changes of a single commit could not be computed.

    Not fatal: the engine skips the commit and keeps going.
    """

    def __init__(self, commit_id: str, reason: str):
        self.commit_id = commit_id
        self.reason = reason
        super().__init__(f"Cannot classify commit {commit_id}: {reason}")
