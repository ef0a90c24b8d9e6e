"""Commit exclusion by a marker line in the commit message."""

NO_RSS_MARKER = "no-rss"


def is_excluded(message: str, marker: str = NO_RSS_MARKER) -> bool:
    """Check if any whole line of the message, stripped, equals the marker."""
    return any(line.strip() == marker for line in message.splitlines())
