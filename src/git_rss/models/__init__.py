"""Data models for git-rss."""

from .change import ChangeStatus, PathChange
from .commit import Commit
from .feed import Channel, ChannelMetadata, FeedItem

__all__ = [
    "ChangeStatus",
    "PathChange",
    "Commit",
    "Channel",
    "ChannelMetadata",
    "FeedItem",
]
