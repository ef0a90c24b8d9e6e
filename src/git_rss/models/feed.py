"""Feed models: items and the channel that aggregates them."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from git_rss.models.change import ChangeStatus


class FeedItem(BaseModel):
    """Represents one published entry for a (commit, path) change."""

    commit_id: str
    path: str
    status: ChangeStatus
    title: str
    link: str
    author: str
    pub_date: datetime

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple:
        return (self.commit_id, self.path)


class ChannelMetadata(BaseModel):
    """Static channel fields taken from the configuration."""

    title: str
    link: str
    description: str
    language: Optional[str] = None
    copyright: Optional[str] = None
    managing_editor: Optional[str] = None
    webmaster: Optional[str] = None
    generator: Optional[str] = None
    ttl: Optional[int] = None  # Minutes
    skip_hours: List[int] = Field(default_factory=list)
    skip_days: List[str] = Field(default_factory=list)


class Channel(BaseModel):
    """The derived feed: metadata, ordered items and summary timestamps."""

    metadata: ChannelMetadata
    items: List[FeedItem] = Field(default_factory=list)
    pub_date: Optional[datetime] = None
    last_build_date: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        """Check if no change survived; timestamps are absent in that case."""
        return not self.items
