"""Feed item construction and channel aggregation."""

import logging
from typing import Dict, List, Tuple
from urllib.parse import quote, urljoin

from git_rss.config import PLACEHOLDER, FeedConfig
from git_rss.core.paths import PathMatcher
from git_rss.models.change import PathChange
from git_rss.models.commit import Commit
from git_rss.models.feed import Channel, ChannelMetadata, FeedItem

logger = logging.getLogger(__name__)


class FeedItemBuilder:
    """Turns a surviving change into a feed item."""

    def __init__(self, config: FeedConfig, matcher: PathMatcher):
        self.config = config
        self.matcher = matcher

    def build(self, commit: Commit, change: PathChange) -> FeedItem:
        path = change.presented_path
        url_path = self.matcher.present(path)
        template = self.config.title_template(change.status)

        return FeedItem(
            commit_id=commit.hexsha,
            path=path,
            status=change.status,
            title=template.replace(PLACEHOLDER, url_path),
            link=urljoin(self.config.base_url, quote(url_path, safe="/")),
            # The feed speaks for the publisher, not for whoever edited the page
            author=self.config.author or commit.author,
            pub_date=commit.timestamp,
        )


class ChannelAggregator:
    """Collects feed items and derives the channel timestamps."""

    def __init__(self, metadata: ChannelMetadata):
        self.metadata = metadata
        self.duplicates = 0
        self._items: List[FeedItem] = []
        self._seen: Dict[Tuple[str, str], FeedItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: FeedItem) -> bool:
        """Add an item; returns False if its (commit, path) pair was already added."""
        if item.key in self._seen:
            logger.debug("Dropping duplicate item for %s:%s", item.commit_id, item.path)
            self.duplicates += 1
            return False
        self._seen[item.key] = item
        self._items.append(item)
        return True

    def build(self) -> Channel:
        """Order items oldest first; equal timestamps keep insertion order."""
        items = sorted(self._items, key=lambda item: item.pub_date)
        pub_date = items[0].pub_date if items else None
        last_build_date = items[-1].pub_date if items else None

        return Channel(
            metadata=self.metadata,
            items=items,
            pub_date=pub_date,
            last_build_date=last_build_date,
        )
