"""History-to-feed derivation: walk, classify, filter, build, aggregate."""

import logging
from typing import Iterable, List, Optional

from git import Repo
from pydantic import BaseModel

from git_rss.config import FeedConfig
from git_rss.core.classifier import ChangeClassifier
from git_rss.core.exclusion import NO_RSS_MARKER, is_excluded
from git_rss.core.feed import ChannelAggregator, FeedItemBuilder
from git_rss.core.paths import PathMatcher
from git_rss.core.walker import CommitWalker
from git_rss.exceptions import ClassificationAnomaly
from git_rss.models.feed import Channel, FeedItem

logger = logging.getLogger(__name__)


class RunStats(BaseModel):
    """Counters describing one derivation run."""

    commits_walked: int = 0
    commits_excluded: int = 0
    commits_failed: int = 0
    paths_ignored: int = 0
    items_built: int = 0
    duplicates_dropped: int = 0


class DerivationResult(BaseModel):
    """The derived channel together with the run statistics."""

    channel: Channel
    stats: RunStats


def build_matcher(
    config: FeedConfig, watch_patterns: Iterable[str], strip_prefix: Optional[str] = None
) -> PathMatcher:
    """Compile the watch set and ignore rules; fails before any traversal."""
    return PathMatcher(
        watch_patterns,
        config.ignore_files,
        strip_prefix=config.strip_prefix if strip_prefix is None else strip_prefix,
        extension_map=config.extension_map,
    )


def derive_channel(
    repo: Repo,
    config: FeedConfig,
    watch_patterns: Iterable[str],
    strip_prefix: Optional[str] = None,
    matcher: Optional[PathMatcher] = None,
) -> DerivationResult:
    """Derive the feed channel from the history of the watched paths.

    History is walked once for all watch patterns. Items are handed to the
    aggregator oldest commit first, so that items with equal timestamps end
    up in ancestry order. A prebuilt ``matcher`` replaces the one compiled
    from ``watch_patterns`` and ``strip_prefix``.
    """
    if matcher is None:
        matcher = build_matcher(config, watch_patterns, strip_prefix)
    walker = CommitWalker(repo, matcher)
    classifier = ChangeClassifier(repo)
    builder = FeedItemBuilder(config, matcher)
    aggregator = ChannelAggregator(config.channel_metadata())
    stats = RunStats()

    per_commit: List[List[FeedItem]] = []
    for commit in walker.walk():
        stats.commits_walked += 1

        if is_excluded(commit.message):
            logger.info('Skipping commit %s, because of "%s"', commit.hexsha, NO_RSS_MARKER)
            stats.commits_excluded += 1
            continue

        try:
            changes = classifier.classify(commit)
        except ClassificationAnomaly as e:
            logger.warning("Skipping commit %s: %s", commit.hexsha, e.reason)
            stats.commits_failed += 1
            continue

        surviving = []
        for change in changes:
            if matcher.is_ignored(change.presented_path):
                logger.info(
                    "Skipping delta of ignored file %s in commit %s",
                    change.presented_path,
                    commit.hexsha,
                )
                stats.paths_ignored += 1
                continue
            surviving.append(change)

        items = []
        for change in surviving:
            items.append(builder.build(commit, change))
            logger.debug("New rss item for %s:%s", commit.hexsha, change.presented_path)
        per_commit.append(items)

    stats.commits_failed += walker.failed

    for items in reversed(per_commit):
        for item in items:
            aggregator.add(item)

    channel = aggregator.build()
    stats.items_built = len(channel.items)
    stats.duplicates_dropped = aggregator.duplicates

    if channel.is_empty:
        logger.info("No changes to publish; the channel has no items")

    return DerivationResult(channel=channel, stats=stats)
