"""Command line interface for git-rss."""
