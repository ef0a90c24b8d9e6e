"""git-rss: derive an RSS feed from the git history of watched files."""

__version__ = "0.1.0"
