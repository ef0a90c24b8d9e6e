"""Path matching against watch patterns and ignore rules."""

import logging
import posixpath
import re
from typing import Dict, Iterable, List, Optional, Pattern

from git_rss.exceptions import PathPatternError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION_MAP = {".md": ".html"}

_WILDCARDS = "*?["


def compile_pattern(pattern: str) -> Pattern:
    """Compile a glob into an anchored, case-sensitive regular expression.

    ``**`` matches zero or more whole segments, ``*`` and ``?`` never cross a
    ``/``, and a pattern without wildcards also matches everything below it.
    """
    if not pattern or not pattern.strip():
        raise PathPatternError(pattern, "empty pattern")
    if "\0" in pattern:
        raise PathPatternError(pattern, "contains a NUL byte")
    if pattern.startswith("/"):
        raise PathPatternError(pattern, "must be relative to the repository root")

    body = pattern.rstrip("/")
    segments = body.split("/")
    if "" in segments:
        raise PathPatternError(pattern, "empty path segment")

    if not any(c in body for c in _WILDCARDS):
        regex = re.escape(body) + "(?:/.*)?"
    else:
        parts = []
        last = len(segments) - 1
        for i, segment in enumerate(segments):
            if segment == "**":
                parts.append(".*" if i == last else "(?:[^/]+/)*")
                continue
            if "**" in segment:
                raise PathPatternError(pattern, "'**' must be a whole path segment")
            parts.append(_translate_segment(pattern, segment))
            if i != last:
                parts.append("/")
        regex = "".join(parts)

    try:
        return re.compile(regex + r"\Z")
    except re.error as e:
        raise PathPatternError(pattern, str(e)) from e


def _translate_segment(pattern: str, segment: str) -> str:
    out = []
    i = 0
    n = len(segment)
    while i < n:
        c = segment[i]
        i += 1
        if c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            j = i
            if j < n and segment[j] in "!^":
                j += 1
            if j < n and segment[j] == "]":
                j += 1
            while j < n and segment[j] != "]":
                j += 1
            if j >= n:
                raise PathPatternError(pattern, "unterminated character class")
            content = segment[i:j]
            i = j + 1
            negate = content[0] in "!^"
            if negate:
                content = content[1:]
            content = content.replace("\\", "\\\\")
            if content.startswith("]"):
                content = "\\" + content
            out.append(f"[^/{content}]" if negate else f"[{content}]")
        else:
            out.append(re.escape(c))
    return "".join(out)


class PathMatcher:
    """Decides which paths are watched and how they are presented."""

    def __init__(
        self,
        watch_patterns: Iterable[str],
        ignore_patterns: Iterable[str] = (),
        strip_prefix: str = "",
        extension_map: Optional[Dict[str, str]] = None,
    ):
        self.watch_patterns: List[str] = list(watch_patterns)
        self.ignore_patterns: List[str] = list(ignore_patterns)
        if not self.watch_patterns:
            raise PathPatternError("", "at least one watch pattern is required")

        self._watch = [compile_pattern(p) for p in self.watch_patterns]
        self._ignore = [compile_pattern(p) for p in self.ignore_patterns]
        self.strip_prefix = strip_prefix or ""
        self.extension_map = (
            dict(DEFAULT_EXTENSION_MAP) if extension_map is None else dict(extension_map)
        )

        for p in self.watch_patterns:
            logger.info("Using path filter %s", p)

    def is_ignored(self, path: str) -> bool:
        return any(rx.match(path) for rx in self._ignore)

    def is_watched(self, path: str) -> bool:
        return any(rx.match(path) for rx in self._watch)

    def matches(self, path: str) -> bool:
        """Check if a path is watched; ignore rules win over watch patterns."""
        if self.is_ignored(path):
            return False
        return self.is_watched(path)

    def strip(self, path: str) -> str:
        """Remove the configured prefix, if the path starts with it."""
        if self.strip_prefix and path.startswith(self.strip_prefix):
            return path[len(self.strip_prefix):]
        return path

    def map_extension(self, path: str) -> str:
        root, ext = posixpath.splitext(path)
        if ext in self.extension_map:
            return root + self.extension_map[ext]
        return path

    def present(self, path: str) -> str:
        """Path as it appears in titles and links."""
        return self.map_extension(self.strip(path))

    def pathspecs(self) -> List[str]:
        """Watch patterns as git pathspecs for history pre-filtering."""
        return [f":(glob){p.rstrip('/')}" for p in self.watch_patterns]
