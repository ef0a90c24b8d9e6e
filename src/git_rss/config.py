"""YAML configuration loading and validation."""

import logging
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from git_rss.exceptions import ConfigError
from git_rss.models.change import ChangeStatus
from git_rss.models.feed import ChannelMetadata

logger = logging.getLogger(__name__)

PLACEHOLDER = "%p"

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Seconds per unit, humantime-style names
_DURATION_UNITS = {
    "nsec": 1e-9, "ns": 1e-9,
    "usec": 1e-6, "us": 1e-6,
    "msec": 1e-3, "ms": 1e-3,
    "seconds": 1, "second": 1, "sec": 1, "s": 1,
    "minutes": 60, "minute": 60, "min": 60, "m": 60,
    "hours": 3600, "hour": 3600, "hr": 3600, "h": 3600,
    "days": 86400, "day": 86400, "d": 86400,
    "weeks": 604800, "week": 604800, "w": 604800,
    "months": 2630016, "month": 2630016, "M": 2630016,
    "years": 31557600, "year": 31557600, "y": 31557600,
}

_DURATION_TERM = re.compile(r"\s*(\d+)\s*([A-Za-z]+)")


def parse_duration(text: str) -> float:
    """Parse a human duration such as ``"1h 30min"`` into seconds."""
    total = 0.0
    pos = 0
    text = text.strip()
    if not text:
        raise ValueError("empty duration")
    while pos < len(text):
        match = _DURATION_TERM.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        if unit not in _DURATION_UNITS:
            raise ValueError(f"unknown time unit {unit!r} in {text!r}")
        total += int(number) * _DURATION_UNITS[unit]
        pos = match.end()
        while pos < len(text) and text[pos].isspace():
            pos += 1
    return total


class FeedConfig(BaseModel):
    """Resolved configuration for one feed."""

    repo: Optional[str] = None
    base_url: str = Field(alias="base-url")
    strip_prefix: str = Field(default="", alias="strip-prefix")
    ignore_files: List[str] = Field(default_factory=list, alias="ignore-files")
    author: Optional[str] = None
    extension_map: Dict[str, str] = Field(
        default_factory=lambda: {".md": ".html"}, alias="extension-map"
    )

    title_page_new: str = Field(alias="item-title-page-new")
    title_page_removed: str = Field(alias="item-title-page-removed")
    title_page_modified: str = Field(alias="item-title-page-modified")

    channel_title: str = Field(alias="channel-title")
    channel_link: str = Field(alias="channel-link")
    channel_description: str = Field(alias="channel-description")
    language: Optional[str] = None
    copyright: Optional[str] = None
    managing_editor: Optional[str] = Field(default=None, alias="managing-editor")
    webmaster: Optional[str] = None
    generator: Optional[str] = None
    ttl: Optional[int] = None  # Minutes
    skip_hours: List[int] = Field(default_factory=list, alias="skip-hours")
    skip_days: List[str] = Field(default_factory=list, alias="skip-days")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not re.match(r"^[A-Za-z][A-Za-z0-9+.-]*://", value):
            raise ValueError(f"base-url must be an absolute URL, got {value!r}")
        return value

    @field_validator("title_page_new", "title_page_removed", "title_page_modified")
    @classmethod
    def _check_template(cls, value: str) -> str:
        count = value.count(PLACEHOLDER)
        if count != 1:
            raise ValueError(
                f"title template must contain {PLACEHOLDER} exactly once, found {count}"
            )
        return value

    @field_validator("ttl", mode="before")
    @classmethod
    def _parse_ttl(cls, value: Union[int, str, None]) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            return int(parse_duration(value) // 60)
        raise ValueError("invalid value of config entry 'ttl'")

    @field_validator("skip_hours")
    @classmethod
    def _check_skip_hours(cls, value: List[int]) -> List[int]:
        for hour in value:
            if not 0 <= hour <= 23:
                raise ValueError(f"skip-hours entries must be 0-23, got {hour}")
        return value

    @field_validator("skip_days")
    @classmethod
    def _check_skip_days(cls, value: List[str]) -> List[str]:
        days = []
        for day in value:
            name = day.strip().capitalize()
            if name not in WEEKDAYS:
                raise ValueError(f"unknown skip-days entry {day!r}")
            days.append(name)
        return days

    def title_template(self, status: ChangeStatus) -> str:
        """Template for a change status; renames reuse the modified title."""
        if status == ChangeStatus.ADDED:
            return self.title_page_new
        if status == ChangeStatus.REMOVED:
            return self.title_page_removed
        return self.title_page_modified

    def channel_metadata(self) -> ChannelMetadata:
        return ChannelMetadata(
            title=self.channel_title,
            link=self.channel_link,
            description=self.channel_description,
            language=self.language,
            copyright=self.copyright,
            managing_editor=self.managing_editor,
            webmaster=self.webmaster,
            generator=self.generator,
            ttl=self.ttl,
            skip_hours=self.skip_hours,
            skip_days=self.skip_days,
        )


def load_config(path: str) -> FeedConfig:
    """Load the feed configuration; ``-`` reads it from stdin."""
    if path == "-":
        logger.info("Going to read config from stdin")
        source = "<stdin>"
        text = sys.stdin.read()
    else:
        logger.info("Going to read config file %s", path)
        source = path
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {source}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config in {source} must be a mapping")

    try:
        return FeedConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {source}: {e}") from e
