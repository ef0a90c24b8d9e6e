"""RSS 2.0 serialization of a derived channel."""

import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import format_datetime
from typing import Optional

from git_rss.models.feed import Channel, FeedItem


def rfc822_time(value: datetime) -> str:
    """Format a timestamp as RFC 2822 with its own UTC offset."""
    return format_datetime(value)


def _sub(parent: ET.Element, tag: str, text: Optional[object]) -> None:
    # Absent values produce no element at all
    if text is None:
        return
    ET.SubElement(parent, tag).text = str(text)


def _item_element(parent: ET.Element, item: FeedItem) -> None:
    element = ET.SubElement(parent, "item")
    _sub(element, "title", item.title)
    _sub(element, "link", item.link)
    _sub(element, "author", item.author)
    _sub(element, "pubDate", rfc822_time(item.pub_date))


def build_rss(channel: Channel) -> ET.Element:
    """Build the ``<rss>`` element tree for a channel."""
    meta = channel.metadata
    rss = ET.Element("rss", version="2.0")
    element = ET.SubElement(rss, "channel")

    _sub(element, "title", meta.title)
    _sub(element, "link", meta.link)
    _sub(element, "description", meta.description)
    _sub(element, "language", meta.language)
    _sub(element, "copyright", meta.copyright)
    _sub(element, "managingEditor", meta.managing_editor)
    _sub(element, "webMaster", meta.webmaster)
    if channel.pub_date is not None:
        _sub(element, "pubDate", rfc822_time(channel.pub_date))
    if channel.last_build_date is not None:
        _sub(element, "lastBuildDate", rfc822_time(channel.last_build_date))
    _sub(element, "generator", meta.generator)
    _sub(element, "ttl", meta.ttl)

    if meta.skip_hours:
        hours = ET.SubElement(element, "skipHours")
        for hour in meta.skip_hours:
            _sub(hours, "hour", hour)
    if meta.skip_days:
        days = ET.SubElement(element, "skipDays")
        for day in meta.skip_days:
            _sub(days, "day", day)

    for item in channel.items:
        _item_element(element, item)

    return rss


def render_channel(channel: Channel, pretty: bool = False) -> str:
    """Render a channel as an RSS 2.0 XML document."""
    rss = build_rss(channel)
    if pretty:
        ET.indent(rss, space="  ")
    body = ET.tostring(rss, encoding="unicode")
    return '<?xml version="1.0" encoding="utf-8"?>' + ("\n" if pretty else "") + body
