"""RSS 2.0 serialization of a FeedDocument."""

import xml.etree.ElementTree as ET
from email.utils import format_datetime

from .synthesizer import FeedDocument, FeedItem


ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
GENERATOR = "GopherPods"
CONTENT_TYPE = "application/xml"


def _rfc822(value) -> str:
    return format_datetime(value, usegmt=True)


def _format_duration(seconds: int) -> str:
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _add_item(channel: ET.Element, feed_item: FeedItem) -> None:
    item = ET.SubElement(channel, "item")
    ET.SubElement(item, "title").text = feed_item.title
    ET.SubElement(item, "link").text = feed_item.link
    ET.SubElement(item, "description").text = feed_item.description
    guid = ET.SubElement(item, "guid")
    guid.text = feed_item.guid
    guid.set("isPermaLink", "true")
    ET.SubElement(item, "pubDate").text = _rfc822(feed_item.published)

    enclosure = ET.SubElement(item, "enclosure")
    enclosure.set("url", feed_item.enclosure_url)
    enclosure.set("length", str(feed_item.enclosure_length))
    enclosure.set("type", feed_item.enclosure_type)

    if feed_item.duration_seconds is not None:
        ET.SubElement(item, "itunes:duration").text = _format_duration(feed_item.duration_seconds)


def render_rss(document: FeedDocument) -> bytes:
    """
    Serialize the whole document to UTF-8 RSS bytes.

    The document is rendered in memory; a failure raises before any byte
    reaches the caller.
    """
    rss = ET.Element("rss", version="2.0")
    rss.set("xmlns:itunes", ITUNES_NS)

    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = document.title
    ET.SubElement(channel, "link").text = document.link
    ET.SubElement(channel, "description").text = document.description
    ET.SubElement(channel, "lastBuildDate").text = _rfc822(document.updated)
    ET.SubElement(channel, "generator").text = GENERATOR

    if document.image_url:
        image = ET.SubElement(channel, "image")
        ET.SubElement(image, "url").text = document.image_url
        ET.SubElement(image, "title").text = document.title
        ET.SubElement(image, "link").text = document.link
        ET.SubElement(channel, "itunes:image").set("href", document.image_url)

    for feed_item in document.items:
        _add_item(channel, feed_item)

    return ET.tostring(rss, encoding="utf-8", xml_declaration=True)
