"""
RSS 2.0 formatting utilities for bdrss.
"""
import mimetypes
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Dict, Iterable, Optional
import logging

from bdrss import __version__
from bdrss.core.article import Article

# Configure logging
logger = logging.getLogger(__name__)

ATOM_NS = 'http://www.w3.org/2005/Atom'
GENERATOR = f'bdrss {__version__}'

INVALID_XML_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]')

ET.register_namespace('atom', ATOM_NS)


@dataclass
class FeedChannel:
    """
    Channel-level metadata of a feed.
    """
    title: str
    description: str
    feed_url: str
    site_url: str
    language: str = "en"


def rfc822(moment: datetime) -> str:
    """Format a datetime the way RSS wants it; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def guess_enclosure_type(url: str) -> str:
    """
    Guess the MIME type of an enclosure from its URL.

    Args:
        url: Enclosure URL, query string allowed

    Returns:
        The MIME type, image/jpeg when the extension says nothing
    """
    mime_type, _ = mimetypes.guess_type(url.split('?', 1)[0])
    return mime_type or 'image/jpeg'


def xml_safe(value: Optional[str]) -> Optional[str]:
    """
    Drop characters XML 1.0 does not allow (control characters other than tab, LF and CR).

    ElementTree serializes them as is, which leaves an unparseable document.
    """
    if value is None:
        return None
    return INVALID_XML_CHARS.sub('', value)


def _element(parent: ET.Element, tag: str, text: Optional[str] = None,
             attrib: Optional[Dict[str, str]] = None) -> ET.Element:
    """Append a child element with XML-safe text and attribute values."""
    element = ET.SubElement(parent, tag, {k: xml_safe(v) for k, v in (attrib or {}).items()})
    if text is not None:
        element.text = xml_safe(text)
    return element


class RssFormatter:
    """
    Formats articles into an RSS 2.0 document.
    """
    def __init__(self, indent: str = '  '):
        """
        Initialize the RssFormatter.

        Args:
            indent: Indentation used for each nesting level
        """
        self.indent = indent

    def build(self, channel: FeedChannel, articles: Iterable[Article],
              now: Optional[datetime] = None) -> ET.Element:
        """
        Build the <rss> element tree.

        Every item is stamped with ``now``; the page carries no per-article dates.

        Args:
            channel: Channel metadata
            articles: Articles to include, in order
            now: Generation time (defaults to the current UTC time)

        Returns:
            The root element
        """
        stamp = rfc822(now or datetime.now(timezone.utc))

        rss = ET.Element('rss', {'version': '2.0'})
        chan = ET.SubElement(rss, 'channel')
        _element(chan, 'title', channel.title)
        _element(chan, 'description', channel.description)
        _element(chan, 'link', channel.site_url)
        _element(chan, f'{{{ATOM_NS}}}link', attrib={
            'href': channel.feed_url,
            'rel': 'self',
            'type': 'application/rss+xml',
        })
        _element(chan, 'generator', GENERATOR)
        _element(chan, 'lastBuildDate', stamp)
        _element(chan, 'pubDate', stamp)
        _element(chan, 'language', channel.language)

        for article in articles:
            item = ET.SubElement(chan, 'item')
            _element(item, 'title', article.title)
            _element(item, 'link', article.link)
            _element(item, 'description', article.description or '')
            _element(item, 'pubDate', stamp)
            if article.image:
                _element(item, 'enclosure', attrib={
                    'url': article.image,
                    'length': '0',
                    'type': guess_enclosure_type(article.image),
                })

        return rss

    def render(self, channel: FeedChannel, articles: Iterable[Article],
               now: Optional[datetime] = None) -> str:
        """
        Render the feed as indented XML text.

        Args:
            channel: Channel metadata
            articles: Articles to include, in order
            now: Generation time (defaults to the current UTC time)

        Returns:
            The XML document, including the declaration
        """
        rss = self.build(channel, articles, now)
        logger.debug(f"Rendering feed '{channel.title}' with {len(rss.findall('channel/item'))} items")
        ET.indent(rss, space=self.indent)
        body = ET.tostring(rss, encoding='unicode')
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + '\n'
