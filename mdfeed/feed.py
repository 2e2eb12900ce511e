from __future__ import annotations

import datetime as dt
import html
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import SiteConfig
from .errors import MissingFieldError
from .pages import Page, read_pages_json
from .render import write_output

RSS_VERSION = "2.0"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'
INDENT = "  "
RFC1123Z = "%a, %d %b %Y %H:%M:%S %z"
# Anything outside the XML 1.0 Char production.
INVALID_XML_CHARS_RE = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


@dataclass
class Item:
    title: str
    link: str
    description: str
    pub_date: str
    category: str


@dataclass
class Channel:
    title: str
    link: str
    description: str
    pub_date: str
    items: list[Item] = field(default_factory=list)


def required_str(metadata: dict, key: str, index: int) -> str:
    if key not in metadata:
        raise MissingFieldError(key, index)
    value = metadata[key]
    if not isinstance(value, str):
        raise MissingFieldError(key, index, f"not a string ({type(value).__name__})")
    return value


def optional_str(metadata: dict, key: str) -> str:
    value = metadata.get(key)
    return value if isinstance(value, str) else ""


def join_categories(metadata: dict) -> str:
    raw_categories = metadata.get("categories")
    if not isinstance(raw_categories, list):
        return ""
    return ", ".join(category for category in raw_categories if isinstance(category, str))


def item_link(site_url: str, slug: str) -> str:
    return f"{site_url.rstrip('/')}/{slug}"


def page_to_item(page: Page, index: int, site_url: str) -> Item:
    title = required_str(page.metadata, "title", index)
    slug = required_str(page.metadata, "slug", index)
    return Item(
        title=title,
        link=item_link(site_url, slug),
        description=page.content,
        pub_date=optional_str(page.metadata, "date"),
        category=join_categories(page.metadata),
    )


def build_channel(pages: list[Page], site: SiteConfig, now: Optional[dt.datetime] = None) -> Channel:
    if now is None or now.tzinfo is None:
        now = (now or dt.datetime.now()).astimezone()
    channel = Channel(
        title=site.title,
        link=site.url,
        description=site.description,
        pub_date=now.strftime(RFC1123Z),
    )
    for index, page in enumerate(pages):
        channel.items.append(page_to_item(page, index, site.url))
    return channel


def xml_text(text: str) -> str:
    return html.escape(INVALID_XML_CHARS_RE.sub("\ufffd", text))


def _element(name: str, text: str, depth: int) -> str:
    return f"{INDENT * depth}<{name}>{xml_text(text)}</{name}>"


def render_rss(channel: Channel) -> str:
    lines = [
        XML_HEADER,
        f'<rss version="{RSS_VERSION}">',
        f"{INDENT}<channel>",
        _element("title", channel.title, 2),
        _element("link", channel.link, 2),
        _element("description", channel.description, 2),
        _element("pubDate", channel.pub_date, 2),
    ]
    for item in channel.items:
        lines.extend(
            [
                f"{INDENT * 2}<item>",
                _element("title", item.title, 3),
                _element("link", item.link, 3),
                _element("description", item.description, 3),
                _element("pubDate", item.pub_date, 3),
                _element("category", item.category, 3),
                f"{INDENT * 2}</item>",
            ]
        )
    lines.extend([f"{INDENT}</channel>", "</rss>"])
    return "\n".join(lines)


def generate_rss(
    pages: list[Page], output_path: Path, site: SiteConfig, now: Optional[dt.datetime] = None
) -> Channel:
    channel = build_channel(pages, site, now)
    write_output(output_path, render_rss(channel))
    return channel


def generate_rss_from_json(
    input_path: Path, output_path: Path, site: SiteConfig, now: Optional[dt.datetime] = None
) -> Channel:
    pages = read_pages_json(input_path)
    return generate_rss(pages, output_path, site, now)
