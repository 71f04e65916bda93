"""RSS, robots.txt and sitemap documents for the public site."""

import email.utils
import urllib.parse
from typing import Iterable
from xml.etree import ElementTree as ET

from blogsite.schemas.blog import BlogPostSummary

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_INDEX_PATH = "sitemap-index.xml"
SITEMAP_PATH = "sitemap-0.xml"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def post_url(site_url: str, slug: str) -> str:
    path = urllib.parse.quote(slug, safe="/")
    return urllib.parse.urljoin(site_url, f"blog/{path}/")


def build_rss(
    posts: Iterable[BlogPostSummary], site_url: str, title: str, description: str
) -> str:
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = title
    ET.SubElement(channel, "description").text = description
    ET.SubElement(channel, "link").text = site_url

    for post in posts:
        link = post_url(site_url, post.slug)
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = post.title
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "guid", isPermaLink="true").text = link
        ET.SubElement(item, "description").text = post.description
        ET.SubElement(item, "pubDate").text = email.utils.format_datetime(
            post.pubDate
        )

    return _to_xml(rss)


def build_robots_txt(site_url: str) -> str:
    sitemap_url = urllib.parse.urljoin(site_url, SITEMAP_INDEX_PATH)
    return "\n".join(["User-agent: *", "Allow: /", f"Sitemap: {sitemap_url}", ""])


def build_sitemap_index(site_url: str) -> str:
    index = ET.Element("sitemapindex", xmlns=SITEMAP_NS)
    sitemap = ET.SubElement(index, "sitemap")
    ET.SubElement(sitemap, "loc").text = urllib.parse.urljoin(site_url, SITEMAP_PATH)
    return _to_xml(index)


def build_sitemap(posts: Iterable[BlogPostSummary], site_url: str) -> str:
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
    for page in ("", "blog/"):
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = urllib.parse.urljoin(site_url, page)

    for post in posts:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = post_url(site_url, post.slug)
        lastmod = post.updatedDate or post.pubDate
        ET.SubElement(url, "lastmod").text = lastmod.isoformat()

    return _to_xml(urlset)


def _to_xml(root: ET.Element) -> str:
    return XML_DECLARATION + ET.tostring(root, encoding="unicode")
