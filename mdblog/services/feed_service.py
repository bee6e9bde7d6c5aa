import datetime
import urllib.parse
from email.utils import format_datetime
from typing import Iterable, List, Optional, Sequence
from xml.sax.saxutils import escape

from mdblog.schemas.blog import Post, TagInfo

RSS_MAX_ITEMS = 20


def _rfc822(date_str: str) -> str:
    day = datetime.date.fromisoformat(date_str)
    return format_datetime(
        datetime.datetime(day.year, day.month, day.day, tzinfo=datetime.timezone.utc)
    )


def _cdata(html: str) -> str:
    # A literal "]]>" would end the section early
    return "<![CDATA[" + html.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def build_rss(
    posts: Sequence[Post],
    blog_title: str,
    blog_url: str,
    description: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> str:
    """RSS 2.0 feed of the newest published posts."""
    blog_url = blog_url.rstrip("/")
    published = [post for post in posts if not post.draft][:RSS_MAX_ITEMS]
    now = now or datetime.datetime.now(datetime.timezone.utc)

    last_build = _rfc822(published[0].date) if published else format_datetime(now)
    items = "\n".join(_rss_item(post, blog_url) for post in published)

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{escape(blog_title)}</title>
    <link>{escape(blog_url)}</link>
    <description>{escape(description or f"Articles from {blog_title}")}</description>
    <language>en-us</language>
    <lastBuildDate>{last_build}</lastBuildDate>
    <pubDate>{last_build}</pubDate>
    <ttl>60</ttl>
    <atom:link href="{escape(blog_url)}/feed.xml" rel="self" type="application/rss+xml" />
{items}
  </channel>
</rss>
"""


def _rss_item(post: Post, blog_url: str) -> str:
    post_url = escape(f"{blog_url}/posts/{post.slug}")
    lines = [
        "    <item>",
        f"      <title>{escape(post.title)}</title>",
        f"      <link>{post_url}</link>",
        f'      <guid isPermaLink="true">{post_url}</guid>',
        f"      <pubDate>{_rfc822(post.date)}</pubDate>",
    ]
    if post.excerpt:
        lines.append(f"      <description>{escape(post.excerpt)}</description>")
    lines.extend(f"      <category>{escape(tag)}</category>" for tag in post.tags)
    lines.append(f"      <content:encoded>{_cdata(post.content)}</content:encoded>")
    lines.append("    </item>")
    return "\n".join(lines)


def build_sitemap(
    posts: Iterable[Post], tags: Iterable[TagInfo], blog_url: str
) -> str:
    """sitemap.xml covering the home page, the tag index, posts and tag pages."""
    blog_url = blog_url.rstrip("/")
    posts = [post for post in posts if not post.draft]
    newest = posts[0].modified or posts[0].date if posts else None

    entries: List[str] = [
        _sitemap_url(f"{blog_url}/", newest, "daily", "1.0"),
        _sitemap_url(f"{blog_url}/tags", newest, "weekly", "0.5"),
    ]
    for post in posts:
        entries.append(
            _sitemap_url(
                f"{blog_url}/posts/{post.slug}",
                post.modified or post.date,
                "monthly",
                "0.8",
            )
        )
    for tag in tags:
        entries.append(
            _sitemap_url(
                f"{blog_url}/tags/{urllib.parse.quote(tag.name, safe='')}",
                None,
                "weekly",
                "0.4",
            )
        )

    body = "\n".join(entries)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{body}
</urlset>
"""


def _sitemap_url(loc: str, lastmod: Optional[str], changefreq: str, priority: str) -> str:
    lines = ["  <url>", f"    <loc>{escape(loc)}</loc>"]
    if lastmod:
        lines.append(f"    <lastmod>{lastmod}</lastmod>")
    lines.append(f"    <changefreq>{changefreq}</changefreq>")
    lines.append(f"    <priority>{priority}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def build_robots(blog_url: str) -> str:
    return f"User-agent: *\nAllow: /\n\nSitemap: {blog_url.rstrip('/')}/sitemap.xml\n"
