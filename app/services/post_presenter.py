import datetime
import urllib.parse
from typing import Optional

import markdown

from app.schemas.preview import Frontmatter, Post, PostView
from app.settings import settings

UNTITLED = "Untitled post"


def author_image_path(author_id: Optional[int]) -> Optional[str]:
    if not author_id:
        return None
    return f"/images/user{author_id}.jpg"


def share_url(slug: Optional[str]) -> str:
    base = settings.SHARE_BASE_URL
    return f"{base}{slug}" if slug else base


def share_text(title: Optional[str]) -> str:
    if title:
        return f"{title}｜{settings.SITE_NAME}"
    return f"I read an article｜{settings.SITE_NAME}"


def twitter_share_url(slug: Optional[str], title: Optional[str]) -> str:
    query = urllib.parse.urlencode(
        {"url": share_url(slug), "text": share_text(title)},
        quote_via=urllib.parse.quote,
    )
    return f"https://twitter.com/intent/tweet?{query}"


def display_title(frontmatter: Frontmatter) -> str:
    return frontmatter.title or UNTITLED


def display_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def render_body_html(body: str) -> str:
    return markdown.markdown(body, extensions=["fenced_code", "tables"])


def build_post_view(post: Post, author_image_failed: bool = False) -> PostView:
    """Bundle everything the page chrome needs to render a loaded post."""
    fm = post.frontmatter
    image = None if author_image_failed else author_image_path(fm.authorID)
    return PostView(
        slug=post.slug,
        title=display_title(fm),
        date=fm.date,
        displayDate=display_date(fm.date),
        summary=fm.summary,
        author=fm.author,
        authorImage=image,
        tags=fm.tags,
        body=post.body,
        html=render_body_html(post.body),
        shareUrl=share_url(post.slug),
        twitterShareUrl=twitter_share_url(post.slug, fm.title),
        extras=fm.extras,
    )
