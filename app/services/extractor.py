"""Per-page extraction: turns one HTML document into a :class:`CrawledPage`."""

import re
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from app.models.page import (
    CrawledPage,
    PageContent,
    PageHeading,
    PageImage,
    PageLinks,
    PageList,
    PageMeta,
)
from app.services.dom import attr, has_ancestor, parse_html, parent_tag, text_of
from app.services.forms import extract_forms
from app.services.frontier import path_of, resolve_url
from app.services.sections import extract_sections

_NON_CONTENT = ("nav", "header", "footer")
_LOGO_INDICATORS = ("logo", "brand", "site-logo", "header-logo")
_HERO_INDICATORS = ("hero", "banner", "jumbotron", "cover", "featured")

_HOME_PATHS = {"/", "/index.html", "/home"}
# Prefix order matters: first match wins.
PAGE_TYPE_PREFIXES = (
    ("/about", "about"),
    ("/contact", "contact"),
    ("/services", "services"),
    ("/products", "products"),
    ("/blog", "blog"),
    ("/news", "blog"),
    ("/portfolio", "portfolio"),
    ("/work", "portfolio"),
    ("/projects", "portfolio"),
    ("/pricing", "pricing"),
    ("/faq", "faq"),
    ("/team", "team"),
    ("/privacy", "legal"),
    ("/terms", "legal"),
    ("/legal", "legal"),
)
_BLOG_POST_RE = re.compile(r"/blog/[^/]+$|/\d{4}/\d{2}/")


def _extract_title(soup: BeautifulSoup) -> str:
    title = text_of(soup.title) if soup.title else ""
    if title:
        return title
    h1 = text_of(soup.find("h1"))
    return h1 or "Untitled"


def _meta(soup: BeautifulSoup, name: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"name": name}) or soup.find("meta", attrs={"property": name})
    return attr(tag, "content").strip() or None


def _extract_meta(soup: BeautifulSoup) -> PageMeta:
    keywords = _meta(soup, "keywords")
    favicon = soup.find("link", rel=lambda rel: bool(rel) and "icon" in rel)
    return PageMeta(
        description=_meta(soup, "description"),
        keywords=[k.strip() for k in keywords.split(",") if k.strip()] if keywords else None,
        og_title=_meta(soup, "og:title"),
        og_description=_meta(soup, "og:description"),
        og_image=_meta(soup, "og:image"),
        favicon=attr(favicon, "href") or None,
    )


def _extract_content(soup: BeautifulSoup) -> PageContent:
    """Headings, paragraphs and lists; paragraphs and lists skip nav/header/footer."""
    headings = [
        PageHeading(level=level, text=text_of(h))
        for level in range(1, 7)
        for h in soup.find_all(f"h{level}")
        if text_of(h)
    ]

    paragraphs = [
        text_of(p)
        for p in soup.find_all("p")
        if len(text_of(p)) > 20 and not has_ancestor(p, _NON_CONTENT)
    ]

    lists: List[PageList] = []
    for node in soup.find_all(["ul", "ol"]):
        if has_ancestor(node, _NON_CONTENT):
            continue
        items = [text_of(li) for li in node.find_all("li") if text_of(li)]
        if items:
            lists.append(PageList(type=node.name, items=items))

    return PageContent(headings=headings, paragraphs=paragraphs, lists=lists)


def is_likely_logo(img: Tag) -> bool:
    haystacks = [attr(img, name).lower() for name in ("src", "alt", "class", "id")]
    if any(indicator in h for indicator in _LOGO_INDICATORS for h in haystacks):
        return True
    return img.find_parent("header") is not None and img.find_parent("nav") is None


def _int_attr(img: Tag, name: str) -> Optional[int]:
    match = re.match(r"\s*(\d+)", attr(img, name))
    value = int(match.group(1)) if match else 0
    return value or None


def is_likely_hero(img: Tag) -> bool:
    own_class = attr(img, "class").lower()
    parent_class = attr(parent_tag(img), "class").lower()
    if any(indicator in own_class or indicator in parent_class for indicator in _HERO_INDICATORS):
        return True
    return (_int_attr(img, "width") or 0) > 800


def _extract_images(soup: BeautifulSoup, page_url: str) -> List[PageImage]:
    seen: set = set()
    images: List[PageImage] = []
    for img in soup.find_all("img"):
        src = attr(img, "src") or attr(img, "data-src")
        if not src:
            continue
        try:
            src = resolve_url(src.strip(), page_url)
        except ValueError:
            continue
        if src in seen:
            continue
        is_logo = is_likely_logo(img)
        if src.startswith("data:") and not is_logo:
            continue
        seen.add(src)
        images.append(
            PageImage(
                src=src,
                alt=attr(img, "alt") or None,
                title=attr(img, "title") or None,
                is_logo=is_logo,
                is_hero=is_likely_hero(img),
                width=_int_attr(img, "width"),
                height=_int_attr(img, "height"),
            )
        )
    return images


def _extract_links(soup: BeautifulSoup, page_url: str, base_url: str) -> PageLinks:
    links = PageLinks()
    base_host = urlparse(base_url).hostname

    def add(bucket: List[str], value: str) -> None:
        if value and value not in bucket:
            bucket.append(value)

    for a in soup.find_all("a", href=True):
        href = attr(a, "href").strip()
        if not href:
            continue
        lowered = href.lower()
        if lowered.startswith("mailto:"):
            add(links.emails, href[len("mailto:"):].split("?")[0])
            continue
        if lowered.startswith("tel:"):
            add(links.phones, href[len("tel:"):])
            continue
        if href.startswith("#") or lowered.startswith("javascript:"):
            continue

        try:
            resolved = resolve_url(href, page_url)
            parsed = urlparse(resolved)
        except ValueError:
            continue
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            continue
        add(links.internal if parsed.hostname == base_host else links.external, resolved)

    return links


def detect_page_type(path: str) -> str:
    """Classify a page purely from its URL path."""
    lowered = path.lower()
    if lowered in _HOME_PATHS:
        return "home"
    for prefix, page_type in PAGE_TYPE_PREFIXES:
        if lowered.startswith(prefix):
            return page_type
    if _BLOG_POST_RE.search(lowered):
        return "blog-post"
    return "other"


def extract_page(
    html: str,
    url: str,
    depth: int = 0,
    base_url: Optional[str] = None,
    load_time_ms: int = 0,
) -> CrawledPage:
    """Extract structured facts from *html* fetched at *url*.

    Missing elements yield empty or ``None`` fields; nothing here raises for
    malformed markup.
    """
    if base_url is None:
        parsed = urlparse(url)
        base_url = f"{parsed.scheme}://{parsed.hostname}"
    soup = parse_html(html)
    path = path_of(url)
    images = _extract_images(soup, url)

    return CrawledPage(
        url=url,
        path=path,
        title=_extract_title(soup),
        meta=_extract_meta(soup),
        content=_extract_content(soup),
        sections=extract_sections(soup, images),
        images=images,
        forms=extract_forms(soup),
        links=_extract_links(soup, url, base_url),
        page_type=detect_page_type(path),
        depth=depth,
        crawled_at=datetime.now(timezone.utc).isoformat(),
        load_time_ms=load_time_ms,
    )
