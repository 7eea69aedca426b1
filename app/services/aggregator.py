"""Cross-page aggregation: brand, navigation, global elements and stats.

Every field is derived with one of two named strategies:

``first_found``
    The first non-empty value while iterating pages in crawl order.  Used for
    values that are unique per site (social links, contact email/phone,
    copyright line).

``frequency_threshold`` / ``most_frequent``
    Count each candidate once per page and keep those seen on at least
    ``min_pages`` pages (navigation) or the single most common one (logo).
    Ties go to the candidate seen first.
"""

import math
import re
from collections import Counter
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, TypeVar
from urllib.parse import urlparse

from app.models.crawl_response import (
    BrandData,
    ContactInfo,
    GlobalElements,
    NavigationData,
    NavItem,
    SiteStats,
    SocialLink,
)
from app.models.page import CrawledPage
from app.services.colors import extract_colors_from_html
from app.services.detector import detect_technologies
from app.services.fonts import extract_fonts_from_html
from app.services.frontier import normalize_url, path_of

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

NAVIGATION_THRESHOLD = 0.5
MAX_PRIMARY_NAV_ITEMS = 8
MAX_TAGLINE_DESCRIPTION = 100
MAX_TAGLINE_HEADING = 80

# Canonical position of well-known pages in a navigation bar.
NAV_PAGE_ORDER = ("/", "/about", "/services", "/products", "/portfolio", "/blog", "/contact")

SOCIAL_DOMAINS = (
    ("facebook.com", "facebook"),
    ("fb.com", "facebook"),
    ("twitter.com", "twitter"),
    ("x.com", "twitter"),
    ("instagram.com", "instagram"),
    ("linkedin.com", "linkedin"),
    ("youtube.com", "youtube"),
    ("tiktok.com", "tiktok"),
    ("pinterest.com", "pinterest"),
    ("github.com", "github"),
)

_TITLE_SEPARATORS_RE = re.compile(r"[|\-–—]")
_COPYRIGHT_RE = re.compile(r"(©|&copy;|\(c\)|copyright)[^|\n]*", re.IGNORECASE)
_ECOMMERCE_PATHS = ("/cart", "/checkout", "/product", "/shop")


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def first_found(pages: Iterable[CrawledPage], getter: Callable[[CrawledPage], Optional[T]]) -> Optional[T]:
    """Return the first truthy ``getter(page)`` in crawl order."""
    for page in pages:
        value = getter(page)
        if value:
            return value
    return None


def _page_counts(pages: Iterable[CrawledPage], keys_fn: Callable[[CrawledPage], Iterable[K]]) -> Counter:
    counts: Counter = Counter()
    for page in pages:
        # once per page
        for key in dict.fromkeys(keys_fn(page)):
            counts[key] += 1
    return counts


def frequency_threshold(
    pages: Sequence[CrawledPage],
    keys_fn: Callable[[CrawledPage], Iterable[K]],
    min_pages: int,
) -> List[K]:
    """Return keys present on at least *min_pages* distinct pages, first-seen order."""
    return [key for key, count in _page_counts(pages, keys_fn).items() if count >= min_pages]


def most_frequent(pages: Sequence[CrawledPage], keys_fn: Callable[[CrawledPage], Iterable[K]]) -> Optional[K]:
    """Return the key present on the most distinct pages; ties go to the first seen."""
    counts = _page_counts(pages, keys_fn)
    best: Optional[K] = None
    best_count = 0
    for key, count in counts.items():
        if count > best_count:
            best, best_count = key, count
    return best


# ---------------------------------------------------------------------------
# Brand
# ---------------------------------------------------------------------------

def home_page(pages: Sequence[CrawledPage]) -> Optional[CrawledPage]:
    for page in pages:
        if page.path in ("/", ""):
            return page
    return pages[0] if pages else None


def _logo_alt(pages: Sequence[CrawledPage], src: str) -> Optional[str]:
    return first_found(
        pages,
        lambda page: next((img.alt for img in page.images if img.src == src and img.alt), None),
    )


def company_name_from_title(title: str) -> Optional[str]:
    name = _TITLE_SEPARATORS_RE.split(title, maxsplit=1)[0].strip()
    return name or None


def extract_tagline(pages: Sequence[CrawledPage]) -> Optional[str]:
    home = home_page(pages)
    if home is None:
        return None
    description = home.meta.description
    if description and len(description) < MAX_TAGLINE_DESCRIPTION:
        return description
    h2 = next((h.text for h in home.content.headings if h.level == 2), None)
    if h2 and len(h2) < MAX_TAGLINE_HEADING:
        return h2
    return None


def extract_brand(pages: Sequence[CrawledPage], raw_html_pages: Sequence[str] = ()) -> BrandData:
    """Vote on the site's logo and name, and classify its colors and fonts."""
    logo = most_frequent(pages, lambda page: [img.src for img in page.images if img.is_logo])
    logo_alt = _logo_alt(pages, logo) if logo else None

    company_name = logo_alt
    if not company_name:
        home = home_page(pages)
        if home is not None:
            company_name = company_name_from_title(home.title)

    return BrandData(
        logo=logo,
        logo_alt=logo_alt,
        company_name=company_name,
        tagline=extract_tagline(pages),
        colors=extract_colors_from_html(raw_html_pages),
        fonts=extract_fonts_from_html(raw_html_pages),
    )


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

def format_nav_label(path: str) -> str:
    """Humanize the last path segment: ``/about-us`` → ``About Us``, ``/`` → ``Home``."""
    slug = path.rstrip("/").rsplit("/", 1)[-1]
    slug = re.sub(r"\.\w+$", "", slug)
    words = re.sub(r"[-_]+", " ", slug).split()
    if not words:
        return "Home"
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _nav_rank(path: str) -> int:
    if path == "/":
        return 0
    lowered = path.lower()
    for index, prefix in enumerate(NAV_PAGE_ORDER[1:], start=1):
        if lowered == prefix or lowered.startswith(prefix + "/") or lowered.startswith(prefix + "-"):
            return index
    return len(NAV_PAGE_ORDER)


def navigation_threshold(page_count: int) -> int:
    return max(1, math.ceil(page_count * NAVIGATION_THRESHOLD))


def build_navigation(pages: Sequence[CrawledPage]) -> NavigationData:
    """Keep internal links seen on at least half of the pages.

    Links are keyed by their normalized URL, so ``/about`` and ``/about/``
    count as one link.
    """
    if not pages:
        return NavigationData()

    def keys(page: CrawledPage) -> List[str]:
        return [normalize_url(link, page.url) for link in page.links.internal]

    qualifying = frequency_threshold(pages, keys, navigation_threshold(len(pages)))
    items = []
    for url in qualifying:
        path = path_of(url) or "/"
        items.append(NavItem(label=format_nav_label(path), path=path, is_external=False))
    # sort is stable: unknown paths keep first-seen order after the known ones
    items.sort(key=lambda item: _nav_rank(item.path))

    return NavigationData(primary=items[:MAX_PRIMARY_NAV_ITEMS], footer=items)


# ---------------------------------------------------------------------------
# Global elements
# ---------------------------------------------------------------------------

def social_platform(url: str) -> Optional[str]:
    host = (urlparse(url).hostname or "").lower()
    for domain, platform in SOCIAL_DOMAINS:
        if host == domain or host.endswith("." + domain):
            return platform
    return None


def _copyright(page: CrawledPage) -> Optional[str]:
    for section in page.sections:
        if section.type != "footer":
            continue
        for text in section.content:
            match = _COPYRIGHT_RE.search(text)
            if match:
                return match.group(0).strip()[:200]
    return None


def extract_global_elements(pages: Sequence[CrawledPage]) -> GlobalElements:
    """Social links, contact details and copyright line, first found wins."""
    social_links: List[SocialLink] = []
    seen: set = set()
    for page in pages:
        for link in page.links.external:
            if link in seen:
                continue
            platform = social_platform(link)
            if platform:
                seen.add(link)
                social_links.append(SocialLink(platform=platform, url=link))

    return GlobalElements(
        social_links=social_links,
        contact_info=ContactInfo(
            phone=first_found(pages, lambda page: page.links.phones[0] if page.links.phones else None),
            email=first_found(pages, lambda page: page.links.emails[0] if page.links.emails else None),
        ),
        copyright=first_found(pages, _copyright),
    )


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

def compute_stats(pages: Sequence[CrawledPage], raw_html_pages: Sequence[str] = ()) -> SiteStats:
    technologies: List[str] = []
    for html in raw_html_pages:
        for tech in detect_technologies(html):
            if tech not in technologies:
                technologies.append(tech)

    return SiteStats(
        total_pages=len(pages),
        total_images=sum(len(page.images) for page in pages),
        total_forms=sum(len(page.forms) for page in pages),
        total_links=sum(len(page.links.internal) + len(page.links.external) for page in pages),
        has_ecommerce=any(marker in page.path.lower() for page in pages for marker in _ECOMMERCE_PATHS),
        has_blog=any(page.page_type in ("blog", "blog-post") for page in pages),
        technologies=technologies,
    )
