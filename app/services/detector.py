"""Technology detection from raw page HTML.

Each technology is recognised by a fingerprint regex over the markup the
HTTP fetch returned: asset paths, generator tags, framework mount points and
inline data scripts.  Detection is best-effort; a site can report several
technologies (e.g. ``wordpress`` and ``jquery``).
"""

import re
from typing import List, Pattern, Tuple

# ---------------------------------------------------------------------------
# CMS / hosted-builder fingerprints
# ---------------------------------------------------------------------------
_WORDPRESS = re.compile(
    r"/wp-content/"
    r"|/wp-includes/"
    # <link rel="https://api.w.org/">: WP REST-API link relation
    r'|rel=["\']https://api\.w\.org/'
    # <meta name="generator" content="WordPress …">
    r'|<meta[^>]+name=["\']generator["\'][^>]+content=["\']WordPress',
    re.IGNORECASE,
)
_SHOPIFY = re.compile(r"cdn\.shopify\.com|Shopify\.theme|myshopify\.com", re.IGNORECASE)
_WIX = re.compile(r"static\.wixstatic\.com|wix-code|<meta[^>]+content=[\"']Wix\.com", re.IGNORECASE)
_SQUARESPACE = re.compile(r"static1\.squarespace\.com|squarespace-cdn|Static\.SQUARESPACE_CONTEXT", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Front-end framework fingerprints
# ---------------------------------------------------------------------------
_NEXT = re.compile(r"__NEXT_DATA__|/_next/static/|<div\s[^>]*\bid=[\"']__next[\"']", re.IGNORECASE)
_NUXT = re.compile(r"window\.__NUXT__|/_nuxt/|<div\s[^>]*\bid=[\"']__nuxt[\"']", re.IGNORECASE)
_REACT = re.compile(r"data-reactroot|react(?:-dom)?(?:\.production)?(?:\.min)?\.js|<div\s[^>]*\bid=[\"']root[\"']", re.IGNORECASE)
_VUE = re.compile(r"vue(?:\.runtime)?(?:\.global)?(?:\.prod)?(?:\.min)?\.js|\bdata-v-[0-9a-f]{6,}\b", re.IGNORECASE)
_ANGULAR = re.compile(r"ng-version=|\bng-app\b|angular(?:\.min)?\.js", re.IGNORECASE)
_JQUERY = re.compile(r"jquery(?:[.-][\d.]+)?(?:\.min)?\.js", re.IGNORECASE)
_BOOTSTRAP = re.compile(r"bootstrap(?:[.-][\d.]+)?(?:\.bundle)?(?:\.min)?\.(?:css|js)", re.IGNORECASE)
_TAILWIND = re.compile(r"tailwindcss|cdn\.tailwindcss\.com|\bclass=[\"'][^\"']*\b(?:flex|grid) [^\"']*\b(?:px|py|mx|my)-\d", re.IGNORECASE)

TECHNOLOGY_FINGERPRINTS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("wordpress", _WORDPRESS),
    ("shopify", _SHOPIFY),
    ("wix", _WIX),
    ("squarespace", _SQUARESPACE),
    ("next.js", _NEXT),
    ("nuxt", _NUXT),
    ("react", _REACT),
    ("vue", _VUE),
    ("angular", _ANGULAR),
    ("jquery", _JQUERY),
    ("bootstrap", _BOOTSTRAP),
    ("tailwind", _TAILWIND),
)


def detect_technologies(html: str) -> List[str]:
    """Return the technologies whose fingerprints appear in *html*, in table order."""
    return [name for name, pattern in TECHNOLOGY_FINGERPRINTS if pattern.search(html)]
