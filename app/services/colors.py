"""Brand color extraction from raw HTML.

Works on the raw markup of every crawled page rather than the parsed tree,
because colors live in ``<style>`` blocks and inline ``style`` attributes.

Weights per occurrence:

============================  ======
source                        weight
============================  ======
``<meta name=theme-color>``   100
CSS custom property (``--x``) 5
``<style>`` block             1
inline ``style=""``           1
============================  ======
"""

import re
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from app.models.crawl_response import BrandColors, ColorCount

THEME_COLOR_WEIGHT = 100
CSS_VARIABLE_WEIGHT = 5
OCCURRENCE_WEIGHT = 1

NEUTRAL_SATURATION = 0.10
LIGHT_LUMINANCE = 0.70
DARK_LUMINANCE = 0.30
MAX_RANKED_COLORS = 10

_HEX_RE = re.compile(r"#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})\b")
_RGB_RE = re.compile(r"rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+\s*)?\)", re.IGNORECASE)
_THEME_COLOR_RES = (
    re.compile(r"<meta[^>]*name=[\"']theme-color[\"'][^>]*content=[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"<meta[^>]*content=[\"']([^\"']+)[\"'][^>]*name=[\"']theme-color[\"']", re.IGNORECASE),
)
_STYLE_BLOCK_RE = re.compile(r"<style[^>]*>([\s\S]*?)</style>", re.IGNORECASE)
_INLINE_STYLE_RE = re.compile(r"style=(?:\"[^\"]*\"|'[^']*')", re.IGNORECASE)
_CSS_VARIABLE_RE = re.compile(r"--[\w-]+:\s*(#[0-9A-Fa-f]{6}|#[0-9A-Fa-f]{3})\b")


def normalize_color(value: str) -> Optional[str]:
    """Return *value* as ``#RRGGBB`` uppercase, or ``None`` if it is not a color literal."""
    value = value.strip()
    match = re.fullmatch(r"#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})", value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return f"#{digits.upper()}"
    match = _RGB_RE.fullmatch(value)
    if match:
        return rgb_to_hex(*(int(channel) for channel in match.groups()))
    return None


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#{:02X}{:02X}{:02X}".format(*(min(255, max(0, c)) for c in (r, g, b)))


def _channels(color: str) -> Tuple[int, int, int]:
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def saturation(color: str) -> float:
    """HSL saturation of a ``#RRGGBB`` color, 0..1."""
    r, g, b = _channels(color)
    high, low = max(r, g, b), min(r, g, b)
    if high == low:
        return 0.0
    lightness = (high + low) / 2 / 255
    return (high - low) / (510 - high - low if lightness > 0.5 else high + low)


def luminance(color: str) -> float:
    """ITU-R BT.601 luma of a ``#RRGGBB`` color, 0..1."""
    r, g, b = _channels(color)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def is_neutral(color: str) -> bool:
    return saturation(color) < NEUTRAL_SATURATION


def is_light(color: str) -> bool:
    return luminance(color) > LIGHT_LUMINANCE


def is_dark(color: str) -> bool:
    return luminance(color) < DARK_LUMINANCE


def _count_literals(text: str, counts: Counter) -> None:
    for match in _HEX_RE.finditer(text):
        color = normalize_color(match.group(0))
        if color:
            counts[color] += OCCURRENCE_WEIGHT
    for match in _RGB_RE.finditer(text):
        counts[rgb_to_hex(*(int(channel) for channel in match.groups()))] += OCCURRENCE_WEIGHT


def count_colors(html_pages: Iterable[str]) -> Counter:
    """Accumulate weighted color occurrences across *html_pages*.

    The returned counter preserves first-seen order, which breaks ties when
    ranking.
    """
    counts: Counter = Counter()
    for html in html_pages:
        for regex in _THEME_COLOR_RES:
            match = regex.search(html)
            if match:
                color = normalize_color(match.group(1))
                if color:
                    counts[color] += THEME_COLOR_WEIGHT
                break

        for block in _STYLE_BLOCK_RE.findall(html):
            _count_literals(block, counts)

        for inline in _INLINE_STYLE_RE.findall(html):
            _count_literals(inline, counts)

        for literal in _CSS_VARIABLE_RE.findall(html):
            color = normalize_color(literal)
            if color:
                counts[color] += CSS_VARIABLE_WEIGHT
    return counts


def _ranked(counts: Counter) -> List[Tuple[str, int]]:
    # sorted() is stable, so equal weights keep first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def extract_colors_from_html(html_pages: Iterable[str]) -> BrandColors:
    """Classify the site's colors into brand roles.

    Neutral colors (saturation < 0.10) never become primary, secondary or
    accent.  Background is the heaviest color with luminance > 0.70; text is
    the heaviest non-neutral color with luminance < 0.30.
    """
    ranked = _ranked(count_colors(html_pages))
    brand = [(color, count) for color, count in ranked if not is_neutral(color)]
    brand_colors = [color for color, _ in brand] + [None, None, None]
    backgrounds = [color for color, _ in ranked if is_light(color)]
    texts = [color for color, _ in brand if is_dark(color)]

    return BrandColors(
        primary=brand_colors[0],
        secondary=brand_colors[1],
        accent=brand_colors[2],
        background=backgrounds[0] if backgrounds else None,
        text=texts[0] if texts else None,
        all_colors=[ColorCount(color=color, count=count) for color, count in brand[:MAX_RANKED_COLORS]],
    )
