"""Best-effort font detection from raw HTML."""

import re
from collections import Counter
from typing import Iterable, Optional
from urllib.parse import unquote_plus

from app.models.crawl_response import BrandFonts

GENERIC_FAMILIES = {
    "serif",
    "sans-serif",
    "monospace",
    "cursive",
    "fantasy",
    "system-ui",
    "ui-sans-serif",
    "ui-serif",
    "ui-monospace",
    "-apple-system",
    "blinkmacsystemfont",
    "inherit",
    "initial",
    "unset",
    "var",
}

_STYLE_BLOCK_RE = re.compile(r"<style[^>]*>([\s\S]*?)</style>", re.IGNORECASE)
_RULE_RE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_FONT_FAMILY_RE = re.compile(r"font-family\s*:\s*([^;}]+)", re.IGNORECASE)
_INLINE_STYLE_RE = re.compile(r"style=\"([^\"]*)\"|style='([^']*)'", re.IGNORECASE)
_GOOGLE_FONTS_RE = re.compile(r"fonts\.googleapis\.com/css2?\?([^\"'>\s]+)", re.IGNORECASE)
_HEADING_SELECTOR_RE = re.compile(r"\bh[1-3]\b", re.IGNORECASE)
_BODY_SELECTOR_RE = re.compile(r"(^|[\s,])(body|html)([\s,:.#\[]|$)", re.IGNORECASE)


def first_family(declaration: str) -> Optional[str]:
    """Return the first non-generic family of a ``font-family`` value."""
    for family in declaration.split(","):
        name = family.strip().strip("'\"").strip()
        if name and name.lower() not in GENERIC_FAMILIES and not name.lower().startswith("var("):
            return name
    return None


def _google_families(query: str) -> list:
    families = []
    for part in query.replace("&amp;", "&").split("&"):
        if not part.startswith("family="):
            continue
        for family in unquote_plus(part[len("family="):]).split("|"):
            name = family.split(":")[0].strip()
            if name:
                families.append(name)
    return families


def extract_fonts_from_html(html_pages: Iterable[str]) -> BrandFonts:
    overall: Counter = Counter()
    headings: Counter = Counter()
    body: Counter = Counter()

    for html in html_pages:
        for block in _STYLE_BLOCK_RE.findall(html):
            for selector, declarations in _RULE_RE.findall(block):
                for value in _FONT_FAMILY_RE.findall(declarations):
                    family = first_family(value)
                    if not family:
                        continue
                    overall[family] += 1
                    if _HEADING_SELECTOR_RE.search(selector):
                        headings[family] += 1
                    if _BODY_SELECTOR_RE.search(selector.strip()):
                        body[family] += 1

        for double, single in _INLINE_STYLE_RE.findall(html):
            for value in _FONT_FAMILY_RE.findall(double or single):
                family = first_family(value)
                if family:
                    overall[family] += 1

        for query in _GOOGLE_FONTS_RE.findall(html):
            for family in _google_families(query):
                overall[family] += 1

    if not overall:
        return BrandFonts()

    most_common = overall.most_common(1)[0][0]
    return BrandFonts(
        heading=headings.most_common(1)[0][0] if headings else most_common,
        body=body.most_common(1)[0][0] if body else most_common,
        all_fonts=[family for family, _ in overall.most_common()],
    )
