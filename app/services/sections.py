"""Semantic section detection for a single page.

Detection runs in passes, each one only when the previous found nothing:

1. explicit ``<section>``, ``[role=region]``, ``<article>`` and ``.section``
   elements;
2. any element whose class or id mentions ``section`` / ``container``;
3. sections synthesized from ``<h1>``/``<h2>`` boundaries.

A hero is then unshifted from ``<header>`` or hero-like markup when the first
section is not a hero, and ``<footer>`` adds a trailing footer section.  If
nothing but a footer came out of that, a fully synthetic structure is built
from the page's paragraphs so that a page with any text never yields an empty
section list.
"""

import logging
import re
from typing import List, Optional, Set

from bs4 import BeautifulSoup
from bs4.element import Tag

from app.models.page import PageImage, PageSection
from app.services.dom import attr, body_of, has_ancestor, parent_tag, select_first, text_of
from app.services.section_patterns import (
    CTA_SELECTOR,
    EXPLICIT_SECTION_SELECTOR,
    HEADING_CTA_SELECTOR,
    HERO_MARKUP_SELECTOR,
    LOOSE_SECTION_SELECTOR,
    SYNTHETIC_CTA_SELECTOR,
    classify_identifiers,
    classify_text,
)

logger = logging.getLogger(__name__)

MAX_SECTION_CONTENT = 10
MAX_SECTION_IMAGES = 4
MAX_HEADING_IMAGES = 2
MAX_FOOTER_TEXT = 500

_BACKGROUND_URL_RE = re.compile(r"url\(\s*['\"]?([^'\")]+)['\"]?\s*\)")


def _image_srcs(el: Tag) -> Set[str]:
    srcs: Set[str] = set()
    for img in el.find_all("img"):
        src = attr(img, "src") or attr(img, "data-src")
        if src:
            srcs.add(src)
    match = _BACKGROUND_URL_RE.search(attr(el, "style"))
    if match:
        srcs.add(match.group(1))
    return srcs


def _match_images(srcs: Set[str], page_images: List[PageImage], limit: int) -> List[PageImage]:
    """Return page images whose resolved src matches one of the raw *srcs*."""
    if not srcs:
        return []
    matched = [
        img
        for img in page_images
        if img.src in srcs or any(src in img.src or img.src in src for src in srcs)
    ]
    return matched[:limit]


def find_images_in_element(el: Tag, page_images: List[PageImage]) -> List[PageImage]:
    return _match_images(_image_srcs(el), page_images, MAX_SECTION_IMAGES)


def find_images_near_element(el: Tag, page_images: List[PageImage]) -> List[PageImage]:
    parent = parent_tag(el)
    if parent is None:
        return []
    srcs = {attr(img, "src") or attr(img, "data-src") for img in parent.find_all("img")}
    srcs.discard("")
    return _match_images(srcs, page_images, MAX_HEADING_IMAGES)


def _cta_text(el: Optional[Tag], selector: str = CTA_SELECTOR) -> Optional[str]:
    return text_of(select_first(el, selector)) or None


def analyze_section_element(el: Tag, page_images: List[PageImage], order: int) -> Optional[PageSection]:
    """Classify one structural block, or return ``None`` when it has no content."""
    class_name = attr(el, "class").lower()
    element_id = attr(el, "id").lower()
    identifiers = [value for value in (class_name, element_id) if value]

    section_type = classify_identifiers(class_name, element_id)

    heading_el = el.select_one("h1, h2, h3")
    heading = text_of(heading_el) or None
    if section_type == "other" and heading:
        section_type = classify_text(heading)

    subheading = None
    if heading_el is not None:
        next_el = heading_el.find_next_sibling()
        if next_el is not None and next_el.name in ("p", "h2", "h3"):
            text = text_of(next_el)
            if text and len(text) < 200:
                subheading = text

    content: List[str] = []
    for node in el.find_all(["p", "li"]):
        text = text_of(node)
        if len(text) > 20 and not has_ancestor(node, ("nav", "footer"), stop=el):
            content.append(text)

    if not heading and not content:
        return None

    return PageSection(
        type=section_type,
        order=order,
        heading=heading,
        subheading=subheading,
        content=content[:MAX_SECTION_CONTENT],
        images=find_images_in_element(el, page_images),
        cta_text=_cta_text(el),
        identifiers=identifiers,
    )


def _analyze_all(elements: List[Tag], page_images: List[PageImage]) -> List[PageSection]:
    sections: List[PageSection] = []
    seen: Set[int] = set()
    for el in elements:
        if id(el) in seen:
            continue
        seen.add(id(el))
        section = analyze_section_element(el, page_images, len(sections))
        if section is not None:
            sections.append(section)
    return sections


def _sections_from_headings(soup: BeautifulSoup, page_images: List[PageImage]) -> List[PageSection]:
    """Build one section per ``<h1>``/``<h2>``; the first is always the hero."""
    root = soup.find("main") or body_of(soup)
    sections: List[PageSection] = []
    for heading in root.find_all(["h1", "h2"]):
        parent = parent_tag(heading)
        if parent is None:
            continue
        heading_text = text_of(heading)

        content: List[str] = []
        sibling = heading.find_next_sibling()
        while sibling is not None and sibling.name not in ("h1", "h2"):
            text = text_of(sibling)
            if len(text) > 10:
                content.append(text)
            sibling = sibling.find_next_sibling()

        sections.append(
            PageSection(
                type="hero" if not sections else classify_text(heading_text),
                order=len(sections),
                heading=heading_text or None,
                subheading=content[0] if content and len(content[0]) < 150 else None,
                content=content[:MAX_SECTION_CONTENT],
                images=find_images_in_element(parent, page_images),
                cta_text=_cta_text(parent, HEADING_CTA_SELECTOR),
            )
        )
    return sections


def create_synthetic_sections(soup: BeautifulSoup, page_images: List[PageImage]) -> List[PageSection]:
    """Build a section structure straight from the page's paragraphs.

    Used when neither semantic markup nor heading boundaries produced
    anything: a hero from the first heading (or title) and first two
    paragraphs, one section per further heading taking the next three
    paragraphs, a CTA section when only the hero exists and paragraphs remain,
    and a footer from ``<footer>`` text.
    """
    root = soup.find("main") or body_of(soup)
    headings = root.find_all(["h1", "h2", "h3"])
    paragraphs = [
        text_of(p)
        for p in root.find_all("p")
        if len(text_of(p)) > 20 and not has_ancestor(p, ("nav", "header", "footer"))
    ]

    title = text_of(soup.title) if soup.title else ""
    hero_images = [img for img in page_images if img.is_hero]
    sections = [
        PageSection(
            type="hero",
            order=0,
            heading=(text_of(headings[0]) if headings else "") or title or "Welcome",
            subheading=paragraphs[0] if paragraphs else None,
            content=paragraphs[:2],
            images=(hero_images or page_images[:1])[:MAX_SECTION_IMAGES],
            cta_text=_cta_text(root, SYNTHETIC_CTA_SELECTOR),
            identifiers=["synthetic-hero"],
        )
    ]

    paragraph_index = 2
    for heading in headings[1:]:
        heading_text = text_of(heading)
        chunk = paragraphs[paragraph_index:paragraph_index + 3]
        paragraph_index += 3
        sections.append(
            PageSection(
                type=classify_text(heading_text),
                order=len(sections),
                heading=heading_text or None,
                subheading=chunk[0] if chunk and len(chunk[0]) < 150 else None,
                content=chunk,
                images=find_images_near_element(heading, page_images),
                identifiers=["synthetic-from-heading"],
            )
        )

    if len(sections) == 1 and len(paragraphs) > 2:
        sections.append(
            PageSection(
                type="cta",
                order=len(sections),
                heading="Get Started",
                content=paragraphs[2:5],
                cta_text=_cta_text(root, SYNTHETIC_CTA_SELECTOR) or "Contact Us",
                identifiers=["synthetic-cta"],
            )
        )

    footer = soup.find("footer")
    if footer is not None:
        footer_text = text_of(footer)
        sections.append(
            PageSection(
                type="footer",
                order=len(sections),
                content=[footer_text[:MAX_FOOTER_TEXT]] if footer_text else [],
                identifiers=["synthetic-footer"],
            )
        )

    return sections


def extract_sections(soup: BeautifulSoup, page_images: List[PageImage]) -> List[PageSection]:
    """Return the ordered semantic sections of a parsed page.

    Never empty for a page with any body text; ``order`` runs 0..n-1.
    """
    sections = _analyze_all(soup.select(EXPLICIT_SECTION_SELECTOR), page_images)

    if not sections:
        sections = _analyze_all(soup.select(LOOSE_SECTION_SELECTOR), page_images)

    if not sections:
        sections = _sections_from_headings(soup, page_images)

    if not sections or sections[0].type != "hero":
        existing = next((s for s in sections if s.type == "hero"), None)
        hero_el = soup.select_one(HERO_MARKUP_SELECTOR) or soup.find("header")
        if existing is not None:
            sections.remove(existing)
            sections.insert(0, existing)
        elif hero_el is not None:
            hero = analyze_section_element(hero_el, page_images, 0)
            if hero is not None:
                hero.type = "hero"
                sections.insert(0, hero)

    footer = soup.find("footer")
    if footer is not None and not any(s.type == "footer" for s in sections):
        footer_section = analyze_section_element(footer, page_images, len(sections))
        if footer_section is not None:
            footer_section.type = "footer"
            sections.append(footer_section)

    if not any(s.type != "footer" for s in sections) and text_of(body_of(soup)):
        logger.debug("No sections detected from markup or headings; building synthetic structure")
        sections = create_synthetic_sections(soup, page_images)

    for order, section in enumerate(sections):
        section.order = order

    logger.debug("Extracted %d sections: %s", len(sections), ", ".join(s.type for s in sections))
    return sections
