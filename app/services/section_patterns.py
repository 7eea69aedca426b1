"""Classification tables for page sections.

Kept as plain data so the tables can be tested and extended without touching
the traversal code in :mod:`app.services.sections`.  Table order matters:
the first section type whose pattern matches wins.
"""

import re
from typing import Dict, List, Pattern, Tuple

SECTION_TYPES: Tuple[str, ...] = (
    "hero",
    "about",
    "services",
    "features",
    "team",
    "testimonials",
    "gallery",
    "portfolio",
    "pricing",
    "cta",
    "contact",
    "faq",
    "stats",
    "clients",
    "footer",
    "other",
)

# Substrings looked up in an element's lowercased class and id attributes.
SECTION_CLASS_PATTERNS: Dict[str, List[str]] = {
    "hero": ["hero", "banner", "jumbotron", "masthead", "cover", "intro", "splash", "landing-hero", "main-hero"],
    "about": ["about", "about-us", "who-we-are", "our-story", "company", "mission", "overview"],
    "services": ["services", "what-we-do", "offerings", "our-services", "capabilities", "solutions"],
    "features": ["features", "benefits", "highlights", "why-us", "why-choose", "advantages"],
    "team": ["team", "our-team", "staff", "people", "leadership", "founders", "experts"],
    "testimonials": ["testimonials", "reviews", "feedback", "clients-say", "customer-stories", "success-stories"],
    "gallery": ["gallery", "photos", "images", "portfolio-gallery", "work-gallery", "showcase"],
    "portfolio": ["portfolio", "work", "projects", "case-studies", "our-work", "recent-projects"],
    "pricing": ["pricing", "plans", "packages", "rates", "cost", "membership"],
    "cta": ["cta", "call-to-action", "get-started", "contact-cta", "signup", "join-us", "action"],
    "contact": ["contact", "contact-us", "get-in-touch", "reach-us", "find-us", "location"],
    "faq": ["faq", "faqs", "questions", "help", "support", "answers"],
    "stats": ["stats", "statistics", "numbers", "metrics", "achievements", "counters", "by-the-numbers"],
    "clients": ["clients", "partners", "logos", "trusted-by", "brands", "companies", "customers"],
    "footer": ["footer", "site-footer", "page-footer"],
    "other": [],
}


def _compile(patterns: Dict[str, List[str]]) -> Dict[str, List[Pattern[str]]]:
    return {
        section_type: [re.compile(p, re.IGNORECASE) for p in regexes]
        for section_type, regexes in patterns.items()
    }


# Regexes run against heading text when class/id gave no match.
SECTION_CONTENT_PATTERNS: Dict[str, List[Pattern[str]]] = _compile(
    {
        "hero": [r"^(welcome|discover|your|the future|transform)", r"get started", r"learn more"],
        "about": [r"about us", r"who we are", r"our story", r"our mission", r"since \d{4}", r"founded in"],
        "services": [r"our services", r"what we (do|offer)", r"we (provide|deliver|specialize)"],
        "features": [r"features", r"why choose us", r"benefits", r"what makes us"],
        "team": [r"meet (the|our) team", r"our (team|people|experts)", r"leadership"],
        "testimonials": [r"what (our )?(clients|customers) say", r"testimonials", r"reviews", r"success stor"],
        "gallery": [r"gallery", r"our (photos|images)", r"see our work"],
        "portfolio": [r"our (work|projects|portfolio)", r"case studies", r"recent (work|projects)"],
        "pricing": [r"pricing", r"plans", r"packages", r"get started (for|at)", r"\$\d+"],
        "cta": [r"get (started|in touch|a quote)", r"contact us", r"request", r"schedule", r"book (a|now)"],
        "contact": [r"contact (us|info)", r"get in touch", r"reach (us|out)", r"find us", r"our location"],
        "faq": [r"faq", r"frequently asked", r"questions", r"need help"],
        "stats": [r"\d+\+?\s*(years|projects|clients|customers|happy|satisfied)", r"by the numbers"],
        "clients": [r"our clients", r"trusted by", r"partners", r"they trust us"],
        "footer": [r"copyright", r"©", r"all rights reserved"],
        "other": [],
    }
)

# Selectors shared by the section detection passes.
EXPLICIT_SECTION_SELECTOR = 'section, [role="region"], article, .section'
LOOSE_SECTION_SELECTOR = '[class*="section"], [class*="container"], [id*="section"]'
HERO_MARKUP_SELECTOR = '[class*="hero"], [class*="banner"], [id*="hero"], .jumbotron'
CTA_SELECTOR = 'a[class*="btn"], a[class*="button"], button, [class*="cta"]'
SYNTHETIC_CTA_SELECTOR = 'a[class*="btn"], a[class*="button"], button, [class*="cta"], a[href*="contact"]'
HEADING_CTA_SELECTOR = 'a[class*="btn"], button, a[class*="cta"]'


def classify_identifiers(class_name: str, element_id: str) -> str:
    """Return the section type whose substring table matches *class_name* or *element_id*."""
    class_name = class_name.lower()
    element_id = element_id.lower()
    for section_type, substrings in SECTION_CLASS_PATTERNS.items():
        for substring in substrings:
            if substring in class_name or substring in element_id:
                return section_type
    return "other"


def classify_text(text: str) -> str:
    """Return the section type whose content regexes match *text*, else ``"other"``."""
    lowered = text.lower()
    for section_type, regexes in SECTION_CONTENT_PATTERNS.items():
        for regex in regexes:
            if regex.search(lowered):
                return section_type
    return "other"
