"""Deterministic design-style selection for generated sites.

Three signals narrow the candidate list:

1. the source site's dominant layout (compatibility table);
2. the business industry (preference table, substring match);
3. anti-repetition: styles the caller used recently are dropped unless that
   would leave nothing.

The final pick hashes the lead id, so the same lead always gets the same
style.  No randomness, no clock.
"""

from typing import Dict, Iterable, List, Literal, Optional, Tuple

DesignStyle = Literal[
    "MINIMALIST_CLEAN",
    "BOLD_VIBRANT",
    "DARK_MODE_ELEGANT",
    "WARM_FRIENDLY",
    "CORPORATE_PROFESSIONAL",
    "CREATIVE_ARTISTIC",
    "ASYMMETRIC_EDITORIAL",
    "SPLIT_SCREEN_MODERN",
    "SINGLE_PAGE_STORYTELLING",
    "CARD_BASED_MODULAR",
    "VIDEO_FIRST_IMMERSIVE",
    "BRUTALIST_BOLD",
    "GRADIENT_MODERN",
    "TEXT_FIRST_MINIMAL",
    "INTERACTIVE_SHOWCASE",
    "RETRO_MODERN",
]

LayoutPattern = Literal["hero-centric", "grid-based", "single-column", "sidebar", "unknown"]

ALL_STYLES: Tuple[str, ...] = (
    "MINIMALIST_CLEAN",
    "BOLD_VIBRANT",
    "DARK_MODE_ELEGANT",
    "WARM_FRIENDLY",
    "CORPORATE_PROFESSIONAL",
    "CREATIVE_ARTISTIC",
    "ASYMMETRIC_EDITORIAL",
    "SPLIT_SCREEN_MODERN",
    "SINGLE_PAGE_STORYTELLING",
    "CARD_BASED_MODULAR",
    "VIDEO_FIRST_IMMERSIVE",
    "BRUTALIST_BOLD",
    "GRADIENT_MODERN",
    "TEXT_FIRST_MINIMAL",
    "INTERACTIVE_SHOWCASE",
    "RETRO_MODERN",
)

LAYOUT_COMPATIBILITY: Dict[str, Tuple[str, ...]] = {
    "hero-centric": (
        "MINIMALIST_CLEAN",
        "BOLD_VIBRANT",
        "DARK_MODE_ELEGANT",
        "VIDEO_FIRST_IMMERSIVE",
        "GRADIENT_MODERN",
    ),
    "grid-based": (
        "CARD_BASED_MODULAR",
        "CORPORATE_PROFESSIONAL",
        "ASYMMETRIC_EDITORIAL",
        "INTERACTIVE_SHOWCASE",
    ),
    "single-column": (
        "SINGLE_PAGE_STORYTELLING",
        "TEXT_FIRST_MINIMAL",
        "ASYMMETRIC_EDITORIAL",
        "BRUTALIST_BOLD",
    ),
    "sidebar": (
        "CORPORATE_PROFESSIONAL",
        "CREATIVE_ARTISTIC",
        "TEXT_FIRST_MINIMAL",
    ),
    "unknown": ALL_STYLES,
}

# First matching key wins, so more specific keys must come first.
INDUSTRY_PREFERENCES: Dict[str, Tuple[str, ...]] = {
    # Food & beverage
    "restaurant": ("WARM_FRIENDLY", "BOLD_VIBRANT", "ASYMMETRIC_EDITORIAL"),
    "food": ("WARM_FRIENDLY", "BOLD_VIBRANT", "ASYMMETRIC_EDITORIAL"),
    "cafe": ("WARM_FRIENDLY", "RETRO_MODERN", "ASYMMETRIC_EDITORIAL"),
    "bar": ("DARK_MODE_ELEGANT", "BOLD_VIBRANT", "VIDEO_FIRST_IMMERSIVE"),
    # Fitness & wellness
    "gym": ("BOLD_VIBRANT", "DARK_MODE_ELEGANT", "INTERACTIVE_SHOWCASE"),
    "fitness": ("BOLD_VIBRANT", "GRADIENT_MODERN", "INTERACTIVE_SHOWCASE"),
    "yoga": ("WARM_FRIENDLY", "MINIMALIST_CLEAN", "SINGLE_PAGE_STORYTELLING"),
    # Professional services
    "dental": ("MINIMALIST_CLEAN", "CORPORATE_PROFESSIONAL", "WARM_FRIENDLY"),
    "medical": ("MINIMALIST_CLEAN", "CORPORATE_PROFESSIONAL", "GRADIENT_MODERN"),
    "legal": ("CORPORATE_PROFESSIONAL", "MINIMALIST_CLEAN", "TEXT_FIRST_MINIMAL"),
    "consulting": ("CORPORATE_PROFESSIONAL", "MINIMALIST_CLEAN", "GRADIENT_MODERN"),
    # Real estate
    "realestate": ("MINIMALIST_CLEAN", "CORPORATE_PROFESSIONAL", "CARD_BASED_MODULAR"),
    # Automotive
    "auto": ("BOLD_VIBRANT", "DARK_MODE_ELEGANT", "BRUTALIST_BOLD"),
    "mechanic": ("BOLD_VIBRANT", "CORPORATE_PROFESSIONAL", "BRUTALIST_BOLD"),
    # Beauty & personal care
    "salon": ("CREATIVE_ARTISTIC", "BOLD_VIBRANT", "ASYMMETRIC_EDITORIAL"),
    "hair": ("CREATIVE_ARTISTIC", "BOLD_VIBRANT", "RETRO_MODERN"),
    "beauty": ("CREATIVE_ARTISTIC", "WARM_FRIENDLY", "ASYMMETRIC_EDITORIAL"),
    # Construction & trades
    "construction": ("CORPORATE_PROFESSIONAL", "BRUTALIST_BOLD", "BOLD_VIBRANT"),
    "contractor": ("CORPORATE_PROFESSIONAL", "BRUTALIST_BOLD", "CARD_BASED_MODULAR"),
    "cleaning": ("WARM_FRIENDLY", "MINIMALIST_CLEAN", "BOLD_VIBRANT"),
    # Tech & software
    "tech": ("GRADIENT_MODERN", "DARK_MODE_ELEGANT", "MINIMALIST_CLEAN"),
    "software": ("GRADIENT_MODERN", "DARK_MODE_ELEGANT", "INTERACTIVE_SHOWCASE"),
    "saas": ("GRADIENT_MODERN", "MINIMALIST_CLEAN", "DARK_MODE_ELEGANT"),
    "app": ("BOLD_VIBRANT", "GRADIENT_MODERN", "INTERACTIVE_SHOWCASE"),
    # Creative & design
    "agency": ("CREATIVE_ARTISTIC", "ASYMMETRIC_EDITORIAL", "BOLD_VIBRANT"),
    "design": ("CREATIVE_ARTISTIC", "ASYMMETRIC_EDITORIAL", "BRUTALIST_BOLD"),
    "creative": ("CREATIVE_ARTISTIC", "ASYMMETRIC_EDITORIAL", "INTERACTIVE_SHOWCASE"),
    # Entertainment & lifestyle
    "entertainment": ("VIDEO_FIRST_IMMERSIVE", "BOLD_VIBRANT", "DARK_MODE_ELEGANT"),
    "lifestyle": ("BOLD_VIBRANT", "ASYMMETRIC_EDITORIAL", "RETRO_MODERN"),
    # E-commerce & retail
    "retail": ("CARD_BASED_MODULAR", "BOLD_VIBRANT", "MINIMALIST_CLEAN"),
    "ecommerce": ("CARD_BASED_MODULAR", "GRADIENT_MODERN", "BOLD_VIBRANT"),
    "shop": ("CARD_BASED_MODULAR", "BOLD_VIBRANT", "WARM_FRIENDLY"),
}


def normalize_industry(industry: Optional[str]) -> str:
    """Lowercase and keep only ``[a-z0-9]``: ``"Real Estate"`` → ``"realestate"``."""
    return "".join(ch for ch in (industry or "").lower() if ch.isascii() and ch.isalnum())


def industry_preferences(industry: Optional[str]) -> Tuple[str, ...]:
    """Return the preferred styles for *industry*, or every style when nothing matches."""
    normalized = normalize_industry(industry)
    if not normalized:
        return ALL_STYLES
    for key, styles in INDUSTRY_PREFERENCES.items():
        if key in normalized or normalized in key:
            return styles
    return ALL_STYLES


def lead_seed(lead_id: str) -> int:
    """Rolling ``seed * 31 + unit`` hash over UTF-16 code units, folded to a signed 32-bit integer."""
    encoded = lead_id.encode("utf-16-le")
    seed = 0
    for i in range(0, len(encoded), 2):
        unit = int.from_bytes(encoded[i:i + 2], "little")
        seed = ((seed << 5) - seed + unit) & 0xFFFFFFFF
    return seed - 0x100000000 if seed >= 0x80000000 else seed


def candidate_styles(
    industry: Optional[str] = None,
    source_structure: Optional[str] = None,
    recent_styles: Iterable[str] = (),
) -> List[str]:
    """Return the ordered candidates :func:`select_style` picks from."""
    layout_styles = LAYOUT_COMPATIBILITY.get(source_structure or "unknown", ALL_STYLES)
    preferred = [style for style in industry_preferences(industry) if style in layout_styles]
    candidates = preferred or list(layout_styles)

    recent = set(recent_styles)
    fresh = [style for style in candidates if style not in recent]
    return fresh or candidates


def select_style(
    lead_id: str,
    industry: Optional[str] = None,
    source_structure: Optional[str] = None,
    recent_styles: Iterable[str] = (),
) -> str:
    """Pick a design style for *lead_id*; identical inputs give identical output."""
    candidates = candidate_styles(industry, source_structure, recent_styles)
    return candidates[abs(lead_seed(lead_id)) % len(candidates)]


def get_all_styles() -> List[str]:
    return list(ALL_STYLES)


def format_style_name(style: str) -> str:
    """``MINIMALIST_CLEAN`` → ``Minimalist Clean``."""
    return " ".join(word[:1] + word[1:].lower() for word in style.split("_"))
