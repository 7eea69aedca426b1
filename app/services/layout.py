"""Dominant-layout detection for the style selector, with an injected cache."""

import hashlib
import logging
from typing import Dict, Generic, Optional, Protocol, TypeVar

from app.services.dom import parse_html

logger = logging.getLogger(__name__)

LONG_DOCUMENT_CHARS = 50_000

_HERO_SELECTOR = '[class*="hero"], [class*="banner"], header'
_GRID_SELECTOR = '[class*="grid"], [class*="flex"], [class*="col"]'

V = TypeVar("V")


class AnalysisCache(Protocol[V]):
    def get(self, key: str) -> Optional[V]:
        ...

    def set(self, key: str, value: V) -> None:
        ...

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop *key*, or everything when *key* is None."""
        ...


class InMemoryCache(Generic[V]):
    """Dict-backed :class:`AnalysisCache`; lifetime is whatever its owner gives it."""

    def __init__(self) -> None:
        self._entries: Dict[str, V] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[V]:
        return self._entries.get(key)

    def set(self, key: str, value: V) -> None:
        self._entries[key] = value

    def invalidate(self, key: Optional[str] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)


def detect_layout(html: str) -> str:
    """Classify a page as hero-centric, grid-based, sidebar, single-column or unknown."""
    soup = parse_html(html)
    has_hero = soup.select_one(_HERO_SELECTOR) is not None
    has_grid = soup.select_one(_GRID_SELECTOR) is not None
    has_sidebar = soup.find("aside") is not None

    if has_hero and not has_grid:
        return "hero-centric"
    if has_grid and not has_sidebar:
        return "grid-based"
    if has_sidebar:
        return "sidebar"
    if len(html) > LONG_DOCUMENT_CHARS:
        return "single-column"
    return "unknown"


class LayoutAnalyzer:
    """Memoizes :func:`detect_layout` by a SHA-256 of the HTML."""

    def __init__(self, cache: Optional[AnalysisCache[str]] = None) -> None:
        self.cache = cache if cache is not None else InMemoryCache()

    @staticmethod
    def cache_key(html: str) -> str:
        return "layout:" + hashlib.sha256(html.encode("utf-8", errors="replace")).hexdigest()

    def analyze(self, html: str) -> str:
        key = self.cache_key(html)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Layout cache hit %s", key[:19])
            return cached
        layout = detect_layout(html)
        self.cache.set(key, layout)
        return layout
