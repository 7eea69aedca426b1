"""BFS frontier and politeness limiter for the site crawler."""

import asyncio
import time
from collections import deque
from typing import Deque, Iterable, Optional, Set, Tuple
from urllib.parse import urljoin, urlparse


def normalize_seed(seed_url: str) -> str:
    """Prefix ``https://`` when *seed_url* has no scheme."""
    seed_url = seed_url.strip()
    if not seed_url.startswith(("http://", "https://")):
        return f"https://{seed_url}"
    return seed_url


def base_url_of(url: str) -> str:
    """Return ``scheme://hostname`` for *url*."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.hostname or ''}"


def resolve_url(href: str, base_url: str) -> str:
    """Return an absolute URL, resolving *href* against *base_url*.

    Protocol-relative references (``//cdn.example.com/x``) resolve to https.
    """
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    return urljoin(base_url, href)


def normalize_url(url: str, base_url: str) -> str:
    """Return the visited-set key for *url*: ``origin + path``.

    Query string, fragment and one trailing slash are dropped, so
    ``/about/``, ``/about?ref=nav`` and ``/about#team`` collapse to one key.
    The path keeps its case.  Unparseable input is returned unchanged.
    """
    try:
        parsed = urlparse(resolve_url(url, base_url))
        if not parsed.scheme or not parsed.netloc:
            return url
        origin = f"{parsed.scheme}://{parsed.netloc.lower()}"
    except ValueError:
        return url
    path = parsed.path
    if path.endswith("/"):
        path = path[:-1]
    return f"{origin}{path}"


def path_of(url: str) -> str:
    try:
        return urlparse(url).path or "/"
    except ValueError:
        return url


class Frontier:
    """FIFO queue of ``(url, depth)`` pairs plus the visited set.

    Owned by exactly one crawl.
    """

    def __init__(self, seed_url: str, base_url: str, max_depth: int) -> None:
        self.base_url = base_url
        self.max_depth = max_depth
        self.visited: Set[str] = set()
        self.queue: Deque[Tuple[str, int]] = deque([(seed_url, 0)])

    def __len__(self) -> int:
        return len(self.queue)

    def __bool__(self) -> bool:
        return bool(self.queue)

    def is_visited(self, url: str) -> bool:
        return normalize_url(url, self.base_url) in self.visited

    def pop(self) -> Optional[Tuple[str, int]]:
        """Dequeue the next unvisited URL within the depth budget and mark it visited.

        Returns ``None`` once the queue holds nothing crawlable.
        """
        while self.queue:
            url, depth = self.queue.popleft()
            key = normalize_url(url, self.base_url)
            if key in self.visited or depth > self.max_depth:
                continue
            self.visited.add(key)
            return url, depth
        return None

    def push_links(self, links: Iterable[str], depth: int) -> int:
        """Enqueue unvisited *links* found on a page at *depth*.

        Links land at ``depth + 1`` and are never enqueued past ``max_depth``.
        Returns the number of links enqueued.
        """
        next_depth = depth + 1
        if next_depth > self.max_depth:
            return 0
        added = 0
        for link in links:
            if not self.is_visited(link):
                self.queue.append((link, next_depth))
                added += 1
        return added

    @property
    def discovered(self) -> int:
        return len(self.visited) + len(self.queue)


class RateLimiter:
    """Enforce a minimum delay between consecutive requests."""

    def __init__(self, min_interval_ms: int) -> None:
        self.min_interval = min_interval_ms / 1000
        self._last: Optional[float] = None

    async def wait(self) -> None:
        now = time.monotonic()
        if self._last is not None:
            remaining = self.min_interval - (now - self._last)
            if remaining > 0:
                await asyncio.sleep(remaining)
        self._last = time.monotonic()
