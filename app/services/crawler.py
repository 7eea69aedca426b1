"""Site crawler: bounded BFS over one domain, then cross-page aggregation."""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import List, Optional, Sequence
from urllib.parse import parse_qs, urlparse

import httpx

from app.models.crawl_config import CrawlConfig
from app.models.crawl_request import BatchCrawlItem
from app.models.crawl_response import CrawledSiteData, CrawlError
from app.models.page import CrawledPage
from app.models.progress import ExtractedCounts
from app.services.aggregator import build_navigation, compute_stats, extract_brand, extract_global_elements
from app.services.extractor import extract_page
from app.services.fetcher import FetchError, fetch_page
from app.services.frontier import Frontier, RateLimiter, base_url_of, normalize_seed, path_of
from app.services.progress import ProgressCallback, ProgressReporter
from app.services.screenshot import ScreenshotProvider

logger = logging.getLogger(__name__)

# Hard ceiling to protect against runaway crawls
MAX_PAGES_HARD_LIMIT = 50
BATCH_CONCURRENCY = 5

# URL path prefixes to skip (common on WordPress and other CMSes)
_SKIP_PATH_PREFIXES = (
    "/wp-admin",
    "/wp-login",
    "/wp-json",
    "/wp-content",
)

_SKIP_PATH_SUFFIXES = (
    ".xml",
    ".rss",
    ".atom",
    "xmlrpc.php",
    "/feed",
)
_SKIP_PATH_SUFFIXES_STRIPPED = tuple(s.rstrip("/") for s in _SKIP_PATH_SUFFIXES)

# Query parameters that indicate non-content pages
_SKIP_QUERY_PARAMS = {"feed", "preview", "replytocom"}


def _should_skip(url: str) -> bool:
    """Return True for URLs that are unlikely to contain useful page content.

    Skips WordPress admin/login/API paths and feed URLs.
    """
    parsed = urlparse(url)
    path = parsed.path.lower()

    if any(path.startswith(prefix) for prefix in _SKIP_PATH_PREFIXES):
        return True
    path_stripped = path.rstrip("/")
    if any(path_stripped.endswith(suffix) for suffix in _SKIP_PATH_SUFFIXES_STRIPPED):
        return True

    query_params = set(parse_qs(parsed.query).keys())
    return bool(query_params & _SKIP_QUERY_PARAMS)


async def crawl_site(
    seed_url: str,
    config: Optional[CrawlConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
    screenshot_provider: Optional[ScreenshotProvider] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> CrawledSiteData:
    """Crawl the site behind *seed_url* breadth-first and aggregate it.

    The crawl is serial: one request in flight, at least
    ``config.rate_limit_ms`` apart.  It stops when the queue is empty or
    ``config.max_pages`` pages were collected; URLs deeper than
    ``config.max_depth`` are never fetched.  Page-level failures are recorded
    in ``errors`` and never abort the crawl, so this returns normally even
    when no page could be fetched, so callers must check ``pages``.
    """
    config = config or CrawlConfig()
    started = time.monotonic()

    source_url = normalize_seed(seed_url)
    domain = urlparse(source_url).hostname or ""
    base_url = base_url_of(source_url)

    frontier = Frontier(source_url, base_url, config.max_depth)
    limiter = RateLimiter(config.rate_limit_ms)
    pages: List[CrawledPage] = []
    raw_html_pages: List[str] = []
    errors: List[CrawlError] = []

    reporter = ProgressReporter(on_progress, current_url=source_url)
    await reporter.emit(phase="discovering", message=f"Discovering pages on {domain}...")

    own_client = client is None
    if own_client:
        client = httpx.AsyncClient(follow_redirects=False, timeout=config.timeout_ms / 1000)
    try:
        while frontier and len(pages) < config.max_pages:
            item = frontier.pop()
            if item is None:
                break
            url, depth = item

            if depth > 0 and _should_skip(url):
                logger.debug("Crawler: skipping non-content URL %s", url)
                continue

            await limiter.wait()
            await reporter.emit(
                phase="crawling",
                current_url=url,
                pages_crawled=len(pages),
                message=(
                    f"Crawling page {len(pages) + 1}/"
                    f"{min(len(frontier) + len(pages) + 1, config.max_pages)}: {path_of(url)}"
                ),
            )

            try:
                result = await fetch_page(url, config, client)
            except FetchError as exc:
                logger.warning("Crawler: skipping %s – %s", url, exc)
                errors.append(CrawlError(url=url, error=str(exc)))
                await reporter.emit(errors=list(errors))
                continue

            if result is None:
                logger.debug("Crawler: %s is not HTML, skipped", url)
                continue

            if not pages:
                # the seed may redirect to another host, e.g. example.com -> www.example.com
                final_host = urlparse(result.final_url).hostname
                if final_host and final_host != urlparse(base_url).hostname:
                    base_url = base_url_of(result.final_url)
                    frontier.base_url = base_url
                    domain = final_host

            try:
                page = extract_page(result.html, url, depth, base_url, result.load_time_ms)
            except Exception as exc:
                logger.warning("Crawler: skipping %s – %s", url, exc)
                errors.append(CrawlError(url=url, error=f"Extraction failed: {exc}"))
                await reporter.emit(errors=list(errors))
                continue
            pages.append(page)
            raw_html_pages.append(result.html)

            extracted = reporter.progress.extracted
            await reporter.emit(
                pages_crawled=len(pages),
                current_page_title=page.title,
                extracted=ExtractedCounts(
                    logo_found=extracted.logo_found or any(img.is_logo for img in page.images),
                    colors_found=extracted.colors_found,
                    forms_found=extracted.forms_found + len(page.forms),
                    images_found=extracted.images_found + len(page.images),
                ),
            )

            frontier.push_links(page.links.internal, depth)
            await reporter.emit(
                pages_discovered=frontier.discovered,
                total_pages=min(frontier.discovered, config.max_pages),
            )
    finally:
        if own_client:
            await client.aclose()

    await reporter.emit(phase="aggregating", message="Extracting brand and navigation...")
    brand = extract_brand(pages, raw_html_pages)
    navigation = build_navigation(pages)
    global_elements = extract_global_elements(pages)
    stats = compute_stats(pages, raw_html_pages)

    screenshot = None
    if screenshot_provider is not None and pages:
        await reporter.emit(phase="aggregating", message="Capturing screenshot for visual analysis...")
        try:
            screenshot = await screenshot_provider.capture(source_url)
        except Exception as exc:
            logger.warning("Crawler: screenshot of %s failed – %s", source_url, exc)

    await reporter.emit(
        phase="complete",
        message=f"Crawl complete! Found {len(pages)} pages.",
        extracted=ExtractedCounts(
            logo_found=brand.logo is not None,
            colors_found=len(brand.colors.all_colors),
            forms_found=stats.total_forms,
            images_found=stats.total_images,
        ),
    )
    logger.info(
        "Crawl of %s finished: %d pages, %d errors", domain, len(pages), len(errors)
    )

    return CrawledSiteData(
        domain=domain,
        source_url=source_url,
        crawled_at=datetime.now(timezone.utc).isoformat(),
        crawl_duration_ms=int((time.monotonic() - started) * 1000),
        pages=pages,
        brand=brand,
        navigation=navigation,
        global_elements=global_elements,
        screenshot=screenshot,
        stats=stats,
        errors=errors,
    )


async def crawl_many(
    urls: Sequence[str],
    config: Optional[CrawlConfig] = None,
    concurrency: int = BATCH_CONCURRENCY,
    screenshot_provider: Optional[ScreenshotProvider] = None,
) -> List[BatchCrawlItem]:
    """Run independent crawls of *urls*, at most *concurrency* at a time.

    Each crawl owns its own frontier; one failing crawl never cancels the
    others.  Results keep the order of *urls*.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def run(url: str) -> CrawledSiteData:
        async with semaphore:
            return await crawl_site(url, config, screenshot_provider=screenshot_provider)

    outcomes = await asyncio.gather(*(run(url) for url in urls), return_exceptions=True)

    items: List[BatchCrawlItem] = []
    for url, outcome in zip(urls, outcomes):
        if isinstance(outcome, BaseException):
            logger.error("Batch crawl of %s failed: %s", url, outcome)
            items.append(BatchCrawlItem(url=url, error=str(outcome) or outcome.__class__.__name__))
        elif not outcome.pages:
            reason = outcome.errors[0].error if outcome.errors else "no HTML pages found"
            items.append(BatchCrawlItem(url=url, result=outcome, error=f"No pages could be crawled: {reason}"))
        else:
            items.append(BatchCrawlItem(url=url, pages_crawled=len(outcome.pages), result=outcome))
    return items
