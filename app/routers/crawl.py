import asyncio
import json
import logging
from typing import AsyncIterator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.models.crawl_config import CrawlConfig
from app.models.crawl_request import BatchCrawlItem, BatchCrawlRequest, CrawlRequest
from app.models.crawl_response import CrawledSiteData
from app.models.progress import CrawlProgress
from app.services.crawler import MAX_PAGES_HARD_LIMIT, crawl_many, crawl_site
from app.services.fetcher import validate_url
from app.services.frontier import normalize_seed
from app.services.screenshot import get_screenshot_provider

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


def _config(body: CrawlRequest) -> CrawlConfig:
    return CrawlConfig(
        max_pages=min(body.max_pages, MAX_PAGES_HARD_LIMIT),
        max_depth=body.max_depth,
        rate_limit_ms=body.rate_limit_ms,
        timeout_ms=body.timeout_ms,
    )


def _validated_seed(url: str) -> str:
    """Normalize the seed and reject blocked or malformed URLs with a 400."""
    seed = normalize_seed(url)
    try:
        validate_url(seed)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    return seed


@router.post(
    "/crawl",
    response_model=CrawledSiteData,
    response_model_exclude_none=True,
    summary="Crawl a site and extract its structure and brand",
    description=(
        "Starting from *url*, breadth-first crawls same-host pages up to "
        "`max_depth` links deep and at most `max_pages` pages, one request at a "
        "time.  Returns every page's sections, forms, images and links plus the "
        "site's brand, navigation and contact details."
    ),
)
@limiter.limit("5/minute")
async def crawl_endpoint(request: Request, body: CrawlRequest) -> CrawledSiteData:
    seed = _validated_seed(body.url)
    logger.info(
        "Crawl request received",
        extra={"url": seed, "max_pages": body.max_pages, "max_depth": body.max_depth},
    )

    provider = get_screenshot_provider() if body.include_screenshot else None
    result = await crawl_site(seed, _config(body), screenshot_provider=provider)

    if not result.pages:
        logger.error("Crawl of %s produced no pages", seed)
        raise HTTPException(
            status_code=502,
            detail={
                "message": "No pages could be crawled.",
                "errors": [e.model_dump() for e in result.errors],
            },
        )
    return result


@router.post(
    "/crawl/stream",
    summary="Crawl a site, streaming progress as NDJSON",
    description=(
        "Same as `/crawl`, but responds with `application/x-ndjson`: one line per "
        "progress snapshot, then a final `{\"result\": ...}` line."
    ),
)
@limiter.limit("5/minute")
async def crawl_stream_endpoint(request: Request, body: CrawlRequest) -> StreamingResponse:
    seed = _validated_seed(body.url)
    logger.info("Streaming crawl request received", extra={"url": seed})
    config = _config(body)
    provider = get_screenshot_provider() if body.include_screenshot else None

    # maxsize=1: the crawler waits until the client has taken the previous line
    queue: asyncio.Queue = asyncio.Queue(maxsize=1)

    async def on_progress(progress: CrawlProgress) -> None:
        await queue.put(progress.model_dump_json())

    async def run() -> CrawledSiteData:
        try:
            return await crawl_site(seed, config, on_progress=on_progress, screenshot_provider=provider)
        finally:
            await queue.put(None)

    async def lines() -> AsyncIterator[str]:
        task = asyncio.create_task(run())
        try:
            while (line := await queue.get()) is not None:
                yield line + "\n"
            result = await task
        finally:
            if not task.done():
                task.cancel()
        yield json.dumps({"result": result.model_dump(mode="json", exclude_none=True)}) + "\n"

    return StreamingResponse(lines(), media_type="application/x-ndjson")


@router.post(
    "/crawl/batch",
    response_model=list[BatchCrawlItem],
    response_model_exclude_none=True,
    summary="Crawl several independent sites",
    description="Runs one crawl per URL, at most five at a time.  Failures are reported per URL.",
)
@limiter.limit("2/minute")
async def crawl_batch_endpoint(request: Request, body: BatchCrawlRequest) -> list[BatchCrawlItem]:
    seeds = [_validated_seed(url) for url in body.urls]
    logger.info("Batch crawl request received", extra={"urls": len(seeds)})
    config = CrawlConfig(max_pages=min(body.max_pages, MAX_PAGES_HARD_LIMIT), max_depth=body.max_depth)
    return await crawl_many(seeds, config)
