from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.crawl_response import CrawledSiteData


class CrawlRequest(BaseModel):
    url: str = Field(
        min_length=1,
        description="Seed URL. The scheme is optional; https is assumed when missing.",
        examples=["example.com", "https://example.com/"],
    )
    max_pages: int = Field(
        default=20,
        ge=1,
        le=50,
        description="Maximum number of pages to crawl (1–50).",
    )
    max_depth: int = Field(
        default=3,
        ge=0,
        le=5,
        description="Maximum link depth from the seed URL (0–5).",
    )
    rate_limit_ms: int = Field(
        default=1000,
        ge=250,
        le=10_000,
        description="Minimum delay between two requests to the target site.",
    )
    timeout_ms: int = Field(
        default=15_000,
        ge=1_000,
        le=60_000,
        description="Per-page request timeout.",
    )
    include_screenshot: bool = True


class BatchCrawlRequest(BaseModel):
    urls: List[str] = Field(min_length=1, max_length=20)
    max_pages: int = Field(default=5, ge=1, le=50)
    max_depth: int = Field(default=1, ge=0, le=5)


class BatchCrawlItem(BaseModel):
    url: str
    pages_crawled: int = 0
    result: Optional[CrawledSiteData] = None
    error: Optional[str] = None
