from typing import List, Literal, Optional

from pydantic import BaseModel

from app.models.crawl_response import CrawlError

CrawlPhase = Literal["initializing", "discovering", "crawling", "aggregating", "complete", "error"]


class ExtractedCounts(BaseModel):
    logo_found: bool = False
    colors_found: int = 0
    forms_found: int = 0
    images_found: int = 0


class CrawlProgress(BaseModel):
    phase: CrawlPhase = "initializing"
    pages_discovered: int = 1
    pages_crawled: int = 0
    total_pages: int = 1
    current_url: str = ""
    current_page_title: Optional[str] = None
    message: str = "Starting crawl..."
    extracted: ExtractedCounts = ExtractedCounts()
    errors: List[CrawlError] = []
