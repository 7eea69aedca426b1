"""Homepage screenshot collaborators.

A screenshot is taken once per crawl and is never required: providers return
``None`` on any failure and the crawl result simply omits the field.
"""

import base64
import logging
import os
from typing import Optional, Protocol

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from app.models.crawl_response import Screenshot
from app.services.fetcher import validate_url

logger = logging.getLogger(__name__)

VIEWPORT_WIDTH = 1440
VIEWPORT_HEIGHT = 900
CAPTURE_DELAY_MS = 2000
FIRECRAWL_SCRAPE_URL = "https://api.firecrawl.dev/v1/scrape"
FIRECRAWL_TIMEOUT = 60  # seconds
BROWSER_TIMEOUT_MS = 30_000


class ScreenshotProvider(Protocol):
    async def capture(self, url: str) -> Optional[Screenshot]:
        ...


class FirecrawlScreenshotProvider:
    """Viewport screenshot rendered by the Firecrawl scrape API."""

    def __init__(self, api_key: str, client: Optional[httpx.AsyncClient] = None) -> None:
        self.api_key = api_key
        self.client = client

    async def _request(self, client: httpx.AsyncClient, url: str) -> Optional[Screenshot]:
        response = await client.post(
            FIRECRAWL_SCRAPE_URL,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "url": url,
                "formats": ["screenshot"],
                "waitFor": CAPTURE_DELAY_MS,
                "screenshot": {"fullPage": False},
            },
        )
        if not response.is_success:
            logger.warning("Screenshot: Firecrawl returned HTTP %s for %s", response.status_code, url)
            return None

        data = response.json()
        body = data.get("data") if isinstance(data, dict) and data.get("success") else None
        payload = body.get("screenshot") if isinstance(body, dict) else None
        if not isinstance(payload, str) or not payload:
            logger.warning("Screenshot: no screenshot in Firecrawl response for %s", url)
            return None

        if payload.startswith("http"):
            image = await client.get(payload)
            image.raise_for_status()
            payload = base64.b64encode(image.content).decode("ascii")
        elif payload.startswith("data:"):
            payload = payload.split(",", 1)[1]

        return Screenshot(base64=payload, format="png", width=VIEWPORT_WIDTH, height=VIEWPORT_HEIGHT)

    async def capture(self, url: str) -> Optional[Screenshot]:
        try:
            if self.client is not None:
                return await self._request(self.client, url)
            async with httpx.AsyncClient(timeout=FIRECRAWL_TIMEOUT) as client:
                return await self._request(client, url)
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.warning("Screenshot: Firecrawl capture failed for %s – %s", url, exc)
            return None


class BrowserScreenshotProvider:
    """Viewport screenshot rendered with a local headless Chromium."""

    async def capture(self, url: str) -> Optional[Screenshot]:
        try:
            validate_url(url)
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(
                    headless=True,
                    args=[
                        # --no-sandbox is required when running as root inside a container
                        # (Docker drops the user namespace needed by Chromium's sandbox).
                        "--no-sandbox",
                        "--disable-dev-shm-usage",
                        "--disable-gpu",
                    ],
                )
                context = await browser.new_context(
                    viewport={"width": VIEWPORT_WIDTH, "height": VIEWPORT_HEIGHT}
                )
                page = await context.new_page()
                try:
                    await page.goto(url, wait_until="networkidle", timeout=BROWSER_TIMEOUT_MS)
                    await page.wait_for_timeout(CAPTURE_DELAY_MS)
                    image = await page.screenshot(type="png", full_page=False)
                finally:
                    await context.close()
                    await browser.close()
        except (ValueError, PlaywrightError) as exc:
            logger.warning("Screenshot: browser capture failed for %s – %s", url, exc)
            return None

        return Screenshot(
            base64=base64.b64encode(image).decode("ascii"),
            format="png",
            width=VIEWPORT_WIDTH,
            height=VIEWPORT_HEIGHT,
        )


def get_screenshot_provider() -> Optional[ScreenshotProvider]:
    """Pick a provider from ``SCREENSHOT_PROVIDER`` / ``FIRECRAWL_API_KEY``.

    Defaults to Firecrawl when an API key is configured, otherwise none.
    """
    api_key = os.environ.get("FIRECRAWL_API_KEY", "")
    choice = os.environ.get("SCREENSHOT_PROVIDER", "firecrawl" if api_key else "none").lower()

    if choice == "firecrawl":
        if not api_key:
            logger.warning("Screenshot: SCREENSHOT_PROVIDER=firecrawl but FIRECRAWL_API_KEY is not set")
            return None
        return FirecrawlScreenshotProvider(api_key)
    if choice == "browser":
        return BrowserScreenshotProvider()
    return None
