import logging

from fastapi import APIRouter, HTTPException, Request

from app.models.crawl_config import CrawlConfig
from app.models.style_request import StyleRequest, StyleResponse
from app.routers.crawl import limiter
from app.services.fetcher import FetchError, fetch_page
from app.services.frontier import normalize_seed
from app.services.layout import LayoutAnalyzer
from app.services.style_selector import format_style_name, select_style

logger = logging.getLogger(__name__)

router = APIRouter()


async def _detect_source_layout(request: Request, url: str) -> str:
    """Fetch the homepage at *url* and detect its layout via the app's analyzer."""
    seed = normalize_seed(url)
    try:
        result = await fetch_page(seed, CrawlConfig())
    except FetchError as exc:
        if exc.kind == "blocked":
            logger.warning("Invalid or blocked URL: %s – %s", url, exc)
            raise HTTPException(status_code=400, detail=str(exc))
        logger.error("Error fetching URL %s: %s", url, exc)
        raise HTTPException(status_code=504 if exc.kind == "timeout" else 502, detail=str(exc))
    if result is None:
        return "unknown"

    analyzer: LayoutAnalyzer = request.app.state.layout_analyzer
    return analyzer.analyze(result.html)


@router.post(
    "/style",
    response_model=StyleResponse,
    summary="Pick a design style for a lead",
    description=(
        "Deterministically maps the lead, its industry and the source site's "
        "layout to one of sixteen design styles, avoiding `recent_styles` when "
        "possible.  When `url` is given without `source_structure`, the "
        "homepage layout is detected first."
    ),
)
@limiter.limit("30/minute")
async def style_endpoint(request: Request, body: StyleRequest) -> StyleResponse:
    logger.info("Style request received", extra={"lead_id": body.lead_id, "industry": body.industry})

    layout = body.source_structure
    if layout is None and body.url:
        layout = await _detect_source_layout(request, body.url)
    layout = layout or "unknown"

    style = select_style(
        body.lead_id,
        industry=body.industry,
        source_structure=layout,
        recent_styles=body.recent_styles,
    )
    return StyleResponse(style=style, label=format_style_name(style), layout=layout)
