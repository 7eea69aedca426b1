import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.routers.crawl import limiter, router as crawl_router
from app.routers.style import router as style_router
from app.services.layout import InMemoryCache, LayoutAnalyzer

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sitewise – Site Crawler & Brand Extractor API",
    description=(
        "Crawls a website breadth-first and returns its pages as semantic sections, "
        "forms and links, together with the site's brand, navigation and contact details."
    ),
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Layout analysis cache, owned by the application
app.state.layout_analyzer = LayoutAnalyzer(InMemoryCache())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(crawl_router)
app.include_router(style_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from Sitewise"}
