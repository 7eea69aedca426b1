from pydantic import BaseModel, ConfigDict, Field

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SiteRemixer/1.0; +https://anythingv10.com)"


class CrawlConfig(BaseModel):
    """Budget and politeness settings for a single crawl.

    Frozen: one crawl never sees its configuration change underneath it.
    """

    model_config = ConfigDict(frozen=True)

    max_pages: int = Field(default=20, ge=1)
    max_depth: int = Field(default=3, ge=0)
    rate_limit_ms: int = Field(default=1000, ge=0)
    timeout_ms: int = Field(default=15000, ge=1)
    user_agent: str = DEFAULT_USER_AGENT
