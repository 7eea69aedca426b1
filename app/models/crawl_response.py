"""Site-level models: the aggregate returned by one completed crawl."""

from typing import List, Literal, Optional

from pydantic import BaseModel

from app.models.page import CrawledPage

SocialPlatform = Literal[
    "facebook",
    "twitter",
    "instagram",
    "linkedin",
    "youtube",
    "tiktok",
    "pinterest",
    "github",
    "other",
]


class ColorCount(BaseModel):
    color: str
    count: int


class BrandColors(BaseModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    background: Optional[str] = None
    text: Optional[str] = None
    all_colors: List[ColorCount] = []


class BrandFonts(BaseModel):
    heading: Optional[str] = None
    body: Optional[str] = None
    all_fonts: List[str] = []


class BrandData(BaseModel):
    logo: Optional[str] = None
    logo_alt: Optional[str] = None
    company_name: Optional[str] = None
    tagline: Optional[str] = None
    colors: BrandColors = BrandColors()
    fonts: BrandFonts = BrandFonts()


class NavItem(BaseModel):
    label: str
    path: str
    is_external: bool = False


class NavigationData(BaseModel):
    primary: List[NavItem] = []
    footer: List[NavItem] = []


class SocialLink(BaseModel):
    platform: SocialPlatform
    url: str


class ContactInfo(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    hours: Optional[str] = None


class GlobalElements(BaseModel):
    social_links: List[SocialLink] = []
    contact_info: ContactInfo = ContactInfo()
    copyright: Optional[str] = None


class SiteStats(BaseModel):
    total_pages: int = 0
    total_images: int = 0
    total_forms: int = 0
    total_links: int = 0
    has_ecommerce: bool = False
    has_blog: bool = False
    technologies: List[str] = []


class Screenshot(BaseModel):
    base64: str
    format: Literal["png", "jpeg"] = "png"
    width: int = 1440
    height: int = 900


class CrawlError(BaseModel):
    url: str
    error: str


class CrawledSiteData(BaseModel):
    """Everything one crawl learned about a site.

    Safe to persist as JSON via ``model_dump(mode="json")``.  Callers should
    treat an empty ``pages`` list as a failed crawl even though
    :func:`~app.services.crawler.crawl_site` returned normally.
    """

    domain: str
    source_url: str
    crawled_at: str
    crawl_duration_ms: int
    pages: List[CrawledPage]
    brand: BrandData
    navigation: NavigationData
    global_elements: GlobalElements
    screenshot: Optional[Screenshot] = None
    stats: SiteStats
    errors: List[CrawlError] = []
