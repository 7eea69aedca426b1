"""Per-page models produced by the page extractor."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

SectionType = Literal[
    "hero",
    "about",
    "services",
    "features",
    "team",
    "testimonials",
    "gallery",
    "portfolio",
    "pricing",
    "cta",
    "contact",
    "faq",
    "stats",
    "clients",
    "footer",
    "other",
]

PageType = Literal[
    "home",
    "about",
    "contact",
    "services",
    "products",
    "blog",
    "blog-post",
    "portfolio",
    "pricing",
    "faq",
    "team",
    "legal",
    "other",
]

FormType = Literal["contact", "newsletter", "login", "signup", "search", "quote", "booking", "other"]

FieldType = Literal[
    "text",
    "email",
    "tel",
    "number",
    "textarea",
    "select",
    "checkbox",
    "radio",
    "file",
    "date",
    "password",
    "hidden",
    "url",
    "search",
    "other",
]


class PageMeta(BaseModel):
    description: Optional[str] = None
    keywords: Optional[List[str]] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    favicon: Optional[str] = None


class PageHeading(BaseModel):
    level: int = Field(ge=1, le=6)
    text: str


class PageList(BaseModel):
    type: Literal["ul", "ol"]
    items: List[str]


class PageContent(BaseModel):
    headings: List[PageHeading] = []
    paragraphs: List[str] = []
    lists: List[PageList] = []


class PageImage(BaseModel):
    src: str
    alt: Optional[str] = None
    title: Optional[str] = None
    is_logo: bool = False
    is_hero: bool = False
    width: Optional[int] = None
    height: Optional[int] = None


class FormField(BaseModel):
    type: FieldType
    name: str
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    """Choices for select, radio and checkbox groups."""
    default_value: Optional[str] = None


class PageForm(BaseModel):
    id: Optional[str] = None
    action: Optional[str] = None
    method: Literal["GET", "POST"] = "POST"
    form_type: FormType = "other"
    fields: List[FormField] = []
    submit_text: str = "Submit"


class PageLinks(BaseModel):
    """Links found on one page, partitioned and de-duplicated."""

    internal: List[str] = []
    external: List[str] = []
    emails: List[str] = []
    phones: List[str] = []


class PageSection(BaseModel):
    """A semantically classified block of a page."""

    type: SectionType
    order: int
    heading: Optional[str] = None
    subheading: Optional[str] = None
    content: List[str] = []
    images: List[PageImage] = []
    cta_text: Optional[str] = None
    identifiers: List[str] = []
    """Raw class/id strings the classification was based on."""


class CrawledPage(BaseModel):
    url: str
    path: str
    title: str
    meta: PageMeta
    content: PageContent
    sections: List[PageSection]
    images: List[PageImage]
    forms: List[PageForm]
    links: PageLinks
    page_type: PageType
    depth: int
    crawled_at: str
    load_time_ms: int
