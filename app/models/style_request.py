from typing import List, Literal, Optional

from pydantic import BaseModel, Field

LayoutPattern = Literal["hero-centric", "grid-based", "single-column", "sidebar", "unknown"]


class StyleRequest(BaseModel):
    lead_id: str = Field(min_length=1, description="Stable lead identifier; seeds the selection.")
    industry: Optional[str] = Field(default=None, examples=["Dental clinic", "SaaS"])
    source_structure: Optional[LayoutPattern] = None
    recent_styles: List[str] = Field(
        default=[],
        description="Styles used recently; avoided unless nothing else fits.",
    )
    url: Optional[str] = Field(
        default=None,
        description="When set and source_structure is not, the homepage layout is detected from this URL.",
    )


class StyleResponse(BaseModel):
    style: str
    label: str
    layout: LayoutPattern
