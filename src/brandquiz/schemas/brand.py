"""Schema for the brand summary stage output."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

MIN_KEY_THEMES = 3
MAX_KEY_THEMES = 5


class ProductOrService(BaseModel):
    """A concrete offering named on the brand's website."""

    name: str = Field(min_length=1, description="Product or service name")
    description: str = Field(default="", description="Brief description of what it is")


class BrandSummary(BaseModel):
    """Condensed brand identity produced from website text."""

    brand_name: str = Field(min_length=1, description="The brand or company name")
    industry: str = Field(min_length=1, description="The industry or sector")
    target_audience: str = Field(min_length=1, description="Who the brand primarily serves")
    tone: str = Field(min_length=1, description="The brand's communication tone")
    key_themes: list[str] = Field(
        min_length=MIN_KEY_THEMES,
        max_length=MAX_KEY_THEMES,
        description="Key themes or values the brand emphasises",
    )
    summary: str = Field(
        min_length=20,
        description="2-3 sentence summary of what the brand does and stands for",
    )
    products_or_services: list[ProductOrService] = Field(
        default_factory=list,
        description="Prominent offerings, used to ground recommendations",
    )
    recommendation_domain: Optional[str] = Field(
        default=None,
        description="What kind of personalised recommendation suits this audience",
    )

    @field_validator("key_themes", mode="before")
    @classmethod
    def normalize_key_themes(cls, v):
        """Accept a single theme string as a one-item list."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("products_or_services", mode="before")
    @classmethod
    def normalize_products(cls, v):
        """Accept bare product names in place of {name, description} objects."""
        if v is None:
            return []
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v
