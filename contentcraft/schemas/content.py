"""Content records, payloads and library statistics."""
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

DEFAULT_CONTENT_NAME = "Generated Content"
DEFAULT_PROVIDER = "OpenAI GPT-4"

# Output-type tags produced by the generator; other tags are stored as-is.
OUTPUT_TYPES = (
    "youtube_description",
    "blog_post",
    "forum_post",
    "seo_tags",
    "timestamps",
    "voice_analysis",
    "social_posts",
    "email_newsletter",
)


class Content(BaseModel):
    """One generation run. `preset` is a name snapshot, not a reference."""

    id: int
    name: str = DEFAULT_CONTENT_NAME
    input: str = ""
    preset: str = ""
    provider: str = DEFAULT_PROVIDER
    brand_id: Optional[int] = None
    tenant_id: Optional[int] = None
    output_count: int = 0
    word_count: int = 0
    created_at: Optional[datetime] = None
    outputs: Dict[str, str] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class ContentCreate(BaseModel):
    """
    Body for POST /contents.
    preset_id resolves the preset name at creation time; preset overrides it.
    """

    name: Optional[str] = Field(None, max_length=255)
    input: str = Field(..., min_length=1)
    preset: Optional[str] = Field(None, max_length=255)
    preset_id: Optional[int] = None
    provider: str = DEFAULT_PROVIDER
    brand_id: int
    tenant_id: int
    output_count: Optional[int] = Field(None, ge=0)
    word_count: Optional[int] = Field(None, ge=0)
    outputs: Dict[str, str] = Field(default_factory=dict)


class DailyContentStat(BaseModel):
    """Per-day totals for the analytics chart."""

    day: date
    content: int
    words: int


class ContentStats(BaseModel):
    """Dashboard figures for a tenant (optionally one brand)."""

    total_content: int
    this_week: int
    total_words: int
    avg_words_per_content: int
    last_7_days: List[DailyContentStat]
    by_preset: Dict[str, int]
