"""Brand records and payloads."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_BRAND_COLOR = "#3B82F6"
DEFAULT_BRAND_EMOJI = "🚀"


class Brand(BaseModel):
    """Brand (voice/identity) inside a tenant."""

    id: int
    name: str
    color: str = DEFAULT_BRAND_COLOR
    emoji: str = DEFAULT_BRAND_EMOJI
    tenant_id: Optional[int] = None
    is_default: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BrandCreate(BaseModel):
    """Body for POST /brands."""

    name: str = Field(..., max_length=255)
    color: str = DEFAULT_BRAND_COLOR
    emoji: str = DEFAULT_BRAND_EMOJI
    tenant_id: Optional[int] = None
    is_default: bool = False


class BrandUpdate(BaseModel):
    """Body for PUT /brands/{id}. Only fields that are set are applied."""

    name: Optional[str] = Field(None, max_length=255)
    color: Optional[str] = None
    emoji: Optional[str] = None
    tenant_id: Optional[int] = None
    is_default: Optional[bool] = None


class BrandDraft(BaseModel):
    """
    One entry of a complete brand set submitted by the brand manager.
    id None (or an id the store does not know) means a new brand.
    """

    id: Optional[int] = None
    name: str = Field(..., max_length=255)
    color: str = DEFAULT_BRAND_COLOR
    emoji: str = DEFAULT_BRAND_EMOJI
    is_default: bool = False
