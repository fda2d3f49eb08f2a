"""Preset records and payloads."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PresetCategory(str, Enum):
    """Preset category tag."""

    VIDEO = "video"
    BLOG = "blog"
    SOCIAL = "social"
    MARKETING = "marketing"
    SEO = "seo"
    ANALYSIS = "analysis"
    CUSTOM = "custom"


class Preset(BaseModel):
    """
    Named prompt template.
    tenant_id None = system-global preset, visible to every tenant.
    """

    id: int
    name: str
    description: str = ""
    prompt: str = ""
    category: PresetCategory = PresetCategory.CUSTOM
    tenant_id: Optional[int] = None
    is_custom: bool = False
    suggested: bool = False

    model_config = {"from_attributes": True, "use_enum_values": False}


class PresetCreate(BaseModel):
    """Body for POST /presets. Created presets are always custom."""

    name: str = Field(..., max_length=255)
    description: str = ""
    prompt: str = ""
    category: PresetCategory = PresetCategory.CUSTOM
    tenant_id: Optional[int] = None
    is_custom: bool = True
    suggested: bool = False


class PresetUpdate(BaseModel):
    """Body for PUT /presets/{id}."""

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    prompt: Optional[str] = None
    category: Optional[PresetCategory] = None
    suggested: Optional[bool] = None
