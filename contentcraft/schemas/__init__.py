"""Pydantic records and request/response schemas."""
from contentcraft.schemas.common import ErrorResponse, SuccessResponse
from contentcraft.schemas.tenant import (
    Tenant,
    TenantCreate,
    TenantSettings,
    TenantSubscription,
    TenantUpdate,
)
from contentcraft.schemas.brand import Brand, BrandCreate, BrandDraft, BrandUpdate
from contentcraft.schemas.preset import Preset, PresetCategory, PresetCreate, PresetUpdate
from contentcraft.schemas.content import Content, ContentCreate, ContentStats, DailyContentStat

__all__ = [
    "ErrorResponse",
    "SuccessResponse",
    "Tenant",
    "TenantCreate",
    "TenantSettings",
    "TenantSubscription",
    "TenantUpdate",
    "Brand",
    "BrandCreate",
    "BrandDraft",
    "BrandUpdate",
    "Preset",
    "PresetCategory",
    "PresetCreate",
    "PresetUpdate",
    "Content",
    "ContentCreate",
    "ContentStats",
    "DailyContentStat",
]
