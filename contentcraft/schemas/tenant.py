"""Tenant records and payloads."""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_PRIMARY_COLOR = "#3B82F6"
TRIAL_DAYS = 30


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TenantSettings(BaseModel):
    """Per-tenant feature switches and quotas."""

    allow_brand_creation: bool = True
    max_brands: int = Field(10, ge=0)
    max_users: int = Field(5, ge=0)
    ai_providers: List[str] = Field(default_factory=lambda: ["openai", "claude", "gemini"])
    features: List[str] = Field(
        default_factory=lambda: ["content-generation", "analytics", "collaboration"]
    )


class TenantSubscription(BaseModel):
    """Billing plan snapshot. New tenants start on a 30-day starter plan."""

    plan: str = "starter"
    status: str = "active"
    expires_at: datetime = Field(default_factory=lambda: _utcnow() + timedelta(days=TRIAL_DAYS))


class Tenant(BaseModel):
    """Tenant as seen by services and the selection controller."""

    id: int
    name: str
    domain: str = ""
    logo: str = ""
    primary_color: str = DEFAULT_PRIMARY_COLOR
    is_default: bool = False
    settings: TenantSettings = Field(default_factory=TenantSettings)
    subscription: TenantSubscription = Field(default_factory=TenantSubscription)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TenantCreate(BaseModel):
    """Body for POST /tenants. Empty domain is derived from the name."""

    name: str = Field(..., max_length=255)
    domain: str = Field("", max_length=255)
    logo: str = ""
    primary_color: str = DEFAULT_PRIMARY_COLOR
    is_default: bool = False
    settings: TenantSettings = Field(default_factory=TenantSettings)
    subscription: TenantSubscription = Field(default_factory=TenantSubscription)


class TenantUpdate(BaseModel):
    """Body for PUT /tenants/{id}. Only fields that are set are applied."""

    name: Optional[str] = Field(None, max_length=255)
    domain: Optional[str] = Field(None, max_length=255)
    logo: Optional[str] = None
    primary_color: Optional[str] = None
    is_default: Optional[bool] = None
    settings: Optional[TenantSettings] = None
    subscription: Optional[TenantSubscription] = None
