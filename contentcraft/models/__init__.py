"""SQLAlchemy models for the database store backend."""
from contentcraft.models.tenant import TenantRow
from contentcraft.models.brand import BrandRow
from contentcraft.models.preset import PresetRow
from contentcraft.models.content import ContentRow

__all__ = [
    "TenantRow",
    "BrandRow",
    "PresetRow",
    "ContentRow",
]
