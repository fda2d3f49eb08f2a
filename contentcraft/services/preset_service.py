"""Preset service: system presets are read-only, custom presets belong to one tenant."""
from typing import List, Optional

from contentcraft.errors import NotFound, PermissionDenied, ValidationFailed
from contentcraft.logging_config import get_logger
from contentcraft.schemas import Preset, PresetCategory, PresetCreate, PresetUpdate
from contentcraft.stores import EntityStore, Stores

logger = get_logger(__name__)


async def list_presets(
    store: EntityStore[Preset],
    tenant_id: Optional[int] = None,
    category: Optional[PresetCategory] = None,
    suggested: Optional[bool] = None,
) -> List[Preset]:
    """Presets visible to tenant_id (system + its custom ones), optionally filtered."""
    presets = await store.get_all(tenant_id)
    if category is not None:
        presets = [p for p in presets if p.category == category]
    if suggested is not None:
        presets = [p for p in presets if p.suggested is suggested]
    return presets


async def get_visible_preset(store: EntityStore[Preset], preset_id: int, tenant_id: Optional[int]) -> Preset:
    """Preset by id; another tenant's custom preset counts as missing."""
    preset = await store.get_by_id(preset_id)
    if tenant_id is not None and preset.tenant_id is not None and preset.tenant_id != tenant_id:
        raise NotFound(f"Preset with ID {preset_id} not found", extra={"id": preset_id})
    return preset


async def create_preset(stores: Stores, payload: PresetCreate) -> Preset:
    """Create a custom preset for payload.tenant_id."""
    name = payload.name.strip()
    if not name:
        raise ValidationFailed("Preset name is required")
    if payload.tenant_id is None:
        raise ValidationFailed("Custom presets need a tenant_id")
    await stores.tenants.get_by_id(payload.tenant_id)
    data = payload.model_dump(mode="json")
    data["name"] = name
    data["is_custom"] = True
    preset = await stores.presets.create(data)
    logger.info("preset.created", preset_id=preset.id, tenant_id=preset.tenant_id)
    return preset


async def update_preset(store: EntityStore[Preset], preset_id: int, payload: PresetUpdate) -> Preset:
    """Edit a custom preset. System presets are immutable."""
    current = await store.get_by_id(preset_id)
    if not current.is_custom:
        raise PermissionDenied("Cannot modify system presets", extra={"preset_id": preset_id})
    data = payload.model_dump(mode="json", exclude_unset=True)
    if "name" in data:
        data["name"] = (data["name"] or "").strip()
        if not data["name"]:
            raise ValidationFailed("Preset name is required")
    preset = await store.update(preset_id, data)
    logger.info("preset.updated", preset_id=preset_id, fields=sorted(data))
    return preset


async def delete_preset(store: EntityStore[Preset], preset_id: int) -> None:
    """Delete a custom preset. Existing content keeps its preset name snapshot."""
    preset = await store.get_by_id(preset_id)
    if not preset.is_custom:
        raise PermissionDenied("Cannot delete system presets", extra={"preset_id": preset_id})
    await store.delete(preset_id)
    logger.info("preset.deleted", preset_id=preset_id, tenant_id=preset.tenant_id)
