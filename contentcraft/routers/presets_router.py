"""API presets: system presets (read-only) and per-tenant custom presets."""
from typing import List, Optional

from fastapi import APIRouter, Query, status

from contentcraft.dependencies import StoresDep
from contentcraft.schemas import Preset, PresetCategory, PresetCreate, PresetUpdate, SuccessResponse
from contentcraft.services.preset_service import (
    create_preset,
    delete_preset,
    get_visible_preset,
    list_presets,
    update_preset,
)

router = APIRouter(prefix="/presets", tags=["presets"])


@router.get("", response_model=List[Preset])
async def get_presets(
    stores: StoresDep,
    tenant_id: Optional[int] = Query(None, description="System presets plus this tenant's custom ones"),
    category: Optional[PresetCategory] = Query(None),
    suggested: Optional[bool] = Query(None),
) -> List[Preset]:
    return await list_presets(stores.presets, tenant_id, category=category, suggested=suggested)


@router.get("/{preset_id}", response_model=Preset)
async def get_preset(
    preset_id: int,
    stores: StoresDep,
    tenant_id: Optional[int] = Query(None),
) -> Preset:
    return await get_visible_preset(stores.presets, preset_id, tenant_id)


@router.post("", response_model=Preset, status_code=status.HTTP_201_CREATED)
async def post_preset(payload: PresetCreate, stores: StoresDep) -> Preset:
    return await create_preset(stores, payload)


@router.put("/{preset_id}", response_model=Preset)
async def put_preset(preset_id: int, payload: PresetUpdate, stores: StoresDep) -> Preset:
    return await update_preset(stores.presets, preset_id, payload)


@router.delete("/{preset_id}", response_model=SuccessResponse)
async def remove_preset(preset_id: int, stores: StoresDep) -> SuccessResponse:
    await delete_preset(stores.presets, preset_id)
    return SuccessResponse()
