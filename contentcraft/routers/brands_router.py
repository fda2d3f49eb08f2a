"""API brands: CRUD and default brand per tenant."""
from typing import List, Optional

from fastapi import APIRouter, Query, status

from contentcraft.dependencies import StoresDep
from contentcraft.errors import NotFound
from contentcraft.schemas import Brand, BrandCreate, BrandUpdate, SuccessResponse
from contentcraft.services.brand_service import create_brand, delete_brand, update_brand

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("", response_model=List[Brand])
async def list_brands(
    stores: StoresDep,
    tenant_id: Optional[int] = Query(None, description="Only this tenant's brands"),
) -> List[Brand]:
    return await stores.brands.get_all(tenant_id)


@router.get("/default", response_model=Brand)
async def get_default_brand(
    stores: StoresDep,
    tenant_id: Optional[int] = Query(None),
) -> Brand:
    """Brand flagged default in the tenant's scope, else its first brand."""
    brand = await stores.brands.get_default(tenant_id)
    if brand is None:
        raise NotFound("No brand available", extra={"tenant_id": tenant_id})
    return brand


@router.get("/{brand_id}", response_model=Brand)
async def get_brand(brand_id: int, stores: StoresDep) -> Brand:
    return await stores.brands.get_by_id(brand_id)


@router.post("", response_model=Brand, status_code=status.HTTP_201_CREATED)
async def post_brand(payload: BrandCreate, stores: StoresDep) -> Brand:
    return await create_brand(stores, payload)


@router.put("/{brand_id}", response_model=Brand)
async def put_brand(brand_id: int, payload: BrandUpdate, stores: StoresDep) -> Brand:
    return await update_brand(stores.brands, brand_id, payload)


@router.delete("/{brand_id}", response_model=SuccessResponse)
async def remove_brand(brand_id: int, stores: StoresDep) -> SuccessResponse:
    """Delete a non-default brand. Content generated under it is kept."""
    await delete_brand(stores.brands, brand_id)
    return SuccessResponse()
