"""API contents: generation history, library filters, dashboard stats."""
from typing import List, Optional

from fastapi import APIRouter, Query, status

from contentcraft.dependencies import StoresDep
from contentcraft.schemas import Content, ContentCreate, ContentStats, SuccessResponse
from contentcraft.services.content_service import (
    content_stats,
    create_content,
    delete_content,
    list_library,
    update_content,
)

router = APIRouter(prefix="/contents", tags=["contents"])


@router.get("", response_model=List[Content])
async def get_contents(
    stores: StoresDep,
    tenant_id: Optional[int] = Query(None),
    brand_id: Optional[int] = Query(None),
    category: Optional[str] = Query(None, description="youtube | blog | social | marketing | all"),
    search: Optional[str] = Query(None, description="Matches input text and preset name"),
) -> List[Content]:
    """Library listing, most recent first."""
    return await list_library(stores.contents, tenant_id, brand_id=brand_id, category=category, search=search)


@router.get("/stats", response_model=ContentStats)
async def get_content_stats(
    stores: StoresDep,
    tenant_id: Optional[int] = Query(None),
    brand_id: Optional[int] = Query(None),
) -> ContentStats:
    return await content_stats(stores.contents, tenant_id, brand_id=brand_id)


@router.get("/{content_id}", response_model=Content)
async def get_content(content_id: int, stores: StoresDep) -> Content:
    return await stores.contents.get_by_id(content_id)


@router.post("", response_model=Content, status_code=status.HTTP_201_CREATED)
async def post_content(payload: ContentCreate, stores: StoresDep) -> Content:
    return await create_content(stores, payload)


@router.put("/{content_id}", response_model=Content)
async def put_content(content_id: int, stores: StoresDep) -> Content:
    """Content is immutable: always 403 for an existing record."""
    return await update_content(stores.contents, content_id)


@router.delete("/{content_id}", response_model=SuccessResponse)
async def remove_content(content_id: int, stores: StoresDep) -> SuccessResponse:
    await delete_content(stores.contents, content_id)
    return SuccessResponse()
