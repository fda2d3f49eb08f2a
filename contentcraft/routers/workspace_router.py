"""API workspace: per-session tenant/brand selection."""
from fastapi import APIRouter

from contentcraft.dependencies import StoresDep, WorkspaceDep
from contentcraft.errors import ValidationFailed
from contentcraft.schemas.workspace import (
    BrandSetRequest,
    SelectBrandRequest,
    SwitchTenantRequest,
    WorkspaceOut,
)
from contentcraft.services.brand_service import save_brand_set

router = APIRouter(prefix="/workspace", tags=["workspace"])


@router.get("", response_model=WorkspaceOut)
async def get_workspace_state(workspace: WorkspaceDep) -> WorkspaceOut:
    """Current selection. The session is started on first access."""
    return WorkspaceOut.from_state(workspace.state)


@router.post("/tenant", response_model=WorkspaceOut)
async def post_workspace_tenant(payload: SwitchTenantRequest, workspace: WorkspaceDep) -> WorkspaceOut:
    return WorkspaceOut.from_state(await workspace.switch_tenant(payload.tenant_id))


@router.put("/brands", response_model=WorkspaceOut)
async def put_workspace_brands(
    payload: BrandSetRequest,
    workspace: WorkspaceDep,
    stores: StoresDep,
) -> WorkspaceOut:
    """Persist the complete brand set for the current tenant, then reconcile the selection."""
    tenant = workspace.current_tenant
    if tenant is None:
        raise ValidationFailed("No tenant selected")
    brands = await save_brand_set(stores, tenant.id, payload.brands)
    return WorkspaceOut.from_state(workspace.on_brands_save(brands))


@router.post("/brand", response_model=WorkspaceOut)
async def post_workspace_brand(payload: SelectBrandRequest, workspace: WorkspaceDep) -> WorkspaceOut:
    return WorkspaceOut.from_state(workspace.select_brand(payload.brand_id))


@router.post("/retry", response_model=WorkspaceOut)
async def post_workspace_retry(workspace: WorkspaceDep) -> WorkspaceOut:
    return WorkspaceOut.from_state(await workspace.retry())
