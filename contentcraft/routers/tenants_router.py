"""API tenants: CRUD, default tenant, domain lookup."""
from typing import List

from fastapi import APIRouter, status

from contentcraft.dependencies import StoresDep
from contentcraft.errors import NoTenantAvailable, NotFound
from contentcraft.schemas import SuccessResponse, Tenant, TenantCreate, TenantUpdate
from contentcraft.services.tenant_service import (
    create_tenant,
    delete_tenant,
    get_tenant_by_domain,
    set_default_tenant,
    update_tenant,
)

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("", response_model=List[Tenant])
async def list_tenants(stores: StoresDep) -> List[Tenant]:
    return await stores.tenants.get_all()


@router.get("/default", response_model=Tenant)
async def get_default_tenant(stores: StoresDep) -> Tenant:
    """Tenant flagged default, else the first one."""
    tenant = await stores.tenants.get_default()
    if tenant is None:
        raise NoTenantAvailable("No tenant available. Ask an administrator to create one.")
    return tenant


@router.get("/by-domain/{domain}", response_model=Tenant)
async def get_tenant_for_domain(domain: str, stores: StoresDep) -> Tenant:
    tenant = await get_tenant_by_domain(stores.tenants, domain)
    if tenant is None:
        raise NotFound(f"No tenant for domain {domain}", extra={"domain": domain})
    return tenant


@router.get("/{tenant_id}", response_model=Tenant)
async def get_tenant(tenant_id: int, stores: StoresDep) -> Tenant:
    return await stores.tenants.get_by_id(tenant_id)


@router.post("", response_model=Tenant, status_code=status.HTTP_201_CREATED)
async def post_tenant(payload: TenantCreate, stores: StoresDep) -> Tenant:
    return await create_tenant(stores.tenants, payload)


@router.put("/{tenant_id}", response_model=Tenant)
async def put_tenant(tenant_id: int, payload: TenantUpdate, stores: StoresDep) -> Tenant:
    return await update_tenant(stores.tenants, tenant_id, payload)


@router.post("/{tenant_id}/default", response_model=Tenant)
async def post_default_tenant(tenant_id: int, stores: StoresDep) -> Tenant:
    """Move the default flag to tenant_id."""
    return await set_default_tenant(stores.tenants, tenant_id)


@router.delete("/{tenant_id}", response_model=SuccessResponse)
async def remove_tenant(tenant_id: int, stores: StoresDep) -> SuccessResponse:
    await delete_tenant(stores.tenants, tenant_id)
    return SuccessResponse()
