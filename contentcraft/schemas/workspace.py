"""Workspace (selection controller) request/response schemas."""
from typing import List, Optional

from pydantic import BaseModel, Field

from contentcraft.controller import WorkspaceState
from contentcraft.schemas.brand import Brand, BrandDraft
from contentcraft.schemas.tenant import Tenant


class WorkspaceErrorOut(BaseModel):
    kind: str
    message: str
    retryable: bool
    view: str


class WorkspaceOut(BaseModel):
    """What pages render from: resolved pointers plus the scoped collections."""

    status: str
    current_tenant: Optional[Tenant] = None
    current_brand: Optional[Brand] = None
    tenants: List[Tenant] = Field(default_factory=list)
    brands: List[Brand] = Field(default_factory=list)
    error: Optional[WorkspaceErrorOut] = None

    @classmethod
    def from_state(cls, state: WorkspaceState) -> "WorkspaceOut":
        error = None
        if state.error is not None:
            error = WorkspaceErrorOut(
                kind=state.error.kind.value,
                message=state.error.message,
                retryable=state.error.retryable,
                view=state.error.view,
            )
        return cls(
            status=state.status.value,
            current_tenant=state.current_tenant,
            current_brand=state.current_brand,
            tenants=list(state.tenants),
            brands=list(state.brands),
            error=error,
        )


class SwitchTenantRequest(BaseModel):
    """Body for POST /workspace/tenant."""

    tenant_id: int


class SelectBrandRequest(BaseModel):
    """Body for POST /workspace/brand."""

    brand_id: int


class BrandSetRequest(BaseModel):
    """Body for PUT /workspace/brands: the complete updated brand collection."""

    brands: List[BrandDraft]
