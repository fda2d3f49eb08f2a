"""Tenant service: first-tenant default, single default, guarded delete, domain lookup."""
import re
from typing import List, Optional

from contentcraft.config import get_settings
from contentcraft.errors import PermissionDenied, ValidationFailed
from contentcraft.logging_config import get_logger
from contentcraft.schemas import Tenant, TenantCreate, TenantUpdate
from contentcraft.stores import EntityStore

logger = get_logger(__name__)

_SLUG_RE = re.compile(r"\s+")


def tenant_domain_for(name: str, suffix: Optional[str] = None) -> str:
    """'Acme Media' -> 'acme-media.contentcraft.com'."""
    suffix = suffix or get_settings().default_tenant_domain
    return f"{_SLUG_RE.sub('-', name.strip().lower())}.{suffix}"


async def _clear_other_defaults(store: EntityStore[Tenant], keep_id: int) -> None:
    for other in await store.get_all():
        if other.is_default and other.id != keep_id:
            await store.update(other.id, {"is_default": False})


async def create_tenant(store: EntityStore[Tenant], payload: TenantCreate) -> Tenant:
    """
    Create a tenant. The first tenant ever created becomes the default;
    creating one with is_default=True moves the default flag to it.
    """
    name = payload.name.strip()
    if not name:
        raise ValidationFailed("Tenant name is required")
    existing = await store.get_all()
    data = payload.model_dump(mode="json")
    data["name"] = name
    data["domain"] = payload.domain.strip() or tenant_domain_for(name)
    data["is_default"] = payload.is_default or not existing
    tenant = await store.create(data)
    if tenant.is_default and existing:
        await _clear_other_defaults(store, tenant.id)
    logger.info("tenant.created", tenant_id=tenant.id, is_default=tenant.is_default)
    return tenant


async def update_tenant(store: EntityStore[Tenant], tenant_id: int, payload: TenantUpdate) -> Tenant:
    """Apply set fields. The default flag can be moved, not dropped."""
    current = await store.get_by_id(tenant_id)
    data = payload.model_dump(mode="json", exclude_unset=True)
    if "name" in data:
        if not (data["name"] or "").strip():
            raise ValidationFailed("Tenant name is required")
        data["name"] = data["name"].strip()
    if data.get("is_default") is False and current.is_default:
        raise ValidationFailed("Set another tenant as default instead of clearing the flag")
    tenant = await store.update(tenant_id, data)
    if data.get("is_default") and not current.is_default:
        await _clear_other_defaults(store, tenant_id)
    logger.info("tenant.updated", tenant_id=tenant_id, fields=sorted(data))
    return tenant


async def delete_tenant(store: EntityStore[Tenant], tenant_id: int) -> None:
    """Delete a tenant. The default tenant is protected while others remain."""
    tenant = await store.get_by_id(tenant_id)
    if tenant.is_default and len(await store.get_all()) > 1:
        raise PermissionDenied("Cannot delete the default tenant while other tenants exist")
    await store.delete(tenant_id)
    logger.info("tenant.deleted", tenant_id=tenant_id)


async def set_default_tenant(store: EntityStore[Tenant], tenant_id: int) -> Tenant:
    """Make tenant_id the only default tenant."""
    target = await store.get_by_id(tenant_id)
    await _clear_other_defaults(store, tenant_id)
    if not target.is_default:
        target = await store.update(tenant_id, {"is_default": True})
    logger.info("tenant.default_set", tenant_id=tenant_id)
    return target


async def get_tenant_by_domain(store: EntityStore[Tenant], domain: str) -> Optional[Tenant]:
    """Tenant owning `domain` (case-insensitive), or None."""
    wanted = domain.strip().lower()
    tenants: List[Tenant] = await store.get_all()
    return next((t for t in tenants if t.domain.lower() == wanted), None)
