"""Brand service: per-tenant unique names, one protected default, brand-set sync."""
from typing import List, Optional, Sequence, Set

from contentcraft.errors import NotFound, PermissionDenied, ValidationFailed
from contentcraft.logging_config import get_logger
from contentcraft.schemas import Brand, BrandCreate, BrandDraft, BrandUpdate, Tenant
from contentcraft.stores import EntityStore, Stores

logger = get_logger(__name__)


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationFailed("Brand name is required")
    return cleaned


def _ensure_unique_name(name: str, brands: Sequence[Brand], exclude_id: Optional[int] = None) -> None:
    lowered = name.lower()
    for brand in brands:
        if brand.id != exclude_id and brand.name.lower() == lowered:
            raise ValidationFailed(f'Brand name "{name}" already exists', extra={"brand_id": brand.id})


def _ensure_can_add(tenant: Tenant, current_count: int, adding: int = 1) -> None:
    if not tenant.settings.allow_brand_creation:
        raise PermissionDenied(f'Brand creation is disabled for tenant "{tenant.name}"')
    if current_count + adding > tenant.settings.max_brands:
        raise ValidationFailed(
            f"Tenant allows at most {tenant.settings.max_brands} brands",
            extra={"max_brands": tenant.settings.max_brands},
        )


async def _clear_other_defaults(store: EntityStore[Brand], tenant_id: Optional[int], keep_id: int) -> None:
    for other in await store.get_all(tenant_id):
        if other.is_default and other.id != keep_id:
            await store.update(other.id, {"is_default": False})


async def create_brand(stores: Stores, payload: BrandCreate) -> Brand:
    """
    Create a brand inside payload.tenant_id. The tenant's first brand becomes
    its default; is_default=True moves the default flag to the new brand.
    """
    name = _clean_name(payload.name)
    if payload.tenant_id is None:
        raise ValidationFailed("Brand tenant_id is required")
    tenant = await stores.tenants.get_by_id(payload.tenant_id)
    siblings = await stores.brands.get_all(payload.tenant_id)
    _ensure_can_add(tenant, len(siblings))
    _ensure_unique_name(name, siblings)
    data = payload.model_dump(mode="json")
    data["name"] = name
    data["is_default"] = payload.is_default or not siblings
    brand = await stores.brands.create(data)
    if brand.is_default and siblings:
        await _clear_other_defaults(stores.brands, brand.tenant_id, brand.id)
    logger.info("brand.created", brand_id=brand.id, tenant_id=brand.tenant_id, is_default=brand.is_default)
    return brand


async def update_brand(store: EntityStore[Brand], brand_id: int, payload: BrandUpdate) -> Brand:
    """
    Apply set fields. Name stays unique in the tenant; the default can be moved,
    not dropped. A brand never changes tenant.
    """
    current = await store.get_by_id(brand_id)
    data = payload.model_dump(mode="json", exclude_unset=True)
    if data.get("tenant_id", current.tenant_id) != current.tenant_id:
        raise ValidationFailed(
            "Brands cannot move between tenants",
            extra={"brand_id": brand_id, "tenant_id": current.tenant_id},
        )
    data.pop("tenant_id", None)
    tenant_id = current.tenant_id
    if "name" in data:
        data["name"] = _clean_name(data["name"])
        _ensure_unique_name(data["name"], await store.get_all(tenant_id), exclude_id=brand_id)
    if data.get("is_default") is False and current.is_default:
        raise ValidationFailed("Set another brand as default instead of clearing the flag")
    brand = await store.update(brand_id, data)
    if data.get("is_default") and not current.is_default:
        await _clear_other_defaults(store, brand.tenant_id, brand_id)
    logger.info("brand.updated", brand_id=brand_id, fields=sorted(data))
    return brand


async def delete_brand(store: EntityStore[Brand], brand_id: int) -> None:
    """Delete a non-default brand. Its content records are left in place."""
    brand = await store.get_by_id(brand_id)
    if brand.is_default:
        raise PermissionDenied("Cannot delete the default brand", extra={"brand_id": brand_id})
    await store.delete(brand_id)
    logger.info("brand.deleted", brand_id=brand_id, tenant_id=brand.tenant_id)


def _validate_brand_set(tenant: Tenant, existing: Sequence[Brand], drafts: Sequence[BrandDraft]) -> None:
    seen: Set[str] = set()
    for draft in drafts:
        name = _clean_name(draft.name).lower()
        if name in seen:
            raise ValidationFailed(f'Brand name "{draft.name.strip()}" already exists')
        seen.add(name)
    defaults = sum(1 for d in drafts if d.is_default)
    if defaults > 1:
        raise ValidationFailed("At most one brand can be the default")
    if defaults == 0 and any(b.is_default for b in existing):
        raise ValidationFailed("Set another brand as default instead of clearing the flag")
    kept_ids = {d.id for d in drafts if d.id is not None}
    for brand in existing:
        if brand.is_default and brand.id not in kept_ids:
            raise PermissionDenied("Cannot delete the default brand", extra={"brand_id": brand.id})
    existing_ids = {b.id for b in existing}
    new_count = sum(1 for d in drafts if d.id not in existing_ids)
    if new_count:
        _ensure_can_add(tenant, len(existing) - len(existing_ids - kept_ids), adding=new_count)


async def save_brand_set(stores: Stores, tenant_id: int, drafts: Sequence[BrandDraft]) -> List[Brand]:
    """
    Make the tenant's brands match `drafts`: delete missing, update changed,
    create new. The whole set is validated before anything is written.
    Returns the tenant's brands as stored afterwards.
    """
    tenant = await stores.tenants.get_by_id(tenant_id)
    existing = await stores.brands.get_all(tenant_id)
    _validate_brand_set(tenant, existing, drafts)
    if drafts and not any(d.is_default for d in drafts):
        # Nothing was default before either; the first brand takes the flag.
        drafts = [drafts[0].model_copy(update={"is_default": True}), *drafts[1:]]

    by_id = {b.id: b for b in existing}
    kept_ids = {d.id for d in drafts if d.id in by_id}
    new_default_id: Optional[int] = None

    for brand in existing:
        if brand.id not in kept_ids:
            await stores.brands.delete(brand.id)
    for draft in drafts:
        fields = {
            "name": draft.name.strip(),
            "color": draft.color,
            "emoji": draft.emoji,
            "is_default": draft.is_default,
        }
        current = by_id.get(draft.id) if draft.id is not None else None
        if current is None:
            created = await stores.brands.create({**fields, "tenant_id": tenant_id})
            if created.is_default:
                new_default_id = created.id
            continue
        changed = {k: v for k, v in fields.items() if getattr(current, k) != v}
        if changed:
            await stores.brands.update(current.id, changed)
        if draft.is_default and not current.is_default:
            new_default_id = current.id
    if new_default_id is not None:
        await _clear_other_defaults(stores.brands, tenant_id, new_default_id)

    brands = await stores.brands.get_all(tenant_id)
    logger.info("brand.set_saved", tenant_id=tenant_id, count=len(brands))
    return brands


async def get_brand_for_tenant(store: EntityStore[Brand], brand_id: int, tenant_id: int) -> Brand:
    """Brand by id, NotFound unless it belongs to tenant_id."""
    brand = await store.get_by_id(brand_id)
    if brand.tenant_id != tenant_id:
        raise NotFound(f"Brand with ID {brand_id} not found", extra={"id": brand_id, "tenant_id": tenant_id})
    return brand
