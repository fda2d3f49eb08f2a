"""Tenant scoping and default selection over entity collections."""
from typing import Iterable, List, Optional, TypeVar

E = TypeVar("E")


def scope(
    collection: Iterable[E],
    tenant_id: Optional[int],
    *,
    shared_when_unscoped: bool = False,
) -> List[E]:
    """
    Return the elements of `collection` that belong to `tenant_id`, in order.

    tenant_id None returns the whole collection. An element without a
    tenant_id only matches when `shared_when_unscoped` is set (system presets);
    otherwise it is excluded from every explicit tenant filter.
    """
    if tenant_id is None:
        return list(collection)
    scoped: List[E] = []
    for element in collection:
        owner = getattr(element, "tenant_id", None)
        if owner is None:
            if shared_when_unscoped:
                scoped.append(element)
            continue
        if owner == tenant_id:
            scoped.append(element)
    return scoped


def scope_presets(collection: Iterable[E], tenant_id: Optional[int]) -> List[E]:
    """Presets visible to a tenant: its custom presets plus every system preset."""
    return scope(collection, tenant_id, shared_when_unscoped=True)


def resolve_default(collection: Iterable[E]) -> Optional[E]:
    """First element flagged is_default, else the first element, else None."""
    first: Optional[E] = None
    for element in collection:
        if getattr(element, "is_default", False):
            return element
        if first is None:
            first = element
    return first


def find_by_id(collection: Iterable[E], entity_id: Optional[int]) -> Optional[E]:
    """Element whose id equals `entity_id`, or None."""
    if entity_id is None:
        return None
    for element in collection:
        if getattr(element, "id", None) == entity_id:
            return element
    return None
