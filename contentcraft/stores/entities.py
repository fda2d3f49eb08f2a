"""Per-entity descriptors shared by the store backends."""
from dataclasses import dataclass
from typing import Type

from pydantic import BaseModel

from contentcraft.schemas import Brand, Content, Preset, Tenant


@dataclass(frozen=True)
class EntitySpec:
    """How one entity type is scoped and stored."""

    entity: str
    record_model: Type[BaseModel]
    tenant_scoped: bool = True
    shared_when_unscoped: bool = False


TENANT = EntitySpec(entity="tenant", record_model=Tenant, tenant_scoped=False)
BRAND = EntitySpec(entity="brand", record_model=Brand)
PRESET = EntitySpec(entity="preset", record_model=Preset, shared_when_unscoped=True)
CONTENT = EntitySpec(entity="content", record_model=Content)
