"""Entity store interface shared by every backend."""
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from contentcraft.scoping import resolve_default, scope
from contentcraft.stores.entities import EntitySpec

RecordT = TypeVar("RecordT", bound=BaseModel)


class EntityStore(ABC, Generic[RecordT]):
    """
    Async CRUD over one entity type.

    Data passed to create/update is a dict of normalized, JSON-safe field
    values. Lookups of missing ids raise NotFound; backend errors raise
    BackendFailure. Every read returns `spec.record_model` instances.
    """

    def __init__(self, spec: EntitySpec) -> None:
        self.spec = spec

    @property
    def entity(self) -> str:
        return self.spec.entity

    @abstractmethod
    async def get_all(self, tenant_id: Optional[int] = None) -> List[RecordT]:
        """All records, scoped to tenant_id when given."""

    @abstractmethod
    async def get_by_id(self, id: int) -> RecordT:
        """Single record; NotFound when missing."""

    @abstractmethod
    async def create(self, data: Dict[str, Any]) -> RecordT:
        """Insert a record and return it with its assigned id."""

    @abstractmethod
    async def update(self, id: int, data: Dict[str, Any]) -> RecordT:
        """Apply the given fields to an existing record."""

    @abstractmethod
    async def delete(self, id: int) -> Dict[str, bool]:
        """Remove a record. Returns {"success": True}."""

    async def get_default(self, tenant_id: Optional[int] = None) -> Optional[RecordT]:
        """Default record (flagged, else first) in the tenant's scope, or None."""
        return resolve_default(await self.get_all(tenant_id))

    def _scope(self, records: List[RecordT], tenant_id: Optional[int]) -> List[RecordT]:
        if not self.spec.tenant_scoped:
            return list(records)
        return scope(records, tenant_id, shared_when_unscoped=self.spec.shared_when_unscoped)

    def _to_record(self, row: Any) -> RecordT:
        return self.spec.record_model.model_validate(row)  # type: ignore[return-value]
