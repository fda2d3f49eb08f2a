"""Entity store over SQLAlchemy async sessions."""
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contentcraft.db import Base
from contentcraft.errors import BackendFailure, NotFound
from contentcraft.logging_config import get_logger
from contentcraft.stores.base import EntityStore, RecordT
from contentcraft.stores.entities import EntitySpec

logger = get_logger(__name__)


class DatabaseStore(EntityStore[RecordT]):
    """One short-lived session (and transaction) per store call."""

    def __init__(
        self,
        spec: EntitySpec,
        model_class: Type[Base],
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        super().__init__(spec)
        self.model_class = model_class
        self.session_factory = session_factory

    async def get_all(self, tenant_id: Optional[int] = None) -> List[RecordT]:
        stmt = select(self.model_class).order_by(self.model_class.id)  # type: ignore[attr-defined]
        if tenant_id is not None and self.spec.tenant_scoped:
            owner = self.model_class.tenant_id  # type: ignore[attr-defined]
            if self.spec.shared_when_unscoped:
                stmt = stmt.where(or_(owner == tenant_id, owner.is_(None)))
            else:
                stmt = stmt.where(owner == tenant_id)
        try:
            async with self.session_factory() as session:
                r = await session.execute(stmt)
                return [self._to_record(row) for row in r.scalars().all()]
        except SQLAlchemyError as e:
            raise self._failure("get_all", e) from e

    async def get_by_id(self, id: int) -> RecordT:
        try:
            async with self.session_factory() as session:
                row = await session.get(self.model_class, id)
        except SQLAlchemyError as e:
            raise self._failure("get_by_id", e) from e
        if row is None:
            raise NotFound(f"{self.entity.capitalize()} with ID {id} not found", extra={"id": id})
        return self._to_record(row)

    async def create(self, data: Dict[str, Any]) -> RecordT:
        values = {k: v for k, v in data.items() if k != "id"}
        try:
            async with self.session_factory() as session:
                row = self.model_class(**values)
                session.add(row)
                await session.flush()
                await session.refresh(row)
                record = self._to_record(row)
                await session.commit()
                return record
        except SQLAlchemyError as e:
            raise self._failure("create", e) from e

    async def update(self, id: int, data: Dict[str, Any]) -> RecordT:
        try:
            async with self.session_factory() as session:
                row = await session.get(self.model_class, id)
                if row is None:
                    raise NotFound(f"{self.entity.capitalize()} with ID {id} not found", extra={"id": id})
                for key, value in data.items():
                    if key != "id":
                        setattr(row, key, value)
                await session.flush()
                await session.refresh(row)
                record = self._to_record(row)
                await session.commit()
                return record
        except SQLAlchemyError as e:
            raise self._failure("update", e) from e

    async def delete(self, id: int) -> Dict[str, bool]:
        try:
            async with self.session_factory() as session:
                row = await session.get(self.model_class, id)
                if row is None:
                    raise NotFound(f"{self.entity.capitalize()} with ID {id} not found", extra={"id": id})
                await session.delete(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete", e) from e
        return {"success": True}

    def _failure(self, op: str, e: Exception) -> BackendFailure:
        logger.warning("database_store.error", entity=self.entity, op=op, error=str(e))
        return BackendFailure(f"Failed to {op.replace('_', ' ')} {self.entity}: {e}")
