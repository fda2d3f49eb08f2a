"""In-process entity store backed by JSON fixtures."""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from contentcraft.errors import NotFound, ValidationFailed
from contentcraft.logging_config import get_logger
from contentcraft.stores.base import EntityStore, RecordT
from contentcraft.stores.entities import EntitySpec

logger = get_logger(__name__)

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def load_fixture(name: str, fixtures_dir: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Read `<name>.json` (a list of records). Missing file = empty list."""
    path = (fixtures_dir or FIXTURES_DIR) / f"{name}.json"
    if not path.exists():
        logger.debug("memory_store.fixture_missing", path=str(path))
        return []
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"fixture {path} must contain a JSON list")
    return data


class MemoryStore(EntityStore[RecordT]):
    """
    Records live in a list in insertion order; ids are assigned as max(id) + 1.
    Reads hand out copies so callers never alias store state.
    """

    def __init__(self, spec: EntitySpec, rows: Iterable[Dict[str, Any]] = ()) -> None:
        super().__init__(spec)
        self._records: List[RecordT] = [self._to_record(r) for r in rows]

    def _next_id(self) -> int:
        return max((r.id for r in self._records), default=0) + 1  # type: ignore[attr-defined]

    def _index_of(self, id: int) -> int:
        for i, record in enumerate(self._records):
            if record.id == id:  # type: ignore[attr-defined]
                return i
        raise NotFound(f"{self.entity.capitalize()} with ID {id} not found", extra={"id": id})

    async def get_all(self, tenant_id: Optional[int] = None) -> List[RecordT]:
        return [r.model_copy(deep=True) for r in self._scope(self._records, tenant_id)]

    async def get_by_id(self, id: int) -> RecordT:
        return self._records[self._index_of(id)].model_copy(deep=True)

    async def create(self, data: Dict[str, Any]) -> RecordT:
        now = datetime.now(timezone.utc)
        row = dict(data)
        row["id"] = self._next_id()
        for stamp in ("created_at", "updated_at"):
            if stamp in self.spec.record_model.model_fields and not row.get(stamp):
                row[stamp] = now
        record = self._validate(row)
        self._records.append(record)
        return record.model_copy(deep=True)

    async def update(self, id: int, data: Dict[str, Any]) -> RecordT:
        i = self._index_of(id)
        row = self._records[i].model_dump()
        row.update({k: v for k, v in data.items() if k != "id"})
        if "updated_at" in self.spec.record_model.model_fields:
            row["updated_at"] = datetime.now(timezone.utc)
        record = self._validate(row)
        self._records[i] = record
        return record.model_copy(deep=True)

    async def delete(self, id: int) -> Dict[str, bool]:
        del self._records[self._index_of(id)]
        return {"success": True}

    def _validate(self, row: Dict[str, Any]) -> RecordT:
        try:
            return self._to_record(row)
        except ValueError as e:
            # pydantic.ValidationError subclasses ValueError
            raise ValidationFailed(f"Invalid {self.entity}: {e}") from e
