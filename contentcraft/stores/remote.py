"""
Entity store over the generic record API (tables tenant_c, brand_c, preset_c, content_c).

The record API speaks its own field names (Name, color_c, tenant_id_c, ...),
returns lookup fields either as ints or as {"Id": .., "Name": ..} objects and
stores structured values as JSON strings with camelCase keys. All of that is
normalized here; nothing above the store sees a raw record.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

import httpx
from pydantic import ValidationError

from contentcraft.errors import BackendFailure, NotFound
from contentcraft.logging_config import get_logger
from contentcraft.stores.base import EntityStore, RecordT
from contentcraft.stores.entities import BRAND, CONTENT, PRESET, TENANT, EntitySpec

logger = get_logger(__name__)


@dataclass(frozen=True)
class FieldMap:
    """Normalized field name -> record API field name, per table."""

    table: str
    fields: Dict[str, str]
    json_fields: FrozenSet[str] = frozenset()
    lookup_fields: FrozenSet[str] = frozenset()
    raw_to_name: Dict[str, str] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_to_name", {raw: name for name, raw in self.fields.items()})


FIELD_MAPS: Dict[str, FieldMap] = {
    TENANT.entity: FieldMap(
        table="tenant_c",
        fields={
            "name": "Name",
            "domain": "domain_c",
            "logo": "logo_c",
            "primary_color": "primary_color_c",
            "is_default": "is_default_c",
            "settings": "settings_c",
            "subscription": "subscription_c",
            "created_at": "created_at_c",
            "updated_at": "updated_at_c",
        },
        json_fields=frozenset({"settings", "subscription"}),
    ),
    BRAND.entity: FieldMap(
        table="brand_c",
        fields={
            "name": "Name",
            "color": "color_c",
            "emoji": "emoji_c",
            "is_default": "is_default_c",
            "created_at": "created_at_c",
            "tenant_id": "tenant_id_c",
        },
        lookup_fields=frozenset({"tenant_id"}),
    ),
    PRESET.entity: FieldMap(
        table="preset_c",
        fields={
            "name": "Name",
            "description": "description_c",
            "prompt": "prompt_c",
            "category": "category_c",
            "is_custom": "is_custom_c",
            "suggested": "suggested_c",
            "tenant_id": "tenant_id_c",
        },
        lookup_fields=frozenset({"tenant_id"}),
    ),
    CONTENT.entity: FieldMap(
        table="content_c",
        fields={
            "name": "Name",
            "input": "input_c",
            "preset": "preset_c",
            "provider": "provider_c",
            "output_count": "output_count_c",
            "word_count": "word_count_c",
            "created_at": "created_at_c",
            "outputs": "outputs_c",
            "brand_id": "brand_id_c",
            "tenant_id": "tenant_id_c",
        },
        json_fields=frozenset({"outputs"}),
        lookup_fields=frozenset({"brand_id", "tenant_id"}),
    ),
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _lookup_id(value: Any) -> Optional[int]:
    """Lookup fields come back as 3, "3" or {"Id": 3, "Name": ".."}."""
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        value = value.get("Id")
        if value is None:
            return None
    return int(value)


def decode_record(fmap: FieldMap, raw: Dict[str, Any]) -> Dict[str, Any]:
    """Raw record API row -> normalized field dict."""
    out: Dict[str, Any] = {"id": int(raw["Id"])}
    for raw_name, value in raw.items():
        name = fmap.raw_to_name.get(raw_name)
        if name is None:
            continue
        if name in fmap.lookup_fields:
            value = _lookup_id(value)
        elif name in fmap.json_fields:
            if isinstance(value, str):
                value = json.loads(value) if value.strip() else {}
            if isinstance(value, dict) and name != "outputs":
                value = {_snake(k): v for k, v in value.items()}
        elif value is None:
            # Let the record model fall back to its field default.
            continue
        out[name] = value
    return out


def encode_record(fmap: FieldMap, data: Dict[str, Any]) -> Dict[str, Any]:
    """Normalized field dict -> raw record API row (only mapped fields)."""
    out: Dict[str, Any] = {}
    for name, value in data.items():
        if name == "id":
            out["Id"] = int(value)
            continue
        raw_name = fmap.fields.get(name)
        if raw_name is None:
            continue
        if name in fmap.json_fields and value is not None:
            if isinstance(value, dict) and name != "outputs":
                value = {_camel(k): v for k, v in value.items()}
            value = json.dumps(value, ensure_ascii=False)
        out[raw_name] = value
    return out


def _where_equal(field_name: str, value: Any) -> Dict[str, Any]:
    return {"FieldName": field_name, "Operator": "EqualTo", "Values": [value]}


class RecordApiClient:
    """
    Thin async client for the record API.
    Transport errors are retried `retries` times; HTTP >= 400 and envelopes
    with success=false raise BackendFailure.
    """

    def __init__(
        self,
        base_url: str,
        project_id: Optional[str] = None,
        public_key: Optional[str] = None,
        timeout_seconds: float = 10.0,
        retries: int = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout_seconds
        self.retries = max(0, retries)
        self.transport = transport
        self.headers: Dict[str, str] = {}
        if project_id:
            self.headers["X-Project-Id"] = project_id
        if public_key:
            self.headers["X-Public-Key"] = public_key

    async def fetch_records(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        body = await self._request("POST", f"/tables/{table}/records/query", json=params)
        return list(body.get("data") or [])

    async def get_record_by_id(self, table: str, id: int) -> Optional[Dict[str, Any]]:
        body = await self._request("GET", f"/tables/{table}/records/{id}", allow_404=True)
        if not body:
            return None
        return body.get("data") or None

    async def create_records(self, table: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        body = await self._request("POST", f"/tables/{table}/records", json={"records": records})
        return self._successful(table, "create", body)

    async def update_records(self, table: str, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        body = await self._request("PUT", f"/tables/{table}/records", json={"records": records})
        return self._successful(table, "update", body)

    async def delete_records(self, table: str, ids: List[int]) -> None:
        await self._request("DELETE", f"/tables/{table}/records", json={"RecordIds": ids})

    def _successful(self, table: str, op: str, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        results = body.get("results") or []
        failed = [r for r in results if not r.get("success")]
        if failed:
            logger.warning("record_api.partial_failure", table=table, op=op, failed=len(failed))
            messages = "; ".join(str(r.get("message") or "unknown error") for r in failed)
            raise BackendFailure(f"Failed to {op} {table} records: {messages}")
        return [r.get("data") or {} for r in results]

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        allow_404: bool = False,
    ) -> Dict[str, Any]:
        url = self.base_url + path
        last_error: Optional[str] = None
        for attempt in range(self.retries + 1):
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout,
                    headers=self.headers,
                    transport=self.transport,
                ) as client:
                    resp = await client.request(method, url, json=json)
            except httpx.TransportError as e:
                last_error = str(e) or e.__class__.__name__
                logger.warning("record_api.error", method=method, path=path, attempt=attempt + 1, error=last_error)
                continue
            if resp.status_code == 404 and allow_404:
                return {}
            if resp.status_code >= 400:
                logger.warning(
                    "record_api.failed",
                    method=method,
                    path=path,
                    status=resp.status_code,
                    body=resp.text[:500],
                )
                raise BackendFailure(f"Record API {method} {path} returned {resp.status_code}")
            try:
                body = resp.json() if resp.content else {}
            except ValueError:
                logger.warning("record_api.bad_body", method=method, path=path, body=resp.text[:500])
                raise BackendFailure(f"Record API {method} {path} returned a non-JSON body") from None
            if not isinstance(body, dict):
                raise BackendFailure(f"Record API {method} {path} returned an unexpected body")
            if body.get("success") is False:
                message = body.get("message") or "record API request failed"
                logger.warning("record_api.rejected", method=method, path=path, message=message)
                raise BackendFailure(message)
            return body
        raise BackendFailure(f"Record API unreachable: {last_error}")


class RemoteStore(EntityStore[RecordT]):
    """Entity store that talks to the record API through RecordApiClient."""

    def __init__(self, spec: EntitySpec, client: RecordApiClient) -> None:
        super().__init__(spec)
        self.client = client
        self.fmap = FIELD_MAPS[spec.entity]

    def _decode(self, row: Dict[str, Any]) -> RecordT:
        try:
            return self._to_record(decode_record(self.fmap, row))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning("record_api.bad_record", table=self.fmap.table, error=str(e)[:200])
            raise BackendFailure(f"Malformed {self.entity} record from record API") from e

    def _params(self) -> Dict[str, Any]:
        return {"fields": [{"field": {"Name": raw}} for raw in self.fmap.fields.values()]}

    async def get_all(self, tenant_id: Optional[int] = None) -> List[RecordT]:
        params = self._params()
        # Shared entities are fetched whole and scoped locally: the API has no OR filter.
        if tenant_id is not None and self.spec.tenant_scoped and not self.spec.shared_when_unscoped:
            params["where"] = [_where_equal(self.fmap.fields["tenant_id"], tenant_id)]
        rows = await self.client.fetch_records(self.fmap.table, params)
        records = [self._decode(row) for row in rows]
        return self._scope(records, tenant_id)

    async def get_by_id(self, id: int) -> RecordT:
        row = await self.client.get_record_by_id(self.fmap.table, id)
        if not row:
            raise NotFound(f"{self.entity.capitalize()} with ID {id} not found", extra={"id": id})
        return self._decode(row)

    async def create(self, data: Dict[str, Any]) -> RecordT:
        payload = encode_record(self.fmap, {k: v for k, v in data.items() if k != "id"})
        created = await self.client.create_records(self.fmap.table, [payload])
        if not created:
            raise BackendFailure(f"Failed to create {self.entity}: empty response")
        return self._decode(created[0])

    async def update(self, id: int, data: Dict[str, Any]) -> RecordT:
        payload = encode_record(self.fmap, {**data, "id": id})
        updated = await self.client.update_records(self.fmap.table, [payload])
        if not updated:
            raise BackendFailure(f"Failed to update {self.entity}: empty response")
        return self._decode(updated[0])

    async def delete(self, id: int) -> Dict[str, bool]:
        await self.client.delete_records(self.fmap.table, [int(id)])
        return {"success": True}
