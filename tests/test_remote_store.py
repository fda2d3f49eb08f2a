"""Record API backend: field normalization and HTTP behaviour via httpx.MockTransport."""
import json

import httpx
import pytest

from contentcraft.config import Settings
from contentcraft.controller import SelectionController, Status
from contentcraft.errors import BackendFailure, NotFound
from contentcraft.stores import Stores, build_stores, remote_stores
from contentcraft.stores.entities import BRAND, CONTENT, PRESET, TENANT
from contentcraft.stores.remote import FIELD_MAPS, RecordApiClient, RemoteStore, decode_record, encode_record

BASE_URL = "http://records.test/api"

BRAND_ROWS = [
    {"Id": 4, "Name": "Acme Main", "color_c": "#F59E0B", "emoji_c": "💼", "is_default_c": True,
     "tenant_id_c": {"Id": 2, "Name": "Acme Media"}},
    {"Id": 5, "Name": "Acme Kids", "color_c": "#EC4899", "emoji_c": "🎪", "is_default_c": False,
     "tenant_id_c": "2"},
]

PRESET_ROWS = [
    {"Id": 1, "Name": "YouTube Video Package", "category_c": "video", "is_custom_c": False, "tenant_id_c": None},
    {"Id": 9, "Name": "Studio Launch Teaser", "category_c": "custom", "is_custom_c": True, "tenant_id_c": {"Id": 1}},
    {"Id": 10, "Name": "Acme Jingle", "category_c": "custom", "is_custom_c": True, "tenant_id_c": 2},
]


def _client(handler, retries: int = 1) -> RecordApiClient:
    return RecordApiClient(
        BASE_URL,
        project_id="proj-1",
        public_key="pk-1",
        retries=retries,
        transport=httpx.MockTransport(handler),
    )


def test_decode_lookup_and_json_fields() -> None:
    tenant = decode_record(
        FIELD_MAPS["tenant"],
        {
            "Id": 2,
            "Name": "Acme Media",
            "settings_c": json.dumps({"allowBrandCreation": False, "maxBrands": 3}),
            "logo_c": None,
            "Unmapped": "ignored",
        },
    )
    assert tenant == {"id": 2, "name": "Acme Media", "settings": {"allow_brand_creation": False, "max_brands": 3}}

    brand = decode_record(FIELD_MAPS["brand"], BRAND_ROWS[0])
    assert brand["tenant_id"] == 2
    assert brand["is_default"] is True


def test_encode_camelcases_json_and_keeps_output_tags() -> None:
    raw = encode_record(
        FIELD_MAPS["content"],
        {"id": 3, "name": "Run", "outputs": {"blog_post": "text"}, "brand_id": 4, "extra": "dropped"},
    )
    assert raw == {"Id": 3, "Name": "Run", "outputs_c": json.dumps({"blog_post": "text"}), "brand_id_c": 4}
    tenant = encode_record(FIELD_MAPS["tenant"], {"settings": {"max_brands": 3}})
    assert json.loads(tenant["settings_c"]) == {"maxBrands": 3}


@pytest.mark.asyncio
async def test_get_all_filters_by_tenant_and_sends_auth_headers() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": BRAND_ROWS})

    store = RemoteStore(BRAND, _client(handler))
    brands = await store.get_all(2)
    assert [b.id for b in brands] == [4, 5]
    assert all(b.tenant_id == 2 for b in brands)
    assert seen["path"] == "/api/tables/brand_c/records/query"
    assert seen["headers"]["X-Project-Id"] == "proj-1"
    assert seen["headers"]["X-Public-Key"] == "pk-1"
    assert seen["body"]["where"] == [{"FieldName": "tenant_id_c", "Operator": "EqualTo", "Values": [2]}]
    assert (await store.get_default(2)).id == 4


@pytest.mark.asyncio
async def test_presets_include_system_rows_for_tenant() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert "where" not in json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": PRESET_ROWS})

    stores = remote_stores(Settings(RECORD_API_URL=BASE_URL), transport=httpx.MockTransport(handler))
    presets = await stores.presets.get_all(2)
    assert [p.id for p in presets] == [1, 10]


@pytest.mark.asyncio
async def test_get_by_id_missing_is_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"success": False, "message": "not found"})

    store = RemoteStore(TENANT, _client(handler))
    with pytest.raises(NotFound):
        await store.get_by_id(77)


@pytest.mark.asyncio
async def test_server_error_is_backend_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    store = RemoteStore(BRAND, _client(handler))
    with pytest.raises(BackendFailure):
        await store.get_all()


@pytest.mark.asyncio
async def test_rejected_envelope_is_backend_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "message": "invalid project"})

    store = RemoteStore(BRAND, _client(handler))
    with pytest.raises(BackendFailure) as exc_info:
        await store.get_all()
    assert exc_info.value.message == "invalid project"
    assert exc_info.value.retryable


@pytest.mark.asyncio
async def test_transport_error_is_retried() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"success": True, "data": BRAND_ROWS})

    store = RemoteStore(BRAND, _client(handler, retries=1))
    assert len(await store.get_all(2)) == 2
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_transport_error_after_retries_is_backend_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = RemoteStore(BRAND, _client(handler, retries=1))
    with pytest.raises(BackendFailure):
        await store.get_all()


@pytest.mark.asyncio
async def test_create_update_delete_round_trip_through_envelopes() -> None:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        requests.append((request.method, request.url.path, body))
        if request.method in ("POST", "PUT"):
            record = dict(body["records"][0])
            record.setdefault("Id", 6)
            return httpx.Response(200, json={"success": True, "results": [{"success": True, "data": record}]})
        return httpx.Response(200, json={"success": True})

    store = RemoteStore(BRAND, _client(handler))
    created = await store.create({"name": "Acme Pro", "tenant_id": 2, "is_default": False})
    assert created.id == 6
    assert created.tenant_id == 2
    updated = await store.update(6, {"name": "Acme Plus"})
    assert updated.name == "Acme Plus"
    assert await store.delete(6) == {"success": True}

    assert requests[0][0:2] == ("POST", "/api/tables/brand_c/records")
    assert requests[0][2]["records"][0] == {"Name": "Acme Pro", "tenant_id_c": 2, "is_default_c": False}
    assert requests[1][2]["records"][0] == {"Name": "Acme Plus", "Id": 6}
    assert requests[2] == ("DELETE", "/api/tables/brand_c/records", {"RecordIds": [6]})


@pytest.mark.asyncio
async def test_partial_failure_in_results_is_backend_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"success": True, "results": [{"success": False, "message": "Name is required"}]},
        )

    store = RemoteStore(BRAND, _client(handler))
    with pytest.raises(BackendFailure) as exc_info:
        await store.create({"tenant_id": 2})
    assert "Name is required" in exc_info.value.message


def test_build_stores_remote_requires_url() -> None:
    with pytest.raises(ValueError):
        build_stores(Settings(STORE_BACKEND="remote"))
    stores = build_stores(Settings(STORE_BACKEND="remote", RECORD_API_URL=BASE_URL))
    assert isinstance(stores.brands, RemoteStore)


@pytest.mark.asyncio
async def test_non_json_body_is_backend_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    store = RemoteStore(BRAND, _client(handler))
    with pytest.raises(BackendFailure) as exc_info:
        await store.get_all()
    assert exc_info.value.retryable


@pytest.mark.asyncio
async def test_malformed_rows_are_backend_failure() -> None:
    rows = {
        "missing id": {"Name": "Acme Main", "tenant_id_c": 2},
        "bad lookup": {"Id": 4, "Name": "Acme Main", "tenant_id_c": "acme"},
        "bad field type": {"Id": 4, "Name": {"first": "Acme"}, "tenant_id_c": 2},
    }
    for row in rows.values():
        def handler(request: httpx.Request, row=row) -> httpx.Response:
            return httpx.Response(200, json={"success": True, "data": [row]})

        store = RemoteStore(BRAND, _client(handler))
        with pytest.raises(BackendFailure):
            await store.get_all(2)


@pytest.mark.asyncio
async def test_controller_recovers_after_non_json_record_api_body() -> None:
    tenant_rows = [{"Id": 2, "Name": "Acme Media", "is_default_c": True}]
    healthy = {"on": False}

    def handler(request: httpx.Request) -> httpx.Response:
        if not healthy["on"]:
            return httpx.Response(200, text="<html>gateway</html>")
        rows = tenant_rows if "/tenant_c/" in request.url.path else BRAND_ROWS
        return httpx.Response(200, json={"success": True, "data": rows})

    client = _client(handler)
    stores = Stores(
        tenants=RemoteStore(TENANT, client),
        brands=RemoteStore(BRAND, client),
        presets=RemoteStore(PRESET, client),
        contents=RemoteStore(CONTENT, client),
    )
    controller = SelectionController(stores)
    state = await controller.start()
    assert state.status is Status.ERROR
    assert state.error.retryable

    healthy["on"] = True
    state = await controller.retry()
    assert state.status is Status.READY
    assert controller.current_tenant.id == 2
    assert controller.current_brand.id == 4
