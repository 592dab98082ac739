import httpx
import pytest

from conftest import RecordingTransport
from oas_mcp.dispatch import Dispatcher
from oas_mcp.service import OperationService


def _service(spec, upstream):
    dispatcher = Dispatcher(spec, "https://x.test", credential="k", transport=upstream())
    return OperationService(spec, dispatcher)


def test_list_operations_in_catalog_order(pets_spec, json_upstream):
    operations = _service(pets_spec, json_upstream).list_operations()

    assert [op["name"] for op in operations] == ["getPets", "postPets", "getPetsId"]
    assert operations[2] == {
        "name": "getPetsId",
        "description": "Fetch one pet",
        "inputSchema": {
            "type": "object",
            "properties": {"id": {"type": "string"}},
            "required": ["id"],
        },
    }


def test_catalog_is_built_once(pets_spec, json_upstream):
    service = _service(pets_spec, json_upstream)

    assert service.descriptors is service.descriptors


@pytest.mark.asyncio
async def test_call_operation_success(pets_spec):
    upstream = RecordingTransport(lambda request: httpx.Response(200, json=[{"id": 1}]))

    result = await _service(pets_spec, upstream).call_operation("getPets", {"limit": 1})

    assert result == {"content": [{"type": "text", "text": '[\n  {\n    "id": 1\n  }\n]'}]}


@pytest.mark.asyncio
async def test_call_operation_without_arguments(pets_spec, json_upstream):
    result = await _service(pets_spec, json_upstream).call_operation("getPets")

    assert "content" in result
    assert json_upstream.last.url.query == b""


@pytest.mark.asyncio
async def test_unknown_tool(pets_spec, json_upstream):
    result = await _service(pets_spec, json_upstream).call_operation("nope", {})

    assert result == {"error": {"message": "Tool not found: nope"}}


@pytest.mark.asyncio
async def test_upstream_failure_message(pets_spec):
    upstream = RecordingTransport(
        lambda request: httpx.Response(404, json={"message": "no such pet"})
    )

    result = await _service(pets_spec, upstream).call_operation("getPetsId", {"id": "1"})

    assert result == {"error": {"message": "API call failed: Not Found"}}


@pytest.mark.asyncio
async def test_dispatcher_exception_becomes_error(pets_spec, json_upstream):
    class ExplodingDispatcher(Dispatcher):
        async def invoke(self, identity, arguments):
            raise RuntimeError("kaboom")

    service = OperationService(pets_spec, ExplodingDispatcher(pets_spec, "https://x.test"))

    result = await service.call_operation("getPets", {})

    assert result == {"error": {"message": "kaboom"}}
