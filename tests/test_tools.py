import inspect
import json
from types import ModuleType

import pytest
import respx
from confluence_mcp.core.registry import (
    discover_tool_modules,
    register_discovered_tools,
)
from confluence_mcp.core.tools.pages import update_page
from confluence_mcp.core.tools.search import search_pages
from httpx import Response
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

SERVER_API = "https://wiki.example.com/rest/api"

EXPECTED_TOOLS = {
    "get_current_user",
    "search_pages",
    "execute_raw_search",
    "get_page",
    "create_page",
    "update_page",
}


def _make_module(name: str, code: str) -> ModuleType:
    module = ModuleType(name)
    exec(code, module.__dict__)
    return module


class _RecordingApp:
    def __init__(self):
        self.registered = {}

    def tool(self, name=None, description=None, structured_output=None):
        def decorator(fn):
            self.registered[name] = fn
            return fn

        return decorator


@pytest.fixture
def tools(client):
    app = _RecordingApp()
    register_discovered_tools(app, client)
    return app.registered


def test_discovers_all_tool_modules():
    names = {m.__name__.rsplit(".", 1)[-1] for m in discover_tool_modules()}
    assert names == {"pages", "search", "users"}


def test_registers_exactly_the_public_tools(tools):
    assert set(tools) == EXPECTED_TOOLS


def test_wrapper_hides_client_and_keeps_wire_names(tools):
    sig = inspect.signature(tools["update_page"])
    assert "client" not in sig.parameters
    assert list(sig.parameters) == [
        "pageId",
        "bodyStorageValue",
        "title",
        "minorEdit",
        "message",
    ]
    assert sig.return_annotation is CallToolResult


def test_duplicate_tool_names_raise(client):
    mod1 = _make_module("mod1", "async def tool_fn(client): return None")
    mod2 = _make_module("mod2", "async def tool_fn(client): return None")

    with pytest.raises(ValueError):
        register_discovered_tools(_RecordingApp(), client, modules=[mod1, mod2])


def test_non_tool_functions_are_skipped(client):
    code = """
async def tool_fn(client, *, foo: int = 1):
    return {"foo": foo}

async def _private(client):
    return None

async def wrong_first(arg1, client):
    return None

def sync_func(client):
    return None
"""
    app = _RecordingApp()
    names = register_discovered_tools(
        app, client, modules=[_make_module("fake_mod", code)]
    )
    assert names == ["tool_fn"]


@pytest.mark.asyncio
@respx.mock
async def test_success_envelope_is_json(tools, client):
    respx.get(f"{SERVER_API}/content/123").mock(
        return_value=Response(
            200,
            json={
                "id": "123",
                "type": "page",
                "title": "Runbook",
                "space": {"key": "DOC"},
                "version": {"number": 2},
                "body": {"storage": {"value": "<p>x</p>"}},
            },
        )
    )

    async with client:
        result = await tools["get_page"](pageId="123")

    assert isinstance(result, CallToolResult)
    assert result.isError is False
    payload = json.loads(result.content[0].text)
    assert payload == {
        "id": "123",
        "type": "page",
        "title": "Runbook",
        "spaceKey": "DOC",
        "url": "https://wiki.example.com/pages/viewpage.action?pageId=123",
        "version": 2,
        "bodyStorageValue": "<p>x</p>",
    }


@pytest.mark.asyncio
@respx.mock
async def test_upstream_error_becomes_error_envelope(tools, client):
    respx.get(f"{SERVER_API}/content/404").mock(
        return_value=Response(404, text="Authorization: Bearer leaked-token")
    )

    async with client:
        result = await tools["get_page"](pageId="404")

    assert result.isError is True
    text = result.content[0].text
    assert text.startswith("Resource not found")
    assert "leaked-token" not in text


@pytest.mark.asyncio
async def test_validation_error_becomes_error_envelope(cloud_client, caplog):
    app = _RecordingApp()
    register_discovered_tools(app, cloud_client)

    result = await app.registered["create_page"](
        title="T", bodyStorageValue="<p/>"
    )

    assert result.isError is True
    assert "CONF_DEFAULT_SPACE" in result.content[0].text
    assert any(r.getMessage() == "tool_failed" for r in caplog.records)


@pytest.mark.asyncio
async def test_unexpected_exception_never_escapes(client):
    code = """
async def explode(client):
    raise RuntimeError("kaboom")
"""
    app = _RecordingApp()
    register_discovered_tools(app, client, modules=[_make_module("boom_mod", code)])

    result = await app.registered["explode"]()

    assert result.isError is True
    assert result.content[0].text == "kaboom"


@pytest.mark.asyncio
@respx.mock
async def test_search_tool_returns_page_list(client):
    respx.get(f"{SERVER_API}/content/search").mock(
        return_value=Response(
            200,
            json={"results": [{"id": "1", "title": "A", "type": "page"}]},
        )
    )

    async with client:
        pages = await search_pages(client, "A")

    assert [p.title for p in pages] == ["A"]


@pytest.mark.asyncio
@respx.mock
async def test_update_tool_passes_through_options(client):
    respx.get(f"{SERVER_API}/content/9").mock(
        return_value=Response(200, json={"id": "9", "title": "Old", "version": {"number": 1}})
    )
    put = respx.put(f"{SERVER_API}/content/9").mock(
        return_value=Response(200, json={"id": "9", "title": "Old", "version": {"number": 2}})
    )

    async with client:
        page = await update_page(client, "9", "<p/>", minorEdit=False, message="m")

    sent = json.loads(put.calls.last.request.content)
    assert sent["version"] == {"number": 2, "minorEdit": False, "message": "m"}
    assert page.version == 2


@pytest.mark.asyncio
async def test_fastmcp_schema_exposes_bounds(client):
    app = FastMCP("test")
    register_discovered_tools(app, client)

    listed = {t.name: t for t in await app.list_tools()}

    assert set(listed) == EXPECTED_TOOLS
    search_schema = listed["search_pages"].inputSchema
    assert "client" not in search_schema["properties"]
    assert search_schema["properties"]["limit"]["maximum"] == 25
    raw_schema = listed["execute_raw_search"].inputSchema
    assert raw_schema["properties"]["limit"]["maximum"] == 50
    assert raw_schema["required"] == ["query"]
    update_schema = listed["update_page"].inputSchema
    assert set(update_schema["required"]) == {"pageId", "bodyStorageValue"}
    assert listed["get_page"].description.startswith("Get a Confluence page by ID.")
