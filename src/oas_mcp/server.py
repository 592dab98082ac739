"""MCP server setup for the OpenAPI operation catalog."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent

from .config import Settings
from .dispatch import Dispatcher
from .models import OperationDescriptor
from .openapi import SpecLoader, server_url
from .service import OperationService

logger = logging.getLogger(__name__)


class OperationTool(Tool):
    """MCP tool whose input schema is an operation's derived schema."""

    _service: OperationService

    @classmethod
    def from_descriptor(
        cls, descriptor: OperationDescriptor, service: OperationService
    ) -> "OperationTool":
        tool = cls(
            name=descriptor.identity,
            description=descriptor.summary,
            parameters=descriptor.input_schema,
        )
        tool._service = service
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        result = await self._service.call_operation(self.name, arguments)
        if "error" in result:
            raise ToolError(result["error"]["message"])
        return ToolResult(
            content=[TextContent(type="text", text=block["text"]) for block in result["content"]]
        )


async def build_server(settings: Settings) -> tuple[FastMCP, object | None]:
    loader = SpecLoader(timeout_seconds=settings.spec_fetch_timeout_seconds)
    if not settings.spec_source:
        raise ValueError("No OpenAPI spec source configured")
    spec = await loader.load(settings.spec_source)

    base_url = settings.base_url or server_url(spec, settings.default_base_url)
    dispatcher = Dispatcher(
        spec,
        base_url,
        credential=settings.api_key,
        api_version_header=settings.api_version_header,
        api_version=settings.api_version,
        timeout_seconds=settings.request_timeout_seconds,
    )
    service = OperationService(spec, dispatcher)
    logger.info("Dispatching operations to %s", base_url)

    mcp = create_mcp(settings, service)
    app = _get_http_app(mcp, settings)
    _attach_healthcheck(app)
    return mcp, app


def create_mcp(settings: Settings, service: OperationService) -> FastMCP:
    mcp = FastMCP(settings.service_name, version=settings.service_version)

    registered: set[str] = set()
    for descriptor in service.descriptors:
        if descriptor.identity in registered:
            logger.warning(
                "Skipping duplicate tool name %s (%s %s)",
                descriptor.identity,
                descriptor.method.upper(),
                descriptor.path,
            )
            continue
        mcp.add_tool(OperationTool.from_descriptor(descriptor, service))
        registered.add(descriptor.identity)
        logger.info("Registered tool: %s", descriptor.identity)

    return mcp


def _attach_healthcheck(app) -> None:  # type: ignore[no-untyped-def]
    if not app:
        return

    async def healthcheck(_request):  # type: ignore[no-untyped-def]
        from starlette.responses import JSONResponse

        return JSONResponse({"status": "ok"})

    app.add_route("/health", healthcheck, methods=["GET"])


def _get_http_app(mcp: FastMCP, settings: Settings):  # type: ignore[no-untyped-def]
    transport = settings.transport.lower()
    if transport in {"http"}:
        return mcp.http_app(transport="http", stateless_http=True, json_response=True)
    if transport in {"streamable-http", "streamablehttp"}:
        return mcp.http_app(
            transport="streamable-http", stateless_http=True, json_response=True
        )
    if transport in {"sse"}:
        return mcp.http_app(transport="sse")
    return None
