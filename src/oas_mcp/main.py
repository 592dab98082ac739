"""CLI entry point for the OpenAPI MCP server."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn

from .config import Settings, get_settings
from .logging import configure_logging
from .openapi import SpecLoadError
from .server import build_server

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="oas-mcp",
        description="Expose the operations of an OpenAPI document as MCP tools.",
    )
    parser.add_argument("spec_source", nargs="?", help="OpenAPI document URL or file path")
    parser.add_argument("--transport", help="stdio, http, streamable-http or sse")
    parser.add_argument("--base-url", help="Override the document's first server URL")
    parser.add_argument("--log-level", help="Logging level")
    return parser.parse_args(argv)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        "spec_source": args.spec_source,
        "transport": args.transport,
        "base_url": args.base_url,
        "log_level": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


async def _run(settings: Settings) -> None:
    mcp, app = await build_server(settings)
    transport = settings.transport.lower()

    if transport in {"http", "streamable-http", "streamablehttp", "sse"}:
        if not app:
            raise RuntimeError(f"HTTP app unavailable for transport={transport}")
        config = uvicorn.Config(app, host=settings.host, port=settings.port)
        server = uvicorn.Server(config)
        await server.serve()
        return
    await mcp.run_stdio_async()


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    settings = _apply_overrides(get_settings(), args)
    configure_logging(settings.log_level)

    if not settings.spec_source:
        print("Usage: oas-mcp <spec-url-or-path>", file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(_run(settings))
    except SpecLoadError as exc:
        logger.error("Failed to load OpenAPI spec: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
