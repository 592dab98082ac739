"""OpenAPI spec loader."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import yaml


logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "https://api.example.com"


class SpecLoadError(Exception):
    pass


class SpecLoader:
    def __init__(
        self,
        timeout_seconds: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def load(self, source: str) -> Dict[str, Any]:
        if source.startswith("http"):
            text = await self._fetch(source)
        else:
            text = self._read(source)

        spec = self._parse(text, source)
        logger.info("Loaded OpenAPI spec from %s (%s paths)", source, len(spec.get("paths") or {}))
        return spec

    async def _fetch(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            raise SpecLoadError(f"Failed to fetch spec: {exc}") from exc

        if not response.is_success:
            raise SpecLoadError(
                f"Failed to fetch spec: {response.reason_phrase} ({response.status_code})"
            )
        return response.text

    def _read(self, path: str) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise SpecLoadError(f"Failed to read spec: {exc}") from exc

    def _parse(self, text: str, source: str) -> Dict[str, Any]:
        try:
            spec = json.loads(text)
        except ValueError:
            try:
                spec = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise SpecLoadError(f"Failed to parse spec {source}: {exc}") from exc

        if not isinstance(spec, dict) or not ("openapi" in spec or "swagger" in spec):
            raise SpecLoadError(f"Not an OpenAPI document: {source}")
        if not isinstance(spec.get("paths") or {}, dict):
            raise SpecLoadError(f"OpenAPI paths must be a mapping: {source}")
        return spec


def server_url(spec: Dict[str, Any], default: str = DEFAULT_SERVER_URL) -> str:
    servers = spec.get("servers") or []
    if servers and isinstance(servers[0], dict) and servers[0].get("url"):
        return servers[0]["url"]
    return default
