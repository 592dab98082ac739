"""Dispatch engine turning operation calls into HTTP requests."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote

import httpx

from .catalog import find_by_identity
from .logging import redact_payload
from .models import (
    ArgumentValue,
    CallFailed,
    CallSucceeded,
    DispatchResult,
    ErrorKind,
    OperationMatch,
)

logger = logging.getLogger(__name__)

BODY_KEY = "body"


def stringify(value: ArgumentValue) -> str:
    """Render an argument for a path segment or query string.

    Booleans and ``None`` use their JSON spelling, integral floats drop the
    fraction and containers are rendered as compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class Dispatcher:
    def __init__(
        self,
        spec: Dict[str, Any],
        base_url: str,
        credential: str = "",
        api_version_header: str = "Nex-Api-Version",
        api_version: str = "v2",
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.spec = spec
        self.base_url = base_url
        self.credential = credential
        self.api_version_header = api_version_header
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def invoke(self, identity: str, arguments: Mapping[str, ArgumentValue]) -> DispatchResult:
        match = find_by_identity(self.spec, identity)
        if match is None:
            return CallFailed(ErrorKind.OPERATION_NOT_FOUND, f"Tool not found: {identity}")

        try:
            return await self._execute(match, arguments)
        except Exception as exc:
            logger.exception("Unexpected failure calling operation=%s", identity)
            return CallFailed(ErrorKind.UNEXPECTED_FAILURE, str(exc) or type(exc).__name__)

    async def _execute(
        self, match: OperationMatch, arguments: Mapping[str, ArgumentValue]
    ) -> DispatchResult:
        method = match.method.upper()
        url, used_keys = self._build_url(match.path, arguments)
        query = self._extract_query_params(arguments, used_keys)
        headers = self._build_headers()

        body_data: Optional[str] = None
        if BODY_KEY in arguments:
            headers["Content-Type"] = "application/json"
            body_data = json.dumps(arguments[BODY_KEY], separators=(",", ":"), ensure_ascii=False)

        logger.info(
            "Calling %s %s headers=%s arguments=%s",
            method,
            url,
            redact_payload(headers),
            redact_payload(dict(arguments)),
        )

        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self.transport, follow_redirects=True
        ) as client:
            response = await client.request(
                method,
                url,
                headers=headers,
                params=query,
                content=body_data,
            )

        if response.is_error:
            details = self._error_details(response)
            logger.error(
                "API call failed: %s %s -> %s %s",
                method,
                url,
                response.status_code,
                json.dumps(details, ensure_ascii=False),
            )
            return CallFailed(
                ErrorKind.UPSTREAM_CALL_FAILED,
                f"API call failed: {response.reason_phrase}",
                status_code=response.status_code,
                details=details,
            )

        payload = response.json() if response.content else {"status": "ok"}
        return CallSucceeded(payload=payload, status_code=response.status_code)

    def _build_url(
        self, path: str, arguments: Mapping[str, ArgumentValue]
    ) -> Tuple[str, set[str]]:
        url = self.base_url.rstrip("/") + path
        used_keys: set[str] = set()
        for key, value in arguments.items():
            token = f"{{{key}}}"
            if token in url:
                url = url.replace(token, quote(stringify(value), safe="/"))
                used_keys.add(key)
        return url, used_keys

    def _extract_query_params(
        self, arguments: Mapping[str, ArgumentValue], used_keys: set[str]
    ) -> List[Tuple[str, str]]:
        return [
            (key, stringify(value))
            for key, value in arguments.items()
            if key != BODY_KEY and key not in used_keys
        ]

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Authorization": self.credential,
            self.api_version_header: self.api_version,
        }

    def _error_details(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text
