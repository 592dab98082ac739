from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest


@pytest.fixture
def pets_spec() -> Dict[str, Any]:
    return {
        "openapi": "3.0.0",
        "info": {"title": "Pets", "version": "1.0.0"},
        "servers": [{"url": "https://x.test"}],
        "paths": {
            "/pets": {
                "get": {
                    "summary": "List pets",
                    "parameters": [
                        {
                            "name": "limit",
                            "in": "query",
                            "schema": {"type": "integer"},
                            "description": "Page size",
                            "example": 10,
                        }
                    ],
                },
                "post": {
                    "summary": "Create a pet",
                    "requestBody": {
                        "required": True,
                        "description": "Pet to create",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "object",
                                    "properties": {"name": {"type": "string"}},
                                }
                            }
                        },
                    },
                },
            },
            "/pets/{id}": {
                "get": {
                    "description": "Fetch one pet",
                    "parameters": [
                        {
                            "name": "id",
                            "in": "path",
                            "required": True,
                            "schema": {"type": "string"},
                        }
                    ],
                },
            },
        },
    }


class RecordingTransport:
    """Builds an ``httpx.MockTransport`` that records every request."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []
        self._responder = responder

    def __call__(self) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self._responder(request)

        return httpx.MockTransport(handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def json_upstream() -> RecordingTransport:
    return RecordingTransport(lambda request: httpx.Response(200, json={"ok": True}))


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content)
