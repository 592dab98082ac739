"""Internal models for operations and dispatch results."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union


ArgumentValue = Union[str, int, float, bool, None, Dict[str, Any], List[Any]]


class ParameterLocation(str, Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"

    @classmethod
    def parse(cls, value: Any) -> Optional["ParameterLocation"]:
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


class ErrorKind(str, Enum):
    OPERATION_NOT_FOUND = "operation_not_found"
    UPSTREAM_CALL_FAILED = "upstream_call_failed"
    UNEXPECTED_FAILURE = "unexpected_failure"


@dataclass(frozen=True)
class OperationDescriptor:
    identity: str
    summary: str
    input_schema: Dict[str, Any]
    path: str
    method: str

    def to_listing(self) -> Dict[str, Any]:
        return {
            "name": self.identity,
            "description": self.summary,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class OperationMatch:
    path: str
    method: str
    path_item: Dict[str, Any]
    operation: Dict[str, Any]


@dataclass(frozen=True)
class CallSucceeded:
    payload: Any
    status_code: int

    @property
    def text(self) -> str:
        return json.dumps(self.payload, indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class CallFailed:
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None
    details: Any = None


DispatchResult = Union[CallSucceeded, CallFailed]
