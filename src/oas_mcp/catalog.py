"""Operation catalog derived from an OpenAPI description.

Catalog building and dispatch lookup share ``iter_operations`` and
``derive_identity`` so that the first operation listed under a name is always
the one invoked under that name, even when identities collide.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .models import OperationDescriptor, OperationMatch, ParameterLocation


METHODS = ("get", "put", "post", "delete", "patch")

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def iter_operations(
    spec: Dict[str, Any],
) -> Iterator[Tuple[str, str, Dict[str, Any], Dict[str, Any]]]:
    """Yield ``(path, method, path_item, operation)`` in catalog order."""
    paths = spec.get("paths") or {}
    for path, path_item in paths.items():
        if not path_item:
            continue
        for method in METHODS:
            operation = path_item.get(method)
            if not operation:
                continue
            yield path, method, path_item, operation


def derive_identity(path: str, method: str, operation: Dict[str, Any]) -> str:
    operation_id = operation.get("operationId")
    if operation_id:
        return operation_id

    parts = [_PLACEHOLDER.sub(r"\1", part) for part in path.split("/") if part]
    return method.lower() + "".join(part[:1].upper() + part[1:].lower() for part in parts)


def find_by_identity(spec: Dict[str, Any], identity: str) -> Optional[OperationMatch]:
    for path, method, path_item, operation in iter_operations(spec):
        if derive_identity(path, method, operation) == identity:
            return OperationMatch(
                path=path, method=method, path_item=path_item, operation=operation
            )
    return None


def build_catalog(spec: Dict[str, Any]) -> List[OperationDescriptor]:
    catalog: List[OperationDescriptor] = []
    for path, method, path_item, operation in iter_operations(spec):
        catalog.append(
            OperationDescriptor(
                identity=derive_identity(path, method, operation),
                summary=operation.get("description")
                or operation.get("summary")
                or f"{method.upper()} {path}",
                input_schema=build_input_schema(path_item, operation),
                path=path,
                method=method,
            )
        )
    return catalog


def build_input_schema(path_item: Dict[str, Any], operation: Dict[str, Any]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    required: List[str] = []

    # Operation-level parameters come last so they replace same-named shared ones.
    parameters = [*(path_item.get("parameters") or []), *(operation.get("parameters") or [])]
    for parameter in parameters:
        if not isinstance(parameter, dict) or "$ref" in parameter:
            continue
        name = parameter.get("name")
        if not name:
            continue

        properties[name] = _annotate(
            parameter.get("schema"),
            description=parameter.get("description"),
            example=parameter.get("example"),
        )
        location = ParameterLocation.parse(parameter.get("in"))
        if parameter.get("required") or location is ParameterLocation.PATH:
            _append_once(required, name)

    request_body = operation.get("requestBody") or {}
    body_schema = _json_body_schema(request_body)
    if body_schema:
        properties["body"] = _annotate(body_schema, description=request_body.get("description"))
        if request_body.get("required"):
            _append_once(required, "body")

    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _json_body_schema(request_body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if "$ref" in request_body:
        return None
    content = request_body.get("content") or {}
    json_body = content.get("application/json") or {}
    return json_body.get("schema")


def _annotate(schema: Any, **extra: Any) -> Dict[str, Any]:
    annotated = dict(schema) if isinstance(schema, dict) else {}
    for key, value in extra.items():
        if value is not None:
            annotated[key] = value
    return annotated


def _append_once(items: List[str], value: str) -> None:
    if value not in items:
        items.append(value)
