"""Listing and invocation boundary for catalog operations."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .catalog import build_catalog
from .dispatch import Dispatcher
from .logging import redact_payload
from .models import ArgumentValue, CallFailed, OperationDescriptor

logger = logging.getLogger(__name__)


class OperationService:
    """
    Exposes the operation catalog and forwards calls to the dispatcher.

    The catalog is built once from the description. Calls never raise: every
    failure comes back as an ``{"error": {"message": ...}}`` payload.
    """

    def __init__(self, spec: Dict[str, Any], dispatcher: Dispatcher) -> None:
        self.spec = spec
        self.dispatcher = dispatcher
        self._catalog: Optional[List[OperationDescriptor]] = None

    @property
    def descriptors(self) -> List[OperationDescriptor]:
        if self._catalog is None:
            self._catalog = build_catalog(self.spec)
        return self._catalog

    def list_operations(self) -> List[Dict[str, Any]]:
        return [descriptor.to_listing() for descriptor in self.descriptors]

    async def call_operation(
        self, name: str, arguments: Optional[Mapping[str, ArgumentValue]] = None
    ) -> Dict[str, Any]:
        arguments = arguments or {}
        logger.info("Executing operation=%s arguments=%s", name, redact_payload(dict(arguments)))

        try:
            result = await self.dispatcher.invoke(name, arguments)
        except Exception as exc:
            logger.exception("Operation dispatch raised: %s", name)
            return self._format_error(str(exc) or type(exc).__name__)

        if isinstance(result, CallFailed):
            logger.warning("Operation failed: %s (%s) %s", name, result.kind.value, result.message)
            return self._format_error(result.message)
        return self._format_result(result.text)

    def _format_result(self, text: str) -> Dict[str, Any]:
        return {"content": [{"type": "text", "text": text}]}

    def _format_error(self, message: str) -> Dict[str, Any]:
        return {"error": {"message": message}}
