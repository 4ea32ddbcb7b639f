"""
API object extraction.

Turns the definitions map of one (namespaced) document into object
definition records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_NAMESPACE = "undefined"


@dataclass(frozen=True)
class ObjectDefinitionRecord:
    """One named definition of a document."""

    namespace: str
    name: str
    schema: Any

    @property
    def fqn(self) -> str:
        return f"{self.namespace}.{self.name}"


def find_api_object_definitions(schema: dict[str, Any]) -> list[ObjectDefinitionRecord]:
    """
    Extract one record per entry of a document's definitions map.

    Records keep the definitions' iteration order. A document without a
    definitions mapping yields no records.

    Args:
        schema: Root of a namespaced document

    Returns:
        List of ObjectDefinitionRecord
    """
    if not isinstance(schema, dict):
        return []
    definitions = schema.get("definitions")
    if not isinstance(definitions, dict):
        return []
    namespace = schema.get("title") or DEFAULT_NAMESPACE
    return [
        ObjectDefinitionRecord(namespace=namespace, name=name, schema=definition)
        for name, definition in definitions.items()
    ]
