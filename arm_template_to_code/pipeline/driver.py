"""
Type emission driver.

Namespaces every bundled document, extracts its object definitions and
requests one construct per definition from the type generator, then
triggers the final code generation exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, Protocol

from .bundler import BundledDocumentSet
from .code_sink import CodeSink
from .extractor import ObjectDefinitionRecord, find_api_object_definitions
from .namespacer import namespace_documents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConstructRequest:
    """A request to register one generated construct."""

    fqn: str
    kind: str
    schema: Any


class ConstructEmitter(Protocol):
    """Operations the driver needs from a type generator."""

    def emit_construct(self, request: ConstructRequest) -> None: ...

    def generate(self, sink: CodeSink) -> None: ...


def matches_any(fqn: str, patterns: list[str]) -> bool:
    return any(fnmatchcase(fqn, pattern) for pattern in patterns)


class TypeEmissionDriver:
    """Orchestrates namespacing, extraction and emission over a bundle."""

    def __init__(
        self,
        type_generator: ConstructEmitter,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
    ):
        """
        Initialize the driver.

        Args:
            type_generator: Collaborator receiving construct requests
            include: fqn patterns to keep (empty = keep everything)
            exclude: fqn patterns to drop
        """
        self.type_generator = type_generator
        self.include = include or []
        self.exclude = exclude or []

    def is_selected(self, record: ObjectDefinitionRecord) -> bool:
        """Check if a record passes the include/exclude filters."""
        if self.include and not matches_any(record.fqn, self.include):
            return False
        return not matches_any(record.fqn, self.exclude)

    def run(self, bundle: BundledDocumentSet, sink: CodeSink) -> int:
        """
        Emit constructs for every definition of the bundle and generate code.

        Any error raised by the type generator propagates and stops the run.

        Args:
            bundle: Bundled documents; entries are replaced by their namespaced trees
            sink: Output sink for the generated code

        Returns:
            Number of construct requests issued
        """
        namespace_documents(bundle)

        emitted = 0
        for path in bundle.paths():
            records = find_api_object_definitions(bundle.get(path))
            logger.debug("Found %d definitions in %s", len(records), path)
            for record in records:
                if not self.is_selected(record):
                    logger.debug("Skipping filtered definition %s", record.fqn)
                    continue
                self.type_generator.emit_construct(ConstructRequest(fqn=record.fqn, kind=record.name, schema=record.schema))
                emitted += 1

        self.type_generator.generate(sink)
        logger.info("Emitted %d constructs", emitted)
        return emitted
