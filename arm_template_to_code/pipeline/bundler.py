"""
Document bundler.

Crawls every external $ref reachable from a root schema, fetches each
referenced document once, and collects them into a BundledDocumentSet
addressed by absolute document path.
"""

from __future__ import annotations

import json
import logging
import os
from collections import deque
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urldefrag, urljoin

from .errors import ResolutionError, RetrievalError
from .fetcher import SchemaFetcher, is_url

logger = logging.getLogger(__name__)


class BundledDocumentSet:
    """Ordered mapping from document path to document root.

    The root document is always the first path.
    """

    def __init__(self):
        self._documents: dict[str, Any] = {}

    def add(self, path: str, node: Any) -> None:
        """Add a new document to the set."""
        if path in self._documents:
            raise ValueError(f"Document {path} is already bundled")
        self._documents[path] = node

    def paths(self) -> list[str]:
        return list(self._documents)

    def get(self, path: str) -> Any:
        return self._documents[path]

    def set(self, path: str, node: Any) -> None:
        """Replace the tree of an already bundled document."""
        if path not in self._documents:
            raise KeyError(path)
        self._documents[path] = node

    def values(self) -> list[Any]:
        return list(self._documents.values())

    @property
    def root_path(self) -> str | None:
        return next(iter(self._documents), None)

    def __contains__(self, path: object) -> bool:
        return path in self._documents

    def __len__(self) -> int:
        return len(self._documents)


def normalize_location(location: str) -> str:
    """Normalize a document location (strip URL fragments, absolutize file paths)."""
    if is_url(location):
        return urldefrag(location)[0]
    return os.path.normpath(os.path.abspath(location))


def join_location(base: str, location: str) -> str:
    """
    Resolve a $ref document location against the document containing it.

    Args:
        base: Absolute path of the containing document
        location: Document part of the $ref (before '#')

    Returns:
        Absolute document path
    """
    if is_url(location):
        return normalize_location(location)
    if is_url(base):
        return normalize_location(urljoin(base, location))
    if os.path.isabs(location):
        return os.path.normpath(location)
    return os.path.normpath(os.path.join(os.path.dirname(base), location))


def split_ref(ref: str) -> tuple[str, str | None]:
    """
    Split a $ref into (document part, fragment without '#').

    Examples:
        "foo.json#/a/b" -> ("foo.json", "/a/b")
        "foo.json"      -> ("foo.json", None)
        "#/a/b"         -> ("", "/a/b")
    """
    if "#" not in ref:
        return ref, None
    location, fragment = ref.split("#", 1)
    return location, fragment


def decode_pointer_token(token: str) -> str:
    """Decode one JSON pointer token taken from a URI fragment."""
    return unquote(token).replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str | None, context: str) -> Any:
    """
    Resolve a JSON pointer fragment against a document.

    Raises:
        ResolutionError: If the pointer does not lead to a value
    """
    if not pointer:
        return document
    if not pointer.startswith("/"):
        raise ResolutionError(f"Unsupported JSON pointer '#{pointer}' in {context}")

    current = document
    for raw_token in pointer[1:].split("/"):
        token = decode_pointer_token(raw_token)
        match current:
            case dict() if token in current:
                current = current[token]
            case list() if token.isdigit() and int(token) < len(current):
                current = current[int(token)]
            case _:
                raise ResolutionError(f"Cannot resolve '#{pointer}' in {context}: '{token}' not found")
    return current


class DocumentBundler:
    """Discovers and bundles all documents referenced from a root schema."""

    def __init__(self, fetcher: SchemaFetcher):
        self.fetcher = fetcher

    def resolve(self, root: Any, root_path: str) -> BundledDocumentSet:
        """
        Bundle the root schema and every document it transitively references.

        External $ref values are rewritten to their absolute form; local
        references are kept as they are.

        Args:
            root: The parsed root schema
            root_path: Location the root schema was loaded from

        Returns:
            The bundled document set, root first

        Raises:
            ResolutionError: If a referenced document or pointer cannot be located
        """
        root_path = normalize_location(root_path)
        bundle = BundledDocumentSet()
        raw_documents: dict[str, Any] = {root_path: root}
        pending = deque([root_path])
        references: list[tuple[str, str | None, str]] = []

        while pending:
            path = pending.popleft()
            document, found = self._absolutize(path, raw_documents[path])
            bundle.add(path, document)
            for target, fragment in found:
                if target not in raw_documents:
                    raw_documents[target] = self._load(target, path)
                    pending.append(target)
                references.append((target, fragment, path))

        for target, fragment, source in references:
            resolve_pointer(bundle.get(target), fragment, f"{target} (referenced from {source})")

        logger.info("Bundled %d documents from %s", len(bundle), root_path)
        return bundle

    def _load(self, target: str, referrer: str) -> Any:
        try:
            return self.fetcher.fetch_json(target)
        except RetrievalError as e:
            raise ResolutionError(f"Cannot load {target} referenced from {referrer}") from e

    @staticmethod
    def _absolutize(path: str, node: Any) -> tuple[Any, list[tuple[str, str | None]]]:
        """Rewrite external $ref values of one document to absolute form and collect all refs."""
        found: list[tuple[str, str | None]] = []

        def walk(value: Any) -> Any:
            match value:
                case dict():
                    result = {}
                    for key, item in value.items():
                        if key == "$ref" and isinstance(item, str):
                            result[key] = rewrite(item)
                        else:
                            result[key] = walk(item)
                    return result
                case list():
                    return [walk(item) for item in value]
                case _:
                    return value

        def rewrite(ref: str) -> str:
            location, fragment = split_ref(ref)
            if not location:
                found.append((path, fragment))
                return ref
            target = join_location(path, location)
            found.append((target, fragment))
            return target if fragment is None else f"{target}#{fragment}"

        return walk(node), found


def dump(bundle: BundledDocumentSet, path: str | Path) -> None:
    """Write the bundled documents to a JSON file for inspection."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(bundle.values(), f, indent=2)
    logger.debug("Wrote bundled schema to %s", path)
