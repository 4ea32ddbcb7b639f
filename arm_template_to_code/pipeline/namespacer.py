"""
Reference namespacing.

Rewrites the document-local references of each bundled document so they
carry the document's own path, making them unique once definitions from
many documents are merged into one type graph.

Only references starting with "#/definitions/" are rewritten. Local
references into other parts of a document are left as they are.
"""

from __future__ import annotations

from typing import Any

from .bundler import BundledDocumentSet

LOCAL_DEFINITION_PREFIX = "#/definitions/"


def namespace_refs(path: str, node: Any) -> Any:
    """
    Qualify every local definition reference in a schema tree with a document path.

    The input tree is never mutated; a new tree with the same shape is returned.

    Args:
        path: Path of the document owning the tree
        node: Schema tree (mapping, sequence or scalar)

    Returns:
        The rewritten tree
    """
    match node:
        case dict():
            result = {}
            for key, value in node.items():
                if key == "$ref" and isinstance(value, str) and value.startswith(LOCAL_DEFINITION_PREFIX):
                    result[key] = f"{path}{value}"
                else:
                    result[key] = namespace_refs(path, value)
            return result
        case list():
            return [namespace_refs(path, item) for item in node]
        case _:
            return node


def namespace_documents(bundle: BundledDocumentSet) -> BundledDocumentSet:
    """Namespace every document of a bundle in place of its original tree."""
    for path in bundle.paths():
        bundle.set(path, namespace_refs(path, bundle.get(path)))
    return bundle
