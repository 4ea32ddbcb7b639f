"""
Pipeline - deployment template schema to Python types.

1. Fetcher: retrieve the root schema for an API version
2. Bundler: collect every referenced document into one addressable set
3. Namespacer: qualify each document's local definition references with its path
4. Extractor: one object definition record per definitions entry
5. Driver: filter records and issue construct requests to the type generator
6. Type generator: render the registered constructs as Python source
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .bundler import BundledDocumentSet, DocumentBundler
from .code_sink import CodeSink
from .config import ImporterConfig, OutputConfig, OutputMode
from .driver import ConstructRequest, TypeEmissionDriver
from .errors import ArmImportError, GenerationError, ResolutionError, RetrievalError
from .extractor import ObjectDefinitionRecord, find_api_object_definitions
from .fetcher import SchemaFetcher
from .importer import ArmTemplateImporter
from .namespacer import namespace_documents, namespace_refs
from .type_generator import TypeGenerator

__all__ = [
    "ArmTemplateImporter",
    "ImporterConfig",
    "OutputConfig",
    "OutputMode",
    "SchemaFetcher",
    "DocumentBundler",
    "BundledDocumentSet",
    "namespace_refs",
    "namespace_documents",
    "ObjectDefinitionRecord",
    "find_api_object_definitions",
    "ConstructRequest",
    "TypeEmissionDriver",
    "TypeGenerator",
    "CodeSink",
    "AtomicWriter",
    "ArmImportError",
    "RetrievalError",
    "ResolutionError",
    "GenerationError",
]
