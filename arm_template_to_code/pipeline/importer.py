"""
End-to-end import of deployment template schemas.

Fetch, bundle, dump, namespace, extract, emit: the steps run strictly in
sequence and the first failure aborts the whole run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .atomic_writer import AtomicWriter
from .bundler import BundledDocumentSet, DocumentBundler, dump
from .code_sink import CodeSink
from .config import ImporterConfig
from .driver import TypeEmissionDriver
from .fetcher import SchemaFetcher
from .type_generator import TypeGenerator

logger = logging.getLogger(__name__)


class ArmTemplateImporter:
    """Generates Python types for a deployment template schema version."""

    def __init__(self, config: ImporterConfig, fetcher: SchemaFetcher | None = None):
        """
        Initialize the importer.

        Args:
            config: Import configuration
            fetcher: Optional fetcher. Without one, each run opens its own
                fetcher using config.timeout and closes it when the run ends.
        """
        self.config = config
        self.fetcher = fetcher

    def bundle(self) -> BundledDocumentSet:
        """Fetch the root schema and bundle every document it references."""
        if self.fetcher is not None:
            return self._bundle(self.fetcher)
        with SchemaFetcher(timeout=self.config.timeout) as fetcher:
            return self._bundle(fetcher)

    def _bundle(self, fetcher: SchemaFetcher) -> BundledDocumentSet:
        url = self.config.resolve_schema_url()
        root = fetcher.fetch_json(url)
        bundle = DocumentBundler(fetcher).resolve(root, url)
        if self.config.resolved_dump_path:
            dump(bundle, self.config.resolved_dump_path)
        return bundle

    def generate(self) -> str:
        """
        Run the import and return the generated source code.

        Raises:
            RetrievalError: If the root schema cannot be fetched
            ResolutionError: If a referenced document or definition is missing
            GenerationError: If the type generator rejects a construct
        """
        bundle = self.bundle()
        type_generator = TypeGenerator(bundle, add_generation_comment=self.config.add_generation_comment)
        driver = TypeEmissionDriver(type_generator, include=self.config.include, exclude=self.config.exclude)
        sink = CodeSink()
        driver.run(bundle, sink)
        return sink.getvalue()

    def write(self, output: str | Path) -> None:
        """Run the import and write the generated code to a file."""
        code = self.generate()
        AtomicWriter(self.config.output).write(Path(output), code)
