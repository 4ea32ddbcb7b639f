"""
Atomic file writer for generated code.

Ensures an interrupted or rejected write never leaves the target file in
an incomplete state.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from .config import OutputConfig, OutputMode
from .errors import GenerationError

logger = logging.getLogger(__name__)


def validate_python(content: str) -> None:
    """
    Check that generated Python code parses.

    Raises:
        GenerationError: If the code is not valid Python
    """
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise GenerationError(f"Generated Python code is not valid: {e}") from e


class AtomicWriter:
    """Writes generated code through a temporary file and an atomic rename.

    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(self, output: OutputConfig | None = None, validate: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            output: Output handling configuration
            validate: Optional validation function for the generated code
        """
        self.output = output or OutputConfig()
        self._validate = validate or validate_python

    def write(self, path: Path, content: str) -> None:
        """Write content to file.

        Args:
            path: Target file path
            content: Content to write

        Raises:
            FileExistsError: If the target exists and the mode forbids overwriting
            GenerationError: If validation fails
            OSError: If file operations fail
        """
        if self.output.mode == OutputMode.ERROR_IF_EXISTS and path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        if self.output.validate_before_write:
            self._validate(content)

        path.parent.mkdir(parents=True, exist_ok=True)
        if not self.output.atomic_write:
            path.write_text(content, encoding="utf-8")
            return

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s", path)
