"""
Configuration for the ARM template import pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SCHEMA_URL_TEMPLATE = "https://schema.management.azure.com/schemas/{api_version}/deploymentTemplate.json"


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite the existing file


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to check the generated Python parses before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class ImporterConfig:
    """Configuration options for an import run."""

    # Deployment template API version, e.g. "2019-04-01"
    api_version: str = ""

    # Explicit schema location (URL or file path); overrides the template
    schema_url: str = ""

    # Location used when no explicit schema_url is given
    schema_url_template: str = DEFAULT_SCHEMA_URL_TEMPLATE

    # fqn patterns to keep (empty = keep everything)
    include: list[str] = field(default_factory=list)

    # fqn patterns to drop; referenced excluded types become Any
    exclude: list[str] = field(default_factory=list)

    # HTTP timeout in seconds
    timeout: float = 30.0

    # Where to dump the bundled documents (empty = no dump)
    resolved_dump_path: str = "resolved.json"

    # Add generation comment at top of file
    add_generation_comment: bool = True

    output: OutputConfig = field(default_factory=OutputConfig)

    def resolve_schema_url(self) -> str:
        """Return the schema location for this run."""
        if self.schema_url:
            return self.schema_url
        return self.schema_url_template.format(api_version=self.api_version)

    @staticmethod
    def from_dict(d: dict) -> ImporterConfig:
        """Create a config from a dictionary."""
        config = ImporterConfig()
        for k, v in d.items():
            if k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "api_version": self.api_version,
            "schema_url": self.schema_url,
            "schema_url_template": self.schema_url_template,
            "include": self.include,
            "exclude": self.exclude,
            "timeout": self.timeout,
            "resolved_dump_path": self.resolved_dump_path,
            "add_generation_comment": self.add_generation_comment,
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
