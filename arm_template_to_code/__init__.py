"""ARM Template to Code Generator

Imports Azure deployment template JSON Schemas and generates Python
dataclasses for every definition they declare.
"""

__version__ = "0.1.0"

from .pipeline import (
    ArmImportError,
    ArmTemplateImporter,
    ImporterConfig,
    OutputConfig,
    OutputMode,
    TypeEmissionDriver,
    TypeGenerator,
)

__all__ = [
    "ArmTemplateImporter",
    "ImporterConfig",
    "OutputConfig",
    "OutputMode",
    "TypeEmissionDriver",
    "TypeGenerator",
    "ArmImportError",
]
