"""
Naming helpers for generated code.
"""

import keyword
import re

# Splits text into words, handling camelCase and acronym boundaries
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, treating any non-alphanumeric character as a separator."""
    return _WORD_PATTERN.findall(re.sub(r"[^A-Za-z0-9]+", " ", text))


def fqn_to_class_name(fqn: str) -> str:
    """Convert a fully-qualified name to a PascalCase class name.

    Examples:
        "Microsoft.Compute.virtualMachines" -> "MicrosoftComputeVirtualMachines"
        "undefined.resource_base" -> "UndefinedResourceBase"
        "Microsoft.Web.sites_config" -> "MicrosoftWebSitesConfig"
    """
    name = "".join(word[0].upper() + word[1:] for word in _split_into_words(fqn))
    if not name:
        return "Anonymous"
    if name[0].isdigit():
        name = f"_{name}"
    return name


def to_field_name(name: str) -> str:
    """Convert a JSON property name to a snake_case Python identifier.

    Examples:
        "apiVersion" -> "api_version"
        "$schema" -> "schema"
        "dependsOn" -> "depends_on"
        "type" -> "type"
        "class" -> "class_"
    """
    words = _split_into_words(name)
    field_name = "_".join(word.lower() for word in words) or "field"
    if field_name[0].isdigit():
        field_name = f"_{field_name}"
    if keyword.iskeyword(field_name):
        field_name += "_"
    return field_name
