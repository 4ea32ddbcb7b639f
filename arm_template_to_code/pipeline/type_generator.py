"""
Python type generator.

Accumulates construct requests and renders them as dataclasses and type
aliases through Jinja2 templates.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from .. import __version__
from ..cli_utils import COMMAND_NAME, reconstruct_command_line
from ..utils import fqn_to_class_name, to_field_name
from .bundler import BundledDocumentSet, decode_pointer_token, split_ref
from .code_sink import CodeSink
from .driver import ConstructRequest
from .errors import GenerationError
from .extractor import DEFAULT_NAMESPACE

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "python"


def split_union(type_name: str) -> list[str]:
    """Split a type expression on its top-level "|" operators."""
    members = []
    depth = 0
    start = 0
    for i, char in enumerate(type_name):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "|" and depth == 0:
            members.append(type_name[start:i].strip())
            start = i + 1
    members.append(type_name[start:].strip())
    return members


@dataclass
class ConstructInfo:
    """A registered construct and the class name chosen for it."""

    class_name: str
    request: ConstructRequest


class TypeGenerator:
    """Turns registered constructs into Python source code."""

    TYPE_MAP: dict[str, str] = {
        "integer": "int",
        "string": "str",
        "boolean": "bool",
        "number": "float",
        "null": "None",
    }

    BASE_IMPORTS = [
        ("dataclasses", "dataclass"),
        ("dataclasses_json", "dataclass_json"),
    ]

    def __init__(self, bundle: BundledDocumentSet, add_generation_comment: bool = True):
        """
        Initialize the generator.

        Args:
            bundle: Namespaced document set used to resolve $ref targets
            add_generation_comment: Whether to put a generation comment at the top of the output
        """
        self.bundle = bundle
        self.add_generation_comment = add_generation_comment
        self.constructs: dict[str, ConstructInfo] = {}
        self._class_names: set[str] = set()
        self._imports: set[tuple[str, str]] = set()
        self._bases: dict[str, ConstructInfo] = {}
        self._generated = False

        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.prefix_template = self.jinja_env.get_template("prefix.py.jinja2")
        self.class_template = self.jinja_env.get_template("class.py.jinja2")
        self.alias_template = self.jinja_env.get_template("alias.py.jinja2")

    def emit_construct(self, request: ConstructRequest) -> None:
        """
        Register one construct.

        Raises:
            GenerationError: If the schema is not a mapping or generation already happened
        """
        if self._generated:
            raise GenerationError(f"Cannot register {request.fqn}: code was already generated")
        if not isinstance(request.schema, dict):
            raise GenerationError(f"Schema of {request.fqn} must be an object, got {type(request.schema).__name__}")
        if request.fqn in self.constructs:
            logger.warning("Skipping duplicate construct %s", request.fqn)
            return

        class_name = self._unique_class_name(fqn_to_class_name(request.fqn))
        self.constructs[request.fqn] = ConstructInfo(class_name=class_name, request=request)

    def _unique_class_name(self, base_name: str) -> str:
        name = base_name
        counter = 2
        while name in self._class_names:
            name = f"{base_name}{counter}"
            counter += 1
        self._class_names.add(name)
        return name

    def generate(self, sink: CodeSink) -> None:
        """
        Render every registered construct into the sink.

        Raises:
            GenerationError: If called more than once
        """
        if self._generated:
            raise GenerationError("Code generation can only run once")
        self._generated = True

        blocks = [self._render_construct(info) for info in self._ordered_constructs()]

        prefix = self.prefix_template.render(
            generation_comment=self._generate_command_comment(),
            imports=self._assemble_imports(),
        )

        out = "\n\n\n".join([prefix.rstrip("\n"), *blocks])
        sink.lines(out.split("\n"))

    def _ordered_constructs(self) -> list[ConstructInfo]:
        """Return constructs in registration order with base classes before subclasses."""
        ordered: list[ConstructInfo] = []
        visited: set[str] = set()
        placed: set[str] = set()

        def visit(info: ConstructInfo) -> None:
            fqn = info.request.fqn
            if fqn in visited:
                return
            visited.add(fqn)
            base = self._base_construct(info.request.schema)
            if base is not None:
                visit(base)
                if base.request.fqn in placed:
                    self._bases[fqn] = base
                else:
                    logger.warning("Dropping cyclic base class %s of %s", base.request.fqn, fqn)
            ordered.append(info)
            placed.add(fqn)

        for info in self.constructs.values():
            visit(info)
        return ordered

    def _render_construct(self, info: ConstructInfo) -> str:
        schema = info.request.schema
        if self._is_class_shaped(schema):
            self._imports.update(self.BASE_IMPORTS)
            base = self._bases.get(info.request.fqn)
            context = {
                "fqn": info.request.fqn,
                "class_name": info.class_name,
                "base": base.class_name if base is not None else None,
                "docstring": self._docstring(schema.get("description") or info.request.fqn),
                "fields": self._field_declarations(schema),
            }
            return self.class_template.render(context).rstrip("\n")

        description = schema.get("description")
        context = {
            "fqn": info.request.fqn,
            "class_name": info.class_name,
            "description": " ".join(description.split()) if isinstance(description, str) else "",
            "type": self.translate_type(schema),
        }
        return self.alias_template.render(context).rstrip("\n")

    def _generate_command_comment(self) -> str:
        """Generate a simplified command line comment for the generated file"""
        if not self.add_generation_comment:
            return ""

        try:
            from .. import arm_template_to_code as cli  # noqa

            command_line = reconstruct_command_line(cli.arm_template_to_code)
        except (ImportError, AttributeError):
            command_line = COMMAND_NAME

        return f"# Generated by {COMMAND_NAME} v{__version__} : {command_line}"

    def _assemble_imports(self) -> list[str]:
        modules: dict[str, set[str]] = {}
        for module, name in self._imports:
            modules.setdefault(module, set()).add(name)
        return [f"from {module} import {', '.join(sorted(names))}" for module, names in sorted(modules.items())]

    # Class layout

    @staticmethod
    def _inline_object_parts(schema: dict) -> list[dict]:
        """Return the schema parts contributing properties to a class."""
        parts = []
        if isinstance(schema.get("properties"), dict):
            parts.append(schema)
        for part in schema.get("allOf") or []:
            if isinstance(part, dict) and "$ref" not in part and isinstance(part.get("properties"), dict):
                parts.append(part)
        return parts

    def _is_class_shaped(self, schema: dict) -> bool:
        return bool(self._inline_object_parts(schema)) or self._base_construct(schema) is not None

    def _base_construct(self, schema: dict) -> ConstructInfo | None:
        """Return the first class-shaped construct referenced by an allOf, if any."""
        for part in schema.get("allOf") or []:
            if not isinstance(part, dict) or "$ref" not in part:
                continue
            info = self.resolve_ref(part["$ref"])
            if info is not None and info.request.schema is not schema and self._inline_object_parts(info.request.schema):
                return info
        return None

    def _field_declarations(self, schema: dict) -> list[str]:
        required: set[str] = set()
        properties: dict[str, Any] = {}
        for part in self._inline_object_parts(schema):
            properties.update(part["properties"])
            required.update(r for r in part.get("required") or [] if isinstance(r, str))

        used_names: set[str] = {"field", "config"}
        required_fields = []
        optional_fields = []
        for json_name, property_schema in properties.items():
            field_name = to_field_name(json_name)
            candidate = field_name
            counter = 2
            while candidate in used_names:
                candidate = f"{field_name}_{counter}"
                counter += 1
            used_names.add(candidate)

            is_required = json_name in required
            declaration = self._field_declaration(candidate, json_name, property_schema, is_required)
            (required_fields if is_required else optional_fields).append(declaration)
        return required_fields + optional_fields

    def _field_declaration(self, field_name: str, json_name: str, property_schema: Any, is_required: bool) -> str:
        type_name = self.translate_type(property_schema)
        if not is_required:
            type_name = self.optional_type(type_name)

        if field_name == json_name:
            return f"{field_name}: {type_name}" if is_required else f"{field_name}: {type_name} = None"

        self._imports.add(("dataclasses", "field"))
        self._imports.add(("dataclasses_json", "config"))
        metadata = f"metadata=config(field_name={json.dumps(json_name)})"
        if is_required:
            return f"{field_name}: {type_name} = field({metadata})"
        return f"{field_name}: {type_name} = field(default=None, {metadata})"

    @staticmethod
    def _docstring(text: str) -> str:
        text = " ".join(str(text).split()).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        if text.endswith('"'):
            text += " "
        return text

    # Type translation

    def resolve_ref(self, ref: Any) -> ConstructInfo | None:
        """
        Find the construct a namespaced reference points to.

        Only references of the form "<document>#/definitions/<name>" into a
        bundled document can resolve.
        """
        if not isinstance(ref, str):
            return None
        location, fragment = split_ref(ref)
        if not location or location not in self.bundle or not fragment:
            return None
        parts = fragment.split("/")
        if len(parts) != 3 or parts[0] != "" or parts[1] != "definitions":
            return None
        name = decode_pointer_token(parts[2])

        document = self.bundle.get(location)
        namespace = (document.get("title") if isinstance(document, dict) else None) or DEFAULT_NAMESPACE
        return self.constructs.get(f"{namespace}.{name}")

    def any_type(self) -> str:
        self._imports.add(("typing", "Any"))
        return "Any"

    def optional_type(self, type_name: str) -> str:
        if type_name == "Any" or "None" in split_union(type_name):
            return type_name
        return f"{type_name} | None"

    def union_type(self, types: list[str]) -> str:
        members: list[str] = []
        for t in types:
            for member in split_union(t):
                if member not in members:
                    members.append(member)
        if not members or "Any" in members:
            return self.any_type()
        if "None" in members:
            members.remove("None")
            members.append("None")
        return " | ".join(members)

    def literal_type(self, values: list) -> str:
        literals = []
        for value in values:
            match value:
                case bool() | None:
                    literals.append(repr(value))
                case int() | str():
                    literals.append(json.dumps(value))
                case _:
                    # Literal only accepts str, int, bool and None
                    return self.any_type()
        self._imports.add(("typing", "Literal"))
        return f"Literal[{', '.join(literals)}]"

    def translate_type(self, schema: Any) -> str:
        """
        Translate a schema fragment to a Python type annotation.

        Args:
            schema: Schema fragment

        Returns:
            Python type expression
        """
        match schema:
            case {"$ref": ref}:
                info = self.resolve_ref(ref)
                return info.class_name if info is not None else self.any_type()
            case {"enum": list() as values} if values:
                return self.literal_type(values)
            case {"const": value}:
                return self.literal_type([value])
            case {"oneOf": list() as variants} | {"anyOf": list() as variants}:
                return self.union_type([self.translate_type(v) for v in variants])
            case {"allOf": list() as parts} if len(parts) == 1:
                return self.translate_type(parts[0])
            case {"type": list() as types}:
                return self.union_type([self.translate_type({**schema, "type": t}) for t in types])
            case {"type": "array"}:
                items = schema.get("items")
                item_type = self.translate_type(items) if isinstance(items, dict) else self.any_type()
                return f"list[{item_type}]"
            case {"additionalProperties": dict() as values}:
                return f"dict[str, {self.translate_type(values)}]"
            case {"type": "object"} | {"properties": dict()}:
                return f"dict[str, {self.any_type()}]"
            case {"type": str() as type_name} if type_name in self.TYPE_MAP:
                return self.TYPE_MAP[type_name]
            case _:
                return self.any_type()
