"""
Генерация типов TypeScript по схемам
"""

from typing import Dict, List

from ...errors import SchemaEmitError
from ..types.models import GeneratedArtifact, SchemaKind, SchemaRecord
from ..utils import to_pascal_case, type_name
from .context import EmitContext, schema_module
from .typescript import comment_text, quote, referenced_names, unsupported_reasons


def enum_members(values: List[str]) -> List[Dict[str, str]]:
    members = []
    used = set()
    for position, value in enumerate(values):
        key = to_pascal_case(value) or f"Value{position}"
        if key[0].isdigit():
            key = "V" + key
        while key in used:
            key += "_"
        used.add(key)
        members.append({"key": key, "value": quote(value)})
    return members


class TypesEmitter:
    """Один файл с экспортируемым типом на схему"""

    kind = "types"

    def __init__(self, context: EmitContext):
        self.context = context

    def emit_type(self, name: str, record: SchemaRecord) -> str:
        """Исходный текст одного типа"""
        if record.kind == SchemaKind.UNKNOWN and record.unsupported:
            raise SchemaEmitError(name, record.unsupported)

        mapper = self.context.mapper
        variables = {
            "name": type_name(name),
            "description": comment_text(record.description),
            "imports": [
                {"name": type_name(dep), "module": schema_module(dep)}
                for dep in referenced_names(record)
                if dep != name
            ],
            "fields": None,
            "enum_members": None,
            "alias": None,
        }

        is_object = record.kind == SchemaKind.OBJECT and bool(record.properties)
        if is_object and not record.nullable:
            variables["fields"] = [
                {"key": key, "optional": optional, "type": ts_type}
                for key, optional, ts_type in mapper.ts_fields(record)
            ]
        elif mapper.is_named_enum(name):
            variables["enum_members"] = enum_members(record.enum_values)
        else:
            variables["alias"] = mapper.ts_type(record)

        return self.context.renderer.render("type_module", variables)

    def _fallback(self, name: str) -> str:
        return self.context.renderer.render(
            "type_module",
            {
                "name": type_name(name),
                "description": None,
                "imports": [],
                "fields": None,
                "enum_members": None,
                "alias": "unknown",
            },
        )

    def emit(self) -> Dict[str, GeneratedArtifact]:
        artifacts: Dict[str, GeneratedArtifact] = {}
        modules = []

        for record in self.context.graph.schemas:
            name = record.name
            try:
                content = self.emit_type(name, record)
                for reason in unsupported_reasons(record):
                    message = f"{reason}, использован unknown"
                    self.context.warn("SchemaEmitError", name, message)
            except SchemaEmitError as e:
                self.context.warn("SchemaEmitError", e.schema_name, e.message)
                content = self._fallback(name)

            module = schema_module(name)
            modules.append(module)
            artifacts[f"{name}:type"] = self.context.artifact(
                self.kind, self.context.path(self.kind, f"{module}.ts"), content
            )

        artifacts["types:index"] = self.context.artifact(
            self.kind,
            self.context.path(self.kind, "index.ts"),
            self.context.renderer.render("barrel", {"modules": modules}),
        )
        return artifacts


