"""
Генерация zod-схем, зеркальная генерации типов
"""

from typing import Dict

from ...errors import SchemaEmitError
from ..types.models import GeneratedArtifact, SchemaKind, SchemaRecord
from ..utils import type_name
from .context import EmitContext, schema_module
from .typescript import referenced_names


class ValidatorsEmitter:
    """Один файл со схемой валидации на схему"""

    kind = "schemas"

    def __init__(self, context: EmitContext):
        self.context = context

    def _variables(self, name: str, record: SchemaRecord) -> dict:
        module = schema_module(name)
        here = self.context.config.path_for(self.kind)
        return {
            "name": type_name(name),
            "module": module,
            "type_path": self.context.import_path(
                here, self.context.config.path_for("types"), module
            ),
            "native_enum": False,
            "imports": [],
            "fields": [],
            "suffix": "",
            "expression": "z.unknown()",
        }

    def emit_validator(self, name: str, record: SchemaRecord) -> str:
        if record.kind == SchemaKind.UNKNOWN and record.unsupported:
            raise SchemaEmitError(name, record.unsupported)

        mapper = self.context.mapper
        variables = self._variables(name, record)
        variables["imports"] = [
            {"name": type_name(dep), "module": schema_module(dep)}
            for dep in referenced_names(record)
            if dep != name
        ]

        if record.kind == SchemaKind.OBJECT and record.properties:
            variables["fields"] = mapper.zod_fields(record)
            variables["suffix"] = ".nullable()" if record.nullable else ""
        elif mapper.is_named_enum(name):
            variables["native_enum"] = True
            variables["expression"] = f"z.nativeEnum({type_name(name)})"
        else:
            variables["expression"] = mapper.zod(record)

        return self.context.renderer.render("validator_module", variables)

    def emit(self) -> Dict[str, GeneratedArtifact]:
        artifacts: Dict[str, GeneratedArtifact] = {}
        modules = []

        for record in self.context.graph.schemas:
            name = record.name
            try:
                content = self.emit_validator(name, record)
            except SchemaEmitError as e:
                self.context.warn("SchemaEmitError", e.schema_name, e.message)
                content = self.context.renderer.render(
                    "validator_module", self._variables(name, record)
                )

            module = f"{schema_module(name)}.schema"
            modules.append(module)
            artifacts[f"{name}:schema"] = self.context.artifact(
                self.kind, self.context.path(self.kind, f"{module}.ts"), content
            )

        artifacts["schemas:index"] = self.context.artifact(
            self.kind,
            self.context.path(self.kind, "index.ts"),
            self.context.renderer.render("barrel", {"modules": modules}),
        )
        return artifacts
