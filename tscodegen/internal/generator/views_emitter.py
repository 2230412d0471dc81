"""
Генерация классов-представлений с безопасными геттерами
"""

from typing import Dict, List, Optional

from ..types.models import GeneratedArtifact, SchemaKind, SchemaRecord
from ..utils import property_key, type_name
from .classification import is_entity
from .context import EmitContext, schema_module
from .typescript import referenced_names

RESERVED_MEMBERS = ("isValid", "toJSON", "toApiPayload", "source", "constructor")


def property_access(prop: str) -> str:
    key = property_key(prop)
    return f"[{key}]" if key.startswith("'") else f".{key}"


class ViewsEmitter:
    """Класс-обертка над сырыми данными для каждой сущности"""

    kind = "views"

    def __init__(self, context: EmitContext):
        self.context = context

    def _default(self, schema: SchemaRecord) -> Optional[str]:
        target = self.context.graph.schemas.resolve(schema)
        if target is None:
            return None
        if target.kind == SchemaKind.PRIMITIVE:
            if target.is_string:
                return "''"
            if target.is_numeric:
                return "0"
            if target.is_boolean:
                return "false"
        if target.kind == SchemaKind.ARRAY:
            return "[]"
        if target.kind == SchemaKind.OBJECT:
            return "{}"
        return None

    def _getter(self, prop: str, schema: SchemaRecord) -> dict:
        mapper = self.context.mapper
        plain = schema.model_copy(update={"nullable": False})
        ts_type = mapper.ts_type(plain)
        default = self._default(schema)
        target = self.context.graph.schemas.resolve(schema)

        if default is None:
            default = "null"
            if ts_type != "unknown":
                ts_type = f"{ts_type} | null"
        elif default == "{}":
            ts_type = f"Partial<{ts_type}>"
        elif default == "''" and target is not None and target.enum_values:
            ts_type = f"{ts_type} | ''"

        return {
            "key": property_key(prop),
            "type": ts_type,
            "access": property_access(prop),
            "default": default,
        }

    def emit_view(self, name: str, record: SchemaRecord) -> str:
        module = schema_module(name)
        here = self.context.config.path_for(self.kind)
        getters: List[dict] = [
            self._getter(prop, schema)
            for prop, schema in record.properties.items()
            if prop not in RESERVED_MEMBERS
        ]
        return self.context.renderer.render(
            "view_module",
            {
                "name": type_name(name),
                "type_path": self.context.import_path(
                    here, self.context.config.path_for("types"), module
                ),
                "schema_path": self.context.import_path(
                    here, self.context.config.path_for("schemas"), f"{module}.schema"
                ),
                "type_imports": [
                    type_name(dep) for dep in referenced_names(record) if dep != name
                ],
                "types_path": self.context.import_path(
                    here, self.context.config.path_for("types")
                ),
                "getters": getters,
            },
        )

    def emit(self) -> Dict[str, GeneratedArtifact]:
        artifacts: Dict[str, GeneratedArtifact] = {}
        modules = []
        index = self.context.graph.schemas

        for record in index:
            if not is_entity(index, record.name):
                continue
            module = f"{schema_module(record.name)}.view"
            modules.append(module)
            artifacts[f"{record.name}:view"] = self.context.artifact(
                self.kind,
                self.context.path(self.kind, f"{module}.ts"),
                self.emit_view(record.name, record),
            )

        artifacts["views:index"] = self.context.artifact(
            self.kind,
            self.context.path(self.kind, "index.ts"),
            self.context.renderer.render("barrel", {"modules": modules}),
        )
        return artifacts
