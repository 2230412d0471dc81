"""
Генерация модулей с тестовыми данными
"""

import json
from typing import Dict

from ..types.models import GeneratedArtifact, SchemaKind, SchemaRecord
from ..utils import type_name
from .context import EmitContext, schema_module
from .fixtures import FactoryBuilder, build_instances


class FixturesEmitter:
    """N детерминированных экземпляров и генератор случайных на схему"""

    kind = "fixtures"

    def __init__(self, context: EmitContext):
        self.context = context

    def emit_fixtures(self, name: str, record: SchemaRecord) -> str:
        config = self.context.config
        index = self.context.graph.schemas
        mapper = self.context.mapper

        named_enums = {n for n in index.names() if mapper.is_named_enum(n)}
        builder = FactoryBuilder(index, named_enums)
        factory = builder.expression(record)
        if factory.startswith("{"):
            factory = f"({factory})"

        instances = build_instances(name, index, config.fixture_count)
        module = schema_module(name)
        here = config.path_for(self.kind)
        type_path = self.context.import_path(here, config.path_for("types"), module)
        cast = "" if config.enum_as_union else f" as unknown as {type_name(name)}[]"

        return self.context.renderer.render(
            "fixture_module",
            {
                "value_import": name in named_enums,
                "name": type_name(name),
                "type_path": type_path,
                "imports": [
                    {"name": type_name(dep), "module": schema_module(dep)}
                    for dep in builder.dependencies
                    if dep != name
                ],
                "fixtures": json.dumps(instances, indent=2, ensure_ascii=False),
                "cast": cast,
                "factory": factory,
            },
        )

    def emit(self) -> Dict[str, GeneratedArtifact]:
        artifacts: Dict[str, GeneratedArtifact] = {
            "fixtures:utils": self.context.artifact(
                self.kind,
                self.context.path(self.kind, "fake-utils.ts"),
                self.context.renderer.render("fake_utils", {}),
            )
        }
        modules = []

        for record in self.context.graph.schemas:
            if record.kind == SchemaKind.UNKNOWN and record.unsupported:
                continue
            module = f"{schema_module(record.name)}.fake-data"
            modules.append(module)
            artifacts[f"{record.name}:fixtures"] = self.context.artifact(
                self.kind,
                self.context.path(self.kind, f"{module}.ts"),
                self.emit_fixtures(record.name, record),
            )

        artifacts["fixtures:index"] = self.context.artifact(
            self.kind,
            self.context.path(self.kind, "index.ts"),
            self.context.renderer.render("barrel", {"modules": modules}),
        )
        return artifacts
