"""
Главный модуль генератора - чистый интерфейс
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from .config import GeneratorConfig
from .errors import CodegenError, OperationEmitError, SchemaEmitError
from .internal.generator.components_emitter import ComponentsEmitter
from .internal.generator.context import EmitContext
from .internal.generator.fixtures_emitter import FixturesEmitter
from .internal.generator.hooks_emitter import HooksEmitter
from .internal.generator.mocks_emitter import MocksEmitter
from .internal.generator.services_emitter import ServicesEmitter
from .internal.generator.types_emitter import TypesEmitter
from .internal.generator.validators_emitter import ValidatorsEmitter
from .internal.generator.views_emitter import ViewsEmitter
from .internal.parser.openapi import OpenApiParser
from .internal.types.models import ARTIFACT_KINDS, GenerationResult

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Dict[str, Any]], None]

EMITTERS = {
    "types": TypesEmitter,
    "schemas": ValidatorsEmitter,
    "services": ServicesEmitter,
    "views": ViewsEmitter,
    "hooks": HooksEmitter,
    "components": ComponentsEmitter,
    "mocks": MocksEmitter,
    "fixtures": FixturesEmitter,
}

# Хуки и компоненты ссылаются на вывод сервисов и схем
STAGES = (
    ("types",),
    ("schemas",),
    ("services",),
    ("views",),
    ("hooks", "components"),
    ("mocks", "fixtures"),
)


def resolve_kinds(enabled_kinds: Optional[Iterable[str]]) -> List[str]:
    """Виды артефактов к генерации, по умолчанию все"""
    kinds = list(enabled_kinds or [])
    if not kinds:
        return list(ARTIFACT_KINDS)
    unknown = [k for k in kinds if k not in ARTIFACT_KINDS]
    if unknown:
        raise CodegenError(f"неизвестные виды артефактов: {', '.join(unknown)}")
    return [k for k in ARTIFACT_KINDS if k in kinds]


class Orchestrator:
    """Запуск генераторов по стадиям с изоляцией ошибок"""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        on_event: Optional[EventHandler] = None,
    ):
        self.config = config or GeneratorConfig()
        self.on_event = on_event

    def _publish(self, event: str, payload: Dict[str, Any]) -> None:
        logger.debug("%s %s", event, payload)
        if self.on_event is not None:
            self.on_event(event, payload)

    def generate(
        self, spec: Dict[str, Any], enabled_kinds: Optional[Iterable[str]] = None
    ) -> GenerationResult:
        """Генерация всех включенных видов артефактов по спецификации"""
        kinds = resolve_kinds(enabled_kinds)

        parser = OpenApiParser(spec, default_tag=self.config.default_tag)
        graph = parser.parse()
        logger.info(
            "Прочитано схем: %d, операций: %d",
            len(graph.schemas),
            len(graph.operations),
        )

        context = EmitContext.create(graph, self.config)
        for warning in parser.warnings:
            context.warn(warning.category, warning.subject, warning.message)

        result = GenerationResult()
        for stage in STAGES:
            for kind in stage:
                if kind not in kinds:
                    continue
                self._publish("generation_started", {"kind": kind})
                artifacts = self._run(kind, context)
                for key, artifact in artifacts.items():
                    result.add(key, artifact)
                completed = {"kind": kind, "count": len(artifacts)}
                self._publish("generation_completed", completed)

        result.warnings = list(context.warnings)
        return result

    def _run(self, kind: str, context: EmitContext) -> Dict[str, Any]:
        emitter = EMITTERS[kind](context)
        try:
            return emitter.emit()
        except SchemaEmitError as e:
            context.warn("SchemaEmitError", e.schema_name, e.message)
        except OperationEmitError as e:
            context.warn("OperationEmitError", e.operation, e.message)
        return {}


def generate(
    spec: Dict[str, Any],
    enabled_kinds: Optional[Iterable[str]] = None,
    config: Optional[GeneratorConfig] = None,
    on_event: Optional[EventHandler] = None,
) -> GenerationResult:
    """Генерация артефактов по OpenAPI спецификации"""
    return Orchestrator(config, on_event).generate(spec, enabled_kinds)
