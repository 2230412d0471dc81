import logging
import posixpath
from dataclasses import dataclass, field
from typing import List

from ...config import GeneratorConfig
from ..types.models import ApiGraph, GeneratedArtifact, GenerationWarning
from ..utils import to_kebab_case, type_name
from .templates import TemplateRenderer
from .typescript import TypeMapper

logger = logging.getLogger(__name__)


@dataclass
class EmitContext:
    """Общие для всех генераторов данные одного запуска (только чтение)"""

    graph: ApiGraph
    config: GeneratorConfig
    renderer: TemplateRenderer
    mapper: TypeMapper
    warnings: List[GenerationWarning] = field(default_factory=list)

    @classmethod
    def create(cls, graph: ApiGraph, config: GeneratorConfig) -> "EmitContext":
        return cls(
            graph=graph,
            config=config,
            renderer=TemplateRenderer(config.templates),
            mapper=TypeMapper(graph.schemas, enum_as_union=config.enum_as_union),
        )

    def path(self, kind: str, *parts: str) -> str:
        return posixpath.join(self.config.path_for(kind), *parts)

    def import_path(self, from_dir: str, to_dir: str, module: str = "") -> str:
        """Относительный путь импорта между каталогами артефактов"""
        target = posixpath.join(to_dir, module) if module else to_dir
        relative = posixpath.relpath(target, from_dir or ".")
        if not relative.startswith("."):
            relative = "./" + relative
        return relative

    def artifact(self, kind: str, path: str, content: str) -> GeneratedArtifact:
        return GeneratedArtifact(kind=kind, path=path, content=content)

    def warn(self, category: str, subject: str, message: str) -> None:
        warning = GenerationWarning(category=category, subject=subject, message=message)
        # Одна и та же проблема схемы видна нескольким генераторам
        if warning in self.warnings:
            return
        logger.warning(str(warning))
        self.warnings.append(warning)


def schema_module(name: str) -> str:
    """Имя модуля (без расширения) для схемы"""
    return to_kebab_case(type_name(name))
