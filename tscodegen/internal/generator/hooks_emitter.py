"""
Генерация хуков запросов и мутаций поверх сервисов.

Хуки строятся по тем же OperationRecord и сигнатурам, что и сервисы,
поэтому имена методов и параметры у них всегда совпадают.
"""

from typing import Dict, List, Set

from ..types.models import ApiGraph, GeneratedArtifact, OperationRecord
from ..utils import to_camel_case, to_kebab_case, to_pascal_case
from .context import EmitContext
from .services_emitter import (
    ServicesEmitter,
    service_instance_name,
    service_module,
    signature_type_names,
)
from .signatures import MethodSignature

REACT_QUERY_MODULE = "@tanstack/react-query"


def hook_name(method_name: str, prefix: str = "") -> str:
    return f"use{prefix}{to_pascal_case(method_name)}"


def hook_module(group: str) -> str:
    return f"use-{to_kebab_case(to_pascal_case(group) or 'Default')}"


def shared_operation_ids(graph: ApiGraph) -> Set[str]:
    """Имена операций, которые есть больше чем в одной группе.

    Хуки всех групп реэкспортируются из одного index.ts, поэтому такие
    хуки получают имя группы в качестве префикса.
    """
    groups: Dict[str, Set[str]] = {}
    for operation in graph.operations:
        groups.setdefault(operation.operation_id, set()).add(operation.group)
    return {name for name, owners in groups.items() if len(owners) > 1}


class HooksEmitter:
    """Один файл хуков на группу операций"""

    kind = "hooks"

    def __init__(self, context: EmitContext):
        self.context = context
        self.shared_ids = shared_operation_ids(context.graph)

    def _hook_name(self, group: str, signature: MethodSignature) -> str:
        if signature.method_name in self.shared_ids:
            return hook_name(signature.method_name, to_pascal_case(group) or "Default")
        return hook_name(signature.method_name)

    def _query_hook(self, group: str, signature: MethodSignature) -> dict:
        parameters = signature.parameter_list()
        options = "options: QueryHookOptions = {}"
        return {
            "is_query": True,
            "name": self._hook_name(group, signature),
            "parameters": f"{parameters}, {options}" if parameters else options,
            "method": signature.method_name,
            "key_args": [a.name for a in signature.arguments],
            "call_args": signature.call_arguments(),
            "response_type": signature.response_type,
            "variables_type": "",
        }

    def _mutation_hook(self, group: str, signature: MethodSignature) -> dict:
        variables_type = signature.variables_type() if signature.arguments else ""
        return {
            "is_query": False,
            "name": self._hook_name(group, signature),
            "parameters": "",
            "method": signature.method_name,
            "key_args": [],
            "call_args": signature.call_arguments(prefix="variables."),
            "response_type": signature.response_type,
            "variables_type": variables_type,
        }

    def emit_hooks(self, group: str, operations: List[OperationRecord]) -> str:
        config = self.context.config
        signatures = ServicesEmitter(self.context).signatures(operations)
        here = config.path_for(self.kind)
        services_dir = config.path_for("services")
        import_path = self.context.import_path

        if config.use_react_query:
            query_module = REACT_QUERY_MODULE
        else:
            query_module = "./query-cache"

        return self.context.renderer.render(
            "hook_module",
            {
                "query_module": query_module,
                "api_client_path": import_path(here, services_dir, "api-client"),
                "service_instance": service_instance_name(group),
                "service_path": import_path(here, services_dir, service_module(group)),
                "types_path": import_path(here, config.path_for("types")),
                "type_imports": signature_type_names(signatures),
                "key_const": f"{to_camel_case(group) or 'default'}QueryKey",
                "resource": to_pascal_case(group) or "Default",
                "hooks": [
                    self._query_hook(group, s)
                    if s.is_read
                    else self._mutation_hook(group, s)
                    for s in signatures
                ],
            },
        )

    def emit(self) -> Dict[str, GeneratedArtifact]:
        artifacts: Dict[str, GeneratedArtifact] = {
            "hooks:options": self.context.artifact(
                self.kind,
                self.context.path(self.kind, "hook-options.ts"),
                self.context.renderer.render("hook_options", {}),
            )
        }
        modules = ["hook-options"]

        if not self.context.config.use_react_query:
            artifacts["hooks:query-cache"] = self.context.artifact(
                self.kind,
                self.context.path(self.kind, "query-cache.ts"),
                self.context.renderer.render("query_cache", {}),
            )

        for group, operations in self.context.graph.operations_by_group().items():
            module = hook_module(group)
            modules.append(module)
            artifacts[f"hooks:{group}"] = self.context.artifact(
                self.kind,
                self.context.path(self.kind, f"{module}.ts"),
                self.emit_hooks(group, operations),
            )

        artifacts["hooks:index"] = self.context.artifact(
            self.kind,
            self.context.path(self.kind, "index.ts"),
            self.context.renderer.render("barrel", {"modules": modules}),
        )
        return artifacts
