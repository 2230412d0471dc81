"""
Генерация классов сервисов: один класс на группу, один метод на операцию
"""

from typing import Dict, List

from ..types.models import GeneratedArtifact, OperationRecord
from ..utils import (
    property_key,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    type_name,
)
from .context import EmitContext
from .signatures import MethodSignature, build_signature
from .typescript import comment_text, quote, referenced_names

VERB_CALLS = {
    "GET": "get",
    "POST": "post",
    "PUT": "put",
    "PATCH": "patch",
    "DELETE": "delete",
}


def service_class_name(group: str) -> str:
    return f"{to_pascal_case(group) or 'Default'}Service"


def service_instance_name(group: str) -> str:
    return to_camel_case(service_class_name(group))


def service_module(group: str) -> str:
    return f"{to_kebab_case(to_pascal_case(group) or 'Default')}.service"


def signature_type_names(signatures: List[MethodSignature]) -> List[str]:
    """Имена схем, используемых в сигнатурах (для import type)"""
    names: List[str] = []
    for signature in signatures:
        operation = signature.operation
        records = [operation.request_body_schema, operation.response_body_schema]
        parameters = operation.path_params + operation.query_params
        records += [p.value_schema for p in parameters]
        for record in records:
            for name in referenced_names(record):
                if type_name(name) not in names:
                    names.append(type_name(name))
    return names


class ServicesEmitter:
    """Клиентские классы поверх общего транспорта"""

    kind = "services"

    def __init__(self, context: EmitContext):
        self.context = context

    def signatures(self, operations: List[OperationRecord]) -> List[MethodSignature]:
        result = []
        for operation in operations:
            for issue in operation.issues:
                self.context.warn(
                    "OperationEmitError",
                    f"{operation.verb} {operation.path}",
                    f"{issue}, использован unknown",
                )
            result.append(build_signature(operation, self.context.mapper))
        return result

    def _method(self, signature: MethodSignature) -> dict:
        entries = []
        for argument in signature.query_arguments:
            key = property_key(argument.source)
            if key == argument.name:
                entries.append(argument.name)
            else:
                entries.append(f"{key}: {argument.name}")
        query = ", ".join(entries)
        body = signature.body_argument
        return {
            "name": signature.method_name,
            "summary": comment_text(signature.operation.summary),
            "parameters": signature.parameter_list(),
            "response_type": signature.response_type,
            "url": signature.url_template,
            "query": query,
            "call": VERB_CALLS[signature.operation.verb],
            "body": body.name if body else "",
        }

    def emit_service(self, group: str, operations: List[OperationRecord]) -> str:
        signatures = self.signatures(operations)
        config = self.context.config
        here = config.path_for(self.kind)
        return self.context.renderer.render(
            "service_module",
            {
                "title": f"Сервис {group}",
                "class_name": service_class_name(group),
                "instance_name": service_instance_name(group),
                "type_imports": signature_type_names(signatures),
                "types_path": self.context.import_path(here, config.path_for("types")),
                "methods": [self._method(s) for s in signatures],
            },
        )

    def emit(self) -> Dict[str, GeneratedArtifact]:
        artifacts: Dict[str, GeneratedArtifact] = {
            "services:api-client": self.context.artifact(
                self.kind,
                self.context.path(self.kind, "api-client.ts"),
                self.context.renderer.render(
                    "api_client", {"base_url": quote(self.context.config.base_url)}
                ),
            )
        }
        modules = ["api-client"]

        for group, operations in self.context.graph.operations_by_group().items():
            module = service_module(group)
            modules.append(module)
            artifacts[f"service:{group}"] = self.context.artifact(
                self.kind,
                self.context.path(self.kind, f"{module}.ts"),
                self.emit_service(group, operations),
            )

        artifacts["services:index"] = self.context.artifact(
            self.kind,
            self.context.path(self.kind, "index.ts"),
            self.context.renderer.render("barrel", {"modules": modules}),
        )
        return artifacts


