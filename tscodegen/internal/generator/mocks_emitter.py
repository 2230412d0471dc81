"""
Генерация мок-сервера на aiohttp.web
"""

from typing import Dict, List, Optional

from ..types.models import GeneratedArtifact, OperationRecord, SchemaKind
from ..utils import python_identifier
from .classification import resource_entity, returns_collection
from .context import EmitContext
from .fixtures import build_instances
from .signatures import PLACEHOLDER_RE

VERB_ACTIONS = {
    "POST": "create",
    "PUT": "replace",
    "PATCH": "update",
    "DELETE": "delete",
}


def route_path(path: str) -> str:
    """Путь OpenAPI в шаблон маршрута aiohttp с безопасными именами параметров"""
    return PLACEHOLDER_RE.sub(lambda m: "{" + python_identifier(m.group(1)) + "}", path)


def route_action(operation: OperationRecord, index) -> str:
    if operation.verb != "GET":
        return VERB_ACTIONS[operation.verb]
    if operation.path.rstrip("/").endswith("}"):
        return "get"
    if returns_collection(index, operation.response_body_schema):
        return "list"
    return "single"


class MocksEmitter:
    """Сервер с хранилищем в памяти и маршрутом на каждую операцию"""

    kind = "mocks"

    def __init__(self, context: EmitContext):
        self.context = context

    def route(self, operation: OperationRecord) -> dict:
        index = self.context.graph.schemas
        action = route_action(operation, index)
        entity = resource_entity(index, operation)

        id_param: Optional[str] = None
        lookup = "id"
        placeholders = PLACEHOLDER_RE.findall(operation.path)
        ends_with_param = operation.path.rstrip("/").endswith("}")
        if placeholders and action != "list" and ends_with_param:
            source = placeholders[-1]
            id_param = python_identifier(source)
            record = index.get(entity)
            if record is not None and source in record.properties:
                lookup = source

        return {
            "method": operation.verb,
            "path": route_path(operation.path),
            "action": action,
            "entity": entity,
            "id_param": id_param,
            "lookup": lookup,
            "operation": operation.operation_id,
        }

    def seed(self, routes: List[dict]) -> Dict[str, list]:
        index = self.context.graph.schemas
        count = self.context.config.mock_seed_count
        data: Dict[str, list] = {}
        for route in routes:
            entity = route["entity"]
            if entity in data:
                continue
            record = index.get(entity)
            if record is not None and record.kind == SchemaKind.OBJECT:
                data[entity] = build_instances(entity, index, count)
            else:
                data[entity] = []
        return data

    def emit(self) -> Dict[str, GeneratedArtifact]:
        config = self.context.config
        routes = [self.route(operation) for operation in self.context.graph.operations]
        variables = {
            "title": self.context.graph.title,
            "port": config.mock_port,
            "seed": self.seed(routes),
            "routes": routes,
        }
        return {
            "mocks:server": self.context.artifact(
                self.kind,
                self.context.path(self.kind, "server.py"),
                self.context.renderer.render("mock_server", variables),
            ),
            "mocks:readme": self.context.artifact(
                self.kind,
                self.context.path(self.kind, "README.md"),
                self.context.renderer.render("mock_readme", variables),
            ),
        }
