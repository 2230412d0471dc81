"""
Классификация схем: сущности, кандидаты в списки и формы
"""

import re
from typing import Dict, List, Optional, Set

from ..types.models import (
    ApiGraph,
    OperationRecord,
    SchemaIndex,
    SchemaKind,
    SchemaRecord,
)
from ..utils import singularize, to_pascal_case

WRAPPER_NAME_RE = re.compile(
    r"^(Paginated|Page)[A-Z]|"
    r"(Error|Errors|Exception|Problem|Response|Wrapper|Envelope"
    r"|Paginated|Pagination|Page)$"
)
COLLECTION_PROPERTIES = ("data", "items", "results", "content", "records")


def is_entity(index: SchemaIndex, name: Optional[str]) -> bool:
    """Именованная объектная схема со свойствами, не обертка и не ошибка"""
    if not name:
        return False
    record = index.get(name)
    return (
        record is not None
        and record.kind == SchemaKind.OBJECT
        and bool(record.properties)
        and not WRAPPER_NAME_RE.search(name)
    )


def entity_from_payload(
    index: SchemaIndex, record: Optional[SchemaRecord]
) -> Optional[str]:
    """Имя сущности, которую несет тело запроса или ответа.

    Массивы разворачиваются до элементов, обертки пагинации до
    свойства-коллекции (data, items, ...).
    """
    return _entity_from(index, record, set())


def _entity_from(
    index: SchemaIndex, record: Optional[SchemaRecord], seen: Set[str]
) -> Optional[str]:
    if record is None:
        return None
    if record.kind == SchemaKind.ARRAY:
        return _entity_from(index, record.items, seen)
    if record.kind == SchemaKind.REFERENCE:
        if record.ref in seen:
            return None
        if is_entity(index, record.ref):
            return record.ref
        return _entity_from(index, index.get(record.ref), seen | {record.ref})
    if record.kind == SchemaKind.OBJECT:
        for prop in COLLECTION_PROPERTIES:
            if prop in record.properties:
                found = _entity_from(index, record.properties[prop], seen)
                if found:
                    return found
    return None


def returns_collection(index: SchemaIndex, record: Optional[SchemaRecord]) -> bool:
    """Ответ является массивом или оберткой с коллекцией"""
    seen: Set[str] = set()
    while record is not None and record.kind == SchemaKind.REFERENCE:
        if record.ref in seen:
            return False
        seen.add(record.ref)
        record = index.get(record.ref)
    if record is None:
        return False
    if record.kind == SchemaKind.ARRAY:
        return True
    if record.kind == SchemaKind.OBJECT:
        return any(
            returns_collection(index, record.properties.get(prop))
            for prop in COLLECTION_PROPERTIES
            if prop in record.properties
        )
    return False


def resource_entity(index: SchemaIndex, operation: OperationRecord) -> str:
    """Сущность операции для мок-хранилища: из тела, иначе из пути"""
    for candidate in (operation.response_body_schema, operation.request_body_schema):
        name = entity_from_payload(index, candidate)
        if name:
            return name
    segments = [s for s in operation.path.split("/") if s and not s.startswith("{")]
    return to_pascal_case(singularize(segments[-1])) if segments else "Root"


class ComponentClassification:
    """Результат прохода по операциям: какие каркасы нужны для каких схем"""

    def __init__(self):
        self.lists: List[str] = []
        self.create_forms: List[str] = []
        self.edit_forms: List[str] = []

    @staticmethod
    def _add(bucket: List[str], name: Optional[str]):
        if name and name not in bucket:
            bucket.append(name)

    @classmethod
    def from_graph(cls, graph: ApiGraph) -> "ComponentClassification":
        result = cls()
        index = graph.schemas
        for operation in graph.operations:
            response = entity_from_payload(index, operation.response_body_schema)
            request = entity_from_payload(index, operation.request_body_schema)
            if operation.verb == "GET":
                cls._add(result.lists, response)
            elif operation.verb == "POST":
                cls._add(result.create_forms, request)
            elif operation.verb in ("PUT", "PATCH"):
                cls._add(result.edit_forms, request)
        return result

    def roles(self) -> Dict[str, List[str]]:
        roles: Dict[str, List[str]] = {}
        for role, names in (
            ("list", self.lists),
            ("create-form", self.create_forms),
            ("edit-form", self.edit_forms),
        ):
            for name in names:
                roles.setdefault(name, []).append(role)
        return roles
