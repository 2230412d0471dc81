"""
Группировка операций по сервисам и вывод имен операций
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from ...errors import SpecError
from ..types.models import (
    GenerationWarning,
    OperationRecord,
    ParameterRecord,
    SchemaKind,
    SchemaRecord,
)
from ..utils import singularize, to_camel_case, to_pascal_case
from .schema_graph import SchemaGraphReader

logger = logging.getLogger(__name__)

VERBS = ("get", "post", "put", "patch", "delete")
PLACEHOLDER_RE = re.compile(r"\{([^}/]+)\}")

VERB_PREFIXES = {
    "POST": "create",
    "PUT": "update",
    "PATCH": "patch",
    "DELETE": "delete",
}


def derive_operation_id(verb: str, path: str) -> str:
    """Имя операции по методу и пути.

    Эвристика намеренно простая: последний статический сегмент пути
    считается ресурсом, единственное число получается отбрасыванием
    окончания. Неправильные формы и пути вида /a/{id}/b/{id2} могут
    давать совпадения, они разрешаются числовым суффиксом.
    """
    verb = verb.upper()
    segments = [s for s in path.split("/") if s]
    static = [s for s in segments if not PLACEHOLDER_RE.fullmatch(s)]
    word = static[-1] if static else "root"

    plural = to_pascal_case(word) or "Root"
    singular = to_pascal_case(singularize(word)) or "Root"

    if verb == "GET":
        ends_with_param = bool(segments) and PLACEHOLDER_RE.fullmatch(segments[-1])
        return f"get{singular}" if ends_with_param else f"list{plural}"
    return f"{VERB_PREFIXES[verb]}{singular}"


def _pick_json_media(content: Mapping) -> Tuple[Optional[Any], Optional[str]]:
    """Выбор JSON-представления; второй элемент: тип, если JSON нет"""
    if not content:
        return None, None
    if "application/json" in content:
        return content["application/json"], None
    for media_type, media in content.items():
        if "json" in media_type:
            return media, None
    return None, next(iter(content))


class EndpointGrouper:
    """Обход таблицы путей и построение OperationRecord"""

    def __init__(self, reader: SchemaGraphReader, default_tag: str = "Default"):
        self.reader = reader
        self.default_tag = default_tag
        self.warnings: List[GenerationWarning] = []

    def group(self) -> List[OperationRecord]:
        paths = self.reader.deref(self.reader.document.get("paths") or {})
        if not isinstance(paths, Mapping):
            raise SpecError("paths должен быть объектом")

        operations: List[OperationRecord] = []
        used_ids: Dict[str, set] = {}

        for path, item in paths.items():
            item = self.reader.deref(item)
            if not isinstance(item, Mapping):
                raise SpecError(f"описание пути {path} должно быть объектом")

            common_params = item.get("parameters") or []
            for verb in VERBS:
                if verb not in item:
                    continue
                operation = self.reader.deref(item[verb])
                if not isinstance(operation, Mapping):
                    raise SpecError(
                        f"описание операции {verb.upper()} {path} должно быть объектом"
                    )

                record = self._build_operation(
                    path, verb.upper(), operation, common_params
                )
                group_ids = used_ids.setdefault(record.group, set())
                record = self._ensure_unique(record, group_ids)
                operations.append(record)

        logger.debug("Найдено операций: %d", len(operations))
        return operations

    def _ensure_unique(self, record: OperationRecord, used: set) -> OperationRecord:
        operation_id = record.operation_id
        if operation_id in used:
            suffix = 2
            while f"{operation_id}{suffix}" in used:
                suffix += 1
            new_id = f"{operation_id}{suffix}"
            warning = GenerationWarning(
                category="OperationIdCollision",
                subject=f"{record.verb} {record.path}",
                message=(
                    f"имя {operation_id} уже занято в группе {record.group},"
                    f" использовано {new_id}"
                ),
            )
            logger.warning(str(warning))
            self.warnings.append(warning)
            record = record.model_copy(update={"operation_id": new_id})
        used.add(record.operation_id)
        return record

    def _build_operation(
        self, path: str, verb: str, operation: Mapping, common_params: List[Any]
    ) -> OperationRecord:
        issues: List[str] = []

        tags = operation.get("tags") or []
        group = str(tags[0]) if tags else self.default_tag

        operation_id = operation.get("operationId")
        if isinstance(operation_id, str) and to_camel_case(operation_id):
            operation_id = to_camel_case(operation_id)
        else:
            operation_id = derive_operation_id(verb, path)

        path_params, query_params = self._build_parameters(
            path, common_params, operation
        )

        request_body_schema = None
        request_body_required = True
        has_request_body = False
        request_body = self.reader.deref(operation.get("requestBody"))
        if isinstance(request_body, Mapping):
            has_request_body = True
            request_body_required = bool(request_body.get("required", True))
            request_body_schema = self._media_schema(
                request_body.get("content") or {}, "тело запроса", issues
            )

        responses = operation.get("responses") or {}
        response_body_schema = self._response_schema(responses, issues)

        return OperationRecord(
            path=path,
            verb=verb,
            group=group,
            operation_id=operation_id,
            summary=operation.get("summary"),
            description=operation.get("description"),
            path_params=path_params,
            query_params=query_params,
            request_body_schema=request_body_schema,
            has_request_body=has_request_body,
            request_body_required=request_body_required,
            response_body_schema=response_body_schema,
            issues=issues,
        )

    def _build_parameters(
        self, path: str, common_params: List[Any], operation: Mapping
    ) -> Tuple[List[ParameterRecord], List[ParameterRecord]]:
        merged: Dict[Tuple[str, str], Mapping] = {}
        for raw in list(common_params) + list(operation.get("parameters") or []):
            param = self.reader.deref(raw)
            if not isinstance(param, Mapping) or "name" not in param:
                continue
            # Параметр операции перекрывает параметр пути с тем же (name, in)
            merged[(param["name"], param.get("in"))] = param

        path_params: List[ParameterRecord] = []
        query_params: List[ParameterRecord] = []
        for (name, location), param in merged.items():
            if location not in ("path", "query"):
                continue
            schema = param.get("schema")
            record = ParameterRecord(
                name=name,
                location=location,
                required=location == "path" or bool(param.get("required", False)),
                value_schema=self.reader.build(schema) if schema is not None else None,
                description=param.get("description"),
            )
            (path_params if location == "path" else query_params).append(record)

        declared = {p.name for p in path_params}
        for placeholder in PLACEHOLDER_RE.findall(path):
            if placeholder not in declared:
                path_params.append(
                    ParameterRecord(name=placeholder, location="path", required=True)
                )
                declared.add(placeholder)

        return path_params, query_params

    def _media_schema(
        self, content: Mapping, what: str, issues: List[str]
    ) -> Optional[SchemaRecord]:
        media, unsupported_type = _pick_json_media(content)
        if unsupported_type is not None:
            issues.append(f"{what}: формат {unsupported_type} не поддерживается")
            return None
        media = self.reader.deref(media)
        if not isinstance(media, Mapping) or "schema" not in media:
            return None

        record = self.reader.build(media["schema"])
        if record.kind == SchemaKind.UNKNOWN and record.unsupported:
            issues.append(f"{what}: {record.unsupported}")
        return record

    def _response_schema(
        self, responses: Mapping, issues: List[str]
    ) -> Optional[SchemaRecord]:
        normalized = {str(code): response for code, response in responses.items()}
        success = sorted(code for code in normalized if code.startswith("2"))
        if not success:
            return None

        for preferred in ("200", "201"):
            if preferred in success:
                code = preferred
                break
        else:
            code = success[0]

        response = self.reader.deref(normalized[code])
        if not isinstance(response, Mapping):
            return None
        content = response.get("content") or {}
        return self._media_schema(content, f"ответ {code}", issues)
