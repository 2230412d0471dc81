"""
Сигнатуры методов сервисов, общие для сервисов и хуков
"""

import re
from typing import List, Optional

from pydantic import BaseModel

from ..types.models import OperationRecord, ParameterRecord, SchemaKind
from ..utils import identifier, to_pascal_case
from .typescript import TypeMapper

PLACEHOLDER_RE = re.compile(r"\{([^}/]+)\}")


def is_id_like(name: str) -> bool:
    return name.lower() in ("id", "uuid") or name.endswith(("Id", "ID", "_id", "-id"))


class MethodArgument(BaseModel):
    name: str
    source: str
    location: str
    ts_type: str
    optional: bool = False

    def declaration(self, as_undefined: bool = False) -> str:
        if self.optional and as_undefined:
            return f"{self.name}: {self.ts_type} | undefined"
        if self.optional:
            return f"{self.name}?: {self.ts_type}"
        return f"{self.name}: {self.ts_type}"


class MethodSignature(BaseModel):
    """Сигнатура метода сервиса, построенная по OperationRecord"""

    operation: OperationRecord
    method_name: str
    resource: str
    arguments: List[MethodArgument] = []
    response_type: str = "void"
    url_template: str = ""

    @property
    def path_arguments(self) -> List[MethodArgument]:
        return [a for a in self.arguments if a.location == "path"]

    @property
    def query_arguments(self) -> List[MethodArgument]:
        return [a for a in self.arguments if a.location == "query"]

    @property
    def body_argument(self) -> Optional[MethodArgument]:
        for argument in self.arguments:
            if argument.location == "body":
                return argument
        return None

    @property
    def is_read(self) -> bool:
        return self.operation.is_read

    def parameter_list(self) -> str:
        # Необязательный параметр перед обязательным объявляется как T | undefined
        parts = []
        for position, argument in enumerate(self.arguments):
            followed_by_required = any(
                not later.optional for later in self.arguments[position + 1:]
            )
            parts.append(argument.declaration(as_undefined=followed_by_required))
        return ", ".join(parts)

    def call_arguments(self, prefix: str = "") -> str:
        return ", ".join(f"{prefix}{a.name}" for a in self.arguments)

    def variables_type(self) -> str:
        fields = [
            f"{a.name}{'?' if a.optional else ''}: {a.ts_type}" for a in self.arguments
        ]
        return "{ " + "; ".join(fields) + " }"


def _parameter_type(mapper: TypeMapper, parameter: ParameterRecord) -> str:
    schema = parameter.value_schema
    if schema is None or schema.kind == SchemaKind.UNKNOWN:
        return "number" if is_id_like(parameter.name) else "string"
    return mapper.ts_type(schema)


def build_signature(operation: OperationRecord, mapper: TypeMapper) -> MethodSignature:
    used = set()

    def unique(name: str) -> str:
        result = identifier(name)
        while result in used:
            result += "Param"
        used.add(result)
        return result

    arguments: List[MethodArgument] = []
    path_names = {}
    for parameter in operation.path_params:
        argument = MethodArgument(
            name=unique(parameter.name),
            source=parameter.name,
            location="path",
            ts_type=_parameter_type(mapper, parameter),
        )
        path_names[parameter.name] = argument.name
        arguments.append(argument)

    ordered_query = sorted(operation.query_params, key=lambda p: not p.required)
    for parameter in ordered_query:
        arguments.append(
            MethodArgument(
                name=unique(parameter.name),
                source=parameter.name,
                location="query",
                ts_type=_parameter_type(mapper, parameter),
                optional=not parameter.required,
            )
        )

    if operation.has_request_body:
        arguments.append(
            MethodArgument(
                name=unique("data"),
                source="data",
                location="body",
                ts_type=mapper.ts_type(operation.request_body_schema),
                optional=not operation.request_body_required,
            )
        )

    def placeholder(match) -> str:
        name = path_names.get(match.group(1), identifier(match.group(1)))
        return "${encodeURIComponent(String(" + name + "))}"

    url_template = PLACEHOLDER_RE.sub(placeholder, operation.path)

    if operation.response_body_schema is not None:
        response_type = mapper.ts_type(operation.response_body_schema)
    elif any(issue.startswith("ответ") for issue in operation.issues):
        response_type = "unknown"
    else:
        response_type = "void"

    return MethodSignature(
        operation=operation,
        method_name=operation.operation_id,
        resource=to_pascal_case(operation.group) or "Default",
        arguments=arguments,
        response_type=response_type,
        url_template=url_template,
    )
