"""
Чтение графа схем: разрешение $ref и слияние allOf в плоские записи
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, Optional, Tuple
from urllib.parse import unquote

import jsonref

from ...errors import SpecError
from ..types.models import SchemaIndex, SchemaKind, SchemaRecord

logger = logging.getLogger(__name__)

SCHEMA_POINTER_RE = re.compile(r"^#/components/schemas/([^/]+)$")
PRIMITIVE_TYPES = ("string", "integer", "number", "boolean")


def _reject_remote(uri, **kwargs):
    raise SpecError("удаленные ссылки не поддерживаются", pointer=uri)


def _decode_pointer_token(token: str) -> str:
    return unquote(token).replace("~1", "/").replace("~0", "~")


class SchemaGraphReader:
    """Нормализация спецификации в индекс плоских SchemaRecord"""

    def __init__(self, raw_spec: Dict[str, Any]):
        if not isinstance(raw_spec, Mapping):
            raise SpecError("спецификация должна быть объектом")

        self.raw_spec = raw_spec
        self.document = jsonref.replace_refs(
            raw_spec, loader=_reject_remote, lazy_load=True
        )
        self._schema_names = self._collect_schema_names()
        self._named: Dict[str, SchemaRecord] = {}
        self._building: set = set()

    def _collect_schema_names(self) -> Tuple[str, ...]:
        components = self.raw_spec.get("components")
        schemas = components.get("schemas") if isinstance(components, Mapping) else None
        if not isinstance(schemas, Mapping):
            raise SpecError("в спецификации нет components.schemas")
        return tuple(schemas)

    def read(self) -> SchemaIndex:
        """Построение индекса всех именованных схем"""
        records = {name: self.named_record(name) for name in self._schema_names}
        logger.debug("Прочитано схем: %d", len(records))
        return SchemaIndex(records)

    def named_record(self, name: str) -> SchemaRecord:
        if name in self._named:
            return self._named[name]

        node = self.document["components"]["schemas"][name]
        self._building.add(name)
        try:
            if type(node) is jsonref.JsonRef:
                # Схема-псевдоним: сама является ссылкой
                record = self.build(node, trail=(f"#/components/schemas/{name}",))
                record = record.model_copy(update={"name": name})
            else:
                record = self.build(node, name=name)
        finally:
            self._building.discard(name)

        self._named[name] = record
        return record

    def deref(self, node: Any) -> Any:
        """Снятие прокси jsonref с узла (параметры, тела запросов, ответы)"""
        while type(node) is jsonref.JsonRef:
            node = self._subject(node)
        return node

    def _subject(self, node: jsonref.JsonRef) -> Any:
        pointer = node.__reference__["$ref"]
        try:
            return node.__subject__
        except jsonref.JsonRefError as e:
            if isinstance(e.cause, SpecError):
                raise e.cause from e
            raise SpecError(f"неразрешимая ссылка: {e.message}", pointer=pointer) from e

    def _schema_name_for(self, pointer: str) -> Optional[str]:
        match = SCHEMA_POINTER_RE.match(pointer)
        if not match:
            return None
        name = _decode_pointer_token(match.group(1))
        return name if name in self._schema_names else None

    def build(
        self, node: Any, name: str = "", trail: Tuple[str, ...] = ()
    ) -> SchemaRecord:
        """Построение записи для произвольного узла схемы"""
        if type(node) is jsonref.JsonRef:
            return self._build_reference(node, name, trail)

        if node is True or node == {}:
            return SchemaRecord(name=name, kind=SchemaKind.UNKNOWN)
        if not isinstance(node, Mapping):
            return SchemaRecord(
                name=name,
                kind=SchemaKind.UNKNOWN,
                unsupported=f"узел схемы не является объектом: {node!r}",
            )

        if "allOf" in node:
            return self._build_all_of(node, name, trail)
        if "oneOf" in node or "anyOf" in node:
            return self._build_union(node, name, trail)

        description = node.get("description")
        nullable = bool(node.get("nullable", False))
        schema_type = node.get("type")

        if isinstance(schema_type, list):
            types = [t for t in schema_type if t != "null"]
            nullable = nullable or len(types) != len(schema_type)
            if len(types) > 1:
                variants = [
                    self.build({**dict(node), "type": t}, trail=trail) for t in types
                ]
                return SchemaRecord(
                    name=name,
                    kind=SchemaKind.UNION,
                    variants=variants,
                    nullable=nullable,
                    description=description,
                )
            schema_type = types[0] if types else None

        if schema_type is None:
            if "properties" in node or "additionalProperties" in node:
                schema_type = "object"
            elif "items" in node:
                schema_type = "array"
            elif _string_enum(node.get("enum")):
                schema_type = "string"

        if schema_type == "object":
            return self._build_object(node, name, trail, nullable)

        if schema_type == "array":
            items = node.get("items")
            return SchemaRecord(
                name=name,
                kind=SchemaKind.ARRAY,
                items=self.build(items if items is not None else {}, trail=trail),
                nullable=nullable,
                description=description,
            )

        if schema_type in PRIMITIVE_TYPES:
            enum_values = None
            if schema_type == "string" and _string_enum(node.get("enum")):
                enum_values = list(node["enum"])
            return SchemaRecord(
                name=name,
                kind=SchemaKind.PRIMITIVE,
                primitive_type=schema_type,
                enum_values=enum_values,
                format=node.get("format"),
                nullable=nullable,
                description=description,
            )

        if schema_type is None or schema_type == "null":
            return SchemaRecord(
                name=name,
                kind=SchemaKind.UNKNOWN,
                nullable=nullable or schema_type == "null",
                description=description,
            )

        return SchemaRecord(
            name=name,
            kind=SchemaKind.UNKNOWN,
            nullable=nullable,
            description=description,
            unsupported=f"неподдерживаемый тип {schema_type!r}",
        )

    def _build_reference(
        self, node: jsonref.JsonRef, name: str, trail: Tuple[str, ...]
    ) -> SchemaRecord:
        pointer = node.__reference__["$ref"]
        target = self._subject(node)
        nullable = bool(node.__reference__.get("nullable", False))

        schema_name = self._schema_name_for(pointer)
        if schema_name is not None:
            return SchemaRecord(
                name=name,
                kind=SchemaKind.REFERENCE,
                ref=schema_name,
                nullable=nullable,
            )

        if pointer in trail:
            return SchemaRecord(
                name=name,
                kind=SchemaKind.UNKNOWN,
                unsupported=f"циклическая ссылка {pointer}",
            )
        return self.build(target, name=name, trail=trail + (pointer,))

    def _build_object(
        self, node: Mapping, name: str, trail: Tuple[str, ...], nullable: bool
    ) -> SchemaRecord:
        properties = {
            prop: self.build(schema, trail=trail)
            for prop, schema in (node.get("properties") or {}).items()
        }
        required = frozenset(
            prop for prop in (node.get("required") or []) if prop in properties
        )

        additional = None
        raw_additional = node.get("additionalProperties")
        if raw_additional is True:
            additional = SchemaRecord(kind=SchemaKind.UNKNOWN)
        elif raw_additional not in (None, False):
            additional = self.build(raw_additional, trail=trail)

        return SchemaRecord(
            name=name,
            kind=SchemaKind.OBJECT,
            properties=properties,
            required=required,
            additional=additional,
            nullable=nullable,
            description=node.get("description"),
        )

    def _object_parts(
        self, record: SchemaRecord
    ) -> Optional[Tuple[Dict[str, SchemaRecord], FrozenSet[str]]]:
        """Свойства участника allOf; None, если слияние невозможно"""
        if record.kind == SchemaKind.REFERENCE:
            if record.ref in self._building:
                return None
            record = self.named_record(record.ref)
            return self._object_parts(record)
        if record.kind == SchemaKind.OBJECT:
            return dict(record.properties), record.required
        return {}, frozenset()

    def _build_all_of(
        self, node: Mapping, name: str, trail: Tuple[str, ...]
    ) -> SchemaRecord:
        members = [self.build(member, trail=trail) for member in node["allOf"]]
        own_keys = set(node) - {"allOf", "description", "nullable", "title"}

        # allOf из одного элемента обычно лишь оборачивает ссылку
        if len(members) == 1 and not own_keys:
            update = {"name": name}
            if node.get("nullable"):
                update["nullable"] = True
            return members[0].model_copy(update=update)

        properties: Dict[str, SchemaRecord] = {}
        required: set = set()
        for member in members:
            parts = self._object_parts(member)
            if parts is None:
                return SchemaRecord(
                    name=name,
                    kind=SchemaKind.UNKNOWN,
                    unsupported=f"циклическое наследование через {member.ref}",
                )
            member_properties, member_required = parts
            properties.update(member_properties)
            required |= member_required

        if own_keys & {"properties", "required", "type"}:
            own = self._build_object(node, "", trail, False)
            properties.update(own.properties)
            required |= set(node.get("required") or [])

        return SchemaRecord(
            name=name,
            kind=SchemaKind.OBJECT,
            properties=properties,
            required=frozenset(r for r in required if r in properties),
            nullable=bool(node.get("nullable", False)),
            description=node.get("description"),
        )

    def _build_union(
        self, node: Mapping, name: str, trail: Tuple[str, ...]
    ) -> SchemaRecord:
        raw_variants = node.get("oneOf") or node.get("anyOf") or []
        nullable = bool(node.get("nullable", False))
        variants = []
        for raw in raw_variants:
            if type(raw) is not jsonref.JsonRef and isinstance(raw, Mapping):
                if raw.get("type") == "null":
                    nullable = True
                    continue
            variants.append(self.build(raw, trail=trail))

        if len(variants) == 1:
            return variants[0].model_copy(
                update={"name": name, "nullable": nullable or variants[0].nullable}
            )
        if not variants:
            return SchemaRecord(name=name, kind=SchemaKind.UNKNOWN, nullable=nullable)

        return SchemaRecord(
            name=name,
            kind=SchemaKind.UNION,
            variants=variants,
            nullable=nullable,
            description=node.get("description"),
        )


def _string_enum(values: Any) -> bool:
    return (
        isinstance(values, list)
        and bool(values)
        and all(isinstance(v, str) for v in values)
    )
