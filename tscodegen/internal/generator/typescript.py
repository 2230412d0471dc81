"""
Отображение SchemaRecord в выражения типов TypeScript и вызовы zod
"""

from typing import List, Optional, Set, Tuple

from ..types.models import SchemaIndex, SchemaKind, SchemaRecord
from ..utils import property_key, type_name

DATE_PATTERN = r"/^\d{4}-\d{2}-\d{2}$/"

STRING_FORMATS = {
    "email": ".email()",
    "date": f".regex({DATE_PATTERN})",
    "date-time": ".datetime({ offset: true })",
    "uuid": ".uuid()",
    "uri": ".url()",
    "url": ".url()",
}


def quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


class TypeMapper:
    """Общий обход записи для типов и валидаторов.

    Оба генератора используют SchemaRecord.is_optional, поэтому набор
    необязательных полей у них всегда совпадает.
    """

    def __init__(self, index: SchemaIndex, enum_as_union: bool = True):
        self.index = index
        self.enum_as_union = enum_as_union

    def is_named_enum(self, name: str) -> bool:
        """Схема выводится как enum TypeScript, а не как объединение литералов.

        Nullable-перечисление остается объединением с null, у enum нет
        значения null. Все генераторы опираются на этот метод.
        """
        record = self.index.get(name)
        return (
            not self.enum_as_union
            and record is not None
            and record.is_string
            and bool(record.enum_values)
            and not record.nullable
        )

    def ts_type(self, record: Optional[SchemaRecord]) -> str:
        if record is None:
            return "unknown"
        result = self._ts_base(record)
        if record.nullable and result != "unknown":
            result = f"{result} | null"
        return result

    def _ts_base(self, record: SchemaRecord) -> str:
        kind = record.kind
        if kind == SchemaKind.REFERENCE:
            return type_name(record.ref)
        if kind == SchemaKind.ARRAY:
            item = self.ts_type(record.items)
            if "|" in item or "&" in item:
                item = f"({item})"
            return f"{item}[]"
        if kind == SchemaKind.OBJECT:
            return self._ts_object(record)
        if kind == SchemaKind.PRIMITIVE:
            if record.enum_values:
                return " | ".join(quote(v) for v in record.enum_values)
            if record.primitive_type in ("integer", "number"):
                return "number"
            return record.primitive_type
        if kind == SchemaKind.UNION:
            return " | ".join(self.ts_type(v) for v in record.variants)
        return "unknown"

    def _ts_object(self, record: SchemaRecord) -> str:
        if not record.properties:
            if record.additional is not None:
                return f"Record<string, {self.ts_type(record.additional)}>"
            return "Record<string, unknown>"
        fields = [
            f"{key}{'?' if optional else ''}: {ts_type}"
            for key, optional, ts_type in self.ts_fields(record)
        ]
        return "{ " + "; ".join(fields) + " }"

    def zod(self, record: Optional[SchemaRecord]) -> str:
        if record is None:
            return "z.unknown()"
        result = self._zod_base(record)
        if record.nullable and result != "z.unknown()":
            result += ".nullable()"
        return result

    def _zod_base(self, record: SchemaRecord) -> str:
        kind = record.kind
        if kind == SchemaKind.REFERENCE:
            return f"z.lazy(() => {type_name(record.ref)}Schema)"
        if kind == SchemaKind.ARRAY:
            return f"z.array({self.zod(record.items)})"
        if kind == SchemaKind.OBJECT:
            return self._zod_object(record)
        if kind == SchemaKind.PRIMITIVE:
            if record.enum_values:
                values = ", ".join(quote(v) for v in record.enum_values)
                return f"z.enum([{values}])"
            if record.primitive_type == "integer":
                return "z.number().int()"
            if record.primitive_type == "number":
                return "z.number()"
            if record.primitive_type == "boolean":
                return "z.boolean()"
            return "z.string()" + STRING_FORMATS.get(record.format or "", "")
        if kind == SchemaKind.UNION:
            return "z.union([" + ", ".join(self.zod(v) for v in record.variants) + "])"
        return "z.unknown()"

    def _zod_object(self, record: SchemaRecord) -> str:
        if not record.properties:
            value = self.zod(record.additional) if record.additional else "z.unknown()"
            return f"z.record(z.string(), {value})"
        return "z.object({ " + ", ".join(self.zod_fields(record)) + " })"

    def zod_fields(self, record: SchemaRecord) -> List[str]:
        fields = []
        for prop, schema in record.properties.items():
            suffix = ".optional()" if record.is_optional(prop) else ""
            fields.append(f"{property_key(prop)}: {self.zod(schema)}{suffix}")
        return fields

    def ts_fields(self, record: SchemaRecord) -> List[Tuple[str, bool, str]]:
        return [
            (property_key(prop), record.is_optional(prop), self.ts_type(schema))
            for prop, schema in record.properties.items()
        ]


def referenced_names(record: Optional[SchemaRecord]) -> List[str]:
    """Имена схем, на которые ссылается запись, в порядке появления"""
    found: List[str] = []

    def walk(node: Optional[SchemaRecord]):
        if node is None:
            return
        if node.kind == SchemaKind.REFERENCE:
            if node.ref not in found:
                found.append(node.ref)
            return
        for child in node.properties.values():
            walk(child)
        walk(node.items)
        walk(node.additional)
        for variant in node.variants:
            walk(variant)

    walk(record)
    return found


def unsupported_reasons(record: SchemaRecord) -> List[str]:
    """Причины неподдерживаемых вложенных узлов с путями до них"""
    reasons: List[str] = []

    def walk(node: Optional[SchemaRecord], path: str, seen: Set[int]):
        if node is None or id(node) in seen:
            return
        seen = seen | {id(node)}
        if node.unsupported:
            reasons.append(f"{path or '<root>'}: {node.unsupported}")
        for prop, child in node.properties.items():
            walk(child, f"{path}.{prop}" if path else prop, seen)
        walk(node.items, f"{path}[]", seen)
        walk(node.additional, f"{path}{{*}}", seen)
        for variant in node.variants:
            walk(variant, path, seen)

    walk(record, "", set())
    return reasons


def comment_text(text: Optional[str]) -> Optional[str]:
    """Однострочный текст для комментария /** ... */"""
    if not text:
        return None
    return " ".join(str(text).split()).replace("*/", "* /")
