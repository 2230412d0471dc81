"""
Построение тестовых данных по SchemaRecord.

build_instance дает детерминированные значения (одинаковые для одной и той
же позиции при каждом запуске), FactoryBuilder дает выражения
TypeScript со случайными значениями для генераторов fake-данных.
"""

import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from ..types.models import SchemaIndex, SchemaKind, SchemaRecord
from ..utils import property_key, split_words, to_label, type_name
from .typescript import quote

MAX_DEPTH = 3

BASE_DATE = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)

PERSON_NAMES = ["Alice Johnson", "Bob Smith", "Carol White", "David Brown", "Eva Green"]
COMPANY_NAMES = ["Acme Corp", "Globex", "Initech", "Umbrella Inc", "Stark Industries"]
LOREM = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua"
).split()

VOCABULARY = {
    "status": ["active", "pending", "inactive"],
    "type": ["standard", "premium", "basic"],
}

# Порядок важен: первое совпадение выигрывает
NAME_PATTERNS = (
    ("email", ("email",)),
    ("phone", ("phone",)),
    ("date", ("date", "time")),
    ("money", ("price", "amount", "cost", "total")),
    ("company", ("company", "organization")),
    ("name", ("name",)),
    ("text", ("description", "title", "bio", "summary", "comment")),
    ("status", ("status",)),
    ("type", ("type",)),
)


def classify_property(name: str) -> Optional[str]:
    """Категория значения по имени свойства.

    Для id и суффикса At используется разбиение на слова, остальные признаки ищутся
    подстрокой в имени в нижнем регистре.
    """
    if not name:
        return None
    words = [w.lower() for w in split_words(name)]
    if words and words[-1] in ("id", "uuid"):
        return "id"
    if len(words) > 1 and words[-1] == "at":
        return "date"
    lowered = name.lower()
    for category, needles in NAME_PATTERNS:
        if any(needle in lowered for needle in needles):
            return category
    return None


def _token(*parts: Any) -> str:
    digest = hashlib.sha1(":".join(str(p) for p in parts).encode("utf-8")).hexdigest()
    return digest[:8].upper()


def _datetime(position: int) -> datetime:
    return BASE_DATE - timedelta(days=position * 3, hours=position)


def _string_value(record: SchemaRecord, prop: str, position: int, owner: str) -> str:
    fmt = record.format or ""
    if fmt == "email":
        return f"user{position + 1}@example.com"
    if fmt == "date":
        return _datetime(position).strftime("%Y-%m-%d")
    if fmt == "date-time":
        return _datetime(position).strftime("%Y-%m-%dT%H:%M:%SZ")
    if fmt == "uuid":
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{owner}/{prop}/{position}"))
    if fmt in ("uri", "url"):
        return f"https://example.com/{owner.lower() or 'item'}/{position + 1}"

    category = classify_property(prop)
    if category == "email":
        return f"user{position + 1}@example.com"
    if category == "phone":
        return f"+1-555-{position + 1:04d}"
    if category == "date":
        return _datetime(position).strftime("%Y-%m-%dT%H:%M:%SZ")
    if category == "id":
        return f"ID-{_token(owner, prop, position)}"
    if category == "company":
        return COMPANY_NAMES[position % len(COMPANY_NAMES)]
    if category == "name":
        return PERSON_NAMES[position % len(PERSON_NAMES)]
    if category == "text":
        words = [LOREM[(position + k) % len(LOREM)] for k in range(8)]
        text = " ".join(words)
        return text[0].upper() + text[1:]
    if category in VOCABULARY:
        values = VOCABULARY[category]
        return values[position % len(values)]
    if prop:
        return f"{to_label(prop)} {position + 1}"
    return f"value-{position + 1}"


def _number_value(record: SchemaRecord, prop: str, position: int):
    category = classify_property(prop)
    if category == "id":
        return position + 1
    if category == "money":
        value = round(9.99 + (position * 37.5) % 990, 2)
        return int(value) if record.primitive_type == "integer" else value
    if record.primitive_type == "integer":
        return (position * 7) % 100 + 1
    return round(position * 1.5 + 1, 2)


def build_instance(
    record: Optional[SchemaRecord],
    index: SchemaIndex,
    position: int = 0,
    depth: int = 0,
    prop: str = "",
    owner: str = "",
) -> Any:
    """Детерминированный экземпляр схемы для позиции position"""
    if record is None or depth > MAX_DEPTH * 3:
        return None

    if record.kind == SchemaKind.REFERENCE:
        target = index.get(record.ref)
        return build_instance(target, index, position, depth + 1, prop, record.ref)

    if record.kind == SchemaKind.ARRAY:
        if depth >= MAX_DEPTH:
            return []
        return [
            build_instance(record.items, index, position + k, depth + 1, prop, owner)
            for k in range(position % 3 + 1)
        ]

    if record.enum_values:
        return record.enum_values[position % len(record.enum_values)]

    if record.kind == SchemaKind.PRIMITIVE:
        if record.is_boolean:
            return position % 2 == 0
        if record.is_numeric:
            return _number_value(record, prop, position)
        return _string_value(record, prop, position, owner)

    if record.kind == SchemaKind.OBJECT:
        result = {}
        for name, child in record.properties.items():
            # На глубине остаются только обязательные свойства
            if depth >= MAX_DEPTH and record.is_optional(name):
                continue
            result[name] = build_instance(
                child, index, position, depth + 1, name, owner
            )
        return result

    if record.kind == SchemaKind.UNION and record.variants:
        return build_instance(record.variants[0], index, position, depth, prop, owner)

    return None


def build_instances(name: str, index: SchemaIndex, count: int) -> List[Any]:
    record = index.get(name)
    return [
        build_instance(record, index, position, 0, "", name)
        for position in range(count)
    ]


STRING_FORMAT_FACTORIES = {
    "email": "fake.randomEmail()",
    "date": "fake.randomDay()",
    "date-time": "fake.randomDate()",
    "uuid": "fake.randomUuid()",
    "uri": "`https://example.com/${fake.randomToken(6).toLowerCase()}`",
    "url": "`https://example.com/${fake.randomToken(6).toLowerCase()}`",
}

STRING_CATEGORY_FACTORIES = {
    "email": "fake.randomEmail()",
    "phone": "fake.randomPhone()",
    "date": "fake.randomDate()",
    "id": "`ID-${fake.randomToken(8)}`",
    "company": "fake.pick(fake.COMPANY_NAMES)",
    "name": "fake.pick(fake.PERSON_NAMES)",
    "text": "fake.lorem(8)",
}


def _ts_list(values: List[str]) -> str:
    return "[" + ", ".join(quote(v) for v in values) + "]"


class FactoryBuilder:
    """Выражения TypeScript для случайных экземпляров схем"""

    def __init__(self, index: SchemaIndex, named_enums: Optional[set] = None):
        self.index = index
        self.named_enums = named_enums or set()
        self.dependencies: List[str] = []

    def _generator_call(self, name: str, count: str) -> str:
        if name not in self.dependencies:
            self.dependencies.append(name)
        return f"generate{type_name(name)}FakeData({count}, depth + 1)"

    def expression(
        self, record: Optional[SchemaRecord], prop: str = "", optional: bool = False
    ) -> str:
        if record is None:
            return "null"

        if record.kind == SchemaKind.REFERENCE:
            call = self._generator_call(record.ref, "1") + "[0]"
            return f"(depth < {MAX_DEPTH} ? {call} : undefined)" if optional else call

        if record.kind == SchemaKind.ARRAY:
            if record.items is not None and record.items.kind == SchemaKind.REFERENCE:
                call = self._generator_call(record.items.ref, "fake.randomInt(1, 3)")
                return f"(depth < {MAX_DEPTH} ? {call} : [])"
            item = self.expression(record.items, prop)
            return f"Array.from({{ length: fake.randomInt(1, 3) }}, () => {item})"

        if record.enum_values:
            if record.name and record.name in self.named_enums:
                return f"fake.pick(Object.values({type_name(record.name)}))"
            return f"fake.pick({_ts_list(record.enum_values)})"

        if record.kind == SchemaKind.PRIMITIVE:
            return self._primitive(record, prop)

        if record.kind == SchemaKind.OBJECT:
            if not record.properties:
                return "{}"
            fields = []
            for name, child in record.properties.items():
                value = self.expression(child, name, record.is_optional(name))
                fields.append(f"{property_key(name)}: {value}")
            return "{ " + ", ".join(fields) + " }"

        if record.kind == SchemaKind.UNION and record.variants:
            return self.expression(record.variants[0], prop, optional)

        return "null"

    def _primitive(self, record: SchemaRecord, prop: str) -> str:
        if record.is_boolean:
            return "Math.random() < 0.5"

        category = classify_property(prop)
        if record.is_numeric:
            integer = record.primitive_type == "integer"
            if category == "id":
                return "index + 1"
            if category == "money":
                if integer:
                    return "fake.randomInt(1, 1000)"
                return "fake.randomNumber(1, 1000)"
            return "fake.randomInt(1, 100)" if integer else "fake.randomNumber(0, 100)"

        if record.format in STRING_FORMAT_FACTORIES:
            return STRING_FORMAT_FACTORIES[record.format]
        if category in STRING_CATEGORY_FACTORIES:
            return STRING_CATEGORY_FACTORIES[category]
        if category in VOCABULARY:
            return f"fake.pick({_ts_list(VOCABULARY[category])})"
        return "fake.lorem(2)"
