from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict


ARTIFACT_KINDS: Tuple[str, ...] = (
    "types",
    "schemas",
    "services",
    "views",
    "hooks",
    "components",
    "mocks",
    "fixtures",
)

HTTP_VERBS: Tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")


class SchemaKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    PRIMITIVE = "primitive"
    REFERENCE = "reference"
    UNION = "union"
    UNKNOWN = "unknown"


class SchemaRecord(BaseModel):
    """Плоское описание схемы.

    Для вложенных (анонимных) схем name пустой. Ссылка на именованную схему
    хранится как запись вида REFERENCE с заполненным ref, сама цель
    достается через SchemaIndex.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    kind: SchemaKind
    primitive_type: Optional[str] = None
    properties: Dict[str, "SchemaRecord"] = {}
    required: FrozenSet[str] = frozenset()
    items: Optional["SchemaRecord"] = None
    ref: Optional[str] = None
    enum_values: Optional[List[str]] = None
    format: Optional[str] = None
    nullable: bool = False
    variants: List["SchemaRecord"] = []
    additional: Optional["SchemaRecord"] = None
    description: Optional[str] = None
    unsupported: Optional[str] = None

    def is_optional(self, prop: str) -> bool:
        """Единое правило опциональности для типов и валидаторов"""
        return prop not in self.required

    @property
    def is_string(self) -> bool:
        return self.kind == SchemaKind.PRIMITIVE and self.primitive_type == "string"

    @property
    def is_numeric(self) -> bool:
        return self.kind == SchemaKind.PRIMITIVE and self.primitive_type in (
            "integer",
            "number",
        )

    @property
    def is_boolean(self) -> bool:
        return self.kind == SchemaKind.PRIMITIVE and self.primitive_type == "boolean"


SchemaRecord.model_rebuild()


class SchemaIndex:
    """Индекс именованных схем, порядок как в components.schemas"""

    def __init__(self, records: Optional[Dict[str, SchemaRecord]] = None):
        self._records: Dict[str, SchemaRecord] = dict(records or {})

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[SchemaRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def names(self) -> List[str]:
        return list(self._records)

    def get(self, name: str) -> Optional[SchemaRecord]:
        return self._records.get(name)

    def resolve(self, record: Optional[SchemaRecord]) -> Optional[SchemaRecord]:
        """Разворачивает цепочку ссылок до конечной записи"""
        seen = set()
        while record is not None and record.kind == SchemaKind.REFERENCE:
            if record.ref in seen:
                return None
            seen.add(record.ref)
            record = self._records.get(record.ref)
        return record

    def target_name(self, record: Optional[SchemaRecord]) -> Optional[str]:
        """Имя именованной схемы, на которую указывает запись"""
        if record is None:
            return None
        if record.kind == SchemaKind.REFERENCE:
            return record.ref
        if record.name and record.name in self._records:
            return record.name
        return None


class ParameterRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    location: str
    required: bool = False
    value_schema: Optional[SchemaRecord] = None
    description: Optional[str] = None


class OperationRecord(BaseModel):
    """Одна пара (путь, метод)"""

    model_config = ConfigDict(frozen=True)

    path: str
    verb: str
    group: str
    operation_id: str
    summary: Optional[str] = None
    description: Optional[str] = None
    path_params: List[ParameterRecord] = []
    query_params: List[ParameterRecord] = []
    request_body_schema: Optional[SchemaRecord] = None
    has_request_body: bool = False
    request_body_required: bool = True
    response_body_schema: Optional[SchemaRecord] = None
    issues: List[str] = []

    @property
    def key(self) -> str:
        return f"{self.group}.{self.operation_id}"

    @property
    def is_read(self) -> bool:
        return self.operation_id.startswith(("get", "list", "find"))


class GeneratedArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    path: str
    content: str


class GenerationWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    subject: str
    message: str

    def __str__(self):
        return f"{self.category} [{self.subject}]: {self.message}"


@dataclass
class ApiGraph:
    """Общий для всех генераторов граф схем и операций"""

    schemas: SchemaIndex
    operations: List[OperationRecord] = field(default_factory=list)
    title: str = "API"

    def operations_by_group(self) -> Dict[str, List[OperationRecord]]:
        groups: Dict[str, List[OperationRecord]] = {}
        for operation in self.operations:
            groups.setdefault(operation.group, []).append(operation)
        return groups


@dataclass
class GenerationResult:
    """Результат генерации: артефакты по логическому ключу и предупреждения"""

    artifacts: Dict[str, GeneratedArtifact] = field(default_factory=dict)
    warnings: List[GenerationWarning] = field(default_factory=list)

    def add(self, key: str, artifact: GeneratedArtifact) -> None:
        self.artifacts[key] = artifact

    def by_kind(self, kind: str) -> List[GeneratedArtifact]:
        return [a for a in self.artifacts.values() if a.kind == kind]

    def files(self) -> Dict[str, str]:
        return {a.path: a.content for a in self.artifacts.values()}
