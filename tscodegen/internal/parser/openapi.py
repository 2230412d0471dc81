from typing import Any, Dict, List

from ..types.models import ApiGraph, GenerationWarning
from .endpoints import EndpointGrouper
from .schema_graph import SchemaGraphReader


class OpenApiParser:
    """Парсер OpenAPI спецификации в граф схем и операций"""

    def __init__(self, openapi_dict: Dict[str, Any], default_tag: str = "Default"):
        self.openapi_dict = openapi_dict
        self.default_tag = default_tag
        self.warnings: List[GenerationWarning] = []

    def parse(self) -> ApiGraph:
        """Парсинг OpenAPI в ApiGraph"""
        reader = SchemaGraphReader(self.openapi_dict)
        schemas = reader.read()

        grouper = EndpointGrouper(reader, default_tag=self.default_tag)
        operations = grouper.group()
        self.warnings = list(grouper.warnings)

        info = self.openapi_dict.get("info") or {}
        return ApiGraph(
            schemas=schemas,
            operations=operations,
            title=str(info.get("title") or "API"),
        )
