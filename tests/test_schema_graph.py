"""
Тесты чтения графа схем
"""

import pytest

from tscodegen.errors import SpecError
from tscodegen.internal.parser.schema_graph import SchemaGraphReader
from tscodegen.internal.types.models import SchemaKind


def read(schemas):
    return SchemaGraphReader({"components": {"schemas": schemas}}).read()


class TestSchemaGraphReader:
    """Построение SchemaRecord"""

    def test_object_with_required(self, store_spec):
        index = SchemaGraphReader(store_spec).read()
        product = index.get("Product")

        assert product.kind == SchemaKind.OBJECT
        assert product.name == "Product"
        assert product.description == "Товар каталога"
        assert not product.is_optional("id")
        assert product.is_optional("tags")
        assert product.properties["status"].kind == SchemaKind.REFERENCE
        assert product.properties["status"].ref == "Status"
        assert product.properties["note"].nullable

    def test_order_follows_document(self, store_spec):
        index = SchemaGraphReader(store_spec).read()
        assert index.names()[:3] == ["Status", "Category", "Product"]

    def test_string_enum(self, store_spec):
        status = SchemaGraphReader(store_spec).read().get("Status")
        assert status.is_string
        assert status.enum_values == ["draft", "published", "archived"]

    def test_self_reference_is_not_expanded(self, store_spec):
        category = SchemaGraphReader(store_spec).read().get("Category")
        parent = category.properties["parent"]
        assert parent.kind == SchemaKind.REFERENCE
        assert parent.ref == "Category"

    def test_all_of_merges_properties(self, store_spec):
        record = SchemaGraphReader(store_spec).read().get("ProductInput")

        assert record.kind == SchemaKind.OBJECT
        assert list(record.properties) == ["id", "title", "parent", "sku"]
        assert record.required == frozenset({"id", "title", "sku"})

    def test_single_all_of_passes_reference_through(self):
        index = read(
            {
                "Base": {"type": "object", "properties": {"a": {"type": "string"}}},
                "Holder": {
                    "type": "object",
                    "properties": {
                        "base": {"allOf": [{"$ref": "#/components/schemas/Base"}]}
                    },
                },
            }
        )
        base = index.get("Holder").properties["base"]
        assert base.kind == SchemaKind.REFERENCE
        assert base.ref == "Base"

    def test_nullable_forms(self):
        one_of = {"oneOf": [{"type": "integer"}, {"type": "null"}]}
        index = read(
            {
                "A": {
                    "type": "object",
                    "properties": {
                        "list_form": {"type": ["string", "null"]},
                        "one_of_form": one_of,
                    },
                }
            }
        )
        props = index.get("A").properties
        assert props["list_form"].is_string and props["list_form"].nullable
        assert props["one_of_form"].is_numeric and props["one_of_form"].nullable

    def test_union(self):
        index = read(
            {
                "Cat": {"type": "object", "properties": {"meow": {"type": "boolean"}}},
                "Dog": {"type": "object", "properties": {"bark": {"type": "boolean"}}},
                "Pet": {
                    "oneOf": [
                        {"$ref": "#/components/schemas/Cat"},
                        {"$ref": "#/components/schemas/Dog"},
                    ]
                },
            }
        )
        pet = index.get("Pet")
        assert pet.kind == SchemaKind.UNION
        assert [v.ref for v in pet.variants] == ["Cat", "Dog"]

    def test_map_shaped_object(self):
        counters = {"type": "object", "additionalProperties": {"type": "integer"}}
        index = read({"Counters": counters})
        counters = index.get("Counters")
        assert counters.kind == SchemaKind.OBJECT
        assert counters.additional.is_numeric

    def test_unsupported_type_is_marked(self):
        record = read({"Blob": {"type": "file"}}).get("Blob")
        assert record.kind == SchemaKind.UNKNOWN
        assert record.unsupported


class TestSpecErrors:
    """Фатальные ошибки спецификации"""

    def test_missing_components(self):
        with pytest.raises(SpecError):
            SchemaGraphReader({"openapi": "3.0.0", "paths": {}})

    def test_not_a_mapping(self):
        with pytest.raises(SpecError):
            SchemaGraphReader(["not", "a", "spec"])

    def test_unresolvable_reference(self):
        with pytest.raises(SpecError):
            read(
                {
                    "A": {
                        "type": "object",
                        "properties": {"b": {"$ref": "#/components/schemas/Missing"}},
                    }
                }
            )

    def test_remote_reference_is_rejected(self):
        remote = {"$ref": "http://example.com/schemas.json#/B"}
        with pytest.raises(SpecError):
            read({"A": {"type": "object", "properties": {"b": remote}}})
