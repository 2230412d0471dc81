"""
Тесты группировки операций
"""

import pytest

from tscodegen.internal.parser.endpoints import derive_operation_id
from tscodegen.internal.parser.openapi import OpenApiParser


def parse(paths, schemas=None):
    parser = OpenApiParser({"components": {"schemas": schemas or {}}, "paths": paths})
    return parser, parser.parse()


def find_operation(graph, operation_id):
    return next(op for op in graph.operations if op.operation_id == operation_id)


class TestDeriveOperationId:
    """Вывод имени операции по пути"""

    @pytest.mark.parametrize(
        "verb, path, expected",
        [
            ("GET", "/widgets", "listWidgets"),
            ("GET", "/widgets/{id}", "getWidget"),
            ("POST", "/widgets", "createWidget"),
            ("PUT", "/widgets/{id}", "updateWidget"),
            ("PATCH", "/widgets/{id}", "patchWidget"),
            ("DELETE", "/widgets/{id}", "deleteWidget"),
            ("GET", "/categories", "listCategories"),
            ("POST", "/categories", "createCategory"),
            ("GET", "/", "listRoot"),
        ],
    )
    def test_derivation(self, verb, path, expected):
        assert derive_operation_id(verb, path) == expected


class TestEndpointGrouper:
    """Построение OperationRecord"""

    def test_groups_by_first_tag(self, store_spec):
        graph = OpenApiParser(store_spec).parse()
        groups = graph.operations_by_group()

        assert list(groups) == ["products", "categories"]
        assert [op.operation_id for op in groups["products"]] == [
            "listProducts",
            "createProduct",
            "getProduct",
            "updateProduct",
            "deleteProduct",
        ]

    def test_default_tag(self, widget_spec):
        graph = OpenApiParser(widget_spec, default_tag="Api").parse()
        assert graph.operations[0].group == "Api"
        assert graph.title == "Widget API"

    def test_explicit_operation_id_is_camel_cased(self):
        _, graph = parse(
            {"/x": {"get": {"operationId": "fetch_all_things", "responses": {}}}}
        )
        assert graph.operations[0].operation_id == "fetchAllThings"

    def test_collisions_get_suffix_and_warning(self):
        parser, graph = parse(
            {
                "/a/{id}/items": {"get": {"responses": {}}},
                "/b/{id}/items": {"get": {"responses": {}}},
                "/c/{id}/items": {"get": {"responses": {}}},
            }
        )
        ids = [op.operation_id for op in graph.operations]

        assert ids == ["listItems", "listItems2", "listItems3"]
        assert len(set(ids)) == len(ids)
        assert [w.category for w in parser.warnings] == ["OperationIdCollision"] * 2

    def test_path_level_parameters_are_merged(self, store_spec):
        graph = OpenApiParser(store_spec).parse()
        get_product = find_operation(graph, "getProduct")

        assert [p.name for p in get_product.path_params] == ["productId"]
        assert get_product.path_params[0].required
        assert get_product.path_params[0].value_schema.is_numeric

    def test_operation_parameter_overrides_path_level(self):
        common = {"name": "q", "in": "query", "schema": {"type": "string"}}
        own = dict(common, required=True, schema={"type": "integer"})
        _, graph = parse(
            {
                "/items": {
                    "parameters": [common],
                    "get": {"parameters": [own], "responses": {}},
                }
            }
        )
        (query,) = graph.operations[0].query_params
        assert query.required
        assert query.value_schema.is_numeric

    def test_undeclared_placeholder_is_added(self):
        _, graph = parse({"/items/{itemId}": {"delete": {"responses": {}}}})
        (param,) = graph.operations[0].path_params
        assert param.name == "itemId"
        assert param.required
        assert param.value_schema is None

    def test_request_body_required_defaults_to_true(self, store_spec):
        graph = OpenApiParser(store_spec).parse()
        create = find_operation(graph, "createProduct")

        assert create.has_request_body
        assert create.request_body_required
        assert create.request_body_schema.ref == "Product"
        assert create.response_body_schema.ref == "Product"

    def test_non_json_body_is_reported(self):
        form = {"multipart/form-data": {"schema": {"type": "object"}}}
        _, graph = parse(
            {
                "/upload": {
                    "post": {
                        "requestBody": {"content": form},
                        "responses": {"200": {"description": "OK"}},
                    }
                }
            }
        )
        operation = graph.operations[0]
        assert operation.has_request_body
        assert operation.request_body_schema is None
        assert operation.issues

    def test_integer_response_codes(self):
        content = {"application/json": {"schema": {"type": "string"}}}
        _, graph = parse(
            {
                "/ping": {
                    "get": {
                        "responses": {201: {"description": "OK", "content": content}}
                    }
                }
            }
        )
        assert graph.operations[0].response_body_schema.is_string

    def test_component_references_are_followed(self):
        item = {"type": "object", "properties": {"id": {"type": "integer"}}}
        limit = {"name": "limit", "in": "query", "schema": {"type": "integer"}}
        item_ref = {"$ref": "#/components/schemas/Item"}
        spec = {
            "components": {
                "schemas": {"Item": item},
                "parameters": {"Limit": limit},
                "responses": {
                    "ItemResponse": {
                        "description": "OK",
                        "content": {"application/json": {"schema": item_ref}},
                    }
                },
            },
            "paths": {
                "/items": {
                    "get": {
                        "parameters": [{"$ref": "#/components/parameters/Limit"}],
                        "responses": {
                            "200": {"$ref": "#/components/responses/ItemResponse"}
                        },
                    }
                }
            },
        }
        operation = OpenApiParser(spec).parse().operations[0]
        assert [p.name for p in operation.query_params] == ["limit"]
        assert operation.response_body_schema.ref == "Item"
