"""
Тесты отображения схем в TypeScript и zod
"""

from tscodegen.internal.generator.typescript import TypeMapper, quote
from tscodegen.internal.parser.schema_graph import SchemaGraphReader
from tscodegen.internal.types.models import SchemaKind, SchemaRecord


class TestTypeMapper:
    """Выражения типов и валидаторов"""

    def test_optionality_agreement(self, store_spec):
        """Тип и валидатор помечают одни и те же поля как необязательные"""
        index = SchemaGraphReader(store_spec).read()
        mapper = TypeMapper(index)

        for record in index:
            if record.kind != SchemaKind.OBJECT:
                continue
            ts_optional = {
                key for key, optional, _ in mapper.ts_fields(record) if optional
            }
            zod_optional = {
                field.split(":", 1)[0]
                for field in mapper.zod_fields(record)
                if field.endswith(".optional()")
            }
            assert ts_optional == zod_optional

    def test_primitive_types(self):
        mapper = TypeMapper(SchemaGraphReader({"components": {"schemas": {}}}).read())
        integer = SchemaRecord(kind=SchemaKind.PRIMITIVE, primitive_type="integer")
        email = SchemaRecord(
            kind=SchemaKind.PRIMITIVE, primitive_type="string", format="email"
        )

        assert mapper.ts_type(integer) == "number"
        assert mapper.zod(integer) == "z.number().int()"
        assert mapper.zod(email) == "z.string().email()"

    def test_nullable_and_arrays(self, store_spec):
        index = SchemaGraphReader(store_spec).read()
        mapper = TypeMapper(index)
        product = index.get("Product")

        assert mapper.ts_type(product.properties["note"]) == "string | null"
        assert mapper.zod(product.properties["note"]) == "z.string().nullable()"
        assert mapper.ts_type(product.properties["tags"]) == "string[]"
        category = mapper.zod(product.properties["category"])
        assert category == "z.lazy(() => CategorySchema)"

    def test_enum_union_and_named_enum(self, store_spec):
        index = SchemaGraphReader(store_spec).read()
        expected = "'draft' | 'published' | 'archived'"

        assert TypeMapper(index).ts_type(index.get("Status")) == expected
        assert not TypeMapper(index).is_named_enum("Status")
        assert TypeMapper(index, enum_as_union=False).is_named_enum("Status")

    def test_nullable_enum_is_not_named(self, store_spec):
        """У enum TypeScript нет значения null, поэтому остается объединение"""
        store_spec["components"]["schemas"]["Status"]["nullable"] = True
        index = SchemaGraphReader(store_spec).read()
        mapper = TypeMapper(index, enum_as_union=False)

        assert not mapper.is_named_enum("Status")
        assert mapper.ts_type(index.get("Status")).endswith(" | null")

    def test_record_type(self):
        schema = {"type": "object", "additionalProperties": {"type": "string"}}
        index = SchemaGraphReader({"components": {"schemas": {"M": schema}}}).read()
        mapper = TypeMapper(index)
        assert mapper.ts_type(index.get("M")) == "Record<string, string>"
        assert mapper.zod(index.get("M")) == "z.record(z.string(), z.string())"

    def test_quote_escapes(self):
        assert quote("it's") == "'it\\'s'"
