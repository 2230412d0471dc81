"""
Тесты генератора TypeScript клиента
"""

import copy

import pytest

from tscodegen.config import GeneratorConfig
from tscodegen.errors import CodegenError, SpecError
from tscodegen.generator import Orchestrator, generate


class TestWidgetScenario:
    """Сквозной сценарий: одна схема Widget и один GET /widgets"""

    def test_type_has_required_fields(self, widget_spec):
        result = generate(widget_spec)
        content = result.artifacts["Widget:type"].content

        assert result.artifacts["Widget:type"].path == "types/widget.ts"
        assert "export interface Widget {" in content
        assert "  id: number;" in content
        assert "  name: string;" in content
        assert "?:" not in content

    def test_validator_requires_both_fields(self, widget_spec):
        content = generate(widget_spec).artifacts["Widget:schema"].content

        assert "import { z } from 'zod';" in content
        assert "import type { Widget } from '../types/widget';" in content
        assert "export const WidgetSchema: z.ZodType<Widget> = z.object({" in content
        assert "  id: z.number().int()," in content
        assert "  name: z.string()," in content
        assert ".optional()" not in content
        assert "export function isWidget(value: unknown): value is Widget {" in content

    def test_service_returns_wrapped_array(self, widget_spec):
        result = generate(widget_spec)
        content = result.artifacts["service:Default"].content

        assert result.artifacts["service:Default"].path == "services/default.service.ts"
        assert "export class DefaultService {" in content
        assert "async listWidgets(): Promise<ApiResult<Widget[]>> {" in content
        assert "import type { Widget } from '../types';" in content
        assert "return { status: 'success', data };" in content
        assert "export const defaultService = new DefaultService();" in content

    def test_list_component_references_widget(self, widget_spec):
        artifact = generate(widget_spec).artifacts["component:Widget:list"]

        assert artifact.path == "components/lists/widget-list.tsx"
        assert "import type { Widget } from '../../types/widget';" in artifact.content
        assert "export function WidgetList({" in artifact.content
        assert "<th>Id</th>" in artifact.content
        assert "<td colSpan={3}>No records</td>" in artifact.content
        assert "<tr key={item.id}>" in artifact.content

    def test_fixtures(self, widget_spec):
        content = generate(widget_spec).artifacts["Widget:fixtures"].content

        assert "export const WidgetFakeData: Widget[] = [" in content
        assert '"id": 1' in content
        signature = "generateWidgetFakeData(count = 1, depth = 0): Widget[] {"
        assert f"export function {signature}" in content
        assert "id: index + 1" in content

    def test_round_trip_determinism(self, widget_spec, store_spec):
        for spec in (widget_spec, store_spec):
            assert generate(spec).files() == generate(spec).files()


class TestOrchestrator:
    """Стадии, выбор видов и предупреждения"""

    def test_enabled_kinds(self, widget_spec):
        result = generate(widget_spec, ["types", "services"])
        kinds = {artifact.kind for artifact in result.artifacts.values()}
        assert kinds == {"types", "services"}

    def test_all_kinds_by_default(self, widget_spec):
        result = generate(widget_spec)
        kinds = {artifact.kind for artifact in result.artifacts.values()}
        assert kinds == {
            "types",
            "schemas",
            "services",
            "views",
            "hooks",
            "components",
            "mocks",
            "fixtures",
        }

    def test_unknown_kind(self, widget_spec):
        with pytest.raises(CodegenError):
            generate(widget_spec, ["types", "docs"])

    def test_events(self, widget_spec):
        events = []
        generate(
            widget_spec,
            ["types", "schemas"],
            on_event=lambda name, payload: events.append((name, payload)),
        )

        assert events == [
            ("generation_started", {"kind": "types"}),
            ("generation_completed", {"kind": "types", "count": 2}),
            ("generation_started", {"kind": "schemas"}),
            ("generation_completed", {"kind": "schemas", "count": 2}),
        ]

    def test_spec_error_is_fatal(self):
        with pytest.raises(SpecError):
            generate({"openapi": "3.0.0", "paths": {}})

    def test_unsupported_schema_falls_back(self, widget_spec):
        widget_spec["components"]["schemas"]["Blob"] = {"type": "file"}
        result = generate(widget_spec, ["types", "schemas"])

        assert "export type Blob = unknown;" in result.artifacts["Blob:type"].content
        schema = result.artifacts["Blob:schema"].content
        assert "export const BlobSchema: z.ZodType<Blob> = z.unknown();" in schema
        # Соседние схемы генерируются как обычно
        assert "export interface Widget {" in result.artifacts["Widget:type"].content
        assert [w.category for w in result.warnings] == ["SchemaEmitError"]
        assert result.warnings[0].subject == "Blob"

    def test_unresolvable_operation_body(self, widget_spec):
        csv = {"type": "string"}
        widget_spec["paths"]["/upload"] = {
            "post": {
                "requestBody": {"content": {"text/csv": {"schema": csv}}},
                "responses": {"200": {"description": "OK"}},
            }
        }
        result = generate(widget_spec, ["services"])
        content = result.artifacts["service:Default"].content

        signature = "createUpload(data: unknown): Promise<ApiResult<void>> {"
        assert f"async {signature}" in content
        assert [w.category for w in result.warnings] == ["OperationEmitError"]

    def test_list_and_create_form_for_same_schema(self, store_spec):
        result = generate(store_spec, ["components"])

        assert "component:Product:list" in result.artifacts
        assert "component:Product:card" in result.artifacts
        assert "component:Product:create-form" in result.artifacts
        assert "component:Product:edit-form" in result.artifacts
        assert "component:Category:list" in result.artifacts

    def test_config_is_passed_down(self, widget_spec):
        config = GeneratorConfig.from_dict({"paths": {"types": "src/types"}})
        result = Orchestrator(config).generate(widget_spec, ["types", "schemas"])

        assert result.artifacts["Widget:type"].path == "src/types/widget.ts"
        assert "from '../src/types/widget'" in result.artifacts["Widget:schema"].content


class TestStoreArtifacts:
    """Артефакты для спецификации с несколькими группами"""

    def test_service_methods(self, store_spec):
        result = generate(store_spec, ["services"])
        content = result.artifacts["service:products"].content
        product_id = "productId: number"

        assert "export class ProductsService {" in content
        assert "/** Список товаров */" in content
        assert (
            "async listProducts(page?: number, search?: string):"
            " Promise<ApiResult<PaginatedProducts>> {"
        ) in content
        assert "const url = buildUrl(`/products`, { page, search });" in content
        get_product = f"getProduct({product_id}): Promise<ApiResult<Product>> {{"
        assert f"async {get_product}" in content
        assert "`/products/${encodeURIComponent(String(productId))}`" in content
        assert (
            f"async updateProduct({product_id}, data: Product):"
            " Promise<ApiResult<void>> {"
        ) in content
        assert "this.transport.put<void>(url, data)" in content
        delete_product = f"deleteProduct({product_id}): Promise<ApiResult<void>> {{"
        assert f"async {delete_product}" in content

    def test_barrels(self, store_spec):
        result = generate(store_spec, ["types", "services"])

        assert "export * from './product';" in result.artifacts["types:index"].content
        services_index = result.artifacts["services:index"].content
        assert "export * from './api-client';" in services_index
        assert "export * from './products.service';" in services_index

    def test_hooks(self, store_spec):
        result = generate(store_spec, ["hooks"])
        artifact = result.artifacts["hooks:products"]
        content = artifact.content

        assert artifact.path == "hooks/use-products.ts"
        assert "from '@tanstack/react-query';" in content
        service_path = "'../services/products.service'"
        assert f"import {{ productsService }} from {service_path};" in content
        assert "export const productsQueryKey = 'Products';" in content
        assert (
            "export function useListProducts(page?: number, search?: string,"
            " options: QueryHookOptions = {}) {"
        ) in content
        assert "queryKey: [productsQueryKey, 'listProducts', page, search]," in content
        assert "enabled: options.enabled ?? true," in content
        mutation_options = "options: MutationHookOptions<Product> = {}"
        assert f"export function useCreateProduct({mutation_options}) {{" in content
        assert "mutationFn: async (variables: { data: Product }) =>" in content
        assert "productsService.createProduct(variables.data)" in content
        invalidate = "queryClient.invalidateQueries({ queryKey: [productsQueryKey] });"
        assert invalidate in content
        assert "hooks:query-cache" not in result.artifacts

    def test_hooks_without_react_query(self, store_spec):
        config = GeneratorConfig(use_react_query=False)
        result = generate(store_spec, ["hooks"], config)

        assert "from './query-cache';" in result.artifacts["hooks:products"].content
        assert result.artifacts["hooks:query-cache"].path == "hooks/query-cache.ts"

    def test_view_getters(self, store_spec):
        content = generate(store_spec, ["views"]).artifacts["Product:view"].content

        assert "export class ProductView {" in content
        assert "  get id(): number {\n    return this.source.id ?? 0;" in content
        assert "  get name(): string {\n    return this.source.name ?? '';" in content
        in_stock = "return this.source.inStock ?? false;"
        assert f"  get inStock(): boolean {{\n    {in_stock}" in content
        assert "  get tags(): string[] {\n    return this.source.tags ?? [];" in content
        assert "  get status(): Status | '' {" in content
        assert "  get category(): Partial<Category> {" in content
        assert "return ProductSchema.safeParse(this.source).success;" in content

    def test_views_skip_wrappers(self, store_spec):
        result = generate(store_spec, ["views"])

        assert "Product:view" in result.artifacts
        assert "ErrorResponse:view" not in result.artifacts
        assert "PaginatedProducts:view" not in result.artifacts
        assert "Status:view" not in result.artifacts

    def test_form_widgets(self, store_spec):
        result = generate(store_spec, ["components"])
        content = result.artifacts["component:Product:create-form"].content

        assert "export function ProductCreateForm({" in content
        assert "resolver: zodResolver(ProductSchema)," in content
        assert 'type="email"' in content
        assert 'type="date"' in content
        assert 'type="datetime-local"' in content
        assert 'type="checkbox"' in content
        assert "<option value='published'>published</option>" in content
        assert "{...register('price', { valueAsNumber: true })}" in content
        # Массивы и вложенные объекты не получают поля ввода
        assert "register('tags')" not in content
        assert "register('category')" not in content

    def test_named_enums(self, store_spec):
        config = GeneratorConfig(enum_as_union=False)
        result = generate(store_spec, ["types", "schemas", "fixtures"], config)

        assert "export enum Status {" in result.artifacts["Status:type"].content
        assert "  Published = 'published'," in result.artifacts["Status:type"].content
        assert "z.nativeEnum(Status)" in result.artifacts["Status:schema"].content
        fixtures = result.artifacts["Product:fixtures"].content
        assert " as unknown as Product[];" in fixtures

    def test_nullable_enum_stays_union(self, store_spec):
        store_spec["components"]["schemas"]["Status"]["nullable"] = True
        config = GeneratorConfig(enum_as_union=False)
        result = generate(store_spec, ["types", "schemas", "fixtures"], config)
        expected = "'draft' | 'published' | 'archived' | null"

        status_type = result.artifacts["Status:type"].content
        assert f"export type Status = {expected};" in status_type
        schema = result.artifacts["Status:schema"].content
        assert "z.nativeEnum" not in schema
        assert "import type { Status }" in schema
        assert "z.enum(['draft', 'published', 'archived']).nullable()" in schema
        fixtures = [a for a in result.artifacts.values() if a.kind == "fixtures"]
        assert fixtures
        assert all("Object.values(Status)" not in a.content for a in fixtures)


class TestHookNames:
    """Имена хуков уникальны среди всех групп"""

    SPEC = {
        "openapi": "3.0.0",
        "info": {"title": "Shop API", "version": "1.0.0"},
        "paths": {
            "/users": {
                "get": {
                    "tags": ["Users"],
                    "operationId": "listUsers",
                    "responses": {"200": {"description": "Пользователи"}},
                }
            },
            "/admin/users": {
                "get": {
                    "tags": ["Admin"],
                    "operationId": "listUsers",
                    "responses": {"200": {"description": "Пользователи"}},
                }
            },
            "/products": {
                "get": {
                    "tags": ["Products"],
                    "operationId": "listProducts",
                    "responses": {"200": {"description": "Товары"}},
                }
            },
        },
    }

    def _exported(self, content):
        return [
            line.split("(")[0].replace("export function ", "")
            for line in content.splitlines()
            if line.startswith("export function use")
        ]

    def test_shared_operation_gets_group_prefix(self):
        result = generate(copy.deepcopy(self.SPEC), ["hooks"])
        users = self._exported(result.artifacts["hooks:Users"].content)
        admin = self._exported(result.artifacts["hooks:Admin"].content)

        assert users == ["useUsersListUsers"]
        assert admin == ["useAdminListUsers"]

    def test_unique_operation_keeps_plain_name(self):
        result = generate(copy.deepcopy(self.SPEC), ["hooks"])
        products = self._exported(result.artifacts["hooks:Products"].content)

        assert products == ["useListProducts"]

    def test_exports_are_unique_across_index(self):
        result = generate(copy.deepcopy(self.SPEC), ["hooks"])
        names = []
        for key, artifact in result.artifacts.items():
            if key not in ("hooks:index", "hooks:options"):
                names.extend(self._exported(artifact.content))

        assert len(names) == len(set(names)) == 3
