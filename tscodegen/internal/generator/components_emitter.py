"""
Генерация каркасов React-компонентов: списки, карточки, формы
"""

import posixpath
import re
from typing import Dict, List, Optional

from ..types.models import GeneratedArtifact, SchemaKind, SchemaRecord
from ..utils import to_kebab_case, to_label, type_name
from .classification import ComponentClassification
from .context import EmitContext, schema_module
from .typescript import quote
from .views_emitter import property_access

LIST_COLUMNS = 5

DATE_WIDGETS = {
    "date": "date",
    "date-time": "datetime-local",
    "email": "email",
}

JSX_UNSAFE_RE = re.compile(r"[{}<>]")


def jsx_text(value: str) -> str:
    return JSX_UNSAFE_RE.sub("", value)


class ComponentsEmitter:
    """Классификация схем по операциям, затем генерация каркасов"""

    kind = "components"

    def __init__(self, context: EmitContext):
        self.context = context

    def _dir(self, family: str) -> str:
        return posixpath.join(self.context.config.path_for(self.kind), family)

    def _imports(self, family: str, name: str) -> Dict[str, str]:
        config = self.context.config
        module = schema_module(name)
        here = self._dir(family)
        return {
            "type_path": self.context.import_path(
                here, config.path_for("types"), module
            ),
            "schema_path": self.context.import_path(
                here, config.path_for("schemas"), f"{module}.schema"
            ),
        }

    def widget_for(self, schema: SchemaRecord) -> Optional[str]:
        """Тип поля формы по типу и формату свойства, None для составных"""
        target = self.context.graph.schemas.resolve(schema)
        if target is None or target.kind != SchemaKind.PRIMITIVE:
            return None
        if target.enum_values:
            return "select"
        if target.is_boolean:
            return "checkbox"
        if target.is_numeric:
            return "number"
        return DATE_WIDGETS.get(target.format or "", "text")

    def form_field(self, name: str, record: SchemaRecord, prop: str) -> Optional[dict]:
        schema = record.properties[prop]
        widget = self.widget_for(schema)
        if widget is None:
            return None
        target = self.context.graph.schemas.resolve(schema)
        return {
            "widget": widget,
            "id": f"{to_kebab_case(type_name(name))}-{to_kebab_case(prop) or 'field'}",
            "key": quote(prop),
            "label": jsx_text(to_label(prop)),
            "required": not record.is_optional(prop),
            "options": [
                {"value": quote(value), "label": jsx_text(value)}
                for value in (target.enum_values or [])
            ],
            "numeric": widget == "number",
            "access": property_access(prop),
        }

    def emit_list(self, name: str, record: SchemaRecord) -> str:
        return self.context.renderer.render(
            "list_component",
            {
                "name": type_name(name),
                "type_path": self._imports("lists", name)["type_path"],
                "css": schema_module(name),
                "columns": [
                    {"label": jsx_text(to_label(prop)), "access": property_access(prop)}
                    for prop in list(record.properties)[:LIST_COLUMNS]
                ],
                "row_key": "item.id" if "id" in record.properties else "index",
            },
        )

    def emit_card(self, name: str, record: SchemaRecord) -> str:
        return self.context.renderer.render(
            "card_component",
            {
                "name": type_name(name),
                "type_path": self._imports("cards", name)["type_path"],
                "css": schema_module(name),
                "fields": [
                    {"label": jsx_text(to_label(prop)), "access": property_access(prop)}
                    for prop in record.properties
                ],
            },
        )

    def emit_form(self, name: str, record: SchemaRecord, mode: str) -> str:
        fields = [self.form_field(name, record, prop) for prop in record.properties]
        suffix = "EditForm" if mode == "edit" else "CreateForm"
        variables = {
            "name": type_name(name),
            "component": f"{type_name(name)}{suffix}",
            "mode": mode,
            "submit_label": "Save" if mode == "edit" else "Create",
            "css": schema_module(name),
            "fields": [f for f in fields if f is not None],
        }
        variables.update(self._imports("forms", name))
        return self.context.renderer.render("form_component", variables)

    def emit(self) -> Dict[str, GeneratedArtifact]:
        config = self.context.config
        index = self.context.graph.schemas
        classification = ComponentClassification.from_graph(self.context.graph)
        artifacts: Dict[str, GeneratedArtifact] = {}
        modules: List[str] = []

        def add(name: str, role: str, family: str, content: str):
            module = f"{family}/{schema_module(name)}-{role}"
            modules.append(module)
            artifacts[f"component:{type_name(name)}:{role}"] = self.context.artifact(
                self.kind, self.context.path(self.kind, f"{module}.tsx"), content
            )

        if config.generate_lists:
            for name in classification.lists:
                add(name, "list", "lists", self.emit_list(name, index.get(name)))
                if config.generate_cards:
                    add(name, "card", "cards", self.emit_card(name, index.get(name)))

        if config.generate_forms:
            for name in classification.create_forms:
                content = self.emit_form(name, index.get(name), "create")
                add(name, "create-form", "forms", content)
            for name in classification.edit_forms:
                content = self.emit_form(name, index.get(name), "edit")
                add(name, "edit-form", "forms", content)

        artifacts["components:index"] = self.context.artifact(
            self.kind,
            self.context.path(self.kind, "index.ts"),
            self.context.renderer.render("barrel", {"modules": modules}),
        )
        return artifacts
