"""
Конфигурация генератора
"""

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

import toml

from .errors import CodegenError

CONFIG_FILE_NAME = "tscodegen.toml"

RESERVED_SECTIONS = ("paths", "templates", "options")

DEFAULT_PATHS: Dict[str, str] = {
    "types": "types",
    "schemas": "schemas",
    "services": "services",
    "views": "views",
    "hooks": "hooks",
    "components": "components",
    "mocks": "mocks",
    "fixtures": "fakes-data",
}


@dataclass
class GeneratorConfig:
    """Конфигурация генератора TypeScript-клиента"""

    paths: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PATHS))
    templates: Dict[str, str] = field(default_factory=dict)
    enum_as_union: bool = True
    use_react_query: bool = True
    generate_forms: bool = True
    generate_lists: bool = True
    generate_cards: bool = True
    fixture_count: int = 5
    mock_seed_count: int = 3
    mock_port: int = 3001
    default_tag: str = "Default"
    base_url: str = ""

    def path_for(self, kind: str) -> str:
        return self.paths.get(kind) or DEFAULT_PATHS[kind]

    @classmethod
    def option_names(cls) -> set:
        return {f.name for f in fields(cls)} - {"paths", "templates"}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Создание конфигурации из словаря (секции paths, templates, options)"""
        return cls().merged(data)

    def merged(self, overrides: Optional[Dict[str, Any]]) -> "GeneratorConfig":
        """Новая конфигурация с наложенными переопределениями"""
        if not overrides:
            return replace(self, paths=dict(self.paths), templates=dict(self.templates))

        paths = dict(self.paths)
        for kind, path in (overrides.get("paths") or {}).items():
            if kind not in DEFAULT_PATHS:
                raise CodegenError(f"неизвестный вид артефактов в paths: {kind}")
            paths[kind] = str(path)

        templates = dict(self.templates)
        for key, value in (overrides.get("templates") or {}).items():
            templates[key] = str(value)

        options = dict(overrides.get("options") or {})
        # Допускаются и опции верхнего уровня
        options.update(
            {k: v for k, v in overrides.items() if k not in RESERVED_SECTIONS}
        )
        unknown = set(options) - self.option_names()
        if unknown:
            names = ", ".join(sorted(unknown))
            raise CodegenError(f"неизвестные опции конфигурации: {names}")

        return replace(self, paths=paths, templates=templates, **options)

    @classmethod
    def from_file(
        cls, config_path: str = CONFIG_FILE_NAME, search_dir: str = None
    ) -> Optional["GeneratorConfig"]:
        """Загрузка конфигурации из файла"""
        # Если указана директория для поиска, ищем конфиг там
        if search_dir and os.path.isdir(search_dir):
            config_in_dir = os.path.join(search_dir, CONFIG_FILE_NAME)
            if os.path.exists(config_in_dir):
                config_path = config_in_dir

        if not os.path.exists(config_path):
            return None

        try:
            config_data = toml.load(config_path)
        except toml.TomlDecodeError as e:
            raise CodegenError(f"ошибка разбора {config_path}: {e}") from e

        config = cls.from_dict(config_data)
        base_dir = os.path.dirname(os.path.abspath(config_path))
        templates = _read_template_files(config.templates, base_dir)
        return replace(config, templates=templates)

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        config_data = {
            "paths": dict(self.paths),
            "options": {
                name: getattr(self, name) for name in sorted(self.option_names())
            },
        }
        if self.templates:
            config_data["templates"] = dict(self.templates)

        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config_data, f)

    def merge_with_args(self, args) -> "GeneratorConfig":
        """Объединение с аргументами командной строки"""
        paths = dict(self.paths)
        for kind in ("hooks", "components"):
            value = getattr(args, kind, None)
            if isinstance(value, str):
                paths[kind] = value

        generate_forms = self.generate_forms
        generate_lists = self.generate_lists
        if getattr(args, "forms", False) or getattr(args, "list", False):
            generate_forms = bool(getattr(args, "forms", False))
            generate_lists = bool(getattr(args, "list", False))

        return replace(
            self,
            paths=paths,
            templates=dict(self.templates),
            generate_forms=generate_forms,
            generate_lists=generate_lists,
        )


def _read_template_files(templates: Dict[str, str], base_dir: str) -> Dict[str, str]:
    """Значение шаблона может быть путем к файлу относительно конфига"""
    result = {}
    for template_id, value in templates.items():
        path = os.path.join(base_dir, value)
        if "\n" not in value and os.path.isfile(path):
            with open(path, "r", encoding="utf-8") as f:
                result[template_id] = f.read()
        else:
            result[template_id] = value
    return result
