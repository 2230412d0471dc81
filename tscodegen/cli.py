import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import httpx
import yaml

from tscodegen import __version__
from tscodegen.config import CONFIG_FILE_NAME, GeneratorConfig
from tscodegen.errors import CodegenError, SpecError
from tscodegen.filesystem import LocalFileSystem, save_artifacts
from tscodegen.generator import generate
from tscodegen.mock_runner import serve_mocks
from tscodegen.internal.types.models import ARTIFACT_KINDS

KIND_ALIASES = {"fakes-data": "fixtures"}


def load_spec(source: str) -> Dict[str, Any]:
    """Загрузка спецификации из файла (YAML или JSON) или по URL"""
    if source.startswith(("http://", "https://")):
        try:
            response = httpx.get(source, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SpecError(f"не удалось загрузить спецификацию: {e}", source) from e
        text = response.text
    elif os.path.exists(source):
        with open(source, "r", encoding="utf-8") as f:
            text = f.read()
    else:
        raise SpecError("файл спецификации не найден", source)

    try:
        if source.endswith(".json"):
            spec = json.loads(text)
        else:
            spec = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as e:
        raise SpecError(f"ошибка разбора: {e}", source) from e

    if not isinstance(spec, dict):
        raise SpecError("документ должен быть объектом", source)
    return spec


def enabled_kinds(args) -> Optional[List[str]]:
    """Виды артефактов из подкоманды и флагов --hooks/--components"""
    if args.command == "all":
        return None
    if args.command == "serve-mocks":
        return ["mocks"]
    kinds = [KIND_ALIASES.get(args.command, args.command)]
    for kind in ("hooks", "components"):
        if getattr(args, kind, None) and kind not in kinds:
            kinds.append(kind)
    return kinds


def _common_arguments() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--spec", type=str, help="Путь или URL к OpenAPI спецификации")
    common.add_argument(
        "--output", type=str, default=".", help="Корневая директория вывода"
    )
    common.add_argument(
        "--config",
        type=str,
        help=f"Файл конфигурации (по умолчанию {CONFIG_FILE_NAME})",
    )
    common.add_argument(
        "--hooks",
        nargs="?",
        const=True,
        default=False,
        metavar="PATH",
        help="Добавить хуки, при указании пути - вывести их туда",
    )
    common.add_argument(
        "--components",
        nargs="?",
        const=True,
        default=False,
        metavar="PATH",
        help="Добавить компоненты, при указании пути - вывести их туда",
    )
    common.add_argument("--forms", action="store_true", help="Только формы")
    common.add_argument("--list", action="store_true", help="Только списки и карточки")
    common.add_argument("--verbose", action="store_true", help="Подробный вывод")
    return common


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tscodegen", description="Генерация TypeScript клиента из OpenAPI"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    common = _common_arguments()
    subparsers = parser.add_subparsers(dest="command")

    for kind in ARTIFACT_KINDS:
        aliases = [a for a, target in KIND_ALIASES.items() if target == kind]
        subparsers.add_parser(
            kind, parents=[common], aliases=aliases, help=f"Генерация: {kind}"
        )
    subparsers.add_parser(
        "all", parents=[common], help="Генерация всех видов артефактов"
    )
    subparsers.add_parser(
        "init-config", parents=[common], help=f"Создать {CONFIG_FILE_NAME}"
    )

    serve = subparsers.add_parser(
        "serve-mocks", parents=[common], help="Сгенерировать и запустить мок-сервер"
    )
    serve.add_argument(
        "--port", type=int, help="Порт (по умолчанию mock_port из конфига)"
    )
    return parser


def _load_config(args) -> GeneratorConfig:
    config_path = args.config or CONFIG_FILE_NAME
    if args.config and not os.path.exists(args.config):
        raise CodegenError(f"файл конфигурации не найден: {args.config}")
    config = GeneratorConfig.from_file(config_path)
    if config:
        print(f"📋 Используется конфиг {config_path}")
    else:
        config = GeneratorConfig()
    return config.merge_with_args(args)


def run(args) -> int:
    if args.command == "init-config":
        config_path = args.config or CONFIG_FILE_NAME
        GeneratorConfig().save_to_file(config_path)
        print(f"✅ Создан конфиг файл {config_path}")
        return 0

    if not args.spec:
        print("❌ Ошибка: укажите спецификацию через --spec")
        return 1

    config = _load_config(args)

    print(f"📥 Загрузка спецификации {args.spec}...")
    spec = load_spec(args.spec)

    print("⚙️ Генерация кода...")
    result = generate(spec, enabled_kinds(args), config)

    print(f"💾 Сохранение {len(result.artifacts)} файлов...")
    report = save_artifacts(result, LocalFileSystem(), args.output)

    for warning in result.warnings:
        print(f"⚠️ {warning}")
    for error in report.errors:
        print(f"❌ Ошибка записи {error}")

    print(f"✅ Сгенерировано файлов: {report.total} в {os.path.abspath(args.output)}")
    if not report.ok:
        return 1

    if args.command == "serve-mocks":
        server_path = os.path.join(args.output, result.artifacts["mocks:server"].path)
        port = args.port or config.mock_port
        print(f"🚀 Мок-сервер на http://localhost:{port}")
        serve_mocks(server_path, port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Точка входа командной строки"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return run(args)
    except SpecError as e:
        print(f"❌ Ошибка спецификации: {e}")
        return 1
    except CodegenError as e:
        print(f"❌ Ошибка генерации: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
