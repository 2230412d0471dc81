"""
Запуск сгенерированного мок-сервера
"""

import importlib.util
import logging
import os
from types import ModuleType

from aiohttp import web

from .errors import CodegenError

logger = logging.getLogger(__name__)

MODULE_NAME = "tscodegen_mock_server"


def load_mock_module(path: str, name: str = MODULE_NAME) -> ModuleType:
    """Импорт сгенерированного server.py как модуля"""
    if not os.path.isfile(path):
        raise CodegenError(f"мок-сервер не найден: {path}")

    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def create_mock_app(path: str, name: str = MODULE_NAME) -> web.Application:
    module = load_mock_module(path, name)
    return module.create_app()


def serve_mocks(path: str, port: int) -> None:
    """Блокирующий запуск мок-сервера до Ctrl+C"""
    app = create_mock_app(path)
    logger.debug("мок-сервер %s, порт %s", path, port)
    web.run_app(app, port=port, print=None)
