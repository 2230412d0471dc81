"""
Исключения генератора
"""

from typing import Optional


class CodegenError(Exception):
    """Базовое исключение генератора"""


class SpecError(CodegenError):
    """Фатальная ошибка входной спецификации: битый документ, неразрешимый $ref,
    отсутствие components.schemas"""

    def __init__(self, message: str, pointer: Optional[str] = None):
        self.message = message
        self.pointer = pointer
        super().__init__(f"{pointer}: {message}" if pointer else message)


class SchemaEmitError(CodegenError):
    """Схему нельзя выразить, вместо нее генерируется открытый тип"""

    def __init__(self, schema_name: str, message: str):
        self.schema_name = schema_name
        self.message = message
        super().__init__(f"[{schema_name}] {message}")


class OperationEmitError(CodegenError):
    """Тело запроса или ответа операции не удалось типизировать"""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"[{operation}] {message}")


class WriteError(CodegenError):
    """Ошибка записи артефактов одного вида"""

    def __init__(self, kind: str, path: str, message: str):
        self.kind = kind
        self.path = path
        self.message = message
        super().__init__(f"[{kind}] {path}: {message}")
