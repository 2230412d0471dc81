"""Генератор TypeScript клиента из OpenAPI спецификаций"""

__version__ = "0.1.0"
