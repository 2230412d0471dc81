"""
Преобразования имен, общие для всех генераторов
"""

import re
from typing import List

_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z0-9])|[A-Z]?[a-z0-9]+|[A-Z]+|\d+")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

TS_RESERVED = {
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "import", "in", "instanceof", "new",
    "null", "return", "super", "switch", "this", "throw", "true", "try",
    "typeof", "var", "void", "while", "with", "let", "static", "yield",
    "await", "interface", "package", "private", "protected", "public",
}


def split_words(value: str) -> List[str]:
    """Разбиение строки на слова с учетом camelCase, snake_case и kebab-case"""
    return _WORD_RE.findall(value or "")


def to_pascal_case(value: str) -> str:
    words = split_words(value)
    return "".join(w[:1].upper() + w[1:] for w in words)


def to_camel_case(value: str) -> str:
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def to_kebab_case(value: str) -> str:
    """UserProfile -> user-profile, HTTPServer -> http-server"""
    value = re.sub(r"[\s_]+", "-", value or "")
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", value)
    value = re.sub(r"([A-Z])([A-Z])(?=[a-z])", r"\1-\2", value)
    return re.sub(r"-+", "-", value).strip("-").lower()


def to_label(value: str) -> str:
    """Человекочитаемая подпись: firstName -> First Name"""
    words = split_words(value)
    return " ".join(w[:1].upper() + w[1:] for w in words)


def singularize(word: str) -> str:
    """Наивное приведение к единственному числу.

    Известное ограничение: неправильные формы (people, children, data)
    не распознаются.
    """
    if len(word) > 3 and word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("s") and not word.endswith("ss") and len(word) > 1:
        return word[:-1]
    return word


def type_name(value: str) -> str:
    """Имя схемы в виде идентификатора TypeScript"""
    name = to_pascal_case(value)
    if not name:
        return "Unnamed"
    if name[0].isdigit():
        name = "T" + name
    return name


def property_key(name: str) -> str:
    """Ключ свойства в объектном литерале, в кавычках если это не идентификатор"""
    if _IDENTIFIER_RE.match(name):
        return name
    return "'" + name.replace("\\", "\\\\").replace("'", "\\'") + "'"


def identifier(name: str) -> str:
    """Имя параметра функции в TypeScript"""
    result = to_camel_case(name) or "value"
    if result[0].isdigit():
        result = "_" + result
    if result in TS_RESERVED:
        result += "Value"
    return result


def python_identifier(name: str) -> str:
    """Имя параметра маршрута для aiohttp"""
    result = re.sub(r"\W", "_", name)
    if not result or result[0].isdigit():
        result = "p_" + result
    return result
