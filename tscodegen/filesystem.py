"""
Запись сгенерированных артефактов
"""

import logging
import os
import posixpath
from dataclasses import dataclass, field
from typing import Dict, List, Protocol

from .errors import WriteError
from .internal.types.models import ARTIFACT_KINDS, GenerationResult

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    def ensure_directory(self, path: str) -> None: ...

    def write_file(self, path: str, content: str) -> None: ...

    def read_file(self, path: str) -> str: ...

    def read_directory(self, path: str) -> List[str]: ...


class LocalFileSystem:
    """Файлы на диске"""

    def ensure_directory(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def write_file(self, path: str, content: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)

    def read_file(self, path: str) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def read_directory(self, path: str) -> List[str]:
        return sorted(os.listdir(path))


class MemoryFileSystem:
    """Файлы в памяти, для тестов и пробных запусков"""

    def __init__(self):
        self.files: Dict[str, str] = {}
        self.directories = set()

    def ensure_directory(self, path: str) -> None:
        path = posixpath.normpath(path)
        while path not in ("", ".", "/"):
            self.directories.add(path)
            path = posixpath.dirname(path)

    def write_file(self, path: str, content: str) -> None:
        path = posixpath.normpath(path)
        parent = posixpath.dirname(path)
        if parent and parent not in self.directories:
            raise FileNotFoundError(f"нет директории {parent}")
        self.files[path] = content

    def read_file(self, path: str) -> str:
        path = posixpath.normpath(path)
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def read_directory(self, path: str) -> List[str]:
        prefix = posixpath.normpath(path) + "/"
        names = {
            name[len(prefix):].split("/", 1)[0]
            for name in list(self.files) + list(self.directories)
            if name.startswith(prefix)
        }
        return sorted(names)


@dataclass
class SaveReport:
    """Итог записи: число файлов по видам и ошибки записи"""

    written: Dict[str, int] = field(default_factory=dict)
    errors: List[WriteError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.written.values())

    @property
    def ok(self) -> bool:
        return not self.errors


def save_artifacts(
    result: GenerationResult, fs: FileSystem, output_dir: str
) -> SaveReport:
    """Запись артефактов по видам.

    Ошибка записи прерывает только свой вид, остальные виды записываются.
    """
    report = SaveReport()
    for kind in ARTIFACT_KINDS:
        artifacts = result.by_kind(kind)
        if not artifacts:
            continue
        written = 0
        path = output_dir
        try:
            for artifact in artifacts:
                path = os.path.join(output_dir, artifact.path)
                fs.ensure_directory(os.path.dirname(path))
                fs.write_file(path, artifact.content)
                written += 1
        except OSError as e:
            error = WriteError(kind, path, str(e))
            logger.error(str(error))
            report.errors.append(error)
        report.written[kind] = written
    return report
