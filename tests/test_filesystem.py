"""
Тесты записи артефактов
"""

import pytest

from tscodegen.filesystem import LocalFileSystem, MemoryFileSystem, save_artifacts
from tscodegen.generator import generate


class FailingFileSystem(MemoryFileSystem):
    """Отказывает в записи файлов внутри одной директории"""

    def __init__(self, broken_dir):
        super().__init__()
        self.broken_dir = broken_dir

    def write_file(self, path, content):
        if f"/{self.broken_dir}/" in path:
            raise PermissionError(f"доступ запрещен: {path}")
        super().write_file(path, content)


class TestMemoryFileSystem:
    """Файловая система в памяти"""

    def test_write_requires_directory(self):
        fs = MemoryFileSystem()
        with pytest.raises(FileNotFoundError):
            fs.write_file("out/types/widget.ts", "")

        fs.ensure_directory("out/types")
        fs.write_file("out/types/widget.ts", "export {};\n")

        assert fs.read_file("out/types/widget.ts") == "export {};\n"
        assert fs.read_directory("out") == ["types"]
        assert fs.read_directory("out/types") == ["widget.ts"]

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            MemoryFileSystem().read_file("nothing.ts")


class TestSaveArtifacts:
    """Запись результата генерации"""

    def test_all_files_written(self, widget_spec):
        result = generate(widget_spec, ["types", "services"])
        fs = MemoryFileSystem()

        report = save_artifacts(result, fs, "out")

        assert report.ok
        assert report.total == len(result.artifacts)
        for artifact in result.artifacts.values():
            assert fs.read_file(f"out/{artifact.path}") == artifact.content

    def test_write_error_is_isolated_per_kind(self, widget_spec):
        result = generate(widget_spec, ["types", "schemas", "services"])
        fs = FailingFileSystem("services")

        report = save_artifacts(result, fs, "out")

        assert not report.ok
        assert [error.kind for error in report.errors] == ["services"]
        assert report.written["services"] == 0
        assert report.written["types"] == len(result.by_kind("types"))
        assert report.written["schemas"] == len(result.by_kind("schemas"))
        assert "out/types/widget.ts" in fs.files
        assert "out/schemas/widget.schema.ts" in fs.files

    def test_local_file_system(self, widget_spec, tmp_path):
        result = generate(widget_spec, ["types"])

        report = save_artifacts(result, LocalFileSystem(), str(tmp_path))

        assert report.ok
        assert (tmp_path / "types" / "widget.ts").read_text(encoding="utf-8") == (
            result.artifacts["Widget:type"].content
        )
        listing = LocalFileSystem().read_directory(str(tmp_path / "types"))
        assert listing == ["index.ts", "widget.ts"]
