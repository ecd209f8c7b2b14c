"""Unit tests for directory traversal."""

from pathlib import Path

from wikibundle.operations.walk import iter_files


def _touch(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestIterFiles:
    """Test recursive file listing."""

    def test_lists_nested_files(self, tmp_path):
        _touch(tmp_path / "index.html")
        _touch(tmp_path / "js" / "app.js")
        _touch(tmp_path / "js" / "vendor" / "lib.js")
        _touch(tmp_path / "css" / "theme.css")

        files = {p.relative_to(tmp_path).as_posix() for p in iter_files(tmp_path)}

        assert files == {"index.html", "js/app.js", "js/vendor/lib.js", "css/theme.css"}

    def test_each_file_once(self, tmp_path):
        for i in range(5):
            _touch(tmp_path / f"d{i}" / f"f{i}.txt")

        files = list(iter_files(tmp_path))

        assert len(files) == len(set(files)) == 5

    def test_skips_empty_directories(self, tmp_path):
        (tmp_path / "empty" / "deeper").mkdir(parents=True)
        _touch(tmp_path / "only.txt")

        assert list(iter_files(tmp_path)) == [tmp_path / "only.txt"]

    def test_is_lazy_and_restartable(self, tmp_path):
        _touch(tmp_path / "a.txt")
        _touch(tmp_path / "b" / "c.txt")

        walker = iter_files(tmp_path)
        assert iter(walker) is walker

        first = list(iter_files(tmp_path))
        second = list(iter_files(tmp_path))
        assert first == second

    def test_missing_root_yields_nothing(self, tmp_path):
        assert list(iter_files(tmp_path / "missing")) == []
