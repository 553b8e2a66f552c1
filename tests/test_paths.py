from __future__ import annotations

import pytest

from pdf_marker.core import paths


@pytest.fixture(autouse=True)
def _restore_directories(monkeypatch):
    monkeypatch.setattr(paths, "SEARCH_DIRECTORIES", [])
    monkeypatch.setattr(paths, "MAX_FILE_SIZE", paths.MAX_FILE_SIZE)


def test_parse_arguments_defaults() -> None:
    args = paths.parse_arguments([])
    assert args.directories == []
    assert args.font is None
    assert args.font_size == 12.0
    assert args.label == "Hello, World!"
    assert args.log_level == "INFO"


def test_setup_creates_and_validates_directories(tmp_path) -> None:
    new_dir = tmp_path / "made"
    args = paths.parse_arguments([str(new_dir), "--allow-dir", str(tmp_path), "--max-file-size", "1024"])
    paths.setup_search_directories(args)
    assert new_dir.is_dir()
    assert paths.SEARCH_DIRECTORIES == [str(new_dir.resolve()), str(tmp_path.resolve())]
    assert paths.MAX_FILE_SIZE == 1024


def test_setup_falls_back_to_defaults() -> None:
    paths.setup_search_directories(paths.parse_arguments([]))
    assert len(paths.SEARCH_DIRECTORIES) == len(paths.DEFAULT_SEARCH_DIRECTORIES)


def test_find_file_checks_extension_and_size(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(paths, "SEARCH_DIRECTORIES", [str(tmp_path.resolve())])
    (tmp_path / "a.pdf").write_bytes(b"%PDF-1.4")
    (tmp_path / "a.txt").write_text("x")
    (tmp_path / "big.pdf").write_bytes(b"0" * 64)
    monkeypatch.setattr(paths, "MAX_FILE_SIZE", 32)
    assert paths.find_file("a.pdf") == (tmp_path / "a.pdf").resolve()
    assert paths.find_file("a.txt") is None
    assert paths.find_file("big.pdf") is None
    assert paths.find_file("../a.pdf") is None


def test_resolve_output_path(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(paths, "SEARCH_DIRECTORIES", [str(tmp_path.resolve())])
    assert paths.resolve_output_path("export") == (tmp_path / "export.pdf").resolve()
    assert paths.resolve_output_path("../up.pdf") is None
    assert paths.resolve_output_path("/etc/out.pdf") is None
    assert paths.resolve_output_path("missing/dir.pdf") is None


def test_nul_byte_paths_resolve_to_nothing(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(paths, "SEARCH_DIRECTORIES", [str(tmp_path.resolve())])
    assert paths.validate_and_resolve_path(str(tmp_path / "a\x00.pdf")) is None
    assert paths.find_file("a\x00.pdf") is None
    assert paths.resolve_output_path("a\x00b") is None
