"""Tests for cmakegen.cleaner."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cmakegen import cleaner
from cmakegen.cleaner import clean_workspace
from cmakegen.errors import FilesystemAccessError


def _seed_artifacts(root: Path) -> None:
    for name in ("CMakeLists.txt", "CMakeCache.txt", "cmake_install.cmake", "Makefile"):
        (root / name).write_text("stale\n", encoding="utf-8")
    (root / "CMakeFiles" / "3.28").mkdir(parents=True)
    (root / "CMakeFiles" / "3.28" / "CMakeSystem.cmake").write_text("", encoding="utf-8")
    (root / "build" / "bin").mkdir(parents=True)
    (root / "build" / "bin" / "MyProject").write_text("", encoding="utf-8")
    (root / "build" / "CMakeCache.txt").write_text("", encoding="utf-8")


def test_clean_removes_descriptor_and_artifacts(workspace_builder) -> None:
    root = workspace_builder.path()
    _seed_artifacts(root)
    workspace_builder.touch(["main.cpp", ".cmakegen.yml"])

    removed = clean_workspace(root)

    assert set(removed) == {
        "CMakeLists.txt",
        "CMakeCache.txt",
        "cmake_install.cmake",
        "Makefile",
        "CMakeFiles",
        "build",
    }
    assert sorted(p.name for p in root.iterdir()) == [".cmakegen.yml", "main.cpp"]


def test_clean_is_idempotent_on_pristine_workspace(workspace_builder) -> None:
    root = workspace_builder.path()
    workspace_builder.touch(["main.cpp"])

    assert clean_workspace(root) == ()
    assert clean_workspace(root) == ()
    assert (root / "main.cpp").exists()


def test_clean_honours_custom_output_dir(workspace_builder) -> None:
    root = workspace_builder.path()
    (root / "out" / "lib").mkdir(parents=True)
    (root / "out" / "CMakeCache.txt").write_text("", encoding="utf-8")
    (root / "build" / "CMakeFiles").mkdir(parents=True)

    removed = clean_workspace(root, output_dir="out")

    assert removed == ("out",)
    assert not (root / "out").exists()
    assert (root / "build").exists()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_clean_unlinks_symlinked_output_without_following(workspace_builder, tmp_path: Path) -> None:
    root = workspace_builder.path()
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    (elsewhere / "keep.txt").write_text("", encoding="utf-8")
    try:
        os.symlink(elsewhere, root / "build", target_is_directory=True)
    except OSError:  # pragma: no cover - platform without symlink privilege
        pytest.skip("cannot create symlinks")

    assert clean_workspace(root) == ("build",)
    assert (elsewhere / "keep.txt").exists()


def test_clean_wraps_permission_errors(workspace_builder, monkeypatch) -> None:
    root = workspace_builder.path()
    (root / "CMakeCache.txt").write_text("", encoding="utf-8")

    def _deny(self, missing_ok: bool = False) -> None:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(cleaner.Path, "unlink", _deny)

    with pytest.raises(FilesystemAccessError) as excinfo:
        clean_workspace(root)
    assert "CMakeCache.txt" in str(excinfo.value)


def test_clean_leaves_output_dir_that_is_not_a_build_tree(workspace_builder) -> None:
    root = workspace_builder.path()
    workspace_builder.touch(["math/calc.cpp", "math/calc.h"])

    removed = clean_workspace(root, output_dir="math")

    assert removed == ()
    assert (root / "math" / "calc.cpp").exists()


def test_is_build_tree_requires_cmake_marker(tmp_path: Path) -> None:
    (tmp_path / "plain").mkdir()
    (tmp_path / "configured" / "CMakeFiles").mkdir(parents=True)

    assert not cleaner.is_build_tree(tmp_path / "plain")
    assert not cleaner.is_build_tree(tmp_path / "missing")
    assert cleaner.is_build_tree(tmp_path / "configured")
