"""Tests for cmakegen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from cmakegen.config import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROJECT_NAME,
    DEFAULT_STANDARD,
    GeneratorConfig,
    load_config,
)
from cmakegen.discovery import DEFAULT_EXCLUSIONS
from cmakegen.errors import MalformedConfigurationError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, GeneratorConfig)
    assert config.root == tmp_path.resolve()
    assert config.project_name == DEFAULT_PROJECT_NAME
    assert config.standard == DEFAULT_STANDARD
    assert config.output_dir == DEFAULT_OUTPUT_DIR
    assert config.exclude_paths == []
    assert config.exclusions == DEFAULT_EXCLUSIONS


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".cmakegen.yml"
    config_file.write_text(
        """
project:
  name: "Calculator"
  standard: 20
output_dir: out
exclude_paths:
  - third_party
  - "*.generated"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.project_name == "Calculator"
    assert config.standard == "20"
    assert config.output_dir == "out"
    assert config.exclude_paths == ["third_party", "*.generated"]
    assert config.exclusions == (*DEFAULT_EXCLUSIONS, "out", "third_party", "*.generated")
    assert config.validate() is config


def test_load_config_accepts_single_string_exclude(tmp_path: Path) -> None:
    (tmp_path / ".cmakegen.yml").write_text("exclude_paths: vendor\n", encoding="utf-8")

    assert load_config(tmp_path).exclude_paths == ["vendor"]


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".cmakegen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(MalformedConfigurationError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".cmakegen.yml").write_text("project: [unclosed\n", encoding="utf-8")

    with pytest.raises(MalformedConfigurationError) as excinfo:
        load_config(tmp_path)
    assert ".cmakegen.yml" in str(excinfo.value)


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".cmakegen.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).project_name == DEFAULT_PROJECT_NAME


def test_overrides_layer_over_file_values(tmp_path: Path) -> None:
    base = GeneratorConfig(root=tmp_path, project_name="FromFile", exclude_paths=["docs"])

    merged = base.with_overrides(standard="23", exclude_paths=["vendor"])

    assert merged.project_name == "FromFile"
    assert merged.standard == "23"
    assert merged.exclude_paths == ["docs", "vendor"]
    assert base.exclude_paths == ["docs"]


def test_output_dir_exclusion_is_not_duplicated(tmp_path: Path) -> None:
    config = GeneratorConfig(root=tmp_path, exclude_paths=["build", ".git"])

    assert config.exclusions == DEFAULT_EXCLUSIONS


@pytest.mark.parametrize(
    "changes",
    [
        {"standard": "98"},
        {"standard": "2a"},
        {"project_name": "has space"},
        {"project_name": "9lives"},
        {"output_dir": "nested/out"},
        {"output_dir": ".."},
        {"output_dir": "b*"},
        {"output_dir": "x?"},
        {"output_dir": "[ab]"},
        {"exclude_paths": [""]},
        {"exclude_paths": ["src/gen"]},
    ],
)
def test_validate_rejects_malformed_values(tmp_path: Path, changes) -> None:
    config = GeneratorConfig(root=tmp_path, **changes)

    with pytest.raises(MalformedConfigurationError):
        config.validate()


def test_load_config_rejects_non_utf8_file(tmp_path: Path) -> None:
    (tmp_path / ".cmakegen.yml").write_bytes(b"project:\n  name: \xff\xfe\n")

    with pytest.raises(MalformedConfigurationError) as excinfo:
        load_config(tmp_path)
    assert "UTF-8" in str(excinfo.value)
