# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Unit tests for Config."""

from __future__ import annotations

from pathlib import Path

import pytest

from gocheck.config import DEFAULT_LINTER, CheckConfig, load_config
from gocheck.exceptions import ConfigReadError, ConfigValidationError, InvalidConfigFileError

pytestmark = pytest.mark.unit


def test_missing_options_mean_disabled() -> None:
    config = CheckConfig.from_mapping({})
    assert config == CheckConfig()
    assert not config.any_enabled
    assert config.linter == DEFAULT_LINTER


def test_camel_case_editor_keys() -> None:
    config = CheckConfig.from_mapping({
        "buildOnSave": True,
        "buildFlags": ["-race"],
        "buildTags": " integration ",
        "lintOnSave": True,
        "linter": "gometalinter",
        "lintFlags": ["--fast"],
        "vetOnSave": True,
        "vetFlags": ["-shadow"],
        "coverOnSave": True,
        "toolTimeout": 30,
    })
    assert config.build_on_save
    assert config.build_flags == ["-race"]
    assert config.build_tags == "integration"
    assert config.linter == "gometalinter"
    assert config.lint_flags == ["--fast"]
    assert config.vet_flags == ["-shadow"]
    assert config.cover_on_save
    assert config.tool_timeout == 30.0


def test_snake_case_keys_and_null_values() -> None:
    config = CheckConfig.from_mapping({
        "lint_on_save": True,
        "linter": None,
        "build_tags": None,
        "vet_flags": None,
        "build_on_save": None,
    })
    assert config.lint_on_save
    assert config.linter == DEFAULT_LINTER
    assert config.build_tags == ""
    assert config.vet_flags == []
    assert not config.build_on_save


def test_flag_strings_are_split_like_a_shell() -> None:
    config = CheckConfig.from_mapping({"buildFlags": "-ldflags '-s -w' -v"})
    assert config.build_flags == ["-ldflags", "-s -w", "-v"]


@pytest.mark.parametrize(
    "options",
    [
        {"buildFlags": [1, 2]},
        {"buildTags": ["a"]},
        {"toolTimeout": 0},
        {"linter": 3},
    ],
)
def test_invalid_values_raise(options: dict[str, object]) -> None:
    with pytest.raises(ConfigValidationError):
        _ = CheckConfig.from_mapping(options)


def test_with_overrides_skips_none() -> None:
    config = CheckConfig(lint_on_save=True)
    updated = config.with_overrides(lint_on_save=None, vet_on_save=True)
    assert updated.lint_on_save
    assert updated.vet_on_save
    assert not config.vet_on_save


def test_pyproject_without_section_is_skipped(tmp_path: Path) -> None:
    _ = (tmp_path / "gocheck.toml").write_text("buildOnSave = true\n", encoding="utf-8")
    project = tmp_path / "project"
    project.mkdir()
    _ = (project / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    loaded = load_config(start=project)
    assert loaded.path == (tmp_path / "gocheck.toml").resolve()
    assert loaded.config.build_on_save


def test_load_config_discovers_parent_directories(tmp_path: Path) -> None:
    config_path = tmp_path / "gocheck.toml"
    _ = config_path.write_text('vetOnSave = true\nvetFlags = ["-all"]\n', encoding="utf-8")
    nested = tmp_path / "src" / "pkg"
    nested.mkdir(parents=True)
    loaded = load_config(start=nested)
    assert loaded.path == config_path.resolve()
    assert loaded.config.vet_on_save
    assert loaded.config.vet_flags == ["-all"]


def test_standalone_file_wins_over_pyproject(tmp_path: Path) -> None:
    _ = (tmp_path / "pyproject.toml").write_text("[tool.gocheck]\nlintOnSave = true\n", encoding="utf-8")
    _ = (tmp_path / ".gocheck.toml").write_text("buildOnSave = true\n", encoding="utf-8")
    loaded = load_config(start=tmp_path)
    assert loaded.path == (tmp_path / ".gocheck.toml").resolve()
    assert loaded.config.build_on_save
    assert not loaded.config.lint_on_save


def test_pyproject_tool_section(tmp_path: Path) -> None:
    _ = (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "x"\n\n[tool.gocheck]\nlint_on_save = true\nlinter = "revive"\n',
        encoding="utf-8",
    )
    loaded = load_config(start=tmp_path)
    assert loaded.config.lint_on_save
    assert loaded.config.linter == "revive"


def test_explicit_pyproject_without_section_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "pyproject.toml"
    _ = path.write_text('[project]\nname = "x"\n', encoding="utf-8")
    with pytest.raises(InvalidConfigFileError):
        _ = load_config(path)


def test_explicit_missing_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigReadError):
        _ = load_config(tmp_path / "nope.toml")


def test_malformed_toml_is_a_read_error(tmp_path: Path) -> None:
    path = tmp_path / "gocheck.toml"
    _ = path.write_text("buildOnSave = = true\n", encoding="utf-8")
    with pytest.raises(ConfigReadError):
        _ = load_config(path)


def test_invalid_values_in_file(tmp_path: Path) -> None:
    path = tmp_path / "gocheck.toml"
    _ = path.write_text('buildFlags = [1]\n', encoding="utf-8")
    with pytest.raises(InvalidConfigFileError):
        _ = load_config(path)
