"""
Tests for MirrorConfig loading and validation.

Verifies that:
1. `MirrorConfig.load` reads `[tool.mirror_impl]` from the nearest `pyproject.toml`.
2. CLI overrides take precedence over TOML values.
3. Templates and marker names are validated.
"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from mirror_impl.config import MirrorConfig, parse_cli_key_values
from mirror_impl.core.model import MirrorConvention
from mirror_impl.enums import RewriteScope


@pytest.fixture
def workspace(tmp_path):
  """
  Creates:
  /workspace
    pyproject.toml
    /pkg
  """
  ws = tmp_path / "workspace"
  (ws / "pkg").mkdir(parents=True)
  toml_content = """
[tool.mirror_impl]
type_template = "Archived{name}"
rewrite_scope = "full"
"""
  (ws / "pyproject.toml").write_text(toml_content, encoding="utf-8")
  return ws


def test_defaults():
  config = MirrorConfig()
  assert config.convention == MirrorConvention(param_template="{param}.Mirrored")
  assert config.rewrite_scope == RewriteScope.SUBJECT
  assert (config.block_marker, config.member_marker, config.where_marker) == ("mirror_impl", "mirror_method", "where")


def test_load_from_parent_toml(workspace):
  config = MirrorConfig.load(search_path=workspace / "pkg")
  assert config.type_template == "Archived{name}"
  assert config.rewrite_scope == RewriteScope.FULL


def test_overrides_win(workspace):
  config = MirrorConfig.load(overrides={"rewrite_scope": "subject", "bound_trait": "Archive"}, search_path=workspace)
  assert config.rewrite_scope == RewriteScope.SUBJECT
  assert config.bound_trait == "Archive"
  assert config.type_template == "Archived{name}"


def test_unknown_keys_warn(workspace):
  with patch("mirror_impl.config.log_warning") as mock_warn:
    config = MirrorConfig.load(overrides={"colour": "blue"}, search_path=workspace)
  assert config.type_template == "Archived{name}"
  mock_warn.assert_called_once()
  assert "colour" in mock_warn.call_args[0][0]


def test_invalid_toml_is_reported(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.mirror_impl\n", encoding="utf-8")
  with patch("mirror_impl.config.log_warning") as mock_warn:
    config = MirrorConfig.load(search_path=tmp_path)
  assert config == MirrorConfig()
  mock_warn.assert_called_once()


@pytest.mark.parametrize(
  "field, value",
  [
    ("type_template", "Mirrored"),
    ("param_template", "Mirrored"),
    ("marker_names", ["only_one"]),
    ("rewrite_scope", "sideways"),
  ],
)
def test_validation(field, value):
  with pytest.raises(ValidationError):
    MirrorConfig(**{field: value})


def test_parse_cli_key_values():
  parsed = parse_cli_key_values(
    ["type_template=Archived{name}", "flag=true", "marker_names=a, b ,c", "broken", "expr=a=b"]
  )
  assert parsed == {
    "type_template": "Archived{name}",
    "flag": True,
    "marker_names": ["a", "b", "c"],
    "expr": "a=b",
  }
  assert parse_cli_key_values(None) == {}


def test_load_reports_invalid_settings(workspace):
  with pytest.raises(ValueError, match="Invalid mirror_impl settings") as excinfo:
    MirrorConfig.load(overrides={"rewrite_scope": "bogus"}, search_path=workspace)
  assert "rewrite_scope" in str(excinfo.value)
  assert isinstance(excinfo.value.__cause__, ValidationError)
