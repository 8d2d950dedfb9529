"""
Mirror Generation Settings.

Holds the mirror generator's naming convention and the engine's rewrite
settings, loaded from ``[tool.mirror_impl]`` in the nearest ``pyproject.toml``
and overridden by CLI arguments.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from mirror_impl.core.model import MirrorConvention
from mirror_impl.enums import RewriteScope
from mirror_impl.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

logger = logging.getLogger(__name__)

# Python annotations cannot spell ``T::Mirrored``; the host default uses attribute access.
PYTHON_PARAM_TEMPLATE = "{param}.Mirrored"


class MirrorConfig(BaseModel):
  """
  Global configuration container for the mirroring engine.
  """

  type_template: str = Field("Mirrored{name}", description="Mirror type name built from '{name}'.")
  param_template: str = Field(
    PYTHON_PARAM_TEMPLATE,
    description="Mirrored expression built from '{param}'.",
  )
  bound_trait: str = Field("Mirror", description="Bound implied for each transformed parameter. Empty disables.")
  rewrite_scope: RewriteScope = Field(
    RewriteScope.SUBJECT,
    description="'subject' rewrites the bounded type only; 'full' rewrites the whole predicate.",
  )
  marker_names: List[str] = Field(
    default_factory=lambda: ["mirror_impl", "mirror_method", "where"],
    description="Decorator names for the block marker, member marker and where-clause.",
  )

  @field_validator("type_template")
  @classmethod
  def validate_type_template(cls, v: str) -> str:
    """
    Ensures the type template references the source name.

    Args:
        v (str): Candidate template.

    Returns:
        str: The template.

    Raises:
        ValueError: If ``{name}`` is missing.
    """
    if "{name}" not in v:
      raise ValueError(f"type_template must contain '{{name}}': '{v}'")
    return v

  @field_validator("param_template")
  @classmethod
  def validate_param_template(cls, v: str) -> str:
    """
    Ensures the parameter template references the parameter.

    Args:
        v (str): Candidate template.

    Returns:
        str: The template.

    Raises:
        ValueError: If ``{param}`` is missing.
    """
    if "{param}" not in v:
      raise ValueError(f"param_template must contain '{{param}}': '{v}'")
    return v

  @field_validator("marker_names")
  @classmethod
  def validate_marker_names(cls, v: List[str]) -> List[str]:
    if len(v) != 3:
      raise ValueError(f"marker_names needs exactly 3 entries (block, member, where), got {len(v)}")
    return v

  @property
  def convention(self) -> MirrorConvention:
    return MirrorConvention(
      type_template=self.type_template,
      param_template=self.param_template,
      bound_trait=self.bound_trait,
    )

  @property
  def block_marker(self) -> str:
    return self.marker_names[0]

  @property
  def member_marker(self) -> str:
    return self.marker_names[1]

  @property
  def where_marker(self) -> str:
    return self.marker_names[2]

  @classmethod
  def load(
    cls,
    overrides: Optional[Dict[str, Any]] = None,
    search_path: Optional[Path] = None,
  ) -> "MirrorConfig":
    """
    Resolves settings: nearest ``[tool.mirror_impl]`` table first, then ``overrides``.

    Args:
        overrides (Optional[Dict]): CLI ``key=value`` settings, applied last.
        search_path (Optional[Path]): Where the upward pyproject.toml search begins (cwd if None).

    Returns:
        MirrorConfig: The fully resolved configuration object.

    Raises:
        ValueError: If a resolved setting fails validation.
    """
    start_dir = search_path or Path.cwd()
    toml_config, found_in = _load_toml_settings(start_dir)
    if found_in is not None:
      logger.debug("Loaded [tool.mirror_impl] from %s", found_in)
    merged = {**toml_config, **(overrides or {})}

    known = set(cls.model_fields)
    for key in sorted(set(merged) - known):
      log_warning(f"Ignoring unknown setting '{key}'.")
    try:
      return cls(**{k: v for k, v in merged.items() if k in known})
    except ValidationError as e:
      raise ValueError(f"Invalid mirror_impl settings: {e}") from e


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Finds the closest pyproject.toml at or above ``start_path`` and returns its
  ``[tool.mirror_impl]`` table. An unreadable file is reported and ignored.

  Args:
      start_path (Path): First directory inspected.

  Returns:
      Tuple[Dict, Optional[Path]]: Settings table and the directory holding the file.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        log_warning(f"Could not read {toml_path}: {e}")
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("mirror_impl", {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Turns ``--config key=value`` items into `MirrorConfig` overrides.

  Booleans are inferred and ``marker_names`` is split on commas; everything
  else stays a string.

  Args:
      items (Optional[List[str]]): Raw ``--config`` values.

  Returns:
      Dict[str, Any]: Field name -> value.
  """
  if not items:
    return {}

  config: Dict[str, Any] = {}
  for item in items:
    if "=" not in item:
      log_warning(f"Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str
    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    elif key == "marker_names":
      final_val = [v.strip() for v in val_str.split(",")]

    config[key] = final_val

  return config
