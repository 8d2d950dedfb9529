"""
Source Generator.

Entry point of the Python host: takes module source, runs the
`MirrorTransformer` over it and packages the outcome as a
`GenerationResult`.
"""

from typing import List, Optional

import libcst as cst
from pydantic import BaseModel, Field

from mirror_impl.config import MirrorConfig
from mirror_impl.core.engine import MirrorEngine
from mirror_impl.core.errors import Diagnostic
from mirror_impl.core.render import render_block
from mirror_impl.host.transformer import MirrorTransformer


class GenerationResult(BaseModel):
  """
  Structured result of expanding a single module.
  """

  code: str = Field(default="", description="The module with mirror classes inserted.")
  errors: List[str] = Field(default_factory=list, description="Formatted error messages.")
  diagnostics: List[Diagnostic] = Field(default_factory=list, description="Per-block expansion failures.")
  mirrors: List[str] = Field(default_factory=list, description="Mirror blocks rendered in impl notation.")
  success: bool = Field(default=True, description="True if every marked block expanded.")


class SourceGenerator:
  """
  Expands every marked class of a module.
  """

  def __init__(self, config: Optional[MirrorConfig] = None) -> None:
    """
    Args:
        config (MirrorConfig, optional): Runtime settings. Defaults apply if None.
    """
    self.config = config or MirrorConfig()
    self.engine = MirrorEngine.from_config(self.config)

  def run(self, code: str, path: Optional[str] = None) -> GenerationResult:
    """
    Expands ``code``.

    Args:
        code (str): Python module source.
        path (str, optional): File name used in diagnostics.

    Returns:
        GenerationResult: Expanded code plus diagnostics. On a syntax error
        the input code is returned unchanged with ``success=False``.
    """
    try:
      module = cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      location = f"{path}: " if path else ""
      return GenerationResult(code=code, errors=[f"{location}syntax error: {e}"], success=False)

    transformer = MirrorTransformer(
      self.engine,
      self.config.block_marker,
      self.config.member_marker,
      self.config.where_marker,
    )
    new_module = cst.MetadataWrapper(module).visit(transformer)

    diagnostics = [e.to_diagnostic(path) for e in transformer.errors]
    return GenerationResult(
      code=new_module.code,
      errors=[d.format() for d in diagnostics],
      diagnostics=diagnostics,
      mirrors=[render_block(x.mirror) for x in transformer.expansions],
      success=not diagnostics,
    )
