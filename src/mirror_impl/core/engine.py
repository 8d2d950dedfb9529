"""
Orchestration Engine for Impl Block Mirroring.

This module provides the `MirrorEngine`, the driver of a single expansion.
It runs the components in their fixed order, once per block:

1.  **Directive Parser**: block-level markers, then every member's markers.
2.  **Parameter Mapper**: substitution maps per effective directive.
3.  **Bound Rewriter**: mirror where-clauses.
4.  **Member Selector**: mirrored vs passthrough members.
5.  **Code Emitter**: the (original, mirror) block pair.

The engine is a pure function of its input. It holds no state between
calls, so blocks may be expanded in any order or concurrently.
"""

import logging
from typing import Optional

from mirror_impl.core.directives import DirectiveParser, describe
from mirror_impl.core.emitter import CodeEmitter
from mirror_impl.core.errors import MirrorError
from mirror_impl.core.mapper import ParameterMapper
from mirror_impl.core.model import Expansion, ImplBlock, MirrorConvention
from mirror_impl.core.rewriter import BoundRewriter
from mirror_impl.core.selector import MemberSelector
from mirror_impl.enums import RewriteScope

logger = logging.getLogger(__name__)


class MirrorEngine:
  """
  Expands impl blocks into (original, mirror) pairs.
  """

  def __init__(
    self,
    convention: Optional[MirrorConvention] = None,
    scope: RewriteScope = RewriteScope.SUBJECT,
  ) -> None:
    """
    Initializes the Engine.

    Args:
        convention (MirrorConvention, optional): Mirror naming scheme. Uses the
            default ``Mirrored{name}`` / ``{param}::Mirrored`` scheme if None.
        scope (RewriteScope): Portion of predicates eligible for rewriting.
    """
    self.convention = convention or MirrorConvention()
    self.rewriter = BoundRewriter(scope)
    self.emitter = CodeEmitter(self.convention, self.rewriter)

  @classmethod
  def from_config(cls, config) -> "MirrorEngine":
    """
    Builds an engine from a `MirrorConfig`.

    Args:
        config (MirrorConfig): Loaded runtime configuration.

    Returns:
        MirrorEngine: Configured engine.
    """
    return cls(convention=config.convention, scope=config.rewrite_scope)

  def expand(self, block: ImplBlock) -> Expansion:
    """
    Expands one block.

    Args:
        block: The annotated input block.

    Returns:
        Expansion: The original block, unchanged, and the mirror block.

    Raises:
        MirrorError: On the first malformed directive, unknown parameter,
            same-scope conflict or unsupported member. No partial output is
            produced.
    """
    source = block.self_type
    parser = DirectiveParser(source.parameter_names)

    try:
      block_directive = parser.parse_annotations(block.annotations, block.directive)
    except MirrorError as e:
      raise e.at(block.span)

    mapper = ParameterMapper(source.generics, self.convention)
    selections = MemberSelector(parser).select(block, block_directive)

    mirror_name = source.mirror.name if source.mirror is not None else None
    expansion = self.emitter.emit(block, block_directive, selections, mapper, mirror_name)

    logger.debug(
      "Expanded %s -> %s (%s; %d/%d members mirrored)",
      source.name,
      expansion.mirror.self_type.name,
      describe(block_directive),
      len(expansion.mirror.members),
      len(block.members),
    )
    return expansion
