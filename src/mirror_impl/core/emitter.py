"""
Code Emitter.

Assembles the output of one expansion: the original block, untouched, and a
new block targeting the mirror type holding one synthesized member per
selected member.

For each synthesized member:

1.  Name, method-local generics, attributes and body are copied verbatim.
2.  Parameter and return types have mapped parameters replaced by their
    mirrored expressions.
3.  The where-clause comes from the `BoundRewriter`. A member that declares
    its own ``transform_bounds`` also gets ``P: <bound_trait>`` for each
    listed parameter, ahead of the rewritten clause. Members inheriting the
    block directive rely on the block clause instead.
4.  A typed receiver naming the source type is retargeted to the mirror type.

Under an ``ExplicitBounds`` directive the substitution map is the identity:
only the where-clause and the receiver change, so a parameter such as
``items: List[T]`` keeps ``T``. Mirrored types in the signature must be
spelled out by hand.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from mirror_impl.core.errors import MirrorError, UnsupportedConstruct
from mirror_impl.core.mapper import ParameterMapper, SubstitutionMap
from mirror_impl.core.model import (
  Directive,
  Expansion,
  ImplBlock,
  MemberDeclaration,
  MirrorConvention,
  Parameter,
  Predicate,
  SourceType,
)
from mirror_impl.core.rewriter import BoundRewriter
from mirror_impl.core.selector import Selection
from mirror_impl.core.tokens import substitute_annotation

logger = logging.getLogger(__name__)


def _retype(param: Parameter, mapping: SubstitutionMap) -> Parameter:
  if param.annotation is None:
    return param
  annotation = substitute_annotation(param.annotation, mapping.changed)
  if annotation == param.annotation:
    return param
  return Parameter(param.name, annotation, param.default, param.prefix)


class CodeEmitter:
  """
  Builds the mirror block from the selector's verdicts.
  """

  def __init__(self, convention: MirrorConvention, rewriter: BoundRewriter) -> None:
    self.convention = convention
    self.rewriter = rewriter

  def _member_where(self, selection: Selection, mapping: SubstitutionMap) -> Tuple[Predicate, ...]:
    where = self.rewriter.rewrite(selection.member.where, selection.directive, mapping)
    if not selection.declared:
      return where
    return self.rewriter.implied_bounds(selection.directive, self.convention.bound_trait) + where

  def mirror_member(
    self,
    selection: Selection,
    mapper: ParameterMapper,
    source_name: str,
    mirror_name: str,
  ) -> MemberDeclaration:
    """
    Synthesizes the mirror counterpart of one selected member.

    Args:
        selection: Member and its effective directive.
        mapper: Mapper bound to the block's generic parameters.
        source_name: Name of the SourceType.
        mirror_name: Name of the MirrorType.

    Returns:
        MemberDeclaration: The mirror member.

    Raises:
        UnsupportedConstruct: If the member has no receiver, or one of its own
            generics shadows a mapped parameter.
        UnknownParameter: If the directive names an undeclared parameter.
    """
    member = selection.member
    if member.receiver is None:
      raise UnsupportedConstruct(
        f"`{member.name}` has no receiver; only methods can be mirrored",
        member.span,
      )

    try:
      mapping = mapper.build(selection.directive)
    except MirrorError as e:
      raise e.at(member.span)

    shadowed = [g.name for g in member.generics if g.name in mapping.changed]
    if shadowed:
      raise UnsupportedConstruct(
        f"`{member.name}` declares generic `{shadowed[0]}`, which shadows a transformed parameter of `{source_name}`",
        member.span,
      )

    receiver = member.receiver
    if receiver.annotation is not None:
      retargeted = substitute_annotation(receiver.annotation, {source_name: mirror_name})
      receiver = Parameter(receiver.name, retargeted, receiver.default, receiver.prefix)

    returns = member.returns
    if returns is not None:
      returns = substitute_annotation(returns, mapping.changed)

    return MemberDeclaration(
      name=member.name,
      generics=member.generics,
      receiver=receiver,
      parameters=tuple(_retype(p, mapping) for p in member.parameters),
      returns=returns,
      where=self._member_where(selection, mapping),
      body=member.body,
      attributes=member.attributes,
      span=member.span,
    )

  def emit(
    self,
    block: ImplBlock,
    block_directive: Directive,
    selections: Sequence[Selection],
    mapper: ParameterMapper,
    mirror_name: Optional[str] = None,
  ) -> Expansion:
    """
    Produces the (original, mirror) pair for a block.

    Every selected member is synthesized before anything is returned, so a
    single failing member aborts the whole block.

    Args:
        block: The input block, returned unchanged as ``original``.
        block_directive: Parsed block-level directive.
        selections: Selector verdicts in source order.
        mapper: Mapper bound to the block's generic parameters.
        mirror_name: Overrides the convention-derived mirror type name.

    Returns:
        Expansion: Original and mirror blocks.
    """
    source = block.self_type
    mirror_name = mirror_name or source.mirror_type(self.convention).name

    block_map = mapper.build(block_directive)
    where = self.rewriter.implied_bounds(block_directive, self.convention.bound_trait)
    where += self.rewriter.rewrite(block.where, block_directive, block_map)

    members: List[MemberDeclaration] = []
    for selection in selections:
      if not selection.mirrored:
        logger.debug("Passthrough member %s.%s", source.name, selection.member.name)
        continue
      members.append(self.mirror_member(selection, mapper, source.name, mirror_name))

    mirror = ImplBlock(
      self_type=SourceType(name=mirror_name, generics=source.generics),
      members=tuple(members),
      trait=block.trait,
      where=where,
      attributes=block.attributes,
      span=block.span,
    )
    return Expansion(original=block, mirror=mirror)
