"""
Bound Rewriter.

Produces the mirror's where-clause from the original one:

- ``TransformBounds``: each predicate is rewritten by substituting standalone
  occurrences of mapped parameters. With the default ``subject`` scope only
  the bounded type is touched, so ``T: Clone`` becomes ``T::Mirrored: Clone``
  while ``S: Sum<T>`` is kept. The ``full`` scope also rewrites the bounds.
- ``ExplicitBounds``: the declared list is returned verbatim and the original
  clause is dropped.
- ``None``: the clause is returned unchanged.

The rewrite is purely syntactic. Whether the result is satisfiable is left to
the host type checker.
"""

from typing import Sequence, Tuple

from mirror_impl.core.mapper import SubstitutionMap
from mirror_impl.core.model import Directive, ExplicitBounds, Predicate, TransformBounds
from mirror_impl.core.tokens import substitute
from mirror_impl.enums import RewriteScope


class BoundRewriter:
  """
  Applies a substitution map to where-clause predicates.

  Attributes:
      scope (RewriteScope): Which part of each predicate is eligible.
  """

  def __init__(self, scope: RewriteScope = RewriteScope.SUBJECT) -> None:
    self.scope = RewriteScope(scope)

  def rewrite_predicate(self, predicate: Predicate, mapping: SubstitutionMap) -> Predicate:
    """
    Rewrites one predicate.

    Args:
        predicate: Original constraint.
        mapping: Substitution map for the enclosing directive.

    Returns:
        Predicate: The same instance when nothing changed, otherwise a new one
        with the original span.
    """
    changes = mapping.changed
    if not changes:
      return predicate

    if self.scope == RewriteScope.FULL:
      text = substitute(predicate.text, changes)
    else:
      subject, rest = predicate.split()
      text = substitute(subject, changes) + rest

    if text == predicate.text:
      return predicate
    return Predicate(text, predicate.span)

  def rewrite(
    self,
    where: Sequence[Predicate],
    directive: Directive,
    mapping: SubstitutionMap,
  ) -> Tuple[Predicate, ...]:
    """
    Rewrites a whole where-clause for the mirror.

    Args:
        where: Original ordered predicates.
        directive: Effective directive.
        mapping: Substitution map built from ``directive``.

    Returns:
        Tuple[Predicate, ...]: Mirror predicates, order preserved.
    """
    if isinstance(directive, ExplicitBounds):
      return tuple(directive.predicates)
    if isinstance(directive, TransformBounds):
      return tuple(self.rewrite_predicate(p, mapping) for p in where)
    return tuple(where)

  def implied_bounds(self, directive: Directive, bound_trait: str) -> Tuple[Predicate, ...]:
    """
    Predicates requiring each transformed parameter to implement the mirror trait.

    Args:
        directive: Block-level directive.
        bound_trait: Trait name from the convention; empty disables.

    Returns:
        Tuple[Predicate, ...]: ``P: <bound_trait>`` per listed parameter.
    """
    if not bound_trait or not isinstance(directive, TransformBounds):
      return ()
    return tuple(Predicate(f"{name}: {bound_trait}", directive.span) for name in directive.parameters)
