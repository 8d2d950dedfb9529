"""
Parameter Mapper.

Builds the substitution map for one directive: parameters listed by a
``transform_bounds`` directive map to their mirrored expression under the
mirror generator's convention, every other parameter maps to itself.
"""

from typing import Dict, Iterator, Mapping, Sequence, Tuple

from mirror_impl.core.errors import UnknownParameter
from mirror_impl.core.model import Directive, GenericParameter, MirrorConvention, TransformBounds


class SubstitutionMap(Mapping[str, str]):
  """
  Read-only parameter-name -> expression mapping.

  Iteration and ``len`` cover every declared parameter, identity entries
  included. `changed` exposes only the entries that actually rewrite text,
  which is what the token substitution consumes.
  """

  def __init__(self, entries: Sequence[Tuple[str, str]]) -> None:
    self._entries: Dict[str, str] = dict(entries)

  def __getitem__(self, key: str) -> str:
    return self._entries[key]

  def __iter__(self) -> Iterator[str]:
    return iter(self._entries)

  def __len__(self) -> int:
    return len(self._entries)

  @property
  def changed(self) -> Dict[str, str]:
    return {k: v for k, v in self._entries.items() if k != v}

  @property
  def is_identity(self) -> bool:
    return not self.changed

  def __repr__(self) -> str:
    return f"SubstitutionMap({self._entries!r})"


class ParameterMapper:
  """
  Resolves substitution maps against a type's generic parameters.
  """

  def __init__(self, generics: Sequence[GenericParameter], convention: MirrorConvention) -> None:
    """
    Args:
        generics: The SourceType's own generic parameters.
        convention: The mirror generator's naming convention.
    """
    self.generics = tuple(generics)
    self.convention = convention

  @property
  def declared(self) -> Tuple[str, ...]:
    return tuple(g.name for g in self.generics)

  def build(self, directive: Directive) -> SubstitutionMap:
    """
    Builds the map for ``directive``.

    Args:
        directive: The effective directive of a block or member.

    Returns:
        SubstitutionMap: Listed parameters -> mirrored expression; all other
        declared parameters -> themselves.

    Raises:
        UnknownParameter: If the directive lists an undeclared parameter.
    """
    listed: Tuple[str, ...] = ()
    if isinstance(directive, TransformBounds):
      listed = directive.parameters
      for name in listed:
        if name not in self.declared:
          raise UnknownParameter(name, self.declared, directive.span)

    entries = []
    for name in self.declared:
      if name in listed:
        entries.append((name, self.convention.mirror_param(name)))
      else:
        entries.append((name, name))
    return SubstitutionMap(entries)
