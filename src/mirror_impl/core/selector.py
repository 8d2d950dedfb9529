"""
Member Selector.

Walks the members of a block in source order and decides, from each member's
effective directive, whether it is mirrored or only passed through.
"""

from dataclasses import dataclass
from typing import List

from mirror_impl.core.directives import DirectiveParser, resolve_effective
from mirror_impl.core.errors import MirrorError
from mirror_impl.core.model import Directive, ImplBlock, MemberDeclaration


@dataclass(frozen=True)
class Selection:
  """
  The selector's verdict for one member.

  Attributes:
      member (MemberDeclaration): The member as declared.
      directive (Directive): Its effective directive.
      declared (bool): True when the directive was written on the member
          itself rather than inherited from the block.
  """

  member: MemberDeclaration
  directive: Directive
  declared: bool = False

  @property
  def mirrored(self) -> bool:
    return self.directive is not None


class MemberSelector:
  """
  Resolves effective directives for every member of a block.
  """

  def __init__(self, parser: DirectiveParser) -> None:
    self.parser = parser

  def select(self, block: ImplBlock, block_directive: Directive) -> List[Selection]:
    """
    Produces one `Selection` per member, in source order.

    Args:
        block: The input block.
        block_directive: The already parsed block-level directive.

    Returns:
        List[Selection]: Verdicts, passthrough members included.

    Raises:
        MirrorError: Any parse failure of a member's markers, located at the
            member when the marker itself has no span.
    """
    selections = []
    for member in block.members:
      try:
        own = self.parser.parse_annotations(member.annotations, member.directive)
      except MirrorError as e:
        raise e.at(member.span)
      selections.append(Selection(member, resolve_effective(block_directive, own), declared=own is not None))
    return selections
