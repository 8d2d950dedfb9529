"""
Module Transformer.

The LibCST pass that plays the role of annotation expansion for Python: every
class carrying the block marker is lowered with `ClassReader`, expanded by the
`MirrorEngine`, and followed in the output by the mirror class built with
`ClassWriter`.

A block whose expansion fails is left exactly as written, gets no mirror
class, and contributes a `MirrorError` to `errors`. Other blocks in the same
module are unaffected.
"""

import logging
from typing import List, Optional, Union

import libcst as cst
from libcst.metadata import PositionProvider

from mirror_impl.core.engine import MirrorEngine
from mirror_impl.core.errors import MirrorError
from mirror_impl.core.model import Expansion, Span
from mirror_impl.host.reader import ClassReader, collect_type_vars
from mirror_impl.host.writer import ClassWriter

logger = logging.getLogger(__name__)


class MirrorTransformer(cst.CSTTransformer):
  """
  Inserts a mirror class after each marked class.

  Attributes:
      engine (MirrorEngine): Expansion engine.
      expansions (List[Expansion]): Successful expansions in source order.
      errors (List[MirrorError]): Failed blocks in source order.
  """

  METADATA_DEPENDENCIES = (PositionProvider,)

  def __init__(
    self,
    engine: MirrorEngine,
    block_marker: str = "mirror_impl",
    member_marker: str = "mirror_method",
    where_marker: str = "where",
  ) -> None:
    super().__init__()
    self.engine = engine
    self.markers = (block_marker, member_marker, where_marker)
    self.reader: Optional[ClassReader] = None
    self.writer: Optional[ClassWriter] = None
    self.expansions: List[Expansion] = []
    self.errors: List[MirrorError] = []

  def _position(self, node: cst.CSTNode) -> Optional[Span]:
    pos = self.get_metadata(PositionProvider, node, None)
    if pos is None:
      return None
    return Span(pos.start.line, pos.start.column)

  def visit_Module(self, node: cst.Module) -> Optional[bool]:
    """
    Builds the TypeVar table the reader resolves generics against.
    """
    self.reader = ClassReader(collect_type_vars(node), self._position, *self.markers)
    self.writer = ClassWriter(self.reader)
    return True

  def leave_ClassDef(
    self, original_node: cst.ClassDef, updated_node: cst.ClassDef
  ) -> Union[cst.ClassDef, cst.FlattenSentinel]:
    """
    Expands a marked class.

    The original node is read (it carries position metadata); the updated node
    is what gets emitted, so nested expansions survive.
    """
    if not self.reader.is_marked(original_node):
      return updated_node

    read = self.reader.read(original_node)
    try:
      expansion = self.engine.expand(read.block)
    except MirrorError as e:
      logger.debug("Expansion of %s failed: %s", original_node.name.value, e)
      self.errors.append(e)
      return updated_node

    self.expansions.append(expansion)
    mirror_class = self.writer.write(read, expansion.mirror)
    return cst.FlattenSentinel([updated_node, mirror_class])
