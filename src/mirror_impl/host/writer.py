"""
Python Class Writer.

Raises a mirror `ImplBlock` back into a LibCST ``ClassDef``, reusing the
original nodes wherever the engine left text unchanged:

- Class: renamed to the mirror type; bases, keywords and non-marker
  decorators copied; ``@where(...)`` emitted for a non-empty block clause.
- Methods: original nodes with mirror markers removed, annotations replaced
  only where the engine rewrote them, ``@where(...)`` carrying the mirror
  clause, body reused as-is. Rewritten annotations are written as quoted
  forward references.
"""

import json
from typing import Dict, List, Optional, Sequence

import libcst as cst

from mirror_impl.core.model import ImplBlock, MemberDeclaration, Parameter, Predicate
from mirror_impl.core.tokens import is_string_literal
from mirror_impl.host.reader import ClassReader, ReadBlock, code_of, decorator_name


def where_decorator(marker: str, predicates: Sequence[Predicate]) -> cst.Decorator:
  """
  Builds ``@where("p1", "p2")``.

  Args:
      marker: Decorator name.
      predicates: Clause to emit, in order.

  Returns:
      cst.Decorator: The decorator node.
  """
  args = ", ".join(json.dumps(p.text) for p in predicates)
  return cst.Decorator(decorator=cst.parse_expression(f"{marker}({args})"))


def _annotation(text: Optional[str], original: Optional[cst.Annotation]) -> Optional[cst.Annotation]:
  if text is None or original is None:
    return original
  if code_of(original.annotation) == text:
    return original
  # Mirrored names do not exist when the def runs, so rewrites stay unevaluated.
  if is_string_literal(text):
    expr = cst.parse_expression(text)
  else:
    expr = cst.SimpleString(json.dumps(text))
  return original.with_changes(annotation=expr)


class ClassWriter:
  """
  Builds mirror classes next to their originals.
  """

  def __init__(self, reader: ClassReader) -> None:
    self.reader = reader

  def _strip_markers(self, decorators: Sequence[cst.Decorator], *names: str) -> List[cst.Decorator]:
    return [d for d in decorators if decorator_name(d) not in names]

  def write_member(self, fn: cst.FunctionDef, member: MemberDeclaration) -> cst.FunctionDef:
    """
    Produces the mirror method from its original node.

    Args:
        fn: Original method.
        member: Mirror declaration synthesized by the engine.

    Returns:
        cst.FunctionDef: The mirror method.
    """
    decorators = self._strip_markers(fn.decorators, self.reader.member_marker, self.reader.where_marker)
    if member.where:
      decorators.append(where_decorator(self.reader.where_marker, member.where))

    declared: List[Parameter] = list(member.parameters)
    if member.receiver is not None:
      declared.insert(0, member.receiver)
    replaced: Dict[int, cst.Param] = {}
    for (param, _), mirror_param in zip(self.reader.ordered_params(fn), declared):
      annotation = _annotation(mirror_param.annotation, param.annotation)
      if annotation is not param.annotation:
        replaced[id(param)] = param.with_changes(annotation=annotation)

    def swap(param):
      return replaced.get(id(param), param)

    params = fn.params
    new_params = params.with_changes(
      posonly_params=[swap(p) for p in params.posonly_params],
      params=[swap(p) for p in params.params],
      star_arg=swap(params.star_arg),
      kwonly_params=[swap(p) for p in params.kwonly_params],
      star_kwarg=swap(params.star_kwarg),
    )

    return fn.with_changes(
      decorators=decorators,
      params=new_params,
      returns=_annotation(member.returns, fn.returns),
    )

  def write(self, read: ReadBlock, mirror: ImplBlock) -> cst.ClassDef:
    """
    Produces the mirror class.

    Args:
        read: The original class and its member nodes.
        mirror: Mirror block from the engine.

    Returns:
        cst.ClassDef: Class definition to insert after the original.
    """
    node = read.node
    decorators = self._strip_markers(node.decorators, self.reader.block_marker, self.reader.where_marker)
    if mirror.where:
      decorators.append(where_decorator(self.reader.where_marker, mirror.where))

    statements: List[cst.BaseStatement] = [self.write_member(read.functions[m.span], m) for m in mirror.members]
    if not statements:
      statements = [cst.SimpleStatementLine(body=[cst.Pass()])]

    if isinstance(node.body, cst.IndentedBlock):
      body = node.body.with_changes(body=statements)
    else:
      body = cst.IndentedBlock(body=statements)

    return node.with_changes(
      name=cst.Name(mirror.self_type.name),
      decorators=decorators,
      body=body,
      leading_lines=[cst.EmptyLine(), cst.EmptyLine()],
    )
