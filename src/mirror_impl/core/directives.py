"""
Directive Parser.

Turns raw annotation payloads into structured directives:

- ``transform_bounds(T, S)`` -> `TransformBounds` (``("T", "S")``)
- ``bounds(T: PartialEq, S: Hash)`` -> `ExplicitBounds`
- an empty payload (bare marker) -> ``None``

Predicates in ``bounds(...)`` may also be written as quoted strings, which is
how they appear in Python decorator calls: ``bounds("S: Sum[T.Mirrored]")``.

It also owns the precedence rule between scopes: a member-level directive
always wins over the block-level one, and a member without one inherits the
block directive.
"""

import ast
import logging
import re
from typing import Iterable, Optional, Sequence

from mirror_impl.core.errors import ConflictingDirective, MalformedDirective, UnknownParameter
from mirror_impl.core.model import Annotation, Directive, ExplicitBounds, Predicate, Span, TransformBounds
from mirror_impl.core.tokens import is_string_literal, split_top_level
from mirror_impl.enums import DirectiveKind

logger = logging.getLogger(__name__)

_CALL_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*(\((.*)\))?\s*$", re.DOTALL)
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _unquote(item: str) -> str:
  if is_string_literal(item):
    return ast.literal_eval(item)
  return item


class DirectiveParser:
  """
  Parses annotation payloads against the generic parameters of one type.

  Attributes:
      declared (Optional[Tuple[str, ...]]): Generic parameter names of the
          enclosing type. ``None`` skips the unknown-parameter check.
  """

  def __init__(self, declared: Optional[Sequence[str]] = None) -> None:
    self.declared = tuple(declared) if declared is not None else None

  def parse(self, payload: str, span: Optional[Span] = None) -> Directive:
    """
    Parses a single payload.

    Args:
        payload: Text inside the marker, e.g. ``transform_bounds(T)``.
        span: Location used for error reporting.

    Returns:
        Directive: The parsed directive, or ``None`` for an empty payload.

    Raises:
        MalformedDirective: If the payload is neither directive form.
        UnknownParameter: If ``transform_bounds`` names an undeclared parameter.
        ConflictingDirective: If the payload holds more than one directive.
    """
    text = payload.strip()
    if not text:
      return None

    try:
      items = split_top_level(text)
    except ValueError as e:
      raise MalformedDirective(f"Unparsable directive `{text}`: {e}", span)

    if len(items) > 1:
      raise ConflictingDirective(
        f"Only one directive is allowed per scope, found {len(items)}: `{text}`",
        span,
      )

    match = _CALL_RE.match(items[0])
    if not match:
      raise MalformedDirective(f"Unparsable directive `{text}`", span)

    keyword, arguments, inner = match.group(1), match.group(2), match.group(3)
    if keyword not in (DirectiveKind.TRANSFORM_BOUNDS.value, DirectiveKind.EXPLICIT_BOUNDS.value):
      raise MalformedDirective(f"Unsupported argument `{keyword}`", span)
    if arguments is None:
      raise MalformedDirective(f"`{keyword}` must be a list: `{keyword}(...)`", span)

    try:
      args = split_top_level(inner)
    except ValueError as e:
      raise MalformedDirective(f"Unparsable arguments in `{text}`: {e}", span)
    if any(not a for a in args):
      raise MalformedDirective(f"Empty argument in `{text}`", span)

    if keyword == DirectiveKind.TRANSFORM_BOUNDS.value:
      return self._transform_bounds(args, span)
    return self._explicit_bounds(args, span)

  def _transform_bounds(self, args: Sequence[str], span: Optional[Span]) -> TransformBounds:
    names = []
    for raw in args:
      name = _unquote(raw).strip()
      if not _IDENT_RE.match(name):
        raise MalformedDirective(f"`transform_bounds` expects parameter names, got `{raw}`", span)
      if self.declared is not None and name not in self.declared:
        raise UnknownParameter(name, self.declared, span)
      if name not in names:
        names.append(name)
    return TransformBounds(parameters=tuple(names), span=span)

  def _explicit_bounds(self, args: Sequence[str], span: Optional[Span]) -> ExplicitBounds:
    predicates = []
    for raw in args:
      text = _unquote(raw).strip()
      if not text:
        raise MalformedDirective("`bounds` predicates must not be empty", span)
      predicates.append(Predicate(text, span))
    return ExplicitBounds(predicates=tuple(predicates), span=span)

  def parse_annotations(self, annotations: Iterable[Annotation], preset: Directive = None) -> Directive:
    """
    Parses every marker found at one scope into a single directive.

    Bare markers contribute nothing. Two directives at the same scope, or a
    directive next to one set programmatically, cannot be ordered by the
    override rule and are rejected.

    Args:
        annotations: Raw markers of one block or member.
        preset: Directive already attached to the declaration.

    Returns:
        Directive: The scope's directive, or ``None``.
    """
    found: Directive = preset
    for annotation in annotations:
      directive = self.parse(annotation.payload, annotation.span)
      if directive is None:
        continue
      if found is not None:
        raise ConflictingDirective("Multiple mirror directives on the same declaration", annotation.span)
      found = directive
      logger.debug("Parsed directive %s at %s", describe(directive), annotation.span)
    return found


def resolve_effective(block: Directive, member: Directive) -> Directive:
  """
  Applies the override rule: member wins, otherwise inherit the block.

  Args:
      block: Block-level directive.
      member: Member-level directive.

  Returns:
      Directive: The member's effective directive.
  """
  if member is not None:
    return member
  return block


def parse_payload(payload: str, declared: Optional[Sequence[str]] = None) -> Directive:
  """Convenience wrapper around `DirectiveParser.parse`."""
  return DirectiveParser(declared).parse(payload)


def describe(directive: Directive) -> str:
  """
  Renders a directive back to payload form, for logs and previews.

  Args:
      directive: Directive to render.

  Returns:
      str: ``transform_bounds(T)``, ``bounds(T: Eq)`` or ``none``.
  """
  if directive is None:
    return "none"
  if isinstance(directive, TransformBounds):
    return f"transform_bounds({', '.join(directive.parameters)})"
  return f"bounds({', '.join(p.text for p in directive.predicates)})"


__all__ = ["DirectiveParser", "describe", "parse_payload", "resolve_effective"]
