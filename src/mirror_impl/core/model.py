"""
Abstract Data Model for Impl Blocks.

The engine never touches host syntax. Every host front end lowers its
declarations into the frozen dataclasses defined here, and the engine returns
new instances of the same types. Type expressions, predicates and bodies are
kept as opaque strings; only `mirror_impl.core.tokens` looks inside them.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union

from mirror_impl.enums import DirectiveKind


@dataclass(frozen=True)
class Span:
  """
  Source location of an annotation, member or predicate.

  Attributes:
      line (int): 1-based line number.
      column (int): 0-based column offset.
  """

  line: int
  column: int

  def __str__(self) -> str:
    return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class MirrorConvention:
  """
  Naming scheme agreed with the external mirror generator.

  Attributes:
      type_template (str): Format string producing the mirror type name from
          ``{name}``, the source type name.
      param_template (str): Format string producing the mirrored expression for
          ``{param}``, a generic parameter identifier.
      bound_trait (str): Trait every transformed parameter must implement.
          Empty string disables the implied bound.
  """

  type_template: str = "Mirrored{name}"
  param_template: str = "{param}::Mirrored"
  bound_trait: str = "Mirror"

  def mirror_name(self, name: str) -> str:
    return self.type_template.format(name=name)

  def mirror_param(self, param: str) -> str:
    return self.param_template.format(param=param)


@dataclass(frozen=True)
class MirrorType:
  """The generated counterpart of a SourceType."""

  name: str
  convention: MirrorConvention = field(default_factory=MirrorConvention)

  @classmethod
  def for_source(cls, source_name: str, convention: MirrorConvention) -> "MirrorType":
    return cls(name=convention.mirror_name(source_name), convention=convention)


@dataclass(frozen=True)
class GenericParameter:
  """
  A generic parameter of a type or member.

  Attributes:
      name (str): The identifier.
      bounds (Tuple[str, ...]): Opaque bound expressions (``Clone``, ``Hashable``).
      default (Optional[str]): Opaque default type expression.
  """

  name: str
  bounds: Tuple[str, ...] = ()
  default: Optional[str] = None


@dataclass(frozen=True)
class SourceType:
  """The declared type whose methods are mirrored."""

  name: str
  generics: Tuple[GenericParameter, ...] = ()
  mirror: Optional[MirrorType] = None

  @property
  def parameter_names(self) -> Tuple[str, ...]:
    return tuple(g.name for g in self.generics)

  def mirror_type(self, convention: Optional[MirrorConvention] = None) -> MirrorType:
    """
    Resolves the MirrorType, deriving it from ``convention`` when unset.

    Args:
        convention: Fallback naming convention.

    Returns:
        MirrorType: The attached or derived mirror.
    """
    if self.mirror is not None:
      return self.mirror
    return MirrorType.for_source(self.name, convention or MirrorConvention())


@dataclass(frozen=True)
class Predicate:
  """
  A single where-clause constraint, e.g. ``T: Clone``.

  The text is opaque; ``subject`` and ``bounds`` split it at the first
  top-level colon that is not part of a ``::`` path separator.
  """

  text: str
  span: Optional[Span] = field(default=None, compare=False)

  def split(self) -> Tuple[str, str]:
    """
    Splits the predicate into (subject, remainder).

    The remainder keeps its leading colon so ``subject + remainder == text``.
    A predicate without a top-level colon is all subject.
    """
    depth = 0
    text = self.text
    i = 0
    while i < len(text):
      ch = text[i]
      if text.startswith("->", i):
        i += 2
        continue
      if ch in "<([{":
        depth += 1
      elif ch in ">)]}":
        depth -= 1
      elif ch == ":" and depth == 0:
        if text.startswith("::", i):
          i += 2
          continue
        return text[:i], text[i:]
      i += 1
    return text, ""

  @property
  def subject(self) -> str:
    return self.split()[0].strip()

  def __str__(self) -> str:
    return self.text


@dataclass(frozen=True)
class TransformBounds:
  """Retarget bounds on the listed parameters to their mirrored expressions."""

  parameters: Tuple[str, ...] = ()
  span: Optional[Span] = field(default=None, compare=False)

  kind = DirectiveKind.TRANSFORM_BOUNDS


@dataclass(frozen=True)
class ExplicitBounds:
  """Replace the mirror's where-clause with the given predicates verbatim."""

  predicates: Tuple[Predicate, ...] = ()
  span: Optional[Span] = field(default=None, compare=False)

  kind = DirectiveKind.EXPLICIT_BOUNDS


@dataclass(frozen=True)
class Annotation:
  """
  A raw mirror-marker payload as written at block or member scope.

  Attributes:
      payload (str): Text inside the marker, e.g. ``transform_bounds(T)``.
          Empty for a bare marker.
      span (Optional[Span]): Location of the marker.
  """

  payload: str = ""
  span: Optional[Span] = field(default=None, compare=False)


# ``None`` is the third directive form: passthrough only.
Directive = Optional[Union[TransformBounds, ExplicitBounds]]


@dataclass(frozen=True)
class Parameter:
  """
  A member parameter.

  Attributes:
      name (str): Parameter identifier. For a receiver this is the receiver
          spelling (``&self``, ``self``).
      annotation (Optional[str]): Opaque type expression.
      default (Optional[str]): Opaque default value, copied verbatim.
      prefix (str): Star prefix for variadic parameters (``*``, ``**``).
  """

  name: str
  annotation: Optional[str] = None
  default: Optional[str] = None
  prefix: str = ""


@dataclass(frozen=True)
class MemberDeclaration:
  """
  A method-like declaration inside an ImplBlock.

  Attributes:
      name (str): Member name.
      generics (Tuple[GenericParameter, ...]): Method-local generics.
      receiver (Optional[Parameter]): The ``self`` parameter, if any.
      parameters (Tuple[Parameter, ...]): Non-receiver parameters in order.
      returns (Optional[str]): Opaque return type expression.
      where (Tuple[Predicate, ...]): Ordered where-clause.
      body (str): Opaque body, never altered.
      directive (Directive): Member-level directive, when built directly
          instead of from ``annotations``.
      annotations (Tuple[Annotation, ...]): Raw mirror-marker payloads found on
          the member.
      attributes (Tuple[str, ...]): Other decorators/attributes, copied through.
      span (Optional[Span]): Location of the member.
  """

  name: str
  generics: Tuple[GenericParameter, ...] = ()
  receiver: Optional[Parameter] = None
  parameters: Tuple[Parameter, ...] = ()
  returns: Optional[str] = None
  where: Tuple[Predicate, ...] = ()
  body: str = ""
  directive: Directive = None
  annotations: Tuple[Annotation, ...] = ()
  attributes: Tuple[str, ...] = ()
  span: Optional[Span] = field(default=None, compare=False)

  def with_changes(self, **changes) -> "MemberDeclaration":
    return replace(self, **changes)


@dataclass(frozen=True)
class ImplBlock:
  """
  An impl-style block: a type plus its ordered member declarations.

  Attributes:
      self_type (SourceType): The type the block is attached to.
      members (Tuple[MemberDeclaration, ...]): Ordered members.
      directive (Directive): Block-level directive, when built directly.
      annotations (Tuple[Annotation, ...]): Raw block-level marker payloads.
      trait (Optional[str]): Implemented trait, kept on the mirror block.
      where (Tuple[Predicate, ...]): The block's own where-clause.
      attributes (Tuple[str, ...]): Other block attributes.
      span (Optional[Span]): Location of the block annotation.
  """

  self_type: SourceType
  members: Tuple[MemberDeclaration, ...] = ()
  directive: Directive = None
  annotations: Tuple[Annotation, ...] = ()
  trait: Optional[str] = None
  where: Tuple[Predicate, ...] = ()
  attributes: Tuple[str, ...] = ()
  span: Optional[Span] = field(default=None, compare=False)

  @property
  def type_arguments(self) -> str:
    names = self.self_type.parameter_names
    return f"<{', '.join(names)}>" if names else ""

  def with_changes(self, **changes) -> "ImplBlock":
    return replace(self, **changes)


@dataclass(frozen=True)
class Expansion:
  """The two blocks produced for one input block, in source order."""

  original: ImplBlock
  mirror: ImplBlock

  def __iter__(self):
    return iter((self.original, self.mirror))
