"""
Engine Error Hierarchy.

Every failure the engine can detect is a `MirrorError`. Errors carry the
span of the offending annotation, member or predicate so host front ends can
report them at the exact source location. A raised error aborts the
expansion of the whole block; nothing is emitted for it.
"""

from typing import Optional

from pydantic import BaseModel, Field

from mirror_impl.core.model import Span
from mirror_impl.enums import ErrorKind


class MirrorError(ValueError):
  """
  Base class for expansion failures.

  Attributes:
      kind (ErrorKind): Diagnostic category.
      message (str): Human-readable description.
      span (Optional[Span]): Source location, when known.
  """

  kind: ErrorKind = ErrorKind.MALFORMED_DIRECTIVE

  def __init__(self, message: str, span: Optional[Span] = None) -> None:
    super().__init__(message)
    self.message = message
    self.span = span

  def at(self, span: Optional[Span]) -> "MirrorError":
    """Fills in the span if the raiser did not know it."""
    if self.span is None:
      self.span = span
    return self

  def to_diagnostic(self, path: Optional[str] = None) -> "Diagnostic":
    return Diagnostic(
      kind=self.kind,
      message=self.message,
      line=self.span.line if self.span else None,
      column=self.span.column if self.span else None,
      path=path,
    )

  def __str__(self) -> str:
    if self.span is not None:
      return f"{self.span}: {self.message}"
    return self.message


class MalformedDirective(MirrorError):
  """An annotation payload that parses to neither directive form."""

  kind = ErrorKind.MALFORMED_DIRECTIVE


class UnknownParameter(MalformedDirective):
  """A directive names a parameter the enclosing type does not declare."""

  kind = ErrorKind.UNKNOWN_PARAMETER

  def __init__(self, parameter: str, declared: tuple = (), span: Optional[Span] = None) -> None:
    self.parameter = parameter
    self.declared = tuple(declared)
    listing = ", ".join(self.declared) if self.declared else "none"
    super().__init__(f"Unknown generic parameter `{parameter}` (declared: {listing})", span)


class ConflictingDirective(MirrorError):
  """More than one directive was given at a single scope."""

  kind = ErrorKind.CONFLICTING_DIRECTIVE


class UnsupportedConstruct(MirrorError):
  """A member or block shape the engine cannot mirror."""

  kind = ErrorKind.UNSUPPORTED_CONSTRUCT


class Diagnostic(BaseModel):
  """
  Serializable error report for a single failed block.
  """

  kind: ErrorKind = Field(description="Error category.")
  message: str = Field(description="Human-readable explanation.")
  line: Optional[int] = Field(default=None, description="1-based line of the offending construct.")
  column: Optional[int] = Field(default=None, description="0-based column of the offending construct.")
  path: Optional[str] = Field(default=None, description="Source file, when known.")

  def format(self) -> str:
    """
    Renders the diagnostic in ``path:line:col: error[Kind]: message`` form.

    Returns:
        str: The formatted line.
    """
    location = [part for part in (self.path, self.line, self.column) if part is not None]
    prefix = ":".join(str(p) for p in location)
    head = f"{prefix}: " if prefix else ""
    return f"{head}error[{self.kind.value}]: {self.message}"
