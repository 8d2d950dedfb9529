"""
Core mirroring engine: data model, directive parsing and block expansion.
"""

from mirror_impl.core.directives import DirectiveParser, resolve_effective
from mirror_impl.core.engine import MirrorEngine
from mirror_impl.core.errors import (
  ConflictingDirective,
  Diagnostic,
  MalformedDirective,
  MirrorError,
  UnknownParameter,
  UnsupportedConstruct,
)
from mirror_impl.core.model import (
  Annotation,
  ExplicitBounds,
  Expansion,
  GenericParameter,
  ImplBlock,
  MemberDeclaration,
  MirrorConvention,
  MirrorType,
  Parameter,
  Predicate,
  SourceType,
  Span,
  TransformBounds,
)

__all__ = [
  "Annotation",
  "ConflictingDirective",
  "Diagnostic",
  "DirectiveParser",
  "ExplicitBounds",
  "Expansion",
  "GenericParameter",
  "ImplBlock",
  "MalformedDirective",
  "MemberDeclaration",
  "MirrorConvention",
  "MirrorEngine",
  "MirrorError",
  "MirrorType",
  "Parameter",
  "Predicate",
  "SourceType",
  "Span",
  "TransformBounds",
  "UnknownParameter",
  "UnsupportedConstruct",
  "resolve_effective",
]
