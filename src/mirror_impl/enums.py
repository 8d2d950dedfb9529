"""
Enumerations for mirror-impl.

This module defines the standard enumerations used across the codebase for
directive classification, bound rewriting scope and diagnostic kinds.
"""

from enum import Enum


class DirectiveKind(str, Enum):
  """
  The annotation forms understood by the Directive Parser.

  The values double as the keywords accepted in annotation payloads.
  """

  TRANSFORM_BOUNDS = "transform_bounds"
  EXPLICIT_BOUNDS = "bounds"


class RewriteScope(str, Enum):
  """
  Portion of a where-clause predicate eligible for parameter substitution.
  """

  SUBJECT = "subject"  # Only the bounded type, left of the top-level ':'
  FULL = "full"  # Every standalone occurrence, bounds included


class ErrorKind(str, Enum):
  """
  Diagnostic categories reported by the engine.
  """

  MALFORMED_DIRECTIVE = "MalformedDirective"
  UNKNOWN_PARAMETER = "UnknownParameter"
  CONFLICTING_DIRECTIVE = "ConflictingDirective"
  UNSUPPORTED_CONSTRUCT = "UnsupportedConstruct"
