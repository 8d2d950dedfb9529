"""
Tests for the Directive Parser.

Verifies:
1. Both directive forms and the bare marker.
2. Malformed, unknown-parameter and conflicting payloads.
3. Member-over-block precedence.
"""

import pytest

from mirror_impl.core.directives import DirectiveParser, describe, parse_payload, resolve_effective
from mirror_impl.core.errors import ConflictingDirective, MalformedDirective, UnknownParameter
from mirror_impl.core.model import Annotation, ExplicitBounds, Predicate, Span, TransformBounds
from mirror_impl.enums import DirectiveKind


@pytest.fixture
def parser():
  return DirectiveParser(("T", "S"))


def test_transform_bounds(parser):
  directive = parser.parse("transform_bounds(T)")
  assert directive == TransformBounds(("T",))
  assert directive.kind == DirectiveKind.TRANSFORM_BOUNDS


def test_transform_bounds_deduplicates_in_order(parser):
  assert parser.parse("transform_bounds(S, T, S)").parameters == ("S", "T")


def test_transform_bounds_accepts_quoted_names(parser):
  assert parser.parse('transform_bounds("T")') == TransformBounds(("T",))


def test_explicit_bounds(parser):
  directive = parser.parse("bounds(T: PartialEq, S: Hash + Sum<T>)")
  assert isinstance(directive, ExplicitBounds)
  assert [p.text for p in directive.predicates] == ["T: PartialEq", "S: Hash + Sum<T>"]


def test_explicit_bounds_quoted_predicates(parser):
  directive = parser.parse('bounds("S: Sum[T.Mirrored]", "T: Hashable")')
  assert directive.predicates == (Predicate("S: Sum[T.Mirrored]"), Predicate("T: Hashable"))


def test_empty_lists(parser):
  assert parser.parse("transform_bounds()") == TransformBounds(())
  assert parser.parse("bounds()") == ExplicitBounds(())


@pytest.mark.parametrize("payload", ["", "   "])
def test_bare_marker_is_none(parser, payload):
  assert parser.parse(payload) is None


def test_unknown_parameter(parser):
  span = Span(4, 2)
  with pytest.raises(UnknownParameter) as excinfo:
    parser.parse("transform_bounds(U)", span)

  err = excinfo.value
  assert err.parameter == "U"
  assert "`U`" in str(err)
  assert err.span == span
  assert isinstance(err, MalformedDirective)


def test_unknown_parameter_check_skipped_without_declared():
  assert parse_payload("transform_bounds(U)") == TransformBounds(("U",))


@pytest.mark.parametrize(
  "payload",
  [
    "frobnicate(T)",
    "transform_bounds",
    "transform_bounds(T::Item)",
    "transform_bounds(T,, S)",
    "bounds(T: Eq",
    "42",
  ],
)
def test_malformed(parser, payload):
  with pytest.raises(MalformedDirective):
    parser.parse(payload)


def test_unsupported_keyword_message(parser):
  with pytest.raises(MalformedDirective, match="Unsupported argument `frobnicate`"):
    parser.parse("frobnicate(T)")


def test_two_directives_in_one_payload_conflict(parser):
  with pytest.raises(ConflictingDirective):
    parser.parse("transform_bounds(T), bounds(T: Eq)")


def test_parse_annotations_conflict(parser):
  annotations = [Annotation("transform_bounds(T)", Span(1, 0)), Annotation("bounds(T: Eq)", Span(2, 0))]
  with pytest.raises(ConflictingDirective) as excinfo:
    parser.parse_annotations(annotations)
  assert excinfo.value.span == Span(2, 0)


def test_parse_annotations_conflicts_with_preset(parser):
  with pytest.raises(ConflictingDirective):
    parser.parse_annotations([Annotation("bounds(T: Eq)")], preset=TransformBounds(("T",)))


def test_parse_annotations_skips_bare_markers(parser):
  annotations = [Annotation(""), Annotation("transform_bounds(T)")]
  assert parser.parse_annotations(annotations) == TransformBounds(("T",))
  assert parser.parse_annotations([]) is None


def test_member_wins():
  block = TransformBounds(("T",))
  member = ExplicitBounds((Predicate("T: Eq"),))
  assert resolve_effective(block, member) is member
  assert resolve_effective(block, None) is block
  assert resolve_effective(None, None) is None


def test_describe():
  assert describe(None) == "none"
  assert describe(TransformBounds(("T", "S"))) == "transform_bounds(T, S)"
  assert describe(ExplicitBounds((Predicate("T: Eq"),))) == "bounds(T: Eq)"
