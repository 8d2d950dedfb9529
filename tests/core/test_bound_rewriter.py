"""
Tests for the Parameter Mapper and Bound Rewriter.
"""

import pytest

from mirror_impl.core.errors import UnknownParameter
from mirror_impl.core.mapper import ParameterMapper
from mirror_impl.core.model import ExplicitBounds, GenericParameter, MirrorConvention, Predicate, Span, TransformBounds
from mirror_impl.core.rewriter import BoundRewriter
from mirror_impl.enums import RewriteScope


@pytest.fixture
def mapper():
  return ParameterMapper([GenericParameter("T"), GenericParameter("U")], MirrorConvention())


def test_mapper_listed_and_identity(mapper):
  mapping = mapper.build(TransformBounds(("T",)))
  assert dict(mapping) == {"T": "T::Mirrored", "U": "U"}
  assert mapping.changed == {"T": "T::Mirrored"}
  assert not mapping.is_identity


def test_mapper_identity_for_other_directives(mapper):
  assert mapper.build(None).is_identity
  assert mapper.build(ExplicitBounds((Predicate("T: Eq"),))).is_identity
  assert mapper.build(TransformBounds(())).is_identity


def test_mapper_unknown_parameter(mapper):
  with pytest.raises(UnknownParameter) as excinfo:
    mapper.build(TransformBounds(("V",), Span(9, 1)))
  assert excinfo.value.parameter == "V"
  assert excinfo.value.span == Span(9, 1)


def test_mapper_custom_convention():
  mapper = ParameterMapper([GenericParameter("T")], MirrorConvention(param_template="Archived<{param}>"))
  assert mapper.build(TransformBounds(("T",)))["T"] == "Archived<T>"


@pytest.mark.parametrize(
  "before, after",
  [
    ("T: Clone", "T::Mirrored: Clone"),
    ("Vec<T>: Debug", "Vec<T::Mirrored>: Debug"),
    ("<T as MakeBar>::Bar: Clone", "<T::Mirrored as MakeBar>::Bar: Clone"),
    ("T: Into<U>", "T::Mirrored: Into<U>"),
  ],
)
def test_subject_scope(mapper, before, after):
  rewriter = BoundRewriter()
  mapping = mapper.build(TransformBounds(("T",)))
  assert rewriter.rewrite_predicate(Predicate(before), mapping).text == after


def test_unrelated_predicate_is_same_instance(mapper):
  rewriter = BoundRewriter()
  mapping = mapper.build(TransformBounds(("T",)))
  predicate = Predicate("S: Sum<T>")
  assert rewriter.rewrite_predicate(predicate, mapping) is predicate


def test_full_scope_rewrites_bounds(mapper):
  rewriter = BoundRewriter(RewriteScope.FULL)
  mapping = mapper.build(TransformBounds(("T", "U")))
  assert rewriter.rewrite_predicate(Predicate("S: Sum<T>"), mapping).text == "S: Sum<T::Mirrored>"
  assert rewriter.rewrite_predicate(Predicate("T: Into<U>"), mapping).text == "T::Mirrored: Into<U::Mirrored>"


def test_rewrite_keeps_span(mapper):
  rewriter = BoundRewriter()
  result = rewriter.rewrite_predicate(Predicate("T: Clone", Span(5, 3)), mapper.build(TransformBounds(("T",))))
  assert result.span == Span(5, 3)


def test_rewrite_is_idempotent(mapper):
  rewriter = BoundRewriter(RewriteScope.FULL)
  mapping = mapper.build(TransformBounds(("T",)))
  once = rewriter.rewrite_predicate(Predicate("T: PartialEq<T>"), mapping)
  assert rewriter.rewrite_predicate(once, mapping) is once


def test_rewrite_clause_per_directive(mapper):
  rewriter = BoundRewriter()
  where = (Predicate("T: Clone"), Predicate("U: Debug"))

  transform = TransformBounds(("T",))
  assert [p.text for p in rewriter.rewrite(where, transform, mapper.build(transform))] == [
    "T::Mirrored: Clone",
    "U: Debug",
  ]

  explicit = ExplicitBounds((Predicate("T: PartialEq"),))
  assert rewriter.rewrite(where, explicit, mapper.build(explicit)) == (Predicate("T: PartialEq"),)

  assert rewriter.rewrite(where, None, mapper.build(None)) == where


def test_implied_bounds():
  rewriter = BoundRewriter()
  directive = TransformBounds(("T", "U"))
  assert [p.text for p in rewriter.implied_bounds(directive, "Mirror")] == ["T: Mirror", "U: Mirror"]
  assert rewriter.implied_bounds(directive, "") == ()
  assert rewriter.implied_bounds(None, "Mirror") == ()


def test_predicate_split():
  assert Predicate("T::Item: Clone").split() == ("T::Item", ": Clone")
  assert Predicate("F: Fn() -> T").subject == "F"
  assert Predicate("Sized").split() == ("Sized", "")
