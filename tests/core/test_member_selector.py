"""
Tests for the Member Selector.
"""

import pytest

from mirror_impl.core.directives import DirectiveParser
from mirror_impl.core.errors import MalformedDirective
from mirror_impl.core.model import Annotation, ExplicitBounds, Predicate, Span, TransformBounds
from mirror_impl.core.selector import MemberSelector


@pytest.fixture
def selector():
  return MemberSelector(DirectiveParser(("T",)))


def test_source_order_and_verdicts(selector, block_factory, member_factory):
  members = [
    member_factory("a"),
    member_factory("b", annotations=("bounds(T: Eq)",)),
    member_factory("c", annotations=("",)),
  ]
  block_directive = TransformBounds(("T",))
  selections = selector.select(block_factory(members), block_directive)

  assert [s.member.name for s in selections] == ["a", "b", "c"]
  assert selections[0].directive is block_directive
  assert selections[1].directive == ExplicitBounds((Predicate("T: Eq"),))
  assert selections[2].directive is block_directive
  assert all(s.mirrored for s in selections)
  assert [s.declared for s in selections] == [False, True, False]


def test_passthrough_without_any_directive(selector, block_factory, member_factory):
  (selection,) = selector.select(block_factory([member_factory()], payload=""), None)
  assert not selection.mirrored


def test_programmatic_member_directive(selector, block_factory, member_factory):
  directive = TransformBounds(("T",))
  (selection,) = selector.select(block_factory([member_factory(directive=directive)]), None)
  assert selection.directive is directive
  assert selection.declared


def test_error_located_at_member_when_marker_has_no_span(selector, block_factory, member_factory):
  bad = member_factory(span=Span(7, 2)).with_changes(annotations=(Annotation("nonsense(T)"),))
  with pytest.raises(MalformedDirective) as excinfo:
    selector.select(block_factory([bad]), None)
  assert excinfo.value.span == Span(7, 2)
