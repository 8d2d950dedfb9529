"""
Tests for the runtime marker decorators.

The markers must leave annotated modules importable and reject misplaced use.
"""

from typing import Generic, TypeVar

import pytest

from mirror_impl import bounds, mirror_impl, mirror_method, transform_bounds, where
from mirror_impl.enums import DirectiveKind
from mirror_impl.host.markers import DirectiveSpec

T = TypeVar("T")


def test_directive_records():
  assert transform_bounds(T, "U") == DirectiveSpec(DirectiveKind.TRANSFORM_BOUNDS, ("T", "U"))
  assert str(bounds("T: Eq", "S: Sum[T]")) == "bounds(T: Eq, S: Sum[T])"


def test_mirror_impl_with_directive():
  @mirror_impl(transform_bounds(T))
  class Container(Generic[T]):
    @mirror_method(bounds("T: Eq"))
    def first(self):
      return 1

  assert Container.__mirror_directives__ == (transform_bounds(T),)
  assert Container.first.__mirror_directives__ == (bounds("T: Eq"),)
  assert Container().first() == 1


def test_mirror_impl_bare():
  @mirror_impl
  class Plain:
    @mirror_method
    def get(self):
      return "value"

  assert Plain.__mirror_directives__ == ()
  assert Plain().get() == "value"


def test_mirror_impl_rejects_functions():
  def not_a_class():
    return None

  with pytest.raises(TypeError, match="classes"):
    mirror_impl(not_a_class)

  with pytest.raises(TypeError, match="classes"):
    mirror_impl(transform_bounds(T))(not_a_class)


def test_mirror_impl_rejects_bad_directive():
  with pytest.raises(TypeError):
    mirror_impl("transform_bounds(T)")


def test_mirror_method_rejects_non_methods():
  with pytest.raises(TypeError, match="methods"):
    mirror_method(42)

  with pytest.raises(TypeError, match="methods"):

    @mirror_method(transform_bounds(T))
    class Nested:
      pass


def test_mirror_method_on_property():
  class Holder:
    @mirror_method(transform_bounds(T))
    @property
    def value(self):
      return 3

  assert Holder().value == 3


def test_where_records_predicates():
  @where("T: Hashable")
  def fn():
    return None

  assert fn.__mirror_where__ == ("T: Hashable",)

  with pytest.raises(TypeError):
    where(T)
