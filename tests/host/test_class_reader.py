"""
Tests for lowering Python classes into impl blocks.
"""

import textwrap

import libcst as cst
import pytest
from libcst.metadata import PositionProvider

from mirror_impl.core.model import GenericParameter, Parameter, Predicate, Span
from mirror_impl.host.reader import ClassReader, collect_type_vars, decorator_name, decorator_payload

SOURCE = textwrap.dedent(
  '''
  from typing import Generic, Hashable, TypeVar

  T = TypeVar("T", bound=Hashable)
  U = TypeVar("U", default="int")
  S = TypeVar("S")
  NotAVar = int


  @mirror_impl(transform_bounds(T))
  @where("U: Clone")
  @dataclass
  class Pair(Base[T], Generic[T, U]):
    @where("T: Eq", "S: Sum[T]")
    def total(self, weights: list[U], *rest: S, scale: float = 1.0) -> S:
      return sum(rest)

    @staticmethod
    @mirror_method(bounds("T: Eq"))
    def build(a: T) -> "Pair[T, U]":
      return Pair(a)

    @property
    def left(self) -> T:
      return self.a

    name = "pair"
  '''
)


@pytest.fixture
def read_pair():
  wrapper = cst.MetadataWrapper(cst.parse_module(SOURCE))
  positions = wrapper.resolve(PositionProvider)

  def position(node):
    if node not in positions:
      return None
    return Span(positions[node].start.line, positions[node].start.column)

  module = wrapper.module
  reader = ClassReader(collect_type_vars(module), position)
  class_def = next(stmt for stmt in module.body if isinstance(stmt, cst.ClassDef))
  return reader, reader.read(class_def)


def test_collect_type_vars():
  type_vars = collect_type_vars(cst.parse_module(SOURCE))
  assert type_vars == {
    "T": GenericParameter("T", ("Hashable",)),
    "U": GenericParameter("U", (), "int"),
    "S": GenericParameter("S"),
  }


def test_block_shape(read_pair):
  reader, read = read_pair
  block = read.block

  assert reader.is_marked(read.node)
  assert block.self_type.name == "Pair"
  assert block.self_type.parameter_names == ("T", "U")
  assert block.trait == "Base[T]"
  assert block.where == (Predicate("U: Clone"),)
  assert block.attributes == ("dataclass",)
  assert [a.payload for a in block.annotations] == ["transform_bounds(T)"]
  assert block.span == Span(10, 0)
  assert [m.name for m in block.members] == ["total", "build", "left"]


def test_member_signature(read_pair):
  _, read = read_pair
  total = read.block.members[0]

  assert total.receiver == Parameter("self")
  assert total.parameters == (
    Parameter("weights", "list[U]"),
    Parameter("rest", "S", prefix="*"),
    Parameter("scale", "float", "1.0"),
  )
  assert total.returns == "S"
  assert total.generics == (GenericParameter("S"),)
  assert [p.text for p in total.where] == ["T: Eq", "S: Sum[T]"]
  assert total.annotations == ()
  assert read.functions[total.span].name.value == "total"


def test_staticmethod_has_no_receiver(read_pair):
  _, read = read_pair
  build = read.block.members[1]

  assert build.receiver is None
  assert build.parameters == (Parameter("a", "T"),)
  assert build.attributes == ("staticmethod",)
  assert [a.payload for a in build.annotations] == ['bounds("T: Eq")']


def test_other_decorators_kept_as_attributes(read_pair):
  _, read = read_pair
  left = read.block.members[2]
  assert left.attributes == ("property",)
  assert left.generics == ()


def test_class_generics_without_generic_base():
  module = cst.parse_module('T = TypeVar("T")\nclass Box(Sequence[T]):\n  pass\n')
  reader = ClassReader(collect_type_vars(module), lambda node: None)
  class_def = module.body[1]
  assert reader.class_generics(class_def) == (GenericParameter("T"),)


def test_decorator_helpers():
  module = cst.parse_module("@mirror.mirror_impl(transform_bounds(T, U))\nclass A:\n  pass\n")
  decorator = module.body[0].decorators[0]
  assert decorator_name(decorator) == "mirror_impl"
  assert decorator_payload(decorator) == "transform_bounds(T, U)"

  bare = cst.parse_module("@mirror_impl\nclass A:\n  pass\n").body[0].decorators[0]
  assert decorator_payload(bare) == ""
