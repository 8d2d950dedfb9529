"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Shared impl-block builders for engine tests.
- Console capture for CLI tests.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'mirror_impl' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from mirror_impl.core.model import (  # noqa: E402
  Annotation,
  GenericParameter,
  ImplBlock,
  MemberDeclaration,
  Parameter,
  Predicate,
  SourceType,
  Span,
)
from mirror_impl.utils.console import make_console, reset_console, set_console  # noqa: E402


def make_member(name="total", where=(), annotations=(), **kwargs) -> MemberDeclaration:
  """Builds a method with a ``&self`` receiver unless overridden."""
  kwargs.setdefault("receiver", Parameter("&self"))
  kwargs.setdefault("span", Span(3, 4))
  return MemberDeclaration(
    name=name,
    where=tuple(Predicate(p) for p in where),
    annotations=tuple(Annotation(a, Span(2, 4)) for a in annotations),
    **kwargs,
  )


def make_block(members=(), payload="transform_bounds(T)", params=("T",), **kwargs) -> ImplBlock:
  """Builds ``Container<params>`` with one block-level marker."""
  annotations = () if payload is None else (Annotation(payload, Span(1, 0)),)
  return ImplBlock(
    self_type=SourceType("Container", tuple(GenericParameter(p) for p in params)),
    members=tuple(members),
    annotations=annotations,
    span=Span(1, 0),
    **kwargs,
  )


@pytest.fixture
def container_block() -> ImplBlock:
  """The canonical ``Container<T>`` block with ``total<S>``."""
  total = make_member(
    generics=(GenericParameter("S"),),
    returns="S",
    where=("T: Clone", "S: Sum<T>"),
    body="self.elements.iter().cloned().sum()",
  )
  return make_block([total])


@pytest.fixture
def captured_console():
  """Routes console and logging output into a recording console."""
  recorder = make_console(record=True, width=200, stderr=False)
  set_console(recorder)
  yield recorder
  reset_console()


@pytest.fixture
def member_factory():
  """Factory fixture for `MemberDeclaration`."""
  return make_member


@pytest.fixture
def block_factory():
  """Factory fixture for `ImplBlock`."""
  return make_block
