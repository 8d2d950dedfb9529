"""
Runtime Markers.

No-op decorators that make annotated modules importable before (and after)
generation. The generator reads them statically from source; at runtime they
only validate placement and record their payload on the decorated object.

Example:

.. code-block:: python

    from typing import Generic, TypeVar
    from mirror_impl import bounds, mirror_impl, mirror_method, transform_bounds, where

    T = TypeVar("T")
    S = TypeVar("S")

    @mirror_impl(transform_bounds(T))
    class Container(Generic[T]):
      @where("T: Clone", "S: Sum[T]")
      def total(self) -> S:
        return sum(self.elements)
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Tuple

from mirror_impl.enums import DirectiveKind


@dataclass(frozen=True)
class DirectiveSpec:
  """
  Runtime record of a directive written in a marker call.

  Attributes:
      kind (DirectiveKind): Directive form.
      arguments (Tuple[str, ...]): Parameter names or predicate strings.
  """

  kind: DirectiveKind
  arguments: Tuple[str, ...] = ()

  def __str__(self) -> str:
    return f"{self.kind.value}({', '.join(self.arguments)})"


def _param_name(param: Any) -> str:
  # Accepts TypeVar objects as well as their names.
  return param if isinstance(param, str) else getattr(param, "__name__", str(param))


def transform_bounds(*params: Any) -> DirectiveSpec:
  return DirectiveSpec(DirectiveKind.TRANSFORM_BOUNDS, tuple(_param_name(p) for p in params))


def bounds(*predicates: str) -> DirectiveSpec:
  return DirectiveSpec(DirectiveKind.EXPLICIT_BOUNDS, tuple(predicates))


def _check_directives(marker: str, directives: Tuple[Any, ...]) -> None:
  for d in directives:
    if not isinstance(d, DirectiveSpec):
      raise TypeError(f"`{marker}` expects transform_bounds(...) or bounds(...), got {d!r}")


def mirror_impl(*directives: Any) -> Any:
  """
  Marks a class whose methods are mirrored onto its generated counterpart.

  Usable bare (``@mirror_impl``) or with one directive
  (``@mirror_impl(transform_bounds(T))``).

  Raises:
      TypeError: If applied to something other than a class.
  """
  if len(directives) == 1 and inspect.isclass(directives[0]):
    return _mark_class(directives[0], ())
  if len(directives) == 1 and callable(directives[0]) and not isinstance(directives[0], DirectiveSpec):
    raise TypeError("`mirror_impl` can only be applied to classes.")
  _check_directives("mirror_impl", directives)

  def decorator(cls: Any) -> Any:
    if not inspect.isclass(cls):
      raise TypeError(f"`mirror_impl` can only be applied to classes, got {cls!r}")
    return _mark_class(cls, directives)

  return decorator


def _mark_class(cls: Any, directives: Tuple[DirectiveSpec, ...]) -> Any:
  cls.__mirror_directives__ = directives
  return cls


def _is_method_like(obj: Any) -> bool:
  return callable(obj) or isinstance(obj, (staticmethod, classmethod, property))


def mirror_method(*directives: Any) -> Callable:
  """
  Overrides the block directive for a single method.

  Raises:
      TypeError: If applied to something other than a method.
  """
  if len(directives) == 1 and not isinstance(directives[0], DirectiveSpec):
    target = directives[0]
    if not _is_method_like(target) or inspect.isclass(target):
      raise TypeError(f"`mirror_method` can only be applied to methods, got {target!r}")
    return target
  _check_directives("mirror_method", directives)

  def decorator(func: Any) -> Any:
    if not _is_method_like(func) or inspect.isclass(func):
      raise TypeError(f"`mirror_method` can only be applied to methods, got {func!r}")
    # property objects carry no __dict__.
    if hasattr(func, "__dict__"):
      func.__mirror_directives__ = directives
    return func

  return decorator


def where(*predicates: str) -> Callable:
  """
  Declares a where-clause on a class or method.

  Args:
      *predicates: Constraint strings such as ``"T: Clone"``.
  """
  for p in predicates:
    if not isinstance(p, str):
      raise TypeError(f"`where` predicates must be strings, got {p!r}")

  def decorator(obj: Any) -> Any:
    if hasattr(obj, "__dict__"):
      obj.__mirror_where__ = tuple(predicates)
    return obj

  return decorator
