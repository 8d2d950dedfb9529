"""
Python Class Reader.

Lowers a marked LibCST ``ClassDef`` into the engine's `ImplBlock`.

Mapping of Python constructs onto the data model:

- **Generic parameters**: module-level ``TypeVar`` declarations named in the
  subscripted bases. ``Generic[...]``/``Protocol[...]`` fix the order when
  present; otherwise first use across the bases. ``bound=`` and ``default=``
  become the parameter's bound and default.
- **Members**: ``def`` statements directly in the class body. The first
  positional parameter is the receiver unless the method is a
  ``staticmethod``.
- **Method-local generics**: TypeVars used in a method's annotations or
  where-clause that are not class parameters, in first-use order.
- **Where-clauses**: ``@where("pred", ...)`` on the class or method.
- **Directives**: the raw argument text of ``@mirror_impl(...)`` and
  ``@mirror_method(...)``, parsed later by the engine.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import libcst as cst

from mirror_impl.core.model import (
  Annotation,
  GenericParameter,
  ImplBlock,
  MemberDeclaration,
  Parameter,
  Predicate,
  SourceType,
  Span,
)
from mirror_impl.core.tokens import referenced_identifiers

_EMPTY_MODULE = cst.Module(body=[])
_TYPEVAR_FACTORIES = ("TypeVar", "ParamSpec", "TypeVarTuple")
_GENERIC_BASES = ("Generic", "Protocol")

PositionLookup = Callable[[cst.CSTNode], Optional[Span]]


def code_of(node: cst.CSTNode) -> str:
  """
  Renders a CST node back to source text.

  Args:
      node: Any LibCST node.

  Returns:
      str: The node's exact source.
  """
  return _EMPTY_MODULE.code_for_node(node)


def dotted_name(node: cst.BaseExpression) -> str:
  """
  Resolves a Name/Attribute chain to a dotted string, or "" for anything else.
  """
  if isinstance(node, cst.Name):
    return node.value
  if isinstance(node, cst.Attribute):
    head = dotted_name(node.value)
    return f"{head}.{node.attr.value}" if head else ""
  return ""


def decorator_name(decorator: cst.Decorator) -> str:
  """Last segment of a decorator's callee: ``@mod.where(...)`` -> ``where``."""
  expr = decorator.decorator
  if isinstance(expr, cst.Call):
    expr = expr.func
  return dotted_name(expr).rsplit(".", 1)[-1]


def decorator_payload(decorator: cst.Decorator) -> str:
  """
  Text between the parentheses of a marker call, "" for a bare marker.
  """
  expr = decorator.decorator
  if not isinstance(expr, cst.Call):
    return ""
  parts = []
  for arg in expr.args:
    prefix = arg.star
    if arg.keyword is not None:
      prefix = f"{arg.keyword.value}="
    parts.append(f"{prefix}{code_of(arg.value)}")
  return ", ".join(parts)


def _string_value(node: cst.BaseExpression) -> str:
  if isinstance(node, (cst.SimpleString, cst.ConcatenatedString)):
    value = node.evaluated_value
    if isinstance(value, str):
      return value
  return code_of(node)


def collect_type_vars(module: cst.Module) -> Dict[str, GenericParameter]:
  """
  Finds module-level ``X = TypeVar("X", ...)`` declarations.

  Args:
      module: Parsed module.

  Returns:
      Dict[str, GenericParameter]: Declared name -> parameter.
  """
  found: Dict[str, GenericParameter] = {}
  for stmt in module.body:
    if not isinstance(stmt, cst.SimpleStatementLine):
      continue
    for small in stmt.body:
      if not isinstance(small, cst.Assign) or len(small.targets) != 1:
        continue
      target = small.targets[0].target
      value = small.value
      if not isinstance(target, cst.Name) or not isinstance(value, cst.Call):
        continue
      if dotted_name(value.func).rsplit(".", 1)[-1] not in _TYPEVAR_FACTORIES:
        continue
      param_bounds: List[str] = []
      default = None
      for arg in value.args:
        if arg.keyword is None:
          continue
        if arg.keyword.value == "bound":
          param_bounds.append(_string_value(arg.value))
        elif arg.keyword.value == "default":
          default = _string_value(arg.value)
      found[target.value] = GenericParameter(target.value, tuple(param_bounds), default)
  return found


def _subscript_names(node: cst.BaseExpression) -> List[str]:
  if not isinstance(node, cst.Subscript):
    return []
  names = []
  for element in node.slice:
    if isinstance(element.slice, cst.Index):
      names.extend(referenced_identifiers(code_of(element.slice.value)))
  return names


@dataclass
class ReadBlock:
  """
  A marked class lowered to the data model.

  Attributes:
      node (cst.ClassDef): The original class.
      block (ImplBlock): Its abstract form.
      functions (Dict[Span, cst.FunctionDef]): Member nodes keyed by the span
          recorded on the matching `MemberDeclaration`.
  """

  node: cst.ClassDef
  block: ImplBlock
  functions: Dict[Span, cst.FunctionDef]


class ClassReader:
  """
  Reads marked classes using the module's TypeVar table.
  """

  def __init__(
    self,
    type_vars: Dict[str, GenericParameter],
    position: PositionLookup,
    block_marker: str = "mirror_impl",
    member_marker: str = "mirror_method",
    where_marker: str = "where",
  ) -> None:
    self.type_vars = type_vars
    self.position = position
    self.block_marker = block_marker
    self.member_marker = member_marker
    self.where_marker = where_marker

  @property
  def marker_names(self) -> Tuple[str, str, str]:
    return (self.block_marker, self.member_marker, self.where_marker)

  def is_marked(self, node: cst.ClassDef) -> bool:
    return any(decorator_name(d) == self.block_marker for d in node.decorators)

  def _span(self, node: cst.CSTNode) -> Optional[Span]:
    return self.position(node)

  def _where(self, decorators: Sequence[cst.Decorator]) -> Tuple[Predicate, ...]:
    predicates = []
    for d in decorators:
      if decorator_name(d) != self.where_marker or not isinstance(d.decorator, cst.Call):
        continue
      span = self._span(d)
      for arg in d.decorator.args:
        predicates.append(Predicate(_string_value(arg.value), span))
    return tuple(predicates)

  def _annotations(self, decorators: Sequence[cst.Decorator], marker: str) -> Tuple[Annotation, ...]:
    return tuple(Annotation(decorator_payload(d), self._span(d)) for d in decorators if decorator_name(d) == marker)

  def _attributes(self, decorators: Sequence[cst.Decorator]) -> Tuple[str, ...]:
    return tuple(code_of(d.decorator) for d in decorators if decorator_name(d) not in self.marker_names)

  def class_generics(self, node: cst.ClassDef) -> Tuple[GenericParameter, ...]:
    """
    Resolves the class's generic parameters from its bases.

    Args:
        node: The class definition.

    Returns:
        Tuple[GenericParameter, ...]: Ordered parameters.
    """
    explicit: List[str] = []
    implicit: List[str] = []
    for base in node.bases:
      names = [n for n in _subscript_names(base.value) if n in self.type_vars]
      if isinstance(base.value, cst.Subscript) and dotted_name(base.value.value).rsplit(".", 1)[-1] in _GENERIC_BASES:
        explicit.extend(names)
      else:
        implicit.extend(names)
    ordered = explicit or implicit
    unique = list(dict.fromkeys(ordered))
    return tuple(self.type_vars[n] for n in unique)

  def _trait(self, node: cst.ClassDef) -> Optional[str]:
    traits = []
    for base in node.bases:
      head = base.value.value if isinstance(base.value, cst.Subscript) else base.value
      if dotted_name(head).rsplit(".", 1)[-1] in _GENERIC_BASES:
        continue
      traits.append(code_of(base.value))
    return " + ".join(traits) if traits else None

  def _parameter(self, param: cst.Param, prefix: str = "") -> Parameter:
    annotation = code_of(param.annotation.annotation) if param.annotation is not None else None
    default = code_of(param.default) if param.default is not None else None
    return Parameter(param.name.value, annotation, default, prefix)

  def ordered_params(self, fn: cst.FunctionDef) -> List[Tuple[cst.Param, str]]:
    """
    Flattens a signature in declaration order with star prefixes.

    Args:
        fn: The function.

    Returns:
        List[Tuple[cst.Param, str]]: Each parameter with "", "*" or "**".
    """
    params = fn.params
    ordered = [(p, "") for p in params.posonly_params]
    ordered += [(p, "") for p in params.params]
    if isinstance(params.star_arg, cst.Param):
      ordered.append((params.star_arg, "*"))
    ordered += [(p, "") for p in params.kwonly_params]
    if params.star_kwarg is not None:
      ordered.append((params.star_kwarg, "**"))
    return ordered

  def has_receiver(self, fn: cst.FunctionDef) -> bool:
    if any(decorator_name(d) == "staticmethod" for d in fn.decorators):
      return False
    positional = list(fn.params.posonly_params) + list(fn.params.params)
    return bool(positional)

  def read_member(self, fn: cst.FunctionDef, class_params: Sequence[str]) -> MemberDeclaration:
    """
    Lowers one method.

    Args:
        fn: Method definition.
        class_params: Names of the class's generic parameters.

    Returns:
        MemberDeclaration: The member, with span set to the def's position.
    """
    ordered = self.ordered_params(fn)
    receiver = None
    if self.has_receiver(fn):
      first, _ = ordered.pop(0)
      receiver = self._parameter(first)
    parameters = tuple(self._parameter(p, prefix) for p, prefix in ordered)
    returns = code_of(fn.returns.annotation) if fn.returns is not None else None
    where = self._where(fn.decorators)

    texts = [p.annotation for p in parameters if p.annotation]
    if receiver is not None and receiver.annotation:
      texts.insert(0, receiver.annotation)
    if returns:
      texts.append(returns)
    texts.extend(p.text for p in where)

    local: Dict[str, None] = {}
    for text in texts:
      for name in referenced_identifiers(text):
        if name in self.type_vars and name not in class_params:
          local.setdefault(name, None)

    return MemberDeclaration(
      name=fn.name.value,
      generics=tuple(self.type_vars[n] for n in local),
      receiver=receiver,
      parameters=parameters,
      returns=returns,
      where=where,
      body=code_of(fn.body),
      annotations=self._annotations(fn.decorators, self.member_marker),
      attributes=self._attributes(fn.decorators),
      span=self._span(fn),
    )

  def read(self, node: cst.ClassDef) -> ReadBlock:
    """
    Lowers a marked class.

    Args:
        node: The class definition (must be an original, position-tracked node).

    Returns:
        ReadBlock: The block plus its member nodes.
    """
    generics = self.class_generics(node)
    class_params = [g.name for g in generics]

    members = []
    functions: Dict[Span, cst.FunctionDef] = {}
    body = node.body.body if isinstance(node.body, cst.IndentedBlock) else ()
    for stmt in body:
      if isinstance(stmt, cst.FunctionDef):
        member = self.read_member(stmt, class_params)
        members.append(member)
        functions[member.span] = stmt

    annotations = self._annotations(node.decorators, self.block_marker)
    block = ImplBlock(
      self_type=SourceType(name=node.name.value, generics=generics),
      members=tuple(members),
      annotations=annotations,
      trait=self._trait(node),
      where=self._where(node.decorators),
      attributes=self._attributes(node.decorators),
      span=annotations[0].span if annotations else self._span(node),
    )
    return ReadBlock(node=node, block=block, functions=functions)
