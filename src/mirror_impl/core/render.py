"""
Surface Rendering of Impl Blocks.

Prints blocks and member signatures in the compact notation used by
diagnostics, the ``preview`` command and the test-suite::

    impl<T> MirroredContainer<T> where T: Mirror {
        fn total<S>(&self) -> S where T::Mirrored: Clone, S: Sum<T> { ... }
    }

Output is a deterministic function of the block.
"""

from typing import Sequence

from mirror_impl.core.model import GenericParameter, ImplBlock, MemberDeclaration, Parameter, Predicate

INDENT = "    "


def render_generics(generics: Sequence[GenericParameter]) -> str:
  if not generics:
    return ""
  parts = []
  for g in generics:
    text = g.name
    if g.bounds:
      text += ": " + " + ".join(g.bounds)
    if g.default is not None:
      text += f" = {g.default}"
    parts.append(text)
  return f"<{', '.join(parts)}>"


def render_where(where: Sequence[Predicate]) -> str:
  if not where:
    return ""
  return " where " + ", ".join(p.text for p in where)


def render_parameter(param: Parameter) -> str:
  text = f"{param.prefix}{param.name}"
  if param.annotation is not None:
    text += f": {param.annotation}"
  if param.default is not None:
    text += f" = {param.default}"
  return text


def render_signature(member: MemberDeclaration) -> str:
  """
  Renders ``name<G>(receiver, params) -> R where P, Q``.

  Args:
      member: Declaration to render.

  Returns:
      str: Single-line signature without body.
  """
  params = []
  if member.receiver is not None:
    params.append(render_parameter(member.receiver))
  params.extend(render_parameter(p) for p in member.parameters)

  text = f"{member.name}{render_generics(member.generics)}({', '.join(params)})"
  if member.returns is not None:
    text += f" -> {member.returns}"
  return text + render_where(member.where)


def render_block(block: ImplBlock, bodies: bool = False) -> str:
  """
  Renders a whole block.

  Args:
      block: Block to render.
      bodies: Include member bodies instead of ``{ ... }``.

  Returns:
      str: Multi-line text ending in a newline.
  """
  head = "impl" + render_generics(block.self_type.generics) + " "
  if block.trait:
    head += f"{block.trait} for "
  head += block.self_type.name + block.type_arguments + render_where(block.where)

  lines = [head + " {"]
  for member in block.members:
    for attribute in member.attributes:
      lines.append(f"{INDENT}#[{attribute}]")
    body = member.body.strip() if bodies and member.body.strip() else "..."
    lines.append(f"{INDENT}fn {render_signature(member)} {{ {body} }}")
  lines.append("}")
  return "\n".join(lines) + "\n"
