"""
Expression Tokenizer.

Provides a regex lexer that splits opaque type and constraint expressions
(``S: Sum<T>``, ``list[T]``, ``<T as Trait>::Bar``) into a lossless stream of
`Token` objects, and the standalone-identifier substitution built on it.

Joining the token values of any input reproduces the input exactly, so tokens
that are not substituted stay byte-identical.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Mapping, Optional, Tuple


class TokenType(Enum):
  """Enumeration of lexical classes."""

  WHITESPACE = auto()
  LIFETIME = auto()  # 'a
  STRING = auto()  # "T", 'T'
  NUMBER = auto()  # 0, 1.5
  IDENTIFIER = auto()  # T, Clone, Sum
  PATH_SEP = auto()  # :: or .
  PUNCT = auto()  # anything else, one character


@dataclass
class Token:
  """
  Represents a lexical unit.

  Attributes:
      kind (TokenType): The type of token.
      value (str): The raw string content.
      offset (int): Character offset in the source expression.
  """

  kind: TokenType
  value: str
  offset: int


class ExpressionLexer:
  """
  Regex-based lexer for type and constraint expressions.
  """

  # Order matters for priority: lifetimes must win over character strings.
  PATTERNS: List[Tuple[TokenType, str]] = [
    (TokenType.WHITESPACE, r"\s+"),
    (TokenType.LIFETIME, r"'[A-Za-z_][A-Za-z0-9_]*(?![A-Za-z0-9_'])"),
    (TokenType.STRING, r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\''),
    (TokenType.NUMBER, r"\d[\w.]*"),
    (TokenType.IDENTIFIER, r"[A-Za-z_][A-Za-z0-9_]*"),
    (TokenType.PATH_SEP, r"::|\."),
    (TokenType.PUNCT, r"."),
  ]

  def __init__(self) -> None:
    """Initializes the lexer with a single compiled alternation."""
    self._regex = re.compile("|".join(f"(?P<{kind.name}>{pattern})" for kind, pattern in self.PATTERNS), re.DOTALL)

  def tokenize(self, text: str) -> List[Token]:
    """
    Tokenizes an expression.

    Args:
        text (str): Raw expression text.

    Returns:
        List[Token]: Tokens covering the whole input.
    """
    tokens = []
    for match in self._regex.finditer(text):
      kind = TokenType[match.lastgroup]
      tokens.append(Token(kind, match.group(0), match.start()))
    return tokens


_LEXER = ExpressionLexer()


def tokenize(text: str) -> List[Token]:
  return _LEXER.tokenize(text)


def _neighbour(tokens: List[Token], index: int, step: int) -> Optional[Token]:
  i = index + step
  while 0 <= i < len(tokens):
    if tokens[i].kind != TokenType.WHITESPACE:
      return tokens[i]
    i += step
  return None


def is_standalone(tokens: List[Token], index: int) -> bool:
  """
  True if the identifier at ``index`` is not part of a qualified path.

  ``T`` is standalone in ``T: Clone`` and ``Vec<T>``, but not in
  ``T::Item``, ``T.Item`` or ``Self::T``.
  """
  before = _neighbour(tokens, index, -1)
  after = _neighbour(tokens, index, 1)
  if before is not None and before.kind == TokenType.PATH_SEP:
    return False
  if after is not None and after.kind == TokenType.PATH_SEP:
    return False
  return True


def referenced_identifiers(text: str) -> List[str]:
  """
  Lists the standalone identifiers of an expression in first-use order.

  Args:
      text: The expression.

  Returns:
      List[str]: Unique identifiers.
  """
  tokens = tokenize(text)
  seen = {}
  for i, tok in enumerate(tokens):
    if tok.kind == TokenType.IDENTIFIER and is_standalone(tokens, i):
      seen.setdefault(tok.value, None)
  return list(seen)


def substitute(text: str, mapping: Mapping[str, str]) -> str:
  """
  Replaces standalone identifier occurrences according to ``mapping``.

  Every other token, including string literals, qualified paths and
  whitespace, is copied unchanged.

  Args:
      text: Expression to rewrite.
      mapping: Identifier to replacement expression.

  Returns:
      str: The rewritten expression. Identical to ``text`` when nothing matched.
  """
  if not mapping:
    return text
  tokens = tokenize(text)
  out = []
  for i, tok in enumerate(tokens):
    if tok.kind == TokenType.IDENTIFIER and tok.value in mapping and is_standalone(tokens, i):
      out.append(mapping[tok.value])
    else:
      out.append(tok.value)
  return "".join(out)


def is_string_literal(text: str) -> bool:
  tokens = tokenize(text.strip())
  return len(tokens) == 1 and tokens[0].kind == TokenType.STRING


def substitute_annotation(text: str, mapping: Mapping[str, str]) -> str:
  """
  Substitutes inside a type annotation, including quoted forward references.

  ``"Container[T]"`` is rewritten inside its quotes; any other expression is
  handled by `substitute`.
  """
  stripped = text.strip()
  if is_string_literal(stripped):
    quote = stripped[0]
    inner = stripped[1:-1]
    return f"{quote}{substitute(inner, mapping)}{quote}"
  return substitute(text, mapping)


def split_top_level(text: str, separator: str = ",") -> List[str]:
  """
  Splits on ``separator`` outside brackets and string literals.

  Args:
      text: Comma separated list, e.g. ``T: Eq, S: Sum<T, U>``.
      separator: Single character separator.

  Returns:
      List[str]: Items with surrounding whitespace removed. Empty items from a
      trailing separator are dropped.

  Raises:
      ValueError: If brackets are unbalanced.
  """
  items = []
  depth = 0
  current = []
  tokens = tokenize(text)
  for i, tok in enumerate(tokens):
    value = tok.value
    if tok.kind == TokenType.PUNCT:
      if value == ">" and i > 0 and tokens[i - 1].value == "-":
        current.append(value)
        continue
      if value in "<([{":
        depth += 1
      elif value in ">)]}":
        depth -= 1
        if depth < 0:
          raise ValueError(f"Unbalanced '{value}' at offset {tok.offset}")
      elif value == separator and depth == 0:
        items.append("".join(current).strip())
        current = []
        continue
    current.append(value)
  if depth != 0:
    raise ValueError("Unbalanced brackets")
  items.append("".join(current).strip())
  if items and items[-1] == "":
    items.pop()
  return items
