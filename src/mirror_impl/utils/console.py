"""
Console and Logging for mirror-impl.

All user-facing output goes through one Rich console writing to stderr, so
that ``mirror-impl generate FILE`` can stream the expanded module on stdout.
The ``mirror_impl`` logger hierarchy (engine debug traces, CLI status lines)
is attached to that console through a `RichHandler`; host applications'
own loggers are left alone.

Tests and embedding tools redirect everything with `set_console`.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

from mirror_impl.core.errors import Diagnostic

LOGGER_NAME = "mirror_impl"

# Sits between INFO and WARNING so it survives the default level.
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_STYLES = Theme(
  {
    "logging.level.success": "green",
    "path": "bold blue",
    "mirror": "bold magenta",
    "kind": "bold red",
    "location": "cyan",
  }
)

logger = logging.getLogger(LOGGER_NAME)


def make_console(**kwargs: Any) -> Console:
  """Builds a console carrying the mirror-impl styles. Defaults to stderr."""
  kwargs.setdefault("stderr", True)
  return Console(theme=_STYLES, **kwargs)


class _ConsoleProxy:
  """
  Stable handle on the active console.

  Modules bind ``console`` at import time; `set_console` swaps what it
  points at and moves the log handler along with it.
  """

  def __init__(self) -> None:
    self._target: Console = make_console()
    self._handler: Optional[RichHandler] = None
    self._bind()

  def _bind(self) -> None:
    if self._handler is not None:
      logger.removeHandler(self._handler)
    self._handler = RichHandler(
      console=self._target,
      show_time=False,
      show_path=False,
      show_level=False,
      markup=True,
    )
    logger.addHandler(self._handler)
    if logger.level == logging.NOTSET:
      logger.setLevel(logging.INFO)
    logger.propagate = False

  def swap(self, target: Optional[Console]) -> None:
    self._target = target if target is not None else make_console()
    self._bind()

  @property
  def target(self) -> Console:
    return self._target

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._target.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._target, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Sends console output and ``mirror_impl`` log records to ``new_console``.

  Args:
      new_console (Console): Replacement console, e.g. ``Console(record=True)``.
  """
  console.swap(new_console)


def reset_console() -> None:
  console.swap(None)


def set_verbose(verbose: bool) -> None:
  """
  Shows the engine's per-block DEBUG trace when ``verbose`` is set.

  Args:
      verbose (bool): True for DEBUG, False for INFO.
  """
  logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def format_diagnostic(diagnostic: Diagnostic) -> str:
  """
  Renders a diagnostic with Rich markup.

  Args:
      diagnostic: Failure report from the generator.

  Returns:
      str: ``path:line:col error[Kind] message`` with styles applied.
  """
  location = [str(part) for part in (diagnostic.path, diagnostic.line, diagnostic.column) if part is not None]
  head = f"[location]{escape(':'.join(location))}[/location] " if location else ""
  kind = escape(f"error[{diagnostic.kind.value}]")
  return f"{head}[kind]{kind}[/kind] {escape(diagnostic.message)}"


def log_info(msg: str) -> None:
  logger.info(msg)


def log_success(msg: str) -> None:
  logger.log(SUCCESS, f"[green]✔[/green] {msg}")


def log_warning(msg: str) -> None:
  """
  Logs a recoverable problem, such as an ignored setting.

  Args:
      msg (str): Message text, Rich markup allowed.
  """
  logger.warning(f"[yellow]![/yellow] {msg}")


def log_error(msg: str) -> None:
  logger.error(f"[red]✘[/red] {msg}")
