"""CLI handler for the preview command."""

from pathlib import Path
from typing import Any, Dict, Optional

from rich.syntax import Syntax

from mirror_impl.cli.handlers.generate import _load_config, collect_sources, describe_failures, expand_file
from mirror_impl.host.generator import SourceGenerator
from mirror_impl.utils.console import console, log_error


def handle_preview(input_path: Path, settings: Optional[Dict[str, Any]] = None) -> int:
  """Prints every mirror block in impl notation, without writing files."""
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = _load_config(input_path, settings)
  if config is None:
    return 1
  generator = SourceGenerator(config)
  status = 0
  for src in collect_sources(input_path):
    result = expand_file(generator, src)
    if not result.success:
      for problem in describe_failures(result):
        log_error(problem)
      status = 1
    for mirror in result.mirrors:
      console.print(f"[path]{src}[/path]")
      console.print(Syntax(mirror, "rust", theme="ansi_dark"))
  return status
