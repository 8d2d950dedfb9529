"""
Generate and Check Command Handlers.

Implements ``mirror-impl generate`` and ``mirror-impl check``. Both load the
configuration, expand every ``.py`` file under the input path and print a
summary table; ``generate`` also writes the expanded modules.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich.markup import escape
from rich.table import Table

from mirror_impl.config import MirrorConfig
from mirror_impl.host.generator import GenerationResult, SourceGenerator
from mirror_impl.utils.console import console, format_diagnostic, log_error, log_info, log_success, log_warning


def collect_sources(input_path: Path) -> List[Path]:
  """
  Lists the Python files to process.

  Args:
      input_path: File or directory.

  Returns:
      List[Path]: Sorted file list.
  """
  if input_path.is_file():
    return [input_path]
  return sorted(input_path.rglob("*.py"))


def _load_config(input_path: Path, settings: Optional[Dict[str, Any]]) -> Optional[MirrorConfig]:
  """
  Resolves the configuration for ``input_path``; invalid settings are reported
  and yield None.
  """
  try:
    return MirrorConfig.load(
      overrides=settings,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except ValueError as e:
    log_error(escape(str(e)))
    return None


def expand_file(generator: SourceGenerator, path: Path) -> GenerationResult:
  """
  Expands one file.

  Args:
      generator: Configured generator.
      path: Source file.

  Returns:
      GenerationResult: Outcome. I/O failures are reported as errors.
  """
  try:
    code = path.read_text(encoding="utf-8")
  except OSError as e:
    return GenerationResult(success=False, errors=[f"{path}: {e}"])
  return generator.run(code, path=str(path))


def handle_generate(
  input_path: Path,
  output_path: Optional[Path],
  settings: Optional[Dict[str, Any]] = None,
) -> int:
  """
  Handles the 'generate' command execution.

  Args:
      input_path: Source file or directory.
      output_path: Destination file or directory. A single file is printed to
          stdout when omitted.
      settings: ``key=value`` overrides for `MirrorConfig`.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1
  if input_path.is_dir() and not output_path:
    log_error("Directory generation requires --out destination directory.")
    return 1

  config = _load_config(input_path, settings)
  if config is None:
    return 1
  generator = SourceGenerator(config)
  sources = collect_sources(input_path)
  if not sources:
    log_warning(f"No .py files found in {input_path}")
    return 0

  results: Dict[str, GenerationResult] = {}
  for src in sources:
    result = expand_file(generator, src)
    results[str(src)] = result
    if not result.success:
      continue

    if output_path is None:
      sys.stdout.write(result.code)
      continue

    dest = output_path / src.relative_to(input_path) if input_path.is_dir() else output_path
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(result.code, encoding="utf-8")
    log_success(f"Generated: [path]{src}[/path] -> [path]{dest}[/path]")

  return _print_summary(results)


def handle_check(input_path: Path, settings: Optional[Dict[str, Any]] = None) -> int:
  """
  Handles the 'check' command: expands without writing, reports failures.

  Args:
      input_path: Source file or directory.
      settings: ``key=value`` overrides for `MirrorConfig`.

  Returns:
      int: Exit code (0 if every marked block expands, 1 otherwise).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = _load_config(input_path, settings)
  if config is None:
    return 1
  generator = SourceGenerator(config)
  results = {str(src): expand_file(generator, src) for src in collect_sources(input_path)}
  log_info(f"Checked {len(results)} files.")
  return _print_summary(results)


def _counts(results: Dict[str, GenerationResult]) -> Tuple[int, int]:
  passed = sum(1 for r in results.values() if r.success)
  return passed, len(results) - passed


def _print_summary(results: Dict[str, GenerationResult]) -> int:
  """
  Renders failures as a table and returns the exit code.

  Args:
      results: File name -> result.

  Returns:
      int: 0 when every file succeeded, else 1.
  """
  passed, failed = _counts(results)
  if failed == 0:
    mirrors = sum(len(r.mirrors) for r in results.values())
    log_success(f"{passed}/{len(results)} files expanded, {mirrors} mirror blocks.")
    return 0

  table = Table(title="Expansion Report")
  table.add_column("File", style="cyan")
  table.add_column("Issues", style="red")
  for filename, res in results.items():
    if res.success:
      continue
    table.add_row(escape(filename), "\n".join(describe_failures(res)) or "Unknown Error")

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {passed} Passed, {failed} Failed.")
  return 1


def describe_failures(result: GenerationResult) -> List[str]:
  """
  Lists a failed result's problems as Rich markup.

  Block diagnostics are styled; file-level errors (syntax, I/O) are escaped
  verbatim.

  Args:
      result: A result with ``success=False``.

  Returns:
      List[str]: One entry per problem.
  """
  if result.diagnostics:
    return [format_diagnostic(d) for d in result.diagnostics]
  return [escape(e) for e in result.errors]
