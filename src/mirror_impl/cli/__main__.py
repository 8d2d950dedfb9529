"""
Main Entry Point for mirror-impl CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `mirror_impl.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from mirror_impl import __version__
from mirror_impl.cli import commands
from mirror_impl.config import parse_cli_key_values
from mirror_impl.utils.console import set_verbose


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="mirror-impl: derive mirror-type methods from annotated classes")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Log per-block expansion details")

  subparsers = parser.add_subparsers(dest="command", required=True)

  config_help = "Settings in key=value format (e.g. type_template=Archived{name} rewrite_scope=full)"

  # --- Command: GENERATE ---
  cmd_gen = subparsers.add_parser("generate", help="Insert mirror classes into a file or directory")
  cmd_gen.add_argument("path", type=Path, help="Input source file or directory")
  cmd_gen.add_argument("--out", type=Path, default=None, help="Output destination (file or dir)")
  cmd_gen.add_argument("--config", nargs="*", help=config_help)

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Report expansion errors without writing")
  cmd_check.add_argument("path", type=Path, help="Input source file or directory")
  cmd_check.add_argument("--config", nargs="*", help=config_help)

  # --- Command: PREVIEW ---
  cmd_prev = subparsers.add_parser("preview", help="Show mirror blocks in impl notation")
  cmd_prev.add_argument("path", type=Path, help="Input source file or directory")
  cmd_prev.add_argument("--config", nargs="*", help=config_help)

  args = parser.parse_args(argv)
  set_verbose(args.verbose)
  settings = parse_cli_key_values(args.config)

  if args.command == "generate":
    return commands.handle_generate(args.path, args.out, settings)

  elif args.command == "check":
    return commands.handle_check(args.path, settings)

  elif args.command == "preview":
    return commands.handle_preview(args.path, settings)

  return 0


if __name__ == "__main__":
  sys.exit(main())
