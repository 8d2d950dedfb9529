"""
CLI Command Handlers Facade.

Re-exports handlers from `mirror_impl.cli.handlers` so the entry point and
tests patch a single module.
"""

from mirror_impl.cli.handlers.generate import handle_check, handle_generate
from mirror_impl.cli.handlers.preview import handle_preview

__all__ = [
  "handle_check",
  "handle_generate",
  "handle_preview",
]
