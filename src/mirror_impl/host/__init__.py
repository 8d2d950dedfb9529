"""
Python host front end.

Reads marked classes from Python source with LibCST, expands them with the
core engine and writes the mirror classes back into the module.
"""

from mirror_impl.host.generator import GenerationResult, SourceGenerator
from mirror_impl.host.markers import bounds, mirror_impl, mirror_method, transform_bounds, where

__all__ = [
  "GenerationResult",
  "SourceGenerator",
  "bounds",
  "mirror_impl",
  "mirror_method",
  "transform_bounds",
  "where",
]
