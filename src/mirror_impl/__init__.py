"""
mirror-impl Package.

Derives method declarations for a generated mirror type from methods written
once against the original type, retargeting generic bounds on the way.

Usage
-----

Simple String Expansion
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import mirror_impl
    code = open("container.py").read()
    print(mirror_impl.expand(code))

Engine Usage
^^^^^^^^^^^^

.. code-block:: python

    from mirror_impl.core import ImplBlock, MirrorEngine

    engine = MirrorEngine()
    original, mirror = engine.expand(block)
"""

from typing import Any, Dict, Optional

from mirror_impl.config import MirrorConfig
from mirror_impl.core.engine import MirrorEngine
from mirror_impl.host.generator import GenerationResult, SourceGenerator
from mirror_impl.host.markers import bounds, mirror_impl, mirror_method, transform_bounds, where

__version__ = "0.1.0"


def expand(code: str, settings: Optional[Dict[str, Any]] = None) -> str:
  """
  Inserts mirror classes into a string of Python code.

  Args:
      code (str): Module source containing ``@mirror_impl`` classes.
      settings (dict, optional): `MirrorConfig` fields, e.g.
          ``{"type_template": "Archived{name}"}``.

  Returns:
      str: The expanded source.

  Raises:
      ValueError: If any marked block fails to expand.
  """
  config = MirrorConfig(**(settings or {}))
  result = SourceGenerator(config).run(code)
  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Expansion failed:\n{error_msg}")
  return result.code


__all__ = [
  "GenerationResult",
  "MirrorConfig",
  "MirrorEngine",
  "SourceGenerator",
  "__version__",
  "bounds",
  "expand",
  "mirror_impl",
  "mirror_method",
  "transform_bounds",
  "where",
]
