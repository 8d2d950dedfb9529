"""Runs the mirror-impl CLI: ``python -m mirror_impl generate src/ --out build/``."""

import sys

from mirror_impl.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
