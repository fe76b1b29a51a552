"""Shared test configuration for the crate-query repository.

Provides:
- Import paths for the packages under packages/*/src, so the test suites
  run from a plain checkout without installing anything
"""

import sys
from pathlib import Path

repo_root = Path(__file__).parent

for package in ("common", "index", "cli"):
    src = repo_root / "packages" / package / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))
