"""Shared pytest setup.

The repository root is put on sys.path so ``core`` and ``modules`` import
without installing the project, and the API tests get their own SQLite file.
"""

import os
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{ROOT / 'test_priceme.db'}")
os.environ.setdefault("LOG_LEVEL", "WARNING")
