#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the drinklog project.

All paths are Path objects relative to the project root:
    ROOT/
    ├── drinklog/      # Package source
    │   └── migrations/  # Alembic scripts
    ├── data/          # Ledger database and config (private)
    └── logs/          # Application logs
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/drinklog/core/paths.py.

    Returns:
        Path object for project root

    Raises:
        RuntimeError: If the package directory is not where it is expected
    """
    current_file = Path(__file__).resolve()
    root = current_file.parent.parent.parent

    if not (root / "drinklog").is_dir():
        raise RuntimeError(
            f"Cannot determine valid project root. "
            f"Expected {root / 'drinklog'} to exist. "
            f"Current file: {current_file}"
        )

    return root


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "drinklog"
DATA_DIR = ROOT / "data"

# --- Database ---
ALEMBIC_DIR = PACKAGE_DIR / "migrations"
ALEMBIC_INI = ROOT / "alembic.ini"
DB_DIR = DATA_DIR / "db"
DB_PATH = DB_DIR / "drinklog.db"

# --- Configuration ---
CONFIG_PATH = DATA_DIR / "drinklog.yaml"

# --- Logs ---
LOG_DIR = ROOT / "logs"
