"""Pytest configuration."""

import sys
from pathlib import Path

# make the src layout importable without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
