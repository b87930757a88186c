"""
Teamprio - cross-team backlog prioritization package.
"""
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent

__version__ = "1.0.0"

__all__ = ["PACKAGE_ROOT", "__version__"]
