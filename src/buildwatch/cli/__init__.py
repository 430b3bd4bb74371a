"""
Command-line interface for the buildwatch package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
