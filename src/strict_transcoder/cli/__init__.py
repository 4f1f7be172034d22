"""Command-line interface module for the strict transcoder.

This module provides file conversion, validation and BOM detection commands.
"""

from .main import main

__all__ = ["main"]
