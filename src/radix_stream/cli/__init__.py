"""Command-line interface module for radix stream conversion.

This module provides the radix-stream filter: flag parsing, help text, stream
selection and exit codes around the conversion API.
"""

from .main import main

__all__ = ["main"]
