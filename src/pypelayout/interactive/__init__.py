"""
Command line tools for pypelayout.

This module provides command-line tools for:
- Printing generated shape outlines
- Building a demo layout as SVG
- Managing editor settings files
"""

from .helper_cli import cli

__all__ = ["cli"]
