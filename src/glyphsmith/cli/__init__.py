"""Command-line interface for glyphsmith.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Availability table for every character in a snapshot
- Auto-kerning of recommended pairs with a JSON suggestion file
- Quiet mode and structured log files
"""

from glyphsmith.cli.app import cli, main

__all__ = ["cli", "main"]
