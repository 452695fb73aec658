"""
User interface modules.

This package contains the command-line interface for SRT Handle.
"""

from .cli import CLIHandler

__all__ = ['CLIHandler']
