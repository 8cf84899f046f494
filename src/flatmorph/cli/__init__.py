"""
CLI Command Modules

Each module contains a logical group of related commands.
"""

from flatmorph.cli import eslint, imports

__all__ = ['eslint', 'imports']
