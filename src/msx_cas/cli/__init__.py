"""
MSX CAS Packager Command-Line Interface
=======================================

This package provides the ``mcp`` command-line tool, a Click-based
application with list, add, extract and export commands, plus the
filesystem helpers it uses.
"""

__all__ = ["mcp"]
