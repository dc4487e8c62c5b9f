"""
JWS/JCS Command Line Interface.

This package provides command-line tools for validating, canonicalizing and
signing JSON objects with an embedded detached JWS.
"""

# Import the main CLI entry point
from .main import cli

# Re-export for easier imports
__all__ = [
    'cli',
]
