"""
sizefit CLI
Command-line interface for size-constrained image encoding
"""

from sizefit import __version__

__all__ = ["__version__"]
