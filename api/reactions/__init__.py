"""
Unique emoji-style reaction counting.
"""

from .router import router

__all__ = ["router"]
