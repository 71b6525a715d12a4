"""
Unique page-view counting.
"""

from .router import router

__all__ = ["router"]
