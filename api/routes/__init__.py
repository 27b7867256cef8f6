"""
API routes package for APICompare.
"""
from api.routes import comparison

__all__ = ["comparison"]
