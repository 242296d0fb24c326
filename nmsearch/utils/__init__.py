"""
Utility modules for the project
"""

from .search_trace import SearchTracer
from .logging_setup import setup_logging

__all__ = ["SearchTracer", "setup_logging"]
