"""
Read-only query surface.
"""

from .dashboard import DashboardQueries

__all__ = [
    "DashboardQueries",
]
