"""
Platform package.
"""

from .arango_bootstrap_comp import ensure_schema

__all__ = [
    "ensure_schema",
]
