"""
Shared utilities for structured operation logging.
"""

from rulestudio.core.utils.logging import log_operation

__all__ = [
    "log_operation",
]
