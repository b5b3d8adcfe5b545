"""
Rule Studio core.

Lint rule catalog, rule impact simulation and remote configuration resolving.
"""

__version__ = "0.1.0"
