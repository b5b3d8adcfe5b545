"""
Cache configuration.

Defines where the rule catalog snapshot lives and whether it is used.
"""

from dataclasses import dataclass


@dataclass
class CacheConfig:
    """Rule catalog cache configuration."""

    cache_dir: str = "~/.cache/rulestudio"
    rules_file: str = "rules_cache.json"
    enable_cache: bool = True  # Master switch for the persistent snapshot
