"""
Remote configuration fetch settings.
"""

from dataclasses import dataclass


@dataclass
class RemoteConfigSettings:
    """Settings for fetching baseline configurations over HTTPS."""

    timeout: float = 30.0  # seconds
    max_bytes: int = 1024 * 1024
