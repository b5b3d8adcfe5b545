"""
Remote baseline configuration fetching.
"""

from rulestudio.integrations.remote_config.resolver import (
    RemoteConfigResolver,
    URLValidationResult,
    resolve_to_raw_url,
    validate_url,
)

__all__ = [
    "RemoteConfigResolver",
    "URLValidationResult",
    "resolve_to_raw_url",
    "validate_url",
]
