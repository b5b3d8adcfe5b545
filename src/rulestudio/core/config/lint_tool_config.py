"""
Lint tool configuration.
"""

from dataclasses import dataclass, field

DEFAULT_SEARCH_PATHS = [
    "/opt/homebrew/bin/swiftlint",
    "/usr/local/bin/swiftlint",
    "/usr/bin/swiftlint",
]


@dataclass
class LintToolConfig:
    """External lint tool configuration."""

    executable: str = "swiftlint"
    search_paths: list[str] = field(default_factory=lambda: list(DEFAULT_SEARCH_PATHS))
    timeout: float = 300.0  # seconds
    config_file_name: str = ".swiftlint.yml"
    rule_details_limit: int = 0  # 0 fetches details for every rule lacking them
    rule_details_concurrency: int = 4
