"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from rulestudio.core.config.cache_config import CacheConfig
from rulestudio.core.config.lint_tool_config import DEFAULT_SEARCH_PATHS, LintToolConfig
from rulestudio.core.config.logging_config import LoggingConfig
from rulestudio.core.config.remote_config import RemoteConfigSettings
from rulestudio.core.config.simulation_config import SimulationConfig

# Load environment variables from a .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        search_paths = os.getenv("LINT_TOOL_SEARCH_PATHS")
        self.lint_tool = LintToolConfig(
            executable=os.getenv("LINT_TOOL_EXECUTABLE", "swiftlint"),
            search_paths=[p for p in search_paths.split(":") if p] if search_paths else list(DEFAULT_SEARCH_PATHS),
            timeout=float(os.getenv("LINT_TOOL_TIMEOUT", "300")),
            config_file_name=os.getenv("LINT_CONFIG_FILE_NAME", ".swiftlint.yml"),
            rule_details_limit=int(os.getenv("RULE_DETAILS_LIMIT", "0")),
            rule_details_concurrency=int(os.getenv("RULE_DETAILS_CONCURRENCY", "4")),
        )

        self.cache = CacheConfig(
            cache_dir=os.getenv("RULE_CACHE_DIR", "~/.cache/rulestudio"),
            rules_file=os.getenv("RULE_CACHE_FILE", "rules_cache.json"),
            enable_cache=_env_flag("CACHE_ENABLE", "true"),
        )

        self.remote_config = RemoteConfigSettings(
            timeout=float(os.getenv("REMOTE_CONFIG_TIMEOUT", "30")),
            max_bytes=int(os.getenv("REMOTE_CONFIG_MAX_BYTES", str(1024 * 1024))),
        )

        self.simulation = SimulationConfig(
            scratch_dir_prefix=os.getenv("SIMULATION_SCRATCH_PREFIX", "rulestudio-"),
            apply_default_exclusions=_env_flag("SIMULATION_DEFAULT_EXCLUSIONS", "true"),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file_path=os.getenv("LOG_FILE_PATH"),
        )

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.lint_tool.executable:
            errors.append("LINT_TOOL_EXECUTABLE must not be empty")

        if self.lint_tool.timeout <= 0:
            errors.append("LINT_TOOL_TIMEOUT must be positive")

        if not self.lint_tool.config_file_name:
            errors.append("LINT_CONFIG_FILE_NAME must not be empty")

        if self.lint_tool.rule_details_limit < 0:
            errors.append("RULE_DETAILS_LIMIT must not be negative")

        if self.lint_tool.rule_details_concurrency < 1:
            errors.append("RULE_DETAILS_CONCURRENCY must be at least 1")

        if self.remote_config.timeout <= 0:
            errors.append("REMOTE_CONFIG_TIMEOUT must be positive")

        if self.remote_config.max_bytes <= 0:
            errors.append("REMOTE_CONFIG_MAX_BYTES must be positive")

        if not self.cache.rules_file:
            errors.append("RULE_CACHE_FILE must not be empty")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
