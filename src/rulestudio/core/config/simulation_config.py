"""
Impact simulation configuration.
"""

from dataclasses import dataclass


@dataclass
class SimulationConfig:
    """Settings for overlay scratch files and overlay construction."""

    scratch_dir_prefix: str = "rulestudio-"
    apply_default_exclusions: bool = True
