"""
Rule impact simulation.
"""

from rulestudio.simulation.engine import ImpactSimulationEngine
from rulestudio.simulation.models import BatchSimulationResult, SimulationResult

__all__ = [
    "BatchSimulationResult",
    "ImpactSimulationEngine",
    "SimulationResult",
]
