from functools import lru_cache

from rulestudio.integrations.lint_tool import LintToolInvoker, SubprocessLintTool
from rulestudio.integrations.remote_config import RemoteConfigResolver
from rulestudio.rules.cache_store import RuleCacheStore
from rulestudio.rules.catalog import RuleCatalogService
from rulestudio.simulation import ImpactSimulationEngine

# --- Service Dependencies ---  # DI: override in tests via app.dependency_overrides.


@lru_cache
def get_lint_tool() -> LintToolInvoker:
    return SubprocessLintTool()


@lru_cache
def get_rule_catalog() -> RuleCatalogService:
    """One catalog per process: it owns the in-memory rule set."""
    return RuleCatalogService(get_lint_tool(), RuleCacheStore())


def get_simulation_engine() -> ImpactSimulationEngine:
    return ImpactSimulationEngine(get_lint_tool())


def get_remote_config_resolver() -> RemoteConfigResolver:
    return RemoteConfigResolver()
