"""
Impact simulation engine.

Answers "what would happen if this rule were enabled?" by linting the
workspace with an ephemeral overlay configuration. The user's own
configuration file is only ever read, never written.
"""

import asyncio
import shutil
import tempfile
import time
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from rulestudio.core.config import config
from rulestudio.core.config.simulation_config import SimulationConfig
from rulestudio.core.errors import RuleStudioError
from rulestudio.core.utils import log_operation
from rulestudio.integrations.lint_tool import LintToolInvoker
from rulestudio.simulation.models import BatchSimulationResult, SimulationResult
from rulestudio.simulation.overlay import build_overlay, dump_overlay, load_baseline
from rulestudio.simulation.violations import parse_violations

if TYPE_CHECKING:
    from rulestudio.integrations.remote_config import RemoteConfigResolver

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@asynccontextmanager
async def scratch_file(name: str, prefix: str = "rulestudio-") -> AsyncIterator[Path]:
    """
    Yield a path inside a freshly created, uniquely named directory.

    The directory and everything in it is removed on every exit path,
    including exceptions and task cancellation.
    """
    directory = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield directory / name
    finally:
        shutil.rmtree(directory, ignore_errors=True)


class ImpactSimulationEngine:
    """Simulates enabling rules against a workspace."""

    def __init__(
        self,
        invoker: LintToolInvoker,
        simulation_config: SimulationConfig | None = None,
        config_file_name: str | None = None,
    ):
        self.invoker = invoker
        self.settings = simulation_config or config.simulation
        self.config_file_name = config_file_name or config.lint_tool.config_file_name

    async def simulate_rule(
        self,
        rule_id: str,
        workspace: Path,
        base_config_path: Path | None = None,
        is_optin: bool = False,
    ) -> SimulationResult:
        """
        Lint ``workspace`` with ``rule_id`` forced on.

        Raises:
            BaselineConfigInvalidError: Before any file is written or process started.
            ExternalToolError: If the lint tool fails.
            InvocationOutputMalformedError: If the tool output is not a JSON array.
        """
        workspace = Path(workspace)
        baseline = await asyncio.to_thread(load_baseline, base_config_path)
        overlay = build_overlay(
            baseline,
            rule_id,
            is_optin=is_optin,
            workspace=workspace,
            apply_default_exclusions=self.settings.apply_default_exclusions,
        )

        subject_ids = {"rule_id": rule_id, "workspace": str(workspace)}
        async with log_operation("rule_simulation", subject_ids=subject_ids):
            start = time.monotonic()
            async with scratch_file(self.config_file_name, prefix=self.settings.scratch_dir_prefix) as overlay_path:
                await asyncio.to_thread(overlay_path.write_text, dump_overlay(overlay), "utf-8")
                output = await self.invoker.lint(workspace, overlay_path)

            violations = [v for v in parse_violations(output, workspace) if v.rule_id == rule_id]
            result = SimulationResult(
                rule_id=rule_id,
                violations=tuple(violations),
                duration=time.monotonic() - start,
            )

        logger.info(
            "Simulated rule",
            rule_id=rule_id,
            violation_count=result.violation_count,
            affected_files=len(result.affected_files),
        )
        return result

    async def simulate_rule_with_remote_baseline(
        self,
        rule_id: str,
        workspace: Path,
        url: str,
        resolver: "RemoteConfigResolver",
        is_optin: bool = False,
    ) -> SimulationResult:
        """Fetch the baseline from ``url`` and simulate against it."""
        text = await resolver.fetch_config(url)
        async with scratch_file(self.config_file_name, prefix=self.settings.scratch_dir_prefix) as baseline_path:
            await asyncio.to_thread(baseline_path.write_text, text, "utf-8")
            return await self.simulate_rule(rule_id, workspace, base_config_path=baseline_path, is_optin=is_optin)

    async def simulate_rules(
        self,
        rule_ids: list[str],
        workspace: Path,
        base_config_path: Path | None = None,
        optin_rule_ids: Iterable[str] = (),
        progress: ProgressCallback | None = None,
    ) -> BatchSimulationResult:
        """
        Simulate each rule in turn. A failing rule is recorded in ``failures``
        and the batch continues.
        """
        start = time.monotonic()
        optin = set(optin_rule_ids)
        results: list[SimulationResult] = []
        failures: dict[str, str] = {}

        for index, rule_id in enumerate(rule_ids):
            if progress:
                progress(index, len(rule_ids), rule_id)
            try:
                result = await self.simulate_rule(
                    rule_id,
                    workspace,
                    base_config_path=base_config_path,
                    is_optin=rule_id in optin,
                )
            except RuleStudioError as e:
                logger.warning("Simulation failed", rule_id=rule_id, error=str(e))
                failures[rule_id] = str(e)
                continue
            results.append(result)

        return BatchSimulationResult(
            results=results,
            failures=failures,
            total_duration=time.monotonic() - start,
        )

    async def find_safe_rules(
        self,
        workspace: Path,
        disabled_rule_ids: list[str],
        base_config_path: Path | None = None,
        optin_rule_ids: Iterable[str] = (),
        progress: ProgressCallback | None = None,
    ) -> list[str]:
        """Ids of rules that would produce no violations if enabled."""
        batch = await self.simulate_rules(
            disabled_rule_ids,
            workspace,
            base_config_path=base_config_path,
            optin_rule_ids=optin_rule_ids,
            progress=progress,
        )
        return [r.rule_id for r in batch.safe_rules]
