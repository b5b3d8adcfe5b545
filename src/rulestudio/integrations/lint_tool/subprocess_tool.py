"""
Subprocess-backed lint tool invoker.

Runs the lint binary with ``asyncio.create_subprocess_exec`` so a slow
lint run suspends only the awaiting caller.
"""

import asyncio
import os
import shutil
from pathlib import Path

import structlog
from cachetools import TTLCache

from rulestudio.core.config import config
from rulestudio.core.config.lint_tool_config import LintToolConfig
from rulestudio.core.errors import ExternalToolError, ToolNotFoundError, ToolTimeoutError
from rulestudio.integrations.lint_tool.interface import LintToolInvoker

logger = structlog.get_logger(__name__)

# Exit code the linter uses when it found violations at error severity
LINT_VIOLATIONS_EXIT_CODE = 2


class SubprocessLintTool(LintToolInvoker):
    """Invokes the lint binary found on this machine."""

    def __init__(self, tool_config: LintToolConfig | None = None):
        self.tool_config = tool_config or config.lint_tool
        # Resolved executable path (TTL: 10 minutes, re-resolved after installs and upgrades)
        self._path_cache: TTLCache = TTLCache(maxsize=1, ttl=10 * 60)

    def resolve_executable(self) -> str:
        """Locate the binary in the configured search paths, then on PATH."""
        cached = self._path_cache.get("executable")
        if cached and os.access(cached, os.X_OK):
            return cached

        for candidate in self.tool_config.search_paths:
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                self._path_cache["executable"] = candidate
                return candidate

        found = shutil.which(self.tool_config.executable)
        if found:
            self._path_cache["executable"] = found
            return found

        raise ToolNotFoundError(
            f"Lint tool '{self.tool_config.executable}' not found in "
            f"{', '.join(self.tool_config.search_paths) or 'configured paths'} or on PATH"
        )

    async def list_rules(self) -> str:
        stdout, _ = await self._run(["rules"])
        return stdout

    async def rule_details(self, rule_id: str) -> str:
        stdout, _ = await self._run(["rules", rule_id])
        return stdout

    async def lint(self, workspace: Path, config_path: Path) -> str:
        arguments = ["lint", "--reporter", "json", "--quiet", "--config", str(config_path)]
        stdout, _ = await self._run(arguments, cwd=workspace, ok_exit_codes={0, LINT_VIOLATIONS_EXIT_CODE})
        return stdout

    async def version(self) -> str:
        stdout, _ = await self._run(["version"])
        return stdout.strip()

    async def _run(
        self,
        arguments: list[str],
        cwd: Path | None = None,
        ok_exit_codes: set[int] | None = None,
    ) -> tuple[str, str]:
        executable = self.resolve_executable()
        ok_exit_codes = ok_exit_codes or {0}
        command = [executable, *arguments]

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(cwd) if cwd else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExternalToolError(f"Failed to start lint tool: {e}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=self.tool_config.timeout)
        except TimeoutError as e:
            logger.error("Lint tool timed out", command=arguments[0], timeout=self.tool_config.timeout)
            await _terminate(process)
            raise ToolTimeoutError(self.tool_config.timeout) from e
        except asyncio.CancelledError:
            await _terminate(process)
            raise

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        if process.returncode not in ok_exit_codes:
            logger.error(
                "Lint tool exited with failure",
                command=arguments[0],
                exit_code=process.returncode,
                stderr=stderr[:500],
            )
            raise ExternalToolError(
                f"Lint tool '{arguments[0]}' exited with code {process.returncode}: {stderr.strip()[:200]}",
                exit_code=process.returncode,
                stderr=stderr,
            )

        logger.debug("Lint tool finished", command=arguments[0], stdout_bytes=len(stdout_bytes))
        return stdout, stderr


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
