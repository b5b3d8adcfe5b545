"""
Pytest configuration to ensure the project root is on sys.path for imports,
plus shared fakes for the external lint tool.
"""

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rulestudio.core.errors import ExternalToolError  # noqa: E402
from rulestudio.integrations.lint_tool import LintToolInvoker  # noqa: E402


class FakeLintTool(LintToolInvoker):
    """In-memory stand-in for the lint binary that records every call."""

    def __init__(
        self,
        rules_output: str | Exception = "[]",
        lint_output: str | Exception = "[]",
        version_output: str | Exception = "0.57.0",
        details_output: dict[str, str | Exception] | None = None,
    ):
        self.rules_output = rules_output
        self.details_output = details_output or {}
        self.details_calls: list[str] = []
        self.lint_output = lint_output
        self.version_output = version_output
        self.lint_calls: list[tuple[Path, Path]] = []
        self.overlays_seen: list[str] = []
        self.list_rules_calls = 0

    async def list_rules(self) -> str:
        self.list_rules_calls += 1
        if isinstance(self.rules_output, Exception):
            raise self.rules_output
        return self.rules_output

    async def rule_details(self, rule_id: str) -> str:
        self.details_calls.append(rule_id)
        output = self.details_output.get(rule_id, "")
        if isinstance(output, Exception):
            raise output
        return output

    async def lint(self, workspace: Path, config_path: Path) -> str:
        self.lint_calls.append((workspace, config_path))
        self.overlays_seen.append(config_path.read_text(encoding="utf-8"))
        if isinstance(self.lint_output, Exception):
            raise self.lint_output
        return self.lint_output

    async def version(self) -> str:
        if isinstance(self.version_output, Exception):
            raise self.version_output
        return self.version_output


RULE_DESCRIPTORS = [
    {
        "identifier": "force_cast",
        "name": "Force Cast",
        "description": "Force casts should be avoided.",
        "kind": "idiomatic",
        "opt_in": False,
        "default_severity": "error",
        "correctable": False,
    },
    {
        "identifier": "empty_count",
        "name": "Empty Count",
        "description": "Prefer checking `isEmpty` over comparing `count` to zero.",
        "kind": "performance",
        "opt_in": True,
        "correctable": False,
    },
    {
        "identifier": "trailing_whitespace",
        "name": "Trailing Whitespace",
        "description": "Lines should not have trailing whitespace.",
        "kind": "style",
        "opt_in": False,
        "correctable": True,
    },
]


@pytest.fixture
def rules_json() -> str:
    return json.dumps(RULE_DESCRIPTORS)


@pytest.fixture
def failing_tool() -> FakeLintTool:
    error = ExternalToolError("swiftlint: command not found", exit_code=127)
    return FakeLintTool(rules_output=error, lint_output=error, version_output=error)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    (root / "Sources").mkdir(parents=True)
    (root / "Sources" / "App.swift").write_text("let x = y as! Int\n", encoding="utf-8")
    return root
