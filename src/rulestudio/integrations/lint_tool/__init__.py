"""
Lint tool adapter.

This package provides the invocation contract for the external lint binary.
"""

from rulestudio.integrations.lint_tool.interface import LintToolInvoker
from rulestudio.integrations.lint_tool.subprocess_tool import SubprocessLintTool

__all__ = [
    "LintToolInvoker",
    "SubprocessLintTool",
]
