from abc import ABC, abstractmethod
from pathlib import Path


class LintToolInvoker(ABC):
    """
    Abstract interface for running the external lint tool.

    This interface allows us to swap the real binary for a fake in tests
    without changing the catalog or simulation logic.
    """

    @abstractmethod
    async def list_rules(self) -> str:
        """
        Run the list-rules command.

        Returns:
            Raw list-rules output (JSON descriptors or the tool's table)
        """
        pass

    @abstractmethod
    async def rule_details(self, rule_id: str) -> str:
        """
        Run the list-rules command for a single rule.

        Returns:
            The rule's description header followed by its examples
        """
        pass

    @abstractmethod
    async def lint(self, workspace: Path, config_path: Path) -> str:
        """
        Lint ``workspace`` using the configuration file at ``config_path``.

        Returns:
            Raw JSON reporter output: an array of violation records
        """
        pass

    @abstractmethod
    async def version(self) -> str:
        """Return the tool's version string."""
        pass
