"""
Ordered sources for the rule catalog.

Each source either returns a list of rules or raises. The catalog tries
them in order and keeps every failure for the final error.
"""

import asyncio
from abc import ABC, abstractmethod

import structlog

from rulestudio.core.errors import CatalogUnavailableError, ExternalToolError
from rulestudio.integrations.lint_tool import LintToolInvoker
from rulestudio.rules.cache_store import RuleCacheStore
from rulestudio.rules.models import Rule
from rulestudio.rules.parsing import apply_rule_details, needs_details, parse_rule_details, parse_rule_list

logger = structlog.get_logger(__name__)


class RuleSource(ABC):
    """A fallible provider of the rule list."""

    name: str = ""

    @abstractmethod
    async def fetch(self) -> list[Rule]:
        pass


class LiveRuleSource(RuleSource):
    """Asks the installed lint tool for its rules."""

    name = "live"

    def __init__(self, invoker: LintToolInvoker, details_limit: int = 0, details_concurrency: int = 4):
        self.invoker = invoker
        self.details_limit = details_limit
        self.details_concurrency = details_concurrency
        self.last_tool_version: str | None = None

    async def fetch(self) -> list[Rule]:
        output = await self.invoker.list_rules()
        rules = await self._with_details(parse_rule_list(output))
        self.last_tool_version = await self._tool_version()
        return rules

    async def _with_details(self, rules: list[Rule]) -> list[Rule]:
        """
        Fetch the per-rule listing for rules that came without a description
        or examples. A rule whose listing cannot be fetched is kept as-is.
        """
        pending = [index for index, rule in enumerate(rules) if needs_details(rule)]
        if self.details_limit > 0:
            pending = pending[: self.details_limit]
        if not pending:
            return rules

        semaphore = asyncio.Semaphore(max(1, self.details_concurrency))

        async def enrich(rule: Rule) -> Rule:
            async with semaphore:
                try:
                    output = await self.invoker.rule_details(rule.id)
                except ExternalToolError as e:
                    logger.warning("Could not fetch rule details", rule_id=rule.id, error=str(e))
                    return rule
            return apply_rule_details(rule, parse_rule_details(output))

        enriched = await asyncio.gather(*(enrich(rules[index]) for index in pending))
        result = list(rules)
        for index, rule in zip(pending, enriched, strict=True):
            result[index] = rule

        logger.info("Fetched rule details", requested=len(pending), total=len(rules))
        return result

    async def _tool_version(self) -> str | None:
        try:
            return await self.invoker.version() or None
        except ExternalToolError as e:
            logger.warning("Could not determine lint tool version", error=str(e))
            return None


class CachedRuleSource(RuleSource):
    """Reads the last persisted snapshot."""

    name = "cache"

    def __init__(self, store: RuleCacheStore):
        self.store = store

    async def fetch(self) -> list[Rule]:
        return await asyncio.to_thread(self.store.load)


async def first_available(sources: list[RuleSource]) -> tuple[RuleSource, list[Rule]]:
    """
    Try each source in order and return the first success.

    Raises:
        CatalogUnavailableError: Aggregating every source's failure.
    """
    failures: list[tuple[str, Exception]] = []
    for source in sources:
        try:
            rules = await source.fetch()
        except Exception as e:
            logger.warning("Rule source failed", source=source.name, error=str(e))
            failures.append((source.name, e))
            continue
        return source, rules

    raise CatalogUnavailableError(failures)
