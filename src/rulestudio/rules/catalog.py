"""
Rule catalog service.

Owns the in-memory rule set. Loads are live-first with a fallback to the
last persisted snapshot; a successful live fetch always wins over the cache.
"""

import asyncio
from collections import defaultdict

import structlog

from rulestudio.core.config import config
from rulestudio.core.config.lint_tool_config import LintToolConfig
from rulestudio.integrations.lint_tool import LintToolInvoker
from rulestudio.rules.cache_store import RuleCacheStore
from rulestudio.rules.models import Rule, RuleCategory
from rulestudio.rules.sources import CachedRuleSource, LiveRuleSource, RuleSource, first_available

logger = structlog.get_logger(__name__)


class RuleCatalogService:
    """
    The single owner of the current rule set.

    All mutation happens inside ``load_rules`` under an ``asyncio.Lock``, so
    concurrent callers on the event loop never observe a half-replaced catalog.
    """

    def __init__(
        self,
        invoker: LintToolInvoker,
        cache_store: RuleCacheStore,
        use_cache: bool | None = None,
        tool_config: LintToolConfig | None = None,
    ):
        self.invoker = invoker
        self.tool_config = tool_config or config.lint_tool
        self.cache_store = cache_store
        self.use_cache = config.cache.enable_cache if use_cache is None else use_cache
        self._rules: list[Rule] = []
        self._index: dict[str, Rule] = {}
        self._is_loading = False
        self._lock = asyncio.Lock()

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    async def load_rules(self) -> list[Rule]:
        """
        Load the catalog from the lint tool, falling back to the cache.

        Returns:
            The new current rule set

        Raises:
            CatalogUnavailableError: If the live fetch and the cache both fail.
        """
        async with self._lock:
            self._is_loading = True
            try:
                live = LiveRuleSource(
                    self.invoker,
                    details_limit=self.tool_config.rule_details_limit,
                    details_concurrency=self.tool_config.rule_details_concurrency,
                )
                sources: list[RuleSource] = [live]
                if self.use_cache:
                    sources.append(CachedRuleSource(self.cache_store))

                source, rules = await first_available(sources)
                self._replace(rules)

                if source is live:
                    await self._save_snapshot(rules, live.last_tool_version)
                else:
                    logger.info("Loaded rule catalog from cache", rule_count=len(rules))

                return self.rules
            finally:
                self._is_loading = False

    async def refresh_rules(self) -> None:
        await self.load_rules()

    def get_rule(self, rule_id: str) -> Rule | None:
        """Look up a rule by id; ``None`` when it is not in the catalog."""
        return self._index.get(rule_id)

    def rules_by_category(self) -> dict[RuleCategory, list[Rule]]:
        grouped: dict[RuleCategory, list[Rule]] = defaultdict(list)
        for rule in self._rules:
            grouped[rule.category].append(rule)
        return dict(grouped)

    def _replace(self, rules: list[Rule]) -> None:
        index: dict[str, Rule] = {}
        for rule in rules:
            index.setdefault(rule.id, rule)
        self._rules = list(index.values())
        self._index = index

    async def _save_snapshot(self, rules: list[Rule], tool_version: str | None) -> None:
        logger.info("Loaded rule catalog from lint tool", rule_count=len(rules), tool_version=tool_version)
        if not self.use_cache:
            return
        try:
            await asyncio.to_thread(self.cache_store.save, rules, tool_version)
        except Exception as e:
            # Best-effort: the live result is already in memory
            logger.warning("Failed to write rule cache", path=str(self.cache_store.path), error=str(e))
