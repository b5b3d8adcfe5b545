# Rules package

from rulestudio.rules.models import (
    CatalogSnapshot,
    Rule,
    RuleCategory,
    RuleParameter,
    Severity,
    Violation,
)

__all__ = [
    "CatalogSnapshot",
    "Rule",
    "RuleCategory",
    "RuleParameter",
    "Severity",
    "Violation",
]
