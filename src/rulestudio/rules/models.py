from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleCategory(str, Enum):
    """Enumerates the kinds a lint rule can belong to."""

    STYLE = "style"
    LINT = "lint"
    PERFORMANCE = "performance"
    IDIOMATIC = "idiomatic"
    METRICS = "metrics"
    UNCATEGORIZED = "uncategorized"

    @classmethod
    def from_kind(cls, kind: str | None) -> "RuleCategory":
        """Map a raw tool 'kind' string onto the closed category set."""
        if not kind:
            return cls.UNCATEGORIZED
        try:
            return cls(kind.strip().lower())
        except ValueError:
            return cls.UNCATEGORIZED

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Severity(str, Enum):
    """Severity level of a rule violation."""

    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def parse(cls, raw: str | None) -> "Severity":
        """Lenient parse; anything unknown is treated as a warning."""
        if raw:
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.WARNING


class ParameterType(str, Enum):
    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"


class RuleParameter(BaseModel):
    """A configurable parameter of a rule."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ParameterType
    default_value: Any = None
    description: str | None = None


class Rule(BaseModel):
    """
    Metadata for one lint rule as reported by the lint tool.

    Identity is the rule ``id``: two rules with the same id compare equal.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category: RuleCategory = RuleCategory.UNCATEGORIZED
    is_optin: bool = False
    default_severity: Severity | None = None
    parameters: tuple[RuleParameter, ...] | None = None
    triggering_examples: tuple[str, ...] = ()
    non_triggering_examples: tuple[str, ...] = ()
    documentation_url: str | None = None
    supports_autocorrection: bool = False
    minimum_tool_version: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class Violation(BaseModel):
    """A single finding produced by the lint tool."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    file_path: str
    line: int = Field(ge=1)
    column: int | None = Field(default=None, ge=1)
    severity: Severity = Severity.WARNING
    message: str


class CatalogSnapshot(BaseModel):
    """The full set of known rules at a point in time."""

    rules: list[Rule] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    tool_version: str | None = None

    @field_validator("rules")
    @classmethod
    def _unique_ids(cls, rules: list[Rule]) -> list[Rule]:
        seen: set[str] = set()
        for rule in rules:
            if rule.id in seen:
                raise ValueError(f"Duplicate rule id in snapshot: {rule.id}")
            seen.add(rule.id)
        return rules
