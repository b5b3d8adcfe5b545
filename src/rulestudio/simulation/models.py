from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from rulestudio.rules.models import Violation


class SimulationResult(BaseModel):
    """Violations produced by one rule when it is forced on for a workspace."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    violations: tuple[Violation, ...] = ()
    duration: float = 0.0  # seconds

    @computed_field  # type: ignore[prop-decorator]
    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def affected_files(self) -> list[str]:
        return sorted({v.file_path for v in self.violations})

    @property
    def has_violations(self) -> bool:
        return self.violation_count > 0

    @property
    def is_safe(self) -> bool:
        return self.violation_count == 0


class BatchSimulationResult(BaseModel):
    """Results of simulating several rules one after another."""

    results: list[SimulationResult] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)  # rule_id -> error message
    total_duration: float = 0.0
    completed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def safe_rules(self) -> list[SimulationResult]:
        return [r for r in self.results if r.is_safe]

    @property
    def rules_with_violations(self) -> list[SimulationResult]:
        return [r for r in self.results if r.has_violations]
