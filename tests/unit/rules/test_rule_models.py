import pytest
from pydantic import ValidationError

from rulestudio.rules.models import CatalogSnapshot, Rule, RuleCategory, Severity, Violation


class TestRuleCategory:
    @pytest.mark.parametrize(
        "kind, expected",
        [
            ("style", RuleCategory.STYLE),
            ("LINT", RuleCategory.LINT),
            (" performance ", RuleCategory.PERFORMANCE),
            ("idiomatic", RuleCategory.IDIOMATIC),
            ("metrics", RuleCategory.METRICS),
            ("unknown_kind", RuleCategory.UNCATEGORIZED),
            ("", RuleCategory.UNCATEGORIZED),
            (None, RuleCategory.UNCATEGORIZED),
        ],
    )
    def test_from_kind(self, kind, expected):
        assert RuleCategory.from_kind(kind) is expected

    def test_display_name(self):
        assert RuleCategory.PERFORMANCE.display_name == "Performance"


def test_severity_parse_is_lenient():
    assert Severity.parse("Error") is Severity.ERROR
    assert Severity.parse("warning") is Severity.WARNING
    assert Severity.parse("fatal") is Severity.WARNING
    assert Severity.parse(None) is Severity.WARNING


def test_rule_identity_is_id():
    a = Rule(id="force_cast", name="Force Cast", description="one")
    b = Rule(id="force_cast", name="Other", description="two")

    assert a == b
    assert len({a, b}) == 1


def test_rule_is_immutable():
    rule = Rule(id="force_cast", name="Force Cast")

    with pytest.raises(ValidationError):
        rule.name = "changed"


def test_violation_requires_positive_line():
    with pytest.raises(ValidationError):
        Violation(rule_id="force_cast", file_path="a.swift", line=0, message="m")


def test_snapshot_rejects_duplicate_ids():
    rule = Rule(id="force_cast", name="Force Cast")

    with pytest.raises(ValidationError):
        CatalogSnapshot(rules=[rule, rule])


def test_snapshot_round_trips_through_json():
    snapshot = CatalogSnapshot(rules=[Rule(id="force_cast", name="Force Cast")], tool_version="0.57.0")

    restored = CatalogSnapshot.model_validate_json(snapshot.model_dump_json())

    assert restored.rules[0].id == "force_cast"
    assert restored.tool_version == "0.57.0"
