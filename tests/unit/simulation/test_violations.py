import json
from pathlib import Path

import pytest

from rulestudio.core.errors import InvocationOutputMalformedError
from rulestudio.rules.models import Severity
from rulestudio.simulation.violations import parse_violations, relative_to_workspace


def _record(**overrides):
    record = {
        "rule_id": "force_cast",
        "reason": "Force casts should be avoided",
        "severity": "Error",
        "file": "/projects/app/Sources/App.swift",
        "line": 12,
        "character": 9,
    }
    record.update(overrides)
    return record


def test_empty_output_means_no_violations():
    assert parse_violations("") == []
    assert parse_violations("  \n") == []
    assert parse_violations("[]") == []


def test_maps_record_fields():
    output = json.dumps([_record()])

    violation = parse_violations(output)[0]

    assert violation.rule_id == "force_cast"
    assert violation.file_path == "/projects/app/Sources/App.swift"
    assert violation.line == 12
    assert violation.column == 9
    assert violation.severity is Severity.ERROR
    assert violation.message == "Force casts should be avoided"


def test_paths_relative_to_workspace():
    output = json.dumps([_record(), _record(file="/elsewhere/Other.swift")])

    violations = parse_violations(output, workspace=Path("/projects/app"))

    assert violations[0].file_path == "Sources/App.swift"
    assert violations[1].file_path == "/elsewhere/Other.swift"


@pytest.mark.parametrize("character", [0, None, "7", True])
def test_unusable_column_becomes_none(character):
    output = json.dumps([_record(character=character)])

    assert parse_violations(output)[0].column is None


@pytest.mark.parametrize("line", [0, -3, None, "12"])
def test_unusable_line_becomes_one(line):
    output = json.dumps([_record(line=line)])

    assert parse_violations(output)[0].line == 1


def test_column_key_is_accepted():
    record = _record()
    del record["character"]
    record["column"] = 4

    assert parse_violations(json.dumps([record]))[0].column == 4


def test_malformed_records_are_skipped():
    incomplete = _record()
    del incomplete["reason"]
    output = json.dumps([incomplete, "not a record", _record(rule_id=42), _record(rule_id="force_try")])

    violations = parse_violations(output)

    assert [v.rule_id for v in violations] == ["force_try"]


@pytest.mark.parametrize("output", ["{ not json", '{"violations": []}', "42"])
def test_malformed_payload_raises(output):
    with pytest.raises(InvocationOutputMalformedError):
        parse_violations(output)


def test_relative_to_workspace():
    assert relative_to_workspace("/a/b/c.swift", None) == "/a/b/c.swift"
    assert relative_to_workspace("/a/b/c.swift", Path("/a")) == "b/c.swift"
    assert relative_to_workspace("b/c.swift", Path("/a")) == "b/c.swift"
