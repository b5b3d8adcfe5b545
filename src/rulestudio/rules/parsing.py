"""
Parsing of the lint tool's list-rules output.

The tool either emits a JSON array of rule descriptors or its
box-drawing table (``| identifier | opt-in | correctable | ... | kind | ...``).
Both are turned into ``Rule`` values here. The table carries no descriptions
or examples; those come from the per-rule listing parsed by
``parse_rule_details``.
"""

import json
import logging
import textwrap
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from rulestudio.rules.models import ParameterType, Rule, RuleCategory, RuleParameter, Severity

logger = logging.getLogger(__name__)

_MIN_TABLE_COLUMNS = 5


class RuleListParseError(ValueError):
    """Raised when list-rules output yields no rules."""

    pass


def display_name_for(identifier: str) -> str:
    """force_cast -> Force Cast"""
    return identifier.replace("_", " ").title()


def parse_rule_list(output: str) -> list[Rule]:
    """
    Parse list-rules output into rules, keeping the first occurrence of each id.

    Raises:
        RuleListParseError: If no rule could be extracted.
    """
    text = output.strip()
    if text.startswith("["):
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise RuleListParseError(f"Invalid JSON rule list: {e}") from e
        rules = _parse_descriptors(payload)
    else:
        rules = _parse_table(text)

    unique: dict[str, Rule] = {}
    for rule in rules:
        if rule.id in unique:
            logger.warning(f"Duplicate rule id '{rule.id}' in rule list, keeping first")
            continue
        unique[rule.id] = rule

    if not unique:
        raise RuleListParseError("No rules found in lint tool output")

    logger.info(f"Parsed {len(unique)} rules from lint tool output")
    return list(unique.values())


def _parse_descriptors(payload: Any) -> list[Rule]:
    if not isinstance(payload, list):
        raise RuleListParseError("Rule list JSON must be an array")

    rules = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        try:
            rule = _rule_from_descriptor(item)
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(f"Skipping rule descriptor {item.get('identifier', item.get('id', 'unknown'))}: {e}")
            continue
        if rule:
            rules.append(rule)
    return rules


def _rule_from_descriptor(item: dict[str, Any]) -> Rule | None:
    identifier = item.get("identifier") or item.get("id")
    if not isinstance(identifier, str) or not identifier.strip():
        return None
    identifier = identifier.strip()

    raw_severity = item.get("default_severity")
    parameters = item.get("parameters")

    return Rule(
        id=identifier,
        name=item.get("name") or display_name_for(identifier),
        description=item.get("description") or "",
        category=RuleCategory.from_kind(item.get("kind") or item.get("category")),
        is_optin=bool(item.get("opt_in", item.get("is_opt_in", False))),
        default_severity=Severity.parse(raw_severity) if raw_severity else None,
        parameters=tuple(_parse_parameter(p) for p in parameters) if isinstance(parameters, list) else None,
        triggering_examples=tuple(item.get("triggering_examples") or ()),
        non_triggering_examples=tuple(item.get("nontriggering_examples") or item.get("non_triggering_examples") or ()),
        documentation_url=item.get("documentation"),
        supports_autocorrection=bool(item.get("correctable", False)),
        minimum_tool_version=item.get("minimum_swift_version"),
    )


def _parse_parameter(raw: dict[str, Any]) -> RuleParameter:
    return RuleParameter(
        name=raw["name"],
        type=ParameterType(raw.get("type", "string")),
        default_value=raw.get("default_value", raw.get("default")),
        description=raw.get("description"),
    )


def _parse_table(text: str) -> list[Rule]:
    rules = []
    for line in text.splitlines():
        trimmed = line.strip()
        # Borders, header and non-table lines
        if not trimmed or trimmed.startswith("+") or not trimmed.startswith("|"):
            continue
        if "identifier" in trimmed.lower():
            continue

        columns = [c.strip() for c in trimmed.split("|")]
        columns = [c for c in columns if c]
        if len(columns) < _MIN_TABLE_COLUMNS:
            logger.debug(f"Skipping table row with {len(columns)} columns: {trimmed[:80]}")
            continue

        identifier = columns[0]
        if "─" in identifier or set(identifier) <= {"-"}:
            continue

        rules.append(
            Rule(
                id=identifier,
                name=display_name_for(identifier),
                category=RuleCategory.from_kind(columns[4]),
                is_optin=columns[1].lower() == "yes",
                supports_autocorrection=columns[2].lower() == "yes",
            )
        )
    return rules


@dataclass
class RuleDetails:
    """What the per-rule listing adds on top of a table row."""

    name: str | None = None
    description: str = ""
    triggering_examples: list[str] = field(default_factory=list)
    non_triggering_examples: list[str] = field(default_factory=list)


def needs_details(rule: Rule) -> bool:
    return not rule.description and not rule.triggering_examples and not rule.non_triggering_examples


def parse_rule_details(output: str) -> RuleDetails:
    """
    Parse the listing for a single rule, for example::

        Force Cast (force_cast): Force casts should be avoided

        Non Triggering Examples:

        Example #1

            NSNumber() as? Int

        Triggering Examples (violations are marked with '↓'):

        Example #1

            NSNumber() ↓as! Int

    Unrecognised output yields empty details rather than an error.
    """
    lines = output.strip("\n").splitlines()
    details = RuleDetails()
    if not lines:
        return details

    _apply_header(lines[0], details)
    _apply_examples(lines[1:], details)
    return details


def _apply_header(line: str, details: RuleDetails) -> None:
    name_part, separator, description = line.partition(":")
    if not separator or "(" not in name_part:
        return
    details.name = name_part.split("(", 1)[0].strip() or None
    details.description = description.strip()


def _apply_examples(lines: list[str], details: RuleDetails) -> None:
    section: list[str] | None = None
    current: list[str] = []

    def flush() -> None:
        example = textwrap.dedent("\n".join(current)).strip()
        if section is not None and example:
            section.append(example)
        current.clear()

    for line in lines:
        stripped = line.strip()
        if "Non Triggering Examples" in stripped or "Non-Triggering Examples" in stripped:
            flush()
            section = details.non_triggering_examples
            continue
        if "Triggering Examples" in stripped:
            flush()
            section = details.triggering_examples
            continue
        # Configuration table closes the example sections
        if stripped.startswith(("Configuration", "+")):
            flush()
            section = None
            continue
        if section is None:
            continue
        if not stripped or stripped.startswith("Example #"):
            flush()
            continue
        current.append(line.replace("↓", "").rstrip())

    flush()


def apply_rule_details(rule: Rule, details: RuleDetails) -> Rule:
    """Fill in what ``rule`` lacks from ``details``; fields it already has are kept."""
    update: dict[str, Any] = {}
    if details.name:
        update["name"] = details.name
    if details.description and not rule.description:
        update["description"] = details.description
    if details.triggering_examples and not rule.triggering_examples:
        update["triggering_examples"] = tuple(details.triggering_examples)
    if details.non_triggering_examples and not rule.non_triggering_examples:
        update["non_triggering_examples"] = tuple(details.non_triggering_examples)
    return rule.model_copy(update=update) if update else rule
