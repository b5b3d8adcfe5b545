"""
Overlay configuration construction.

Reads a baseline lint configuration, forces one rule on and serializes the
result. Keys the overlay does not touch are carried through as-is.
"""

import copy
from pathlib import Path
from typing import Any

import yaml

from rulestudio.core.errors import BaselineConfigInvalidError

DISABLED_RULES_KEY = "disabled_rules"
OPT_IN_RULES_KEY = "opt_in_rules"
ONLY_RULES_KEY = "only_rules"
EXCLUDED_KEY = "excluded"
LIST_KEYS = (DISABLED_RULES_KEY, OPT_IN_RULES_KEY, ONLY_RULES_KEY, EXCLUDED_KEY)

# Build artifacts, dependency caches and metadata directories
DEFAULT_EXCLUSIONS = [
    ".build",
    "DerivedData",
    ".git",
    "Pods",
    "Carthage",
    ".swiftpm",
    "node_modules",
    "Build",
]


def load_baseline(path: Path | None) -> dict[str, Any]:
    """
    Read a baseline configuration file; no path means an empty baseline.

    Raises:
        BaselineConfigInvalidError: If the file is unreadable, not YAML, not a mapping,
            or one of the rule or exclusion lists is not a list of strings.
    """
    if path is None:
        return {}

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BaselineConfigInvalidError(str(path), str(e)) from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise BaselineConfigInvalidError(str(path), f"not valid YAML: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise BaselineConfigInvalidError(str(path), f"top level is {type(document).__name__}, expected a mapping")

    for key in LIST_KEYS:
        value = document.get(key)
        if value is None or isinstance(value, str):
            continue
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise BaselineConfigInvalidError(str(path), f"{key} must be a list of strings")
    return document


def merge_exclusions(existing: list[str] | None) -> list[str]:
    """Existing entries first, then any default exclusion not already listed."""
    if not existing:
        return list(DEFAULT_EXCLUSIONS)
    present = set(existing)
    return list(existing) + [d for d in DEFAULT_EXCLUSIONS if d not in present]


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def build_overlay(
    baseline: dict[str, Any],
    rule_id: str,
    is_optin: bool = False,
    workspace: Path | None = None,
    apply_default_exclusions: bool = True,
) -> dict[str, Any]:
    """
    Return a copy of ``baseline`` in which ``rule_id`` is guaranteed enabled.

    Rule ids are matched by exact string equality.
    """
    overlay = copy.deepcopy(baseline)

    if DISABLED_RULES_KEY in overlay:
        disabled = [r for r in _string_list(overlay[DISABLED_RULES_KEY]) if r != rule_id]
        if disabled:
            overlay[DISABLED_RULES_KEY] = disabled
        else:
            del overlay[DISABLED_RULES_KEY]

    if is_optin:
        opt_in = _string_list(overlay.get(OPT_IN_RULES_KEY))
        if rule_id not in opt_in:
            opt_in.append(rule_id)
        overlay[OPT_IN_RULES_KEY] = opt_in

    if ONLY_RULES_KEY in overlay:
        only = _string_list(overlay[ONLY_RULES_KEY])
        if rule_id not in only:
            only.append(rule_id)
        overlay[ONLY_RULES_KEY] = only

    # Per-rule block such as `force_cast: {enabled: false}`
    rule_block = overlay.get(rule_id)
    if isinstance(rule_block, dict) and rule_block.get("enabled") is False:
        rule_block["enabled"] = True

    if apply_default_exclusions:
        excluded = merge_exclusions(_string_list(overlay.get(EXCLUDED_KEY)))
        if workspace is not None:
            # The overlay lives outside the workspace, so relative entries
            # would resolve against the scratch directory.
            excluded = [e if Path(e).is_absolute() else str(Path(workspace) / e) for e in excluded]
        overlay[EXCLUDED_KEY] = excluded

    return overlay


def is_rule_enabled(overlay: dict[str, Any], rule_id: str, is_optin: bool = False) -> bool:
    """Whether ``overlay`` leaves ``rule_id`` switched on."""
    if rule_id in _string_list(overlay.get(DISABLED_RULES_KEY)):
        return False
    if ONLY_RULES_KEY in overlay and rule_id not in _string_list(overlay[ONLY_RULES_KEY]):
        return False
    if is_optin and rule_id not in _string_list(overlay.get(OPT_IN_RULES_KEY)):
        return False
    rule_block = overlay.get(rule_id)
    if isinstance(rule_block, dict) and rule_block.get("enabled") is False:
        return False
    return True


def dump_overlay(overlay: dict[str, Any]) -> str:
    return yaml.safe_dump(overlay, sort_keys=False, default_flow_style=False, allow_unicode=True)
