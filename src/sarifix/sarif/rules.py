"""Rule id to description/recommendation lookup for one SARIF run."""

from __future__ import annotations

from typing import Any

from sarifix.core.models import DEFAULT_DESCRIPTION, DEFAULT_RECOMMENDATION, RuleInfo


class RuleCatalog:
    """In-memory rule table built once per analysis run.

    Rules from the first tool extension are authoritative. Driver rules
    fill in ids the extension does not define.
    """

    def __init__(self, rules: dict[str, RuleInfo] | None = None):
        self._rules = dict(rules or {})

    @classmethod
    def from_run(cls, run: dict[str, Any]) -> RuleCatalog:
        tool = run.get("tool") or {}
        extensions = tool.get("extensions") or []
        driver = tool.get("driver") or {}

        rules: dict[str, RuleInfo] = {}
        sources = []
        if extensions and isinstance(extensions[0], dict):
            sources.append(extensions[0].get("rules") or [])
        sources.append(driver.get("rules") or [])

        for source in sources:
            for rule in source:
                if not isinstance(rule, dict) or "id" not in rule:
                    continue
                rules.setdefault(rule["id"], _rule_info(rule))
        return cls(rules)

    def resolve(self, rule_id: str | None) -> RuleInfo:
        """Never fails; unknown ids get the default placeholder text."""
        if rule_id is None:
            return RuleInfo()
        return self._rules.get(rule_id, RuleInfo())

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def items(self):
        return sorted(self._rules.items())


def _text(rule: dict[str, Any], key: str) -> str:
    value = rule.get(key)
    if isinstance(value, dict):
        text = value.get("text")
        if isinstance(text, str) and text:
            return text
    return ""


def _rule_info(rule: dict[str, Any]) -> RuleInfo:
    return RuleInfo(
        description=_text(rule, "fullDescription") or DEFAULT_DESCRIPTION,
        recommendation=_text(rule, "help") or DEFAULT_RECOMMENDATION,
    )
