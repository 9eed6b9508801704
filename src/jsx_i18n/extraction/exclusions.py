"""
User-managed exclusion rules.

Rules are stored as a JSON array of ``{"pattern": ..., "reason": ...}``
objects. A pattern wrapped in slashes (``/^[A-Z]{2,}$/``) is a regular
expression tested with search semantics; anything else must equal the
candidate text exactly.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from ..utils.core.exceptions import ValidationError
from ..utils.core.file_utils import atomic_write_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExclusionRule:
    """A single literal or regex exclusion rule."""

    pattern: str
    reason: str | None = None

    @property
    def is_regex(self) -> bool:
        """Whether the pattern is a ``/.../`` regular expression."""
        return len(self.pattern) >= 2 and self.pattern.startswith("/") and self.pattern.endswith("/")

    @property
    def expression(self) -> str:
        """The regular expression between the slashes."""
        return self.pattern[1:-1]

    def to_dict(self) -> dict[str, str]:
        data = {"pattern": self.pattern}
        if self.reason:
            data["reason"] = self.reason
        return data

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> ExclusionRule:
        pattern = data.get("pattern")
        if not isinstance(pattern, str):
            raise ValueError(f"Exclusion rule without a string pattern: {data!r}")
        reason = data.get("reason")
        return cls(pattern=pattern, reason=reason if isinstance(reason, str) else None)


@dataclass
class _CompiledRule:
    rule: ExclusionRule
    regex: re.Pattern[str] | None = field(default=None)

    def matches(self, text: str) -> bool:
        if self.rule.is_regex:
            return self.regex is not None and self.regex.search(text) is not None
        return text == self.rule.pattern


class ExclusionPolicy:
    """
    Decides whether a piece of text should be left untranslated.

    Rules are read once when the policy is created; ``should_exclude`` only
    consults the in-memory list. ``add_rule`` and ``remove_rule`` write the
    complete list back before returning.
    """

    def __init__(self, rules_file: Path | None = None) -> None:
        """
        Initialize the policy.

        Args:
            rules_file: JSON file holding the rules; ``None`` keeps the rules
                in memory only
        """
        self.rules_file: Path | None = rules_file
        self._rules: list[_CompiledRule] = []
        self._load_rules()

    def _load_rules(self) -> None:
        if self.rules_file is None or not self.rules_file.exists():
            return

        try:
            with self.rules_file.open("r", encoding="utf-8") as f:
                data: object = json.load(f)  # pyright: ignore[reportAny]
            if not isinstance(data, list):
                raise ValueError("expected a JSON array of rules")
            rules = [ExclusionRule.from_dict(item) for item in data if isinstance(item, dict)]  # pyright: ignore[reportUnknownArgumentType, reportUnknownVariableType]
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable exclusion rules in {self.rules_file}: {e}")
            return

        self._rules = [self._compile(rule, strict=False) for rule in rules]
        logger.debug(f"Loaded {len(self._rules)} exclusion rule(s) from {self.rules_file}")

    @staticmethod
    def _compile(rule: ExclusionRule, strict: bool) -> _CompiledRule:
        if not rule.is_regex:
            return _CompiledRule(rule)
        try:
            return _CompiledRule(rule, re.compile(rule.expression))
        except re.error as e:
            if strict:
                raise ValidationError(
                    f"Invalid regular expression {rule.pattern}: {e}",
                    context={"pattern": rule.pattern},
                ) from e
            logger.warning(f"Exclusion rule {rule.pattern} is not a valid regex and never matches: {e}")
            return _CompiledRule(rule)

    def should_exclude(self, text: str, context: dict[str, object] | None = None) -> bool:
        """
        Check the text against every rule.

        Args:
            text: Candidate text, already trimmed by the caller
            context: Optional ``{"file": ..., "line": ...}`` used for logging

        Returns:
            True if any rule matches
        """
        for compiled in self._rules:
            if compiled.matches(text):
                if context:
                    logger.debug(
                        f"Excluded {text!r} at {context.get('file')}:{context.get('line')} "
                        f"by rule {compiled.rule.pattern}"
                    )
                return True
        return False

    def add_rule(self, pattern: str, reason: str | None = None) -> ExclusionRule:
        """
        Add a rule and persist the rule list.

        Adding a pattern that already exists updates its reason.

        Raises:
            ValidationError: If the pattern is empty or an invalid regex
        """
        if not pattern:
            raise ValidationError("Exclusion pattern must not be empty")

        rule = ExclusionRule(pattern=pattern, reason=reason)
        compiled = self._compile(rule, strict=True)

        updated = list(self._rules)
        for index, existing in enumerate(updated):
            if existing.rule.pattern == pattern:
                updated[index] = compiled
                break
        else:
            updated.append(compiled)

        # The in-memory rules only change once the file has been written
        self._save_rules(updated)
        self._rules = updated
        return rule

    def remove_rule(self, pattern: str) -> bool:
        """
        Remove every rule with the given pattern and persist the rule list.

        Returns:
            True if a rule was removed
        """
        remaining = [compiled for compiled in self._rules if compiled.rule.pattern != pattern]
        removed = len(remaining) != len(self._rules)
        self._save_rules(remaining)
        self._rules = remaining
        return removed

    def list_rules(self) -> list[ExclusionRule]:
        """Return the rules in insertion order."""
        return [compiled.rule for compiled in self._rules]

    def _save_rules(self, rules: list[_CompiledRule]) -> None:
        if self.rules_file is None:
            return
        self.rules_file.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_json(self.rules_file, [compiled.rule.to_dict() for compiled in rules])
        logger.debug(f"Saved {len(rules)} exclusion rule(s) to {self.rules_file}")
