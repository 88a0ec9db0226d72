"""Diagnosis rule configuration models.

Custom rules extend (or replace) the built-in log signatures used to explain
why a service failed to start.
"""

import re
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from demorun.supervisor import DEFAULT_RULES, DiagnosisRule


class DiagnosisRuleSettings(BaseModel):
    """A user-defined diagnosis rule.

    Attributes:
        name: Rule identifier shown in logs.
        patterns: Case-sensitive regular expressions; any match triggers the rule.
        message: Advice printed when the rule matches.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    patterns: tuple[str, ...] = Field(min_length=1)
    message: str = Field(min_length=1)

    @field_validator("patterns")
    @classmethod
    def _check_patterns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in value:
            try:
                _ = re.compile(pattern)
            except re.error as e:
                msg = f"invalid regular expression {pattern!r}: {e}"
                raise ValueError(msg) from e
        return value

    def to_rule(self) -> DiagnosisRule:
        """Compile the settings into a DiagnosisRule."""
        return DiagnosisRule.from_patterns(self.name, self.patterns, self.message)


class DiagnosisSettings(BaseModel):
    """Diagnosis configuration section.

    Attributes:
        include_defaults: Whether the built-in rules are applied.
        rules: Additional rules, applied after the built-in ones.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    include_defaults: bool = True
    rules: tuple[DiagnosisRuleSettings, ...] = ()

    def build_rules(self) -> tuple[DiagnosisRule, ...]:
        """Return the effective rule set."""
        custom = tuple(rule.to_rule() for rule in self.rules)
        if self.include_defaults:
            return DEFAULT_RULES + custom
        return custom
