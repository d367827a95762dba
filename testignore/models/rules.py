from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = "::"


@dataclass(slots=True, frozen=True)
class Condition:
    """Conjunction of tags. No tags means the rule applies everywhere."""

    tags: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.tags

    def __str__(self) -> str:
        return "+".join(sorted(self.tags))


ALWAYS = Condition()


@dataclass(slots=True, frozen=True)
class Pattern:
    value: str

    @property
    def is_subtree(self) -> bool:
        return self.value.endswith(SEPARATOR)

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, frozen=True)
class Rule:
    condition: Condition
    pattern: Pattern
    comment: str | None = None
    # Source position, for diagnostics only.
    line_no: int = 0

    def __str__(self) -> str:
        if self.condition.is_empty:
            return self.pattern.value
        return f"{self.condition} {self.pattern.value}"
