from __future__ import annotations

import re
from collections.abc import Iterable

from testignore.models.context import Context
from testignore.models.rules import ALWAYS, Condition, Rule

_TAG_RE = re.compile(r"[A-Za-z0-9_.-]+")


def is_valid_tag(tag: str) -> bool:
    return _TAG_RE.fullmatch(tag) is not None


def parse_condition(token: str) -> Condition:
    """Split ``a+b+c`` into a condition.

    Raises ``ValueError`` naming the first tag that is empty or contains
    characters outside ``[A-Za-z0-9_.-]``.
    """
    tags: set[str] = set()
    for raw in token.split("+"):
        tag = raw.strip()
        if not tag:
            raise ValueError(f"empty tag in condition {token!r}")
        if not is_valid_tag(tag):
            raise ValueError(f"invalid tag {tag!r} in condition {token!r}")
        tags.add(tag)
    return Condition(frozenset(tags)) if tags else ALWAYS


def condition_matches(condition: Condition, context: Context) -> bool:
    """Every tag of *condition* is active in *context*; an empty condition always holds."""
    return condition.tags <= context.tags


def unknown_tags(rules: Iterable[Rule], vocabulary: Iterable[str]) -> set[str]:
    """Tags used by *rules* that are not in *vocabulary*.

    Unknown tags are legal and simply never match, so a typo such as
    ``singelpass`` silently disables its rule. This is the lint for that.
    """
    known = set(vocabulary)
    found: set[str] = set()
    for rule in rules:
        found.update(rule.condition.tags - known)
    return found
