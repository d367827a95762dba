"""Declarative test exclusions for multi-backend test suites.

Typical use from a harness::

    index = load_path("tests/ignores.txt").unwrap()
    ctx = make_context(backend="cranelift", arch="aarch64", os="macos")
    if is_excluded(index, ctx, "traps::test_trap_trace"):
        ...
"""

from __future__ import annotations

from testignore.models.context import Context, make_context, with_aliases
from testignore.models.errors import IoError, LoadError, ParseError
from testignore.models.rules import Condition, Pattern, Rule
from testignore.services.conditions import condition_matches
from testignore.services.index import (
    ExclusionIndex,
    build_index,
    is_excluded,
    load,
    load_path,
    matching_rules,
    partition,
)
from testignore.services.parser import parse_manifest
from testignore.services.patterns import pattern_matches

__all__ = [
    "Condition",
    "Context",
    "ExclusionIndex",
    "IoError",
    "LoadError",
    "ParseError",
    "Pattern",
    "Rule",
    "build_index",
    "condition_matches",
    "is_excluded",
    "load",
    "load_path",
    "make_context",
    "matching_rules",
    "parse_manifest",
    "partition",
    "pattern_matches",
    "with_aliases",
]
