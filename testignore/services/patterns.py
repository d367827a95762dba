from __future__ import annotations

from testignore.models.rules import SEPARATOR, Pattern


def pattern_matches(pattern: Pattern, test_id: str) -> bool:
    """Exact identifier or ``::``-bounded subtree match.

    ``mod::sub`` covers ``mod::sub`` and ``mod::sub::x`` but not
    ``mod::subother``. A pattern already ending in ``::`` is a pure prefix.
    """
    value = pattern.value
    if test_id == value:
        return True
    if not test_id.startswith(value):
        return False
    if pattern.is_subtree:
        return True
    return test_id.startswith(SEPARATOR, len(value))


def bucket_key(identifier: str) -> str:
    """First ``::``-delimited segment.

    Any test id matched by a pattern shares the pattern's first segment, so
    rules can be bucketed by it without changing results.
    """
    idx = identifier.find(SEPARATOR)
    return identifier if idx == -1 else identifier[:idx]
