from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from result import Err, Ok, Result

from testignore.models.context import Context
from testignore.models.errors import IoError, LoadResult, ParseError
from testignore.models.rules import SEPARATOR, Rule
from testignore.services.conditions import condition_matches
from testignore.services.fs import DEFAULT_FS, FileSystem
from testignore.services.parser import DEFAULT_COMMENT_MARKER, parse_manifest, split_lines
from testignore.services.patterns import bucket_key, pattern_matches

logger = logging.getLogger(__name__)

_EMPTY: tuple[Rule, ...] = ()


@dataclass(slots=True, frozen=True, eq=False)
class ExclusionIndex:
    """Read-only rule collection, built once per suite run.

    Safe to share across threads: nothing is mutated after ``build_index``.
    """

    rules: tuple[Rule, ...] = ()
    # bucket_key(pattern) -> rules, source order preserved within a bucket
    buckets: Mapping[str, tuple[Rule, ...]] = field(default_factory=lambda: MappingProxyType({}))
    # Patterns whose first segment is ambiguous (e.g. ``a:`` matching ``a:::b``)
    # are scanned for every query.
    unbucketed: tuple[Rule, ...] = ()

    def __len__(self) -> int:
        return len(self.rules)


def _bucketable(value: str) -> bool:
    return SEPARATOR in value or not value.endswith(":")


def build_index(rules: Iterable[Rule]) -> ExclusionIndex:
    all_rules = tuple(rules)
    grouped: dict[str, list[Rule]] = {}
    loose: list[Rule] = []
    for rule in all_rules:
        value = rule.pattern.value
        if _bucketable(value):
            grouped.setdefault(bucket_key(value), []).append(rule)
        else:
            loose.append(rule)

    index = ExclusionIndex(
        rules=all_rules,
        buckets=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
        unbucketed=tuple(loose),
    )
    logger.debug("Built exclusion index: %d rules in %d buckets", len(all_rules), len(grouped))
    return index


def _candidates(index: ExclusionIndex, test_id: str) -> tuple[Rule, ...]:
    bucket = index.buckets.get(bucket_key(test_id), _EMPTY)
    if not index.unbucketed:
        return bucket
    return bucket + index.unbucketed


def is_excluded(index: ExclusionIndex, context: Context, test_id: str) -> bool:
    """True if any rule applies to *context* and covers *test_id*."""
    for rule in _candidates(index, test_id):
        if condition_matches(rule.condition, context) and pattern_matches(rule.pattern, test_id):
            return True
    return False


def matching_rules(index: ExclusionIndex, context: Context, test_id: str) -> list[Rule]:
    """Every rule excluding *test_id* under *context*, in source order."""
    hits = [
        rule
        for rule in _candidates(index, test_id)
        if condition_matches(rule.condition, context) and pattern_matches(rule.pattern, test_id)
    ]
    hits.sort(key=lambda r: r.line_no)
    return hits


def rules_for_context(index: ExclusionIndex, context: Context) -> list[Rule]:
    return [rule for rule in index.rules if condition_matches(rule.condition, context)]


def partition(
    index: ExclusionIndex,
    context: Context,
    test_ids: Iterable[str],
) -> tuple[list[str], list[str]]:
    """Split *test_ids* into ``(kept, excluded)``, preserving input order."""
    kept: list[str] = []
    excluded: list[str] = []
    for test_id in test_ids:
        (excluded if is_excluded(index, context, test_id) else kept).append(test_id)
    return kept, excluded


def load(
    manifest_text: str,
    comment_marker: str = DEFAULT_COMMENT_MARKER,
) -> Result[ExclusionIndex, ParseError]:
    parsed = parse_manifest(manifest_text, comment_marker)
    if isinstance(parsed, Err):
        logger.warning("Invalid exclusion manifest: %s", parsed.unwrap_err())
        return parsed
    return Ok(build_index(parsed.unwrap()))


def _decode_error(data: bytes, exc: UnicodeDecodeError) -> ParseError:
    # Everything before exc.start decoded cleanly.
    line_no = len(split_lines(data[: exc.start].decode("utf-8")))
    raw = split_lines(data.decode("utf-8", errors="replace"))[line_no - 1]
    return ParseError(line_no=line_no, line=raw, message=f"invalid UTF-8 ({exc.reason})")


def load_path(
    path: str,
    fs: FileSystem = DEFAULT_FS,
    comment_marker: str = DEFAULT_COMMENT_MARKER,
) -> LoadResult:
    """Read the manifest at *path* once and build an index from it."""
    try:
        data = fs.read_bytes(path)
    except OSError as exc:
        logger.warning("Cannot read exclusion manifest %s: %s", path, exc)
        return Err(IoError(path=path, message=exc.strerror or str(exc)))

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        error = _decode_error(data, exc)
        logger.warning("Invalid exclusion manifest %s: %s", path, error)
        return Err(error)

    return load(text, comment_marker)
