from __future__ import annotations

import re
from functools import lru_cache

from result import Err, Ok, Result

from testignore.models.errors import ParseError
from testignore.models.rules import ALWAYS, Pattern, Rule
from testignore.services.conditions import parse_condition

DEFAULT_COMMENT_MARKER = "#"

# str.splitlines would also break on \f, \v and U+2028, skewing line numbers.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    return _LINE_BREAK_RE.split(text)


@lru_cache(maxsize=8)
def _trailing_comment_re(marker: str) -> re.Pattern[str]:
    # Marker only starts a trailing comment when preceded by whitespace.
    return re.compile(rf"\s{re.escape(marker)}")


def parse_line(
    raw: str,
    line_no: int,
    comment_marker: str = DEFAULT_COMMENT_MARKER,
) -> Result[Rule | None, ParseError]:
    """Parse one manifest line.

    Returns ``Ok(None)`` for blank and comment-only lines.
    """
    stripped = raw.strip()
    if not stripped or stripped.startswith(comment_marker):
        return Ok(None)

    body = raw
    comment: str | None = None
    m = _trailing_comment_re(comment_marker).search(raw)
    if m is not None:
        body = raw[: m.start()]
        comment = raw[m.end() :].strip() or None

    tokens = body.split()
    if len(tokens) == 1:
        return Ok(Rule(condition=ALWAYS, pattern=Pattern(tokens[0]), comment=comment, line_no=line_no))
    if len(tokens) != 2:
        return Err(
            ParseError(
                line_no=line_no,
                line=raw,
                message=f"expected '[condition] pattern', found {len(tokens)} tokens",
            )
        )

    try:
        condition = parse_condition(tokens[0])
    except ValueError as exc:
        return Err(ParseError(line_no=line_no, line=raw, message=str(exc)))
    return Ok(Rule(condition=condition, pattern=Pattern(tokens[1]), comment=comment, line_no=line_no))


def parse_manifest(
    text: str,
    comment_marker: str = DEFAULT_COMMENT_MARKER,
) -> Result[tuple[Rule, ...], ParseError]:
    """Parse a whole manifest, stopping at the first malformed line."""
    rules: list[Rule] = []
    for line_no, raw in enumerate(split_lines(text), start=1):
        parsed = parse_line(raw, line_no, comment_marker)
        if isinstance(parsed, Err):
            return parsed
        rule = parsed.unwrap()
        if rule is not None:
            rules.append(rule)
    return Ok(tuple(rules))
