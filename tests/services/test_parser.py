from __future__ import annotations

from result import Err, Ok

from testignore.models.errors import ParseError
from testignore.models.rules import Condition, Pattern
from testignore.services.parser import parse_line, parse_manifest


def _rules(text: str):
    result = parse_manifest(text)
    assert isinstance(result, Ok)
    return result.unwrap()


# ── skipped lines ───────────────────────────────────────────────────


def test_blank_and_comment_lines_produce_nothing() -> None:
    assert _rules("\n   \n# heading\n    # indented comment\n\t\n") == ()


def test_parse_line_comment_returns_none() -> None:
    assert parse_line("  # just a note", 3) == Ok(None)


# ── rule shapes ─────────────────────────────────────────────────────


def test_single_token_is_unconditional_pattern() -> None:
    (rule,) = _rules("wasitests::snapshot1::host_fs::writing")
    assert rule.condition.is_empty
    assert rule.pattern == Pattern("wasitests::snapshot1::host_fs::writing")
    assert rule.comment is None
    assert rule.line_no == 1


def test_two_tokens_are_condition_and_pattern() -> None:
    (rule,) = _rules("singlepass+aarch64+macos traps::test_trap_trace")
    assert rule.condition == Condition(frozenset({"singlepass", "aarch64", "macos"}))
    assert rule.pattern.value == "traps::test_trap_trace"


def test_condition_tag_order_is_irrelevant() -> None:
    a, b = _rules("llvm+windows x\nwindows+llvm x")
    assert a.condition == b.condition


def test_duplicate_tags_collapse() -> None:
    (rule,) = _rules("llvm+llvm x")
    assert rule.condition.tags == frozenset({"llvm"})


def test_line_numbers_count_skipped_lines() -> None:
    rules = _rules("# c\n\nfoo\n\nbar")
    assert [r.line_no for r in rules] == [3, 5]


# ── trailing comments ───────────────────────────────────────────────


def test_trailing_comment_is_stripped_and_kept() -> None:
    (rule,) = _rules("windows wasitests::host_fs   # no host fs on windows")
    assert rule.pattern.value == "wasitests::host_fs"
    assert rule.comment == "no host fs on windows"


def test_empty_trailing_comment_is_none() -> None:
    (rule,) = _rules("llvm foo #")
    assert rule.comment is None


def test_marker_without_preceding_whitespace_is_part_of_pattern() -> None:
    (rule,) = _rules("foo#bar")
    assert rule.pattern.value == "foo#bar"
    assert rule.comment is None


def test_custom_comment_marker() -> None:
    result = parse_manifest("; header\nllvm foo ; flaky", comment_marker=";")
    (rule,) = result.unwrap()
    assert rule.pattern.value == "foo"
    assert rule.comment == "flaky"


def test_comment_text_can_contain_extra_tokens() -> None:
    (rule,) = _rules("llvm foo # see issue 1234 for details")
    assert rule.comment == "see issue 1234 for details"


# ── errors ──────────────────────────────────────────────────────────


def test_too_many_tokens_is_error_with_line() -> None:
    result = parse_manifest("foo\na+b+ pattern extra token\nbar")
    assert isinstance(result, Err)
    error = result.unwrap_err()
    assert isinstance(error, ParseError)
    assert error.line_no == 2
    assert error.line == "a+b+ pattern extra token"
    assert "4 tokens" in error.message


def test_empty_tag_is_error() -> None:
    result = parse_manifest("a+b+ pattern")
    assert isinstance(result, Err)
    assert "empty tag" in result.unwrap_err().message


def test_invalid_tag_characters_is_error() -> None:
    result = parse_manifest("llvm+mac/os foo")
    assert isinstance(result, Err)
    error = result.unwrap_err()
    assert "mac/os" in error.message
    assert str(error).startswith("line 1:")


def test_first_error_aborts_whole_manifest() -> None:
    result = parse_manifest("ok::one\nbad tag! here\nok::two\nx y z")
    assert isinstance(result, Err)
    assert result.unwrap_err().line_no == 2


# ── line breaks ─────────────────────────────────────────────────────


def test_form_feed_does_not_start_a_new_line() -> None:
    result = parse_manifest("ok\fnext\nx y z\n")
    assert isinstance(result, Err)
    assert result.unwrap_err().line_no == 2


def test_unicode_line_separator_is_not_a_line_break() -> None:
    rules = _rules("a\nllvm\u2028x\nb")
    assert [r.line_no for r in rules] == [1, 2, 3]
    assert rules[1].pattern.value == "x"


def test_crlf_and_cr_line_endings() -> None:
    rules = _rules("a\r\nb\rc\n")
    assert [(r.pattern.value, r.line_no) for r in rules] == [("a", 1), ("b", 2), ("c", 3)]
