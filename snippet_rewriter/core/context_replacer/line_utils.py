"""
Line helpers shared by the locator and the applier.

All line comparisons in the replacer go through ``lines_match``: each line is
trimmed of leading/trailing whitespace and then compared exactly. Internal
whitespace and case stay significant.

Texts are always split on LF. A CRLF line keeps its trailing "\\r", which the
trim-match ignores and which rejoining on LF puts back, so texts with mixed
line endings round-trip unchanged.
"""

from typing import List, Sequence

from snippet_rewriter.core.context_replacer.config import PREVIEW_CHARS

CRLF = "\r\n"
LF = "\n"
CR = "\r"


def detect_newline(text: str) -> str:
    """Return the dominant line-break convention of ``text`` (CRLF or LF)."""
    crlf_count = text.count(CRLF)
    return CRLF if crlf_count and crlf_count >= text.count(LF) - crlf_count else LF


def split_lines(text: str) -> List[str]:
    """Split ``text`` on LF, keeping any "\\r". An empty text is a single empty line."""
    return text.split(LF)


def split_replacement(text: str) -> List[str]:
    """
    Split replacement text into bare lines.

    CRLF is folded to LF first; line endings are restored by
    ``adapt_line_endings``. An empty replacement yields no lines at all,
    which makes the edit a pure deletion.
    """
    if text == "":
        return []
    return text.replace(CRLF, LF).split(LF)


def adapt_line_endings(
    replacement_lines: Sequence[str],
    span_last_line: str,
    at_end_of_text: bool,
    newline: str,
) -> List[str]:
    """
    Give replacement lines the line endings of the span they replace.

    The last replacement line takes the ending of the last replaced line. The
    lines before it take that same ending, or the text's dominant convention
    when the span closes the text and has no line break of its own.
    """
    if not replacement_lines:
        return []
    last_ending = CR if span_last_line.endswith(CR) else ""
    if at_end_of_text:
        inner_ending = CR if newline == CRLF else ""
    else:
        inner_ending = last_ending
    adapted = [line + inner_ending for line in replacement_lines[:-1]]
    adapted.append(replacement_lines[-1] + last_ending)
    return adapted


def join_lines(lines: Sequence[str]) -> str:
    return LF.join(lines)


def normalize_snippet(snippet: str) -> List[str]:
    """Trim the snippet as a whole, then split it into lines."""
    return snippet.strip().replace(CRLF, LF).split(LF)


def normalize_context(context: Sequence[str]) -> List[str]:
    return [line.strip() for line in context]


def is_blank_snippet(snippet: str) -> bool:
    return all(line.strip() == "" for line in normalize_snippet(snippet))


def line_matches(actual: str, expected: str) -> bool:
    return actual.strip() == expected.strip()


def lines_match(actual_lines: Sequence[str], expected_lines: Sequence[str]) -> bool:
    """
    Compare two line sequences with trim-then-exact equality.

    Sequences of different length never match.
    """
    if len(actual_lines) != len(expected_lines):
        return False
    for actual, expected in zip(actual_lines, expected_lines):
        if not line_matches(actual, expected):
            return False
    return True


def preview(text: str, max_len: int = PREVIEW_CHARS) -> str:
    """Shorten ``text`` for log output."""
    if not text:
        return ""
    return text if len(text) <= max_len else text[: max_len - 3] + "..."
