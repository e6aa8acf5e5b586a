"""
Snippet location component.

Finds the unique position of a target snippet in a sequence of source lines,
using the lines expected immediately before and after it to tell repeated
snippets apart. Every candidate position is scanned so that ambiguity is
detected rather than silently resolved to the first hit.
"""

import logging
from typing import Callable, List, Optional, Sequence

from snippet_rewriter.core.context_replacer.errors import (
    AmbiguousMatchError,
    InvalidInputError,
    SnippetNotFoundError,
)
from snippet_rewriter.core.context_replacer.line_utils import (
    is_blank_snippet,
    line_matches,
    lines_match,
    normalize_context,
    normalize_snippet,
    preview,
)
from snippet_rewriter.core.context_replacer.models import (
    LocatorEvent,
    LocatorEventType,
    MatchLocation,
)

logger = logging.getLogger(__name__)

LocatorObserver = Callable[[LocatorEvent], None]


class SnippetLocator:
    """
    Locates a snippet in the original lines with context verification.

    The locator holds no state between calls apart from the optional observer,
    so a single instance can serve any number of requests.
    """

    def __init__(self, observer: Optional[LocatorObserver] = None):
        """
        Initialize the locator.

        Args:
            observer: Optional callback receiving a LocatorEvent whenever a
                candidate is rejected, a match is found, or the search ends
                ambiguous / empty. It cannot influence the result.
        """
        self.observer = observer

    def locate(
        self,
        source_lines: Sequence[str],
        target_snippet: str,
        context_before: Optional[Sequence[str]] = None,
        context_after: Optional[Sequence[str]] = None,
        request_index: Optional[int] = None,
    ) -> MatchLocation:
        """
        Find the start and end line index of a snippet within source lines.

        Args:
            source_lines: The lines of the original text to search within
            target_snippet: The snippet to find (trimmed, then split into lines)
            context_before: Lines expected immediately before the snippet
            context_after: Lines expected immediately after the snippet
            request_index: Position of the originating request, for diagnostics

        Returns:
            MatchLocation with the half-open range of the unique match

        Raises:
            InvalidInputError: If the snippet contains only blank lines
            SnippetNotFoundError: If no position satisfies snippet and context
            AmbiguousMatchError: If more than one position satisfies them
        """
        snippet_lines = normalize_snippet(target_snippet)
        before_lines = normalize_context(context_before or [])
        after_lines = normalize_context(context_after or [])

        if is_blank_snippet(target_snippet):
            raise InvalidInputError(f"Replacement snippet at index {request_index} is empty.")

        logger.debug(
            "Searching for snippet (index %s): before=%s, snippet=%r, after=%s",
            request_index, before_lines or "[None]", preview(target_snippet), after_lines or "[None]",
        )

        found: List[MatchLocation] = []
        snippet_len = len(snippet_lines)

        for i in range(len(source_lines) - snippet_len + 1):
            if not self._core_matches(source_lines, snippet_lines, i):
                continue

            logger.debug("Core snippet potentially matches at line %d. Checking context...", i)

            rejection = self._check_context_before(source_lines, before_lines, i)
            if rejection is None:
                rejection = self._check_context_after(source_lines, after_lines, i + snippet_len)
            if rejection is not None:
                logger.debug("Context mismatch at line %d: %s", i, rejection)
                self._emit(LocatorEvent(
                    event_type=LocatorEventType.CANDIDATE_REJECTED,
                    request_index=request_index,
                    start_index=i,
                    detail=rejection,
                ))
                continue

            logger.info("Match found for snippet index %s at original line index %d", request_index, i)
            self._emit(LocatorEvent(
                event_type=LocatorEventType.MATCH_FOUND,
                request_index=request_index,
                start_index=i,
            ))
            found.append(MatchLocation(start_index=i, end_index=i + snippet_len))

        if not found:
            logger.error("Could not find snippet index %s with specified context", request_index)
            self._emit(LocatorEvent(
                event_type=LocatorEventType.NOT_FOUND,
                request_index=request_index,
                detail=preview(target_snippet),
            ))
            raise SnippetNotFoundError(request_index, target_snippet, before_lines, after_lines)

        if len(found) > 1:
            positions = [match.start_index for match in found]
            logger.error(
                "Found multiple ambiguous matches for snippet index %s at lines: %s",
                request_index, ", ".join(str(p) for p in positions),
            )
            self._emit(LocatorEvent(
                event_type=LocatorEventType.AMBIGUITY_DETECTED,
                request_index=request_index,
                positions=positions,
            ))
            raise AmbiguousMatchError(request_index, target_snippet, positions, before_lines, after_lines)

        return found[0]

    def _core_matches(self, source_lines: Sequence[str], snippet_lines: List[str], start: int) -> bool:
        # Stop at the first mismatching line
        for offset, expected in enumerate(snippet_lines):
            if not line_matches(source_lines[start + offset], expected):
                return False
        return True

    def _check_context_before(self, source_lines: Sequence[str], before_lines: List[str], start: int) -> Optional[str]:
        """Return a rejection reason, or None if the preceding lines are acceptable."""
        if not before_lines:
            return None
        expected_count = len(before_lines)
        if start < expected_count:
            return (
                f"not enough preceding lines available "
                f"(expected {expected_count}, available {start})"
            )
        actual = source_lines[start - expected_count:start]
        if not lines_match(actual, before_lines):
            return f"context before mismatch: expected {before_lines}, actual {[line.strip() for line in actual]}"
        return None

    def _check_context_after(self, source_lines: Sequence[str], after_lines: List[str], snippet_end: int) -> Optional[str]:
        """Return a rejection reason, or None if the following lines are acceptable."""
        if not after_lines:
            return None
        expected_count = len(after_lines)
        if snippet_end + expected_count > len(source_lines):
            return (
                f"not enough succeeding lines available "
                f"(expected {expected_count}, available {len(source_lines) - snippet_end})"
            )
        actual = source_lines[snippet_end:snippet_end + expected_count]
        if not lines_match(actual, after_lines):
            return f"context after mismatch: expected {after_lines}, actual {[line.strip() for line in actual]}"
        return None

    def _emit(self, event: LocatorEvent) -> None:
        if self.observer is None:
            return
        try:
            self.observer(event)
        except Exception:
            # Observers are diagnostic only; a failing one must not change the outcome
            logger.exception("Locator observer failed on %s event", event.event_type.value)


def find_snippet_location(
    source_lines: Sequence[str],
    target_snippet: str,
    context_before: Optional[Sequence[str]] = None,
    context_after: Optional[Sequence[str]] = None,
    request_index: Optional[int] = None,
) -> MatchLocation:
    """Locate a snippet with a default (observer-less) locator."""
    return SnippetLocator().locate(source_lines, target_snippet, context_before, context_after, request_index)
