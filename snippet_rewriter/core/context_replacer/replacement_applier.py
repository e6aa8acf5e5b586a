"""
Replacement application component.

Applies a batch of context-anchored snippet replacements to a text in two
passes:

1. Planning - every well-formed request is located against the ORIGINAL,
   unmodified lines. Malformed requests are skipped and reported; a request
   that cannot be resolved to exactly one location fails the whole batch.
2. Mutation - planned edits are spliced into an owned working copy from the
   highest start index to the lowest. Since all locations refer to the
   original lines, splicing bottom-up never shifts an edit still waiting to
   be applied.

The result is all-or-nothing: either every planned edit is applied or the
call raises and no text is produced.
"""

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional, Tuple

from snippet_rewriter.core.context_replacer.errors import (
    InvalidInputError,
    OverlappingEditsError,
    SnippetLocationError,
)
from snippet_rewriter.core.context_replacer.line_utils import (
    adapt_line_endings,
    detect_newline,
    is_blank_snippet,
    join_lines,
    split_lines,
    split_replacement,
)
from snippet_rewriter.core.context_replacer.models import (
    PlannedEdit,
    ReplacementRequest,
    RewriteResult,
    SkippedRequest,
)
from snippet_rewriter.core.context_replacer.snippet_locator import LocatorObserver, SnippetLocator

logger = logging.getLogger(__name__)


class ReplacementApplier:
    """
    Applies multiple snippet replacements to a text, using context for accuracy.

    Handles:
    - Requests given as ReplacementRequest objects or plain mappings
    - Skipping (and reporting) malformed requests without failing the batch
    - Fail-fast on snippets that are missing or ambiguous
    - Rejection of edits whose original ranges overlap
    - Replacements that shrink, grow or delete the target span
    """

    def __init__(self, locator: Optional[SnippetLocator] = None, observer: Optional[LocatorObserver] = None):
        """
        Initialize the applier.

        Args:
            locator: Locator instance to use (a new one is created if None)
            observer: Observer for the created locator; ignored when a locator is given
        """
        self.locator = locator or SnippetLocator(observer=observer)

    def apply(self, original: str, replacements: Sequence[Any]) -> str:
        """
        Replace multiple snippets within ``original``.

        Args:
            original: The original text
            replacements: Ordered ReplacementRequest objects or mappings

        Returns:
            The text with all replacements applied

        Raises:
            InvalidInputError: If original is not a string or replacements is not a sequence
            SnippetNotFoundError: If a snippet with its context is not found
            AmbiguousMatchError: If a snippet with its context matches several locations
            OverlappingEditsError: If two located snippets overlap
        """
        return self.rewrite(original, replacements).text

    def rewrite(self, original: str, replacements: Sequence[Any]) -> RewriteResult:
        """Same as apply(), but returns a RewriteResult with the plan and skipped requests."""
        start_time = time.time()
        self._validate_inputs(original, replacements)
        logger.info("Attempting to replace %d snippets with context", len(replacements))

        original_lines = split_lines(original)

        planned, skipped = self.plan(original_lines, replacements)
        ordered = self.validate_plan(planned)

        logger.info("Found %d valid locations. Applying replacements in reverse order...", len(ordered))
        final_lines = self._apply_edits(original_lines, ordered)
        logger.info("Successfully applied %d replacements", len(ordered))

        return RewriteResult(
            text=join_lines(final_lines),
            applied_edits=ordered,
            skipped_requests=skipped,
            original_line_count=len(original_lines),
            final_line_count=len(final_lines),
            processing_time_ms=int((time.time() - start_time) * 1000),
        )

    def plan(self, original_lines: Sequence[str], replacements: Sequence[Any]) -> Tuple[List[PlannedEdit], List[SkippedRequest]]:
        """
        Locate every well-formed request against the original lines.

        Args:
            original_lines: The unmodified lines of the original text
            replacements: Ordered ReplacementRequest objects or mappings

        Returns:
            Tuple of (planned edits in input order, skipped malformed requests)

        Raises:
            SnippetLocationError: On the first request that cannot be located uniquely
        """
        planned: List[PlannedEdit] = []
        skipped: List[SkippedRequest] = []
        newline = detect_newline(join_lines(original_lines))

        for index, raw in enumerate(replacements):
            request, reason = self._coerce_request(raw)
            if request is None:
                logger.warning("Skipping replacement at index %d: %s", index, reason)
                skipped.append(SkippedRequest(request_index=index, reason=reason))
                continue

            try:
                location = self.locator.locate(
                    original_lines,
                    request.target_snippet,
                    request.context_before,
                    request.context_after,
                    request_index=index,
                )
            except SnippetLocationError as e:
                logger.error("Error finding location for replacement index %d: %s", index, e)
                raise

            planned.append(PlannedEdit(
                location=location,
                replacement_lines=adapt_line_endings(
                    split_replacement(request.replacement_text),
                    original_lines[location.end_index - 1],
                    location.end_index == len(original_lines),
                    newline,
                ),
                request_index=index,
            ))

        return planned, skipped

    def validate_plan(self, planned: List[PlannedEdit]) -> List[PlannedEdit]:
        """
        Check planned edits the same way rewrite() does, without applying them.

        Returns:
            The edits in application order (start index descending)

        Raises:
            OverlappingEditsError: If two edits share at least one original line
        """
        return self._order_for_application(planned)

    def _validate_inputs(self, original: Any, replacements: Any) -> None:
        if not isinstance(original, str):
            raise InvalidInputError("Original text must be a string.")
        if isinstance(replacements, (str, bytes, Mapping)) or not isinstance(replacements, Sequence):
            raise InvalidInputError("Replacements must be a sequence of requests.")

    def _coerce_request(self, raw: Any) -> Tuple[Optional[ReplacementRequest], str]:
        """Turn a raw request into a ReplacementRequest, or explain why it is malformed."""
        if isinstance(raw, ReplacementRequest):
            if is_blank_snippet(raw.target_snippet):
                return None, "target_snippet is empty"
            return raw, ""
        if not isinstance(raw, Mapping):
            return None, f"invalid replacement object of type {type(raw).__name__}"
        try:
            return ReplacementRequest.from_dict(raw), ""
        except ValueError as e:
            return None, str(e)

    def _order_for_application(self, planned: List[PlannedEdit]) -> List[PlannedEdit]:
        """
        Sort edits by start index, descending, and reject overlapping ranges.

        Raises:
            OverlappingEditsError: If two edits share at least one original line
        """
        ordered = sorted(planned, key=lambda edit: (edit.start_index, edit.request_index), reverse=True)
        for higher, lower in zip(ordered, ordered[1:]):
            if lower.end_index > higher.start_index:
                logger.error(
                    "Replacement index %d (lines %d-%d) overlaps replacement index %d (lines %d-%d)",
                    lower.request_index, lower.start_index, lower.end_index - 1,
                    higher.request_index, higher.start_index, higher.end_index - 1,
                )
                raise OverlappingEditsError(
                    lower.request_index, (lower.start_index, lower.end_index),
                    higher.request_index, (higher.start_index, higher.end_index),
                )
        return ordered

    def _apply_edits(self, original_lines: Sequence[str], ordered: List[PlannedEdit]) -> List[str]:
        # Owned working copy; the original lines are never touched
        working = list(original_lines)
        for edit in ordered:
            logger.debug(
                "Applying replacement originally at index %d: replacing lines %d to %d (original indices)",
                edit.request_index, edit.start_index, edit.end_index - 1,
            )
            working[edit.start_index:edit.end_index] = edit.replacement_lines
        return working


def replace_multiple_snippets_with_context(
    original: str,
    replacements: Sequence[Any],
    observer: Optional[LocatorObserver] = None,
) -> str:
    """Apply all replacements to ``original`` with a default applier."""
    return ReplacementApplier(observer=observer).apply(original, replacements)
