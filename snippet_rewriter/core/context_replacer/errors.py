"""
Exceptions raised by the context replacer.

Every error that concerns a specific replacement request carries that
request's position in the input sequence together with the snippet and its
context, so an operator can add disambiguating context and retry.
"""

import json
from typing import Any, Dict, List, Optional


class SnippetRewriteError(Exception):
    """Base class for all replacer failures."""

    error_type = "SnippetRewriteError"

    def to_dict(self) -> Dict[str, Any]:
        return {"error_type": self.error_type, "message": str(self)}


class InvalidInputError(SnippetRewriteError, ValueError):
    """Top-level arguments are malformed (original not a str, requests not a sequence)."""

    error_type = "InvalidInput"


class SnippetLocationError(SnippetRewriteError):
    """A target snippet could not be resolved to exactly one location."""

    def __init__(
        self,
        message: str,
        request_index: Optional[int],
        snippet: str,
        context_before: Optional[List[str]] = None,
        context_after: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.request_index = request_index
        self.snippet = snippet
        self.context_before = list(context_before or [])
        self.context_after = list(context_after or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "request_index": self.request_index,
            "snippet": self.snippet,
            "context_before": self.context_before,
            "context_after": self.context_after,
        })
        return data


class SnippetNotFoundError(SnippetLocationError):
    """No candidate position satisfied the snippet and its context."""

    error_type = "NotFound"

    def __init__(
        self,
        request_index: Optional[int],
        snippet: str,
        context_before: Optional[List[str]] = None,
        context_after: Optional[List[str]] = None,
    ):
        message = (
            f"Replacement target (index {_label(request_index)}) with specified context "
            f"not found in the original text."
        )
        super().__init__(message, request_index, snippet, context_before, context_after)


class AmbiguousMatchError(SnippetLocationError):
    """Two or more positions satisfied the snippet and its context."""

    error_type = "Ambiguous"

    def __init__(
        self,
        request_index: Optional[int],
        snippet: str,
        positions: List[int],
        context_before: Optional[List[str]] = None,
        context_after: Optional[List[str]] = None,
    ):
        message = (
            f"Ambiguous match for replacement target (index {_label(request_index)}) with context. "
            f"Found at original line indices: {', '.join(str(p) for p in positions)}."
        )
        message += f"\nSnippet:\n{snippet}"
        if context_before:
            message += f"\nContext Before: {json.dumps(list(context_before), ensure_ascii=False)}"
        if context_after:
            message += f"\nContext After: {json.dumps(list(context_after), ensure_ascii=False)}"
        super().__init__(message, request_index, snippet, context_before, context_after)
        self.positions = list(positions)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["positions"] = self.positions
        return data


class OverlappingEditsError(SnippetRewriteError):
    """Two planned edits cover intersecting ranges of the original lines."""

    error_type = "OverlappingEdits"

    def __init__(self, first_index: int, first_range: tuple, second_index: int, second_range: tuple):
        super().__init__(
            f"Replacement targets at index {first_index} (lines {first_range[0]}-{first_range[1] - 1}) "
            f"and index {second_index} (lines {second_range[0]}-{second_range[1] - 1}) overlap."
        )
        self.request_indices = (first_index, second_index)
        self.ranges = (first_range, second_range)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["request_indices"] = list(self.request_indices)
        data["ranges"] = [list(r) for r in self.ranges]
        return data


def _label(request_index: Optional[int]) -> str:
    return "?" if request_index is None else str(request_index)
