"""
Data models for the context replacer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


# Key aliases accepted by ReplacementRequest.from_dict: canonical name -> accepted keys
_FIELD_ALIASES = {
    "target_snippet": ("target_snippet", "replacementSnippet"),
    "replacement_text": ("replacement_text", "newSnippet"),
    "context_before": ("context_before", "contextBefore"),
    "context_after": ("context_after", "contextAfter"),
}


class LocatorEventType(Enum):
    CANDIDATE_REJECTED = "candidate_rejected"
    MATCH_FOUND = "match_found"
    AMBIGUITY_DETECTED = "ambiguity_detected"
    NOT_FOUND = "not_found"


@dataclass
class ReplacementRequest:
    """
    A single snippet replacement, anchored by the lines around it.

    The target snippet is matched line by line after trimming; the context
    lists must sit immediately before/after the snippet in the original text.
    """
    target_snippet: str
    replacement_text: str
    context_before: List[str] = field(default_factory=list)
    context_after: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate request data after initialization."""
        if not isinstance(self.target_snippet, str):
            raise ValueError(f"target_snippet must be a string, got {type(self.target_snippet).__name__}")
        if not isinstance(self.replacement_text, str):
            raise ValueError(f"replacement_text must be a string, got {type(self.replacement_text).__name__}")
        if self.target_snippet.strip() == "":
            raise ValueError("target_snippet is empty")
        self.context_before = _clean_context(self.context_before, "context_before")
        self.context_after = _clean_context(self.context_after, "context_after")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReplacementRequest":
        """
        Build a request from a mapping (e.g. one entry of a JSON request file).

        Both snake_case keys and the camelCase keys of the earlier JS tool
        (replacementSnippet / newSnippet / contextBefore / contextAfter) are accepted.

        Raises:
            ValueError: If a text field is missing or is not a string
        """
        values: Dict[str, Any] = {}
        for name, keys in _FIELD_ALIASES.items():
            for key in keys:
                if key in data:
                    values[name] = data[key]
                    break
        for required in ("target_snippet", "replacement_text"):
            if required not in values:
                raise ValueError(f"Missing required field: {required}")
        return cls(
            target_snippet=values["target_snippet"],
            replacement_text=values["replacement_text"],
            context_before=values.get("context_before"),
            context_after=values.get("context_after"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_snippet": self.target_snippet,
            "replacement_text": self.replacement_text,
            "context_before": list(self.context_before),
            "context_after": list(self.context_after),
        }


@dataclass(frozen=True)
class MatchLocation:
    """Half-open [start_index, end_index) range over the original lines."""
    start_index: int
    end_index: int

    @property
    def line_count(self) -> int:
        return self.end_index - self.start_index


@dataclass
class PlannedEdit:
    """A validated location paired with the lines that will replace it."""
    location: MatchLocation
    replacement_lines: List[str]
    request_index: int

    @property
    def start_index(self) -> int:
        return self.location.start_index

    @property
    def end_index(self) -> int:
        return self.location.end_index

    @property
    def line_delta(self) -> int:
        return len(self.replacement_lines) - self.location.line_count


@dataclass
class SkippedRequest:
    """A malformed request that was left out of the plan."""
    request_index: int
    reason: str


@dataclass
class LocatorEvent:
    """Diagnostic event emitted by the locator to an optional observer."""
    event_type: LocatorEventType
    request_index: Optional[int]
    start_index: Optional[int] = None
    detail: str = ""
    positions: List[int] = field(default_factory=list)


@dataclass
class RewriteResult:
    """Complete rewrite result with detailed tracking."""
    text: str
    applied_edits: List[PlannedEdit]
    skipped_requests: List[SkippedRequest]
    original_line_count: int
    final_line_count: int
    processing_time_ms: int = 0


def _clean_context(context: Any, name: str) -> List[str]:
    # Absent or non-list context means "no context"
    if not isinstance(context, (list, tuple)):
        return []
    for line in context:
        if not isinstance(line, str):
            raise ValueError(f"{name} lines must be strings, got {type(line).__name__}")
    return list(context)
