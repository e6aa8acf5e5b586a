"""
Context replacer module.

This module replaces multiple snippets inside a single text, using the lines
around each snippet to locate it unambiguously before any edit is applied.

The main entry point is the ReplacementApplier class in replacement_applier.py.
"""

# Core components
from snippet_rewriter.core.context_replacer.snippet_locator import SnippetLocator, find_snippet_location
from snippet_rewriter.core.context_replacer.replacement_applier import (
    ReplacementApplier,
    replace_multiple_snippets_with_context,
)

# Errors
from snippet_rewriter.core.context_replacer.errors import (
    SnippetRewriteError,
    InvalidInputError,
    SnippetLocationError,
    SnippetNotFoundError,
    AmbiguousMatchError,
    OverlappingEditsError,
)

# Data models
from snippet_rewriter.core.context_replacer.models import (
    ReplacementRequest,
    MatchLocation,
    PlannedEdit,
    SkippedRequest,
    LocatorEvent,
    LocatorEventType,
    RewriteResult,
)

__all__ = [
    # Main entry points
    'ReplacementApplier',
    'replace_multiple_snippets_with_context',

    # Core components
    'SnippetLocator',
    'find_snippet_location',

    # Errors
    'SnippetRewriteError',
    'InvalidInputError',
    'SnippetLocationError',
    'SnippetNotFoundError',
    'AmbiguousMatchError',
    'OverlappingEditsError',

    # Data models
    'ReplacementRequest',
    'MatchLocation',
    'PlannedEdit',
    'SkippedRequest',
    'LocatorEvent',
    'LocatorEventType',
    'RewriteResult',
]
