"""
Apply context-anchored snippet replacements to a text file.

Reads the source text and a JSON request file, runs the ReplacementApplier and
writes or prints the result. The request file is either a list of request
objects or an object with a "replacements" list.

Usage:
  python scripts/run_rewriter.py \
    --source scripts/examples/hello.ts \
    --requests scripts/examples/hello_requests.json

  python scripts/run_rewriter.py --source src/app.ts --requests edits.json --in-place
  python scripts/run_rewriter.py --source src/app.ts --requests edits.json --dry-run

Exit codes: 0 on success, 1 when the rewrite fails, 2 when an input file cannot be read.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

# Environment must be loaded before the package reads its config
project_root = Path(__file__).resolve().parents[1]
load_dotenv(project_root / ".env.local")
load_dotenv(project_root / ".env")

from snippet_rewriter.core.context_replacer import config
from snippet_rewriter.core.context_replacer.errors import SnippetRewriteError
from snippet_rewriter.core.context_replacer.line_utils import split_lines
from snippet_rewriter.core.context_replacer.replacement_applier import ReplacementApplier

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _load_requests(path: Path) -> List[Any]:
    data = json.loads(path.read_text(encoding=config.FILE_ENCODING))
    if isinstance(data, dict):
        data = data.get("replacements")
    if not isinstance(data, list):
        raise ValueError(f"Request file must hold a list of replacements: {path}")
    return data


def _plan_summary(applier: ReplacementApplier, original: str, requests: List[Any]) -> Dict[str, Any]:
    lines = split_lines(original)
    planned, skipped = applier.plan(lines, requests)
    # Overlaps fail here exactly as in rewrite()
    applier.validate_plan(planned)
    return {
        "planned": [
            {
                "request_index": edit.request_index,
                "start_index": edit.start_index,
                "end_index": edit.end_index,
                "replacement_line_count": len(edit.replacement_lines),
            }
            for edit in planned
        ],
        "skipped": [{"request_index": s.request_index, "reason": s.reason} for s in skipped],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replace snippets in a text file using surrounding context.")
    parser.add_argument("--source", required=True, type=Path, help="Text file to rewrite")
    parser.add_argument("--requests", required=True, type=Path, help="JSON file with replacement requests")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--output", type=Path, help="Write the result to this file (default: stdout)")
    output.add_argument("--in-place", action="store_true", help="Overwrite the source file")
    parser.add_argument("--dry-run", action="store_true", help="Print the planned edits as JSON and exit")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=config.LOG_LEVEL if config.LOG_LEVEL in LOG_LEVELS else "INFO",
        help="Logging level (default from env)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=args.log_level, format=config.LOG_FORMAT)

    try:
        with args.source.open(encoding=config.FILE_ENCODING, newline="") as f:
            original = f.read()
        requests = _load_requests(args.requests)
    except (OSError, ValueError) as e:
        print(json.dumps({"error_type": "InputFile", "message": str(e)}, ensure_ascii=False), file=sys.stderr)
        return 2

    applier = ReplacementApplier()
    try:
        if args.dry_run:
            print(json.dumps(_plan_summary(applier, original, requests), indent=2, ensure_ascii=False))
            return 0
        result = applier.rewrite(original, requests)
    except SnippetRewriteError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1

    for skipped in result.skipped_requests:
        logger.warning("Request %d skipped: %s", skipped.request_index, skipped.reason)
    logger.info(
        "Applied %d replacements (%d -> %d lines) in %d ms",
        len(result.applied_edits), result.original_line_count, result.final_line_count,
        result.processing_time_ms,
    )

    target = args.source if args.in_place else args.output
    if target:
        with target.open("w", encoding=config.FILE_ENCODING, newline="") as f:
            f.write(result.text)
        logger.info("Result written to %s", target)
    else:
        sys.stdout.write(result.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
