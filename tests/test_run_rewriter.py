"""
Tests for the run_rewriter script.
"""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).resolve().parents[1] / "scripts"


def _load_script():
    spec = importlib.util.spec_from_file_location("run_rewriter", SCRIPTS_DIR / "run_rewriter.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


run_rewriter = _load_script()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "source.txt"
    path.write_text("alpha\nbeta\ngamma\nbeta\n", encoding="utf-8")
    return path


def _write_requests(tmp_path, requests):
    path = tmp_path / "requests.json"
    path.write_text(json.dumps(requests), encoding="utf-8")
    return path


class TestRunRewriter:
    """Test cases for the command-line driver."""

    def test_writes_output_file(self, tmp_path, source_file):
        """Test writing the result to an output file."""
        requests = _write_requests(tmp_path, [
            {"target_snippet": "beta", "replacement_text": "BETA", "context_before": ["alpha"]},
        ])
        output = tmp_path / "out.txt"

        code = run_rewriter.main(["--source", str(source_file), "--requests", str(requests), "--output", str(output)])

        assert code == 0
        assert output.read_text(encoding="utf-8") == "alpha\nBETA\ngamma\nbeta\n"

    def test_in_place_keeps_crlf(self, tmp_path):
        """Test in-place rewrite of a CRLF file."""
        source = tmp_path / "crlf.txt"
        source.write_bytes(b"one\r\ntwo\r\nthree")
        requests = _write_requests(tmp_path, {"replacements": [{"target_snippet": "two", "replacement_text": "2"}]})

        code = run_rewriter.main(["--source", str(source), "--requests", str(requests), "--in-place"])

        assert code == 0
        assert source.read_bytes() == b"one\r\n2\r\nthree"

    def test_ambiguous_request_exit_code(self, tmp_path, source_file, capsys):
        """Test exit code and error payload for an ambiguous request."""
        requests = _write_requests(tmp_path, [{"target_snippet": "beta", "replacement_text": "BETA"}])

        code = run_rewriter.main(["--source", str(source_file), "--requests", str(requests)])

        assert code == 1
        error = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert error["error_type"] == "Ambiguous"
        assert error["positions"] == [1, 3]
        assert error["request_index"] == 0
        assert source_file.read_text(encoding="utf-8") == "alpha\nbeta\ngamma\nbeta\n"

    def test_missing_source_exit_code(self, tmp_path):
        """Test exit code for a missing source file."""
        requests = _write_requests(tmp_path, [])

        code = run_rewriter.main(["--source", str(tmp_path / "missing.txt"), "--requests", str(requests)])

        assert code == 2

    def test_bad_request_file_exit_code(self, tmp_path, source_file):
        """Test exit code for a request file without replacements."""
        requests = _write_requests(tmp_path, {"edits": []})

        code = run_rewriter.main(["--source", str(source_file), "--requests", str(requests)])

        assert code == 2

    def test_dry_run_prints_plan(self, tmp_path, source_file, capsys):
        """Test that a dry run prints the plan and writes nothing."""
        requests = _write_requests(tmp_path, [
            {"target_snippet": "gamma", "replacement_text": ""},
            {"target_snippet": ""},
        ])

        code = run_rewriter.main(["--source", str(source_file), "--requests", str(requests), "--dry-run"])

        assert code == 0
        plan = json.loads(capsys.readouterr().out)
        assert plan["planned"] == [
            {"request_index": 0, "start_index": 2, "end_index": 3, "replacement_line_count": 0},
        ]
        assert plan["skipped"][0]["request_index"] == 1
        assert source_file.read_text(encoding="utf-8") == "alpha\nbeta\ngamma\nbeta\n"

    def test_bundled_example(self, capsys):
        """Test the bundled hello.ts example."""
        code = run_rewriter.main([
            "--source", str(SCRIPTS_DIR / "examples" / "hello.ts"),
            "--requests", str(SCRIPTS_DIR / "examples" / "hello_requests.json"),
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert 'name: "confetti_test",' in out
        assert '<button id="confetti-btn">Click for Confetti!</button>' in out
        assert "particleCount: 250, // Increased!" in out
        assert "Celebrate!" not in out

    def test_dry_run_rejects_overlap(self, tmp_path, capsys):
        """Test that a dry run fails on overlapping requests like a real run."""
        source = tmp_path / "overlap.txt"
        source.write_text("x\ny\nz\n", encoding="utf-8")
        requests = _write_requests(tmp_path, [
            {"target_snippet": "y", "replacement_text": "Y"},
            {"target_snippet": "x\ny", "replacement_text": "X"},
        ])
        args = ["--source", str(source), "--requests", str(requests)]

        dry_code = run_rewriter.main(args + ["--dry-run"])
        dry_error = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        real_code = run_rewriter.main(args)

        assert dry_code == 1
        assert real_code == 1
        assert dry_error["error_type"] == "OverlappingEdits"
        assert dry_error["request_indices"] == [1, 0]

    def test_stdout_matches_output_file(self, tmp_path, source_file, capsys):
        """Test that stdout output is the exact result text."""
        requests = _write_requests(tmp_path, [
            {"target_snippet": "beta", "replacement_text": "BETA", "context_before": ["alpha"]},
        ])

        code = run_rewriter.main(["--source", str(source_file), "--requests", str(requests)])

        assert code == 0
        assert capsys.readouterr().out == "alpha\nBETA\ngamma\nbeta\n"

    def test_invalid_log_level(self, tmp_path, source_file):
        """Test that an unknown log level is a usage error."""
        requests = _write_requests(tmp_path, [])

        with pytest.raises(SystemExit) as exc_info:
            run_rewriter.main(["--source", str(source_file), "--requests", str(requests), "--log-level", "LOUD"])

        assert exc_info.value.code == 2

    def test_log_level_is_case_insensitive(self, tmp_path, source_file):
        """Test that the log level is case-insensitive."""
        requests = _write_requests(tmp_path, [])

        code = run_rewriter.main(["--source", str(source_file), "--requests", str(requests), "--log-level", "debug"])

        assert code == 0
