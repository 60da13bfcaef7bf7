"""Unit tests for the CLI — command registration and behavior over build files."""

from __future__ import annotations

import csv
import io
import json

from typer.testing import CliRunner

from build_tracker.cli.app import app

runner = CliRunner()


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        # Typer's no_args_is_help may exit with 0 or 2 depending on version
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("compare", "table", "history", "ingest"):
            assert command in result.output

    def test_subcommand_help(self):
        for command in ("compare", "table", "history", "ingest"):
            result = runner.invoke(app, [command, "--help"])
            assert result.exit_code == 0, command


# ---------------------------------------------------------------------------
# Test: compare
# ---------------------------------------------------------------------------


class TestCompareCommand:
    def test_compare_two_files(self, builds_dir):
        result = runner.invoke(
            app,
            [
                "compare",
                str(builds_dir / "5d6e7f8.json"),
                str(builds_dir / "1a2b3c4.json"),
                "-s",
                "gzip",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Build Comparison" in result.output
        assert "vendor" in result.output
        assert "legacy" in result.output

    def test_compare_with_filter(self, builds_dir):
        result = runner.invoke(
            app,
            [
                "compare",
                str(builds_dir / "5d6e7f8.json"),
                str(builds_dir / "1a2b3c4.json"),
                "-f",
                "vendor",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "vendor" not in result.output

    def test_missing_file(self, builds_dir, tmp_path):
        result = runner.invoke(
            app,
            ["compare", str(tmp_path / "nope.json"), str(builds_dir / "1a2b3c4.json")],
        )
        assert result.exit_code == 1
        assert "Cannot read" in result.output


# ---------------------------------------------------------------------------
# Test: table
# ---------------------------------------------------------------------------


class TestTableCommand:
    def test_markdown(self, builds_dir):
        result = runner.invoke(
            app, ["table", "-d", str(builds_dir), "-F", "markdown", "-s", "gzip"]
        )
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "| Artifact | 1a2b3c4 | 5d6e7f8 | 9a0b1c2 | Δ1 | Δ2 |"
        assert lines[2] == (
            "| All | 175 B | 220 B | 210 B | +45 B (+25.7%) | -10 B (-4.5%) |"
        )

    def test_csv(self, builds_dir):
        result = runner.invoke(
            app, ["table", "-d", str(builds_dir), "-F", "csv", "-s", "stat"]
        )
        assert result.exit_code == 0, result.output
        rows = {r[0]: r for r in csv.reader(io.StringIO(result.output))}
        assert [float(v) for v in rows["All"][1:4]] == [7000, 9800, 9400]
        assert rows["legacy"][2] == ""

    def test_json(self, builds_dir):
        result = runner.invoke(app, ["table", "-d", str(builds_dir), "-F", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data["builds"]) == 3
        assert [d["revision"] for d in data["deltas"]] == ["5d6e7f8", "9a0b1c2"]

    def test_explicit_files(self, builds_dir):
        result = runner.invoke(
            app,
            [
                "table",
                str(builds_dir / "9a0b1c2.json"),
                str(builds_dir / "1a2b3c4.json"),
                "-F",
                "markdown",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == "| Artifact | 1a2b3c4 | 9a0b1c2 | Δ1 |"

    def test_rich_output(self, builds_dir):
        result = runner.invoke(app, ["table", "-d", str(builds_dir), "-s", "gzip"])
        assert result.exit_code == 0, result.output
        assert "All" in result.output

    def test_empty_directory(self, tmp_path):
        result = runner.invoke(app, ["table", "-d", str(tmp_path)])
        assert result.exit_code == 1
        assert "No builds to compare." in result.output

    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["table", "-d", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "not found" in result.output


# ---------------------------------------------------------------------------
# Test: history
# ---------------------------------------------------------------------------


class TestHistoryCommand:
    def test_history(self, builds_dir):
        result = runner.invoke(app, ["history", "vendor", "-d", str(builds_dir)])
        assert result.exit_code == 0, result.output
        assert "absent" in result.output
        assert "ddd111" in result.output

    def test_unknown_artifact(self, builds_dir):
        result = runner.invoke(app, ["history", "nope", "-d", str(builds_dir)])
        assert result.exit_code == 1
        assert "Artifact not found in any build" in result.output
        assert "shared" in result.output


# ---------------------------------------------------------------------------
# Test: ingest
# ---------------------------------------------------------------------------


class TestIngestCommand:
    def test_summary_against_latest_build(self, builds_dir, tmp_path, make_payload):
        payload = tmp_path / "new.json"
        payload.write_text(json.dumps(make_payload()), encoding="utf-8")

        result = runner.invoke(
            app, ["ingest", str(payload), "-d", str(builds_dir), "-s", "gzip"]
        )
        assert result.exit_code == 0, result.output
        assert "main: 130 B (+10 B, +8.3%)" in result.output
        assert "against 9a0b1c2" in result.output

    def test_no_parent(self, tmp_path, make_payload):
        payload = tmp_path / "new.json"
        payload.write_text(json.dumps(make_payload()), encoding="utf-8")
        empty = tmp_path / "builds"
        empty.mkdir()

        result = runner.invoke(app, ["ingest", str(payload), "-d", str(empty)])
        assert result.exit_code == 0, result.output
        assert "No parent build found" in result.output

    def test_rejected_payload(self, builds_dir, tmp_path):
        payload = tmp_path / "bad.json"
        payload.write_text(json.dumps({"meta": {"revision": "x"}}), encoding="utf-8")

        result = runner.invoke(app, ["ingest", str(payload), "-d", str(builds_dir)])
        assert result.exit_code == 1
        assert "Rejected" in result.output


# ---------------------------------------------------------------------------
# Test: invalid filter patterns
# ---------------------------------------------------------------------------


class TestInvalidFilter:
    """A filter that is not a valid regex is reported, not raised."""

    def test_compare(self, builds_dir):
        result = runner.invoke(
            app,
            [
                "compare",
                str(builds_dir / "5d6e7f8.json"),
                str(builds_dir / "1a2b3c4.json"),
                "-f",
                "(",
            ],
        )
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Invalid artifact filter" in result.output

    def test_table(self, builds_dir):
        result = runner.invoke(
            app, ["table", "-d", str(builds_dir), "-F", "markdown", "-f", "[a"]
        )
        assert result.exit_code == 1
        assert "Invalid artifact filter" in result.output

    def test_ingest(self, builds_dir, tmp_path, make_payload):
        payload = tmp_path / "new.json"
        payload.write_text(json.dumps(make_payload()), encoding="utf-8")

        result = runner.invoke(
            app, ["ingest", str(payload), "-d", str(builds_dir), "-f", "("]
        )
        assert result.exit_code == 1
        assert "Invalid artifact filter" in result.output
