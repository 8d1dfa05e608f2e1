"""
Unit tests for CLI commands.

Tests cover:
- decode command
- diff command
- batch command
- schema command
"""

import json

import pytest
from typer.testing import CliRunner

from balancediff.cli.app import app

runner = CliRunner()


def _json_output(result):
    """Parse the JSON document printed last; log records may precede it."""
    text = result.stdout
    start = 0 if text.startswith("{") else text.index("\n{") + 1
    return json.loads(text[start:])


@pytest.fixture
def pawn_files(write_file, pawn_before, pawn_after):
    before = write_file("before/armpw.lua", pawn_before)
    after = write_file("after/armpw.lua", pawn_after)
    return str(before), str(after)


class TestDecodeCommand:
    """Tests for decode command."""

    def test_decode(self, pawn_files):
        result = runner.invoke(app, ["decode", pawn_files[0]])

        assert result.exit_code == 0
        assert "Bound name:" in result.stdout
        assert '"maxdamage": 370' in result.stdout
        assert '"emg"' in result.stdout

    def test_decode_raw_keeps_positional_weapons(self, write_file):
        path = write_file("u.lua", 'return { weapons = { { def = "A" } }, weapondefs = { a = {} } }')
        result = runner.invoke(app, ["decode", "--raw", str(path)])

        assert result.exit_code == 0
        assert _json_output(result)["weapons"] == [{"def": "A"}]

    def test_decode_reports_diagnostics(self, write_file):
        path = write_file("mixed.lua", 'return { x = 1, "a" }')
        result = runner.invoke(app, ["decode", str(path)])

        assert result.exit_code == 0
        assert "Warning:" in result.stdout

    def test_decode_malformed(self, write_file):
        path = write_file("broken.lua", "return {")
        result = runner.invoke(app, ["decode", str(path)])

        assert result.exit_code == 1
        assert "Malformed source" in result.stdout

    def test_decode_missing_file(self, tmp_path):
        result = runner.invoke(app, ["decode", str(tmp_path / "missing.lua")])

        assert result.exit_code == 1
        assert "Cannot read" in result.stdout


class TestDiffCommand:
    """Tests for diff command."""

    def test_diff_tree(self, pawn_files):
        before, after = pawn_files
        result = runner.invoke(app, ["diff", "--before", before, "--after", after])

        assert result.exit_code == 0
        assert "Base HP" in result.stdout
        assert "Buff" in result.stdout
        assert "Nerf" in result.stdout

    def test_diff_json(self, pawn_files):
        before, after = pawn_files
        result = runner.invoke(app, ["diff", "--before", before, "--after", after, "--json"])

        assert result.exit_code == 0
        data = _json_output(result)
        assert data["property_id"] == "armpw"
        assert data["change_type"] == "Modified"
        assert data["changes"][0]["property_id"] == "maxdamage"
        assert data["changes"][0]["change_type"] == "Buff"

    def test_diff_with_names(self, pawn_files, write_file):
        names = write_file("names.yaml", "names:\n  armpw: Pawn Bot\n")
        before, after = pawn_files
        result = runner.invoke(app, ["diff", "--before", before, "--after", after, "--names", str(names), "--json"])

        assert _json_output(result)["property_name"] == "Pawn Bot"

    def test_diff_added_file(self, pawn_files):
        result = runner.invoke(app, ["diff", "--after", pawn_files[1], "--json"])

        assert result.exit_code == 0
        assert _json_output(result)["change_type"] == "Added"

    def test_diff_no_changes(self, pawn_files):
        before, _ = pawn_files
        result = runner.invoke(app, ["diff", "--before", before, "--after", before])

        assert result.exit_code == 0
        assert "No balance changes" in result.stdout

    def test_diff_nothing_to_compare(self):
        result = runner.invoke(app, ["diff"])

        assert result.exit_code == 2
        assert "Nothing to compare" in result.stdout

    def test_diff_bad_schema_path(self, pawn_files, tmp_path):
        before, after = pawn_files
        result = runner.invoke(
            app, ["diff", "--before", before, "--after", after, "--schema", str(tmp_path / "none.yaml")]
        )

        assert result.exit_code == 1
        assert "Path not found" in result.stdout


class TestBatchCommand:
    """Tests for batch command."""

    @pytest.fixture
    def manifest(self, write_file, pawn_before, pawn_after):
        write_file("before/armpw.lua", pawn_before)
        write_file("after/armpw.lua", pawn_after)
        write_file("before/broken.lua", pawn_before)
        write_file("after/broken.lua", "return { a = }")
        path = write_file(
            "manifest.yaml",
            """
            commit:
              sha: abc123
              author: {name: someone}
              message: Buff Pawn
            files:
              - path: units/ArmBots/armpw.lua
                before: before/armpw.lua
                after: after/armpw.lua
              - path: units/ArmBots/broken.lua
                before: before/broken.lua
                after: after/broken.lua
              - path: gamedata/alldefs.lua
                before: before/armpw.lua
                after: after/armpw.lua
            """,
        )
        return str(path)

    def test_batch(self, manifest):
        result = runner.invoke(app, ["batch", manifest])

        assert result.exit_code == 0
        assert "abc123" in result.stdout
        assert "1 unit(s) changed, 1 failure(s), 1 skipped" in result.stdout

    def test_batch_json(self, manifest):
        result = runner.invoke(app, ["batch", manifest, "--json"])

        assert result.exit_code == 0
        data = _json_output(result)
        assert data["patch"]["sha"] == "abc123"
        assert [change["property_id"] for change in data["patch"]["changes"]] == ["armpw"]
        assert data["failures"][0]["path"] == "units/ArmBots/broken.lua"
        assert data["skipped"] == ["gamedata/alldefs.lua"]

    def test_batch_invalid_manifest(self, write_file):
        path = write_file("manifest.yaml", "files: []\n")
        result = runner.invoke(app, ["batch", str(path)])

        assert result.exit_code == 1
        assert "Failed to load data" in result.stdout


class TestSchemaCommand:
    """Tests for schema command."""

    def test_schema_list(self):
        result = runner.invoke(app, ["schema"])

        assert result.exit_code == 0
        assert "Properties" in result.stdout

    def test_schema_property(self):
        result = runner.invoke(app, ["schema", "maxdamage"])

        assert result.exit_code == 0
        assert "Base HP" in result.stdout
        assert "higher_is_better" in result.stdout

    def test_schema_unknown_property(self):
        result = runner.invoke(app, ["schema", "warp_drive"])

        assert result.exit_code == 2
        assert "Unknown property" in result.stdout
