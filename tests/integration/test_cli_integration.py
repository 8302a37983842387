"""Fast integration tests for CLI commands using CliRunner."""

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from erdiagram.cli.main import app

runner = CliRunner()

ORGS_DSL = """TABLE orgs "Organisations" PK=id LABEL=name
COL orgs.id Number req uniq
COL orgs.name Text req

TABLE users PK=id
COL users.id Number req
REF users.org_id -> orgs.id req "Owning org"

MEMO "Two tables"
"""


class TestCLIIntegration:
    """Fast CLI integration tests using CliRunner."""

    @pytest.fixture
    def temp_project(self, tmp_path):
        """A project directory holding one DSL file."""
        (tmp_path / "schema.erd").write_text(ORGS_DSL)
        return tmp_path

    def run_in_project(self, command, temp_project):
        """Run a command in the project directory."""
        original_cwd = os.getcwd()
        os.chdir(temp_project)
        try:
            return runner.invoke(app, command)
        finally:
            os.chdir(original_cwd)

    def test_project_initialization(self, temp_project):
        """Test project initialization workflow."""
        result = self.run_in_project(["init"], temp_project)
        assert result.exit_code == 0
        assert "Initialized erdiagram project" in result.stdout

        assert (temp_project / ".erdiagram" / "config.toml").exists()

        # Second init fails
        result = self.run_in_project(["init"], temp_project)
        assert result.exit_code == 1
        assert "already exists" in result.stdout

    def test_version(self, temp_project):
        """Test the version command."""
        result = self.run_in_project(["version"], temp_project)
        assert result.exit_code == 0
        assert "erdiagram version" in result.stdout

    def test_no_command_shows_help(self, temp_project):
        """Test running without a command prints help."""
        result = self.run_in_project([], temp_project)
        assert result.exit_code == 0
        assert "Usage" in result.stdout

    def test_status_command(self, temp_project):
        """Test the status command."""
        self.run_in_project(["init"], temp_project)

        result = self.run_in_project(["status"], temp_project)
        assert result.exit_code == 0
        assert "erdiagram Status" in result.stdout
        assert "Schema version: 2" in result.stdout
        assert "Horizontal spacing: 400" in result.stdout

    def test_status_with_env_vars(self, temp_project, monkeypatch):
        """Test status reflects environment overrides."""
        monkeypatch.setenv("ERDIAGRAM_HORIZONTAL_SPACING", "250")
        monkeypatch.setenv("ERDIAGRAM_DSL_HEADER", "false")

        result = self.run_in_project(["status"], temp_project)
        assert result.exit_code == 0
        assert "Horizontal spacing: 250" in result.stdout
        assert "DSL header: False" in result.stdout

    def test_dsl_parse_to_stdout(self, temp_project):
        """Test parsing DSL prints a current envelope."""
        result = self.run_in_project(["dsl", "parse", "schema.erd"], temp_project)
        assert result.exit_code == 0

        envelope = json.loads(result.stdout)
        assert envelope["schemaVersion"] == 2
        diagram = envelope["diagram"]
        assert [t["name"] for t in diagram["tables"]] == ["orgs", "users"]
        assert len(diagram["relations"]) == 1
        assert diagram["memos"][0]["text"] == "Two tables"
        assert diagram["tables"][1]["position"] == {"x": 400.0, "y": 0.0}

    def test_dsl_parse_uses_project_layout(self, temp_project, monkeypatch):
        """Test parsing honours configured spacing."""
        monkeypatch.setenv("ERDIAGRAM_HORIZONTAL_SPACING", "250")

        result = self.run_in_project(["dsl", "parse", "schema.erd"], temp_project)
        assert result.exit_code == 0

        diagram = json.loads(result.stdout)["diagram"]
        assert diagram["tables"][1]["position"]["x"] == 250

    def test_dsl_parse_to_file(self, temp_project):
        """Test writing the envelope to a file."""
        result = self.run_in_project(
            ["dsl", "parse", "schema.erd", "-o", "diagram.json"], temp_project
        )
        assert result.exit_code == 0

        envelope = json.loads((temp_project / "diagram.json").read_text())
        assert envelope["schemaVersion"] == 2

    def test_dsl_parse_syntax_error(self, temp_project):
        """Test syntax errors exit non-zero with the line number."""
        (temp_project / "bad.erd").write_text("TABLE a\nCOL a.x Varchar\n")

        result = self.run_in_project(["dsl", "parse", "bad.erd"], temp_project)
        assert result.exit_code == 1
        assert "line 2" in result.output

    def test_dsl_parse_missing_file(self, temp_project):
        """Test a missing input file exits non-zero."""
        result = self.run_in_project(["dsl", "parse", "missing.erd"], temp_project)
        assert result.exit_code == 1

    def test_dsl_export_round_trip(self, temp_project):
        """Test parse then export reproduces the DSL structure."""
        self.run_in_project(["dsl", "parse", "schema.erd", "-o", "diagram.json"], temp_project)

        result = self.run_in_project(
            ["dsl", "export", "diagram.json", "--no-header"], temp_project
        )
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == 'TABLE orgs "Organisations" PK=id LABEL=name'
        assert 'REF users.org_id -> orgs.id req "Owning org"' in lines
        assert 'MEMO "Two tables"' in lines

    def test_dsl_export_header(self, temp_project):
        """Test the header follows the flag or config."""
        self.run_in_project(["dsl", "parse", "schema.erd", "-o", "diagram.json"], temp_project)

        result = self.run_in_project(["dsl", "export", "diagram.json"], temp_project)
        assert result.exit_code == 0
        assert result.stdout.startswith("# erdiagram DSL")

    def test_dsl_check(self, temp_project):
        """Test the check summary."""
        result = self.run_in_project(["dsl", "check", "schema.erd"], temp_project)
        assert result.exit_code == 0
        assert "orgs" in result.stdout
        assert "users" in result.stdout
        assert "2 tables, 1 relations, 1 memos" in result.stdout

    def test_import_detects_dsl(self, temp_project):
        """Test import accepts DSL."""
        result = self.run_in_project(["import", "schema.erd"], temp_project)
        assert result.exit_code == 0
        assert json.loads(result.stdout)["schemaVersion"] == 2

    def test_import_detects_legacy_json(self, temp_project):
        """Test import upgrades a legacy bare diagram."""
        legacy = {"tables": [{"name": "users", "columns": [{"name": "id"}]}]}
        (temp_project / "legacy.json").write_text(json.dumps(legacy))

        result = self.run_in_project(["import", "legacy.json"], temp_project)
        assert result.exit_code == 0

        envelope = json.loads(result.stdout)
        assert envelope["schemaVersion"] == 2
        assert envelope["diagram"]["memos"] == []
        assert envelope["diagram"]["tables"][0]["columns"][0]["order"] == 0

    def test_import_rejects_unknown_format(self, temp_project):
        """Test import refuses text that is neither DSL nor JSON."""
        (temp_project / "notes.txt").write_text("hello world\n")

        result = self.run_in_project(["import", "notes.txt"], temp_project)
        assert result.exit_code == 1

    def test_schema_migrate(self, temp_project):
        """Test migrating an older envelope."""
        old = {"schemaVersion": 1, "diagram": {"relations": [{"edgeFollowerIconSize": 2}]}}
        (temp_project / "old.json").write_text(json.dumps(old))

        result = self.run_in_project(
            ["schema", "migrate", "old.json", "-o", "new.json"], temp_project
        )
        assert result.exit_code == 0

        envelope = json.loads((temp_project / "new.json").read_text())
        assert envelope["schemaVersion"] == 2
        assert envelope["diagram"]["relations"][0]["edgeFollowerIconSize"] == 8

    def test_schema_migrate_too_new(self, temp_project):
        """Test a future envelope without a diagram payload is refused."""
        future = {"schemaVersion": 9, "diagram": {"entities": []}}
        (temp_project / "future.json").write_text(json.dumps(future))

        result = self.run_in_project(["schema", "migrate", "future.json"], temp_project)
        assert result.exit_code == 1
        assert "too new" in result.output

    def test_schema_migrate_not_a_diagram(self, temp_project):
        """Test JSON that is not diagram data is refused."""
        (temp_project / "other.json").write_text('{"hello": "world"}')

        result = self.run_in_project(["schema", "migrate", "other.json"], temp_project)
        assert result.exit_code == 1

    def test_schema_inspect(self, temp_project):
        """Test inspecting a legacy file."""
        (temp_project / "legacy.json").write_text(json.dumps({"tables": [{}], "memos": []}))

        result = self.run_in_project(["schema", "inspect", "legacy.json"], temp_project)
        assert result.exit_code == 0
        assert "Format: legacy" in result.stdout
        assert "Schema version: 0" in result.stdout
        assert "Migrates to: 2" in result.stdout
        assert "Tables: 1" in result.stdout

    def test_schema_inspect_invalid(self, temp_project):
        """Test inspecting something that is not diagram data."""
        (temp_project / "list.json").write_text("[1, 2, 3]")

        result = self.run_in_project(["schema", "inspect", "list.json"], temp_project)
        assert result.exit_code == 1
        assert "Format: invalid" in result.stdout


class TestFullWorkflow:
    """End-to-end workflow across commands."""

    def test_legacy_to_dsl_and_back(self, tmp_path: Path):
        """A legacy diagram can be upgraded, exported to DSL and re-parsed."""
        legacy = {
            "tables": [
                {
                    "id": "t1",
                    "name": "orgs",
                    "columns": [{"id": "c1", "name": "id", "type": "Number", "isKey": True}],
                },
                {
                    "id": "t2",
                    "name": "users",
                    "columns": [
                        {"id": "c2", "name": "id", "type": "Number", "isKey": True},
                        {
                            "id": "c3",
                            "name": "org_id",
                            "type": "Ref",
                            "constraints": {"refTableId": "t1", "refColumnId": "c1"},
                        },
                    ],
                },
            ],
            "relations": [
                {
                    "sourceTableId": "t1",
                    "sourceColumnId": "c1",
                    "targetTableId": "t2",
                    "targetColumnId": "c3",
                }
            ],
        }
        (tmp_path / "legacy.json").write_text(json.dumps(legacy))

        result = runner.invoke(app, ["schema", "migrate", "legacy.json", "-o", "current.json"])
        assert result.exit_code == 0

        result = runner.invoke(
            app, ["dsl", "export", "current.json", "--no-header", "-o", "schema.erd"]
        )
        assert result.exit_code == 0
        assert "REF users.org_id -> orgs.id" in (tmp_path / "schema.erd").read_text()

        result = runner.invoke(app, ["dsl", "parse", "schema.erd"])
        assert result.exit_code == 0
        diagram = json.loads(result.stdout)["diagram"]
        assert len(diagram["relations"]) == 1
        assert diagram["tables"][1]["position"]["x"] == 400
