"""
Unit tests for the classify CLI command.

Tests cover:
- channelsieve classify on saved channel records (PASSED / REJECTED)
- --json output
- --rules overrides
- Exit codes for unreadable records and rules files
"""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from channelsieve.cli.main import app
from tests.factories.channel_factory import ChannelInfoFactory, VideoInfoFactory


def write_record(tmp_path: Path, country: str | None = "Deutschland") -> Path:
    record = {
        "channel_info": ChannelInfoFactory.build(country=country).model_dump(mode="json"),
        "videos": [v.model_dump(mode="json") for v in VideoInfoFactory.build_batch(3)],
    }
    path = tmp_path / "channel.json"
    path.write_text(json.dumps(record, ensure_ascii=False), encoding="utf-8")
    return path


class TestClassifyVerdict:
    """Test verdict rendering."""

    def test_german_channel_passes(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["classify", str(write_record(tmp_path))])

        assert result.exit_code == 0
        assert "PASSED" in result.stdout
        assert "Kochen mit Oma" in result.stdout
        assert "Stage diagnostics" in result.stdout

    def test_foreign_country_is_rejected(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write_record(tmp_path, country="Japan")

        result = runner.invoke(app, ["classify", str(path)])

        assert result.exit_code == 0
        assert "REJECTED" in result.stdout
        assert "Stage: location" in result.stdout

    def test_json_output(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write_record(tmp_path, country=None)

        result = runner.invoke(app, ["classify", str(path), "--json"])

        assert result.exit_code == 0
        verdict = json.loads(result.stdout)
        assert verdict["passed"] is False
        assert verdict["failed_stage"] == "location"
        assert verdict["reason"] == "No country specified"

    def test_rules_file_is_applied(self, runner: CliRunner, tmp_path: Path) -> None:
        rules = tmp_path / "rules.yaml"
        rules.write_text("location:\n  missing_country: defer\n", encoding="utf-8")
        path = write_record(tmp_path, country=None)

        result = runner.invoke(app, ["classify", str(path), "--rules", str(rules), "--json"])

        assert result.exit_code == 0
        verdict = json.loads(result.stdout)
        assert verdict["passed"] is True
        assert verdict["location"]["deferred"] is True

    def test_record_without_videos(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "channel.json"
        path.write_text(
            json.dumps({"channel_info": {"title": "Kanal", "country": "Japan"}}),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["classify", str(path), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["failed_stage"] == "location"


class TestClassifyErrors:
    """Test classify exit codes."""

    def test_invalid_json_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "channel.json"
        path.write_text("{kein json", encoding="utf-8")

        result = runner.invoke(app, ["classify", str(path)])

        assert result.exit_code == 2
        assert "cannot read" in result.stdout

    def test_missing_channel_info_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "channel.json"
        path.write_text(json.dumps({"videos": []}), encoding="utf-8")

        result = runner.invoke(app, ["classify", str(path)])

        assert result.exit_code == 2
        assert "channel_info" in result.stdout

    def test_invalid_record_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "channel.json"
        path.write_text(
            json.dumps({"channel_info": {"keywords": "nicht eine liste"}}), encoding="utf-8"
        )

        result = runner.invoke(app, ["classify", str(path)])

        assert result.exit_code == 2
        assert "invalid channel record" in result.stdout

    def test_invalid_rules_file_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        rules = tmp_path / "rules.yaml"
        rules.write_text("- nur\n- eine liste\n", encoding="utf-8")

        result = runner.invoke(
            app, ["classify", str(write_record(tmp_path)), "--rules", str(rules)]
        )

        assert result.exit_code == 2
        assert "Invalid Rules File" in result.stdout
