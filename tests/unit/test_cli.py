"""Tests for the offline CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from lightpoint.cli.main import app

runner = CliRunner()

ARTICLE = (
    "HMRC upheld 41% of complaints in 2023-24, with 92,000 complaints received.\n\n"
    "- Gather evidence\n"
    "- Cite the Charter\n"
)

PENALTY_TEXT = (
    "Our client received a late filing penalty of £1,600 for 2022-23. "
    "The penalty notice dated 3 March 2025 cites Schedule 55. "
    "We appeal on the grounds of reasonable excuse."
)


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestExtract:
    def test_table_output(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["extract", str(_write(tmp_path, "a.md", ARTICLE))])
        assert result.exit_code == 0
        assert "Statistics" in result.output
        assert "92,000" in result.output
        assert "2 stats" in result.output

    def test_json_to_file(self, tmp_path: Path) -> None:
        out = tmp_path / "out.json"
        result = runner.invoke(app, ["extract", str(_write(tmp_path, "a.md", ARTICLE)), "--output", str(out)])
        assert result.exit_code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert [s["value"] for s in payload["stats"]] == [41.0, 92000.0]
        assert len(payload["lists"][0]["items"]) == 2

    def test_nothing_found(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["extract", str(_write(tmp_path, "a.txt", "Nothing to see here."))])
        assert result.exit_code == 0
        assert "No structured content found" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["extract", str(tmp_path / "missing.txt")])
        assert result.exit_code != 0


class TestClassify:
    def test_penalty_case(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["classify", str(_write(tmp_path, "case.txt", PENALTY_TEXT))])
        assert result.exit_code == 0
        assert "penalty_appeal" in result.output
        assert "Penalty details" in result.output
        assert "2022-23" in result.output

    def test_json(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["classify", str(_write(tmp_path, "case.txt", PENALTY_TEXT)), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["primary_type"] == "penalty_appeal"

    def test_documents_contribute_signals(self, tmp_path: Path) -> None:
        narrative = _write(tmp_path, "case.txt", "Please help with my client's tax affairs.")
        letter = _write(tmp_path, "notice.txt", PENALTY_TEXT)
        result = runner.invoke(app, ["classify", str(narrative), "-d", str(letter), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["primary_type"] == "penalty_appeal"


class TestLayout:
    def test_layout_json(self, tmp_path: Path) -> None:
        out = tmp_path / "layout.json"
        article = _write(tmp_path, "a.md", ARTICLE)
        result = runner.invoke(
            app, ["layout", str(article), "--title", "Complaint outcomes", "--theme", "slate", "--output", str(out)]
        )
        assert result.exit_code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["theme"] == "slate"
        assert payload["components"][0]["type"] == "hero"
        assert all(c["image_url"] is None for c in payload["components"])
