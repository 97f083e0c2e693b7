"""Tests for the command line interface."""

import json

import pytest

from medsafety.cli import build_parser, main


def run(capsys: pytest.CaptureFixture, *argv: str) -> tuple[int, str, str]:
    code = main(["--memory", *argv])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestParser:
    """Test argument parsing."""

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_evaluate_requires_patient(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["evaluate", "Aspirin", "--prescription", "rx1"])


class TestCommands:
    """Test commands against the in-memory cache."""

    def test_lookup_brand(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "lookup", "Advil")

        assert code == 0
        assert json.loads(out)["name"] == "Ibuprofen"

    def test_lookup_rxnorm(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "lookup", "--rxnorm", "11289")

        assert code == 0
        assert json.loads(out)["name"] == "Warfarin"

    def test_lookup_unknown(self, capsys: pytest.CaptureFixture) -> None:
        code, _, err = run(capsys, "lookup", "Zyxorbital")

        assert code == 1
        assert "not found" in err

    def test_interactions(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "interactions", "Ibuprofen", "Warfarin")

        assert code == 0
        matches = json.loads(out)
        assert matches[0]["severity"] == "high"

    def test_dosage(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "dosage", "Ibuprofen", "--age", "30")

        assert code == 0
        assert len(json.loads(out)) == 2

    def test_guideline_by_icd10(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "guideline", "--icd10", "E11")

        assert code == 0
        assert json.loads(out)["condition"] == "Type 2 Diabetes Mellitus"

    def test_guideline_requires_argument(self, capsys: pytest.CaptureFixture) -> None:
        code, _, _ = run(capsys, "guideline")
        assert code == 2

    def test_beers(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "beers", "Diphenhydramine")

        assert code == 0
        result = json.loads(out)
        assert result["beers_criteria"]["is_inappropriate"] is True
        assert result["pregnancy_category"] == "B"

    def test_check(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "check", "Warfarin", "Aspirin", "--age", "72")

        assert code == 0
        types = {alert["type"] for alert in json.loads(out)}
        assert types == {"high_risk_interaction", "beers_criteria"}

    def test_evaluate_clean_history(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "evaluate", "Metformin", "--patient", "P001", "--prescription", "rx1")

        assert code == 0
        assert json.loads(out)["is_safe"] is True

    def test_stats_window(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "stats", "--days", "7")

        assert code == 0
        assert json.loads(out)["total_issues"] == 0

    def test_stats_unknown_medication(self, capsys: pytest.CaptureFixture) -> None:
        code, _, _ = run(capsys, "stats", "--medication", "Aspirin")
        assert code == 1

    def test_info(self, capsys: pytest.CaptureFixture) -> None:
        code, out, _ = run(capsys, "info")

        assert code == 0
        assert json.loads(out)["total_medications"] == 6
