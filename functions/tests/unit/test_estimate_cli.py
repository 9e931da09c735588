"""Unit tests for the command-line estimate tool."""

import json

import pytest

from scripts.estimate_cli import build_parser, main


DECK_ARGS = [
    "-f", "deckLength=20",
    "-f", "deckWidth=12",
    "-f", "deckCondition=good",
    "-f", "stainType=semi-transparent",
]


class TestEstimateCli:
    """CLI subcommands."""

    def test_templates(self, capsys):
        assert main(["templates"]) == 0

        out = capsys.readouterr().out
        assert "deck-refresh" in out
        assert "pressure-washing" in out

    def test_estimate_json(self, capsys):
        assert main(["estimate", "deck-refresh", *DECK_ARGS, "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["estimate"]["total"] == 1275
        assert payload["estimate"]["materialCost"] == 1150

    def test_estimate_json_with_pricing(self, capsys):
        assert main(["estimate", "deck-refresh", *DECK_ARGS, "--json", "--pricing"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["pricing"]["contractor-1"]["total"] == 5252

    def test_form_file(self, tmp_path, capsys, firepit_form):
        form_file = tmp_path / "firepit.json"
        form_file.write_text(json.dumps(firepit_form))

        assert main(["estimate", "firepit", "--form-file", str(form_file), "--json"]) == 0

        assert json.loads(capsys.readouterr().out)["estimate"]["total"] == 1725

    def test_strict_rejects_invalid_form(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["estimate", "deck-refresh", "-f", "deckLength=20", "--strict"])

        assert exc_info.value.code == 2
        assert "is required" in capsys.readouterr().err

    def test_unknown_template_exit_code(self, capsys):
        assert main(["estimate", "kitchen-remodel", "--json"]) == 1

        assert "TEMPLATE_NOT_FOUND" in capsys.readouterr().err

    def test_quotes_without_contractors(self, capsys):
        assert main(["quotes", "deck-refresh", *DECK_ARGS]) == 2

        assert "select at least one contractor" in capsys.readouterr().err

    def test_quotes(self, capsys):
        assert main(["quotes", "deck-refresh", *DECK_ARGS, "-c", "contractor-1", "--seed", "7"]) == 0

        assert "contractor-1" in capsys.readouterr().out

    def test_payout_by_tier(self, capsys):
        assert main(["payout", "1000", "--tier", "bronze"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload == {"commissionRate": 25, "platformCommission": 250, "technicianPayout": 750}

    def test_payout_requires_rate(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["payout", "1000"])
