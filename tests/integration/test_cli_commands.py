"""CLI tests for the `correct` and `list-steps` commands."""

from __future__ import annotations

import json
from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from typofix.cli import app
from typofix.errors import PipelineStageError

NNBSP = "\N{NARROW NO-BREAK SPACE}"
NBSP = "\N{NO-BREAK SPACE}"


def test_correct_command_writes_text_output_with_progress(tmp_path: Path) -> None:
    """Correcting a text file should print progress, a summary and write the output."""

    input_path = tmp_path / "chapitre.txt"
    input_path.write_text("Au XIVe siècle , 12345678 habitants...", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["correct", str(input_path)])

    assert result.exit_code == 0, result.output
    assert "[progress] command=correct | 1/22 step=punctuation_spacing" in result.output
    assert "[step] level=INFO step=numbers event=complete" in result.output
    assert "Total changes:" in result.output
    output_path = tmp_path / "chapitre.corrected.txt"
    assert f"Output: {output_path}" in result.output
    assert output_path.read_text(encoding="utf-8") == (
        f"Au xive siècle, 12{NNBSP}345{NNBSP}678 habitants\N{HORIZONTAL ELLIPSIS}\n"
    )


def test_correct_command_applies_config_and_flag_overrides(tmp_path: Path) -> None:
    """CLI flags should override YAML values for the run."""

    input_path = tmp_path / "doc.json"
    input_path.write_text(
        json.dumps({"stories": [{"paragraphs": [{"runs": [{"text": "Prix : 3.5 et 12345"}]}]}]}),
        encoding="utf-8",
    )
    config_path = tmp_path / "typofix.yml"
    config_path.write_text("use_decimal_comma: false\nspace_variant: fine\n", encoding="utf-8")
    out_path = tmp_path / "result.json"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "correct",
            str(input_path),
            "--config",
            str(config_path),
            "--space",
            "standard",
            "--no-group-thousands",
            "--out",
            str(out_path),
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    runs = payload["stories"][0]["paragraphs"][0]["runs"]
    assert "".join(run["text"] for run in runs) == f"Prix{NBSP}: 3.5 et 12345"
    assert payload["name"] == "doc"


def test_correct_command_reports_missing_input(tmp_path: Path) -> None:
    """A missing input file should fail at the input stage with exit code 1."""

    runner = CliRunner()

    result = runner.invoke(app, ["correct", str(tmp_path / "absent.txt")])

    assert result.exit_code == 1
    assert "correct failed at stage `input`" in result.output
    assert "Hint: Pass an existing `.json` or plain-text document path." in result.output


def test_correct_command_reports_missing_config_file(tmp_path: Path) -> None:
    """A missing `--config` path should fail at the config stage."""

    input_path = tmp_path / "doc.txt"
    input_path.write_text("texte", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        app, ["correct", str(input_path), "--config", str(tmp_path / "missing.yml")]
    )

    assert result.exit_code == 1
    assert "correct failed at stage `config`" in result.output


def test_correct_command_rejects_unknown_space_variant(tmp_path: Path) -> None:
    """Unknown space variants should fail at the options stage."""

    input_path = tmp_path / "doc.txt"
    input_path.write_text("texte", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["correct", str(input_path), "--space", "large"])

    assert result.exit_code == 1
    assert "correct failed at stage `options`" in result.output


def test_correct_command_reports_precondition_errors(tmp_path: Path) -> None:
    """Missing paragraph styles should be reported before any step runs."""

    input_path = tmp_path / "doc.txt"
    input_path.write_text("texte", encoding="utf-8")
    config_path = tmp_path / "typofix.yml"
    config_path.write_text(
        "apply_style_after_trigger: true\n"
        "trigger_paragraph_style: Titre\n"
        "target_paragraph_style: Chapeau\n",
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(app, ["correct", str(input_path), "--config", str(config_path)])

    assert result.exit_code == 1
    assert "correct failed at stage `paragraph-styles`" in result.output
    assert "[progress]" not in result.output


def test_correct_command_reports_pipeline_stage_errors(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """Stage errors raised by the pipeline should be rendered with their hint."""

    def _failing_run(*_: object, **__: object) -> None:
        """Raise a stage-specific error to simulate pipeline failure."""

        raise PipelineStageError(
            stage="styles",
            detail="Step `numbers` needs `century_style` to be selected.",
            hint="Set `century_style` in the config file or disable the step.",
        )

    monkeypatch.setattr("typofix.cli.CorrectionPipeline.run", _failing_run)
    input_path = tmp_path / "doc.txt"
    input_path.write_text("texte", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["correct", str(input_path)])

    assert result.exit_code == 1
    assert "correct failed at stage `styles`" in result.output
    assert "Hint: Set `century_style` in the config file or disable the step." in result.output


def test_list_steps_command_shows_enabled_state(tmp_path: Path) -> None:
    """Listing steps should reflect the config file toggles."""

    config_path = tmp_path / "typofix.yml"
    config_path.write_text("apply_italic_style: true\nformat_numbers: false\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["list-steps", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "14. [ on] italic_style - Apply the italic character style" in result.output
    assert "22. [off] numbers - Group thousands and format decimals" in result.output
