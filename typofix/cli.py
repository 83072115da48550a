"""Command-line interface for typofix.

Responsibilities:
- Expose user-facing commands for correction runs and step listing.
- Convert CLI arguments and YAML config into `CorrectionOptions`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_run_summary, echo_step_plan, exit_with_command_error
from .config import ConfigLoader, CorrectionOptions, SpaceVariant
from .document.model import Document
from .errors import PipelineStageError
from .io.documents import OUTPUT_FORMATS, load_document, save_document
from .parsing import normalize_optional_string
from .pipeline import CorrectionPipeline
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="typofix",
    no_args_is_help=True,
    help="French typographic correction CLI.",
)


class CorrectionProgressIndicator:
    """Render deterministic per-step progress lines."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_step_start(self, step_name: str, step_index: int, step_total: int) -> None:
        """Print one progress line for a step start transition."""

        spinner = self._SPINNER_FRAMES[(step_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {step_index}/{step_total} step={step_name}"
        )


def _load_yaml_config(config_path: Path | None) -> CorrectionOptions:
    """Load options from a YAML file, or defaults, mapping failures to stage errors."""

    if config_path is None:
        return CorrectionOptions()

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _resolve_options(
    config_file: Path | None,
    space: str | None,
    thousands_separator: str | None,
    decimal_comma: bool | None,
    group_thousands: bool | None,
) -> CorrectionOptions:
    """Resolve effective options from YAML values and explicit CLI overrides."""

    options = _load_yaml_config(config_file)
    try:
        return options.with_overrides(
            space_variant=(
                SpaceVariant.parse(space, "--space") if space is not None else None
            ),
            thousands_separator=(
                SpaceVariant.parse(thousands_separator, "--thousands-separator")
                if thousands_separator is not None
                else None
            ),
            use_decimal_comma=decimal_comma,
            insert_thousands_separators=group_thousands,
        )
    except ValueError as exc:
        raise PipelineStageError(
            stage="options",
            detail=str(exc),
            hint="Use `fine` or `standard` for space options.",
        ) from exc


def _resolve_output(
    input_path: Path, out: Path | None, output_format: str | None
) -> tuple[Path, str]:
    """Resolve output path and format from the input file and CLI flags."""

    resolved_format = normalize_optional_string(output_format)
    if resolved_format is None:
        resolved_format = "json" if input_path.suffix.lower() == ".json" else "text"
    resolved_format = resolved_format.lower()
    if resolved_format not in OUTPUT_FORMATS:
        raise PipelineStageError(
            stage="output",
            detail=f"Unsupported output format `{resolved_format}`.",
            hint=f"Use one of: {', '.join(OUTPUT_FORMATS)}.",
        )
    if out is not None:
        return out, resolved_format
    suffix = ".json" if resolved_format == "json" else ".txt"
    return input_path.with_name(f"{input_path.stem}.corrected{suffix}"), resolved_format


def _load_input(input_path: Path) -> Document:
    """Load the input document, mapping failures to stage errors."""

    try:
        return load_document(input_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="input",
            detail=f"Input document not found: `{input_path}`.",
            hint="Pass an existing `.json` or plain-text document path.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="input",
            detail=str(exc),
            hint="Check the document JSON structure and style references.",
        ) from exc


@app.command("correct")
def correct_command(
    input_path: Annotated[
        Path,
        typer.Argument(help="Path to a `.json` document or a UTF-8 plain-text file."),
    ],
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Output path (defaults to `<input>.corrected.<ext>`)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with correction options."),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", help="Output format: `json` or `text`."),
    ] = None,
    space: Annotated[
        str | None,
        typer.Option("--space", help="Non-breaking space variant: `fine` or `standard`."),
    ] = None,
    thousands_separator: Annotated[
        str | None,
        typer.Option(
            "--thousands-separator",
            help="Digit group separator variant: `fine` or `standard`.",
        ),
    ] = None,
    decimal_comma: Annotated[
        bool | None,
        typer.Option(
            "--decimal-comma/--no-decimal-comma",
            help="Write decimals with a comma.",
        ),
    ] = None,
    group_thousands: Annotated[
        bool | None,
        typer.Option(
            "--group-thousands/--no-group-thousands",
            help="Insert separators between digit groups.",
        ),
    ] = None,
) -> None:
    """Run the correction pipeline on one document."""

    try:
        options = _resolve_options(
            config_file=config_file,
            space=space,
            thousands_separator=thousands_separator,
            decimal_comma=decimal_comma,
            group_thousands=group_thousands,
        )
        output_path, resolved_format = _resolve_output(input_path, out, output_format)
        document = _load_input(input_path)
        progress = CorrectionProgressIndicator(command_name="correct")
        pipeline = CorrectionPipeline(
            run_logger=RunLogger(),
            step_progress_callback=progress.on_step_start,
        )
        report = pipeline.run(document, options)
        written = save_document(document, output_path, resolved_format)
    except Exception as exc:
        exit_with_command_error("correct", exc)

    echo_run_summary(report)
    typer.echo(f"Output: {written}")


@app.command("list-steps")
def list_steps_command(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with correction options."),
    ] = None,
) -> None:
    """List correction steps in execution order with their enabled state."""

    try:
        options = _load_yaml_config(config_file)
        plan = CorrectionPipeline().plan
    except Exception as exc:
        exit_with_command_error("list-steps", exc)

    echo_step_plan(plan, options)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
