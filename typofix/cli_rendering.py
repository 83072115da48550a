"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
step plans and per-step change summaries.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .config import CorrectionOptions
from .errors import PipelineStageError
from .models.datatypes import STEP_FAILED, STEP_SKIPPED, RunReport
from .pipeline.steps import StepPlan


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_run_summary(report: RunReport) -> None:
    """Print per-step change counts, failed steps and the run total."""

    for step in report.steps:
        if step.status == STEP_SKIPPED:
            continue
        if step.status == STEP_FAILED:
            typer.secho(
                f"{step.step}: failed ({step.error})",
                fg=typer.colors.YELLOW,
                err=True,
            )
            continue
        line = f"{step.step}: {step.changes} change(s)"
        if step.failures:
            line += f", {len(step.failures)} item failure(s)"
        typer.echo(line)
    typer.echo(f"Total changes: {report.total_changes}")
    if report.failed_steps:
        names = ", ".join(step.step for step in report.failed_steps)
        typer.secho(f"Failed steps: {names}", fg=typer.colors.YELLOW, err=True)


def echo_step_plan(plan: StepPlan, options: CorrectionOptions) -> None:
    """Print the step order with the enabled state of each step."""

    for index, step in enumerate(plan, start=1):
        state = "on" if step.is_enabled(options) else "off"
        typer.echo(f"{index:>2}. [{state:>3}] {step.name} - {step.description}")
