"""Shared typed data models for typofix.

This package contains result dataclasses used across engine modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    STEP_FAILED,
    STEP_SKIPPED,
    STEP_SUCCEEDED,
    ItemFailure,
    RuleOutcome,
    RunReport,
    StepResult,
)

__all__ = [
    "STEP_FAILED",
    "STEP_SKIPPED",
    "STEP_SUCCEEDED",
    "ItemFailure",
    "RuleOutcome",
    "RunReport",
    "StepResult",
]
