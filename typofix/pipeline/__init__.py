"""typofix pipeline package.

This package contains the step plan and the orchestrator that runs correction
steps against one document.
"""

from .orchestrator import CorrectionPipeline
from .steps import DEFAULT_STEPS, CorrectionStep, StepPlan, build_default_plan

__all__ = [
    "CorrectionPipeline",
    "CorrectionStep",
    "DEFAULT_STEPS",
    "StepPlan",
    "build_default_plan",
]
