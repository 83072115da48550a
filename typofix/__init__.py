"""Top-level package for typofix.

This package applies French typographic conventions (spacing, dashes, ordinal
and century numerals, digit grouping, punctuation) to structured documents.
The main orchestration entry point is `CorrectionPipeline`.
"""

from .config import ConfigLoader, CorrectionOptions
from .pipeline import CorrectionPipeline

__all__ = ["ConfigLoader", "CorrectionOptions", "CorrectionPipeline", "__version__"]

__version__ = "0.1.0"
