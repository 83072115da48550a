"""Pattern rule execution and span protection."""

from .executor import (
    FootnoteScope,
    PatternRule,
    RuleScope,
    TextMatch,
    apply_rule,
    compile_rule,
    expand_template,
    iter_flows,
)
from .protection import MASK_CHARACTER, ProtectedSpan, ProtectionTable

__all__ = [
    "MASK_CHARACTER",
    "FootnoteScope",
    "PatternRule",
    "ProtectedSpan",
    "ProtectionTable",
    "RuleScope",
    "TextMatch",
    "apply_rule",
    "compile_rule",
    "expand_template",
    "iter_flows",
]
