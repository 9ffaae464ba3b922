"""Spacing rule for full-width (Japanese) and half-width (Latin/digit) text."""

from ja_space_around_phrase.boundary import check_boundary, check_text
from ja_space_around_phrase.characters import is_full_width, is_symbol
from ja_space_around_phrase.links import (
    LinkExtraction,
    check_link,
    extract_url_or_email,
    is_auto_link,
)
from ja_space_around_phrase.rule import lint_markdown, lint_text
from ja_space_around_phrase.schemas import (
    RULE_ID,
    LintConfig,
    LintMessage,
    LintResult,
    NodeType,
    TxtNode,
    Violation,
)
from ja_space_around_phrase.sequences import Sequence, find_half_width_sequences

__all__ = [
    "RULE_ID",
    "LinkExtraction",
    "LintConfig",
    "LintMessage",
    "LintResult",
    "NodeType",
    "Sequence",
    "TxtNode",
    "Violation",
    "check_boundary",
    "check_link",
    "check_text",
    "extract_url_or_email",
    "find_half_width_sequences",
    "is_auto_link",
    "is_full_width",
    "is_symbol",
    "lint_markdown",
    "lint_text",
]
