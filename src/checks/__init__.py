"""Structural checks run over the raw submission."""
from checks.conformance import (
    check_conformance,
    find_list_content_defect,
    is_list_content_defect,
    rejected_markup_diagnostic,
    resolve_rules,
)
from checks.placement import check_placement

__all__ = [
    "check_conformance",
    "find_list_content_defect",
    "is_list_content_defect",
    "rejected_markup_diagnostic",
    "resolve_rules",
    "check_placement",
]
