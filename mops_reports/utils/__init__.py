"""Shared utility functions for mops_reports package."""

from mops_reports.utils.roc_calendar import (
    ROC_EPOCH_OFFSET,
    gregorian_year_to_roc,
    parse_roc_date,
    parse_roc_timestamp,
    roc_year_to_gregorian,
    to_roc_date,
)

__all__ = [
    "ROC_EPOCH_OFFSET",
    "gregorian_year_to_roc",
    "parse_roc_date",
    "parse_roc_timestamp",
    "roc_year_to_gregorian",
    "to_roc_date",
]
