"""Transformer module for record normalization and EPS enrichment.

Submodules
----------
normalizer
    Schema check of raw MOPS records and conversion to AnnouncementRecord,
    including fiscal year/quarter parsing from the announcement title.
eps_merger
    Exact-match join of EPS figures onto announcement records.
"""

from mops_reports.transformer.eps_merger import build_eps_index, merge_eps, unique_company_codes
from mops_reports.transformer.normalizer import (
    REQUIRED_FIELDS,
    match_subject,
    normalize,
    normalize_batch,
    parse_subject,
    validate_raw_record,
)

__all__ = [
    "REQUIRED_FIELDS",
    "build_eps_index",
    "match_subject",
    "merge_eps",
    "normalize",
    "normalize_batch",
    "parse_subject",
    "unique_company_codes",
    "validate_raw_record",
]
