"""Exact-match join of EPS figures onto announcement records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mops_reports.types import EnrichedRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from mops_reports.types import AnnouncementRecord, EPSRecord


def unique_company_codes(records: Iterable[AnnouncementRecord]) -> list[str]:
    """Return distinct company codes in first-seen order."""
    return list(dict.fromkeys(record.company_code for record in records))


def build_eps_index(
    eps_by_company: Mapping[str, Iterable[EPSRecord]],
) -> dict[tuple[str, int, int], float]:
    """Index EPS values by ``(company_code, fiscal_year, fiscal_period)``.

    When a company reports the same quarter twice the first entry wins.
    """
    index: dict[tuple[str, int, int], float] = {}
    for company_code, eps_records in eps_by_company.items():
        for eps in eps_records:
            index.setdefault((company_code, eps.fiscal_year, eps.fiscal_period), eps.eps_value)
    return index


def merge_eps(
    records: Iterable[AnnouncementRecord],
    eps_by_company: Mapping[str, Iterable[EPSRecord]],
) -> list[EnrichedRecord]:
    """Attach the matching EPS value to each record.

    Parameters
    ----------
    records
        Announcement records, typically the full persisted store.
    eps_by_company
        EPS history keyed by company code.

    Returns
    -------
    list[EnrichedRecord]
        One entry per input record, in input order. ``eps`` stays ``None``
        when the fiscal period is unparsed or no EPS record matches exactly.
    """
    index = build_eps_index(eps_by_company)

    enriched: list[EnrichedRecord] = []
    for record in records:
        quarter = record.quarter
        eps = None
        if quarter is not None:
            eps = index.get((record.company_code, record.fiscal_year, quarter))
        enriched.append(EnrichedRecord(record=record, eps=eps))
    return enriched
