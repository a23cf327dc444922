"""Filter service - archive search, filtering and company name resolution."""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from teklif.models import Company, FilterCriteria, ProposalRecord

logger = logging.getLogger(__name__)

UNSPECIFIED_COMPANY = 'Firma Belirtilmemiş'


def _matches(record: ProposalRecord, criteria: FilterCriteria, query: str) -> bool:
    if query and not (
        query in record.primary_product_name.lower()
        or query in record.proposal_no.lower()
    ):
        return False

    if criteria.company_id is not None and record.resolved_company_id != criteria.company_id:
        return False

    if criteria.preparer and record.preparer != criteria.preparer:
        return False

    if criteria.status is not None and record.effective_status != criteria.status:
        return False

    return True


def filter_proposals(records: Iterable[ProposalRecord], criteria: Optional[FilterCriteria] = None) -> List[ProposalRecord]:
    """
    Return the records matching every active criterion, in input order.

    - query: case-insensitive substring of the primary product name or the
      proposal number
    - company_id: equals the record's company id (or embedded company id)
    - preparer: exact match
    - status: equals the record status, unset counting as pending
    """
    criteria = criteria or FilterCriteria()
    query = criteria.query.lower()
    result = [record for record in records if _matches(record, criteria, query)]
    logger.debug(f"[FILTER] {len(result)} proposals matched {criteria}")
    return result


def distinct_preparers(records: Iterable[ProposalRecord]) -> Set[str]:
    """Distinct, non-empty preparer names."""
    return {record.preparer for record in records if record.preparer}


def _company_index(companies: Iterable[Company]) -> Dict:
    index = {}
    for company in companies:
        if company.id is not None:
            index.setdefault(company.id, company)
    return index


def resolve_company(record: ProposalRecord, companies: Sequence[Company]) -> Optional[Company]:
    """Look up the record's company in the company registry by id."""
    if record.company_id is None:
        return None
    return _company_index(companies).get(record.company_id)


def resolve_company_name(record: ProposalRecord, companies: Sequence[Company]) -> str:
    """
    Company display name for a proposal.

    Registry lookup by company id first, then the embedded company
    snapshot, then a placeholder. Older records carry only one of the two
    (or neither).
    """
    company = resolve_company(record, companies)
    if company is not None and company.name:
        return company.name

    if record.company is not None and record.company.name:
        return record.company.name

    return UNSPECIFIED_COMPANY


def item_summary(record: ProposalRecord) -> str:
    """Subtitle for the archive list: product name or item count."""
    if record.item_count > 1:
        return f"Çoklu Ürün ({record.item_count} Kalem)"
    return record.primary_product_name


def archive_summary(records: Sequence[ProposalRecord], filtered: Sequence[ProposalRecord]) -> dict:
    """Counts and footer/empty-state message for the archive list."""
    if not records:
        message = 'Henüz teklif oluşturulmamış.'
    elif not filtered:
        message = 'Filtrelere uygun teklif bulunamadı.'
    else:
        message = f"Toplam {len(filtered)} teklif gösteriliyor"

    return {
        'total': len(records),
        'shown': len(filtered),
        'message': message,
    }
