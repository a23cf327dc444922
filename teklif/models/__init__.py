"""Models package - exports the proposal archive data model."""
from teklif.models.identifiers import Identifier, normalize_id, clean_text
from teklif.models.status import ProposalStatus
from teklif.models.company import Company
from teklif.models.proposal import (
    Calculation, LineItem, LegacyItem, MultiItem, ItemShape, ProposalRecord, DEFAULT_VERSION
)
from teklif.models.filter_criteria import FilterCriteria

__all__ = [
    'Identifier', 'normalize_id', 'clean_text',
    'ProposalStatus',
    'Company',
    'Calculation', 'LineItem', 'LegacyItem', 'MultiItem', 'ItemShape', 'ProposalRecord', 'DEFAULT_VERSION',
    'FilterCriteria',
]
