"""Filter criteria for the proposal archive list."""
from dataclasses import dataclass
from typing import Mapping, Optional

from teklif.exceptions import BusinessLogicError
from teklif.models.identifiers import Identifier, clean_text, normalize_id
from teklif.models.status import ProposalStatus


@dataclass(frozen=True)
class FilterCriteria:
    """
    Transient filter values for one filtering pass.

    Empty fields match everything.
    """

    query: str = ''
    company_id: Optional[Identifier] = None
    preparer: str = ''
    status: Optional[ProposalStatus] = None

    @classmethod
    def from_args(cls, args: Mapping) -> 'FilterCriteria':
        """
        Build criteria from request/CLI arguments: q, company, preparer, status.

        Raises:
            BusinessLogicError: If status is not a known proposal status
        """
        try:
            status = ProposalStatus.parse(args.get('status'))
        except ValueError:
            raise BusinessLogicError(f"Geçersiz teklif durumu: {args.get('status')}")

        return cls(
            query=clean_text(args.get('q')),
            company_id=normalize_id(args.get('company')),
            preparer=clean_text(args.get('preparer')),
            status=status,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.query or self.company_id is not None or self.preparer or self.status)
