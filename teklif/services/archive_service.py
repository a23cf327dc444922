"""
Archive service - in-memory proposal archive.

Holds the proposals and companies produced by the proposal editor. The
archive can be seeded from a JSON document
``{"proposals": [...], "companies": [...]}`` and written back to it after
a status change or deletion.
"""
import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from teklif.exceptions import BusinessLogicError, NotFoundError
from teklif.models import Company, ProposalRecord, ProposalStatus, normalize_id

logger = logging.getLogger(__name__)


class ProposalArchive:
    """Proposal and company collections, plus the two mutations the archive view requests."""

    def __init__(self, proposals=None, companies=None, path: Optional[Union[str, Path]] = None):
        self._proposals: List[ProposalRecord] = list(proposals or [])
        self._companies: List[Company] = list(companies or [])
        self.path = Path(path) if path else None

    @classmethod
    def from_dict(cls, document: dict, path=None) -> 'ProposalArchive':
        proposals = []
        for data in document.get('proposals') or []:
            if not isinstance(data, dict):
                logger.warning(f"[ARCHIVE] Skipping malformed proposal entry: {data!r}")
                continue
            proposals.append(ProposalRecord.from_dict(data))

        companies = []
        for data in document.get('companies') or []:
            company = Company.from_dict(data)
            if company is None:
                logger.warning(f"[ARCHIVE] Skipping malformed company entry: {data!r}")
                continue
            companies.append(company)

        return cls(proposals, companies, path=path)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'ProposalArchive':
        """
        Load an archive document from disk.

        A missing file gives an empty archive bound to that path.
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"[ARCHIVE] {path} not found, starting with an empty archive")
            return cls(path=path)

        document = json.loads(path.read_text(encoding='utf-8'))
        archive = cls.from_dict(document, path=path)
        logger.info(
            f"[ARCHIVE] Loaded {len(archive.proposals)} proposals and "
            f"{len(archive.companies)} companies from {path}"
        )
        return archive

    @property
    def proposals(self) -> List[ProposalRecord]:
        return list(self._proposals)

    @property
    def companies(self) -> List[Company]:
        return list(self._companies)

    def _index_of(self, proposal_id) -> int:
        key = normalize_id(proposal_id)
        for index, record in enumerate(self._proposals):
            if record.id == key:
                return index
        raise NotFoundError(f'Teklif {proposal_id} bulunamadı.')

    def get(self, proposal_id) -> ProposalRecord:
        return self._proposals[self._index_of(proposal_id)]

    def update_status(self, proposal_id, status) -> ProposalRecord:
        """
        Change a proposal's status.

        Raises:
            NotFoundError: If the proposal does not exist
            BusinessLogicError: If status is empty or not a known status
        """
        try:
            new_status = ProposalStatus.parse(status)
        except ValueError:
            raise BusinessLogicError(f'Geçersiz teklif durumu: {status}')
        if new_status is None:
            raise BusinessLogicError('Teklif durumu gerekli.')

        index = self._index_of(proposal_id)
        record = self._proposals[index].with_status(new_status)
        self._proposals[index] = record
        self.save()

        logger.info(f"[ARCHIVE] Proposal {record.proposal_no} status -> {new_status.value}")
        return record

    def delete(self, proposal_id, confirmed: bool = False) -> ProposalRecord:
        """
        Remove a proposal. Irreversible, so the caller must pass the user's
        confirmation.

        Raises:
            BusinessLogicError: If the deletion was not confirmed
            NotFoundError: If the proposal does not exist
        """
        if not confirmed:
            raise BusinessLogicError('Bu teklifi silmek istediğinizden emin misiniz? Silme işlemi onaylanmadı.')

        index = self._index_of(proposal_id)
        record = self._proposals.pop(index)
        self.save()

        logger.info(f"[ARCHIVE] Proposal {record.proposal_no} (id={record.id}) deleted")
        return record

    def to_dict(self) -> dict:
        return {
            'proposals': [record.to_dict() for record in self._proposals],
            'companies': [company.to_dict() for company in self._companies],
        }

    def save(self) -> None:
        """Write the archive back to its JSON file, if it has one."""
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self.to_dict(), ensure_ascii=False, indent=2, default=str),
            encoding='utf-8'
        )
