"""
Mail service - composes mailto: links for sending a proposal to the customer.
The message itself is sent from the user's mail client.
"""
import logging
from typing import Sequence
from urllib.parse import quote

from teklif.models import Company, ProposalRecord
from teklif.services.filter_service import resolve_company
from teklif.utils.formatters import date_tr, money_us

logger = logging.getLogger(__name__)

# characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"

BODY_TEMPLATE = (
    "Sayın {contact},\n\n"
    "Ek'te {number} numaralı teklifimizi bulabilirsiniz.\n\n"
    "Teklif Özeti:\n"
    "- Teklif No: {number}\n"
    "- Tarih: {date}\n"
    "- Tutar: ${amount}\n\n"
    "Sorularınız için lütfen bizimle iletişime geçin.\n\n"
    "Saygılarımızla,\n"
    "{signature}"
)


def _recipient(record: ProposalRecord, companies: Sequence[Company]) -> str:
    if record.company is not None and record.company.email:
        return record.company.email
    company = resolve_company(record, companies)
    return company.email if company is not None else ''


def _contact(record: ProposalRecord, companies: Sequence[Company]) -> str:
    if record.company is not None and record.company.contact_person:
        return record.company.contact_person
    company = resolve_company(record, companies)
    if company is not None and company.contact_person:
        return company.contact_person
    return 'Yetkili'


def compose_subject(record: ProposalRecord) -> str:
    return f"Teklif: {record.proposal_no} {record.version}"


def compose_body(record: ProposalRecord, companies: Sequence[Company]) -> str:
    return BODY_TEMPLATE.format(
        contact=_contact(record, companies),
        number=f"{record.proposal_no} {record.version}",
        date=date_tr(record.issue_date),
        amount=money_us(record.total_amount),
        signature=record.prepared_by_name or record.preparer,
    )


def compose_mailto(record: ProposalRecord, companies: Sequence[Company]) -> str:
    """
    Build a mailto: URL addressed to the proposal's company.

    Args:
        record: Proposal to send
        companies: Company registry, used when the proposal has no
            embedded company e-mail/contact

    Returns:
        mailto:<recipient>?subject=...&body=...
    """
    recipient = _recipient(record, companies)
    if not recipient:
        logger.debug(f"[MAIL] Proposal {record.proposal_no} has no company e-mail")

    subject = quote(compose_subject(record), safe=_URI_COMPONENT_SAFE)
    body = quote(compose_body(record, companies), safe=_URI_COMPONENT_SAFE)
    return f"mailto:{recipient}?subject={subject}&body={body}"
