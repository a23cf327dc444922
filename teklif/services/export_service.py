"""Export service - funnel CSV report of proposals, one row per line item."""
import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from teklif.models import Calculation, Company, LegacyItem, MultiItem, ProposalRecord
from teklif.services.filter_service import resolve_company, resolve_company_name
from teklif.utils.formatters import date_filename, date_tr, money_2, plain_number
from teklif.utils.number_format import ZERO, first_nonzero

logger = logging.getLogger(__name__)

UNSPECIFIED_PRODUCT = 'Ürün Belirtilmemiş'
EXPORT_FILENAME_PREFIX = 'Teklif_Funnel'
CSV_MIMETYPE = 'text/csv; charset=utf-8'

FUNNEL_HEADERS = [
    "Teklif No", "Versiyon", "Tarih", "Geçerlilik Tarihi", "Teklif Durumu", "Firma", "İlgili Kişi",
    "Hazırlayan", "Ürün", "Miktar", "Birim Fiyat ($)", "Kalem Tutarı ($)",
    "Teklif Toplamı ($)", "Kalem Tutarı (TL)", "Teklif Toplamı (TL)", "Kur", "Kar Marjı (%)",
]


@dataclass(frozen=True)
class ItemFigures:
    """Monetary figures of one exported line."""

    product_name: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    total_try: Decimal
    currency_rate: Decimal
    profit_margin: Decimal


def _export_items(record: ProposalRecord):
    """
    (product name, quantity, calculation) per exported line.

    Legacy records become a single line carrying the record-level
    calculation.
    """
    if isinstance(record.body, MultiItem):
        return [(item.product_name, item.quantity, item.calculation) for item in record.body.items]
    if isinstance(record.body, LegacyItem):
        return [(record.body.product_name, record.body.quantity, record.calculation)]
    raise TypeError(f"Unknown item shape: {type(record.body).__name__}")


def item_figures(record: ProposalRecord) -> List[ItemFigures]:
    """
    Per-line amounts of a proposal.

    - line with its own suggested_price: that is the line total
    - multi-item line without a calculation: totals stay at zero, they are
      never estimated from the proposal total
    - legacy line: the proposal total

    The TL line total uses the line's exchange rate, or 1 when no rate is
    known.
    """
    record_calc = record.calculation or Calculation()
    proposal_total = record.total_amount
    figures = []

    for product_name, quantity, calc in _export_items(record):
        item_calc = calc or Calculation()

        if item_calc.suggested_price:
            total = item_calc.suggested_price
        elif not record.is_legacy:
            logger.debug(
                f"[EXPORT] Proposal {record.proposal_no}: item '{product_name}' has no calculation, "
                f"exporting zero totals"
            )
            total = ZERO
        else:
            total = proposal_total

        rate = first_nonzero(item_calc.currency_rate, record_calc.currency_rate)
        margin = first_nonzero(item_calc.profit_margin, record_calc.profit_margin)

        figures.append(ItemFigures(
            product_name=product_name or UNSPECIFIED_PRODUCT,
            quantity=quantity,
            unit_price=total / quantity,
            total=total,
            total_try=total * (rate or 1),
            currency_rate=rate,
            profit_margin=margin,
        ))

    return figures


def _contact_person(record: ProposalRecord, company: Optional[Company]) -> str:
    if record.company is not None and record.company.contact_person:
        return record.company.contact_person
    if company is not None:
        return company.contact_person
    return ''


def export_rows(records: Iterable[ProposalRecord], companies: Sequence[Company]) -> List[List[str]]:
    """Flatten proposals into funnel rows (all cells as text)."""
    rows = []

    for record in records:
        company_name = resolve_company_name(record, companies)
        contact_person = _contact_person(record, resolve_company(record, companies))
        issue_date = date_tr(record.issue_date)
        valid_until = date_tr(record.valid_until)
        proposal_total = money_2(record.total_amount)
        proposal_total_try = money_2(record.total_amount_try)

        for figures in item_figures(record):
            rows.append([
                record.proposal_no,
                record.display_version,
                issue_date,
                valid_until,
                record.effective_status.value,
                company_name,
                contact_person,
                record.preparer,
                figures.product_name,
                str(figures.quantity),
                money_2(figures.unit_price),
                money_2(figures.total),
                proposal_total,
                money_2(figures.total_try),
                proposal_total_try,
                plain_number(figures.currency_rate),
                plain_number(figures.profit_margin),
            ])

    return rows


def export_csv(records: Iterable[ProposalRecord], companies: Sequence[Company]) -> bytes:
    """
    Generate the funnel CSV.

    Header row first, then one row per line item with every cell quoted.
    Rows are separated by a newline, with none after the last row.
    Encoded as UTF-8 with a byte order mark so spreadsheet applications
    detect the encoding.

    Args:
        records: Proposals to export (usually the filtered archive list)
        companies: Company registry used to resolve names

    Returns:
        CSV payload as bytes
    """
    records = list(records)
    rows = export_rows(records, companies)

    buffer = io.StringIO()
    csv.writer(buffer, lineterminator='\n').writerow(FUNNEL_HEADERS)
    csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n').writerows(rows)

    logger.info(f"[EXPORT] Funnel CSV generated: {len(records)} proposals, {len(rows)} rows")
    text = buffer.getvalue()
    if text.endswith('\n'):
        text = text[:-1]
    return text.encode('utf-8-sig')


def export_filename(today: Optional[date] = None) -> str:
    """Download name: Teklif_Funnel_DD-MM-YYYY.csv"""
    return f"{EXPORT_FILENAME_PREFIX}_{date_filename(today)}.csv"
