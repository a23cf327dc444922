"""Proposal (teklif) model and its line items."""
import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Tuple, Union

from teklif.models.company import Company
from teklif.models.identifiers import Identifier, clean_text, normalize_id
from teklif.models.status import ProposalStatus
from teklif.utils.formatters import parse_date
from teklif.utils.number_format import ZERO, first_nonzero, to_decimal, to_int, to_quantity

logger = logging.getLogger(__name__)

DEFAULT_VERSION = 'v1.0'


@dataclass(frozen=True)
class Calculation:
    """
    Pricing calculation attached to a proposal or to one of its items.

    suggested_price is in the primary currency (USD), price_try in TL.
    """

    suggested_price: Decimal = ZERO
    price_try: Decimal = ZERO
    currency_rate: Decimal = ZERO
    profit_margin: Decimal = ZERO

    @classmethod
    def from_dict(cls, data) -> Optional['Calculation']:
        if not isinstance(data, dict):
            return None
        return cls(
            suggested_price=to_decimal(data.get('suggested_price')),
            price_try=to_decimal(data.get('price_try')),
            currency_rate=to_decimal(data.get('currency_rate')),
            profit_margin=to_decimal(data.get('profit_margin')),
        )


@dataclass(frozen=True)
class LineItem:
    """One product line within a multi-item proposal."""

    product_name: str = ''
    quantity: int = 1
    calculation: Optional[Calculation] = None
    price: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: dict) -> 'LineItem':
        product = data.get('product')
        return cls(
            product_name=clean_text(product.get('name')) if isinstance(product, dict) else '',
            quantity=to_quantity(data.get('quantity')),
            calculation=Calculation.from_dict(data.get('calculation')),
            price=to_decimal(data.get('price')),
        )


@dataclass(frozen=True)
class LegacyItem:
    """
    Single-item fields stored directly on proposals created before
    multi-item support.
    """

    product_name: str = ''
    quantity: int = 1


@dataclass(frozen=True)
class MultiItem:
    """Non-empty, ordered sequence of line items."""

    items: Tuple[LineItem, ...]


ItemShape = Union[LegacyItem, MultiItem]


@dataclass(frozen=True)
class ProposalRecord:
    """
    Proposal (Teklif).

    Built once from the stored editor document with from_dict(); ids are
    normalized and amounts converted to Decimal on the way in. The stored
    document is kept in ``raw`` so to_dict() can write it back untouched
    apart from the fields this application mutates.
    """

    id: Optional[Identifier]
    proposal_no: str
    body: ItemShape
    version: str = ''
    issue_date: Optional[date] = None
    validity_days: Optional[int] = None
    status: Optional[ProposalStatus] = None
    preparer: str = ''
    prepared_by_name: str = ''
    company_id: Optional[Identifier] = None
    company: Optional[Company] = None
    calculation: Optional[Calculation] = None
    total_price: Decimal = ZERO
    total_price_try: Decimal = ZERO
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict) -> 'ProposalRecord':
        items = tuple(
            LineItem.from_dict(item) for item in (data.get('items') or []) if isinstance(item, dict)
        )
        if items:
            body = MultiItem(items=items)
        else:
            product = data.get('product')
            body = LegacyItem(
                product_name=clean_text(product.get('name')) if isinstance(product, dict) else '',
                quantity=to_quantity(data.get('quantity')),
            )

        prepared_by = data.get('preparedBy')

        return cls(
            id=normalize_id(data.get('id')),
            proposal_no=clean_text(data.get('proposalNo')),
            body=body,
            version=clean_text(data.get('version')),
            issue_date=parse_date(data.get('date')),
            validity_days=to_int(data.get('validityDays')),
            status=_ingest_status(data.get('status'), data.get('proposalNo')),
            preparer=clean_text(data.get('preparer')),
            prepared_by_name=clean_text(prepared_by.get('name')) if isinstance(prepared_by, dict) else '',
            company_id=normalize_id(data.get('companyId')),
            company=Company.from_dict(data.get('company')),
            calculation=Calculation.from_dict(data.get('calculation')),
            total_price=to_decimal(data.get('totalPrice')),
            total_price_try=to_decimal(data.get('totalPriceTry')),
            raw=dict(data),
        )

    def to_dict(self) -> dict:
        """Stored document shape, with the current status."""
        data = dict(self.raw)
        if self.status is not None:
            data['status'] = self.status.value
        return data

    def with_status(self, status: ProposalStatus) -> 'ProposalRecord':
        return replace(self, status=status)

    @property
    def is_legacy(self) -> bool:
        return isinstance(self.body, LegacyItem)

    @property
    def effective_status(self) -> ProposalStatus:
        return self.status or ProposalStatus.default()

    @property
    def display_version(self) -> str:
        return self.version or DEFAULT_VERSION

    @property
    def primary_product_name(self) -> str:
        if isinstance(self.body, LegacyItem):
            return self.body.product_name
        if self.body.items:
            return self.body.items[0].product_name
        return ''

    @property
    def item_count(self) -> int:
        if isinstance(self.body, LegacyItem):
            return 1
        return len(self.body.items)

    @property
    def resolved_company_id(self) -> Optional[Identifier]:
        if self.company_id is not None:
            return self.company_id
        if self.company is not None:
            return self.company.id
        return None

    @property
    def total_amount(self) -> Decimal:
        """Proposal total in the primary currency."""
        calc = self.calculation or Calculation()
        return first_nonzero(self.total_price, calc.suggested_price)

    @property
    def total_amount_try(self) -> Decimal:
        """Proposal total in TL."""
        calc = self.calculation or Calculation()
        return first_nonzero(self.total_price_try, calc.price_try)

    @property
    def valid_until(self) -> Optional[date]:
        if self.issue_date is None or self.validity_days is None:
            return None
        try:
            return self.issue_date + timedelta(days=self.validity_days)
        except OverflowError:
            return None

    def __repr__(self):
        return (
            f"<ProposalRecord(id={self.id!r}, no='{self.proposal_no}', "
            f"status='{self.effective_status.value}', items={self.item_count})>"
        )


def _ingest_status(value, proposal_no) -> Optional[ProposalStatus]:
    try:
        return ProposalStatus.parse(value)
    except ValueError:
        logger.warning(f"[ARCHIVE] Unknown status {value!r} on proposal {proposal_no}, treating as pending")
        return None
