"""
Unit tests for the funnel CSV export.
"""

import csv
import io
from datetime import date
from decimal import Decimal

from teklif.models import ProposalRecord
from teklif.services.export_service import (
    FUNNEL_HEADERS,
    UNSPECIFIED_PRODUCT,
    export_csv,
    export_filename,
    export_rows,
    item_figures,
)


def _parse(payload: bytes):
    return list(csv.reader(io.StringIO(payload.decode('utf-8-sig'))))


class TestItemFigures:
    """Tests for per-line monetary figures."""

    def test_legacy_record_uses_proposal_total(self):
        record = ProposalRecord.from_dict({
            'proposalNo': 'TF-001', 'items': [], 'quantity': 2, 'totalPrice': 100, 'totalPriceTry': 3200
        })
        [figures] = item_figures(record)

        assert figures.quantity == 2
        assert figures.unit_price == Decimal('50')
        assert figures.total == Decimal('100')
        # no rate known: TL line total uses a rate of 1
        assert figures.total_try == Decimal('100')
        assert figures.currency_rate == 0

    def test_multi_item_without_calculation_is_zero(self):
        record = ProposalRecord.from_dict({
            'proposalNo': 'TF-010',
            'totalPrice': 500,
            'items': [
                {'product': {'name': 'A'}, 'quantity': 1, 'calculation': {'suggested_price': 10, 'currency_rate': 30}},
                {'product': {'name': 'B'}, 'quantity': 1},
            ],
        })
        first, second = item_figures(record)

        assert (first.total, first.total_try) == (Decimal('10'), Decimal('300'))
        assert (second.total, second.unit_price, second.total_try) == (0, 0, 0)

    def test_item_calculation_divided_by_quantity(self):
        record = ProposalRecord.from_dict({
            'proposalNo': 'X',
            'items': [{'product': {'name': 'A'}, 'quantity': 4, 'calculation': {'suggested_price': 100}}],
        })
        [figures] = item_figures(record)

        assert figures.unit_price == Decimal('25')

    def test_rate_and_margin_fall_back_to_record_calculation(self):
        record = ProposalRecord.from_dict({
            'proposalNo': 'X',
            'calculation': {'currency_rate': 32.5, 'profit_margin': 15},
            'items': [{'product': {'name': 'A'}, 'calculation': {'suggested_price': 2}}],
        })
        [figures] = item_figures(record)

        assert figures.currency_rate == Decimal('32.5')
        assert figures.profit_margin == Decimal('15')
        assert figures.total_try == Decimal('65.0')

    def test_missing_product_name(self):
        record = ProposalRecord.from_dict({'proposalNo': 'X', 'totalPrice': 1})
        assert item_figures(record)[0].product_name == UNSPECIFIED_PRODUCT


class TestExportRows:
    """Tests for export_rows."""

    def test_legacy_scenario(self, proposals, companies):
        [row] = export_rows([proposals[0]], companies)

        assert row == [
            'TF-001', 'v1.0', '05.01.2025', '20.01.2025', 'Bekliyor', 'Anadolu Makina', 'Ayşe Yılmaz',
            'Ali', 'Pompa', '2', '50.00', '100.00', '100.00', '100.00', '3200.00', '0', '0',
        ]

    def test_multi_item_scenario(self, proposals, companies):
        first, second = export_rows([proposals[1]], companies)

        assert first[8:] == ['A', '1', '10.00', '10.00', '10.00', '300.00', '300.00', '30', '0']
        assert second[8:] == ['B', '1', '0.00', '0.00', '10.00', '0.00', '300.00', '0', '0']
        # proposal-level columns repeat on every line
        assert first[:8] == second[:8]
        assert first[5] == 'Ege Tekstil (eski)'
        assert first[6] == 'Mehmet Kaya'

    def test_legacy_with_calculation(self, proposals, companies):
        [row] = export_rows([proposals[2]], companies)

        assert row[4] == 'Bekliyor'
        assert row[5] == 'Firma Belirtilmemiş'
        assert row[6] == ''
        assert row[10:] == ['250.00', '250.00', '250.00', '8750.00', '8750.00', '35', '20']

    def test_missing_dates_render_dash(self):
        record = ProposalRecord.from_dict({'proposalNo': 'X'})
        [row] = export_rows([record], [])

        assert row[2:4] == ['-', '-']

    def test_row_count_is_sum_of_items(self, proposals, companies):
        rows = export_rows(proposals, companies)
        assert len(rows) == sum(record.item_count for record in proposals) == 4


class TestExportCsv:
    """Tests for export_csv."""

    def test_starts_with_bom(self, proposals, companies):
        payload = export_csv(proposals, companies)
        assert payload.startswith(b'\xef\xbb\xbf')

    def test_header_and_rows(self, proposals, companies):
        parsed = _parse(export_csv(proposals, companies))

        assert parsed[0] == FUNNEL_HEADERS
        assert len(FUNNEL_HEADERS) == 17
        assert len(parsed) == 1 + 4
        assert all(len(row) == 17 for row in parsed)

    def test_data_cells_are_quoted(self, proposals, companies):
        lines = export_csv([proposals[0]], companies).decode('utf-8-sig').split('\n')

        assert lines[0].startswith('Teklif No,Versiyon,')
        assert lines[1].startswith('"TF-001","v1.0","05.01.2025"')

    def test_embedded_quotes_are_escaped(self, companies):
        record = ProposalRecord.from_dict({'proposalNo': 'X', 'product': {'name': '3/4" Vana'}, 'totalPrice': 5})
        parsed = _parse(export_csv([record], companies))

        assert parsed[1][8] == '3/4" Vana'

    def test_deterministic(self, proposals, companies):
        assert export_csv(proposals, companies) == export_csv(proposals, companies)

    def test_empty_export_has_header_only(self, companies):
        parsed = _parse(export_csv([], companies))
        assert parsed == [FUNNEL_HEADERS]

    def test_no_newline_after_last_row(self, proposals, companies):
        text = export_csv(proposals, companies).decode('utf-8-sig')

        assert not text.endswith('\n')
        assert text.endswith('"20"')
        assert text.count('\n') == 4
        assert not export_csv([], companies).endswith(b'\n')

    def test_accepts_any_iterable(self, proposals, companies):
        payload = export_csv((record for record in proposals), companies)
        assert payload == export_csv(proposals, companies)

    def test_huge_amounts_do_not_abort_export(self, proposals, companies):
        huge = ProposalRecord.from_dict({'proposalNo': 'X', 'totalPrice': 1e30, 'totalPriceTry': 1e30})
        parsed = _parse(export_csv([huge] + proposals, companies))

        amount = '1' + '0' * 30 + '.00'
        assert parsed[1][0] == 'X'
        assert parsed[1][10:15] == [amount, amount, amount, amount, amount]
        assert len(parsed) == 1 + 5


class TestExportFilename:
    """Tests for export_filename."""

    def test_filename_uses_hyphenated_date(self):
        assert export_filename(date(2025, 3, 7)) == 'Teklif_Funnel_07-03-2025.csv'
