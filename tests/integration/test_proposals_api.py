"""
Integration tests for the proposals blueprint.
"""

import csv
import io
from datetime import date
from urllib.parse import unquote


class TestArchiveList:
    """Test the archive list endpoint."""

    def test_list_all(self, client):
        response = client.get('/proposals/')

        assert response.status_code == 200
        data = response.get_json()
        assert [p['proposal_no'] for p in data['proposals']] == ['TF-001', 'TF-002', 'TF-003']
        assert data['preparers'] == ['Ali', 'Zeynep']
        assert data['summary'] == {'total': 3, 'shown': 3, 'message': 'Toplam 3 teklif gösteriliyor'}
        assert len(data['statuses']) == 5

    def test_list_serialization(self, client):
        data = client.get('/proposals/').get_json()
        first, second = data['proposals'][:2]

        assert first['company'] == 'Anadolu Makina'
        assert first['date'] == '05.01.2025'
        assert first['status'] == 'Bekliyor'
        assert first['total_price'] == '100.00'
        assert second['summary'] == 'Çoklu Ürün (2 Kalem)'
        assert second['status_colors'] == {'background': 'rgba(34, 197, 94, 0.2)', 'color': '#22c55e'}

    def test_filter_by_company_and_status(self, client):
        data = client.get('/proposals/?company=5&status=Pending').get_json()
        assert [p['proposal_no'] for p in data['proposals']] == ['TF-001']

    def test_search_with_wrong_company_returns_empty(self, client):
        data = client.get('/proposals/?q=TF-001&company=7').get_json()

        assert data['proposals'] == []
        assert data['summary']['message'] == 'Filtrelere uygun teklif bulunamadı.'

    def test_invalid_status_filter(self, client):
        response = client.get('/proposals/?status=Archived')

        assert response.status_code == 400
        assert response.get_json()['status'] == 'error'


class TestFunnelExport:
    """Test the CSV download."""

    def test_export_all(self, client):
        response = client.get('/proposals/export.csv')

        assert response.status_code == 200
        assert response.headers['Content-Type'] == 'text/csv; charset=utf-8'
        expected_name = f"Teklif_Funnel_{date.today().strftime('%d-%m-%Y')}.csv"
        assert expected_name in response.headers['Content-Disposition']
        assert response.data.startswith(b'\xef\xbb\xbf')

        rows = list(csv.reader(io.StringIO(response.data.decode('utf-8-sig'))))
        assert len(rows) == 1 + 4

    def test_export_respects_filters(self, client):
        response = client.get('/proposals/export.csv?preparer=Zeynep')
        rows = list(csv.reader(io.StringIO(response.data.decode('utf-8-sig'))))

        assert [row[0] for row in rows[1:]] == ['TF-002', 'TF-002']
        assert [row[11] for row in rows[1:]] == ['10.00', '0.00']


class TestProposalActions:
    """Test status update, delete, e-mail and PDF endpoints."""

    def test_view_proposal(self, client):
        data = client.get('/proposals/2').get_json()

        assert data['proposal_no'] == 'TF-002'
        assert [item['total_try'] for item in data['items']] == ['300.00', '0.00']

    def test_view_missing_proposal(self, client):
        response = client.get('/proposals/99')

        assert response.status_code == 404
        assert response.get_json()['status'] == 'error'

    def test_update_status_form(self, client, archive):
        response = client.post('/proposals/1/status', data={'status': 'Kazanıldı'})

        assert response.status_code == 200
        assert response.get_json()['proposal_status'] == 'Kazanıldı'
        assert archive.get(1).status.value == 'Kazanıldı'

    def test_update_status_json(self, client, archive):
        response = client.post('/proposals/3/status', json={'status': 'Lost'})

        assert response.status_code == 200
        assert archive.get(3).status.value == 'Kaybedildi'

    def test_update_status_invalid(self, client):
        response = client.post('/proposals/1/status', data={'status': 'Archived'})
        assert response.status_code == 400

    def test_delete_without_confirmation_is_rejected(self, client, archive):
        response = client.post('/proposals/1/delete')

        assert response.status_code == 400
        assert len(archive.proposals) == 3

    def test_delete_confirmed(self, client, archive):
        response = client.post('/proposals/1/delete', data={'confirm': '1'})

        assert response.status_code == 200
        assert [r.proposal_no for r in archive.proposals] == ['TF-002', 'TF-003']

    def test_email_link(self, client):
        data = client.get('/proposals/1/email').get_json()

        assert data['mailto'].startswith('mailto:ayse@anadolu.example?subject=')
        assert 'Tutar: $100.00' in unquote(data['mailto'])

    def test_pdf_download(self, client):
        response = client.get('/proposals/2/pdf')

        assert response.status_code == 200
        assert response.mimetype == 'application/pdf'
        assert 'Teklif_TF-002.pdf' in response.headers['Content-Disposition']
        assert response.data.startswith(b'%PDF')
