import pytest

from teklif import create_app
from teklif.models import Company, ProposalRecord
from teklif.services.archive_service import ProposalArchive


COMPANIES = [
    {'id': 5, 'name': 'Anadolu Makina', 'contact_person': 'Ayşe Yılmaz', 'email': 'ayse@anadolu.example'},
    {'id': '7', 'name': 'Ege Tekstil', 'contact_person': 'Mehmet Kaya', 'email': 'mehmet@ege.example'},
]

PROPOSALS = [
    {
        'id': 1,
        'proposalNo': 'TF-001',
        'date': '2025-01-05',
        'validityDays': 15,
        'status': 'Bekliyor',
        'preparer': 'Ali',
        'companyId': '5',
        'items': [],
        'product': {'name': 'Pompa'},
        'quantity': 2,
        'totalPrice': 100,
        'totalPriceTry': 3200,
    },
    {
        'id': 2,
        'proposalNo': 'TF-002',
        'version': 'v2.0',
        'date': '2025-02-10',
        'validityDays': 30,
        'status': 'Kazanıldı',
        'preparer': 'Zeynep',
        'company': {'id': 7, 'name': 'Ege Tekstil (eski)', 'contact_person': 'Mehmet Kaya', 'email': 'mehmet@ege.example'},
        'product': {'name': 'A'},
        'items': [
            {'product': {'name': 'A'}, 'quantity': 1, 'calculation': {'suggested_price': 10, 'currency_rate': 30}},
            {'product': {'name': 'B'}, 'quantity': 1},
        ],
        'totalPrice': 10,
        'totalPriceTry': 300,
    },
    {
        'id': 3,
        'proposalNo': 'TF-003',
        'date': '2025-03-01',
        'validityDays': 7,
        'preparer': 'Ali',
        'product': {'name': 'Vana'},
        'calculation': {'suggested_price': 250, 'price_try': 8750, 'currency_rate': 35, 'profit_margin': 20},
    },
]


@pytest.fixture
def proposal_data():
    """Stored proposal documents (fresh copies per test)."""
    import copy
    return copy.deepcopy(PROPOSALS)


@pytest.fixture
def companies():
    return [Company.from_dict(data) for data in COMPANIES]


@pytest.fixture
def proposals(proposal_data):
    return [ProposalRecord.from_dict(data) for data in proposal_data]


@pytest.fixture
def archive(proposal_data):
    """In-memory archive (no backing file)."""
    import copy
    return ProposalArchive.from_dict({'proposals': proposal_data, 'companies': copy.deepcopy(COMPANIES)})


@pytest.fixture
def app(archive):
    """Create application instance for testing."""
    app = create_app('config.Config', archive=archive)
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
