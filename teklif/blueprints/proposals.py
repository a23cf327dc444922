"""Proposals blueprint - archive list, funnel export and proposal actions."""
import logging
from datetime import date

from flask import Blueprint, Response, current_app, jsonify, request, send_file

from teklif.models import FilterCriteria, ProposalStatus
from teklif.services.export_service import CSV_MIMETYPE, export_csv, export_filename, item_figures
from teklif.services.filter_service import (
    archive_summary,
    distinct_preparers,
    filter_proposals,
    item_summary,
    resolve_company_name,
)
from teklif.services.mail_service import compose_mailto
from teklif.services.pdf_service import generate_proposal_pdf
from teklif.utils.formatters import date_tr, money_2

logger = logging.getLogger(__name__)

proposals_bp = Blueprint('proposals', __name__, url_prefix='/proposals')

CONFIRM_VALUES = {'1', 'true', 'yes', 'on', 'evet'}


def get_archive():
    """Proposal archive attached to the current app."""
    return current_app.extensions['proposal_archive']


def _serialize_proposal(record, companies) -> dict:
    status = record.effective_status
    return {
        'id': record.id,
        'proposal_no': record.proposal_no,
        'version': record.version,
        'date': date_tr(record.issue_date),
        'valid_until': date_tr(record.valid_until),
        'status': status.value,
        'status_colors': status.colors,
        'company': resolve_company_name(record, companies),
        'preparer': record.preparer,
        'summary': item_summary(record),
        'item_count': record.item_count,
        'total_price': money_2(record.total_amount),
        'total_price_try': money_2(record.total_amount_try),
    }


def _request_value(key: str) -> str:
    """Read a value from a JSON body or form data."""
    if request.is_json:
        payload = request.get_json(silent=True) or {}
        value = payload.get(key)
    else:
        value = request.form.get(key, request.args.get(key))
    return '' if value is None else str(value)


@proposals_bp.route('/')
def list_proposals():
    """Archive list with filters (q, company, preparer, status)."""
    archive = get_archive()
    criteria = FilterCriteria.from_args(request.args)

    proposals = archive.proposals
    companies = archive.companies
    filtered = filter_proposals(proposals, criteria)

    return jsonify({
        'proposals': [_serialize_proposal(record, companies) for record in filtered],
        'preparers': sorted(distinct_preparers(proposals)),
        'companies': [{'id': c.id, 'name': c.name} for c in companies],
        'statuses': ProposalStatus.choices(),
        'summary': archive_summary(proposals, filtered),
    })


@proposals_bp.route('/export.csv')
def export_funnel():
    """Download the funnel CSV for the filtered archive list."""
    archive = get_archive()
    criteria = FilterCriteria.from_args(request.args)
    filtered = filter_proposals(archive.proposals, criteria)

    payload = export_csv(filtered, archive.companies)
    filename = export_filename(date.today())
    logger.info(f"[EXPORT] Funnel download {filename}: {len(filtered)} of {len(archive.proposals)} proposals")

    return Response(
        payload,
        content_type=CSV_MIMETYPE,
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@proposals_bp.route('/<proposal_id>')
def view_proposal(proposal_id):
    """Proposal detail with its export lines."""
    archive = get_archive()
    record = archive.get(proposal_id)
    companies = archive.companies

    data = _serialize_proposal(record, companies)
    data['items'] = [
        {
            'product': figures.product_name,
            'quantity': figures.quantity,
            'unit_price': money_2(figures.unit_price),
            'total': money_2(figures.total),
            'total_try': money_2(figures.total_try),
        }
        for figures in item_figures(record)
    ]
    return jsonify(data)


@proposals_bp.route('/<proposal_id>/status', methods=['POST'])
def update_status(proposal_id):
    """Change proposal status."""
    record = get_archive().update_status(proposal_id, _request_value('status'))
    return jsonify({'status': 'success', 'id': record.id, 'proposal_status': record.effective_status.value})


@proposals_bp.route('/<proposal_id>/delete', methods=['POST'])
def delete_proposal(proposal_id):
    """Delete a proposal. Requires confirm=1."""
    confirmed = _request_value('confirm').strip().lower() in CONFIRM_VALUES
    record = get_archive().delete(proposal_id, confirmed=confirmed)
    return jsonify({'status': 'success', 'id': record.id, 'message': f'Teklif {record.proposal_no} silindi.'})


@proposals_bp.route('/<proposal_id>/email')
def email_link(proposal_id):
    """mailto: link for sending the proposal to the customer."""
    archive = get_archive()
    record = archive.get(proposal_id)
    return jsonify({'mailto': compose_mailto(record, archive.companies)})


@proposals_bp.route('/<proposal_id>/pdf')
def download_pdf(proposal_id):
    """Generate and download the proposal PDF."""
    archive = get_archive()
    record = archive.get(proposal_id)

    business_info = {
        'name': current_app.config.get('BUSINESS_NAME', ''),
        'address': current_app.config.get('BUSINESS_ADDRESS', ''),
        'phone': current_app.config.get('BUSINESS_PHONE', ''),
        'email': current_app.config.get('BUSINESS_EMAIL', ''),
    }

    pdf_buffer = generate_proposal_pdf(record, archive.companies, business_info)
    filename = f"Teklif_{record.proposal_no or record.id}.pdf"

    return send_file(
        pdf_buffer,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=filename
    )
