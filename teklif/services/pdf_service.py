"""PDF service for printing a single proposal."""
import logging
from io import BytesIO
from typing import Any, Dict, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER

from teklif.models import Company, ProposalRecord
from teklif.services.export_service import item_figures
from teklif.services.filter_service import resolve_company, resolve_company_name
from teklif.utils.formatters import date_tr, money_tr, money_us, plain_number

logger = logging.getLogger(__name__)


def _proposal_info_rows(record: ProposalRecord, companies: Sequence[Company]) -> list:
    company = resolve_company(record, companies)
    contact = ''
    if record.company is not None and record.company.contact_person:
        contact = record.company.contact_person
    elif company is not None:
        contact = company.contact_person

    rows = [
        ['Teklif No:', f"{record.proposal_no} {record.display_version}"],
        ['Tarih:', date_tr(record.issue_date)],
        ['Geçerlilik Tarihi:', date_tr(record.valid_until)],
        ['Durum:', record.effective_status.value],
        ['Firma:', resolve_company_name(record, companies)],
    ]
    if contact:
        rows.append(['İlgili Kişi:', contact])
    if record.preparer:
        rows.append(['Hazırlayan:', record.preparer])
    return rows


def generate_proposal_pdf(record: ProposalRecord, companies: Sequence[Company], business_info: Dict[str, Any]) -> BytesIO:
    """
    Render one proposal as an A4 PDF.

    Line amounts follow the funnel export rules, so the printed figures
    and the CSV always agree.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75*inch,
        leftMargin=0.75*inch,
        topMargin=0.75*inch,
        bottomMargin=0.75*inch,
        title=f"Teklif {record.proposal_no}",
    )

    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'ProposalTitle',
        parent=styles['Heading1'],
        fontSize=24,
        textColor=colors.HexColor('#2C3E50'),
        spaceAfter=12,
        alignment=TA_CENTER,
        fontName='Helvetica-Bold'
    )

    header_style = ParagraphStyle(
        'ProposalHeader',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#7F8C8D'),
        alignment=TA_CENTER,
        spaceAfter=6
    )

    # 1. Title and business header
    elements.append(Paragraph("TEKLİF", title_style))

    if business_info.get('name'):
        elements.append(Paragraph(f"<b>{business_info['name']}</b>", header_style))

    if business_info.get('address'):
        elements.append(Paragraph(business_info['address'], header_style))

    contact_parts = []
    if business_info.get('phone'):
        contact_parts.append(f"Tel: {business_info['phone']}")
    if business_info.get('email'):
        contact_parts.append(f"E-posta: {business_info['email']}")

    if contact_parts:
        elements.append(Paragraph(" | ".join(contact_parts), header_style))

    elements.append(Spacer(1, 0.3*inch))

    # 2. Proposal metadata
    info_table = Table(_proposal_info_rows(record, companies), colWidths=[2*inch, 4*inch])
    info_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (0, -1), 'RIGHT'),
        ('ALIGN', (1, 0), (1, -1), 'LEFT'),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('TEXTCOLOR', (0, 0), (-1, -1), colors.HexColor('#34495E')),
    ]))

    elements.append(info_table)
    elements.append(Spacer(1, 0.3*inch))

    # 3. Items
    table_data = [['Ürün', 'Miktar', 'Birim Fiyat ($)', 'Tutar ($)', 'Tutar (TL)']]
    for figures in item_figures(record):
        table_data.append([
            figures.product_name,
            str(figures.quantity),
            money_us(figures.unit_price),
            money_us(figures.total),
            money_tr(figures.total_try),
        ])

    items_table = Table(table_data, colWidths=[2.7*inch, 0.7*inch, 1.1*inch, 1.1*inch, 1.2*inch])
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#3498DB')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
        ('ALIGN', (1, 1), (1, -1), 'CENTER'),
        ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#BDC3C7')),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#ECF0F1')]),
    ]))

    elements.append(items_table)
    elements.append(Spacer(1, 0.2*inch))

    # 4. Totals
    total_table = Table([
        ['TOPLAM ($):', money_us(record.total_amount)],
        ['TOPLAM (TL):', money_tr(record.total_amount_try)],
    ], colWidths=[5.3*inch, 1.5*inch])
    total_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTNAME', (0, 0), (-1, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 12),
        ('TEXTCOLOR', (0, 0), (-1, -1), colors.HexColor('#27AE60')),
        ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#E8F8F5')),
        ('BOX', (0, 0), (-1, -1), 2, colors.HexColor('#27AE60')),
    ]))

    elements.append(total_table)
    elements.append(Spacer(1, 0.4*inch))

    footer_style = ParagraphStyle('Footer', parent=styles['Normal'], fontSize=9, textColor=colors.HexColor('#95A5A6'), alignment=TA_CENTER)
    footer_text = "<b>ÖNEMLİ:</b><br/>Fiyatlar önceden haber verilmeksizin değiştirilebilir."
    if record.validity_days is not None:
        footer_text += f"<br/>Geçerlilik: {record.validity_days} gün."
    rate = (record.calculation.currency_rate if record.calculation else 0)
    if rate:
        footer_text += f"<br/>Kur: {plain_number(rate)}"

    elements.append(Paragraph(footer_text, footer_style))

    doc.build(elements)
    buffer.seek(0)
    logger.info(f"[PDF] Proposal {record.proposal_no} rendered ({record.item_count} items)")
    return buffer
