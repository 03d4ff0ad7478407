"""
Word rendering of an OrderReport

Word opens HTML saved with a .doc extension and the application/msword
media type, so the document is produced as a single HTML page with one
section per order separated by page breaks.
"""
import base64
import os
from html import escape

from app.services.reports.report import OrderReport, ReportOrder

MEDIA_TYPE = "application/msword"
EXTENSION = "doc"

STYLES = """
    body { font-family: Arial, sans-serif; color: #1f2937; margin: 40px; }
    .header { text-align: center; margin-bottom: 30px; border-bottom: 1px solid #e5e7eb; padding-bottom: 20px; }
    .logo { width: 100px; }
    h1 { color: #1a56db; font-size: 24pt; margin: 10px 0; }
    .generated { color: #4b5563; font-size: 11pt; }
    .order { margin-bottom: 30px; }
    .page-break { page-break-before: always; }
    .order-title { background: #dbeafe; padding: 10px; }
    .order-title h2 { color: #1a56db; font-size: 16pt; margin: 0; display: inline; }
    .status { color: #ffffff; padding: 4px 8px; font-weight: bold; float: right; }
    .status-pending { background: #d97706; }
    .status-confirmed { background: #1a56db; }
    .status-delivered { background: #059669; }
    .status-cancelled { background: #dc2626; }
    h3 { color: #1a56db; font-size: 14pt; }
    .customer td { padding: 4px 10px 4px 0; }
    .customer .label { font-weight: bold; }
    table.items { width: 100%; border-collapse: collapse; }
    table.items th { background: #1a56db; color: #ffffff; padding: 8px; text-align: left; }
    table.items td { padding: 6px 8px; border-bottom: 1px solid #e5e7eb; }
    table.items tr:nth-child(even) td { background: #f3f4f6; }
    .right { text-align: right; }
    .total { text-align: right; font-weight: bold; color: #1a56db; font-size: 12pt; margin-top: 10px; }
    .empty { font-style: italic; color: #4b5563; }
    .footer { text-align: center; color: #4b5563; font-size: 9pt; margin-top: 40px; border-top: 1px solid #e5e7eb; padding-top: 10px; }
"""


def _logo_html(logo_path) -> str:
    if not logo_path or not os.path.exists(logo_path):
        return ""
    with open(logo_path, 'rb') as f:
        encoded = base64.b64encode(f.read()).decode('ascii')
    return f'<img class="logo" src="data:image/png;base64,{encoded}" alt="logo"/>'


def _order_html(order: ReportOrder, report: OrderReport, page_break: bool) -> str:
    parts = [f'<div class="order{" page-break" if page_break else ""}">']

    parts.append(
        '<div class="order-title">'
        f'<h2>Commande #{order.id}</h2>'
        f'<span class="status {order.status.css_class}">{escape(order.status.label)}</span>'
        '</div>'
    )

    parts.append('<h3>Informations Client</h3><table class="customer">')
    for label, value in (
        ("Client:", order.customer),
        ("Téléphone:", order.phone),
        ("Adresse:", order.address),
        ("Date:", order.date_label),
    ):
        parts.append(f'<tr><td class="label">{label}</td><td>{escape(str(value))}</td></tr>')
    parts.append('</table>')

    parts.append('<h3>Détail des Articles</h3>')
    if not order.lines:
        parts.append('<p class="empty">Aucun article trouvé pour cette commande</p>')
    else:
        parts.append(
            '<table class="items"><tr><th>#</th><th>Article</th>'
            '<th class="right">Quantité</th><th class="right">Prix</th><th class="right">Total</th></tr>'
        )
        for line in order.lines:
            parts.append(
                f'<tr><td>{line.number}</td><td>{escape(line.product_name)}</td>'
                f'<td class="right">{line.quantity}</td>'
                f'<td class="right">{report.money(line.unit_price)}</td>'
                f'<td class="right">{report.money(line.subtotal)}</td></tr>'
            )
        parts.append('</table>')
        parts.append(f'<p class="total">Total: {report.money(order.total)}</p>')

    parts.append('</div>')
    return "".join(parts)


def render_word(report: OrderReport) -> bytes:
    body = [
        '<div class="header">',
        _logo_html(report.logo_path),
        f'<h1>{escape(report.title)}</h1>',
        f'<p class="generated">{escape(report.generated_label)}</p>',
        '</div>',
    ]

    if not report.orders:
        body.append('<p class="empty">Aucune commande ne correspond aux filtres</p>')

    for index, order in enumerate(report.orders):
        body.append(_order_html(order, report, page_break=index > 0))

    body.append(f'<div class="footer">{escape(report.shop_name)} - Tous droits réservés</div>')

    document = (
        '<!DOCTYPE html>\n'
        '<html xmlns:o="urn:schemas-microsoft-com:office:office" '
        'xmlns:w="urn:schemas-microsoft-com:office:word">\n'
        '<head><meta charset="utf-8"/>'
        f'<title>{escape(report.title)}</title>'
        f'<style>{STYLES}</style></head>\n'
        f'<body>{"".join(body)}</body>\n'
        '</html>\n'
    )
    return document.encode('utf-8')
