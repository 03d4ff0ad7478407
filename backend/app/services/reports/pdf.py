"""
PDF rendering of an OrderReport (fpdf2)

One page per order: title box with status badge, customer block and an
items table with subtotals and the order total.
"""
import os
from typing import Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from app.services.reports.report import OrderReport, ReportOrder

MEDIA_TYPE = "application/pdf"
EXTENSION = "pdf"

MARGIN = 50
TABLE_COLUMNS = [("#", 40, "L"), ("Article", 230, "L"), ("Quantité", 70, "R"), ("Prix", 70, "R"), ("Total", 85, "R")]

# Color scheme
PRIMARY = "#1a56db"
TEXT = "#1f2937"
TEXT_LIGHT = "#4b5563"
LIGHT_BG = "#f3f4f6"
BORDER = "#e5e7eb"
HIGHLIGHT = "#dbeafe"


def _rgb(hex_color: str) -> Tuple[int, int, int]:
    hex_color = hex_color.lstrip('#')
    return int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16)


def _latin1(text) -> str:
    # Core fonts only cover latin-1
    return str(text).encode('latin-1', 'replace').decode('latin-1')


class OrderReportPDF(FPDF):

    def __init__(self, report: OrderReport):
        super().__init__(orientation="P", unit="pt", format="A4")
        self.report = report
        self.set_margins(MARGIN, MARGIN, MARGIN)
        self.set_auto_page_break(auto=True, margin=70)
        self.alias_nb_pages()
        self.set_title(report.title)
        self.set_author(report.shop_name)
        self.set_subject("Commandes")

    def footer(self):
        footer_y = self.h - 50
        self.set_draw_color(*_rgb(BORDER))
        self.set_line_width(0.5)
        self.line(MARGIN, footer_y, self.w - MARGIN, footer_y)

        self.set_font("Helvetica", "", 9)
        self.set_text_color(*_rgb(TEXT_LIGHT))
        self.set_xy(MARGIN, footer_y + 6)
        self.cell(0, 12, _latin1(f"{self.report.shop_name} - Tous droits réservés"), align="C",
                  new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.cell(0, 12, f"Page {self.page_no()} sur {{nb}}", align="C")

    def text_line(self, text, size=11, style="", color=TEXT, align="L", height=None):
        self.set_font("Helvetica", style, size)
        self.set_text_color(*_rgb(color))
        self.cell(0, height or size + 6, _latin1(text), align=align, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def fit(self, text: str, width: float) -> str:
        """Truncate text with an ellipsis so it fits the current font"""
        text = _latin1(text)
        if self.get_string_width(text) <= width:
            return text
        while text and self.get_string_width(text + "...") > width:
            text = text[:-1]
        return text + "..."


def _document_header(pdf: OrderReportPDF, report: OrderReport) -> None:
    if report.logo_path and os.path.exists(report.logo_path):
        pdf.image(report.logo_path, x=(pdf.w - 100) / 2, y=pdf.get_y(), w=100)
        pdf.ln(90)

    pdf.text_line(report.title, size=22, style="B", color=PRIMARY, align="C", height=30)
    pdf.text_line(report.generated_label, size=11, color=TEXT_LIGHT, align="C")

    pdf.ln(8)
    pdf.set_draw_color(*_rgb(BORDER))
    pdf.set_line_width(1)
    pdf.line(MARGIN, pdf.get_y(), pdf.w - MARGIN, pdf.get_y())
    pdf.ln(18)


def _order_title(pdf: OrderReportPDF, order: ReportOrder) -> None:
    top = pdf.get_y()
    width = pdf.w - 2 * MARGIN

    pdf.set_fill_color(*_rgb(HIGHLIGHT))
    pdf.rect(MARGIN, top, width, 32, style="F")

    pdf.set_xy(MARGIN + 10, top + 8)
    pdf.set_font("Helvetica", "B", 16)
    pdf.set_text_color(*_rgb(PRIMARY))
    pdf.cell(200, 16, f"Commande #{order.id}")

    # Status badge
    label = _latin1(order.status.label)
    pdf.set_font("Helvetica", "B", 11)
    badge_width = pdf.get_string_width(label) + 16
    badge_x = pdf.w - MARGIN - 10 - badge_width
    pdf.set_fill_color(*_rgb(order.status.badge_color))
    pdf.rect(badge_x, top + 6, badge_width, 20, style="F")
    pdf.set_text_color(255, 255, 255)
    pdf.set_xy(badge_x, top + 6)
    pdf.cell(badge_width, 20, label, align="C")

    pdf.set_xy(MARGIN, top + 45)


def _customer_block(pdf: OrderReportPDF, order: ReportOrder) -> None:
    pdf.text_line("Informations Client", size=14, style="B", color=PRIMARY, height=22)

    details = [
        ("Client:", order.customer),
        ("Téléphone:", order.phone),
        ("Adresse:", order.address),
        ("Date:", order.date_label),
    ]
    for label, value in details:
        pdf.set_font("Helvetica", "B", 11)
        pdf.set_text_color(*_rgb(TEXT))
        pdf.cell(100, 18, _latin1(label))
        pdf.set_font("Helvetica", "", 11)
        pdf.set_text_color(*_rgb(TEXT_LIGHT))
        pdf.multi_cell(0, 18, _latin1(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.ln(14)


def _items_table(pdf: OrderReportPDF, order: ReportOrder, report: OrderReport) -> None:
    pdf.text_line("Détail des Articles", size=14, style="B", color=PRIMARY, height=22)

    if not order.lines:
        pdf.text_line("Aucun article trouvé pour cette commande", size=11, style="I", color=TEXT_LIGHT)
        return

    # Header
    pdf.set_fill_color(*_rgb(PRIMARY))
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 11)
    for index, (header, width, align) in enumerate(TABLE_COLUMNS):
        last = index == len(TABLE_COLUMNS) - 1
        pdf.cell(width, 25, _latin1(header), align=align, fill=True,
                 new_x=XPos.LMARGIN if last else XPos.RIGHT,
                 new_y=YPos.NEXT if last else YPos.TOP)

    # Rows
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(*_rgb(TEXT))
    pdf.set_fill_color(*_rgb(LIGHT_BG))
    for line in order.lines:
        shaded = line.number % 2 == 1
        values = [
            str(line.number),
            pdf.fit(line.product_name, TABLE_COLUMNS[1][1] - 6),
            str(line.quantity),
            report.money(line.unit_price),
            report.money(line.subtotal),
        ]
        for index, value in enumerate(values):
            width, align = TABLE_COLUMNS[index][1], TABLE_COLUMNS[index][2]
            last = index == len(values) - 1
            pdf.cell(width, 22, value, align=align, fill=shaded,
                     new_x=XPos.LMARGIN if last else XPos.RIGHT,
                     new_y=YPos.NEXT if last else YPos.TOP)

    pdf.set_draw_color(*_rgb(BORDER))
    pdf.set_line_width(1)
    pdf.line(MARGIN, pdf.get_y(), pdf.w - MARGIN, pdf.get_y())

    # Total row
    label_width = sum(width for _, width, _ in TABLE_COLUMNS[:-1])
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_text_color(*_rgb(PRIMARY))
    pdf.cell(label_width, 25, "Total:", align="R")
    pdf.cell(TABLE_COLUMNS[-1][1], 25, report.money(order.total), align="R",
             new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def build_pdf(report: OrderReport) -> OrderReportPDF:
    """Lay out the report; the first order shares its page with the document header"""
    pdf = OrderReportPDF(report)

    if not report.orders:
        pdf.add_page()
        _document_header(pdf, report)
        pdf.text_line("Aucune commande ne correspond aux filtres", style="I", color=TEXT_LIGHT, align="C")
        return pdf

    for index, order in enumerate(report.orders):
        pdf.add_page()
        if index == 0:
            _document_header(pdf, report)
        _order_title(pdf, order)
        _customer_block(pdf, order)
        _items_table(pdf, order, report)

    return pdf


def render_pdf(report: OrderReport, compress: bool = True) -> bytes:
    pdf = build_pdf(report)
    pdf.compress = compress
    return bytes(pdf.output())
