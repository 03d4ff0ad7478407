"""
Unit tests for the order report model and its three renderers
"""
import io
from datetime import datetime
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from app.services.reports import build_report, render_excel, render_pdf, render_word, status_style
from app.services.reports.excel import HEADER_ROW, SHEET_TITLE, STATUS_COLUMN, TOTAL_COLUMN
from app.services.reports.pdf import build_pdf


GENERATED_AT = datetime(2024, 1, 16, 8, 5)


@pytest.fixture
def report(sample_orders):
    return build_report(sample_orders, generated_at=GENERATED_AT, shop_name="SWIBI Collection",
                        currency="MAD", logo_path="")


class TestBuildReport:

    def test_totals_are_price_times_quantity(self, report):
        assert [order.total for order in report.orders] == [Decimal("150.00"), Decimal("79.90"), Decimal("0")]
        assert report.grand_total == Decimal("229.90")

    def test_lines_are_numbered_with_subtotals(self, report):
        lines = report.orders[0].lines
        assert [(line.number, line.subtotal) for line in lines] == [(1, Decimal("100.00")), (2, Decimal("50.00"))]

    def test_status_labels(self, report):
        assert [order.status.label for order in report.orders] == ["Confirmée", "Livrée", "En attente"]

    def test_unknown_status_uses_pending_style(self):
        assert status_style("mystery") == status_style("pending")
        assert status_style(None).label == "En attente"

    def test_missing_customer_fields_render_na(self, report):
        assert report.orders[2].customer == "N/A"
        assert report.orders[2].phone == "N/A"

    def test_products_summary(self, report):
        assert report.orders[0].products_summary == "Rouge Velours (x2), Mascara Volume (x1)"

    def test_unnamed_item_gets_placeholder(self, order_factory):
        order = order_factory(4, items=[(None, 1, "10")])
        report = build_report([order], generated_at=GENERATED_AT, logo_path="")
        assert report.orders[0].lines[0].product_name == "Article inconnu"

    def test_labels(self, report):
        assert report.orders[0].date_label == "15/01/2024 10:30"
        assert report.generated_label == "Généré le: 16/01/2024 08:05"


class TestExcelRenderer:

    @pytest.fixture
    def sheet(self, report):
        workbook = load_workbook(io.BytesIO(render_excel(report)))
        return workbook[SHEET_TITLE]

    def test_title_and_header(self, sheet):
        assert sheet["A1"].value == "Rapport de Commandes"
        assert sheet.cell(row=HEADER_ROW, column=1).value == "N° Commande"
        assert sheet.cell(row=HEADER_ROW, column=TOTAL_COLUMN).value == "Total (MAD)"

    def test_one_row_per_order(self, sheet):
        rows = [sheet.cell(row=HEADER_ROW + offset, column=1).value for offset in (1, 2, 3)]
        assert rows == ["#1", "#2", "#3"]

    def test_status_labels_and_fill(self, sheet):
        first = sheet.cell(row=HEADER_ROW + 1, column=STATUS_COLUMN)
        assert first.value == "Confirmée"
        assert first.fill.start_color.rgb.endswith("D7E9FF")
        assert sheet.cell(row=HEADER_ROW + 3, column=STATUS_COLUMN).value == "En attente"

    def test_row_content(self, sheet):
        row = HEADER_ROW + 1
        assert sheet.cell(row=row, column=5).value == "15/01/2024 10:30"
        assert sheet.cell(row=row, column=7).value == "Rouge Velours (x2), Mascara Volume (x1)"
        assert sheet.cell(row=HEADER_ROW + 3, column=2).value == "N/A"

    def test_footer(self, sheet):
        assert sheet.cell(row=HEADER_ROW + 4, column=1).value == "SWIBI Collection - Tous droits réservés"


class TestPdfRenderer:

    def test_one_page_per_order(self, report):
        assert build_pdf(report).page_no() == 3

    def test_each_order_shows_its_status_label(self, report):
        content = render_pdf(report, compress=False)

        assert [order.status.label for order in report.orders] == ["Confirmée", "Livrée", "En attente"]
        for order in report.orders:
            assert f"Commande #{order.id}".encode("latin-1") in content
            assert order.status.label.encode("latin-1") in content

    def test_order_without_items_shows_placeholder(self, report):
        content = render_pdf(report, compress=False)

        assert "Aucun article trouvé pour cette commande".encode("latin-1") in content

    def test_empty_report_is_a_single_page(self):
        report = build_report([], generated_at=GENERATED_AT, logo_path="")
        assert build_pdf(report).page_no() == 1

    def test_output_is_a_pdf(self, report):
        content = render_pdf(report)
        assert content.startswith(b"%PDF")

    def test_non_latin_text_does_not_break_rendering(self, order_factory):
        order = order_factory(5, items=[("أحمر شفاه", 1, "30")], name="سلمى")
        report = build_report([order], generated_at=GENERATED_AT, logo_path="")
        assert render_pdf(report).startswith(b"%PDF")


class TestWordRenderer:

    @pytest.fixture
    def html(self, report):
        return render_word(report).decode("utf-8")

    def test_sections_and_labels(self, html):
        assert "Rapport de Commandes" in html
        assert "Commande #1" in html
        assert "Confirmée" in html and "Livrée" in html and "En attente" in html
        assert "Aucun article trouvé pour cette commande" in html

    def test_page_break_between_orders(self, html):
        assert html.count('class="order page-break"') == 2

    def test_customer_values_are_escaped(self, order_factory):
        order = order_factory(6, name="<b>Salma</b>", items=[("Rouge", 1, "10")])
        report = build_report([order], generated_at=GENERATED_AT, logo_path="")
        html = render_word(report).decode("utf-8")
        assert "&lt;b&gt;Salma&lt;/b&gt;" in html
        assert "<b>Salma</b>" not in html


class TestCrossFormatConsistency:
    """Every format shows the same per-order totals and status labels"""

    def test_totals_match_across_formats(self, report):
        sheet = load_workbook(io.BytesIO(render_excel(report)))[SHEET_TITLE]
        html = render_word(report).decode("utf-8")
        pdf = render_pdf(report, compress=False)

        for offset, order in enumerate(report.orders, 1):
            assert sheet.cell(row=HEADER_ROW + offset, column=TOTAL_COLUMN).value == float(order.total)
            assert sheet.cell(row=HEADER_ROW + offset, column=STATUS_COLUMN).value == order.status.label
            assert order.status.label in html
            if order.lines:
                total = report.money(order.total)
                assert f"Total: {total}" in html
                assert total.encode("latin-1") in pdf
