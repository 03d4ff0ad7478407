"""
Spreadsheet rendering of an OrderReport (openpyxl)
"""
import io

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from app.services.reports.report import OrderReport

MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXTENSION = "xlsx"

SHEET_TITLE = "Commandes"
HEADER_ROW = 4
HEADERS = ["N° Commande", "Client", "Téléphone", "Adresse", "Date", "Statut", "Articles", "Total"]
COLUMN_WIDTHS = [14, 22, 16, 32, 18, 15, 45, 16]
STATUS_COLUMN = 6
TOTAL_COLUMN = 8


def render_excel(report: OrderReport) -> bytes:
    """One row per order below a styled header row"""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    last_col = chr(ord('A') + len(HEADERS) - 1)

    # Title and generation date
    ws.cell(row=1, column=1, value=report.title)
    ws.merge_cells(f"A1:{last_col}1")
    ws['A1'].font = Font(bold=True, size=16, color="3B82F6")
    ws['A1'].alignment = Alignment(horizontal='center', vertical='center')
    ws.row_dimensions[1].height = 30

    ws.cell(row=2, column=1, value=report.generated_label)
    ws.merge_cells(f"A2:{last_col}2")
    ws['A2'].font = Font(size=12)
    ws['A2'].alignment = Alignment(horizontal='center', vertical='center')

    # Define styles
    header_fill = PatternFill(start_color="3B82F6", end_color="3B82F6", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)
    header_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )
    row_side = Side(style='thin', color="DDDDDD")
    row_border = Border(left=row_side, right=row_side, top=row_side, bottom=row_side)

    # Write headers
    headers = HEADERS[:-1] + [f"Total ({report.currency})"]
    for col_num, header in enumerate(headers, 1):
        cell = ws.cell(row=HEADER_ROW, column=col_num, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = header_border
    ws.row_dimensions[HEADER_ROW].height = 20

    # Write data
    for row_num, order in enumerate(report.orders, HEADER_ROW + 1):
        data = [
            f"#{order.id}",
            order.customer,
            order.phone,
            order.address,
            order.date_label,
            order.status.label,
            order.products_summary,
            float(order.total),
        ]

        for col_num, value in enumerate(data, 1):
            cell = ws.cell(row=row_num, column=col_num, value=value)
            cell.border = row_border
            cell.alignment = Alignment(horizontal='left', vertical='center', wrap_text=col_num == 7)

        status_cell = ws.cell(row=row_num, column=STATUS_COLUMN)
        status_cell.fill = PatternFill(
            start_color=order.status.highlight, end_color=order.status.highlight, fill_type="solid"
        )

        total_cell = ws.cell(row=row_num, column=TOTAL_COLUMN)
        total_cell.number_format = '#,##0.00'
        total_cell.alignment = Alignment(horizontal='right', vertical='center')

    # Footer
    footer_row = HEADER_ROW + len(report.orders) + 1
    ws.cell(row=footer_row, column=1, value=f"{report.shop_name} - Tous droits réservés")
    ws.merge_cells(f"A{footer_row}:{last_col}{footer_row}")
    ws.cell(row=footer_row, column=1).font = Font(italic=True, color="888888")
    ws.cell(row=footer_row, column=1).alignment = Alignment(horizontal='center')

    # Adjust column widths
    for index, width in enumerate(COLUMN_WIDTHS):
        ws.column_dimensions[chr(ord('A') + index)].width = width

    # Freeze header row
    ws.freeze_panes = f"A{HEADER_ROW + 1}"

    wb.properties.creator = report.shop_name

    # Save to BytesIO
    excel_file = io.BytesIO()
    wb.save(excel_file)
    return excel_file.getvalue()
