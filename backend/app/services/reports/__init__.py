"""
Order report rendering

build_report() turns orders into one OrderReport value; each renderer is a
pure function OrderReport -> bytes, so every format shows the same totals
and status labels.
"""
from app.services.reports.report import OrderReport, ReportOrder, ReportLine, build_report, status_style
from app.services.reports.excel import render_excel
from app.services.reports.pdf import render_pdf
from app.services.reports.word import render_word

__all__ = [
    'OrderReport',
    'ReportOrder',
    'ReportLine',
    'build_report',
    'status_style',
    'render_excel',
    'render_pdf',
    'render_word',
]
