"""Report emailing from the spreadsheet's rendered Reports tab."""

from .emailer import REPORT_CELLS, EmailTransport, ReportCells, is_rendered_body, send_report

__all__ = ["REPORT_CELLS", "EmailTransport", "ReportCells", "is_rendered_body", "send_report"]
