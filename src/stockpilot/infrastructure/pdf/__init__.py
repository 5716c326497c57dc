"""PDF generation infrastructure."""

from stockpilot.infrastructure.pdf.report_renderer import Fpdf2ReportRenderer

__all__ = ["Fpdf2ReportRenderer"]
