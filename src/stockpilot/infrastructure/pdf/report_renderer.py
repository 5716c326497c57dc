"""
Report PDF renderer using fpdf2.

Renders any ReportDocument as an A4 page set: centered title block, detail
lines, a bordered table with alternating row shading and a repeated header
row after page breaks, and a page-numbered footer.
"""

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from stockpilot.config.settings import PdfSettings, get_settings
from stockpilot.core.entities.report import ReportType
from stockpilot.core.exceptions import ReportRenderError
from stockpilot.core.services.report_print_service import (
    IReportRenderer,
    ReportDocument,
    ReportTable,
)

# Relative column widths per report type; scaled to the printable width.
_COLUMN_WEIGHTS: dict[ReportType, tuple[float, ...]] = {
    ReportType.ITEM: (38, 30, 18, 22, 22, 60),
    ReportType.WAREHOUSE: (140, 50),
    ReportType.TRANSACTIONS: (30, 45, 40, 30, 18, 18, 18, 78),
}

_ROW_HEIGHT = 6


def _latin1(text: str) -> str:
    """Core PDF fonts only cover latin-1; replace anything else with '?'."""
    return text.encode("latin-1", "replace").decode("latin-1")


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 3)] + "..."


class _ReportPdf(FPDF):
    """FPDF subclass that renders the footer on every page."""

    def __init__(self, pdf_settings: PdfSettings, orientation: str = "P") -> None:
        super().__init__(orientation=orientation, format="A4")
        self._pdf_settings = pdf_settings

    def footer(self) -> None:
        self.set_y(-15)
        self.set_draw_color(220, 220, 220)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_draw_color(0, 0, 0)
        self.set_font("Helvetica", "I", 8)
        self.cell(0, 6, _latin1(self._pdf_settings.footer_text), align="L")
        self.set_x(-40)
        self.cell(0, 6, f"Page {self.page_no()} of {{nb}}", align="R")


class Fpdf2ReportRenderer(IReportRenderer):
    """Renders report documents to PDF bytes with fpdf2."""

    def __init__(self, pdf_settings: PdfSettings | None = None) -> None:
        self._settings = pdf_settings or get_settings().pdf

    def render(self, document: ReportDocument) -> bytes:
        """Render a ReportDocument into PDF bytes."""
        orientation = "L" if document.report_type == ReportType.TRANSACTIONS else "P"
        try:
            pdf = _ReportPdf(self._settings, orientation=orientation)
            pdf.alias_nb_pages()
            pdf.set_auto_page_break(auto=True, margin=20)
            pdf.set_title(_latin1(document.title))
            pdf.set_author(_latin1(document.printed_by))
            pdf.add_page()

            self._render_header(pdf, document)
            self._render_separator(pdf)
            self._render_table(pdf, document)

            return bytes(pdf.output())
        except (ValueError, RuntimeError, OSError) as e:
            raise ReportRenderError(document.report_type.value, str(e)) from e

    def _render_header(self, pdf: FPDF, document: ReportDocument) -> None:
        pdf.set_font("Helvetica", "I", 9)
        pdf.set_text_color(120, 120, 120)
        pdf.cell(
            0, 5, _latin1(self._settings.system_name), align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_text_color(0, 0, 0)

        pdf.set_font("Helvetica", "B", 16)
        pdf.multi_cell(
            0, 9, _latin1(document.title), align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        if document.subtitle:
            pdf.set_font("Helvetica", "", 11)
            pdf.cell(
                0, 6, _latin1(document.subtitle), align="C",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.ln(4)

        for label, value in document.details:
            pdf.set_font("Helvetica", "B", 10)
            pdf.cell(40, 6, _latin1(f"{label}:"))
            pdf.set_font("Helvetica", "", 10)
            pdf.cell(0, 6, _latin1(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(2)

    @staticmethod
    def _render_separator(pdf: FPDF) -> None:
        y = pdf.get_y()
        pdf.set_draw_color(100, 100, 100)
        pdf.line(pdf.l_margin, y, pdf.w - pdf.r_margin, y)
        pdf.set_draw_color(0, 0, 0)
        pdf.ln(4)

    def _column_widths(self, pdf: FPDF, document: ReportDocument) -> list[float]:
        count = len(document.table.columns)
        weights = _COLUMN_WEIGHTS.get(document.report_type)
        if weights is None or len(weights) != count:
            weights = tuple(1.0 for _ in range(count))
        total = sum(weights)
        return [pdf.epw * w / total for w in weights]

    @staticmethod
    def _render_header_row(pdf: FPDF, table: ReportTable, widths: list[float]) -> None:
        pdf.set_font("Helvetica", "B", 9)
        pdf.set_fill_color(240, 240, 240)
        for width, header in zip(widths, table.columns):
            pdf.cell(width, 7, _latin1(header), border=1, fill=True, align="C")
        pdf.ln()

    def _render_table(self, pdf: FPDF, document: ReportDocument) -> None:
        table = document.table
        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(0, 8, _latin1(document.section), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        if not table.rows:
            pdf.ln(4)
            pdf.set_font("Helvetica", "I", 10)
            pdf.cell(
                0, 8, _latin1(table.empty_message), align="C",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
            return

        widths = self._column_widths(pdf, document)
        self._render_header_row(pdf, table, widths)

        comment_limit = self._settings.max_comment_chars
        pdf.set_font("Helvetica", "", 8)
        for idx, row in enumerate(table.rows, 1):
            if pdf.will_page_break(_ROW_HEIGHT):
                pdf.add_page()
                self._render_header_row(pdf, table, widths)
                pdf.set_font("Helvetica", "", 8)

            fill = idx % 2 == 0
            if fill:
                pdf.set_fill_color(248, 248, 248)

            for col, (width, value) in enumerate(zip(widths, row)):
                # roughly 2 characters per millimetre at 8pt
                limit = comment_limit if col == len(row) - 1 else int(width / 1.9)
                align = "C" if col in table.numeric_columns else "L"
                pdf.cell(
                    width, _ROW_HEIGHT, _latin1(_clip(value, limit)),
                    border=1, align=align, fill=fill,
                )
            pdf.ln()
