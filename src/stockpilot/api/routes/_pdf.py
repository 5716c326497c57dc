"""PDF download responses."""

from fastapi import Response

from stockpilot.core.services.report_print_service import PrintedReport


def pdf_response(printed: PrintedReport, status_code: int = 200) -> Response:
    """Send a rendered report as an attachment, tagged with its archive id."""
    return Response(
        content=printed.content,
        status_code=status_code,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{printed.file_name}"',
            "X-Report-Id": printed.report.id,
            "X-Report-Reprint": "true" if printed.reprint else "false",
        },
    )
