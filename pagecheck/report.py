from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from pagecheck.engine.result import Report


def _text(value: str) -> str:
    # Built-in PDF fonts only cover latin-1.
    return escape(value.encode("latin-1", "ignore").decode("latin-1"))


def build_pdf_report(
    report: Report,
    output_path: str,
    *,
    title: str = "Page checks",
    target_url: Optional[str] = None,
) -> str:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    styles = getSampleStyleSheet()
    body = styles["BodyText"]
    verdict = "PASS" if report.ok else "FAIL"

    elements = [
        Paragraph(_text(title), styles["Title"]),
        Paragraph(f"URL: {_text(target_url or '-')}", body),
        Paragraph(f"Generated: {datetime.now():%Y-%m-%d %H:%M}", body),
        Paragraph(f"Overall: {verdict} ({report.passed}/{report.total} passed)", body),
        Spacer(1, 12),
        Paragraph("Checks", styles["Heading2"]),
    ]
    for name, result in report.details.items():
        status = "PASS" if result.ok else "FAIL"
        elements.append(Paragraph(_text(f"[{status}] {name}: {result.message or '-'}"), body))

    SimpleDocTemplate(str(output), pagesize=A4).build(elements)
    return str(output)
