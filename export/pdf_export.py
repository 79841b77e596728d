"""PDF export of calculator results."""
from __future__ import annotations
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.config import get_settings
from core.export_log import ExportLog
from core.formatters import format_number, format_result
from core.presets import DISCLAIMER

GRID = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("BOX", (0, 0), (-1, -1), 1, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def _as_dict(item: Any) -> Dict[str, Any]:
    return item.model_dump() if hasattr(item, "model_dump") else dict(item)


def _input_text(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return format_number(value, 2 if float(value) % 1 else 0)
    return "" if value is None else str(value)


def build_calculator_pdf(data: Dict[str, Any]) -> bytes:
    """Render a one-page calculator summary and return the PDF bytes.

    ``data`` carries ``title``, ``inputs`` (label to value), ``results`` (a
    list of :class:`~core.models.CalculatorResult`), optional ``advisories``
    (rule results), optional ``metadata`` (a :class:`~core.configs.PageMetadata`
    filling the document subject and keywords) and optional ``branding``
    overriding the configured brand.
    """

    settings = get_settings()
    branding = {"name": settings.brand_name, "nmls": settings.nmls, "phone": settings.phone,
                "email": settings.contact_email, **data.get("branding", {})}
    styles = getSampleStyleSheet()
    buf = BytesIO()
    meta = data.get("metadata")
    doc = SimpleDocTemplate(buf, pagesize=LETTER, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36,
                            title=data.get("title", "Calculator Results"), author=branding["name"],
                            subject=meta.description if meta else "", keywords=list(meta.keywords) if meta else [])
    story: List[Any] = []
    story += [Paragraph(f"<b>{escape(branding['name'])}</b>", styles["Title"]), Spacer(1, 6)]
    contact = "  |  ".join(
        part for part in (
            f"NMLS: {branding['nmls']}" if branding.get("nmls") else "",
            branding.get("phone", ""),
            branding.get("email", ""),
        ) if part
    )
    if contact:
        story.append(Paragraph(escape(contact), styles["Normal"]))
    generated = data.get("generated_at") or datetime.now()
    story += [
        Paragraph(f"<b>{escape(data.get('title', 'Calculator Results'))}</b>", styles["Heading2"]),
        Paragraph(f"Generated {generated:%B %d, %Y %I:%M %p}", styles["Normal"]),
        Spacer(1, 12),
    ]

    inputs = data.get("inputs", {})
    if inputs:
        t = Table([["Input", "Value"]] + [[k, _input_text(v)] for k, v in inputs.items()],
                  hAlign="LEFT", colWidths=[260, 260])
        t.setStyle(GRID)
        story += [Paragraph("<b>Your Inputs</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 12)]

    results = data.get("results", [])
    if results:
        rows = [["Result", "Value"]] + [[r.label, format_result(r)] for r in results]
        t = Table(rows, hAlign="LEFT", colWidths=[260, 260])
        style = TableStyle(GRID.getCommands())
        for i, r in enumerate(results, start=1):
            if r.highlight:
                style.add("FONTNAME", (0, i), (-1, i), "Helvetica-Bold")
        t.setStyle(style)
        story += [Paragraph("<b>Results</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 12)]

    advisories = [_as_dict(a) for a in data.get("advisories", [])]
    if advisories:
        a_rows = [["Code", "Severity", "Message"]] + [
            [a.get("code", ""), a.get("severity", ""), Paragraph(escape(a.get("message", "")), styles["Normal"])]
            for a in advisories
        ]
        t = Table(a_rows, hAlign="LEFT", colWidths=[130, 60, 330])
        t.setStyle(GRID)
        story += [Paragraph("<b>Advisories</b>", styles["Heading3"]), Spacer(1, 6), t, Spacer(1, 12)]

    story += [Spacer(1, 12), Paragraph(f"<font size=8>{escape(DISCLAIMER)}</font>", styles["Normal"])]
    doc.build(story)
    return buf.getvalue()


def export_calculator_pdf(data: Dict[str, Any], log: ExportLog, fingerprint: str) -> bytes:
    """Record the export against ``fingerprint`` and build the PDF.

    Raises :class:`~core.errors.ExportRateLimitError` once the rolling limit
    is used up; nothing is rendered in that case.
    """

    log.record(fingerprint, data.get("calculator_id", data.get("title", "")))
    return build_calculator_pdf(data)
