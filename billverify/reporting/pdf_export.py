"""PDF billing statement generation using ReportLab.

Layout: firm letterhead, statement details (client, period, payment
terms), a summary box, then one table row per entry. Flagged entries get a
secondary annotation row listing their flag messages. Written-off entries
stay listed but are marked and left out of the total due.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from billverify.models import Summary, TimeEntry, VerifierSettings
from billverify.reporting.summary import statement_totals, write_off_totals

MAX_FLAG_TEXT = 80
MAX_DESCRIPTION_TEXT = 45

styles = getSampleStyleSheet()
firm_style = ParagraphStyle(
    "FirmName",
    parent=styles["Heading1"],
    fontSize=16,
    spaceAfter=4,
    textColor=colors.HexColor("#2d3748"),
)
title_style = ParagraphStyle(
    "StatementTitle",
    parent=styles["Heading2"],
    fontSize=14,
    alignment=1,
    spaceAfter=2,
)
normal_style = ParagraphStyle(
    "StatementNormal",
    parent=styles["Normal"],
    fontSize=9,
    leading=12,
    textColor=colors.HexColor("#2d3748"),
)
flag_style = ParagraphStyle(
    "FlagNote",
    parent=normal_style,
    fontSize=7,
    textColor=colors.HexColor("#c86400"),
)


def generate_statement_pdf(
    entries: Sequence[TimeEntry],
    summary: Summary,
    settings: VerifierSettings,
    statement_date: date | None = None,
) -> BytesIO:
    """Render the billing statement for a processed batch."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=LETTER,
        rightMargin=15 * mm,
        leftMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title="Billing Statement",
    )

    story = []
    story.extend(_letterhead(settings))
    story.append(Paragraph("BILLING STATEMENT", title_style))
    story.append(
        Paragraph(
            f"Date: {(statement_date or date.today()).strftime('%m/%d/%Y')}",
            ParagraphStyle("Centered", parent=normal_style, alignment=1),
        )
    )
    story.append(Spacer(1, 6 * mm))

    if settings.client_name:
        story.append(Paragraph(f"Client: {escape(settings.client_name)}", normal_style))
    if settings.start_date or settings.end_date:
        story.append(
            Paragraph(
                f"Period: {escape(settings.start_date or 'N/A')} "
                f"to {escape(settings.end_date or 'N/A')}",
                normal_style,
            )
        )
    story.append(Paragraph(f"Payment Terms: {settings.payment_terms.label}", normal_style))
    story.append(Spacer(1, 4 * mm))

    story.append(Paragraph(f"Dear {escape(settings.client_name or 'Client')},", normal_style))
    story.append(
        Paragraph(
            "Please find below a summary of legal services rendered during the billing period.",
            normal_style,
        )
    )
    story.append(Spacer(1, 4 * mm))

    story.append(_summary_box(entries, summary, settings))
    story.append(Spacer(1, 6 * mm))
    story.append(_entries_table(entries))
    story.append(Spacer(1, 8 * mm))

    story.append(Paragraph("Respectfully submitted,", normal_style))
    story.append(Spacer(1, 3 * mm))
    signer = settings.attorney_name or settings.firm_name
    if signer:
        story.append(Paragraph(f"<b>{escape(signer)}</b>", normal_style))

    doc.build(story)
    buffer.seek(0)
    return buffer


def _letterhead(settings: VerifierSettings) -> list:
    parts = [Paragraph(escape(settings.firm_name or "Law Firm"), firm_style)]
    if settings.attorney_name:
        parts.append(Paragraph(escape(settings.attorney_name), normal_style))
    for line in settings.firm_address.splitlines():
        if line.strip():
            parts.append(Paragraph(escape(line.strip()), normal_style))

    rule = Table([[""]], colWidths=[180 * mm], rowHeights=[2])
    rule.setStyle(TableStyle([("LINEBELOW", (0, 0), (-1, -1), 1, colors.black)]))
    parts.extend([Spacer(1, 2 * mm), rule, Spacer(1, 4 * mm)])
    return parts


def _summary_box(
    entries: Sequence[TimeEntry], summary: Summary, settings: VerifierSettings
) -> Table:
    total_due, applied, balance_due = statement_totals(entries, settings)
    written_off, _ = write_off_totals(entries)
    data = [
        [
            f"Total Entries: {summary.total}",
            f"Total Hours: {summary.adjusted_hours:.1f}",
            f"Hourly Rate: ${settings.hourly_rate:,.2f}",
        ],
        [
            f"Total Due: ${total_due:,.2f}",
            f"Flagged: {summary.flagged}",
            f"Approved: {summary.approved}",
        ],
    ]
    if summary.written_off:
        data.append([f"Written Off: ${written_off:,.2f}", f"Entries: {summary.written_off}", ""])
    if settings.retainer_balance > 0:
        data.append(
            [
                f"Retainer Applied: ${applied:,.2f}",
                f"Balance Due: ${balance_due:,.2f}",
                "",
            ]
        )
    box = Table(data, colWidths=[60 * mm, 60 * mm, 60 * mm])
    box.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#f0f0f0")),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("PADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    return box


def _entries_table(entries: Sequence[TimeEntry]) -> Table:
    data = [["Date", "Attorney", "Description", "Hours", "Amount", "Conf."]]
    style = [
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.HexColor("#2d3748")),
        ("ALIGN", (3, 0), (4, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]

    for entry in entries:
        data.append(
            [
                entry.date[:10],
                entry.attorney[:15],
                (entry.narrative or entry.description)[:MAX_DESCRIPTION_TEXT],
                f"{entry.billable_hours:.1f}",
                "Written off" if entry.write_off else f"${entry.billable_amount:,.2f}",
                entry.confidence.value,
            ]
        )
        if entry.flags:
            note = "; ".join(f.message for f in entry.flags)[:MAX_FLAG_TEXT]
            data.append([Paragraph(f"Flags: {escape(note)}", flag_style), "", "", "", "", ""])
            row = len(data) - 1
            style.append(("SPAN", (0, row), (-1, row)))

    table = Table(
        data,
        colWidths=[22 * mm, 30 * mm, 76 * mm, 16 * mm, 24 * mm, 14 * mm],
        repeatRows=1,
    )
    table.setStyle(TableStyle(style))
    return table
