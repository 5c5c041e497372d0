"""PDF export functionality for CottonTrace documents.

Generates PDF documents using ReportLab, including:
- Batch reports over a filtered batch list
- Batch verification documents
- Certificates of authenticity
"""

from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from typing import Sequence
from xml.sax.saxutils import escape

from pydantic import BaseModel
from reportlab.graphics.charts.piecharts import Pie
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch, mm
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from cottontrace.models import Batch, Certification
from cottontrace.pipeline.aggregate import BATCH_PROFILE, aggregate
from cottontrace.reporting.export_utils import describe_filters, format_score

PLATFORM_NAME = "Silverleafe Cotton Traceability Platform"

# Styles
styles = getSampleStyleSheet()
title_style = ParagraphStyle(
    "CustomTitle",
    parent=styles["Heading1"],
    fontSize=24,
    spaceAfter=30,
    textColor=colors.HexColor("#1e3a8a"),
)
subtitle_style = ParagraphStyle(
    "CustomSubtitle",
    parent=styles["Heading2"],
    fontSize=16,
    spaceAfter=12,
    textColor=colors.HexColor("#4a5568"),
)
normal_style = ParagraphStyle(
    "CustomNormal",
    parent=styles["Normal"],
    fontSize=10,
    leading=14,
    textColor=colors.HexColor("#2d3748"),
)
centered_style = ParagraphStyle("Centered", parent=normal_style, alignment=1)

HEADER_TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#edf2f7")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#2d3748")),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("BACKGROUND", (0, 1), (-1, -1), colors.white),
        ("GRID", (0, 0), (-1, -1), 1, colors.HexColor("#e2e8f0")),
        ("PADDING", (0, 0), (-1, -1), 6),
    ]
)


def _p(text: str, style: ParagraphStyle = normal_style) -> Paragraph:
    return Paragraph(escape(str(text)), style)


def _doc(buffer: BytesIO, title: str) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=25 * mm,
        title=title,
    )


def _footer(left: str, right: str):
    """Page callback drawing the confidential footer and page number."""

    def draw(canvas, doc):
        width, _ = A4
        canvas.saveState()
        canvas.setFillColor(colors.HexColor("#10b981"))
        canvas.rect(0, 0, width, 14 * mm, stroke=0, fill=1)
        canvas.setFillColor(colors.white)
        canvas.setFont("Helvetica", 8)
        canvas.drawString(15 * mm, 6 * mm, left)
        canvas.drawRightString(width - 15 * mm, 6 * mm, right)
        canvas.setFillColor(colors.grey)
        canvas.drawRightString(width - 15 * mm, 17 * mm, f"Page {doc.page}")
        canvas.restoreState()

    return draw


def _label_rows(rows: list[tuple[str, object]]) -> Table:
    table = Table([[label, str(value)] for label, value in rows], colWidths=[2.2 * inch, 4 * inch])
    table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ]
        )
    )
    return table


def generate_batch_report_pdf(
    batches: Sequence[Batch],
    title: str = "Batch Traceability Report",
    filters: BaseModel | None = None,
    generated_by: str = "CottonTrace",
) -> bytes:
    """Summary, compliance breakdown and batch table for a filtered batch list."""
    buffer = BytesIO()
    doc = _doc(buffer, title)
    now = datetime.now(timezone.utc)
    stats = aggregate(batches, BATCH_PROFILE)

    story = []

    # --- Title Page ---
    story.append(Spacer(1, 2 * inch))
    story.append(_p(title, title_style))
    story.append(_p(f"Generated: {now.strftime('%Y-%m-%d %H:%M')} UTC"))
    story.append(_p(f"Generated by: {generated_by}"))
    story.append(_p(f"Filters: {describe_filters(filters)}"))
    story.append(PageBreak())

    # --- Summary ---
    story.append(_p("Summary", title_style))
    summary = [
        ["Metric", "Value"],
        ["Total Batches", str(stats.total)],
        ["Verified", str(stats.status_counts["verified"])],
        ["Pending", str(stats.status_counts["pending"])],
        ["Failed", str(stats.status_counts["failed"])],
        ["Average Sustainability Score", format_score(stats.average_score)],
    ]
    t = Table(summary, colWidths=[3 * inch, 3 * inch])
    t.setStyle(HEADER_TABLE_STYLE)
    story.append(t)
    story.append(Spacer(1, 0.4 * inch))

    chart_counts = [(k, v) for k, v in stats.status_counts.items() if v > 0]
    if chart_counts:
        d = Drawing(400, 180)
        pc = Pie()
        pc.x = 120
        pc.y = 10
        pc.width = 150
        pc.height = 150
        pc.data = [v for _, v in chart_counts]
        pc.labels = [k.title() for k, _ in chart_counts]
        pc.slices.strokeWidth = 0.5
        d.add(pc)
        story.append(d)

    # --- Regions ---
    if stats.groups:
        story.append(_p("By Region", subtitle_style))
        regions = [["Region", "Batches", "Average Score"]] + [
            [region, str(g.count), format_score(g.average)] for region, g in stats.groups.items()
        ]
        t_regions = Table(regions, colWidths=[2.5 * inch, 1.5 * inch, 2 * inch])
        t_regions.setStyle(HEADER_TABLE_STYLE)
        story.append(t_regions)

    # --- Batch list ---
    story.append(PageBreak())
    story.append(_p("Batches", title_style))
    if batches:
        rows = [["Batch ID", "Farm", "Harvest", "Region", "Grade", "Labour", "Score"]]
        for b in batches:
            rows.append([
                b.id,
                b.farm_name,
                b.harvest_date.strftime("%Y-%m-%d"),
                b.location.region,
                b.quality.grade,
                b.compliance_status.forced_labor_verification.status,
                str(b.sustainability_score),
            ])
        t_batches = Table(rows, repeatRows=1)
        t_batches.setStyle(HEADER_TABLE_STYLE)
        story.append(t_batches)
    else:
        story.append(_p("No batches match the selected filters."))

    footer = _footer(f"{PLATFORM_NAME} - Confidential", title)
    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    return buffer.getvalue()


def verification_code(document_id: str, at: datetime) -> str:
    return f"{document_id}-{int(at.timestamp() * 1000):x}"


def generate_verification_document(
    batch: Batch, document_id: str, generated_at: datetime | None = None
) -> bytes:
    """Batch details verification report: provenance, bales, custody and isotope marking."""
    generated_at = generated_at or datetime.now(timezone.utc)
    buffer = BytesIO()
    doc = _doc(buffer, "Batch Details Verification Report")
    equipment = batch.equipment_data

    story = [
        _p("Batch Details Verification Report", title_style),
        _p(f"Document ID: {document_id}"),
        _p(f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M')} UTC"),
        Spacer(1, 0.3 * inch),
        _p("1. Client Information", subtitle_style),
        _label_rows([
            ("Company", batch.farm_name),
            ("Location", f"{batch.location.region}, {batch.location.country}"),
            ("Contact", equipment.client_name),
        ]),
        _p("2. Equipment & Harvest Data", subtitle_style),
        _label_rows([
            ("Harvester Model", equipment.harvester_model),
            ("Harvester ID", equipment.harvester_id),
            ("Operator", equipment.operator_name),
            ("Operator ID", equipment.operator_id),
            ("Cotton Variety", equipment.cotton_variety),
            ("Field Name", equipment.field_name),
            ("Field Area", f"{equipment.field_area.value} {equipment.field_area.unit}"),
            ("Harvest Date", batch.harvest_date.strftime("%Y-%m-%d")),
        ]),
        _p("3. Bale Information", subtitle_style),
        _p(f"Module ID: {equipment.module_id}"),
    ]

    bales = [["Bale No", "Weight", "Micronaire", "Strength", "Length"]] + [
        [b.bale_no, str(b.weight), str(b.micronaire), str(b.strength), str(b.length)]
        for b in equipment.bales
    ]
    t_bales = Table(bales, colWidths=[1.2 * inch] * 5)
    t_bales.setStyle(HEADER_TABLE_STYLE)
    story.append(t_bales)

    story.append(_p("4. Blockchain Records", subtitle_style))
    story.append(_p(f"Token ID: {batch.blockchain_token_id or 'N/A'}"))
    for event in batch.custody_chain:
        if event.blockchain_transaction_id:
            story.append(_p(
                f"{event.timestamp.strftime('%Y-%m-%d %H:%M')}: "
                f"{event.from_entity} -> {event.to_entity} "
                f"(Transaction: {event.blockchain_transaction_id})"
            ))

    story.append(_p("5. Isotope Marking Data", subtitle_style))
    marking = batch.isotope_marking
    if marking:
        story.append(_label_rows([
            ("Marking Type", marking.marking_type),
            ("Marking Date", marking.marking_date.strftime("%Y-%m-%d")),
            ("Verification Status", marking.verification_status),
            (
                "Last Verification",
                marking.last_verification_date.strftime("%Y-%m-%d")
                if marking.last_verification_date
                else "N/A",
            ),
        ]))
    else:
        story.append(_p("No isotope marking data available"))

    story.append(_p("6. Chain of Custody", subtitle_style))
    for step, event in enumerate(batch.custody_chain, start=1):
        story.append(_label_rows([
            (f"Step {step}", ""),
            ("From", event.from_entity),
            ("To", event.to_entity),
            ("Date", event.timestamp.strftime("%Y-%m-%d %H:%M")),
            ("Location", f"{event.location.region}, {event.location.country}"),
            ("Method", event.verification_method),
        ]))
        story.append(Spacer(1, 0.1 * inch))

    footer = _footer(
        f"{PLATFORM_NAME} - Confidential",
        f"Verification Code: {verification_code(document_id, generated_at)}",
    )
    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    return buffer.getvalue()


SECURITY_FEATURES = [
    "This document contains a digital watermark that can be verified through the Silverleafe platform.",
    "Blockchain verification ensures this document cannot be tampered with or forged.",
    "QR code authentication provides instant verification of document authenticity.",
    "Secure timestamp provides proof of when this document was generated.",
]


def generate_certificate_pdf(certification: Certification, batch_id: str, farm_name: str) -> bytes:
    """Cotton passport: certificate of authenticity for one certification."""
    buffer = BytesIO()
    doc = _doc(buffer, "Cotton Passport")

    story = [
        _p("COTTON PASSPORT", title_style),
        _p("Official Certificate of Authenticity", centered_style),
        Spacer(1, 0.4 * inch),
        _p("CERTIFICATE OF AUTHENTICITY", subtitle_style),
        _p(f"This certifies that cotton batch {batch_id} from {farm_name}", centered_style),
        _p("has been verified and authenticated according to", centered_style),
        _p(certification.name, centered_style),
        _p(f"standards by {certification.issuer}", centered_style),
        Spacer(1, 0.3 * inch),
        _p("CERTIFICATE DETAILS", subtitle_style),
        _label_rows([
            ("Certificate ID", certification.id),
            ("Issue Date", certification.issue_date.strftime("%Y-%m-%d")),
            ("Expiry Date", certification.expiry_date.strftime("%Y-%m-%d")),
            ("Status", certification.effective_status().value.capitalize()),
            ("Type", certification.type.value.replace("-", " ").capitalize()),
        ]),
        Spacer(1, 0.3 * inch),
        _p("VERIFICATION INSTRUCTIONS", subtitle_style),
        _p("1. Scan the QR code or visit silverleafe.com/verify"),
        _p(f"2. Enter the Certificate ID: {certification.id}"),
        _p(f"3. Enter the Batch ID: {batch_id}"),
        _p("4. Confirm the details match this certificate"),
        Spacer(1, 0.3 * inch),
        _p("SECURITY FEATURES", subtitle_style),
    ]
    story.extend(_p(f"- {feature}") for feature in SECURITY_FEATURES)

    footer = _footer(f"{PLATFORM_NAME} - Confidential", "Verify at: silverleafe.com/verify")
    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    return buffer.getvalue()
