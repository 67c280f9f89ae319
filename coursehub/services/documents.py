# coursehub/services/documents.py
"""
Acceptance letter and invoice PDFs for an enrollment (reportlab platypus).

Both renderers take an enrollment with ``training_schedule.training`` loaded
and write a single-page A4 document to ``path``.
"""

import logging
from datetime import datetime
from decimal import Decimal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from coursehub.core.config import settings
from coursehub.core.exceptions import DocumentGenerationError

logger = logging.getLogger(__name__)

BRAND_COLOR = colors.HexColor("#1a365d")
MUTED_COLOR = colors.HexColor("#4a5568")


def _styles():
    styles = getSampleStyleSheet()
    return {
        "org": ParagraphStyle(
            "OrgName",
            parent=styles["Heading1"],
            fontSize=18,
            textColor=BRAND_COLOR,
            alignment=TA_CENTER,
            spaceAfter=4,
        ),
        "tagline": ParagraphStyle(
            "OrgTagline",
            parent=styles["Normal"],
            fontSize=10,
            textColor=MUTED_COLOR,
            alignment=TA_CENTER,
            spaceAfter=16,
        ),
        "title": ParagraphStyle(
            "DocTitle",
            parent=styles["Heading2"],
            fontSize=16,
            textColor=BRAND_COLOR,
            spaceAfter=10,
        ),
        "body": ParagraphStyle(
            "Body",
            parent=styles["Normal"],
            fontSize=11,
            leading=15,
            spaceAfter=8,
        ),
        "right": ParagraphStyle(
            "Right",
            parent=styles["Normal"],
            fontSize=10,
            alignment=TA_RIGHT,
        ),
        "footer": ParagraphStyle(
            "Footer",
            parent=styles["Normal"],
            fontSize=9,
            textColor=MUTED_COLOR,
            alignment=TA_CENTER,
            spaceBefore=20,
        ),
    }


def _doc(path: str) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        path,
        pagesize=A4,
        rightMargin=2 * cm,
        leftMargin=2 * cm,
        topMargin=1.5 * cm,
        bottomMargin=1.5 * cm,
    )


def _header(styles) -> list:
    return [
        Paragraph(settings.ORGANIZATION_NAME, styles["org"]),
        Paragraph(settings.ORGANIZATION_TAGLINE, styles["tagline"]),
    ]


def _footer(styles) -> Paragraph:
    return Paragraph(
        f"{settings.ORGANIZATION_NAME} | {settings.ORGANIZATION_CITY} | "
        f"{settings.ORGANIZATION_EMAIL} | {settings.ORGANIZATION_PHONE}",
        styles["footer"],
    )


def _fmt_date(value) -> str:
    if value is None:
        return "TBA"
    return value.strftime("%B %d, %Y")


def _fmt_money(value) -> str:
    amount = Decimal(value) if value is not None else Decimal("0")
    return f"${amount:,.2f}"


def reference_number(enrollment_id: int, now: datetime | None = None) -> str:
    """TIR-<last 4 digits of the epoch millis>-<enrollment id>"""
    now = now or datetime.now()
    millis = str(int(now.timestamp() * 1000))
    return f"TIR-{millis[-4:]}-{enrollment_id}"


def render_acceptance_letter(enrollment, path: str) -> str:
    schedule = enrollment.training_schedule
    training = schedule.training
    styles = _styles()
    today = datetime.now()

    content = _header(styles)
    content.append(Paragraph(_fmt_date(today), styles["right"]))
    content.append(Spacer(1, 12))

    recipient = [f"<b>{escape(enrollment.fullname)}</b>", escape(enrollment.email)]
    if enrollment.phone:
        recipient.append(escape(enrollment.phone))
    if enrollment.address:
        recipient.append(escape(enrollment.address))
    content.append(Paragraph("<br/>".join(recipient), styles["body"]))
    content.append(Paragraph(f"Ref: {reference_number(enrollment.id, today)}", styles["body"]))
    content.append(Spacer(1, 8))

    content.append(Paragraph("Letter of Acceptance", styles["title"]))
    content.append(Paragraph(f"Dear {escape(enrollment.fullname)},", styles["body"]))
    content.append(
        Paragraph(
            f"We are pleased to inform you that you have been accepted to participate in "
            f"<b>{escape(training.title)}</b>, scheduled from <b>{_fmt_date(schedule.start_date)}</b> "
            f"to <b>{_fmt_date(schedule.end_date)}</b>"
            + (f" at {escape(training.address)}" if training.address else "")
            + ".",
            styles["body"],
        )
    )
    content.append(
        Paragraph(
            "The training will be delivered in English. Participants are expected to "
            "attend all sessions.",
            styles["body"],
        )
    )
    content.append(
        Paragraph(
            f"The participation fee for this training is <b>{_fmt_money(training.fee)}</b>. "
            "Please refer to the attached invoice for payment details.",
            styles["body"],
        )
    )
    content.append(
        Paragraph(
            f"Should you have any questions, please contact us at {settings.ORGANIZATION_EMAIL} "
            f"or {settings.ORGANIZATION_PHONE}.",
            styles["body"],
        )
    )
    content.append(Spacer(1, 12))
    content.append(Paragraph("Sincerely,<br/><br/>Training Coordinator", styles["body"]))
    content.append(Paragraph(settings.ORGANIZATION_NAME, styles["body"]))
    content.append(_footer(styles))

    _build(path, content, "acceptance letter", enrollment.id)
    return path


def render_invoice(enrollment, path: str) -> str:
    training = enrollment.training_schedule.training
    styles = _styles()
    today = datetime.now()
    fee = Decimal(training.fee) if training.fee is not None else Decimal("0")

    content = _header(styles)
    content.append(Paragraph("INVOICE", styles["title"]))
    content.append(Paragraph(f"INVOICE # {enrollment.id}", styles["right"]))
    content.append(Paragraph(f"Date: {_fmt_date(today)}", styles["right"]))
    content.append(Spacer(1, 12))

    bill_to = ["<b>BILL TO</b>", escape(enrollment.fullname), escape(enrollment.email)]
    if enrollment.phone:
        bill_to.append(escape(enrollment.phone))
    if enrollment.address:
        bill_to.append(escape(enrollment.address))
    content.append(Paragraph("<br/>".join(bill_to), styles["body"]))
    content.append(Spacer(1, 12))

    items = Table(
        [
            ["QTY", "PRODUCT DESCRIPTION", "PRICE", "TOTAL"],
            ["1", Paragraph(escape(training.title), styles["body"]), _fmt_money(fee), _fmt_money(fee)],
        ],
        colWidths=[1.5 * cm, 9 * cm, 3 * cm, 3 * cm],
    )
    items.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), BRAND_COLOR),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cbd5e0")),
                ("TOPPADDING", (0, 0), (-1, -1), 6),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    content.append(items)
    content.append(Spacer(1, 10))

    totals = Table(
        [
            ["Subtotal", _fmt_money(fee)],
            ["Tax rate", "0.0%"],
            ["TOTAL", _fmt_money(fee)],
        ],
        colWidths=[4 * cm, 3 * cm],
        hAlign="RIGHT",
    )
    totals.setStyle(
        TableStyle(
            [
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("FONTNAME", (0, 2), (-1, 2), "Helvetica-Bold"),
                ("LINEABOVE", (0, 2), (-1, 2), 1, BRAND_COLOR),
            ]
        )
    )
    content.append(totals)
    content.append(Spacer(1, 20))
    content.append(Paragraph("<b>THANK YOU FOR YOUR BUSINESS</b>", styles["body"]))
    content.append(
        Paragraph("Payment is due max 7 days after invoice without deduction.", styles["body"])
    )
    content.append(_footer(styles))

    _build(path, content, "invoice", enrollment.id)
    return path


def _build(path: str, content: list, kind: str, enrollment_id: int) -> None:
    try:
        _doc(path).build(content)
    except Exception as e:
        logger.error(f"Failed to render {kind} for enrollment {enrollment_id}: {e}", exc_info=True)
        raise DocumentGenerationError(f"Failed to generate {kind}: {e}")
    logger.info(f"Rendered {kind} for enrollment {enrollment_id} at {path}")
