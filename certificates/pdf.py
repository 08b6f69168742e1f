"""Landscape A4 certificate rendering with reportlab."""
from __future__ import annotations

from io import BytesIO

from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from .models import Certificate
from .services import placement_label

NAVY = colors.HexColor("#0f172a")
ACCENT = colors.HexColor("#4f46e5")
MUTED = colors.HexColor("#64748b")
PLACE_COLORS = {1: "#b45309", 2: "#475569", 3: "#c2410c"}


def _result_line(certificate: Certificate) -> str:
    parts = []
    if certificate.rank and certificate.total_participants:
        parts.append(f"Rank #{certificate.rank} of {certificate.total_participants}")
    if certificate.score is not None:
        if certificate.max_score:
            parts.append(f"Score {certificate.score:g} / {certificate.max_score:g}")
        else:
            parts.append(f"Score {certificate.score:g}")
    return "   |   ".join(parts)


def render_certificate_pdf(certificate: Certificate, verify_url: str = "") -> bytes:
    buffer = BytesIO()
    p = canvas.Canvas(buffer, pagesize=landscape(A4))
    width, height = landscape(A4)

    p.setFillColor(colors.white)
    p.rect(0, 0, width, height, fill=True, stroke=False)

    # double border
    p.setStrokeColor(ACCENT)
    p.setLineWidth(10)
    p.rect(20, 20, width - 40, height - 40, fill=False, stroke=True)
    p.setStrokeColor(NAVY)
    p.setLineWidth(1.5)
    p.rect(38, 38, width - 76, height - 76, fill=False, stroke=True)

    p.setFont("Helvetica-Bold", 14)
    p.setFillColor(ACCENT)
    p.drawCentredString(width / 2, height - 85, "ELEVATE")

    p.setFont("Helvetica-Bold", 34)
    p.setFillColor(NAVY)
    p.drawCentredString(width / 2, height - 135, certificate.title.upper())

    placement = placement_label(certificate.rank)
    if placement:
        p.setFont("Helvetica-Bold", 24)
        p.setFillColor(colors.HexColor(PLACE_COLORS[certificate.rank]))
        p.drawCentredString(width / 2, height - 175, placement)

    p.setFont("Helvetica-Oblique", 18)
    p.setFillColor(MUTED)
    p.drawCentredString(width / 2, height / 2 + 50, "This is to certify that")

    p.setFont("Helvetica-Bold", 32)
    p.setFillColor(NAVY)
    p.drawCentredString(width / 2, height / 2 + 5, certificate.user.display_name)

    verb = "has achieved outstanding results in" if certificate.is_winner else "has successfully participated in"
    p.setFont("Helvetica", 18)
    p.setFillColor(MUTED)
    p.drawCentredString(width / 2, height / 2 - 35, verb)

    p.setFont("Helvetica-Bold", 24)
    p.setFillColor(ACCENT)
    p.drawCentredString(width / 2, height / 2 - 75, certificate.event_name)

    p.setFont("Helvetica", 14)
    p.setFillColor(MUTED)
    p.drawCentredString(width / 2, height / 2 - 100, f"Organized by {certificate.organization_name}")

    result = _result_line(certificate)
    if result:
        p.setFont("Helvetica-Bold", 14)
        p.setFillColor(NAVY)
        p.drawCentredString(width / 2, height / 2 - 130, result)

    issued = timezone.localtime(certificate.issued_at) if certificate.issued_at else timezone.localtime()
    p.setFont("Helvetica", 12)
    p.setFillColor(colors.black)
    p.drawString(60, 70, f"Issued on {issued.strftime('%B %d, %Y')}")
    p.drawString(60, 52, f"Certificate ID: {certificate.certificate_id}")
    if verify_url:
        p.setFont("Helvetica", 9)
        p.setFillColor(MUTED)
        p.drawString(60, 38 + 4, f"Verify at: {verify_url}")

    p.setStrokeColor(NAVY)
    p.setLineWidth(1)
    p.line(width - 260, 80, width - 60, 80)
    p.setFont("Helvetica", 12)
    p.setFillColor(colors.black)
    p.drawString(width - 260, 62, "Authorized Signature")

    p.showPage()
    p.save()
    return buffer.getvalue()
