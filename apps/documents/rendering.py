"""
PDF rendering for consignment notes, freight bills and load chalans.

Every renderer takes a saved record and returns the PDF as bytes. Drawing is
done directly on a ReportLab canvas in A4 landscape; coordinates are points
from the bottom-left corner. Any failure is re-raised as Internal.
"""

import io
import logging
from decimal import Decimal

from django.conf import settings
from django.utils import timezone
from reportlab.lib.colors import HexColor, black, white
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfgen import canvas

from apps.common.exceptions import Internal
from .words import rupees_in_words

logger = logging.getLogger("kvl.documents")

PAGE_W, PAGE_H = landscape(A4)   # 841.89 x 595.27
MARGIN = 20

BRAND  = HexColor("#B91C1C")
INK    = HexColor("#1F2937")
MUTED  = HexColor("#6B7280")
SHADE  = HexColor("#F3F4F6")

COPY_LABELS = ("CONSIGNEE COPY", "DRIVER COPY", "CONSIGNOR COPY")


# ─── Formatting helpers ───────────────────────────────────────────────────────
def fmt_date(value) -> str:
    if not value:
        return "-"
    if hasattr(value, "tzinfo") and value.tzinfo is not None:
        value = timezone.localtime(value)
    return value.strftime("%d/%m/%Y")


def fmt_money(value) -> str:
    return f"{Decimal(value or 0):,.2f}"


def fmt_text(value, limit=None) -> str:
    text = "" if value is None else str(value)
    if limit and len(text) > limit:
        text = text[: limit - 1] + "."
    return text


def _render(kind: str, number: str, draw, record) -> bytes:
    buffer = io.BytesIO()
    try:
        c = canvas.Canvas(buffer, pagesize=landscape(A4))
        c.setTitle(f"{kind} {number}")
        c.setAuthor(settings.KVL_COMPANY_NAME)
        draw(c, record)
        c.save()
    except Exception as exc:
        logger.exception("%s %s: PDF rendering failed", kind, number)
        raise Internal(f"Failed to generate {kind.lower()} PDF: {exc}") from exc
    content = buffer.getvalue()
    logger.info("%s %s rendered (%d bytes)", kind, number, len(content))
    return content


# ─── Shared page furniture ────────────────────────────────────────────────────
def _frame(c, title: str, subtitle: str = ""):
    """Outer border plus company header band. Returns the y just below the header."""
    c.setStrokeColor(INK)
    c.setLineWidth(1)
    c.rect(MARGIN, MARGIN, PAGE_W - 2 * MARGIN, PAGE_H - 2 * MARGIN)

    top = PAGE_H - MARGIN
    c.setFillColor(BRAND)
    c.setFont("Helvetica-Bold", 20)
    c.drawString(MARGIN + 12, top - 30, settings.KVL_COMPANY_NAME.upper())
    c.setFillColor(MUTED)
    c.setFont("Helvetica", 9)
    c.drawString(MARGIN + 12, top - 44, "Fleet Owners & Transport Contractors")

    c.setFillColor(INK)
    c.setFont("Helvetica-Bold", 14)
    c.drawRightString(PAGE_W - MARGIN - 12, top - 28, title)
    if subtitle:
        c.setFont("Helvetica-Bold", 10)
        c.setFillColor(BRAND)
        c.drawRightString(PAGE_W - MARGIN - 12, top - 44, subtitle)

    c.setStrokeColor(INK)
    c.line(MARGIN, top - 54, PAGE_W - MARGIN, top - 54)
    c.setFillColor(INK)
    return top - 54


def _label_value(c, x, y, label, value, width=None):
    c.setFont("Helvetica-Bold", 8)
    c.setFillColor(MUTED)
    c.drawString(x, y, label)
    c.setFont("Helvetica", 10)
    c.setFillColor(INK)
    c.drawString(x, y - 12, fmt_text(value, width))


def _table(c, x, y, columns, rows, row_height=16):
    """
    columns: [(header, width, align)], align in {"l", "r"}.
    Draws a header band then one row per entry; returns the y below the last row.
    """
    total_w = sum(w for _, w, _ in columns)
    c.setFillColor(INK)
    c.rect(x, y - row_height, total_w, row_height, stroke=0, fill=1)
    c.setFillColor(white)
    c.setFont("Helvetica-Bold", 8)
    cx = x
    for header, width, align in columns:
        if align == "r":
            c.drawRightString(cx + width - 4, y - row_height + 5, header)
        else:
            c.drawString(cx + 4, y - row_height + 5, header)
        cx += width
    y -= row_height

    c.setFont("Helvetica", 8)
    for index, row in enumerate(rows):
        if index % 2:
            c.setFillColor(SHADE)
            c.rect(x, y - row_height, total_w, row_height, stroke=0, fill=1)
        c.setFillColor(black)
        cx = x
        for (header, width, align), cell in zip(columns, row):
            text = fmt_text(cell, int(width / 4.5))
            if align == "r":
                c.drawRightString(cx + width - 4, y - row_height + 5, text)
            else:
                c.drawString(cx + 4, y - row_height + 5, text)
            cx += width
        y -= row_height

    c.setStrokeColor(INK)
    c.rect(x, y, total_w, (len(rows) + 1) * row_height, stroke=1, fill=0)
    return y


def _payment_footer(c):
    y = MARGIN + 48
    c.setFont("Helvetica-Bold", 9)
    c.setFillColor(INK)
    if settings.KVL_COMPANY_PAN:
        c.drawString(MARGIN + 12, y, f"PAN NO : {settings.KVL_COMPANY_PAN}")
    if settings.KVL_COMPANY_GSTIN:
        c.drawString(MARGIN + 12, y - 14, f"GST NO : {settings.KVL_COMPANY_GSTIN}")
    c.setFont("Helvetica", 9)
    c.drawString(MARGIN + 12, y - 28, "A/C PAYEE CHEQUE / RTGS / NEFT")

    if settings.KVL_BANK_NAME:
        box_w, box_x = 220, (PAGE_W - 220) / 2
        c.roundRect(box_x, y - 34, box_w, 50, 6)
        c.setFont("Helvetica-Bold", 10)
        c.drawCentredString(box_x + box_w / 2, y + 4, settings.KVL_BANK_NAME)
        c.setFont("Helvetica", 9)
        c.drawCentredString(box_x + box_w / 2, y - 10, f"A/C NO. {settings.KVL_BANK_ACCOUNT}")
        c.drawCentredString(box_x + box_w / 2, y - 24, f"IFSC: {settings.KVL_BANK_IFSC}")

    c.setFont("Helvetica-Bold", 10)
    c.setFillColor(BRAND)
    c.drawRightString(PAGE_W - MARGIN - 12, y, f"For, {settings.KVL_COMPANY_NAME.upper()}")
    c.setFillColor(MUTED)
    c.setFont("Helvetica", 8)
    c.drawRightString(PAGE_W - MARGIN - 12, MARGIN + 10, "Authorised Signatory")
    c.setFillColor(INK)


# ─── Consignment note ─────────────────────────────────────────────────────────
def _draw_consignment_page(c, consignment, copy_label):
    y = _frame(c, "CONSIGNMENT NOTE", copy_label)
    left, mid, right = MARGIN + 12, MARGIN + 280, MARGIN + 560

    _label_value(c, left, y - 18, "CONSIGNMENT NO.", consignment.consignment_number)
    _label_value(c, mid, y - 18, "BOOKING DATE", fmt_date(consignment.booking_date))
    _label_value(c, right, y - 18, "ROUTE", f"{consignment.from_city} to {consignment.to_city}")

    for x, title, party in ((left, "CONSIGNOR", consignment.consignor), (mid, "CONSIGNEE", consignment.consignee)):
        c.setFont("Helvetica-Bold", 9)
        c.setFillColor(BRAND)
        c.drawString(x, y - 56, title)
        c.setFillColor(INK)
        c.setFont("Helvetica", 9)
        lines = [party.name, party.address, f"Mob: {party.mobile}"]
        if party.gst_number:
            lines.append(f"GSTIN: {party.gst_number}")
        for offset, text in enumerate(lines):
            c.drawString(x, y - 70 - offset * 12, fmt_text(text, 55))

    _label_value(c, right, y - 56, "VEHICLE", consignment.vehicle_number or "-")
    _label_value(c, right, y - 84, "DRIVER",
                 f"{consignment.driver_name} ({consignment.driver_mobile})" if consignment.driver_name else "-")
    _label_value(c, right, y - 112, "E-WAY BILL / INVOICE",
                 f"{consignment.eway_bill_number or '-'} / {consignment.invoice_number or '-'}")

    columns = [
        ("PKGS", 50, "l"), ("TYPE", 80, "l"), ("DESCRIPTION", 260, "l"),
        ("ACTUAL WT", 80, "r"), ("CHARGED WT", 80, "r"), ("VALUE", 90, "r"),
    ]
    rows = [(
        consignment.packages, consignment.package_type, consignment.description,
        fmt_money(consignment.actual_weight), fmt_money(consignment.charged_weight), fmt_money(consignment.value),
    )]
    table_bottom = _table(c, left, y - 150, columns, rows)

    charges = [
        ("Freight", consignment.freight), ("Hamali", consignment.hamali),
        ("S.T. Charges", consignment.st_charges), ("Door Delivery", consignment.door_delivery),
        ("Other Charges", consignment.other_charges), ("Risk Charges", consignment.risk_charges),
        ("Service Tax", consignment.service_tax),
    ]
    cy = y - 150
    c.setFont("Helvetica", 9)
    for label, amount in charges:
        c.drawString(right, cy - 12, label)
        c.drawRightString(PAGE_W - MARGIN - 12, cy - 12, fmt_money(amount))
        cy -= 14
    c.line(right, cy - 4, PAGE_W - MARGIN - 12, cy - 4)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(right, cy - 18, "GRAND TOTAL")
    c.drawRightString(PAGE_W - MARGIN - 12, cy - 18, f"Rs. {fmt_money(consignment.grand_total)}")

    info_y = table_bottom - 30
    _label_value(c, left, info_y, "PAYMENT", consignment.get_to_pay_display())
    _label_value(c, left + 130, info_y, "GST PAYABLE BY", consignment.get_gst_payable_by_display())
    _label_value(c, left + 260, info_y, "RISK", consignment.get_risk_display())
    _label_value(c, left + 390, info_y, "PICKUP / DELIVERY",
                 f"{consignment.get_type_of_pickup_display()} / {consignment.get_type_of_delivery_display()}")

    c.setFont("Helvetica", 8)
    c.setFillColor(MUTED)
    c.drawString(left, MARGIN + 24, "Goods are carried subject to the terms and conditions printed overleaf.")
    if consignment.pan or settings.KVL_COMPANY_PAN:
        c.drawString(left, MARGIN + 12, f"PAN NO. {consignment.pan or settings.KVL_COMPANY_PAN}")
    c.setFillColor(BRAND)
    c.setFont("Helvetica-Bold", 10)
    c.drawRightString(PAGE_W - MARGIN - 12, MARGIN + 12, f"For, {settings.KVL_COMPANY_NAME.upper()}")
    c.setFillColor(INK)


def render_consignment_note(consignment) -> bytes:
    """Three identical pages, one per copy label."""
    def draw(c, record):
        for label in COPY_LABELS:
            _draw_consignment_page(c, record, label)
            c.showPage()

    return _render("Consignment", consignment.consignment_number, draw, consignment)


# ─── Freight bill ─────────────────────────────────────────────────────────────
def _draw_freight_bill(c, bill):
    y = _frame(c, "FREIGHT BILL", bill.get_status_display().upper())
    left = MARGIN + 12

    _label_value(c, left, y - 18, "BILL NO.", bill.bill_number)
    _label_value(c, left + 180, y - 18, "BILL DATE", fmt_date(bill.bill_date))
    _label_value(c, left + 320, y - 18, "BRANCH", bill.billing_branch)

    c.setFont("Helvetica-Bold", 9)
    c.setFillColor(BRAND)
    c.drawString(left + 480, y - 18, "BILLED TO")
    c.setFillColor(INK)
    c.setFont("Helvetica-Bold", 10)
    c.drawString(left + 480, y - 31, fmt_text(bill.party_name, 45))
    c.setFont("Helvetica", 9)
    c.drawString(left + 480, y - 43, fmt_text(bill.party_address, 60))
    if bill.party_gst_number:
        c.drawString(left + 480, y - 55, f"GSTIN: {bill.party_gst_number}")

    columns = [
        ("#", 22, "l"), ("CN NO.", 100, "l"), ("DATE", 62, "l"), ("DESTINATION", 98, "l"),
        ("WEIGHT", 60, "r"), ("RATE", 50, "r"), ("FREIGHT", 70, "r"), ("HAMALI", 58, "r"),
        ("ST CHG", 55, "r"), ("DOOR DEL", 58, "r"), ("OTHER", 55, "r"), ("TOTAL", 82, "r"),
    ]
    rows = [
        (
            index, line.consignment_number, fmt_date(line.consignment_date), line.destination,
            fmt_money(line.charged_weight), fmt_money(line.rate), fmt_money(line.freight),
            fmt_money(line.hamali), fmt_money(line.st_charges), fmt_money(line.door_delivery),
            fmt_money(line.other_charges), fmt_money(line.grand_total),
        )
        for index, line in enumerate(bill.lines.all(), start=1)
    ]
    ty = _table(c, left, y - 72, columns, rows)

    right_x = PAGE_W - MARGIN - 12
    c.setFont("Helvetica", 9)
    c.drawString(right_x - 220, ty - 16, "Total Amount")
    c.drawRightString(right_x, ty - 16, fmt_money(bill.total_amount))
    ty -= 16
    for adj in bill.adjustments.all():
        sign = "-" if adj.signed_amount < 0 else "+"
        c.drawString(right_x - 220, ty - 14, fmt_text(f"{adj.get_adjustment_type_display()}: {adj.description}", 34))
        c.drawRightString(right_x, ty - 14, f"{sign} {fmt_money(abs(adj.amount))}")
        ty -= 14
    c.line(right_x - 220, ty - 6, right_x, ty - 6)
    c.setFont("Helvetica-Bold", 11)
    c.drawString(right_x - 220, ty - 20, "FINAL AMOUNT")
    c.drawRightString(right_x, ty - 20, f"Rs. {fmt_money(bill.final_amount)}")

    c.setFont("Helvetica-Bold", 9)
    c.drawString(left, ty - 20, f"Amount in Words: {rupees_in_words(bill.final_amount)}")

    _payment_footer(c)


def render_freight_bill(bill) -> bytes:
    def draw(c, record):
        _draw_freight_bill(c, record)
        c.showPage()

    return _render("Freight bill", bill.bill_number, draw, bill)


# ─── Load chalan ──────────────────────────────────────────────────────────────
def _draw_load_chalan(c, chalan):
    y = _frame(c, "LOAD CHALAN", chalan.get_status_display().upper())
    left = MARGIN + 12

    header = [
        ("CHALAN NO.", chalan.chalan_number), ("DATE", fmt_date(chalan.date)),
        ("FROM", chalan.booking_branch), ("TO HUB", chalan.destination_hub),
        ("DISPATCH", chalan.dispatch_time or "-"),
    ]
    for index, (label, value) in enumerate(header):
        _label_value(c, left + index * 160, y - 18, label, value, 28)

    fleet = [
        ("VEHICLE NO.", chalan.vehicle_number), ("ENGINE NO.", chalan.vehicle_engine_number),
        ("CHASSIS NO.", chalan.vehicle_chassis_number),
        ("INSURANCE", f"{chalan.vehicle_insurance_policy_no} ({fmt_date(chalan.vehicle_insurance_validity)})"),
        ("OWNER", chalan.owner_name),
    ]
    for index, (label, value) in enumerate(fleet):
        _label_value(c, left + index * 160, y - 50, label, value or "-", 28)

    crew = [
        ("DRIVER", chalan.driver_name), ("MOBILE", chalan.driver_mobile),
        ("LICENSE NO.", chalan.driver_license_number), ("CLEANER", chalan.cleaner_name),
        ("POSTING BY", chalan.posting_by),
    ]
    for index, (label, value) in enumerate(crew):
        _label_value(c, left + index * 160, y - 82, label, value or "-", 28)

    columns = [
        ("#", 22, "l"), ("CN NO.", 100, "l"), ("PKGS", 40, "r"), ("TYPE", 62, "l"),
        ("DESCRIPTION", 150, "l"), ("WEIGHT", 62, "r"), ("FREIGHT", 70, "r"), ("DESTINATION", 90, "l"),
    ]
    rows = [
        (
            index, line.consignment_number, line.packages, line.package_type, line.description,
            fmt_money(line.weight), fmt_money(line.freight_amount), line.destination,
        )
        for index, line in enumerate(chalan.lines.all(), start=1)
    ]
    rows.append(("", f"{chalan.total_lr_count} LR(s)", chalan.total_packages, "", "TOTAL",
                 fmt_money(chalan.total_weight), fmt_money(chalan.total_freight), ""))
    ty = _table(c, left, y - 112, columns, rows)

    # Charges summary panel
    panel_x, panel_w = PAGE_W - MARGIN - 12 - 190, 190
    charges = [
        ("Lorry Freight", chalan.lorry_freight), ("Loading", chalan.loading_charges),
        ("Unloading", chalan.unloading_charges), ("Other", chalan.other_charges),
        ("Total Freight", chalan.total_freight), ("Advance Paid", chalan.advance_paid),
        ("TDS", chalan.tds_deduction),
    ]
    py = y - 112
    c.setFillColor(SHADE)
    c.rect(panel_x, py - 16 * (len(charges) + 2), panel_w, 16 * (len(charges) + 2), stroke=1, fill=1)
    c.setFillColor(INK)
    c.setFont("Helvetica-Bold", 9)
    c.drawString(panel_x + 6, py - 12, "CHARGES SUMMARY")
    c.setFont("Helvetica", 9)
    for label, amount in charges:
        py -= 16
        c.drawString(panel_x + 6, py - 12, label)
        c.drawRightString(panel_x + panel_w - 6, py - 12, fmt_money(amount))
    py -= 16
    c.setFont("Helvetica-Bold", 10)
    c.drawString(panel_x + 6, py - 12, "BALANCE")
    c.drawRightString(panel_x + panel_w - 6, py - 12, f"Rs. {fmt_money(chalan.balance_freight)}")

    c.setFont("Helvetica-Bold", 9)
    c.drawString(left, ty - 20, f"Balance in Words: {rupees_in_words(chalan.balance_freight)}")
    c.setFont("Helvetica", 9)
    c.drawString(left, ty - 34, f"Freight Payable At: {chalan.frt_payable_at or '-'}")
    c.drawString(left, ty - 48, f"Risk: {chalan.risk_note or '-'}")
    if chalan.remarks:
        c.drawString(left, ty - 62, fmt_text(f"Remarks: {chalan.remarks}", 110))

    c.setFont("Helvetica-Bold", 10)
    c.setFillColor(BRAND)
    c.drawRightString(PAGE_W - MARGIN - 12, MARGIN + 24, f"For, {settings.KVL_COMPANY_NAME.upper()}")
    c.setFillColor(MUTED)
    c.setFont("Helvetica", 8)
    c.drawString(left, MARGIN + 12, "Driver's Signature")
    c.drawRightString(PAGE_W - MARGIN - 12, MARGIN + 10, "Authorised Signatory")
    c.setFillColor(INK)


def render_load_chalan(chalan) -> bytes:
    def draw(c, record):
        _draw_load_chalan(c, record)
        c.showPage()

    return _render("Load chalan", chalan.chalan_number, draw, chalan)
