"""
Document tests: amount-in-words and PDF rendering.

Run: pytest tests/test_documents.py -v
"""

from decimal import Decimal
from unittest.mock import patch

import pytest

from apps.common.exceptions import Internal
from apps.documents.rendering import (
    render_consignment_note, render_freight_bill, render_load_chalan, fmt_money,
)
from apps.documents.words import amount_in_words, rupees_in_words


# ═══════════════════════════════════════════════════════════════════════════════
# UNIT — amount in words (Indian numbering)
# ═══════════════════════════════════════════════════════════════════════════════

class TestAmountInWords:

    @pytest.mark.parametrize("amount, words", [
        (0,           "Zero"),
        (-25,         "Zero"),
        (7,           "Seven"),
        (15,          "Fifteen"),
        (40,          "Forty"),
        (100,         "One Hundred"),
        (550,         "Five Hundred Fifty"),
        (1001,        "One Thousand One"),
        (12345,       "Twelve Thousand Three Hundred Forty Five"),
        (100000,      "One Lakh"),
        (1234567,     "Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven"),
        (100000000,   "Ten Crore"),
        (12340000000, "One Thousand Two Hundred Thirty Four Crore"),
    ])
    def test_indian_scales(self, amount, words):
        assert amount_in_words(amount) == words

    def test_paise_are_dropped(self):
        assert amount_in_words(Decimal("1150.99")) == "One Thousand One Hundred Fifty"

    def test_none_is_zero(self):
        assert amount_in_words(None) == "Zero"

    def test_rupees_wrapper(self):
        assert rupees_in_words(Decimal("988.00")) == "Rupees Nine Hundred Eighty Eight Only"

    def test_money_format(self):
        assert fmt_money(Decimal("1234567.5")) == "1,234,567.50"


# ═══════════════════════════════════════════════════════════════════════════════
# PDF RENDERING
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestRendering:

    def test_consignment_note_has_three_copies(self, book, vehicle, driver):
        c = book(vehicle_id=vehicle.pk, driver_id=driver.pk)
        with patch("apps.documents.rendering._draw_consignment_page") as page:
            pdf = render_consignment_note(c)
        assert pdf.startswith(b"%PDF")
        labels = [call.args[2] for call in page.call_args_list]
        assert labels == ["CONSIGNEE COPY", "DRIVER COPY", "CONSIGNOR COPY"]

    def test_consignment_note_renders(self, book):
        pdf = render_consignment_note(book())
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_freight_bill_renders(self, delivered, consignor):
        from apps.billing.service import BillingService
        ids = [delivered().pk, delivered().pk]
        bill = BillingService().create(consignor.pk, "Bengaluru", ids, [
            {"type": "DISCOUNT", "description": "Loyalty", "amount": "100"},
        ])
        assert render_freight_bill(bill).startswith(b"%PDF")

    def test_load_chalan_renders(self, book, vehicle, driver):
        from apps.chalans.service import ChalanService
        chalan = ChalanService().create({
            "chalan_number":   "LC-0100",
            "booking_branch":  "Bengaluru",
            "destination_hub": "Chennai",
            "consignment_ids": [book().pk],
            "vehicle_id":      vehicle.pk,
            "driver_id":       driver.pk,
        })
        assert render_load_chalan(chalan).startswith(b"%PDF")

    def test_failure_surfaces_as_internal(self, book):
        c = book()
        with patch("apps.documents.rendering._draw_consignment_page", side_effect=KeyError("font")):
            with pytest.raises(Internal, match="Failed to generate"):
                render_consignment_note(c)
