"""
Freight bill tests: aggregation, exclusivity, status rules, adjustments,
emailing and the billing API.

Run: pytest tests/test_billing.py -v
"""

import uuid
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.core import mail

from apps.billing.models import FreightBill, FreightBillLine
from apps.billing.service import BillingService, apply_adjustments, clean_adjustments, line_rate
from apps.common.exceptions import Conflict, InvalidState, InvalidTransition, NotFound, ValidationError
from apps.consignments.models import Consignment

Status = FreightBill.Status


@pytest.fixture
def billing_service():
    return BillingService(renderer=lambda bill: b"%PDF-1.4 test")


@pytest.fixture
def make_bill(billing_service, delivered, consignor, staff):
    def _make(count=2, adjustments=None):
        consignments = [delivered() for _ in range(count)]
        return billing_service.create(
            consignor.pk, "Bengaluru", [c.pk for c in consignments], adjustments, user=staff,
        )
    return _make


# ═══════════════════════════════════════════════════════════════════════════════
# UNIT — adjustment arithmetic
# ═══════════════════════════════════════════════════════════════════════════════

class TestAdjustmentMath:

    def test_discount_subtracts_others_add(self):
        kept = clean_adjustments([
            {"type": "DISCOUNT",       "description": "Loyalty", "amount": "50"},
            {"type": "fuel_surcharge", "description": "Diesel",  "amount": "100"},
        ])
        assert apply_adjustments(Decimal("1100"), kept) == Decimal("1150")

    def test_final_amount_never_negative(self):
        kept = clean_adjustments([{"type": "DISCOUNT", "description": "Write-off", "amount": "5000"}])
        assert apply_adjustments(Decimal("1100"), kept) == Decimal("0")

    def test_invalid_entries_dropped(self):
        kept = clean_adjustments([
            {"type": "BRIBE",    "description": "Nope", "amount": "10"},
            {"type": "DISCOUNT", "description": "",     "amount": "10"},
            {"type": "DISCOUNT", "description": "Zero", "amount": "0"},
            {"type": "OTHER",    "description": "Toll", "amount": "not-a-number"},
            {"adjustment_type": "OTHER", "description": "Toll", "amount": "75"},
        ])
        assert kept == [{"adjustment_type": "OTHER", "description": "Toll", "amount": Decimal("75")}]

    def test_minimum_description_length(self):
        kept = clean_adjustments([{"type": "OTHER", "description": "ab", "amount": "5"}], min_description=3)
        assert kept == []

    @pytest.mark.parametrize("freight, weight, expected", [
        ("500", "550", Decimal("0.91")),
        ("1000", "100", Decimal("10.00")),
        ("1000", "0", Decimal("0")),
    ])
    def test_line_rate(self, freight, weight, expected):
        assert line_rate(freight, weight) == expected


# ═══════════════════════════════════════════════════════════════════════════════
# CREATE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestBillCreation:

    def test_totals_lines_and_party(self, make_bill, consignor):
        bill = make_bill(adjustments=[
            {"type": "DISCOUNT",       "description": "Loyalty", "amount": "50"},
            {"type": "FUEL_SURCHARGE", "description": "Diesel",  "amount": "100"},
        ])
        assert bill.total_amount == Decimal("1100")
        assert bill.final_amount == Decimal("1150")
        assert bill.status == Status.GENERATED
        assert bill.lines.count() == 2
        assert bill.adjustments.count() == 2
        assert bill.party_name == consignor.name
        assert bill.party_customer_id == consignor.pk

    def test_bill_number_format(self, make_bill):
        bill = make_bill(count=1)
        assert bill.bill_number.startswith("KVL")
        assert len(bill.bill_number) == len("KVL") + 4 + 5

    def test_consignments_marked_billed(self, make_bill):
        bill = make_bill()
        for consignment in Consignment.objects.filter(pk__in=bill.consignment_ids):
            assert consignment.billed_in_id == bill.pk
            assert consignment.payment_status == Consignment.PaymentStatus.BILLED
            assert consignment.billed_date is not None

    def test_consignment_billed_at_most_once(self, billing_service, make_bill, consignor):
        bill = make_bill()
        with pytest.raises(Conflict, match="already billed"):
            billing_service.create(consignor.pk, "Bengaluru", bill.consignment_ids)
        assert FreightBill.objects.count() == 1

    def test_undelivered_consignments_rejected(self, billing_service, book, consignor):
        c = book()
        with pytest.raises(ValidationError, match="No delivered consignments found"):
            billing_service.create(consignor.pk, "Bengaluru", [c.pk])

    def test_other_customers_consignments_ignored(self, billing_service, delivered, consignor, make_customer):
        c = delivered()
        stranger = make_customer(name="Unrelated Co", mobile="9111111111")
        with pytest.raises(ValidationError):
            billing_service.create(stranger.pk, "Bengaluru", [c.pk])
        assert consignor.pk != stranger.pk

    def test_unknown_customer(self, billing_service, db):
        with pytest.raises(NotFound):
            billing_service.create(uuid.uuid4(), "Bengaluru", [uuid.uuid4()])

    def test_failure_rolls_back_everything(self, delivered, consignor):
        c = delivered()
        broken = BillingService(number_generator=MagicMock(side_effect=RuntimeError("sequence down")))
        with pytest.raises(RuntimeError):
            broken.create(consignor.pk, "Bengaluru", [c.pk])
        c.refresh_from_db()
        assert FreightBill.objects.count() == 0
        assert c.billed_in_id is None
        assert c.payment_status == Consignment.PaymentStatus.UNBILLED


# ═══════════════════════════════════════════════════════════════════════════════
# STATUS, PAYMENT, DELETE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestBillLifecycle:

    def test_forward_moves_allowed(self, billing_service, make_bill):
        bill = make_bill()
        bill = billing_service.update_status(bill.pk, Status.SENT)
        bill = billing_service.update_status(bill.pk, Status.PARTIALLY_PAID)
        assert bill.status == Status.PARTIALLY_PAID

    def test_backward_move_rejected(self, billing_service, make_bill):
        bill = billing_service.update_status(make_bill().pk, Status.SENT)
        with pytest.raises(InvalidTransition):
            billing_service.update_status(bill.pk, Status.GENERATED)

    def test_cancel_from_any_open_state(self, billing_service, make_bill):
        bill = billing_service.update_status(make_bill().pk, Status.PARTIALLY_PAID)
        bill = billing_service.update_status(bill.pk, Status.CANCELLED)
        assert bill.status == Status.CANCELLED

    def test_terminal_states_frozen(self, billing_service, make_bill):
        bill = billing_service.update_status(make_bill().pk, Status.CANCELLED)
        assert billing_service.update_status(bill.pk, Status.CANCELLED).status == Status.CANCELLED
        with pytest.raises(InvalidTransition):
            billing_service.update_status(bill.pk, Status.SENT)

    def test_paid_via_status_settles_consignments(self, billing_service, make_bill):
        bill = billing_service.update_status(make_bill().pk, Status.PAID)
        statuses = set(Consignment.objects.filter(pk__in=bill.consignment_ids)
                       .values_list("payment_status", flat=True))
        assert statuses == {Consignment.PaymentStatus.PAID}

    def test_mark_as_paid(self, billing_service, make_bill):
        bill = billing_service.mark_as_paid(make_bill().pk)
        assert bill.status == Status.PAID
        with pytest.raises(InvalidState, match="already marked as paid"):
            billing_service.mark_as_paid(bill.pk)

    def test_cancelled_bill_cannot_be_paid(self, billing_service, make_bill):
        bill = billing_service.update_status(make_bill().pk, Status.CANCELLED)
        with pytest.raises(InvalidState, match="cancelled"):
            billing_service.mark_as_paid(bill.pk)

    def test_delete_returns_consignments_to_unbilled(self, billing_service, make_bill, consignor):
        bill = make_bill()
        ids = bill.consignment_ids
        billing_service.delete(bill.pk)

        assert not FreightBill.objects.filter(pk=bill.pk).exists()
        assert not FreightBillLine.objects.filter(consignment_id__in=ids).exists()
        for consignment in Consignment.objects.filter(pk__in=ids):
            assert consignment.billed_in_id is None
            assert consignment.payment_status == Consignment.PaymentStatus.UNBILLED

        again = billing_service.create(consignor.pk, "Bengaluru", ids)
        assert again.lines.count() == 2

    @pytest.mark.parametrize("status", [Status.PAID, Status.PARTIALLY_PAID])
    def test_paid_bills_cannot_be_deleted(self, billing_service, make_bill, status):
        bill = make_bill()
        FreightBill.objects.filter(pk=bill.pk).update(status=status)
        with pytest.raises(InvalidState):
            billing_service.delete(bill.pk)

    def test_replace_adjustments(self, billing_service, make_bill):
        bill = make_bill(adjustments=[{"type": "DISCOUNT", "description": "Loyalty", "amount": "50"}])
        bill = billing_service.update_adjustments(bill.pk, [
            {"type": "OTHER", "description": "Toll", "amount": "200"},
            {"type": "OTHER", "description": "x",    "amount": "999"},
        ])
        assert bill.final_amount == Decimal("1300")
        assert [a.description for a in bill.adjustments.all()] == ["Toll"]

    def test_adjustments_locked_once_paid(self, billing_service, make_bill):
        bill = billing_service.mark_as_paid(make_bill().pk)
        with pytest.raises(InvalidState):
            billing_service.update_adjustments(bill.pk, [])


# ═══════════════════════════════════════════════════════════════════════════════
# EMAIL AND READ MODELS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestBillDelivery:

    def test_email_to_customer_with_pdf(self, billing_service, make_bill, consignor):
        bill = billing_service.send_email(make_bill().pk)
        assert bill.status == Status.SENT
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.to == [consignor.email]
        assert message.subject == f"Freight Bill - {bill.bill_number}"
        filename, content, mimetype = message.attachments[0]
        assert filename == f"FreightBill-{bill.bill_number}.pdf"
        assert content.startswith(b"%PDF")
        assert mimetype == "application/pdf"

    def test_explicit_address_wins(self, billing_service, make_bill):
        billing_service.send_email(make_bill().pk, "accounts@buyer.test")
        assert mail.outbox[0].to == ["accounts@buyer.test"]

    def test_no_address_available(self, billing_service, make_bill, consignor):
        bill = make_bill()
        consignor.email = None
        consignor.save()
        with pytest.raises(ValidationError, match="No email address"):
            billing_service.send_email(bill.pk)

    def test_email_does_not_regress_status(self, billing_service, make_bill):
        bill = billing_service.update_status(make_bill().pk, Status.PARTIALLY_PAID)
        assert billing_service.send_email(bill.pk).status == Status.PARTIALLY_PAID

    def test_statistics(self, billing_service, make_bill):
        paid = make_bill(count=1)
        make_bill(count=1)
        billing_service.mark_as_paid(paid.pk)
        stats = billing_service.statistics()
        assert stats["total_bills"] == 2
        assert stats["paid_bills"] == 1
        assert stats["pending_bills"] == 1
        assert stats["paid_amount"] == Decimal("550")
        assert stats["pending_amount"] == Decimal("550")

    def test_pending_payments(self, billing_service, make_bill):
        bill = make_bill(count=1)
        billing_service.mark_as_paid(make_bill(count=1).pk)
        qs, total = billing_service.pending_payments()
        assert [b.pk for b in qs] == [bill.pk]
        assert total == Decimal("550")


# ═══════════════════════════════════════════════════════════════════════════════
# API
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestBillingAPI:

    def test_create_bill(self, auth_client, delivered, consignor):
        ids = [str(delivered().pk), str(delivered().pk)]
        resp = auth_client.post("/api/freight-bills/", {
            "customer_id":     str(consignor.pk),
            "billing_branch":  "Bengaluru",
            "consignment_ids": ids,
            "adjustments":     [{"type": "DISCOUNT", "description": "Loyalty", "amount": "100.00"}],
        }, format="json")
        assert resp.status_code == 201
        assert resp.data["total_amount"] == "1100.00"
        assert resp.data["final_amount"] == "1000.00"
        assert resp.data["party"]["name"] == consignor.name
        assert len(resp.data["lines"]) == 2

    def test_double_billing_is_409(self, auth_client, make_bill, consignor):
        bill = make_bill()
        resp = auth_client.post("/api/freight-bills/", {
            "customer_id":     str(consignor.pk),
            "billing_branch":  "Bengaluru",
            "consignment_ids": [str(i) for i in bill.consignment_ids],
        }, format="json")
        assert resp.status_code == 409
        assert resp.data["code"] == "conflict"

    def test_status_endpoint_rejects_backward(self, auth_client, billing_service, make_bill):
        bill = billing_service.update_status(make_bill().pk, Status.SENT)
        resp = auth_client.patch(f"/api/freight-bills/{bill.pk}/status/", {"status": "GENERATED"}, format="json")
        assert resp.status_code == 400

    def test_mark_paid_endpoint(self, auth_client, make_bill):
        bill = make_bill()
        resp = auth_client.patch(f"/api/freight-bills/{bill.pk}/mark-paid/")
        assert resp.status_code == 200
        assert resp.data["status"] == "PAID"

    def test_customer_unbilled_endpoint(self, auth_client, delivered, consignor):
        delivered()
        resp = auth_client.get(f"/api/freight-bills/customers/{consignor.pk}/unbilled-consignments/")
        assert resp.status_code == 200

    def test_pdf_endpoint(self, auth_client, make_bill):
        bill = make_bill()
        resp = auth_client.get(f"/api/freight-bills/{bill.pk}/pdf/")
        assert resp.status_code == 200
        assert resp["Content-Type"] == "application/pdf"
        assert resp.content[:4] == b"%PDF"

    def test_missing_bill_is_404(self, auth_client):
        resp = auth_client.get(f"/api/freight-bills/{uuid.uuid4()}/")
        assert resp.status_code == 404
        assert resp.data["code"] == "not_found"

    def test_bad_date_filter_is_400(self, auth_client):
        resp = auth_client.get("/api/freight-bills/", {"start_date": "31/12/2025"})
        assert resp.status_code == 400
        assert resp.data["code"] == "validation_error"

    def test_statistics_bad_date_is_400(self, auth_client):
        resp = auth_client.get("/api/freight-bills/statistics/", {"end_date": "2025-02-30"})
        assert resp.status_code == 400
