"""
BillingService — freight bill aggregation.

create() is the one multi-row transactional write in the system: the bill,
its lines and the billed marks on every consignment commit together or not
at all.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.common.exceptions import (
    Conflict, InvalidState, InvalidTransition, NotFound, ValidationError,
)
from apps.consignments.models import Consignment
from apps.customers.models import Customer
from apps.customers.snapshots import BilledPartySnapshot
from apps.notifications.service import NotificationService
from apps.numbering.service import next_bill_number

from .models import FreightBill, FreightBillLine, FreightBillAdjustment

logger = logging.getLogger("kvl.billing")

Status = FreightBill.Status
ZERO   = Decimal("0")
CENT   = Decimal("0.01")


def line_rate(freight, charged_weight) -> Decimal:
    """Display rate per unit of charged weight; 0 when there is no weight."""
    weight = Decimal(charged_weight or 0)
    if not weight:
        return ZERO
    return (Decimal(freight or 0) / weight).quantize(CENT, rounding=ROUND_HALF_UP)


def clean_adjustments(adjustments, min_description=1):
    """
    Keep entries with a known type, a description and a non-zero amount.
    Anything else is dropped silently.
    """
    kept = []
    for adj in adjustments or ():
        adj_type    = (adj.get("type") or adj.get("adjustment_type") or "").strip().upper()
        description = (adj.get("description") or "").strip()
        try:
            amount = Decimal(str(adj.get("amount") or 0))
        except ArithmeticError:
            continue
        if adj_type not in FreightBillAdjustment.Type.values:
            continue
        if len(description) < min_description or amount == 0:
            continue
        kept.append({"adjustment_type": adj_type, "description": description, "amount": amount})
    return kept


def apply_adjustments(total, adjustments) -> Decimal:
    """DISCOUNT subtracts, every other type adds; never below zero."""
    final = Decimal(total)
    for adj in adjustments:
        amount = abs(Decimal(adj["amount"]))
        final += -amount if adj["adjustment_type"] == FreightBillAdjustment.Type.DISCOUNT else amount
    return max(final, ZERO)


class BillingService:

    def __init__(self, notification_service=None, number_generator=None, renderer=None):
        self.notifier    = notification_service or NotificationService()
        self.next_number = number_generator     or next_bill_number
        self._renderer   = renderer

    @property
    def renderer(self):
        if self._renderer is None:
            from apps.documents.rendering import render_freight_bill
            self._renderer = render_freight_bill
        return self._renderer

    def get(self, bill_id) -> FreightBill:
        bill = FreightBill.objects.filter(pk=bill_id).first()
        if not bill:
            raise NotFound("Freight bill not found")
        return bill

    # ── Create ────────────────────────────────────────────────────────────────
    @transaction.atomic
    def create(self, customer_id, billing_branch, consignment_ids, adjustments=None, user=None) -> FreightBill:
        customer = Customer.objects.filter(pk=customer_id).first()
        if not customer:
            raise NotFound("Customer not found")

        consignment_ids = list(dict.fromkeys(consignment_ids or ()))
        consignments = list(
            Consignment.objects.live()
            .filter(pk__in=consignment_ids, status=Consignment.Status.DELIVERED)
            .for_customer(customer)
            .distinct()
            .order_by("booking_date")
        )
        if not consignments:
            raise ValidationError(
                f"No delivered consignments found for customer {customer.name}. "
                "Please ensure consignments are delivered and belong to this customer."
            )

        if FreightBillLine.objects.filter(consignment_id__in=consignment_ids).exists():
            raise Conflict("Some consignments are already billed")

        kept  = clean_adjustments(adjustments)
        total = sum((c.grand_total for c in consignments), ZERO)

        bill = FreightBill.objects.create(
            bill_number    = self.next_number(),
            billing_branch = billing_branch,
            total_amount   = total,
            final_amount   = apply_adjustments(total, kept),
            created_by     = user,
            **BilledPartySnapshot.from_customer(customer).as_fields("party"),
        )
        FreightBillLine.objects.bulk_create([
            FreightBillLine(
                bill               = bill,
                consignment_id     = c.pk,
                consignment_number = c.consignment_number,
                consignment_date   = c.booking_date,
                destination        = c.to_city,
                charged_weight     = c.charged_weight,
                rate               = line_rate(c.freight, c.charged_weight),
                freight            = c.freight,
                hamali             = c.hamali,
                st_charges         = c.st_charges,
                door_delivery      = c.door_delivery,
                other_charges      = c.other_charges,
                grand_total        = c.grand_total,
            )
            for c in consignments
        ])
        FreightBillAdjustment.objects.bulk_create([FreightBillAdjustment(bill=bill, **adj) for adj in kept])

        Consignment.objects.filter(pk__in=[c.pk for c in consignments]).update(
            billed_in      = bill,
            billed_date    = timezone.now(),
            payment_status = Consignment.PaymentStatus.BILLED,
            updated_at     = timezone.now(),
        )
        logger.info("Freight bill %s created for %s: %d consignment(s), final ₹%s",
                    bill.bill_number, customer.name, len(consignments), bill.final_amount)
        return bill

    # ── Edits ─────────────────────────────────────────────────────────────────
    @transaction.atomic
    def update_adjustments(self, bill_id, adjustments) -> FreightBill:
        bill = self.get(bill_id)
        if bill.status in (Status.PAID, Status.PARTIALLY_PAID, Status.CANCELLED):
            raise InvalidState(f"Cannot update a bill that is {bill.status}")

        kept = clean_adjustments(adjustments, min_description=3)
        bill.adjustments.all().delete()
        FreightBillAdjustment.objects.bulk_create([FreightBillAdjustment(bill=bill, **adj) for adj in kept])
        bill.final_amount = apply_adjustments(bill.total_amount, kept)
        bill.save(update_fields=["final_amount", "updated_at"])
        logger.info("Freight bill %s adjustments replaced (%d kept), final ₹%s",
                    bill.bill_number, len(kept), bill.final_amount)
        return bill

    def update_status(self, bill_id, new_status) -> FreightBill:
        bill = self.get(bill_id)
        if new_status not in Status.values:
            raise ValidationError(f"Invalid status: {new_status}")

        current = bill.status
        if current in FreightBill.TERMINAL:
            if new_status == current:
                return bill
            raise InvalidTransition(current, new_status, f"Cannot change status of a {current} bill")
        if new_status != Status.CANCELLED:
            if FreightBill.PROGRESSION.index(new_status) < FreightBill.PROGRESSION.index(current):
                raise InvalidTransition(current, new_status)

        if new_status == Status.PAID:
            return self._settle(bill)

        bill.status = new_status
        bill.save(update_fields=["status", "updated_at"])
        logger.info("Freight bill %s: %s -> %s", bill.bill_number, current, new_status)
        return bill

    def mark_as_paid(self, bill_id) -> FreightBill:
        bill = self.get(bill_id)
        if bill.status == Status.PAID:
            raise InvalidState("Bill is already marked as paid")
        if bill.status == Status.CANCELLED:
            raise InvalidState("Cannot mark a cancelled bill as paid")
        return self._settle(bill)

    def _settle(self, bill):
        previous = bill.status
        bill.status = Status.PAID
        bill.save(update_fields=["status", "updated_at"])
        updated = Consignment.objects.filter(pk__in=bill.consignment_ids).update(
            payment_status=Consignment.PaymentStatus.PAID,
            updated_at=timezone.now(),
        )
        logger.info("Freight bill %s: %s -> PAID (%d consignment(s) settled)", bill.bill_number, previous, updated)
        return bill

    @transaction.atomic
    def delete(self, bill_id) -> None:
        bill = self.get(bill_id)
        if bill.status in (Status.PAID, Status.PARTIALLY_PAID):
            raise InvalidState(f"Cannot delete a bill that is {bill.status}")

        ids = bill.consignment_ids
        Consignment.objects.filter(pk__in=ids).update(
            billed_in      = None,
            billed_date    = None,
            payment_status = Consignment.PaymentStatus.UNBILLED,
            updated_at     = timezone.now(),
        )
        number = bill.bill_number
        bill.delete()
        logger.info("Freight bill %s deleted, %d consignment(s) back to UNBILLED", number, len(ids))

    # ── Delivery ──────────────────────────────────────────────────────────────
    def send_email(self, bill_id, email=None) -> FreightBill:
        bill = self.get(bill_id)
        recipient = email or (bill.party_customer.email if bill.party_customer else None)
        if not recipient:
            raise ValidationError("No email address available for this customer")

        pdf = self.renderer(bill)

        self.notifier.send_email(
            recipient,
            f"Freight Bill - {bill.bill_number}",
            f"Dear {bill.party_name},\n\n"
            "Please find attached your freight bill.\n\n"
            f"Bill Number: {bill.bill_number}\n"
            f"Amount: ₹{bill.final_amount}\n\n"
            "Thank you for your business.\n\n"
            "KVL Logistics",
            attachments=[(f"FreightBill-{bill.bill_number}.pdf", pdf, "application/pdf")],
        )

        if bill.status in (Status.DRAFT, Status.GENERATED):
            bill.status = Status.SENT
            bill.save(update_fields=["status", "updated_at"])
        logger.info("Freight bill %s emailed to %s", bill.bill_number, recipient)
        return bill

    # ── Read models ───────────────────────────────────────────────────────────
    def statistics(self, from_date=None, to_date=None) -> dict:
        qs = FreightBill.objects.all()
        if from_date:
            qs = qs.filter(bill_date__date__gte=from_date)
        if to_date:
            qs = qs.filter(bill_date__date__lte=to_date)

        paid = Q(status=Status.PAID)
        agg = qs.aggregate(
            total_bills    = Count("id"),
            paid_bills     = Count("id", filter=paid),
            pending_bills  = Count("id", filter=~paid),
            total_amount   = Sum("final_amount"),
            paid_amount    = Sum("final_amount", filter=paid),
            pending_amount = Sum("final_amount", filter=~paid),
        )
        for key in ("total_amount", "paid_amount", "pending_amount"):
            agg[key] = agg[key] or ZERO
        return agg

    def pending_payments(self):
        qs = FreightBill.objects.filter(status__in=FreightBill.PENDING).order_by("bill_date")
        total = qs.aggregate(t=Sum("final_amount"))["t"] or ZERO
        return qs, total
