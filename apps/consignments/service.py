"""
ConsignmentService — the consignment lifecycle engine.

Flow:  create → assign_vehicle (or assign_driver) → schedule_pickup
       → update_status(IN_TRANSIT) → update_status(DELIVERED) / confirm_delivery
                                         ↓
                               FleetRegistry.release_for

Multi-row writes here are independent saves (last write wins). Pass
`expected_status` to update_status for a compare-and-swap on the status column.
"""

import logging
from datetime import datetime, time
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Sum
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.common.exceptions import (
    Conflict, InvalidState, InvalidTransition, NotAvailable, NotFound, ValidationError,
)
from apps.customers.models import Customer
from apps.customers.snapshots import PartySnapshot
from apps.fleet.models import Vehicle, Driver
from apps.fleet.registry import FleetRegistry
from apps.fleet.snapshots import VehicleSnapshot, DriverSnapshot
from apps.notifications.service import NotificationService
from apps.numbering.service import next_consignment_number

from .models import Consignment

logger = logging.getLogger("kvl.consignments")

Status = Consignment.Status

WEIGHT_ERROR = "Charged weight cannot be less than actual weight"

# Moved only by their own operations, never through update()
LOCKED_FIELDS = frozenset({
    "consignment_number", "status", "grand_total",
    "vehicle_id", "vehicle_number", "vehicle_engine_number", "vehicle_chassis_number",
    "vehicle_insurance_policy_no", "vehicle_insurance_validity",
    "driver_id", "driver_name", "driver_mobile",
    "assigned_at", "pickup_date", "pickup_time", "actual_pickup_date", "actual_pickup_time",
    "delivery_date", "delivery_time", "delivered_by", "proof_of_delivery",
    "billed_in", "billed_date", "payment_status", "payment_receipt_status", "payment_receipt_date",
    "is_deleted", "deleted_at", "deleted_by", "created_by",
})


def combine_date_time(date_value, time_value=None) -> datetime:
    """
    Accept a full ISO datetime, or a date plus an "HH:MM[:SS]" time.
    Naive values are read in the project timezone.
    """
    if isinstance(date_value, datetime):
        moment = date_value
    else:
        text = str(date_value).strip()
        if "T" not in text and time_value:
            clock = str(time_value).strip()
            text = f"{text}T{clock}:00" if clock.count(":") == 1 else f"{text}T{clock}"
        invalid = f"Invalid date/time: {date_value} {time_value or ''}".strip()
        try:
            moment = parse_datetime(text)
            if moment is None:
                day = parse_date(text)
                if day is None:
                    raise ValidationError(invalid)
                moment = datetime.combine(day, time.min)
        except ValueError:
            # well-formed but impossible, e.g. 2025-02-30 or 24:10
            raise ValidationError(invalid)
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _clock(moment) -> str:
    return timezone.localtime(moment).strftime("%H:%M:%S")


class ConsignmentService:
    """
    Lifecycle orchestration for consignments.
    Dependencies are injected so they can be swapped in tests.
    """

    def __init__(self, fleet_registry=None, notification_service=None, number_generator=None):
        self.fleet       = fleet_registry       or FleetRegistry()
        self.notifier    = notification_service or NotificationService()
        self.next_number = number_generator     or next_consignment_number

    # ── Lookups ───────────────────────────────────────────────────────────────
    def get(self, consignment_id) -> Consignment:
        consignment = Consignment.objects.live().filter(pk=consignment_id).first()
        if not consignment:
            raise NotFound("Consignment not found")
        return consignment

    def _vehicle(self, vehicle_id) -> Vehicle:
        vehicle = Vehicle.objects.filter(pk=vehicle_id).first()
        if not vehicle:
            raise NotFound("Vehicle not found")
        return vehicle

    def _driver(self, driver_id) -> Driver:
        driver = Driver.objects.filter(pk=driver_id).first()
        if not driver:
            raise NotFound("Driver not found")
        return driver

    def _party(self, block: dict) -> PartySnapshot:
        block = dict(block)
        customer_id = block.pop("customer_id", None)
        if customer_id:
            customer = Customer.objects.filter(pk=customer_id).first()
            if not customer:
                raise NotFound("Customer not found")
            party = PartySnapshot.from_customer(customer, **block)
        else:
            party = PartySnapshot(
                customer_id = None,
                name        = block.get("name", ""),
                address     = block.get("address", ""),
                mobile      = block.get("mobile", ""),
                email       = block.get("email") or "",
                gst_number  = block.get("gst_number") or "",
            )
        if not (party.name and party.address and party.mobile):
            raise ValidationError("Consignor and consignee need name, address and mobile")
        return party

    @staticmethod
    def _check_weights(actual, charged):
        if actual is None or charged is None:
            return
        if Decimal(str(charged)) < Decimal(str(actual)):
            raise ValidationError(WEIGHT_ERROR)

    @staticmethod
    def _embed_fleet(consignment, vehicle=None, driver=None):
        if vehicle is not None:
            for field, value in VehicleSnapshot.of(vehicle).as_fields("vehicle").items():
                setattr(consignment, field, value)
        if driver is not None:
            for field, value in DriverSnapshot.of(driver).as_fields("driver", exclude=("license_number",)).items():
                setattr(consignment, field, value)
        consignment.assigned_at = timezone.now()

    def _notify_consignor(self, consignment, subject, message):
        self.notifier.notify_party(consignment.consignor, subject, message)

    # ── Booking ───────────────────────────────────────────────────────────────
    def create(self, data: dict, user=None) -> Consignment:
        """
        Book a consignment. With both vehicle and driver ids resolving to real
        records it starts out ASSIGNED; this path skips availability checks.
        """
        data = dict(data)
        vehicle_id = data.pop("vehicle_id", None)
        driver_id  = data.pop("driver_id", None)
        consignor  = self._party(data.pop("consignor"))
        consignee  = self._party(data.pop("consignee"))
        number     = (data.pop("consignment_number", "") or "").strip().upper()

        self._check_weights(data.get("actual_weight"), data.get("charged_weight"))

        if number:
            if Consignment.objects.filter(consignment_number=number).exists():
                raise Conflict(f"Consignment number {number} already exists")
        else:
            number = self.next_number()

        consignment = Consignment(
            consignment_number = number,
            created_by         = user,
            updated_by         = user,
            **consignor.as_fields("consignor"),
            **consignee.as_fields("consignee"),
            **data,
        )

        if vehicle_id and driver_id:
            vehicle = Vehicle.objects.filter(pk=vehicle_id).first()
            driver  = Driver.objects.filter(pk=driver_id).first()
            if vehicle and driver:
                self._embed_fleet(consignment, vehicle, driver)
                consignment.status = Status.ASSIGNED

        consignment.save()
        logger.info("Consignment %s booked %s (%s)", number, consignment.route, consignment.status)

        self._notify_consignor(
            consignment, "Consignment Notification",
            f"Dear {consignor.name}, Your booking is confirmed. Consignment No: {number}. "
            f"From: {consignment.from_city} → To: {consignment.to_city}. "
            f"Material: {consignment.description}. - {settings.KVL_COMPANY_NAME}",
        )
        return consignment

    def update(self, consignment_id, changes: dict, user=None) -> Consignment:
        """Edit booking fields. Nothing is written if validation fails."""
        consignment = self.get(consignment_id)
        changes = dict(changes)

        locked = sorted(set(changes) & LOCKED_FIELDS)
        if locked:
            raise ValidationError(f"Fields cannot be edited directly: {', '.join(locked)}")

        for prefix in ("consignor", "consignee"):
            if prefix in changes:
                changes.update(self._party(changes.pop(prefix)).as_fields(prefix))

        if "actual_weight" in changes or "charged_weight" in changes:
            self._check_weights(
                changes.get("actual_weight", consignment.actual_weight),
                changes.get("charged_weight", consignment.charged_weight),
            )

        for field, value in changes.items():
            setattr(consignment, field, value)
        consignment.updated_by = user
        consignment.save()
        logger.info("Consignment %s updated (%s)", consignment.consignment_number, ", ".join(sorted(changes)))
        return consignment

    def soft_delete(self, consignment_id, user=None) -> Consignment:
        consignment = self.get(consignment_id)
        consignment.is_deleted = True
        consignment.deleted_at = timezone.now()
        consignment.deleted_by = user
        consignment.save(update_fields=["is_deleted", "deleted_at", "deleted_by", "updated_at"])
        logger.info("Consignment %s deleted", consignment.consignment_number)
        return consignment

    # ── Assignment ────────────────────────────────────────────────────────────
    def assign_vehicle(self, consignment_id, vehicle_id, driver_id, user=None) -> Consignment:
        """
        Embed vehicle + driver and move to ASSIGNED. Allowed again while ASSIGNED
        (swap). Availability is deliberately not checked here.
        """
        if not vehicle_id or not driver_id:
            raise ValidationError("Please provide both vehicle and driver")

        consignment = self.get(consignment_id)
        if consignment.status not in (Status.BOOKED, Status.ASSIGNED):
            raise InvalidState("Vehicle can only be assigned to consignments with status: BOOKED, ASSIGNED")

        vehicle = self._vehicle(vehicle_id)
        driver  = self._driver(driver_id)

        previous = consignment.status
        self._embed_fleet(consignment, vehicle, driver)
        consignment.status     = Status.ASSIGNED
        consignment.updated_by = user
        consignment.save()
        logger.info("Consignment %s: %s -> ASSIGNED (vehicle %s, driver %s)",
                    consignment.consignment_number, previous, vehicle.vehicle_number, driver.name)

        self._notify_consignor(
            consignment, "Consignment Notification",
            f"Dear {consignment.consignor_name}, Your consignment {consignment.consignment_number} is assigned. "
            f"Vehicle: {vehicle.vehicle_number}, Driver: {driver.name} ({driver.mobile}). - {settings.KVL_COMPANY_NAME}",
        )
        return consignment

    def assign_driver(self, consignment_id, driver_id, user=None) -> Consignment:
        """Driver-only assignment: BOOKED consignments and AVAILABLE drivers only."""
        consignment = self.get(consignment_id)
        if consignment.status != Status.BOOKED:
            raise InvalidState("Driver can only be assigned to booked consignments")

        driver = self._driver(driver_id)
        if driver.status != Driver.Status.AVAILABLE:
            raise NotAvailable("Driver is not available")

        self._embed_fleet(consignment, driver=driver)
        consignment.status     = Status.ASSIGNED
        consignment.updated_by = user
        consignment.save()
        self.fleet.set_driver_status(driver.pk, Driver.Status.ON_TRIP, current_vehicle_id=consignment.vehicle_id)
        logger.info("Consignment %s: BOOKED -> ASSIGNED (driver %s)", consignment.consignment_number, driver.name)
        return consignment

    def schedule_pickup(self, consignment_id, pickup_date, pickup_time=None, instructions="", user=None) -> Consignment:
        if not pickup_date or ("T" not in str(pickup_date) and not pickup_time):
            raise ValidationError("Please provide pickup date and time")

        consignment = self.get(consignment_id)
        if consignment.status != Status.ASSIGNED:
            raise InvalidState("Can only schedule pickup for assigned consignments")

        moment = combine_date_time(pickup_date, pickup_time)
        consignment.pickup_date         = moment
        consignment.pickup_time         = pickup_time or timezone.localtime(moment).strftime("%H:%M")
        consignment.pickup_instructions = instructions or ""
        consignment.status              = Status.SCHEDULED
        consignment.updated_by          = user
        consignment.save()
        logger.info("Consignment %s: ASSIGNED -> SCHEDULED for %s",
                    consignment.consignment_number, moment.isoformat())

        self._notify_consignor(
            consignment, "Pickup Scheduled",
            f"Dear {consignment.consignor_name}, Pickup scheduled for consignment "
            f"{consignment.consignment_number}. Date: {timezone.localtime(moment):%d/%m/%Y}, "
            f"Time: {consignment.pickup_time}. "
            f"Driver: {consignment.driver_name} ({consignment.driver_mobile}). - {settings.KVL_COMPANY_NAME}",
        )
        return consignment

    # ── General transitions ───────────────────────────────────────────────────
    def update_status(self, consignment_id, new_status, *, actual_pickup_date=None, actual_pickup_time=None,
                      transit_notes=None, proof_of_delivery=None, delivered_by=None,
                      expected_status=None, user=None) -> Consignment:
        consignment = self.get(consignment_id)
        if new_status not in Status.values:
            raise ValidationError(f"Invalid status: {new_status}")

        current = consignment.status
        if expected_status and expected_status != current:
            raise Conflict(f"Consignment is {current}, expected {expected_status}")
        if not consignment.can_transition_to(new_status):
            raise InvalidTransition(current, new_status)

        now = timezone.now()
        if new_status == Status.IN_TRANSIT:
            if actual_pickup_date and actual_pickup_time:
                consignment.actual_pickup_date = combine_date_time(actual_pickup_date, actual_pickup_time)
                consignment.actual_pickup_time = actual_pickup_time
            if transit_notes:
                consignment.transit_notes = transit_notes

        elif new_status == Status.DELIVERED_UNCONFIRMED:
            consignment.delivery_date = now
            consignment.delivery_time = _clock(now)

        elif new_status == Status.DELIVERED:
            if current == Status.DELIVERED_UNCONFIRMED and not proof_of_delivery:
                raise ValidationError("Proof of delivery is required to confirm delivery")
            if proof_of_delivery:
                consignment.proof_of_delivery = proof_of_delivery
            if delivered_by:
                consignment.delivered_by = delivered_by
            if not consignment.delivery_date:
                consignment.delivery_date = now
                consignment.delivery_time = _clock(now)

        consignment.status     = new_status
        consignment.updated_by = user
        self._write(consignment, expected_status)
        logger.info("Consignment %s: %s -> %s", consignment.consignment_number, current, new_status)

        if new_status == Status.IN_TRANSIT:
            self.fleet.mark_on_trip(vehicle_id=consignment.vehicle_id, driver_id=consignment.driver_id)
        elif new_status in (Status.DELIVERED, Status.CANCELLED):
            self.fleet.release_for(consignment)

        if new_status == Status.DELIVERED:
            self._notify_delivered(consignment)
        return consignment

    def confirm_delivery(self, consignment_id, delivered_by=None, user=None) -> Consignment:
        """Shortcut IN_TRANSIT -> DELIVERED; stamps the delivery time unconditionally."""
        consignment = self.get(consignment_id)
        if consignment.status != Status.IN_TRANSIT:
            raise InvalidState("Can only confirm delivery for in-transit consignments")

        now = timezone.now()
        consignment.delivery_date = now
        consignment.delivery_time = _clock(now)
        consignment.delivered_by  = delivered_by or consignment.driver_name
        consignment.status        = Status.DELIVERED
        consignment.updated_by    = user
        consignment.save()
        logger.info("Consignment %s: IN_TRANSIT -> DELIVERED (confirmed by %s)",
                    consignment.consignment_number, consignment.delivered_by)

        self.fleet.release_for(consignment)
        return consignment

    def record_payment_receipt(self, consignment_id, receipt_date=None, user=None) -> Consignment:
        """Mark payment received; a delivered consignment also gives back its fleet."""
        consignment = self.get(consignment_id)
        consignment.payment_receipt_status = True
        consignment.payment_receipt_date   = combine_date_time(receipt_date) if receipt_date else timezone.now()
        consignment.updated_by             = user
        consignment.save()
        logger.info("Payment receipt recorded for %s", consignment.consignment_number)

        if consignment.status == Status.DELIVERED:
            self.fleet.release_for(consignment)
        return consignment

    def _write(self, consignment, expected_status=None):
        if expected_status is None:
            consignment.save()
            return
        values = {
            field.attname: getattr(consignment, field.attname)
            for field in consignment._meta.concrete_fields if not field.primary_key
        }
        values["updated_at"] = timezone.now()
        updated = Consignment.objects.filter(pk=consignment.pk, status=expected_status).update(**values)
        if not updated:
            raise Conflict(f"Consignment {consignment.consignment_number} changed concurrently")

    def _notify_delivered(self, consignment):
        when = timezone.localtime(consignment.delivery_date)
        self._notify_consignor(
            consignment, "Consignment Delivered",
            f"Dear {consignment.consignor_name}, Your consignment {consignment.consignment_number} "
            f"is successfully delivered. Delivered To: {consignment.consignee_name}, "
            f"Time: {when:%d/%m/%Y}, {consignment.delivery_time}. Thank you for choosing {settings.KVL_COMPANY_NAME}!",
        )

    # ── Read models ───────────────────────────────────────────────────────────
    def public_tracking(self, consignment_number: str) -> dict:
        """Anonymous lookup: status and dates only, no parties or charges."""
        consignment = (
            Consignment.objects.live()
            .filter(consignment_number=(consignment_number or "").strip().upper())
            .first()
        )
        if not consignment:
            raise NotFound("Consignment not found")
        return {
            "consignment_number": consignment.consignment_number,
            "status":             consignment.status,
            "route":              consignment.route,
            "booking_date":       consignment.booking_date,
            "estimated_delivery": consignment.estimated_delivery,
            "delivery_date":      consignment.delivery_date,
        }

    def tracking_timeline(self, consignment_id) -> dict:
        consignment = self.get(consignment_id)
        timeline = [{
            "status":      Status.BOOKED,
            "date":        consignment.booking_date,
            "description": "Booking confirmed",
        }]
        if consignment.vehicle_id:
            timeline.append({
                "status":      Status.ASSIGNED,
                "date":        consignment.assigned_at,
                "description": f"Vehicle {consignment.vehicle_number} assigned",
            })
        if consignment.pickup_date:
            timeline.append({
                "status":      Status.SCHEDULED,
                "date":        consignment.pickup_date,
                "description": f"Pickup scheduled for {consignment.pickup_time}",
            })
        if consignment.status in (Status.IN_TRANSIT, Status.DELIVERED_UNCONFIRMED, Status.DELIVERED):
            timeline.append({
                "status":      Status.IN_TRANSIT,
                "date":        consignment.actual_pickup_date or consignment.pickup_date,
                "description": "Shipment in transit",
            })
        if consignment.delivery_date:
            timeline.append({
                "status":      Status.DELIVERED,
                "date":        consignment.delivery_date,
                "description": "Shipment delivered successfully",
            })
        return {
            "consignment_number": consignment.consignment_number,
            "current_status":     consignment.status,
            "route":              consignment.route,
            "consignor":          consignment.consignor_name,
            "consignee":          consignment.consignee_name,
            "vehicle_number":     consignment.vehicle_number or None,
            "driver_name":        consignment.driver_name or None,
            "driver_mobile":      consignment.driver_mobile or None,
            "timeline":           timeline,
        }

    def unbilled(self, customer_id=None):
        """Delivered, live, not yet billed. Returns (queryset, total grand_total)."""
        qs = Consignment.objects.unbilled()
        if customer_id:
            customer = Customer.objects.filter(pk=customer_id).first()
            if not customer:
                raise NotFound("Customer not found")
            qs = qs.for_customer(customer)
        total = qs.aggregate(t=Sum("grand_total"))["t"] or Decimal("0")
        return qs.order_by("booking_date"), total

    def statistics(self) -> dict:
        live = Consignment.objects.live()

        def grouped(qs, field):
            rows = qs.values(field).annotate(count=Count("id"), total_value=Sum("grand_total")).order_by(field)
            return [
                {"key": row[field], "count": row["count"], "total_value": row["total_value"] or Decimal("0")}
                for row in rows
            ]

        return {
            "status_wise":    grouped(live, "status"),
            "payment_wise":   grouped(live.filter(status=Status.DELIVERED), "payment_status"),
            "gst_payable_by": grouped(live, "gst_payable_by"),
            "risk_wise":      grouped(live, "risk"),
            "to_pay_wise":    grouped(live, "to_pay"),
        }
