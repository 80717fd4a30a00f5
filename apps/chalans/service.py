"""
ChalanService — load chalan (truck manifest) aggregation.
No consignment status gating: any live consignment can be loaded.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from apps.common.exceptions import Conflict, InvalidState, InvalidTransition, NotFound, ValidationError
from apps.consignments.models import Consignment
from apps.fleet.models import Vehicle, Driver
from apps.fleet.snapshots import VehicleSnapshot, DriverSnapshot

from .models import LoadChalan, LoadChalanLine

logger = logging.getLogger("kvl.chalans")

Status = LoadChalan.Status

# Never editable after creation
FROZEN_FIELDS = frozenset({"date", "status", "created_by", "lines", "consignment_ids", "chalan_number"})


class ChalanService:

    def get(self, chalan_id) -> LoadChalan:
        chalan = LoadChalan.objects.filter(pk=chalan_id).first()
        if not chalan:
            raise NotFound("Load chalan not found")
        return chalan

    @transaction.atomic
    def create(self, data: dict, user=None) -> LoadChalan:
        data = dict(data)
        number          = (data.pop("chalan_number", "") or "").strip().upper()
        consignment_ids = list(dict.fromkeys(data.pop("consignment_ids", None) or ()))
        vehicle_id      = data.pop("vehicle_id", None)
        driver_id       = data.pop("driver_id", None)
        cleaner_name    = data.pop("cleaner_name", "") or ""

        if not number:
            raise ValidationError("Chalan number is required")
        if LoadChalan.objects.filter(chalan_number=number).exists():
            raise Conflict(f"Load chalan {number} already exists")
        if not consignment_ids:
            raise ValidationError("At least one consignment is required")

        consignments = list(Consignment.objects.live().filter(pk__in=consignment_ids))
        if len(consignments) != len(consignment_ids):
            raise NotFound("Some consignments not found")

        vehicle = Vehicle.objects.filter(pk=vehicle_id).first() if vehicle_id else None
        if not vehicle:
            raise NotFound("Vehicle not found")
        driver = Driver.objects.filter(pk=driver_id).first() if driver_id else None
        if driver_id and not driver:
            raise NotFound("Driver not found")

        chalan = LoadChalan(chalan_number=number, cleaner_name=cleaner_name,
                            created_by=user, updated_by=user, **data)
        for field, value in VehicleSnapshot.of(vehicle).as_fields("vehicle").items():
            setattr(chalan, field, value)
        if driver:
            for field, value in DriverSnapshot.of(driver).as_fields("driver").items():
                setattr(chalan, field, value)
        chalan.save()

        by_id = {c.pk: c for c in consignments}
        LoadChalanLine.objects.bulk_create([
            LoadChalanLine(
                chalan             = chalan,
                consignment_id     = c.pk,
                consignment_number = c.consignment_number,
                packages           = c.packages,
                package_type       = c.package_type,
                description        = c.description,
                weight             = c.actual_weight,
                freight_amount     = c.freight,
                destination        = c.to_city,
            )
            for c in (by_id[cid] for cid in consignment_ids)
        ])
        chalan.save()
        logger.info("Load chalan %s created: %d LR(s), vehicle %s, freight ₹%s",
                    number, chalan.total_lr_count, chalan.vehicle_number, chalan.total_freight)
        return chalan

    def update(self, chalan_id, changes: dict, user=None) -> LoadChalan:
        chalan = self.get(chalan_id)
        frozen = sorted(set(changes) & FROZEN_FIELDS)
        if frozen:
            raise ValidationError(f"Fields cannot be edited: {', '.join(frozen)}")
        for field, value in changes.items():
            setattr(chalan, field, value)
        chalan.updated_by = user
        chalan.save()
        logger.info("Load chalan %s updated (%s)", chalan.chalan_number, ", ".join(sorted(changes)))
        return chalan

    def update_status(self, chalan_id, new_status, user=None) -> LoadChalan:
        chalan = self.get(chalan_id)
        if new_status not in Status.values:
            raise ValidationError(f"Invalid status: {new_status}")

        current = chalan.status
        if LoadChalan.ORDER.index(new_status) < LoadChalan.ORDER.index(current):
            raise InvalidTransition(current, new_status, f"Cannot move back from {current} to {new_status}")

        chalan.status     = new_status
        chalan.updated_by = user
        if new_status == Status.DISPATCHED and not chalan.dispatch_time:
            chalan.dispatch_time = timezone.localtime().strftime("%H:%M:%S")
        chalan.save()
        logger.info("Load chalan %s: %s -> %s", chalan.chalan_number, current, new_status)
        return chalan

    def delete(self, chalan_id) -> None:
        chalan = self.get(chalan_id)
        if chalan.status != Status.CREATED:
            raise InvalidState("Cannot delete chalan once dispatched")
        number = chalan.chalan_number
        chalan.delete()
        logger.info("Load chalan %s deleted", number)

    def stats(self, start_date=None, end_date=None) -> dict:
        qs = LoadChalan.objects.all()
        if start_date and end_date:
            qs = qs.filter(date__date__gte=start_date, date__date__lte=end_date)

        breakdown = [
            {
                "status":        row["status"],
                "count":         row["count"],
                "total_freight": row["total_freight"] or Decimal("0"),
                "total_weight":  row["total_weight"] or Decimal("0"),
            }
            for row in qs.values("status")
                         .annotate(count=Count("id"), total_freight=Sum("total_freight"), total_weight=Sum("total_weight"))
                         .order_by("status")
        ]
        return {
            "status_breakdown": breakdown,
            "total_chalans":    qs.count(),
            "total_revenue":    qs.aggregate(t=Sum("total_freight"))["t"] or Decimal("0"),
        }
