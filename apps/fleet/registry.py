"""
FleetRegistry — single owner of vehicle / driver availability.

Availability is derived from consignments: a resource may only go back to
AVAILABLE when no *other* live consignment still holds it in an active status.
The count is recomputed on every check; nothing is cached.
"""

import logging

from django.utils import timezone

from apps.common.exceptions import InvalidState, NotAvailable
from .models import Vehicle, Driver

logger = logging.getLogger("kvl.fleet")


class FleetRegistry:

    # ── Primitive writes ──────────────────────────────────────────────────────
    def set_vehicle_status(self, vehicle_id, status: str) -> bool:
        updated = Vehicle.objects.filter(pk=vehicle_id).update(status=status, updated_at=timezone.now())
        if updated:
            logger.info("Vehicle %s -> %s", vehicle_id, status)
        return bool(updated)

    def set_driver_status(self, driver_id, status: str, current_vehicle_id=None) -> bool:
        updated = Driver.objects.filter(pk=driver_id).update(
            status=status,
            current_vehicle_id=current_vehicle_id,
            updated_at=timezone.now(),
        )
        if updated:
            logger.info("Driver %s -> %s (vehicle=%s)", driver_id, status, current_vehicle_id)
        return bool(updated)

    # ── Queries ───────────────────────────────────────────────────────────────
    def count_active_consignments_for(self, *, vehicle_id=None, driver_id=None, excluding=None) -> int:
        """Live consignments in an active status holding this vehicle or driver."""
        from apps.consignments.models import Consignment

        if (vehicle_id is None) == (driver_id is None):
            raise ValueError("Pass exactly one of vehicle_id or driver_id.")

        qs = Consignment.objects.live().filter(status__in=Consignment.ACTIVE_STATUSES)
        if vehicle_id is not None:
            qs = qs.filter(vehicle_id=vehicle_id)
        else:
            qs = qs.filter(driver_id=driver_id)
        if excluding is not None:
            qs = qs.exclude(pk=excluding)
        return qs.count()

    # ── Lifecycle hooks ───────────────────────────────────────────────────────
    def mark_on_trip(self, vehicle_id=None, driver_id=None):
        """Consignment went IN_TRANSIT: both resources are now out on the road."""
        if vehicle_id:
            self.set_vehicle_status(vehicle_id, Vehicle.Status.ON_TRIP)
        if driver_id:
            self.set_driver_status(driver_id, Driver.Status.ON_TRIP, current_vehicle_id=vehicle_id)

    def release_for(self, consignment) -> dict:
        """
        Free the consignment's vehicle and driver unless another active
        consignment still needs them. Vehicle and driver are checked independently.
        """
        released = {"vehicle": False, "driver": False}

        if consignment.vehicle_id:
            busy = self.count_active_consignments_for(
                vehicle_id=consignment.vehicle_id, excluding=consignment.pk
            )
            if busy:
                logger.info("Vehicle %s kept: %d other active consignment(s)", consignment.vehicle_id, busy)
            else:
                released["vehicle"] = self.set_vehicle_status(consignment.vehicle_id, Vehicle.Status.AVAILABLE)

        if consignment.driver_id:
            busy = self.count_active_consignments_for(
                driver_id=consignment.driver_id, excluding=consignment.pk
            )
            if busy:
                logger.info("Driver %s kept: %d other active consignment(s)", consignment.driver_id, busy)
            else:
                released["driver"] = self.set_driver_status(consignment.driver_id, Driver.Status.AVAILABLE, None)

        return released

    # ── Direct admin assignment ───────────────────────────────────────────────
    def attach_vehicle(self, driver: Driver, vehicle: Vehicle) -> Driver:
        if vehicle.status != Vehicle.Status.AVAILABLE:
            raise NotAvailable("Vehicle is not available for assignment")
        Driver.objects.filter(pk=driver.pk).update(current_vehicle_id=vehicle.pk, updated_at=timezone.now())
        self.set_vehicle_status(vehicle.pk, Vehicle.Status.ON_TRIP)
        driver.refresh_from_db()
        logger.info("Vehicle %s attached to driver %s", vehicle.vehicle_number, driver.name)
        return driver

    def detach_vehicle(self, driver: Driver) -> Driver:
        if not driver.current_vehicle_id:
            raise InvalidState("Driver has no vehicle assigned")
        vehicle_id = driver.current_vehicle_id
        self.set_vehicle_status(vehicle_id, Vehicle.Status.AVAILABLE)
        Driver.objects.filter(pk=driver.pk).update(current_vehicle_id=None, updated_at=timezone.now())
        driver.refresh_from_db()
        logger.info("Vehicle %s detached from driver %s", vehicle_id, driver.name)
        return driver
