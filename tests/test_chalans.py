"""
Load chalan tests: totals, forward-only status, delete rule and the chalan API.

Run: pytest tests/test_chalans.py -v
"""

import re
import uuid
from decimal import Decimal

import pytest

from apps.chalans.models import LoadChalan
from apps.chalans.service import ChalanService
from apps.common.exceptions import Conflict, InvalidState, InvalidTransition, NotFound, ValidationError

Status = LoadChalan.Status


@pytest.fixture
def chalan_service():
    return ChalanService()


@pytest.fixture
def chalan_data(book, vehicle, driver):
    def _data(**overrides):
        first  = book()
        second = book(freight=Decimal("700"), packages=4, actual_weight=Decimal("300"),
                      charged_weight=Decimal("300"), to_city="Madurai")
        data = {
            "chalan_number":   "LC-0001",
            "booking_branch":  "Bengaluru",
            "destination_hub": "Chennai",
            "consignment_ids": [first.pk, second.pk],
            "vehicle_id":      vehicle.pk,
            "driver_id":       driver.pk,
            "cleaner_name":    "Suresh",
            "advance_paid":    Decimal("200"),
            "tds_deduction":   Decimal("12"),
        }
        data.update(overrides)
        return data
    return _data


@pytest.fixture
def make_chalan(chalan_service, chalan_data, staff):
    def _make(**overrides):
        return chalan_service.create(chalan_data(**overrides), user=staff)
    return _make


# ═══════════════════════════════════════════════════════════════════════════════
# CREATE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestChalanCreation:

    def test_totals_derived_from_lines(self, make_chalan):
        chalan = make_chalan()
        chalan.refresh_from_db()
        assert chalan.total_lr_count == 2
        assert chalan.total_packages == 14
        assert chalan.total_weight == Decimal("800")
        assert chalan.total_freight == Decimal("1200")
        assert chalan.balance_freight == Decimal("988")

    def test_lines_copy_consignment_freight(self, make_chalan):
        chalan = make_chalan()
        amounts = sorted(line.freight_amount for line in chalan.lines.all())
        assert amounts == [Decimal("500"), Decimal("700")]
        assert {line.destination for line in chalan.lines.all()} == {"Chennai", "Madurai"}

    def test_fleet_snapshot_embedded(self, make_chalan, vehicle, driver):
        chalan = make_chalan()
        assert chalan.vehicle_number == vehicle.vehicle_number
        assert chalan.driver_name == driver.name
        assert chalan.driver_license_number == "KA0120230001234"
        assert chalan.status == Status.CREATED

    def test_number_is_uppercased_and_unique(self, make_chalan):
        chalan = make_chalan(chalan_number="lc-0001")
        assert chalan.chalan_number == "LC-0001"
        with pytest.raises(Conflict):
            make_chalan(chalan_number="LC-0001")

    def test_missing_consignment(self, chalan_service, chalan_data):
        data = chalan_data()
        data["consignment_ids"].append(uuid.uuid4())
        with pytest.raises(NotFound, match="Some consignments not found"):
            chalan_service.create(data)
        assert LoadChalan.objects.count() == 0

    def test_soft_deleted_consignment_counts_as_missing(self, chalan_service, chalan_data, consignment_service):
        data = chalan_data()
        consignment_service.soft_delete(data["consignment_ids"][0])
        with pytest.raises(NotFound):
            chalan_service.create(data)

    def test_vehicle_required(self, chalan_service, chalan_data):
        with pytest.raises(NotFound, match="Vehicle not found"):
            chalan_service.create(chalan_data(vehicle_id=uuid.uuid4()))

    def test_driver_optional(self, chalan_service, chalan_data):
        chalan = chalan_service.create(chalan_data(driver_id=None))
        assert chalan.driver_id is None
        assert chalan.total_lr_count == 2

    def test_empty_consignment_list_rejected(self, chalan_service, chalan_data):
        with pytest.raises(ValidationError):
            chalan_service.create(chalan_data(consignment_ids=[]))


# ═══════════════════════════════════════════════════════════════════════════════
# EDIT, STATUS, DELETE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestChalanLifecycle:

    def test_charge_edit_recomputes_balance(self, chalan_service, make_chalan):
        chalan = make_chalan()
        chalan = chalan_service.update(chalan.pk, {"advance_paid": Decimal("500"), "remarks": "Part advance"})
        chalan.refresh_from_db()
        assert chalan.balance_freight == Decimal("688")
        assert chalan.total_freight == Decimal("1200")

    def test_frozen_fields_rejected(self, chalan_service, make_chalan):
        chalan = make_chalan()
        with pytest.raises(ValidationError, match="status"):
            chalan_service.update(chalan.pk, {"status": Status.CLOSED})

    def test_forward_moves(self, chalan_service, make_chalan):
        chalan = make_chalan()
        for status in (Status.DISPATCHED, Status.IN_TRANSIT, Status.ARRIVED, Status.CLOSED):
            chalan = chalan_service.update_status(chalan.pk, status)
        assert chalan.status == Status.CLOSED

    def test_skipping_forward_allowed(self, chalan_service, make_chalan):
        chalan = chalan_service.update_status(make_chalan().pk, Status.ARRIVED)
        assert chalan.status == Status.ARRIVED

    def test_backward_move_rejected(self, chalan_service, make_chalan):
        chalan = chalan_service.update_status(make_chalan().pk, Status.IN_TRANSIT)
        with pytest.raises(InvalidTransition, match="Cannot move back from IN_TRANSIT to DISPATCHED"):
            chalan_service.update_status(chalan.pk, Status.DISPATCHED)

    def test_dispatch_stamps_time_once(self, chalan_service, make_chalan):
        chalan = chalan_service.update_status(make_chalan().pk, Status.DISPATCHED)
        assert re.fullmatch(r"\d{2}:\d{2}:\d{2}", chalan.dispatch_time)

    def test_dispatch_keeps_given_time(self, chalan_service, make_chalan):
        chalan = make_chalan(dispatch_time="06:45")
        chalan = chalan_service.update_status(chalan.pk, Status.DISPATCHED)
        assert chalan.dispatch_time == "06:45"

    def test_status_change_keeps_totals(self, chalan_service, make_chalan):
        chalan = chalan_service.update_status(make_chalan().pk, Status.DISPATCHED)
        chalan.refresh_from_db()
        assert chalan.total_lr_count == 2
        assert chalan.balance_freight == Decimal("988")

    def test_delete_only_when_created(self, chalan_service, make_chalan):
        chalan = chalan_service.update_status(make_chalan().pk, Status.DISPATCHED)
        with pytest.raises(InvalidState, match="Cannot delete chalan once dispatched"):
            chalan_service.delete(chalan.pk)

    def test_delete_created(self, chalan_service, make_chalan):
        chalan = make_chalan()
        chalan_service.delete(chalan.pk)
        assert not LoadChalan.objects.filter(pk=chalan.pk).exists()

    def test_stats(self, chalan_service, make_chalan):
        make_chalan()
        chalan_service.update_status(make_chalan(chalan_number="LC-0002").pk, Status.DISPATCHED)
        stats = chalan_service.stats()
        assert stats["total_chalans"] == 2
        assert stats["total_revenue"] == Decimal("2400")
        by_status = {row["status"]: row["count"] for row in stats["status_breakdown"]}
        assert by_status == {"CREATED": 1, "DISPATCHED": 1}

    def test_stats_date_filter_needs_both_ends(self, chalan_service, make_chalan):
        make_chalan()
        assert chalan_service.stats(start_date="2000-01-01")["total_chalans"] == 1
        assert chalan_service.stats("2000-01-01", "2000-12-31")["total_chalans"] == 0


# ═══════════════════════════════════════════════════════════════════════════════
# API
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestChalanAPI:

    def test_create_via_api(self, auth_client, book, vehicle):
        c = book()
        resp = auth_client.post("/api/load-chalans/", {
            "chalan_number":   "lc-7001",
            "booking_branch":  "Bengaluru",
            "destination_hub": "Chennai",
            "consignment_ids": [str(c.pk)],
            "vehicle_id":      str(vehicle.pk),
            "advance_paid":    "100.00",
        }, format="json")
        assert resp.status_code == 201
        assert resp.data["chalan_number"] == "LC-7001"
        assert resp.data["total_freight"] == "500.00"
        assert resp.data["balance_freight"] == "400.00"
        assert len(resp.data["lines"]) == 1

    def test_duplicate_number_is_409(self, auth_client, make_chalan, book, vehicle):
        make_chalan()
        resp = auth_client.post("/api/load-chalans/", {
            "chalan_number":   "LC-0001",
            "booking_branch":  "Bengaluru",
            "destination_hub": "Chennai",
            "consignment_ids": [str(book().pk)],
            "vehicle_id":      str(vehicle.pk),
        }, format="json")
        assert resp.status_code == 409

    def test_backward_status_is_400(self, auth_client, chalan_service, make_chalan):
        chalan = chalan_service.update_status(make_chalan().pk, Status.ARRIVED)
        resp = auth_client.patch(f"/api/load-chalans/{chalan.pk}/status/", {"status": "CREATED"}, format="json")
        assert resp.status_code == 400
        assert resp.data["code"] == "invalid_transition"

    def test_pdf_endpoint(self, auth_client, make_chalan):
        chalan = make_chalan()
        resp = auth_client.get(f"/api/load-chalans/{chalan.pk}/pdf/")
        assert resp.status_code == 200
        assert resp["Content-Type"] == "application/pdf"
        assert resp.content[:4] == b"%PDF"

    def test_stats_bad_date_is_400(self, auth_client):
        resp = auth_client.get("/api/load-chalans/stats/", {"start_date": "soon", "end_date": "2025-12-31"})
        assert resp.status_code == 400
        assert resp.data["code"] == "validation_error"
