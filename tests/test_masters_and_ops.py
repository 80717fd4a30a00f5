"""
Customer, fleet, auth and ops endpoint tests.

Run: pytest tests/test_masters_and_ops.py -v
"""

from unittest.mock import patch

import pytest

from apps.common.exceptions import InvalidState, NotAvailable
from apps.fleet.models import Vehicle, Driver
from apps.fleet.registry import FleetRegistry


# ═══════════════════════════════════════════════════════════════════════════════
# AUTH
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestAuth:

    def test_login_by_email(self, api_client, staff):
        resp = api_client.post("/api/auth/login/", {"email": "staff@kvl.test", "password": "Test@1234"},
                               format="json")
        assert resp.status_code == 200
        assert "access" in resp.data and "refresh" in resp.data

    def test_wrong_password(self, api_client, staff):
        resp = api_client.post("/api/auth/login/", {"email": "staff@kvl.test", "password": "nope"},
                               format="json")
        assert resp.status_code == 401

    def test_profile(self, auth_client):
        resp = auth_client.get("/api/auth/me/")
        assert resp.status_code == 200
        assert resp.data["email"] == "staff@kvl.test"

    def test_staff_cannot_register_operators(self, auth_client):
        resp = auth_client.post("/api/auth/register/", {
            "email": "new@kvl.test", "full_name": "New Staff", "password": "Secret@123",
        }, format="json")
        assert resp.status_code == 403

    def test_admin_registers_operator(self, api_client, admin_user):
        api_client.force_authenticate(user=admin_user)
        resp = api_client.post("/api/auth/register/", {
            "email": "new@kvl.test", "full_name": "New Staff", "password": "Secret@123",
            "mobile": "9123456780",
        }, format="json")
        assert resp.status_code == 201

    def test_register_rejects_foreign_mobile(self, api_client, admin_user):
        api_client.force_authenticate(user=admin_user)
        resp = api_client.post("/api/auth/register/", {
            "email": "new@kvl.test", "full_name": "New Staff", "password": "Secret@123",
            "mobile": "+250781000001",
        }, format="json")
        assert resp.status_code == 400


# ═══════════════════════════════════════════════════════════════════════════════
# CUSTOMERS
# ═══════════════════════════════════════════════════════════════════════════════

CUSTOMER = {
    "name":    "Sri Balaji Traders",
    "address": "12 Market Road",
    "city":    "Bengaluru",
    "state":   "Karnataka",
    "pincode": "560001",
    "mobile":  "9812345678",
    "email":   "Accounts@Balaji.test",
}


@pytest.mark.django_db
class TestCustomers:

    def test_create_normalises_email(self, auth_client):
        resp = auth_client.post("/api/customers/", CUSTOMER, format="json")
        assert resp.status_code == 201
        assert resp.data["email"] == "accounts@balaji.test"

    def test_duplicate_mobile_is_409(self, auth_client):
        auth_client.post("/api/customers/", CUSTOMER, format="json")
        resp = auth_client.post("/api/customers/", {**CUSTOMER, "email": "other@balaji.test"}, format="json")
        assert resp.status_code == 409
        assert resp.data["code"] == "conflict"

    def test_duplicate_email_is_409(self, auth_client):
        auth_client.post("/api/customers/", CUSTOMER, format="json")
        resp = auth_client.post("/api/customers/", {**CUSTOMER, "mobile": "9000000002"}, format="json")
        assert resp.status_code == 409

    @pytest.mark.parametrize("field, value", [
        ("mobile",     "12345"),
        ("pincode",    "056001"),
        ("gst_number", "NOT-A-GSTIN"),
    ])
    def test_invalid_fields_are_400(self, auth_client, field, value):
        resp = auth_client.post("/api/customers/", {**CUSTOMER, field: value}, format="json")
        assert resp.status_code == 400

    def test_search(self, auth_client, consignor, consignee):
        resp = auth_client.get("/api/customers/", {"search": "Balaji"})
        assert resp.status_code == 200
        assert [row["name"] for row in resp.data["results"]] == ["Sri Balaji Traders"]


# ═══════════════════════════════════════════════════════════════════════════════
# FLEET
# ═══════════════════════════════════════════════════════════════════════════════

VEHICLE = {
    "vehicle_number": "ka 01 ab 1234",
    "vehicle_type":   "TRUCK",
    "length_feet":    20,
    "capacity_value": "10.00",
}


@pytest.mark.django_db
class TestFleet:

    def test_vehicle_number_normalised(self, auth_client):
        resp = auth_client.post("/api/vehicles/", VEHICLE, format="json")
        assert resp.status_code == 201
        assert resp.data["vehicle_number"] == "KA01AB1234"
        assert resp.data["status"] == "AVAILABLE"

    def test_duplicate_vehicle_is_409(self, auth_client, vehicle):
        resp = auth_client.post("/api/vehicles/", VEHICLE, format="json")
        assert resp.status_code == 409

    def test_duplicate_driver_license_is_409(self, auth_client, driver):
        resp = auth_client.post("/api/drivers/", {
            "name": "Other Driver", "mobile": "9000000003", "license_number": "KA0120230001234",
        }, format="json")
        assert resp.status_code == 409

    def test_available_lists(self, auth_client, vehicle, make_vehicle, driver):
        make_vehicle("KA02CD5678", status=Vehicle.Status.MAINTENANCE)
        resp = auth_client.get("/api/vehicles/available/")
        assert [row["vehicle_number"] for row in resp.data["results"]] == ["KA01AB1234"]
        resp = auth_client.get("/api/drivers/available/")
        assert resp.data["count"] == 1

    def test_attach_and_detach_vehicle(self, auth_client, vehicle, driver):
        resp = auth_client.post(f"/api/drivers/{driver.pk}/assign-vehicle/",
                                {"vehicle_id": str(vehicle.pk)}, format="json")
        assert resp.status_code == 200
        assert resp.data["current_vehicle_number"] == "KA01AB1234"
        vehicle.refresh_from_db()
        assert vehicle.status == Vehicle.Status.ON_TRIP

        resp = auth_client.post(f"/api/drivers/{driver.pk}/remove-vehicle/")
        assert resp.status_code == 200
        assert resp.data["current_vehicle_id"] is None
        vehicle.refresh_from_db()
        assert vehicle.status == Vehicle.Status.AVAILABLE

    def test_attach_busy_vehicle_is_400(self, auth_client, vehicle, driver):
        Vehicle.objects.filter(pk=vehicle.pk).update(status=Vehicle.Status.ON_TRIP)
        resp = auth_client.post(f"/api/drivers/{driver.pk}/assign-vehicle/",
                                {"vehicle_id": str(vehicle.pk)}, format="json")
        assert resp.status_code == 400
        assert resp.data["code"] == "not_available"


@pytest.mark.django_db
class TestFleetRegistry:

    def test_count_requires_exactly_one_key(self, vehicle, driver):
        with pytest.raises(ValueError):
            FleetRegistry().count_active_consignments_for(vehicle_id=vehicle.pk, driver_id=driver.pk)

    def test_count_ignores_inactive_statuses(self, book, vehicle, driver, consignment_service):
        c = book(vehicle_id=vehicle.pk, driver_id=driver.pk)
        registry = FleetRegistry()
        assert registry.count_active_consignments_for(vehicle_id=vehicle.pk) == 1
        consignment_service.update_status(c.pk, "CANCELLED")
        assert registry.count_active_consignments_for(vehicle_id=vehicle.pk) == 0

    def test_detach_without_vehicle(self, driver):
        with pytest.raises(InvalidState):
            FleetRegistry().detach_vehicle(driver)

    def test_attach_requires_available(self, vehicle, driver):
        Vehicle.objects.filter(pk=vehicle.pk).update(status=Vehicle.Status.MAINTENANCE)
        vehicle.refresh_from_db()
        with pytest.raises(NotAvailable):
            FleetRegistry().attach_vehicle(driver, vehicle)
        driver.refresh_from_db()
        assert driver.status == Driver.Status.AVAILABLE


# ═══════════════════════════════════════════════════════════════════════════════
# OPS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestOps:

    def test_health_is_public(self, api_client):
        resp = api_client.get("/api/health/")
        assert resp.status_code == 200
        assert resp.data == {"status": "ok", "checks": {"database": "ok", "cache": "ok"}}

    def test_health_degraded_when_cache_down(self, api_client):
        with patch("apps.ops.views.cache") as cache:
            cache.set.side_effect = ConnectionError("redis down")
            resp = api_client.get("/api/health/")
        assert resp.status_code == 503
        assert resp.data["status"] == "degraded"

    def test_api_docs_route(self):
        from django.urls import resolve
        from drf_spectacular.views import SpectacularSwaggerView
        assert resolve("/api/docs/").func.view_class is SpectacularSwaggerView

    def test_metrics_require_login(self, api_client):
        assert api_client.get("/api/ops/metrics/").status_code == 401

    def test_metrics_text(self, auth_client, book, vehicle):
        book()
        resp = auth_client.get("/api/ops/metrics/")
        body = resp.content.decode()
        assert resp.status_code == 200
        assert 'kvl_consignments_total{status="BOOKED"} 1' in body
        assert 'kvl_vehicles_total{status="AVAILABLE"} 1' in body
        assert "kvl_unpaid_bills_inr 0" in body

    def test_dashboard(self, auth_client, book, delivered, vehicle, driver):
        book(vehicle_id=vehicle.pk, driver_id=driver.pk)
        delivered()
        resp = auth_client.get("/api/ops/dashboard/")
        assert resp.status_code == 200
        assert resp.data["todays_bookings"] == 2
        assert resp.data["active_consignments"] == 1
        assert resp.data["unbilled_consignments"] == 1
        assert resp.data["consignments_by_status"] == {"ASSIGNED": 1, "DELIVERED": 1}


@pytest.mark.django_db
class TestSeedCommand:

    def test_seed_is_idempotent(self):
        from io import StringIO
        from django.core.management import call_command
        from apps.customers.models import Customer

        out = StringIO()
        call_command("seed_demo_data", stdout=out)
        assert "Seeded 6 customers, 5 vehicles and 4 drivers." in out.getvalue()

        out = StringIO()
        call_command("seed_demo_data", stdout=out)
        assert "Seeded 0 customers, 0 vehicles and 0 drivers." in out.getvalue()
        assert Customer.objects.count() == 6
        assert Vehicle.objects.count() == 5
        assert Driver.objects.count() == 4
