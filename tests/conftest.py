"""Shared fixtures: operators, masters and a booking factory."""

import uuid
from decimal import Decimal

import pytest


# ═══════════════════════════════════════════════════════════════════════════════
# ACCOUNTS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def make_operator(db):
    from django.contrib.auth import get_user_model
    Operator = get_user_model()

    def _make(email=None, role="STAFF", **kwargs):
        email = email or f"op-{uuid.uuid4().hex[:8]}@kvl.test"
        return Operator.objects.create_user(
            email=email, password="Test@1234",
            full_name=kwargs.get("full_name", "Test Operator"), role=role,
        )
    return _make


@pytest.fixture
def staff(make_operator):
    return make_operator(email="staff@kvl.test", full_name="Branch Staff")


@pytest.fixture
def admin_user(make_operator):
    return make_operator(email="admin@kvl.test", role="ADMIN", full_name="Head Office")


@pytest.fixture
def auth_client(api_client, staff):
    api_client.force_authenticate(user=staff)
    return api_client


# ═══════════════════════════════════════════════════════════════════════════════
# MASTERS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_customer(db):
    from apps.customers.models import Customer

    def _make(name="Sri Balaji Traders", mobile="9812345678", **kwargs):
        defaults = {
            "address": "12 Market Road",
            "city":    "Bengaluru",
            "state":   "Karnataka",
            "pincode": "560001",
            "email":   f"{mobile}@customer.test",
        }
        defaults.update(kwargs)
        return Customer.objects.create(name=name, mobile=mobile, **defaults)
    return _make


@pytest.fixture
def consignor(make_customer):
    return make_customer()


@pytest.fixture
def consignee(make_customer):
    return make_customer(name="Chennai Hardware Mart", mobile="9898989898",
                         city="Chennai", state="Tamil Nadu", pincode="600001")


@pytest.fixture
def make_vehicle(db):
    from apps.fleet.models import Vehicle

    def _make(number="KA01AB1234", **kwargs):
        defaults = {
            "vehicle_type":   Vehicle.Type.TRUCK,
            "length_feet":    20,
            "capacity_value": Decimal("10"),
            "engine_number":  "ENG778812",
            "chassis_number": "CHS112233",
        }
        defaults.update(kwargs)
        return Vehicle.objects.create(vehicle_number=number, **defaults)
    return _make


@pytest.fixture
def vehicle(make_vehicle):
    return make_vehicle()


@pytest.fixture
def make_driver(db):
    from apps.fleet.models import Driver

    def _make(name="Ramesh Kumar", mobile="9876543210", **kwargs):
        return Driver.objects.create(name=name, mobile=mobile, **kwargs)
    return _make


@pytest.fixture
def driver(make_driver):
    return make_driver(license_number="KA0120230001234")


# ═══════════════════════════════════════════════════════════════════════════════
# CONSIGNMENTS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def notifier():
    from unittest.mock import MagicMock
    return MagicMock()


@pytest.fixture
def consignment_service(notifier):
    from apps.consignments.service import ConsignmentService
    return ConsignmentService(notification_service=notifier)


@pytest.fixture
def booking_data(consignor, consignee):
    def _data(**overrides):
        data = {
            "consignor":      {"customer_id": consignor.pk},
            "consignee":      {"customer_id": consignee.pk},
            "from_city":      "Bengaluru",
            "to_city":        "Chennai",
            "description":    "Machine parts",
            "packages":       10,
            "package_type":   "Boxes",
            "actual_weight":  Decimal("500"),
            "charged_weight": Decimal("550"),
            "freight":        Decimal("500"),
            "hamali":         Decimal("50"),
        }
        data.update(overrides)
        return data
    return _data


@pytest.fixture
def book(consignment_service, booking_data, staff):
    def _book(**overrides):
        return consignment_service.create(booking_data(**overrides), user=staff)
    return _book


@pytest.fixture
def delivered(book):
    """Book and force straight to DELIVERED, the state billing works from."""
    from apps.consignments.models import Consignment

    def _make(**overrides):
        consignment = book(**overrides)
        Consignment.objects.filter(pk=consignment.pk).update(status=Consignment.Status.DELIVERED)
        consignment.refresh_from_db()
        return consignment
    return _make
