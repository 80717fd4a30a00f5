"""
KVL Logistics Load Test — Locust Script
========================================
Booking desk operators plus anonymous customers polling public tracking.

Usage:
    locust -f locust_tests/locustfile.py --host=http://localhost:8000 \
           --users=200 --spawn-rate=20 --run-time=5m --headless

Operators log in with an existing account (registration is admin-only):
    KVL_LOAD_EMAIL / KVL_LOAD_PASSWORD
"""

import os
import random
import uuid
from locust import HttpUser, task, between, events
from locust.exception import StopUser

CITIES = ["Surat", "Ahmedabad", "Mumbai", "Pune", "Vadodara", "Rajkot", "Indore"]
OPERATOR_EMAIL    = os.environ.get("KVL_LOAD_EMAIL", "loadtest@kvl.local")
OPERATOR_PASSWORD = os.environ.get("KVL_LOAD_PASSWORD", "Load@12345")

# Consignment numbers seen by operators, reused by the anonymous trackers
BOOKED_NUMBERS = []


def _mobile():
    return f"{random.choice('6789')}{random.randint(100000000, 999999999)}"


class BookingOperator(HttpUser):
    """Branch staff booking consignments through the day."""
    wait_time = between(1.0, 3.0)
    token     = None
    weight    = 1

    def on_start(self):
        resp = self.client.post(
            "/api/auth/login/",
            json={"email": OPERATOR_EMAIL, "password": OPERATOR_PASSWORD},
            name="/api/auth/login/",
        )
        if resp.status_code == 200:
            self.token = resp.json().get("access")
        else:
            raise StopUser()

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"}

    # ── Tasks (weighted) ──────────────────────────────────────────────────────

    @task(5)
    def book_consignment(self):
        """Most common action — a walk-in booking at the counter."""
        origin, dest = random.sample(CITIES, 2)
        actual = random.randint(50, 5000)
        resp = self.client.post(
            "/api/consignments/",
            json={
                "consignor": {"name": f"Trader {uuid.uuid4().hex[:6]}", "address": f"Market Yard, {origin}",
                              "mobile": _mobile()},
                "consignee": {"name": f"Dealer {uuid.uuid4().hex[:6]}", "address": f"GIDC, {dest}",
                              "mobile": _mobile()},
                "from_city":      origin,
                "to_city":        dest,
                "description":    random.choice(["Textiles", "Machinery parts", "FMCG cartons", "Tiles"]),
                "packages":       random.randint(1, 40),
                "actual_weight":  str(actual),
                "charged_weight": str(actual + random.randint(0, 200)),
                "freight":        str(random.randint(500, 20000)),
                "hamali":         str(random.randint(0, 500)),
            },
            headers=self._headers(),
            name="/api/consignments/",
        )
        if resp.status_code == 201:
            BOOKED_NUMBERS.append(resp.json().get("consignment_number"))
            del BOOKED_NUMBERS[:-500]

    @task(3)
    def list_consignments(self):
        self.client.get("/api/consignments/?status=BOOKED", headers=self._headers(), name="/api/consignments/?status")

    @task(1)
    def dashboard(self):
        self.client.get("/api/ops/dashboard/", headers=self._headers(), name="/api/ops/dashboard/")


class PublicTracker(HttpUser):
    """Customers checking where their goods are, no login."""
    wait_time = between(0.5, 2.0)
    weight    = 4

    @task(5)
    def track(self):
        number = random.choice(BOOKED_NUMBERS) if BOOKED_NUMBERS else "KVL-2026-000001"
        self.client.get(f"/api/consignments/tracking/{number}/", name="/api/consignments/tracking/[number]/")

    @task(1)
    def health_check(self):
        """Simulates monitoring pings — ensures health endpoint is fast."""
        self.client.get("/api/health/", name="/api/health/")


# ── Custom events for Locust reporting ────────────────────────────────────────
@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    print("\n=== KVL Logistics Load Test Complete ===")
    stats = environment.stats.total
    print(f"Total requests:      {stats.num_requests}")
    print(f"Failures:            {stats.num_failures}")
    print(f"Avg response time:   {stats.avg_response_time:.0f}ms")
    print(f"95th percentile:     {stats.get_response_time_percentile(0.95):.0f}ms")
    print(f"Requests/sec:        {stats.current_rps:.1f}")
    if stats.num_failures / max(stats.num_requests, 1) > 0.01:
        print("⚠ FAILURE RATE > 1%")
    else:
        print("✓ System stable under load")
