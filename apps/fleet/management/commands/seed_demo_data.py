"""
Management command: seed demo customers, vehicles and drivers.

Usage:
    python manage.py seed_demo_data
"""

from decimal import Decimal
from django.core.management.base import BaseCommand
from apps.customers.models import Customer
from apps.fleet.models import Vehicle, Driver


CUSTOMERS = [
    # name,                     city,         state,          pincode,  mobile
    ("Sri Balaji Traders",      "Bengaluru",  "Karnataka",    "560002", "9845012345"),
    ("Chennai Hardware Mart",   "Chennai",    "Tamil Nadu",   "600001", "9840098400"),
    ("Mysore Silk Emporium",    "Mysuru",     "Karnataka",    "570001", "9880011223"),
    ("Deccan Agro Foods",       "Hyderabad",  "Telangana",    "500001", "9848022334"),
    ("Coastal Fisheries Co",    "Mangaluru",  "Karnataka",    "575001", "9741033445"),
    ("Pune Auto Components",    "Pune",       "Maharashtra",  "411001", "9822044556"),
]

VEHICLES = [
    ("KA01AB1234", "TRUCK",     22, "12.00"),
    ("KA05MN4521", "TRUCK",     32, "18.00"),
    ("KA51C7788",  "CONTAINER", 40, "25.00"),
    ("KA03HG9012", "TEMPO",     14, "3.50"),
    ("TN09BY3344", "VAN",       19, "5.00"),
]

DRIVERS = [
    ("Ramesh Kumar",   "9876543210", "KA0120150001234"),
    ("Suresh Gowda",   "9876501234", "KA0520180004567"),
    ("Mohammed Irfan", "9900112233", "KA5120200007890"),
    ("Venkatesh R",    "9445566778", "TN0920170002345"),
]


class Command(BaseCommand):
    help = "Seed demo customers, vehicles and drivers"

    def handle(self, *args, **options):
        created_customers = 0
        for name, city, state, pincode, mobile in CUSTOMERS:
            _, created = Customer.objects.get_or_create(
                mobile=mobile,
                defaults={
                    "name":    name,
                    "address": f"Main Road, {city}",
                    "city":    city,
                    "state":   state,
                    "pincode": pincode,
                },
            )
            if created:
                created_customers += 1

        created_vehicles = 0
        for number, vehicle_type, length, capacity in VEHICLES:
            _, created = Vehicle.objects.get_or_create(
                vehicle_number=number,
                defaults={
                    "vehicle_type":   vehicle_type,
                    "length_feet":    length,
                    "capacity_value": Decimal(capacity),
                },
            )
            if created:
                created_vehicles += 1

        created_drivers = 0
        for name, mobile, license_number in DRIVERS:
            _, created = Driver.objects.get_or_create(
                mobile=mobile,
                defaults={"name": name, "license_number": license_number},
            )
            if created:
                created_drivers += 1

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {created_customers} customers, {created_vehicles} vehicles "
            f"and {created_drivers} drivers."
        ))
