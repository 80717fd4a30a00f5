"""Point-in-time copies of a customer as it appears on a document."""

import uuid
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class PartySnapshot:
    """
    Consignor / consignee block of a consignment.
    Copied once at write time; never re-read from the live Customer.
    """
    customer_id: Optional[uuid.UUID]
    name:        str
    address:     str
    mobile:      str
    email:       str = ""
    gst_number:  str = ""

    @classmethod
    def from_customer(cls, customer, **overrides):
        data = {
            "customer_id": customer.pk,
            "name":        customer.name,
            "address":     customer.address,
            "mobile":      customer.mobile,
            "email":       customer.email or "",
            "gst_number":  customer.gst_number or "",
        }
        data.update({k: v for k, v in overrides.items() if v not in (None, "")})
        return cls(**data)

    @classmethod
    def read(cls, obj, prefix: str):
        """Rebuild the snapshot stored on `obj` under `<prefix>_*` columns."""
        return cls(
            customer_id = getattr(obj, f"{prefix}_customer_id"),
            name        = getattr(obj, f"{prefix}_name"),
            address     = getattr(obj, f"{prefix}_address"),
            mobile      = getattr(obj, f"{prefix}_mobile"),
            email       = getattr(obj, f"{prefix}_email"),
            gst_number  = getattr(obj, f"{prefix}_gst_number"),
        )

    def as_fields(self, prefix: str) -> dict:
        return {f"{prefix}_{key}": value for key, value in asdict(self).items()}


@dataclass(frozen=True)
class BilledPartySnapshot:
    """Party block of a freight bill."""
    customer_id: Optional[uuid.UUID]
    name:        str
    address:     str
    gst_number:  str = ""

    @classmethod
    def from_customer(cls, customer):
        return cls(
            customer_id = customer.pk,
            name        = customer.name,
            address     = customer.address,
            gst_number  = customer.gst_number or "",
        )

    def as_fields(self, prefix: str = "party") -> dict:
        return {f"{prefix}_{key}": value for key, value in asdict(self).items()}
