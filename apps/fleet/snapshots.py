"""
Vehicle / driver snapshots embedded in consignments and load chalans.
They are copied at assignment time and stay frozen if the fleet record changes later.
"""

import uuid
from dataclasses import dataclass, asdict, fields
from datetime import date
from typing import Optional


def _stored(obj, prefix, cls):
    return {f.name: getattr(obj, f"{prefix}_{f.name}", None) for f in fields(cls)}


@dataclass(frozen=True)
class VehicleSnapshot:
    id:                  uuid.UUID
    number:              str
    engine_number:       str = ""
    chassis_number:      str = ""
    insurance_policy_no: str = ""
    insurance_validity:  Optional[date] = None

    @classmethod
    def of(cls, vehicle):
        return cls(
            id                  = vehicle.pk,
            number              = vehicle.vehicle_number,
            engine_number       = vehicle.engine_number,
            chassis_number      = vehicle.chassis_number,
            insurance_policy_no = vehicle.insurance_policy_no,
            insurance_validity  = vehicle.insurance_validity,
        )

    @classmethod
    def read(cls, obj, prefix="vehicle"):
        data = _stored(obj, prefix, cls)
        if data["id"] is None:
            return None
        data = {k: ("" if v is None and k != "insurance_validity" else v) for k, v in data.items()}
        return cls(**data)

    def as_fields(self, prefix="vehicle") -> dict:
        return {f"{prefix}_{key}": value for key, value in asdict(self).items()}


@dataclass(frozen=True)
class DriverSnapshot:
    id:             uuid.UUID
    name:           str
    mobile:         str
    license_number: str = ""

    @classmethod
    def of(cls, driver):
        return cls(
            id             = driver.pk,
            name           = driver.name,
            mobile         = driver.mobile,
            license_number = driver.license_number or "",
        )

    @classmethod
    def read(cls, obj, prefix="driver"):
        data = _stored(obj, prefix, cls)
        if data["id"] is None:
            return None
        return cls(**{k: (v if v is not None else "") for k, v in data.items()})

    def as_fields(self, prefix="driver", exclude=()) -> dict:
        return {f"{prefix}_{key}": value for key, value in asdict(self).items() if key not in exclude}
