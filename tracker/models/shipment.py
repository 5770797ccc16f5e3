"""
Shipment model for cargo movement tracking.
"""
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel


class ShipmentStatus(str, Enum):
    """Shipment lifecycle status."""
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    PICKED_UP = "PICKED_UP"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class VehicleType(str, Enum):
    """Vehicle class required for the cargo."""
    TRUCK = "TRUCK"
    VAN = "VAN"
    FLATBED = "FLATBED"
    TRAILER = "TRAILER"


def generate_tracking_number() -> str:
    """Random opaque tracking number (32 hex characters)."""
    return uuid4().hex.upper()


class Shipment(SQLModel, table=True):
    """
    A cargo movement from a shipper to a consignee.
    """
    __tablename__ = "shipments"  # type: ignore

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    tracking_number: str = Field(default_factory=generate_tracking_number, unique=True, index=True, max_length=64)
    status: ShipmentStatus = Field(default=ShipmentStatus.PENDING, index=True)

    # Shipper
    shipper_name: str
    shipper_phone: str
    shipper_email: Optional[str] = None
    shipper_address: str
    shipper_city: str
    shipper_state: str
    shipper_zip: str

    # Consignee
    consignee_name: str
    consignee_phone: str
    consignee_email: Optional[str] = None
    consignee_address: str
    consignee_city: str
    consignee_state: str
    consignee_zip: str

    # Cargo
    cargo_description: str
    weight: float
    dimensions: Optional[str] = None
    vehicle_type: VehicleType

    # Financial
    estimated_rate: float
    actual_rate: Optional[float] = None
    currency: str = Field(default="USD", max_length=3)

    # Dates
    pickup_date: date
    estimated_delivery: date
    delivery_date: Optional[date] = None

    notes: Optional[str] = None

    # References (resolved explicitly by callers, no lazy relationships)
    created_by_id: str = Field(foreign_key="users.id", index=True)
    driver_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
