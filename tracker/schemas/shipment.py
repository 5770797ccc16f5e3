"""
Shipment schemas for API request/response validation.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from tracker.models.shipment import ShipmentStatus, VehicleType
from tracker.schemas.pagination import PaginationMeta


class ShipmentCreate(BaseModel):
    """
    Payload for creating a shipment.

    ``status`` is accepted for client convenience but always replaced with
    PENDING; ``tracking_number`` is generated when omitted.
    """
    tracking_number: Optional[str] = Field(default=None, min_length=1, max_length=64)
    status: Optional[ShipmentStatus] = None

    shipper_name: str = Field(min_length=1)
    shipper_phone: str = Field(min_length=1)
    shipper_email: Optional[EmailStr] = None
    shipper_address: str = Field(min_length=1)
    shipper_city: str = Field(min_length=1)
    shipper_state: str = Field(min_length=1)
    shipper_zip: str = Field(min_length=1)

    consignee_name: str = Field(min_length=1)
    consignee_phone: str = Field(min_length=1)
    consignee_email: Optional[EmailStr] = None
    consignee_address: str = Field(min_length=1)
    consignee_city: str = Field(min_length=1)
    consignee_state: str = Field(min_length=1)
    consignee_zip: str = Field(min_length=1)

    cargo_description: str = Field(min_length=1)
    weight: float = Field(gt=0)
    dimensions: Optional[str] = None
    vehicle_type: VehicleType

    estimated_rate: float = Field(gt=0)
    actual_rate: Optional[float] = Field(default=None, gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    pickup_date: date
    estimated_delivery: date
    notes: Optional[str] = None


class ShipmentUpdate(BaseModel):
    """Partial update of the mutable lifecycle fields."""
    status: Optional[ShipmentStatus] = None
    actual_rate: Optional[float] = Field(default=None, gt=0)
    delivery_date: Optional[date] = None
    notes: Optional[str] = None


class AssignDriverRequest(BaseModel):
    """Driver to put on a shipment."""
    driver_id: str = Field(min_length=1)


class ShipmentFilter(BaseModel):
    """Listing filters; every present field narrows the result."""
    status: Optional[ShipmentStatus] = None
    vehicle_type: Optional[VehicleType] = None
    tracking_number: Optional[str] = None
    created_by_id: Optional[str] = None
    driver_id: Optional[str] = None
    shipper_city: Optional[str] = None
    consignee_city: Optional[str] = None
    search: Optional[str] = None


class ShipmentResponse(BaseModel):
    """Shipment as returned by the API."""
    id: str
    tracking_number: str
    status: ShipmentStatus

    shipper_name: str
    shipper_phone: str
    shipper_email: Optional[str] = None
    shipper_address: str
    shipper_city: str
    shipper_state: str
    shipper_zip: str

    consignee_name: str
    consignee_phone: str
    consignee_email: Optional[str] = None
    consignee_address: str
    consignee_city: str
    consignee_state: str
    consignee_zip: str

    cargo_description: str
    weight: float
    dimensions: Optional[str] = None
    vehicle_type: VehicleType

    estimated_rate: float
    actual_rate: Optional[float] = None
    currency: str

    pickup_date: date
    estimated_delivery: date
    delivery_date: Optional[date] = None

    notes: Optional[str] = None
    created_by_id: str
    driver_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaginatedShipments(BaseModel):
    """A page of shipments with pagination metadata."""
    data: List[ShipmentResponse]
    meta: PaginationMeta
