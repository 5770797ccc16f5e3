"""Pydantic schemas for request/response validation."""

from tracker.schemas.auth import AuthResponse, LoginRequest
from tracker.schemas.pagination import PageRequest, PaginationMeta
from tracker.schemas.shipment import (
    AssignDriverRequest,
    PaginatedShipments,
    ShipmentCreate,
    ShipmentFilter,
    ShipmentResponse,
    ShipmentUpdate,
)
from tracker.schemas.user import (
    PaginatedUsers,
    RegisterRequest,
    UserCreate,
    UserFilter,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "AssignDriverRequest",
    "AuthResponse",
    "LoginRequest",
    "PageRequest",
    "PaginatedShipments",
    "PaginatedUsers",
    "PaginationMeta",
    "RegisterRequest",
    "ShipmentCreate",
    "ShipmentFilter",
    "ShipmentResponse",
    "ShipmentUpdate",
    "UserCreate",
    "UserFilter",
    "UserResponse",
    "UserUpdate",
]
