"""
Shipment routes: listing, tracking and lifecycle mutations.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from tracker.api.deps import CurrentUser, StaffUser, get_page_request, get_shipment_service
from tracker.models.shipment import ShipmentStatus, VehicleType
from tracker.schemas.pagination import PageRequest
from tracker.schemas.shipment import (
    AssignDriverRequest,
    PaginatedShipments,
    ShipmentCreate,
    ShipmentFilter,
    ShipmentResponse,
    ShipmentUpdate,
)
from tracker.services.shipment_service import ShipmentService

router = APIRouter(prefix="/shipments", tags=["shipments"])

ShipmentServiceDep = Annotated[ShipmentService, Depends(get_shipment_service)]


@router.get("", response_model=PaginatedShipments)
def list_shipments(
    current_user: CurrentUser,
    shipment_service: ShipmentServiceDep,
    page_request: Annotated[PageRequest, Depends(get_page_request)],
    status_filter: Annotated[Optional[ShipmentStatus], Query(alias="status")] = None,
    vehicle_type: Optional[VehicleType] = None,
    tracking_number: Optional[str] = None,
    created_by_id: Optional[str] = None,
    driver_id: Optional[str] = None,
    shipper_city: Optional[str] = None,
    consignee_city: Optional[str] = None,
    search: Optional[str] = None,
) -> PaginatedShipments:
    """
    Paginated shipment listing. All filters are optional and AND-combined.

    Raises:
        InvalidPagination: page < 1, limit out of range or unknown sort field (400)
    """
    shipment_filter = ShipmentFilter(
        status=status_filter,
        vehicle_type=vehicle_type,
        tracking_number=tracking_number,
        created_by_id=created_by_id,
        driver_id=driver_id,
        shipper_city=shipper_city,
        consignee_city=consignee_city,
        search=search,
    )
    page = shipment_service.list_shipments(shipment_filter, page_request)
    return PaginatedShipments(
        data=[ShipmentResponse.model_validate(shipment) for shipment in page.data],
        meta=page.meta,
    )


@router.post("", response_model=ShipmentResponse, status_code=status.HTTP_201_CREATED)
def create_shipment(
    shipment_in: ShipmentCreate,
    current_user: CurrentUser,
    shipment_service: ShipmentServiceDep,
) -> ShipmentResponse:
    """Create a shipment owned by the caller. Status always starts at PENDING."""
    return ShipmentResponse.model_validate(shipment_service.create(shipment_in, creator_id=current_user.id))


@router.get("/track/{tracking_number}", response_model=ShipmentResponse)
def track_shipment(tracking_number: str, shipment_service: ShipmentServiceDep) -> ShipmentResponse:
    """Public lookup by tracking number."""
    return ShipmentResponse.model_validate(shipment_service.track(tracking_number))


@router.get("/{shipment_id}", response_model=ShipmentResponse)
def get_shipment(shipment_id: str, current_user: CurrentUser, shipment_service: ShipmentServiceDep) -> ShipmentResponse:
    return ShipmentResponse.model_validate(shipment_service.get(shipment_id))


@router.patch("/{shipment_id}", response_model=ShipmentResponse)
def update_shipment(
    shipment_id: str,
    shipment_in: ShipmentUpdate,
    current_user: StaffUser,
    shipment_service: ShipmentServiceDep,
) -> ShipmentResponse:
    """Update status, actual rate, delivery date or notes; omitted fields are untouched."""
    return ShipmentResponse.model_validate(shipment_service.update(shipment_id, shipment_in))


@router.post("/{shipment_id}/assign-driver", response_model=ShipmentResponse)
def assign_driver(
    shipment_id: str,
    assignment: AssignDriverRequest,
    current_user: StaffUser,
    shipment_service: ShipmentServiceDep,
) -> ShipmentResponse:
    """Assign a driver; the shipment moves to ASSIGNED."""
    return ShipmentResponse.model_validate(shipment_service.assign_driver(shipment_id, assignment.driver_id))


@router.post("/{shipment_id}/flag", response_model=ShipmentResponse)
def flag_shipment(shipment_id: str, current_user: CurrentUser, shipment_service: ShipmentServiceDep) -> ShipmentResponse:
    """Append a review marker to the shipment notes."""
    return ShipmentResponse.model_validate(shipment_service.flag(shipment_id))


@router.delete("/{shipment_id}", response_model=ShipmentResponse)
def delete_shipment(shipment_id: str, current_user: StaffUser, shipment_service: ShipmentServiceDep) -> ShipmentResponse:
    """Hard delete; returns the shipment as it was before deletion."""
    return ShipmentResponse.model_validate(shipment_service.delete(shipment_id))
