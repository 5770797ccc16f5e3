"""
Shipment lifecycle: creation, listing, tracking, assignment, updates and flagging.
"""
from datetime import datetime, timezone

from tracker.core.exceptions import NotFound, ValidationFailure
from tracker.core.logging import get_logger
from tracker.db.pagination import PageResult
from tracker.models.shipment import Shipment, ShipmentStatus, generate_tracking_number
from tracker.repositories.shipment_repository import ShipmentRepository
from tracker.schemas.pagination import PageRequest
from tracker.schemas.shipment import ShipmentCreate, ShipmentFilter, ShipmentUpdate

logger = get_logger(__name__)

FLAG_NOTE_TEMPLATE = "[FLAGGED FOR REVIEW - {timestamp}]"


class ShipmentService:
    """
    Service for managing shipments.

    Status changes are not checked against the PENDING -> DELIVERED order;
    any status may be written by ``update``.
    """

    def __init__(self, shipments: ShipmentRepository):
        self.shipments = shipments

    def create(self, shipment_in: ShipmentCreate, creator_id: str) -> Shipment:
        """
        Create a new shipment.

        Status is always PENDING and the creator is always ``creator_id``,
        whatever the payload says. A tracking number is generated unless the
        caller supplied one.

        Args:
            shipment_in: Shipment data
            creator_id: ID of the authenticated user creating it

        Returns:
            The persisted shipment
        """
        data = shipment_in.model_dump(exclude={"status", "tracking_number"})
        tracking_number = shipment_in.tracking_number or generate_tracking_number()

        if shipment_in.tracking_number and self.shipments.exists_by_tracking_number(tracking_number):
            raise ValidationFailure(f"Tracking number already in use: {tracking_number}")

        shipment = Shipment(
            **data,
            tracking_number=tracking_number,
            status=ShipmentStatus.PENDING,
            created_by_id=creator_id,
        )
        shipment = self.shipments.create(shipment)
        logger.info(f"Created shipment {shipment.id} ({shipment.tracking_number}) for user {creator_id}")
        return shipment

    def list_shipments(self, shipment_filter: ShipmentFilter, page_request: PageRequest) -> PageResult[Shipment]:
        return self.shipments.list_page(shipment_filter, page_request)

    def get(self, shipment_id: str) -> Shipment:
        """
        Get a shipment by ID.

        Raises:
            NotFound: If the shipment does not exist
        """
        shipment = self.shipments.get_by_id(shipment_id)
        if shipment is None:
            raise NotFound(f"Shipment not found with id: {shipment_id}")
        return shipment

    def track(self, tracking_number: str) -> Shipment:
        """
        Get a shipment by its public tracking number.

        Raises:
            NotFound: If no shipment carries this tracking number
        """
        shipment = self.shipments.get_by_tracking_number(tracking_number)
        if shipment is None:
            raise NotFound(f"Shipment not found with tracking number: {tracking_number}")
        return shipment

    def assign_driver(self, shipment_id: str, driver_id: str) -> Shipment:
        """
        Put a driver on a shipment and move it to ASSIGNED.

        The driver ID is not checked against the DRIVER role, but it must
        reference an existing user.
        """
        shipment = self.get(shipment_id)
        shipment.driver_id = driver_id
        shipment.status = ShipmentStatus.ASSIGNED
        shipment = self.shipments.update(shipment)
        logger.info(f"Assigned driver {driver_id} to shipment {shipment_id}")
        return shipment

    def update(self, shipment_id: str, shipment_in: ShipmentUpdate) -> Shipment:
        """
        Apply the fields present in ``shipment_in``; absent fields are left alone.
        """
        shipment = self.get(shipment_id)
        changes = shipment_in.model_dump(exclude_unset=True, exclude_none=True)

        for field, value in changes.items():
            setattr(shipment, field, value)

        shipment = self.shipments.update(shipment)
        if "status" in changes:
            logger.info(f"Shipment {shipment_id} status set to {shipment.status.value}")
        return shipment

    def flag(self, shipment_id: str) -> Shipment:
        """
        Append a timestamped review marker to the notes. Status is unchanged.
        """
        shipment = self.get(shipment_id)
        flag_note = FLAG_NOTE_TEMPLATE.format(timestamp=datetime.now(timezone.utc).isoformat())
        shipment.notes = f"{shipment.notes}\n{flag_note}" if shipment.notes else flag_note

        shipment = self.shipments.update(shipment)
        logger.info(f"Shipment {shipment_id} flagged for review")
        return shipment

    def delete(self, shipment_id: str) -> Shipment:
        """
        Hard delete a shipment.

        Returns:
            The shipment as it was just before deletion
        """
        shipment = self.get(shipment_id)
        self.shipments.delete(shipment)
        logger.info(f"Deleted shipment {shipment_id} ({shipment.tracking_number})")
        return shipment
