"""
Data access layer for shipments.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, or_, select

from tracker.core.exceptions import ValidationFailure
from tracker.db.pagination import PageResult, paginate
from tracker.models.shipment import Shipment
from tracker.schemas.pagination import PageRequest
from tracker.schemas.shipment import ShipmentFilter

SORTABLE_FIELDS = {
    "created_at",
    "updated_at",
    "tracking_number",
    "status",
    "vehicle_type",
    "weight",
    "estimated_rate",
    "actual_rate",
    "pickup_date",
    "estimated_delivery",
    "delivery_date",
    "shipper_name",
    "consignee_name",
}


class ShipmentRepository:
    """
    Pure DB operations on the ``shipments`` table.
    Each mutating call commits once or rolls back.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, shipment_id: str) -> Optional[Shipment]:
        return self.session.get(Shipment, shipment_id)

    def get_by_tracking_number(self, tracking_number: str) -> Optional[Shipment]:
        statement = select(Shipment).where(Shipment.tracking_number == tracking_number)
        return self.session.exec(statement).first()

    def exists_by_tracking_number(self, tracking_number: str) -> bool:
        return self.get_by_tracking_number(tracking_number) is not None

    def list_page(self, shipment_filter: ShipmentFilter, page_request: PageRequest) -> PageResult[Shipment]:
        """
        Filtered, sorted, paginated listing.

        Equality filters: status, vehicle type, creator, driver.
        Case-insensitive substring filters: tracking number, shipper city,
        consignee city. ``search`` matches tracking number, shipper name,
        consignee name or cargo description.
        """
        statement = select(Shipment)

        if shipment_filter.status is not None:
            statement = statement.where(Shipment.status == shipment_filter.status)

        if shipment_filter.vehicle_type is not None:
            statement = statement.where(Shipment.vehicle_type == shipment_filter.vehicle_type)

        if shipment_filter.created_by_id:
            statement = statement.where(Shipment.created_by_id == shipment_filter.created_by_id)

        if shipment_filter.driver_id:
            statement = statement.where(Shipment.driver_id == shipment_filter.driver_id)

        if shipment_filter.tracking_number:
            statement = statement.where(
                col(Shipment.tracking_number).icontains(shipment_filter.tracking_number, autoescape=True)
            )

        if shipment_filter.shipper_city:
            statement = statement.where(
                col(Shipment.shipper_city).icontains(shipment_filter.shipper_city, autoescape=True)
            )

        if shipment_filter.consignee_city:
            statement = statement.where(
                col(Shipment.consignee_city).icontains(shipment_filter.consignee_city, autoescape=True)
            )

        if shipment_filter.search:
            term = shipment_filter.search
            statement = statement.where(
                or_(
                    col(Shipment.tracking_number).icontains(term, autoescape=True),
                    col(Shipment.shipper_name).icontains(term, autoescape=True),
                    col(Shipment.consignee_name).icontains(term, autoescape=True),
                    col(Shipment.cargo_description).icontains(term, autoescape=True),
                )
            )

        return paginate(self.session, Shipment, statement, page_request, SORTABLE_FIELDS)

    def create(self, shipment: Shipment) -> Shipment:
        self.session.add(shipment)
        self._commit()
        self.session.refresh(shipment)
        return shipment

    def update(self, shipment: Shipment) -> Shipment:
        """Persist changes and bump ``updated_at``."""
        shipment.updated_at = datetime.now(timezone.utc)
        self.session.add(shipment)
        self._commit()
        self.session.refresh(shipment)
        return shipment

    def delete(self, shipment: Shipment) -> None:
        self.session.refresh(shipment)
        self.session.delete(shipment)
        self.session.commit()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            # SQLite and Postgres both name the failed constraint kind in the message
            if "foreign key" in str(e.orig).lower():
                raise ValidationFailure("Shipment references a user that does not exist") from e
            raise ValidationFailure("Tracking number already exists") from e
