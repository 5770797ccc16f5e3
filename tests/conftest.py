"""
Pytest configuration and fixtures.
Provides test database, client, users with each role and their tokens.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DISABLE_BOOTSTRAP_USERS", "true")

from datetime import date  # noqa: E402
from typing import Any, Callable, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from tracker.core.security import password_hasher, token_service  # noqa: E402
from tracker.db.session import enable_sqlite_foreign_keys, get_session  # noqa: E402
from tracker.main import app  # noqa: E402
from tracker.models.shipment import VehicleType  # noqa: E402
from tracker.models.user import User, UserRole  # noqa: E402
from tracker.repositories.shipment_repository import ShipmentRepository  # noqa: E402
from tracker.repositories.user_repository import UserRepository  # noqa: E402
from tracker.schemas.shipment import ShipmentCreate  # noqa: E402
from tracker.schemas.user import UserCreate  # noqa: E402
from tracker.services.auth_service import AuthService  # noqa: E402
from tracker.services.shipment_service import ShipmentService  # noqa: E402
from tracker.services.user_service import UserService  # noqa: E402


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    """
    Create a test database session.
    Uses an in-memory SQLite database for fast tests.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with dependency overrides.
    """

    def get_session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(name="user_service")
def user_service_fixture(session: Session) -> UserService:
    return UserService(UserRepository(session), password_hasher)


@pytest.fixture(name="auth_service")
def auth_service_fixture(session: Session) -> AuthService:
    return AuthService(UserRepository(session), password_hasher, token_service)


@pytest.fixture(name="shipment_service")
def shipment_service_fixture(session: Session) -> ShipmentService:
    return ShipmentService(ShipmentRepository(session))


def _create_user(user_service: UserService, email: str, role: UserRole, first_name: str = "Test") -> User:
    return user_service.create_user(
        UserCreate(
            email=email,
            password="testpassword123",
            first_name=first_name,
            last_name="User",
            role=role,
        )
    )


@pytest.fixture(name="test_admin")
def test_admin_fixture(user_service: UserService) -> User:
    return _create_user(user_service, "admin@example.com", UserRole.ADMIN, "Ada")


@pytest.fixture(name="test_dispatcher")
def test_dispatcher_fixture(user_service: UserService) -> User:
    return _create_user(user_service, "dispatch@example.com", UserRole.DISPATCHER, "Dora")


@pytest.fixture(name="test_driver")
def test_driver_fixture(user_service: UserService) -> User:
    return _create_user(user_service, "driver@example.com", UserRole.DRIVER, "Dave")


@pytest.fixture(name="test_customer")
def test_customer_fixture(user_service: UserService) -> User:
    return _create_user(user_service, "customer@example.com", UserRole.CUSTOMER, "Cleo")


@pytest.fixture(name="admin_token")
def admin_token_fixture(client: TestClient, test_admin: User) -> str:
    """
    Get an access token for the admin by logging in through the API.
    """
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@example.com", "password": "testpassword123"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture(name="dispatcher_token")
def dispatcher_token_fixture(test_dispatcher: User) -> str:
    return token_service.issue(test_dispatcher.email)


@pytest.fixture(name="customer_token")
def customer_token_fixture(test_customer: User) -> str:
    return token_service.issue(test_customer.email)


@pytest.fixture(name="shipment_data")
def shipment_data_fixture() -> Callable[..., dict[str, Any]]:
    """
    Factory for a valid shipment payload; keyword arguments override fields.
    """

    def make(**overrides: Any) -> dict[str, Any]:
        data: dict[str, Any] = {
            "shipper_name": "Acme Corp",
            "shipper_phone": "555-0100",
            "shipper_address": "1 Factory Rd",
            "shipper_city": "Chicago",
            "shipper_state": "IL",
            "shipper_zip": "60601",
            "consignee_name": "Globex",
            "consignee_phone": "555-0199",
            "consignee_address": "9 Market St",
            "consignee_city": "Denver",
            "consignee_state": "CO",
            "consignee_zip": "80202",
            "cargo_description": "Steel coils",
            "weight": 10.5,
            "vehicle_type": VehicleType.TRUCK.value,
            "estimated_rate": 100.0,
            "pickup_date": date(2026, 1, 10).isoformat(),
            "estimated_delivery": date(2026, 1, 14).isoformat(),
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture(name="make_shipment")
def make_shipment_fixture(
    shipment_service: ShipmentService,
    shipment_data: Callable[..., dict[str, Any]],
) -> Callable[..., Any]:
    """
    Factory that persists a shipment through the service layer.
    """

    def make(creator: User, **overrides: Any):
        return shipment_service.create(ShipmentCreate(**shipment_data(**overrides)), creator_id=creator.id)

    return make
