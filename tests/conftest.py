import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vehicle_rental.database import Base, get_db
from vehicle_rental.enrichment import get_vehicle_data_client
from vehicle_rental.main import app
from vehicle_rental.models import User, UserRole, Vehicle
from vehicle_rental.security import create_access_token, get_password_hash

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret123"
_password_hash = get_password_hash(DEFAULT_PASSWORD)


class StubVehicleData:
    def __init__(self, specs=None):
        self.specs = specs or {}
        self.calls = []

    async def fetch_specs(self, make, model, year):
        self.calls.append((make, model, year))
        return dict(self.specs)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def vehicle_data():
    return StubVehicleData({"vehicle_class": "compact car", "drive": "fwd", "fuel_type": "gas"})


@pytest.fixture
def client(db_session, vehicle_data):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_vehicle_data_client] = lambda: vehicle_data
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make_user(username, roles=(UserRole.TENANT,)):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=_password_hash,
            roles=[role.value for role in roles],
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _auth_headers


@pytest.fixture
def tenant(make_user):
    return make_user("tina")


@pytest.fixture
def owner(make_user):
    return make_user("oscar", roles=(UserRole.TENANT, UserRole.OWNER))


@pytest.fixture
def admin(make_user):
    return make_user("ada", roles=(UserRole.TENANT, UserRole.ADMIN))


@pytest.fixture
def make_vehicle(db_session):
    def _make_vehicle(owner, license_plate="ABC-123", daily_price=50.0):
        vehicle = Vehicle(
            owner_uid=owner.user_uid,
            make="Toyota",
            vehicle_model="Corolla",
            color="red",
            year=2020,
            license_plate=license_plate,
            url_photos=["https://example.com/corolla.jpg"],
            daily_price=daily_price,
            rental_conditions="No smoking",
        )
        db_session.add(vehicle)
        db_session.commit()
        db_session.refresh(vehicle)
        return vehicle

    return _make_vehicle
