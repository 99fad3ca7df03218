import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from vehicle_rental.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    OWNER = "owner"
    TENANT = "tenant"


class RentalStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    EXTENDED = "extended"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    user_uid = Column(Uuid(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False)
    username = Column(String(80), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=lambda: [UserRole.TENANT.value])
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def has_role(self, role: UserRole) -> bool:
        return role.value in (self.roles or [])


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_uid = Column(Uuid(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False)
    owner_uid = Column(Uuid(as_uuid=True), nullable=False, index=True)
    make = Column(String(80), nullable=False)
    vehicle_model = Column(String(80), nullable=False)
    color = Column(String(40), nullable=False)
    year = Column(Integer, nullable=False)
    license_plate = Column(String(20), unique=True, nullable=False)
    url_photos = Column(JSON, nullable=False, default=list)
    daily_price = Column(Float, nullable=False)
    rental_conditions = Column(Text, nullable=False)

    # filled from the vehicle data API when available
    vehicle_class = Column(String(80))
    drive = Column(String(20))
    fuel_type = Column(String(20))
    transmission = Column(String(20))
    combination_mpg = Column(Float)
    displacement = Column(Float)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    unavailabilities = relationship(
        "VehicleUnavailability",
        back_populates="vehicle",
        cascade="all, delete-orphan",
        order_by="VehicleUnavailability.unavailable_from",
    )

    __table_args__ = (
        CheckConstraint("daily_price >= 0", name="vehicle_daily_price_check"),
    )


class VehicleUnavailability(Base):
    __tablename__ = "vehicle_unavailability"

    id = Column(Integer, primary_key=True, index=True)
    unavailability_uid = Column(Uuid(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    unavailable_from = Column(Date, nullable=False)
    unavailable_to = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    vehicle = relationship("Vehicle", back_populates="unavailabilities")


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True)
    rental_uid = Column(Uuid(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False)
    vehicle_uid = Column(Uuid(as_uuid=True), nullable=False, index=True)
    client_uid = Column(Uuid(as_uuid=True), nullable=False, index=True)
    owner_uid = Column(Uuid(as_uuid=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=RentalStatus.PENDING.value)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_cost = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'expired', 'extended')",
            name="rental_status_check"
        ),
    )
