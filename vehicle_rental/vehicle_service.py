import logging
from typing import List
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from vehicle_rental.enrichment import VehicleDataClient
from vehicle_rental.errors import BadRequestError, ForbiddenError, NotFoundError
from vehicle_rental.models import User, Vehicle
from vehicle_rental.schemas import (
    UnavailabilityResponse,
    VehicleCreate,
    VehicleResponse,
    VehicleUpdate,
)

logger = logging.getLogger(__name__)


def to_vehicle_response(vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse(
        id=vehicle.vehicle_uid,
        owner_id=vehicle.owner_uid,
        vehicle_model=vehicle.vehicle_model,
        make=vehicle.make,
        color=vehicle.color,
        year=vehicle.year,
        license_plate=vehicle.license_plate,
        url_photos=list(vehicle.url_photos or []),
        daily_price=vehicle.daily_price,
        rental_conditions=vehicle.rental_conditions,
        vehicle_class=vehicle.vehicle_class,
        drive=vehicle.drive,
        fuel_type=vehicle.fuel_type,
        transmission=vehicle.transmission,
        combination_mpg=vehicle.combination_mpg,
        displacement=vehicle.displacement,
        created_at=vehicle.created_at,
        updated_at=vehicle.updated_at,
    )


class VehicleService:
    def __init__(self, db: Session, vehicle_data: VehicleDataClient):
        self.db = db
        self.vehicle_data = vehicle_data

    async def create_vehicle(self, owner: User, request: VehicleCreate) -> VehicleResponse:
        # blocking session calls go through the threadpool
        if await run_in_threadpool(self._find_by_license_plate, request.license_plate):
            raise BadRequestError("Vehicle with this license plate already exists")

        fields = request.model_dump()
        specs = await self.vehicle_data.fetch_specs(request.make, request.vehicle_model, request.year)
        # values sent by the owner win over the looked-up ones
        for column, value in specs.items():
            if fields.get(column) is None:
                fields[column] = value

        vehicle = await run_in_threadpool(self._insert, Vehicle(owner_uid=owner.user_uid, **fields))
        logger.info(f"Vehicle {vehicle.vehicle_uid} listed by owner {vehicle.owner_uid}")
        return to_vehicle_response(vehicle)

    def get_all_vehicles(self) -> List[VehicleResponse]:
        vehicles = self.db.query(Vehicle).order_by(Vehicle.id).all()
        return [to_vehicle_response(vehicle) for vehicle in vehicles]

    def get_vehicle(self, vehicle_uid: UUID) -> VehicleResponse:
        return to_vehicle_response(self.get_vehicle_model(vehicle_uid))

    def get_vehicle_by_license_plate(self, license_plate: str) -> VehicleResponse:
        vehicle = self._find_by_license_plate(license_plate)
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        return to_vehicle_response(vehicle)

    def get_vehicles_by_owner(self, owner_uid: UUID) -> List[VehicleResponse]:
        vehicles = (
            self.db.query(Vehicle)
            .filter(Vehicle.owner_uid == owner_uid)
            .order_by(Vehicle.id)
            .all()
        )
        return [to_vehicle_response(vehicle) for vehicle in vehicles]

    def get_unavailability(self, vehicle_uid: UUID) -> List[UnavailabilityResponse]:
        vehicle = self.get_vehicle_model(vehicle_uid)
        return [
            UnavailabilityResponse(
                id=window.unavailability_uid,
                vehicle_id=vehicle.vehicle_uid,
                unavailable_from=window.unavailable_from,
                unavailable_to=window.unavailable_to,
            )
            for window in vehicle.unavailabilities
        ]

    def update_vehicle(self, vehicle_uid: UUID, owner: User, request: VehicleUpdate) -> VehicleResponse:
        vehicle = self._get_owned(vehicle_uid, owner)
        changes = request.model_dump(exclude_unset=True)

        plate = changes.get("license_plate")
        if plate is not None and plate != vehicle.license_plate and self._find_by_license_plate(plate):
            raise BadRequestError("Vehicle with this license plate already exists")

        for column, value in changes.items():
            if value is not None:
                setattr(vehicle, column, value)
        self.db.commit()
        self.db.refresh(vehicle)
        return to_vehicle_response(vehicle)

    def delete_vehicle(self, vehicle_uid: UUID, owner: User) -> bool:
        vehicle = self._get_owned(vehicle_uid, owner)
        self.db.delete(vehicle)
        self.db.commit()
        logger.info(f"Vehicle {vehicle_uid} deleted")
        return True

    def get_vehicle_model(self, vehicle_uid: UUID) -> Vehicle:
        vehicle = self.db.query(Vehicle).filter(Vehicle.vehicle_uid == vehicle_uid).first()
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        return vehicle

    def _get_owned(self, vehicle_uid: UUID, owner: User) -> Vehicle:
        vehicle = self.get_vehicle_model(vehicle_uid)
        if vehicle.owner_uid != owner.user_uid:
            raise ForbiddenError("You are not the owner of this vehicle")
        return vehicle

    def _find_by_license_plate(self, license_plate: str):
        return self.db.query(Vehicle).filter(Vehicle.license_plate == license_plate).first()

    def _insert(self, vehicle: Vehicle) -> Vehicle:
        self.db.add(vehicle)
        self.db.commit()
        self.db.refresh(vehicle)
        return vehicle
