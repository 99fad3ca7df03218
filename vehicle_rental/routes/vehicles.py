from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_rental.database import get_db
from vehicle_rental.enrichment import VehicleDataClient, get_vehicle_data_client
from vehicle_rental.models import User, UserRole
from vehicle_rental.schemas import (
    UnavailabilityResponse,
    VehicleCreate,
    VehicleResponse,
    VehicleUpdate,
)
from vehicle_rental.security import get_current_user, require_role
from vehicle_rental.vehicle_service import VehicleService

router = APIRouter()


def get_vehicle_service(
    db: Session = Depends(get_db),
    vehicle_data: VehicleDataClient = Depends(get_vehicle_data_client),
) -> VehicleService:
    return VehicleService(db, vehicle_data)


@router.post("", response_model=VehicleResponse, status_code=201)
async def create_vehicle(
    request: VehicleCreate,
    owner: User = Depends(require_role(UserRole.OWNER)),
    service: VehicleService = Depends(get_vehicle_service),
):
    return await service.create_vehicle(owner, request)


@router.get("", response_model=List[VehicleResponse])
def get_all_vehicles(
    user: User = Depends(get_current_user),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_all_vehicles()


@router.get("/myVehicles", response_model=List[VehicleResponse])
def get_my_vehicles(
    owner: User = Depends(require_role(UserRole.OWNER)),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_vehicles_by_owner(owner.user_uid)


@router.get("/license/{license_plate}", response_model=VehicleResponse)
def get_vehicle_by_license_plate(
    license_plate: str,
    user: User = Depends(get_current_user),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_vehicle_by_license_plate(license_plate)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(
    vehicle_id: UUID,
    user: User = Depends(get_current_user),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_vehicle(vehicle_id)


@router.get("/{vehicle_id}/unavailability", response_model=List[UnavailabilityResponse])
def get_vehicle_unavailability(
    vehicle_id: UUID,
    user: User = Depends(get_current_user),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.get_unavailability(vehicle_id)


@router.put("/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(
    vehicle_id: UUID,
    request: VehicleUpdate,
    owner: User = Depends(require_role(UserRole.OWNER)),
    service: VehicleService = Depends(get_vehicle_service),
):
    return service.update_vehicle(vehicle_id, owner, request)


@router.delete("/{vehicle_id}", status_code=204)
def delete_vehicle(
    vehicle_id: UUID,
    owner: User = Depends(require_role(UserRole.OWNER)),
    service: VehicleService = Depends(get_vehicle_service),
):
    service.delete_vehicle(vehicle_id, owner)
    return None
