from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_rental.database import get_db
from vehicle_rental.models import User, UserRole
from vehicle_rental.rental_service import RentalService
from vehicle_rental.schemas import RentalCreate, RentalResponse, RentalUpdate
from vehicle_rental.security import get_current_user, require_role

router = APIRouter()


def get_rental_service(db: Session = Depends(get_db)) -> RentalService:
    return RentalService(db)


@router.post("", response_model=RentalResponse, status_code=201)
def create_rental(
    request: RentalCreate,
    user: User = Depends(get_current_user),
    service: RentalService = Depends(get_rental_service),
):
    return service.create_rental(user, request)


@router.get("", response_model=List[RentalResponse])
def get_all_rentals(
    user: User = Depends(get_current_user),
    service: RentalService = Depends(get_rental_service),
):
    return service.get_all_rentals()


@router.get("/owner", response_model=List[RentalResponse])
def get_owner_rentals(
    owner: User = Depends(require_role(UserRole.OWNER)),
    service: RentalService = Depends(get_rental_service),
):
    return service.get_rentals_by_owner(owner.user_uid)


@router.get("/client", response_model=List[RentalResponse])
def get_client_rentals(
    client: User = Depends(require_role(UserRole.TENANT)),
    service: RentalService = Depends(get_rental_service),
):
    return service.get_rentals_by_client(client.user_uid)


@router.get("/{rental_id}", response_model=RentalResponse)
def get_rental(
    rental_id: UUID,
    user: User = Depends(get_current_user),
    service: RentalService = Depends(get_rental_service),
):
    return service.get_rental(rental_id, user)


@router.put("/{rental_id}", response_model=RentalResponse)
def update_rental(
    rental_id: UUID,
    request: RentalUpdate,
    user: User = Depends(get_current_user),
    service: RentalService = Depends(get_rental_service),
):
    return service.update_rental(rental_id, user, request)


@router.put("/{rental_id}/confirm", response_model=RentalResponse)
def confirm_rental(
    rental_id: UUID,
    user: User = Depends(get_current_user),
    service: RentalService = Depends(get_rental_service),
):
    return service.confirm_rental(rental_id, user)


@router.put("/{rental_id}/cancel", response_model=RentalResponse)
def cancel_rental(
    rental_id: UUID,
    user: User = Depends(get_current_user),
    service: RentalService = Depends(get_rental_service),
):
    return service.cancel_rental(rental_id, user)


@router.delete("/{rental_id}", status_code=204)
def delete_rental(
    rental_id: UUID,
    user: User = Depends(get_current_user),
    service: RentalService = Depends(get_rental_service),
):
    service.delete_rental(rental_id, user)
    return None
