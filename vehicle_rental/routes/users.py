from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_rental.database import get_db
from vehicle_rental.models import User, UserRole
from vehicle_rental.schemas import EditUserRequest, SignupRequest, SignupResponse, UserProfile
from vehicle_rental.security import get_current_user, require_role
from vehicle_rental.user_service import UserService

router = APIRouter()


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=List[UserProfile])
def get_users(
    user: User = Depends(require_role(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    return service.get_users()


@router.post("", response_model=UserProfile, status_code=201)
def create_user(
    request: SignupRequest,
    user: User = Depends(require_role(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    return service.create_user(request)


@router.get("/{user_id}", response_model=UserProfile)
def get_profile(
    user_id: UUID,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.get_profile(user_id)


@router.put("/{user_id}", response_model=UserProfile)
def edit_user(
    user_id: UUID,
    request: EditUserRequest,
    user: User = Depends(require_role(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    return service.edit_user(user_id, request)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: UUID,
    user: User = Depends(require_role(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    service.delete_user(user_id)
    return None


@router.post("/{user_id}/addOwnerRole", response_model=SignupResponse)
def add_owner_role(
    user_id: UUID,
    user: User = Depends(require_role(UserRole.TENANT)),
    service: UserService = Depends(get_user_service),
):
    return service.add_role(user_id, UserRole.OWNER)


@router.post("/{user_id}/addAdminRole", response_model=SignupResponse)
def add_admin_role(
    user_id: UUID,
    user: User = Depends(require_role(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    return service.add_role(user_id, UserRole.ADMIN)
