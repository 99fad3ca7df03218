from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vehicle_rental.database import get_db
from vehicle_rental.models import User, UserRole
from vehicle_rental.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    SignupResponse,
)
from vehicle_rental.security import require_role
from vehicle_rental.user_service import UserService

router = APIRouter()


@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(request: SignupRequest, db: Session = Depends(get_db)):
    return UserService(db).signup(request)


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    return UserService(db).login(request)


@router.get("/test/admin", response_model=MessageResponse)
def hello_admin(user: User = Depends(require_role(UserRole.ADMIN))):
    return MessageResponse(message="Hello Admin!")


@router.get("/test/tenant", response_model=MessageResponse)
def hello_tenant(user: User = Depends(require_role(UserRole.TENANT))):
    return MessageResponse(message="Hello Tenant!")


@router.get("/test/owner", response_model=MessageResponse)
def hello_owner(user: User = Depends(require_role(UserRole.OWNER))):
    return MessageResponse(message="Hello Owner!")
