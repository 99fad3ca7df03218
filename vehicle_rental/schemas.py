from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import date, datetime
from typing import List, Optional

from vehicle_rental.models import RentalStatus, UserRole


class MessageResponse(BaseModel):
    message: str


# ---------- Auth / users ----------
class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=80)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    token: str


class UserProfile(BaseModel):
    id: UUID
    username: str
    email: str
    roles: List[UserRole]


class SignupResponse(BaseModel):
    token: str
    user: UserProfile


class EditUserRequest(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=80)
    email: Optional[EmailStr] = None


# ---------- Vehicles ----------
class VehicleSpecs(BaseModel):
    vehicle_class: Optional[str] = Field(None, validation_alias="class", serialization_alias="class")
    drive: Optional[str] = None
    fuel_type: Optional[str] = Field(None, validation_alias="fuelType", serialization_alias="fuelType")
    transmission: Optional[str] = None
    combination_mpg: Optional[float] = Field(
        None, validation_alias="combinationMpg", serialization_alias="combinationMpg"
    )
    displacement: Optional[float] = None

    class Config:
        populate_by_name = True


class VehicleCreate(VehicleSpecs):
    vehicle_model: str = Field(..., validation_alias="vehicleModel")
    make: str
    color: str
    year: int = Field(..., ge=1900, le=2100)
    license_plate: str = Field(..., min_length=1, max_length=20, validation_alias="licensePlate")
    url_photos: List[str] = Field(default_factory=list, validation_alias="urlPhotos")
    daily_price: float = Field(..., ge=0, validation_alias="dailyPrice")
    rental_conditions: str = Field(..., validation_alias="rentalConditions")


class VehicleUpdate(VehicleSpecs):
    vehicle_model: Optional[str] = Field(None, validation_alias="vehicleModel")
    make: Optional[str] = None
    color: Optional[str] = None
    year: Optional[int] = Field(None, ge=1900, le=2100)
    license_plate: Optional[str] = Field(None, min_length=1, max_length=20, validation_alias="licensePlate")
    url_photos: Optional[List[str]] = Field(None, validation_alias="urlPhotos")
    daily_price: Optional[float] = Field(None, ge=0, validation_alias="dailyPrice")
    rental_conditions: Optional[str] = Field(None, validation_alias="rentalConditions")


class VehicleResponse(VehicleSpecs):
    id: UUID
    owner_id: UUID = Field(validation_alias="ownerId", serialization_alias="ownerId")
    vehicle_model: str = Field(validation_alias="vehicleModel", serialization_alias="vehicleModel")
    make: str
    color: str
    year: int
    license_plate: str = Field(validation_alias="licensePlate", serialization_alias="licensePlate")
    url_photos: List[str] = Field(validation_alias="urlPhotos", serialization_alias="urlPhotos")
    daily_price: float = Field(validation_alias="dailyPrice", serialization_alias="dailyPrice")
    rental_conditions: str = Field(validation_alias="rentalConditions", serialization_alias="rentalConditions")
    created_at: Optional[datetime] = Field(None, validation_alias="createdAt", serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, validation_alias="updatedAt", serialization_alias="updatedAt")


class UnavailabilityResponse(BaseModel):
    id: UUID
    vehicle_id: UUID = Field(validation_alias="vehicleId", serialization_alias="vehicleId")
    unavailable_from: date = Field(validation_alias="unavailableFrom", serialization_alias="unavailableFrom")
    unavailable_to: date = Field(validation_alias="unavailableTo", serialization_alias="unavailableTo")

    class Config:
        populate_by_name = True


# ---------- Rentals ----------
class RentalCreate(BaseModel):
    vehicle_id: UUID = Field(validation_alias="vehicleId")
    start_date: date = Field(validation_alias="startDate")
    end_date: date = Field(validation_alias="endDate")

    class Config:
        populate_by_name = True


class RentalUpdate(BaseModel):
    start_date: Optional[date] = Field(None, validation_alias="startDate")
    end_date: Optional[date] = Field(None, validation_alias="endDate")
    status: Optional[RentalStatus] = None

    class Config:
        populate_by_name = True


class RentalResponse(BaseModel):
    id: UUID
    vehicle_id: UUID = Field(validation_alias="vehicleId", serialization_alias="vehicleId")
    client_id: UUID = Field(validation_alias="clientId", serialization_alias="clientId")
    owner_id: UUID = Field(validation_alias="ownerId", serialization_alias="ownerId")
    status: RentalStatus
    start_date: date = Field(validation_alias="startDate", serialization_alias="startDate")
    end_date: date = Field(validation_alias="endDate", serialization_alias="endDate")
    total_cost: float = Field(validation_alias="totalCost", serialization_alias="totalCost")

    class Config:
        populate_by_name = True
