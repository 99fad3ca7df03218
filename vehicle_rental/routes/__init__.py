from fastapi import APIRouter

from vehicle_rental.routes import auth, rentals, users, vehicles

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
api_router.include_router(rentals.router, prefix="/rentals", tags=["rentals"])
