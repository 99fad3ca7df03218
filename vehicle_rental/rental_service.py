import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from vehicle_rental.availability import overlaps
from vehicle_rental.errors import BadRequestError, ForbiddenError, NotFoundError
from vehicle_rental.models import (
    Rental,
    RentalStatus,
    User,
    UserRole,
    Vehicle,
    VehicleUnavailability,
)
from vehicle_rental.schemas import RentalCreate, RentalResponse, RentalUpdate

logger = logging.getLogger(__name__)

# statuses that keep the rental's unavailability window on the vehicle
HOLDS_WINDOW = (
    RentalStatus.PENDING.value,
    RentalStatus.CONFIRMED.value,
    RentalStatus.EXTENDED.value,
)
RELEASES_WINDOW = (RentalStatus.CANCELLED.value, RentalStatus.EXPIRED.value)

# target status -> statuses it can be reached from
TRANSITIONS = {
    RentalStatus.CONFIRMED: (RentalStatus.PENDING.value,),
    RentalStatus.CANCELLED: (RentalStatus.PENDING.value, RentalStatus.CONFIRMED.value),
    RentalStatus.EXTENDED: (RentalStatus.CONFIRMED.value,),
    RentalStatus.COMPLETED: (RentalStatus.CONFIRMED.value, RentalStatus.EXTENDED.value),
    RentalStatus.EXPIRED: (RentalStatus.PENDING.value, RentalStatus.CONFIRMED.value),
}
STATUS_VERBS = {
    RentalStatus.CONFIRMED: "confirm",
    RentalStatus.CANCELLED: "cancel",
}


def to_rental_response(rental: Rental) -> RentalResponse:
    return RentalResponse(
        id=rental.rental_uid,
        vehicle_id=rental.vehicle_uid,
        client_id=rental.client_uid,
        owner_id=rental.owner_uid,
        status=RentalStatus(rental.status),
        start_date=rental.start_date,
        end_date=rental.end_date,
        total_cost=rental.total_cost,
    )


def rental_days(start_date: date, end_date: date) -> int:
    # both ends are booked, see availability.overlaps
    return (end_date - start_date).days + 1


class RentalService:
    """
    Rental bookings and their effect on vehicle availability.

    Creating a rental writes the rental and the vehicle's new unavailability
    window in two separate commits. Nothing locks the vehicle between the
    availability check and those writes, so two overlapping requests racing
    each other can both be accepted.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_rental(self, client: User, request: RentalCreate) -> RentalResponse:
        vehicle = self.db.query(Vehicle).filter(Vehicle.vehicle_uid == request.vehicle_id).first()
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        if request.start_date > request.end_date:
            raise BadRequestError("Start date must not be after end date")

        windows = self.find_unavailability(vehicle.id)
        if overlaps(request.start_date, request.end_date, windows):
            raise BadRequestError("Vehicle is not available for the requested dates")

        rental = Rental(
            vehicle_uid=vehicle.vehicle_uid,
            client_uid=client.user_uid,
            owner_uid=vehicle.owner_uid,
            status=RentalStatus.PENDING.value,
            start_date=request.start_date,
            end_date=request.end_date,
            total_cost=vehicle.daily_price * rental_days(request.start_date, request.end_date),
        )
        self.db.add(rental)
        self.db.commit()
        self.db.refresh(rental)

        if not self.add_unavailability(vehicle.vehicle_uid, request.start_date, request.end_date):
            logger.error(f"Rental {rental.rental_uid} created but vehicle {vehicle.vehicle_uid} was not blocked")
            raise BadRequestError("Failed to update vehicle availability")

        logger.info(
            f"Rental {rental.rental_uid} booked vehicle {vehicle.vehicle_uid} "
            f"from {request.start_date} to {request.end_date}"
        )
        return to_rental_response(rental)

    def find_unavailability(self, vehicle_id: int) -> List[VehicleUnavailability]:
        return (
            self.db.query(VehicleUnavailability)
            .filter(VehicleUnavailability.vehicle_id == vehicle_id)
            .all()
        )

    def add_unavailability(self, vehicle_uid: UUID, start_date: date, end_date: date) -> bool:
        vehicle = self.db.query(Vehicle).filter(Vehicle.vehicle_uid == vehicle_uid).first()
        if not vehicle:
            return False
        vehicle.unavailabilities.append(
            VehicleUnavailability(unavailable_from=start_date, unavailable_to=end_date)
        )
        self.db.commit()
        return True

    def remove_unavailability(self, vehicle_uid: UUID, start_date: date, end_date: date) -> bool:
        window = (
            self.db.query(VehicleUnavailability)
            .join(Vehicle)
            .filter(
                Vehicle.vehicle_uid == vehicle_uid,
                VehicleUnavailability.unavailable_from == start_date,
                VehicleUnavailability.unavailable_to == end_date,
            )
            .first()
        )
        if not window:
            return False
        self.db.delete(window)
        self.db.commit()
        return True

    def get_rental(self, rental_uid: UUID, user: User) -> RentalResponse:
        rental = self._get(rental_uid)
        self._check_party(rental, user)
        return to_rental_response(rental)

    def get_all_rentals(self) -> List[RentalResponse]:
        rentals = self.db.query(Rental).order_by(Rental.id).all()
        if not rentals:
            raise NotFoundError("No rentals found")
        return [to_rental_response(rental) for rental in rentals]

    def get_rentals_by_owner(self, owner_uid: UUID) -> List[RentalResponse]:
        rentals = self.db.query(Rental).filter(Rental.owner_uid == owner_uid).order_by(Rental.id).all()
        if not rentals:
            raise NotFoundError("No rentals found for this owner")
        return [to_rental_response(rental) for rental in rentals]

    def get_rentals_by_client(self, client_uid: UUID) -> List[RentalResponse]:
        rentals = self.db.query(Rental).filter(Rental.client_uid == client_uid).order_by(Rental.id).all()
        if not rentals:
            raise NotFoundError("No rentals found for this client")
        return [to_rental_response(rental) for rental in rentals]

    def update_rental(self, rental_uid: UUID, user: User, request: RentalUpdate) -> RentalResponse:
        """
        Change a rental's dates and/or status.

        New dates are checked against the vehicle's other windows and the
        rental's own window is moved with them. Status changes follow the same
        rules as the dedicated confirm and cancel operations.
        """
        rental = self._get(rental_uid)
        self._check_party(rental, user)

        changes = request.model_dump(exclude_unset=True)
        status = changes.get("status")
        if status is not None:
            status = RentalStatus(status)
            self._check_transition(rental, user, status)

        start_date = changes.get("start_date") or rental.start_date
        end_date = changes.get("end_date") or rental.end_date
        if (start_date, end_date) != (rental.start_date, rental.end_date):
            self._reschedule(rental, start_date, end_date)

        if status is not None:
            rental.status = status.value
        self.db.commit()
        self.db.refresh(rental)

        if status is not None and status.value in RELEASES_WINDOW:
            self._release_window(rental)
        logger.info(f"Rental {rental_uid} updated")
        return to_rental_response(rental)

    def confirm_rental(self, rental_uid: UUID, user: User) -> RentalResponse:
        rental = self._get(rental_uid)
        self._check_transition(rental, user, RentalStatus.CONFIRMED)

        rental.status = RentalStatus.CONFIRMED.value
        self.db.commit()
        self.db.refresh(rental)
        logger.info(f"Rental {rental_uid} confirmed")
        return to_rental_response(rental)

    def cancel_rental(self, rental_uid: UUID, user: User) -> RentalResponse:
        rental = self._get(rental_uid)
        self._check_party(rental, user)
        self._check_transition(rental, user, RentalStatus.CANCELLED)

        rental.status = RentalStatus.CANCELLED.value
        self.db.commit()
        self.db.refresh(rental)

        self._release_window(rental)
        logger.info(f"Rental {rental_uid} cancelled")
        return to_rental_response(rental)

    def delete_rental(self, rental_uid: UUID, user: User) -> bool:
        rental = self._get(rental_uid)
        self._check_party(rental, user)
        holds_window = rental.status in HOLDS_WINDOW
        vehicle_uid, start_date, end_date = rental.vehicle_uid, rental.start_date, rental.end_date

        self.db.delete(rental)
        self.db.commit()
        if holds_window and not self.remove_unavailability(vehicle_uid, start_date, end_date):
            logger.warning(f"No unavailability window to release for rental {rental_uid}")
        logger.info(f"Rental {rental_uid} deleted")
        return True

    def _check_transition(self, rental: Rental, user: User, status: RentalStatus) -> None:
        # any party may cancel, every other status change is the owner's
        is_owner = rental.owner_uid == user.user_uid or user.has_role(UserRole.ADMIN)
        if status != RentalStatus.CANCELLED and not is_owner:
            verb = STATUS_VERBS.get(status, f"mark as {status.value}")
            raise ForbiddenError(f"Only the vehicle owner can {verb} this rental")

        allowed_from = TRANSITIONS.get(status, ())
        if rental.status not in allowed_from:
            verb = STATUS_VERBS.get(status, f"mark as {status.value}")
            raise BadRequestError(f"Cannot {verb} a rental that is {rental.status}")

    def _reschedule(self, rental: Rental, start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise BadRequestError("Start date must not be after end date")
        if rental.status not in HOLDS_WINDOW:
            raise BadRequestError(f"Cannot change the dates of a rental that is {rental.status}")

        vehicle = self.db.query(Vehicle).filter(Vehicle.vehicle_uid == rental.vehicle_uid).first()
        if not vehicle:
            raise NotFoundError("Vehicle not found")

        own = self._own_window(vehicle, rental)
        others = [window for window in self.find_unavailability(vehicle.id) if window is not own]
        if overlaps(start_date, end_date, others):
            raise BadRequestError("Vehicle is not available for the requested dates")

        if own is None:
            vehicle.unavailabilities.append(
                VehicleUnavailability(unavailable_from=start_date, unavailable_to=end_date)
            )
        else:
            own.unavailable_from = start_date
            own.unavailable_to = end_date
        rental.start_date = start_date
        rental.end_date = end_date
        rental.total_cost = vehicle.daily_price * rental_days(start_date, end_date)

    def _own_window(self, vehicle: Vehicle, rental: Rental) -> Optional[VehicleUnavailability]:
        return (
            self.db.query(VehicleUnavailability)
            .filter(
                VehicleUnavailability.vehicle_id == vehicle.id,
                VehicleUnavailability.unavailable_from == rental.start_date,
                VehicleUnavailability.unavailable_to == rental.end_date,
            )
            .first()
        )

    def _release_window(self, rental: Rental) -> None:
        if not self.remove_unavailability(rental.vehicle_uid, rental.start_date, rental.end_date):
            logger.warning(f"No unavailability window to release for rental {rental.rental_uid}")

    def _get(self, rental_uid: UUID) -> Rental:
        rental = self.db.query(Rental).filter(Rental.rental_uid == rental_uid).first()
        if not rental:
            raise NotFoundError("Rental not found")
        return rental

    def _check_party(self, rental: Rental, user: User) -> None:
        if user.has_role(UserRole.ADMIN):
            return
        if user.user_uid not in (rental.client_uid, rental.owner_uid):
            raise ForbiddenError("You are not a party to this rental")
