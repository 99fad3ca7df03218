import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from vehicle_rental.errors import BadRequestError, NotFoundError, UnauthorizedError
from vehicle_rental.models import User, UserRole
from vehicle_rental.schemas import (
    EditUserRequest,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserProfile,
)
from vehicle_rental.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


def to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.user_uid,
        username=user.username,
        email=user.email,
        roles=[UserRole(role) for role in user.roles],
    )


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def signup(self, request: SignupRequest) -> SignupResponse:
        user = self._create(request)
        logger.info(f"User {user.user_uid} signed up")
        return SignupResponse(token=create_access_token(user), user=to_profile(user))

    def login(self, request: LoginRequest) -> LoginResponse:
        user = self._find_by_email(request.email)
        if not user or not verify_password(request.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        return LoginResponse(token=create_access_token(user))

    def create_user(self, request: SignupRequest) -> UserProfile:
        user = self._create(request)
        logger.info(f"User {user.user_uid} created by an admin")
        return to_profile(user)

    def get_profile(self, user_uid: UUID) -> UserProfile:
        return to_profile(self._get(user_uid))

    def get_users(self) -> List[UserProfile]:
        users = self.db.query(User).order_by(User.id).all()
        return [to_profile(user) for user in users]

    def edit_user(self, user_uid: UUID, request: EditUserRequest) -> UserProfile:
        if request.username is None and request.email is None:
            raise BadRequestError("At least one field (username or email) is required")

        user = self._get(user_uid)
        if request.username is not None and request.username != user.username:
            if self._find_by_username(request.username):
                raise BadRequestError("Username is already taken")
            user.username = request.username
        if request.email is not None:
            email = request.email.lower()
            if email != user.email:
                if self._find_by_email(email):
                    raise BadRequestError("User with this email already exists")
                user.email = email

        self.db.commit()
        self.db.refresh(user)
        return to_profile(user)

    def delete_user(self, user_uid: UUID) -> bool:
        user = self._get(user_uid)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"User {user_uid} deleted")
        return True

    def add_role(self, user_uid: UUID, role: UserRole) -> SignupResponse:
        """Grant ``role`` and return a token that already carries it."""
        user = self._get(user_uid)
        if role.value not in user.roles:
            # reassign so the JSON column is flagged dirty
            user.roles = [*user.roles, role.value]
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"User {user_uid} granted role {role.value}")
        return SignupResponse(token=create_access_token(user), user=to_profile(user))

    def _create(self, request: SignupRequest) -> User:
        email = request.email.lower()
        if self._find_by_email(email):
            raise BadRequestError("User with this email already exists")
        if self._find_by_username(request.username):
            raise BadRequestError("Username is already taken")

        user = User(
            username=request.username.strip(),
            email=email,
            password_hash=get_password_hash(request.password),
            roles=[UserRole.TENANT.value],
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def _get(self, user_uid: UUID) -> User:
        user = self.db.query(User).filter(User.user_uid == user_uid).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def _find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def _find_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username.strip()).first()
