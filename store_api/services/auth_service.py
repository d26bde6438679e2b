import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from sqlalchemy.exc import IntegrityError

from store_api.errors import Conflict, Forbidden, InvalidCredentials, InvalidToken
from store_api.models.database import Role, User, transaction
from store_api.models.repositories import UserRepository

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
BCRYPT_ROUNDS = 12


@dataclass(frozen=True)
class Principal:
    """Identity decoded from a verified token."""

    id: int
    role: Role
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class AuthService:
    """Handles registration, credential checks and token issuing."""

    def __init__(self, users: UserRepository, jwt_secret: str, expiry_minutes: int):
        self.users = users
        self.jwt_secret = jwt_secret
        self.expiry_minutes = expiry_minutes

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Verify a password against its hash."""
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

    def generate_token(self, user: User) -> str:
        """Generate a JWT token for a user."""
        now = datetime.now(timezone.utc)
        payload = {
            "id": user.id,
            "role": user.role.value,
            "email": user.email,
            "iat": now,
            "exp": now + timedelta(minutes=self.expiry_minutes),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=JWT_ALGORITHM)

    def decode_token(self, token: str) -> Principal:
        """Verify signature and expiry, then map the claims onto a Principal."""
        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[JWT_ALGORITHM])
            return Principal(
                id=int(payload["id"]),
                role=Role(payload["role"]),
                email=payload.get("email", ""),
            )
        except jwt.ExpiredSignatureError:
            logger.debug("JWT expired")
            raise InvalidToken()
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
            logger.debug("JWT invalid: %s", e)
            raise InvalidToken()

    def register_user(self, name: str, email: str, password: str, phone: str = None) -> User:
        """Register a new customer account."""
        if self.users.find_by_email(email):
            raise Conflict("User with this email already exists")

        user = User(
            name=name,
            email=email,
            password_hash=self.hash_password(password),
            role=Role.CUSTOMER,
            phone=phone,
        )
        try:
            with transaction(self.users.session):
                self.users.add(user)
        except IntegrityError:
            raise Conflict("User with this email already exists")

        logger.info("User registered: id=%s", user.id)
        return user

    def authenticate(self, email: str, password: str) -> tuple:
        """Check credentials and return ``(token, user)``."""
        user = self.users.find_by_email(email)
        if not user or not self.verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()

        if user.is_blocked and not user.is_admin:
            logger.warning("Blocked account tried to log in: id=%s", user.id)
            raise Forbidden("Your account has been blocked by the administrator.")

        return self.generate_token(user), user

    def seed_admin(self, name: str, email: str, password: str) -> User:
        """Create the admin account, or promote and reset an existing one."""
        user = self.users.find_by_email(email)
        with transaction(self.users.session):
            if user is None:
                user = self.users.add(User(
                    name=name,
                    email=email,
                    password_hash=self.hash_password(password),
                    role=Role.ADMIN,
                ))
                logger.info("Admin user created: id=%s", user.id)
            else:
                user.role = Role.ADMIN
                user.password_hash = self.hash_password(password)
                user.is_blocked = False
                logger.info("Existing user promoted to admin: id=%s", user.id)
        return user
