"""Password and JWT utility functions.

Includes password requirement checks, hashing, JWT token creation and
verification.
"""

import getpass
import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from bcrypt import checkpw, gensalt, hashpw

from institute.common import User

LOGGER = logging.getLogger(__name__)


@dataclass
class SecurityManager:
    """Manager for security configurations and validations.

    :param str secret_key: Secret key for JWT signing (generated if not provided)
    :param str algorithm: JWT signing algorithm
    :param int expire_minutes: Token expiration time in minutes
    :param int password_min_length: Minimum length for passwords
    """

    DEFAULT_JWT_ALGORITHM = "HS512"
    DEFAULT_TOKEN_EXPIRE_MINUTES = 60 * 24
    DEFAULT_PASSWORD_MIN_LENGTH = 8
    MINIMUM_JWT_SECRET_KEY_LENGTH = 32
    TOKEN_TYPE = "access_token"

    secret_key: str | None = None
    algorithm: str = DEFAULT_JWT_ALGORITHM
    expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH

    def __post_init__(self) -> None:
        """Generate secret key if not provided."""
        if (
            self.secret_key is None
            or len(self.secret_key) < self.MINIMUM_JWT_SECRET_KEY_LENGTH
        ):
            LOGGER.warning("SECRET_KEY is not set or too short, generating a random key")
            self.secret_key = os.urandom(64).hex()

    def validate_password(self, password: str) -> str | None:
        """Validate password against configured requirements (just length for now).

        :param str password: The password to validate
        :return: An error message if the password does not meet requirements,
        None otherwise
        """
        if len(password) >= self.password_min_length:
            return None

        return f"Password must be at least {self.password_min_length} characters long"

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password with a fresh bcrypt salt."""
        return hashpw(password.encode(), gensalt()).decode()

    @staticmethod
    def check_password(password: str, hashed_password: str) -> bool:
        """Check a plaintext password against a stored bcrypt hash."""
        return checkpw(password.encode(), hashed_password.encode())

    def initialize_super_admin_account(self) -> tuple[str, str, str]:
        """Prompt for the first super admin account in the CLI.

        :return: A tuple of (email, full name, password)
        """
        email = input("Please enter the super admin email: ")
        full_name = input("Please enter the super admin full name: ")
        password = None
        while not password:
            password = getpass.getpass("Please enter the super admin password: ")
            error = self.validate_password(password)
            if error:
                LOGGER.error(error)
                password = None
                continue
            password_confirm = getpass.getpass(
                "Please re-enter the super admin password: ",
            )
            if password != password_confirm:
                LOGGER.error("Passwords do not match. Please try again.")
                password = None
                continue
        return email, full_name, password

    def create_access_token(self, user: User) -> str:
        """Create a new JWT access token for the user.

        The role is not embedded: it is looked up on every request so that
        role changes and deactivation take effect immediately.

        :param User user: The User object for whom to create the token
        :return: A JWT access token as a string
        """
        now = datetime.now(UTC)
        payload = {
            "sub": user.user_id,
            "exp": now + timedelta(minutes=self.expire_minutes),
            "iat": now,
            "type": self.TOKEN_TYPE,
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> str | None:
        """Verify and decode a JWT token, returning the user id.

        :param token: The JWT token string to verify
        :return: The user id if the token is valid, None otherwise
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except jwt.ExpiredSignatureError:
            LOGGER.debug("Expired token presented")
            return None
        except jwt.InvalidTokenError:
            return None

        if payload.get("type") != self.TOKEN_TYPE:
            return None

        return payload.get("sub")
