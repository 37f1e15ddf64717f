"""
Account registration and login.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from digicard.core.logging import get_logger
from digicard.core.security import hash_password, verify_password
from digicard.domain.usernames import username_error
from digicard.repositories.sql_repository import SQLRepository
from digicard.services.session_service import delete_session, issue_session

logger = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_MIN_LENGTH = 6


class AuthError(Exception):
    """Base class for authentication-related exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RegistrationError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


@dataclass
class AuthResult:
    user_id: str
    username: str
    session_token: str


@dataclass
class AuthService:
    """Handles registration, login and logout."""

    def __post_init__(self):
        self.repository = SQLRepository()

    def _validate_registration(self, email: str, password: str, username: str) -> None:
        message = username_error(username)
        if message:
            raise RegistrationError(message)
        if not EMAIL_RE.match(email):
            raise RegistrationError("Enter a valid email address.")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise RegistrationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
        if self.repository.username_exists(username):
            raise RegistrationError("This username is already taken.")
        if self.repository.get_user_by_email(email):
            raise RegistrationError("This email is already registered.")

    def register(self, email: str, password: str, username: str) -> AuthResult:
        email_norm = (email or "").strip().lower()
        username = (username or "").strip()
        password = password or ""
        self._validate_registration(email_norm, password, username)
        try:
            user, profile = self.repository.create_user_with_profile(email_norm, hash_password(password), username)
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            raise RegistrationError("This username or email is already taken.") from exc
        except SQLAlchemyError as exc:
            logger.error("Registration failed", username=username, error=str(exc))
            raise RegistrationError("Something went wrong. Please try again.") from exc
        logger.info("User registered", user_id=user.id, username=profile.username)
        return AuthResult(user_id=user.id, username=profile.username, session_token=issue_session(user.id))

    def login(self, email: str, password: str) -> AuthResult:
        user = self.repository.get_user_by_email(email)
        if not user or not verify_password(password or "", user.password_hash):
            raise InvalidCredentialsError("Invalid email or password.")
        profile = self.repository.get_profile_by_user(user.id)
        logger.info("User logged in", user_id=user.id)
        return AuthResult(
            user_id=user.id,
            username=profile.username if profile else "",
            session_token=issue_session(user.id),
        )

    def logout(self, token: str | None) -> None:
        if token:
            delete_session(token)
