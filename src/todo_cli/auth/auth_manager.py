# src/todo_cli/auth/auth_manager.py

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import replace

import bcrypt

from ..core.errors import AuthenticationError, IntegrityError, ValidationError
from ..core.ports import Clock, Storage
from .auth_models import Session, User

logger = logging.getLogger(__name__)

SESSION_TTL_SECONDS = 7 * 24 * 3600
MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid username or password"


class AuthManager:
    """
    Owns user records and the single active session.

    Both are loaded once from storage; every mutation writes the whole
    collection back immediately. Session expiry is checked against the clock
    on every call, there is no background cleanup.
    """

    def __init__(
        self,
        storage: Storage,
        *,
        clock: Clock = time.time,
        session_ttl_seconds: float = SESSION_TTL_SECONDS,
        bcrypt_rounds: int = 12,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._session_ttl = float(session_ttl_seconds)
        self._bcrypt_rounds = int(bcrypt_rounds)

        self._users: dict[str, User] = storage.load_users()
        self._session: Session | None = storage.load_session()
        logger.debug(
            "AuthManager ready users=%d session=%s",
            len(self._users),
            "yes" if self._session else "no",
        )

    # ---- password hashing ----

    def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify_password(password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed hash on disk: treat as a mismatch.
            logger.warning("Stored password hash is malformed.")
            return False

    def _save_users(self, users: dict[str, User]) -> None:
        self._storage.save_users(users)
        self._users = users

    # ---- public API ----

    def register(self, username: str, email: str, password: str) -> User:
        # Check order is part of the contract (deterministic error messages).
        if any(u.username == username for u in self._users.values()):
            raise ValidationError("Username already exists")
        if any(u.email == email for u in self._users.values()):
            raise ValidationError("Email already exists")
        if not username or not username.strip():
            raise ValidationError("Username cannot be empty")
        if not email or not email.strip() or "@" not in email:
            raise ValidationError("Invalid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        user = User(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=self._hash_password(password),
            created_at=self._clock(),
            last_login=None,
        )

        self._save_users({**self._users, user.id: user})
        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return replace(user)

    def login(self, username: str, password: str) -> User:
        user = next((u for u in self._users.values() if u.username == username), None)
        if user is None or not self._verify_password(password, user.password_hash):
            logger.info("Login failed username=%s", username)
            raise AuthenticationError(INVALID_CREDENTIALS)

        now = self._clock()
        updated = replace(user, last_login=now)
        self._save_users({**self._users, updated.id: updated})

        session = Session(user_id=updated.id, created_at=now, expires_at=now + self._session_ttl)
        self._storage.save_session(session)
        self._session = session

        logger.info("Login ok user_id=%s expires_at=%s", updated.id, session.expires_at)
        return replace(updated)

    def logout(self) -> None:
        self._storage.clear_session()
        self._session = None
        logger.info("Logged out")

    def is_authenticated(self) -> bool:
        return self._session is not None and self._session.is_valid(self._clock())

    @property
    def session(self) -> Session | None:
        return self._session

    def current_user(self) -> User:
        session = self._session
        if session is None:
            raise AuthenticationError("Not authenticated")
        if not session.is_valid(self._clock()):
            raise AuthenticationError("Session expired")

        user = self._users.get(session.user_id)
        if user is None:
            logger.error("Session references unknown user_id=%s", session.user_id)
            raise IntegrityError("User not found for the current session")
        return replace(user)

    def get_user(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return replace(user) if user is not None else None
