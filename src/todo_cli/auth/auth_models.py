# src/todo_cli/auth/auth_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class User:
    id: str
    username: str
    email: str
    password_hash: str
    created_at: float
    last_login: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "password_hash": self.password_hash,
            "created_at": self.created_at,
            "last_login": self.last_login,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        last_login = data.get("last_login")
        return cls(
            id=str(data["id"]),
            username=str(data["username"]),
            email=str(data.get("email") or ""),
            password_hash=str(data["password_hash"]),
            created_at=float(data.get("created_at") or 0.0),
            last_login=float(last_login) if last_login is not None else None,
        )


@dataclass(slots=True, frozen=True)
class Session:
    """The single active login: owner id plus an absolute expiry."""

    user_id: str
    created_at: float
    expires_at: float

    def is_valid(self, now_ts: float) -> bool:
        return self.expires_at > now_ts

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        return cls(
            user_id=str(data["user_id"]),
            created_at=float(data["created_at"]),
            expires_at=float(data["expires_at"]),
        )
