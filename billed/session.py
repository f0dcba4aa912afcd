from __future__ import annotations

from typing import Protocol


class SessionReader(Protocol):
    def get_current_user_email(self) -> str: ...


class StaticSession:
    """Session of a user whose identity is known up front (settings or prompt)."""

    def __init__(self, email: str) -> None:
        self.email = email

    def get_current_user_email(self) -> str:
        return self.email
