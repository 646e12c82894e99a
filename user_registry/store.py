from __future__ import annotations

import threading
from typing import List


class UserRegistryError(Exception):
    """Base class for errors raised by the user store."""

    message = "User registry error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class MissingUserIdError(UserRegistryError):
    message = "Missing user Id"


class UserAlreadyExistsError(UserRegistryError):
    message = "User already exists"


class UserStore:
    """Ordered, duplicate-free collection of user ids held in memory.

    The membership check and the append in :meth:`register` happen under one
    lock, so concurrent registrations of the same id cannot both succeed.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._users: List[str] = []

    def register(self, user_id: str) -> None:
        if not user_id:
            raise MissingUserIdError()
        with self._lock:
            if user_id in self._users:
                raise UserAlreadyExistsError()
            self._users.append(user_id)

    def list_users(self) -> List[str]:
        with self._lock:
            return list(self._users)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._users

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
