from __future__ import annotations

from collections.abc import Iterable
from threading import Lock
from typing import Any

from webapp.models.schemas import User


SEED_USERS: tuple[User, ...] = (
    User(id=1, name="Alice Johnson", email="alice@example.com", role="admin"),
    User(id=2, name="Bob Smith", email="bob@example.com", role="user"),
    User(id=3, name="Charlie Brown", email="charlie@example.com", role="user"),
    User(id=4, name="Diana Prince", email="diana@example.com", role="moderator"),
)


class UserStore:
    """Thread-safe, process-local user list (resets on restart).

    Ids come from a monotonic counter that starts one past the highest seeded
    id, so they never depend on what the list holds at call time.
    """

    def __init__(self, seed: Iterable[User] = SEED_USERS) -> None:
        self._lock = Lock()
        self._users: list[User] = [user.model_copy() for user in seed]
        self._next_id = max((user.id for user in self._users), default=0) + 1

    def list_users(self) -> list[User]:
        with self._lock:
            return list(self._users)

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def get(self, user_id: int) -> User | None:
        with self._lock:
            for user in self._users:
                if user.id == user_id:
                    return user
        return None

    def create(self, *, name: Any, email: Any, role: Any = "user") -> User:
        with self._lock:
            user = User(id=self._next_id, name=name, email=email, role=role)
            self._next_id += 1
            self._users.append(user)
            return user
