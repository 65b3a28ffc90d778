"""
User directory: resolves accounts and their role tag.

Only role-aware exclusions need it (admins are not readers), so the protocol
is read-only.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Set, Union

from ..models.book import User, is_admin


class UserDirectory(Protocol):
    """Protocol for user lookups."""

    def find_by_id(self, user_id: int) -> Optional[User]:
        ...

    def all_users(self) -> List[User]:
        ...


class InMemoryUserDirectory:
    def __init__(self, users: Optional[List[Union[dict, User]]] = None):
        self._users: Dict[int, User] = {}
        for u in users or []:
            typed = User.model_validate(u) if isinstance(u, dict) else u
            self._users[typed.id] = typed

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def all_users(self) -> List[User]:
        return [self._users[uid] for uid in sorted(self._users)]


class JsonUserDirectory(InMemoryUserDirectory):
    """User directory backed by a JSON file (a list of users or {"users": [...]})."""

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        users: List[dict] = []
        if self._path.exists():
            with open(self._path) as f:
                data = json.load(f)
            users = data.get("users", []) if isinstance(data, dict) else data
        super().__init__(users)


def admin_ids(directory: Optional[UserDirectory]) -> Set[int]:
    """Ids of admin accounts; empty when no directory is wired."""
    if directory is None:
        return set()
    return {u.id for u in directory.all_users() if is_admin(u)}
