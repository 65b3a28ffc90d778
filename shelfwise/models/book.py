"""
Catalog and history records read by the recommender.

Book, BorrowRecord and User are plain pydantic models built from provider
dicts via model_validate(d) or the ensure_* helpers.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator


class Book(BaseModel):
    """A catalog book. Only the fields the recommender and response need."""

    model_config = ConfigDict(extra="allow")

    id: int
    title: str = ""
    author: str = ""
    category: Optional[str] = None
    publisher: Optional[str] = None
    description: Optional[str] = None
    available_count: int = 0

    @property
    def is_available(self) -> bool:
        return self.available_count > 0


class BorrowRecord(BaseModel):
    """One borrow interaction between a user and a book."""

    model_config = ConfigDict(extra="allow")

    user_id: int
    book_id: int
    borrow_time: datetime

    @field_validator("borrow_time")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(BaseModel):
    """A library account. Capabilities derive from the role tag only."""

    id: int
    username: str = ""
    role: Role = Role.USER


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role == Role.ADMIN


def ensure_books(items: List[Union[Dict[str, Any], "Book"]]) -> List["Book"]:
    """Convert list of dicts or Books to list of Book models."""
    return [Book.model_validate(b) if isinstance(b, dict) else b for b in items]


def ensure_records(items: List[Union[Dict[str, Any], "BorrowRecord"]]) -> List["BorrowRecord"]:
    """Convert list of dicts or BorrowRecords to list of BorrowRecord models."""
    return [BorrowRecord.model_validate(r) if isinstance(r, dict) else r for r in items]
