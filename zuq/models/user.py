"""User document model for authentication."""

from datetime import datetime
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field

from zuq.models.base import utcnow


class User(Document):
    """User document model for authentication.

    Fields:
    - id: ObjectId primary key (from Document)
    - email: unique email
    - username: unique login name
    - hashed_password: Argon2 password hash
    - is_active: account active status
    - is_superuser: admin status
    """

    email: Indexed(str, unique=True)
    username: Indexed(str, unique=True)
    hashed_password: str
    is_active: bool = True
    is_superuser: bool = False
    full_name: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_login: Optional[datetime] = None

    class Settings:
        name = "users"
        use_state_management = True

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, is_active={self.is_active})>"
