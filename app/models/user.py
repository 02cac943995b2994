"""ORM model for user accounts (auth, profile and roles)."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String, func

from app.models.base import Base


class UserRole(str, enum.Enum):
    """Account role; stored by value ("User", "Admin")."""

    USER = "User"
    ADMIN = "Admin"


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for JWT authentication and profile management.

    password holds the bcrypt hash only; the plaintext is never stored.
    email is unique (enforced by ix_users_email).
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_user_id)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=False, default="")
    password = Column(String(255), nullable=False)
    role = Column(
        Enum(
            UserRole,
            name="user_role",
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.USER,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
