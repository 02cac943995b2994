"""Persistence for User rows: keyed lookup by id or email, create, save, delete."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import User
from app.services.errors import AccountExistsError

logger = logging.getLogger(__name__)


class UserStore:
    """
    Thin wrapper around a SQLAlchemy session for the users table.

    Writes commit immediately. A unique-index violation on email is rolled back
    and surfaced as AccountExistsError; other database errors propagate as-is.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> User | None:
        return self.session.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def list_all(self) -> list[User]:
        return self.session.query(User).order_by(User.created_at).all()

    def add(self, user: User) -> User:
        self.session.add(user)
        return self._commit(user)

    def save(self, user: User) -> User:
        return self._commit(user)

    def delete(self, user_id: str) -> int:
        """Delete by id; returns the number of rows removed (0 when absent)."""
        deleted = (
            self.session.query(User)
            .filter(User.id == user_id)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _commit(self, user: User) -> User:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("Unique constraint rejected write for email=%s", user.email)
            raise AccountExistsError() from e
        self.session.refresh(user)
        return user
