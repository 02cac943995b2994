"""User directory: list, find, update and delete user records."""

import asyncio
import logging

from app.core.security import hash_password, verify_password
from app.models import User
from app.schemas.user import UpdateUserRequest
from app.services.errors import (
    AccountExistsError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone")


class UserDirectoryService:
    """CRUD over user records; talks only to the user store."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    async def find_all(self) -> list[User]:
        return await asyncio.to_thread(self.store.list_all)

    async def find_one(self, user_id: str) -> User | None:
        return await asyncio.to_thread(self.store.get, user_id)

    async def update(self, user_id: str, patch: UpdateUserRequest) -> User:
        """
        Apply a partial update to an existing user.

        - unknown id: UserNotFoundError
        - email taken by another user: AccountExistsError
        - new password without a matching current_password: InvalidCredentialsError
        """
        user = await asyncio.to_thread(self.store.get, user_id)
        if user is None:
            raise UserNotFoundError()

        changes = patch.model_dump(exclude_unset=True)
        changes.pop("current_password", None)
        if not changes:
            return user

        # Validate everything before touching the row.
        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            other = await asyncio.to_thread(self.store.get_by_email, new_email)
            if other is not None and other.id != user.id:
                raise AccountExistsError()
        new_password = changes.get("password")
        if new_password is not None:
            current = patch.current_password
            if not current or not await asyncio.to_thread(verify_password, current, user.password):
                raise InvalidCredentialsError("Current password is incorrect.")

        for field in PROFILE_FIELDS:
            if field in changes:
                setattr(user, field, changes[field])
        if new_email is not None:
            user.email = new_email
        if new_password is not None:
            user.password = await asyncio.to_thread(hash_password, new_password)

        await asyncio.to_thread(self.store.save, user)
        logger.info("User updated: id=%s fields=%s", user.id, sorted(changes))
        return user

    async def remove(self, user_id: str) -> None:
        """Delete by id; an absent id is a no-op."""
        deleted = await asyncio.to_thread(self.store.delete, user_id)
        logger.info("User remove: id=%s deleted=%s", user_id, deleted)
