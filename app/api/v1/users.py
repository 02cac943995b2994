"""User directory endpoints: public listing/lookup, self-service update and delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.v1.auth import get_current_user, get_user_store
from app.schemas.auth import TokenClaims
from app.schemas.user import UpdateUserRequest, UserResponse
from app.services.errors import (
    AccountExistsError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from app.services.user_store import UserStore
from app.services.users import UserDirectoryService

router = APIRouter()


def get_user_directory(
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UserDirectoryService:
    return UserDirectoryService(store)


@router.get("", response_model=list[UserResponse])
async def list_users(
    users: Annotated[UserDirectoryService, Depends(get_user_directory)],
) -> list[UserResponse]:
    return [UserResponse.model_validate(u) for u in await users.find_all()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    users: Annotated[UserDirectoryService, Depends(get_user_directory)],
) -> UserResponse:
    user = await users.find_one(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return UserResponse.model_validate(user)


@router.put("", response_model=UserResponse)
async def update_current_user(
    body: UpdateUserRequest,
    claims: Annotated[TokenClaims, Depends(get_current_user)],
    users: Annotated[UserDirectoryService, Depends(get_user_directory)],
) -> UserResponse:
    """
    Update the authenticated user's profile. Only sent fields change;
    a new password must come with current_password.
    """
    try:
        user = await users.update(claims.sub, body)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except AccountExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    return UserResponse.model_validate(user)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_user(
    claims: Annotated[TokenClaims, Depends(get_current_user)],
    users: Annotated[UserDirectoryService, Depends(get_user_directory)],
) -> Response:
    await users.remove(claims.sub)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
