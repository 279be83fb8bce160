"""FastAPI dependencies for authentication and service injection."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from guideforge.auth.tokens import decode_access_token
from guideforge.db import get_session
from guideforge.services.manuals.manual_service import ManualService
from guideforge.services.storage.storage_service import BlobStore
from guideforge.services.users.auth_service import AuthService
from guideforge.services.users.exceptions import InvalidCredentials
from guideforge.services.users.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_storage_service(request: Request) -> BlobStore:
    """Get the blob store created at application startup."""
    storage: BlobStore = request.app.state.storage
    return storage


SessionDep = Annotated[AsyncSession, Depends(get_session)]
StorageDep = Annotated[BlobStore, Depends(get_storage_service)]
BearerDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


async def get_current_user_id(credentials: BearerDep) -> int:
    """Resolve the authenticated principal from the Authorization header."""
    if credentials is None:
        raise InvalidCredentials("Not authenticated")
    return decode_access_token(credentials.credentials)


async def get_optional_user_id(credentials: BearerDep) -> int | None:
    """Like get_current_user_id, but anonymous requests resolve to None."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


async def get_manual_service(session: SessionDep, storage: StorageDep) -> ManualService:
    """Get a ManualService instance with the current session."""
    return ManualService(session, storage)


async def get_user_service(session: SessionDep, storage: StorageDep) -> UserService:
    """Get a UserService instance with the current session."""
    return UserService(session, storage)


async def get_auth_service(session: SessionDep) -> AuthService:
    """Get an AuthService instance with the current session."""
    return AuthService(session)


# Type aliases for cleaner endpoint signatures
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
OptionalUserId = Annotated[int | None, Depends(get_optional_user_id)]
ManualServiceDep = Annotated[ManualService, Depends(get_manual_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
