"""Users API package.

- auth_routes: Registration and login
- user_routes: Profile, password, profile picture and account deletion
"""

from fastapi import APIRouter

from guideforge.api.v1.users.auth_routes import router as auth_router
from guideforge.api.v1.users.user_routes import router as user_router

router = APIRouter()

router.include_router(auth_router)
router.include_router(user_router)

__all__ = ["router"]
