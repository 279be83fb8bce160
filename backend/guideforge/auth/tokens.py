"""JWT access tokens carrying the user id as the subject."""

from datetime import timedelta

import jwt
import structlog

from guideforge.config import settings
from guideforge.models.base import utc_now
from guideforge.services.users.exceptions import InvalidCredentials

logger = structlog.get_logger(__name__)


def create_access_token(user_id: int) -> str:
    """Create a signed access token for the user, valid for jwt_expiration_hours."""
    now = utc_now()
    return jwt.encode(
        {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(hours=settings.jwt_expiration_hours),
        },
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> int:
    """Validate a token and return the user id it was issued for.

    Raises:
        InvalidCredentials: If the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return int(payload["sub"])
    except jwt.ExpiredSignatureError as e:
        raise InvalidCredentials("Token has expired") from e
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        logger.debug("Rejected access token", error=str(e))
        raise InvalidCredentials("Invalid token") from e
