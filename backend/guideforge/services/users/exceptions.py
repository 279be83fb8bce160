"""User and authentication domain exceptions."""

from guideforge.services.exceptions import ConflictError, InvalidArgumentError, NotFoundError, UnauthorizedError


class UserNotFound(NotFoundError):
    """User not found."""

    pass


class EmailAlreadyRegistered(ConflictError):
    """Email is already used by another account."""

    pass


class InvalidCredentials(UnauthorizedError):
    """Email/password combination or access token is not valid."""

    pass


class IncorrectPassword(InvalidArgumentError):
    """Current password supplied for a password change is wrong."""

    pass
