from __future__ import annotations

from app.models.schemas import CreateUser, User

MIN_USERNAME_LENGTH = 3

# The message asks for 4 characters while the check accepts 3; both are kept
# as they are until it is decided which one is wrong.
_TOO_SHORT_MESSAGE = "Username is too short. Please use 4 characters or more."


class UsernameValidationError(ValueError):
    kind = "validation"


def validate_username(name: str) -> None:
    # Measured in UTF-8 bytes, not characters.
    if len(name.encode("utf-8")) < MIN_USERNAME_LENGTH:
        raise UsernameValidationError(_TOO_SHORT_MESSAGE)


def create_user(payload: CreateUser) -> User:
    validate_username(payload.name)
    return User(name=payload.name)
