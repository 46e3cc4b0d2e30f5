"""
User service: registration, login and profile updates for the User
aggregate.

Name and email uniqueness is enforced by unique constraints; the
existence checks below only exist to answer with a readable message
before hitting the database constraint.  A constraint violation on flush
is reported the same way, so concurrent registrations cannot slip past.
"""
import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    UnprocessableError,
    check_update_fields,
)
from blog_api.models import User
from blog_api.schemas import UserCreate, UserLogin
from blog_api.security import create_token, hash_password, verify_password

logger = logging.getLogger(__name__)

ALLOWED_UPDATE_FIELDS: frozenset[str] = frozenset({"name", "email", "password", "bio", "image"})

_TAKEN_MESSAGE = "Email or Name are taken"


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def user_to_dict(user: User) -> dict:
    """Serialise a User ORM instance to a public profile dict (no password)."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "bio": user.bio,
        "image": user.image,
    }


def build_user_response(user: User) -> dict:
    """Wrap the profile of *user* together with a freshly signed token."""
    data = user_to_dict(user)
    data["token"] = create_token(user)
    return {"user": data}


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_users(db: AsyncSession) -> list[dict]:
    """Return every user profile ordered by id."""
    result = await db.execute(select(User).order_by(User.id))
    return [user_to_dict(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_name(db: AsyncSession, name: str) -> User | None:
    result = await db.execute(select(User).where(User.name == name))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """
    Register a new user with a bcrypt-hashed password.

    Raises ConflictError when the name or the email is already taken.
    """
    existing = await db.execute(
        select(User.id).where(or_(User.email == data.email, User.name == data.name))
    )
    if existing.first() is not None:
        raise ConflictError(_TAKEN_MESSAGE)

    user = User(
        name=data.name,
        email=data.email,
        password=hash_password(data.password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(_TAKEN_MESSAGE)

    logger.info("Registered user id=%s name=%s", user.id, user.name)
    return user


async def login_user(db: AsyncSession, data: UserLogin) -> User:
    """
    Return the user matching the given credentials.

    An unknown email answers 422 while a wrong password answers 401; the
    two cases are kept apart on purpose.
    """
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if user is None:
        logger.info("Login failed: unknown email")
        raise UnprocessableError("Credentials are not valid")

    if not verify_password(data.password, user.password):
        logger.info("Login failed: wrong password for user id=%s", user.id)
        raise UnauthorizedError("Password not valid")

    return user


async def update_user(db: AsyncSession, user_id: int, fields: dict) -> User:
    """
    Apply a partial update to the user identified by *user_id*.

    The whole payload is rejected when it is empty or names a field outside
    ``ALLOWED_UPDATE_FIELDS``.  A new password is hashed before storage.
    """
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User with id:{user_id} not found")

    check_update_fields(fields, ALLOWED_UPDATE_FIELDS, "user")
    for field, value in fields.items():
        if value is None:
            raise UnprocessableError(f"{field} must not be null")

    for field, value in fields.items():
        if field == "password":
            value = hash_password(value)
        setattr(user, field, value)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(_TAKEN_MESSAGE)

    logger.info("Updated user id=%s fields=%s", user.id, sorted(fields))
    return user
