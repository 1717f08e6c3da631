import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import UserRole
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest, TokenBundle
from app.services.token_service import issue_token
from app.utils.exceptions import ConflictError

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "Username already exists."


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


async def _username_taken(db: AsyncSession, username: str) -> bool:
    result = await db.execute(select(User.id).where(User.username == username))
    return result.first() is not None


async def register_user(db: AsyncSession, payload: RegisterRequest) -> TokenBundle:
    if await _username_taken(db, payload.username):
        raise ConflictError(USERNAME_TAKEN)

    user = User(
        username=payload.username,
        password_hash=hash_password(payload.password),
        full_name=payload.full_name,
        role=UserRole.USER,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent registration won the unique constraint
        await db.rollback()
        logger.info("Registration race lost for username '%s'", payload.username)
        raise ConflictError(USERNAME_TAKEN)
    await db.refresh(user)

    logger.info("Registered user '%s' (id=%s)", user.username, user.id)
    return issue_token(user)


async def authenticate_user(db: AsyncSession, payload: LoginRequest) -> TokenBundle | None:
    result = await db.execute(select(User).where(User.username == payload.username))
    user = result.scalars().first()

    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for username '%s'", payload.username)
        return None

    return issue_token(user)
