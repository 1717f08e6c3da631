from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.auth import LoginRequest, RegisterRequest, TokenClaims
from app.services.auth_service import authenticate_user, register_user
from app.utils.exceptions import AuthenticationError
from app.utils.response import success_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register")
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    bundle = await register_user(db, request)
    return success_response(data=bundle.model_dump(mode="json"))


@router.post("/login")
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    bundle = await authenticate_user(db, request)
    if bundle is None:
        raise AuthenticationError("Invalid username or password.")
    return success_response(data=bundle.model_dump(mode="json"))


@router.get("/me")
async def me(claims: TokenClaims = Depends(get_current_user)):
    return success_response(data={
        "user_id": claims.user_id,
        "username": claims.username,
        "role": claims.role.value,
        "expiration": claims.expires_at.isoformat(),
    })
