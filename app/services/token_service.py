"""Issue and verify signed bearer tokens.

Tokens are HS256 JWTs signed with ``settings.jwt_secret_key``. The issuer and
audience are fixed per deployment and checked on every verification. Expiry is
the only way a token stops being valid.
"""
import uuid
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.models.user import User
from app.schemas.auth import TokenBundle, TokenClaims
from app.utils.exceptions import AuthenticationError

ALGORITHM = "HS256"


def issue_token(user: User, now: datetime | None = None) -> TokenBundle:
    issued_at = now or datetime.now(timezone.utc)
    expiration = issued_at + timedelta(minutes=settings.jwt_expire_minutes)

    claims = {
        "sub": str(user.id),
        "unique_name": user.username,
        "role": user.role.value,
        "jti": str(uuid.uuid4()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": issued_at,
        "exp": expiration,
    }
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=ALGORITHM)

    return TokenBundle(
        token=token,
        expiration=expiration,
        username=user.username,
        role=user.role,
    )


def verify_token(token: str) -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired.")
    except JWTError:
        raise AuthenticationError("Invalid token.")

    try:
        return TokenClaims(
            user_id=int(payload["sub"]),
            username=payload["unique_name"],
            role=payload["role"],
            token_id=payload["jti"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, ValueError):
        raise AuthenticationError("Invalid token.")
