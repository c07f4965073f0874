from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError

from app.storehub.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenData(BaseModel):
    sub: str
    sid: str
    tenant_id: str
    role: str
    exp: int
    iat: int | None = None


class TokenDecodeError(Exception):
    pass


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"iat": int(now.timestamp()), "exp": int(expire.timestamp())})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_session_token(user, session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token(
        {
            "sub": str(user.id),
            "sid": session_id,
            "tenant_id": str(user.tenant_id),
            "role": user.role.code,
        },
        expires_delta=expires_delta,
    )


def decode_token(token: str) -> TokenData:
    """Verify signature and structure only.

    Expiry is left to the caller so an expired but authentic token can be told
    apart from a forged one.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": False},
        )
        return TokenData(**payload)
    except (JWTError, ValidationError, TypeError) as exc:
        raise TokenDecodeError(str(exc)) from exc


def is_token_expired(token_data: TokenData, now: datetime | None = None) -> bool:
    current = now or datetime.now(timezone.utc)
    return current.timestamp() >= token_data.exp


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    credentials = credentials.strip()
    return credentials or None
