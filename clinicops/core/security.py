from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import JWTError, jwt

from clinicops.core.config import settings


@dataclass(frozen=True)
class TokenClaims:
    user_id: UUID
    clinic_id: UUID


def create_access_token(
    subject: UUID | str, clinic_id: UUID | str, expires_minutes: int = 15
) -> str:
    """Mint an access token. The identity service owns issuing; this is used by tooling and tests."""
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes)
    to_encode = {
        "sub": str(subject),
        "clinic_id": str(clinic_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenClaims | None:
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.algorithm]
        )
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    sub = payload.get("sub")
    clinic_id = payload.get("clinic_id")
    if not sub or not clinic_id:
        return None
    try:
        return TokenClaims(user_id=UUID(str(sub)), clinic_id=UUID(str(clinic_id)))
    except ValueError:
        return None
