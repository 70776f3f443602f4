from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from sortex.core.config import get_settings


@dataclass(slots=True, frozen=True)
class Identity:
    """A caller verified by the external identity provider."""

    user_id: str
    email: str = ""
    name: str | None = None


def issue_identity_token(
    subject: str,
    email: str = "",
    name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Mint a token the way the identity provider does. Used by local tooling and tests."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.identity_token_expire_minutes))
    payload: dict[str, Any] = {"sub": subject, "exp": expire, "email": email}
    if name:
        payload["name"] = name
    if settings.identity_issuer:
        payload["iss"] = settings.identity_issuer
    if settings.identity_audience:
        payload["aud"] = settings.identity_audience
    return jwt.encode(payload, settings.identity_jwt_secret, algorithm=settings.identity_jwt_algorithm)


def decode_identity_token(token: str) -> Identity:
    settings = get_settings()
    options = {"verify_aud": settings.identity_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.identity_jwt_secret,
            algorithms=[settings.identity_jwt_algorithm],
            audience=settings.identity_audience,
            issuer=settings.identity_issuer,
            options=options,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc

    subject = claims.get("sub")
    if not subject:
        raise ValueError("Token has no subject")
    name = claims.get("name") or claims.get("username") or None
    return Identity(user_id=str(subject), email=str(claims.get("email") or ""), name=name)
