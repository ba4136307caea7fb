"""JWT verification for tokens issued by the upstream identity service.

Tokens are HS256-signed with the shared JWT_SECRET and carry:
  - sub:          user id of the caller (may be absent for partner-only apps)
  - partner_ids:  list of partner ids the caller acts for
  - roles:        comma-separated string or list, e.g. "trusted,sales_admin"

``create_access_token`` exists for local tooling and tests; production
tokens are minted upstream.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.ex_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(
    user_id: str | None,
    partner_ids: Iterable[str] = (),
    roles: Iterable[str] = (),
    expires_in: timedelta | None = None,
) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "partner_ids": list(partner_ids),
        "roles": ",".join(roles),
        "type": "access",
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else _ACCESS_EXPIRE),
    }
    if user_id is not None:
        payload["sub"] = user_id
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: bad signature, expired, or not an access token.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type", "access") != "access":
        raise InvalidCredentialsError()
    return payload


def parse_roles(raw: Any) -> frozenset[str]:
    """Accept "a,b", ["a", "b"] or None."""
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        parts: Iterable[str] = raw.split(",")
    else:
        parts = raw
    return frozenset(p.strip() for p in parts if p and p.strip())
