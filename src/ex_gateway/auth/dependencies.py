"""FastAPI dependency: get_requester.

Usage in any protected router:
    from src.ex_gateway.auth.dependencies import get_requester

    @router.get("/protected")
    async def protected(requester: Requester = Depends(get_requester)):
        ...
"""

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from src.ex_common.errors import InvalidCredentialsError
from src.ex_gateway.auth.jwt_handler import decode_token, parse_roles
from src.ex_order.domain.access import Requester

# Tokens are minted upstream; tokenUrl only feeds the Swagger "Authorize" button.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


async def get_requester(token: str | None = Depends(oauth2_scheme)) -> Requester:
    """Build the Requester from the Bearer token.

    Raises InvalidCredentialsError (HTTP 401) if the token is missing, invalid,
    expired, or identifies neither a user nor a partner.
    """
    if not token:
        raise InvalidCredentialsError()
    payload = decode_token(token)

    user_id = payload.get("sub") or None
    partner_ids = frozenset(str(p) for p in payload.get("partner_ids") or [])
    if user_id is None and not partner_ids:
        raise InvalidCredentialsError()

    return Requester(
        user_id=str(user_id) if user_id is not None else None,
        partner_ids=partner_ids,
        roles=parse_roles(payload.get("roles")),
    )
