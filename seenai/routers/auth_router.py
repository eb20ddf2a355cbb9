import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from seenai.config.settings import Settings, get_settings
from seenai.schemas.pydantic_schemas import Principal

logger = logging.getLogger(__name__)

auth_router = APIRouter(tags=["Auth"])
bearer = HTTPBearer(auto_error=False)


def decode_principal(token: str, settings: Settings) -> Principal:
    """Verifies a token issued by the identity provider and maps its claims."""
    options = {"verify_aud": settings.jwt_audience is not None}
    payload = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        options=options,
    )
    user_id = payload.get("sub")
    if not user_id:
        raise JWTError("Token has no subject")

    metadata = payload.get("user_metadata") or {}
    return Principal(
        id=str(user_id),
        email=payload.get("email"),
        full_name=metadata.get("full_name"),
        avatar_url=metadata.get("avatar_url"),
    )


# Lookup failures degrade to "no principal"; callers decide whether that is an error
def get_current_principal(
    auth: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> Optional[Principal]:
    if auth is None:
        return None
    try:
        return decode_principal(auth.credentials, settings)
    except JWTError as e:
        logger.warning(f"Could not resolve principal from bearer token: {e}")
        return None


def unauthenticated_exception(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@auth_router.get("/me", response_model=Principal)
def read_current_principal(principal: Optional[Principal] = Depends(get_current_principal)):
    if principal is None:
        raise unauthenticated_exception("Invalid authentication credentials.")
    return principal
