"""
API dependency helpers.

Resolves the calling user from a bearer token issued by the identity
provider, from oauth2-proxy headers, or from the DEV_MODE identity.
"""
import logging
from typing import Optional, Tuple, Dict, Any

from fastapi import Header, HTTPException, status, Depends
from sqlalchemy.orm import Session

from cashnib.db.database import get_db
from cashnib.api.auth import extract_bearer_token, resolve_identity_from_headers, get_or_create_user
from cashnib.services.identity_service import InvalidTokenError, verify_bearer_token
from cashnib.utils.runtime import DEV_USER_EMAIL, DEV_USER_NAME, dev_mode_active

logger = logging.getLogger("cashnib.auth")

# Contract:
# Returns (sqlalchemy User model, current_user_context_dict)
# Raises 401 if identity cannot be resolved.

def get_current_user_context(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    token = extract_bearer_token(authorization)
    if token:
        try:
            claims = verify_bearer_token(token)
        except InvalidTokenError as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
        if not claims.email:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
        user = get_or_create_user(
            db,
            email=claims.email,
            display_name=claims.name,
            subject=claims.subject,
            email_verified=claims.email_verified,
            provider=claims.provider,
        )
    else:
        name, email = resolve_identity_from_headers(
            x_auth_request_user=x_auth_request_user,
            x_auth_request_email=x_auth_request_email,
            x_forwarded_user=x_forwarded_user,
            x_forwarded_email=x_forwarded_email,
        )
        if not email and dev_mode_active():
            name, email = DEV_USER_NAME, DEV_USER_EMAIL
        if not email:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
        user = get_or_create_user(db, email=email, display_name=name, provider="oauth2-proxy")

    current_user = {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name,
        "is_superadmin": bool(getattr(user, "is_superadmin", False)),
        "auth_provider": user.auth_provider,
    }
    return user, current_user


def require_superadmin(user_context=Depends(get_current_user_context)) -> Tuple[Any, Dict[str, Any]]:
    user, current_user = user_context
    if not current_user.get("is_superadmin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user, current_user
