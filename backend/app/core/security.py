"""Requester identity for vote and contribution uniqueness.

Identity is the verified Firebase uid when the request carries a valid bearer
token and Firebase is configured; otherwise the requester's network address.
Address-based identity is spoofable and shared behind NAT. It is a pragmatic
stand-in, isolated here so gate logic never depends on how it is derived.
"""

import logging
from typing import Optional

import firebase_admin
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth, credentials

from app.core.config import get_settings

logger = logging.getLogger(__name__)

UNKNOWN_IDENTITY = "unknown"

security = HTTPBearer(auto_error=False)


def _firebase_app() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK on first use."""
    if not firebase_admin._apps:
        settings = get_settings()
        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        if settings.google_application_credentials:
            cred = credentials.Certificate(settings.google_application_credentials)
            firebase_admin.initialize_app(cred, options)
        else:
            firebase_admin.initialize_app(options=options)
    return firebase_admin.get_app()


def verify_firebase_token(token: str) -> str:
    """Verify a Firebase ID token and return its uid.

    This NEVER mints tokens - it only verifies tokens issued by Firebase.
    """
    try:
        decoded_token = auth.verify_id_token(token, app=_firebase_app())
    except auth.ExpiredIdTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except auth.InvalidIdTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token verification failed: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decoded_token["uid"]


def client_address(request: Request, trust_forwarded_for: bool = False) -> str:
    """Requester's network address.

    The first X-Forwarded-For hop is used only when the deployment sits
    behind a proxy that sets it.
    """
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_IDENTITY


async def get_requester_identity(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Uniqueness key for votes and contributions."""
    settings = get_settings()
    if bearer is not None and settings.firebase_enabled:
        uid = verify_firebase_token(bearer.credentials)
        return f"user:{uid}"
    return client_address(request, settings.trust_forwarded_for)
