"""
Authentication dependencies for FastAPI.

This module turns the request's bearer credential into a VerifiedIdentity
that is passed explicitly to the authorization gates and domain components.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from quickdrop.app.core.exceptions import AuthenticationError
from quickdrop.app.core.identity import decode_identity_token

# HTTP Bearer security scheme; missing headers are reported by us, not by FastAPI
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class VerifiedIdentity:
    """Subject of a verified ID token."""
    email: Optional[str]
    subject: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


def verify_credential(token: Optional[str]) -> VerifiedIdentity:
    """
    Verify a raw bearer token.
    
    Raises:
        AuthenticationError: token missing, invalid, expired, or without a
            verified email
    """
    if not token:
        raise AuthenticationError("Missing or invalid Authorization header")
    
    claims = decode_identity_token(token)
    if claims is None:
        raise AuthenticationError("Invalid or expired token")
    
    email = claims.get("email")
    if not email or claims.get("email_verified") is False:
        raise AuthenticationError("Token carries no verified email")
    
    return VerifiedIdentity(email=email, subject=claims.get("sub"), claims=claims)


async def get_verified_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> VerifiedIdentity:
    """
    FastAPI dependency for bearer-token authentication.
    
    Returns:
        VerifiedIdentity of the caller
        
    Raises:
        AuthenticationError (401) if authentication fails for any reason
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing or invalid Authorization header")
    return verify_credential(credentials.credentials)
