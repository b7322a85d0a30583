"""
Identity token utilities.

Bearer ID tokens are issued by the external identity provider; this module
only verifies them and extracts the subject's email.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from quickdrop.app.core.config import settings


def decode_identity_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate an identity-provider ID token.
    
    Args:
        token: Bearer token string
        
    Returns:
        Decoded claims if signature, expiry, audience and issuer check out,
        None otherwise
    """
    options = {"verify_aud": settings.identity_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.identity_secret_key,
            algorithms=[settings.identity_algorithm],
            audience=settings.identity_audience,
            issuer=settings.identity_issuer,
            options=options,
        )
    except JWTError:
        return None


def create_identity_token(
    email: str,
    subject: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Mint a token the way the identity provider would.
    
    Only usable with a symmetric ``identity_algorithm``; used by the test
    suite and local development.
    
    Example payload:
        {
            "sub": "uid-123",
            "email": "sender@example.com",
            "email_verified": true,
            "exp": 1234567890
        }
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.identity_token_expire_minutes))
    
    to_encode = {
        "sub": subject or email,
        "email": email,
        "email_verified": True,
        "iat": now,
        "exp": expire,
    }
    if settings.identity_audience:
        to_encode["aud"] = settings.identity_audience
    if settings.identity_issuer:
        to_encode["iss"] = settings.identity_issuer
    if extra_claims:
        to_encode.update(extra_claims)
    
    return jwt.encode(to_encode, settings.identity_secret_key, algorithm=settings.identity_algorithm)
