import logging
from dataclasses import dataclass
from typing import Optional, Union

import httpx
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from . import config
from .database import get_db
from .models import Member, Physician

logger = logging.getLogger(__name__)

security = HTTPBearer()

SYMMETRIC_ALGORITHMS = {"HS256"}
ASYMMETRIC_ALGORITHMS = {"RS256", "ES256"}

# Cache for the auth project's signing keys
_cached_jwks = None


@dataclass
class AuthIdentity:
    """Claims of a verified access token"""

    uid: str
    email: Optional[str]
    role: Optional[str]  # role chosen at sign up (user_metadata.role)
    full_name: Optional[str] = None


@dataclass
class Account:
    """Authenticated identity together with its profile row"""

    role: str  # "member" | "physician"
    profile: Union[Member, Physician]

    @property
    def id(self) -> str:
        return self.profile.id

    @property
    def is_physician(self) -> bool:
        return self.role == "physician"


async def get_signing_keys():
    """Fetch the auth project's JWKS for asymmetric token verification"""
    global _cached_jwks
    if _cached_jwks:
        logger.debug("✅ Using cached signing keys")
        return _cached_jwks

    if not config.SUPABASE_URL:
        logger.error("❌ SUPABASE_URL not configured, cannot fetch signing keys")
        return None

    url = f"{config.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(url)
            if response.status_code == 200:
                _cached_jwks = response.json()
                logger.info(f"✅ Fetched {len(_cached_jwks.get('keys', []))} signing keys")
                return _cached_jwks
            logger.error(f"❌ Failed to fetch signing keys: HTTP {response.status_code}")
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching signing keys: {str(e)}")
    return None


def _find_key(jwks: Optional[dict], kid: Optional[str]) -> Optional[dict]:
    if not jwks or not kid:
        return None
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    return None


async def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the hosted auth service.
    HS256 tokens are checked against the project JWT secret; RS256/ES256 tokens
    against the project's published signing keys.
    """
    global _cached_jwks

    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        logger.error(f"❌ Failed to decode token header: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token header") from e

    alg = header.get("alg")
    if alg in SYMMETRIC_ALGORITHMS:
        if not config.SUPABASE_JWT_SECRET:
            logger.error("❌ SUPABASE_JWT_SECRET not configured")
            raise HTTPException(status_code=500, detail="Authentication not configured")
        key = config.SUPABASE_JWT_SECRET
    elif alg in ASYMMETRIC_ALGORITHMS:
        kid = header.get("kid")
        key = _find_key(await get_signing_keys(), kid)
        if key is None:
            logger.warning(f"⚠️ Key ID {kid} not found in signing keys, invalidating cache and retrying")
            _cached_jwks = None
            key = _find_key(await get_signing_keys(), kid)
            if key is None:
                raise HTTPException(status_code=401, detail="Unable to verify token signature")
    else:
        logger.error(f"❌ Invalid token algorithm: {alg}")
        raise HTTPException(status_code=401, detail="Invalid token algorithm")

    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=[alg],
            audience=config.SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return claims


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthIdentity:
    """Verified identity from the Bearer token (no profile lookup)"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    claims = await verify_access_token(token)
    metadata = claims.get("user_metadata") or {}
    return AuthIdentity(
        uid=claims["sub"],
        email=(claims.get("email") or "").lower() or None,
        role=metadata.get("role"),
        full_name=metadata.get("full_name"),
    )


async def get_current_account(
    identity: AuthIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Account:
    """Resolve the identity to its physician or member profile"""
    physician = db.query(Physician).filter(Physician.id == identity.uid).first()
    if physician:
        return Account(role="physician", profile=physician)

    member = db.query(Member).filter(Member.id == identity.uid).first()
    if member:
        return Account(role="member", profile=member)

    logger.info(f"ℹ️ Authenticated user {identity.uid} has no profile yet")
    raise HTTPException(
        status_code=404,
        detail="Profile not found. Please complete registration.",
        headers={"X-Registration-Required": "true"},
    )


async def get_current_member(account: Account = Depends(get_current_account)) -> Member:
    if account.role != "member":
        raise HTTPException(status_code=403, detail="This action is only available to members")
    return account.profile


async def get_current_physician(account: Account = Depends(get_current_account)) -> Physician:
    if account.role != "physician":
        raise HTTPException(status_code=403, detail="This action is only available to physicians")
    return account.profile
