"""
Authentication utilities for admin console routes
"""

import logging
import time
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import jwt
from fastapi import Depends, Header, Request
from pydantic import ValidationError

from config.settings import ADMIN_API_BASE, AUTH_COOKIE_NAME
from models.record import AdminIdentity
from services.record_gateway import GatewayError, RecordGateway, Session

logger = logging.getLogger(__name__)

class AdminAccessDenied(Exception):
    """Caller is unauthenticated or not flagged as an administrator"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

@dataclass
class AdminContext:
    """Authenticated admin plus the gateway bound to their credential"""
    session: Session
    identity: AdminIdentity
    gateway: RecordGateway

def extract_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    """Bearer credential from the Authorization header, else the auth cookie"""
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:].strip()  # Remove "Bearer " prefix
        if token:
            return token
    if cookie_token:
        return cookie_token.strip() or None
    return None

def token_expired(token: str, now: Optional[float] = None) -> bool:
    """
    Local validity check before asking the store.

    The signature is not verified here (the store owns the key); only the
    shape and the exp claim are looked at. Malformed tokens count as expired.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        logger.info(f"AUTH: Unreadable token: {str(e)}")
        return True
    exp = claims.get("exp")
    if exp is None:
        return False
    return float(exp) <= (now if now is not None else time.time())

def get_session(
    request: Request,
    authorization: Optional[str] = Header(None)
) -> Session:
    """FastAPI dependency: the caller's store session"""
    token = extract_token(authorization, request.cookies.get(AUTH_COOKIE_NAME))
    return Session(base_url=ADMIN_API_BASE, token=token)

async def get_gateway(session: Session = Depends(get_session)) -> AsyncIterator[RecordGateway]:
    """FastAPI dependency: a gateway closed when the request ends"""
    gateway = RecordGateway(session)
    try:
        yield gateway
    finally:
        await gateway.aclose()

async def check_admin(gateway: RecordGateway) -> AdminIdentity:
    """
    Identity check gating the whole console

    Raises:
        AdminAccessDenied: no usable credential, lookup failed, or not an admin
    """
    token = gateway.session.token
    if not token:
        raise AdminAccessDenied("missing credential")
    if token_expired(token):
        raise AdminAccessDenied("expired credential")

    try:
        identity = await gateway.get_identity()
    except GatewayError as e:
        logger.warning(f"AUTH: Identity lookup failed ({e.status}): {e.message}")
        raise AdminAccessDenied("identity lookup failed") from e
    except ValidationError as e:
        logger.warning(f"AUTH: Unreadable identity payload: {e.error_count()} validation error(s)")
        raise AdminAccessDenied("unreadable identity") from e

    if not identity.is_admin:
        logger.warning(f"AUTH: Non-admin identity {identity.email or identity.id} refused")
        raise AdminAccessDenied("not an administrator")

    logger.info(f"AUTH: Admin access granted to {identity.email or identity.id}")
    return identity

async def require_admin(gateway: RecordGateway = Depends(get_gateway)) -> AdminContext:
    """FastAPI dependency for every console route"""
    identity = await check_admin(gateway)
    return AdminContext(session=gateway.session, identity=identity, gateway=gateway)

class AuthConfig:
    """
    Centralized authentication configuration for the application.
    All console routes require an administrator.
    """

    @staticmethod
    def get_auth_dependency():
        """Get the mandatory admin dependency for console routes"""
        return require_admin
