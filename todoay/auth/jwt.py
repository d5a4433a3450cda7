import uuid
from datetime import datetime, timedelta, timezone

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param
from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from todoay.config import settings
from todoay.exceptions import (
    AuthenticationRequired,
    JwtExpired,
    JwtMalformed,
    JwtNotVerified,
    JwtUnsupported,
)

ACCESS = "access"
REFRESH = "refresh"


def _issue(login_id: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(tz=timezone.utc)
    claims = {
        "sub": login_id,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm)


def create_access_token(login_id: str) -> str:
    return _issue(login_id, ACCESS, timedelta(minutes=settings.access_token_expire_minutes))


def create_refresh_token(login_id: str) -> str:
    return _issue(login_id, REFRESH, timedelta(days=settings.refresh_token_expire_days))


def decode_token(token: str, expected_type: str) -> dict:
    """Verify *token* and return its claims.

    Header and claims are read unverified first, so structural damage and a
    foreign algorithm are reported apart from a bad signature.
    """
    try:
        header = jwt.get_unverified_header(token)
        jwt.get_unverified_claims(token)
    except JWTError:
        raise JwtMalformed("Token is malformed")

    if header.get("alg") != settings.algorithm:
        raise JwtUnsupported(f"Unsupported signing algorithm '{header.get('alg')}'")

    try:
        claims = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
        )
    except ExpiredSignatureError:
        raise JwtExpired("Token has expired")
    except JWTClaimsError:
        raise JwtMalformed("Token claims are invalid")
    except JWTError:
        raise JwtNotVerified("Token signature could not be verified")

    if claims.get("type") != expected_type:
        raise JwtUnsupported(f"Expected a {expected_type} token, got '{claims.get('type')}'")
    if not claims.get("sub"):
        raise JwtMalformed("Token has no subject")

    return claims


def get_login_id(request: Request) -> str:
    """Return the subject of the access token sent with *request*."""
    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if not token or scheme.lower() != "bearer":
        raise AuthenticationRequired("Missing bearer token")
    return decode_token(token, ACCESS)["sub"]
