"""Account and role check for protected routes.

Installed as an application-wide dependency so it shares the request's
database session. The token itself was already verified by
:class:`~todoay.middleware.security.SecurityMiddleware`.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from todoay.auth.jwt import get_login_id
from todoay.config import get_db
from todoay.exceptions import AccessDenied, AuthenticationRequired
from todoay.logging_config import get_logger
from todoay.profile.service import Principal, load_principal
from todoay.security.rules import DEFAULT_RULES, Access, match_rule

logger = get_logger(__name__)


def security_gate(request: Request, db: Session = Depends(get_db)) -> None:
    rule = getattr(request.state, "access_rule", None)
    if rule is None:
        rules = getattr(request.app.state, "access_rules", DEFAULT_RULES)
        rule = match_rule(request.url.path, rules)
    if rule.access is Access.PERMIT_ALL:
        return

    login_id = getattr(request.state, "login_id", None) or get_login_id(request)
    principal = load_principal(db, login_id)
    if rule.role is not None and rule.role not in principal.roles:
        logger.warning(
            "Access denied",
            extra={"login_id": principal.login_id, "path": request.url.path, "required_role": rule.role},
        )
        raise AccessDenied(f"Role '{rule.role}' is required")

    request.state.principal = principal


def current_principal(request: Request) -> Principal:
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthenticationRequired("Authentication required")
    return principal


def current_login_id(principal: Principal = Depends(current_principal)) -> str:
    return principal.login_id
