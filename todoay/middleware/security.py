"""Token check that runs ahead of routing and body parsing.

The matching access rule and, for protected paths, the bearer token's subject
are left on ``request.state`` for :func:`todoay.security.gate.security_gate`,
which resolves the account and checks roles.
"""
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from todoay.auth.jwt import get_login_id
from todoay.logging_config import bind_login_id, reset_login_id
from todoay.security.rules import DEFAULT_RULES, Access, match_rule


class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rules = getattr(request.app.state, "access_rules", DEFAULT_RULES)
        rule = match_rule(request.url.path, rules)
        request.state.access_rule = rule
        if rule.access is Access.PERMIT_ALL:
            return await call_next(request)

        login_id = get_login_id(request)
        request.state.login_id = login_id
        reset_token = bind_login_id(login_id)
        try:
            return await call_next(request)
        finally:
            reset_login_id(reset_token)
