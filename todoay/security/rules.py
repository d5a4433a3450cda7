"""Route access rules, evaluated top to bottom; the first match decides."""
import enum
from dataclasses import dataclass
from fnmatch import fnmatchcase

from todoay.models import Role


class Access(str, enum.Enum):
    PERMIT_ALL = "PERMIT_ALL"
    AUTHENTICATED = "AUTHENTICATED"


@dataclass(frozen=True)
class AccessRule:
    pattern: str
    access: Access = Access.AUTHENTICATED
    # When set, the principal's roles must contain it.
    role: str | None = None

    def matches(self, path: str) -> bool:
        return fnmatchcase(path, self.pattern)


def permit_all(pattern: str) -> AccessRule:
    return AccessRule(pattern, Access.PERMIT_ALL)


def authenticated(pattern: str) -> AccessRule:
    return AccessRule(pattern, Access.AUTHENTICATED)


def has_role(pattern: str, role: Role) -> AccessRule:
    return AccessRule(pattern, Access.AUTHENTICATED, role.value)


DEFAULT_RULES: tuple[AccessRule, ...] = (
    permit_all("/health"),
    permit_all("/docs"),
    permit_all("/docs/*"),
    permit_all("/redoc"),
    permit_all("/openapi.json"),
    permit_all("/auth/sign-up"),
    permit_all("/auth/login"),
    permit_all("/auth/refresh"),
    permit_all("/auth/nickname-duplicate-check"),
    has_role("/admin/*", Role.ADMIN),
    authenticated("*"),
)

# Paths no rule covers are treated as protected.
_FALLBACK = authenticated("*")


def match_rule(path: str, rules: tuple[AccessRule, ...]) -> AccessRule:
    for rule in rules:
        if rule.matches(path):
            return rule
    return _FALLBACK
