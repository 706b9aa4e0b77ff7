from dataclasses import dataclass
from typing import Optional

from storefront.constants.roles import (
    GUEST_ONLY_PATHS,
    HOME_FOR_ROLE,
    LOGIN_PATH,
    PROTECTED_PREFIXES,
    PUBLIC_PATHS,
    ROUTE_POLICY,
    Role,
)


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: Optional[str] = None
    status_code: int = 200
    reason: str = ""


ALLOW = RouteDecision(allowed=True)


class AuthorizationPolicy:
    """Single role -> route prefix table, checked once per request at the router boundary."""

    def __init__(
        self,
        policy=ROUTE_POLICY,
        public_paths=PUBLIC_PATHS,
        protected_prefixes=PROTECTED_PREFIXES,
    ):
        self.policy = policy
        self.public_paths = public_paths
        self.protected_prefixes = protected_prefixes

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_prefixes)

    def allowed_prefixes(self, role: Optional[Role]):
        return self.policy.get(role, ())

    def evaluate(self, path: str, role: Optional[Role], authenticated: bool) -> RouteDecision:
        if path in self.public_paths:
            if authenticated and path in GUEST_ONLY_PATHS:
                return RouteDecision(False, "/", 303, "Already signed in")
            return ALLOW

        if not self.is_protected(path):
            return ALLOW

        if not authenticated:
            return RouteDecision(False, LOGIN_PATH, 401, "Please sign in to continue.")

        if any(path.startswith(prefix) for prefix in self.allowed_prefixes(role)):
            return ALLOW

        return RouteDecision(
            False,
            HOME_FOR_ROLE.get(role, "/"),
            403,
            "You do not have access to this page.",
        )


policy = AuthorizationPolicy()
