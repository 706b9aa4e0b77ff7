import logging
import time
from typing import Optional

from jose import jwt
from jose.exceptions import JWTError

from storefront.constants.roles import Role
from storefront.exceptions import BackendError, NotAuthenticated
from storefront.schemas.user_schemas import UserProfile

logger = logging.getLogger(__name__)

EXPIRY_LEEWAY_SECONDS = 30


class TokenStore:
    """Access/refresh token pair for one browser, as carried in its cookies."""

    def __init__(self, access: Optional[str] = None, refresh: Optional[str] = None):
        self.access = access
        self.refresh = refresh
        self.rotated = False
        self.cleared = False

    def __bool__(self):
        return bool(self.access or self.refresh)

    def update(self, access: str, refresh: Optional[str] = None):
        self.access = access
        if refresh:
            self.refresh = refresh
        self.rotated = True
        self.cleared = False

    def clear(self):
        self.access = None
        self.refresh = None
        self.rotated = False
        self.cleared = True

    def access_expired(self) -> bool:
        """
        True when the access token is a JWT whose `exp` has passed.

        The storefront cannot verify the signature (the backend owns the key),
        so the claims are only read to skip a round trip that would 401.
        Opaque tokens are never considered expired here.
        """
        if not self.access:
            return True
        try:
            claims = jwt.get_unverified_claims(self.access)
        except JWTError:
            return False

        exp = claims.get("exp")
        if exp is None:
            return False
        return float(exp) <= time.time() + EXPIRY_LEEWAY_SECONDS


class UserSession:
    """
    The signed-in shopper for one request.

    Built explicitly from a token store and a backend client and handed to
    whatever needs it. `initialize()` loads the user when a token is present,
    `teardown()` forgets both the tokens and the user.
    """

    def __init__(self, tokens: TokenStore, client):
        self.tokens = tokens
        self.client = client
        self.user: Optional[UserProfile] = None
        self.initialized = False

    @property
    def is_authenticated(self):
        return self.user is not None

    @property
    def role(self) -> Optional[Role]:
        if not self.user or self.user.role_id is None:
            return None
        try:
            return Role(self.user.role_id)
        except ValueError:
            logger.warning(f"Unknown role id {self.user.role_id} for user {self.user.id}")
            return None

    def initialize(self) -> "UserSession":
        self.initialized = True

        if not self.tokens:
            return self

        if self.tokens.access_expired() and self.tokens.refresh:
            self.client.refresh_tokens()

        if not self.tokens.access:
            return self

        try:
            self.user = self.client.get_me()
        except BackendError as e:
            logger.info(f"Could not load user profile: {e.message}")
            self.user = None
            self.tokens.clear()

        return self

    def teardown(self):
        if self.user:
            logger.info(f"Signing out user {self.user.id}")
        self.user = None
        self.tokens.clear()

    def require_user(self) -> UserProfile:
        if not self.initialized:
            self.initialize()
        if self.user is None:
            raise NotAuthenticated()
        return self.user
