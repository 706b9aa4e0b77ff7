# storefront/middleware/token_cookies.py
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.config import settings

ACCESS_TOKEN_MAX_AGE = 60 * 60  # 1 hour


class TokenCookieMiddleware(BaseHTTPMiddleware):
    """Writes refreshed tokens back to the browser, or removes them after sign-out."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)

        tokens = getattr(request.state, "tokens", None)
        if tokens is None:
            return response

        secure = settings.env != "local"

        if tokens.cleared:
            response.delete_cookie(settings.access_token_cookie, path="/")
            response.delete_cookie(settings.refresh_token_cookie, path="/")
        elif tokens.rotated:
            response.set_cookie(
                settings.access_token_cookie,
                tokens.access,
                max_age=ACCESS_TOKEN_MAX_AGE,
                httponly=True,
                secure=secure,
                samesite="lax",
                path="/",
            )
            if tokens.refresh:
                response.set_cookie(
                    settings.refresh_token_cookie,
                    tokens.refresh,
                    httponly=True,
                    secure=secure,
                    samesite="lax",
                    path="/",
                )

        return response
