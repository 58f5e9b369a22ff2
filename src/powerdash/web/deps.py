from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie

from powerdash.app import App
from powerdash.core.modules.session.models import AuthToken

AUTH_COOKIE_NAME = "auth_token"

# Security schemes
cookie_scheme = APIKeyCookie(name=AUTH_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_auth_token(token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None) -> AuthToken | None:
    """Read the session token from the cookie. Validation happens in App."""
    return AuthToken(token_cookie) if token_cookie else None


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken | None, Depends(get_auth_token)]
