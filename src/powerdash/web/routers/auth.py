from datetime import datetime

from fastapi import APIRouter, Response
from pydantic import AliasChoices, BaseModel, Field

from powerdash.core.modules.session.models import SESSION_TTL
from powerdash.core.modules.user.models import UserView
from powerdash.web.deps import AUTH_COOKIE_NAME, AppDep, AuthTokenDep
from powerdash.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    username: str = Field(..., validation_alias=AliasChoices("username", "user"), description="Username")
    password: str = Field(..., validation_alias=AliasChoices("password", "pass"), description="Password")


class RegisterRequest(LoginRequest):
    """First-run registration request."""

    confirm_password: str | None = Field(None, description="Must equal password when given")


class LoginResponse(BaseModel):
    """Authentication response. The session token itself is only sent as a cookie."""

    username: str = Field(..., description="Authenticated username")
    expires_at: datetime = Field(..., description="Absolute session expiry")


class MessageResponse(BaseModel):
    message: str


@router.post(
    "/register",
    summary="Register the first user",
    description="Create the single account. Only possible while no user exists.",
    operation_id="register",
    responses={
        200: {"description": "User created"},
        400: {"model": ErrorResponse, "description": "Invalid username or password"},
        403: {"model": ErrorResponse, "description": "An account already exists"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep) -> UserView:
    return await app.register(register_data.username, register_data.password, register_data.confirm_password)


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with username and password; the session token is set as an HTTP-only cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> LoginResponse:
    session = await app.login(login_data.username, login_data.password)

    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=session.auth_token,
        httponly=True,
        samesite="lax",
        secure=app.cookie_secure,
        max_age=int(SESSION_TTL.total_seconds()),
    )

    return LoginResponse(username=login_data.username, expires_at=session.expires_at)


@router.post(
    "/logout",
    summary="End session",
    description="Invalidate the current session and clear the cookie. Always succeeds.",
    operation_id="logout",
    responses={200: {"description": "Logged out"}},
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> MessageResponse:
    await app.logout(auth_token)
    response.delete_cookie(AUTH_COOKIE_NAME, httponly=True, samesite="lax", secure=app.cookie_secure)
    return MessageResponse(message="Logged out successfully")
