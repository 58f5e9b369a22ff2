"""Browser pages. Unauthenticated page loads are redirected instead of answered with 401."""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse, RedirectResponse, Response

from powerdash.web.deps import AppDep, AuthTokenDep

router = APIRouter(tags=["pages"], include_in_schema=False)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


def _page(name: str) -> FileResponse:
    return FileResponse(STATIC_DIR / name, media_type="text/html")


@router.get("/")
async def index(app: AppDep, auth_token: AuthTokenDep) -> Response:
    if await app.is_auth_token_valid(auth_token):
        return RedirectResponse("/dashboard")
    if await app.is_registration_open():
        return RedirectResponse("/register")
    return RedirectResponse("/login")


@router.get("/login")
async def login_page() -> Response:
    return _page("login.html")


@router.get("/register")
async def register_page(app: AppDep) -> Response:
    if not await app.is_registration_open():
        return RedirectResponse("/")
    return _page("register.html")


@router.get("/dashboard")
async def dashboard_page(app: AppDep, auth_token: AuthTokenDep) -> Response:
    if not await app.is_auth_token_valid(auth_token):
        return RedirectResponse("/")
    return _page("dashboard.html")
