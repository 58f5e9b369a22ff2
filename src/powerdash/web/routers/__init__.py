from powerdash.web.routers.auth import router as auth_router
from powerdash.web.routers.pages import router as pages_router
from powerdash.web.routers.power import router as power_router

__all__ = [
    "auth_router",
    "pages_router",
    "power_router",
]
