import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog

from powerdash.config import Config
from powerdash.core.core import Core
from powerdash.core.modules.controller.models import PowerAction, PowerActionView, PowerState, PowerStatusView
from powerdash.core.modules.session.models import AuthToken, Session
from powerdash.core.modules.user.models import UserView
from powerdash.errors import AuthenticationError, NotFoundError

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations, validates sessions before delegating to Core."""

    def __init__(self, config: Config, controller_transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._core = Core(config, controller_transport)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def cookie_secure(self) -> bool:
        """Whether session cookies carry the Secure flag."""
        return self._core.config.cookie_secure

    async def is_registration_open(self) -> bool:
        """True until the first user has registered."""
        return not await asyncio.to_thread(self._core.services.user.has_any_user)

    async def is_auth_token_valid(self, auth_token: AuthToken | None) -> bool:
        """Check if authentication token is valid."""
        return await asyncio.to_thread(self._core.services.session.is_auth_token_valid, auth_token)

    async def register(self, username: str, password: str, confirm_password: str | None = None) -> UserView:
        """Create the first user. Does not open a session."""
        user = await asyncio.to_thread(self._core.services.user.register, username, password, confirm_password)
        return UserView.from_domain(user)

    async def login(self, username: str, password: str) -> Session:
        """Authenticate user and create session."""
        try:
            user = await asyncio.to_thread(self._core.services.user.verify, username, password)
        except (NotFoundError, AuthenticationError) as e:
            # Same answer whether the username or the password was wrong
            logger.info("login_failed", username=username, reason=type(e).__name__)
            raise AuthenticationError("Invalid username or password") from e
        session = self._core.services.session.create_session(user.id)
        logger.info("user_logged_in", user_id=user.id, username=user.username)
        return session

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Invalidate user session. Never fails."""
        self._core.services.session.invalidate_session(auth_token)

    async def get_power_status(self, auth_token: AuthToken | None) -> PowerStatusView:
        """Read the power state fresh from the controller."""
        await self._ensure_authenticated(auth_token)
        state: PowerState = await self._core.services.controller.get_power_state()
        return PowerStatusView(state=state)

    async def send_power_action(self, auth_token: AuthToken | None, action: PowerAction) -> PowerActionView:
        """Send a power command. Success means accepted, not completed."""
        user_id = await self._ensure_authenticated(auth_token)
        await self._core.services.controller.send_power_action(action)
        logger.info("power_action_accepted", user_id=user_id, action=action.value)
        return PowerActionView(action=action, message=f"Command {action.value} accepted by the controller")

    # === Private helpers ===
    async def _ensure_authenticated(self, auth_token: AuthToken | None) -> int:
        """Resolve the session's user ID. Raises AuthenticationError if the session is not valid."""
        return await asyncio.to_thread(self._core.services.session.validate, auth_token)
