import structlog

from powerdash.core.core import Service
from powerdash.core.db import Database
from powerdash.core.modules.controller.client import ControllerClient
from powerdash.core.modules.controller.models import PowerAction, PowerState

logger = structlog.get_logger(__name__)


class ControllerService(Service):
    """Relays power commands to the configured management controller."""

    def __init__(self, database: Database) -> None:
        super().__init__(database)
        self._client: ControllerClient | None = None

    @property
    def client(self) -> ControllerClient:
        if self._client is None:
            raise RuntimeError("Controller client not started")
        return self._client

    async def get_power_state(self) -> PowerState:
        return await self.client.get_power_state()

    async def send_power_action(self, action: PowerAction) -> None:
        await self.client.send_power_action(action)

    async def on_start(self) -> None:
        """Open the HTTP client with the credentials configured at startup."""
        config = self.core.config
        self._client = ControllerClient(
            base_url=config.controller_url,
            username=config.controller_username,
            password=config.controller_password,
            system_path=config.controller_system_path,
            timeout=config.controller_timeout,
            verify_tls=config.controller_verify_tls,
            transport=self.core.controller_transport,
        )
        if not config.controller_verify_tls:
            logger.warning("controller_tls_verification_disabled", controller_url=config.controller_url)
        logger.info("controller_client_started", controller_url=config.controller_url, timeout=config.controller_timeout)

    async def on_stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
