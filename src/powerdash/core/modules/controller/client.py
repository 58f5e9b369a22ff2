"""Redfish power control over HTTPS."""

import asyncio
from typing import Any

import httpx
import structlog

from powerdash.core.modules.controller.models import PowerAction, PowerState
from powerdash.errors import ControllerAuthFailedError, ControllerProtocolError, ControllerUnreachableError

logger = structlog.get_logger(__name__)

RESET_ACTION_PATH = "/Actions/ComputerSystem.Reset"

_REPORTED_STATES = {
    "On": PowerState.ON,
    "Off": PowerState.OFF,
}


class ControllerClient:
    """Stateless adapter for one management controller.

    Owns a dedicated httpx client: the TLS verification setting applies to
    controller requests only. Every call issues exactly one request and does
    not wait for the power transition to finish. The timeout bounds the whole
    request, not only each connect or read phase.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        system_path: str,
        timeout: float,
        verify_tls: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.system_path = "/" + system_path.strip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            auth=httpx.BasicAuth(username, password),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=timeout,
            verify=verify_tls,
            transport=transport,
        )

    async def get_power_state(self) -> PowerState:
        """Read the current power state of the system resource.

        Transitional states such as PoweringOn are reported as Unknown.
        """
        response = await self._request("GET", self.system_path)
        try:
            data = response.json()
        except ValueError as e:
            raise ControllerProtocolError(f"Power state response is not JSON: {response.text[:200]!r}") from e

        reported = data.get("PowerState") if isinstance(data, dict) else None
        if not isinstance(reported, str):
            raise ControllerProtocolError(f"Power state response has no PowerState field: {str(data)[:200]!r}")

        state = _REPORTED_STATES.get(reported, PowerState.UNKNOWN)
        if state is PowerState.UNKNOWN:
            logger.info("controller_power_state_unmapped", reported=reported)
        logger.debug("controller_power_state", state=state.value)
        return state

    async def send_power_action(self, action: PowerAction) -> None:
        """Invoke a reset action. Returns once the controller acknowledges it."""
        logger.info("controller_power_action", action=action.value)
        await self._request("POST", self.system_path + RESET_ACTION_PATH, json={"ResetType": action.value})

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await asyncio.wait_for(self._http.request(method, path, json=json), timeout=self.timeout)
        except (httpx.TimeoutException, TimeoutError) as e:
            raise ControllerUnreachableError(f"{method} {path} timed out: {e!r}") from e
        except httpx.TransportError as e:
            raise ControllerUnreachableError(f"{method} {path} failed: {e!r}") from e

        if response.status_code in (401, 403):
            raise ControllerAuthFailedError(f"{method} {path} rejected credentials: HTTP {response.status_code}")
        if not response.is_success:
            raise ControllerProtocolError(f"{method} {path} returned HTTP {response.status_code}: {response.text[:200]!r}")
        return response
