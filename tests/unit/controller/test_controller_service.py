"""Tests for the controller service lifecycle."""

import httpx
import pytest

from powerdash.app import App
from powerdash.core.core import Core


class RecordingAsyncClient(httpx.AsyncClient):
    """AsyncClient that remembers the keyword arguments of every instance."""

    created: list[dict] = []

    def __init__(self, **kwargs) -> None:
        RecordingAsyncClient.created.append(kwargs)
        super().__init__(**kwargs)


@pytest.fixture
def recorded_clients(monkeypatch):
    RecordingAsyncClient.created = []
    monkeypatch.setattr(httpx, "AsyncClient", RecordingAsyncClient)
    return RecordingAsyncClient.created


def make_core(config, **overrides) -> Core:
    return Core(config.model_copy(update=overrides))


class TestControllerService:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("verify_tls", [False, True])
    async def test_tls_setting_reaches_controller_client(self, config, recorded_clients, verify_tls):
        core = make_core(config, controller_verify_tls=verify_tls)
        try:
            await core.services.controller.on_start()
            await core.services.controller.on_stop()
        finally:
            core.database.close()

        (kwargs,) = recorded_clients
        assert kwargs["verify"] is verify_tls
        assert kwargs["base_url"] == config.controller_url
        assert kwargs["timeout"] == config.controller_timeout

    @pytest.mark.asyncio
    async def test_client_is_closed_on_stop(self, config):
        core = make_core(config)
        try:
            await core.services.controller.on_start()
            client = core.services.controller.client
            await core.services.controller.on_stop()
        finally:
            core.database.close()
        assert client._http.is_closed
        with pytest.raises(RuntimeError):
            core.services.controller.client


@pytest.mark.asyncio
async def test_app_lifespan_creates_only_the_controller_client(config, recorded_clients):
    """Disabling verification does not touch any other HTTP client."""
    async with App(config).lifespan():
        pass
    (kwargs,) = recorded_clients
    assert kwargs["verify"] is False
    assert isinstance(kwargs["auth"], httpx.BasicAuth)
