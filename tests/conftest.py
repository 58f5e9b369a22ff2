"""Shared pytest fixtures."""

import pytest

from powerdash.config import Config
from powerdash.core.core import Core

CONTROLLER_URL = "https://bmc.example.test"
SYSTEM_PATH = "/redfish/v1/Systems/System.Embedded.1"


@pytest.fixture
def config(tmp_path):
    """Create a config pointing at a throwaway database."""
    return Config(
        controller_url=CONTROLLER_URL,
        controller_username="root",
        controller_password="calvin",
        controller_system_path=SYSTEM_PATH,
        controller_timeout=1.0,
        database_path=str(tmp_path / "data" / "powerdash.db"),
        debug=True,
    )


@pytest.fixture
def core(config):
    """Create a core with the database schema in place (services not started)."""
    core = Core(config)
    core.database.create_schema()
    yield core
    core.database.close()


@pytest.fixture
def user_service(core):
    return core.services.user


@pytest.fixture
def session_service(core):
    return core.services.session
