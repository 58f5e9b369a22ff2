from enum import StrEnum

from pydantic import BaseModel, Field


class PowerAction(StrEnum):
    """Power commands, valued as Redfish ComputerSystem.Reset types."""

    ON = "On"
    FORCE_OFF = "ForceOff"
    GRACEFUL_SHUTDOWN = "GracefulShutdown"


class PowerState(StrEnum):
    """Power state as reported by the controller."""

    ON = "On"
    OFF = "Off"
    UNKNOWN = "Unknown"


class PowerStatusView(BaseModel):
    """Current power state (API representation)."""

    state: PowerState = Field(..., description="Power state reported by the controller")


class PowerActionView(BaseModel):
    """Accepted power command (API representation)."""

    action: PowerAction = Field(..., description="Command sent to the controller")
    message: str = Field(..., description="Human readable result")
