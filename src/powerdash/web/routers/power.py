from fastapi import APIRouter

from powerdash.core.modules.controller.models import PowerAction, PowerActionView, PowerStatusView
from powerdash.web.deps import AppDep, AuthTokenDep
from powerdash.web.openapi import ErrorResponse

router = APIRouter(prefix="/power", tags=["power"])

CONTROLLER_ERRORS: dict[int | str, dict[str, object]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    500: {"model": ErrorResponse, "description": "Controller rejected the configured credentials"},
    502: {"model": ErrorResponse, "description": "Controller unreachable or returned an unexpected response"},
}


@router.get(
    "/status",
    summary="Get power state",
    description="Read the current power state from the controller. The state is never cached.",
    operation_id="getPowerStatus",
    responses={200: {"description": "Current power state"}, **CONTROLLER_ERRORS},
)
async def get_power_status(app: AppDep, auth_token: AuthTokenDep) -> PowerStatusView:
    return await app.get_power_status(auth_token)


@router.post(
    "/on",
    summary="Power on",
    description="Ask the controller to power the system on. The transition completes asynchronously.",
    operation_id="powerOn",
    responses={200: {"description": "Command accepted"}, **CONTROLLER_ERRORS},
)
async def power_on(app: AppDep, auth_token: AuthTokenDep) -> PowerActionView:
    return await app.send_power_action(auth_token, PowerAction.ON)


@router.post(
    "/off",
    summary="Force power off",
    description="Cut power immediately, without waiting for the operating system.",
    operation_id="powerOff",
    responses={200: {"description": "Command accepted"}, **CONTROLLER_ERRORS},
)
async def power_off(app: AppDep, auth_token: AuthTokenDep) -> PowerActionView:
    return await app.send_power_action(auth_token, PowerAction.FORCE_OFF)


@router.post(
    "/shutdown",
    summary="Graceful shutdown",
    description="Ask the operating system to shut down cleanly.",
    operation_id="gracefulShutdown",
    responses={200: {"description": "Command accepted"}, **CONTROLLER_ERRORS},
)
async def graceful_shutdown(app: AppDep, auth_token: AuthTokenDep) -> PowerActionView:
    return await app.send_power_action(auth_token, PowerAction.GRACEFUL_SHUTDOWN)
