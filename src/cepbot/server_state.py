"""Server health state: whether bootstrap succeeded, failed, or is running.

Read by the guarded tool wrapper to block tool execution in degraded mode.
Mutated only by the entry point and the ``retry_bootstrap`` tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal

from cepbot.errors import BootstrapError


@dataclass(frozen=True)
class Booting:
    status: ClassVar[Literal["booting"]] = "booting"


@dataclass(frozen=True)
class Healthy:
    project_id: str
    region: str
    status: ClassVar[Literal["healthy"]] = "healthy"


@dataclass(frozen=True)
class Degraded:
    error: BootstrapError
    status: ClassVar[Literal["degraded"]] = "degraded"


ServerState = Booting | Healthy | Degraded


class ServerHealth:
    """Holds the current ServerState.

    booting → healthy | degraded on the first bootstrap; degraded → healthy |
    degraded on retry. Only ``reset()`` goes back to booting.
    """

    def __init__(self) -> None:
        self._state: ServerState = Booting()

    def get(self) -> ServerState:
        return self._state

    def set_healthy(self, project_id: str, region: str) -> None:
        self._state = Healthy(project_id=project_id, region=region)

    def set_degraded(self, error: BootstrapError) -> None:
        self._state = Degraded(error=error)

    def reset(self) -> None:
        """Back to booting (tests only)."""
        self._state = Booting()


server_health = ServerHealth()


def get_server_state() -> ServerState:
    return server_health.get()


def set_server_healthy(project_id: str, region: str) -> None:
    server_health.set_healthy(project_id, region)


def set_server_degraded(error: BootstrapError) -> None:
    server_health.set_degraded(error)
