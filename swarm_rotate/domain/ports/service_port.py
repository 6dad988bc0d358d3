"""
Port (interface) for the orchestrator's service subsystem.
Infrastructure adapters (e.g. DockerServiceOrchestrator) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from swarm_rotate.domain.entities.rotation import Operation


class IServiceOrchestrator(ABC):
    @abstractmethod
    def inspect_secrets(self, service: str) -> list[str]:
        """Return the secret names currently bound to *service*'s task template.

        Raises:
            ExternalCommandError: if the service cannot be inspected.
        """
        ...

    @abstractmethod
    def update(self, service: str, operations: Sequence[Operation]) -> None:
        """Apply every bind/unbind in *operations* to *service* as one update.

        Raises:
            ExternalCommandError: if the orchestrator rejects the update.
        """
        ...
