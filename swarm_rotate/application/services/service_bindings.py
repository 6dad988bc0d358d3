"""
Application service: discover which secret versions a running service mounts.
"""

import logging
from typing import Optional

from swarm_rotate.domain.entities.secret_version import SecretVersionId
from swarm_rotate.domain.ports.service_port import IServiceOrchestrator

logger = logging.getLogger(__name__)


class ServiceBindings:
    def __init__(self, orchestrator: IServiceOrchestrator) -> None:
        self._orchestrator = orchestrator

    def list_bound(self, service: str) -> list[SecretVersionId]:
        bound = []
        for raw in self._orchestrator.inspect_secrets(service):
            secret_id = SecretVersionId.try_decode(raw)
            if secret_id is None:
                logger.debug("Service %s mounts unversioned secret %r", service, raw)
                continue
            bound.append(secret_id)
        return bound

    def active_for(self, service: str, name: str) -> Optional[SecretVersionId]:
        """The bound version of *name* on *service*, or None if it is not bound.

        A service should mount at most one version per name. If the orchestrator
        reports several, the first one reported wins.
        """
        matching = [s for s in self.list_bound(service) if s.matches(name)]
        if len(matching) > 1:
            logger.warning(
                "Service %s has %d versions of %s bound; using %s",
                service, len(matching), name, matching[0],
            )
        return matching[0] if matching else None
