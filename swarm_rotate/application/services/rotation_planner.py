"""
Application service: turn rotation requests for one service into bind/unbind operations.

Business rules owned here:
  - Add binds the latest version of a name the service does not mount yet.
  - Remove unbinds the version the service currently mounts.
  - Update does both, and refuses when the mounted version already is the latest.
  - Every request is resolved before anything is returned. A single failing
    request aborts the whole plan, so the service is never left with a name
    bound to zero or two versions halfway through a rotation.

Catalog and binding queries are injected; no orchestrator details appear here.
"""

import logging
from typing import Sequence

from swarm_rotate.application.services.secret_catalog import SecretCatalog
from swarm_rotate.application.services.service_bindings import ServiceBindings
from swarm_rotate.domain.entities.rotation import (
    BindOperation,
    Operation,
    RotationAction,
    RotationPlan,
    RotationRequest,
    UnbindOperation,
)
from swarm_rotate.domain.entities.secret_version import SecretVersionId, validate_name
from swarm_rotate.domain.errors import (
    ActiveSecretNotFound,
    AlreadyLatest,
    DuplicateSecretRequest,
    MissingArgument,
    SecretAlreadyBound,
    SecretNotFound,
)

logger = logging.getLogger(__name__)


class RotationPlanner:
    def __init__(self, catalog: SecretCatalog, bindings: ServiceBindings) -> None:
        self._catalog = catalog
        self._bindings = bindings

    def plan(self, service: str, requests: Sequence[RotationRequest]) -> RotationPlan:
        """Resolve every request against the current store and service state.

        Args:
            service:  Service identifier understood by the orchestrator.
            requests: One request per logical secret name, in the order the
                      resulting operations should be emitted.

        Raises:
            MissingArgument:        if *service* is blank or *requests* is empty.
            DuplicateSecretRequest: if a name appears in more than one request.
            SecretNotFound:         Add/Update of a name with no committed version.
            ActiveSecretNotFound:   Remove/Update of a name the service does not mount.
            SecretAlreadyBound:     Add of a name the service already mounts.
            AlreadyLatest:          Update of a name whose mounted version is the latest.
        """
        if not service or not service.strip():
            raise MissingArgument("a service name is required")
        if not requests:
            raise MissingArgument("at least one secret is required")

        seen: set[str] = set()
        for request in requests:
            validate_name(request.name)
            if request.name in seen:
                raise DuplicateSecretRequest(request.name)
            seen.add(request.name)

        operations: list[Operation] = []
        for request in requests:
            operations.extend(self._resolve(service, request))

        plan = RotationPlan(service=service, operations=tuple(operations))
        logger.debug("Planned %d operations for %s: %s", len(operations), service, plan)
        return plan

    def _resolve(self, service: str, request: RotationRequest) -> list[Operation]:
        if request.action is RotationAction.ADD:
            latest = self._require_latest(request.name)
            active = self._bindings.active_for(service, request.name)
            if active is not None:
                raise SecretAlreadyBound(service, str(active))
            return [BindOperation(source=latest, target=request.name, mount=request.mount)]

        if request.action is RotationAction.REMOVE:
            active = self._require_active(service, request.name)
            return [UnbindOperation(secret_id=active)]

        latest = self._require_latest(request.name)
        active = self._require_active(service, request.name)
        if active == latest:
            raise AlreadyLatest(service, str(active))
        return [
            UnbindOperation(secret_id=active),
            BindOperation(source=latest, target=request.name, mount=request.mount),
        ]

    def _require_latest(self, name: str) -> SecretVersionId:
        latest = self._catalog.latest(name)
        if latest is None:
            raise SecretNotFound(name)
        return latest

    def _require_active(self, service: str, name: str) -> SecretVersionId:
        active = self._bindings.active_for(service, name)
        if active is None:
            raise ActiveSecretNotFound(service, name)
        return active
