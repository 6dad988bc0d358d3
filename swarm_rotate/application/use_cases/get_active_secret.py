"""
Use-case: look up which version of a logical secret a service currently mounts.
Depends only on Domain ports and entities; no infrastructure imports.
"""

from swarm_rotate.application.services.service_bindings import ServiceBindings
from swarm_rotate.domain.entities.secret_version import SecretVersionId, validate_name
from swarm_rotate.domain.errors import ActiveSecretNotFound, MissingArgument


class GetActiveSecretUseCase:
    def __init__(self, bindings: ServiceBindings) -> None:
        self._bindings = bindings

    def execute(self, service: str, name: str) -> SecretVersionId:
        if not service or not service.strip():
            raise MissingArgument("a service name is required")
        active = self._bindings.active_for(service, validate_name(name))
        if active is None:
            raise ActiveSecretNotFound(service, name)
        return active
