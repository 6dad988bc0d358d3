"""
Use-case: look up the most recently committed version of a logical secret.
Depends only on Domain ports and entities; no infrastructure imports.
"""

from swarm_rotate.application.services.secret_catalog import SecretCatalog
from swarm_rotate.domain.entities.secret_version import SecretVersionId, validate_name
from swarm_rotate.domain.errors import SecretNotFound


class GetLatestSecretUseCase:
    def __init__(self, catalog: SecretCatalog) -> None:
        self._catalog = catalog

    def execute(self, name: str) -> SecretVersionId:
        """Raises SecretNotFound if *name* has never been committed."""
        latest = self._catalog.latest(validate_name(name))
        if latest is None:
            raise SecretNotFound(name)
        return latest
