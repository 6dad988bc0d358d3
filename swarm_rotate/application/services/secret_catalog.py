"""
Application service: query committed secret versions by logical name.

The catalog never caches: every call re-reads the secret store, so two calls in
the same process may observe changes made by another operator in between.
Secrets in the store that do not follow the versioned naming convention are
not ours and are skipped.
"""

import logging
from typing import Iterator, Optional

from swarm_rotate.domain.entities.secret_version import SecretVersionId, sort_by_recency
from swarm_rotate.domain.ports.secret_store_port import ISecretStore

logger = logging.getLogger(__name__)


class SecretCatalog:
    def __init__(self, store: ISecretStore) -> None:
        self._store = store

    def list_all(self) -> Iterator[SecretVersionId]:
        for raw in self._store.list():
            secret_id = SecretVersionId.try_decode(raw)
            if secret_id is None:
                logger.debug("Skipping unversioned secret %r", raw)
                continue
            yield secret_id

    def list_for(self, name: str) -> list[SecretVersionId]:
        """All versions of *name*, most recent first."""
        return sort_by_recency(s for s in self.list_all() if s.matches(name))

    def latest(self, name: str) -> Optional[SecretVersionId]:
        versions = self.list_for(name)
        return versions[0] if versions else None

    def outdated(self, name: str) -> list[SecretVersionId]:
        return self.list_for(name)[1:]

    def exists(self, name: str) -> bool:
        return bool(self.list_for(name))
