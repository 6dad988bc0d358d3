"""
Use-case: delete outdated (clean) or all (purge) versions of logical secrets.
Depends only on Domain ports and entities; no infrastructure imports.

Every name is checked before anything is deleted. Deletion itself is
best-effort and not atomic: the first failing delete stops the command, and
versions deleted before it stay deleted.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from swarm_rotate.application.services.secret_catalog import SecretCatalog
from swarm_rotate.domain.entities.secret_version import SecretVersionId, validate_name
from swarm_rotate.domain.errors import (
    ExternalCommandError,
    MissingArgument,
    SecretNotFound,
    StoreDeleteFailed,
)
from swarm_rotate.domain.ports.secret_store_port import ISecretStore

logger = logging.getLogger(__name__)


class CleanupMode(str, Enum):
    ONLY_OUTDATED = "outdated"
    ALL = "all"


@dataclass(frozen=True)
class CleanupResult:
    name: str
    deleted: tuple[SecretVersionId, ...]
    notice: Optional[str] = None


class CleanupSecretsUseCase:
    def __init__(self, catalog: SecretCatalog, store: ISecretStore) -> None:
        self._catalog = catalog
        self._store = store

    def execute(self, names: Iterable[str], mode: CleanupMode) -> Iterator[CleanupResult]:
        """Delete versions of every name in *names*.

        Names are checked when execute() is called. Deletion happens while the
        returned iterator is consumed, one name per step, so each result can be
        reported before the next name is touched.

        Yields:
            One CleanupResult per distinct name, in the order given. A name with
            nothing to delete carries a notice instead of failing.

        Raises:
            MissingArgument:   if *names* is empty.
            SecretNotFound:    if any name has no committed version; nothing is deleted.
            StoreDeleteFailed: on the first delete the store rejects.
        """
        names = [validate_name(name) for name in dict.fromkeys(names)]
        if not names:
            raise MissingArgument("at least one secret name is required")

        for name in names:
            if not self._catalog.exists(name):
                raise SecretNotFound(name)

        return (self._cleanup(name, mode) for name in names)

    def _cleanup(self, name: str, mode: CleanupMode) -> CleanupResult:
        if mode is CleanupMode.ALL:
            doomed = self._catalog.list_for(name)
        else:
            doomed = self._catalog.outdated(name)

        if not doomed:
            notice = f"nothing to clean for {name}: only the latest version exists"
            logger.info(notice)
            return CleanupResult(name=name, deleted=(), notice=notice)

        deleted: list[SecretVersionId] = []
        for secret_id in doomed:
            try:
                self._store.delete(secret_id.encode())
            except ExternalCommandError as exc:
                raise StoreDeleteFailed(
                    secret_id.encode(), exc.message, deleted=tuple(deleted)
                ) from exc
            deleted.append(secret_id)
            logger.info("Deleted %s", secret_id)
        return CleanupResult(name=name, deleted=tuple(deleted))
