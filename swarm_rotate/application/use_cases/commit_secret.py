"""
Use-case: commit new secret content under a fresh, time-ordered version id.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import logging
import os
import sys
import time
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from swarm_rotate.domain.entities.secret_version import (
    SecretVersionId,
    logical_name_from_path,
    validate_name,
)
from swarm_rotate.domain.errors import (
    ExternalCommandError,
    FileNotFound,
    MissingArgument,
    StoreCreateFailed,
)
from swarm_rotate.domain.ports.secret_store_port import ISecretStore

logger = logging.getLogger(__name__)

STDIN_SOURCE = "-"


class CommitSecretUseCase:
    def __init__(self, store: ISecretStore, clock: Callable[[], float] = time.time) -> None:
        """
        Args:
            store: ISecretStore implementation (e.g. DockerSecretStore).
            clock: Returns seconds since the epoch; the version timestamp.
        """
        self._store = store
        self._clock = clock

    def execute(
        self,
        source: str,
        name: Optional[str] = None,
        stdin: Optional[BinaryIO] = None,
    ) -> SecretVersionId:
        """Read *source* and store it as the newest version of its logical name.

        Args:
            source: Path of a readable file, or "-" to read standard input.
            name:   Logical name override. Defaults to the file's final path
                    component; mandatory when reading standard input.
            stdin:  Stream used for "-" (defaults to the process's stdin).

        Raises:
            MissingArgument:   if reading stdin without a *name*.
            FileNotFound:      if *source* is not a readable file.
            InvalidSecretName: if the logical name is not a valid secret name.
            StoreCreateFailed: if the store rejects the secret (e.g. duplicate id).
        """
        if source == STDIN_SOURCE:
            if not name:
                raise MissingArgument("a secret name is required when reading standard input")
            name = validate_name(name)
            content = (stdin or sys.stdin.buffer).read()
        else:
            content = self._read_file(source)
            name = validate_name(name) if name else logical_name_from_path(source)

        secret_id = SecretVersionId(timestamp=int(self._clock()), name=name)
        try:
            self._store.create(secret_id.encode(), content)
        except ExternalCommandError as exc:
            raise StoreCreateFailed(secret_id.encode(), exc.message) from exc

        logger.info("Committed %s (%d bytes)", secret_id, len(content))
        return secret_id

    @staticmethod
    def _read_file(source: str) -> bytes:
        path = Path(source)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise FileNotFound(source)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileNotFound(source) from exc
