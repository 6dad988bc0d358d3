"""
Port (interface) for the orchestrator's secret store.
Infrastructure adapters (e.g. DockerSecretStore) must implement this interface.

Secret contents are write-only: the store can list, create and delete secrets
but never hands their content back.
"""

from abc import ABC, abstractmethod


class ISecretStore(ABC):
    @abstractmethod
    def list(self) -> list[str]:
        """Return the name of every secret currently stored, in store order."""
        ...

    @abstractmethod
    def create(self, secret_id: str, content: bytes) -> None:
        """Store *content* under *secret_id*.

        Raises:
            ExternalCommandError: if the store rejects the secret (e.g. duplicate id).
        """
        ...

    @abstractmethod
    def delete(self, secret_id: str) -> None:
        """Remove *secret_id* from the store.

        Raises:
            ExternalCommandError: if the store refuses (e.g. the secret is in use).
        """
        ...
