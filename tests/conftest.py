import pytest

from swarm_rotate.application.services.rotation_planner import RotationPlanner
from swarm_rotate.application.services.secret_catalog import SecretCatalog
from swarm_rotate.application.services.service_bindings import ServiceBindings
from swarm_rotate.domain.entities.rotation import UnbindOperation
from swarm_rotate.domain.errors import ExternalCommandError
from swarm_rotate.domain.ports.secret_store_port import ISecretStore
from swarm_rotate.domain.ports.service_port import IServiceOrchestrator


class InMemorySecretStore(ISecretStore):
    """Secret store double that keeps insertion order, like `docker secret ls`."""

    def __init__(self, ids=()):
        self.secrets = {secret_id: b"" for secret_id in ids}
        self.delete_errors = {}
        self.deleted = []
        self.list_calls = 0

    def list(self):
        self.list_calls += 1
        return [secret_id for secret_id in self.secrets]

    def create(self, secret_id, content):
        if secret_id in self.secrets:
            raise ExternalCommandError(f"secret {secret_id} already exists")
        self.secrets[secret_id] = content

    def delete(self, secret_id):
        if secret_id in self.delete_errors:
            raise ExternalCommandError(self.delete_errors[secret_id])
        del self.secrets[secret_id]
        self.deleted.append(secret_id)


class InMemoryOrchestrator(IServiceOrchestrator):
    """Service double applying bind/unbind batches to a dict of mounted names."""

    def __init__(self, bound=None):
        self.bound = {service: [*names] for service, names in (bound or {}).items()}
        self.updates = []
        self.update_error = None

    def inspect_secrets(self, service):
        if service not in self.bound:
            raise ExternalCommandError(f"no such service: {service}")
        return [*self.bound[service]]

    def update(self, service, operations):
        if self.update_error:
            raise ExternalCommandError(self.update_error)
        self.updates.append((service, tuple(operations)))
        mounted = self.bound.setdefault(service, [])
        for op in operations:
            if isinstance(op, UnbindOperation):
                mounted.remove(op.secret_id.encode())
            else:
                mounted.append(op.source.encode())


@pytest.fixture
def store():
    return InMemorySecretStore()


@pytest.fixture
def orchestrator():
    return InMemoryOrchestrator({"svc1": []})


@pytest.fixture
def catalog(store):
    return SecretCatalog(store)


@pytest.fixture
def bindings(orchestrator):
    return ServiceBindings(orchestrator)


@pytest.fixture
def planner(catalog, bindings):
    return RotationPlanner(catalog, bindings)
