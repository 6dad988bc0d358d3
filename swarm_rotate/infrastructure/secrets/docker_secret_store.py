"""
Infrastructure adapter: docker swarm secrets → ISecretStore.

Content is piped to ``docker secret create`` on stdin so it never touches the
filesystem or the process arguments.
"""

from swarm_rotate.domain.ports.secret_store_port import ISecretStore
from swarm_rotate.infrastructure.docker.docker_cli import DockerCLI


class DockerSecretStore(ISecretStore):
    """Lists, creates and removes swarm secrets through the docker CLI."""

    def __init__(self, docker: DockerCLI) -> None:
        self._docker = docker

    def list(self) -> list[str]:
        output = self._docker.run("secret", "ls", "--format", "{{.Name}}")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def create(self, secret_id: str, content: bytes) -> None:
        self._docker.run("secret", "create", secret_id, "-", stdin_data=content)

    def delete(self, secret_id: str) -> None:
        self._docker.run("secret", "rm", secret_id)
