"""
Infrastructure adapter: docker swarm services → IServiceOrchestrator.

Bound secrets are read from the service's task template. A rotation plan is
translated into a single ``docker service update`` carrying every
``--secret-rm`` and ``--secret-add`` flag, so swarm applies it as one update.
"""

import json
from typing import Sequence

from swarm_rotate.domain.entities.rotation import BindOperation, Operation, UnbindOperation
from swarm_rotate.domain.errors import ExternalCommandError
from swarm_rotate.domain.ports.service_port import IServiceOrchestrator
from swarm_rotate.infrastructure.docker.docker_cli import DockerCLI

_SECRETS_FORMAT = "{{json .Spec.TaskTemplate.ContainerSpec.Secrets}}"


class DockerServiceOrchestrator(IServiceOrchestrator):
    """Inspects and updates swarm services through the docker CLI."""

    def __init__(self, docker: DockerCLI, detach: bool = False) -> None:
        self._docker = docker
        self._detach = detach

    def inspect_secrets(self, service: str) -> list[str]:
        output = self._docker.run("service", "inspect", "--format", _SECRETS_FORMAT, service)
        try:
            secrets = json.loads(output.strip() or "null") or []
        except json.JSONDecodeError as exc:
            raise ExternalCommandError(f"unexpected inspect output for {service}: {exc}") from exc
        return [entry["SecretName"] for entry in secrets if entry.get("SecretName")]

    def update(self, service: str, operations: Sequence[Operation]) -> None:
        self._docker.run(*self.update_args(service, operations))

    def update_args(self, service: str, operations: Sequence[Operation]) -> list[str]:
        """Build the argument list of the ``docker service update`` call."""
        args = ["service", "update"]
        if self._detach:
            args.append("--detach")
        for op in operations:
            if isinstance(op, UnbindOperation):
                args += ["--secret-rm", op.secret_id.encode()]
            elif isinstance(op, BindOperation):
                args += ["--secret-add", self._secret_spec(op)]
        args.append(service)
        return args

    @staticmethod
    def _secret_spec(op: BindOperation) -> str:
        return (
            f"source={op.source.encode()},target={op.target},"
            f"uid={op.mount.uid},gid={op.mount.gid},mode={op.mount.octal_mode}"
        )
