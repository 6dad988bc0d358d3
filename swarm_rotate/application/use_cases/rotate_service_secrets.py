"""
Use-case: add, update or remove secrets on a service in a single service update.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import logging
from typing import Sequence

from swarm_rotate.application.services.rotation_planner import RotationPlanner
from swarm_rotate.domain.entities.rotation import RotationPlan, RotationRequest
from swarm_rotate.domain.errors import (
    ConcurrentRotation,
    ExternalCommandError,
    ServiceUpdateFailed,
)
from swarm_rotate.domain.ports.service_port import IServiceOrchestrator

logger = logging.getLogger(__name__)


class RotateServiceSecretsUseCase:
    def __init__(self, planner: RotationPlanner, orchestrator: IServiceOrchestrator) -> None:
        self._planner = planner
        self._orchestrator = orchestrator

    def execute(
        self,
        service: str,
        requests: Sequence[RotationRequest],
        verify: bool = False,
    ) -> RotationPlan:
        """Plan *requests* and submit the result as one orchestrator update.

        Args:
            service:  Service to rotate secrets on.
            requests: One RotationRequest per logical secret name.
            verify:   Re-plan right before the update and abort if the store or
                      the service changed in between.

        Returns:
            The plan that was applied.

        Raises:
            Any planning error (see RotationPlanner.plan); nothing is mutated.
            ConcurrentRotation:  with *verify*, if the state changed while planning.
            ServiceUpdateFailed: if the orchestrator rejects the update.
        """
        plan = self._planner.plan(service, requests)

        if verify and self._planner.plan(service, requests) != plan:
            raise ConcurrentRotation(service)

        try:
            self._orchestrator.update(service, plan.operations)
        except ExternalCommandError as exc:
            raise ServiceUpdateFailed(service, exc.message) from exc

        logger.info(
            "Updated %s: bound %s, unbound %s",
            service,
            [str(op.source) for op in plan.binds],
            [str(op.secret_id) for op in plan.unbinds],
        )
        return plan
