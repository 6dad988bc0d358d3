"""
Domain entities for planning secret rotations on a service.
Zero external dependencies: pure Python dataclasses only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from swarm_rotate.domain.entities.secret_version import SecretVersionId

DEFAULT_MODE = 0o644
RESTRICTED_MODE = 0o600


class RotationAction(str, Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


@dataclass(frozen=True)
class SecretMount:
    """Mount metadata supplied at bind time. Never read back from the service."""

    uid: int = 0
    gid: int = 0
    mode: int = DEFAULT_MODE

    @classmethod
    def restricted(cls, uid: int = 0, gid: int = 0) -> "SecretMount":
        """Mount for a self-secret: owner read/write only, whatever mode was requested."""
        return cls(uid=uid, gid=gid, mode=RESTRICTED_MODE)

    @property
    def octal_mode(self) -> str:
        return f"{self.mode:04o}"


@dataclass(frozen=True)
class RotationRequest:
    name: str
    action: RotationAction
    mount: SecretMount = field(default_factory=SecretMount)


@dataclass(frozen=True)
class BindOperation:
    source: SecretVersionId
    target: str
    mount: SecretMount


@dataclass(frozen=True)
class UnbindOperation:
    secret_id: SecretVersionId


Operation = Union[BindOperation, UnbindOperation]


@dataclass(frozen=True)
class RotationPlan:
    service: str
    operations: tuple[Operation, ...]

    @property
    def binds(self) -> list[BindOperation]:
        return [op for op in self.operations if isinstance(op, BindOperation)]

    @property
    def unbinds(self) -> list[UnbindOperation]:
        return [op for op in self.operations if isinstance(op, UnbindOperation)]
