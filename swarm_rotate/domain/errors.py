"""
Domain errors for secret versioning and rotation.
Zero external dependencies.

Every error is fatal to the current command. Errors that wrap a failed call to
the orchestrator keep the orchestrator's diagnostic text verbatim in
``message``.
"""


class RotationError(Exception):
    """Base class for every failure a rotation command can report."""

    exit_code: int = 1


class MissingArgument(RotationError):
    pass


class InvalidSecretName(RotationError, ValueError):
    pass


class InvalidSecretVersionId(RotationError, ValueError):
    pass


class DuplicateSecretRequest(RotationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"secret {name!r} requested more than once")
        self.name = name


class FileNotFound(RotationError):
    def __init__(self, path: str) -> None:
        super().__init__(f"file not found or not readable: {path}")
        self.path = path


class SecretNotFound(RotationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"no committed secret named {name!r}")
        self.name = name


class ActiveSecretNotFound(RotationError):
    def __init__(self, service: str, name: str) -> None:
        super().__init__(f"service {service!r} has no active secret named {name!r}")
        self.service = service
        self.name = name


class SecretAlreadyBound(RotationError):
    def __init__(self, service: str, secret_id: str) -> None:
        super().__init__(f"service {service!r} already has {secret_id} bound")
        self.service = service
        self.secret_id = secret_id


class AlreadyLatest(RotationError):
    """The bound version already is the latest one; nothing to update."""

    exit_code = 3

    def __init__(self, service: str, secret_id: str) -> None:
        super().__init__(f"service {service!r} already uses the latest version {secret_id}")
        self.service = service
        self.secret_id = secret_id


class ConcurrentRotation(RotationError):
    def __init__(self, service: str) -> None:
        super().__init__(
            f"secrets of service {service!r} changed while planning; retry the command"
        )
        self.service = service


class ExternalCommandError(RotationError):
    """Raised by infrastructure adapters when the orchestrator rejects a call."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StoreCreateFailed(RotationError):
    def __init__(self, secret_id: str, message: str) -> None:
        super().__init__(f"failed to create secret {secret_id}: {message}")
        self.secret_id = secret_id
        self.message = message


class StoreDeleteFailed(RotationError):
    """``deleted`` holds the versions of the same name removed before the failure."""

    def __init__(self, secret_id: str, message: str, deleted: tuple = ()) -> None:
        super().__init__(f"failed to delete secret {secret_id}: {message}")
        self.secret_id = secret_id
        self.message = message
        self.deleted = deleted


class ServiceUpdateFailed(RotationError):
    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"failed to update service {service!r}: {message}")
        self.service = service
        self.message = message
