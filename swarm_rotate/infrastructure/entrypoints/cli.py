"""
Command-line entry point: ``swarm-rotate``.

This module is the Composition Root: it reads Settings, wires the docker
adapters to the application use-cases, and turns domain errors into a single
``Error: ...`` line on stderr plus a nonzero exit status.

    swarm-rotate commit ./db-password          # -> 1700000000-db-password
    swarm-rotate update api -s db-password     # rebind api to the latest version
    swarm-rotate clean db-password             # drop every version but the latest
"""

import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import click
from pydantic import ValidationError

from swarm_rotate.application.services.rotation_planner import RotationPlanner
from swarm_rotate.application.services.secret_catalog import SecretCatalog
from swarm_rotate.application.services.service_bindings import ServiceBindings
from swarm_rotate.application.use_cases.cleanup_secrets import CleanupMode, CleanupSecretsUseCase
from swarm_rotate.application.use_cases.commit_secret import CommitSecretUseCase
from swarm_rotate.application.use_cases.get_active_secret import GetActiveSecretUseCase
from swarm_rotate.application.use_cases.get_latest_secret import GetLatestSecretUseCase
from swarm_rotate.application.use_cases.rotate_service_secrets import RotateServiceSecretsUseCase
from swarm_rotate.domain.entities.rotation import (
    DEFAULT_MODE,
    BindOperation,
    RotationAction,
    RotationPlan,
    RotationRequest,
    SecretMount,
)
from swarm_rotate.domain.errors import RotationError, StoreDeleteFailed
from swarm_rotate.domain.ports.secret_store_port import ISecretStore
from swarm_rotate.domain.ports.service_port import IServiceOrchestrator
from swarm_rotate.infrastructure.config.settings import Settings, load_settings
from swarm_rotate.infrastructure.docker.docker_cli import DockerCLI
from swarm_rotate.infrastructure.secrets.docker_secret_store import DockerSecretStore
from swarm_rotate.infrastructure.services.docker_service_adapter import DockerServiceOrchestrator

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


# ---------------------------------------------------------------------------
# Composition Root
# ---------------------------------------------------------------------------
@dataclass
class App:
    store: ISecretStore
    orchestrator: IServiceOrchestrator
    clock: Callable[[], float] = field(default=time.time)

    @classmethod
    def from_settings(cls, settings: Settings) -> "App":
        docker = DockerCLI(
            binary=settings.docker_bin,
            host=settings.docker_host,
            timeout=settings.timeout,
        )
        return cls(
            store=DockerSecretStore(docker),
            orchestrator=DockerServiceOrchestrator(docker, detach=settings.detach),
        )

    @property
    def catalog(self) -> SecretCatalog:
        return SecretCatalog(self.store)

    @property
    def bindings(self) -> ServiceBindings:
        return ServiceBindings(self.orchestrator)

    def commit(self) -> CommitSecretUseCase:
        return CommitSecretUseCase(self.store, clock=self.clock)

    def cleanup(self) -> CleanupSecretsUseCase:
        return CleanupSecretsUseCase(self.catalog, self.store)

    def latest(self) -> GetLatestSecretUseCase:
        return GetLatestSecretUseCase(self.catalog)

    def active(self) -> GetActiveSecretUseCase:
        return GetActiveSecretUseCase(self.bindings)

    def rotate(self) -> RotateServiceSecretsUseCase:
        planner = RotationPlanner(self.catalog, self.bindings)
        return RotateServiceSecretsUseCase(planner, self.orchestrator)


# ---------------------------------------------------------------------------
# Error reporting
# ---------------------------------------------------------------------------
class CommandFailed(click.ClickException):
    def __init__(self, error: RotationError) -> None:
        super().__init__(str(error))
        self.exit_code = error.exit_code


class RotationGroup(click.Group):
    """Reports any RotationError raised by a subcommand as one stderr line."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except RotationError as exc:
            logger.debug("Command failed", exc_info=True)
            raise CommandFailed(exc) from exc


class OctalMode(click.ParamType):
    name = "octal"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            mode = int(value, 8)
        except ValueError:
            self.fail(f"{value!r} is not an octal file mode", param, ctx)
        if not 0 <= mode <= 0o777:
            self.fail(f"{value!r} is out of range 0000-0777", param, ctx)
        return mode


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@click.group(cls=RotationGroup, context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", is_flag=True, help="Log every docker call to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Commit, rotate and clean up versioned docker swarm secrets."""
    try:
        settings = load_settings()
    except ValidationError as exc:
        err = exc.errors()[0]
        location = ".".join(str(part) for part in err["loc"])
        raise click.ClickException(f"invalid configuration {location}: {err['msg']}") from exc

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if ctx.obj is None:
        ctx.obj = App.from_settings(settings)


@cli.command("commit")
@click.argument("source")
@click.option("-n", "--name", help="Logical secret name (default: file name; required for '-').")
@click.pass_obj
def cmd_commit(app: App, source: str, name: Optional[str]) -> None:
    """Store SOURCE (a file, or '-' for stdin) as a new secret version."""
    stdin = click.get_binary_stream("stdin")
    click.echo(str(app.commit().execute(source, name=name, stdin=stdin)))


def _cleanup(app: App, names: tuple[str, ...], mode: CleanupMode) -> None:
    try:
        for result in app.cleanup().execute(names, mode):
            if result.notice:
                click.echo(result.notice, err=True)
            for secret_id in result.deleted:
                click.echo(str(secret_id))
    except StoreDeleteFailed as exc:
        for secret_id in exc.deleted:
            click.echo(str(secret_id))
        raise


@cli.command("clean")
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def cmd_clean(app: App, names: tuple[str, ...]) -> None:
    """Delete every version of NAMES except the latest."""
    _cleanup(app, names, CleanupMode.ONLY_OUTDATED)


@cli.command("purge")
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def cmd_purge(app: App, names: tuple[str, ...]) -> None:
    """Delete every version of NAMES, including the latest."""
    _cleanup(app, names, CleanupMode.ALL)


@cli.command("latest")
@click.argument("name")
@click.pass_obj
def cmd_latest(app: App, name: str) -> None:
    """Print the most recent version of NAME."""
    click.echo(str(app.latest().execute(name)))


@cli.command("active")
@click.argument("service")
@click.argument("name")
@click.pass_obj
def cmd_active(app: App, service: str, name: str) -> None:
    """Print the version of NAME that SERVICE currently mounts."""
    click.echo(str(app.active().execute(service, name)))


def _secret_option(f):
    return click.option(
        "-s", "--secret", "secrets", multiple=True, metavar="NAME",
        help="Logical secret name (repeatable).",
    )(f)


def _verify_option(f):
    return click.option(
        "--verify", is_flag=True,
        help="Re-check the store and service right before updating.",
    )(f)


def _mount_options(f):
    f = click.option(
        "--mode", type=OctalMode(), default=f"{DEFAULT_MODE:04o}", show_default=True,
        help="File mode of mounted secrets.",
    )(f)
    f = click.option("-g", "--gid", type=click.IntRange(min=0), default=0, show_default=True)(f)
    f = click.option("-u", "--uid", type=click.IntRange(min=0), default=0, show_default=True)(f)
    f = click.option(
        "-x", "--self-secret", "self_secrets", multiple=True, metavar="NAME",
        help="Logical secret name mounted with mode 0600 (repeatable).",
    )(f)
    return f


def _requests(
    action: RotationAction,
    secrets: tuple[str, ...],
    self_secrets: tuple[str, ...] = (),
    uid: int = 0,
    gid: int = 0,
    mode: int = DEFAULT_MODE,
) -> list[RotationRequest]:
    mount = SecretMount(uid=uid, gid=gid, mode=mode)
    restricted = SecretMount.restricted(uid=uid, gid=gid)
    return [RotationRequest(name, action, mount) for name in secrets] + [
        RotationRequest(name, action, restricted) for name in self_secrets
    ]


def _report(plan: RotationPlan) -> None:
    for op in plan.operations:
        if isinstance(op, BindOperation):
            click.echo(f"+ {op.source} -> {op.target}")
        else:
            click.echo(f"- {op.secret_id}")


@cli.command("add")
@click.argument("service")
@_secret_option
@_mount_options
@_verify_option
@click.pass_obj
def cmd_add(app: App, service: str, secrets, self_secrets, uid, gid, mode, verify) -> None:
    """Bind the latest version of each secret to SERVICE."""
    requests = _requests(RotationAction.ADD, secrets, self_secrets, uid, gid, mode)
    _report(app.rotate().execute(service, requests, verify=verify))


@cli.command("update")
@click.argument("service")
@_secret_option
@_mount_options
@_verify_option
@click.pass_obj
def cmd_update(app: App, service: str, secrets, self_secrets, uid, gid, mode, verify) -> None:
    """Replace each secret's bound version on SERVICE with its latest version."""
    requests = _requests(RotationAction.UPDATE, secrets, self_secrets, uid, gid, mode)
    _report(app.rotate().execute(service, requests, verify=verify))


@cli.command("rm")
@click.argument("service")
@_secret_option
@_verify_option
@click.pass_obj
def cmd_rm(app: App, service: str, secrets, verify) -> None:
    """Unbind each secret's active version from SERVICE."""
    requests = _requests(RotationAction.REMOVE, secrets)
    _report(app.rotate().execute(service, requests, verify=verify))


def main() -> None:
    cli(prog_name="swarm-rotate")


if __name__ == "__main__":
    main()
