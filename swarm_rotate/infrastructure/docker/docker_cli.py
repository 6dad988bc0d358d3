"""
Thin subprocess wrapper around the docker command-line client.

All docker-specific process handling is confined here; the secret store and
service adapters only build argument lists. Every failure (missing binary,
timeout, nonzero exit) is raised as ExternalCommandError carrying docker's own
diagnostic text.
"""

import logging
import os
import subprocess
from typing import Optional

from swarm_rotate.domain.errors import ExternalCommandError

logger = logging.getLogger(__name__)


class DockerCLI:
    def __init__(
        self,
        binary: str = "docker",
        host: Optional[str] = None,
        timeout: float = 120.0,
    ) -> None:
        self._binary = binary
        self._host = host
        self._timeout = timeout

    def run(self, *args: str, stdin_data: Optional[bytes] = None) -> str:
        """Run ``docker <args>`` and return its decoded stdout."""
        cmd = [self._binary, *args]
        env = {**os.environ, "DOCKER_HOST": self._host} if self._host else None
        stdin = {"input": stdin_data} if stdin_data is not None else {"stdin": subprocess.DEVNULL}
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                timeout=self._timeout,
                env=env,
                **stdin,
            )
        except FileNotFoundError as exc:
            raise ExternalCommandError(f"command not found: {self._binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ExternalCommandError(
                f"{' '.join(cmd[:3])} timed out after {self._timeout:g}s"
            ) from exc
        except subprocess.CalledProcessError as exc:
            err = (exc.stderr or b"").decode("utf-8", "replace").strip()
            raise ExternalCommandError(err or f"{cmd[0]} exited with status {exc.returncode}") from exc
        return proc.stdout.decode("utf-8", "replace")
