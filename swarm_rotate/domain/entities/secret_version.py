"""
Domain entity for a committed secret version and its naming convention.
Zero external dependencies: pure Python dataclass only.

A version id is serialized as ``"<timestamp>-<name>"``. The timestamp is a
decimal without leading zeros and the first hyphen after it is the delimiter,
so decoding and re-encoding always gives back the exact stored name, and the
logical name may itself contain hyphens and digits:

    >>> SecretVersionId.decode("100-db-2-pass")
    SecretVersionId(timestamp=100, name='db-2-pass')

Ordering is by timestamp, most recent first. Two versions committed within the
same second compare equal; sorting is stable, so such ties keep the order in
which the store listed them.
"""

import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Optional

from swarm_rotate.domain.errors import InvalidSecretName, InvalidSecretVersionId

DELIMITER = "-"
MAX_ID_LENGTH = 64

_NAME_RE = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9_.-]*[A-Za-z0-9])?")
_ID_RE = re.compile(r"(?P<timestamp>0|[1-9][0-9]*)-(?P<name>.+)")


def validate_name(name: str) -> str:
    """Return *name* unchanged if it can be used as a logical secret name.

    Raises:
        InvalidSecretName: if the name contains characters the orchestrator
                           rejects or is too long to carry a timestamp prefix.
    """
    if not name or not _NAME_RE.fullmatch(name):
        raise InvalidSecretName(f"invalid secret name: {name!r}")
    # Leave room for a ten digit timestamp and the delimiter.
    if len(name) > MAX_ID_LENGTH - 11:
        raise InvalidSecretName(f"secret name too long: {name!r}")
    return name


def logical_name_from_path(path: str) -> str:
    """The logical name of a secret committed from a file is its final path component."""
    return validate_name(PurePath(path).name)


@dataclass(frozen=True)
class SecretVersionId:
    timestamp: int
    name: str

    def __post_init__(self) -> None:
        if self.timestamp < 0:
            raise InvalidSecretVersionId(f"negative timestamp: {self.timestamp}")
        validate_name(self.name)

    def __str__(self) -> str:
        return self.encode()

    def encode(self) -> str:
        return f"{self.timestamp}{DELIMITER}{self.name}"

    @classmethod
    def decode(cls, text: str) -> "SecretVersionId":
        """Parse a serialized version id.

        Raises:
            InvalidSecretVersionId: if *text* does not follow the naming convention.
        """
        match = _ID_RE.fullmatch(text)
        if match is None:
            raise InvalidSecretVersionId(f"not a versioned secret id: {text!r}")
        try:
            return cls(timestamp=int(match["timestamp"]), name=match["name"])
        except InvalidSecretName as exc:
            raise InvalidSecretVersionId(f"not a versioned secret id: {text!r}") from exc

    @classmethod
    def try_decode(cls, text: str) -> Optional["SecretVersionId"]:
        try:
            return cls.decode(text)
        except InvalidSecretVersionId:
            return None

    def matches(self, name: str) -> bool:
        """True iff this version belongs to logical secret *name* (exact match)."""
        return self.name == name

    @property
    def recency_key(self) -> int:
        """Sort key placing the most recent version first."""
        return -self.timestamp


def sort_by_recency(ids: Iterable[SecretVersionId]) -> list[SecretVersionId]:
    """Most recent first; equal timestamps keep their input order."""
    return sorted(ids, key=lambda secret_id: secret_id.recency_key)
