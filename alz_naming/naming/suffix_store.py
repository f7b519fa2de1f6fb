"""
Random Suffix Store

Generates and persists the random suffix used in globally unique resource
names. A suffix is assigned once per deployment and then read back on every
later run; it is never regenerated while its entry exists, since a new suffix
would rename (and so recreate) storage accounts and key vaults.

Assignment holds an exclusive ``fcntl.flock`` on ``<state file>.lock`` so
concurrent runs sharing one state file never drop each other's entries.

Public API:
    generate_suffix: Create a new random suffix
    SuffixStore: JSON-file backed suffix persistence
"""

import fcntl
import json
import os
import re
import secrets
import string
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import structlog

from ..exceptions import SuffixStateError

logger = structlog.get_logger(__name__)

__all__ = ["SuffixStore", "deployment_key", "generate_suffix"]

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SUFFIX_PATTERN = re.compile(r"^[a-z0-9]+$")
MIN_SUFFIX_LENGTH = 4
MAX_SUFFIX_LENGTH = 6
STATE_VERSION = 1


def generate_suffix(length: int = MAX_SUFFIX_LENGTH) -> str:
    """Generate a lowercase alphanumeric suffix.

    Raises:
        SuffixStateError: If ``length`` is outside the supported range
    """
    if not MIN_SUFFIX_LENGTH <= length <= MAX_SUFFIX_LENGTH:
        raise SuffixStateError(
            f"Suffix length must be between {MIN_SUFFIX_LENGTH} and "
            f"{MAX_SUFFIX_LENGTH}, got {length}"
        )
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def deployment_key(module: str, environment: str, location: str, service: str) -> str:
    """Build the key identifying one deployment in the state file."""
    parts = (module, environment, location, service)
    return "/".join(part.lower().replace(" ", "") for part in parts)


class SuffixStore:
    """
    Persists one random suffix per deployment key in a JSON state file.

    State file layout::

        {"version": 1, "suffixes": {"<key>": {"suffix": "ab12", "assigned_at": "..."}}}
    """

    def __init__(self, path: Path) -> None:
        """
        Initialize the suffix store.

        Args:
            path: Location of the JSON state file (created on first write)
        """
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._logger = logger.bind(component="SuffixStore", path=str(self.path))

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"version": STATE_VERSION, "suffixes": {}}

        try:
            with open(self.path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SuffixStateError(
                f"Suffix state file {self.path} is not valid JSON", cause=e
            ) from e
        except OSError as e:
            raise SuffixStateError(
                f"Cannot read suffix state file {self.path}", cause=e
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("suffixes"), dict):
            raise SuffixStateError(
                f"Suffix state file {self.path} has an unexpected layout"
            )
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".suffixes-")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SuffixStateError(
                f"Cannot write suffix state file {self.path}", cause=e
            ) from e

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold an exclusive lock on the sibling ``.lock`` file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(self.lock_path, os.O_CREAT | os.O_RDWR, 0o644)
        except OSError as e:
            raise SuffixStateError(
                f"Cannot open suffix lock file {self.lock_path}", cause=e
            ) from e

        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            self._logger.debug("Acquired suffix lock", fd=fd)
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

    def get(self, key: str) -> Optional[str]:
        """
        Return the assigned suffix for a deployment, or None if unassigned.

        Raises:
            SuffixStateError: If the stored value is not a valid suffix
        """
        return self._stored_suffix(self._read(), key)

    def _stored_suffix(self, data: Dict[str, Any], key: str) -> Optional[str]:
        entry = data["suffixes"].get(key)
        if entry is None:
            return None

        suffix = entry.get("suffix") if isinstance(entry, dict) else None
        if not isinstance(suffix, str) or not SUFFIX_PATTERN.match(suffix):
            raise SuffixStateError(
                f"Stored suffix for '{key}' is invalid: {suffix!r}",
                deployment_key=key,
                recovery_suggestion="Restore the state file from backup; do not regenerate",
            )
        return suffix

    def get_or_create(self, key: str, length: int = MAX_SUFFIX_LENGTH) -> str:
        """
        Return the suffix for a deployment, assigning one on first use.

        Args:
            key: Deployment key, see ``deployment_key``
            length: Length of a newly generated suffix

        Returns:
            str: The persisted suffix
        """
        existing = self.get(key)
        if existing is not None:
            return existing

        with self._locked():
            # another process may have assigned it while we waited
            data = self._read()
            existing = self._stored_suffix(data, key)
            if existing is not None:
                return existing

            suffix = generate_suffix(length)
            data["suffixes"][key] = {
                "suffix": suffix,
                "assigned_at": datetime.now(timezone.utc).isoformat(),
            }
            data["version"] = STATE_VERSION
            self._write(data)

        self._logger.info("suffix_assigned", deployment_key=key, suffix=suffix)
        return suffix

    def list_suffixes(self) -> Dict[str, str]:
        """Return all assigned suffixes keyed by deployment key."""
        return {
            key: entry.get("suffix", "")
            for key, entry in self._read()["suffixes"].items()
            if isinstance(entry, dict)
        }
