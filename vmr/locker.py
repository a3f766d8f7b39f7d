"""Per-project version locks stored in a .vmr.lock file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from . import layout

LOCKER_FILE_NAME = ".vmr.lock"
_NODE_ALIASES = ("nodejs", "node.js")


@dataclass
class VersionLocker:
    """SDK versions locked for a project, keyed by SDK name."""

    versions: dict[str, str] = field(default_factory=dict)

    def find_locker_file(self, dir_path: str | Path | None = None) -> Path | None:
        """Search the directory and its parents for a lock file.

        The search starts at the working directory when none is given and
        stops below the filesystem root.
        """
        current = Path(dir_path) if dir_path is not None else Path.cwd()
        while current != current.parent:
            candidate = current / LOCKER_FILE_NAME
            if candidate.exists():
                return candidate
            current = current.parent
        return None

    def _merge_file(self, path: Path) -> None:
        try:
            content = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError):
            return
        if content and "{" not in content:
            # Older lock files hold a single "name@version" entry.
            parts = content.split("@")
            if len(parts) == 2:
                self.versions[parts[0]] = parts[1]
            return
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            return
        if isinstance(data, dict):
            self.versions.update(
                {key: value for key, value in data.items() if isinstance(value, str)}
            )

    def load(self) -> None:
        """Read the lock file found from the working directory upwards."""
        path = self.find_locker_file()
        if path is None:
            return
        self._merge_file(path)
        for key, value in list(self.versions.items()):
            if key in _NODE_ALIASES:
                self.versions["node"] = value

    def save(self, sdk_name: str, version_name: str) -> Path:
        """Record a version and write the lock file; returns its path.

        An existing lock file above the working directory is updated;
        otherwise a new one is created in the working directory.
        """
        path = self.find_locker_file()
        if path is not None:
            self._merge_file(path)
        else:
            path = Path.cwd() / LOCKER_FILE_NAME
        if sdk_name and version_name:
            self.versions[sdk_name] = version_name
        path.write_text(json.dumps(self.versions, indent=4, sort_keys=True), encoding="utf-8")
        return path


def remove_global_sdk_path(sdk_name: str) -> str:
    """Drop the globally linked SDK from PATH so it cannot shadow a locked one.

    Returns the new PATH value.
    """
    linked = str(layout.sdk_version_dir(sdk_name) / sdk_name)
    entries = os.environ.get("PATH", "").split(os.pathsep)
    new_path = os.pathsep.join(entry for entry in entries if not entry.startswith(linked))
    os.environ["PATH"] = new_path
    return new_path