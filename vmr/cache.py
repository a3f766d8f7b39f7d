"""Removal of cached downloads."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from . import config


def _remove_all(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path, ignore_errors=True)
    else:
        path.unlink(missing_ok=True)


@dataclass
class CachedFileFinder:
    """Cached files of a plugin, or of one of its versions."""

    plugin_name: str
    version_name: str = ""

    def delete(self) -> None:
        """Delete the cached version, or every cached version when none is named."""
        cache = config.cache_dir()
        if not self.version_name:
            plugin_cache = cache / self.plugin_name
            if not plugin_cache.is_dir():
                return
            for entry in plugin_cache.iterdir():
                if entry.is_dir():
                    _remove_all(entry)
        else:
            target = str(cache / self.plugin_name / self.version_name).removesuffix("<current>")
            _remove_all(Path(target))