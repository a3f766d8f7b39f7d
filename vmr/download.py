"""Downloading SDK files into the cache directory.

Files are stored as ``<cache>/<sdk name>/<version name>/<file name>``.
"""

from __future__ import annotations

import hashlib
import shutil
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from . import config, network

DOWNLOAD_TIMEOUT = 30 * 60  # seconds
MIN_VALID_SIZE = 100  # bytes; anything this small is treated as a failed download
_CHUNK = 1 << 16


@dataclass(frozen=True)
class SDKFile:
    """A downloadable file of one SDK version."""

    url: str
    sum: str = ""
    sum_type: str = ""
    size: int = 0


Fetch = Callable[[network.FetchTarget, Path, float], int]


def _fetch_to_file(target: network.FetchTarget, dest: Path, timeout: float) -> int:
    """Fetch a URL into ``dest``; returns the number of bytes written, 0 on failure."""
    handlers = []
    if target.proxy:
        handlers.append(urllib.request.ProxyHandler({"http": target.proxy, "https": target.proxy}))
    opener = urllib.request.build_opener(*handlers)
    try:
        with opener.open(target.url, timeout=timeout) as response, dest.open("wb") as out:
            shutil.copyfileobj(response, out, _CHUNK)
        return dest.stat().st_size
    except (urllib.error.URLError, OSError, ValueError):
        return 0


def _file_name(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1]


def _checksum_ok(path: Path, item: SDKFile) -> bool:
    if not item.sum or not item.sum_type:
        return True
    algorithm = item.sum_type.lower().replace("-", "")
    if algorithm not in hashlib.algorithms_available:
        return True
    digest = hashlib.new(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest().lower() == item.sum.strip().lower()


class Downloader:
    """Downloads SDK files into the cache, reusing files already there."""

    def __init__(self, fetch: Fetch | None = None) -> None:
        self._fetch = fetch or _fetch_to_file

    def local_file_path(self, sdk_name: str, version_name: str, item: SDKFile) -> Path:
        """Cache path for a version's file; its directory is created."""
        filename = _file_name(item.url)
        if sdk_name == "gradle" and "?" in filename:
            filename = f"gradle-{version_name}-all.zip"
        directory = config.cache_dir() / sdk_name / version_name
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def download(
        self, sdk_name: str, version_name: str, item: SDKFile, force: bool = False
    ) -> Path | None:
        """Download a version's file and return its path, or None on failure.

        A file already in the cache is reused unless ``force`` is set.
        """
        if not item.url:
            return None
        path = self.local_file_path(sdk_name, version_name, item)
        if path.exists():
            if not force:
                return path
            path.unlink()

        target = network.prepare_fetch(item.url)
        size = self._fetch(target, path, DOWNLOAD_TIMEOUT)
        if size <= MIN_VALID_SIZE or not path.exists() or not _checksum_ok(path, item):
            path.unlink(missing_ok=True)
            return None
        return path