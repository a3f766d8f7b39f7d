"""Environment variables an installed SDK version needs."""

from __future__ import annotations

import os
import platform
from pathlib import Path

from .layout import InstallerConfig

ADD_TO_PATH_TEMPORARILY_ENV = "VMR_ADD_TO_PATH_TEMPORARILY"


def _env_bool(value: str) -> bool:
    return value.strip().lower() not in ("", "0", "false", "off", "no")


def join_path(*args: str) -> str:
    """Join non-empty entries with the platform's PATH separator."""
    return os.pathsep.join(str(arg) for arg in args if arg)


def _existing(base: Path, rel_paths: list[str] | tuple[str, ...]) -> list[str]:
    candidates = (base / rel if rel else base for rel in (rel_paths or [""]))
    return [str(path) for path in candidates if path.exists()]


def collect_envs(
    base_path: str | Path, conf: InstallerConfig | None, no_envs: bool = False
) -> dict[str, list[str]]:
    """Map variable names to existing directories under ``base_path``.

    PATH gets the configured binary directories for this platform, or the
    base path itself when none are configured.
    """
    if no_envs:
        return {}
    base = Path(base_path)
    if not base.exists():
        return {}
    conf = conf or InstallerConfig()
    result: dict[str, list[str]] = {}

    bin_dirs = conf.binary_dirs.for_platform(platform.system()) if conf.binary_dirs else []
    path_dirs = _existing(base, bin_dirs)
    if path_dirs:
        result["PATH"] = path_dirs

    for env in conf.additional_envs:
        result[env.name] = _existing(base, env.value)
    return result


def add_envs_temporarily(
    install_dir: str | Path, conf: InstallerConfig | None, no_envs: bool = False
) -> None:
    """Apply the SDK's variables to this process when temporary envs are enabled."""
    if no_envs or not _env_bool(os.environ.get(ADD_TO_PATH_TEMPORARILY_ENV, "")):
        return
    for key, dirs in collect_envs(install_dir, conf).items():
        value = join_path(*dirs)
        if not value:
            continue
        if key == "PATH":
            os.environ["PATH"] = join_path(value, os.environ.get("PATH", ""))
        else:
            os.environ[key] = value