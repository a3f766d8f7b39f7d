"""Where SDK versions live on disk, and SDK installation configs."""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from . import config

VERSION_DIR_SUFFIX = "_versions"


def sdk_version_dir(sdk_name: str) -> Path:
    """Directory holding all installed versions of an SDK."""
    d = config.versions_dir() / f"{sdk_name}{VERSION_DIR_SUFFIX}"
    d.mkdir(parents=True, exist_ok=True)
    return d


def is_sdk_installed_by_vmr(sdk_name: str) -> bool:
    """Whether any version is installed; an empty version directory is removed."""
    vd = sdk_version_dir(sdk_name)
    installed = any(entry.is_dir() for entry in vd.iterdir())
    if not installed:
        shutil.rmtree(vd, ignore_errors=True)
    return installed


def install_dir(sdk_name: str, plugin_name: str, version_name: str) -> Path:
    """Directory a single version is installed into."""
    return sdk_version_dir(sdk_name) / f"{plugin_name}-{version_name}"


def symlink_path(sdk_name: str) -> Path:
    """Path of the link that points at the current version."""
    return sdk_version_dir(sdk_name) / sdk_name


@dataclass
class FileItems:
    """Per-platform lists of file names or relative paths."""

    windows: list[str] = field(default_factory=list)
    linux: list[str] = field(default_factory=list)
    macos: list[str] = field(default_factory=list)

    def for_platform(self, system: str) -> list[str]:
        key = system.lower()
        if key in ("darwin", "macos"):
            return list(self.macos)
        if key == "linux":
            return list(self.linux)
        if key in ("windows", "win32"):
            return list(self.windows)
        return []


@dataclass(frozen=True)
class AdditionalEnv:
    """An extra variable pointing at directories relative to the install path.

    An empty ``value`` means the install path itself.
    """

    name: str
    value: tuple[str, ...] = ()
    version: str = ""


@dataclass(frozen=True)
class BinaryRename:
    name_flag: str = ""
    rename_to: str = ""


@dataclass
class InstallerConfig:
    flag_files: FileItems | None = None
    flag_dir_excepted: bool = False
    binary_dirs: FileItems | None = None
    binary_rename: BinaryRename | None = None
    additional_envs: list[AdditionalEnv] = field(default_factory=list)


def _rel_path(item: object, what: str) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, list) and all(isinstance(part, str) for part in item):
        return "/".join(part for part in item if part)
    raise ValueError(f"{what}: expected a string or a list of strings, got {item!r}")


def _path_list(value: object, what: str) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"{what}: expected a list, got {value!r}")
    return [_rel_path(item, what) for item in value]


def _mapping(value: object, what: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what}: expected a table, got {value!r}")
    return {str(k).lower(): v for k, v in value.items()}


def _string(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{what}: expected a string, got {value!r}")
    return value


def _file_items(value: object, what: str) -> FileItems:
    data = _mapping(value, what)
    return FileItems(
        windows=_path_list(data.get("windows", []), f"{what}.windows"),
        linux=_path_list(data.get("linux", []), f"{what}.linux"),
        macos=_path_list(data.get("darwin", []), f"{what}.darwin"),
    )


def _additional_env(value: object) -> AdditionalEnv:
    data = _mapping(value, "additional_envs")
    raw = data.get("value", ())
    if isinstance(raw, str):
        paths: tuple[str, ...] = (raw,) if raw else ()
    else:
        paths = tuple(_path_list(raw if raw != () else [], "additional_envs.value"))
    return AdditionalEnv(
        name=_string(data.get("name", ""), "additional_envs.name"),
        value=paths,
        version=_string(data.get("version", ""), "additional_envs.version"),
    )


def installer_config_from_dict(data: Mapping) -> InstallerConfig:
    """Build an InstallerConfig from parsed TOML data; raises ValueError on bad types."""
    data = _mapping(data, "installer config")
    conf = InstallerConfig()
    if "flag_files" in data:
        conf.flag_files = _file_items(data["flag_files"], "flag_files")
    if "flag_dir_excepted" in data:
        excepted = data["flag_dir_excepted"]
        if not isinstance(excepted, bool):
            raise ValueError(f"flag_dir_excepted: expected a boolean, got {excepted!r}")
        conf.flag_dir_excepted = excepted
    if "binary_dirs" in data:
        conf.binary_dirs = _file_items(data["binary_dirs"], "binary_dirs")
    if "binary_rename" in data:
        rename = _mapping(data["binary_rename"], "binary_rename")
        conf.binary_rename = BinaryRename(
            name_flag=_string(rename.get("name_flag", ""), "binary_rename.name_flag"),
            rename_to=_string(rename.get("rename_to", ""), "binary_rename.rename_to"),
        )
    if "additional_envs" in data:
        envs = data["additional_envs"]
        if not isinstance(envs, list):
            raise ValueError(f"additional_envs: expected a list, got {envs!r}")
        conf.additional_envs = [_additional_env(item) for item in envs]
    return conf