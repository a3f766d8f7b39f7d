"""Settings, well-known directories and the configuration file."""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import tomli_w

DEFAULT_DOMAIN = "vmr.dpdns.org"
DEFAULT_HOST_URL = "https://raw.githubusercontent.com/gvcgo/vsources/main"
SDK_NAME_LIST_FILE_URL = "/sdk-list.version.json"
VERSION_FILE_URL_PATTERN = "/{}.version.json"
SDK_INSTALLATION_URL_PATTERN = "install/{}.toml"
WORK_DIR_NAME = ".vmr"
CONF_FILE_NAME = "conf.toml"

DEFAULT_REVERSE_PROXY = f"https://proxy.{DEFAULT_DOMAIN}/proxy/"

SDK_INSTALLATION_DIR_ENV = "VMR_SDK_INSTALLATION_DIR"
HOST_URL_ENV = "VMR_HOST"
REVERSE_PROXY_ENV = "VMR_REVERSE_PROXY"
LOCAL_PROXY_ENV = "VMR_LOCAL_PROXY"
DOWNLOAD_THREAD_ENV = "VMR_DOWNLOAD_THREADS"
USE_CUSTOMED_MIRROR_ENV = "VMR_USE_CUSTOMED_MIRRORS"
ALLOW_NESTED_SESSIONS_ENV = "VMR_ALLOW_NESTED_SESSIONS"


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def work_dir() -> Path:
    """The directory where vmr keeps its own files (~/.vmr)."""
    return _ensure_dir(Path.home() / WORK_DIR_NAME)


def conf_file_path() -> Path:
    """Path of the configuration file."""
    return work_dir() / CONF_FILE_NAME


def versions_dir() -> Path:
    """Directory where SDK versions are installed."""
    custom = os.environ.get(SDK_INSTALLATION_DIR_ENV, "")
    base = Path(custom) if custom else work_dir()
    return _ensure_dir(base / "versions")


def cache_dir() -> Path:
    """Directory holding downloaded files, next to the versions directory."""
    return _ensure_dir(versions_dir().parent / "cache")


def temp_dir() -> Path:
    """Scratch directory used while unpacking archives."""
    return _ensure_dir(work_dir() / "temp")


def install_conf_dir() -> Path:
    """Directory for SDK installation config files."""
    return _ensure_dir(work_dir() / "install_confs")


def plugin_dir() -> Path:
    """Directory for plugins."""
    return _ensure_dir(work_dir() / "plugins")


def _value_fits(default: object, value: object) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, str)


@dataclass
class VMRConf:
    """Contents of the vmr configuration file."""

    proxy_uri: str = ""
    reverse_proxy: str = ""
    sdk_installation_dir: str = ""
    version_host_url: str = ""
    download_thread_num: int = 0
    use_customed_mirrors: bool = False
    allow_nested_sessions: bool = False
    github_token: str = ""
    cache_retention_time: int = 0  # seconds
    disable_cache: bool = False

    def load(self) -> None:
        """Read values from the config file; a missing or broken file changes nothing."""
        try:
            content = conf_file_path().read_bytes()
        except OSError:
            return
        if not content:
            return
        try:
            data = tomllib.loads(content.decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError):
            return
        for f in fields(self):
            if f.name in data and _value_fits(f.default, data[f.name]):
                setattr(self, f.name, data[f.name])

    def save(self) -> None:
        """Write all values to the config file."""
        conf_file_path().write_text(tomli_w.dumps(asdict(self)), encoding="utf-8")

    def apply_env(self) -> None:
        """Export the configured values as environment variables."""
        if self.sdk_installation_dir:
            os.environ[SDK_INSTALLATION_DIR_ENV] = self.sdk_installation_dir
        if self.version_host_url:
            os.environ[HOST_URL_ENV] = self.version_host_url.removesuffix("/")
        if self.proxy_uri:
            os.environ[LOCAL_PROXY_ENV] = self.proxy_uri
        if self.download_thread_num > 1:
            os.environ[DOWNLOAD_THREAD_ENV] = str(self.download_thread_num)
        os.environ[USE_CUSTOMED_MIRROR_ENV] = "true" if self.use_customed_mirrors else "false"
        if self.reverse_proxy:
            os.environ[REVERSE_PROXY_ENV] = self.reverse_proxy
        if self.allow_nested_sessions:
            os.environ[ALLOW_NESTED_SESSIONS_ENV] = "true"

    def set_proxy_uri(self, uri: str) -> None:
        if not uri:
            return
        self.load()
        self.proxy_uri = uri
        self.save()

    def set_reverse_proxy(self, uri: str) -> None:
        if not uri:
            return
        self.load()
        self.reverse_proxy = uri
        self.save()

    def set_version_host_url(self, url: str) -> None:
        if not url:
            return
        self.load()
        self.version_host_url = url
        self.save()

    def set_download_thread_num(self, num: int) -> None:
        self.load()
        self.download_thread_num = max(num, 1)
        self.save()

    def toggle_use_customed_mirrors(self) -> None:
        self.load()
        self.use_customed_mirrors = not self.use_customed_mirrors
        self.save()

    def toggle_allow_nested_sessions(self) -> bool:
        self.load()
        self.allow_nested_sessions = not self.allow_nested_sessions
        self.save()
        return self.allow_nested_sessions

    def set_github_token(self, token: str) -> None:
        self.load()
        if not token:
            return
        self.github_token = token
        self.save()

    def set_cache_retention_time(self, seconds: int) -> None:
        self.load()
        if seconds > 0:
            self.cache_retention_time = seconds
        self.save()

    def toggle_cache(self) -> None:
        self.load()
        self.disable_cache = not self.disable_cache
        self.save()


def new_conf() -> VMRConf:
    """Load the configuration and export it to the environment."""
    conf = VMRConf()
    conf.load()
    conf.apply_env()
    return conf