"""Remote locations, mirrors and proxy settings for downloads."""

from __future__ import annotations

import os
import tomllib
import urllib.error
import urllib.request
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from . import config

GRADLE_RELEASES_PREFIX = "https://gradle.org/releases"
CUSTOMED_MIRRORS_FILE = "customed_mirrors.toml"


def _host() -> str:
    return os.environ.get(config.HOST_URL_ENV, "") or config.DEFAULT_HOST_URL


def _join_url(base: str, path: str) -> str:
    return base.rstrip("/") + "/" + path.lstrip("/")


def _env_bool(value: str) -> bool:
    return value.strip().lower() not in ("", "0", "false", "off", "no")


def _to_int(value: str) -> int:
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return 0


def sdk_list_url() -> str:
    """URL of the SDK list file."""
    return _join_url(_host(), config.SDK_NAME_LIST_FILE_URL)


def version_file_url(sdk_name: str) -> str:
    """URL of the version file of an SDK."""
    return _join_url(_host(), config.VERSION_FILE_URL_PATTERN.format(sdk_name))


def installation_conf_url(sdk_name: str) -> str:
    """URL of the installation config file of an SDK."""
    return _join_url(_host(), config.SDK_INSTALLATION_URL_PATTERN.format(sdk_name))


def reverse_proxy_uri(url: str, local_proxy: str) -> str:
    """Reverse proxy prefix to use for a URL, or an empty string for none."""
    if local_proxy:
        return ""
    if "gitee.com" in url:
        return ""
    proxy = os.environ.get(config.REVERSE_PROXY_ENV, "")
    if not proxy and "github" in url:
        proxy = config.DEFAULT_REVERSE_PROXY
    if not proxy.endswith("/"):
        proxy += "/"
    return proxy


def download_thread_num() -> int:
    """Number of download threads, at least one."""
    return max(_to_int(os.environ.get(config.DOWNLOAD_THREAD_ENV, "")), 1)


def _fetch_text(url: str, timeout: float = 30.0) -> str:
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            return response.read().decode("utf-8", errors="replace")
    except (urllib.error.URLError, OSError, ValueError):
        return ""


def load_customed_mirrors() -> dict[str, str]:
    """Mirror replacements keyed by the text they replace, fetched on first use."""
    path = config.work_dir() / CUSTOMED_MIRRORS_FILE
    if not path.exists():
        source = (
            config.DEFAULT_REVERSE_PROXY
            + config.DEFAULT_HOST_URL.rstrip("/")
            + "/mirrors/"
            + CUSTOMED_MIRRORS_FILE
        )
        path.write_text(_fetch_text(source), encoding="utf-8")
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}
    return {key: value for key, value in data.items() if isinstance(value, str)}


def use_customed_mirror_url(url: str) -> str:
    """Rewrite a URL through the customised mirrors when they are enabled."""
    if not _env_bool(os.environ.get(config.USE_CUSTOMED_MIRROR_ENV, "")):
        return url
    for original, mirror in load_customed_mirrors().items():
        if original not in url:
            continue
        if url.startswith(GRADLE_RELEASES_PREFIX) and "%s" in mirror:
            version = parse_qs(urlsplit(url).query).get("version", [""])[0]
            if not version:
                return url
            return mirror.replace("%s", version, 1)
        url = url.replace(original, mirror)
    return url


@dataclass(frozen=True)
class FetchTarget:
    """Where and how to fetch a URL."""

    url: str
    proxy: str = ""
    thread_num: int = 1


def prepare_fetch(url: str) -> FetchTarget:
    """Apply mirrors, reverse proxy and local proxy settings to a URL."""
    original = url
    url = use_customed_mirror_url(url)

    local_proxy = os.environ.get(config.LOCAL_PROXY_ENV, "")
    reverse_proxy = reverse_proxy_uri(url, local_proxy).strip("/")
    if reverse_proxy and original == url:
        url = reverse_proxy + "/" + url

    # Several threads only pay off for large files.
    thread_num = 1
    if not url.endswith(".json") and not url.endswith(".toml"):
        thread_num = download_thread_num()

    proxy = ""
    if "gitee.com" not in url and original == url:
        proxy = local_proxy
    return FetchTarget(url=url.strip("/"), proxy=proxy, thread_num=thread_num)


def github_token() -> str:
    return config.new_conf().github_token


def cache_retention_time() -> int:
    """Seconds cached files are kept; one day when unset."""
    seconds = config.new_conf().cache_retention_time
    return seconds if seconds != 0 else 86400


def cache_disabled() -> bool:
    return config.new_conf().disable_cache