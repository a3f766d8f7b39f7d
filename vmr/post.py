"""Post-installation handlers for SDKs that need fixing up after unpacking."""

from __future__ import annotations

import os
import platform
import shutil
from collections.abc import Callable
from pathlib import Path

from . import config

PostInstallHandler = Callable[[str, str], None]

POST_INSTALL_HANDLERS: dict[str, PostInstallHandler] = {}

PHP_SDK_NAME = "php"
BUN_SDK_NAME = "bun"
CLOJURE_SDK_NAME = "clojure"
UPX_SDK_NAME = "upx"
ZIG_SDK_NAME = "zig"

CLOJURE_ENV_FOR_WINDOWS = """
$CLJ_CONFIG="{config}"
Import-Module {module}
Invoke-Clojure $args
"""
CLOJURE_SCRIPT_FLAG_FOR_UNIX = "install_dir=PREFIX"
CLOJURE_ENV_FOR_UNIX = "install_dir={install}\nCLJ_CONFIG={config}"


def register_post_install_handler(sdk_name: str, handler: PostInstallHandler) -> None:
    """Register the handler run after a version of ``sdk_name`` is installed."""
    POST_INSTALL_HANDLERS[sdk_name] = handler


def _on_windows() -> bool:
    return platform.system() == "Windows"


def _install_dir(sdk_name: str, version_name: str) -> Path:
    return config.versions_dir() / f"{sdk_name}_versions" / f"{sdk_name}-{version_name}"


def _make_executable(path: Path) -> None:
    try:
        os.chmod(path, path.stat().st_mode | 0o111)
    except OSError:
        pass


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def post_install_for_php(version_name: str, url: str) -> None:
    """Point the opcache zend_extension entry of php.ini at its absolute path."""
    if "github.com" not in url:
        return
    install = _install_dir(PHP_SDK_NAME, version_name)
    if not install.exists():
        return

    if _on_windows():
        ext_path = install / "ext" / "php_opcache.dll"
        if not ext_path.exists():
            return
        ini = install / "php.ini"
        old = "zend_extension=php_opcache.dll"
    else:
        ext_path = install / "lib" / "php" / "extensions"
        ini = install / "bin" / "php.ini"
        if ext_path.is_dir():
            zts = next(
                (
                    d
                    for d in sorted(ext_path.iterdir())
                    if d.is_dir() and d.name.startswith("no-debug-zts-")
                ),
                None,
            )
            if zts is not None:
                ext_path = zts / "opcache.so"
        if not ext_path.exists():
            return
        old = "zend_extension=opcache.so"

    try:
        content = ini.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return
    ini.write_text(content.replace(old, f"zend_extension={ext_path}"), encoding="utf-8")


def post_install_for_bun(version_name: str, url: str) -> None:
    """Provide ``bunx`` next to the ``bun`` binary."""
    install = _install_dir(BUN_SDK_NAME, version_name)
    bin_path = install / ("bun.exe" if _on_windows() else "bun")
    if not bin_path.exists():
        return
    if _on_windows():
        shutil.copy2(bin_path, install / "bunx.exe")
        return
    try:
        os.symlink(bin_path, install / "bunx")
    except OSError:
        pass


def handle_clojure_on_windows(install_dir: str | Path) -> None:
    """Write PowerShell launchers for clojure and clj into ``bin``."""
    install = Path(install_dir)
    bin_dir = install / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    module = install / "ClojureTools.psm1"
    if not module.exists():
        return
    conf_dir = install / "config"
    conf_dir.mkdir(parents=True, exist_ok=True)
    script = CLOJURE_ENV_FOR_WINDOWS.format(config=conf_dir, module=module)
    for name in ("clojure.ps1", "clj.ps1"):
        (bin_dir / name).write_text(script, encoding="utf-8")


def handle_clojure_on_unix(install_dir: str | Path) -> None:
    """Move jars into ``libexec`` and write configured launchers into ``bin``."""
    install = Path(install_dir)
    libexec = install / "libexec"
    libexec.mkdir(parents=True, exist_ok=True)
    if install.is_dir():
        for entry in install.iterdir():
            if entry.is_file() and entry.name.endswith(".jar"):
                shutil.copy2(entry, libexec / entry.name)

    bin_dir = install / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    data = _read_text(install / "clojure")
    if CLOJURE_SCRIPT_FLAG_FOR_UNIX in data:
        conf_dir = install / "config"
        conf_dir.mkdir(parents=True, exist_ok=True)
        env = CLOJURE_ENV_FOR_UNIX.format(install=install, config=conf_dir)
        script = bin_dir / "clojure"
        script.write_text(data.replace(CLOJURE_SCRIPT_FLAG_FOR_UNIX, env), encoding="utf-8")
        _make_executable(script)

    clj = bin_dir / "clj"
    clj.write_text(_read_text(install / "clj"), encoding="utf-8")
    _make_executable(clj)


def post_install_for_clojure(version_name: str, url: str) -> None:
    install = _install_dir(CLOJURE_SDK_NAME, version_name)
    if _on_windows():
        handle_clojure_on_windows(install)
    else:
        handle_clojure_on_unix(install)


def post_install_for_upx(version_name: str, url: str) -> None:
    if not _on_windows():
        _make_executable(_install_dir(UPX_SDK_NAME, version_name) / "upx")


def post_install_for_zig(version_name: str, url: str) -> None:
    if not _on_windows():
        _make_executable(_install_dir(ZIG_SDK_NAME, version_name) / "zig")


def run_post_install(plugin_name: str, version_name: str, url: str) -> bool:
    """Run the plugin's handler if one is registered; returns whether one ran."""
    handler = POST_INSTALL_HANDLERS.get(plugin_name)
    if handler is None:
        return False
    handler(version_name, url)
    return True


register_post_install_handler(PHP_SDK_NAME, post_install_for_php)
register_post_install_handler(BUN_SDK_NAME, post_install_for_bun)
register_post_install_handler(CLOJURE_SDK_NAME, post_install_for_clojure)
register_post_install_handler(UPX_SDK_NAME, post_install_for_upx)
register_post_install_handler(ZIG_SDK_NAME, post_install_for_zig)