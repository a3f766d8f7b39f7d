import os
import stat
from unittest import mock

import pytest

from vmr import config, post


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    saved = dict(os.environ)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    monkeypatch.delenv(config.SDK_INSTALLATION_DIR_ENV, raising=False)
    yield tmp_path
    os.environ.clear()
    os.environ.update(saved)


def install_dir(sdk, version):
    d = config.versions_dir() / f"{sdk}_versions" / f"{sdk}-{version}"
    d.mkdir(parents=True, exist_ok=True)
    return d


@mock.patch("platform.system", return_value="Linux")
def test_php_ini_points_at_opcache(_system):
    d = install_dir("php", "8.3")
    ext = d / "lib" / "php" / "extensions" / "no-debug-zts-20230831"
    ext.mkdir(parents=True)
    (ext / "opcache.so").write_text("so")
    (d / "bin").mkdir()
    ini = d / "bin" / "php.ini"
    ini.write_text("a\nzend_extension=opcache.so\nb\n")
    post.post_install_for_php("8.3", "https://github.com/x/php.tar.gz")
    assert f"zend_extension={ext / 'opcache.so'}" in ini.read_text()
    assert "zend_extension=opcache.so\n" not in ini.read_text()


@mock.patch("platform.system", return_value="Linux")
def test_php_skipped_for_other_hosts(_system):
    d = install_dir("php", "8.2")
    (d / "bin").mkdir()
    ini = d / "bin" / "php.ini"
    ini.write_text("zend_extension=opcache.so")
    post.post_install_for_php("8.2", "https://example.com/php.tar.gz")
    assert ini.read_text() == "zend_extension=opcache.so"


@mock.patch("platform.system", return_value="Windows")
def test_php_windows_dll(_system):
    d = install_dir("php", "8.1")
    (d / "ext").mkdir()
    dll = d / "ext" / "php_opcache.dll"
    dll.write_text("dll")
    ini = d / "php.ini"
    ini.write_text("zend_extension=php_opcache.dll")
    post.post_install_for_php("8.1", "https://github.com/x/php.zip")
    assert ini.read_text() == f"zend_extension={dll}"


@mock.patch("platform.system", return_value="Linux")
def test_bun_creates_bunx_link(_system):
    d = install_dir("bun", "1.1")
    (d / "bun").write_text("binary")
    post.post_install_for_bun("1.1", "")
    assert (d / "bunx").is_symlink()
    assert (d / "bunx").resolve() == (d / "bun").resolve()


@mock.patch("platform.system", return_value="Windows")
def test_bun_copies_on_windows(_system):
    d = install_dir("bun", "1.2")
    (d / "bun.exe").write_bytes(b"exe")
    post.post_install_for_bun("1.2", "")
    assert (d / "bunx.exe").read_bytes() == b"exe"


def test_bun_without_binary_does_nothing():
    d = install_dir("bun", "1.3")
    post.post_install_for_bun("1.3", "")
    assert list(d.iterdir()) == []


def test_clojure_unix(tmp_path):
    d = tmp_path / "clj"
    d.mkdir()
    (d / "clojure").write_text("#!/bin/sh\ninstall_dir=PREFIX\nrun\n")
    (d / "clj").write_text("clj script")
    (d / "tools.jar").write_bytes(b"jar")
    post.handle_clojure_on_unix(d)
    script = (d / "bin" / "clojure").read_text()
    assert f"install_dir={d}\nCLJ_CONFIG={d / 'config'}" in script
    assert "install_dir=PREFIX" not in script
    assert (d / "libexec" / "tools.jar").read_bytes() == b"jar"
    assert (d / "bin" / "clj").read_text() == "clj script"
    assert (d / "bin" / "clj").stat().st_mode & stat.S_IXUSR


def test_clojure_windows(tmp_path):
    d = tmp_path / "cljw"
    d.mkdir()
    module = d / "ClojureTools.psm1"
    module.write_text("module")
    post.handle_clojure_on_windows(d)
    for name in ("clojure.ps1", "clj.ps1"):
        text = (d / "bin" / name).read_text()
        assert f'$CLJ_CONFIG="{d / "config"}"' in text
        assert f"Import-Module {module}" in text


def test_clojure_windows_without_module(tmp_path):
    d = tmp_path / "empty"
    d.mkdir()
    post.handle_clojure_on_windows(d)
    assert list((d / "bin").iterdir()) == []


@mock.patch("platform.system", return_value="Linux")
@pytest.mark.parametrize("sdk", ["upx", "zig"])
def test_binary_made_executable(_system, sdk):
    d = install_dir(sdk, "1.0")
    binary = d / sdk
    binary.write_text("bin")
    os.chmod(binary, 0o644)
    assert post.run_post_install(sdk, "1.0", "")
    assert binary.stat().st_mode & stat.S_IXUSR


def test_run_post_install_registry():
    calls = []
    post.register_post_install_handler("sample-sdk", lambda v, u: calls.append((v, u)))
    assert post.run_post_install("sample-sdk", "2.0", "https://example.com/a")
    assert calls == [("2.0", "https://example.com/a")]
    assert post.run_post_install("no-such-sdk", "1", "") is False