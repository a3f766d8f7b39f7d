import os

import pytest

from vmr.envs import (
    ADD_TO_PATH_TEMPORARILY_ENV,
    add_envs_temporarily,
    collect_envs,
    join_path,
)
from vmr.layout import AdditionalEnv, FileItems, InstallerConfig


def _all_platforms(*paths):
    return FileItems(windows=list(paths), linux=list(paths), macos=list(paths))


@pytest.fixture
def sdk(tmp_path):
    base = tmp_path / "go-1.21"
    (base / "bin").mkdir(parents=True)
    (base / "lib").mkdir()
    return base


def test_join_path_skips_empty():
    assert join_path("a", "", "b") == "a" + os.pathsep + "b"
    assert join_path("", "") == ""


def test_collect_envs_binary_dirs(sdk):
    conf = InstallerConfig(binary_dirs=_all_platforms("bin", "missing"))
    assert collect_envs(sdk, conf) == {"PATH": [str(sdk / "bin")]}


def test_collect_envs_defaults_to_base(sdk):
    assert collect_envs(sdk, InstallerConfig()) == {"PATH": [str(sdk)]}


def test_collect_envs_additional(sdk):
    conf = InstallerConfig(
        binary_dirs=_all_platforms("bin"),
        additional_envs=[
            AdditionalEnv(name="GOROOT"),
            AdditionalEnv(name="LIBS", value=("lib", "nope")),
        ],
    )
    result = collect_envs(sdk, conf)
    assert result["GOROOT"] == [str(sdk)]
    assert result["LIBS"] == [str(sdk / "lib")]
    assert result["PATH"] == [str(sdk / "bin")]


def test_collect_envs_disabled(sdk):
    assert collect_envs(sdk, InstallerConfig(), no_envs=True) == {}


def test_collect_envs_missing_base(tmp_path):
    assert collect_envs(tmp_path / "absent", InstallerConfig()) == {}


def test_add_envs_temporarily_prepends_path(sdk, monkeypatch):
    monkeypatch.setenv(ADD_TO_PATH_TEMPORARILY_ENV, "1")
    monkeypatch.setenv("PATH", "/usr/bin")
    conf = InstallerConfig(
        binary_dirs=_all_platforms("bin"),
        additional_envs=[AdditionalEnv(name="GOROOT")],
    )
    add_envs_temporarily(sdk, conf)
    assert os.environ["PATH"].split(os.pathsep) == [str(sdk / "bin"), "/usr/bin"]
    assert os.environ["GOROOT"] == str(sdk)


def test_add_envs_temporarily_needs_flag(sdk, monkeypatch):
    monkeypatch.delenv(ADD_TO_PATH_TEMPORARILY_ENV, raising=False)
    monkeypatch.setenv("PATH", "/usr/bin")
    conf = InstallerConfig(binary_dirs=_all_platforms("bin"))
    assert collect_envs(sdk, conf) == {"PATH": [str(sdk / "bin")]}
    add_envs_temporarily(sdk, conf)
    assert os.environ["PATH"] == "/usr/bin"


def test_add_envs_temporarily_no_envs(sdk, monkeypatch):
    monkeypatch.setenv(ADD_TO_PATH_TEMPORARILY_ENV, "true")
    monkeypatch.setenv("PATH", "/usr/bin")
    conf = InstallerConfig()
    assert collect_envs(sdk, conf, no_envs=True) == {}
    add_envs_temporarily(sdk, conf, no_envs=True)
    assert os.environ["PATH"] == "/usr/bin"