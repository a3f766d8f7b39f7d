import pytest

from vmr.conda import conda_platform, find_header, find_version, parse_search_result

SAMPLE = """Loading channels: done
# Name                       Version           Build  Channel
php                            7.4.3      h1234567_0  conda-forge
php                            7.4.3      h7654321_1  conda-forge
php                            8.1.2      habcdef0_0  conda-forge
"""


def test_find_header():
    assert find_header(SAMPLE).startswith("# Name")
    assert "Version" in find_header(SAMPLE)


def test_find_header_missing():
    assert find_header("nothing here\n") == ""


def test_find_version_skips_blank_fields():
    assert find_version(["php", "", "  ", "8.1.2", "build"]) == "8.1.2"
    assert find_version(["php"]) == ""
    assert find_version([]) == ""


def test_parse_search_result_dedupes_in_order():
    assert parse_search_result(SAMPLE) == ["7.4.3", "8.1.2"]


def test_parse_search_result_without_header():
    assert parse_search_result("Loading channels: done\nNo match found\n") == []


@pytest.mark.parametrize(
    "system, machine, expected",
    [
        ("Darwin", "arm64", "osx-arm64"),
        ("Darwin", "x86_64", "osx-64"),
        ("Windows", "AMD64", "win-64"),
        ("Windows", "arm64", "win-arm64"),
        ("Linux", "aarch64", "linux-aarch64"),
        ("Linux", "x86_64", "linux-64"),
    ],
)
def test_conda_platform(system, machine, expected):
    assert conda_platform(system, machine) == expected


def test_conda_platform_unknown_cpu():
    assert conda_platform("Linux", "riscv64") == ""


def test_conda_platform_unsupported_os():
    with pytest.raises(ValueError):
        conda_platform("FreeBSD", "amd64")