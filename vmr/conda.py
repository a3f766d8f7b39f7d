"""Parsing of conda search results and conda platform names."""

from __future__ import annotations

import platform

CONDA_SEARCH_COMMAND = (
    "conda",
    "search",
    "--override-channels",
    "--channel",
    "conda-forge",
    "--skip-flexible-search",
)

_MACHINE_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def conda_platform(system: str | None = None, machine: str | None = None) -> str:
    """Conda subdir name for an OS and CPU; the running machine by default.

    Returns an empty string for an unsupported CPU and raises ValueError for
    an unsupported operating system.
    """
    system = (system or platform.system()).lower()
    raw_machine = (machine or platform.machine()).lower()
    arch = _MACHINE_ALIASES.get(raw_machine, raw_machine)
    if system in ("darwin", "macos"):
        return "osx-arm64" if arch == "arm64" else "osx-64"
    if system in ("windows", "win32"):
        return {"amd64": "win-64", "arm64": "win-arm64"}.get(arch, "")
    if system == "linux":
        return {"arm64": "linux-aarch64", "amd64": "linux-64"}.get(arch, "")
    raise ValueError(f"unsupported operating system for conda: {system!r}")


def find_header(content: str) -> str:
    """The header line of a search result, or an empty string."""
    return next((line for line in content.split("\n") if line.startswith("# Name")), "")


def find_version(fields: list[str]) -> str:
    """The second non-empty field of a result row, or an empty string."""
    values = [item.strip() for item in fields if item.strip()]
    return values[1] if len(values) > 1 else ""


def parse_search_result(content: str) -> list[str]:
    """Distinct versions listed below the header, in the order they appear."""
    header = find_header(content)
    if not header:
        return []
    parts = content.split(header)
    if len(parts) != 2:
        return []
    versions: dict[str, None] = {}
    for line in parts[1].split("\n"):
        version = find_version(line.split(" "))
        if version:
            versions.setdefault(version, None)
    return list(versions)