"""Command line interface."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from . import config

GIT_TAG = ""
GIT_HASH = ""


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


def _version(args: argparse.Namespace) -> None:
    print(f"{GIT_TAG}({GIT_HASH[:7]})")


def _set_proxy(args: argparse.Namespace) -> None:
    config.new_conf().set_proxy_uri(args.value)


def _set_reverse_proxy(args: argparse.Namespace) -> None:
    config.new_conf().set_reverse_proxy(args.value)


def _set_download_threads(args: argparse.Namespace) -> None:
    config.new_conf().set_download_thread_num(_to_int(args.value))


def _toggle_customed_mirrors(args: argparse.Namespace) -> None:
    conf = config.new_conf()
    conf.toggle_use_customed_mirrors()
    state = "enabled" if conf.use_customed_mirrors else "disabled"
    print(f"Customed mirrors {state}.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmr",
        description="version manager",
        usage="vmr <Command> <SubCommand> --flags args...",
    )
    commands = parser.add_subparsers(title="Command list", dest="command")

    version = commands.add_parser(
        "version", aliases=["v"], help="Shows version info of version-manager."
    )
    version.set_defaults(func=_version, needs_value=False)

    specs = [
        (
            "set-proxy",
            ["sp"],
            "Sets proxy for version manager.",
            "Example: vmr sp http://127.0.0.1:2023",
            _set_proxy,
        ),
        (
            "set-reverse-proxy",
            ["sr", "srp"],
            "Sets reverse proxy for version manager.",
            f"Example: vmr sr {config.DEFAULT_REVERSE_PROXY}",
            _set_reverse_proxy,
        ),
        (
            "set-download-threads",
            ["sdt", "st"],
            "Set default threads number for downloadding.",
            "Example: vmr st 2",
            _set_download_threads,
        ),
    ]
    for name, aliases, short, example, func in specs:
        sub = commands.add_parser(name, aliases=aliases, help=short, description=example)
        sub.add_argument("value", nargs="?", default="")
        sub.set_defaults(func=func, needs_value=True, subparser=sub)

    mirrors = commands.add_parser(
        "toggle-customed-mirrors", aliases=["tcm", "tm"], help="Toggle customed mirrors."
    )
    mirrors.set_defaults(func=_toggle_customed_mirrors, needs_value=False)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the vmr command line; returns the exit status."""
    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else list(argv))
    if getattr(args, "func", None) is None:
        parser.print_help()
        return 0
    if args.needs_value and not args.value:
        args.subparser.print_help()
        return 0
    args.func(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())